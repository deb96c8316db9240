import argparse
import hashlib
import logging
import sys
from datetime import datetime, timedelta, timezone

from cryptography import x509
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.asymmetric import ec
from cryptography.x509.oid import NameOID

from fwcert.extensions import (
    ExtensionError,
    init,
    new_counter_extension,
    new_hash_extension,
    new_key_extension,
)
from fwcert.extensions.tbbr import (
    TRUSTED_BOOT_FW_HASH_OID,
    TRUSTED_FW_NVCOUNTER_OID,
    TRUSTED_WORLD_PK_OID,
)


def main():
    # Set up argument parsing
    parser = argparse.ArgumentParser()
    parser.add_argument('-i', '--image', required=True,
                       help='Firmware image to hash')
    parser.add_argument('-n', '--nvcounter', type=int, default=0,
                       help='Trusted world non-volatile counter')
    parser.add_argument('-v', '--verbose', action='store_true',
                       help='Log registration details')
    args = parser.parse_args()

    # Configure logging
    logging.basicConfig(
        format='%(message)s',
        level=logging.DEBUG if args.verbose else logging.INFO
    )

    try:
        registry = init()
    except ExtensionError as e:
        logging.error(f"Error registering extensions: {e}")
        sys.exit(1)

    with open(args.image, 'rb') as f:
        digest = hashlib.sha256(f.read()).digest()
    logging.info(f"Image hash: {digest.hex()}")

    key = ec.generate_private_key(ec.SECP256R1())
    try:
        extensions = [
            new_counter_extension(registry, registry.nid_for(TRUSTED_FW_NVCOUNTER_OID), True, args.nvcounter),
            new_hash_extension(registry, registry.nid_for(TRUSTED_BOOT_FW_HASH_OID), True, digest),
            new_key_extension(registry, registry.nid_for(TRUSTED_WORLD_PK_OID), False, key),
        ]
    except ExtensionError as e:
        logging.error(f"Error building extensions: {e}")
        sys.exit(1)

    name = x509.Name([x509.NameAttribute(NameOID.COMMON_NAME, "Trusted Boot FW Certificate")])
    now = datetime.now(timezone.utc)
    builder = (
        x509.CertificateBuilder()
        .subject_name(name)
        .issuer_name(name)
        .public_key(key.public_key())
        .serial_number(x509.random_serial_number())
        .not_valid_before(now)
        .not_valid_after(now + timedelta(days=365))
    )
    for ext in extensions:
        builder = builder.add_extension(ext.value, critical=ext.critical)
    cert = builder.sign(key, hashes.SHA256())

    logging.info("Certificate extensions:")
    for ext in cert.extensions:
        logging.info(registry.print_extension(ext))


if __name__ == "__main__":
    main()
