"""
Certificate extension builder.

Wraps an already DER-encoded value into an X.509v3 extension:

    Extension  ::=  SEQUENCE  {
         extnID      OBJECT IDENTIFIER,
         critical    BOOLEAN DEFAULT FALSE,
         extnValue   OCTET STRING  }

extnValue always holds an OCTET STRING around the DER value, so hash and
counter payloads end up wrapped twice: once as their own ASN.1 type by
the codec, then by the extension envelope.

Extensions are returned as cryptography x509.Extension objects holding an
UnrecognizedExtension, ready for x509.CertificateBuilder.add_extension().
"""

from typing import Tuple

from cryptography import x509
from pyasn1.codec.der import encoder as der_encoder
from pyasn1.type import namedtype, univ

from .codec import BytesLike, asn1_errors, der_decode, encode_counter, encode_hash, encode_public_key
from .registry import ExtensionRegistry
from .types import BuilderError


class Extension(univ.Sequence):
    componentType = namedtype.NamedTypes(
        namedtype.NamedType('extnID', univ.ObjectIdentifier()),
        namedtype.DefaultedNamedType('critical', univ.Boolean(False)),
        namedtype.NamedType('extnValue', univ.OctetString()),
    )


def _require_oid(registry: ExtensionRegistry, nid: int) -> x509.ObjectIdentifier:
    if not registry.initialized:
        raise BuilderError("Extension registry is not initialized")
    if registry.lookup(nid) is None:
        raise BuilderError(f"Extension nid {nid} is not registered")
    return registry.oid_for(nid)


def build_extension(
    registry: ExtensionRegistry,
    nid: int,
    critical: bool,
    der_value: BytesLike,
) -> x509.Extension:
    """
    Create an extension from a DER-encoded value.

    Args:
        registry: Registry the nid was assigned by
        nid: Numeric id of the extension
        critical: Criticality flag
        der_value: Extension data, placed in the extnValue octet string.
            The bytes are copied.

    Returns:
        A self-contained x509.Extension

    Raises:
        BuilderError: If the registry is not initialized, nid is not
            registered, or der_value is not bytes
    """
    oid = _require_oid(registry, nid)
    if not isinstance(der_value, (bytes, bytearray, memoryview)):
        raise BuilderError(
            f"Extension value must be bytes, got {type(der_value).__name__}"
        )
    value = bytes(der_value)
    return x509.Extension(oid, bool(critical), x509.UnrecognizedExtension(oid, value))


def new_hash_extension(registry: ExtensionRegistry, nid: int, critical: bool,
                       digest: BytesLike) -> x509.Extension:
    """Extension holding a digest encapsulated in an OCTET STRING."""
    _require_oid(registry, nid)
    return build_extension(registry, nid, critical, encode_hash(digest))


def new_counter_extension(registry: ExtensionRegistry, nid: int, critical: bool,
                          value: int) -> x509.Extension:
    """Extension holding a non-volatile counter encapsulated in an INTEGER."""
    _require_oid(registry, nid)
    return build_extension(registry, nid, critical, encode_counter(value))


def new_key_extension(registry: ExtensionRegistry, nid: int, critical: bool,
                      key) -> x509.Extension:
    """Extension holding a public key as a DER SubjectPublicKeyInfo."""
    _require_oid(registry, nid)
    return build_extension(registry, nid, critical, encode_public_key(key))


def extension_to_der(ext: x509.Extension) -> bytes:
    """
    Serialize an extension to its DER Extension SEQUENCE.

    A false critical flag is omitted, as DER requires for DEFAULT values.
    """
    if isinstance(ext.value, x509.UnrecognizedExtension):
        value = ext.value.value
    else:
        value = ext.value.public_bytes()

    with asn1_errors(f"extension {ext.oid.dotted_string}", BuilderError):
        seq = Extension()
        seq['extnID'] = univ.ObjectIdentifier(ext.oid.dotted_string)
        seq['critical'] = bool(ext.critical)
        seq['extnValue'] = univ.OctetString(value)
        return der_encoder.encode(seq)


def extension_from_der(der: bytes) -> Tuple[x509.ObjectIdentifier, bool, bytes]:
    """
    Decode a DER Extension SEQUENCE.

    Returns:
        (oid, critical, value) where value is the content of extnValue

    Raises:
        BuilderError: If der is not a single well-formed Extension
    """
    seq = der_decode(der, "Extension", asn1_spec=Extension(), error_cls=BuilderError)
    with asn1_errors("Extension", BuilderError):
        oid = x509.ObjectIdentifier(str(seq['extnID']))
        critical = bool(seq['critical'])
        value = bytes(seq['extnValue'])
    return oid, critical, value
