"""
Trusted Board Boot (TBBR) certificate extensions.

OID namespace: 1.3.6.1.4.1.4128.2100 (ARM Ltd.)
├── 1-2     - Non-volatile counters (INTEGER)
├── *01     - Content certificate public keys (SubjectPublicKeyInfo)
└── hashes  - Firmware image hashes (OCTET STRING, SHA-256)

Public keys carry no print method and are dumped raw when printed.
"""

from .types import ExtensionDescriptor, ValueType

TBBR_OID_BASE = "1.3.6.1.4.1.4128.2100"

# Non-volatile counters
TRUSTED_FW_NVCOUNTER_OID = f"{TBBR_OID_BASE}.1"
NON_TRUSTED_FW_NVCOUNTER_OID = f"{TBBR_OID_BASE}.2"

# Image hashes
TRUSTED_BOOT_FW_HASH_OID = f"{TBBR_OID_BASE}.201"
SCP_FW_HASH_OID = f"{TBBR_OID_BASE}.601"
SOC_AP_FW_HASH_OID = f"{TBBR_OID_BASE}.801"
TRUSTED_OS_FW_HASH_OID = f"{TBBR_OID_BASE}.1001"
NON_TRUSTED_WORLD_BOOTLOADER_HASH_OID = f"{TBBR_OID_BASE}.1201"

# Public keys
TRUSTED_WORLD_PK_OID = f"{TBBR_OID_BASE}.301"
NON_TRUSTED_WORLD_PK_OID = f"{TBBR_OID_BASE}.302"
SCP_FW_CONTENT_CERT_PK_OID = f"{TBBR_OID_BASE}.501"
SOC_FW_CONTENT_CERT_PK_OID = f"{TBBR_OID_BASE}.701"
TRUSTED_OS_FW_CONTENT_CERT_PK_OID = f"{TBBR_OID_BASE}.901"
NON_TRUSTED_FW_CONTENT_CERT_PK_OID = f"{TBBR_OID_BASE}.1101"


TBBR_EXTENSIONS = (
    ExtensionDescriptor(
        oid=TRUSTED_FW_NVCOUNTER_OID,
        short_name="TrustedWorldNVCounter",
        long_name="Trusted World Non-Volatile counter",
        value_type=ValueType.INTEGER,
    ),
    ExtensionDescriptor(
        oid=NON_TRUSTED_FW_NVCOUNTER_OID,
        short_name="NormalWorldNVCounter",
        long_name="Normal World Non-Volatile counter",
        value_type=ValueType.INTEGER,
    ),
    ExtensionDescriptor(
        oid=TRUSTED_BOOT_FW_HASH_OID,
        short_name="TrustedBootFirmwareHash",
        long_name="Trusted Boot Firmware (BL2) hash (SHA256)",
        value_type=ValueType.OCTET_STRING,
    ),
    ExtensionDescriptor(
        oid=TRUSTED_WORLD_PK_OID,
        short_name="TrustedWorldPublicKey",
        long_name="Trusted World Public Key",
        value_type=ValueType.PUBLIC_KEY,
    ),
    ExtensionDescriptor(
        oid=NON_TRUSTED_WORLD_PK_OID,
        short_name="NonTrustedWorldPublicKey",
        long_name="Non-Trusted World Public Key",
        value_type=ValueType.PUBLIC_KEY,
    ),
    ExtensionDescriptor(
        oid=SCP_FW_CONTENT_CERT_PK_OID,
        short_name="SCPFirmwareContentCertPK",
        long_name="SCP Firmware content certificate public key",
        value_type=ValueType.PUBLIC_KEY,
    ),
    ExtensionDescriptor(
        oid=SCP_FW_HASH_OID,
        short_name="SCPFirmwareHash",
        long_name="SCP Firmware (BL30) hash (SHA256)",
        value_type=ValueType.OCTET_STRING,
    ),
    ExtensionDescriptor(
        oid=SOC_FW_CONTENT_CERT_PK_OID,
        short_name="SoCFirmwareContentCertPK",
        long_name="SoC Firmware content certificate public key",
        value_type=ValueType.PUBLIC_KEY,
    ),
    ExtensionDescriptor(
        oid=SOC_AP_FW_HASH_OID,
        short_name="APROMPatchHash",
        long_name="SoC AP Firmware (BL31) hash (SHA256)",
        value_type=ValueType.OCTET_STRING,
    ),
    ExtensionDescriptor(
        oid=TRUSTED_OS_FW_CONTENT_CERT_PK_OID,
        short_name="TrustedOSFirmwareContentCertPK",
        long_name="Trusted OS Firmware content certificate public key",
        value_type=ValueType.PUBLIC_KEY,
    ),
    ExtensionDescriptor(
        oid=TRUSTED_OS_FW_HASH_OID,
        short_name="TrustedOSHash",
        long_name="Trusted OS (BL32) hash (SHA256)",
        value_type=ValueType.OCTET_STRING,
    ),
    ExtensionDescriptor(
        oid=NON_TRUSTED_FW_CONTENT_CERT_PK_OID,
        short_name="NonTrustedFirmwareContentCertPK",
        long_name="Non-Trusted Firmware content certificate public key",
        value_type=ValueType.PUBLIC_KEY,
    ),
    ExtensionDescriptor(
        oid=NON_TRUSTED_WORLD_BOOTLOADER_HASH_OID,
        short_name="NonTrustedWorldBootloaderHash",
        long_name="Non-Trusted World (BL33) hash (SHA256)",
        value_type=ValueType.OCTET_STRING,
    ),
)
