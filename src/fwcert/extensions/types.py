"""
Shared types, errors, and constants for certificate extensions.

This module is the canonical source for types used across the codec,
builder, and registry modules. It has no intra-package dependencies, so
any module can import from it without risk of circular imports.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional


# =============================================================================
# Constants
# =============================================================================

# First numeric id handed out to custom objects (OpenSSL 1.1.1 NUM_NID)
FIRST_DYNAMIC_NID = 1195

# Well-known numeric ids of the standard extensions preloaded into a registry
NID_SUBJECT_KEY_IDENTIFIER = 82
NID_CRL_NUMBER = 88
NID_DELTA_CRL = 140
NID_INHIBIT_ANY_POLICY = 748

# Integers wider than this many bits print as hex (OpenSSL bignum_to_string)
INTEGER_DECIMAL_MAX_BITS = 127


# =============================================================================
# Errors
# =============================================================================

class ExtensionError(Exception):
    """Base class for certificate extension errors"""
    pass

class RegistrationError(ExtensionError):
    """Raised when an object, alias, or method cannot be registered"""
    pass

class EncodingError(ExtensionError):
    """Raised when a payload cannot be converted to DER"""
    pass

class BuilderError(ExtensionError):
    """Raised when an extension structure cannot be assembled"""
    pass


# =============================================================================
# Enumerations
# =============================================================================

class ValueType(str, Enum):
    """ASN.1 type carried by a custom extension value"""
    INTEGER = "INTEGER"
    OCTET_STRING = "OCTET STRING"
    PUBLIC_KEY = "SubjectPublicKeyInfo"


class MethodKind(str, Enum):
    """Print/parse behavior bound to a registered extension"""
    INTEGER = "integer"
    OCTET_STRING = "octet-string"
    ALIAS = "alias"
    UNSUPPORTED = "unsupported"


class RegistryState(str, Enum):
    UNINITIALIZED = "uninitialized"
    INITIALIZED = "initialized"


# =============================================================================
# Data types
# =============================================================================

@dataclass(frozen=True)
class ExtensionDescriptor:
    """
    Static description of one custom extension.

    Attributes:
        oid: Dotted-decimal object identifier, unique in the catalog
        short_name: Short display name
        long_name: Long display name, used when printing
        value_type: ASN.1 type of the value; selects the method pair
        alias: OID or short name of a known extension whose print/parse
            behavior is reused. Mutually exclusive with value_type.
    """
    oid: str
    short_name: str
    long_name: str
    value_type: Optional[ValueType] = None
    alias: Optional[str] = None


@dataclass(frozen=True)
class RegisteredExtension:
    """An object bound to its print/parse behavior"""
    nid: int
    oid: str
    short_name: str
    long_name: str
    kind: MethodKind
    alias_nid: Optional[int] = None

    def __str__(self) -> str:
        target = f" -> {self.alias_nid}" if self.alias_nid is not None else ""
        return f"RegisteredExtension({self.nid} {self.short_name}, {self.kind.value}{target})"


@dataclass
class RegistryOptions:
    """
    Configuration for an ExtensionRegistry.

    Attributes:
        first_dynamic_nid: Numeric id assigned to the first custom object
        preload_standard: Register the standard extensions that carry
            print methods, so descriptors can alias them
        octet_string_line_width: Bytes per printed line for octet
            strings (0 prints on a single line)
    """
    first_dynamic_nid: int = FIRST_DYNAMIC_NID
    preload_standard: bool = True
    octet_string_line_width: int = 0
