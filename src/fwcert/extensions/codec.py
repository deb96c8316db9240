"""
DER value codec for certificate extension payloads.

Turns typed payloads into the DER bytes that are later placed in an
extension envelope:

- Hash: raw digest bytes -> OCTET STRING
- Counter: non-volatile counter value -> INTEGER
- Key: public key -> SubjectPublicKeyInfo

    SubjectPublicKeyInfo  ::=  SEQUENCE  {
         algorithm            AlgorithmIdentifier,
         subjectPublicKey     BIT STRING }

The functions here have no registry dependency.
"""

from contextlib import contextmanager
from typing import Type, Union

from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives import serialization
from pyasn1.codec.der import decoder as der_decoder
from pyasn1.codec.der import encoder as der_encoder
from pyasn1.error import PyAsn1Error
from pyasn1.type import namedtype, univ

from .types import EncodingError, ExtensionError

BytesLike = Union[bytes, bytearray, memoryview]

INTEGER_TAG = b"\x02"


class AlgorithmIdentifier(univ.Sequence):
    componentType = namedtype.NamedTypes(
        namedtype.NamedType('algorithm', univ.ObjectIdentifier()),
        namedtype.OptionalNamedType('parameters', univ.Any()),
    )


class SubjectPublicKeyInfo(univ.Sequence):
    componentType = namedtype.NamedTypes(
        namedtype.NamedType('algorithm', AlgorithmIdentifier()),
        namedtype.NamedType('subjectPublicKey', univ.BitString()),
    )


@contextmanager
def asn1_errors(label: str, error_cls: Type[ExtensionError] = EncodingError):
    """Wrap unexpected ASN.1 exceptions as the given extension error."""
    try:
        yield
    except ExtensionError:
        raise
    except (PyAsn1Error, ValueError, TypeError) as e:
        raise error_cls(f"Unexpected ASN.1 structure in {label}: {e}") from e


def der_decode(data: bytes, label: str = "value", asn1_spec=None,
               error_cls: Type[ExtensionError] = EncodingError):
    """Decode DER data using pyasn1, rejecting leftover bytes."""
    try:
        result, remainder = der_decoder.decode(data, asn1Spec=asn1_spec)
    except PyAsn1Error as e:
        raise error_cls(f"Failed to decode ASN.1 {label}: {e}") from e
    if remainder:
        raise error_cls(
            f"Unexpected leftover bytes after decoding {label}: {len(remainder)} bytes"
        )
    return result


def _as_bytes(data: BytesLike, label: str) -> bytes:
    if not isinstance(data, (bytes, bytearray, memoryview)):
        raise EncodingError(f"{label} must be bytes, got {type(data).__name__}")
    return bytes(data)


def encode_hash(data: BytesLike) -> bytes:
    """
    Encode a digest as a DER OCTET STRING.

    Any length is accepted; matching the digest size to an algorithm is
    left to the caller.

    Raises:
        EncodingError: If data is not bytes-like
    """
    raw = _as_bytes(data, "Hash")
    with asn1_errors("hash"):
        return der_encoder.encode(univ.OctetString(raw))


def encode_counter(value: int) -> bytes:
    """
    Encode a non-volatile counter as a DER INTEGER.

    Negative values use the minimal two's-complement form.

    Raises:
        EncodingError: If value is not an integer
    """
    # bool is an int subclass but never a valid counter
    if isinstance(value, bool) or not isinstance(value, int):
        raise EncodingError(f"Counter must be an integer, got {type(value).__name__}")
    # pyasn1 pads negative powers of two with a redundant 0xff octet
    content = value.to_bytes(((value + (value < 0)).bit_length() // 8) + 1, "big", signed=True)
    with asn1_errors("counter"):
        # Same length octets as an OCTET STRING; only the tag differs
        der = INTEGER_TAG + der_encoder.encode(univ.OctetString(content))[1:]
    if decode_integer(der) != value:
        raise EncodingError(f"Counter {value} does not decode back from its encoding")
    return der


def encode_public_key(key) -> bytes:
    """
    Encode a public key as a DER SubjectPublicKeyInfo.

    Args:
        key: A cryptography public key. A private key is accepted and its
            public half is encoded.

    Returns:
        The complete SubjectPublicKeyInfo encoding, sized to the key

    Raises:
        EncodingError: If the key cannot be serialized, or the encoding
            does not parse back as exactly one SubjectPublicKeyInfo
    """
    if not hasattr(key, "public_bytes") and hasattr(key, "public_key"):
        key = key.public_key()
    if not hasattr(key, "public_bytes"):
        raise EncodingError(f"Cannot encode {type(key).__name__} as a public key")

    try:
        der = key.public_bytes(
            encoding=serialization.Encoding.DER,
            format=serialization.PublicFormat.SubjectPublicKeyInfo,
        )
    except (ValueError, TypeError, UnsupportedAlgorithm) as e:
        raise EncodingError(f"Failed to serialize public key: {e}") from e

    # The whole buffer must be consumed by exactly one structure
    spki = der_decode(der, "SubjectPublicKeyInfo", asn1_spec=SubjectPublicKeyInfo())
    if not spki['subjectPublicKey'].isValue or len(spki['subjectPublicKey']) == 0:
        raise EncodingError("SubjectPublicKeyInfo has an empty public key")
    return der


def decode_octet_string(der: bytes) -> bytes:
    """Decode a DER OCTET STRING produced by encode_hash."""
    value = der_decode(der, "OCTET STRING", asn1_spec=univ.OctetString())
    return bytes(value)


def decode_integer(der: bytes) -> int:
    """Decode a DER INTEGER produced by encode_counter."""
    value = der_decode(der, "INTEGER", asn1_spec=univ.Integer())
    return int(value)
