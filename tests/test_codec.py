"""
Unit tests for the extension value codec.
"""

import pytest
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import ec, ed25519, rsa
from pyasn1.codec.der import decoder as der_decoder
from pyasn1.type import univ

from fwcert.extensions.codec import (
    SubjectPublicKeyInfo,
    decode_integer,
    decode_octet_string,
    encode_counter,
    encode_hash,
    encode_public_key,
)
from fwcert.extensions.types import EncodingError

INT32_MAX = 2**31 - 1
INT32_MIN = -2**31


def _spki(key) -> bytes:
    return key.public_bytes(
        encoding=serialization.Encoding.DER,
        format=serialization.PublicFormat.SubjectPublicKeyInfo,
    )


# =============================================================================
# Test Hash Encoding
# =============================================================================

class TestEncodeHash:
    """Test OCTET STRING encoding of digests."""

    @pytest.mark.parametrize("length", [0, 1, 20, 32, 64, 4097])
    def test_decodes_to_input(self, length):
        """Test the encoding decodes back to the digest bytes."""
        digest = bytes(i % 256 for i in range(length))
        der = encode_hash(digest)
        value, remainder = der_decoder.decode(der, asn1Spec=univ.OctetString())
        assert remainder == b""
        assert bytes(value) == digest

    def test_empty_hash(self):
        """Test an empty digest encodes as a zero-length OCTET STRING."""
        assert encode_hash(b"") == b"\x04\x00"

    def test_short_form_length(self):
        """Test a SHA-256 sized digest uses a short form length."""
        der = encode_hash(bytes(32))
        assert der[:2] == b"\x04\x20"
        assert len(der) == 34

    def test_long_form_length(self):
        """Test a 4097 byte digest uses a two byte long form length."""
        der = encode_hash(bytes(4097))
        assert der[:4] == b"\x04\x82\x10\x01"
        assert len(der) == 4101

    def test_accepts_bytearray(self):
        """Test bytes-like input is accepted."""
        assert encode_hash(bytearray(b"\xaa")) == b"\x04\x01\xaa"

    def test_rejects_str(self):
        """Test non-bytes input raises EncodingError."""
        with pytest.raises(EncodingError, match="must be bytes"):
            encode_hash("abcd")

    def test_decode_octet_string(self):
        """Test decoding the encoded digest."""
        assert decode_octet_string(encode_hash(b"\x01\x02")) == b"\x01\x02"


# =============================================================================
# Test Counter Encoding
# =============================================================================

class TestEncodeCounter:
    """Test INTEGER encoding of non-volatile counters."""

    @pytest.mark.parametrize("value,expected", [
        (0, b"\x02\x01\x00"),
        (1, b"\x02\x01\x01"),
        (-1, b"\x02\x01\xff"),
        (127, b"\x02\x01\x7f"),
        (128, b"\x02\x02\x00\x80"),
        (-128, b"\x02\x01\x80"),
        (-129, b"\x02\x02\xff\x7f"),
        (INT32_MAX, b"\x02\x04\x7f\xff\xff\xff"),
        (INT32_MIN, b"\x02\x04\x80\x00\x00\x00"),
    ])
    def test_minimal_encoding(self, value, expected):
        """Test values encode to minimal two's complement."""
        assert encode_counter(value) == expected

    @pytest.mark.parametrize("value,expected", [
        (-2**15, b"\x02\x02\x80\x00"),
        (-2**63, b"\x02\x08\x80\x00\x00\x00\x00\x00\x00\x00"),
        (2**63 - 1, b"\x02\x08\x7f\xff\xff\xff\xff\xff\xff\xff"),
        (2**63, b"\x02\x09\x00\x80\x00\x00\x00\x00\x00\x00\x00"),
    ])
    def test_minimal_encoding_64_bit(self, value, expected):
        """Test negative powers of two carry no redundant 0xff octet."""
        assert encode_counter(value) == expected

    @pytest.mark.parametrize("value", [-2**(8 * k - 1) for k in range(1, 20)])
    def test_negative_powers_of_two_minimal(self, value):
        """Test the content length matches the two's-complement width."""
        der = encode_counter(value)
        assert der[1] == len(der) - 2
        assert der[2] == 0x80
        assert decode_integer(der) == value

    def test_counter_long_form_length(self):
        """Test integers past 127 content octets use a long form length."""
        value = -2**(8 * 200 - 1)
        der = encode_counter(value)
        assert der[:3] == b"\x02\x81\xc8"
        assert der[3] == 0x80
        assert decode_integer(der) == value

    @pytest.mark.parametrize("value", [0, 1, -1, INT32_MAX, INT32_MIN, 2**63 - 1, -2**63])
    def test_decodes_to_input(self, value):
        """Test the encoding decodes back to the counter value."""
        assert decode_integer(encode_counter(value)) == value

    def test_rejects_bool(self):
        """Test booleans are not accepted as counters."""
        with pytest.raises(EncodingError, match="integer"):
            encode_counter(True)

    def test_rejects_float(self):
        """Test floats are not accepted as counters."""
        with pytest.raises(EncodingError, match="integer"):
            encode_counter(1.0)

    def test_decode_rejects_leftover(self):
        """Test trailing bytes after the INTEGER are rejected."""
        with pytest.raises(EncodingError, match="leftover"):
            decode_integer(b"\x02\x01\x01\x00")


# =============================================================================
# Test Public Key Encoding
# =============================================================================

class TestEncodePublicKey:
    """Test SubjectPublicKeyInfo encoding."""

    def test_ec_key(self):
        """Test a P-256 key encodes to its SubjectPublicKeyInfo."""
        key = ec.generate_private_key(ec.SECP256R1()).public_key()
        assert encode_public_key(key) == _spki(key)

    def test_ed25519_key(self):
        """Test a key whose algorithm has no parameters."""
        key = ed25519.Ed25519PrivateKey.generate().public_key()
        der = encode_public_key(key)
        assert der == _spki(key)
        assert len(der) == 44

    def test_private_key_uses_public_half(self):
        """Test a private key is encoded as its public key."""
        private_key = ec.generate_private_key(ec.SECP384R1())
        assert encode_public_key(private_key) == _spki(private_key.public_key())

    def test_rsa_key_parses_as_spki(self):
        """Test the encoding is a single SubjectPublicKeyInfo."""
        key = rsa.generate_private_key(public_exponent=65537, key_size=2048).public_key()
        der = encode_public_key(key)
        spki, remainder = der_decoder.decode(der, asn1Spec=SubjectPublicKeyInfo())
        assert remainder == b""
        assert str(spki['algorithm']['algorithm']) == "1.2.840.113549.1.1.1"

    def test_key_larger_than_4096_bytes(self):
        """Test a very large RSA key is encoded without truncation."""
        # Public numbers are not checked for primality, so no key generation is needed
        n = (1 << 40000) + 1
        key = rsa.RSAPublicNumbers(e=65537, n=n).public_key()
        der = encode_public_key(key)
        assert len(der) > 4096
        assert der == _spki(key)
        spki, remainder = der_decoder.decode(der, asn1Spec=SubjectPublicKeyInfo())
        assert remainder == b""
        # RSAPublicKey is a SEQUENCE of the modulus and exponent
        assert len(spki['subjectPublicKey'].asOctets()) > 40000 // 8

    def test_truncated_encoding_rejected(self):
        """Test a short SubjectPublicKeyInfo raises EncodingError."""
        real = ec.generate_private_key(ec.SECP256R1()).public_key()

        class TruncatingKey:
            def public_bytes(self, encoding, format):
                return _spki(real)[:-8]

        with pytest.raises(EncodingError):
            encode_public_key(TruncatingKey())

    def test_trailing_bytes_rejected(self):
        """Test extra bytes after the SubjectPublicKeyInfo raise EncodingError."""
        real = ec.generate_private_key(ec.SECP256R1()).public_key()

        class PaddedKey:
            def public_bytes(self, encoding, format):
                return _spki(real) + b"\x00\x00"

        with pytest.raises(EncodingError, match="leftover"):
            encode_public_key(PaddedKey())

    def test_serialization_failure(self):
        """Test a key that fails to serialize raises EncodingError."""
        class BrokenKey:
            def public_bytes(self, encoding, format):
                raise ValueError("unsupported key")

        with pytest.raises(EncodingError, match="unsupported key"):
            encode_public_key(BrokenKey())

    def test_not_a_key(self):
        """Test arbitrary objects raise EncodingError."""
        with pytest.raises(EncodingError, match="public key"):
            encode_public_key(b"\x30\x00")


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
