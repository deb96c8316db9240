"""
Print/parse method pairs for custom extension values.

Each supported value type has a fixed method: how to decode the DER
value held in the extension, how to render it as text (i2s), how to read
it back from text (s2i), and how to encode it again. Values without a
method print as a hex/ASCII dump.
"""

from dataclasses import dataclass
from typing import Any, Callable, Dict

from .codec import decode_integer, decode_octet_string, encode_counter, encode_hash
from .types import INTEGER_DECIMAL_MAX_BITS, MethodKind

DUMP_BYTES_PER_LINE = 16

_DECIMAL_DIGITS = frozenset("0123456789")
_HEX_DIGITS = frozenset("0123456789abcdefABCDEF")


@dataclass(frozen=True)
class ExtensionMethod:
    """Conversion functions for one value type"""
    kind: MethodKind
    decode: Callable[[bytes], Any]
    encode: Callable[[Any], bytes]
    i2s: Callable[..., str]
    s2i: Callable[[str], Any]


def i2s_integer(value: int) -> str:
    """Decimal below 128 bits, 0x-prefixed hex from 128 bits on."""
    if abs(value).bit_length() <= INTEGER_DECIMAL_MAX_BITS:
        return str(value)
    sign = "-" if value < 0 else ""
    return f"{sign}0x{abs(value):X}"


def s2i_integer(text: str) -> int:
    """Parse a decimal or 0x-prefixed hex integer, optionally negative."""
    s = text.strip()
    negative = s.startswith("-")
    if negative:
        s = s[1:]
    if not s:
        raise ValueError(f"Invalid integer: {text!r}")
    if s[:2].lower() == "0x":
        digits, base, allowed = s[2:], 16, _HEX_DIGITS
    else:
        digits, base, allowed = s, 10, _DECIMAL_DIGITS
    # int() would otherwise accept signs, underscores and whitespace here
    if not digits or not set(digits) <= allowed:
        raise ValueError(f"Invalid integer: {text!r}")
    value = int(digits, base)
    return -value if negative else value


def i2s_octet_string(data: bytes, line_width: int = 0) -> str:
    """Colon-separated uppercase hex, optionally wrapped every line_width bytes."""
    octets = [f"{b:02X}" for b in data]
    if line_width <= 0:
        return ":".join(octets)
    lines = [
        ":".join(octets[i:i + line_width])
        for i in range(0, len(octets), line_width)
    ]
    return ":\n".join(lines)


def s2i_octet_string(text: str) -> bytes:
    """Parse hex digits, ignoring colon separators and whitespace."""
    digits = "".join(text.split()).replace(":", "")
    if len(digits) % 2:
        raise ValueError("Odd number of hex digits in octet string")
    try:
        return bytes.fromhex(digits)
    except ValueError as e:
        raise ValueError(f"Invalid hex in octet string: {e}") from e


def raw_dump(data: bytes) -> str:
    """Offset, hex, and printable-ASCII dump for values with no method."""
    lines = []
    for offset in range(0, len(data), DUMP_BYTES_PER_LINE):
        chunk = data[offset:offset + DUMP_BYTES_PER_LINE]
        hex_part = " ".join(f"{b:02x}" for b in chunk)
        ascii_part = "".join(chr(b) if 0x20 <= b < 0x7f else "." for b in chunk)
        lines.append(f"{offset:04x} - {hex_part:<{DUMP_BYTES_PER_LINE * 3 - 1}}   {ascii_part}")
    return "\n".join(lines)


METHODS: Dict[MethodKind, ExtensionMethod] = {
    MethodKind.INTEGER: ExtensionMethod(
        kind=MethodKind.INTEGER,
        decode=decode_integer,
        encode=encode_counter,
        i2s=i2s_integer,
        s2i=s2i_integer,
    ),
    MethodKind.OCTET_STRING: ExtensionMethod(
        kind=MethodKind.OCTET_STRING,
        decode=decode_octet_string,
        encode=encode_hash,
        i2s=i2s_octet_string,
        s2i=s2i_octet_string,
    ),
}
