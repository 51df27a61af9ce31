"""
Per-type value codecs for the canonical binary format.

Each codec turns a JSON-style value into its value bytes and reads it back
from a ``BinaryParser``:

  - UInt8/16/32/64 and Hash128/160/256: fixed width, big-endian
  - Blob and AccountID: raw bytes, length-prefixed by the serializer
  - Amount: 8 bytes of XRP drops, or 48 bytes of issued-currency amount
  - Issue and XChainBridge: fixed compositions of currencies and accounts

Field headers and length prefixes are encoded here too; object and array
nesting lives in ``serializer``.
"""

from __future__ import annotations

from decimal import Decimal, InvalidOperation
from typing import Any

from xrpl_core import base58check
from xrpl_core.definitions import transaction_type_code, transaction_type_name
from xrpl_core.exceptions import FieldTooLarge, InvalidFieldValue

# ===================================================================
#  Field headers and length prefixes
# ===================================================================

MAX_SINGLE_BYTE_LENGTH = 192
MAX_DOUBLE_BYTE_LENGTH = 12480
MAX_LENGTH_VALUE = 918744


def encode_field_header(type_code: int, nth: int) -> bytes:
    """Pack a field's ``(type_code, nth)`` into 1, 2 or 3 bytes."""
    if not (0 < type_code < 256 and 0 < nth < 256):
        raise InvalidFieldValue(f"Field id out of range: ({type_code}, {nth})")
    if type_code < 16:
        if nth < 16:
            return bytes([(type_code << 4) | nth])
        return bytes([type_code << 4, nth])
    if nth < 16:
        return bytes([nth, type_code])
    return bytes([0, type_code, nth])


def encode_length_prefix(length: int) -> bytes:
    """Length header of a variable-length value."""
    if length < 0:
        raise InvalidFieldValue(f"Negative length: {length}")
    if length <= MAX_SINGLE_BYTE_LENGTH:
        return bytes([length])
    if length <= MAX_DOUBLE_BYTE_LENGTH:
        length -= MAX_SINGLE_BYTE_LENGTH + 1
        return bytes([193 + (length >> 8), length & 0xFF])
    if length <= MAX_LENGTH_VALUE:
        length -= MAX_DOUBLE_BYTE_LENGTH + 1
        return bytes([241 + (length >> 16), (length >> 8) & 0xFF, length & 0xFF])
    raise FieldTooLarge(f"Length {length} exceeds maximum of {MAX_LENGTH_VALUE}")


class BinaryParser:
    """Sequential reader over a serialized blob."""

    def __init__(self, data: bytes):
        self.data = bytes(data)
        self.pos = 0

    def end(self) -> bool:
        return self.pos >= len(self.data)

    def peek(self) -> int:
        if self.end():
            raise InvalidFieldValue("Unexpected end of data")
        return self.data[self.pos]

    def read(self, n: int) -> bytes:
        if self.pos + n > len(self.data):
            raise InvalidFieldValue(
                f"Need {n} bytes at offset {self.pos}, only {len(self.data) - self.pos} left"
            )
        chunk = self.data[self.pos:self.pos + n]
        self.pos += n
        return chunk

    def read_uint8(self) -> int:
        return self.read(1)[0]

    def read_field_header(self) -> tuple[int, int]:
        first = self.read_uint8()
        type_code, nth = first >> 4, first & 0x0F
        if type_code == 0:
            type_code = self.read_uint8()
            if type_code < 16:
                raise InvalidFieldValue("Non-canonical field header: type code fits in a nibble")
        if nth == 0:
            nth = self.read_uint8()
            if nth < 16:
                raise InvalidFieldValue("Non-canonical field header: field code fits in a nibble")
        return type_code, nth

    def read_length_prefix(self) -> int:
        b1 = self.read_uint8()
        if b1 <= MAX_SINGLE_BYTE_LENGTH:
            return b1
        if b1 <= 240:
            b2 = self.read_uint8()
            return MAX_SINGLE_BYTE_LENGTH + 1 + (b1 - 193) * 256 + b2
        if b1 <= 254:
            b2, b3 = self.read(2)
            return MAX_DOUBLE_BYTE_LENGTH + 1 + (b1 - 241) * 65536 + b2 * 256 + b3
        raise InvalidFieldValue("Invalid length prefix byte 0xff")


# ===================================================================
#  Scalar types
# ===================================================================

def _to_bytes(value: Any, what: str) -> bytes:
    if isinstance(value, (bytes, bytearray)):
        return bytes(value)
    if isinstance(value, str):
        try:
            return bytes.fromhex(value)
        except ValueError:
            raise InvalidFieldValue(f"{what} must be a hex string, got {value!r}") from None
    raise InvalidFieldValue(f"{what} must be bytes or hex, got {type(value).__name__}")


class UIntType:
    """Unsigned integer of a fixed byte width."""

    def __init__(self, name: str, width: int):
        self.name = name
        self.width = width

    def encode(self, value: Any) -> bytes:
        """
        Encode an int, or a string in the ledger's JSON form.

        UInt64 strings are hex (``"123"`` is 0x123), matching how 64-bit
        values are rendered in JSON.  For the narrower widths a string
        must be decimal digits (``"123"`` is 123).
        """
        if isinstance(value, str) and self.width == 8:
            raw = _to_bytes(value.rjust(16, "0"), self.name)
            if len(raw) != 8:
                raise InvalidFieldValue(f"{self.name} hex must be at most 16 characters")
            return raw
        if isinstance(value, str):
            # decimal text of a value that fits needs at most 3 digits per byte
            if not (value.isascii() and value.isdigit()) or len(value.lstrip("0")) > 3 * self.width:
                raise InvalidFieldValue(f"{self.name} must be an integer, got {value[:40]!r}")
            value = int(value)
        if isinstance(value, bool) or not isinstance(value, int):
            raise InvalidFieldValue(f"{self.name} must be an integer, got {value!r}")
        if not 0 <= value < 1 << (8 * self.width):
            raise InvalidFieldValue(f"Value does not fit in {self.name}")
        return value.to_bytes(self.width, "big")

    def decode(self, parser: BinaryParser, length: int | None = None) -> Any:
        raw = parser.read(self.width)
        if self.width == 8:
            # 64-bit values travel as hex strings in JSON
            return raw.hex().upper()
        return int.from_bytes(raw, "big")


class TransactionTypeCodec(UIntType):
    """UInt16 that accepts and returns transaction type names."""

    def __init__(self):
        super().__init__("UInt16", 2)

    def encode(self, value: Any) -> bytes:
        if isinstance(value, str):
            value = transaction_type_code(value)
        return super().encode(value)

    def decode(self, parser: BinaryParser, length: int | None = None) -> str:
        return transaction_type_name(super().decode(parser))


class HashType:
    """Fixed-length opaque hash, hex in JSON."""

    def __init__(self, name: str, width: int):
        self.name = name
        self.width = width

    def encode(self, value: Any) -> bytes:
        raw = _to_bytes(value, self.name)
        if len(raw) != self.width:
            raise InvalidFieldValue(f"{self.name} must be {self.width} bytes, got {len(raw)}")
        return raw

    def decode(self, parser: BinaryParser, length: int | None = None) -> str:
        return parser.read(self.width).hex().upper()


class BlobType:
    name = "Blob"

    def encode(self, value: Any) -> bytes:
        return _to_bytes(value, self.name)

    def decode(self, parser: BinaryParser, length: int | None = None) -> str:
        if length is None:
            raise InvalidFieldValue("Blob needs a length")
        return parser.read(length).hex().upper()


def encode_account_id(value: Any) -> bytes:
    """Classic address or 40-hex account ID to 20 bytes."""
    if isinstance(value, str) and len(value) == 40:
        try:
            return bytes.fromhex(value)
        except ValueError:
            pass
    if isinstance(value, str):
        try:
            return base58check.decode_classic_address(value)
        except ValueError as exc:
            raise InvalidFieldValue(f"Invalid account {value!r}: {exc}") from exc
    raise InvalidFieldValue(f"Account must be a string, got {type(value).__name__}")


class AccountIDType:
    name = "AccountID"

    def encode(self, value: Any) -> bytes:
        return encode_account_id(value)

    def decode(self, parser: BinaryParser, length: int | None = None) -> str:
        if length is not None and length != base58check.ACCOUNT_ID_LENGTH:
            raise InvalidFieldValue(f"AccountID must be 20 bytes, got {length}")
        return base58check.encode_classic_address(parser.read(base58check.ACCOUNT_ID_LENGTH))


# ===================================================================
#  Currencies and amounts
# ===================================================================

CURRENCY_LENGTH = 20
NATIVE_CURRENCY = "XRP"

MAX_DROPS = 10 ** 17
MIN_MANTISSA = 10 ** 15
MIN_EXPONENT = -96
MAX_EXPONENT = 80

_NOT_NATIVE_BIT = 0x8000000000000000
_POSITIVE_BIT = 0x4000000000000000
_MANTISSA_MASK = (1 << 54) - 1


def encode_currency(code: str) -> bytes:
    """``"XRP"``, a 3-character ISO-style code, or 40 hex characters."""
    if code == NATIVE_CURRENCY:
        return bytes(CURRENCY_LENGTH)
    if len(code) == 3 and code.isascii() and code.isprintable():
        raw = bytearray(CURRENCY_LENGTH)
        raw[12:15] = code.encode("ascii")
        return bytes(raw)
    if len(code) == 40:
        raw = _to_bytes(code, "Currency")
        if raw[0] == 0x00 and raw != bytes(CURRENCY_LENGTH):
            raise InvalidFieldValue(f"Non-standard currency must not start with 0x00: {code}")
        return raw
    raise InvalidFieldValue(f"Invalid currency code: {code!r}")


def decode_currency(raw: bytes) -> str:
    if raw == bytes(CURRENCY_LENGTH):
        return NATIVE_CURRENCY
    code = raw[12:15]
    if raw[:12] == bytes(12) and raw[15:] == bytes(5):
        text = code.decode("ascii", errors="replace")
        if text.isascii() and text.isprintable():
            return text
    return raw.hex().upper()


def _encode_drops(value: Any) -> bytes:
    if isinstance(value, int) and not isinstance(value, bool):
        drops = value
    elif isinstance(value, str) and value.isascii() and value.isdigit():
        if len(value.lstrip("0")) > len(str(MAX_DROPS)):
            raise InvalidFieldValue(f"XRP amount exceeds {MAX_DROPS} drops")
        drops = int(value)
    else:
        raise InvalidFieldValue(f"XRP amount must be a whole number of drops, got {value!r}")
    if drops < 0:
        raise InvalidFieldValue("XRP amount must not be negative")
    if drops > MAX_DROPS:
        raise InvalidFieldValue(f"XRP amount exceeds {MAX_DROPS} drops")
    return (_POSITIVE_BIT | drops).to_bytes(8, "big")


def _encode_iou_value(value: Any) -> bytes:
    try:
        number = Decimal(str(value))
    except (InvalidOperation, ValueError):
        raise InvalidFieldValue("Invalid issued currency value") from None
    if not number.is_finite():
        raise InvalidFieldValue(f"Issued currency value must be finite: {value!r}")
    if number.is_zero():
        return _NOT_NATIVE_BIT.to_bytes(8, "big")

    sign, digits, exponent = number.as_tuple()
    digits = list(digits)
    while digits[-1] == 0:
        digits.pop()
        exponent += 1
    if len(digits) > 16:
        raise InvalidFieldValue(f"{str(value)[:40]!r} has more than 16 significant digits")
    mantissa = int("".join(str(d) for d in digits))
    while mantissa < MIN_MANTISSA and exponent > MIN_EXPONENT:
        mantissa *= 10
        exponent -= 1
    if exponent > MAX_EXPONENT:
        raise InvalidFieldValue(f"{value!r} is too large for an issued currency amount")
    if exponent < MIN_EXPONENT or mantissa < MIN_MANTISSA:
        raise InvalidFieldValue(f"{value!r} is too small for an issued currency amount")

    serial = _NOT_NATIVE_BIT | (0 if sign else _POSITIVE_BIT)
    serial |= (exponent + 97) << 54
    serial |= mantissa
    return serial.to_bytes(8, "big")


def _decode_iou_value(raw: bytes) -> str:
    serial = int.from_bytes(raw, "big")
    if serial == _NOT_NATIVE_BIT:
        return "0"
    exponent = ((serial >> 54) & 0xFF) - 97
    number = Decimal(serial & _MANTISSA_MASK).scaleb(exponent)
    if not serial & _POSITIVE_BIT:
        number = -number
    return format(number.normalize(), "f")


class AmountType:
    """XRP drops as a string, or ``{"currency", "issuer", "value"}``."""

    name = "Amount"

    def encode(self, value: Any) -> bytes:
        if isinstance(value, dict):
            try:
                currency, issuer, amount = value["currency"], value["issuer"], value["value"]
            except KeyError as exc:
                raise InvalidFieldValue(f"Issued currency amount is missing {exc}") from None
            if currency == NATIVE_CURRENCY:
                raise InvalidFieldValue("Issued currency amount cannot use XRP")
            return _encode_iou_value(amount) + encode_currency(currency) + encode_account_id(issuer)
        return _encode_drops(value)

    def decode(self, parser: BinaryParser, length: int | None = None) -> Any:
        if not parser.peek() & 0x80:
            serial = int.from_bytes(parser.read(8), "big")
            return str(serial & ~_POSITIVE_BIT)
        value = _decode_iou_value(parser.read(8))
        currency = decode_currency(parser.read(CURRENCY_LENGTH))
        issuer = base58check.encode_classic_address(parser.read(base58check.ACCOUNT_ID_LENGTH))
        return {"currency": currency, "issuer": issuer, "value": value}


class IssueType:
    """``{"currency": "XRP"}`` or ``{"currency", "issuer"}``."""

    name = "Issue"

    def encode(self, value: Any) -> bytes:
        if not isinstance(value, dict) or "currency" not in value:
            raise InvalidFieldValue(f"Issue must be a dict with a currency, got {value!r}")
        currency = encode_currency(value["currency"])
        if value["currency"] == NATIVE_CURRENCY:
            if value.get("issuer"):
                raise InvalidFieldValue("XRP issue cannot have an issuer")
            return currency
        if "issuer" not in value:
            raise InvalidFieldValue("Issued currency issue needs an issuer")
        return currency + encode_account_id(value["issuer"])

    def decode(self, parser: BinaryParser, length: int | None = None) -> dict:
        currency = decode_currency(parser.read(CURRENCY_LENGTH))
        if currency == NATIVE_CURRENCY:
            return {"currency": currency}
        issuer = base58check.encode_classic_address(parser.read(base58check.ACCOUNT_ID_LENGTH))
        return {"currency": currency, "issuer": issuer}


class XChainBridgeType:
    """Door accounts (length-prefixed) and issues of both chains."""

    name = "XChainBridge"
    _PARTS = (
        ("LockingChainDoor", AccountIDType()),
        ("LockingChainIssue", IssueType()),
        ("IssuingChainDoor", AccountIDType()),
        ("IssuingChainIssue", IssueType()),
    )

    def encode(self, value: Any) -> bytes:
        if not isinstance(value, dict):
            raise InvalidFieldValue(f"XChainBridge must be a dict, got {value!r}")
        out = bytearray()
        for part, codec in self._PARTS:
            if part not in value:
                raise InvalidFieldValue(f"XChainBridge is missing {part}")
            encoded = codec.encode(value[part])
            if isinstance(codec, AccountIDType):
                out += encode_length_prefix(len(encoded))
            out += encoded
        return bytes(out)

    def decode(self, parser: BinaryParser, length: int | None = None) -> dict:
        result = {}
        for part, codec in self._PARTS:
            part_length = parser.read_length_prefix() if isinstance(codec, AccountIDType) else None
            result[part] = codec.decode(parser, part_length)
        return result


CODECS: dict[str, Any] = {
    "UInt8": UIntType("UInt8", 1),
    "UInt16": UIntType("UInt16", 2),
    "UInt32": UIntType("UInt32", 4),
    "UInt64": UIntType("UInt64", 8),
    "Hash128": HashType("Hash128", 16),
    "Hash160": HashType("Hash160", 20),
    "Hash256": HashType("Hash256", 32),
    "Blob": BlobType(),
    "AccountID": AccountIDType(),
    "Amount": AmountType(),
    "Issue": IssueType(),
    "XChainBridge": XChainBridgeType(),
}

TRANSACTION_TYPE_CODEC = TransactionTypeCodec()
