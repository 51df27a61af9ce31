"""
Canonical field-set serializer.

``serialize_field_set`` writes a mapping of field name -> value in canonical
order (ascending ``(type_code, nth)``), independent of insertion order:

    header || [length prefix] || value bytes      for each field

Blob and AccountID values carry a length prefix.  Nested objects end with
the ``0xE1`` object end marker and arrays with ``0xF1``; no length is
written for them.  There is no overall length or checksum at this layer.

``deserialize_field_set`` is the exact inverse and rebuilds nested objects
by tracking end markers.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from typing import Any

from xrpl_core.definitions import (
    ARRAY_END_MARKER,
    OBJECT_END_MARKER,
    FieldDefinition,
    get_field,
    get_field_by_ordinal,
)
from xrpl_core.exceptions import DuplicateOrUnknownField, InvalidFieldValue
from xrpl_core.field_types import (
    CODECS,
    TRANSACTION_TYPE_CODEC,
    BinaryParser,
    encode_field_header,
    encode_length_prefix,
)

logger = logging.getLogger("xrpl_core.serializer")

OBJECT_END_BYTES = encode_field_header(OBJECT_END_MARKER.type_code, OBJECT_END_MARKER.nth)
ARRAY_END_BYTES = encode_field_header(ARRAY_END_MARKER.type_code, ARRAY_END_MARKER.nth)


def _codec_for(fd: FieldDefinition) -> Any:
    if fd.name == "TransactionType":
        return TRANSACTION_TYPE_CODEC
    return CODECS[fd.type_name]


def _collect_fields(
    fields: Mapping[str, Any] | Iterable[tuple[str, Any]],
) -> list[tuple[FieldDefinition, Any]]:
    """Resolve names to definitions, rejecting unknown and repeated fields."""
    pairs = fields.items() if isinstance(fields, Mapping) else fields
    seen: set[str] = set()
    resolved = []
    for name, value in pairs:
        if name in seen:
            raise DuplicateOrUnknownField(f"Duplicate field: {name!r}")
        seen.add(name)
        resolved.append((get_field(name), value))
    return resolved


def _encode_field(fd: FieldDefinition, value: Any) -> bytes:
    header = encode_field_header(fd.type_code, fd.nth)
    if fd.type_name == "STObject":
        if not isinstance(value, Mapping):
            raise InvalidFieldValue(f"{fd.name} must be an object")
        return header + _encode_object(value) + OBJECT_END_BYTES
    if fd.type_name == "STArray":
        return header + _encode_array(fd, value) + ARRAY_END_BYTES

    try:
        encoded = _codec_for(fd).encode(value)
    except InvalidFieldValue as exc:
        raise InvalidFieldValue(f"{fd.name}: {exc}") from exc
    if fd.is_vl_encoded:
        return header + encode_length_prefix(len(encoded)) + encoded
    return header + encoded


def _encode_array(fd: FieldDefinition, value: Any) -> bytes:
    if isinstance(value, (str, bytes, Mapping)) or not isinstance(value, Iterable):
        raise InvalidFieldValue(f"{fd.name} must be a list of wrapped objects")
    out = bytearray()
    for element in value:
        # each element is {"InnerName": {...}}
        if not isinstance(element, Mapping) or len(element) != 1:
            raise InvalidFieldValue(f"{fd.name} elements must be single-key objects")
        (inner_name, inner_value), = element.items()
        inner = get_field(inner_name)
        if inner.type_name != "STObject":
            raise InvalidFieldValue(f"{fd.name} element {inner_name} is not an object field")
        out += _encode_field(inner, inner_value)
    return bytes(out)


def _encode_object(
    fields: Mapping[str, Any] | Iterable[tuple[str, Any]], signing_only: bool = False,
) -> bytes:
    resolved = _collect_fields(fields)
    if signing_only:
        # top level only; nested objects keep their signature fields
        resolved = [(fd, v) for fd, v in resolved if fd.is_signing_field]
    resolved.sort(key=lambda pair: pair[0].ordinal)
    return b"".join(_encode_field(fd, value) for fd, value in resolved)


def serialize_field_set(
    fields: Mapping[str, Any] | Iterable[tuple[str, Any]],
    signing_only: bool = False,
) -> bytes:
    """
    Serialize a field set in canonical order.

    With ``signing_only`` fields that are not part of the signing preimage
    (``TxnSignature``, ``Signature``, ``Signers``) are left out of the
    top-level object.  Objects nested inside it are written whole, so a
    memo or signer entry that carries a ``TxnSignature`` keeps it.
    """
    blob = _encode_object(fields, signing_only)
    logger.debug("serialized field set to %d bytes (signing_only=%s)", len(blob), signing_only)
    return blob


def encode(fields: Mapping[str, Any]) -> str:
    """Serialize and return upper-case hex."""
    return serialize_field_set(fields).hex().upper()


# ===================================================================
#  Decoding
# ===================================================================

def _read_object(parser: BinaryParser, nested: bool) -> dict[str, Any]:
    result: dict[str, Any] = {}
    while not parser.end():
        fd = get_field_by_ordinal(*parser.read_field_header())
        if fd is OBJECT_END_MARKER:
            if not nested:
                raise InvalidFieldValue("Object end marker outside of an object")
            return result
        if fd is ARRAY_END_MARKER:
            raise InvalidFieldValue("Array end marker outside of an array")
        if fd.name in result:
            raise DuplicateOrUnknownField(f"Duplicate field: {fd.name!r}")
        result[fd.name] = _read_value(parser, fd)
    if nested:
        raise InvalidFieldValue("Missing object end marker")
    return result


def _read_array(parser: BinaryParser) -> list[dict[str, Any]]:
    elements = []
    while True:
        fd = get_field_by_ordinal(*parser.read_field_header())
        if fd is ARRAY_END_MARKER:
            return elements
        if fd.type_name != "STObject":
            raise InvalidFieldValue(f"Array element {fd.name} is not an object")
        elements.append({fd.name: _read_object(parser, nested=True)})


def _read_value(parser: BinaryParser, fd: FieldDefinition) -> Any:
    if fd.type_name == "STObject":
        return _read_object(parser, nested=True)
    if fd.type_name == "STArray":
        return _read_array(parser)
    length = parser.read_length_prefix() if fd.is_vl_encoded else None
    return _codec_for(fd).decode(parser, length)


def deserialize_field_set(blob: bytes) -> dict[str, Any]:
    """Decode a serialized field set back into a JSON-style dict."""
    return _read_object(BinaryParser(blob), nested=False)


def decode(hex_blob: str) -> dict[str, Any]:
    try:
        blob = bytes.fromhex(hex_blob)
    except ValueError:
        raise InvalidFieldValue("Serialized blob must be hex") from None
    return deserialize_field_set(blob)
