"""
Base58Check codec over the XRP Ledger alphabet.

The encoded form is ``Base58(prefix || payload || checksum)`` where the
checksum is the first 4 bytes of double-SHA-256 of ``prefix || payload``.
Leading zero bytes survive the round trip as leading ``r`` characters.

Classic addresses are the same construction with the one-byte ``0x00``
prefix over a 20-byte account ID.
"""

from __future__ import annotations

import hmac

import base58

from xrpl_core.crypto_utils import sha256d
from xrpl_core.exceptions import (
    ChecksumMismatch,
    InvalidPayloadLength,
    PrefixMismatch,
)

XRPL_ALPHABET: bytes = base58.RIPPLE_ALPHABET

CHECKSUM_LENGTH = 4

ACCOUNT_ID_PREFIX = b"\x00"
ACCOUNT_ID_LENGTH = 20


def checksum(data: bytes) -> bytes:
    return sha256d(data)[:CHECKSUM_LENGTH]


def encode(payload: bytes, prefix: bytes, expected_length: int = 0) -> str:
    """
    Encode *payload* behind *prefix* with a trailing 4-byte checksum.

    A non-zero *expected_length* must equal ``len(payload)``.
    """
    if expected_length and len(payload) != expected_length:
        raise InvalidPayloadLength(
            f"payload is {len(payload)} bytes, expected {expected_length}"
        )
    body = bytes(prefix) + bytes(payload)
    return base58.b58encode(body + checksum(body), alphabet=XRPL_ALPHABET).decode("ascii")


def decode(text: str, expected_prefix: bytes, expected_length: int = 0) -> bytes:
    """
    Reverse :func:`encode` and return the payload without its prefix.

    Checks run in order: payload length (when *expected_length* is
    non-zero), checksum, prefix.
    """
    try:
        raw = base58.b58decode(text, alphabet=XRPL_ALPHABET)
    except ValueError as exc:
        # characters outside the alphabet cannot carry a valid checksum
        raise ChecksumMismatch(f"not a Base58 string: {exc}") from exc

    prefix_len = len(expected_prefix)
    if len(raw) < prefix_len + CHECKSUM_LENGTH:
        raise ChecksumMismatch("encoded data is shorter than prefix and checksum")

    body, check = raw[:-CHECKSUM_LENGTH], raw[-CHECKSUM_LENGTH:]
    payload_len = len(body) - prefix_len
    if expected_length and payload_len != expected_length:
        raise InvalidPayloadLength(
            f"payload is {payload_len} bytes, expected {expected_length}"
        )
    if not hmac.compare_digest(checksum(body), check):
        raise ChecksumMismatch("checksum does not match payload")
    if body[:prefix_len] != bytes(expected_prefix):
        raise PrefixMismatch(
            f"prefix {body[:prefix_len].hex()} != expected {bytes(expected_prefix).hex()}"
        )
    return body[prefix_len:]


# ===================================================================
#  Classic addresses
# ===================================================================

def encode_classic_address(account_id: bytes) -> str:
    """Encode a 20-byte account ID as an ``r...`` address."""
    return encode(account_id, ACCOUNT_ID_PREFIX, ACCOUNT_ID_LENGTH)


def decode_classic_address(address: str) -> bytes:
    """Decode an ``r...`` address to its 20-byte account ID."""
    return decode(address, ACCOUNT_ID_PREFIX, ACCOUNT_ID_LENGTH)


def is_valid_classic_address(address: str) -> bool:
    try:
        decode_classic_address(address)
    except ValueError:
        return False
    return True
