"""
Deterministic private-key derivation from 16 bytes of entropy.

ed25519
    The private seed is SHA-512-half of the entropy.

secp256k1 (root + mid)
    1. ``root = find_valid_scalar(entropy)``
    2. ``point = G * root`` (compressed, 33 bytes)
    3. ``mid = find_valid_scalar(point, mid=True)``
    4. ``(root + mid) mod n`` as 32 big-endian bytes

``find_valid_scalar`` hashes ``data [|| 00000000] || counter`` for
``counter = 0, 1, ...`` and keeps the first 32-byte prefix of SHA-512 that
is a valid non-zero scalar below the curve order.  The search is not the
same as reducing a single hash mod n; keys derived any other way will not
match the ones the network knows for a given seed.
"""

from __future__ import annotations

import logging
import struct

from ecdsa import SECP256k1, VerifyingKey

from xrpl_core.algorithms import KeyAlgorithm
from xrpl_core.crypto_utils import sha512_half
from xrpl_core.exceptions import ScalarSearchExhausted, UnsupportedAlgorithm

logger = logging.getLogger("xrpl_core.derivation")

CURVE_ORDER: int = SECP256k1.order
SCALAR_LENGTH = 32
COUNTER_SPACE = 1 << 32
ACCOUNT_INDEX = b"\x00\x00\x00\x00"


def is_valid_scalar(candidate: bytes) -> bool:
    """True when *candidate* is a 32-byte secp256k1 scalar in ``[1, n)``."""
    if len(candidate) != SCALAR_LENGTH:
        return False
    value = int.from_bytes(candidate, "big")
    return 0 < value < CURVE_ORDER


def find_valid_scalar(data: bytes, mid: bool = False, limit: int = COUNTER_SPACE) -> int:
    """Search the counter space for the first hash that is a valid scalar."""
    prefix = bytes(data) + ACCOUNT_INDEX if mid else bytes(data)
    for counter in range(limit):
        candidate = sha512_half(prefix + struct.pack(">I", counter))
        if is_valid_scalar(candidate):
            if counter:
                logger.debug("scalar search (mid=%s) needed %d extra rounds", mid, counter)
            return int.from_bytes(candidate, "big")
    raise ScalarSearchExhausted(
        f"No valid secp256k1 scalar after {limit} counters (mid={mid})"
    )


def compressed_public_point(scalar: int) -> bytes:
    """33-byte SEC1 compressed encoding of ``G * scalar``."""
    point = SECP256k1.generator * scalar
    return VerifyingKey.from_public_point(point, curve=SECP256k1).to_string("compressed")


class Secp256k1Recipe:
    """Root + mid derivation of a secp256k1 private scalar."""

    algorithm = KeyAlgorithm.SECP256K1

    @staticmethod
    def derive(entropy: bytes) -> bytes:
        root = find_valid_scalar(entropy)
        mid = find_valid_scalar(compressed_public_point(root), mid=True)
        return ((root + mid) % CURVE_ORDER).to_bytes(SCALAR_LENGTH, "big")


class Ed25519Recipe:
    """SHA-512-half of the entropy."""

    algorithm = KeyAlgorithm.ED25519

    @staticmethod
    def derive(entropy: bytes) -> bytes:
        return sha512_half(bytes(entropy))


_RECIPES = {
    KeyAlgorithm.SECP256K1: Secp256k1Recipe,
    KeyAlgorithm.ED25519: Ed25519Recipe,
}


def recipe_for(algorithm: KeyAlgorithm) -> type[Secp256k1Recipe] | type[Ed25519Recipe]:
    try:
        return _RECIPES[algorithm]
    except KeyError:
        raise UnsupportedAlgorithm(f"No derivation recipe for {algorithm!r}") from None


def derive_private_key_bytes(entropy: bytes, algorithm: KeyAlgorithm) -> bytes:
    """Derive the 32 raw private key bytes for *entropy* under *algorithm*."""
    return recipe_for(algorithm).derive(entropy)
