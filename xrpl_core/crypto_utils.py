"""
Hashing primitives shared by the codecs, key derivation and signing.

  - SHA-256 / double-SHA-256
  - SHA-512 and SHA-512-half (first 32 bytes, the ledger's workhorse hash)
  - RIPEMD-160 / Hash160 (account IDs)
"""

from __future__ import annotations

import hashlib

from Crypto.Hash import RIPEMD160


def sha256(data: bytes) -> bytes:
    return hashlib.sha256(data).digest()


def sha256d(data: bytes) -> bytes:
    """Double SHA-256, used for Base58Check checksums."""
    return hashlib.sha256(hashlib.sha256(data).digest()).digest()


def sha512(data: bytes) -> bytes:
    return hashlib.sha512(data).digest()


def sha512_half(data: bytes) -> bytes:
    """First 32 bytes of SHA-512."""
    return hashlib.sha512(data).digest()[:32]


def ripemd160(data: bytes) -> bytes:
    # OpenSSL 3 no longer guarantees ripemd160 in hashlib
    return RIPEMD160.new(data).digest()


def hash160(data: bytes) -> bytes:
    """RIPEMD-160(SHA-256(data)); the account ID of a public key."""
    return ripemd160(sha256(data))
