"""
Key algorithm tags.

Each variant carries the one-byte prefix used when a raw private or public
key is written with its family marker, and the ordered list of Base58 seed
prefixes.  The first seed prefix is the primary one used for encoding;
ed25519 also accepts the secp256k1 seed prefix for backward compatibility.
"""

from __future__ import annotations

import enum

from xrpl_core.exceptions import UnsupportedAlgorithm

SECP256K1_SEED_PREFIX = b"\x21"
ED25519_SEED_PREFIX = b"\x01\xe1\x4b"


class KeyAlgorithm(enum.Enum):
    """Supported signing algorithms, in seed-probing order."""

    ED25519 = ("ed25519", 0xED, (ED25519_SEED_PREFIX, SECP256K1_SEED_PREFIX))
    SECP256K1 = ("secp256k1", 0x00, (SECP256K1_SEED_PREFIX,))

    def __init__(self, label: str, key_prefix: int, seed_prefixes: tuple[bytes, ...]):
        self.label = label
        self.key_prefix = key_prefix
        self.seed_prefixes = seed_prefixes

    @property
    def primary_seed_prefix(self) -> bytes:
        return self.seed_prefixes[0]

    @property
    def key_prefix_byte(self) -> bytes:
        return bytes([self.key_prefix])

    @classmethod
    def from_name(cls, name: str | KeyAlgorithm) -> KeyAlgorithm:
        """Resolve ``"ed25519"`` / ``"secp256k1"`` (any case) to a tag."""
        if isinstance(name, KeyAlgorithm):
            return name
        wanted = str(name).strip().lower()
        for algorithm in cls:
            if algorithm.label == wanted:
                return algorithm
        raise UnsupportedAlgorithm(f"Unsupported key algorithm: {name!r}")

    def __str__(self) -> str:
        return self.label
