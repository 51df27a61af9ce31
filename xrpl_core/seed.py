"""
Seed codec: 16 bytes of entropy <-> ``s...`` Base58Check text.

Decoding a seed without naming its algorithm probes every algorithm's
primary prefix in ``KeyAlgorithm`` order.  Naming the algorithm probes each
of that algorithm's legal prefixes in declared order instead, which lets an
ed25519 key be derived from a legacy secp256k1-prefixed seed.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass

from xrpl_core import base58check
from xrpl_core.algorithms import KeyAlgorithm
from xrpl_core.crypto_utils import sha512
from xrpl_core.exceptions import (
    InvalidEntropyLength,
    UndeterminedSeedAlgorithm,
    WrongAlgorithmForSeed,
)

logger = logging.getLogger("xrpl_core.seed")

SEED_LENGTH = 16


def _check_entropy(entropy: bytes) -> bytes:
    if len(entropy) != SEED_LENGTH:
        raise InvalidEntropyLength(
            f"Entropy must be {SEED_LENGTH} bytes, got {len(entropy)}"
        )
    return bytes(entropy)


def encode_seed(entropy: bytes, algorithm: KeyAlgorithm) -> str:
    """Encode *entropy* with *algorithm*'s primary seed prefix."""
    entropy = _check_entropy(entropy)
    return base58check.encode(entropy, algorithm.primary_seed_prefix, SEED_LENGTH)


def decode_seed(
    seed: str, algorithm: KeyAlgorithm | None = None,
) -> tuple[bytes, KeyAlgorithm]:
    """Decode *seed* text to ``(entropy, algorithm)``."""
    if algorithm is not None:
        for prefix in algorithm.seed_prefixes:
            try:
                return base58check.decode(seed, prefix, SEED_LENGTH), algorithm
            except ValueError as exc:
                logger.debug("seed prefix %s rejected for %s: %s", prefix.hex(), algorithm, exc)
        raise WrongAlgorithmForSeed(f"Seed is not a valid {algorithm} seed")

    for candidate in KeyAlgorithm:
        try:
            return base58check.decode(seed, candidate.primary_seed_prefix, SEED_LENGTH), candidate
        except ValueError as exc:
            logger.debug("seed is not %s: %s", candidate, exc)
    raise UndeterminedSeedAlgorithm("Invalid seed; could not determine encoding algorithm")


def entropy_from_passphrase(passphrase: str) -> bytes:
    """First 16 bytes of SHA-512 of the UTF-8 passphrase."""
    return sha512(passphrase.encode("utf-8"))[:SEED_LENGTH]


@dataclass(frozen=True)
class Seed:
    """Entropy tagged with the algorithm it derives keys for."""
    entropy: bytes
    algorithm: KeyAlgorithm = KeyAlgorithm.ED25519

    def __post_init__(self):
        _check_entropy(self.entropy)

    @classmethod
    def generate(cls, algorithm: KeyAlgorithm = KeyAlgorithm.ED25519) -> Seed:
        return cls(os.urandom(SEED_LENGTH), algorithm)

    @classmethod
    def from_passphrase(
        cls, passphrase: str, algorithm: KeyAlgorithm = KeyAlgorithm.SECP256K1,
    ) -> Seed:
        return cls(entropy_from_passphrase(passphrase), algorithm)

    @classmethod
    def decode(cls, text: str, algorithm: KeyAlgorithm | None = None) -> Seed:
        entropy, resolved = decode_seed(text, algorithm)
        return cls(entropy, resolved)

    def encode(self) -> str:
        return encode_seed(self.entropy, self.algorithm)

    def __repr__(self) -> str:
        # entropy is secret material
        return f"Seed(algorithm={self.algorithm.label})"
