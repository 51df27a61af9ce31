"""
Private and public keys for the two supported signing algorithms.

A ``PrivateKey`` owns 32 raw bytes and its ``KeyAlgorithm``; it never keeps
the seed it was derived from.  Signatures follow the ledger's conventions:

  - ed25519 signs the message bytes directly (PyNaCl).
  - secp256k1 signs SHA-512-half of the message with an RFC 6979 nonce and
    emits a canonical (low-S) DER signature (python-ecdsa).

Public keys are always 33 bytes: a compressed secp256k1 point, or ``0xED``
followed by the 32-byte ed25519 key.
"""

from __future__ import annotations

import hashlib
import os
from dataclasses import dataclass, field

from ecdsa import (
    SECP256k1,
    BadDigestError,
    BadSignatureError,
    MalformedPointError,
    SigningKey,
    UnexpectedDER,
    VerifyingKey,
)
from ecdsa.util import sigdecode_der, sigencode_der_canonize
from nacl.exceptions import BadSignatureError as NaclBadSignatureError
from nacl.signing import SigningKey as NaclSigningKey
from nacl.signing import VerifyKey as NaclVerifyKey

from xrpl_core import base58check
from xrpl_core.algorithms import KeyAlgorithm
from xrpl_core.crypto_utils import hash160, sha512_half
from xrpl_core.derivation import SCALAR_LENGTH, derive_private_key_bytes, is_valid_scalar
from xrpl_core.exceptions import InvalidPrivateKeyBytes
from xrpl_core.seed import Seed, decode_seed, encode_seed

PUBLIC_KEY_LENGTH = 33


def _hex_to_bytes(value: str, error: type[ValueError]) -> bytes:
    try:
        return bytes.fromhex(value)
    except ValueError as exc:
        raise error(f"Not a hex string: {exc}") from exc


# ===================================================================
#  Public keys
# ===================================================================

@dataclass(frozen=True)
class PublicKey:
    """A 33-byte public key tagged with its algorithm."""
    raw: bytes
    algorithm: KeyAlgorithm

    @classmethod
    def from_bytes(cls, key_bytes: bytes) -> PublicKey:
        key_bytes = bytes(key_bytes)
        if len(key_bytes) != PUBLIC_KEY_LENGTH:
            raise ValueError(f"Public key must be {PUBLIC_KEY_LENGTH} bytes, got {len(key_bytes)}")
        if key_bytes[0] == KeyAlgorithm.ED25519.key_prefix:
            return cls(key_bytes, KeyAlgorithm.ED25519)
        if key_bytes[0] in (0x02, 0x03):
            return cls(key_bytes, KeyAlgorithm.SECP256K1)
        raise ValueError(f"Unknown public key prefix 0x{key_bytes[0]:02x}")

    @classmethod
    def from_hex(cls, value: str) -> PublicKey:
        return cls.from_bytes(_hex_to_bytes(value, ValueError))

    def to_bytes(self) -> bytes:
        return self.raw

    def to_hex(self) -> str:
        return self.raw.hex().upper()

    def verify(self, message: bytes, signature: bytes | str) -> bool:
        """Check *signature* (bytes or hex) over *message*."""
        if isinstance(signature, str):
            try:
                signature = bytes.fromhex(signature)
            except ValueError:
                return False
        if self.algorithm is KeyAlgorithm.ED25519:
            try:
                NaclVerifyKey(self.raw[1:]).verify(message, signature)
            except (NaclBadSignatureError, ValueError):
                return False
            return True
        try:
            vk = VerifyingKey.from_string(self.raw, curve=SECP256k1)
            return vk.verify_digest(signature, sha512_half(message), sigdecode=sigdecode_der)
        except (BadSignatureError, BadDigestError, MalformedPointError, UnexpectedDER):
            return False

    def account_id(self) -> bytes:
        """RIPEMD-160(SHA-256(key)), the 20-byte account identifier."""
        return hash160(self.raw)

    def classic_address(self) -> str:
        return base58check.encode_classic_address(self.account_id())

    def __str__(self) -> str:
        return self.to_hex()


# ===================================================================
#  Private keys
# ===================================================================

@dataclass(frozen=True)
class PrivateKey:
    """32 raw private key bytes and the algorithm they belong to."""
    raw: bytes = field(repr=False)
    algorithm: KeyAlgorithm

    def __post_init__(self):
        if not isinstance(self.algorithm, KeyAlgorithm):
            object.__setattr__(self, "algorithm", KeyAlgorithm.from_name(self.algorithm))
        raw = bytes(self.raw)
        if len(raw) != SCALAR_LENGTH:
            raise InvalidPrivateKeyBytes(
                f"Private key must be {SCALAR_LENGTH} bytes, got {len(raw)}"
            )
        if self.algorithm is KeyAlgorithm.SECP256K1 and not is_valid_scalar(raw):
            raise InvalidPrivateKeyBytes("Not a valid secp256k1 scalar")
        object.__setattr__(self, "raw", raw)

    # ---- factory methods ----

    @classmethod
    def from_entropy(
        cls, entropy: bytes, algorithm: KeyAlgorithm = KeyAlgorithm.ED25519,
    ) -> PrivateKey:
        """Derive a key from 16 bytes of entropy."""
        algorithm = KeyAlgorithm.from_name(algorithm)
        # validates the entropy length before any hashing
        encode_seed(entropy, algorithm)
        return cls(derive_private_key_bytes(entropy, algorithm), algorithm)

    @classmethod
    def from_seed(cls, seed: str | Seed, algorithm: KeyAlgorithm | None = None) -> PrivateKey:
        """Derive a key from ``s...`` seed text or a ``Seed`` value."""
        if isinstance(seed, Seed):
            return cls.from_entropy(seed.entropy, seed.algorithm)
        entropy, resolved = decode_seed(seed, algorithm)
        return cls.from_entropy(entropy, resolved)

    @classmethod
    def from_passphrase(
        cls, passphrase: str, algorithm: KeyAlgorithm = KeyAlgorithm.SECP256K1,
    ) -> PrivateKey:
        return cls.from_seed(Seed.from_passphrase(passphrase, algorithm))

    @classmethod
    def random(cls, algorithm: KeyAlgorithm = KeyAlgorithm.ED25519) -> PrivateKey:
        return cls.from_entropy(os.urandom(16), algorithm)

    @classmethod
    def from_bytes(
        cls, key_bytes: bytes, algorithm: KeyAlgorithm | None = None,
    ) -> PrivateKey:
        """
        Build a key from 32 raw bytes, or 33 bytes led by ``0x00``/``0xED``.

        Without a prefix or explicit algorithm, bytes that form a valid
        secp256k1 scalar are taken as secp256k1, anything else as ed25519.
        """
        key_bytes = bytes(key_bytes)
        if len(key_bytes) == SCALAR_LENGTH + 1:
            prefix, key_bytes = key_bytes[0], key_bytes[1:]
            if prefix == KeyAlgorithm.SECP256K1.key_prefix:
                algorithm = algorithm or KeyAlgorithm.SECP256K1
            elif prefix == KeyAlgorithm.ED25519.key_prefix:
                algorithm = algorithm or KeyAlgorithm.ED25519
            else:
                raise InvalidPrivateKeyBytes(f"Unknown private key prefix 0x{prefix:02x}")
        elif len(key_bytes) != SCALAR_LENGTH:
            raise InvalidPrivateKeyBytes(
                f"Private key must be {SCALAR_LENGTH} or {SCALAR_LENGTH + 1} bytes, "
                f"got {len(key_bytes)}"
            )
        if algorithm is None:
            algorithm = (KeyAlgorithm.SECP256K1 if is_valid_scalar(key_bytes)
                         else KeyAlgorithm.ED25519)
        return cls(key_bytes, algorithm)

    @classmethod
    def from_hex(cls, value: str, algorithm: KeyAlgorithm | None = None) -> PrivateKey:
        return cls.from_bytes(_hex_to_bytes(value, InvalidPrivateKeyBytes), algorithm)

    # ---- accessors ----

    def to_bytes(self) -> bytes:
        return self.raw

    def to_hex(self) -> str:
        """``"ED"`` or ``"00"`` followed by 64 upper-case hex characters."""
        body = self.raw.hex().upper().rjust(2 * SCALAR_LENGTH, "0")
        return f"{self.algorithm.key_prefix:02X}{body}"

    def public_key(self) -> PublicKey:
        if self.algorithm is KeyAlgorithm.ED25519:
            verify_key = NaclSigningKey(self.raw).verify_key
            return PublicKey(self.algorithm.key_prefix_byte + bytes(verify_key), self.algorithm)
        sk = SigningKey.from_string(self.raw, curve=SECP256k1)
        return PublicKey(sk.get_verifying_key().to_string("compressed"), self.algorithm)

    # ---- signing ----

    def sign_bytes(self, message: bytes) -> bytes:
        if self.algorithm is KeyAlgorithm.ED25519:
            return bytes(NaclSigningKey(self.raw).sign(bytes(message)).signature)
        sk = SigningKey.from_string(self.raw, curve=SECP256k1)
        return sk.sign_digest_deterministic(
            sha512_half(bytes(message)),
            hashfunc=hashlib.sha256,
            sigencode=sigencode_der_canonize,
        )

    def sign(self, message: bytes) -> str:
        """Sign *message* and return the signature as upper-case hex."""
        return self.sign_bytes(message).hex().upper()

    def __repr__(self) -> str:
        return f"PrivateKey(algorithm={self.algorithm.label})"


def derive_private_key(
    source: bytes | str | Seed,
    algorithm: KeyAlgorithm | None = None,
) -> PrivateKey:
    """
    Single entry point for key construction.

    *source* may be 16 bytes of entropy, 32/33 raw key bytes, seed text, or
    a ``Seed``.
    """
    if isinstance(source, Seed):
        return PrivateKey.from_seed(source)
    if isinstance(source, str):
        return PrivateKey.from_seed(source, algorithm)
    source = bytes(source)
    if len(source) == 16:
        return PrivateKey.from_entropy(source, algorithm or KeyAlgorithm.ED25519)
    return PrivateKey.from_bytes(source, algorithm)
