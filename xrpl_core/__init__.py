"""
xrpl_core - key derivation, seed codecs and canonical serialization for
XRP Ledger clients.

Key features:
- secp256k1 (root + mid) and ed25519 key derivation from 16-byte entropy
- Base58Check seed and classic address codecs with prefix probing
- Canonical binary serialization of transaction field sets
- Signing preimages, signatures and transaction IDs
- Immutable transaction schemas with a builder
"""

from xrpl_core.algorithms import KeyAlgorithm
from xrpl_core.keys import PrivateKey, PublicKey, derive_private_key
from xrpl_core.seed import Seed, decode_seed, encode_seed
from xrpl_core.serializer import deserialize_field_set, serialize_field_set

__version__ = "0.1.0"
__all__ = [
    "KeyAlgorithm",
    "PrivateKey",
    "PublicKey",
    "Seed",
    "decode_seed",
    "derive_private_key",
    "deserialize_field_set",
    "encode_seed",
    "serialize_field_set",
]
