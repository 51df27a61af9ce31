"""
Shared pytest fixtures for the xrpl_core test suite.

The ``masterpassphrase`` vectors are the well-known genesis account keys.
"""

from types import SimpleNamespace

import pytest

from xrpl_core import base58check
from xrpl_core.algorithms import KeyAlgorithm
from xrpl_core.keys import PrivateKey


def address_of(byte: int) -> str:
    """Deterministic classic address with a repeated account ID byte."""
    return base58check.encode_classic_address(bytes([byte]) * 20)


@pytest.fixture
def master():
    """Golden vectors for the genesis account."""
    return SimpleNamespace(
        passphrase="masterpassphrase",
        entropy=bytes.fromhex("DEDCE9CE67B451D852FD4E846FCDE31C"),
        seed="snoPBrXtMeMyMHUVTgbuqAfg1SUTb",
        private_key_hex="001ACAAEDECE405B2A958212629E16F2EB46B153EEE94CDD350FDEFF52795525B7",
        public_key_hex="0330E7FC9D56BB25D6893BA3F317AE5BCF33B3291BD63DB32654A313222F7FD020",
        address="rHb9CJAWyB4rj91VRWn96DkukG4bwdtyTh",
    )


@pytest.fixture
def secp_key(master):
    """Genesis account secp256k1 key."""
    return PrivateKey.from_seed(master.seed)


@pytest.fixture
def ed_key():
    """Deterministic ed25519 key."""
    return PrivateKey.from_entropy(bytes(range(16)), KeyAlgorithm.ED25519)


@pytest.fixture
def alice():
    return address_of(0x11)


@pytest.fixture
def bob():
    return address_of(0x22)


@pytest.fixture
def carol():
    return address_of(0x33)
