"""
Test suite for xrpl_core.seed — seed encoding, decoding and probing.

Covers:
  - Passphrase entropy and the genesis seed text
  - ed25519 ``sEd`` seeds
  - Algorithm probing with and without an explicit algorithm
  - Legacy secp256k1-prefixed seeds accepted for ed25519
  - Error cases: wrong algorithm, undetermined algorithm, bad entropy
"""

import pytest

from xrpl_core.algorithms import KeyAlgorithm
from xrpl_core.exceptions import (
    InvalidEntropyLength,
    UndeterminedSeedAlgorithm,
    WrongAlgorithmForSeed,
)
from xrpl_core.seed import Seed, decode_seed, encode_seed, entropy_from_passphrase


class TestEncodeSeed:

    def test_passphrase_entropy(self, master):
        assert entropy_from_passphrase(master.passphrase) == master.entropy

    def test_genesis_seed(self, master):
        assert encode_seed(master.entropy, KeyAlgorithm.SECP256K1) == master.seed

    def test_ed25519_prefix(self):
        for entropy in (bytes(16), b"\xff" * 16, bytes(range(16))):
            assert encode_seed(entropy, KeyAlgorithm.ED25519).startswith("sEd")

    def test_secp256k1_seed_starts_with_s(self):
        text = encode_seed(bytes(range(16)), KeyAlgorithm.SECP256K1)
        assert text.startswith("s")
        assert not text.startswith("sEd")

    @pytest.mark.parametrize("length", [0, 15, 17, 32])
    def test_bad_entropy_length(self, length):
        with pytest.raises(InvalidEntropyLength):
            encode_seed(b"\x01" * length, KeyAlgorithm.ED25519)


class TestDecodeSeed:

    def test_detects_secp256k1(self, master):
        entropy, algorithm = decode_seed(master.seed)
        assert entropy == master.entropy
        assert algorithm is KeyAlgorithm.SECP256K1

    def test_detects_ed25519(self):
        text = encode_seed(bytes(range(16)), KeyAlgorithm.ED25519)
        assert decode_seed(text) == (bytes(range(16)), KeyAlgorithm.ED25519)

    def test_explicit_algorithm(self, master):
        assert decode_seed(master.seed, KeyAlgorithm.SECP256K1) == (
            master.entropy, KeyAlgorithm.SECP256K1,
        )

    def test_ed25519_accepts_legacy_prefix(self, master):
        entropy, algorithm = decode_seed(master.seed, KeyAlgorithm.ED25519)
        assert entropy == master.entropy
        assert algorithm is KeyAlgorithm.ED25519

    def test_secp256k1_rejects_ed25519_seed(self):
        text = encode_seed(bytes(range(16)), KeyAlgorithm.ED25519)
        with pytest.raises(WrongAlgorithmForSeed):
            decode_seed(text, KeyAlgorithm.SECP256K1)

    def test_address_is_not_a_seed(self, master):
        with pytest.raises(UndeterminedSeedAlgorithm):
            decode_seed(master.address)

    def test_garbage_is_not_a_seed(self):
        with pytest.raises(UndeterminedSeedAlgorithm):
            decode_seed("not-a-seed")

    def test_errors_are_value_errors(self, master):
        with pytest.raises(ValueError):
            decode_seed(master.address)


class TestSeed:

    def test_from_passphrase_defaults_to_secp256k1(self, master):
        seed = Seed.from_passphrase(master.passphrase)
        assert seed.algorithm is KeyAlgorithm.SECP256K1
        assert seed.encode() == master.seed

    def test_decode_roundtrip(self):
        seed = Seed(bytes(range(16)), KeyAlgorithm.ED25519)
        assert Seed.decode(seed.encode()) == seed

    def test_generate(self):
        first = Seed.generate()
        second = Seed.generate()
        assert len(first.entropy) == 16
        assert first.algorithm is KeyAlgorithm.ED25519
        assert first != second

    def test_rejects_bad_entropy(self):
        with pytest.raises(InvalidEntropyLength):
            Seed(b"\x00" * 8)

    def test_repr_hides_entropy(self, master):
        seed = Seed(master.entropy, KeyAlgorithm.SECP256K1)
        assert master.entropy.hex() not in repr(seed).lower()
        assert "secp256k1" in repr(seed)
