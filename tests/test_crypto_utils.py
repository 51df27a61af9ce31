"""
Test suite for xrpl_core.crypto_utils — hashing primitives.

Covers:
  - SHA-256 / double-SHA-256
  - SHA-512 / SHA-512-half
  - RIPEMD-160 / Hash160
"""

import hashlib
import unittest

from xrpl_core.crypto_utils import hash160, ripemd160, sha256, sha256d, sha512, sha512_half


class TestHashFunctions(unittest.TestCase):
    """Tests for hashing primitives."""

    def test_sha256_known_vector(self):
        self.assertEqual(sha256(b"hello"), hashlib.sha256(b"hello").digest())

    def test_sha256d_double_hash(self):
        single = hashlib.sha256(b"data").digest()
        self.assertEqual(sha256d(b"data"), hashlib.sha256(single).digest())

    def test_sha256d_differs_from_single(self):
        self.assertNotEqual(sha256(b"data"), sha256d(b"data"))

    def test_sha512(self):
        self.assertEqual(sha512(b"abc"), hashlib.sha512(b"abc").digest())

    def test_sha512_half_is_prefix(self):
        self.assertEqual(sha512_half(b"abc"), hashlib.sha512(b"abc").digest()[:32])
        self.assertEqual(len(sha512_half(b"")), 32)

    def test_ripemd160_known_vector(self):
        self.assertEqual(
            ripemd160(b"").hex(),
            "9c1185a5c5e9fc54612808977ee8f548b2258d31",
        )
        self.assertEqual(
            ripemd160(b"abc").hex(),
            "8eb208f7e05d987a9b044a8e98c6b087f15a0bfc",
        )

    def test_hash160_composition(self):
        data = b"\x02" * 33
        self.assertEqual(hash160(data), ripemd160(hashlib.sha256(data).digest()))
        self.assertEqual(len(hash160(data)), 20)


if __name__ == "__main__":
    unittest.main()
