"""
Typed failures raised by the xrpl_core codecs and key derivation.

Input problems (bad lengths, checksums, prefixes, field values) derive from
``ValueError`` so callers probing several algorithms can catch them
cheaply.  ``ScalarSearchExhausted`` is the one fatal kind: it can only
happen with a broken hash function or curve constant.
"""

from __future__ import annotations


class XRPLCoreError(Exception):
    """Base class for every error raised by xrpl_core."""


# ---- codec errors ----

class InvalidEntropyLength(XRPLCoreError, ValueError):
    """Entropy is not exactly 16 bytes."""


class ChecksumMismatch(XRPLCoreError, ValueError):
    """The Base58Check checksum does not match the decoded payload."""


class PrefixMismatch(XRPLCoreError, ValueError):
    """The decoded leading bytes differ from the expected prefix."""


class InvalidPayloadLength(XRPLCoreError, ValueError):
    """The payload length differs from the caller's expected length."""


class WrongAlgorithmForSeed(XRPLCoreError, ValueError):
    """None of the requested algorithm's seed prefixes decode the text."""


class UndeterminedSeedAlgorithm(XRPLCoreError, ValueError):
    """No known algorithm's primary seed prefix decodes the text."""


# ---- key errors ----

class ScalarSearchExhausted(XRPLCoreError, RuntimeError):
    """The 32-bit counter space produced no valid secp256k1 scalar."""


class InvalidPrivateKeyBytes(XRPLCoreError, ValueError):
    """Raw private key material is malformed for its algorithm."""


class UnsupportedAlgorithm(XRPLCoreError, ValueError):
    """The algorithm name or tag is not one of the supported variants."""


# ---- serializer errors ----

class FieldTooLarge(XRPLCoreError, ValueError):
    """A variable-length field exceeds the largest encodable length."""


class DuplicateOrUnknownField(XRPLCoreError, ValueError):
    """A field name is not in the catalog, or a field appears twice."""


class InvalidFieldValue(XRPLCoreError, ValueError):
    """A field value cannot be encoded as (or decoded from) its type."""


class InvalidTransaction(XRPLCoreError, ValueError):
    """A transaction violates the rules of its schema."""

    def __init__(self, transaction_type: str, problems: list[str]):
        self.transaction_type = transaction_type
        self.problems = list(problems)
        super().__init__(f"{transaction_type}: " + "; ".join(self.problems))
