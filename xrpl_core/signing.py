"""
Signing facade.

Joins key handling and the canonical serializer:

  - ``sign`` / ``verify`` dispatch to the key's algorithm
  - ``derive_public_key`` recomputes the public key of a private key
  - signing preimages are a 4-byte hash prefix followed by the canonical
    serialization (single-sign ``STX\\0``, multi-sign ``SMT\\0``,
    payment-channel claims ``CLM\\0``)
  - transaction IDs are SHA-512-half of ``TXN\\0`` + the signed blob
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from xrpl_core.crypto_utils import sha512_half
from xrpl_core.field_types import CODECS, encode_account_id
from xrpl_core.keys import PrivateKey, PublicKey
from xrpl_core.serializer import serialize_field_set

logger = logging.getLogger("xrpl_core.signing")

TRANSACTION_SIGN_PREFIX = bytes.fromhex("53545800")       # STX\0
TRANSACTION_MULTISIGN_PREFIX = bytes.fromhex("534D5400")  # SMT\0
TRANSACTION_ID_PREFIX = bytes.fromhex("54584E00")         # TXN\0
PAYMENT_CHANNEL_CLAIM_PREFIX = bytes.fromhex("434C4D00")  # CLM\0


def sign(private_key: PrivateKey, preimage: bytes) -> str:
    """Sign *preimage* with the key's algorithm; returns upper-case hex."""
    return private_key.sign(preimage)


def verify(public_key: PublicKey, preimage: bytes, signature: bytes | str) -> bool:
    return public_key.verify(preimage, signature)


def derive_public_key(private_key: PrivateKey) -> PublicKey:
    return private_key.public_key()


# ===================================================================
#  Preimages
# ===================================================================

def encode_for_signing(fields: Mapping[str, Any]) -> bytes:
    """Single-signature preimage of a transaction field set."""
    return TRANSACTION_SIGN_PREFIX + serialize_field_set(fields, signing_only=True)


def encode_for_multisigning(fields: Mapping[str, Any], signer_account: str) -> bytes:
    """
    Preimage a multi-signer signs: the field set with an empty
    ``SigningPubKey`` followed by the signer's account ID.
    """
    fields = dict(fields)
    fields["SigningPubKey"] = ""
    return (TRANSACTION_MULTISIGN_PREFIX
            + serialize_field_set(fields, signing_only=True)
            + encode_account_id(signer_account))


def encode_for_signing_claim(channel: str, amount: int | str) -> bytes:
    """Preimage of a payment channel claim: channel ID and XRP drops."""
    return (PAYMENT_CHANNEL_CLAIM_PREFIX
            + CODECS["Hash256"].encode(channel)
            + CODECS["UInt64"].encode(int(amount)))


def transaction_hash(blob: bytes) -> str:
    """Transaction ID of a fully signed serialized transaction."""
    return sha512_half(TRANSACTION_ID_PREFIX + blob).hex().upper()


# ===================================================================
#  Field-set signing
# ===================================================================

def sign_field_set(fields: Mapping[str, Any], private_key: PrivateKey) -> dict[str, Any]:
    """Return a copy of *fields* carrying ``SigningPubKey`` and ``TxnSignature``."""
    signed = dict(fields)
    signed["SigningPubKey"] = private_key.public_key().to_hex()
    signed.pop("TxnSignature", None)
    signed["TxnSignature"] = sign(private_key, encode_for_signing(signed))
    logger.debug("signed %s for %s", signed.get("TransactionType"), signed.get("Account"))
    return signed


def multisign_field_set(
    fields: Mapping[str, Any], private_key: PrivateKey, signer_account: str | None = None,
) -> dict[str, Any]:
    """Build the ``Signer`` entry a multi-signer contributes."""
    public_key = private_key.public_key()
    account = signer_account or public_key.classic_address()
    return {
        "Signer": {
            "Account": account,
            "SigningPubKey": public_key.to_hex(),
            "TxnSignature": sign(private_key, encode_for_multisigning(fields, account)),
        }
    }


def combine_signers(fields: Mapping[str, Any], signers: list[Mapping[str, Any]]) -> dict[str, Any]:
    """Attach multi-signer entries, ordered by numeric account ID."""
    combined = dict(fields)
    combined["SigningPubKey"] = ""
    combined.pop("TxnSignature", None)
    combined["Signers"] = sorted(
        signers, key=lambda entry: encode_account_id(entry["Signer"]["Account"]),
    )
    return combined


def verify_field_set(fields: Mapping[str, Any]) -> bool:
    """Check the single signature carried by a signed field set."""
    signature = fields.get("TxnSignature")
    pub_hex = fields.get("SigningPubKey")
    if not signature or not pub_hex:
        return False
    try:
        public_key = PublicKey.from_hex(pub_hex)
    except ValueError:
        return False
    return verify(public_key, encode_for_signing(fields), signature)
