"""
Field catalog for the canonical binary format.

Every field is identified on the wire by ``(type_code, nth)``.  That pair
also fixes the canonical ordering of fields inside an object.  Only the
subset of the protocol's catalog needed by the supported transaction
schemas is listed here.
"""

from __future__ import annotations

from dataclasses import dataclass

from xrpl_core.exceptions import DuplicateOrUnknownField, InvalidFieldValue

TYPE_CODES: dict[str, int] = {
    "UInt16": 1,
    "UInt32": 2,
    "UInt64": 3,
    "Hash128": 4,
    "Hash256": 5,
    "Amount": 6,
    "Blob": 7,
    "AccountID": 8,
    "STObject": 14,
    "STArray": 15,
    "UInt8": 16,
    "Hash160": 17,
    "Issue": 24,
    "XChainBridge": 25,
}

# types whose value bytes are preceded by a length prefix
VL_ENCODED_TYPES = frozenset({"Blob", "AccountID"})


@dataclass(frozen=True)
class FieldDefinition:
    name: str
    type_name: str
    nth: int
    is_signing_field: bool = True

    @property
    def type_code(self) -> int:
        return TYPE_CODES[self.type_name]

    @property
    def is_vl_encoded(self) -> bool:
        return self.type_name in VL_ENCODED_TYPES

    @property
    def ordinal(self) -> tuple[int, int]:
        """Canonical sort key."""
        return self.type_code, self.nth


_FIELDS: list[tuple[str, str, int]] = [
    # UInt16
    ("LedgerEntryType", "UInt16", 1),
    ("TransactionType", "UInt16", 2),
    ("SignerWeight", "UInt16", 3),
    ("TransferFee", "UInt16", 4),
    ("TradingFee", "UInt16", 5),
    # UInt32
    ("NetworkID", "UInt32", 1),
    ("Flags", "UInt32", 2),
    ("SourceTag", "UInt32", 3),
    ("Sequence", "UInt32", 4),
    ("Expiration", "UInt32", 10),
    ("TransferRate", "UInt32", 11),
    ("DestinationTag", "UInt32", 14),
    ("QualityIn", "UInt32", 20),
    ("QualityOut", "UInt32", 21),
    ("OfferSequence", "UInt32", 25),
    ("LastLedgerSequence", "UInt32", 27),
    ("SetFlag", "UInt32", 33),
    ("ClearFlag", "UInt32", 34),
    ("SignerQuorum", "UInt32", 35),
    ("CancelAfter", "UInt32", 36),
    ("FinishAfter", "UInt32", 37),
    ("SettleDelay", "UInt32", 39),
    ("TicketCount", "UInt32", 40),
    ("TicketSequence", "UInt32", 41),
    ("NFTokenTaxon", "UInt32", 42),
    # UInt64
    ("IndexNext", "UInt64", 1),
    ("IndexPrevious", "UInt64", 2),
    ("OwnerNode", "UInt64", 4),
    # Hash128
    ("EmailHash", "Hash128", 1),
    # Hash256
    ("LedgerHash", "Hash256", 1),
    ("AccountTxnID", "Hash256", 9),
    ("NFTokenID", "Hash256", 10),
    ("InvoiceID", "Hash256", 17),
    ("Channel", "Hash256", 22),
    ("CheckID", "Hash256", 24),
    ("NFTokenBuyOffer", "Hash256", 28),
    ("NFTokenSellOffer", "Hash256", 29),
    # Amount
    ("Amount", "Amount", 1),
    ("Balance", "Amount", 2),
    ("LimitAmount", "Amount", 3),
    ("TakerPays", "Amount", 4),
    ("TakerGets", "Amount", 5),
    ("Fee", "Amount", 8),
    ("SendMax", "Amount", 9),
    ("DeliverMin", "Amount", 10),
    ("Amount2", "Amount", 11),
    ("NFTokenBrokerFee", "Amount", 19),
    ("SignatureReward", "Amount", 29),
    ("MinAccountCreateAmount", "Amount", 30),
    # Blob
    ("PublicKey", "Blob", 1),
    ("MessageKey", "Blob", 2),
    ("SigningPubKey", "Blob", 3),
    ("URI", "Blob", 5),
    ("Domain", "Blob", 7),
    ("MemoType", "Blob", 12),
    ("MemoData", "Blob", 13),
    ("MemoFormat", "Blob", 14),
    # AccountID
    ("Account", "AccountID", 1),
    ("Owner", "AccountID", 2),
    ("Destination", "AccountID", 3),
    ("Issuer", "AccountID", 4),
    ("Authorize", "AccountID", 5),
    ("Unauthorize", "AccountID", 6),
    ("RegularKey", "AccountID", 8),
    ("NFTokenMinter", "AccountID", 9),
    # STObject
    ("ObjectEndMarker", "STObject", 1),
    ("Memo", "STObject", 10),
    ("SignerEntry", "STObject", 11),
    ("Signer", "STObject", 16),
    # STArray
    ("ArrayEndMarker", "STArray", 1),
    ("SignerEntries", "STArray", 4),
    ("Memos", "STArray", 9),
    # UInt8
    ("TickSize", "UInt8", 16),
    # Hash160
    ("TakerPaysCurrency", "Hash160", 1),
    ("TakerPaysIssuer", "Hash160", 2),
    # Issue
    ("Asset", "Issue", 3),
    ("Asset2", "Issue", 4),
    # XChainBridge
    ("XChainBridge", "XChainBridge", 1),
]

# fields left out of signing preimages
_NON_SIGNING_FIELDS: list[tuple[str, str, int]] = [
    ("TxnSignature", "Blob", 4),
    ("Signature", "Blob", 6),
    ("Signers", "STArray", 3),
]

FIELDS: dict[str, FieldDefinition] = {
    name: FieldDefinition(name, type_name, nth) for name, type_name, nth in _FIELDS
}
FIELDS.update({
    name: FieldDefinition(name, type_name, nth, is_signing_field=False)
    for name, type_name, nth in _NON_SIGNING_FIELDS
})

FIELDS_BY_ORDINAL: dict[tuple[int, int], FieldDefinition] = {
    fd.ordinal: fd for fd in FIELDS.values()
}

OBJECT_END_MARKER = FIELDS["ObjectEndMarker"]
ARRAY_END_MARKER = FIELDS["ArrayEndMarker"]


TRANSACTION_TYPES: dict[str, int] = {
    "Payment": 0,
    "EscrowCreate": 1,
    "EscrowFinish": 2,
    "AccountSet": 3,
    "EscrowCancel": 4,
    "SetRegularKey": 5,
    "OfferCreate": 7,
    "OfferCancel": 8,
    "TicketCreate": 10,
    "SignerListSet": 12,
    "PaymentChannelCreate": 13,
    "PaymentChannelFund": 14,
    "PaymentChannelClaim": 15,
    "CheckCreate": 16,
    "CheckCash": 17,
    "CheckCancel": 18,
    "DepositPreauth": 19,
    "TrustSet": 20,
    "AccountDelete": 21,
    "NFTokenMint": 25,
    "NFTokenBurn": 26,
    "NFTokenCreateOffer": 27,
    "NFTokenCancelOffer": 28,
    "NFTokenAcceptOffer": 29,
    "Clawback": 30,
    "AMMCreate": 35,
    "AMMDeposit": 36,
    "AMMWithdraw": 37,
    "AMMVote": 38,
    "AMMBid": 39,
    "AMMDelete": 40,
    "XChainCreateClaimID": 41,
    "XChainCommit": 42,
    "XChainClaim": 43,
    "XChainAccountCreateCommit": 44,
    "XChainModifyBridge": 47,
    "XChainCreateBridge": 48,
}

TRANSACTION_TYPE_NAMES: dict[int, str] = {code: name for name, code in TRANSACTION_TYPES.items()}


def get_field(name: str) -> FieldDefinition:
    try:
        return FIELDS[name]
    except KeyError:
        raise DuplicateOrUnknownField(f"Unknown field: {name!r}") from None


def get_field_by_ordinal(type_code: int, nth: int) -> FieldDefinition:
    try:
        return FIELDS_BY_ORDINAL[(type_code, nth)]
    except KeyError:
        raise DuplicateOrUnknownField(
            f"Unknown field with type code {type_code} and field code {nth}"
        ) from None


def transaction_type_code(name: str) -> int:
    try:
        return TRANSACTION_TYPES[name]
    except KeyError:
        raise InvalidFieldValue(f"Unknown transaction type: {name!r}") from None


def transaction_type_name(code: int) -> str:
    try:
        return TRANSACTION_TYPE_NAMES[code]
    except KeyError:
        raise InvalidFieldValue(f"Unknown transaction type code: {code}") from None
