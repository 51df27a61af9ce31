"""
Immutable transaction values and their schemas.

A transaction is a ``CommonFields`` value (account, fee, sequence, flags,
memos, signatures ...) plus the type-specific fields its
``TransactionSchema`` allows.  Schemas declare required and optional
fields, exactly-one groups and rule predicates; they form a
closed registry rather than a class hierarchy.

``TransactionBuilder`` collects fields and produces a validated
``Transaction``.  Signing returns a new ``Transaction``; the original is
never modified.

Only a representative set of transaction types is modelled:
Payment, CheckCash, AMMVote, NFTokenAcceptOffer, NFTokenCreateOffer,
PaymentChannelClaim and XChainCreateBridge.
"""

from __future__ import annotations

import copy
import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import Any, Optional

from xrpl_core import base58check
from xrpl_core.exceptions import (
    DuplicateOrUnknownField,
    InvalidFieldValue,
    InvalidTransaction,
)
from xrpl_core.keys import PrivateKey, PublicKey
from xrpl_core.serializer import deserialize_field_set, serialize_field_set
from xrpl_core.signing import (
    encode_for_signing,
    encode_for_signing_claim,
    sign,
    transaction_hash,
    verify,
)

logger = logging.getLogger("xrpl_core.transactions")

AMM_MAX_TRADING_FEE = 1000

# Payment flags
TF_NO_RIPPLE_DIRECT = 0x00010000
TF_PARTIAL_PAYMENT = 0x00020000
TF_LIMIT_QUALITY = 0x00040000

# NFTokenCreateOffer flags
TF_SELL_NFTOKEN = 0x00000001

# PaymentChannelClaim flags
TF_RENEW = 0x00010000
TF_CLOSE = 0x00020000


# ===================================================================
#  Common fields
# ===================================================================

@dataclass(frozen=True)
class Memo:
    """Arbitrary hex-encoded data attached to a transaction."""
    memo_data: str | None = None
    memo_type: str | None = None
    memo_format: str | None = None

    @classmethod
    def from_text(cls, data: str, memo_type: str | None = None,
                  memo_format: str | None = None) -> Memo:
        def _hex(text):
            return text.encode("utf-8").hex().upper() if text is not None else None
        return cls(_hex(data), _hex(memo_type), _hex(memo_format))

    def to_field(self) -> dict:
        inner = {}
        if self.memo_data is not None:
            inner["MemoData"] = self.memo_data
        if self.memo_type is not None:
            inner["MemoType"] = self.memo_type
        if self.memo_format is not None:
            inner["MemoFormat"] = self.memo_format
        return {"Memo": inner}

    @classmethod
    def from_field(cls, wrapped: Mapping[str, Any]) -> Memo:
        if not isinstance(wrapped, Mapping) or list(wrapped) != ["Memo"]:
            raise InvalidFieldValue(f"Memos elements must be Memo objects, got {wrapped!r}")
        inner = wrapped["Memo"]
        if not isinstance(inner, Mapping):
            raise InvalidFieldValue("Memo must be an object")
        return cls(inner.get("MemoData"), inner.get("MemoType"), inner.get("MemoFormat"))


# name in the field set -> attribute on CommonFields
_COMMON_FIELD_NAMES = {
    "Account": "account",
    "Fee": "fee",
    "Sequence": "sequence",
    "Flags": "flags",
    "LastLedgerSequence": "last_ledger_sequence",
    "SourceTag": "source_tag",
    "TicketSequence": "ticket_sequence",
    "NetworkID": "network_id",
    "SigningPubKey": "signing_pub_key",
    "TxnSignature": "txn_signature",
    "Signers": "signers",
}


@dataclass(frozen=True)
class CommonFields:
    """Fields every transaction carries, embedded by value."""
    account: str
    fee: str | None = None           # XRP drops
    sequence: int | None = None
    flags: int = 0
    last_ledger_sequence: int | None = None
    source_tag: int | None = None
    ticket_sequence: int | None = None
    network_id: int | None = None
    memos: tuple[Memo, ...] = ()
    signing_pub_key: str = ""
    txn_signature: str | None = None
    signers: tuple[Mapping[str, Any], ...] = ()

    def __post_init__(self):
        # signer entries are nested dicts; keep a private copy
        object.__setattr__(self, "signers", tuple(copy.deepcopy(list(self.signers))))

    def to_fields(self) -> dict[str, Any]:
        out: dict[str, Any] = {}
        for name, attr in _COMMON_FIELD_NAMES.items():
            value = getattr(self, attr)
            if value is None or (name == "Signers" and not value):
                continue
            out[name] = copy.deepcopy(list(value)) if name == "Signers" else value
        if self.memos:
            out["Memos"] = [m.to_field() for m in self.memos]
        return out

    @classmethod
    def from_fields(cls, fields: Mapping[str, Any]) -> CommonFields:
        kwargs: dict[str, Any] = {}
        for name, attr in _COMMON_FIELD_NAMES.items():
            if name in fields:
                kwargs[attr] = fields[name]
        if "Signers" in kwargs:
            kwargs["signers"] = tuple(kwargs["signers"])
        if "Memos" in fields:
            kwargs["memos"] = tuple(Memo.from_field(m) for m in fields["Memos"])
        if "account" not in kwargs:
            raise InvalidTransaction("Unknown", ["Account is required"])
        return cls(**kwargs)

    def validate(self) -> list[str]:
        problems = []
        if not base58check.is_valid_classic_address(self.account):
            problems.append(f"Account {self.account!r} is not a valid classic address")
        if self.fee is not None and not str(self.fee).isdigit():
            problems.append("Fee must be a whole number of XRP drops")
        if self.ticket_sequence is not None and self.sequence not in (None, 0):
            problems.append("Sequence must be 0 when TicketSequence is set")
        if self.flags < 0 or self.flags > 0xFFFFFFFF:
            problems.append("Flags must fit in 32 bits")
        return problems


# ===================================================================
#  Schemas
# ===================================================================

Rule = Callable[[Mapping[str, Any], CommonFields], Optional[str]]


@dataclass(frozen=True)
class TransactionSchema:
    """Field layout and rules of one transaction type."""
    name: str
    required: frozenset[str] = frozenset()
    optional: frozenset[str] = frozenset()
    exactly_one: tuple[frozenset[str], ...] = ()
    rules: tuple[Rule, ...] = ()
    flags: Mapping[str, int] = field(default_factory=dict)

    @property
    def allowed(self) -> frozenset[str]:
        return self.required | self.optional

    def validate(self, fields: Mapping[str, Any], common: CommonFields) -> list[str]:
        problems = common.validate()
        present = set(fields)
        for name in sorted(self.required - present):
            problems.append(f"{name} is required")
        for name in sorted(present - self.allowed):
            problems.append(f"{name} is not a field of {self.name}")
        for group in self.exactly_one:
            if len(group & present) != 1:
                problems.append(f"Exactly one of {', '.join(sorted(group))} must be set")
        for rule in self.rules:
            problem = rule(fields, common)
            if problem:
                problems.append(problem)
        return problems


def _is_xrp(amount: Any) -> bool:
    return not isinstance(amount, Mapping)


def _amount_is_positive(amount: Any) -> bool:
    value = amount["value"] if isinstance(amount, Mapping) else amount
    try:
        return float(value) > 0
    except (TypeError, ValueError):
        return False


def _payment_destination_differs(fields, common):
    if fields.get("Destination") == common.account and "SendMax" not in fields:
        return "Account and Destination must differ for a direct payment"
    return None


def _payment_deliver_min_needs_partial(fields, common):
    if "DeliverMin" in fields and not common.flags & TF_PARTIAL_PAYMENT:
        return "DeliverMin requires the tfPartialPayment flag"
    return None


def _amm_trading_fee_in_range(fields, common):
    fee = fields.get("TradingFee")
    if isinstance(fee, int) and not 0 <= fee <= AMM_MAX_TRADING_FEE:
        return f"TradingFee must be between 0 and {AMM_MAX_TRADING_FEE}"
    return None


def _nft_accept_needs_offer(fields, common):
    if not {"NFTokenSellOffer", "NFTokenBuyOffer"} & set(fields):
        return "Must set either NFTokenBuyOffer or NFTokenSellOffer"
    return None


def _nft_accept_broker_mode(fields, common):
    if "NFTokenBrokerFee" not in fields:
        return None
    if "NFTokenSellOffer" not in fields or "NFTokenBuyOffer" not in fields:
        return "Brokered mode needs both NFTokenSellOffer and NFTokenBuyOffer"
    if not _amount_is_positive(fields["NFTokenBrokerFee"]):
        return "NFTokenBrokerFee must be greater than 0; omit it if there is no broker fee"
    return None


def _nft_offer_destination_differs(fields, common):
    if fields.get("Destination") == common.account:
        return "Destination must not be equal to the account"
    return None


def _nft_offer_owner_matches_side(fields, common):
    if common.flags & TF_SELL_NFTOKEN:
        if "Owner" in fields:
            return "Owner must not be set for a sell offer"
        return None
    if "Owner" not in fields:
        return "Owner is required for a buy offer"
    if fields["Owner"] == common.account:
        return "Owner must differ from Account for a buy offer"
    return None


def _nft_offer_amount_nonzero(fields, common):
    amount = fields.get("Amount")
    if amount is None or _amount_is_positive(amount):
        return None
    if common.flags & TF_SELL_NFTOKEN and _is_xrp(amount):
        return None
    return "Amount must be greater than 0 unless this is an XRP sell offer"


def _claim_signature_needs_key(fields, common):
    if "Signature" in fields and not {"PublicKey", "Balance"} <= set(fields):
        return "A claim Signature needs PublicKey and Balance"
    return None


def _claim_amounts_are_xrp(fields, common):
    for name in ("Amount", "Balance"):
        if name in fields and not _is_xrp(fields[name]):
            return f"{name} of a channel claim must be XRP drops"
    return None


def _bridge_doors_differ(fields, common):
    bridge = fields.get("XChainBridge")
    if not isinstance(bridge, Mapping):
        return None
    if bridge.get("LockingChainDoor") == bridge.get("IssuingChainDoor"):
        return "XChainBridge cannot have the same door on both chains"
    return None


def _bridge_account_is_door(fields, common):
    bridge = fields.get("XChainBridge")
    if not isinstance(bridge, Mapping):
        return None
    if common.account not in (bridge.get("LockingChainDoor"), bridge.get("IssuingChainDoor")):
        return "Account must be the locking or issuing chain door"
    return None


def _bridge_issues_match(fields, common):
    bridge = fields.get("XChainBridge")
    if not isinstance(bridge, Mapping):
        return None
    locking = bridge.get("LockingChainIssue", {}).get("currency") == "XRP"
    issuing = bridge.get("IssuingChainIssue", {}).get("currency") == "XRP"
    if locking != issuing:
        return "Bridge must be XRP-XRP or IOU-IOU"
    return None


SCHEMAS: dict[str, TransactionSchema] = {
    schema.name: schema
    for schema in (
        TransactionSchema(
            name="Payment",
            required=frozenset({"Amount", "Destination"}),
            optional=frozenset({"SendMax", "DeliverMin", "DestinationTag", "InvoiceID"}),
            rules=(_payment_destination_differs, _payment_deliver_min_needs_partial),
            flags={
                "tfNoRippleDirect": TF_NO_RIPPLE_DIRECT,
                "tfPartialPayment": TF_PARTIAL_PAYMENT,
                "tfLimitQuality": TF_LIMIT_QUALITY,
            },
        ),
        TransactionSchema(
            name="CheckCash",
            required=frozenset({"CheckID"}),
            optional=frozenset({"Amount", "DeliverMin"}),
            exactly_one=(frozenset({"Amount", "DeliverMin"}),),
        ),
        TransactionSchema(
            name="AMMVote",
            required=frozenset({"Asset", "Asset2", "TradingFee"}),
            rules=(_amm_trading_fee_in_range,),
        ),
        TransactionSchema(
            name="NFTokenAcceptOffer",
            optional=frozenset({"NFTokenSellOffer", "NFTokenBuyOffer", "NFTokenBrokerFee"}),
            rules=(_nft_accept_needs_offer, _nft_accept_broker_mode),
        ),
        TransactionSchema(
            name="NFTokenCreateOffer",
            required=frozenset({"NFTokenID", "Amount"}),
            optional=frozenset({"Owner", "Expiration", "Destination"}),
            rules=(
                _nft_offer_destination_differs,
                _nft_offer_owner_matches_side,
                _nft_offer_amount_nonzero,
            ),
            flags={"tfSellNFToken": TF_SELL_NFTOKEN},
        ),
        TransactionSchema(
            name="PaymentChannelClaim",
            required=frozenset({"Channel"}),
            optional=frozenset({"Balance", "Amount", "Signature", "PublicKey"}),
            rules=(_claim_signature_needs_key, _claim_amounts_are_xrp),
            flags={"tfRenew": TF_RENEW, "tfClose": TF_CLOSE},
        ),
        TransactionSchema(
            name="XChainCreateBridge",
            required=frozenset({"XChainBridge", "SignatureReward"}),
            optional=frozenset({"MinAccountCreateAmount"}),
            rules=(_bridge_doors_differ, _bridge_account_is_door, _bridge_issues_match),
        ),
    )
}


def get_schema(transaction_type: str) -> TransactionSchema:
    try:
        return SCHEMAS[transaction_type]
    except KeyError:
        raise InvalidTransaction(transaction_type, ["Unsupported transaction type"]) from None


# ===================================================================
#  Transactions
# ===================================================================

@dataclass(frozen=True)
class Transaction:
    """An immutable, validated transaction."""
    transaction_type: str
    common: CommonFields
    fields: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        # nested amounts, issues and bridges are copied so later edits by
        # the caller or the builder cannot reach a validated transaction
        object.__setattr__(self, "fields", MappingProxyType(copy.deepcopy(dict(self.fields))))

    def __hash__(self) -> int:
        return hash((self.transaction_type, self.serialize()))

    @property
    def schema(self) -> TransactionSchema:
        return get_schema(self.transaction_type)

    def validate(self) -> None:
        """Raise ``InvalidTransaction`` listing every rule violation."""
        problems = self.schema.validate(self.fields, self.common)
        if not problems:
            try:
                serialize_field_set(self.to_fields())
            except InvalidFieldValue as exc:
                problems.append(str(exc))
        if problems:
            raise InvalidTransaction(self.transaction_type, problems)

    def has_flag(self, flag: str) -> bool:
        try:
            bit = self.schema.flags[flag]
        except KeyError:
            raise DuplicateOrUnknownField(
                f"{flag} is not a flag of {self.transaction_type}"
            ) from None
        return bool(self.common.flags & bit)

    def to_fields(self) -> dict[str, Any]:
        out: dict[str, Any] = {"TransactionType": self.transaction_type}
        out.update(self.common.to_fields())
        out.update(copy.deepcopy(dict(self.fields)))
        return out

    @classmethod
    def from_fields(cls, fields: Mapping[str, Any]) -> Transaction:
        fields = dict(fields)
        if "TransactionType" not in fields:
            raise InvalidTransaction("Unknown", ["TransactionType is required"])
        transaction_type = fields.pop("TransactionType")
        common = CommonFields.from_fields(fields)
        specific = {k: v for k, v in fields.items()
                    if k not in _COMMON_FIELD_NAMES and k != "Memos"}
        tx = cls(transaction_type, common, specific)
        tx.validate()
        return tx

    @classmethod
    def from_blob(cls, blob: bytes | str) -> Transaction:
        if isinstance(blob, str):
            blob = bytes.fromhex(blob)
        return cls.from_fields(deserialize_field_set(blob))

    # ---- serialisation ----

    def serialize(self, signing_only: bool = False) -> bytes:
        return serialize_field_set(self.to_fields(), signing_only=signing_only)

    def signing_preimage(self) -> bytes:
        return encode_for_signing(self.to_fields())

    # ---- signing ----

    @property
    def is_signed(self) -> bool:
        return bool(self.common.txn_signature) or bool(self.common.signers)

    def sign(self, private_key: PrivateKey) -> Transaction:
        """Return a signed copy; ``self`` is left untouched."""
        public_hex = private_key.public_key().to_hex()
        unsigned = replace(
            self, common=replace(self.common, signing_pub_key=public_hex, txn_signature=None),
        )
        signature = sign(private_key, unsigned.signing_preimage())
        logger.debug("signed %s from %s", self.transaction_type, self.common.account)
        return replace(unsigned, common=replace(unsigned.common, txn_signature=signature))

    def verify_signature(self) -> bool:
        if not self.common.txn_signature or not self.common.signing_pub_key:
            return False
        public_key = PublicKey.from_hex(self.common.signing_pub_key)
        return verify(public_key, self.signing_preimage(), self.common.txn_signature)

    def hash(self) -> str:
        """Transaction ID; only meaningful once signed."""
        if not self.is_signed:
            raise InvalidTransaction(self.transaction_type, ["Transaction is not signed"])
        return transaction_hash(self.serialize())


class TransactionBuilder:
    """Mutable collector that produces an immutable ``Transaction``."""

    def __init__(self, transaction_type: str, account: str):
        self._schema = get_schema(transaction_type)
        self._common: dict[str, Any] = {"account": account}
        self._memos: list[Memo] = []
        self._fields: dict[str, Any] = {}

    def set(self, name: str, value: Any) -> TransactionBuilder:
        if name not in self._schema.allowed:
            raise DuplicateOrUnknownField(f"{name} is not a field of {self._schema.name}")
        self._fields[name] = value
        return self

    def fee(self, drops: int | str) -> TransactionBuilder:
        self._common["fee"] = str(drops)
        return self

    def sequence(self, sequence: int) -> TransactionBuilder:
        self._common["sequence"] = sequence
        return self

    def ticket_sequence(self, ticket: int) -> TransactionBuilder:
        self._common["ticket_sequence"] = ticket
        self._common["sequence"] = 0
        return self

    def last_ledger_sequence(self, ledger_index: int) -> TransactionBuilder:
        self._common["last_ledger_sequence"] = ledger_index
        return self

    def source_tag(self, tag: int) -> TransactionBuilder:
        self._common["source_tag"] = tag
        return self

    def network_id(self, network_id: int) -> TransactionBuilder:
        self._common["network_id"] = network_id
        return self

    def flag(self, *names: str) -> TransactionBuilder:
        for name in names:
            try:
                bit = self._schema.flags[name]
            except KeyError:
                raise DuplicateOrUnknownField(
                    f"{name} is not a flag of {self._schema.name}"
                ) from None
            self._common["flags"] = self._common.get("flags", 0) | bit
        return self

    def memo(self, memo: Memo) -> TransactionBuilder:
        self._memos.append(memo)
        return self

    def build(self) -> Transaction:
        common = CommonFields(memos=tuple(self._memos), **self._common)
        tx = Transaction(self._schema.name, common, self._fields)
        tx.validate()
        return tx


# ===================================================================
#  Payment channel claims
# ===================================================================

def claim_preimage(tx: Transaction) -> bytes:
    """Bytes the channel source signs to authorise a claim's Amount."""
    if tx.transaction_type != "PaymentChannelClaim":
        raise InvalidTransaction(tx.transaction_type, ["Not a PaymentChannelClaim"])
    if "Amount" not in tx.fields:
        raise InvalidTransaction(tx.transaction_type, ["Claim preimage needs an Amount"])
    return encode_for_signing_claim(tx.fields["Channel"], tx.fields["Amount"])


def sign_claim(private_key: PrivateKey, channel: str, amount: int | str) -> str:
    """Signature authorising *amount* drops from *channel*."""
    return sign(private_key, encode_for_signing_claim(channel, amount))
