"""
Test suite for xrpl_core.serializer — canonical field-set encoding.

Covers:
  - Canonical ordering independent of insertion order
  - Byte layout of simple fields and nested Memos
  - Unknown and duplicate field rejection
  - signing_only filtering of top-level signature fields
  - Decoding back to the original field set and malformed blobs
"""

import pytest

from xrpl_core import serializer
from xrpl_core.exceptions import DuplicateOrUnknownField, FieldTooLarge, InvalidFieldValue
from xrpl_core.serializer import deserialize_field_set, serialize_field_set


@pytest.fixture
def payment(alice, bob):
    return {
        "TransactionType": "Payment",
        "Account": alice,
        "Destination": bob,
        "Amount": "1000000",
        "Fee": "12",
        "Sequence": 5,
        "Flags": 0,
        "SigningPubKey": "",
    }


class TestEncoding:

    def test_single_fields(self, alice):
        assert serialize_field_set({"TransactionType": "Payment"}).hex().upper() == "120000"
        assert serialize_field_set({"Sequence": 1}).hex().upper() == "2400000001"
        assert serialize_field_set({"Account": alice}).hex().upper() == "8114" + "11" * 20
        assert serialize_field_set({"LastLedgerSequence": 7}).hex().upper() == "201B00000007"

    def test_empty_blob(self):
        assert serialize_field_set({"SigningPubKey": ""}).hex().upper() == "7300"

    def test_insertion_order_is_irrelevant(self, payment):
        reversed_fields = dict(reversed(list(payment.items())))
        assert serialize_field_set(payment) == serialize_field_set(reversed_fields)

    def test_pairs_are_accepted(self, payment):
        assert serialize_field_set(list(payment.items())) == serialize_field_set(payment)

    def test_canonical_order(self, alice):
        blob = serialize_field_set({"Account": alice, "Fee": "10", "TransactionType": "Payment"})
        # TransactionType (1,2) < Fee (6,8) < Account (8,1)
        assert blob[0] == 0x12
        assert blob[3] == 0x68
        assert blob[12] == 0x81

    def test_different_values_differ(self, payment):
        changed = dict(payment, Sequence=6)
        assert serialize_field_set(payment) != serialize_field_set(changed)

    def test_memos_nesting(self):
        blob = serialize_field_set({"Memos": [{"Memo": {"MemoData": "ABCD"}}]})
        assert blob.hex().upper() == "F9EA7D02ABCDE1F1"

    def test_long_blob_uses_two_byte_prefix(self):
        blob = serialize_field_set({"MemoData": "AB" * 193})
        assert blob[:3].hex().upper() == "7DC100"

    def test_blob_too_large(self):
        with pytest.raises(FieldTooLarge):
            serialize_field_set({"MemoData": b"\x00" * 918745})

    def test_hex_helper(self, payment):
        assert serializer.encode(payment) == serialize_field_set(payment).hex().upper()


class TestEncodingErrors:

    def test_unknown_field(self):
        with pytest.raises(DuplicateOrUnknownField):
            serialize_field_set({"NotAField": 1})

    def test_duplicate_field(self):
        with pytest.raises(DuplicateOrUnknownField):
            serialize_field_set([("Sequence", 1), ("Sequence", 2)])

    def test_bad_value_names_the_field(self):
        with pytest.raises(InvalidFieldValue, match="Sequence"):
            serialize_field_set({"Sequence": "not a number"})

    def test_array_elements_must_be_wrapped(self):
        with pytest.raises(InvalidFieldValue):
            serialize_field_set({"Memos": [{"MemoData": "AB"}]})
        with pytest.raises(InvalidFieldValue):
            serialize_field_set({"Memos": {"Memo": {}}})

    def test_object_must_be_mapping(self):
        with pytest.raises(InvalidFieldValue):
            serialize_field_set({"Memo": "ABCD"})


class TestSigningOnly:

    def test_signature_fields_are_excluded(self, payment):
        signed = dict(payment, TxnSignature="AB" * 70)
        assert serialize_field_set(signed, signing_only=True) == serialize_field_set(payment)
        assert serialize_field_set(signed) != serialize_field_set(payment)

    def test_signers_are_excluded(self, payment, carol):
        signers = [{"Signer": {"Account": carol, "SigningPubKey": "ED" * 33, "TxnSignature": "AB"}}]
        multi = dict(payment, Signers=signers)
        assert serialize_field_set(multi, signing_only=True) == serialize_field_set(payment)

    def test_nested_signature_fields_are_kept(self, payment):
        memos = [{"Memo": {"MemoData": "AB", "TxnSignature": "CD"}}]
        with_memo = dict(payment, Memos=memos)
        assert (serialize_field_set(with_memo, signing_only=True)
                == serialize_field_set(with_memo))
        assert (serialize_field_set(dict(with_memo, TxnSignature="EF"), signing_only=True)
                == serialize_field_set(with_memo))


class TestDecoding:

    def test_roundtrip(self, payment):
        assert deserialize_field_set(serialize_field_set(payment)) == payment

    def test_roundtrip_nested(self, payment, carol):
        fields = dict(
            payment,
            Memos=[
                {"Memo": {"MemoType": "74657874", "MemoData": "ABCD"}},
                {"Memo": {"MemoData": "01"}},
            ],
            Signers=[{"Signer": {"Account": carol, "SigningPubKey": "02" * 33, "TxnSignature": "AB"}}],
        )
        assert deserialize_field_set(serialize_field_set(fields)) == fields

    def test_decode_hex(self, payment):
        assert serializer.decode(serializer.encode(payment)) == payment

    def test_decode_bad_hex(self):
        with pytest.raises(InvalidFieldValue):
            serializer.decode("XYZ")

    def test_truncated(self, payment):
        blob = serialize_field_set(payment)
        with pytest.raises(InvalidFieldValue):
            deserialize_field_set(blob[:-3])

    def test_stray_object_end(self):
        with pytest.raises(InvalidFieldValue):
            deserialize_field_set(b"\xe1")

    def test_stray_array_end(self):
        with pytest.raises(InvalidFieldValue):
            deserialize_field_set(b"\xf1")

    def test_unterminated_object(self):
        with pytest.raises(InvalidFieldValue):
            deserialize_field_set(bytes.fromhex("EA7D01AB"))

    def test_duplicate_in_blob(self):
        with pytest.raises(DuplicateOrUnknownField):
            deserialize_field_set(bytes.fromhex("2400000001" * 2))

    def test_unknown_field_code(self):
        with pytest.raises(DuplicateOrUnknownField):
            deserialize_field_set(bytes.fromhex("2F00000001"))
