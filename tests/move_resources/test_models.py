"""
Tests for struct tags, write-set events and record serialization.
"""

from datetime import datetime, timezone

import pytest

from move_resources.exceptions import EventDecodeError, TypeTagSyntaxError
from move_resources.models import (
    DeleteResource,
    MoveStructTag,
    ResourceChangeRecord,
    WriteResource,
    WriteSetChangeType,
    decode_write_set_change,
)


# ============================================================
# STRUCT TAG TESTS
# ============================================================

class TestMoveStructTag:

    def test_str_without_params(self):
        tag = MoveStructTag(address="0x1", module="account", name="Account")

        assert str(tag) == "0x1::account::Account"

    def test_str_with_params(self, coin_store_tag):
        assert str(coin_store_tag) == "0x1::coin::CoinStore<0x1::aptos_coin::AptosCoin>"

    def test_str_joins_params_with_comma_space(self):
        tag = MoveStructTag("0x1", "table", "Table", ("address", "u64"))

        assert str(tag) == "0x1::table::Table<address, u64>"

    def test_from_str_simple(self):
        tag = MoveStructTag.from_str("0x1::account::Account")

        assert tag == MoveStructTag("0x1", "account", "Account")

    def test_from_str_nested(self):
        tag = MoveStructTag.from_str(
            "0x1::coin::CoinStore<0x1::aptos_coin::AptosCoin>"
        )

        assert tag.module == "coin"
        assert tag.name == "CoinStore"
        assert tag.generic_type_params == (MoveStructTag("0x1", "aptos_coin", "AptosCoin"),)

    def test_from_str_keeps_vector_and_primitive_params_as_text(self):
        tag = MoveStructTag.from_str(
            "0x3::token::Pair<vector<0x1::string::String>, u128, &signer>"
        )

        assert tag.generic_type_params == ("vector<0x1::string::String>", "u128", "&signer")

    def test_from_str_round_trips_canonical_text(self):
        text = "0x1::pool::Pool<0x1::coin::Coin<0x1::aptos_coin::AptosCoin>, u64>"

        assert str(MoveStructTag.from_str(text)) == text

    def test_from_str_normalizes_param_spacing(self):
        tag = MoveStructTag.from_str("0x1::table::Table<address,u64>")

        assert str(tag) == "0x1::table::Table<address, u64>"

    @pytest.mark.parametrize("text", [
        "",
        "coin::CoinStore",
        "0x1::coin::",
        "0x1::coin::CoinStore::Extra",
        "0x1::coin::CoinStore<",
        "0x1::coin::CoinStore<0x1::a::B",
        "0x1::coin::CoinStore<>",
        "0x1::coin::CoinStore<u8,,u64>",
        "0x1::m::S<A>>",
        "0x1::m::S<A<B>",
    ])
    def test_from_str_rejects_malformed(self, text):
        with pytest.raises(TypeTagSyntaxError):
            MoveStructTag.from_str(text)

    def test_from_str_rejects_non_string(self):
        with pytest.raises(TypeTagSyntaxError):
            MoveStructTag.from_str(None)

    def test_syntax_error_is_value_error(self):
        with pytest.raises(ValueError):
            MoveStructTag.from_str("nope")


# ============================================================
# EVENT DECODING TESTS
# ============================================================

class TestEventDecoding:

    def test_write_resource_from_api_dict(self, api_transaction):
        event = WriteResource.from_api_dict(api_transaction["changes"][0])

        assert event.address == "0xabc"
        assert str(event.type_tag) == "0x1::coin::CoinStore<0x1::aptos_coin::AptosCoin>"
        assert event.data == {"coin": {"value": "100"}, "frozen": False}
        assert event.state_key_hash == "0x01"

    def test_write_resource_without_inner_data_defaults_to_empty(self):
        event = WriteResource.from_api_dict({
            "type": "write_resource",
            "address": "0x1",
            "data": {"type": "0x1::account::Account"},
        })

        assert event.data == {}

    def test_delete_resource_from_api_dict(self, api_transaction):
        event = DeleteResource.from_api_dict(api_transaction["changes"][2])

        assert event.address == "0xdef"
        assert event.resource.name == "CoinStore"

    @pytest.mark.parametrize("payload, missing", [
        ({"type": "write_resource", "data": {"type": "0x1::a::B", "data": {}}}, "address"),
        ({"type": "write_resource", "address": "0x1"}, "data"),
        ({"type": "write_resource", "address": "0x1", "data": {"data": {}}}, "type"),
        ({"type": "delete_resource", "address": "0x1"}, "resource"),
    ])
    def test_missing_fields(self, payload, missing):
        with pytest.raises(EventDecodeError) as exc_info:
            decode_write_set_change(payload)

        assert exc_info.value.field_name == missing

    def test_invalid_type_tag_is_decode_error(self):
        with pytest.raises(EventDecodeError) as exc_info:
            decode_write_set_change({
                "type": "delete_resource",
                "address": "0x1",
                "resource": "not a tag",
            })

        assert isinstance(exc_info.value.cause, TypeTagSyntaxError)

    @pytest.mark.parametrize("change_type", [
        "write_module", "delete_module", "write_table_item", "delete_table_item",
    ])
    def test_non_resource_changes_decode_to_none(self, change_type):
        assert decode_write_set_change({"type": change_type}) is None
        assert not WriteSetChangeType(change_type).is_resource_change

    def test_unknown_change_type(self):
        with pytest.raises(EventDecodeError):
            decode_write_set_change({"type": "write_everything"})

    def test_non_dict_change(self):
        with pytest.raises(EventDecodeError):
            decode_write_set_change(["write_resource"])


# ============================================================
# RECORD TESTS
# ============================================================

class TestResourceChangeRecord:

    @pytest.fixture
    def record(self):
        return ResourceChangeRecord(
            transaction_version=42,
            write_set_change_index=0,
            transaction_block_height=10,
            type_full="0x1::coin::CoinStore<0x1::aptos_coin::AptosCoin>",
            name="CoinStore",
            module="coin",
            address="0xabc",
            generic_type_params=["0x1::aptos_coin::AptosCoin"],
            data={"value": "100"},
            is_deleted=False,
            inserted_at=datetime(2024, 1, 15, 12, 0, tzinfo=timezone.utc),
        )

    def test_key(self, record):
        assert record.key == (42, 0)

    def test_dict_round_trip(self, record):
        restored = ResourceChangeRecord.from_dict(record.to_dict())

        assert restored == record

    def test_to_dict_timestamp_is_iso(self, record):
        assert record.to_dict()["inserted_at"] == "2024-01-15T12:00:00+00:00"

    def test_records_are_immutable(self, record):
        with pytest.raises(AttributeError):
            record.is_deleted = True

    def test_content_equals_ignores_inserted_at(self, record):
        later = ResourceChangeRecord.from_dict(
            {**record.to_dict(), "inserted_at": "2024-02-01T00:00:00+00:00"}
        )

        assert later != record
        assert later.content_equals(record)
