"""
Shared fixtures for the indexer test suites.
"""

import sys
from datetime import datetime, timezone

import pytest

from core.clock import MockClock
from move_resources.builder import ResourceRecordBuilder
from move_resources.models import DeleteResource, MoveStructTag, WriteResource


FIXED_TIME = datetime(2024, 1, 15, 12, 0, 0, tzinfo=timezone.utc)


# ============================================================
# FIXTURES
# ============================================================

@pytest.fixture
def fixed_time():
    return FIXED_TIME


@pytest.fixture
def clock():
    """Clock frozen at FIXED_TIME."""
    return MockClock(FIXED_TIME)


@pytest.fixture
def builder(clock):
    return ResourceRecordBuilder(clock=clock)


@pytest.fixture
def aptos_coin_tag():
    return MoveStructTag(address="0x1", module="aptos_coin", name="AptosCoin")


@pytest.fixture
def coin_store_tag(aptos_coin_tag):
    """0x1::coin::CoinStore<0x1::aptos_coin::AptosCoin>"""
    return MoveStructTag(
        address="0x1",
        module="coin",
        name="CoinStore",
        generic_type_params=(aptos_coin_tag,),
    )


@pytest.fixture
def coin_store_write(coin_store_tag):
    return WriteResource(
        address="0xabc",
        type_tag=coin_store_tag,
        data={"value": "100"},
    )


@pytest.fixture
def coin_store_delete(coin_store_tag):
    return DeleteResource(address="0xabc", resource=coin_store_tag)


@pytest.fixture
def api_transaction():
    """Write set of a coin transfer as the node REST API reports it."""
    return {
        "version": "42",
        "block_height": "10",
        "changes": [
            {
                "type": "write_resource",
                "address": "0xabc",
                "state_key_hash": "0x01",
                "data": {
                    "type": "0x1::coin::CoinStore<0x1::aptos_coin::AptosCoin>",
                    "data": {"coin": {"value": "100"}, "frozen": False},
                },
            },
            {
                "type": "write_table_item",
                "handle": "0x1b854694ae746cdbd8d44186ca4929b2b337df21d1c74633be19b2710552fdca",
                "key": "0x0619dc29a0aac8fa146714058e8dd6d2d0f3bdf5f6331907bf91f3acd81e6935",
                "value": "0x708f579f5ac8cd0100000000000000",
            },
            {
                "type": "delete_resource",
                "address": "0xdef",
                "state_key_hash": "0x02",
                "resource": "0x1::coin::CoinStore<0x1::aptos_coin::AptosCoin>",
            },
            {
                "type": "write_resource",
                "address": "0xabc",
                "data": {
                    "type": "0x1::account::Account",
                    "data": {"sequence_number": "7"},
                },
            },
        ],
    }


@pytest.fixture
def deeply_nested():
    """A list nested well past the interpreter recursion limit."""
    value = []
    for _ in range(sys.getrecursionlimit() * 2):
        value = [value]
    return value
