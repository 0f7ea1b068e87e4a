"""
Tests for struct tag decomposition.
"""

import pytest

from move_resources.models import MoveStructTag, ResourceTypeIdentity
from move_resources.type_tag import TypeTagParser, decompose


class Unserializable:
    """A generic parameter with no JSON form."""

    def __str__(self) -> str:
        return "0x1::bad::Param"


@pytest.fixture
def parser():
    return TypeTagParser()


class TestDecompose:
    """Module, name and generic parameter extraction."""

    def test_module_and_name(self, parser, coin_store_tag):
        identity = parser.decompose(coin_store_tag)

        assert identity.module == "coin"
        assert identity.name == "CoinStore"

    def test_no_generic_params_is_none(self, parser):
        tag = MoveStructTag(address="0x1", module="account", name="Account")

        identity = parser.decompose(tag)

        assert identity == ResourceTypeIdentity(module="account", name="Account")
        assert identity.generic_type_params is None

    def test_struct_param_becomes_its_string(self, parser, coin_store_tag):
        identity = parser.decompose(coin_store_tag)

        assert identity.generic_type_params == ["0x1::aptos_coin::AptosCoin"]

    def test_params_keep_input_order(self, parser):
        tag = MoveStructTag.from_str(
            "0x1::pool::Pool<0x1::aptos_coin::AptosCoin, u64, 0xcafe::usdc::USDC, vector<u8>>"
        )

        identity = parser.decompose(tag)

        assert identity.generic_type_params == [
            "0x1::aptos_coin::AptosCoin",
            "u64",
            "0xcafe::usdc::USDC",
            "vector<u8>",
        ]

    def test_nested_generic_param(self, parser):
        tag = MoveStructTag.from_str(
            "0x1::option::Option<0x1::coin::Coin<0x1::aptos_coin::AptosCoin>>"
        )

        identity = parser.decompose(tag)

        assert identity.generic_type_params == ["0x1::coin::Coin<0x1::aptos_coin::AptosCoin>"]


class TestAllOrNothing:
    """One bad generic parameter discards the whole list."""

    def test_single_bad_param(self, parser):
        tag = MoveStructTag("0x1", "m", "S", (Unserializable(),))

        assert parser.decompose(tag).generic_type_params is None

    @pytest.mark.parametrize("bad_position", [0, 1, 2])
    def test_bad_param_anywhere_collapses_list(self, parser, aptos_coin_tag, bad_position):
        params = [aptos_coin_tag, "u64", "address"]
        params[bad_position] = Unserializable()
        tag = MoveStructTag("0x1", "m", "S", tuple(params))

        identity = parser.decompose(tag)

        assert identity.generic_type_params is None
        assert identity.module == "m"
        assert identity.name == "S"

    def test_non_finite_float_param(self, parser):
        tag = MoveStructTag("0x1", "m", "S", ("u8", float("nan")))

        assert parser.decompose(tag).generic_type_params is None

    def test_deeply_nested_param(self, parser, deeply_nested):
        tag = MoveStructTag("0x1", "m", "S", ("u8", deeply_nested))

        identity = parser.decompose(tag)

        assert identity.generic_type_params is None
        assert identity.module == "m"

    def test_parser_does_not_raise_or_log(self, parser, caplog):
        tag = MoveStructTag("0x1", "m", "S", (Unserializable(),))

        with caplog.at_level("DEBUG"):
            parser.decompose(tag)

        assert caplog.records == []


class TestModuleFunction:

    def test_decompose_uses_default_parser(self, coin_store_tag):
        assert decompose(coin_store_tag) == TypeTagParser().decompose(coin_store_tag)
