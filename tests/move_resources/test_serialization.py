"""
Tests for JSON value conversion.
"""

from decimal import Decimal

import pytest

from move_resources.exceptions import ValueConversionError
from move_resources.models import MoveStructTag
from move_resources.serialization import to_json_value


class TestToJsonValue:

    @pytest.mark.parametrize("value", [None, True, False, 0, -5, 2**70, 1.5, "", "0x1"])
    def test_scalars_pass_through(self, value):
        assert to_json_value(value) == value

    def test_bool_stays_bool(self):
        assert to_json_value(True) is True

    def test_decimal_becomes_string(self):
        assert to_json_value(Decimal("1.50")) == "1.50"

    def test_bytes_become_hex(self):
        assert to_json_value(b"\x01\xff") == "0x01ff"

    def test_struct_tag_uses_to_json(self):
        tag = MoveStructTag.from_str("0x1::coin::Coin<0x1::aptos_coin::AptosCoin>")

        assert to_json_value(tag) == "0x1::coin::Coin<0x1::aptos_coin::AptosCoin>"

    def test_nested_containers(self):
        value = {"a": [1, (2, 3)], "b": {"c": None}}

        assert to_json_value(value) == {"a": [1, [2, 3]], "b": {"c": None}}

    def test_shared_subtree_is_not_a_cycle(self):
        shared = {"v": 1}

        assert to_json_value([shared, shared]) == [{"v": 1}, {"v": 1}]

    @pytest.mark.parametrize("value", [
        float("nan"),
        float("inf"),
        Decimal("NaN"),
        object(),
        {1: "int key"},
        {"s": {1, 2}},
    ])
    def test_rejects(self, value):
        with pytest.raises(ValueConversionError):
            to_json_value(value)

    def test_rejects_cycles(self):
        loop = []
        loop.append(loop)

        with pytest.raises(ValueConversionError) as exc_info:
            to_json_value(loop)

        assert exc_info.value.reason == "circular reference"

    def test_error_reports_path(self):
        with pytest.raises(ValueConversionError) as exc_info:
            to_json_value({"coin": {"value": [1, object()]}})

        assert exc_info.value.path == "$.coin.value[1]"

    def test_conversion_error_is_type_error(self):
        with pytest.raises(TypeError):
            to_json_value(object())

    def test_rejects_nesting_past_recursion_limit(self, deeply_nested):
        with pytest.raises(ValueConversionError) as exc_info:
            to_json_value(deeply_nested)

        assert exc_info.value.reason == "nesting too deep"
        assert isinstance(exc_info.value.__cause__, RecursionError)
