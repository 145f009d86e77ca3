from __future__ import annotations

from dataclasses import dataclass
from types import SimpleNamespace

import pytest

from signaldesk.core.exceptions import InvalidFieldPathError
from signaldesk.table.fields import FieldPath, resolve, top_level_values


def test_resolve_nested_mapping_and_attributes():
    record = {"pair": SimpleNamespace(symbol="BTC/USDT", version=None)}

    assert resolve(record, "pair.symbol") == "BTC/USDT"
    assert resolve(record, "pair.version") is None
    assert resolve(record, "pair.missing") is None
    assert resolve(record, "nope.symbol") is None


def test_resolve_list_index():
    record = {"rows": [{"v": 1}, {"v": 2}]}

    assert resolve(record, "rows.1.v") == 2
    assert resolve(record, "rows.5.v") is None
    assert resolve(record, "rows.x") is None


def test_private_attributes_are_not_reachable():
    record = SimpleNamespace(_secret="x")

    assert resolve(record, "_secret") is None


@pytest.mark.parametrize("path", ["", "  ", "a..b", "a.b-c", "pair.sym bol", "a.__class__x!"])
def test_invalid_paths_raise(path):
    with pytest.raises(InvalidFieldPathError):
        FieldPath.parse(path)


def test_non_string_path_raises():
    with pytest.raises(InvalidFieldPathError):
        FieldPath.parse(["pair", "symbol"])  # type: ignore[arg-type]


def test_parse_round_trips_to_string():
    assert str(FieldPath.parse("pair.symbol")) == "pair.symbol"
    fp = FieldPath.parse("status")
    assert FieldPath.parse(fp) is fp


def test_top_level_values_for_supported_shapes():
    @dataclass
    class Row:
        a: int
        b: str

    assert top_level_values({"a": 1, "b": 2}) == [1, 2]
    assert top_level_values(Row(1, "x")) == [1, "x"]
    assert top_level_values(SimpleNamespace(a=1, _hidden=2)) == [1]
