# tests/test_sinks.py
"""Tests for the built-in sources (RowTable, frames) and the sinks."""

from collections import namedtuple
from datetime import date
from typing import Any, NamedTuple, Optional

import polars as pl
import pyarrow as pa
import pytest

import tablekit
from tablekit import (
    ColumnTable,
    IndexOutOfRangeError,
    RowTable,
    Schema,
    columntable,
    configure,
    rowtable,
    to_arrow,
    to_polars,
)

from conftest import CellGrid


# =============================================================================
# RowTable
# =============================================================================


class Point(NamedTuple):
    x: int
    y: float


class TestRowTable:
    """A list of records as a cell-producing source."""

    def test_schema_from_typed_named_tuple(self):
        t = RowTable([Point(1, 2.0), Point(3, 4.5)])
        assert tablekit.schema(t) == Schema(("x", "y"), (int, float))
        assert tablekit.columns(t).to_dict() == {"x": [1, 3], "y": [2.0, 4.5]}

    def test_schema_from_plain_named_tuple(self):
        P = namedtuple("P", ["a", "b"])
        t = RowTable([P(1, "x")])
        assert tablekit.schema(t) == Schema(("a", "b"), (int, str))

    def test_schema_from_mappings(self):
        t = RowTable([{"a": 1, "b": "x"}, {"a": 2, "b": "y"}])
        assert tablekit.schema(t) == Schema(("a", "b"), (int, str))
        assert list(tablekit.rows(t)) == [(1, "x"), (2, "y")]

    def test_explicit_schema(self):
        sch = Schema(("a",), (Optional[int],))
        t = RowTable([{"a": 1}, {"a": None}], sch)
        assert tablekit.columns(t)["a"] == [1, None]

    def test_missing_key(self):
        t = RowTable([{"a": 1}, {"b": 2}])
        with pytest.raises(IndexOutOfRangeError, match="no column 'a'"):
            list(tablekit.rows(t))

    def test_empty(self):
        t = RowTable([])
        assert len(t) == 0
        assert tablekit.schema(t) == Schema((), ())
        assert list(tablekit.rows(t)) == []

    def test_sequence_interface(self):
        t = RowTable([{"a": 1}, {"a": 2}])
        assert len(t) == 2
        assert t[1] == {"a": 2}

    def test_leading_none_makes_column_optional(self):
        t = RowTable([{"a": None}, {"a": 1}])
        assert tablekit.schema(t) == Schema(("a",), (Optional[int],))
        assert tablekit.columns(t)["a"] == [None, 1]

    def test_mixed_value_types_fall_back_to_any(self):
        t = RowTable([{"x": 1}, {"x": 2.5}])
        assert tablekit.schema(t).types == (Any,)
        assert list(tablekit.rows(t)) == [(1,), (2.5,)]

    def test_all_none_column_is_any(self):
        P = namedtuple("P", ["a", "b"])
        t = RowTable([P(None, 1), P(None, 2)])
        assert tablekit.schema(t) == Schema(("a", "b"), (Any, int))

    def test_records_without_names(self):
        with pytest.raises(TypeError, match="Cannot name the columns"):
            RowTable([(1, 2)])


# =============================================================================
# rowtable / columntable
# =============================================================================


class TestRowtableColumntable:
    """Conversions into the native containers."""

    def test_rowtable_of_cell_source(self, ab_grid):
        out = rowtable(ab_grid)
        assert out == [(1, "x"), (2, "y"), (3, "z")]
        assert out[0].b == "x"

    def test_rowtable_of_column_table(self):
        t = ColumnTable({"a": [1, 2]}, Schema(("a",), (int,)))
        assert rowtable(t) == [(1,), (2,)]

    def test_rowtable_of_pass_through(self):
        data = [{"a": 1}]
        assert rowtable(data) == data

    def test_columntable_of_cell_source(self, ab_grid):
        t = columntable(ab_grid)
        assert isinstance(t, ColumnTable)
        assert t.to_dict() == {"a": [1, 2, 3], "b": ["x", "y", "z"]}

    def test_columntable_of_mapping(self):
        t = columntable({"a": [1, 2], "b": ["x", "y"]})
        assert isinstance(t, ColumnTable)
        assert t.schema.types == (Any, Any)
        assert t.b == ["x", "y"]

    def test_columntable_of_records(self):
        """A pass-through iterable of records is collected by field name."""
        records = iter([{"a": 1, "b": "x"}, {"a": None, "b": "y"}])
        t = columntable(records)
        assert t.to_dict() == {"a": [1, None], "b": ["x", "y"]}

    def test_columntable_returns_existing_table_copy(self):
        src = ColumnTable({"a": [1]})
        assert columntable(src) == src

    def test_columntable_of_records_with_strict_passthrough(self):
        configure(strict_passthrough=True)
        t = columntable([{"a": 1}, {"a": 2}])
        assert t.to_dict() == {"a": [1, 2]}

    def test_columntable_of_mapping_with_strict_passthrough(self):
        configure(strict_passthrough=True)
        assert columntable({"a": [1, 2]}).nrows == 2


# =============================================================================
# polars / pyarrow
# =============================================================================


@pytest.fixture
def frame():
    return pl.DataFrame({
        "id": [1, 2, 3],
        "name": ["a", "b", None],
        "day": [date(2024, 1, 1), date(2024, 1, 2), date(2024, 1, 3)],
    })


class TestPolarsSource:
    """polars DataFrames satisfy the contract through a registered adapter."""

    def test_schema(self, frame):
        assert tablekit.schema(frame) == Schema(
            ("id", "name", "day"), (Optional[int], Optional[str], Optional[date])
        )

    def test_columns(self, frame):
        cols = tablekit.columns(frame)
        assert cols["id"] == [1, 2, 3]
        assert cols["name"] == ["a", "b", None]
        assert cols.nrows == 3

    def test_rows(self, frame):
        out = list(tablekit.rows(frame))
        assert out[0] == (1, "a", date(2024, 1, 1))
        assert out[2].name is None
        assert len(out) == 3

    def test_empty_frame(self):
        df = pl.DataFrame({"a": pl.Series([], dtype=pl.Int64)})
        assert list(tablekit.rows(df)) == []
        assert tablekit.columns(df)["a"] == []

    def test_out_of_range_cells(self, frame):
        assert tablekit.get_cell(frame, Optional[str], 2, 2) == "b"
        with pytest.raises(IndexOutOfRangeError, match="Row 4 outside 1..3") as exc:
            tablekit.get_cell(frame, Optional[int], 4, 1)
        assert exc.value.column == "id"
        with pytest.raises(IndexOutOfRangeError, match="Column index 4 outside 1..3"):
            tablekit.get_cell(frame, Optional[int], 1, 4)
        with pytest.raises(IndexOutOfRangeError):
            tablekit.get_column(frame, Optional[int], 4)


class TestArrowSource:
    """pyarrow Tables satisfy the contract through a registered adapter."""

    def test_schema_and_columns(self):
        table = pa.table({"a": [1, 2], "b": ["x", None]})
        assert tablekit.schema(table) == Schema(("a", "b"), (Optional[int], Optional[str]))
        assert tablekit.columns(table).to_dict() == {"a": [1, 2], "b": ["x", None]}

    def test_rows(self):
        table = pa.table({"a": [1, 2], "b": [0.5, 1.5]})
        assert list(tablekit.rows(table)) == [(1, 0.5), (2, 1.5)]

    def test_out_of_range_cells(self):
        table = pa.table({"a": [1, 2], "b": ["x", "y"]})
        assert tablekit.get_cell(table, Optional[str], 2, 2) == "y"
        with pytest.raises(IndexOutOfRangeError, match="Row 3 outside 1..2") as exc:
            tablekit.get_cell(table, Optional[str], 3, 2)
        assert exc.value.column == "b"
        with pytest.raises(IndexOutOfRangeError, match="Column index 3 outside 1..2"):
            tablekit.get_cell(table, Optional[int], 1, 3)
        with pytest.raises(IndexOutOfRangeError):
            tablekit.get_column(table, Optional[int], 3)


class TestFrameSinks:
    """to_polars / to_arrow accept any table."""

    def test_to_polars_from_cell_source(self, ab_grid):
        df = to_polars(ab_grid)
        assert df.columns == ["a", "b"]
        assert df.schema["a"] == pl.Int64
        assert df.schema["b"] == pl.String
        assert df["a"].to_list() == [1, 2, 3]

    def test_to_polars_empty_keeps_dtypes(self, empty_grid):
        df = to_polars(empty_grid)
        assert df.height == 0
        assert df.schema["a"] == pl.Int64

    def test_to_polars_from_records(self):
        df = to_polars([{"a": 1}, {"a": 2}])
        assert df["a"].to_list() == [1, 2]

    def test_to_polars_passes_frames_through(self, frame):
        assert to_polars(frame) is frame

    def test_to_arrow_from_cell_source(self, ab_grid):
        table = to_arrow(ab_grid)
        assert table.schema.names == ["a", "b"]
        assert table.schema.field("a").type == pa.int64()
        assert table.column("b").to_pylist() == ["x", "y", "z"]

    def test_polars_to_arrow_round_trip(self, frame):
        table = to_arrow(frame)
        assert table.column("name").to_pylist() == ["a", "b", None]
        back = to_polars(table)
        assert back["id"].to_list() == [1, 2, 3]
        assert back["day"].to_list() == frame["day"].to_list()

    def test_cell_grid_to_frames(self):
        sch = Schema(("v",), (float,))
        grid = CellGrid(sch, [(0.5,), (1.5,)])
        assert to_polars(grid)["v"].to_list() == [0.5, 1.5]
        assert to_arrow(grid).column("v").to_pylist() == [0.5, 1.5]
