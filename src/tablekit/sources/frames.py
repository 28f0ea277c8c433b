from __future__ import annotations

"""
Adapters for dataframe libraries: polars DataFrame and pyarrow Table.

Both are registered with CELLS | COLUMNS, so ``columns()`` always extracts
whole columns and ``rows()`` walks cells. Every column of a frame is nullable,
hence the ``Optional[...]`` column types.
"""

from datetime import date, datetime, time, timedelta
from decimal import Decimal
from typing import Any, Optional, Sequence

import polars as pl
import pyarrow as pa

from tablekit.errors import IndexOutOfRangeError
from tablekit.sources.base import IsDone, SourceAdapter
from tablekit.sources.capabilities import SC
from tablekit.sources.registry import register_adapter
from tablekit.types import Schema


# =============================================================================
# polars
# =============================================================================


def polars_python_type(dtype: Any) -> Any:
    """Python type of the values polars returns for ``dtype`` (``Any`` if unknown)."""
    if dtype == pl.Boolean:
        return bool
    if dtype.is_integer():
        return int
    if dtype.is_float():
        return float
    if dtype == pl.String:
        return str
    if dtype == pl.Date:
        return date
    if isinstance(dtype, pl.Datetime):
        return datetime
    if dtype == pl.Time:
        return time
    if isinstance(dtype, pl.Duration):
        return timedelta
    if isinstance(dtype, pl.Decimal):
        return Decimal
    if dtype == pl.Binary:
        return bytes
    if isinstance(dtype, (pl.List, pl.Array)):
        return list
    if isinstance(dtype, pl.Struct):
        return dict
    return Any


def _nullable(tp: Any) -> Any:
    return tp if tp is Any else Optional[tp]


class PolarsAdapter(SourceAdapter):
    capabilities = SC.COLUMNS | SC.CELLS

    def schema(self, source: pl.DataFrame) -> Schema:
        frame_schema = source.schema
        return Schema(
            tuple(frame_schema.keys()),
            tuple(_nullable(polars_python_type(dt)) for dt in frame_schema.values()),
        )

    def _series(self, source: pl.DataFrame, col: int) -> pl.Series:
        if not 1 <= col <= source.width:
            raise IndexOutOfRangeError(
                f"Column index {col} outside 1..{source.width}",
                source_type=pl.DataFrame,
                column=col,
            )
        return source.to_series(col - 1)

    def get_column(self, source: pl.DataFrame, type_: Any, col: int) -> Sequence[Any]:
        return self._series(source, col).to_list()

    def get_cell(self, source: pl.DataFrame, type_: Any, row: int, col: int) -> Any:
        series = self._series(source, col)
        if not 1 <= row <= source.height:
            raise IndexOutOfRangeError(
                f"Row {row} outside 1..{source.height}",
                source_type=pl.DataFrame,
                column=series.name,
                row=row,
            )
        return series[row - 1]

    def is_done_function(self, source_type: type) -> IsDone:
        return _polars_done


def _polars_done(df: pl.DataFrame, row: int) -> bool:
    return row > df.height


# =============================================================================
# pyarrow
# =============================================================================


def arrow_python_type(dtype: pa.DataType) -> Any:
    """Python type of ``.as_py()`` values for arrow ``dtype`` (``Any`` if unknown)."""
    t = pa.types
    if t.is_boolean(dtype):
        return bool
    if t.is_integer(dtype):
        return int
    if t.is_floating(dtype):
        return float
    if t.is_string(dtype) or t.is_large_string(dtype):
        return str
    if t.is_binary(dtype) or t.is_large_binary(dtype) or t.is_fixed_size_binary(dtype):
        return bytes
    if t.is_date(dtype):
        return date
    if t.is_timestamp(dtype):
        return datetime
    if t.is_time(dtype):
        return time
    if t.is_duration(dtype):
        return timedelta
    if t.is_decimal(dtype):
        return Decimal
    if t.is_list(dtype) or t.is_large_list(dtype) or t.is_fixed_size_list(dtype):
        return list
    if t.is_struct(dtype):
        return dict
    return Any


class ArrowAdapter(SourceAdapter):
    capabilities = SC.COLUMNS | SC.CELLS

    def schema(self, source: pa.Table) -> Schema:
        return Schema(
            tuple(source.schema.names),
            tuple(_nullable(arrow_python_type(f.type)) for f in source.schema),
        )

    def _chunked(self, source: pa.Table, col: int) -> pa.ChunkedArray:
        if not 1 <= col <= source.num_columns:
            raise IndexOutOfRangeError(
                f"Column index {col} outside 1..{source.num_columns}",
                source_type=pa.Table,
                column=col,
            )
        return source.column(col - 1)

    def get_column(self, source: pa.Table, type_: Any, col: int) -> Sequence[Any]:
        return self._chunked(source, col).to_pylist()

    def get_cell(self, source: pa.Table, type_: Any, row: int, col: int) -> Any:
        chunked = self._chunked(source, col)
        if not 1 <= row <= source.num_rows:
            raise IndexOutOfRangeError(
                f"Row {row} outside 1..{source.num_rows}",
                source_type=pa.Table,
                column=source.schema.names[col - 1],
                row=row,
            )
        return chunked[row - 1].as_py()

    def is_done_function(self, source_type: type) -> IsDone:
        return _arrow_done


def _arrow_done(table: pa.Table, row: int) -> bool:
    return row > table.num_rows


register_adapter(pl.DataFrame, PolarsAdapter(pl.DataFrame))
register_adapter(pa.Table, ArrowAdapter(pa.Table))
