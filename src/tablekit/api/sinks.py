"""
Sinks: build concrete tables out of any table.

    rowtable(x)    -> list of Rows
    columntable(x) -> ColumnTable
    to_polars(x)   -> polars.DataFrame
    to_arrow(x)    -> pyarrow.Table

Each sink goes through ``rows()``/``columns()`` so it works for any source
that satisfies the contract, including plain lists of records and plain
``{name: list}`` mappings.
"""

from __future__ import annotations

import types
from collections.abc import Mapping
from datetime import date, datetime, time, timedelta
from decimal import Decimal
from typing import Any, Dict, List, Optional, Union, get_args, get_origin

import polars as pl
import pyarrow as pa

from tablekit.engine.dispatch import columns, rows
from tablekit.sources.native import RowTable, infer_schema
from tablekit.sources.registry import produces_cells, produces_columns
from tablekit.types import ColumnTable, Row


def rowtable(source: Any, *, check_types: Optional[bool] = None) -> List[Row]:
    """
    Materialize ``source`` as a list of rows.

    Cell-producing sources yield typed Rows; anything else is assumed to
    iterate rows already and is simply listed.
    """
    return list(rows(source, check_types=check_types))


def columntable(source: Any, *, check_types: Optional[bool] = None) -> ColumnTable:
    """
    Materialize ``source`` as a ColumnTable.

    Sources without a declared capability are handled by shape:
      - a mapping of name -> sequence is wrapped as-is (types: Any)
      - any other iterable is read as records (named tuples or mappings)
    """
    if produces_columns(type(source)) or produces_cells(type(source)):
        return columns(source, check_types=check_types)
    # No capability: the shape decides
    if isinstance(source, Mapping):
        return ColumnTable(source)
    records = list(source)
    return columns(RowTable(records, infer_schema(records, infer_types=False)))


# ---------------------------------------------------------------------------
# Dataframe sinks
# ---------------------------------------------------------------------------

_POLARS_DTYPES: Dict[Any, Any] = {
    bool: pl.Boolean,
    int: pl.Int64,
    float: pl.Float64,
    str: pl.String,
    bytes: pl.Binary,
    date: pl.Date,
    datetime: pl.Datetime,
    time: pl.Time,
    timedelta: pl.Duration,
    Decimal: pl.Decimal,
}

_ARROW_DTYPES: Dict[Any, Any] = {
    bool: pa.bool_(),
    int: pa.int64(),
    float: pa.float64(),
    str: pa.string(),
    bytes: pa.binary(),
    date: pa.date32(),
    datetime: pa.timestamp("us"),
    time: pa.time64("us"),
    timedelta: pa.duration("us"),
}


def _base_type(tp: Any) -> Any:
    """Strip ``Optional[...]`` from a column type."""
    if get_origin(tp) in (Union, types.UnionType):
        args = [a for a in get_args(tp) if a is not type(None)]
        if len(args) == 1:
            return args[0]
    return tp


def to_polars(source: Any) -> pl.DataFrame:
    """Build a polars DataFrame from the columns of ``source``."""
    if isinstance(source, pl.DataFrame):
        return source
    table = columntable(source)
    series = []
    for name, col in table.items():
        series.append(pl.Series(name, list(col), dtype=_POLARS_DTYPES.get(_base_type(col.type))))
    return pl.DataFrame(series)


def to_arrow(source: Any) -> pa.Table:
    """Build a pyarrow Table from the columns of ``source``."""
    if isinstance(source, pa.Table):
        return source
    table = columntable(source)
    arrays = {}
    for name, col in table.items():
        arrays[name] = pa.array(list(col), type=_ARROW_DTYPES.get(_base_type(col.type)))
    return pa.table(arrays)
