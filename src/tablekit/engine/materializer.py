from __future__ import annotations

from typing import Any, Dict, Optional

from tablekit.config.settings import get_settings
from tablekit.engine.row_iterator import RowIterator
from tablekit.errors import TablesError
from tablekit.logging import get_logger, log_exception
from tablekit.sources.base import SourceAdapter
from tablekit.types import Column, ColumnTable, Schema

_logger = get_logger(__name__)


def materialize_direct(
    source: Any,
    schema: Schema,
    adapter: SourceAdapter,
    check_types: Optional[bool] = None,
) -> ColumnTable:
    """
    Build columns with one ``get_column`` call per schema column, in schema order.

    Returned sequences are copied into typed ``Column`` objects; a value that
    does not conform to its declared type raises ``TypeMismatchError``.
    """
    if check_types is None:
        check_types = get_settings().check_types

    cols: Dict[str, Column] = {}
    for col, (name, tp) in enumerate(schema, start=1):
        values = adapter.get_column(source, tp, col)
        cols[name] = Column(tp, values, name=name, check_types=check_types)
    return ColumnTable(cols, schema, check_types=check_types)


def materialize_rows(rows: RowIterator) -> ColumnTable:
    """
    Drain ``rows`` into one Column per schema column.

    Cell values were already checked by the iterator, so appends here are
    unchecked. If iteration fails the partially filled columns are dropped and
    the error propagates.
    """
    schema = rows.schema
    cols: Dict[str, Column] = {
        name: Column(tp, name=name, check_types=False) for name, tp in schema
    }
    # Row fields are in schema order, same as `cols`
    targets = list(cols.values())
    try:
        for row in rows:
            for target, value in zip(targets, row):
                target.append(value)
    except TablesError as e:
        log_exception(
            _logger,
            f"Column materialization of {type(rows.source).__qualname__} aborted "
            f"at row {rows.row_index}",
            e,
        )
        raise
    for target in targets:
        target.check_types = rows.check_types
    return ColumnTable(cols, schema, check_types=rows.check_types)
