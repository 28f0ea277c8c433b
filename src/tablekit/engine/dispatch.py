from __future__ import annotations

"""
Public entry points: schema(), rows(), columns().

Dispatch policy (capabilities are re-read on every call):

  rows(x):
    - CELLS declared   -> RowIterator over get_cell / is_done_function
    - otherwise        -> x unchanged (x is assumed to iterate rows already)

  columns(x):
    - COLUMNS declared -> one get_column call per schema column
    - CELLS declared   -> drain a RowIterator into columns
    - otherwise        -> x unchanged (x is assumed to be a column mapping)

COLUMNS wins over CELLS: a source declaring both is never read cell by cell
by ``columns``.

The pass-through branches trust the caller by default. With the
``strict_passthrough`` setting they check the shape first and raise
NotATableError on mismatch.
"""

from collections.abc import Iterable, Mapping, Sized
from typing import Any, Optional

from tablekit.config.settings import get_settings
from tablekit.engine.materializer import materialize_direct, materialize_rows
from tablekit.engine.row_iterator import RowIterator
from tablekit.errors import NotATableError
from tablekit.logging import get_logger
from tablekit.sources.base import SourceAdapter
from tablekit.sources.capabilities import SourceCapabilities
from tablekit.sources.registry import adapter_for, is_done_function
from tablekit.types import Schema

_logger = get_logger(__name__)


def _adapter(source_type: type) -> SourceAdapter:
    return adapter_for(source_type) or SourceAdapter(source_type)


def schema(source: Any) -> Schema:
    """
    Schema of ``source``.

    Raises:
        MissingSchemaError: If the source type does not implement ``schema``
    """
    return _adapter(type(source)).schema(source)


def rows(source: Any, *, check_types: Optional[bool] = None) -> Any:
    """
    Row iterator over ``source``.

    Returns a lazy ``RowIterator`` for cell-producing sources, otherwise the
    source itself.

    Args:
        source: Any table
        check_types: Override the ``check_types`` setting for this iterator
    """
    source_type = type(source)
    adapter = _adapter(source_type)
    if adapter.capabilities & SourceCapabilities.CELLS:
        _logger.debug("rows(%s): synthesizing rows from cells", source_type.__qualname__)
        return RowIterator(
            source,
            is_done_function(source_type),
            adapter=adapter,
            check_types=check_types,
        )

    _logger.debug("rows(%s): no capability declared, passing through", source_type.__qualname__)
    if get_settings().strict_passthrough:
        _check_row_iterable(source)
    return source


def columns(source: Any, *, check_types: Optional[bool] = None) -> Any:
    """
    Column collection of ``source``.

    Returns a fully materialized ``ColumnTable`` for column- or cell-producing
    sources, otherwise the source itself.

    Args:
        source: Any table
        check_types: Override the ``check_types`` setting for this call
    """
    source_type = type(source)
    adapter = _adapter(source_type)
    caps = adapter.capabilities

    if caps & SourceCapabilities.COLUMNS:
        _logger.debug("columns(%s): direct column extraction", source_type.__qualname__)
        return materialize_direct(source, adapter.schema(source), adapter, check_types=check_types)

    if caps & SourceCapabilities.CELLS:
        _logger.debug("columns(%s): materializing from rows", source_type.__qualname__)
        it = RowIterator(
            source,
            is_done_function(source_type),
            adapter=adapter,
            check_types=check_types,
        )
        return materialize_rows(it)

    _logger.debug(
        "columns(%s): no capability declared, passing through", source_type.__qualname__
    )
    if get_settings().strict_passthrough:
        _check_column_mapping(source)
    return source


# ---------------------------------------------------------------------------
# Strict pass-through checks
# ---------------------------------------------------------------------------


def _check_row_iterable(source: Any) -> None:
    if isinstance(source, (str, bytes, Mapping)) or not isinstance(source, Iterable):
        raise NotATableError(source, "an iterable of rows")


def _check_column_mapping(source: Any) -> None:
    if not isinstance(source, Mapping):
        raise NotATableError(source, "a mapping of columns")
    lengths = set()
    for name, col in source.items():
        if not isinstance(name, str):
            raise NotATableError(source, "a mapping of columns", f"column key {name!r} is not a str")
        if isinstance(col, (str, bytes)) or not isinstance(col, Sized):
            raise NotATableError(
                source, "a mapping of columns", f"column '{name}' is not a sequence"
            )
        lengths.add(len(col))
    if len(lengths) > 1:
        raise NotATableError(source, "a mapping of columns", "columns have different lengths")
