from __future__ import annotations

"""
RowIterator: typed rows synthesized from cell access.

Given a source that can produce individual cells, pull one row at a time:

    Ready(1) --is_done(source, 1)?--> Exhausted
        |
        +-- get_cell(source, T_k, 1, k) for k = 1..N  -> Row -> Ready(2) -> ...

Rules:
  - Columns are fetched in schema order; the Row fields use the same order.
  - Exhausted is terminal; the iterator is forward-only and never restarts.
  - A failing accessor (or a value of the wrong type) raises out of
    ``__next__`` immediately. No partial row is produced and the row index is
    not advanced.
  - One iterator must not be pulled from several threads at once, and a
    positional source should have at most one live iterator.
"""

from typing import Any, Iterator, Optional

from tablekit.config.settings import get_settings
from tablekit.errors import TypeMismatchError
from tablekit.sources.base import IsDone, SourceAdapter
from tablekit.sources.registry import adapter_for
from tablekit.types import Row, Schema, conforms


class RowIterator(Iterator[Row]):
    """
    Lazy iterator of ``schema.row_type`` records over a cell-producing source.

    Args:
        source: The source to read
        is_done: Completion predicate ``(source, row) -> bool``
        schema: Schema of the source (queried from the adapter when omitted)
        adapter: Accessors to use (looked up from the registry when omitted)
        check_types: Validate each cell against its declared type
            (defaults to the ``check_types`` setting)
    """

    def __init__(
        self,
        source: Any,
        is_done: IsDone,
        schema: Optional[Schema] = None,
        adapter: Optional[SourceAdapter] = None,
        check_types: Optional[bool] = None,
    ):
        if adapter is None:
            adapter = adapter_for(type(source)) or SourceAdapter(type(source))
        if schema is None:
            schema = adapter.schema(source)
        if check_types is None:
            check_types = get_settings().check_types

        self.source = source
        self.schema = schema
        self.row_type = schema.row_type
        self._is_done = is_done
        self._adapter = adapter
        self.check_types = check_types
        self._row = 1
        self._exhausted = False

    @property
    def row_index(self) -> int:
        """1-based index of the next row to be produced."""
        return self._row

    @property
    def exhausted(self) -> bool:
        return self._exhausted

    def __iter__(self) -> "RowIterator":
        return self

    def __next__(self) -> Row:
        if self._exhausted:
            raise StopIteration
        row = self._row
        if self._is_done(self.source, row):
            self._exhausted = True
            raise StopIteration

        get_cell = self._adapter.get_cell
        values = []
        for col, (name, tp) in enumerate(self.schema, start=1):
            value = get_cell(self.source, tp, row, col)
            if self.check_types and not conforms(value, tp):
                raise TypeMismatchError(
                    tp, value, source_type=type(self.source), column=name, row=row
                )
            values.append(value)

        self._row = row + 1
        return self.row_type(*values)

    def __repr__(self) -> str:
        state = "exhausted" if self._exhausted else f"at row {self._row}"
        return f"RowIterator({type(self.source).__qualname__}, {self.schema!r}, {state})"
