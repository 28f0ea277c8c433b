from __future__ import annotations

"""
Plain-Python tables that satisfy the contract themselves.

  - RowTable:    a list of records (named tuples, Rows or mappings), CELLS
  - ColumnTable: tablekit's own column mapping, COLUMNS | CELLS

These are what ``rowtable()`` / ``columntable()`` produce, so any table can be
converted into them and back again.
"""

from collections.abc import Mapping, Sequence
from typing import Any, Iterable, Iterator, List, Optional, Tuple

from tablekit.errors import IndexOutOfRangeError
from tablekit.sources.base import IsDone, SourceAdapter, TableSource
from tablekit.sources.capabilities import SC
from tablekit.sources.registry import register_adapter, register_source
from tablekit.types import ColumnTable, Schema


def _record_names(record: Any) -> Tuple[str, ...]:
    if isinstance(record, Mapping):
        return tuple(record.keys())
    fields = getattr(record, "_fields", None)
    if fields is None:
        raise TypeError(
            f"Cannot name the columns of a {type(record).__name__} record; "
            "use named tuples or mappings, or pass a schema"
        )
    return tuple(fields)


def _column_values(records: Sequence[Any], name: str, index: int) -> Iterator[Any]:
    # Records lacking the column are skipped; get_cell reports them on access
    for record in records:
        if isinstance(record, Mapping):
            if name in record:
                yield record[name]
        elif len(record) > index:
            yield record[index]


def _value_type(values: Iterable[Any]) -> Any:
    seen: List[type] = []
    nullable = False
    for value in values:
        if value is None:
            nullable = True
        elif type(value) not in seen:
            seen.append(type(value))
    if len(seen) != 1:
        return Any
    return Optional[seen[0]] if nullable else seen[0]


def infer_schema(records: Sequence[Any], infer_types: bool = True) -> Schema:
    """
    Schema of a list of records, names taken from its first record.

    Names come from mapping keys or named-tuple fields. Types come from the
    record's annotations when it has them (typing.NamedTuple, Row), else from
    the values of every record: one value type gives that type, wrapped in
    ``Optional`` when some values are None; mixed value types give ``Any``.
    With ``infer_types=False`` every column is ``Any``.
    """
    if not records:
        return Schema((), ())
    first = records[0]
    names = _record_names(first)
    if not infer_types:
        return Schema(names, (Any,) * len(names))

    declared = getattr(first, "_types", None)
    if declared is None:
        hints = getattr(type(first), "__annotations__", {})
        if hints and all(n in hints for n in names):
            declared = tuple(hints[n] for n in names)
    if declared is None:
        declared = tuple(
            _value_type(_column_values(records, name, i)) for i, name in enumerate(names)
        )
    return Schema(names, tuple(declared))


@register_source(cells=True)
class RowTable(TableSource, Sequence):
    """
    A list of records exposed through cell access.

    Args:
        records: Named tuples, Rows or mappings, one per row
        schema: Declared schema; inferred from the records when omitted

    Example:
        >>> t = RowTable([{"a": 1, "b": "x"}, {"a": 2, "b": "y"}])
        >>> columns(t).to_dict()
        {'a': [1, 2], 'b': ['x', 'y']}
    """

    def __init__(self, records: Iterable[Any], schema: Optional[Schema] = None):
        self.records: List[Any] = list(records)
        self._schema = schema if schema is not None else infer_schema(self.records)

    def __getitem__(self, index: Any) -> Any:
        return self.records[index]

    def __len__(self) -> int:
        return len(self.records)

    def __repr__(self) -> str:
        return f"RowTable({len(self.records)} rows; {self._schema!r})"

    def schema(self) -> Schema:
        return self._schema

    def get_cell(self, type_: Any, row: int, col: int) -> Any:
        if not 1 <= row <= len(self.records):
            raise IndexOutOfRangeError(
                f"Row {row} outside 1..{len(self.records)}", source_type=RowTable, row=row
            )
        name = self._schema.name_of(col)
        record = self.records[row - 1]
        if isinstance(record, Mapping):
            try:
                return record[name]
            except KeyError:
                raise IndexOutOfRangeError(
                    f"Record at row {row} has no column '{name}'",
                    source_type=RowTable,
                    column=name,
                    row=row,
                ) from None
        if len(record) < col:
            raise IndexOutOfRangeError(
                f"Record at row {row} has {len(record)} values, column {col} requested",
                source_type=RowTable,
                column=col,
                row=row,
            )
        return record[col - 1]

    @classmethod
    def is_done_function(cls) -> IsDone:
        return _rowtable_done


def _rowtable_done(table: RowTable, row: int) -> bool:
    return row > len(table.records)


class ColumnTableAdapter(SourceAdapter):
    """Lets a ColumnTable act as a source for both columns and rows."""

    capabilities = SC.COLUMNS | SC.CELLS

    def schema(self, source: ColumnTable) -> Schema:
        return source.schema

    def get_column(self, source: ColumnTable, type_: Any, col: int) -> Sequence[Any]:
        return source[source.schema.name_of(col)]

    def get_cell(self, source: ColumnTable, type_: Any, row: int, col: int) -> Any:
        column = source[source.schema.name_of(col)]
        if not 1 <= row <= len(column):
            raise IndexOutOfRangeError(
                f"Row {row} outside 1..{len(column)}",
                source_type=ColumnTable,
                column=column.name,
                row=row,
            )
        return column[row - 1]

    def is_done_function(self, source_type: type) -> IsDone:
        return _columntable_done


def _columntable_done(table: ColumnTable, row: int) -> bool:
    return row > table.nrows


register_adapter(ColumnTable, ColumnTableAdapter(ColumnTable))
