from typing import Any, Dict, List, Sequence, Tuple

import pytest

from tablekit import (
    IndexOutOfRangeError,
    Schema,
    TableSource,
    register_source,
    reset_settings,
)

_ENV_VARS = (
    "TABLEKIT_CONFIG",
    "TABLEKIT_CHECK_TYPES",
    "TABLEKIT_STRICT_PASSTHROUGH",
    "TABLEKIT_LOG_LEVEL",
)


# ---------- test doubles ----------


def _grid_done(grid: "CellGrid", row: int) -> bool:
    grid.done_calls.append(row)
    return row > len(grid.data)


@register_source(cells=True)
class CellGrid(TableSource):
    """Cell-only source over a list of row tuples; records every accessor call."""

    def __init__(self, schema: Schema, data: Sequence[Tuple[Any, ...]]):
        self._schema = schema
        self.data = list(data)
        self.cell_calls: List[Tuple[int, int]] = []
        self.done_calls: List[int] = []

    def schema(self) -> Schema:
        return self._schema

    def get_cell(self, type_, row, col):
        self.cell_calls.append((row, col))
        if not 1 <= row <= len(self.data):
            raise IndexOutOfRangeError(f"no row {row}", source_type=CellGrid, row=row)
        return self.data[row - 1][col - 1]

    @classmethod
    def is_done_function(cls):
        return _grid_done


@register_source(columns=True)
class ColumnStore(TableSource):
    """Column-only source over a dict of lists; records get_column calls."""

    def __init__(self, schema: Schema, data: Dict[str, List[Any]]):
        self._schema = schema
        self.data = data
        self.column_calls: List[Tuple[Any, int]] = []

    def schema(self) -> Schema:
        return self._schema

    def get_column(self, type_, col):
        self.column_calls.append((type_, col))
        return self.data[self._schema.name_of(col)]


@register_source(cells=True, columns=True)
class DisagreeingSource(TableSource):
    """Declares both capabilities; cells and columns return different values."""

    def __init__(self):
        self.cell_calls: List[Tuple[int, int]] = []
        self.column_calls: List[int] = []

    def schema(self) -> Schema:
        return Schema(("a",), (int,))

    def get_cell(self, type_, row, col):
        self.cell_calls.append((row, col))
        return row

    def get_column(self, type_, col):
        self.column_calls.append(col)
        return [10, 20]

    @classmethod
    def is_done_function(cls):
        return lambda src, row: row > 2


@register_source(cells=True)
class NoGetCell:
    """Declares cells but never implements get_cell."""

    def schema(self) -> Schema:
        return Schema(("a",), (int,))

    @classmethod
    def is_done_function(cls):
        return lambda src, row: row > 1


@register_source(cells=True)
class NoSchema:
    """Declares cells but has no schema."""

    def get_cell(self, type_, row, col):
        return 1

    @classmethod
    def is_done_function(cls):
        return lambda src, row: row > 1


@register_source(cells=True)
class NoIsDone(TableSource):
    """Declares cells, inherits the unimplemented is_done_function."""

    def schema(self) -> Schema:
        return Schema(("a",), (int,))

    def get_cell(self, type_, row, col):
        return 1


class Plain:
    """Declares nothing."""


# ---------- fixtures ----------


@pytest.fixture(autouse=True)
def _clean_settings(monkeypatch):
    for var in _ENV_VARS:
        monkeypatch.delenv(var, raising=False)
    reset_settings()
    yield
    reset_settings()


@pytest.fixture
def ab_schema() -> Schema:
    return Schema(("a", "b"), (int, str))


@pytest.fixture
def ab_grid(ab_schema) -> CellGrid:
    """(a: int, b: str) with rows (1, x), (2, y), (3, z)."""
    return CellGrid(ab_schema, [(1, "x"), (2, "y"), (3, "z")])


@pytest.fixture
def empty_grid(ab_schema) -> CellGrid:
    return CellGrid(ab_schema, [])
