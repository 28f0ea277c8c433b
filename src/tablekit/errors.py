"""
Error types raised by tablekit.

Every error is a contract violation by a source (or by a caller handing the
wrong thing to a sink). None of them are recovered inside the core: they
surface at the exact point the violation was detected, during dispatch, a
cell fetch, or materialization.

Each error also subclasses the closest builtin (``NotImplementedError``,
``TypeError``, ``IndexError``, ``ValueError``) so generic handlers keep working.
"""

from __future__ import annotations

from typing import Any, Dict, Optional


def _type_name(obj: Any) -> str:
    if obj is None:
        return "None"
    if isinstance(obj, type):
        return obj.__qualname__
    if isinstance(obj, str):
        return obj
    return type(obj).__qualname__


class TablesError(Exception):
    """
    Base class for all tablekit errors.

    Attributes:
        message: Human-readable description
        source_type: Name of the offending source type, when known
        column: 1-based column index or column name, when relevant
        row: 1-based row index, when relevant
    """

    code = "tables_error"

    def __init__(
        self,
        message: str,
        *,
        source_type: Any = None,
        column: Any = None,
        row: Optional[int] = None,
    ):
        self.message = message
        self.source_type = _type_name(source_type) if source_type is not None else None
        self.column = column
        self.row = row
        super().__init__(message)

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {"code": self.code, "message": self.message}
        if self.source_type is not None:
            out["source_type"] = self.source_type
        if self.column is not None:
            out["column"] = self.column
        if self.row is not None:
            out["row"] = self.row
        return out


class MissingSchemaError(TablesError, NotImplementedError):
    """A capability is declared but the source type offers no ``schema``."""

    code = "missing_schema"

    def __init__(self, source_type: Any):
        name = _type_name(source_type)
        super().__init__(
            f"Type {name} declares a table capability but does not implement `schema`",
            source_type=source_type,
        )


class MissingAccessorError(TablesError, NotImplementedError):
    """A capability is declared but a required accessor is not implemented."""

    code = "missing_accessor"

    def __init__(self, source_type: Any, accessor: str):
        name = _type_name(source_type)
        self.accessor = accessor
        super().__init__(
            f"Type {name} declares a table capability but does not implement `{accessor}`",
            source_type=source_type,
        )

    def to_dict(self) -> Dict[str, Any]:
        out = super().to_dict()
        out["accessor"] = self.accessor
        return out


class TypeMismatchError(TablesError, TypeError):
    """An accessor returned a value that does not conform to the declared column type."""

    code = "type_mismatch"

    def __init__(
        self,
        expected: Any,
        value: Any,
        *,
        source_type: Any = None,
        column: Any = None,
        row: Optional[int] = None,
    ):
        self.expected = expected
        self.actual = type(value)
        where = []
        if row is not None:
            where.append(f"row {row}")
        if column is not None:
            where.append(f"column {column!r}")
        location = f" at {', '.join(where)}" if where else ""
        super().__init__(
            f"Expected {_describe_type(expected)}{location}, "
            f"got {type(value).__name__}: {value!r}",
            source_type=source_type,
            column=column,
            row=row,
        )

    def to_dict(self) -> Dict[str, Any]:
        out = super().to_dict()
        out["expected"] = _describe_type(self.expected)
        out["actual"] = self.actual.__name__
        return out


class IndexOutOfRangeError(TablesError, IndexError):
    """A cell or column was requested at a position the source cannot serve."""

    code = "index_out_of_range"

    def __init__(
        self,
        message: str,
        *,
        source_type: Any = None,
        column: Any = None,
        row: Optional[int] = None,
    ):
        super().__init__(message, source_type=source_type, column=column, row=row)


class SchemaError(TablesError, ValueError):
    """A schema could not be constructed (duplicate names, misaligned types...)."""

    code = "invalid_schema"


class ShapeError(TablesError, ValueError):
    """Columns of a column table do not all have the same length."""

    code = "inconsistent_shape"


class NotATableError(TablesError, TypeError):
    """A pass-through source does not have the shape the caller asked for."""

    code = "not_a_table"

    def __init__(self, source: Any, expected: str, detail: Optional[str] = None):
        msg = f"{_type_name(source)} declares no table capability and is not {expected}"
        if detail:
            msg = f"{msg}: {detail}"
        super().__init__(msg, source_type=type(source))


def _describe_type(tp: Any) -> str:
    if isinstance(tp, type):
        return tp.__name__
    return repr(tp).replace("typing.", "")


def format_error(exc: BaseException) -> str:
    """One-line description of an error, tagged with its code for tablekit errors."""
    if isinstance(exc, TablesError):
        return f"[{exc.code}] {exc.message}"
    return f"{type(exc).__name__}: {exc}"


__all__ = [
    "TablesError",
    "MissingSchemaError",
    "MissingAccessorError",
    "TypeMismatchError",
    "IndexOutOfRangeError",
    "SchemaError",
    "ShapeError",
    "NotATableError",
    "format_error",
]
