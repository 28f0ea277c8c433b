"""
Core table types: Schema, Row, Column and ColumnTable.

- ``Schema``: ordered (name, type) pairs. The order of names is the order of
  columns everywhere: cell addressing, row fields, column enumeration.
- ``Row``: an immutable record with one value per schema column, accessible
  by position, by attribute (``row.a``) or by name (``row["a"]``). Each schema
  gets its own Row subclass (``Schema.row_type``) carrying the column types.
- ``Column``: an ordered, indexable, appendable sequence tagged with the type
  of its values.
- ``ColumnTable``: an ordered mapping of column name -> Column whose columns all
  have the same length.
"""

from __future__ import annotations

import keyword
import types as _pytypes
from dataclasses import dataclass
from operator import itemgetter
from typing import (
    Annotated,
    Any,
    Dict,
    Iterable,
    Iterator,
    List,
    Literal,
    Mapping,
    Optional,
    Sequence,
    Tuple,
    TypeVar,
    Union,
    get_args,
    get_origin,
)

from tablekit.errors import IndexOutOfRangeError, SchemaError, ShapeError, TypeMismatchError

# =============================================================================
# Type conformance
# =============================================================================


def conforms(value: Any, tp: Any) -> bool:
    """
    Return True if ``value`` is acceptable for a column declared as ``tp``.

    Supports plain classes, ``Any``/``object``, ``None``, ``Optional``/``Union``
    (including ``X | Y``), ``Literal``, ``Annotated`` and parameterized generics
    (checked against their origin class only, e.g. ``list[int]`` -> ``list``).
    """
    if tp is Any or tp is object:
        return True
    if tp is None or tp is type(None):
        return value is None
    if isinstance(tp, TypeVar):
        return True

    origin = get_origin(tp)
    if origin is Union or origin is _pytypes.UnionType:
        return any(conforms(value, arg) for arg in get_args(tp))
    if origin is Literal:
        return value in get_args(tp)
    if origin is Annotated:
        return conforms(value, get_args(tp)[0])
    if origin is not None:
        tp = origin

    try:
        return isinstance(value, tp)
    except TypeError:
        # Not a runtime-checkable construct (NewType, ForwardRef, ...)
        return True


def type_label(tp: Any) -> str:
    if isinstance(tp, type):
        return tp.__name__
    return repr(tp).replace("typing.", "")


# =============================================================================
# Row
# =============================================================================


class Row(tuple):
    """
    Base class for schema-typed records.

    Subclasses are generated per schema by ``make_row_type``; don't
    instantiate ``Row`` directly.
    """

    __slots__ = ()

    _fields: Tuple[str, ...] = ()
    _types: Tuple[Any, ...] = ()

    def __new__(cls, *values: Any) -> "Row":
        if len(values) != len(cls._fields):
            raise TypeError(
                f"{cls.__name__} takes {len(cls._fields)} values, got {len(values)}"
            )
        return tuple.__new__(cls, values)

    def __getitem__(self, key: Any) -> Any:
        if isinstance(key, str):
            try:
                key = self._fields.index(key)
            except ValueError:
                raise KeyError(key) from None
        return tuple.__getitem__(self, key)

    def __repr__(self) -> str:
        body = ", ".join(f"{name}={value!r}" for name, value in zip(self._fields, self))
        return f"{type(self).__name__}({body})"

    def keys(self) -> Tuple[str, ...]:
        return self._fields

    def _asdict(self) -> Dict[str, Any]:
        return dict(zip(self._fields, self))


def _is_attribute_name(name: str) -> bool:
    return name.isidentifier() and not keyword.iskeyword(name) and not name.startswith("_")


_ROW_TYPES: Dict[Tuple[Tuple[str, ...], Tuple[Any, ...]], type] = {}


def make_row_type(names: Sequence[str], types: Sequence[Any]) -> type:
    """
    Build (or fetch from cache) the Row subclass for the given columns.

    Column names that are valid identifiers become read-only attributes; every
    column is reachable through ``row["name"]``.
    """
    key = (tuple(names), tuple(types))
    try:
        cached = _ROW_TYPES.get(key)
    except TypeError:
        # Unhashable type annotations; build uncached.
        cached, key = None, None
    if cached is not None:
        return cached

    namespace: Dict[str, Any] = {
        "__slots__": (),
        "_fields": tuple(names),
        "_types": tuple(types),
        "__annotations__": dict(zip(names, types)),
    }
    for i, name in enumerate(names):
        if _is_attribute_name(name):
            namespace[name] = property(itemgetter(i), doc=f"Column {i + 1}: {name}")

    row_type = type("Row", (Row,), namespace)
    if key is not None:
        _ROW_TYPES[key] = row_type
    return row_type


# =============================================================================
# Schema
# =============================================================================


@dataclass(frozen=True)
class Schema:
    """
    Ordered column names with one declared type per column.

    Example:
        >>> sch = Schema(("a", "b"), (int, str))
        >>> sch.index_of("b")
        2
        >>> sch.row_type(1, "x")
        Row(a=1, b='x')
    """

    names: Tuple[str, ...]
    types: Tuple[Any, ...]

    def __post_init__(self) -> None:
        names = tuple(self.names)
        types = tuple(self.types)
        object.__setattr__(self, "names", names)
        object.__setattr__(self, "types", types)

        if len(names) != len(types):
            raise SchemaError(
                f"Schema has {len(names)} names but {len(types)} types"
            )
        for name in names:
            if not isinstance(name, str):
                raise SchemaError(
                    f"Column names must be str, got {type(name).__name__}: {name!r}"
                )
        seen = set()
        dupes = []
        for name in names:
            if name in seen and name not in dupes:
                dupes.append(name)
            seen.add(name)
        if dupes:
            raise SchemaError(f"Duplicate column names: {', '.join(dupes)}")

    # ------------------------------ Constructors ------------------------------

    @classmethod
    def from_pairs(cls, pairs: Iterable[Tuple[str, Any]]) -> "Schema":
        pairs = list(pairs)
        return cls(tuple(p[0] for p in pairs), tuple(p[1] for p in pairs))

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, Any]) -> "Schema":
        return cls(tuple(mapping.keys()), tuple(mapping.values()))

    # ------------------------------ Queries -----------------------------------

    def __len__(self) -> int:
        return len(self.names)

    def __iter__(self) -> Iterator[Tuple[str, Any]]:
        return iter(zip(self.names, self.types))

    def __repr__(self) -> str:
        cols = ", ".join(f"{n}: {type_label(t)}" for n, t in self)
        return f"Schema({cols})"

    @property
    def row_type(self) -> type:
        """The Row subclass describing one record of this schema."""
        return make_row_type(self.names, self.types)

    def index_of(self, name: str) -> int:
        """1-based column index of ``name``."""
        try:
            return self.names.index(name) + 1
        except ValueError:
            raise KeyError(f"Column '{name}' not in schema ({', '.join(self.names)})") from None

    def _check_col(self, col: int) -> int:
        if not isinstance(col, int) or not 1 <= col <= len(self.names):
            raise IndexOutOfRangeError(
                f"Column index {col!r} outside 1..{len(self.names)}", column=col
            )
        return col - 1

    def column_type(self, col: int) -> Any:
        """Declared type of the 1-based column ``col``."""
        return self.types[self._check_col(col)]

    def name_of(self, col: int) -> str:
        """Name of the 1-based column ``col``."""
        return self.names[self._check_col(col)]

    def to_dict(self) -> Dict[str, str]:
        return {name: type_label(tp) for name, tp in self}


# =============================================================================
# Columns
# =============================================================================


class Column(list):
    """
    A growable sequence of values of one declared type.

    Every way of adding values (``append``, ``extend``, ``insert``, ``+=``,
    item and slice assignment) rejects values that do not conform to
    ``type`` unless ``check_types`` is False.
    """

    def __init__(
        self,
        type_: Any = Any,
        values: Iterable[Any] = (),
        *,
        name: Optional[str] = None,
        check_types: bool = True,
    ):
        super().__init__()
        self.type = type_
        self.name = name
        self.check_types = check_types
        self.extend(values)

    def _check(self, value: Any, row: int) -> None:
        if self.check_types and not conforms(value, self.type):
            raise TypeMismatchError(self.type, value, column=self.name, row=row)

    def append(self, value: Any) -> None:
        self._check(value, len(self) + 1)
        super().append(value)

    def extend(self, values: Iterable[Any]) -> None:
        if not self.check_types:
            super().extend(values)
            return
        for value in values:
            self.append(value)

    def insert(self, index: int, value: Any) -> None:
        size = len(self)
        pos = index + size if index < 0 else index
        self._check(value, min(max(pos, 0), size) + 1)
        super().insert(index, value)

    def __setitem__(self, index: Any, value: Any) -> None:
        if isinstance(index, slice):
            value = list(value)
            start = index.indices(len(self))[0]
            for offset, item in enumerate(value):
                self._check(item, start + offset + 1)
        else:
            self._check(value, (index + len(self) if index < 0 else index) + 1)
        super().__setitem__(index, value)

    def __iadd__(self, values: Iterable[Any]) -> "Column":
        self.extend(values)
        return self

    def copy(self) -> "Column":
        """Copy with the same type, name and checking, without re-checking values."""
        out = Column(self.type, name=self.name, check_types=False)
        list.extend(out, self)
        out.check_types = self.check_types
        return out

    def __reduce__(self) -> Any:
        return (_restore_column, (self.type, list(self), self.name, self.check_types))

    def __repr__(self) -> str:
        return f"Column[{type_label(self.type)}]({list.__repr__(self)})"


def _restore_column(type_: Any, values: List[Any], name: Optional[str], check_types: bool) -> Column:
    col = Column(type_, values, name=name, check_types=False)
    col.check_types = check_types
    return col


class ColumnTable(Mapping[str, Column]):
    """
    Ordered, read-only mapping of column name -> Column.

    Args:
        columns: Mapping of column name to a sequence of values. Every
            sequence is copied into a typed ``Column`` owned by the table.
        schema: Declared schema. When omitted, types come from existing
            ``Column`` objects, or ``Any`` for plain sequences.
        check_types: Validate values against the declared types.

    Raises:
        SchemaError: If ``schema`` names do not match the mapping keys
        ShapeError: If the columns do not all have the same length
    """

    def __init__(
        self,
        columns: Mapping[str, Sequence[Any]],
        schema: Optional[Schema] = None,
        *,
        check_types: bool = True,
    ):
        if schema is None:
            schema = Schema(
                tuple(columns.keys()),
                tuple(getattr(col, "type", Any) if isinstance(col, Column) else Any
                      for col in columns.values()),
            )
        elif tuple(columns.keys()) != schema.names:
            raise SchemaError(
                f"Column names {list(columns.keys())} do not match schema {list(schema.names)}"
            )

        data: Dict[str, Column] = {}
        for name, tp in schema:
            values = columns[name]
            if isinstance(values, Column) and values.type == tp and (
                values.check_types or not check_types
            ):
                # Values were already checked against tp
                col = values.copy()
                col.name = name
                col.check_types = check_types
                data[name] = col
            else:
                data[name] = Column(tp, values, name=name, check_types=check_types)

        lengths = {name: len(col) for name, col in data.items()}
        if len(set(lengths.values())) > 1:
            detail = ", ".join(f"{n}={l}" for n, l in lengths.items())
            raise ShapeError(f"Columns have different lengths: {detail}")

        self._schema = schema
        self._columns = data

    @property
    def schema(self) -> Schema:
        return self._schema

    @property
    def nrows(self) -> int:
        for col in self._columns.values():
            return len(col)
        return 0

    def __getitem__(self, name: str) -> Column:
        return self._columns[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._columns)

    def __len__(self) -> int:
        return len(self._columns)

    def __getattr__(self, name: str) -> Column:
        if name.startswith("_"):
            raise AttributeError(name)
        try:
            return self._columns[name]
        except KeyError:
            raise AttributeError(f"ColumnTable has no column '{name}'") from None

    def __eq__(self, other: Any) -> bool:
        if isinstance(other, Mapping):
            return list(self.keys()) == list(other.keys()) and all(
                list(self[k]) == list(other[k]) for k in self
            )
        return NotImplemented

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        cols = ", ".join(f"{n}: {type_label(c.type)}" for n, c in self._columns.items())
        return f"ColumnTable({self.nrows} rows; {cols})"

    def to_dict(self) -> Dict[str, List[Any]]:
        """Plain ``{name: list}`` copy of the data."""
        return {name: list(col) for name, col in self._columns.items()}
