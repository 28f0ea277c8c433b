from __future__ import annotations

"""
Primitive accessor interface.

A source opts into the table contract by declaring capabilities and
implementing the matching accessors:

  - CELLS   -> schema(), get_cell(type_, row, col), is_done_function()
  - COLUMNS -> schema(), get_column(type_, col)

Rows and columns are 1-based. ``is_done_function`` is per type: it returns a
``(source, row) -> bool`` predicate that is True once ``row`` is past the last
row of ``source``.

The core talks to sources exclusively through a ``SourceAdapter``. Types you
own usually subclass ``TableSource`` (or just define the methods) and use the
``@register_source`` decorator, which wraps them in a ``MethodAdapter``.
Types you don't own (third-party frames) get a hand-written adapter passed to
``register_adapter``.
"""

from typing import Any, Callable, Sequence

from tablekit.errors import MissingAccessorError, MissingSchemaError
from tablekit.sources.capabilities import SourceCapabilities
from tablekit.types import Schema

IsDone = Callable[[Any, int], bool]


class SourceAdapter:
    """
    Accessors for one source type, taking the source instance as first argument.

    Every accessor raises the matching Missing* error unless overridden, so a
    partially implemented adapter fails loudly at the first call that needs the
    missing piece.
    """

    capabilities: SourceCapabilities = SourceCapabilities.NONE

    def __init__(self, source_type: type):
        self.source_type = source_type

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.source_type.__qualname__}, caps={self.capabilities!r})"

    def schema(self, source: Any) -> Schema:
        raise MissingSchemaError(self.source_type)

    def get_cell(self, source: Any, type_: Any, row: int, col: int) -> Any:
        raise MissingAccessorError(self.source_type, "get_cell")

    def get_column(self, source: Any, type_: Any, col: int) -> Sequence[Any]:
        raise MissingAccessorError(self.source_type, "get_column")

    def is_done_function(self, source_type: type) -> IsDone:
        raise MissingAccessorError(source_type, "is_done_function")


class MethodAdapter(SourceAdapter):
    """
    Adapter that forwards to methods defined on the source class itself.

    Expected methods (only those matching the declared capabilities):
      - ``schema(self) -> Schema``
      - ``get_cell(self, type_, row, col)``
      - ``get_column(self, type_, col)``
      - ``is_done_function(cls) -> (source, row) -> bool`` (classmethod)
    """

    def __init__(self, source_type: type, capabilities: SourceCapabilities):
        super().__init__(source_type)
        self.capabilities = capabilities

    def _method(self, owner: type, name: str) -> Any:
        fn = getattr(owner, name, None)
        if fn is None or getattr(fn, "__tablekit_abstract__", False):
            return None
        return fn

    def schema(self, source: Any) -> Schema:
        if self._method(type(source), "schema") is None:
            raise MissingSchemaError(type(source))
        return source.schema()

    def get_cell(self, source: Any, type_: Any, row: int, col: int) -> Any:
        if self._method(type(source), "get_cell") is None:
            raise MissingAccessorError(type(source), "get_cell")
        return source.get_cell(type_, row, col)

    def get_column(self, source: Any, type_: Any, col: int) -> Sequence[Any]:
        if self._method(type(source), "get_column") is None:
            raise MissingAccessorError(type(source), "get_column")
        return source.get_column(type_, col)

    def is_done_function(self, source_type: type) -> IsDone:
        if self._method(source_type, "is_done_function") is None:
            raise MissingAccessorError(source_type, "is_done_function")
        # source_type may be a subclass of the registered type
        return source_type.is_done_function()


def _abstract(fn: Callable) -> Callable:
    fn.__tablekit_abstract__ = True
    return fn


class TableSource:
    """
    Optional base class for sources.

    Subclasses override only the accessors their capabilities need, then
    register with ``@register_source(cells=..., columns=...)``. Accessors left
    as-is raise ``MissingSchemaError``/``MissingAccessorError``.
    """

    @_abstract
    def schema(self) -> Schema:
        raise MissingSchemaError(type(self))

    @_abstract
    def get_cell(self, type_: Any, row: int, col: int) -> Any:
        raise MissingAccessorError(type(self), "get_cell")

    @_abstract
    def get_column(self, type_: Any, col: int) -> Sequence[Any]:
        raise MissingAccessorError(type(self), "get_column")

    @classmethod
    @_abstract
    def is_done_function(cls) -> IsDone:
        raise MissingAccessorError(cls, "is_done_function")
