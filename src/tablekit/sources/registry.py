from __future__ import annotations

from typing import Any, Callable, Dict, List, Optional, TypeVar

from tablekit.errors import IndexOutOfRangeError
from tablekit.logging import get_logger
from tablekit.sources.base import IsDone, MethodAdapter, SourceAdapter
from tablekit.sources.capabilities import SourceCapabilities
from tablekit.types import Schema

_logger = get_logger(__name__)

T = TypeVar("T", bound=type)

# Registry: source type -> adapter
_ADAPTERS: Dict[type, SourceAdapter] = {}


def register_adapter(
    source_type: type, adapter: SourceAdapter, *, replace: bool = False
) -> SourceAdapter:
    """
    Register the accessors (and thereby the capabilities) of ``source_type``.

    Subclasses of ``source_type`` inherit the registration unless they are
    registered themselves.

    Raises:
        ValueError: If ``source_type`` is already registered and ``replace`` is False
    """
    if source_type in _ADAPTERS and not replace:
        raise ValueError(f"Source type '{source_type.__qualname__}' is already registered.")
    _ADAPTERS[source_type] = adapter
    _logger.debug(
        "Registered %s as table source (%r)", source_type.__qualname__, adapter.capabilities
    )
    return adapter


def register_source(
    cells: bool = False, columns: bool = False, *, replace: bool = False
) -> Callable[[T], T]:
    """
    Class decorator declaring which primitives a source type implements.

    Example:
        @register_source(cells=True)
        class Grid(TableSource):
            def schema(self): ...
            def get_cell(self, type_, row, col): ...
            @classmethod
            def is_done_function(cls): ...
    """
    caps = SourceCapabilities.NONE
    if cells:
        caps |= SourceCapabilities.CELLS
    if columns:
        caps |= SourceCapabilities.COLUMNS

    def deco(cls: T) -> T:
        register_adapter(cls, MethodAdapter(cls, caps), replace=replace)
        cls.capabilities = caps
        return cls

    return deco


def unregister(source_type: type) -> None:
    """Remove the registration of ``source_type`` (no-op if not registered)."""
    _ADAPTERS.pop(source_type, None)


def registered_types() -> List[type]:
    return list(_ADAPTERS)


def adapter_for(source_type: type) -> Optional[SourceAdapter]:
    """Closest registered adapter along the MRO of ``source_type``, or None."""
    for klass in getattr(source_type, "__mro__", (source_type,)):
        adapter = _ADAPTERS.get(klass)
        if adapter is not None:
            return adapter
    return None


def capabilities_of(source_type: type) -> SourceCapabilities:
    adapter = adapter_for(source_type)
    if adapter is None:
        return SourceCapabilities.NONE
    return SourceCapabilities(adapter.capabilities)


# ---------------------------------------------------------------------------
# Capability predicates
# ---------------------------------------------------------------------------


def produces_cells(source_type: type) -> bool:
    """True if ``source_type`` declared it can produce individual cells."""
    return bool(capabilities_of(source_type) & SourceCapabilities.CELLS)


def produces_columns(source_type: type) -> bool:
    """True if ``source_type`` declared it can produce whole columns."""
    return bool(capabilities_of(source_type) & SourceCapabilities.COLUMNS)


# ---------------------------------------------------------------------------
# Primitive accessors (dispatch through the registry)
# ---------------------------------------------------------------------------


def _require(source_type: type) -> SourceAdapter:
    adapter = adapter_for(source_type)
    if adapter is None:
        # Unregistered types get an adapter with nothing implemented, so the
        # caller sees a Missing* error naming the type.
        return SourceAdapter(source_type)
    return adapter


def get_schema(source: Any) -> Schema:
    return _require(type(source)).schema(source)


def get_cell(source: Any, type_: Any, row: int, col: int) -> Any:
    """Value at 1-based (``row``, ``col``) of ``source``, declared as ``type_``."""
    if not isinstance(col, int) or col < 1:
        raise IndexOutOfRangeError(
            f"Column index must be >= 1, got {col!r}", source_type=type(source), column=col
        )
    if not isinstance(row, int) or row < 1:
        raise IndexOutOfRangeError(
            f"Row index must be >= 1, got {row!r}", source_type=type(source), row=row
        )
    return _require(type(source)).get_cell(source, type_, row, col)


def get_column(source: Any, type_: Any, col: int) -> Any:
    """Whole 1-based column ``col`` of ``source``, declared as ``type_``."""
    if not isinstance(col, int) or col < 1:
        raise IndexOutOfRangeError(
            f"Column index must be >= 1, got {col!r}", source_type=type(source), column=col
        )
    return _require(type(source)).get_column(source, type_, col)


def is_done_function(source_type: type) -> IsDone:
    """The ``(source, row) -> bool`` completion predicate of ``source_type``."""
    return _require(source_type).is_done_function(source_type)


def register_default_sources() -> None:
    """
    Eagerly import built-in sources so their registrations run.
    """
    # Local imports to trigger registration side-effects
    from . import frames  # noqa: F401
    from . import native  # noqa: F401
