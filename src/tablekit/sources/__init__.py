from tablekit.sources.base import MethodAdapter, SourceAdapter, TableSource
from tablekit.sources.capabilities import SourceCapabilities
from tablekit.sources.registry import (
    adapter_for,
    capabilities_of,
    get_cell,
    get_column,
    get_schema,
    is_done_function,
    produces_cells,
    produces_columns,
    register_adapter,
    register_default_sources,
    register_source,
    registered_types,
    unregister,
)

__all__ = [
    "MethodAdapter",
    "SourceAdapter",
    "SourceCapabilities",
    "TableSource",
    "adapter_for",
    "capabilities_of",
    "get_cell",
    "get_column",
    "get_schema",
    "is_done_function",
    "produces_cells",
    "produces_columns",
    "register_adapter",
    "register_default_sources",
    "register_source",
    "registered_types",
    "unregister",
]
