"""
tablekit - one contract between table producers and table consumers

A source opts in by declaring what it can produce (individual cells, whole
columns, or both) and implementing the matching accessors. Consumers only ever
call ``rows()`` or ``columns()`` and get typed output regardless of which
primitive the source chose.

Usage:
    import tablekit
    from tablekit import Schema, TableSource, register_source

    @register_source(cells=True)
    class Grid(TableSource):
        def __init__(self, data):
            self.data = data

        def schema(self):
            return Schema(("a", "b"), (int, str))

        def get_cell(self, type_, row, col):
            return self.data[row - 1][col - 1]

        @classmethod
        def is_done_function(cls):
            return lambda grid, row: row > len(grid.data)

    grid = Grid([(1, "x"), (2, "y")])

    for row in tablekit.rows(grid):      # Row(a=1, b='x'), Row(a=2, b='y')
        print(row.a, row["b"])

    cols = tablekit.columns(grid)        # ColumnTable: a=[1, 2], b=['x', 'y']

    # Sinks
    tablekit.rowtable(grid)              # list of Rows
    tablekit.columntable(grid)           # ColumnTable
    tablekit.to_polars(grid)             # polars.DataFrame
    tablekit.to_arrow(grid)              # pyarrow.Table
"""

from tablekit.version import VERSION as __version__

# Types
from tablekit.types import Column, ColumnTable, Row, Schema, conforms

# Errors
from tablekit.errors import (
    IndexOutOfRangeError,
    MissingAccessorError,
    MissingSchemaError,
    NotATableError,
    SchemaError,
    ShapeError,
    TablesError,
    TypeMismatchError,
)

# Configuration
from tablekit.config.settings import (
    TablekitConfig,
    configure,
    get_settings,
    reset_settings,
    resolve_effective_config,
)

# Logging
from tablekit.logging import configure_logging, get_logger

# Source contract
from tablekit.sources import (
    SourceAdapter,
    SourceCapabilities,
    TableSource,
    get_cell,
    get_column,
    is_done_function,
    produces_cells,
    produces_columns,
    register_adapter,
    register_default_sources,
    register_source,
    unregister,
)

# Entry points
from tablekit.engine.dispatch import columns, rows, schema
from tablekit.engine.row_iterator import RowIterator

register_default_sources()

from tablekit.sources.native import RowTable  # noqa: E402
from tablekit.api.sinks import columntable, rowtable, to_arrow, to_polars  # noqa: E402

__all__ = [
    "__version__",
    # entry points
    "schema",
    "rows",
    "columns",
    "rowtable",
    "columntable",
    "to_polars",
    "to_arrow",
    # types
    "Schema",
    "Row",
    "Column",
    "ColumnTable",
    "RowTable",
    "RowIterator",
    "conforms",
    # source contract
    "SourceCapabilities",
    "SourceAdapter",
    "TableSource",
    "register_source",
    "register_adapter",
    "register_default_sources",
    "unregister",
    "produces_cells",
    "produces_columns",
    "get_cell",
    "get_column",
    "is_done_function",
    # errors
    "TablesError",
    "MissingSchemaError",
    "MissingAccessorError",
    "TypeMismatchError",
    "IndexOutOfRangeError",
    "SchemaError",
    "ShapeError",
    "NotATableError",
    # config / logging
    "TablekitConfig",
    "configure",
    "get_settings",
    "reset_settings",
    "resolve_effective_config",
    "configure_logging",
    "get_logger",
]
