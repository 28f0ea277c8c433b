from tablekit.engine.dispatch import columns, rows, schema
from tablekit.engine.materializer import materialize_direct, materialize_rows
from tablekit.engine.row_iterator import RowIterator

__all__ = [
    "RowIterator",
    "columns",
    "materialize_direct",
    "materialize_rows",
    "rows",
    "schema",
]
