from __future__ import annotations

from enum import IntFlag


class SourceCapabilities(IntFlag):
    """
    Bitmask describing which primitives a source type implements.

    Declared per type (never per instance) when the type is registered. The
    dispatch layer reads it on every ``rows()``/``columns()`` call to choose a
    code path.

    Bits:
      - NONE    : nothing declared; the source is passed through untouched
      - CELLS   : implements get_cell + is_done_function (row synthesis)
      - COLUMNS : implements get_column (direct column extraction)
    """

    NONE = 0
    CELLS = 1 << 0
    COLUMNS = 1 << 1


# Short alias used by source modules
SC = SourceCapabilities
