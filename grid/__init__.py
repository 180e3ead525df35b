"""
grid/
-----
Core data layer.  Public API:

    from grid import Grid, Position, Cell
    from grid import InvalidPosition, OutOfBounds
"""

from grid.cell       import Cell, Position
from grid.errors     import IndexOutOfRange, InvalidPosition, OutOfBounds, SearchError
from grid.grid       import DIRECTIONS, Grid, parse_ascii, parse_order
from grid.heuristics import HEURISTICS, manhattan, resolve_heuristic
from grid.landscape  import LandscapeFeature, classify, classify_grid

__all__ = [
    "Cell",             "Position",
    "SearchError",      "InvalidPosition",  "OutOfBounds",  "IndexOutOfRange",
    "Grid",             "parse_ascii",      "parse_order",  "DIRECTIONS",
    "HEURISTICS",       "manhattan",        "resolve_heuristic",
    "LandscapeFeature", "classify",         "classify_grid",
]
