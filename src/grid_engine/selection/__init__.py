"""Selection engine and rectangle-merge algebra."""

from .engine import Axis, SelectionEngine
from .regions import (
    bounding_box,
    covered_cells,
    find_containing,
    index_of,
    optimize,
    regions_overlap,
    split_into_cells,
    subtract_range,
)
from .service import SelectionService

__all__ = [
    "Axis",
    "SelectionEngine",
    "SelectionService",
    "optimize",
    "covered_cells",
    "split_into_cells",
    "subtract_range",
    "regions_overlap",
    "bounding_box",
    "find_containing",
    "index_of",
]
