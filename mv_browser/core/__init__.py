"""
Core domain layer: item model, dataset snapshots, history, the two
selectors, circle packing, emphasis and the coordinator linking them
"""

from .dataset import Dataset
from .item import Item
from .history import HistoryManager
from .brush import BrushSelector, Region
from .grid import DragState, GridSelector
from .emphasis import Emphasis, compute_emphasis
from .removal import RemovalManager
from .coordinator import Coordinator

__all__ = [
    "Dataset",
    "Item",
    "HistoryManager",
    "BrushSelector",
    "Region",
    "DragState",
    "GridSelector",
    "Emphasis",
    "compute_emphasis",
    "RemovalManager",
    "Coordinator",
]
