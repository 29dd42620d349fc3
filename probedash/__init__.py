"""probedash: live terminal dashboard for fiber schedulers, connection pools
and actor systems."""

from .engine import DashboardEngine, Tab, TabSet
from .events import Key, TabKind
from .history import BoundedHistory
from .selection import CyclicSelectionList
from .tree import render_forest

__version__ = "0.1.0"

__all__ = [
    "BoundedHistory",
    "CyclicSelectionList",
    "DashboardEngine",
    "Key",
    "Tab",
    "TabKind",
    "TabSet",
    "render_forest",
]
