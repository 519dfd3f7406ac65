from .actions import MoveOrder, MoveRegistry, OrderBook
from .map import Ownership, Territory
from .state import MapSnapshot, TurnInfo, demo_snapshot

__all__ = [
    "MoveOrder",
    "MoveRegistry",
    "OrderBook",
    "Ownership",
    "Territory",
    "MapSnapshot",
    "TurnInfo",
    "demo_snapshot",
]
