from .engine import TurnStrategyEngine, plan_turn
from .graph import WeightedGraph
from .ranking import PathRanker, RandomTieBreak, StableTieBreak
from .reserve import reserve

__all__ = [
    "TurnStrategyEngine",
    "plan_turn",
    "WeightedGraph",
    "PathRanker",
    "RandomTieBreak",
    "StableTieBreak",
    "reserve",
]
