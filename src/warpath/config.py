from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class EdgeWeights:
    base: int = 3
    enemy_garrison_factor: int = 1
    friendly_city_discount: int = 1
    minimum: int = 1


@dataclass(frozen=True)
class StrategyConfig:
    expand_until_turn: int = 9
    expand_max_paths: int = 3
    reserve_min_turns_left: int = 5
    reinforce_min_turns_left: int = 0
    edge_weights: EdgeWeights = field(default_factory=EdgeWeights)
    seed: int | None = None
