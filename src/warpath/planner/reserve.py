from __future__ import annotations

from typing import Iterable

from warpath.config import StrategyConfig
from warpath.game.map import Ownership
from warpath.game.state import MapSnapshot


def strength(snapshot: MapSnapshot, territory_ids: Iterable[int]) -> int:
    return snapshot.garrison_of(territory_ids)


def borders_free_city(snapshot: MapSnapshot, territory_id: int) -> bool:
    return any(
        snapshot.production_of(nb) > 0
        for nb in snapshot.neighbours_owned_by(territory_id, Ownership.NEUTRAL)
    )


def reserve(snapshot: MapSnapshot, territory_id: int, config: StrategyConfig | None = None) -> int:
    """Units that stay home this turn instead of being routed anywhere.

    Nothing is held back when the territory produces nothing, the game is
    about to end, or an unclaimed city sits next door. Otherwise the
    territory keeps as many units as its enemy neighbours hold, or half of
    that when an enemy city nearby is already outnumbered by our own units
    around it.
    """
    config = config or StrategyConfig()
    if (
        snapshot.production_of(territory_id) <= 0
        or snapshot.turn.remaining < config.reserve_min_turns_left
        or borders_free_city(snapshot, territory_id)
    ):
        return 0

    enemy_neighbours = snapshot.neighbours_owned_by(territory_id, Ownership.ENEMY)
    threat = strength(snapshot, enemy_neighbours)
    for nb in enemy_neighbours:
        if snapshot.production_of(nb) <= 0:
            continue
        retakers = strength(snapshot, snapshot.neighbours_owned_by(nb, Ownership.SELF))
        if snapshot.garrison_of([nb]) < retakers:
            return threat // 2
    return threat
