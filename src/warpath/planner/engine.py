from __future__ import annotations

import logging
import math
from typing import Dict, List, Optional

from warpath.config import StrategyConfig
from warpath.game.actions import MoveOrder, MoveRegistry, OrderBook, SubmitFn
from warpath.game.map import Ownership
from warpath.game.state import MapSnapshot
from .graph import WeightedGraph
from .ranking import PathRanker, RandomTieBreak, TieBreak
from .reserve import borders_free_city, reserve, strength

logger = logging.getLogger(__name__)


EXPAND = "expand"
ATTACK = "attack"
CONSOLIDATE = "consolidate"


class TurnPlan:
    """Everything derived for a single turn. Discarded once the turn is planned."""

    def __init__(self, snapshot: MapSnapshot, config: StrategyConfig, tie_break: TieBreak) -> None:
        self.snapshot = snapshot
        self.config = config
        self.graph = WeightedGraph.from_snapshot(snapshot, config.edge_weights)
        self.book = OrderBook(snapshot)
        self.registry = MoveRegistry()
        self.ranker = PathRanker(self.graph, snapshot, tie_break=tie_break, book=self.book)
        self.free_cities = snapshot.cities(snapshot.free())
        self.enemy_cities = snapshot.cities(snapshot.enemy())
        self.owned_cities = snapshot.cities(snapshot.owned())
        self._reserves: Dict[int, int] = {}

    def reserve(self, territory_id: int) -> int:
        if territory_id not in self._reserves:
            self._reserves[territory_id] = reserve(self.snapshot, territory_id, self.config)
        return self._reserves[territory_id]

    def spare(self, territory_id: int) -> int:
        return self.book.available(territory_id) - self.reserve(territory_id)

    def emit(self, source: int, destination: int, count: int, reason: str) -> Optional[MoveOrder]:
        order = self.book.submit(source, destination, count)
        if order is None:
            logger.debug("%s: dropped %s -> %s (%d units)", reason, source, destination, count)
        else:
            logger.debug("%s: %s -> %s (%d units)", reason, source, destination, order.count)
        return order

    # Pass A

    def reinforce(self) -> None:
        snapshot = self.snapshot
        if snapshot.turn.remaining < self.config.reinforce_min_turns_left:
            return
        weakest_first = sorted(snapshot.owned(), key=lambda t: (snapshot.production_of(t), t))
        for territory_id in weakest_first:
            if borders_free_city(snapshot, territory_id):
                continue
            for destination in snapshot.neighbours_owned_by(territory_id, Ownership.SELF):
                if snapshot.production_of(destination) <= 0:
                    continue
                required = strength(snapshot, snapshot.neighbours_owned_by(destination, Ownership.ENEMY))
                deficit = required - snapshot.garrison_of([destination]) - self.book.incoming(destination)
                if deficit <= 0:
                    continue
                self.emit(territory_id, destination, min(deficit, self.spare(territory_id)), "reinforce")

    # Pass B

    def branch(self) -> str:
        if self.free_cities and self.snapshot.turn.current < self.config.expand_until_turn:
            return EXPAND
        if self.enemy_cities:
            return ATTACK
        return CONSOLIDATE

    def select_strategies(self) -> None:
        snapshot = self.snapshot
        branch = self.branch()
        logger.debug("Turn %d: strategy %s", snapshot.turn.current, branch)
        strongest_first = sorted(snapshot.owned(), key=lambda t: (-snapshot.production_of(t), t))
        handler = {EXPAND: self.expand, ATTACK: self.attack, CONSOLIDATE: self.consolidate}[branch]
        for territory_id in strongest_first:
            handler(territory_id)

    def expand(self, territory_id: int) -> None:
        held_back = self.reserve(territory_id)
        ranked = self.ranker.ranked_paths(territory_id, self.free_cities)
        paths = self.ranker.winnable_paths(territory_id, ranked, held_back)[: self.config.expand_max_paths]
        through_enemy = [p for p in paths if self.snapshot.owner_of(p[0]) == Ownership.ENEMY]
        if through_enemy:
            paths = through_enemy
        if not paths:
            logger.debug("expand: no winnable path from %s", territory_id)
            return
        share = math.ceil(self.spare(territory_id) / len(paths))
        for path in paths:
            self.emit(territory_id, path[0], min(share, self.spare(territory_id)), EXPAND)

    def contested(self, first_hop: int, territory_id: int) -> bool:
        # Only foreign ground is claimed; friendly territories are staging points.
        if self.snapshot.owner_of(first_hop) == Ownership.SELF:
            return False
        return self.registry.claimed_by_other(first_hop, territory_id)

    def attack(self, territory_id: int) -> None:
        held_back = self.reserve(territory_id)
        ranked = self.ranker.ranked_paths(territory_id, self.enemy_cities)
        for path in self.ranker.winnable_paths(territory_id, ranked, held_back):
            first_hop = path[0]
            if self.contested(first_hop, territory_id):
                logger.debug("attack: %s already claimed, %s looks elsewhere", first_hop, territory_id)
                continue
            order = self.emit(territory_id, first_hop, self.spare(territory_id), ATTACK)
            if order is not None and self.snapshot.owner_of(first_hop) != Ownership.SELF:
                self.registry.claim(first_hop, territory_id)
            return

        if self.snapshot.production_of(territory_id) > 0 or self.book.incoming(territory_id) > 0:
            return
        for path in self.ranker.ranked_paths(territory_id, self.owned_cities):
            if self.contested(path[0], territory_id):
                continue
            self.emit(territory_id, path[0], self.book.available(territory_id), "fall back")
            return
        logger.debug("attack: %s has no friendly city to fall back to", territory_id)

    def consolidate(self, territory_id: int) -> None:
        targets = self.snapshot.enemy() or self.snapshot.foreign()
        paths = self.ranker.ranked_paths(territory_id, targets)
        if not paths:
            logger.debug("consolidate: nothing left to reach from %s", territory_id)
            return
        self.emit(territory_id, paths[0][0], self.spare(territory_id), CONSOLIDATE)


class TurnStrategyEngine:
    """Turns a map snapshot into this turn's movement orders.

    No state survives between calls; the graph, order book, move registry and
    the default tie-break RNG (seeded from ``config.seed``) are rebuilt for
    every turn. A ``tie_break`` passed in is used as given.
    """

    def __init__(self, config: StrategyConfig | None = None, tie_break: TieBreak | None = None) -> None:
        self.config = config or StrategyConfig()
        self.tie_break = tie_break

    def plan(self, snapshot: MapSnapshot) -> TurnPlan:
        tie_break = self.tie_break or RandomTieBreak(seed=self.config.seed)
        plan = TurnPlan(snapshot, self.config, tie_break)
        plan.reinforce()
        plan.select_strategies()
        return plan

    def play_turn(self, snapshot: MapSnapshot, submit: SubmitFn | None = None) -> List[MoveOrder]:
        plan = self.plan(snapshot)
        if submit is not None:
            plan.book.forward(submit)
        logger.info(
            "Turn %d: %d orders, %d units moved",
            snapshot.turn.current,
            len(plan.book.orders),
            sum(order.count for order in plan.book.orders),
        )
        return list(plan.book.orders)


def plan_turn(
    snapshot: MapSnapshot,
    config: StrategyConfig | None = None,
    tie_break: TieBreak | None = None,
    submit: SubmitFn | None = None,
) -> List[MoveOrder]:
    return TurnStrategyEngine(config, tie_break).play_turn(snapshot, submit)
