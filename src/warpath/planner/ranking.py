from __future__ import annotations

import logging
from typing import Iterable, List, Protocol

import numpy as np

from warpath.game.actions import OrderBook
from warpath.game.map import Ownership
from warpath.game.state import MapSnapshot
from .graph import Path, WeightedGraph

logger = logging.getLogger(__name__)


class TieBreak(Protocol):
    def order(self, paths: List[Path]) -> List[Path]:
        ...


class RandomTieBreak:
    """Uniform random permutation applied before the stable cost sort."""

    def __init__(self, rng: np.random.Generator | None = None, seed: int | None = None) -> None:
        self.rng = rng or np.random.default_rng(seed)

    def order(self, paths: List[Path]) -> List[Path]:
        return [paths[idx] for idx in self.rng.permutation(len(paths))]


class StableTieBreak:
    """Equal-cost paths keep ascending destination id order."""

    def order(self, paths: List[Path]) -> List[Path]:
        return sorted(paths, key=lambda path: path[-1])


class PathRanker:
    def __init__(
        self,
        graph: WeightedGraph,
        snapshot: MapSnapshot,
        tie_break: TieBreak | None = None,
        book: OrderBook | None = None,
    ) -> None:
        self.graph = graph
        self.snapshot = snapshot
        self.tie_break = tie_break or RandomTieBreak()
        self.book = book

    def ranked_paths(self, source: int, destinations: Iterable[int]) -> List[Path]:
        """Shortest paths from ``source`` to each destination, cheapest first.

        Unreachable destinations are dropped, and so is ``source`` itself
        since there is no first hop to move to.
        """
        paths: List[Path] = []
        for destination in destinations:
            path = self.graph.shortest_path(source, destination)
            if path is None or not path:
                continue
            paths.append(path)
        paths = self.tie_break.order(paths)
        return sorted(paths, key=lambda path: self.graph.path_cost(source, path))

    def available(self, source: int) -> int:
        if self.book is not None:
            return self.book.available(source)
        return int(self.snapshot.available[self.snapshot.index_of(source)])

    def winnable_paths(self, source: int, paths: Iterable[Path], reserve: int) -> List[Path]:
        force = self.available(source) - reserve
        winnable: List[Path] = []
        for path in paths:
            if self._outnumbers(path, force) or self._encircled(path[-1]):
                winnable.append(path)
            else:
                logger.debug("Path %s from %s is not winnable with %d units.", path, source, force)
        return winnable

    def _outnumbers(self, path: Path, force: int) -> bool:
        snapshot = self.snapshot
        hostile = snapshot.garrison_of(t for t in path if snapshot.owner_of(t) == Ownership.ENEMY)
        friendly = snapshot.garrison_of(t for t in path if snapshot.owner_of(t) == Ownership.SELF)
        return hostile < force + friendly

    def _encircled(self, destination: int) -> bool:
        snapshot = self.snapshot
        surrounding = snapshot.garrison_of(snapshot.neighbours_owned_by(destination, Ownership.SELF))
        return snapshot.garrison_of([destination]) < surrounding
