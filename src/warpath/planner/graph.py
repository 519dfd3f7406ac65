from __future__ import annotations

import heapq
import itertools
import math
from typing import Dict, Iterator, List, Optional, Tuple

from warpath.config import EdgeWeights
from warpath.game.map import Ownership
from warpath.game.state import MapSnapshot


Path = List[int]


def edge_weight(snapshot: MapSnapshot, neighbour: int, weights: EdgeWeights) -> int:
    pos = snapshot.index_of(neighbour)
    owner = int(snapshot.owners[pos])
    if owner == Ownership.ENEMY:
        cost = weights.base + int(snapshot.garrison[pos]) * weights.enemy_garrison_factor
    elif owner == Ownership.SELF and snapshot.production[pos] > 0:
        cost = weights.base - weights.friendly_city_discount
    else:
        cost = weights.base
    return max(weights.minimum, cost, 1)


class WeightedGraph:
    """Directed weighted view of the board, rebuilt from scratch every turn.

    The cost of moving from A into B depends only on B's state, so the graph
    is directed even though adjacency is symmetric.
    """

    def __init__(self, weights: EdgeWeights | None = None) -> None:
        self.weights = weights or EdgeWeights()
        self.edges: Dict[int, Dict[int, int]] = {}

    @classmethod
    def from_snapshot(cls, snapshot: MapSnapshot, weights: EdgeWeights | None = None) -> "WeightedGraph":
        graph = cls(weights)
        graph.build(snapshot)
        return graph

    def build(self, snapshot: MapSnapshot) -> "WeightedGraph":
        self.edges = {
            territory_id: {
                nb: edge_weight(snapshot, nb, self.weights)
                for nb in snapshot.neighbours(territory_id)
            }
            for territory_id in snapshot.ids
        }
        return self

    def __contains__(self, territory_id: object) -> bool:
        return territory_id in self.edges

    def __len__(self) -> int:
        return len(self.edges)

    def neighbours(self, territory_id: int) -> Dict[int, int]:
        return self.edges[territory_id]

    def weight(self, source: int, destination: int) -> int:
        return self.edges[source][destination]

    def shortest_path(self, source: int, destination: int) -> Optional[Path]:
        """Dijkstra from ``source`` to ``destination``.

        Returns the hops after ``source`` up to and including ``destination``,
        ``[]`` when both are the same territory, or ``None`` when the
        destination cannot be reached.

        The queue is a binary heap with lazy deletion: relaxing an edge pushes
        a fresh entry and stale ones are skipped when popped. Entries with the
        same distance come out in insertion order.
        """
        if source not in self.edges:
            raise KeyError(f"Unknown territory {source}")
        if destination not in self.edges:
            raise KeyError(f"Unknown territory {destination}")

        distances: Dict[int, float] = {vertex: math.inf for vertex in self.edges}
        previous: Dict[int, Optional[int]] = {vertex: None for vertex in self.edges}
        distances[source] = 0
        counter = itertools.count()
        queue: List[Tuple[float, int, int]] = [(0, next(counter), source)]

        while queue:
            dist, _, current = heapq.heappop(queue)
            if dist > distances[current]:
                continue
            if current == destination:
                return self._reconstruct(previous, source, destination)
            if distances[current] == math.inf:
                break
            for neighbour, weight in self.edges[current].items():
                alt = dist + weight
                if alt < distances[neighbour]:
                    distances[neighbour] = alt
                    previous[neighbour] = current
                    heapq.heappush(queue, (alt, next(counter), neighbour))
        return None

    @staticmethod
    def _reconstruct(previous: Dict[int, Optional[int]], source: int, destination: int) -> Path:
        path: Path = []
        current = destination
        while current != source:
            path.append(current)
            current = previous[current]
        path.reverse()
        return path

    def path_cost(self, source: int, path: Path) -> int:
        return sum(self._path_weights(source, path))

    def _path_weights(self, source: int, path: Path) -> Iterator[int]:
        current = source
        for hop in path:
            yield self.edges[current][hop]
            current = hop
