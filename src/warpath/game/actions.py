from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional

from .state import MapSnapshot


SubmitFn = Callable[[int, int, int], None]


@dataclass(frozen=True)
class MoveOrder:
    source: int
    destination: int
    count: int


@dataclass
class OrderBook:
    """Orders submitted during one turn.

    Keeps track of units already committed from each source and units already
    sent toward each destination, so later decisions in the same turn see the
    net figures without the snapshot itself being touched.
    """

    snapshot: MapSnapshot
    orders: List[MoveOrder] = field(default_factory=list)
    committed: Dict[int, int] = field(default_factory=lambda: defaultdict(int))
    sent: Dict[int, int] = field(default_factory=lambda: defaultdict(int))

    def available(self, territory_id: int) -> int:
        pos = self.snapshot.index_of(territory_id)
        return int(self.snapshot.available[pos]) - self.committed[territory_id]

    def incoming(self, territory_id: int) -> int:
        pos = self.snapshot.index_of(territory_id)
        return int(self.snapshot.incoming[pos]) + self.sent[territory_id]

    def submit(self, source: int, destination: int, count: int) -> Optional[MoveOrder]:
        """Record a transfer. Non-positive counts are dropped.

        A second transfer along the same source/destination pair is folded
        into the existing order.
        """
        count = int(count)
        if count <= 0:
            return None
        self.committed[source] += count
        self.sent[destination] += count
        for pos, existing in enumerate(self.orders):
            if existing.source == source and existing.destination == destination:
                order = MoveOrder(source, destination, existing.count + count)
                self.orders[pos] = order
                return order
        order = MoveOrder(source, destination, count)
        self.orders.append(order)
        return order

    def forward(self, submit: SubmitFn) -> None:
        for order in self.orders:
            submit(order.source, order.destination, order.count)


@dataclass
class MoveRegistry:
    claims: Dict[int, int] = field(default_factory=dict)

    def claimed_by_other(self, destination: int, source: int) -> bool:
        claimant = self.claims.get(destination)
        return claimant is not None and claimant != source

    def claim(self, destination: int, source: int) -> None:
        self.claims.setdefault(destination, source)

    def __contains__(self, destination: object) -> bool:
        return destination in self.claims
