from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Mapping, Tuple

import numpy as np

from .map import DEMO_ADJACENCY, DEMO_TERRITORIES, Ownership, Territory


_COLUMNS = ("owners", "production", "garrison", "incoming", "available")


@dataclass(frozen=True)
class TurnInfo:
    current: int
    remaining: int


@dataclass(frozen=True, eq=False)
class MapSnapshot:
    """Read-only view of the board for a single turn.

    Per-territory attributes are stored column-wise in numpy arrays aligned
    with ``ids``. The arrays are made read-only on construction, so nothing
    downstream can change ownership or garrisons by accident.
    """

    ids: Tuple[int, ...]
    owners: np.ndarray
    production: np.ndarray
    garrison: np.ndarray
    incoming: np.ndarray
    available: np.ndarray
    adjacency: Mapping[int, Tuple[int, ...]]
    turn: TurnInfo
    names: Tuple[str, ...] = ()
    _index: Dict[int, int] = field(init=False, repr=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "_index", {tid: pos for pos, tid in enumerate(self.ids)})
        for name in _COLUMNS:
            column = np.array(getattr(self, name), copy=True)
            column.setflags(write=False)
            object.__setattr__(self, name, column)
        validate_snapshot(self)

    @classmethod
    def from_territories(cls, territories: Iterable[Territory], turn: TurnInfo) -> "MapSnapshot":
        territories = list(territories)
        return cls(
            ids=tuple(t.id for t in territories),
            owners=np.array([int(t.owner) for t in territories], dtype=np.int8),
            production=np.array([t.production for t in territories], dtype=np.int64),
            garrison=np.array([t.garrison for t in territories], dtype=np.int64),
            incoming=np.array([t.incoming for t in territories], dtype=np.int64),
            available=np.array([t.available for t in territories], dtype=np.int64),
            adjacency={t.id: tuple(t.adjacent) for t in territories},
            turn=turn,
            names=tuple(t.name for t in territories),
        )

    def __len__(self) -> int:
        return len(self.ids)

    def __contains__(self, territory_id: object) -> bool:
        return territory_id in self._index

    def index_of(self, territory_id: int) -> int:
        try:
            return self._index[territory_id]
        except KeyError:
            raise KeyError(f"Unknown territory {territory_id}") from None

    def territory(self, territory_id: int) -> Territory:
        pos = self.index_of(territory_id)
        return Territory(
            id=territory_id,
            owner=Ownership(int(self.owners[pos])),
            production=int(self.production[pos]),
            garrison=int(self.garrison[pos]),
            incoming=int(self.incoming[pos]),
            available=int(self.available[pos]),
            adjacent=self.adjacency[territory_id],
            name=self.names[pos] if self.names else "",
        )

    def territories(self) -> List[Territory]:
        return [self.territory(tid) for tid in self.ids]

    def neighbours(self, territory_id: int) -> Tuple[int, ...]:
        return self.adjacency[territory_id]

    def owner_of(self, territory_id: int) -> Ownership:
        return Ownership(int(self.owners[self.index_of(territory_id)]))

    def production_of(self, territory_id: int) -> int:
        return int(self.production[self.index_of(territory_id)])

    def garrison_of(self, territory_ids: Iterable[int]) -> int:
        positions = [self.index_of(tid) for tid in territory_ids]
        if not positions:
            return 0
        return int(self.garrison[positions].sum())

    def _select(self, mask: np.ndarray) -> List[int]:
        return [self.ids[pos] for pos in np.nonzero(mask)[0]]

    def owned(self) -> List[int]:
        return self._select(self.owners == Ownership.SELF)

    def enemy(self) -> List[int]:
        return self._select(self.owners == Ownership.ENEMY)

    def free(self) -> List[int]:
        return self._select(self.owners == Ownership.NEUTRAL)

    def foreign(self) -> List[int]:
        return self._select(self.owners != Ownership.SELF)

    def cities(self, territory_ids: Iterable[int]) -> List[int]:
        return [tid for tid in territory_ids if self.production_of(tid) > 0]

    def neighbours_owned_by(self, territory_id: int, owner: Ownership) -> List[int]:
        return [nb for nb in self.adjacency[territory_id] if self.owner_of(nb) == owner]


def validate_snapshot(snapshot: MapSnapshot) -> None:
    size = len(snapshot.ids)
    if len(snapshot._index) != size:
        raise ValueError("Duplicate territory ids in snapshot.")
    columns = {
        "owners": snapshot.owners,
        "production": snapshot.production,
        "garrison": snapshot.garrison,
        "incoming": snapshot.incoming,
        "available": snapshot.available,
    }
    for name, column in columns.items():
        if column.shape != (size,):
            raise ValueError(f"Column {name} has shape {column.shape}, expected ({size},).")
        if name != "owners" and size and column.min() < 0:
            raise ValueError(f"Column {name} contains negative values.")
    valid_owners = {int(o) for o in Ownership}
    if not set(int(o) for o in snapshot.owners).issubset(valid_owners):
        raise ValueError("Snapshot contains an unknown ownership tag.")
    if snapshot.names and len(snapshot.names) != size:
        raise ValueError("Territory names do not match territory ids.")
    if set(snapshot.adjacency) != set(snapshot.ids):
        raise ValueError("Adjacency keys must match the territory ids exactly.")
    for territory_id, neighbours in snapshot.adjacency.items():
        for nb in neighbours:
            if nb not in snapshot._index:
                raise ValueError(f"Territory {territory_id} is adjacent to unknown territory {nb}.")
            if nb == territory_id:
                raise ValueError(f"Territory {territory_id} lists itself as a neighbour.")


def demo_snapshot(
    seed: int | None = None,
    current_turn: int = 1,
    max_turns: int = 20,
    home_garrison: int = 10,
) -> MapSnapshot:
    """Demo board with one home territory per side and random neutral garrisons."""
    rng = np.random.default_rng(seed)
    num_territories = len(DEMO_TERRITORIES)
    owners = np.full(num_territories, int(Ownership.NEUTRAL), dtype=np.int8)
    owners[0] = int(Ownership.SELF)
    owners[num_territories - 1] = int(Ownership.ENEMY)
    garrison = rng.integers(0, 4, size=num_territories).astype(np.int64)
    garrison[0] = home_garrison
    garrison[num_territories - 1] = home_garrison
    available = np.where(owners == Ownership.SELF, garrison, 0).astype(np.int64)
    return MapSnapshot(
        ids=tuple(tid for tid, _, _ in DEMO_TERRITORIES),
        owners=owners,
        production=np.array([prod for _, _, prod in DEMO_TERRITORIES], dtype=np.int64),
        garrison=garrison,
        incoming=np.zeros(num_territories, dtype=np.int64),
        available=available,
        adjacency=dict(DEMO_ADJACENCY),
        turn=TurnInfo(current=current_turn, remaining=max_turns - current_turn),
        names=tuple(name for _, name, _ in DEMO_TERRITORIES),
    )

