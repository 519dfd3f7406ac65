from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import Dict, Tuple


class Ownership(IntEnum):
    NEUTRAL = 0
    SELF = 1
    ENEMY = 2

    @classmethod
    def parse(cls, raw: str) -> "Ownership":
        try:
            return cls[raw.strip().upper()]
        except KeyError:
            raise ValueError(f"Unknown ownership {raw!r}") from None


@dataclass(frozen=True)
class Territory:
    id: int
    owner: Ownership
    production: int = 0
    garrison: int = 0
    incoming: int = 0
    available: int = 0
    adjacent: Tuple[int, ...] = ()
    name: str = ""


# Small demo board used by the CLI and the tests: (id, name, production).
DEMO_TERRITORIES = [
    (0, "Nord", 1),
    (1, "Ost", 0),
    (2, "Sued", 2),
    (3, "West", 0),
    (4, "Delta", 1),
    (5, "Echo", 0),
    (6, "Fjord", 1),
    (7, "Gulf", 2),
]

DEMO_ADJACENCY: Dict[int, Tuple[int, ...]] = {
    0: (1, 3),
    1: (0, 2, 4),
    2: (1, 3, 5),
    3: (0, 2, 6),
    4: (1, 5, 7),
    5: (2, 4, 7),
    6: (3, 7),
    7: (4, 5, 6),
}
