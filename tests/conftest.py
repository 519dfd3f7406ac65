"""Shared fixtures and snapshot builders."""

from collections import defaultdict

import numpy as np
import pytest

from warpath.game.map import Ownership, Territory
from warpath.game.state import MapSnapshot, TurnInfo
from warpath.planner.ranking import StableTieBreak

SELF = Ownership.SELF
ENEMY = Ownership.ENEMY
NEUTRAL = Ownership.NEUTRAL

A, B, C, D, E, F = range(6)


def build_snapshot(territories, edges, current=1, remaining=19):
    """Build a snapshot from ``{id: (owner, production, garrison)}`` and undirected edges.

    A value may also be a dict with ``owner``/``production``/``garrison`` and
    optional ``available``/``incoming``. Self-owned territories default to
    having their whole garrison available.
    """
    adjacency = defaultdict(list)
    for left, right in edges:
        adjacency[left].append(right)
        adjacency[right].append(left)

    records = []
    for territory_id, raw in territories.items():
        if isinstance(raw, dict):
            fields = dict(raw)
        else:
            owner, production, garrison = raw
            fields = {"owner": owner, "production": production, "garrison": garrison}
        fields.setdefault("incoming", 0)
        fields.setdefault("available", fields["garrison"] if fields["owner"] == SELF else 0)
        records.append(Territory(id=territory_id, adjacent=tuple(adjacency[territory_id]), **fields))
    return MapSnapshot.from_territories(records, TurnInfo(current=current, remaining=remaining))


def random_snapshot(seed, size=6, edge_probability=0.4):
    rng = np.random.default_rng(seed)
    owners = [SELF, ENEMY, NEUTRAL]
    territories = {
        tid: (owners[int(rng.integers(0, 3))], int(rng.integers(0, 3)), int(rng.integers(0, 8)))
        for tid in range(size)
    }
    edges = [
        (left, right)
        for left in range(size)
        for right in range(left + 1, size)
        if rng.random() < edge_probability
    ]
    return build_snapshot(territories, edges)


@pytest.fixture
def line_snapshot():
    """A - B - C, A self-owned with 10 units, B and C unclaimed cities."""
    return build_snapshot(
        {A: (SELF, 0, 10), B: (NEUTRAL, 1, 0), C: (NEUTRAL, 1, 0)},
        [(A, B), (B, C)],
    )


@pytest.fixture
def stable():
    return StableTieBreak()
