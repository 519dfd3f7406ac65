from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, Iterable

from warpath.game.actions import MoveOrder
from warpath.game.map import Ownership, Territory
from warpath.game.state import MapSnapshot, TurnInfo


def snapshot_from_dict(data: Dict[str, Any]) -> MapSnapshot:
    turn = data["turn"]
    territories = []
    for record in data["territories"]:
        garrison = int(record.get("garrison", 0))
        territories.append(
            Territory(
                id=int(record["id"]),
                owner=Ownership.parse(record["owner"]),
                production=int(record.get("production", 0)),
                garrison=garrison,
                incoming=int(record.get("incoming", 0)),
                available=int(record.get("available", garrison)),
                adjacent=tuple(int(nb) for nb in record.get("adjacent", ())),
                name=record.get("name", ""),
            )
        )
    return MapSnapshot.from_territories(
        territories,
        TurnInfo(current=int(turn["current"]), remaining=int(turn["remaining"])),
    )


def snapshot_to_dict(snapshot: MapSnapshot) -> Dict[str, Any]:
    return {
        "turn": {"current": snapshot.turn.current, "remaining": snapshot.turn.remaining},
        "territories": [
            {
                "id": territory.id,
                "name": territory.name,
                "owner": territory.owner.name.lower(),
                "production": territory.production,
                "garrison": territory.garrison,
                "incoming": territory.incoming,
                "available": territory.available,
                "adjacent": list(territory.adjacent),
            }
            for territory in snapshot.territories()
        ],
    }


def load_snapshot(path: str | Path) -> MapSnapshot:
    path = Path(path)
    with path.open("r", encoding="utf-8") as handle:
        return snapshot_from_dict(json.load(handle))


def save_snapshot(path: str | Path, snapshot: MapSnapshot) -> None:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8") as handle:
        json.dump(snapshot_to_dict(snapshot), handle, indent=2)


def save_orders(path: str | Path, orders: Iterable[MoveOrder]) -> None:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8") as handle:
        for order in orders:
            handle.write(json.dumps(order.__dict__) + "\n")
