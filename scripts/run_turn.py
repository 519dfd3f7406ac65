from __future__ import annotations

import argparse
import logging

from warpath.config import StrategyConfig
from warpath.game.state import demo_snapshot
from warpath.planner.engine import TurnStrategyEngine
from warpath.planner.ranking import StableTieBreak
from warpath.utils.serialization import load_snapshot, save_orders


def main() -> None:
    parser = argparse.ArgumentParser(description="Plan one turn of movement orders.")
    parser.add_argument(
        "--snapshot",
        type=str,
        default="",
        help="JSON map snapshot. The built-in demo board is used when omitted.",
    )
    parser.add_argument("--seed", type=int, default=None)
    parser.add_argument("--turn", type=int, default=1, help="Current turn on the demo board.")
    parser.add_argument("--max-turns", type=int, default=20, help="Game length on the demo board.")
    parser.add_argument("--output", type=str, default="")
    parser.add_argument("--expand-until-turn", type=int, default=9)
    parser.add_argument("--max-expand-paths", type=int, default=3)
    parser.add_argument(
        "--deterministic",
        action="store_true",
        help="Break cost ties by destination id instead of at random.",
    )
    parser.add_argument("--verbose", action="store_true")
    args = parser.parse_args()

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO)

    if args.snapshot:
        snapshot = load_snapshot(args.snapshot)
    else:
        snapshot = demo_snapshot(seed=args.seed, current_turn=args.turn, max_turns=args.max_turns)

    config = StrategyConfig(
        expand_until_turn=args.expand_until_turn,
        expand_max_paths=args.max_expand_paths,
        seed=args.seed,
    )
    tie_break = StableTieBreak() if args.deterministic else None
    engine = TurnStrategyEngine(config, tie_break=tie_break)
    orders = engine.play_turn(snapshot)

    for order in orders:
        print(f"{order.source} -> {order.destination}: {order.count}")
    if args.output:
        save_orders(args.output, orders)
        print(f"Saved {len(orders)} orders to {args.output}")


if __name__ == "__main__":
    main()
