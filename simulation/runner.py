"""Heads-up limit Hold'em simulation with canonical 1..7462 showdown indices."""
from __future__ import annotations

import argparse
import json
import logging
import random
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Dict, List, Optional

import cards as codec
from agents import RandomAgent
from betting import MAX_ACTIONS, MAX_RAISES
from canonical_table import get_table
from deck import Deck
from evaluator import SevenCardEvaluator
from hand import STREETS, HeadsUpHand, PlayerState
from hand_logging import SelfPlayLogger, create_logger
from treys_reference import treys_index

logger = logging.getLogger(__name__)

BANNER = "=" * 50


# ---------------------------------------------------------------------------
# Configuration structures
# ---------------------------------------------------------------------------


@dataclass
class SimulationConfig:
    num_hands: int = 3
    seed: Optional[int] = None
    max_raises: int = MAX_RAISES
    max_actions: int = MAX_ACTIONS
    table_workers: int = 1
    action_log_mode: Optional[str] = None
    action_log_path: Optional[Path] = None
    verify_with_treys: bool = False

    @classmethod
    def from_dict(cls, data: Dict) -> "SimulationConfig":
        action_log = data.get("action_log") or {}
        path = action_log.get("path")
        return cls(
            num_hands=data.get("num_hands", 3),
            seed=data.get("seed"),
            max_raises=data.get("max_raises", MAX_RAISES),
            max_actions=data.get("max_actions", MAX_ACTIONS),
            table_workers=data.get("table_workers", 1),
            action_log_mode=action_log.get("mode"),
            action_log_path=Path(path) if path else None,
            verify_with_treys=data.get("verify_with_treys", False),
        )

    def validate(self) -> None:
        if self.num_hands < 0:
            raise ValueError("num_hands must be non-negative")
        if self.max_raises < 1:
            raise ValueError("max_raises must be at least 1")
        if self.max_actions < 1:
            raise ValueError("max_actions must be at least 1")
        if self.table_workers < 1:
            raise ValueError("table_workers must be at least 1")


# ---------------------------------------------------------------------------
# Stats & hooks
# ---------------------------------------------------------------------------


class HandEventPublisher:
    def __init__(self) -> None:
        self._subscribers: List[Callable[[Dict], None]] = []

    def subscribe(self, callback: Callable[[Dict], None]) -> None:
        self._subscribers.append(callback)

    def publish(self, payload: Dict) -> None:
        for callback in list(self._subscribers):
            callback(payload)


@dataclass
class SimulationStats:
    hands_played: int = 0
    ties: int = 0
    win_counts: Dict[int, int] = field(default_factory=dict)
    category_counts: Dict[str, int] = field(default_factory=dict)

    def update_from_summary(self, summary: Dict) -> None:
        self.hands_played += 1
        winner = summary.get("winner")
        if winner is None:
            self.ties += 1
        else:
            self.win_counts[winner] = self.win_counts.get(winner, 0) + 1
        for entry in summary.get("players", []):
            name = entry["category"]
            self.category_counts[name] = self.category_counts.get(name, 0) + 1

    def as_dict(self) -> Dict:
        return {
            "hands_played": self.hands_played,
            "ties": self.ties,
            "win_counts": self.win_counts,
            "category_counts": self.category_counts,
        }


# ---------------------------------------------------------------------------
# Presentation
# ---------------------------------------------------------------------------


def _cards_text(cards: List[int]) -> str:
    return ", ".join(codec.card_to_string(c) for c in cards)


def format_hand_report(hand_number: int, result: Dict) -> List[str]:
    """Console transcript of a played hand, street by street."""
    board = result["board"]
    players: List[PlayerState] = result["players"]
    lines = [BANNER, f"HAND #{hand_number}"]
    for p in players:
        lines.append(f"Player {p.seat}: {_cards_text(p.hole_cards)}")

    reveals = {"Flop": board[:3], "Turn": board[3:4], "River": board[4:5]}
    for street in STREETS:
        if street in reveals:
            lines.append(f"{street}: {_cards_text(reveals[street])}")
        lines.append(f"-- {street} --")
        for action in result["streets"].get(street, []):
            lines.append(f"Player {action.seat}: {action.type.value}")

    lines.append("-- Showdown --")
    lines.append(f"Board: {_cards_text(board)}")
    for p in players:
        lines.append(f"Player {p.seat}: {_cards_text(p.hole_cards)}")
        lines.append(
            f"  Category: {p.best_class.name}  Index: {p.best_index} (1=best, 7462=worst)"
        )
        if p.folded_streets:
            lines.append(f"  Folded on: {', '.join(p.folded_streets)}")

    winner = result["winner"]
    if winner is None:
        lines.append("Result: Tie (equal index)")
    else:
        lines.append(f"Result: Player {winner} wins (lower index = better)")
    return lines


# ---------------------------------------------------------------------------
# Core simulation logic
# ---------------------------------------------------------------------------


def verify_against_treys(result: Dict) -> None:
    """Raise if any showdown index disagrees with treys."""
    for p in result["players"]:
        expected = treys_index(p.hole_cards + result["board"])
        if expected != p.best_index:
            raise RuntimeError(
                f"Index mismatch for player {p.seat} "
                f"({codec.format_cards(p.hole_cards + result['board'])}): "
                f"ours={p.best_index} treys={expected}"
            )


class SimulationRunner:
    def __init__(self, config: SimulationConfig, evaluator: Optional[SevenCardEvaluator] = None):
        config.validate()
        self.config = config
        self.publisher = HandEventPublisher()
        self.stats = SimulationStats()
        if evaluator is None:
            evaluator = SevenCardEvaluator(get_table(workers=config.table_workers))
        self.evaluator = evaluator
        logger.info("Expect 7462 distinct classes. Found: %d", len(self.evaluator.table))

    def subscribe(self, callback: Callable[[Dict], None]) -> None:
        self.publisher.subscribe(callback)

    def _rng_for_hand(self, hand_number: int) -> random.Random:
        if self.config.seed is None:
            return random.Random()
        return random.Random(self.config.seed + hand_number)

    def _open_logger(self) -> Optional[SelfPlayLogger]:
        if not self.config.action_log_mode:
            return None
        destination = self.config.action_log_path
        if destination:
            destination = destination.expanduser()
        return create_logger(self.config.action_log_mode, destination=destination)

    def play_one(self, hand_number: int, action_logger: Optional[SelfPlayLogger] = None) -> Dict:
        rng = self._rng_for_hand(hand_number)
        players = [PlayerState(seat=1), PlayerState(seat=2)]
        agents = {p.seat: RandomAgent(rng) for p in players}
        hand = HeadsUpHand(
            players,
            self.evaluator,
            Deck(rng),
            max_raises=self.config.max_raises,
            max_actions=self.config.max_actions,
        )
        if action_logger is not None:
            action_logger.hand_id = str(hand_number)
        result = hand.play_hand(agents, action_logger=action_logger)
        if self.config.verify_with_treys:
            verify_against_treys(result)
        return result

    def _summarize(self, hand_number: int, result: Dict) -> Dict:
        return {
            "hand_number": hand_number,
            "result": result,
            "winner": result["winner"],
            "players": [
                {"seat": p.seat, "category": p.best_class.name, "index": p.best_index}
                for p in result["players"]
            ],
        }

    def run(self) -> SimulationStats:
        action_logger = self._open_logger()
        try:
            for hand_number in range(1, self.config.num_hands + 1):
                result = self.play_one(hand_number, action_logger)
                summary = self._summarize(hand_number, result)
                self.stats.update_from_summary(summary)
                self.publisher.publish(summary)
        finally:
            if action_logger is not None:
                action_logger.close()
        return self.stats


# ---------------------------------------------------------------------------
# CLI
# ---------------------------------------------------------------------------


def _parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Heads-up limit Hold'em with canonical hand indices")
    parser.add_argument("--config", type=Path, help="Optional JSON config file", default=None)
    parser.add_argument("--hands", type=int, help="Number of hands to play", default=None)
    parser.add_argument("--seed", type=int, help="Base RNG seed", default=None)
    parser.add_argument("--max-raises", type=int, help="Bets plus raises allowed per street", default=None)
    parser.add_argument("--max-actions", type=int, help="Safety cap on actions per street", default=None)
    parser.add_argument("--table-workers", type=int, help="Processes used to build the table", default=None)
    parser.add_argument("--quiet", action="store_true", help="Only print the final summary")
    parser.add_argument(
        "--verify-with-treys",
        action="store_true",
        help="Cross-check every showdown index against treys",
    )
    parser.add_argument(
        "--action-log-mode",
        choices=["stdout", "jsonl", "parquet"],
        help="Where to stream structured action logs",
        default=None,
    )
    parser.add_argument(
        "--action-log-path",
        type=Path,
        help="Destination file for JSONL or Parquet logs",
        default=None,
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Diagnostic logging level",
    )
    return parser.parse_args(argv)


def _load_config_from_file(config_path: Optional[Path]) -> Dict:
    if not config_path:
        return {}
    return json.loads(config_path.read_text())


def _build_simulation_config(args: argparse.Namespace) -> SimulationConfig:
    config = SimulationConfig.from_dict(_load_config_from_file(args.config))

    if args.hands is not None:
        config.num_hands = args.hands
    if args.seed is not None:
        config.seed = args.seed
    if args.max_raises is not None:
        config.max_raises = args.max_raises
    if args.max_actions is not None:
        config.max_actions = args.max_actions
    if args.table_workers is not None:
        config.table_workers = max(1, args.table_workers)
    if args.action_log_mode:
        config.action_log_mode = args.action_log_mode
    if args.action_log_path:
        config.action_log_path = args.action_log_path
    if args.verify_with_treys:
        config.verify_with_treys = True
    return config


def main(argv: Optional[List[str]] = None) -> None:
    args = _parse_args(argv)
    logging.basicConfig(level=getattr(logging, args.log_level), format="%(levelname)s %(name)s: %(message)s")
    config = _build_simulation_config(args)
    runner = SimulationRunner(config)

    if not args.quiet:
        runner.subscribe(
            lambda summary: print("\n".join(format_hand_report(summary["hand_number"], summary["result"])))
        )

    stats = runner.run()
    print("Simulation complete.")
    print(json.dumps(stats.as_dict(), indent=2))


if __name__ == "__main__":
    main()
