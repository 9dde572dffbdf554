"""Structured action and showdown logging for simulated hands."""
from __future__ import annotations

import json
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional

import cards as codec

try:  # Optional dependency for Parquet output
    import pyarrow as pa  # type: ignore
    import pyarrow.parquet as pq  # type: ignore
except Exception:  # pragma: no cover - pyarrow is optional
    pa = None  # type: ignore
    pq = None  # type: ignore


@dataclass
class ActionEvent:
    """Single street action emitted by a heads-up hand."""

    timestamp: str
    hand_id: str
    event: str
    seat: int
    action: str
    street: str
    board: List[str]
    hole_cards: Optional[List[str]] = None
    raises: Optional[int] = None

    def as_dict(self) -> Dict:
        return {
            "timestamp": self.timestamp,
            "hand_id": self.hand_id,
            "event": self.event,
            "seat": self.seat,
            "action": self.action,
            "street": self.street,
            "board": self.board,
            "hole_cards": self.hole_cards,
            "raises": self.raises,
        }


@dataclass
class ShowdownEvent:
    """Terminal showdown snapshot with each player's best class and index."""

    timestamp: str
    hand_id: str
    event: str
    board: List[str]
    players: List[Dict[str, Any]]
    winner: Optional[int]

    def as_dict(self) -> Dict:
        return {
            "timestamp": self.timestamp,
            "hand_id": self.hand_id,
            "event": self.event,
            "board": self.board,
            "players": self.players,
            "winner": self.winner,
        }


class _BaseWriter:
    def append(self, event: Dict[str, Any]) -> None:  # pragma: no cover - interface
        raise NotImplementedError

    def close(self) -> None:  # pragma: no cover - interface
        return None


class StdoutWriter(_BaseWriter):
    def append(self, event: Dict[str, Any]) -> None:
        print(json.dumps(event, separators=(",", ":")))


class JSONLWriter(_BaseWriter):
    def __init__(self, path: Path) -> None:
        self.path = path
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self._handle = self.path.open("a", encoding="utf-8")

    def append(self, event: Dict[str, Any]) -> None:
        self._handle.write(json.dumps(event) + "\n")
        self._handle.flush()

    def close(self) -> None:
        self._handle.close()


def _event_schema(kind: str) -> "pa.Schema":
    """Column layout per event kind; nullable fields keep a concrete type."""
    cards_type = pa.list_(pa.string())
    if kind == "action":
        return pa.schema(
            [
                ("timestamp", pa.string()),
                ("hand_id", pa.string()),
                ("event", pa.string()),
                ("seat", pa.int64()),
                ("action", pa.string()),
                ("street", pa.string()),
                ("board", cards_type),
                ("hole_cards", cards_type),
                ("raises", pa.int64()),
            ]
        )
    if kind == "showdown":
        player_type = pa.struct(
            [
                ("seat", pa.int64()),
                ("hole_cards", cards_type),
                ("category", pa.string()),
                ("index", pa.int64()),
                ("best_five", cards_type),
                ("folded_streets", cards_type),
            ]
        )
        return pa.schema(
            [
                ("timestamp", pa.string()),
                ("hand_id", pa.string()),
                ("event", pa.string()),
                ("board", cards_type),
                ("players", pa.list_(player_type)),
                ("winner", pa.int64()),
            ]
        )
    raise ValueError(f"Unknown event kind: {kind}")


class ParquetWriter(_BaseWriter):
    """Streams events into one Parquet file per event kind.

    Action and showdown events have different columns, so each kind gets its
    own file next to ``path`` (``<stem>.action.parquet`` and so on), opened
    on the first event of that kind.
    """

    def __init__(self, path: Path) -> None:
        if pq is None or pa is None:  # pragma: no cover - import-time guard
            raise RuntimeError("pyarrow is required for Parquet logging but is not installed")
        self.path = path
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self._writers: Dict[str, "pq.ParquetWriter"] = {}
        self._schemas: Dict[str, "pa.Schema"] = {}

    def path_for(self, kind: str) -> Path:
        return self.path.with_name(f"{self.path.stem}.{kind}.parquet")

    def append(self, event: Dict[str, Any]) -> None:
        kind = event["event"]
        writer = self._writers.get(kind)
        if writer is None:
            self._schemas[kind] = _event_schema(kind)
            writer = pq.ParquetWriter(self.path_for(kind), self._schemas[kind])
            self._writers[kind] = writer
        writer.write_table(pa.Table.from_pylist([event], schema=self._schemas[kind]))

    def close(self) -> None:
        for writer in self._writers.values():
            writer.close()
        self._writers = {}


class SelfPlayLogger:
    """Facade over an append-only writer; ``hand_id`` is set per hand."""

    def __init__(self, writer: _BaseWriter, hand_id: str = "") -> None:
        self._writer = writer
        self.hand_id = hand_id

    def log_action(
        self,
        *,
        seat: int,
        action: str,
        street: str,
        board: List[str],
        hole_cards: Optional[List[str]] = None,
        raises: Optional[int] = None,
    ) -> None:
        event = ActionEvent(
            timestamp=datetime.now(timezone.utc).isoformat(),
            hand_id=self.hand_id,
            event="action",
            seat=seat,
            action=action,
            street=street,
            board=board,
            hole_cards=hole_cards,
            raises=raises,
        )
        self._writer.append(event.as_dict())

    def log_showdown(
        self,
        *,
        board: List[str],
        players: Iterable[Any],
        winner: Optional[int],
    ) -> None:
        serialized_players = [
            {
                "seat": p.seat,
                "hole_cards": [codec.short_string(card) for card in p.hole_cards],
                "category": p.best_class.name if p.best_class is not None else None,
                "index": p.best_index,
                "best_five": [codec.short_string(card) for card in p.best_five],
                "folded_streets": list(p.folded_streets),
            }
            for p in players
        ]

        event = ShowdownEvent(
            timestamp=datetime.now(timezone.utc).isoformat(),
            hand_id=self.hand_id,
            event="showdown",
            board=board,
            players=serialized_players,
            winner=winner,
        )
        self._writer.append(event.as_dict())

    def close(self) -> None:
        self._writer.close()


def create_logger(mode: str, *, destination: Optional[Path], hand_id: str = "") -> SelfPlayLogger:
    """Factory that builds a logger for the requested mode."""

    normalized = mode.lower()
    if normalized == "stdout":
        writer = StdoutWriter()
    elif normalized == "jsonl":
        if not destination:
            raise ValueError("JSONL logging requires a destination path")
        writer = JSONLWriter(destination)
    elif normalized == "parquet":
        if not destination:
            raise ValueError("Parquet logging requires a destination path")
        writer = ParquetWriter(destination)
    else:
        raise ValueError(f"Unknown action log mode: {mode}")

    return SelfPlayLogger(writer, hand_id=hand_id)
