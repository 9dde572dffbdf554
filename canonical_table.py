"""Canonical ordering of every distinct five-card hand class.

Every five-card hand from the 52-card deck is classified once, the distinct
classes are sorted strongest to weakest and numbered from 1, giving the
familiar 1 (royal flush) .. 7462 (7-5-4-3-2 offsuit) scale.
"""
from __future__ import annotations

import logging
import threading
import time
from concurrent.futures import ProcessPoolExecutor
from itertools import combinations
from typing import Dict, Iterable, Optional, Set, Tuple

import cards as codec
from classifier import Category, ClassKey, HandClass, classify_key
from errors import ClassNotFound, TableIntegrityError

logger = logging.getLogger(__name__)

DISTINCT_CLASSES = 7462
HAND_COUNT = 2_598_960

# Number of classes in each category, strongest first.
CATEGORY_SIZES: Dict[Category, int] = {
    Category.STRAIGHT_FLUSH: 10,
    Category.FOUR_OF_A_KIND: 156,
    Category.FULL_HOUSE: 156,
    Category.FLUSH: 1277,
    Category.STRAIGHT: 10,
    Category.THREE_OF_A_KIND: 858,
    Category.TWO_PAIR: 858,
    Category.ONE_PAIR: 2860,
    Category.HIGH_CARD: 1277,
}


def shard_keys(first_index: int) -> Set[ClassKey]:
    """Distinct class keys of every hand whose lowest deck position is ``first_index``.

    The union over ``first_index`` in ``0..47`` covers each five-card
    combination exactly once.
    """
    deck = codec.full_deck()
    first = deck[first_index]
    keys: Set[ClassKey] = set()
    add = keys.add
    for rest in combinations(deck[first_index + 1:], 4):
        add(classify_key((first,) + rest))
    return keys


def shard_indices() -> range:
    return range(len(codec.full_deck()) - 4)


class CanonicalTable:
    """Ordered, read-only table of the 7,462 hand classes."""

    def __init__(self, classes: Tuple[HandClass, ...]):
        self._classes = classes
        self._index: Dict[HandClass, int] = {hc: i + 1 for i, hc in enumerate(classes)}

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    @classmethod
    def build(cls, workers: int = 1) -> "CanonicalTable":
        """Enumerate all C(52,5) hands and order their distinct classes.

        ``workers > 1`` spreads the first-card shards over a process pool;
        the merged result does not depend on how the work was split.
        """
        started = time.perf_counter()
        logger.info("Building canonical 5-card hand table (%d hands)", HAND_COUNT)

        keys: Set[ClassKey] = set()
        shards = list(shard_indices())
        if workers > 1:
            with ProcessPoolExecutor(max_workers=workers) as pool:
                for partial in pool.map(shard_keys, shards):
                    keys |= partial
        else:
            for first_index in shards:
                keys |= shard_keys(first_index)
        logger.debug("Merged %d shards into %d distinct classes", len(shards), len(keys))

        table = cls.from_classes(HandClass.from_key(key) for key in keys)
        table.verify()
        logger.info(
            "Canonical table built: %d distinct classes in %.1fs",
            len(table),
            time.perf_counter() - started,
        )
        return table

    @classmethod
    def from_classes(cls, classes: Iterable[HandClass]) -> "CanonicalTable":
        """Deduplicate and sort ``classes`` strongest first."""
        ordered = sorted(set(classes), key=HandClass.strength_key, reverse=True)
        return cls(tuple(ordered))

    def verify(self) -> None:
        """Raise ``TableIntegrityError`` unless the table has the standard shape."""
        if len(self._classes) != DISTINCT_CLASSES:
            raise TableIntegrityError(
                f"Expected {DISTINCT_CLASSES} distinct classes, found {len(self._classes)}"
            )
        counts = {category: 0 for category in Category}
        for hc in self._classes:
            counts[hc.category] += 1
        if counts != CATEGORY_SIZES:
            raise TableIntegrityError(f"Unexpected per-category class counts: {counts}")

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    @property
    def classes(self) -> Tuple[HandClass, ...]:
        return self._classes

    def lookup(self, hand_class: HandClass) -> int:
        """1-based rank of ``hand_class`` (1 = best)."""
        try:
            return self._index[hand_class]
        except KeyError:
            raise ClassNotFound(f"No canonical entry for {hand_class!r}") from None

    def class_at(self, index: int) -> HandClass:
        if not 1 <= index <= len(self._classes):
            raise IndexError(f"Index must be in 1..{len(self._classes)}, got {index}")
        return self._classes[index - 1]

    def category_bounds(self) -> Dict[Category, Tuple[int, int]]:
        """First and last index held by each category."""
        bounds: Dict[Category, Tuple[int, int]] = {}
        for index, hc in enumerate(self._classes, start=1):
            first, _ = bounds.get(hc.category, (index, index))
            bounds[hc.category] = (first, index)
        return bounds

    def __len__(self) -> int:
        return len(self._classes)

    def __contains__(self, hand_class: object) -> bool:
        return hand_class in self._index

    def __iter__(self):
        return iter(self._classes)


# ---------------------------------------------------------------------------
# Process-wide table
# ---------------------------------------------------------------------------

_table: Optional[CanonicalTable] = None
_table_lock = threading.Lock()


def get_table(workers: int = 1) -> CanonicalTable:
    """Return the shared table, building it on first use.

    Readers never see a partially built table: the reference is published
    only after ``build`` returns.
    """
    global _table
    table = _table
    if table is None:
        with _table_lock:
            if _table is None:
                _table = CanonicalTable.build(workers=workers)
            table = _table
    return table


def reset_table() -> None:
    """Forget the shared table so the next ``get_table`` rebuilds it."""
    global _table
    with _table_lock:
        _table = None
