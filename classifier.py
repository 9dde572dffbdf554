"""Five-card hand classification.

A hand class is the pair ``(category, kickers)``: two hands with the same
class are exactly as strong as each other, so 2,598,960 five-card hands
collapse into 7,462 classes.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from functools import total_ordering
from typing import Dict, List, Sequence, Tuple

import cards as codec
from errors import InvalidCard, InvalidHand

HAND_SIZE = 5

ClassKey = Tuple[int, Tuple[int, ...]]


class Category(IntEnum):
    """The nine hand categories, strongest first (lower value wins)."""

    STRAIGHT_FLUSH = 1
    FOUR_OF_A_KIND = 2
    FULL_HOUSE = 3
    FLUSH = 4
    STRAIGHT = 5
    THREE_OF_A_KIND = 6
    TWO_PAIR = 7
    ONE_PAIR = 8
    HIGH_CARD = 9

    @property
    def display_name(self) -> str:
        return CATEGORY_NAMES[self]


CATEGORY_NAMES: Dict[Category, str] = {
    Category.STRAIGHT_FLUSH: "Straight Flush",
    Category.FOUR_OF_A_KIND: "Four of a Kind",
    Category.FULL_HOUSE: "Full House",
    Category.FLUSH: "Flush",
    Category.STRAIGHT: "Straight",
    Category.THREE_OF_A_KIND: "Three of a Kind",
    Category.TWO_PAIR: "Two Pair",
    Category.ONE_PAIR: "One Pair",
    Category.HIGH_CARD: "High Card",
}


def category_name(category: int) -> str:
    """Human readable name for a category number (1..9).

    Raises ``ValueError`` for a number outside that range.
    """
    return CATEGORY_NAMES[Category(category)]


@total_ordering
@dataclass(frozen=True)
class HandClass:
    """Strength class of a five-card hand.

    Equality and hashing are structural on ``(category, kickers)``.
    Comparisons order by strength: ``a < b`` means ``a`` is the weaker hand,
    so ``max()`` picks the strongest and ``sorted(..., reverse=True)`` lists
    classes best first.
    """

    category: Category
    kickers: Tuple[int, ...]

    @classmethod
    def from_key(cls, key: ClassKey) -> "HandClass":
        category, kickers = key
        return cls(Category(category), tuple(kickers))

    def strength_key(self) -> Tuple[int, Tuple[int, ...]]:
        """Larger is stronger.

        Tuples compare element-wise and a shorter prefix sorts first, so a
        missing kicker counts as lower than any real rank.
        """
        return -int(self.category), self.kickers

    def beats(self, other: "HandClass") -> bool:
        return self.strength_key() > other.strength_key()

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, HandClass):
            return NotImplemented
        return self.strength_key() < other.strength_key()

    @property
    def name(self) -> str:
        return self.category.display_name

    def __str__(self) -> str:
        kickers = ",".join(codec.RANK_CHARS[r - codec.MIN_RANK] for r in self.kickers)
        return f"{self.name} [{kickers}]"


def is_better(a: HandClass, b: HandClass) -> bool:
    """True when ``a`` is strictly stronger than ``b``."""
    return a.beats(b)


# ---------------------------------------------------------------------------
# Straights
# ---------------------------------------------------------------------------

_WHEEL_MASK = 0b1_0000_0000_1111  # A,2,3,4,5


def _window(top: int) -> int:
    # five consecutive rank bits ending at ``top``
    if top == 5:
        return _WHEEL_MASK
    return 0b11111 << (top - 6)


_STRAIGHT_WINDOWS: Tuple[Tuple[int, int], ...] = tuple(
    (top, _window(top)) for top in range(codec.MAX_RANK, 4, -1)
)


def straight_top(mask: int) -> int:
    """Highest card of the best straight in a 13-bit rank mask, or 0.

    Tops are scanned from ace down to five; the wheel reports a top of 5 so
    it ranks below the six-high straight.
    """
    for top, window in _STRAIGHT_WINDOWS:
        if mask & window == window:
            return top
    return 0


# ---------------------------------------------------------------------------
# Classification
# ---------------------------------------------------------------------------


def classify_key(hand: Sequence[int]) -> ClassKey:
    """Classify five distinct cards without validating them.

    Returns the bare ``(category, kickers)`` key. This is the hot path used
    while enumerating every five-card hand; ``classify`` is the checked entry
    point.
    """
    c0, c1, c2, c3, c4 = hand
    flush = bool(c0 & c1 & c2 & c3 & c4 & 0xF000)
    ranks = sorted(((c0 >> 8) & 0xF, (c1 >> 8) & 0xF, (c2 >> 8) & 0xF,
                    (c3 >> 8) & 0xF, (c4 >> 8) & 0xF), reverse=True)

    counts: Dict[int, int] = {}
    for rank in ranks:
        counts[rank] = counts.get(rank, 0) + 1

    # a straight needs five different ranks
    top = 0
    if len(counts) == HAND_SIZE:
        top = straight_top(((c0 | c1 | c2 | c3 | c4) >> 16) & 0x1FFF)

    quads: List[int] = []
    trips: List[int] = []
    pairs: List[int] = []
    singles: List[int] = []
    buckets = (None, singles, pairs, trips, quads)
    for rank, count in counts.items():  # ranks arrive in descending order
        buckets[count].append(rank)

    if top and flush:
        return Category.STRAIGHT_FLUSH, (top,)
    if quads:
        return Category.FOUR_OF_A_KIND, (quads[0], singles[0])
    if trips and pairs:
        return Category.FULL_HOUSE, (trips[0], pairs[0])
    if flush:
        return Category.FLUSH, tuple(ranks)
    if top:
        return Category.STRAIGHT, (top,)
    if trips:
        return Category.THREE_OF_A_KIND, (trips[0], *singles)
    if len(pairs) >= 2:
        return Category.TWO_PAIR, (pairs[0], pairs[1], singles[0])
    if pairs:
        return Category.ONE_PAIR, (pairs[0], *singles)
    return Category.HIGH_CARD, tuple(ranks)


def validate_hand(hand: Sequence[int], size: int) -> Tuple[int, ...]:
    """Check that ``hand`` holds ``size`` distinct valid cards."""
    hand = tuple(hand)
    if len(hand) != size:
        raise InvalidHand(f"Expected {size} cards, got {len(hand)}")
    for card in hand:
        try:
            codec.decode(card)
        except InvalidCard as exc:
            raise InvalidHand(str(exc)) from exc
    if len(set(hand)) != size:
        raise InvalidHand(f"Duplicate cards in hand: {codec.format_cards(hand)}")
    return hand


def classify(hand: Sequence[int]) -> HandClass:
    """Classify exactly five distinct cards into a ``HandClass``."""
    return HandClass.from_key(classify_key(validate_hand(hand, HAND_SIZE)))
