# treys_reference.py
"""Independent scoring through ``treys`` for cross-checking our indices.

treys uses the same 1 (royal flush) .. 7462 (7-5-4-3-2) scale, so for any
legal hand its score must equal ``SevenCardEvaluator.best_index``.
"""
from typing import Sequence

from treys import Card, Evaluator

import cards as codec

evaluator = Evaluator()


def to_treys(card: int) -> int:
    """Convert an encoded card (e.g. 'As') to treys' internal representation."""
    # treys uses: s = spades, h = hearts, d = diamonds, c = clubs
    return Card.new(codec.short_string(card))


def treys_index(cards: Sequence[int]) -> int:
    """
    Returns the treys score for 5 to 7 cards: lower = better.
    """
    converted = [to_treys(c) for c in cards]
    return evaluator.evaluate(converted[:2], converted[2:])


def treys_class_name(score: int) -> str:
    return evaluator.class_to_string(evaluator.get_rank_class(score))
