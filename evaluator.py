"""Seven-card hand evaluation on top of the canonical table."""
from __future__ import annotations

from collections import OrderedDict
from itertools import combinations
from typing import FrozenSet, Optional, Sequence, Tuple

from canonical_table import CanonicalTable, get_table
from classifier import HandClass, classify_key, validate_hand

SEVEN = 7
FIVE = 5


class SevenCardEvaluator:
    """Find the best five of seven cards and resolve it to a 1..7462 index.

    Lower indices are stronger. Results for repeated 7-card sets are kept in
    a small LRU cache keyed on the unordered set of cards; pass
    ``cache_size=0`` to turn it off.
    """

    def __init__(self, table: Optional[CanonicalTable] = None, cache_size: int = 4096):
        self.table = table if table is not None else get_table()
        self.cache_size = cache_size
        self._cache: "OrderedDict[FrozenSet[int], Tuple[HandClass, Tuple[int, ...]]]" = OrderedDict()

    def best_hand(self, cards: Sequence[int]) -> Tuple[HandClass, Tuple[int, ...]]:
        """Best ``HandClass`` among the 21 five-card subsets, with the cards used."""
        hand = validate_hand(cards, SEVEN)
        cache_key = frozenset(hand)
        if self.cache_size:
            cached = self._cache.get(cache_key)
            if cached is not None:
                self._cache.move_to_end(cache_key)
                return cached

        best_key = None
        best_strength = None
        best_five: Tuple[int, ...] = ()
        for five in combinations(hand, FIVE):
            key = classify_key(five)
            strength = (-key[0], key[1])
            if best_strength is None or strength > best_strength:
                best_key, best_strength, best_five = key, strength, five

        result = (HandClass.from_key(best_key), best_five)
        if self.cache_size:
            self._cache[cache_key] = result
            if len(self._cache) > self.cache_size:
                self._cache.popitem(last=False)
        return result

    def best_index(self, cards: Sequence[int]) -> int:
        """Canonical index of the best five-card hand in ``cards`` (1 = best)."""
        hand_class, _ = self.best_hand(cards)
        return self.table.lookup(hand_class)

    def compare(self, first: Sequence[int], second: Sequence[int]) -> int:
        """-1 if ``first`` wins, 1 if ``second`` wins, 0 on a tie."""
        a = self.best_index(first)
        b = self.best_index(second)
        return (a > b) - (a < b)
