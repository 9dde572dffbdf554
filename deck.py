import random
from typing import List, Optional

import cards as codec


class Deck:
    """52 encoded cards dealt from the top without replacement."""

    def __init__(self, rng: Optional[random.Random] = None) -> None:
        self.rng = rng if rng is not None else random.Random()
        self.cards: List[int] = []
        self.reset()

    def reset(self) -> None:
        self.cards = codec.full_deck()

    def shuffle(self) -> None:
        self.rng.shuffle(self.cards)

    def deal(self, n: int = 1):
        """Return a card if n=1, otherwise return a list of cards."""
        if n < 1:
            raise ValueError("Must deal at least one card")
        if n > len(self.cards):
            raise ValueError("Not enough cards left in the deck")

        if n == 1:
            return self.cards.pop()

        dealt = self.cards[-n:]
        del self.cards[-n:]
        dealt.reverse()
        return dealt

    def __len__(self) -> int:
        return len(self.cards)
