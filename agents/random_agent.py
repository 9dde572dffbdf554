# agents/random_agent.py
import random
from typing import Optional, Sequence

from actions import ActionType


class RandomAgent:
    """
    Simplest possible limit agent: picks uniformly among the legal actions.
    The random source is injected so a seeded run replays exactly.
    """

    def __init__(self, rng: Optional[random.Random] = None):
        self.rng = rng if rng is not None else random.Random()

    def act(self, allowed: Sequence[ActionType], **kw) -> ActionType:
        if not allowed:
            raise ValueError("No legal actions to choose from")
        return self.rng.choice(list(allowed))
