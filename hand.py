from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

import cards as codec
from actions import Action
from betting import MAX_ACTIONS, MAX_RAISES, BettingRound
from classifier import HandClass
from deck import Deck
from evaluator import SevenCardEvaluator

STREETS = ("Preflop", "Flop", "Turn", "River")


@dataclass
class PlayerState:
    seat: int
    hole_cards: List[int] = field(default_factory=list)
    folded_streets: List[str] = field(default_factory=list)
    best_class: Optional[HandClass] = None
    best_five: Tuple[int, ...] = ()
    best_index: Optional[int] = None

    def reset_for_new_hand(self):
        self.hole_cards = []
        self.folded_streets = []
        self.best_class = None
        self.best_five = ()
        self.best_index = None

    def __str__(self):
        cards_str = codec.format_cards(self.hole_cards) if self.hole_cards else "[]"
        return f"Player {self.seat}: cards={cards_str}"


class HeadsUpHand:
    """One two-player limit hand: deal, four streets of actions, showdown.

    Folds end the street they happen on and are recorded, but the hand is
    always carried to showdown; no chips change hands.
    """

    def __init__(
        self,
        players: List[PlayerState],
        evaluator: SevenCardEvaluator,
        deck: Optional[Deck] = None,
        *,
        max_raises: int = MAX_RAISES,
        max_actions: int = MAX_ACTIONS,
    ):
        if len(players) != 2:
            raise ValueError("HeadsUpHand needs exactly two players")
        self.players = players
        self.evaluator = evaluator
        self.deck = deck if deck is not None else Deck()
        self.max_raises = max_raises
        self.max_actions = max_actions
        self.board: List[int] = []
        self.streets: Dict[str, List[Action]] = {}

    # ----------------------------------------------------------------------
    # Dealing
    # ----------------------------------------------------------------------

    def reset_for_new_deck(self):
        self.deck.reset()
        self.deck.shuffle()
        self.board = []
        self.streets = {}
        for p in self.players:
            p.reset_for_new_hand()

    def deal_hole_cards(self):
        for _ in range(2):
            for p in self.players:
                p.hole_cards.append(self.deck.deal(1))

    def deal_flop(self):
        self.deck.deal(1)  # burn
        self.board.extend(self.deck.deal(3))

    def deal_turn(self):
        self.deck.deal(1)  # burn
        self.board.append(self.deck.deal(1))

    def deal_river(self):
        self.deck.deal(1)  # burn
        self.board.append(self.deck.deal(1))

    # ----------------------------------------------------------------------
    # Betting
    # ----------------------------------------------------------------------

    def run_street(self, street_name: str, agents: Dict[int, object], *, action_logger=None):
        seats = [p.seat for p in self.players]
        street = BettingRound(
            seats[0],
            seats,
            max_raises=self.max_raises,
            max_actions=self.max_actions,
        )

        def on_action(action: Action, name: str) -> None:
            if action_logger is not None:
                player = self._player(action.seat)
                action_logger.log_action(
                    seat=action.seat,
                    action=action.type.value,
                    street=name,
                    board=[codec.short_string(c) for c in self.board],
                    hole_cards=[codec.short_string(c) for c in player.hole_cards],
                    raises=street.raises,
                )

        self.streets[street_name] = street.run(agents, street_name, on_action)
        if street.folded_seat is not None:
            self._player(street.folded_seat).folded_streets.append(street_name)

    def _player(self, seat: int) -> PlayerState:
        for p in self.players:
            if p.seat == seat:
                return p
        raise KeyError(seat)

    # ----------------------------------------------------------------------
    # Showdown
    # ----------------------------------------------------------------------

    def showdown(self) -> Optional[int]:
        """Score both players; return the winning seat, or None on a tie."""
        for p in self.players:
            p.best_class, p.best_five = self.evaluator.best_hand(p.hole_cards + self.board)
            p.best_index = self.evaluator.table.lookup(p.best_class)

        first, second = self.players
        if first.best_index < second.best_index:
            return first.seat
        if second.best_index < first.best_index:
            return second.seat
        return None

    # ----------------------------------------------------------------------
    # Full Hand Execution
    # ----------------------------------------------------------------------

    def play_hand(self, agents: Dict[int, object], *, action_logger=None) -> Dict:
        self.reset_for_new_deck()
        self.deal_hole_cards()

        dealers = (None, self.deal_flop, self.deal_turn, self.deal_river)
        for street_name, deal in zip(STREETS, dealers):
            if deal is not None:
                deal()
            self.run_street(street_name, agents, action_logger=action_logger)

        winner = self.showdown()
        if action_logger is not None:
            action_logger.log_showdown(
                board=[codec.short_string(c) for c in self.board],
                players=self.players,
                winner=winner,
            )

        return {
            "board": list(self.board),
            "streets": dict(self.streets),
            "players": self.players,
            "winner": winner,
        }
