from typing import Callable, Dict, List, Optional, Sequence

from actions import Action, ActionType

MAX_RAISES = 4
MAX_ACTIONS = 12


class BettingRound:
    """
    Legal action walk for one heads-up limit street.

    Only the action flow is enforced; no chips or pot are tracked:
    - no bet outstanding: check or bet
    - facing a bet: call, raise or fold (no raise once the cap is reached)
    - a call or a fold ends the street, as does check-check
    """

    def __init__(
        self,
        first_seat: int,
        seats: Sequence[int] = (1, 2),
        *,
        max_raises: int = MAX_RAISES,
        max_actions: int = MAX_ACTIONS,
    ):
        if len(seats) != 2 or first_seat not in seats:
            raise ValueError("Betting rounds are heads-up and must start with a seated player")
        self.seats = list(seats)
        self.first_seat = first_seat
        self.current_seat = first_seat
        self.max_raises = max_raises
        self.max_actions = max_actions

        self.has_bet = False
        self.raises = 0
        self.finished = False
        self.folded_seat: Optional[int] = None
        self.actions: List[Action] = []

    def other_seat(self, seat: int) -> int:
        return self.seats[1] if seat == self.seats[0] else self.seats[0]

    def allowed_actions(self) -> List[ActionType]:
        if not self.has_bet:
            return [ActionType.CHECK, ActionType.BET]
        if self.raises < self.max_raises:
            return [ActionType.CALL, ActionType.RAISE, ActionType.FOLD]
        return [ActionType.CALL, ActionType.FOLD]

    def apply_action(self, action_type: ActionType) -> Action:
        if self.finished:
            raise ValueError("Street is already finished")
        if action_type not in self.allowed_actions():
            raise ValueError(f"Illegal action {action_type.value} for player {self.current_seat}")

        seat = self.current_seat
        action = Action(action_type, seat)

        if action_type == ActionType.BET:
            self.has_bet = True
            self.raises = 1  # the opening bet counts toward the cap
        elif action_type == ActionType.RAISE:
            self.raises += 1
        elif action_type == ActionType.CALL:
            self.finished = True
        elif action_type == ActionType.CHECK:
            # check-check: the second player checks behind
            if self.actions and seat != self.first_seat:
                self.finished = True
        elif action_type == ActionType.FOLD:
            self.folded_seat = seat
            self.finished = True

        self.actions.append(action)
        self.current_seat = self.other_seat(seat)
        if len(self.actions) >= self.max_actions:
            self.finished = True
        return action

    def run(
        self,
        agents: Dict[int, object],
        street_name: str = "",
        on_action: Optional[Callable[[Action, str], None]] = None,
    ) -> List[Action]:
        while not self.finished:
            agent = agents[self.current_seat]
            choice = agent.act(
                allowed=self.allowed_actions(),
                seat=self.current_seat,
                street=street_name,
                raises=self.raises,
            )
            action = self.apply_action(choice)
            if on_action is not None:
                on_action(action, street_name)
        return self.actions
