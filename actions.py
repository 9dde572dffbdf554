from enum import Enum


class ActionType(Enum):
    CHECK = "check"
    BET = "bet"
    CALL = "call"
    RAISE = "raise"
    FOLD = "fold"


class Action:
    def __init__(self, action_type: ActionType, seat: int):
        self.type = action_type
        self.seat = seat

    def __repr__(self):
        return f"Player {self.seat}: {self.type.value}"
