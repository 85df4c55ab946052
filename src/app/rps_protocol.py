from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Literal

from rps_errors import UnknownMoveError, ValidationError

MoveSet = tuple[str, ...]
Outcome = Literal["first_win", "second_win", "draw"]

MIN_MOVES = 3


def validate_moves(moves: Sequence[str]) -> MoveSet:
    """Check a raw move list and freeze it into a Move Set.

    Order is preserved: it defines which moves sit next to each other on the
    circle used by :class:`OutcomeResolver`.
    """
    if len(moves) < MIN_MOVES:
        raise ValidationError("You must provide at least 3 moves.")
    if len(moves) % 2 == 0:
        raise ValidationError("The number of moves must be an odd number.")
    if len(set(moves)) != len(moves):
        raise ValidationError("Moves must be unique.")
    return tuple(moves)


@dataclass(frozen=True)
class RoundOutcome:
    outcome: Outcome
    first: str
    second: str

    @property
    def winner(self) -> str | None:
        if self.outcome == "first_win":
            return self.first
        if self.outcome == "second_win":
            return self.second
        return None

    @property
    def loser(self) -> str | None:
        if self.outcome == "first_win":
            return self.second
        if self.outcome == "second_win":
            return self.first
        return None

    def describe(self) -> str:
        if self.outcome == "draw":
            return "Draw"
        return f"{self.winner} wins against {self.loser}"


class OutcomeResolver:
    """Decides rounds for any odd-sized Move Set.

    Each move beats the ``N // 2`` moves before it on the circle and loses to
    the ``N // 2`` moves after it. With three moves that is plain
    rock-paper-scissors.
    """

    def __init__(self, moves: Sequence[str]) -> None:
        if len(moves) < MIN_MOVES or len(moves) % 2 == 0:
            raise ValidationError(f"move set must be odd and at least {MIN_MOVES} long, got {len(moves)}")
        self.moves: MoveSet = tuple(moves)
        self.half = len(self.moves) // 2
        self._index = {move: i for i, move in enumerate(self.moves)}
        if len(self._index) != len(self.moves):
            raise ValidationError("Moves must be unique.")

    def index_of(self, move: str) -> int:
        try:
            return self._index[move]
        except KeyError:
            raise UnknownMoveError(move) from None

    def determine_winner(self, move_a: str, move_b: str) -> RoundOutcome:
        i = self.index_of(move_a)
        j = self.index_of(move_b)
        if i == j:
            return RoundOutcome("draw", move_a, move_b)

        distance = (j - i) % len(self.moves)
        if 1 <= distance <= self.half:
            return RoundOutcome("second_win", move_a, move_b)
        return RoundOutcome("first_win", move_a, move_b)
