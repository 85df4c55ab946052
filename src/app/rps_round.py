from __future__ import annotations

import enum
import logging
import sys
from collections.abc import Callable
from dataclasses import dataclass, field

from rps_commit import (
    DEFAULT_KEY_BITS,
    Commitment,
    RandomSource,
    SystemRandomSource,
    create_commitment,
    random_index,
)
from rps_errors import GameError, InvalidUserInputError
from rps_protocol import MoveSet, OutcomeResolver, RoundOutcome

logger = logging.getLogger(__name__)

EXIT_CHOICE = "0"
PROMPT = "Enter your move: "


class RoundState(enum.Enum):
    IDLE = "idle"
    COMMITTED = "committed"
    AWAITING_CHOICE = "awaiting_choice"
    RESOLVED = "resolved"
    TERMINAL = "terminal"
    EXIT = "exit"


def console_read_line(prompt: str) -> str | None:
    """Read one line from stdin; ``None`` once the stream is closed."""
    try:
        return input(prompt)
    except EOFError:
        return None


def _print_error(text: str) -> None:
    print(text, file=sys.stderr)


@dataclass
class GameContext:
    moves: MoveSet
    rng: RandomSource = field(default_factory=SystemRandomSource)
    read_line: Callable[[str], str | None] = console_read_line
    write: Callable[[str], None] = print
    write_error: Callable[[str], None] = _print_error
    key_bits: int = DEFAULT_KEY_BITS


def parse_choice(raw: str, move_count: int) -> int:
    """Map a menu line to a 1-based move number, or 0 for exit."""
    text = raw.strip()
    if text == EXIT_CHOICE:
        return 0
    if not (text.isascii() and text.isdecimal()):
        raise InvalidUserInputError(raw)
    choice = int(text)
    if not 1 <= choice <= move_count:
        raise InvalidUserInputError(raw)
    return choice


class GameRound:
    """One round against the computer, driven as an explicit state machine.

    The computer's move is fixed and committed to before the menu is shown.
    A bad menu choice sends the round back to ``IDLE`` so that every attempt
    gets its own key, move and digest.
    """

    def __init__(self, context: GameContext) -> None:
        self.context = context
        self.resolver = OutcomeResolver(context.moves)
        self.state = RoundState.IDLE
        self.attempts = 0
        self._commitment: Commitment | None = None
        self._human_move: str | None = None
        self.outcome: RoundOutcome | None = None

    def _transition(self, new_state: RoundState) -> None:
        logger.debug("round state %s -> %s", self.state.value, new_state.value)
        self.state = new_state

    def run(self) -> RoundOutcome | None:
        while self.state not in (RoundState.TERMINAL, RoundState.EXIT):
            if self.state is RoundState.IDLE:
                self._commit()
            elif self.state is RoundState.COMMITTED:
                self._await_choice()
            elif self.state is RoundState.RESOLVED:
                self._report()
        return self.outcome

    def _active_commitment(self) -> Commitment:
        if self._commitment is None:
            raise GameError(f"no commitment in state {self.state.value}")
        return self._commitment

    def _commit(self) -> None:
        ctx = self.context
        self.attempts += 1
        move = ctx.moves[random_index(len(ctx.moves), ctx.rng)]
        self._commitment = create_commitment(move, bits=ctx.key_bits, rng=ctx.rng)
        logger.debug("attempt %d committed, digest %s", self.attempts, self._commitment.digest)
        self._transition(RoundState.COMMITTED)

    def _await_choice(self) -> None:
        ctx = self.context
        commitment = self._active_commitment()
        ctx.write(f"HMAC: {commitment.digest}")
        ctx.write("Menu:")
        for number, move in enumerate(ctx.moves, start=1):
            ctx.write(f"{number} - {move}")
        ctx.write(f"{EXIT_CHOICE} - Exit")
        self._transition(RoundState.AWAITING_CHOICE)

        raw = ctx.read_line(PROMPT)
        if raw is None:
            logger.info("input closed, leaving the round")
            self._leave()
            return

        try:
            choice = parse_choice(raw, len(ctx.moves))
        except InvalidUserInputError as exc:
            logger.info("%s; starting over with a fresh commitment", exc)
            ctx.write_error("Invalid input. Please try again.")
            self._commitment = None
            self._transition(RoundState.IDLE)
            return

        if choice == 0:
            self._leave()
            return

        self._human_move = ctx.moves[choice - 1]
        self._transition(RoundState.RESOLVED)

    def _leave(self) -> None:
        self.context.write("Exiting...")
        self._commitment = None
        self._transition(RoundState.EXIT)

    def _report(self) -> None:
        ctx = self.context
        commitment = self._active_commitment()
        human_move = self._human_move
        if human_move is None:
            raise GameError("round resolved without a human move")
        ctx.write(f"Your move: {human_move}")
        ctx.write(f"Computer's move: {commitment.move}")
        ctx.write(f"Key: {commitment.key}")
        self.outcome = self.resolver.determine_winner(human_move, commitment.move)
        ctx.write(self.outcome.describe())
        self._commitment = None
        self._transition(RoundState.TERMINAL)


def play_round(context: GameContext) -> RoundOutcome | None:
    """Play one round; returns ``None`` if the human exits instead of choosing."""
    return GameRound(context).run()
