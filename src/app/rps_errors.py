from __future__ import annotations


class GameError(Exception):
    """Base class for every error raised by the game modules."""


class ValidationError(GameError, ValueError):
    """The move list given on the command line is not a usable Move Set."""


class UnknownMoveError(GameError, LookupError):
    def __init__(self, move: str) -> None:
        super().__init__(f"unknown move: {move!r}")
        self.move = move


class InvalidUserInputError(GameError, ValueError):
    def __init__(self, raw: str) -> None:
        super().__init__(f"invalid menu choice: {raw!r}")
        self.raw = raw


class RandomSourceExhaustedError(GameError, RuntimeError):
    """The secure random source failed; a fair commitment cannot be made."""
