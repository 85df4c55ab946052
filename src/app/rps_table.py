from __future__ import annotations

from collections.abc import Sequence
from typing import Literal

from tabulate import tabulate

from rps_protocol import OutcomeResolver

Cell = Literal["Win", "Lose", "Draw"]

CORNER = "v PC/User >"


def build_matrix(moves: Sequence[str]) -> list[list[Cell]]:
    """Verdicts for every pair, from the row move's point of view."""
    resolver = OutcomeResolver(moves)
    matrix: list[list[Cell]] = []
    for row_move in resolver.moves:
        row: list[Cell] = []
        for col_move in resolver.moves:
            outcome = resolver.determine_winner(row_move, col_move).outcome
            if outcome == "draw":
                row.append("Draw")
            elif outcome == "first_win":
                row.append("Win")
            else:
                row.append("Lose")
        matrix.append(row)
    return matrix


def format_help_table(moves: Sequence[str]) -> str:
    rows = [[move, *cells] for move, cells in zip(moves, build_matrix(moves))]
    table = tabulate(rows, headers=[CORNER, *moves], tablefmt="grid")
    return (
        "Each cell shows the result for the move in that row against the move in that column.\n"
        + table
    )
