from __future__ import annotations

import argparse
import logging
import os
import sys

from rps_commit import DEFAULT_KEY_BITS, verify_commitment
from rps_errors import RandomSourceExhaustedError, ValidationError
from rps_protocol import validate_moves
from rps_round import GameContext, play_round
from rps_table import format_help_table

__version__ = "1.0.0"

COMMANDS = ("play", "help", "verify")
KEY_BITS_ENV = "FAIR_RPS_KEY_BITS"
MIN_KEY_BITS = 128

logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(_with_default_command(sys.argv[1:] if argv is None else argv))
    _configure_logging(args.log_level)

    if args.cmd == "verify":
        ok = verify_commitment(expected_digest=args.hmac, key=args.key, move=args.move)
        print("Verified" if ok else "Mismatch")
        return 0 if ok else 1

    try:
        moves = validate_moves(args.moves)
    except ValidationError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        parser.print_help(sys.stderr)
        return 1

    if args.cmd == "help":
        print(format_help_table(moves))
        return 0

    key_bits = args.key_bits
    if key_bits is None:
        try:
            key_bits = _default_key_bits()
        except argparse.ArgumentTypeError as exc:
            print(f"Error: {KEY_BITS_ENV}: {exc}", file=sys.stderr)
            return 1

    try:
        play_round(GameContext(moves=moves, key_bits=key_bits))
    except RandomSourceExhaustedError as exc:
        logger.error("aborting round: %s", exc)
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    return 0


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="fair-rps",
        description="Rock-paper-scissors with any odd number of moves and a provably fair computer opponent.",
        epilog="example: fair-rps rock paper scissors lizard spock",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    sub = parser.add_subparsers(dest="cmd", required=True)

    play = sub.add_parser("play", help="Play one round (default when only moves are given)")
    play.add_argument("moves", nargs="*", help="Odd number (>= 3) of unique moves, in winning order")
    play.add_argument(
        "--key-bits",
        type=_key_bits,
        default=None,
        help=f"HMAC key length in bits (env {KEY_BITS_ENV}, default {DEFAULT_KEY_BITS})",
    )

    table = sub.add_parser("help", help="Print the win/lose/draw table for the moves")
    table.add_argument("moves", nargs="*")

    verify = sub.add_parser("verify", help="Check a revealed key and move against the HMAC shown before the round")
    verify.add_argument("--key", required=True)
    verify.add_argument("--hmac", required=True)
    verify.add_argument("move")

    for p in (play, table, verify):
        p.add_argument("--log-level", default="WARNING", choices=("DEBUG", "INFO", "WARNING", "ERROR"))

    return parser


def _with_default_command(argv: list[str]) -> list[str]:
    # A bare move list means "play"; an empty one goes to "play" too so that
    # the move count check reports it.
    if not argv:
        return ["play"]
    first = argv[0]
    if first in COMMANDS or first in ("-h", "--help", "--version"):
        return argv
    return ["play", *argv]


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        stream=sys.stderr,
        level=getattr(logging, level),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _key_bits(value: str) -> int:
    try:
        bits = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"not an integer: {value!r}") from None
    if bits < MIN_KEY_BITS or bits % 8:
        raise argparse.ArgumentTypeError(f"key length must be a multiple of 8 and at least {MIN_KEY_BITS}")
    return bits


def _default_key_bits() -> int:
    raw = os.environ.get(KEY_BITS_ENV)
    if not raw:
        return DEFAULT_KEY_BITS
    return _key_bits(raw)


if __name__ == "__main__":
    raise SystemExit(main())
