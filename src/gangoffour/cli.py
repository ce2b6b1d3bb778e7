from __future__ import annotations

import argparse
import logging
import sys
from typing import Optional, Sequence

import numpy as np

from gangoffour.cards import ParseError, format_play, parse_hand
from gangoffour.constants import (
    CONTEXT_OFF,
    DEFAULT_OPPONENT_HAND_SIZES,
    HAND_OFF,
    INPUT_DIM,
    MASK_OFF,
    OPPONENT_OFF,
    PLAYED_OFF,
    TRICK_OFF,
)
from gangoffour.encoder import encode_state
from gangoffour.rules import legal_plays

_REGIONS = (
    ("hand", HAND_OFF, PLAYED_OFF),
    ("played", PLAYED_OFF, TRICK_OFF),
    ("trick", TRICK_OFF, OPPONENT_OFF),
    ("opponents", OPPONENT_OFF, MASK_OFF),
    ("mask", MASK_OFF, CONTEXT_OFF),
    ("context", CONTEXT_OFF, INPUT_DIM),
)


def _print_regions(state: np.ndarray) -> None:
    for name, start, end in _REGIONS:
        nz = np.flatnonzero(state[start:end])
        values = " ".join(f"{i}:{state[start + i]:g}" for i in nz)
        print(f"{name:>9} @{start:<3} {values or '-'}")


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Gang of Four: list legal plays in model order")
    parser.add_argument("--hand", type=str, required=True, help='Cards in hand, e.g. "7R 7G 7Y PG"')
    parser.add_argument("--trick", type=str, default="", help="Trick to beat (empty when leading)")
    parser.add_argument(
        "--played",
        type=str,
        default=None,
        help="Cards already played this round; enables the opponent region of the encoding.",
    )
    parser.add_argument(
        "--opponents", type=int, nargs=3, default=list(DEFAULT_OPPONENT_HAND_SIZES), metavar="N"
    )
    parser.add_argument("--encode", action="store_true", help="Also print the non-zero state features.")
    parser.add_argument("-v", "--verbose", action="store_true")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        hand = parse_hand(args.hand)
        trick = parse_hand(args.trick)
        played = parse_hand(args.played) if args.played is not None else None
    except ParseError as e:
        print(f"error: {e}", file=sys.stderr)
        return 2

    plays = legal_plays(hand, trick or None)
    state, ordered = encode_state(
        hand,
        plays,
        is_leading=not trick,
        trick_cards=trick,
        played_cards=played,
        opponent_hand_sizes=args.opponents,
    )

    print(f"{len(plays)} legal plays, {len(ordered)} action slots")
    for i, play in enumerate(ordered):
        print(f"{i:>3}  {format_play(play)}")

    if args.encode:
        _print_regions(state)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
