"""Card definitions for Gang of Four.

64-card deck:
  - Numbers 1-10 in Green, Yellow and Red, two copies each (60 cards)
  - 1-Multi: the wild rank-1 card without a fixed color
  - Phoenix Green and Phoenix Yellow (rank 11)
  - Dragon (rank 12), the highest single

Text notation: ``<rank><G|Y|R>`` for numbers (``"7R"``), ``"1M"`` / ``"M1"``
for the Multi, ``"PhoenixG"`` / ``"PG"``, ``"PhoenixY"`` / ``"PY"`` and
``"Dragon"`` / ``"D"``.  Parsing ignores case.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import IntEnum
from typing import Iterable, List, Optional, Sequence


# ---------------------------------------------------------------------------
#  Kinds and colors: IntEnum values are part of the encoding contract
# ---------------------------------------------------------------------------


class CardKind(IntEnum):
    NUMBER = 0
    PHOENIX = 1
    DRAGON = 2


class Color(IntEnum):
    MULTI = 0
    GREEN = 1
    YELLOW = 2
    RED = 3


NUMBER_COLORS: tuple[Color, ...] = (Color.GREEN, Color.YELLOW, Color.RED)

MIN_NUMBER_RANK: int = 1
MAX_NUMBER_RANK: int = 10
PHOENIX_RANK: int = 11
DRAGON_RANK: int = 12
COPIES_PER_NUMBER: int = 2


class ParseError(ValueError):
    """Raised when a token matches none of the card notations."""

    def __init__(self, token: str) -> None:
        super().__init__(f"Cannot parse card: {token!r}")
        self.token = token


# ---------------------------------------------------------------------------
#  Card
# ---------------------------------------------------------------------------

_COLOR_SHORT: dict[Color, str] = {
    Color.GREEN: "G",
    Color.YELLOW: "Y",
    Color.RED: "R",
}
_SHORT_COLOR: dict[str, Color] = {v: k for k, v in _COLOR_SHORT.items()}

_NUMBER_RE = re.compile(r"([0-9]+)([GYR])")


@dataclass(frozen=True, slots=True)
class Card:
    kind: CardKind
    color: Color
    rank: int

    @classmethod
    def number(cls, rank: int, color: Color) -> Card:
        return cls(CardKind.NUMBER, color, rank)

    @property
    def is_number(self) -> bool:
        return self.kind == CardKind.NUMBER

    @property
    def is_phoenix(self) -> bool:
        return self.kind == CardKind.PHOENIX

    @property
    def is_dragon(self) -> bool:
        return self.kind == CardKind.DRAGON

    @property
    def is_multi(self) -> bool:
        return self.kind == CardKind.NUMBER and self.color == Color.MULTI

    def sort_key(self) -> tuple[int, int, int]:
        """(rank, color, kind): a total order over distinct cards."""
        return (self.rank, int(self.color), int(self.kind))

    def short(self) -> str:
        """Canonical notation, e.g. '7R', '1M', 'PhoenixG', 'Dragon'."""
        if self.kind == CardKind.DRAGON:
            return "Dragon"
        if self.kind == CardKind.PHOENIX:
            return "PhoenixG" if self.color == Color.GREEN else "PhoenixY"
        if self.color == Color.MULTI:
            return "1M"
        return f"{self.rank}{_COLOR_SHORT[self.color]}"

    def __str__(self) -> str:
        return self.short()

    def __repr__(self) -> str:
        return f"Card({self.short()})"


# The unique special cards.  The Dragon carries Green as its color.
MULTI_ONE = Card(CardKind.NUMBER, Color.MULTI, MIN_NUMBER_RANK)
PHOENIX_GREEN = Card(CardKind.PHOENIX, Color.GREEN, PHOENIX_RANK)
PHOENIX_YELLOW = Card(CardKind.PHOENIX, Color.YELLOW, PHOENIX_RANK)
DRAGON = Card(CardKind.DRAGON, Color.GREEN, DRAGON_RANK)

_SPECIAL_TOKENS: dict[str, Card] = {
    "DRAGON": DRAGON,
    "D": DRAGON,
    "PHOENIXG": PHOENIX_GREEN,
    "PG": PHOENIX_GREEN,
    "PHOENIXY": PHOENIX_YELLOW,
    "PY": PHOENIX_YELLOW,
    "1M": MULTI_ONE,
    "M1": MULTI_ONE,
}


# ---------------------------------------------------------------------------
#  Parsing / printing
# ---------------------------------------------------------------------------


def parse_card(text: str) -> Card:
    """Parse a single card token.  Raises ``ParseError`` on anything else."""
    token = text.strip()
    upper = token.upper()

    special = _SPECIAL_TOKENS.get(upper)
    if special is not None:
        return special

    m = _NUMBER_RE.fullmatch(upper)
    if m is not None:
        rank = int(m.group(1))
        if MIN_NUMBER_RANK <= rank <= MAX_NUMBER_RANK:
            return Card.number(rank, _SHORT_COLOR[m.group(2)])

    raise ParseError(token)


def parse_hand(text: str) -> List[Card]:
    """Split on whitespace and parse every token; the first failure propagates."""
    return [parse_card(tok) for tok in text.split()]


def format_cards(cards: Iterable[Card]) -> str:
    return " ".join(c.short() for c in cards)


def format_play(play: Optional[Sequence[Card]]) -> str:
    """Human-readable play: 'PASS' for the empty play."""
    if not play:
        return "PASS"
    return format_cards(play)


# ---------------------------------------------------------------------------
#  Deck
# ---------------------------------------------------------------------------


def make_deck() -> List[Card]:
    """Create the full 64-card deck (both copies of every numbered card)."""
    deck = [
        Card.number(rank, color)
        for rank in range(MIN_NUMBER_RANK, MAX_NUMBER_RANK + 1)
        for color in NUMBER_COLORS
        for _copy in range(COPIES_PER_NUMBER)
    ]
    deck.extend([MULTI_ONE, PHOENIX_GREEN, PHOENIX_YELLOW, DRAGON])
    return deck
