"""Combination detection and comparison for Gang of Four.

Combination types by size:

  Size  Types
  ─────────────────────────────────────────────────────────
  1     Single
  2     Pair (two numbers of one rank, or both Phoenixes)
  3     Three of a kind
  4     Gang of four
  5     Gang of five, Full house, Straight, Flush, Straight flush
  6     Gang of six
  7     Gang of seven (rank 1 only: six copies plus the Multi)

Gangs (bombs) beat every non-gang.  Between gangs the larger one wins,
then rank, then color.  Everything else only beats the same type with
the same number of cards.

The Dragon only ever plays as a single.  A Phoenix can complete a pair
or a full house but never a straight or flush.
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional, Sequence

from gangoffour.cards import Card, Color


class ComboType(str, Enum):
    SINGLE = "single"
    PAIR = "pair"
    THREE_OF_A_KIND = "three_of_a_kind"
    STRAIGHT = "straight"
    FLUSH = "flush"
    FULL_HOUSE = "full_house"
    STRAIGHT_FLUSH = "straight_flush"
    GANG_OF_FOUR = "gang_of_four"
    GANG_OF_FIVE = "gang_of_five"
    GANG_OF_SIX = "gang_of_six"
    GANG_OF_SEVEN = "gang_of_seven"


GANG_SIZES: dict[ComboType, int] = {
    ComboType.GANG_OF_FOUR: 4,
    ComboType.GANG_OF_FIVE: 5,
    ComboType.GANG_OF_SIX: 6,
    ComboType.GANG_OF_SEVEN: 7,
}

_GANG_BY_SIZE: dict[int, ComboType] = {v: k for k, v in GANG_SIZES.items()}


def is_gang(combo_type: ComboType) -> bool:
    return combo_type in GANG_SIZES


# ---------------------------------------------------------------------------
#  Combination
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class Combination:
    """A classified set of cards.  Built by ``classify`` only."""
    cards: tuple[Card, ...]          # sorted by (rank, color)
    combo_type: ComboType
    rank_value: int                  # primary comparison key
    color_value: int                 # tie-break key

    @property
    def size(self) -> int:
        return len(self.cards)

    @property
    def is_gang(self) -> bool:
        return self.combo_type in GANG_SIZES

    def beats(self, other: Combination) -> bool:
        return beats(self, other)


def _same_cards(a: Combination, b: Combination) -> bool:
    return len(a.cards) == len(b.cards) and Counter(a.cards) == Counter(b.cards)


def _higher_keys(a: Combination, b: Combination) -> bool:
    if a.rank_value != b.rank_value:
        return a.rank_value > b.rank_value
    return a.color_value > b.color_value


def beats(a: Combination, b: Combination) -> bool:
    """True if *a* may legally be played on top of *b*.

    Equal rank and color keys are a tie: neither beats the other.
    """
    if _same_cards(a, b):
        return False

    a_gang = a.is_gang
    b_gang = b.is_gang
    if a_gang and not b_gang:
        return True
    if b_gang and not a_gang:
        return False
    if a_gang and b_gang:
        a_size = GANG_SIZES[a.combo_type]
        b_size = GANG_SIZES[b.combo_type]
        if a_size != b_size:
            return a_size > b_size
        return _higher_keys(a, b)

    if len(a.cards) != len(b.cards) or a.combo_type != b.combo_type:
        return False
    return _higher_keys(a, b)


# ---------------------------------------------------------------------------
#  Detection helpers (cards arrive sorted by rank, then color)
# ---------------------------------------------------------------------------


def _max_color(cards: Sequence[Card]) -> int:
    return max(int(c.color) for c in cards)


def _all_numbers_one_rank(cards: Sequence[Card]) -> bool:
    return all(c.is_number for c in cards) and len({c.rank for c in cards}) == 1


def _single(cards: tuple[Card, ...]) -> Optional[Combination]:
    card = cards[0]
    return Combination(cards, ComboType.SINGLE, card.rank, int(card.color))


def _pair(cards: tuple[Card, ...]) -> Optional[Combination]:
    c1, c2 = cards
    if c1.is_dragon or c2.is_dragon:
        return None
    if c1.is_phoenix and c2.is_phoenix:
        return Combination(cards, ComboType.PAIR, c2.rank, int(c2.color))
    if c1.is_number and c2.is_number and c1.rank == c2.rank:
        return Combination(cards, ComboType.PAIR, c1.rank, _max_color(cards))
    return None


def _three_of_a_kind(cards: tuple[Card, ...]) -> Optional[Combination]:
    if not _all_numbers_one_rank(cards):
        return None
    return Combination(cards, ComboType.THREE_OF_A_KIND, cards[0].rank, _max_color(cards))


def _gang(cards: tuple[Card, ...]) -> Optional[Combination]:
    if not _all_numbers_one_rank(cards):
        return None
    rank = cards[0].rank
    # Only rank 1 has seven physical cards (six copies + the Multi).
    if len(cards) == 7 and rank != 1:
        return None
    return Combination(cards, _GANG_BY_SIZE[len(cards)], rank, _max_color(cards))


def _full_house(cards: tuple[Card, ...]) -> Optional[Combination]:
    phoenixes = [c for c in cards if c.is_phoenix]
    numbers = [c for c in cards if c.is_number]
    counts = Counter(c.rank for c in numbers)
    shape = sorted(counts.values(), reverse=True)

    if not phoenixes and shape == [3, 2]:
        triple_rank = next(r for r, n in counts.items() if n == 3)
        triple = [c for c in numbers if c.rank == triple_rank]
        return Combination(cards, ComboType.FULL_HOUSE, triple_rank, _max_color(triple))

    # Both Phoenixes stand in for the pair.
    if len(phoenixes) == 2 and shape == [3]:
        return Combination(cards, ComboType.FULL_HOUSE, numbers[0].rank, _max_color(numbers))

    return None


def _is_straight(cards: Sequence[Card]) -> bool:
    ranks = sorted(c.rank for c in cards)
    return all(b == a + 1 for a, b in zip(ranks, ranks[1:]))


def _is_flush(cards: Sequence[Card]) -> bool:
    return len({c.color for c in cards if c.color != Color.MULTI}) <= 1


def _flush_color(cards: Sequence[Card]) -> int:
    for c in cards:
        if c.color != Color.MULTI:
            return int(c.color)
    return int(Color.RED)


def _five_cards(cards: tuple[Card, ...]) -> Optional[Combination]:
    gang = _gang(cards)
    if gang is not None:
        return gang

    if any(c.is_dragon for c in cards):
        return None

    full_house = _full_house(cards)
    if full_house is not None:
        return full_house

    if any(c.is_phoenix for c in cards):
        return None

    straight = _is_straight(cards)
    flush = _is_flush(cards)
    highest = max(cards, key=lambda c: (c.rank, int(c.color)))

    if straight and flush:
        return Combination(cards, ComboType.STRAIGHT_FLUSH, highest.rank, _flush_color(cards))
    if flush:
        return Combination(cards, ComboType.FLUSH, highest.rank, _flush_color(cards))
    if straight:
        return Combination(cards, ComboType.STRAIGHT, highest.rank, int(highest.color))
    return None


_DETECTORS: dict[int, Callable[[tuple[Card, ...]], Optional[Combination]]] = {
    1: _single,
    2: _pair,
    3: _three_of_a_kind,
    4: _gang,
    5: _five_cards,
    6: _gang,
    7: _gang,
}


# ---------------------------------------------------------------------------
#  Public API
# ---------------------------------------------------------------------------


def classify(cards: Sequence[Card]) -> Optional[Combination]:
    """Classify 1-7 cards.  Returns ``None`` if they form no combination."""
    detector = _DETECTORS.get(len(cards))
    if detector is None:
        return None
    ordered = tuple(sorted(cards, key=lambda c: (c.rank, int(c.color))))
    return detector(ordered)
