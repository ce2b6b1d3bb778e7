"""Legal-play enumeration for Gang of Four.

**Leading** (nothing to beat):
  - Any valid combination from the hand.  Passing is not allowed.

**Following** (a trick is on the table):
  - Any combination of the trick's size that beats it.
  - Any gang, whatever its size, that beats it.
  - Pass, always.

Enumeration is exhaustive: every k-subset of the hand is classified.
Hands are small (16 cards at most) and combinations stop at 7 cards,
so no pruning is needed beyond what the classifier rejects.
"""

from __future__ import annotations

import itertools
import logging
from typing import Iterator, List, Optional, Sequence, Union

from gangoffour.cards import Card
from gangoffour.combinations import Combination, classify
from gangoffour.constants import MAX_COMBO_SIZE, MAX_HAND_SIZE, MIN_GANG_SIZE

log = logging.getLogger(__name__)

Play = tuple[Card, ...]

PASS: Play = ()
"""The empty play."""

Trick = Union[Combination, Sequence[Card]]


def iter_subsets(cards: Sequence[Card], k: int) -> Iterator[Play]:
    """All *k*-card subsets of *cards* by position, in lexicographic order.

    Identical copies are distinct positions, so equal card sets may repeat.
    """
    return itertools.combinations(cards, k)


def _check_hand_size(hand: Sequence[Card]) -> None:
    if len(hand) > MAX_HAND_SIZE:
        log.warning(
            "Hand of %d cards exceeds the %d-card limit; enumeration may be slow",
            len(hand), MAX_HAND_SIZE,
        )


def all_combinations(hand: Sequence[Card]) -> List[Play]:
    """Every valid combination contained in *hand*, smallest first."""
    _check_hand_size(hand)
    plays: List[Play] = []
    for size in range(1, min(MAX_COMBO_SIZE, len(hand)) + 1):
        for subset in iter_subsets(hand, size):
            if classify(subset) is not None:
                plays.append(subset)
    return plays


def _as_combination(trick: Trick) -> Optional[Combination]:
    if isinstance(trick, Combination):
        return trick
    return classify(trick)


def legal_plays(hand: Sequence[Card], trick_to_beat: Optional[Trick] = None) -> List[Play]:
    """Return the legal plays for *hand* against *trick_to_beat*.

    Parameters
    ----------
    hand : cards in the player's hand
    trick_to_beat : classified combination or raw cards on the table
        (None or empty when leading)

    When following, ``PASS`` is always the last entry.
    """
    if not trick_to_beat:
        return all_combinations(hand)

    trick = _as_combination(trick_to_beat)
    if trick is None:
        log.debug("Trick %r is not a valid combination; only pass is legal", trick_to_beat)
        return [PASS]

    _check_hand_size(hand)
    plays: List[Play] = []

    # Same size as the trick.
    for subset in iter_subsets(hand, trick.size):
        combo = classify(subset)
        if combo is not None and combo.beats(trick):
            plays.append(subset)

    # Gangs of every other size.
    for size in range(MIN_GANG_SIZE, min(MAX_COMBO_SIZE, len(hand)) + 1):
        if size == trick.size:
            continue
        for subset in iter_subsets(hand, size):
            combo = classify(subset)
            if combo is not None and combo.beats(trick):
                plays.append(subset)

    plays.append(PASS)
    log.debug("%d legal responses to %s (pass included)", len(plays), trick.combo_type.value)
    return plays


def can_beat(play: Sequence[Card], trick_to_beat: Trick) -> bool:
    """True if both card sets are valid combinations and *play* beats the trick."""
    play_combo = classify(play)
    trick_combo = _as_combination(trick_to_beat)
    if play_combo is None or trick_combo is None:
        return False
    return play_combo.beats(trick_combo)
