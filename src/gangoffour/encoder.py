"""Feature encoding for Gang of Four: the decision model's input contract.

Produces a flat float32 vector of shape ``(INPUT_DIM,)`` and the ordered
action list the model's 40 output logits are aligned with.

  Section                       Features   Offset
  ───────────────────────────────────────────────
  My hand (additive)              64         0
  Played cards (binary)           64        64
  Current trick (binary)          64       128
  Inferred opponents              64       192
  Action mask                     40       256
  Context scalars                 32       296
  ───────────────────────────────────────────────
  Total                          328

Card slots: numbered cards at ``(rank-1)*6 + (color-1)*2 + copy``
(0 .. 59), 1-Multi at 60, Phoenix Green 61, Phoenix Yellow 62, Dragon 63.
The two physical copies of a numbered card are told apart by order of
occurrence; a third occurrence reuses the second copy's slot.

Context scalars (relative to offset 296):
  [0]      my hand size / 16
  [1..3]   opponent hand sizes / 16
  [12]     1.0 when leading
  [20]     my hand size / 16 (repeated, the trained layout reads it here)

The ordered action list is ``[PASS] + sorted(non-pass plays)``, capped at
``MAX_ACTIONS``.  Changing the sort order breaks every trained model.
"""

from __future__ import annotations

import logging
from collections import Counter
from typing import List, Optional, Sequence

import numpy as np

from gangoffour.cards import Card, CardKind, Color
from gangoffour.constants import (
    CONTEXT_OFF,
    CTX_HAND_SIZE,
    CTX_HAND_SIZE_REPEAT,
    CTX_LEADING,
    CTX_OPPONENTS,
    DEFAULT_OPPONENT_HAND_SIZES,
    HAND_OFF,
    HAND_SIZE_SCALE,
    INPUT_DIM,
    MASK_OFF,
    MAX_ACTIONS,
    NUM_CARD_SLOTS,
    OPPONENT_OFF,
    PLAYED_OFF,
    TRICK_OFF,
)
from gangoffour.rules import PASS, Play

log = logging.getLogger(__name__)

_MULTI_IDX = 60
_PHOENIX_GREEN_IDX = 61
_PHOENIX_YELLOW_IDX = 62
_DRAGON_IDX = 63


# ---------------------------------------------------------------------------
#  Card slots
# ---------------------------------------------------------------------------


def card_index(card: Card, copy: int = 0) -> int:
    """Slot of one physical card in a 64-wide card region."""
    if card.kind == CardKind.DRAGON:
        return _DRAGON_IDX
    if card.kind == CardKind.PHOENIX:
        return _PHOENIX_GREEN_IDX if card.color == Color.GREEN else _PHOENIX_YELLOW_IDX
    if card.color == Color.MULTI:
        return _MULTI_IDX
    return (card.rank - 1) * 6 + (int(card.color) - 1) * 2 + copy


def _card_slots(cards: Sequence[Card]) -> List[int]:
    """Slot per occurrence, assigning copy 0 then copy 1 to repeated cards."""
    seen: Counter[Card] = Counter()
    slots = []
    for c in cards:
        slots.append(card_index(c, min(seen[c], 1)))
        seen[c] += 1
    return slots


# ---------------------------------------------------------------------------
#  Action ordering
# ---------------------------------------------------------------------------


def _play_sort_key(play: Play) -> tuple:
    return (
        len(play),
        sum(c.rank for c in play),
        sum(int(c.color) for c in play),
        tuple(sorted(c.sort_key() for c in play)),
    )


def order_plays(valid_plays: Sequence[Optional[Sequence[Card]]]) -> List[Play]:
    """Canonical action list: pass first, then plays by (size, rank sum, color sum).

    The last key (the sorted member cards) only separates ties, so the
    result does not depend on the order of *valid_plays*.  Truncated to
    ``MAX_ACTIONS`` entries, pass included.
    """
    non_pass = [tuple(p) for p in valid_plays if p]
    non_pass.sort(key=_play_sort_key)
    ordered: List[Play] = [PASS, *non_pass]
    if len(ordered) > MAX_ACTIONS:
        log.debug("Truncating %d plays to %d action slots", len(ordered), MAX_ACTIONS)
    return ordered[:MAX_ACTIONS]


def decode_action(index: int, ordered_plays: Sequence[Play]) -> Optional[Play]:
    """Map a model action index back to a play.  Pass and bad indices give None."""
    if index <= 0 or index >= len(ordered_plays):
        return None
    return ordered_plays[index]


def softmax(logits: Sequence[float], num_actions: Optional[int] = None) -> np.ndarray:
    """Numerically stable softmax over the first *num_actions* logits only.

    Pass ``len(ordered_plays)`` as *num_actions*; the remaining logits
    belong to unpopulated action slots.  ``None`` uses every logit.  A
    batched ``(1, 40)`` model output is flattened first.
    """
    x = np.asarray(logits, dtype=np.float64).reshape(-1)[:num_actions]
    if x.size == 0:
        return x
    x = x - x.max()
    exp_x = np.exp(x)
    return exp_x / exp_x.sum()


normalize = softmax


def action_mask(state: np.ndarray) -> np.ndarray:
    """The 40-wide action-validity mask of an encoded state."""
    return state[MASK_OFF:MASK_OFF + MAX_ACTIONS]


# ---------------------------------------------------------------------------
#  Encoder
# ---------------------------------------------------------------------------


class Encoder:
    """Numpy-native state encoder.  Stateless; one instance can be shared."""

    state_dim: int = INPUT_DIM
    max_actions: int = MAX_ACTIONS

    def encode_cards(self, cards: Sequence[Card]) -> np.ndarray:
        """Additive encoding: each occurrence adds 0.5, clipped to [0, 1]."""
        vec = np.zeros(NUM_CARD_SLOTS, dtype=np.float32)
        for idx in _card_slots(cards):
            vec[idx] += 0.5
        return np.clip(vec, 0.0, 1.0)

    def encode_cards_binary(self, cards: Sequence[Card]) -> np.ndarray:
        """Presence encoding: any occurrence sets the slot to 1."""
        vec = np.zeros(NUM_CARD_SLOTS, dtype=np.float32)
        for idx in _card_slots(cards):
            vec[idx] = 1.0
        return vec

    def encode_state(
        self,
        hand: Sequence[Card],
        valid_plays: Sequence[Optional[Sequence[Card]]],
        is_leading: bool = True,
        trick_cards: Optional[Sequence[Card]] = None,
        played_cards: Optional[Sequence[Card]] = None,
        opponent_hand_sizes: Sequence[int] = DEFAULT_OPPONENT_HAND_SIZES,
    ) -> tuple[np.ndarray, List[Play]]:
        """Encode the decision point into ``(state, ordered_plays)``.

        The opponent region is filled whenever *played_cards* is given,
        even as an empty list: every card neither held nor seen played
        is assumed to be outstanding.
        """
        x = np.zeros(INPUT_DIM, dtype=np.float32)

        # ── Hand (additive) ─────────────────────────────────────────
        x[HAND_OFF:HAND_OFF + NUM_CARD_SLOTS] = self.encode_cards(hand)

        # ── Played and trick (binary) ───────────────────────────────
        if played_cards:
            x[PLAYED_OFF:PLAYED_OFF + NUM_CARD_SLOTS] = self.encode_cards_binary(played_cards)
        if trick_cards:
            x[TRICK_OFF:TRICK_OFF + NUM_CARD_SLOTS] = self.encode_cards_binary(trick_cards)

        # ── Inferred opponents ──────────────────────────────────────
        if played_cards is not None:
            outstanding = (
                1.0
                - self.encode_cards_binary(hand)
                - self.encode_cards_binary(played_cards)
            )
            x[OPPONENT_OFF:OPPONENT_OFF + NUM_CARD_SLOTS] = np.clip(outstanding, 0.0, 1.0)

        # ── Action mask ─────────────────────────────────────────────
        ordered = order_plays(valid_plays)
        x[MASK_OFF:MASK_OFF + len(ordered)] = 1.0

        # ── Context scalars ─────────────────────────────────────────
        hand_size = len(hand) / HAND_SIZE_SCALE
        x[CONTEXT_OFF + CTX_HAND_SIZE] = hand_size
        for i, n in enumerate(opponent_hand_sizes[:3]):
            x[CONTEXT_OFF + CTX_OPPONENTS + i] = n / HAND_SIZE_SCALE
        x[CONTEXT_OFF + CTX_LEADING] = 1.0 if is_leading else 0.0
        x[CONTEXT_OFF + CTX_HAND_SIZE_REPEAT] = hand_size

        return x, ordered


_ENCODER = Encoder()


def encode_state(
    hand: Sequence[Card],
    valid_plays: Sequence[Optional[Sequence[Card]]],
    is_leading: bool = True,
    trick_cards: Optional[Sequence[Card]] = None,
    played_cards: Optional[Sequence[Card]] = None,
    opponent_hand_sizes: Sequence[int] = DEFAULT_OPPONENT_HAND_SIZES,
) -> tuple[np.ndarray, List[Play]]:
    """Module-level shortcut for ``Encoder().encode_state``."""
    return _ENCODER.encode_state(
        hand,
        valid_plays,
        is_leading=is_leading,
        trick_cards=trick_cards,
        played_cards=played_cards,
        opponent_hand_sizes=opponent_hand_sizes,
    )
