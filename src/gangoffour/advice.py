"""Interpretation of decision-model outputs.

The model itself runs elsewhere.  Given its 40 action logits and its
declare probability, this module picks the recommended play, normalizes
the probabilities over the populated action slots, and ranks the
alternatives for display.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Sequence

import numpy as np

from gangoffour.cards import Card
from gangoffour.constants import DECLARE_THRESHOLD, TOP_OPTIONS
from gangoffour.encoder import decode_action, softmax
from gangoffour.rules import Play


@dataclass(frozen=True, slots=True)
class Option:
    index: int                        # slot in the ordered action list
    play: Play                        # () for pass
    prob: float


@dataclass(frozen=True, slots=True)
class Advice:
    best_index: int
    best_play: Optional[Play]         # None means pass
    probs: np.ndarray                 # (len(ordered_plays),)
    declare: bool
    options: tuple[Option, ...]       # most likely first


def only_pass(valid_plays: Sequence[Sequence[Card]]) -> bool:
    """True if there is no real move to choose between."""
    return all(len(p) == 0 for p in valid_plays)


def interpret_output(
    logits: Sequence[float],
    declare_prob: float,
    ordered_plays: Sequence[Play],
    *,
    top_k: int = TOP_OPTIONS,
    declare_threshold: float = DECLARE_THRESHOLD,
) -> Advice:
    """Turn raw model outputs into a recommendation.

    Only the first ``len(ordered_plays)`` logits are considered; the rest
    belong to unpopulated action slots.
    """
    n = len(ordered_plays)
    flat = np.asarray(logits, dtype=np.float64).reshape(-1)
    if flat.size < n:
        raise ValueError(f"Expected at least {n} logits, got {flat.size}")
    if n == 0:
        raise ValueError("ordered_plays is empty; it always holds pass at slot 0")

    active = flat[:n]
    best = int(np.argmax(active))  # first maximum wins ties
    probs = softmax(active, n)

    ranked = sorted(range(n), key=lambda i: -probs[i])
    options = tuple(
        Option(index=i, play=tuple(ordered_plays[i]), prob=float(probs[i]))
        for i in ranked[:top_k]
    )

    return Advice(
        best_index=best,
        best_play=decode_action(best, ordered_plays),
        probs=probs,
        declare=float(declare_prob) > declare_threshold,
        options=options,
    )
