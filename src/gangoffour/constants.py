"""Centralized constants for the Gang of Four engine and encoder.

Every fixed number of the model-facing contract lives here.  Import from
this module instead of hardcoding magic numbers elsewhere.

Usage::

    from gangoffour.constants import INPUT_DIM, MAX_ACTIONS, MASK_OFF
"""
from __future__ import annotations

# ---------------------------------------------------------------------------
#  Game limits
# ---------------------------------------------------------------------------

MAX_HAND_SIZE: int = 16
"""Starting hand size.  Larger hands are still enumerated, with a warning."""

MAX_COMBO_SIZE: int = 7
"""Largest combination (Gang of Seven, only possible with rank-1 cards)."""

MIN_GANG_SIZE: int = 4
"""Smallest gang (bomb).  Gangs answer tricks of any size."""

# ---------------------------------------------------------------------------
#  State vector layout
# ---------------------------------------------------------------------------

NUM_CARD_SLOTS: int = 64
"""One slot per physical card: 60 numbered copies + 1M + PG + PY + Dragon."""

MAX_ACTIONS: int = 40
"""Length of the ordered action list (pass included) and of the mask."""

HAND_OFF: int = 0
PLAYED_OFF: int = HAND_OFF + NUM_CARD_SLOTS        # 64
TRICK_OFF: int = PLAYED_OFF + NUM_CARD_SLOTS       # 128
OPPONENT_OFF: int = TRICK_OFF + NUM_CARD_SLOTS     # 192
MASK_OFF: int = OPPONENT_OFF + NUM_CARD_SLOTS      # 256
CONTEXT_OFF: int = MASK_OFF + MAX_ACTIONS          # 296
INPUT_DIM: int = 328

# Context scalar positions, relative to CONTEXT_OFF.  The gaps are unused
# slots of the layout the model was trained on.
CTX_HAND_SIZE: int = 0
CTX_OPPONENTS: int = 1
CTX_LEADING: int = 12
CTX_HAND_SIZE_REPEAT: int = 20

HAND_SIZE_SCALE: float = 16.0
"""Divisor for hand-size scalars."""

DEFAULT_OPPONENT_HAND_SIZES: tuple[int, int, int] = (16, 16, 16)
"""Opponent hand sizes assumed when the caller does not know them."""

# ---------------------------------------------------------------------------
#  Model output interpretation
# ---------------------------------------------------------------------------

DECLARE_THRESHOLD: float = 0.5
"""Declare probability above which the advice recommends declaring."""

TOP_OPTIONS: int = 8
"""Number of ranked alternatives reported by ``interpret_output``."""
