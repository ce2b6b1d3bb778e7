"""Tests for the state/action encoder."""

from __future__ import annotations

import math
import random

import numpy as np
import pytest

from gangoffour.cards import DRAGON, MULTI_ONE, PHOENIX_GREEN, PHOENIX_YELLOW, make_deck, parse_hand
from gangoffour.constants import (
    CONTEXT_OFF,
    HAND_OFF,
    INPUT_DIM,
    MASK_OFF,
    MAX_ACTIONS,
    OPPONENT_OFF,
    PLAYED_OFF,
    TRICK_OFF,
)
from gangoffour.encoder import (
    Encoder,
    _card_slots,
    action_mask,
    card_index,
    decode_action,
    encode_state,
    normalize,
    order_plays,
    softmax,
)
from gangoffour.rules import PASS, legal_plays


def H(text):
    return tuple(parse_hand(text))


def region(x, off, width=64):
    return x[off:off + width]


# ---------------------------------------------------------------------------
#  Card slots
# ---------------------------------------------------------------------------


class TestCardIndex:
    def test_number_formula(self):
        (c,) = H("7R")
        assert card_index(c) == 40
        assert card_index(c, copy=1) == 41
        (c,) = H("1G")
        assert card_index(c) == 0
        (c,) = H("10R")
        assert card_index(c, copy=1) == 59

    def test_specials(self):
        assert card_index(MULTI_ONE) == 60
        assert card_index(PHOENIX_GREEN) == 61
        assert card_index(PHOENIX_YELLOW) == 62
        assert card_index(DRAGON) == 63

    def test_full_deck_fills_every_slot_once(self):
        slots = _card_slots(make_deck())
        assert sorted(slots) == list(range(64))

    def test_third_copy_saturates(self):
        assert _card_slots(H("7R 7R 7R")) == [40, 41, 41]


class TestCardEncodings:
    def test_additive_single_card_is_half(self):
        v = Encoder().encode_cards(H("7R"))
        assert v.shape == (64,)
        assert v[40] == 0.5
        assert v.sum() == 0.5

    def test_additive_copies_and_clip(self):
        enc = Encoder()
        v = enc.encode_cards(H("7R 7R"))
        assert (v[40], v[41]) == (0.5, 0.5)
        v = enc.encode_cards(H("7R 7R 7R"))
        assert (v[40], v[41]) == (0.5, 1.0)
        v = enc.encode_cards([DRAGON, DRAGON, DRAGON])
        assert v[63] == 1.0

    def test_binary(self):
        v = Encoder().encode_cards_binary(H("7R 7R 7R PG"))
        assert np.flatnonzero(v).tolist() == [40, 41, 61]
        assert v.max() == 1.0


# ---------------------------------------------------------------------------
#  Action ordering
# ---------------------------------------------------------------------------


class TestOrderPlays:
    def test_pass_first_then_sorted(self):
        plays = [H("9R"), H("7R 7G"), H("2G"), H("2Y"), PASS]
        assert order_plays(plays) == [PASS, H("2G"), H("2Y"), H("9R"), H("7R 7G")]

    def test_pass_slot_even_without_pass(self):
        assert order_plays([]) == [PASS]
        assert order_plays([H("5G")])[0] == PASS

    def test_drops_empty_and_none(self):
        assert order_plays([None, (), H("5G"), []]) == [PASS, H("5G")]

    def test_rank_sum_before_color_sum(self):
        # rank sums 10 vs 11; color sums 6 vs 2
        a, b = H("5R 5R"), H("5G 6G")
        assert order_plays([b, a]) == [PASS, a, b]

    def test_color_sum_tiebreak(self):
        a, b = H("5G 5G"), H("5G 5Y")
        assert order_plays([b, a]) == [PASS, a, b]

    def test_independent_of_input_order(self):
        hand = H("1M 3G 3Y 3R 4G 5Y 6R 7G PG PY")
        plays = legal_plays(hand)
        expected = order_plays(plays)
        rng = random.Random(0)
        for _ in range(5):
            shuffled = list(plays)
            rng.shuffle(shuffled)
            assert order_plays(shuffled) == expected
            reordered_members = [tuple(reversed(p)) for p in shuffled]
            assert [sorted(p, key=lambda c: c.sort_key()) for p in order_plays(reordered_members)] == [
                sorted(p, key=lambda c: c.sort_key()) for p in expected
            ]

    def test_truncates_to_max_actions(self):
        plays = legal_plays(make_deck()[:16])
        assert len(plays) > MAX_ACTIONS
        ordered = order_plays(plays)
        assert len(ordered) == MAX_ACTIONS
        assert ordered[0] == PASS
        sizes = [len(p) for p in ordered[1:]]
        assert sizes == sorted(sizes)
        assert sizes.count(1) == 16


# ---------------------------------------------------------------------------
#  Decoding and normalization
# ---------------------------------------------------------------------------


class TestDecode:
    def test_indices(self):
        ordered = order_plays([H("9R"), H("2G")])
        assert decode_action(0, ordered) is None
        assert decode_action(1, ordered) == H("2G")
        assert decode_action(2, ordered) == H("9R")
        assert decode_action(3, ordered) is None
        assert decode_action(39, ordered) is None
        assert decode_action(-1, ordered) is None


class TestSoftmax:
    def test_sums_to_one_over_prefix(self):
        logits = [1.0, 2.0, 3.0] + [50.0] * 37
        p = softmax(logits, 3)
        assert p.shape == (3,)
        assert math.isclose(p.sum(), 1.0)
        assert p[2] > p[1] > p[0]

    def test_known_values(self):
        p = normalize([0.0, math.log(3.0)], 2)
        np.testing.assert_allclose(p, [0.25, 0.75])

    def test_defaults_to_every_logit(self):
        p = normalize([0.0, math.log(3.0)])
        np.testing.assert_allclose(p, [0.25, 0.75])

    def test_batched_output_is_flattened(self):
        p = softmax(np.zeros((1, 40)), 4)
        np.testing.assert_allclose(p, [0.25] * 4)

    def test_stable_for_huge_logits(self):
        p = softmax([1000.0, 1000.0, -1000.0], 3)
        assert np.all(np.isfinite(p))
        np.testing.assert_allclose(p, [0.5, 0.5, 0.0], atol=1e-12)

    def test_empty(self):
        assert softmax([1.0, 2.0], 0).size == 0


# ---------------------------------------------------------------------------
#  Full state
# ---------------------------------------------------------------------------


class TestEncodeState:
    def test_shape_and_dtype(self):
        hand = H("7R 7G 7Y")
        x, ordered = encode_state(hand, legal_plays(hand))
        assert x.shape == (INPUT_DIM,)
        assert x.dtype == np.float32
        assert len(ordered) == 8

    def test_dragon_trick_with_empty_hand(self):
        plays = legal_plays([], [DRAGON])
        x, ordered = encode_state([], plays, is_leading=False, trick_cards=[DRAGON])
        assert ordered == [PASS]
        trick = region(x, TRICK_OFF)
        assert trick[63] == 1.0
        assert trick.sum() == 1.0
        assert not region(x, HAND_OFF).any()
        assert not region(x, PLAYED_OFF).any()
        assert not region(x, OPPONENT_OFF).any()
        assert action_mask(x).tolist() == [1.0] + [0.0] * 39
        ctx = x[CONTEXT_OFF:]
        assert ctx[0] == 0.0
        assert ctx[1:4].tolist() == [1.0, 1.0, 1.0]
        assert ctx[12] == 0.0
        assert ctx[20] == 0.0
        assert np.count_nonzero(ctx) == 3

    def test_hand_region_is_additive(self):
        hand = H("7R 7R 5G")
        x, _ = encode_state(hand, legal_plays(hand))
        h = region(x, HAND_OFF)
        assert (h[40], h[41], h[24]) == (0.5, 0.5, 0.5)

    def test_mask_matches_ordered_plays(self):
        hand = H("6Y 9R PG")
        plays = legal_plays(hand, H("5G"))
        x, ordered = encode_state(hand, plays, is_leading=False, trick_cards=H("5G"))
        assert len(ordered) == 4
        mask = x[MASK_OFF:MASK_OFF + MAX_ACTIONS]
        assert mask[:4].tolist() == [1.0] * 4
        assert not mask[4:].any()

    def test_context_scalars(self):
        hand = H("2G 3G 4G 5G 6G 7G 8G 9G")
        x, _ = encode_state(hand, legal_plays(hand), is_leading=True, opponent_hand_sizes=(8, 4, 16))
        ctx = x[CONTEXT_OFF:]
        assert ctx[0] == 0.5
        assert ctx[1:4].tolist() == [0.5, 0.25, 1.0]
        assert ctx[12] == 1.0
        assert ctx[20] == 0.5

    def test_opponent_region_needs_played_cards(self):
        hand = H("7R")
        x, _ = encode_state(hand, legal_plays(hand))
        assert not region(x, OPPONENT_OFF).any()

    def test_opponent_region_with_empty_played(self):
        hand = H("7R")
        x, _ = encode_state(hand, legal_plays(hand), played_cards=[])
        opp = region(x, OPPONENT_OFF)
        assert opp[40] == 0.0
        assert opp.sum() == 63.0
        assert not region(x, PLAYED_OFF).any()

    def test_played_and_opponent_regions(self):
        hand = H("7G")
        played = [H("7R")[0], DRAGON]
        x, _ = encode_state(hand, legal_plays(hand), played_cards=played)
        assert np.flatnonzero(region(x, PLAYED_OFF)).tolist() == [40, 63]
        opp = region(x, OPPONENT_OFF)
        assert (opp[36], opp[40], opp[63]) == (0.0, 0.0, 0.0)
        assert opp.sum() == 61.0

    def test_deterministic(self):
        hand = H("1M 2G 3Y 4R 5G 5Y PG PY")
        plays = legal_plays(hand)
        x1, o1 = encode_state(hand, plays)
        x2, o2 = encode_state(hand, list(reversed(plays)))
        assert o1 == o2
        assert x1.tobytes() == x2.tobytes()

    def test_encoder_instance_matches_shortcut(self):
        hand = H("7R 7G")
        plays = legal_plays(hand)
        x1, o1 = Encoder().encode_state(hand, plays)
        x2, o2 = encode_state(hand, plays)
        np.testing.assert_array_equal(x1, x2)
        assert o1 == o2
