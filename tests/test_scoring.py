"""Tests for offer_engine.scoring."""

from __future__ import annotations

import itertools

import pytest

from offer_engine.inputs import OfferInputs
from offer_engine.options import OPTION_GROUPS, option_ids
from offer_engine.scoring import (
    BASE_SCORE,
    LABEL_THRESHOLDS,
    ScoreResult,
    appraisal_gap_bonus,
    compute_score,
    down_payment_bonus,
    emd_bonus,
    label_for_score,
    price_premium_bonus,
    raw_score,
    round_half_up,
    score_components,
    score_offer,
)


# ── Reference scenarios ───────────────────────────────────────────────────────


def test_neutral_defaults_score_62(neutral_offer: OfferInputs) -> None:
    """60 + 0+0+6+6+6-2-10-8+0+4+0+0 = 62."""
    assert compute_score(neutral_offer) == 62
    assert score_offer(neutral_offer) == ScoreResult(score=62, label="Competitive")


def test_strongest_terms_clamp_to_100(elite_offer: OfferInputs) -> None:
    assert raw_score(elite_offer) > 100
    assert score_offer(elite_offer) == ScoreResult(score=100, label="Elite")


def test_weak_offer_needs_work(weak_offer: OfferInputs) -> None:
    result = score_offer(weak_offer)
    assert result.score == 17
    assert result.label == "Needs Work"


def test_worst_terms_clamp_to_zero() -> None:
    worst = OfferInputs(
        competition="competitive",
        financing_type="fha",
        down_payment_pct=0,
        sale_contingency="needToSell",
        emd_pct=0,
        inspection_type="full",
        appraisal_type="yes",
        financing_contingency="yes",
        title_preference="buyerPref",
    )
    assert raw_score(worst) < 0
    assert compute_score(worst) == 0


# ── Purity ────────────────────────────────────────────────────────────────────


def test_score_is_repeatable(weak_offer: OfferInputs) -> None:
    assert compute_score(weak_offer) == compute_score(weak_offer)
    assert weak_offer == OfferInputs(**weak_offer.to_dict())


def test_construction_order_does_not_matter() -> None:
    a = OfferInputs(emd_pct=10, competition="solo", list_price=400_000, offer_price=420_000)
    b = OfferInputs(offer_price=420_000, list_price=400_000, competition="solo", emd_pct=10)
    assert compute_score(a) == compute_score(b)


def test_components_start_with_base(neutral_offer: OfferInputs) -> None:
    parts = score_components(neutral_offer)
    assert parts[0] == ("base", BASE_SCORE)
    assert len(parts) == 15


# ── Down payment ──────────────────────────────────────────────────────────────


@pytest.mark.parametrize("pct,expected", [(0, 0.0), (10, 0.0), (20, 6.0), (44, 20.0), (100, 20.0)])
def test_down_payment_bonus(pct: float, expected: float) -> None:
    assert down_payment_bonus(pct) == pytest.approx(expected)


def test_down_payment_43_reaches_cap_after_rounding() -> None:
    """43% gives 19.8 before rounding, which lands on the same score as any larger down payment."""
    assert down_payment_bonus(43) == pytest.approx(19.8)
    at_43 = compute_score(OfferInputs(down_payment_pct=43))
    assert at_43 == compute_score(OfferInputs(down_payment_pct=100)) == 76


def test_down_payment_bonus_applies_to_cash() -> None:
    low = compute_score(OfferInputs(financing_type="cash", down_payment_pct=10))
    high = compute_score(OfferInputs(financing_type="cash", down_payment_pct=30))
    assert high - low == 12


# ── Earnest money ─────────────────────────────────────────────────────────────


@pytest.mark.parametrize(
    "pct,expected",
    [(0, -4), (1.99, -4), (2, 2), (4.9, 2), (5, 6), (9.99, 6), (10, 12), (20, 12)],
)
def test_emd_tiers_inclusive_lower_bound(pct: float, expected: int) -> None:
    assert emd_bonus(pct) == expected


def test_emd_threshold_scores() -> None:
    assert compute_score(OfferInputs(emd_pct=2)) == 58
    assert compute_score(OfferInputs(emd_pct=5)) == 62
    assert compute_score(OfferInputs(emd_pct=10)) == 68


# ── Appraisal gap ─────────────────────────────────────────────────────────────


def test_gap_bonus_only_for_gap_cover() -> None:
    assert appraisal_gap_bonus("yes", 50_000) == 0
    assert appraisal_gap_bonus("no", 50_000) == 0


@pytest.mark.parametrize("amount,expected", [(0, 0), (4_999, 0), (5_000, 1), (27_500, 5), (50_000, 10), (1_000_000, 10)])
def test_gap_bonus_per_full_5000_capped(amount: int, expected: int) -> None:
    assert appraisal_gap_bonus("gapCover", amount) == expected


def test_gap_cover_scores() -> None:
    assert compute_score(OfferInputs(appraisal_type="gapCover")) == 78
    assert compute_score(OfferInputs(appraisal_type="gapCover", appraisal_gap_amount=50_000)) == 88
    assert compute_score(OfferInputs(appraisal_type="gapCover", appraisal_gap_amount=250_000)) == 88


# ── Price premium ─────────────────────────────────────────────────────────────


def test_premium_needs_both_prices() -> None:
    assert price_premium_bonus("maybe", 0, 500_000) == 0
    assert price_premium_bonus("maybe", 500_000, 0) == 0
    assert compute_score(OfferInputs(list_price=0, offer_price=900_000)) == 62


def test_premium_scales_in_competition() -> None:
    assert price_premium_bonus("maybe", 500_000, 510_000) == pytest.approx(1.2)
    assert price_premium_bonus("competitive", 500_000, 600_000) == pytest.approx(12.0)
    assert price_premium_bonus("competitive", 500_000, 900_000) == pytest.approx(12.0)


def test_premium_below_list_floors_at_zero() -> None:
    assert price_premium_bonus("competitive", 500_000, 480_000) == 0


def test_premium_rounds_half_up() -> None:
    """2.5 percentage points round to 3, not to the even 2."""
    assert round_half_up(2.5) == 3
    assert price_premium_bonus("maybe", 1_000_000, 1_025_000) == pytest.approx(1.8)
    assert compute_score(OfferInputs(list_price=1_000_000, offer_price=1_025_000)) == 64


def test_solo_premium_flat_bump() -> None:
    assert price_premium_bonus("solo", 1_000_000, 1_030_000) == 2
    assert price_premium_bonus("solo", 1_000_000, 1_020_000) == 0
    assert price_premium_bonus("solo", 1_000_000, 1_500_000) == 2
    assert compute_score(OfferInputs(competition="solo", list_price=1_000_000, offer_price=1_030_000)) == 74


# ── Labels ────────────────────────────────────────────────────────────────────


@pytest.mark.parametrize(
    "score,label",
    [
        (100, "Elite"),
        (85, "Elite"),
        (84, "Strong"),
        (70, "Strong"),
        (69, "Competitive"),
        (55, "Competitive"),
        (54, "Needs Work"),
        (0, "Needs Work"),
    ],
)
def test_label_for_score(score: int, label: str) -> None:
    assert label_for_score(score) == label


# ── Full input sweep ──────────────────────────────────────────────────────────


@pytest.mark.parametrize("prices", [(0, 0), (500_000, 530_000)])
@pytest.mark.parametrize("emd", [0, 2, 5, 10, 20])
@pytest.mark.parametrize("down", [0, 10, 43, 100])
def test_every_combination_stays_in_range(down: float, emd: float, prices: tuple) -> None:
    valid_labels = {label for _, label, _ in LABEL_THRESHOLDS}
    fields = list(OPTION_GROUPS)
    list_price, offer_price = prices
    for combo in itertools.product(*(option_ids(f) for f in fields)):
        inputs = OfferInputs(
            down_payment_pct=down,
            emd_pct=emd,
            appraisal_gap_amount=25_000,
            list_price=list_price,
            offer_price=offer_price,
            **dict(zip(fields, combo)),
        )
        score = compute_score(inputs)
        assert 0 <= score <= 100
        assert label_for_score(score) in valid_labels
