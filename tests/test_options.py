"""Tests for offer_engine.options."""

from __future__ import annotations

import pytest

from offer_engine.options import (
    DEFAULTS,
    INSPECTION_CHECKS,
    OPTION_GROUPS,
    format_weight,
    get_option,
    option_ids,
    option_weight,
    short_label,
    slugify,
)

EXPECTED_WEIGHTS = {
    "competition": {"solo": 10, "maybe": 0, "competitive": -10},
    "financing_type": {"fha": -15, "va": -12, "conv": 0, "cash": 20},
    "sale_contingency": {"needToSell": -12, "noSale": 6},
    "inspection_type": {"full": -6, "aLaCarte": -2, "asIs": 10, "infoOnly": -1},
    "appraisal_type": {"yes": -10, "gapCover": 6, "no": 14},
    "financing_contingency": {"yes": -8, "no": 8},
    "tax_split": {"split": 0, "buyer100": 8},
    "title_preference": {"sellerPref": 4, "buyerPref": -2},
    "commission": {"sellerPays": 0, "buyerPays": 10},
    "rentback": {"none": 0, "paid": 3, "free": 7},
}


def test_weight_tables() -> None:
    assert set(OPTION_GROUPS) == set(EXPECTED_WEIGHTS)
    for field, weights in EXPECTED_WEIGHTS.items():
        assert {o.id: o.weight for o in OPTION_GROUPS[field]} == weights


def test_defaults_are_valid_options() -> None:
    for field, default in DEFAULTS.items():
        assert default in option_ids(field)


def test_unknown_option_raises() -> None:
    with pytest.raises(KeyError):
        get_option("competition", "nobody")
    with pytest.raises(KeyError):
        option_weight("not_a_field", "solo")


def test_short_label() -> None:
    assert short_label("financing_type", "fha") == "FHA"
    assert short_label("competition", "solo") == "I am the only offer"


def test_inspection_check_slugs() -> None:
    ids = [cid for cid, _ in INSPECTION_CHECKS]
    assert len(ids) == 7
    assert "structural-mechanical" in ids
    assert "lead-based-paint" in ids
    assert slugify("Wood Destroying Insect") == "wood-destroying-insect"


@pytest.mark.parametrize("weight,text", [(10, "+10"), (0, "0"), (-6, "-6"), (1.5, "+1.5")])
def test_format_weight(weight: float, text: str) -> None:
    assert format_weight(weight) == text
