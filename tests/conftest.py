"""
Shared pytest fixtures for the offer simulator test suite.

Provides the three reference scenarios used across modules:
  - ``neutral_offer``: every field at its default.
  - ``elite_offer``: every term at its strongest, score clamps to 100.
  - ``weak_offer``: FHA, low down payment, no EMD, under list in a
    competitive market.
"""

from __future__ import annotations

import pytest

from offer_engine.inputs import OfferInputs, ScenarioDetails


@pytest.fixture
def neutral_offer() -> OfferInputs:
    return OfferInputs()


@pytest.fixture
def elite_offer() -> OfferInputs:
    return OfferInputs(
        competition="solo",
        financing_type="cash",
        down_payment_pct=100,
        sale_contingency="noSale",
        emd_pct=20,
        inspection_type="asIs",
        appraisal_type="no",
        financing_contingency="no",
        tax_split="buyer100",
        title_preference="sellerPref",
        commission="buyerPays",
        rentback="free",
        list_price=1_000_000,
        offer_price=1_000_000,
    )


@pytest.fixture
def weak_offer() -> OfferInputs:
    return OfferInputs(
        competition="competitive",
        financing_type="fha",
        down_payment_pct=5,
        emd_pct=0,
        inspection_type="full",
        appraisal_type="yes",
        financing_contingency="yes",
        list_price=500_000,
        offer_price=480_000,
    )


@pytest.fixture
def sample_details() -> ScenarioDetails:
    return ScenarioDetails(
        property_address="123 Main St, Springfield, VA",
        buyer_names="Jane & John Doe",
        settlement_date="2026-11-30",
        total_cash="160000",
        notes="Renovation budget of about $40k.",
        inspection_checks=["radon", "mold"],
        escalation_cap="920000",
        escalation_by="5000",
    )
