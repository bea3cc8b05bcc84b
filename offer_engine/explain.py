from typing import Dict, List, Tuple
from .inputs import OfferInputs
from .scoring import clamp_score, round_half_up, score_components

COMPONENT_NAMES: Dict[str, str] = {
    "base": "Starting point",
    "competition": "Competition",
    "financing_type": "Financing",
    "sale_contingency": "Home sale contingency",
    "inspection_type": "Inspection",
    "appraisal_type": "Appraisal",
    "financing_contingency": "Financing contingency",
    "tax_split": "Transfer taxes",
    "title_preference": "Title company",
    "commission": "Commission",
    "rentback": "Rent-back",
    "down_payment_bonus": "Down payment bonus",
    "emd_bonus": "Earnest money",
    "appraisal_gap_bonus": "Appraisal gap guarantee",
    "price_premium_bonus": "Price vs. list",
}

def explain_score(inputs: OfferInputs) -> Dict[str, object]:
    """
    Returns:
    - components: every additive term, in scoring order
    - raw_total / score: unrounded sum and final clamped score
    - top_positive_contributors (2) / top_negative_contributors (2), base excluded
    """
    parts = score_components(inputs)
    raw_total = sum(p for _, p in parts)

    items: List[Tuple[str, float]] = [(name, p) for name, p in parts if name != "base"]
    by_points = sorted(items, key=lambda x: x[1])

    positive = [x for x in reversed(by_points) if x[1] > 0][:2]
    negative = [x for x in by_points if x[1] < 0][:2]

    return {
        "components": [
            {"component": name, "name": COMPONENT_NAMES.get(name, name), "points": round(p, 2)}
            for name, p in parts
        ],
        "raw_total": round(raw_total, 2),
        "score": clamp_score(round_half_up(raw_total)),
        "top_positive_contributors": [{"component": n, "points": round(p, 2)} for n, p in positive],
        "top_negative_contributors": [{"component": n, "points": round(p, 2)} for n, p in negative],
    }
