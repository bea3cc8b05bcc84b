# offer_engine/scoring.py

ENGINE_VERSION = "1.0.0"
RULESET_VERSION = "1.0.0"

import math
from dataclasses import dataclass
from typing import List, Tuple

from .inputs import OfferInputs
from .options import OPTION_GROUPS, option_weight

BASE_SCORE = 60

# (min_score_inclusive, label, emoji), evaluated high to low
LABEL_THRESHOLDS: List[Tuple[int, str, str]] = [
    (85, "Elite", "🚀"),
    (70, "Strong", "💪"),
    (55, "Competitive", "⚖️"),
    (0, "Needs Work", "🧩"),
]

@dataclass(frozen=True)
class ScoreResult:
    score: int
    label: str

def round_half_up(x: float) -> int:
    return int(math.floor(x + 0.5))

def clamp_score(score: float) -> int:
    return max(0, min(100, int(score)))

def down_payment_bonus(down_payment_pct: float) -> float:
    # 10% is the baseline; +0.6 per extra point, capped at +20
    return min(20.0, max(0.0, (down_payment_pct - 10) * 0.6))

def emd_bonus(emd_pct: float) -> int:
    if emd_pct >= 10:
        return 12
    if emd_pct >= 5:
        return 6
    if emd_pct >= 2:
        return 2
    return -4

def appraisal_gap_bonus(appraisal_type: str, gap_amount: int) -> int:
    if appraisal_type != "gapCover":
        return 0
    return min(10, int(gap_amount // 5000))

def price_premium_bonus(competition: str, list_price: int, offer_price: int) -> float:
    if list_price <= 0 or offer_price <= 0:
        return 0.0
    premium = (offer_price - list_price) / list_price
    if competition != "solo":
        return min(12.0, max(0, round_half_up(premium * 100)) * 0.6)
    if premium > 0.02:
        return 2.0
    return 0.0

def score_components(inputs: OfferInputs) -> List[Tuple[str, float]]:
    """Every additive term of the score, in evaluation order, starting with the base."""
    parts: List[Tuple[str, float]] = [("base", float(BASE_SCORE))]
    for name in OPTION_GROUPS:
        parts.append((name, float(option_weight(name, getattr(inputs, name)))))
    parts.append(("down_payment_bonus", down_payment_bonus(inputs.down_payment_pct)))
    parts.append(("emd_bonus", float(emd_bonus(inputs.emd_pct))))
    parts.append(("appraisal_gap_bonus", float(appraisal_gap_bonus(inputs.appraisal_type, inputs.appraisal_gap_amount))))
    parts.append(("price_premium_bonus", price_premium_bonus(inputs.competition, inputs.list_price, inputs.offer_price)))
    return parts

def raw_score(inputs: OfferInputs) -> float:
    return sum(points for _, points in score_components(inputs))

def compute_score(inputs: OfferInputs) -> int:
    return clamp_score(round_half_up(raw_score(inputs)))

def label_details(score: int) -> Tuple[str, str]:
    for min_score, label, emoji in LABEL_THRESHOLDS:
        if score >= min_score:
            return label, emoji
    return LABEL_THRESHOLDS[-1][1], LABEL_THRESHOLDS[-1][2]

def label_for_score(score: int) -> str:
    return label_details(score)[0]

def score_offer(inputs: OfferInputs) -> ScoreResult:
    score = compute_score(inputs)
    return ScoreResult(score=score, label=label_for_score(score))
