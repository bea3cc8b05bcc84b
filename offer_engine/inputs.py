import dataclasses
import math
import re
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Mapping

from .options import DEFAULTS, INSPECTION_CHECKS, OPTION_GROUPS, option_ids

@dataclass(frozen=True)
class OfferInputs:
    competition: str = "maybe"
    financing_type: str = "conv"
    down_payment_pct: float = 20
    sale_contingency: str = "noSale"
    emd_pct: float = 5
    inspection_type: str = "aLaCarte"
    appraisal_type: str = "yes"
    appraisal_gap_amount: int = 0
    financing_contingency: str = "yes"
    tax_split: str = "split"
    title_preference: str = "sellerPref"
    commission: str = "sellerPays"
    rentback: str = "none"
    list_price: int = 0
    offer_price: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    def replace(self, **changes) -> "OfferInputs":
        return dataclasses.replace(self, **changes)

@dataclass(frozen=True)
class ScenarioDetails:
    # Collected and exported with the scenario, never scored.
    property_address: str = ""
    buyer_names: str = ""
    settlement_date: str = ""
    total_cash: str = ""
    notes: str = ""
    inspection_checks: List[str] = field(default_factory=list)
    escalation_cap: str = ""
    escalation_by: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

# -------------------------
# Numeric coercion
# -------------------------
_NON_NUMERIC = re.compile(r"[^0-9.]")

def _finite(value: float, default: float) -> float:
    return value if math.isfinite(value) else default

def to_number(raw: Any, default: float = 0.0) -> float:
    if raw is None or isinstance(raw, bool):
        return default
    if isinstance(raw, (int, float)):
        try:
            return _finite(float(raw), default)  # NaN, inf
        except OverflowError:
            return default
    cleaned = _NON_NUMERIC.sub("", str(raw))
    try:
        return _finite(float(cleaned), default)
    except ValueError:
        return default

def to_non_negative_int(raw: Any) -> int:
    return int(max(0.0, to_number(raw)))

def to_percent(raw: Any, upper: float = 100.0, default: float = 0.0) -> float:
    value = to_number(raw, default)
    return max(0.0, min(float(upper), value))

def to_digits(raw: Any) -> str:
    """Keep digits only, like the free-text money inputs on the form."""
    return re.sub(r"[^0-9]", "", str(raw or ""))

def _choice(raw: Mapping[str, Any], name: str) -> str:
    value = raw.get(name)
    if value in option_ids(name):
        return value
    return DEFAULTS[name]

def build_offer_inputs(raw: Mapping[str, Any]) -> OfferInputs:
    """
    Build a well-formed OfferInputs from loosely typed form or file values.
    Unknown choices fall back to their defaults; numbers are coerced and clamped.
    """
    defaults = OfferInputs()
    choices = {name: _choice(raw, name) for name in OPTION_GROUPS}

    down = raw.get("down_payment_pct", defaults.down_payment_pct)
    emd = raw.get("emd_pct", defaults.emd_pct)

    return OfferInputs(
        down_payment_pct=to_percent(down, 100, defaults.down_payment_pct),
        emd_pct=to_percent(emd, 20, defaults.emd_pct),
        appraisal_gap_amount=to_non_negative_int(raw.get("appraisal_gap_amount")),
        list_price=to_non_negative_int(raw.get("list_price")),
        offer_price=to_non_negative_int(raw.get("offer_price")),
        **choices,
    )

def build_scenario_details(raw: Mapping[str, Any]) -> ScenarioDetails:
    known_checks = {cid for cid, _ in INSPECTION_CHECKS}
    checks = raw.get("inspection_checks") or []
    if not isinstance(checks, (list, tuple)):
        checks = []

    return ScenarioDetails(
        property_address=str(raw.get("property_address") or ""),
        buyer_names=str(raw.get("buyer_names") or ""),
        settlement_date=str(raw.get("settlement_date") or ""),
        total_cash=to_digits(raw.get("total_cash")),
        notes=str(raw.get("notes") or ""),
        inspection_checks=[c for c in checks if c in known_checks],
        escalation_cap=to_digits(raw.get("escalation_cap")),
        escalation_by=to_digits(raw.get("escalation_by")),
    )
