import json
import logging
import os
import time
from datetime import datetime, timezone
from typing import Any, Dict, Optional, Tuple, Union

from .inputs import OfferInputs, ScenarioDetails, build_offer_inputs, build_scenario_details
from .scoring import label_details, score_offer

logger = logging.getLogger(__name__)

class ScenarioFormatError(ValueError):
    """Raised when an imported scenario file is not a JSON object."""

def now_iso() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")

def scenario_filename(ts_ms: Optional[int] = None) -> str:
    if ts_ms is None:
        ts_ms = int(time.time() * 1000)
    return f"mc-offer-scenario-{ts_ms}.json"

def _number(x: float):
    # keep whole percentages as ints in the document
    return int(x) if float(x).is_integer() else x

def build_scenario_export(
    inputs: OfferInputs,
    details: Optional[ScenarioDetails] = None,
    exported_at: Optional[str] = None,
) -> Dict[str, Any]:
    details = details or ScenarioDetails()
    result = score_offer(inputs)
    _, emoji = label_details(result.score)

    return {
        "competition": inputs.competition,
        "basics": {
            "propertyAddress": details.property_address,
            "buyerNames": details.buyer_names,
            "settlementDate": details.settlement_date,
            "totalCash": details.total_cash,
            "notes": details.notes,
        },
        "financing": {"type": inputs.financing_type, "downPct": _number(inputs.down_payment_pct)},
        "saleCont": inputs.sale_contingency,
        "emdPct": _number(inputs.emd_pct),
        "inspection": {"type": inputs.inspection_type, "checks": list(details.inspection_checks)},
        "appraisal": {"type": inputs.appraisal_type, "gapAmount": inputs.appraisal_gap_amount},
        "finCont": inputs.financing_contingency,
        "taxesTitle": {"taxSplit": inputs.tax_split, "titlePref": inputs.title_preference},
        "commission": inputs.commission,
        "price": {
            "listPrice": inputs.list_price,
            "offerPrice": inputs.offer_price,
            "escalationCap": details.escalation_cap,
            "escalationBy": details.escalation_by,
        },
        "rentback": inputs.rentback,
        "score": result.score,
        "label": {"label": result.label, "emoji": emoji},
        "exportedAt": exported_at or now_iso(),
    }

def scenario_to_json(
    inputs: OfferInputs,
    details: Optional[ScenarioDetails] = None,
    exported_at: Optional[str] = None,
) -> str:
    return json.dumps(build_scenario_export(inputs, details, exported_at), ensure_ascii=False, indent=2)

def write_scenario_json(path: str, inputs: OfferInputs, details: Optional[ScenarioDetails] = None) -> str:
    parent = os.path.dirname(path)
    if parent:
        os.makedirs(parent, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        f.write(scenario_to_json(inputs, details))
    logger.info("Wrote offer scenario to %s", path)
    return path

def _section(data: Dict[str, Any], key: str) -> Dict[str, Any]:
    value = data.get(key)
    return value if isinstance(value, dict) else {}

def load_scenario(data: Union[str, bytes, Dict[str, Any]]) -> Tuple[OfferInputs, ScenarioDetails]:
    """
    Reads a previously exported scenario back into inputs + details.
    Missing or unknown values fall back to defaults; the stored score is ignored
    (it is recomputed from the terms).
    """
    if isinstance(data, (str, bytes)):
        try:
            data = json.loads(data)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise ScenarioFormatError(f"Scenario file is not valid JSON: {e}") from e

    if not isinstance(data, dict):
        raise ScenarioFormatError("Scenario file must contain a JSON object.")

    basics = _section(data, "basics")
    financing = _section(data, "financing")
    inspection = _section(data, "inspection")
    appraisal = _section(data, "appraisal")
    taxes_title = _section(data, "taxesTitle")
    price = _section(data, "price")

    inputs = build_offer_inputs({
        "competition": data.get("competition"),
        "financing_type": financing.get("type"),
        "down_payment_pct": financing.get("downPct", OfferInputs.down_payment_pct),
        "sale_contingency": data.get("saleCont"),
        "emd_pct": data.get("emdPct", OfferInputs.emd_pct),
        "inspection_type": inspection.get("type"),
        "appraisal_type": appraisal.get("type"),
        "appraisal_gap_amount": appraisal.get("gapAmount"),
        "financing_contingency": data.get("finCont"),
        "tax_split": taxes_title.get("taxSplit"),
        "title_preference": taxes_title.get("titlePref"),
        "commission": data.get("commission"),
        "rentback": data.get("rentback"),
        "list_price": price.get("listPrice"),
        "offer_price": price.get("offerPrice"),
    })

    details = build_scenario_details({
        "property_address": basics.get("propertyAddress"),
        "buyer_names": basics.get("buyerNames"),
        "settlement_date": basics.get("settlementDate"),
        "total_cash": basics.get("totalCash"),
        "notes": basics.get("notes"),
        "inspection_checks": inspection.get("checks"),
        "escalation_cap": price.get("escalationCap"),
        "escalation_by": price.get("escalationBy"),
    })

    stored = data.get("score")
    recomputed = score_offer(inputs).score
    if stored is not None and stored != recomputed:
        logger.warning("Imported scenario score %s differs from recomputed score %s", stored, recomputed)

    return inputs, details
