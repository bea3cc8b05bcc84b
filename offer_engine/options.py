import re
from dataclasses import dataclass
from typing import Dict, List, Tuple

@dataclass(frozen=True)
class OfferOption:
    id: str
    label: str
    weight: int  # points added to the base score when selected

COMPETITION_OPTIONS: Tuple[OfferOption, ...] = (
    OfferOption("solo", "I am the only offer", 10),
    OfferOption("maybe", "I expect maybe another", 0),
    OfferOption("competitive", "I'm pretty sure it's going to be competitive", -10),
)

FINANCING_OPTIONS: Tuple[OfferOption, ...] = (
    OfferOption("fha", "FHA — Least Strong / Requires Appraisal for All Homes", -15),
    OfferOption("va", "VA — Least Strong / Requires Appraisal for All Homes & WDI", -12),
    OfferOption("conv", "Conventional — Less Strong / Requires Appraisal for +$1M Homes", 0),
    OfferOption("cash", "Cash — Strongest / No Appraisal Needed", 20),
)

SALE_CONTINGENCY_OPTIONS: Tuple[OfferOption, ...] = (
    OfferOption("needToSell", "Yes — I must sell before I buy (Less strong)", -12),
    OfferOption("noSale", "No — I don't need to sell (Strong)", 6),
)

INSPECTION_OPTIONS: Tuple[OfferOption, ...] = (
    OfferOption("full", "Full Inspection — Standard (right to negotiate/terminate)", -6),
    OfferOption("aLaCarte", "A La Carte — Specific tests only (e.g., radon, mold)", -2),
    OfferOption("asIs", "AS-IS (No Inspection) — Strong", 10),
    OfferOption("infoOnly", "Information Only — Depends on seller", -1),
)

APPRAISAL_OPTIONS: Tuple[OfferOption, ...] = (
    OfferOption("yes", "Yes Appraisal — Least Strong", -10),
    OfferOption("gapCover", "Yes Appraisal, but guarantee to cover gap (price firm)", 6),
    OfferOption("no", "No Appraisal — Strongest", 14),
)

FINANCING_CONTINGENCY_OPTIONS: Tuple[OfferOption, ...] = (
    OfferOption("yes", "Yes — If loan denied, I can terminate (Less strong)", -8),
    OfferOption("no", "No — Confident in approval (Stronger)", 8),
)

TAX_SPLIT_OPTIONS: Tuple[OfferOption, ...] = (
    OfferOption("split", "Split 50/50 — Standard", 0),
    OfferOption("buyer100", "Buyer 100% — Strongest", 8),
)

TITLE_PREFERENCE_OPTIONS: Tuple[OfferOption, ...] = (
    OfferOption("sellerPref", "Use Seller's Preferred Title Company — Stronger", 4),
    OfferOption("buyerPref", "Use Buyer's Preferred Title Company — Less Strong", -2),
)

COMMISSION_OPTIONS: Tuple[OfferOption, ...] = (
    OfferOption("sellerPays", "Seller pays Buyer Agency Commission — Standard", 0),
    OfferOption("buyerPays", "Buyer pays 100% of Buyer Agency Commission — Strongest", 10),
)

RENTBACK_OPTIONS: Tuple[OfferOption, ...] = (
    OfferOption("none", "No rent-back requested", 0),
    OfferOption("paid", "Offer seller a paid rent-back (market rate)", 3),
    OfferOption("free", "Offer seller a free rent-back (30–60 days)", 7),
)

# OfferInputs field name -> options, in the order the terms are scored
OPTION_GROUPS: Dict[str, Tuple[OfferOption, ...]] = {
    "competition": COMPETITION_OPTIONS,
    "financing_type": FINANCING_OPTIONS,
    "sale_contingency": SALE_CONTINGENCY_OPTIONS,
    "inspection_type": INSPECTION_OPTIONS,
    "appraisal_type": APPRAISAL_OPTIONS,
    "financing_contingency": FINANCING_CONTINGENCY_OPTIONS,
    "tax_split": TAX_SPLIT_OPTIONS,
    "title_preference": TITLE_PREFERENCE_OPTIONS,
    "commission": COMMISSION_OPTIONS,
    "rentback": RENTBACK_OPTIONS,
}

DEFAULTS: Dict[str, str] = {
    "competition": "maybe",
    "financing_type": "conv",
    "sale_contingency": "noSale",
    "inspection_type": "aLaCarte",
    "appraisal_type": "yes",
    "financing_contingency": "yes",
    "tax_split": "split",
    "title_preference": "sellerPref",
    "commission": "sellerPays",
    "rentback": "none",
}

INSPECTION_CHECK_NAMES: List[str] = [
    "Structural & Mechanical",
    "Mold",
    "Environmental",
    "Radon",
    "Chimney",
    "Lead-Based Paint",
    "Wood Destroying Insect",
]

def slugify(name: str) -> str:
    return re.sub(r"[^a-z0-9]+", "-", name.lower())

# (id, display name), e.g. ("structural-mechanical", "Structural & Mechanical")
INSPECTION_CHECKS: List[Tuple[str, str]] = [(slugify(n), n) for n in INSPECTION_CHECK_NAMES]

def option_ids(field: str) -> List[str]:
    return [o.id for o in OPTION_GROUPS[field]]

def get_option(field: str, option_id: str) -> OfferOption:
    for opt in OPTION_GROUPS[field]:
        if opt.id == option_id:
            return opt
    raise KeyError(f"Unknown option '{option_id}' for '{field}'")

def option_weight(field: str, option_id: str) -> int:
    return get_option(field, option_id).weight

def option_label(field: str, option_id: str) -> str:
    return get_option(field, option_id).label

def short_label(field: str, option_id: str) -> str:
    """Label text before the ' — ' strength note, e.g. 'FHA'."""
    return option_label(field, option_id).split(" — ")[0]

def format_weight(weight: float) -> str:
    if weight > 0:
        return f"+{weight:g}"
    return f"{weight:g}"
