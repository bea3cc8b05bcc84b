from typing import Callable, List, Tuple
from .inputs import OfferInputs

MAX_RECOMMENDATIONS = 5

FALLBACK_RECOMMENDATION = (
    "Your offer looks well balanced. Review the final terms with your agent before drafting."
)

Rule = Tuple[Callable[[OfferInputs], bool], str]

# Evaluated in order; each matching rule contributes one line.
RULES: List[Rule] = [
    (
        lambda i: i.competition != "solo" and i.offer_price <= i.list_price,
        "Consider offering 0.5–1.0% above list price, or add an escalation clause to stay competitive.",
    ),
    (
        lambda i: i.emd_pct < 5,
        "Raise your earnest money deposit to at least 5% to signal commitment.",
    ),
    (
        lambda i: i.financing_type != "cash" and i.down_payment_pct < 20,
        "Increase your down payment to 20% or more to strengthen a financed offer.",
    ),
    (
        lambda i: i.inspection_type != "asIs" and i.competition == "competitive",
        "Narrow the inspection contingency (a la carte tests) or switch to information-only.",
    ),
    (
        lambda i: i.appraisal_type == "yes" and i.competition != "solo",
        "Guarantee at least part of a potential appraisal gap to reassure the seller.",
    ),
    (
        lambda i: i.tax_split != "split" or i.title_preference != "sellerPref",
        "Align with the seller's preferred title company and the standard 50/50 transfer tax split.",
    ),
    (
        lambda i: i.commission != "buyerPays" and i.competition == "competitive",
        "Offer to cover the buyer agency commission to make the net proceeds more attractive.",
    ),
    (
        lambda i: i.rentback != "none",
        "Spell out the rent-back terms (length, rent, deposit) explicitly in the offer.",
    ),
]

def matching_rules(inputs: OfferInputs) -> List[int]:
    """1-based numbers of every rule whose condition holds, before truncation."""
    return [n for n, (cond, _) in enumerate(RULES, start=1) if cond(inputs)]

def compute_recommendations(inputs: OfferInputs) -> List[str]:
    recs = [text for cond, text in RULES if cond(inputs)]
    if not recs:
        return [FALLBACK_RECOMMENDATION]
    return recs[:MAX_RECOMMENDATIONS]
