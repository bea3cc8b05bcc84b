import os
import logging
import datetime as dt
import streamlit as st

# Must be first Streamlit call
st.set_page_config(page_title="Offer Strategy Simulator", layout="wide")

# ----------------------------
# Imports (engine)
# ----------------------------
from offer_engine.options import (
    DEFAULTS,
    INSPECTION_CHECKS,
    format_weight,
    option_ids,
    option_label,
    option_weight,
    short_label,
)
from offer_engine.inputs import OfferInputs, build_offer_inputs, build_scenario_details, to_non_negative_int
from offer_engine.scoring import score_offer, label_details, ENGINE_VERSION, RULESET_VERSION
from offer_engine.explain import explain_score
from offer_engine.recommendations import compute_recommendations
from offer_engine.export import ScenarioFormatError, load_scenario, scenario_filename, scenario_to_json
from offer_engine.pdf_report import build_report_record, write_pdf_report

REPORTS_DIR = os.getenv("OFFER_SIM_REPORTS_DIR", "reports")

logging.basicConfig(
    level=os.getenv("OFFER_SIM_LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger("offer_simulator")

DETAIL_DEFAULTS = {
    "property_address": "",
    "buyer_names": "",
    "settlement_date": None,
    "total_cash": "",
    "notes": "",
    "inspection_checks": [],
    "escalation_cap": "",
    "escalation_by": "",
}

NUMERIC_DEFAULTS = {
    "down_payment_pct": 20,
    "emd_pct": 5,
    "appraisal_gap_amount": "",
    "list_price": "",
    "offer_price": "",
}

# ----------------------------
# Session state
# ----------------------------
def _init_state():
    for k, v in DEFAULTS.items():
        st.session_state.setdefault(k, v)
    for k, v in NUMERIC_DEFAULTS.items():
        st.session_state.setdefault(k, v)
    for k, v in DETAIL_DEFAULTS.items():
        st.session_state.setdefault(k, list(v) if isinstance(v, list) else v)
    st.session_state.setdefault("loaded_upload_id", None)


def reset_all():
    st.session_state.update(DEFAULTS)
    st.session_state.update(NUMERIC_DEFAULTS)
    for k, v in DETAIL_DEFAULTS.items():
        st.session_state[k] = list(v) if isinstance(v, list) else v
    logger.info("Scenario reset to defaults")


_init_state()

# ----------------------------
# Helpers
# ----------------------------
def badge(text: str, tone: str = "neutral"):
    tones = {
        "neutral": ("#111827", "#E5E7EB"),
        "good": ("#065F46", "#D1FAE5"),
        "warn": ("#92400E", "#FEF3C7"),
        "bad": ("#7F1D1D", "#FEE2E2"),
        "info": ("#1E3A8A", "#DBEAFE"),
    }
    fg, bg = tones.get(tone, tones["neutral"])
    st.markdown(
        f"""
        <span style="
            display:inline-block;
            padding:0.25rem 0.55rem;
            border-radius:999px;
            font-size:0.80rem;
            font-weight:600;
            color:{fg};
            background:{bg};
            border:1px solid rgba(0,0,0,0.06);
        ">{text}</span>
        """,
        unsafe_allow_html=True,
    )


def section_title(title: str, subtitle: str = ""):
    st.markdown(f"### {title}")
    if subtitle:
        st.caption(subtitle)


def tone_for_label(label: str) -> str:
    return {"Elite": "good", "Strong": "good", "Competitive": "warn"}.get(label, "bad")


def choice(field: str, title: str, horizontal: bool = False):
    st.radio(
        title,
        options=option_ids(field),
        format_func=lambda k: f"{option_label(field, k)}  ({format_weight(option_weight(field, k))})",
        key=field,
        horizontal=horizontal,
    )


def current_inputs() -> OfferInputs:
    ss = st.session_state
    raw = {k: ss.get(k) for k in list(DEFAULTS) + list(NUMERIC_DEFAULTS)}
    return build_offer_inputs(raw)


def current_details():
    ss = st.session_state
    raw = {k: ss.get(k) for k in DETAIL_DEFAULTS}
    if raw["settlement_date"]:
        raw["settlement_date"] = raw["settlement_date"].isoformat()
    return build_scenario_details(raw)


def apply_loaded_scenario(inputs: OfferInputs, details):
    """Push an imported scenario into widget state (must run before widgets render)."""
    values = inputs.to_dict()
    for k in ("appraisal_gap_amount", "list_price", "offer_price"):
        values[k] = str(values[k]) if values[k] else ""
    for k in ("down_payment_pct", "emd_pct"):
        values[k] = int(values[k])
    st.session_state.update(values)

    d = details.to_dict()
    try:
        d["settlement_date"] = dt.date.fromisoformat(d["settlement_date"]) if d["settlement_date"] else None
    except ValueError:
        logger.warning("Ignoring unreadable settlement date %r", d["settlement_date"])
        d["settlement_date"] = None
    st.session_state.update(d)


def summary_row(label: str, value: str):
    left, right = st.columns([0.38, 0.62])
    left.caption(label)
    right.write(value)


# ----------------------------
# Sidebar: open a saved scenario
# ----------------------------
with st.sidebar:
    st.markdown("**Open a saved scenario**")
    uploaded = st.file_uploader("Scenario JSON", type=["json"], key="scenario_upload")
    if uploaded is not None and st.session_state.loaded_upload_id != uploaded.file_id:
        try:
            loaded_inputs, loaded_details = load_scenario(uploaded.getvalue())
        except ScenarioFormatError as e:
            logger.warning("Rejected scenario upload %s: %s", uploaded.name, e)
            st.error(str(e))
        else:
            apply_loaded_scenario(loaded_inputs, loaded_details)
            logger.info("Loaded scenario from %s", uploaded.name)
            st.success(f"Loaded {uploaded.name}")
        st.session_state.loaded_upload_id = uploaded.file_id

# ----------------------------
# Header
# ----------------------------
head_l, head_r = st.columns([0.74, 0.26], vertical_alignment="center")
with head_l:
    st.title("Offer Strategy Simulator")
    st.caption("Play with choices, learn the trade-offs, and see how your offer strength evolves in real time.")
with head_r:
    badge(f"Engine {ENGINE_VERSION}", "info")
    st.write("")
    badge(f"Ruleset {RULESET_VERSION}", "info")

form_col, summary_col = st.columns([0.66, 0.34], gap="large")

# ----------------------------
# LEFT: Terms
# ----------------------------
with form_col:
    with st.container(border=True):
        section_title("First Question: Competition", "Is there a competition or are you the only offer? Choose one.")
        choice("competition", "Competition", horizontal=True)

    with st.container(border=True):
        section_title(
            "Step 1: Basic Information",
            "Aligning with the seller's preferred settlement date strengthens your offer. "
            "Understanding your cash flow is critical (e.g., down payment vs. renovation funds).",
        )
        c1, c2 = st.columns(2)
        with c1:
            st.text_input("Property Address", key="property_address", placeholder="123 Main St, City, ST")
            st.date_input("Preferred Settlement Date", key="settlement_date")
        with c2:
            st.text_input("Buyers Names", key="buyer_names", placeholder="Jane & John Doe")
            st.text_input("Available Total Cash For Strategy ($)", key="total_cash", placeholder="e.g., 160000")
        st.text_area("Notes", key="notes", placeholder="Renovation budget, timeline constraints, etc.")

    with st.container(border=True):
        section_title("Step 2: Financing Method", "Sellers tend to see cash as lowest risk; higher down payments also strengthen financed offers.")
        choice("financing_type", "Financing")
        st.slider("Down Payment (%)", min_value=0, max_value=100, step=1, key="down_payment_pct")

    with st.container(border=True):
        section_title("Step 3: Home Sale Contingency")
        choice("sale_contingency", "Do you need to sell first?", horizontal=True)

    with st.container(border=True):
        section_title("Step 4: Earnest Money Deposit (EMD)", "Signals seriousness. Held by title/brokerage and credited at closing.")
        st.slider("EMD (% of offer)", min_value=0, max_value=20, step=1, key="emd_pct")
        st.caption("2% — Standard • 5% — Strong • 10%+ — Very Strong")

    with st.container(border=True):
        section_title("Step 5: Home Inspection Contingency")
        choice("inspection_type", "Inspection")
        if st.session_state.get("inspection_type") == "aLaCarte":
            st.multiselect(
                "Pick specific tests (optional)",
                options=[cid for cid, _ in INSPECTION_CHECKS],
                format_func=lambda cid: dict(INSPECTION_CHECKS).get(cid, cid),
                key="inspection_checks",
            )

    with st.container(border=True):
        section_title("Step 6: Appraisal Contingency")
        choice("appraisal_type", "Appraisal")
        if st.session_state.get("appraisal_type") == "gapCover":
            st.text_input("Guarantee to cover appraisal gap up to ($)", key="appraisal_gap_amount", placeholder="e.g., 10000")
            st.caption("+1 score per $5,000 guaranteed (max +10)")

    with st.container(border=True):
        section_title("Step 7: Financing Contingency")
        choice("financing_contingency", "Financing contingency", horizontal=True)

    with st.container(border=True):
        section_title("Step 8: Recordation / Transfer Tax / Title Company")
        c1, c2 = st.columns(2)
        with c1:
            choice("tax_split", "Transfer taxes")
        with c2:
            choice("title_preference", "Title company")

    with st.container(border=True):
        section_title("Step 9: Commission")
        choice("commission", "Buyer agency commission")
        st.caption("Commission structures are evolving; your agent will confirm what the seller offers on this listing.")

    with st.container(border=True):
        section_title("Step 10: Offer Price", "List price is a starting point; competitiveness may warrant an escalation.")
        c1, c2 = st.columns(2)
        with c1:
            st.text_input("Seller Asking (List Price)", key="list_price", placeholder="e.g., 875000")
            st.text_input("Escalation Up To", key="escalation_cap", placeholder="e.g., 920000")
        with c2:
            st.text_input("Your Offer Price", key="offer_price", placeholder="e.g., 895000")
            st.text_input("Escalation By (increment)", key="escalation_by", placeholder="e.g., 5000")
        choice("rentback", "Rent-back", horizontal=True)

# ----------------------------
# Evaluate (every rerun)
# ----------------------------
inputs = current_inputs()
details = current_details()
result = score_offer(inputs)
_, emoji = label_details(result.score)
recommendations = compute_recommendations(inputs)
explanation = explain_score(inputs)

# ----------------------------
# RIGHT: Score + summary
# ----------------------------
with summary_col:
    with st.container(border=True):
        st.subheader("Offer Strength")
        st.progress(result.score / 100)
        s1, s2 = st.columns([0.4, 0.6], vertical_alignment="center")
        s1.metric("Score", result.score)
        with s2:
            badge(f"{emoji} {result.label}", tone_for_label(result.label))

        st.markdown("**Summary**")
        summary_row("Competition", option_label("competition", inputs.competition))
        summary_row("Financing", f"{short_label('financing_type', inputs.financing_type)} • {inputs.down_payment_pct:g}% down")
        summary_row("Home Sale Cont.", option_label("sale_contingency", inputs.sale_contingency))
        summary_row("EMD", f"{inputs.emd_pct:g}% of offer")
        summary_row("Inspection", option_label("inspection_type", inputs.inspection_type))
        summary_row("Appraisal", option_label("appraisal_type", inputs.appraisal_type))
        if inputs.appraisal_type == "gapCover":
            summary_row("Gap cover", f"Up to ${inputs.appraisal_gap_amount:,}")
        summary_row("Financing Cont.", option_label("financing_contingency", inputs.financing_contingency))
        summary_row(
            "Taxes/Title",
            f"{option_label('tax_split', inputs.tax_split)} • {option_label('title_preference', inputs.title_preference)}",
        )
        summary_row("Commission", option_label("commission", inputs.commission))
        summary_row("Price", f"List ${inputs.list_price:,} → Offer ${inputs.offer_price:,}")
        if details.escalation_cap or details.escalation_by:
            cap = to_non_negative_int(details.escalation_cap)
            by = to_non_negative_int(details.escalation_by)
            summary_row("Escalation", f"Up to ${cap:,} by ${by:,}")
        summary_row("Rent-back", option_label("rentback", inputs.rentback))

    with st.container(border=True):
        st.subheader("Recommendations")
        for r in recommendations:
            st.write(f"- {r}")

    with st.container(border=True):
        st.subheader("Score breakdown")
        import pandas as pd

        df = pd.DataFrame(explanation["components"])[["name", "points"]]
        df.columns = ["Term", "Points"]
        st.dataframe(df, use_container_width=True, hide_index=True)
        st.bar_chart(df[df["Term"] != "Starting point"].set_index("Term"))
        st.caption(f"Total before rounding and clamp: {explanation['raw_total']}")

    with st.container(border=True):
        st.subheader("Export")
        st.button("Reset", on_click=reset_all, use_container_width=True, key="btn_reset")
        st.download_button(
            "Download JSON",
            data=scenario_to_json(inputs, details).encode("utf-8"),
            file_name=scenario_filename(),
            mime="application/json",
            use_container_width=True,
            key="btn_download_json",
        )

        if st.button("Generate PDF report", use_container_width=True, key="btn_pdf"):
            pdf_name = scenario_filename().replace(".json", ".pdf")
            try:
                path = write_pdf_report(os.path.join(REPORTS_DIR, pdf_name), build_report_record(inputs, details))
            except OSError as e:
                logger.exception("PDF report failed")
                st.error(f"Could not write the PDF report: {e}")
            else:
                st.success("PDF generated.")
                with open(path, "rb") as f:
                    st.download_button(
                        "Download PDF",
                        data=f.read(),
                        file_name=pdf_name,
                        mime="application/pdf",
                        use_container_width=True,
                        key="btn_download_pdf",
                    )

    st.caption(
        "Heads up: this simulator is educational; listing agent feedback and local norms can shift strategy. "
        "Finalize terms with your agent before drafting."
    )
