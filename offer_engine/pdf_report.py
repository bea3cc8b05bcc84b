from reportlab.lib.pagesizes import A4
from reportlab.pdfgen import canvas
from reportlab.lib.units import cm
from datetime import datetime, timezone
from typing import Any, Dict, Optional
import logging
import os

from .explain import explain_score
from .export import build_scenario_export
from .inputs import OfferInputs, ScenarioDetails
from .options import INSPECTION_CHECKS, option_label, short_label
from .recommendations import compute_recommendations
from .scoring import ENGINE_VERSION, RULESET_VERSION

logger = logging.getLogger(__name__)

def safe_text(x) -> str:
    return str(x or "").replace("\n", " ").strip()

def money(x) -> str:
    try:
        return f"${int(x or 0):,}"
    except (TypeError, ValueError):
        return "$0"

def build_report_record(inputs: OfferInputs, details: Optional[ScenarioDetails] = None) -> Dict[str, Any]:
    record = build_scenario_export(inputs, details)
    record["recommendations"] = compute_recommendations(inputs)
    record["explanation"] = explain_score(inputs)
    record["engine_version"] = ENGINE_VERSION
    record["ruleset_version"] = RULESET_VERSION
    return record

def term_lines(record: Dict[str, Any]) -> list:
    financing = record.get("financing") or {}
    inspection = record.get("inspection") or {}
    appraisal = record.get("appraisal") or {}
    taxes = record.get("taxesTitle") or {}
    price = record.get("price") or {}

    lines = [
        f"Competition: {option_label('competition', record['competition'])}",
        f"Financing: {short_label('financing_type', financing['type'])} • {financing.get('downPct')}% down",
        f"Home Sale Cont.: {option_label('sale_contingency', record['saleCont'])}",
        f"EMD: {record.get('emdPct')}% of offer",
        f"Inspection: {option_label('inspection_type', inspection['type'])}",
        f"Appraisal: {option_label('appraisal_type', appraisal['type'])}",
    ]
    if appraisal.get("type") == "gapCover":
        lines.append(f"Gap cover: Up to {money(appraisal.get('gapAmount'))}")
    lines += [
        f"Financing Cont.: {option_label('financing_contingency', record['finCont'])}",
        f"Taxes/Title: {option_label('tax_split', taxes['taxSplit'])} • {option_label('title_preference', taxes['titlePref'])}",
        f"Commission: {option_label('commission', record['commission'])}",
        f"Price: List {money(price.get('listPrice'))} -> Offer {money(price.get('offerPrice'))}",
    ]
    if price.get("escalationCap") or price.get("escalationBy"):
        lines.append(f"Escalation: Up to {money(price.get('escalationCap'))} by {money(price.get('escalationBy'))}")
    lines.append(f"Rent-back: {option_label('rentback', record['rentback'])}")
    return lines

def write_pdf_report(output_path: str, record: dict) -> str:
    parent = os.path.dirname(output_path)
    if parent:
        os.makedirs(parent, exist_ok=True)

    c = canvas.Canvas(output_path, pagesize=A4)
    width, height = A4

    y = height - 2 * cm

    def ensure_room():
        nonlocal y
        if y < 3 * cm:
            c.showPage()
            y = height - 2 * cm
            c.setFont("Helvetica", 11)

    def heading(title):
        nonlocal y
        y -= 0.3 * cm
        ensure_room()
        c.setFont("Helvetica-Bold", 12)
        c.drawString(2 * cm, y, title)
        y -= 0.8 * cm
        c.setFont("Helvetica", 11)

    def write_wrapped(text):
        nonlocal y
        for chunk in split_text(text, 95):
            c.drawString(2 * cm, y, chunk)
            y -= 0.55 * cm
            ensure_room()

    # Header
    c.setFont("Helvetica-Bold", 18)
    c.drawString(2 * cm, y, "Offer Strategy Simulator — Scenario Report")
    y -= 1.0 * cm

    c.setFont("Helvetica", 10)
    c.drawString(2 * cm, y, f"Generated: {datetime.now(timezone.utc).isoformat(timespec='seconds')}")
    y -= 0.5 * cm
    c.drawString(2 * cm, y, f"Engine {record.get('engine_version', '—')} • Ruleset {record.get('ruleset_version', '—')}")
    y -= 1.0 * cm

    # Score
    label = record.get("label") or {}
    if isinstance(label, dict):
        label = label.get("label", "")
    c.setFont("Helvetica-Bold", 14)
    c.drawString(2 * cm, y, f"Offer Strength: {record.get('score')} / 100 ({safe_text(label)})")
    y -= 0.6 * cm

    # Terms
    heading("Offer Terms")
    for line in term_lines(record):
        write_wrapped(line)

    # Breakdown
    exp = record.get("explanation") or {}
    heading("Score Breakdown")
    for item in exp.get("components", []):
        points = item.get("points", 0)
        sign = "+" if points > 0 else ""
        c.drawString(2 * cm, y, f"- {item.get('name')}: {sign}{points}")
        y -= 0.55 * cm
        ensure_room()
    if exp:
        c.drawString(2 * cm, y, f"Total before rounding/clamp: {exp.get('raw_total')}")
        y -= 0.55 * cm

    # Recommendations
    heading("Recommendations")
    recs = record.get("recommendations") or []
    if recs:
        for r in recs:
            write_wrapped(f"- {safe_text(r)}")
    else:
        c.drawString(2 * cm, y, "None.")
        y -= 0.55 * cm

    # Basics
    basics = record.get("basics") or {}
    heading("Scenario Details")
    detail_lines = [
        f"Property: {safe_text(basics.get('propertyAddress')) or 'N/A'}",
        f"Buyers: {safe_text(basics.get('buyerNames')) or 'N/A'}",
        f"Preferred settlement: {safe_text(basics.get('settlementDate')) or 'N/A'}",
        f"Available cash: {money(basics.get('totalCash')) if basics.get('totalCash') else 'N/A'}",
    ]
    checks = (record.get("inspection") or {}).get("checks") or []
    if checks:
        names = dict(INSPECTION_CHECKS)
        detail_lines.append("Inspection tests: " + ", ".join(names.get(x, x) for x in checks))
    for line in detail_lines:
        write_wrapped(line)

    notes = safe_text(basics.get("notes"))
    if notes:
        c.drawString(2 * cm, y, "Notes:")
        y -= 0.55 * cm
        write_wrapped(notes)

    y -= 0.4 * cm
    ensure_room()
    c.setFont("Helvetica-Oblique", 9)
    c.drawString(2 * cm, y, "Educational simulator; listing agent feedback and local norms can shift strategy.")

    c.showPage()
    c.save()
    logger.info("Wrote scenario PDF report to %s", output_path)
    return output_path

def split_text(text: str, max_len: int):
    words = text.split()
    if not words:
        return []
    lines = []
    line = ""
    for w in words:
        if len(line) + len(w) + 1 <= max_len:
            line = (line + " " + w).strip()
        else:
            lines.append(line)
            line = w
    if line:
        lines.append(line)
    return lines
