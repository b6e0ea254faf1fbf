from typing import Optional

from crm_lookup.address_parser import norm
from crm_lookup.models import CandidateRow, ParsedAddress, ScoreBreakdown, ScoredRow

HOUSE_POINTS = 50
ZIP_POINTS = 40
CITY_POINTS = 20
STREET_TOKEN_POINTS = 5
EMAIL_POINTS = 3
PHONE_POINTS = 3


def score_row(
    row: CandidateRow,
    parsed: ParsedAddress,
    city_hint: Optional[str] = "",
    zip_hint: Optional[str] = "",
) -> ScoredRow:
    """
    Score a single result row against a parsed address and optional city/zip hints.
    Higher is better. Every signal is independent and the total is their sum.

    Args:
        row (CandidateRow): Result table row.
        parsed (ParsedAddress): Parsed query address.
        city_hint (str): Optional city hint, empty means no hint.
        zip_hint (str): Optional zip hint, empty means no hint.

    Returns:
        ScoredRow: The row with its total score and per-signal breakdown.
    """
    text = norm(row.raw_text)
    text_loc = norm(row.cells.service_location)
    breakdown = ScoreBreakdown()

    # House number match (big signal)
    if parsed.house_number and (parsed.house_number in text_loc or parsed.house_number in text):
        breakdown.house = HOUSE_POINTS

    # Whitespace-only hints count as absent. Zip is only looked up in the full row text
    z = norm(zip_hint)
    if z:
        if z in text:
            breakdown.zip = ZIP_POINTS

    c = norm(city_hint)
    if c:
        if c in text or c in text_loc:
            breakdown.city = CITY_POINTS

    # Street token coverage, each token a small weight
    street_hits = sum(1 for tok in parsed.tokens if tok and (tok in text_loc or tok in text))
    breakdown.street_tokens = street_hits * STREET_TOKEN_POINTS

    # Filled contact data is more common on real accounts
    if (row.cells.email or "").strip():
        breakdown.email = EMAIL_POINTS
    if (row.cells.phone or "").strip():
        breakdown.phone = PHONE_POINTS

    return ScoredRow(row=row, score=breakdown.total, breakdown=breakdown)
