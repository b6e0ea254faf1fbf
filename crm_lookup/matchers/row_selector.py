from typing import List, Optional, Sequence

from crm_lookup.config import MIN_MATCH_SCORE
from crm_lookup.matchers.row_scorer import score_row
from crm_lookup.models import CandidateRow, ParsedAddress, ScoredRow


def rank_rows(
    rows: Sequence[CandidateRow],
    parsed: ParsedAddress,
    city_hint: Optional[str] = "",
    zip_hint: Optional[str] = "",
) -> List[ScoredRow]:
    """
    Score every row and order them best first.

    Ties keep the rendered table order, so the row with the lower
    original index ranks first.

    Args:
        rows (Sequence[CandidateRow]): Rows in rendered order.
        parsed (ParsedAddress): Parsed query address.
        city_hint (str): Optional city hint.
        zip_hint (str): Optional zip hint.

    Returns:
        List[ScoredRow]: Scored rows sorted by descending score.
    """
    scored = [score_row(row, parsed, city_hint, zip_hint) for row in rows]
    return sorted(scored, key=lambda s: (-s.score, s.original_index))


def select_best(
    rows: Sequence[CandidateRow],
    parsed: ParsedAddress,
    city_hint: Optional[str] = "",
    zip_hint: Optional[str] = "",
    min_score: int = MIN_MATCH_SCORE,
) -> Optional[ScoredRow]:
    """
    Pick the highest scoring row.

    Args:
        rows (Sequence[CandidateRow]): Rows in rendered order.
        parsed (ParsedAddress): Parsed query address.
        city_hint (str): Optional city hint.
        zip_hint (str): Optional zip hint.
        min_score (int): Lowest score accepted as a match. The default of 0
            accepts any row, even when no signal fired.

    Returns:
        Optional[ScoredRow]: Best row, or None when there are no rows or the
            best score is below min_score.
    """
    return best_ranked(rank_rows(rows, parsed, city_hint, zip_hint), min_score)


def best_ranked(ranked: Sequence[ScoredRow], min_score: int = MIN_MATCH_SCORE) -> Optional[ScoredRow]:
    """First row of an already ranked list, or None when it is empty or below min_score."""
    if not ranked:
        return None
    best = ranked[0]
    if best.score < min_score:
        return None
    return best
