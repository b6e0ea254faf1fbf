"""
Turn the raw quick search table into candidate rows.

The browser client only ships plain strings out of the page: header texts and,
per body row, its full text, its cell texts and the first customer link. Everything
here is pure so it can be tested without a browser.
"""
import re
from typing import Any, Dict, List, Sequence

from crm_lookup.config import MAX_ROWS
from crm_lookup.models import CandidateRow, RowCells

# Header pattern per cell field. A later header matching the same field wins.
HEADER_PATTERNS = {
    "name": re.compile(r"(customer\s*name|name)", re.IGNORECASE),
    "service_location": re.compile(r"service\s*location", re.IGNORECASE),
    "city": re.compile(r"city|state/?prov", re.IGNORECASE),
    "zip": re.compile(r"zip|post", re.IGNORECASE),
    "email": re.compile(r"email", re.IGNORECASE),
    "phone": re.compile(r"phone", re.IGNORECASE),
}

# JS run in the page to collect body rows, see CrmBrowserClient.read_result_rows
ROWS_SCRIPT = """
(trs, maxRows) => Array.from(trs).slice(0, maxRows).map(tr => {
    const link = tr.querySelector("a[href*='customer']") || tr.querySelector('a');
    return {
        text: tr.textContent || '',
        cells: Array.from(tr.querySelectorAll('td')).map(td => (td.textContent || '').trim()),
        href: link ? link.href : null,
    };
})
"""


def build_header_map(headers: Sequence[str]) -> Dict[str, int]:
    """
    Map cell field names to table column indexes (best effort).

    Args:
        headers (Sequence[str]): Header cell texts in column order.

    Returns:
        Dict[str, int]: Field name -> column index, only for fields that were found.
            Example: ["Customer Name", "Email"] -> {"name": 0, "email": 1}
    """
    header_map: Dict[str, int] = {}
    for i, header in enumerate(headers):
        text = (header or "").strip()
        for field_name, pattern in HEADER_PATTERNS.items():
            if pattern.search(text):
                header_map[field_name] = i
    return header_map


def _pick(cells: Sequence[str], idx) -> str:
    if idx is None or idx >= len(cells):
        return ""
    return (cells[idx] or "").strip()


def build_candidate_rows(
    raw_rows: Sequence[Dict[str, Any]],
    header_map: Dict[str, int],
    max_rows: int = MAX_ROWS,
) -> List[CandidateRow]:
    """
    Build candidate rows from the raw row payload returned by ROWS_SCRIPT.

    Args:
        raw_rows: Dicts with "text", "cells" and "href" keys, in rendered order.
        header_map: Output of build_header_map.
        max_rows: Only the first max_rows rows are kept.

    Returns:
        List[CandidateRow]: One candidate per row, indexed by rendered position.
    """
    rows = []
    for i, raw in enumerate(list(raw_rows)[:max_rows]):
        cells = raw.get("cells") or []
        rows.append(CandidateRow(
            raw_text=raw.get("text") or "",
            cells=RowCells(
                name=_pick(cells, header_map.get("name")),
                email=_pick(cells, header_map.get("email")),
                phone=_pick(cells, header_map.get("phone")),
                service_location=_pick(cells, header_map.get("service_location")),
                city=_pick(cells, header_map.get("city")),
                zip=_pick(cells, header_map.get("zip")),
                href=raw.get("href"),
            ),
            original_index=i,
        ))
    return rows
