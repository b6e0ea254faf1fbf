import re
from typing import Optional

from crm_lookup.models import ParsedAddress

_WHITESPACE = re.compile(r"\s+")
_HOUSE_NUMBER = re.compile(r"^(\d+)\s+(.*)$", re.DOTALL | re.ASCII)


def norm(value: Optional[str]) -> str:
    """Lowercase, collapse whitespace runs to a single space and trim."""
    return _WHITESPACE.sub(" ", (value or "").lower()).strip()


def parse_address(address: Optional[str]) -> ParsedAddress:
    """
    Split a free-text address into its house number, street remainder and tokens.

    Args:
        address (str): Free-text address as typed into the quick search.

    Returns:
        ParsedAddress: Parsed form. Empty input yields empty fields.
            Example: "1462 22nd St" -> ("1462", "22nd St", ("1462", "22nd", "st"))
    """
    trimmed = (address or "").strip()
    m = _HOUSE_NUMBER.match(trimmed)
    if m:
        house_number, street_remainder = m.group(1), m.group(2)
    else:
        house_number, street_remainder = "", trimmed

    tokens = tuple(tok for tok in norm(trimmed).split(" ") if tok)
    return ParsedAddress(
        house_number=house_number,
        street_remainder=street_remainder,
        tokens=tokens,
    )
