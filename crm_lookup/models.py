"""
Typed data models for the CRM address lookup pipeline.
All data structures used throughout the codebase should be defined here.
"""
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple


@dataclass
class AddressQuery:
    """One search task loaded from the run input."""
    address: str
    city: str = ""  # Optional hint, empty means no hint
    zip: str = ""  # Optional hint, empty means no hint

    def to_dict(self) -> Dict[str, str]:
        return {"address": self.address, "city": self.city, "zip": self.zip}


@dataclass(frozen=True)
class ParsedAddress:
    """Normalized form of a query address, computed once per query."""
    house_number: str
    street_remainder: str
    tokens: Tuple[str, ...]


@dataclass
class RowCells:
    """Named cell values picked out of a result table row."""
    name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    service_location: Optional[str] = None
    city: Optional[str] = None
    zip: Optional[str] = None
    href: Optional[str] = None


@dataclass
class CandidateRow:
    """Result table row as rendered by the quick search."""
    raw_text: str
    cells: RowCells
    original_index: int


@dataclass
class ScoreBreakdown:
    """Points contributed by each scoring signal."""
    house: int = 0
    zip: int = 0
    city: int = 0
    street_tokens: int = 0
    email: int = 0
    phone: int = 0

    @property
    def total(self) -> int:
        return self.house + self.zip + self.city + self.street_tokens + self.email + self.phone

    def to_dict(self) -> Dict[str, int]:
        """Only signals that fired, in signal order."""
        pairs = [
            ("house", self.house),
            ("zip", self.zip),
            ("city", self.city),
            ("streetTokens", self.street_tokens),
            ("email", self.email),
            ("phone", self.phone),
        ]
        return {name: points for name, points in pairs if points}


@dataclass
class ScoredRow:
    """Candidate row together with its score."""
    row: CandidateRow
    score: int
    breakdown: ScoreBreakdown

    @property
    def original_index(self) -> int:
        return self.row.original_index

    def preview(self) -> Dict[str, Any]:
        """Compact dict used for logs and persisted previews."""
        cells = self.row.cells
        return {
            "score": self.score,
            "breakdown": self.breakdown.to_dict(),
            "name": cells.name,
            "serviceLocation": cells.service_location,
            "city": cells.city,
            "zip": cells.zip,
            "href": cells.href or None,
        }


@dataclass
class QueryOutcome:
    """Final result of one query iteration."""
    query: AddressQuery
    top_rows: List[ScoredRow] = field(default_factory=list)
    chosen: Optional[ScoredRow] = None
    detail_opened: bool = False
    detail_url: Optional[str] = None
    customer_id: Optional[str] = None
    details: Dict[str, Any] = field(default_factory=dict)
