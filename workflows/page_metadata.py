"""Page, classification and output dataclasses used throughout the sorting workflow."""

import re
from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Any, List, Optional


class Mode(str, Enum):
    """How a page relates to the page before it."""

    ENVELOPE = "envelope"    # Starts a new correspondence unit
    DOCUMENT = "document"    # Starts a new sub-document, same sender
    SAME = "same"            # Continues the current sub-document

    @classmethod
    def parse(cls, value: str) -> "Mode":
        """Parse a mode name, raising ValueError for anything unknown."""
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            valid = ", ".join(m.value for m in cls)
            raise ValueError(f"Unknown mode '{value}'. Must be one of: {valid}")


@dataclass(frozen=True)
class TextItem:
    """A run of text at a position on the page (PDF user space)."""

    text: str
    x: float = 0.0
    y: float = 0.0


@dataclass(frozen=True)
class Page:
    """One page of the source bundle."""

    page_number: int                         # 1-based, matches the source page order
    text: str = ""                           # Extracted page text
    items: tuple = ()                        # TextItems (optional)


@dataclass
class ExtractedInfo:
    """Heuristic metadata extracted from a single page's text."""

    company_name: str = ""
    person_name: str = ""
    document_type: str = ""
    is_envelope: bool = False


@dataclass
class Classification:
    """User-editable classification of one page."""

    mode: Mode = Mode.SAME
    is_excluded: bool = False
    date: str = ""                           # "YYMMDD" or empty
    company_name: str = ""
    document_type: str = ""
    person_name: str = ""
    manual_file_name: str = ""               # Overrides the synthesized name

    def to_review_dict(self, page_number: int) -> dict:
        """Convert to a review sheet entry."""
        return {
            "page": page_number,
            "mode": self.mode.value,
            "excluded": self.is_excluded,
            "date": self.date,
            "company": self.company_name,
            "document_type": self.document_type,
            "person": self.person_name,
            "file_name": self.manual_file_name,
        }

    @classmethod
    def from_review_dict(cls, row: dict) -> "Classification":
        """Create from a review sheet entry."""
        return cls(
            mode=Mode.parse(row.get("mode") or Mode.SAME.value),
            is_excluded=_flag(row.get("excluded")),
            date=format_date_to_yymmdd(_text(row.get("date"))),
            company_name=_text(row.get("company")),
            document_type=_text(row.get("document_type")),
            person_name=_text(row.get("person")),
            manual_file_name=_text(row.get("file_name")),
        )


@dataclass(frozen=True)
class ClassifiedPage:
    """A page together with its (reviewed) classification."""

    page: Page
    classification: Classification

    @property
    def page_number(self) -> int:
        return self.page.page_number


@dataclass(frozen=True)
class EnvelopeInfo:
    date: str
    company_name: str


@dataclass(frozen=True)
class Group:
    """One logical output document emitted by the grouping engine."""

    envelope_info: EnvelopeInfo
    document_type: str
    person_name: str
    pages: tuple                             # ClassifiedPages in source order
    is_excluded_data: bool = False
    manual_file_name: str = ""

    @property
    def page_numbers(self) -> List[int]:
        return [p.page_number for p in self.pages]


@dataclass
class OutputDocument:
    """Final artifact descriptor for one written PDF."""

    id: int
    file_name: str
    page_numbers: List[int]
    is_excluded: bool = False
    data: bytes = field(default=b"", repr=False, compare=False)

    @property
    def page_count(self) -> int:
        return len(self.page_numbers)


@dataclass
class AssemblyFailure:
    """An output whose pages could not be extracted."""

    output_id: int
    file_name: str
    page_numbers: List[int]
    error: str


@dataclass
class Manifest:
    """Result of assembling all outputs of a run."""

    outputs: List[OutputDocument] = field(default_factory=list)
    failures: List[AssemblyFailure] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failures


def _text(value: Any) -> str:
    return "" if value is None else str(value).strip()


def _flag(value: Any) -> bool:
    """Read a JSON boolean; null or missing means false."""
    if value is None:
        return False
    if not isinstance(value, bool):
        raise ValueError(f"Expected true or false, got {value!r}")
    return value


def today_yymmdd(today: Optional[date] = None) -> str:
    """Return today's date as YYMMDD."""
    return (today or date.today()).strftime("%y%m%d")


def format_date_to_yymmdd(value: str) -> str:
    """Convert "YYYY-MM-DD" to "YYMMDD".

    Empty input stays empty; anything that is not an ISO date is returned unchanged.
    """
    if not value:
        return ""
    if re.fullmatch(r'\d{4}-\d{2}-\d{2}', value):
        try:
            return datetime.strptime(value, "%Y-%m-%d").strftime("%y%m%d")
        except ValueError:
            return value
    return value


def parse_yymmdd_to_date(value: str) -> str:
    """Convert "YYMMDD" to "20YY-MM-DD" (empty string if not six characters)."""
    if not value or len(value) != 6:
        return ""
    return f"20{value[0:2]}-{value[2:4]}-{value[4:6]}"
