"""First-pass classification suggestions, made before the user reviews the run."""

from dataclasses import dataclass, replace
from typing import List, Optional, Sequence

from .field_extractor import extract_info
from .page_metadata import Classification, ExtractedInfo, Mode, Page

# Category used when a page has no recognisable title or sender
DEFAULT_CATEGORY = "書類"

# Document type given to envelope/cover-letter pages without a title line
ENVELOPE_DOCUMENT_TYPE = "封筒"


def extracted_infos(pages: Sequence[Page], company_list: Sequence[str]) -> List[ExtractedInfo]:
    """Extract metadata for every page of a run."""
    return [extract_info(page.text, list(company_list)) for page in pages]


@dataclass(frozen=True)
class Suggestion:
    """Suggested category for one page.

    Attributes:
        minor_category: Document type, or DEFAULT_CATEGORY
        major_category: Sender the page is filed under (set by envelope pages)
        is_excluded: Always False; exclusion is a user decision
        document_type: Raw document type found on the page
        is_envelope: Page looks like an envelope or cover letter
    """
    minor_category: str
    major_category: str
    is_excluded: bool
    document_type: str
    is_envelope: bool


def suggest_classification(page: Page, previous: Optional[Suggestion],
                           company_list: Sequence[str]) -> Suggestion:
    """Suggest a category for a page given the rolling previous suggestion."""
    info = extract_info(page.text, list(company_list))

    if info.is_envelope or previous is None:
        major = info.company_name or DEFAULT_CATEGORY
    else:
        major = previous.major_category

    return Suggestion(
        minor_category=info.document_type or DEFAULT_CATEGORY,
        major_category=major,
        is_excluded=False,
        document_type=info.document_type,
        is_envelope=info.is_envelope,
    )


def suggest_all(pages: Sequence[Page], company_list: Sequence[str]) -> List[Suggestion]:
    """Suggest categories for a whole run in one left-to-right pass.

    The accumulator is replaced by envelope pages; any other page keeps the
    accumulator's major category and only updates its minor category.
    """
    suggestions: List[Suggestion] = []
    previous: Optional[Suggestion] = None

    for page in pages:
        suggestion = suggest_classification(page, previous, company_list)
        suggestions.append(suggestion)

        if suggestion.is_envelope or previous is None:
            previous = suggestion
        else:
            previous = replace(previous, minor_category=suggestion.minor_category)

    return suggestions


def initial_classifications(pages: Sequence[Page], company_list: Sequence[str],
                            date: str = "",
                            detect_envelopes: bool = False) -> List[Classification]:
    """Build the default classifications that seed the review sheet.

    Args:
        pages: Pages of the run in source order
        company_list: Known company names, in priority order
        date: Run date (YYMMDD) set on envelope-mode pages
        detect_envelopes: Start a new envelope at every page that looks like
            an envelope or cover letter (otherwise only page 1 does)

    Returns:
        One Classification per page
    """
    infos = extracted_infos(pages, company_list)
    classifications: List[Classification] = []

    for index, info in enumerate(infos):
        if index == 0 or (detect_envelopes and info.is_envelope):
            mode = Mode.ENVELOPE
        else:
            mode = Mode.SAME

        if info.is_envelope:
            company = info.company_name
            person = ""
            document_type = info.document_type or ENVELOPE_DOCUMENT_TYPE
        else:
            company = info.company_name or _inherit_company(classifications)
            person = info.person_name
            document_type = info.document_type

        classifications.append(Classification(
            mode=mode,
            is_excluded=False,
            date=date if mode is Mode.ENVELOPE else "",
            company_name=company,
            document_type=document_type,
            person_name=person,
        ))

    return classifications


def _inherit_company(previous: List[Classification]) -> str:
    """Take the company from the nearest earlier page that has one.

    The search stops at the nearest envelope-mode page, whether or not that
    page has a company name.
    """
    for classification in reversed(previous):
        if classification.mode is Mode.ENVELOPE:
            return classification.company_name
        if classification.company_name:
            return classification.company_name
    return ""
