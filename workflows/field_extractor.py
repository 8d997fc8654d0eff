"""Heuristic metadata extraction from page text.

All functions here are pure: they look only at the page text (and, for the
company name, the reference list loaded from the customer spreadsheet).
"""

import re
from typing import List, Optional, Sequence

from .page_metadata import ExtractedInfo

# Maximum length of a document title taken from the page text
MAX_DOCUMENT_TYPE_LENGTH = 30

# Legal-entity markers (K.K., Y.K., G.K.) that identify a company token
_COMPANY_PATTERNS = [
    re.compile(r'([^\s　]*(?:株式会社|有限会社|合同会社)[^\s　]*)'),
    re.compile(r'((?:株式会社|有限会社|合同会社)[^\s　]*)'),
]

# Surname and given name, 2-5 characters each, separated by whitespace
_NAME = r'([^\s　\n]{2,5}[\s　]+[^\s　\n]{2,5})'

# Label patterns in priority order: "name", "insured person", "name" (alternate)
_PERSON_PATTERNS = [
    re.compile(r'氏[\s　]*名[\s　]*[：:]*[\s　]*' + _NAME),
    re.compile(r'被保険者[\s　]*[：:]*[\s　]*' + _NAME),
    re.compile(r'名[\s　]*前[\s　]*[：:]*[\s　]*' + _NAME),
]

# Lines made only of digits and separators are dates, numbers or rules, not titles
_NOT_A_TITLE = re.compile(r'^[\d\-/:.\s@]+$')

_LINE_BREAK = re.compile(r'\r\n|\n|\r')

# Envelope, cover letter and formal letter opening/closing words
ENVELOPE_KEYWORDS = ('送付状', '送り状', '封筒', '拝啓', '敬具', '記')


def extract_company_name(text: str, company_list: Sequence[str] = ()) -> Optional[str]:
    """Find the company a page is from.

    The reference list wins: the first entry (in list order) that occurs in the
    text is returned. Otherwise the first whitespace-delimited token containing
    a legal-entity marker is returned.

    Args:
        text: Page text
        company_list: Known company names, in priority order

    Returns:
        Company name, or None if nothing matched
    """
    for company in company_list:
        if company and company in text:
            return company

    for pattern in _COMPANY_PATTERNS:
        match = pattern.search(text)
        if match:
            return match.group(0)

    return None


def extract_person_name(text: str) -> Optional[str]:
    """Find the person (addressee or insured) named on a page."""
    for pattern in _PERSON_PATTERNS:
        match = pattern.search(text)
        if match and match.group(1):
            return match.group(1).strip()
    return None


def extract_document_type(text: str) -> str:
    """Use the first title-like line of the page as the document type.

    A line qualifies when it has at least two characters after trimming and is
    not made up only of digits, separators and whitespace. The result is cut to
    MAX_DOCUMENT_TYPE_LENGTH characters.
    """
    if not text:
        return ""

    for line in _LINE_BREAK.split(text):
        trimmed = line.strip()
        if len(trimmed) < 2:
            continue
        if _NOT_A_TITLE.match(trimmed):
            continue
        return trimmed[:MAX_DOCUMENT_TYPE_LENGTH]

    return ""


def is_envelope_or_cover_letter(text: str) -> bool:
    """Check whether a page looks like an envelope or a cover letter."""
    return any(keyword in text for keyword in ENVELOPE_KEYWORDS)


def extract_info(text: str, company_list: List[str]) -> ExtractedInfo:
    """Run all extractors on one page's text."""
    return ExtractedInfo(
        company_name=extract_company_name(text, company_list) or "",
        person_name=extract_person_name(text) or "",
        document_type=extract_document_type(text),
        is_envelope=is_envelope_or_cover_letter(text),
    )
