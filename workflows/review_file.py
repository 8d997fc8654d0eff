"""Review sheet: per-page classifications stored as JSON between passes.

The suggest pass writes one entry per page; the user edits modes, the
excluded flag and the metadata; the sort pass reads it back. The suggested
filing categories ("category", "minor_category") are hints for the reviewer
and are ignored when the sheet is read.

    {
      "version": 1,
      "source": "scan.pdf",
      "pages": [
        {"page": 1, "mode": "envelope", "excluded": false, "date": "240101",
         "company": "Acme", "document_type": "Invoice", "person": "",
         "file_name": "", "category": "Acme", "minor_category": "Invoice"},
        ...
      ]
    }
"""

import json
from typing import List, Optional, Sequence, Tuple

from .page_metadata import Classification, Page
from .suggester import Suggestion

REVIEW_VERSION = 1


def review_to_dict(source_name: str, pages: Sequence[Page],
                   classifications: Sequence[Classification],
                   suggestions: Optional[Sequence[Suggestion]] = None) -> dict:
    if len(pages) != len(classifications):
        raise ValueError(
            f"Got {len(classifications)} classifications for {len(pages)} pages"
        )
    if suggestions is not None and len(suggestions) != len(pages):
        raise ValueError(
            f"Got {len(suggestions)} suggestions for {len(pages)} pages"
        )

    entries = [c.to_review_dict(p.page_number) for p, c in zip(pages, classifications)]
    for entry, suggestion in zip(entries, suggestions or ()):
        entry["category"] = suggestion.major_category
        entry["minor_category"] = suggestion.minor_category

    return {
        "version": REVIEW_VERSION,
        "source": source_name,
        "pages": entries,
    }


def review_from_dict(data: dict) -> Tuple[str, List[Classification]]:
    """Parse a review sheet.

    Returns:
        Tuple of (source_name, classifications in page order)

    Raises:
        ValueError: If the sheet is malformed, has an unknown mode, or its
            page numbers are not 1..n
    """
    if not isinstance(data, dict) or not isinstance(data.get("pages"), list):
        raise ValueError("Review sheet must be an object with a 'pages' list")

    entries = data["pages"]
    try:
        entries = sorted(entries, key=lambda e: int(e["page"]))
    except (KeyError, TypeError, ValueError):
        raise ValueError("Every review entry needs a numeric 'page'")

    numbers = [int(e["page"]) for e in entries]
    if numbers != list(range(1, len(entries) + 1)):
        raise ValueError(f"Review pages must be numbered 1..{len(entries)}, got {numbers}")

    classifications = [Classification.from_review_dict(e) for e in entries]
    return (str(data.get("source") or ""), classifications)


def save_review(path: str, source_name: str, pages: Sequence[Page],
                classifications: Sequence[Classification],
                suggestions: Optional[Sequence[Suggestion]] = None) -> None:
    """Write a review sheet to a local file."""
    with open(path, 'w', encoding='utf-8') as f:
        json.dump(review_to_dict(source_name, pages, classifications, suggestions),
                  f, ensure_ascii=False, indent=2)
        f.write("\n")


def load_review(path: str) -> List[Classification]:
    """Read the classifications from a review sheet file."""
    with open(path, 'r', encoding='utf-8') as f:
        try:
            data = json.load(f)
        except json.JSONDecodeError as e:
            raise ValueError(f"Review sheet {path} is not valid JSON: {e}")
    _, classifications = review_from_dict(data)
    return classifications
