"""Field inheritance across a run of classified pages.

A page only owns a field when its mode makes that field editable. Otherwise
the value comes from the nearest earlier page whose mode starts that field:

    field           local when mode in       else inherit from mode in
    date            envelope, document       envelope, document
    company_name    envelope                 envelope
    document_type   envelope, document       envelope, document
    person_name     envelope, document       envelope, document

The sender (company) only changes at envelope pages; everything else also
changes at document pages.
"""

from typing import Dict, FrozenSet, List, Sequence, Tuple

from .page_metadata import ClassifiedPage, Mode

_ENVELOPE: FrozenSet[Mode] = frozenset({Mode.ENVELOPE})
_ENVELOPE_OR_DOCUMENT: FrozenSet[Mode] = frozenset({Mode.ENVELOPE, Mode.DOCUMENT})

# field -> (modes where the page owns the field, modes an inherited value comes from)
INHERITANCE_TABLE: Dict[str, Tuple[FrozenSet[Mode], FrozenSet[Mode]]] = {
    "date": (_ENVELOPE_OR_DOCUMENT, _ENVELOPE_OR_DOCUMENT),
    "company_name": (_ENVELOPE, _ENVELOPE),
    "document_type": (_ENVELOPE_OR_DOCUMENT, _ENVELOPE_OR_DOCUMENT),
    "person_name": (_ENVELOPE_OR_DOCUMENT, _ENVELOPE_OR_DOCUMENT),
}

FIELDS = tuple(INHERITANCE_TABLE)


def is_editable(field: str, mode: Mode) -> bool:
    """Check whether a page in the given mode owns (and may edit) a field."""
    local_modes, _ = INHERITANCE_TABLE[field]
    return mode in local_modes


def resolve_field(field: str, pages: Sequence[ClassifiedPage], index: int) -> str:
    """Compute the effective value of a field for the page at index.

    Args:
        field: One of FIELDS
        pages: Classified pages of the run in source order
        index: Position of the page in pages

    Returns:
        The page's own value if it owns the field, else the value of the nearest
        earlier page whose mode starts the field, else an empty string.

    Raises:
        KeyError: If field is not in the inheritance table
    """
    local_modes, source_modes = INHERITANCE_TABLE[field]
    classification = pages[index].classification

    if classification.mode in local_modes:
        return getattr(classification, field)

    for i in range(index - 1, -1, -1):
        earlier = pages[i].classification
        if earlier.mode in source_modes:
            return getattr(earlier, field)

    return ""


def resolve_page(pages: Sequence[ClassifiedPage], index: int) -> Dict[str, str]:
    """Resolve every field for one page."""
    return {field: resolve_field(field, pages, index) for field in FIELDS}


def resolve_all(pages: Sequence[ClassifiedPage]) -> List[Dict[str, str]]:
    """Resolve every field for every page in a single forward pass.

    Gives the same result as calling resolve_page for each index, without the
    backward scans.
    """
    # Last page index seen for each source-mode set
    last_index: Dict[FrozenSet[Mode], int] = {}
    resolved: List[Dict[str, str]] = []

    for index, page in enumerate(pages):
        mode = page.classification.mode
        values: Dict[str, str] = {}

        for field, (local_modes, source_modes) in INHERITANCE_TABLE.items():
            if mode in local_modes:
                values[field] = getattr(page.classification, field)
            elif source_modes in last_index:
                source = pages[last_index[source_modes]].classification
                values[field] = getattr(source, field)
            else:
                values[field] = ""

        resolved.append(values)

        for _, source_modes in INHERITANCE_TABLE.values():
            if mode in source_modes:
                last_index[source_modes] = index

    return resolved
