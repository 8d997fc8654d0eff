"""Split a classified page sequence into output groups.

Envelope and document pages close the open group and start a new one; same
pages are appended to the open group. Every closed group is split into its
effective pages and its excluded pages, which are emitted as separate groups
sharing the same metadata (effective first).
"""

from typing import List, Optional, Sequence

from .inheritance import resolve_field
from .page_metadata import ClassifiedPage, EnvelopeInfo, Group, Mode

# Shown in output names in place of missing metadata
DATE_PLACEHOLDER = "[日付]"
COMPANY_PLACEHOLDER = "[会社名]"
DOCUMENT_TYPE_PLACEHOLDER = "[書類名]"

PLACEHOLDER_ENVELOPE = EnvelopeInfo(date=DATE_PLACEHOLDER, company_name=COMPANY_PLACEHOLDER)


class _OpenGroup:
    """A group that is still collecting pages."""

    def __init__(self, envelope_info: EnvelopeInfo, first_page: ClassifiedPage) -> None:
        classification = first_page.classification
        self.envelope_info = envelope_info
        self.document_type = classification.document_type or DOCUMENT_TYPE_PLACEHOLDER
        self.person_name = classification.person_name or ""
        self.manual_file_name = classification.manual_file_name or ""
        self.pages: List[ClassifiedPage] = [first_page]

    def close(self) -> List[Group]:
        """Emit the effective group and the excluded group (each only if non-empty)."""
        groups = []
        effective = tuple(p for p in self.pages if not p.classification.is_excluded)
        excluded = tuple(p for p in self.pages if p.classification.is_excluded)

        for pages, is_excluded in ((effective, False), (excluded, True)):
            if pages:
                groups.append(Group(
                    envelope_info=self.envelope_info,
                    document_type=self.document_type,
                    person_name=self.person_name,
                    pages=pages,
                    is_excluded_data=is_excluded,
                    manual_file_name=self.manual_file_name,
                ))
        return groups


def group_pages(pages: Sequence[ClassifiedPage]) -> List[Group]:
    """Partition classified pages into output groups.

    Args:
        pages: Reviewed pages in source order

    Returns:
        Groups in emission order. Every input page is in exactly one group.
    """
    groups: List[Group] = []
    current_envelope: Optional[EnvelopeInfo] = None
    current_group: Optional[_OpenGroup] = None

    for index, page in enumerate(pages):
        mode = page.classification.mode

        if mode is Mode.ENVELOPE:
            if current_group:
                groups.extend(current_group.close())
            current_envelope = EnvelopeInfo(
                date=resolve_field("date", pages, index) or DATE_PLACEHOLDER,
                company_name=resolve_field("company_name", pages, index) or COMPANY_PLACEHOLDER,
            )
            current_group = _OpenGroup(current_envelope, page)

        elif mode is Mode.DOCUMENT:
            if current_group:
                groups.extend(current_group.close())
            current_group = _OpenGroup(current_envelope or PLACEHOLDER_ENVELOPE, page)

        elif current_group is None:
            # A leading same page cannot inherit; it opens a group like a document page
            current_group = _OpenGroup(current_envelope or PLACEHOLDER_ENVELOPE, page)

        else:
            current_group.pages.append(page)

    if current_group:
        groups.extend(current_group.close())

    return groups
