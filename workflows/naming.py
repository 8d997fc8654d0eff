"""File names for output documents."""

import os
import re
from typing import Dict, Iterable, List, Sequence, Set

from .page_metadata import Group

PDF_EXTENSION = ".pdf"

# All excluded pages of a run are written to this one file
EXCLUDED_FILE_NAME = "除外データ.pdf"

# Person name value that means "no person"
NO_PERSON = "（なし）"

# Honorific appended to person names
HONORIFIC = "様"

# Characters reserved on Windows/macOS/Linux file systems, plus control characters
_RESERVED_CHARS = re.compile(r'[\\/:*?"<>|\x00-\x1f\x7f]')


def sanitize_file_name(name: str) -> str:
    """Replace path-reserved and control characters with an underscore."""
    if not name:
        return ""
    return _RESERVED_CHARS.sub("_", name)


def name_for_group(group: Group) -> str:
    """Build the file name for a group (before collision numbering).

    Excluded groups always get EXCLUDED_FILE_NAME. A manual file name set on the
    group's first page wins over the synthesized one.

    Formats:
        date_company_type.pdf
        date_company_type_person様.pdf
    """
    if group.is_excluded_data:
        return EXCLUDED_FILE_NAME

    if group.manual_file_name:
        return _with_pdf_extension(sanitize_file_name(group.manual_file_name.strip()))

    date = sanitize_file_name(group.envelope_info.date)
    company = sanitize_file_name(group.envelope_info.company_name)
    document_type = sanitize_file_name(group.document_type)
    person = group.person_name

    if not person or person == NO_PERSON:
        return f"{date}_{company}_{document_type}{PDF_EXTENSION}"

    return f"{date}_{company}_{document_type}_{sanitize_file_name(person)}{HONORIFIC}{PDF_EXTENSION}"


def assign_file_names(names: Sequence[str], reserved: Iterable[str] = ()) -> List[str]:
    """Make file names unique within a run.

    Names are taken in emission order. The first occurrence of a base name
    (name without extension) is kept; later ones get _2, _3, ... before the
    extension, skipping any suffix already taken by an earlier name. Names in
    reserved count as already used.

    Args:
        names: Proposed file names in emission order
        reserved: File names that are taken by other outputs

    Returns:
        Unique file names, same length and order as names
    """
    taken: Set[str] = {os.path.splitext(name)[0] for name in reserved}
    # Last suffix handed out per base name
    counters: Dict[str, int] = {}

    unique: List[str] = []
    for name in names:
        base, ext = os.path.splitext(name)
        candidate = base
        if candidate in taken:
            n = counters.get(base, 1)
            while candidate in taken:
                n += 1
                candidate = f"{base}_{n}"
            counters[base] = n
        taken.add(candidate)
        unique.append(f"{candidate}{ext}")

    return unique


def _with_pdf_extension(name: str) -> str:
    if name.lower().endswith(PDF_EXTENSION):
        return name
    return f"{name}{PDF_EXTENSION}"
