"""Workflow layer for mailsort.

Contains business logic for splitting scanned mail bundles:
- Extraction: Heuristic metadata from page text
- Suggestion: Default classifications before review
- Inheritance and grouping: Document boundaries and resolved metadata
- Naming and assembly: Output file names and PDFs
- Sorting: End-to-end suggest/sort workflows
"""

from .page_metadata import (
    Mode,
    Page,
    TextItem,
    ExtractedInfo,
    Classification,
    ClassifiedPage,
    EnvelopeInfo,
    Group,
    OutputDocument,
    AssemblyFailure,
    Manifest,
    format_date_to_yymmdd,
    parse_yymmdd_to_date,
    today_yymmdd,
)
from .field_extractor import (
    extract_company_name,
    extract_person_name,
    extract_document_type,
    is_envelope_or_cover_letter,
    extract_info,
)
from .suggester import (
    Suggestion,
    suggest_classification,
    suggest_all,
    initial_classifications,
)
from .inheritance import resolve_field, resolve_page, resolve_all, is_editable
from .grouping import group_pages
from .naming import (
    EXCLUDED_FILE_NAME,
    sanitize_file_name,
    name_for_group,
    assign_file_names,
)
from .page_source import PageSource, PdfPageSource, ExtractionError
from .assembler import plan_outputs, assemble_outputs
from .company_list import (
    ConfigurationError,
    SpreadsheetData,
    load_spreadsheet,
    extract_company_list,
    load_company_list,
)
from .review_file import save_review, load_review
from .sorting import (
    load_configured_company_list,
    suggest_bundle,
    sort_pages,
    write_outputs,
    process_bundle,
    process_inbox,
)


__all__ = [
    # Data model
    'Mode',
    'Page',
    'TextItem',
    'ExtractedInfo',
    'Classification',
    'ClassifiedPage',
    'EnvelopeInfo',
    'Group',
    'OutputDocument',
    'AssemblyFailure',
    'Manifest',
    'format_date_to_yymmdd',
    'parse_yymmdd_to_date',
    'today_yymmdd',

    # Field extraction
    'extract_company_name',
    'extract_person_name',
    'extract_document_type',
    'is_envelope_or_cover_letter',
    'extract_info',

    # Suggestions
    'Suggestion',
    'suggest_classification',
    'suggest_all',
    'initial_classifications',

    # Inheritance and grouping
    'resolve_field',
    'resolve_page',
    'resolve_all',
    'is_editable',
    'group_pages',

    # Naming and assembly
    'EXCLUDED_FILE_NAME',
    'sanitize_file_name',
    'name_for_group',
    'assign_file_names',
    'PageSource',
    'PdfPageSource',
    'ExtractionError',
    'plan_outputs',
    'assemble_outputs',

    # Inputs
    'ConfigurationError',
    'SpreadsheetData',
    'load_spreadsheet',
    'extract_company_list',
    'load_company_list',
    'save_review',
    'load_review',

    # Sorting workflow
    'load_configured_company_list',
    'suggest_bundle',
    'sort_pages',
    'write_outputs',
    'process_bundle',
    'process_inbox',
]
