"""Sorting workflow: split scanned bundles into named output documents."""

import os
from datetime import datetime
from typing import List, Optional, Sequence

from mailsort import MailSort
from storage import StorageDriver, StorageError
from . import sort_log
from .assembler import assemble_outputs
from .company_list import load_company_list
from .grouping import group_pages
from .page_metadata import Classification, ClassifiedPage, Manifest, Mode, Page, today_yymmdd
from .page_source import ExtractionError, PdfPageSource
from .review_file import load_review, save_review
from .suggester import initial_classifications, suggest_all


def load_configured_company_list() -> List[str]:
    """Load the company reference list named in the configuration.

    Returns an empty list when no spreadsheet is configured.

    Raises:
        ConfigurationError: If the spreadsheet or column is missing
    """
    if not MailSort.company_list_path:
        return []
    companies = load_company_list(MailSort.company_list_path, MailSort.company_column)
    MailSort.print_right(f"Loaded {len(companies)} company names from {MailSort.company_list_path}")
    return companies


def read_pages(source: PdfPageSource) -> List[Page]:
    """Extract the text of every page, reporting progress."""
    total = source.page_count
    MailSort.set_total(total)
    pages = []
    for page in source.pages():
        pages.append(page)
        MailSort.set_progress(page.page_number, total)
    return pages


def classify(pages: Sequence[Page], classifications: Sequence[Classification]) -> List[ClassifiedPage]:
    """Pair pages with their reviewed classifications.

    Raises:
        ValueError: If the counts differ
    """
    if len(pages) != len(classifications):
        raise ValueError(
            f"Review sheet has {len(classifications)} pages but the bundle has {len(pages)}"
        )
    return [ClassifiedPage(page=p, classification=c) for p, c in zip(pages, classifications)]


def suggest_bundle(pdf_path: str, review_path: str, company_list: Sequence[str]) -> List[Classification]:
    """Write a review sheet with suggested classifications for a bundle.

    Returns:
        The suggested classifications
    """
    source = PdfPageSource.from_file(pdf_path)
    pages = read_pages(source)
    classifications = initial_classifications(
        pages, company_list,
        date=MailSort.run_date or today_yymmdd(),
        detect_envelopes=MailSort.detect_envelopes,
    )
    suggestions = suggest_all(pages, company_list)
    save_review(review_path, os.path.basename(pdf_path), pages, classifications, suggestions)

    envelopes = sum(1 for c in classifications if c.mode is Mode.ENVELOPE)
    categories = len(set(s.major_category for s in suggestions))
    MailSort.print_right(
        f"✓ Wrote review sheet {review_path} "
        f"({len(pages)} pages, {envelopes} envelope(s), {categories} category(ies))"
    )
    return classifications


def sort_pages(source: PdfPageSource, pages: Sequence[Page],
               classifications: Sequence[Classification]) -> Manifest:
    """Group reviewed pages and build the output documents."""
    groups = group_pages(classify(pages, classifications))
    MailSort.print_right(f"Found {len(groups)} group(s) in {len(pages)} pages")
    return assemble_outputs(groups, source, max_workers=MailSort.workers)


def write_outputs(manifest: Manifest, driver: StorageDriver, folder: str,
                  source_name: str) -> int:
    """Write the manifest's outputs to storage.

    Returns:
        Number of outputs written
    """
    written = 0
    for failure in manifest.failures:
        sort_log.log("ERROR", source_name, None, failure.page_numbers, failure.error)

    for output in manifest.outputs:
        dest = f"{folder}/{output.file_name}" if folder else output.file_name
        replaced = driver.file_exists(dest)
        try:
            driver.write_bytes(dest, output.data)
        except StorageError as e:
            MailSort.print_right(f"[red]✗ Failed to write {dest}: {e}[/red]")
            sort_log.log("ERROR", source_name, dest, output.page_numbers, str(e))
            continue

        written += 1
        _log_output(output.file_name, source_name, output.page_numbers, output.is_excluded)
        sort_log.log("Replaced" if replaced else "Written", source_name, dest, output.page_numbers)

    return written


def process_bundle(data: bytes, source_name: str, review_path: Optional[str] = None,
                   company_list: Sequence[str] = ()) -> Optional[Manifest]:
    """Sort one bundle and write its outputs to the outbox.

    Args:
        data: PDF bytes of the scanned bundle
        source_name: File name of the bundle (used for the output folder)
        review_path: Reviewed sheet to use; None accepts the suggestions as-is
        company_list: Company reference list (used only without a review sheet)

    Returns:
        The manifest, or None if the bundle could not be read
    """
    try:
        source = PdfPageSource(data, name=source_name)
        pages = read_pages(source)
    except ExtractionError as e:
        MailSort.print_right(f"[red]Error reading {source_name}: {e}[/red]")
        sort_log.log("ERROR", source_name, None, [], str(e))
        return None

    if review_path:
        classifications = load_review(review_path)
    else:
        classifications = initial_classifications(
            pages, company_list,
            date=MailSort.run_date or today_yymmdd(),
            detect_envelopes=MailSort.detect_envelopes,
        )

    manifest = sort_pages(source, pages, classifications)

    if MailSort.outbox_driver:
        folder = MailSort.outbox_driver.sanitize_filename(os.path.splitext(source_name)[0])
        count = write_outputs(manifest, MailSort.outbox_driver, folder, source_name)
        MailSort.print_right(f"✓ Wrote {count} file(s) to {folder}")

    if not manifest.ok:
        MailSort.print_right(f"[yellow]{len(manifest.failures)} output(s) failed[/yellow]")

    return manifest


def process_inbox(inbox: StorageDriver, company_list: Sequence[str] = ()) -> int:
    """Sort every PDF bundle in an inbox, accepting the suggestions.

    Returns:
        Number of bundles processed successfully
    """
    try:
        bundles = inbox.list_files(recursive=True, extension=".pdf")
    except StorageError as e:
        MailSort.print_right(f"Error listing inbox: {e}")
        return 0

    if not bundles:
        MailSort.print_right("No PDF files found in inbox")
        return 0

    MailSort.print_right(f"Found {len(bundles)} PDF bundle(s) in inbox")
    processed = 0

    for i, file_info in enumerate(bundles, 1):
        MailSort.print_right(f"\n--- [{i}/{len(bundles)}] {file_info.path} ---")
        try:
            data = inbox.read_bytes(file_info.path)
        except StorageError as e:
            MailSort.print_right(f"[red]Error reading {file_info.path}: {e}[/red]")
            continue
        if process_bundle(data, file_info.name, company_list=company_list) is not None:
            processed += 1

    return processed


def _log_output(file_name: str, source_name: str, page_numbers: List[int],
                is_excluded: bool) -> None:
    """Log a written output to the left panel."""
    timestamp = datetime.now().strftime("%H:%M")
    colour = "yellow" if is_excluded else "green"
    line1 = f"{timestamp} [{colour}]{file_name}[/{colour}]"
    line2 = f"  {source_name} p.{_page_ranges(page_numbers)}"
    MailSort.print_left(line1, line2)


def _page_ranges(page_numbers: List[int]) -> str:
    """Format page numbers compactly: [1, 2, 3, 5] -> "1-3,5"."""
    ranges = []
    for n in page_numbers:
        if ranges and n == ranges[-1][1] + 1:
            ranges[-1][1] = n
        else:
            ranges.append([n, n])
    return ",".join(f"{a}-{b}" if a != b else f"{a}" for a, b in ranges)
