#!/usr/bin/env python3
"""MailSort - Split scanned mail bundles into named documents."""

import argparse
import os
import re

from mailsort import MailSort, __version__
from workflows import (
    ConfigurationError,
    ExtractionError,
    format_date_to_yymmdd,
    load_configured_company_list,
    suggest_bundle,
    process_bundle,
    process_inbox,
)
from storage import create_storage, StorageError


def open_outbox() -> tuple:
    """Open the outbox named by the OUTBOX environment variable.

    Returns:
        Tuple of (StorageDriver instance, display_name)

    Raises:
        ConfigurationError: If OUTBOX is not set
    """
    outbox_uri = os.environ.get('OUTBOX')
    if not outbox_uri:
        raise ConfigurationError(
            "OUTBOX environment variable not set (example: OUTBOX=local:outbox)"
        )
    driver = create_storage(outbox_uri, create=True)
    return (driver, driver.display_name)


def run_suggest(pdf_path: str, review_path: str) -> None:
    """Write a review sheet for one bundle."""
    company_list = load_configured_company_list()
    suggest_bundle(pdf_path, review_path, company_list)
    MailSort.print_right(f"Edit {review_path}, then run with --review {review_path}")


def run_sort(pdf_path: str, review_path: str = None) -> None:
    """Sort one bundle into the outbox.

    Args:
        pdf_path: Path to the scanned bundle
        review_path: Reviewed sheet, or None to accept the suggestions
    """
    company_list = [] if review_path else load_configured_company_list()
    with open(pdf_path, 'rb') as f:
        data = f.read()

    manifest = process_bundle(data, os.path.basename(pdf_path),
                              review_path=review_path, company_list=company_list)
    if manifest is not None and manifest.ok:
        MailSort.print_right("\n[green]Sorting complete![/green]")


def run_inbox(inbox_uri: str) -> None:
    """Sort every bundle in the inbox, accepting the suggestions."""
    inbox_driver = create_storage(inbox_uri)
    MailSort.print_right(f"Inbox: {inbox_driver.display_name}")
    MailSort.print_right(f"Outbox: {MailSort.outbox_driver.display_name}")
    if MailSort.log:
        MailSort.print_right("Log mode: enabled (logging to --SortLog)")

    company_list = load_configured_company_list()
    processed = process_inbox(inbox_driver, company_list)
    MailSort.print_right(f"\n[green]Processing complete![/green] {processed} bundle(s) sorted")


def run_command(args: argparse.Namespace) -> None:
    """Dispatch to the requested workflow, reporting errors instead of raising."""
    try:
        if args.suggest:
            run_suggest(args.file, args.suggest)
        elif args.file:
            run_sort(args.file, args.review)
        else:
            run_inbox(args.inbox or os.environ.get('INBOX'))
    except (ConfigurationError, StorageError, ExtractionError, ValueError, OSError) as e:
        MailSort.print_right(f"[red]Error: {e}[/red]")


def validate_args(parser: argparse.ArgumentParser, args: argparse.Namespace) -> None:
    """Check flag combinations and normalize the run date."""
    if (args.suggest or args.review or args.auto) and not args.file:
        parser.error("--suggest, --review and --auto need --file")
    if args.suggest and (args.review or args.auto):
        parser.error("--suggest cannot be combined with --review or --auto")
    if args.review and args.auto:
        parser.error("--review and --auto are mutually exclusive")
    if args.file and not (args.suggest or args.review or args.auto):
        parser.error("--file needs one of --suggest, --review or --auto")
    if not args.file and not (args.inbox or os.environ.get('INBOX')):
        parser.error("INBOX not specified (use --inbox or set INBOX, e.g. --inbox=local:inbox)")
    if args.workers is not None and args.workers < 1:
        parser.error("--workers must be at least 1")

    if args.date:
        args.date = format_date_to_yymmdd(args.date)
        if not re.fullmatch(r'\d{6}', args.date):
            parser.error("--date must be YYMMDD or YYYY-MM-DD")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Split scanned mail bundles into named documents")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("--file", type=str,
                       help="Scanned bundle (PDF) to process")
    parser.add_argument("--suggest", type=str, metavar="REVIEW",
                       help="Write suggested classifications for --file to a review sheet")
    parser.add_argument("--review", type=str, metavar="REVIEW",
                       help="Sort --file using a reviewed sheet")
    parser.add_argument("--auto", action="store_true",
                       help="Sort --file accepting the suggestions without review")
    parser.add_argument("--inbox", type=str,
                       help="Inbox URI (e.g., local:inbox); every PDF is sorted with --auto")
    parser.add_argument("--companies", type=str,
                       help="Spreadsheet listing known company names (.xlsx only; save .xls files as .xlsx)")
    parser.add_argument("--column", type=str,
                       help="Column header holding company names (default 会社名)")
    parser.add_argument("--date", type=str,
                       help="Date for envelope pages, YYMMDD or YYYY-MM-DD (default today)")
    parser.add_argument("--detect-envelopes", action="store_true",
                       help="Mark pages that look like envelopes or cover letters as envelopes")
    parser.add_argument("--workers", type=int,
                       help="Number of parallel workers for building outputs")
    parser.add_argument("--log", action="store_true",
                       help="Log written outputs to the --SortLog folder in the outbox")
    parser.add_argument("--cli", action="store_true",
                       help="Use CLI output instead of TextUI (default is TextUI)")
    return parser


def main(args: argparse.Namespace) -> None:
    """Main entry point (CLI mode)."""
    if args.suggest:
        MailSort.configure(args)
    else:
        try:
            outbox_driver, outbox_name = open_outbox()
        except (ConfigurationError, StorageError, ValueError) as e:
            print(f"Error: {e}")
            return
        MailSort.configure(args, outbox_driver)
        print(f"Outbox: {outbox_name}")

    run_command(args)


def main_tui(args: argparse.Namespace) -> None:
    """Main entry point (TUI mode)."""
    from textui import MailSortApp

    try:
        outbox_driver, outbox_name = open_outbox()
    except (ConfigurationError, StorageError, ValueError) as e:
        print(f"Error: {e}")
        return
    MailSort.configure(args, outbox_driver)

    source = args.file or args.inbox or os.environ.get('INBOX')

    def process_func():
        run_command(args)

    app = MailSortApp(
        source=source,
        destination=outbox_name,
        process_func=process_func
    )
    app.run()


def cli() -> None:
    parser = build_parser()
    args = parser.parse_args()
    validate_args(parser, args)

    if args.cli or args.suggest:
        # --suggest always runs without the TUI
        main(args)
    else:
        main_tui(args)


if __name__ == "__main__":
    cli()
