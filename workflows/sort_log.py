"""Sort log recording every output written to the outbox."""

from datetime import datetime
from typing import List, Optional

from mailsort import MailSort


def _get_log_path() -> str:
    """Return monthly log path: --SortLog/log/YYYY-MM-sort.log"""
    month = datetime.now().strftime("%Y-%m")
    return f"--SortLog/log/{month}-sort.log"


def _format(status: str, source: str, dest: Optional[str],
            page_numbers: List[int], error: Optional[str] = None) -> str:
    """Format a log entry."""
    ts = datetime.now().strftime("%Y-%m-%d %H:%M:%S")
    lines = [f"[{ts}] {status}", f"  Source: {source}"]
    lines.append(f"  Dest:   {dest or '(not written)'}")
    lines.append(f"  Pages:  {', '.join(str(n) for n in page_numbers) or '-'}")
    if error:
        lines.append(f"  Error: {error}")
    return "\n".join(lines) + "\n\n"


def log(status: str, source: str, dest: Optional[str], page_numbers: List[int],
        error: Optional[str] = None) -> None:
    """Log an output event. Fails silently with warning on error."""
    if not MailSort.log or not MailSort.outbox_driver:
        return
    try:
        MailSort.outbox_driver.append_text(
            _get_log_path(), _format(status, source, dest, page_numbers, error)
        )
    except Exception as e:
        MailSort.print_right(f"⚠ Failed to write sort log: {e}")
