"""MailSort - Application state and configuration."""

import os
import re
from typing import Optional, Any, TYPE_CHECKING

if TYPE_CHECKING:
    import argparse
    from storage import StorageDriver

__version__ = "0.1.0"

DEFAULT_COMPANY_COLUMN = "会社名"


def _strip_rich_markup(text: str) -> str:
    """Remove Rich markup tags like [red], [/red], [bold], etc."""
    return re.sub(r'\[/?[a-zA-Z_]+\]', '', text)


class MailSort:
    """Central configuration and state for MailSort."""

    # CLI config options
    log: bool = False
    detect_envelopes: bool = False
    workers: int = 1
    run_date: str = ""

    # Company reference list source
    company_list_path: Optional[str] = None
    company_column: str = DEFAULT_COMPANY_COLUMN

    # Global resources
    outbox_driver: Optional["StorageDriver"] = None

    # UI app reference (None = CLI mode)
    _app: Optional[Any] = None

    # Progress tracking
    _total: int = 0
    _current: int = 0

    @classmethod
    def configure(cls, args: "argparse.Namespace",
                  outbox_driver: Optional["StorageDriver"] = None) -> None:
        """Initialize configuration from parsed CLI args and the environment."""
        cls.log = getattr(args, 'log', False)
        cls.detect_envelopes = getattr(args, 'detect_envelopes', False)
        cls.workers = max(1, getattr(args, 'workers', None) or 1)
        cls.run_date = getattr(args, 'date', None) or ""
        cls.company_list_path = (getattr(args, 'companies', None)
                                 or os.environ.get('COMPANY_LIST'))
        cls.company_column = (getattr(args, 'column', None)
                              or os.environ.get('COMPANY_COLUMN', DEFAULT_COMPANY_COLUMN))
        cls.outbox_driver = outbox_driver

    @classmethod
    def reset(cls) -> None:
        """Restore defaults (used between runs and in tests)."""
        cls.log = False
        cls.detect_envelopes = False
        cls.workers = 1
        cls.run_date = ""
        cls.company_list_path = None
        cls.company_column = DEFAULT_COMPANY_COLUMN
        cls.outbox_driver = None
        cls._total = 0
        cls._current = 0

    @classmethod
    def set_app(cls, app: Any) -> None:
        """Set the Textual app reference for UI updates."""
        cls._app = app

    @classmethod
    def print_left(cls, line1: str, line2: str) -> None:
        """Add entry to output log (left panel in TUI, stdout in CLI)."""
        if cls._app is not None:
            cls._app.call_from_thread(cls._app.add_output, line1, line2)
        else:
            print(_strip_rich_markup(line1))
            print(_strip_rich_markup(line2))

    @classmethod
    def print_right(cls, message: str) -> None:
        """Add line to the run log (right panel in TUI, stdout in CLI)."""
        if cls._app is not None:
            cls._app.call_from_thread(cls._app.add_log, message)
        else:
            print(_strip_rich_markup(message))

    @classmethod
    def set_progress(cls, current: int, total: int) -> None:
        """Update progress bar and label."""
        cls._current = current
        cls._total = total
        if cls._app is not None:
            cls._app.call_from_thread(cls._app.set_progress, current, total)

    @classmethod
    def set_total(cls, total: int) -> None:
        """Set the total item count for progress tracking."""
        cls._total = total
        cls._current = 0
        if cls._app is not None:
            cls._app.call_from_thread(cls._app.set_progress, 0, total)
