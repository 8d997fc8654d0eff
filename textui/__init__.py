"""TextUI - Textual progress view for MailSort runs."""

import threading
from typing import Callable, Optional

from textual.app import App, ComposeResult
from textual.containers import Horizontal, Vertical
from textual.widgets import Header, Footer, Static, RichLog, ProgressBar, Label
from textual.binding import Binding

from mailsort import MailSort, __version__


class MailSortApp(App):
    """Written outputs on the left, run log on the right, page progress below."""

    CSS = """
    #run-info {
        height: 2;
        padding: 0 1;
        border-bottom: solid $primary;
    }

    #output-panel {
        border-right: solid $primary;
    }

    .panel-title {
        background: $primary;
        text-align: center;
        text-style: bold;
    }

    #progress-row {
        height: 1;
        padding: 0 1;
    }

    #progress-label {
        min-width: 15;
        margin-left: 1;
    }
    """

    BINDINGS = [
        Binding("q", "quit", "Quit"),
    ]

    def __init__(self, source: str = "", destination: str = "",
                 process_func: Optional[Callable[[], None]] = None) -> None:
        super().__init__()
        self.source = source
        self.destination = destination
        self._process_func = process_func

    def compose(self) -> ComposeResult:
        yield Header(show_clock=True)
        yield Static(f"Source: {self.source}\nOutbox: {self.destination}", id="run-info")

        with Horizontal():
            with Vertical(id="output-panel"):
                yield Static("SORTED OUTPUTS", classes="panel-title")
                yield RichLog(id="output-log", markup=True)
            with Vertical():
                yield Static("LOG", classes="panel-title")
                yield RichLog(id="run-log", markup=True)

        with Horizontal(id="progress-row"):
            yield ProgressBar(id="progress-bar", show_eta=False)
            yield Label("0/0 pages", id="progress-label")

        yield Footer()

    def on_mount(self) -> None:
        self.title = f"MailSort v{__version__}"
        MailSort.set_app(self)

        if self._process_func:
            threading.Thread(target=self._run_process, daemon=True).start()

    def on_unmount(self) -> None:
        MailSort.set_app(None)

    def _run_process(self) -> None:
        """Run the sorting workflow, then tell the user it is done."""
        self._process_func()
        self.call_from_thread(self.notify, "Sorting finished. Press q to quit.")

    def add_output(self, line1: str, line2: str) -> None:
        """Add a written output to the left log."""
        self.query_one("#output-log", RichLog).write(f"{line1}\n{line2}")

    def add_log(self, message: str) -> None:
        """Add a message to the right log."""
        self.query_one("#run-log", RichLog).write(message)

    def set_progress(self, current: int, total: int) -> None:
        self.query_one("#progress-bar", ProgressBar).update(total=total, progress=current)
        self.query_one("#progress-label", Label).update(f"{current}/{total} pages")
