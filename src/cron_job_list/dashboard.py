"""TUI Dashboard for cron-job-list."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from rich.markup import escape
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import VerticalScroll
from textual.message import Message
from textual.reactive import reactive
from textual.widgets import Footer, Header, RichLog, Static
from textual.worker import Worker, WorkerState

from .config import Destination, RunConfig
from .executor import DestinationResult, DestinationStatus, Executor, SessionFactory
from .session import RemoteSession


STATUS_ICONS = {
    DestinationStatus.PENDING: "○",
    DestinationStatus.CONNECTING: "◌",
    DestinationStatus.RUNNING: "●",
    DestinationStatus.SUCCESS: "✔",
    DestinationStatus.FAILED: "✘",
}


class DestinationPanel(Static):
    """Bordered box holding one destination's crontab.

    The border title carries the status icon and ``user@host:port``; the
    border colour follows the status through the ``-<status>`` CSS class.
    """

    status: reactive[DestinationStatus] = reactive(DestinationStatus.PENDING)

    def __init__(self, index: int, destination: Destination, port: int, **kwargs) -> None:
        super().__init__(**kwargs)
        self.index = index
        self.destination = destination
        self.port = port

    def compose(self) -> ComposeResult:
        yield RichLog(id=f"log-{self.index}", markup=True, wrap=True)

    def on_mount(self) -> None:
        self._refresh_title()

    def watch_status(self, old: DestinationStatus, new: DestinationStatus) -> None:
        self.remove_class(f"-{old.value}")
        self.add_class(f"-{new.value}")
        if self.is_mounted:
            self._refresh_title()

    def _refresh_title(self) -> None:
        self.border_title = f"{STATUS_ICONS[self.status]} " + escape(
            f"{self.destination.label}:{self.port}"
        )

    def show_result(self, result: DestinationResult) -> None:
        """Write the crontab lines, or the failure, into the log."""
        log = self.query_one(RichLog)
        if not result.ok:
            log.write(f"[bold red]{escape(result.error)}[/bold red]")
            return

        text = (result.output or b"").decode("utf-8", errors="replace")
        for line in text.splitlines() or ["(empty crontab)"]:
            # Comment lines are dimmed
            if line.lstrip().startswith("#"):
                log.write(f"[dim]{escape(line)}[/dim]")
            else:
                log.write(escape(line))


class StatusBar(Static):
    """One-line summary of the run."""

    completed: reactive[int] = reactive(0)
    failed: reactive[int] = reactive(0)
    total: reactive[int] = reactive(0)
    running: reactive[bool] = reactive(True)

    def render(self) -> str:
        state = "listing crontabs" if self.running else "done"
        return f"{self.completed}/{self.total} hosts · {self.failed} failed · {state}"


@dataclass
class DestinationStatusChange(Message):
    index: int
    status: DestinationStatus


@dataclass
class DestinationDone(Message):
    """Posted once per destination with its result."""
    result: DestinationResult


class Dashboard(App):
    """Live view of every destination's crontab."""

    CSS = """
    #destinations {
        height: 1fr;
    }

    DestinationPanel {
        height: auto;
        max-height: 16;
        border: round $primary-darken-2;
        border-title-style: bold;
    }

    DestinationPanel.-connecting, DestinationPanel.-running {
        border: round $warning;
    }

    DestinationPanel.-success {
        border: round $success;
    }

    DestinationPanel.-failed {
        border: round $error;
    }

    DestinationPanel RichLog {
        height: auto;
        max-height: 14;
        padding: 0 1;
    }

    StatusBar {
        dock: bottom;
        height: 1;
        padding: 0 1;
        background: $boost;
    }
    """

    BINDINGS = [
        Binding("q", "quit", "Quit"),
        Binding("f", "toggle_failed", "Failed only"),
    ]

    failed_only: reactive[bool] = reactive(False)

    def __init__(
        self,
        config: RunConfig,
        destinations: Sequence[Destination],
        session_factory: SessionFactory = RemoteSession.open,
        **kwargs,
    ) -> None:
        super().__init__(**kwargs)
        self.config = config
        self.destinations = list(destinations)
        self.session_factory = session_factory
        self.panels: dict[int, DestinationPanel] = {}
        self.executor: Executor | None = None
        self._worker: Worker | None = None

    def compose(self) -> ComposeResult:
        yield Header()
        with VerticalScroll(id="destinations"):
            for i, dest in enumerate(self.destinations):
                panel = DestinationPanel(i, dest, self.config.port, id=f"panel-{i}")
                self.panels[i] = panel
                yield panel
        yield StatusBar(id="status-bar")
        yield Footer()

    def on_mount(self) -> None:
        self.title = f"crontab -l on {len(self.destinations)} host(s)"
        self.query_one(StatusBar).total = len(self.destinations)

        self.executor = Executor(
            self.config,
            self.destinations,
            on_status=self._on_status,
            on_result=self._on_result,
            session_factory=self.session_factory,
        )
        # Executor runs in its own thread and event loop
        self._worker = self.run_worker(self.executor.run_all(), exclusive=True, thread=True)

    def on_worker_state_changed(self, event: Worker.StateChanged) -> None:
        if event.worker is self._worker and event.state == WorkerState.SUCCESS:
            self.query_one(StatusBar).running = False

    def _on_status(self, index: int, status: DestinationStatus) -> None:
        self.post_message(DestinationStatusChange(index, status))

    def _on_result(self, result: DestinationResult) -> None:
        self.post_message(DestinationDone(result))

    def on_destination_status_change(self, message: DestinationStatusChange) -> None:
        panel = self.panels.get(message.index)
        if panel is not None:
            panel.status = message.status
            self._apply_filter(panel)

    def on_destination_done(self, message: DestinationDone) -> None:
        result = message.result
        panel = self.panels.get(result.index)
        if panel is not None:
            panel.show_result(result)

        status_bar = self.query_one(StatusBar)
        status_bar.completed += 1
        if not result.ok:
            status_bar.failed += 1

    def action_toggle_failed(self) -> None:
        """Show only failed destinations, or everything again."""
        self.failed_only = not self.failed_only

    def watch_failed_only(self) -> None:
        for panel in self.panels.values():
            self._apply_filter(panel)

    def _apply_filter(self, panel: DestinationPanel) -> None:
        panel.display = not self.failed_only or panel.status == DestinationStatus.FAILED
