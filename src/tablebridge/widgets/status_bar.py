"""Busy indicator and message line."""

from textual.app import ComposeResult
from textual.widget import Widget
from textual.widgets import Label, LoadingIndicator

from tablebridge.models.workflow import OperationStatus, Severity


class StatusBar(Widget):
    """Shows the running operation's label, or the latest message."""

    DEFAULT_CSS = """
    StatusBar {
        height: 3;
        padding: 0 1;
        border: solid $primary;
        layout: horizontal;
    }

    StatusBar LoadingIndicator {
        width: 6;
        height: 1;
        display: none;
    }

    StatusBar.busy LoadingIndicator {
        display: block;
    }

    StatusBar #status-text {
        width: 1fr;
    }

    StatusBar.severity-success #status-text {
        color: $success;
    }

    StatusBar.severity-warning #status-text {
        color: $warning;
    }

    StatusBar.severity-error #status-text {
        color: $error;
    }
    """

    _SEVERITY_CLASSES = [f"severity-{severity.value}" for severity in Severity]

    def compose(self) -> ComposeResult:
        """Create the status layout."""
        yield LoadingIndicator()
        yield Label("", id="status-text")

    def show(self, status: OperationStatus) -> None:
        """Render the given status."""
        text = self.query_one("#status-text", Label)
        self.remove_class(*self._SEVERITY_CLASSES)
        self.set_class(status.busy, "busy")

        if status.busy:
            text.update(f"{status.label or 'Loading'}...")
        elif status.message is not None:
            self.add_class(f"severity-{status.message.severity.value}")
            text.update(status.message.text)
        else:
            text.update("")
