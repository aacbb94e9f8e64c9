"""Data preview modal."""

from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Container, Horizontal
from textual.screen import ModalScreen
from textual.widgets import Button, DataTable, Label, Static

from tablebridge.models.workflow import PreviewResult


class PreviewModal(ModalScreen):
    """Shows the sampled rows of a preview."""

    BINDINGS = [Binding("escape", "dismiss", "Close")]

    DEFAULT_CSS = """
    PreviewModal {
        align: center middle;
    }

    PreviewModal .modal-container {
        width: 90%;
        height: 80%;
        background: $surface;
        border: solid $primary;
        padding: 1 2;
    }

    PreviewModal .modal-title {
        text-style: bold;
        margin-bottom: 1;
    }

    PreviewModal DataTable {
        height: 1fr;
    }

    PreviewModal .modal-buttons {
        height: auto;
        margin-top: 1;
        align: right middle;
    }
    """

    def __init__(self, preview: PreviewResult) -> None:
        super().__init__()
        self.preview = preview

    def compose(self) -> ComposeResult:
        """Create the modal layout."""
        with Container(classes="modal-container"):
            yield Label(
                f"Data Preview (First {self.preview.row_count} Rows)", classes="modal-title"
            )
            if self.preview.rows:
                yield DataTable(id="preview-table", zebra_stripes=True)
            else:
                yield Static("No data to preview or data is empty.", classes="empty-state")
            with Horizontal(classes="modal-buttons"):
                yield Button("Close", variant="default", id="close")

    def on_mount(self) -> None:
        """Fill the table."""
        if not self.preview.rows:
            return
        table = self.query_one("#preview-table", DataTable)
        table.add_columns(*self.preview.columns)
        width = len(self.preview.columns)
        for row in self.preview.rows:
            cells = ["" if cell is None else str(cell) for cell in row][:width]
            table.add_row(*cells, *[""] * (width - len(cells)))

    def on_button_pressed(self, event: Button.Pressed) -> None:
        """Handle button presses."""
        if event.button.id == "close":
            self.dismiss()
