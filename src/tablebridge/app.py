"""Main Textual application entry point."""

import logging

from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.widgets import Footer, Header

from tablebridge.config import AppConfig, configure_logging, get_config
from tablebridge.screens.ingestion import IngestionPane
from tablebridge.services.api_client import IngestApiClient
from tablebridge.services.workflow import IngestionWorkflow

logger = logging.getLogger(__name__)


class TableBridgeApp(App):
    """tablebridge - move tables between ClickHouse and flat files."""

    TITLE = "tablebridge"
    SUB_TITLE = "ClickHouse <> Flat File Ingestion"
    CSS_PATH = "styles.tcss"

    BINDINGS = [
        Binding("q", "quit", "Quit", show=True),
        Binding("p", "preview", "Preview", show=True),
        Binding("s", "start", "Start", show=True),
        Binding("a", "select_all", "All Columns", show=True),
        Binding("n", "deselect_all", "No Columns", show=True),
    ]

    def __init__(
        self,
        config: AppConfig | None = None,
        client: IngestApiClient | None = None,
    ) -> None:
        super().__init__()
        self.config = config or get_config()
        self.client = client or IngestApiClient.from_config(self.config)
        self.workflow = IngestionWorkflow(
            self.client, config=self.config, on_change=self._workflow_changed
        )
        if self.config.ui.theme == "light":
            self.theme = "textual-light"

    def compose(self) -> ComposeResult:
        """Create the application layout."""
        yield Header()
        yield IngestionPane(self.workflow)
        yield Footer()

    async def on_unmount(self) -> None:
        """Release the HTTP client."""
        await self.client.aclose()

    def _workflow_changed(self) -> None:
        for pane in self.query(IngestionPane):
            pane.refresh_view()

    def _pane(self) -> IngestionPane:
        return self.query_one(IngestionPane)

    def action_preview(self) -> None:
        """Fetch and show a data preview."""
        if self.workflow.can_preview():
            self._pane().preview()

    def action_start(self) -> None:
        """Start the ingestion."""
        if self.workflow.can_start():
            self._pane().start()

    def action_select_all(self) -> None:
        self._pane().select_all()

    def action_deselect_all(self) -> None:
        self._pane().deselect_all()


def main() -> None:
    """Run the application."""
    config = get_config()
    configure_logging(config)
    logger.info(f"Starting tablebridge against {config.api.base_url}")
    app = TableBridgeApp(config)
    app.run()


if __name__ == "__main__":
    main()
