"""Step-by-step ingestion screen."""

from textual import work
from textual.app import ComposeResult
from textual.containers import Horizontal, Vertical, VerticalScroll
from textual.widget import Widget
from textual.widgets import Button, Input, Label, Select

from tablebridge.models.connection import SourceKind
from tablebridge.screens.preview import PreviewModal
from tablebridge.services.workflow import IngestionWorkflow
from tablebridge.widgets.column_list import ColumnList
from tablebridge.widgets.status_bar import StatusBar

_CONNECTION_FIELDS = ("host", "port", "database", "user", "credential")


class IngestionPane(Widget):
    """Guides the user from source selection to a finished transfer."""

    DEFAULT_CSS = """
    IngestionPane {
        height: 1fr;
    }

    IngestionPane .step {
        height: auto;
        border: round $primary-background;
        padding: 0 1;
        margin-bottom: 1;
    }

    IngestionPane .section-header {
        text-style: bold;
    }

    IngestionPane .form-row {
        height: auto;
    }

    IngestionPane .form-label {
        width: 14;
        padding-top: 1;
    }

    IngestionPane .form-row Input {
        width: 1fr;
    }

    IngestionPane .hint {
        color: $text-muted;
    }

    IngestionPane .action-row {
        height: auto;
    }

    IngestionPane .action-row Button {
        margin-right: 1;
    }

    IngestionPane #delimiter {
        width: 8;
    }

    IngestionPane #start {
        width: 100%;
    }
    """

    def __init__(self, workflow: IngestionWorkflow) -> None:
        super().__init__()
        self.workflow = workflow
        self._shown_tables: list[str] = []

    def compose(self) -> ComposeResult:
        """Create the workflow layout."""
        session = self.workflow.session
        connection = session.connection

        yield StatusBar(id="status-bar")

        with VerticalScroll(classes="pane-container"):
            with Vertical(classes="step"):
                yield Label("Step 1: Select Source", classes="section-header")
                yield Select(
                    [(kind.display_name, kind.value) for kind in SourceKind],
                    id="source-select",
                    value=session.source.value,
                    allow_blank=False,
                )
                yield Label("", id="target-label")

            with Vertical(classes="step", id="database-section"):
                yield Label("Step 2: Configure ClickHouse Connection", classes="section-header")
                for field_id, label, value, password in (
                    ("host", "Host:", connection.host, False),
                    ("port", "Port:", str(connection.port), False),
                    ("database", "Database:", connection.database, False),
                    ("user", "User:", connection.user, False),
                    ("credential", "Password:", connection.credential.get_secret_value(), True),
                ):
                    with Horizontal(classes="form-row"):
                        yield Label(label, classes="form-label")
                        yield Input(
                            value=value,
                            id=field_id,
                            password=password,
                            type="integer" if field_id == "port" else "text",
                        )
                with Horizontal(classes="action-row"):
                    yield Button("Connect & List Tables", variant="primary", id="connect")
                yield Select([], id="table-select", prompt="Select a table...")

            with Vertical(classes="step", id="file-section"):
                yield Label("Step 2: Configure Flat File", classes="section-header")
                with Horizontal(classes="form-row"):
                    yield Label("File:", classes="form-label")
                    yield Input(placeholder="path/to/data.csv", id="file-path")
                with Horizontal(classes="form-row"):
                    yield Label("Delimiter:", classes="form-label")
                    yield Input(value=session.file.delimiter, id="delimiter", max_length=2)
                with Horizontal(classes="action-row"):
                    yield Button("Load File", variant="primary", id="load-file")
                    yield Button("Remove File", variant="default", id="discard-file")
                yield Label("", id="file-name", classes="hint")

            with Vertical(classes="step", id="columns-section"):
                yield ColumnList(id="column-list")
                with Horizontal(classes="action-row"):
                    yield Button("Select All", variant="default", id="select-all")
                    yield Button("Deselect All", variant="default", id="deselect-all")
                    yield Button("Preview Data", variant="default", id="preview")

            with Vertical(classes="step"):
                yield Label("Step 4: Configure Target & Start Ingestion", classes="section-header")
                with Vertical(id="export-target"):
                    with Horizontal(classes="form-row"):
                        yield Label("Output file:", classes="form-label")
                        yield Input(
                            value=session.file.output_path,
                            placeholder="output.csv",
                            id="output-path",
                        )
                with Vertical(id="import-target"):
                    yield Label("", id="target-details", classes="hint")
                    with Horizontal(classes="form-row"):
                        yield Label("Table:", classes="form-label")
                        yield Input(
                            placeholder="derived from file name when empty",
                            id="target-table",
                        )
                    yield Label("", id="target-name")
                yield Button("Start Ingestion", variant="success", id="start")

    def on_mount(self) -> None:
        """Render the initial state."""
        self.refresh_view()

    def refresh_view(self) -> None:
        """Bring every widget in line with the session state."""
        workflow = self.workflow
        session = workflow.session
        busy = workflow.busy
        is_database = session.source is SourceKind.DATABASE

        self.query_one("#status-bar", StatusBar).show(session.status)
        self.query_one("#target-label", Label).update(
            f"Target will be: [b]{session.target.display_name}[/b]"
        )

        self.query_one("#database-section").display = is_database
        self.query_one("#file-section").display = not is_database
        self.query_one("#export-target").display = is_database
        self.query_one("#import-target").display = not is_database

        table_select = self.query_one("#table-select", Select)
        if session.tables != self._shown_tables:
            self._shown_tables = list(session.tables)
            table_select.set_options([(table, table) for table in session.tables])
        if not session.selected_table:
            table_select.clear()
        table_select.display = bool(session.tables)

        selected_file = session.file.selected_file
        self.query_one("#file-name", Label).update(
            f"Selected: {selected_file.name}" if selected_file else "No file selected"
        )

        self.query_one("#columns-section").display = bool(session.columns)
        self.query_one("#column-list", ColumnList).show(session.columns, session.selection)

        connection = session.connection
        self.query_one("#target-details", Label).update(
            f"Target ClickHouse: {connection.display_host} / {connection.database} "
            f"as {connection.user}"
        )
        self.query_one("#target-name", Label).update(
            f"Table Name: [b]{workflow.target_display_name()}[/b] (created if needed)"
        )

        for button_id in ("connect", "load-file", "discard-file", "select-all", "deselect-all"):
            self.query_one(f"#{button_id}", Button).disabled = busy
        self.query_one("#discard-file", Button).disabled = busy or selected_file is None
        self.query_one("#preview", Button).disabled = not workflow.can_preview()
        start = self.query_one("#start", Button)
        start.disabled = not workflow.can_start()
        start.label = f"Start Ingestion ({session.source.value} -> {session.target.value})"
        table_select.disabled = busy
        self.query_one("#source-select", Select).disabled = busy

    def on_select_changed(self, event: Select.Changed) -> None:
        """Handle source and table selection."""
        if event.select.id == "source-select":
            kind = SourceKind(event.value)
            if kind is not self.workflow.session.source:
                self.workflow.set_source(kind)
                self.refresh_view()
                if self.workflow.pending_cleanup:
                    self._release_uploads()
        elif event.select.id == "table-select":
            table = event.value if isinstance(event.value, str) else ""
            if table and table != self.workflow.session.selected_table:
                self._load_table(table)

    def on_input_changed(self, event: Input.Changed) -> None:
        """Copy form edits into the session."""
        input_id = event.input.id or ""
        value = event.value

        if input_id in _CONNECTION_FIELDS:
            if input_id == "port" and not value.strip():
                return
            self.workflow.update_connection(**{input_id: value})
        elif input_id == "delimiter":
            if not value:
                return
            self.workflow.set_delimiter(value)
        elif input_id == "output-path":
            self.workflow.set_output_path(value)
        elif input_id == "target-table":
            self.workflow.set_target_table(value)
        else:
            return
        self.refresh_view()

    def on_input_submitted(self, event: Input.Submitted) -> None:
        """Enter in the file field loads the file."""
        if event.input.id == "file-path":
            self._load_file(event.value)

    def on_button_pressed(self, event: Button.Pressed) -> None:
        """Handle button presses."""
        button_id = event.button.id
        if button_id == "connect":
            self._connect()
        elif button_id == "load-file":
            self._load_file(self.query_one("#file-path", Input).value)
        elif button_id == "discard-file":
            self._discard_file()
        elif button_id == "select-all":
            self.select_all()
        elif button_id == "deselect-all":
            self.deselect_all()
        elif button_id == "preview":
            self.preview()
        elif button_id == "start":
            self.start()

    def on_column_list_toggled(self, event: ColumnList.Toggled) -> None:
        """Handle a column checkbox."""
        self.workflow.toggle_column(event.column)
        self.refresh_view()

    def select_all(self) -> None:
        if self.workflow.busy:
            return
        self.workflow.select_all_columns()
        self.refresh_view()

    def deselect_all(self) -> None:
        if self.workflow.busy:
            return
        self.workflow.deselect_all_columns()
        self.refresh_view()

    @work(group="workflow")
    async def _connect(self) -> None:
        await self.workflow.connect()
        self.refresh_view()

    @work(group="workflow")
    async def _load_table(self, table: str) -> None:
        await self.workflow.select_table(table)
        self.refresh_view()

    @work(group="workflow")
    async def _load_file(self, path: str) -> None:
        await self.workflow.select_file(path)
        self.refresh_view()

    @work(group="workflow")
    async def _discard_file(self) -> None:
        await self.workflow.discard_file()
        self.refresh_view()

    @work(group="workflow")
    async def _release_uploads(self) -> None:
        await self.workflow.release_uploads()
        self.refresh_view()

    @work(group="workflow")
    async def preview(self) -> None:
        """Fetch a preview and open it."""
        result = await self.workflow.preview()
        self.refresh_view()
        if result is not None:
            self.app.push_screen(PreviewModal(result))

    @work(group="workflow")
    async def start(self) -> None:
        """Run the ingestion."""
        await self.workflow.start()
        self.refresh_view()
