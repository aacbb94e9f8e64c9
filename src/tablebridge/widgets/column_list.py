"""Checkbox list of loaded columns."""

from textual.app import ComposeResult
from textual.message import Message
from textual.widget import Widget
from textual.widgets import Label, SelectionList
from textual.widgets.selection_list import Selection

from tablebridge.models.selection import ColumnSelectionSet
from tablebridge.models.workflow import Column


class ColumnList(Widget):
    """Lets the user toggle which loaded columns take part in a transfer."""

    class Toggled(Message):
        """A column was checked or unchecked by the user."""

        def __init__(self, column: Column) -> None:
            super().__init__()
            self.column = column

    DEFAULT_CSS = """
    ColumnList {
        height: auto;
        max-height: 16;
    }

    ColumnList .columns-title {
        text-style: bold;
    }

    ColumnList SelectionList {
        height: auto;
        max-height: 14;
    }
    """

    def __init__(self, id: str | None = None) -> None:
        super().__init__(id=id)
        self._columns: dict[str, Column] = {}
        self._shown: list[Column] = []

    def compose(self) -> ComposeResult:
        """Create the list layout."""
        yield Label("Step 3: Select Columns", classes="columns-title")
        yield SelectionList[str](id="column-selection")

    def show(self, columns: list[Column], selection: ColumnSelectionSet) -> None:
        """Rebuild the options when the column list changed, then sync checks."""
        selection_list = self.query_one("#column-selection", SelectionList)

        if columns != self._shown:
            self._shown = list(columns)
            self._columns = {column.name: column for column in columns}
            selection_list.clear_options()
            selection_list.add_options(
                [
                    Selection(
                        f"{column.name}  [dim]{column.type_display}[/dim]",
                        column.name,
                        column in selection,
                    )
                    for column in columns
                ]
            )
            return

        for column in columns:
            if column in selection:
                selection_list.select(column.name)
            else:
                selection_list.deselect(column.name)

    def on_selection_list_selection_toggled(
        self, event: SelectionList.SelectionToggled
    ) -> None:
        """Forward user toggles as column messages."""
        event.stop()
        column = self._columns.get(str(event.selection.value))
        if column is not None:
            self.post_message(self.Toggled(column))
