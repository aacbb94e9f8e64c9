"""Custom widgets for tablebridge."""

from tablebridge.widgets.column_list import ColumnList
from tablebridge.widgets.status_bar import StatusBar

__all__ = [
    "ColumnList",
    "StatusBar",
]
