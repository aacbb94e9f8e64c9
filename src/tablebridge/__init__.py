"""tablebridge - terminal UI for moving tables between ClickHouse and flat files."""

__version__ = "0.1.0"
