"""User-editable column selection."""

from collections.abc import Iterable, Iterator

from tablebridge.models.workflow import Column


class ColumnSelectionSet:
    """The subset of loaded columns to operate on, keyed by column name."""

    def __init__(self, columns: Iterable[Column] = ()) -> None:
        self._members: dict[str, Column] = {}
        self.select_all(columns)

    def toggle(self, column: Column) -> bool:
        """Remove the column if selected, otherwise add it.

        Returns whether the column is selected afterwards.
        """
        if column.name in self._members:
            del self._members[column.name]
            return False
        self._members[column.name] = column
        return True

    def select_all(self, columns: Iterable[Column]) -> None:
        """Replace the selection with exactly the given columns."""
        self._members = {column.name: column for column in columns}

    def clear(self) -> None:
        self._members.clear()

    def retain(self, columns: Iterable[Column]) -> None:
        """Drop members that are not in the given column list."""
        names = {column.name for column in columns}
        self._members = {name: col for name, col in self._members.items() if name in names}

    def ordered(self, columns: Iterable[Column]) -> list[Column]:
        """Return selected columns in the order of the given column list."""
        return [column for column in columns if column.name in self._members]

    @property
    def names(self) -> set[str]:
        """Names of the selected columns."""
        return set(self._members)

    def __contains__(self, item: object) -> bool:
        if isinstance(item, Column):
            return item.name in self._members
        return item in self._members

    def __iter__(self) -> Iterator[Column]:
        return iter(list(self._members.values()))

    def __len__(self) -> int:
        return len(self._members)

    def __bool__(self) -> bool:
        return bool(self._members)

    def __repr__(self) -> str:
        return f"ColumnSelectionSet({sorted(self._members)!r})"
