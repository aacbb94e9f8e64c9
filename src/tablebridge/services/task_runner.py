"""Single-flight execution of workflow operations."""

import logging
from collections.abc import AsyncIterator, Awaitable, Callable
from contextlib import asynccontextmanager
from typing import Any

from tablebridge.exceptions import ServiceError
from tablebridge.models.workflow import OperationStatus

logger = logging.getLogger(__name__)

GENERIC_FAILURE = "Failed to perform operation"


class AsyncTaskRunner:
    """Runs one named async operation at a time and reports its outcome.

    Busy state, label and the message slot live on the shared
    :class:`OperationStatus`. Failures never escape :meth:`run`; they become
    an error message instead.
    """

    def __init__(
        self,
        status: OperationStatus,
        on_change: Callable[[], None] | None = None,
    ) -> None:
        self.status = status
        self._on_change = on_change

    @property
    def busy(self) -> bool:
        return self.status.busy

    async def run(
        self,
        label: str,
        operation: Callable[..., Awaitable[Any]],
        *args: Any,
        **kwargs: Any,
    ) -> bool:
        """Run ``operation`` under ``label``.

        Returns False without doing anything if another operation is in
        flight; overlapping calls are dropped, not queued.
        """
        if self.status.busy:
            logger.debug(f"Ignoring '{label}': '{self.status.label}' is in flight")
            return False

        async with self.hold(label):
            try:
                await operation(*args, **kwargs)
            except ServiceError as e:
                logger.warning(f"{label} failed: {e.message}")
                self.status.error(e.message)
            except Exception as e:
                logger.exception(f"{label} failed")
                self.status.error(str(e) or GENERIC_FAILURE)
        return True

    @asynccontextmanager
    async def hold(self, label: str) -> AsyncIterator[OperationStatus]:
        """Hold the busy flag for the duration of the block."""
        self.status.busy = True
        self.status.label = label
        self.status.clear_message()
        self._notify()
        logger.info(f"{label}...")
        try:
            yield self.status
        finally:
            self.status.busy = False
            self.status.label = ""
            self._notify()
            logger.debug(f"{label} done")

    def _notify(self) -> None:
        if self._on_change is not None:
            self._on_change()
