"""
Background Tasks
================

Runs a blocking discovery or download call on a worker thread so an
interactive surface can keep handling input. The worker reports over a
one-directional queue: zero or more progress messages, then exactly one
terminal message (a result or an error).
"""

import logging
import queue
import threading
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from fontgrab.api import discover_fonts, download_fonts
from fontgrab.core.config import AppConfig
from fontgrab.core.exceptions import WorkerDisconnectedError
from fontgrab.core.models import FontRecord

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ProgressMessage:
    """Position of the record about to be attempted."""

    position: int
    total: int
    name: str


@dataclass(frozen=True)
class ResultMessage:
    result: Any


@dataclass(frozen=True)
class ErrorMessage:
    error: Exception


TaskMessage = ProgressMessage | ResultMessage | ErrorMessage
ProgressSink = Callable[[ProgressMessage], None]


class BackgroundTask:
    """
    A single blocking call executed on a daemon thread.

    ``work`` receives a sink for progress messages and returns the result.
    Consumers call ``poll()`` periodically; it never blocks.
    """

    def __init__(self, name: str, work: Callable[[ProgressSink], Any]):
        self.name = name
        self._work = work
        self._messages: queue.Queue[TaskMessage] = queue.Queue()
        self._thread = threading.Thread(target=self._run, name=f"fontgrab-{name}", daemon=True)
        self._finished = False

    def start(self) -> "BackgroundTask":
        self._thread.start()
        return self

    def _run(self) -> None:
        try:
            result = self._work(self._messages.put)
        except Exception as e:
            logger.debug(f"{self.name} task failed: {e}")
            self._messages.put(ErrorMessage(e))
        else:
            self._messages.put(ResultMessage(result))

    @property
    def finished(self) -> bool:
        """Whether the terminal message has been delivered by ``poll()``."""
        return self._finished

    def poll(self) -> list[TaskMessage]:
        """
        Drain every message currently queued, in order.

        Raises:
            WorkerDisconnectedError: If the worker thread ended without
                posting a terminal message
        """
        if self._finished:
            return []

        # Checked before draining so a message posted just before exit is still seen
        alive = self._thread.is_alive()
        messages = self._drain()

        if any(isinstance(message, ResultMessage | ErrorMessage) for message in messages):
            self._finished = True
        elif not alive and self._thread.ident is not None:
            self._finished = True
            raise WorkerDisconnectedError(self.name)

        return messages

    def _drain(self) -> list[TaskMessage]:
        messages = []
        while True:
            try:
                messages.append(self._messages.get_nowait())
            except queue.Empty:
                return messages

    def join(self, timeout: float | None = None) -> None:
        self._thread.join(timeout)


def start_scan(site: str, config: AppConfig | None = None) -> BackgroundTask:
    """Discover fonts for ``site`` on a worker thread."""

    def work(_report: ProgressSink) -> list[FontRecord]:
        return discover_fonts(site, config)

    return BackgroundTask("scan", work).start()


def start_download(
    fonts: list[FontRecord], output_dir: Path, config: AppConfig | None = None
) -> BackgroundTask:
    """Download ``fonts`` on a worker thread, reporting each attempt."""
    records = list(fonts)

    def work(report: ProgressSink):
        return download_fonts(
            records,
            output_dir,
            lambda position, total, font: report(ProgressMessage(position, total, font.name)),
            config,
        )

    return BackgroundTask("download", work).start()
