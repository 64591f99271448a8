"""Progress reporting for page recognition.

Workers report page start and completion from several threads at once,
so every handler must be thread-safe.
"""

from __future__ import annotations

import sys
import threading
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional, TextIO


class PageStatus(str, Enum):
    """Lifecycle state of a page job."""

    STARTED = "started"
    DONE = "done"
    FAILED = "failed"


@dataclass
class PageEvent:
    """A status change of one page job."""

    page_number: int
    status: PageStatus
    message: Optional[str] = None


class StreamHandler(ABC):
    """Abstract base class for progress handlers."""

    @abstractmethod
    def emit(self, event: PageEvent) -> None:
        """Emit a page event.

        Args:
            event: The event to emit.
        """

    def start_page(self, page_number: int) -> None:
        self.emit(PageEvent(page_number, PageStatus.STARTED))

    def end_page(self, page_number: int, success: bool, message: Optional[str] = None) -> None:
        status = PageStatus.DONE if success else PageStatus.FAILED
        self.emit(PageEvent(page_number, status, message))


class NullStreamHandler(StreamHandler):
    """No-op handler, used when progress is not requested."""

    def emit(self, event: PageEvent) -> None:
        pass


class CLIStreamHandler(StreamHandler):
    """Prints one status line per event to the console."""

    def __init__(self, output: TextIO = sys.stderr):
        self._output = output
        self._lock = threading.Lock()

    def emit(self, event: PageEvent) -> None:
        line = f"[page {event.page_number}] {event.status.value}"
        if event.message:
            line += f": {event.message}"
        with self._lock:
            print(line, file=self._output, flush=True)


class CallbackStreamHandler(StreamHandler):
    """Forwards events to a callback, serialized under a lock."""

    def __init__(self, on_event: Callable[[PageEvent], None]):
        self._on_event = on_event
        self._lock = threading.Lock()

    def emit(self, event: PageEvent) -> None:
        with self._lock:
            self._on_event(event)
