"""Scoped working directory and interrupt handling for one pipeline run.

The working directory is released on every exit path: normal completion,
a pipeline error, or an interrupt signal. Release is idempotent and safe
to call while workers are still running; on interrupt the worker pool is
abandoned rather than drained.
"""

from __future__ import annotations

import shutil
import signal
import tempfile
import threading
from pathlib import Path
from types import FrameType
from typing import Any, Dict, Optional, Sequence

from ocrpdf.core.logging import get_logger

LOGGER = get_logger(__name__)

DEFAULT_SIGNALS = (signal.SIGINT, signal.SIGTERM)
WORK_DIR_PREFIX = "ocr-"


class LifecycleController:
    """Owns the temporary working directory and the interrupt listeners.

    Usage::

        with LifecycleController() as work_dir:
            ...

    If one of ``signals`` arrives inside the block, the directory is
    removed and ``SystemExit(interrupt_exit_code)`` is raised in the main
    thread.
    """

    def __init__(
        self,
        interrupt_exit_code: int = 1,
        signals: Sequence[int] = DEFAULT_SIGNALS,
        prefix: str = WORK_DIR_PREFIX,
        parent_dir: Optional[Path] = None,
    ) -> None:
        self._interrupt_exit_code = interrupt_exit_code
        self._signals = tuple(signals)
        self._prefix = prefix
        self._parent_dir = parent_dir
        self._work_dir: Optional[Path] = None
        self._released = False
        self._lock = threading.Lock()
        self._previous_handlers: Dict[int, Any] = {}
        self._interrupted = False

    @property
    def work_dir(self) -> Path:
        if self._work_dir is None:
            raise RuntimeError("Working directory has not been acquired")
        return self._work_dir

    @property
    def interrupted(self) -> bool:
        return self._interrupted

    def __enter__(self) -> Path:
        self.acquire()
        try:
            self._install_handlers()
        except BaseException:
            # __exit__ does not run when __enter__ fails
            self._restore_handlers()
            self.release()
            raise
        return self.work_dir

    def __exit__(self, exc_type, exc, tb) -> None:
        self._restore_handlers()
        self.release()

    def acquire(self) -> Path:
        """Create the temporary working directory."""
        parent = str(self._parent_dir) if self._parent_dir else None
        self._work_dir = Path(tempfile.mkdtemp(prefix=self._prefix, dir=parent))
        self._released = False
        LOGGER.debug(f"Working directory: {self._work_dir}")
        return self._work_dir

    def release(self) -> None:
        """Remove the working directory. Safe to call more than once."""
        with self._lock:
            if self._released or self._work_dir is None:
                return
            self._released = True
            shutil.rmtree(self._work_dir, ignore_errors=True)
            LOGGER.debug(f"Removed working directory {self._work_dir}")

    def _install_handlers(self) -> None:
        # signal.signal() only works in the main thread
        if threading.current_thread() is not threading.main_thread():
            LOGGER.debug("Not in main thread, interrupt handlers not installed")
            return
        for signum in self._signals:
            self._previous_handlers[signum] = signal.signal(signum, self._handle_signal)

    def _restore_handlers(self) -> None:
        for signum, handler in self._previous_handlers.items():
            signal.signal(signum, handler)
        self._previous_handlers.clear()

    def _handle_signal(self, signum: int, frame: Optional[FrameType]) -> None:
        self._interrupted = True
        self.release()
        LOGGER.error("Interrupted")
        raise SystemExit(self._interrupt_exit_code)
