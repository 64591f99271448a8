"""Pipeline executor for turning a document into text.

Pipeline stages:
1. Page-image extraction into a scoped working directory
2. Work enumeration (sorted page images, numbered 0..N-1)
3. Recognition on a worker pool (parallel)
4. Order-restoring merge and line filtering (single consumer)
5. Text filtering of the accumulated output

Writing the result is left to the caller.
"""

from __future__ import annotations

import time
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Optional

from ocrpdf.config.models import OcrPdfConfig
from ocrpdf.core.errors import ExtractionError
from ocrpdf.core.lifecycle import LifecycleController
from ocrpdf.core.logging import get_logger
from ocrpdf.core.models import JobResult, WorkItem
from ocrpdf.core.streaming import StreamHandler
from ocrpdf.core.tools import find_tool
from ocrpdf.pipeline.enumerator import DEFAULT_PATTERN, enumerate_work_items
from ocrpdf.pipeline.job import JobRunner
from ocrpdf.pipeline.line_filter import ByteFilter, LineFilterStage, identity
from ocrpdf.pipeline.merger import OrderRestoringMerger
from ocrpdf.pipeline.pool import WorkerPool
from ocrpdf.plugins.extractors import ExtractorPlugin, get_extractor_for, supported_suffixes

LOGGER = get_logger(__name__)


@dataclass
class PipelineStats:
    """Counters from the last run, for logging."""

    pages: int = 0
    lines: int = 0
    duration_ms: int = 0


class PipelineExecutor:
    """Runs extraction, recognition, ordering and filtering for one document.

    Args:
        config: Run configuration.
        line_filter: Applied to every output line.
        text_filter: Applied once to the whole output.
        stream_handler: Receives per-page progress events.
        job: Replaces the tesseract JobRunner (used by tests).
        interrupt_exit_code: Exit status used when a signal aborts the run.
    """

    def __init__(
        self,
        config: OcrPdfConfig,
        line_filter: ByteFilter = identity,
        text_filter: ByteFilter = identity,
        stream_handler: Optional[StreamHandler] = None,
        job: Optional[Callable[[WorkItem], JobResult]] = None,
        interrupt_exit_code: int = 1,
    ) -> None:
        self._config = config
        self._line_filter = line_filter
        self._text_filter = text_filter
        self._stream_handler = stream_handler
        self._job = job
        self._interrupt_exit_code = interrupt_exit_code
        self.stats = PipelineStats()

    def execute(self, input_path: Path, extractor: Optional[ExtractorPlugin] = None) -> bytes:
        """Recognize ``input_path`` and return the filtered text.

        Raises:
            ExtractionError: If the input cannot be turned into page images.
            JobError: If any page fails to be recognized.
        """
        if extractor is None:
            extractor = get_extractor_for(input_path, self._config)
            if extractor is None:
                raise ExtractionError(
                    f"Unsupported input file type \"{input_path.suffix}\" "
                    f"(expected one of: {', '.join(supported_suffixes())})"
                )

        if self._job is None:
            self._check_tools(extractor)

        with LifecycleController(interrupt_exit_code=self._interrupt_exit_code) as work_dir:
            extractor.extract(input_path, work_dir)
            return self.process_directory(work_dir, source_name=str(input_path))

    def process_directory(
        self,
        directory: Path,
        pattern: str = DEFAULT_PATTERN,
        source_name: Optional[str] = None,
    ) -> bytes:
        """Recognize the page images already present in ``directory``."""
        start = time.perf_counter()

        items = enumerate_work_items(directory, pattern, source_name=source_name)

        job = self._job or JobRunner(self._config)
        pool = WorkerPool(
            job,
            workers=self._config.workers,
            stream_handler=self._stream_handler,
            first_page=self._config.first_page,
        )
        stage = LineFilterStage(self._line_filter, self._text_filter)
        merger = OrderRestoringMerger(stage.feed)

        LOGGER.info(f"Recognizing {len(items)} page(s) on {pool.workers} worker(s)...")
        pool.start(items)

        try:
            merger.merge(pool.results())
        finally:
            # After an error, in-flight jobs are abandoned rather than awaited
            pool.cancel()

        text = stage.text()

        self.stats = PipelineStats(
            pages=merger.next_expected,
            lines=stage.line_count,
            duration_ms=int((time.perf_counter() - start) * 1000),
        )
        LOGGER.info(
            f"Recognized {self.stats.pages} page(s), {self.stats.lines} line(s) "
            f"in {self.stats.duration_ms}ms"
        )
        return text

    def _check_tools(self, extractor: ExtractorPlugin) -> None:
        extractor.ensure_binary()
        if find_tool(self._config.tools.tesseract) is None:
            raise ExtractionError(f"{self._config.tools.tesseract} not found in PATH")
