"""Runs the recognizer on a single page image."""

from __future__ import annotations

from typing import List

from ocrpdf.config.models import OcrPdfConfig
from ocrpdf.core.logging import get_logger
from ocrpdf.core.models import JobResult, WorkItem
from ocrpdf.core.tools import describe_failure, run_tool

LOGGER = get_logger(__name__)


class JobRunner:
    """Wraps one ``tesseract`` invocation per work item.

    ``run`` never raises: a failed invocation is reported through
    ``JobResult.error``, tagged with the human-facing page number. Jobs
    are not retried.
    """

    def __init__(self, config: OcrPdfConfig) -> None:
        self._config = config

    def page_number(self, item: WorkItem) -> int:
        """Page number shown to the user for ``item``."""
        return item.sequence_number + self._config.first_page

    def build_command(self, item: WorkItem) -> List[str]:
        cmd = [
            self._config.tools.tesseract,
            str(item.source),
            "-",
            "-l",
            self._config.language,
        ]
        cmd.extend(self._config.tesseract_args)
        return cmd

    def run(self, item: WorkItem) -> JobResult:
        """Recognize one page.

        Returns:
            JobResult with the raw recognizer output, or with ``error`` set
            to ``"(page N) <first diagnostic line>"``.
        """
        prefix = f"(page {self.page_number(item)}) "

        try:
            result = run_tool(self.build_command(item))
        except OSError as e:
            return JobResult(item.sequence_number, error=prefix + str(e))

        if result.returncode != 0:
            return JobResult(item.sequence_number, error=prefix + describe_failure(result))

        return JobResult(item.sequence_number, payload=result.stdout)

    __call__ = run
