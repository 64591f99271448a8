"""Pipeline orchestration for ocrpdf.

Manages the execution of the OCR pipeline stages:
1. Work enumeration over extracted page images
2. Recognition on a worker pool (parallel)
3. Order-restoring merge and line filtering
"""

from ocrpdf.pipeline.executor import PipelineExecutor, PipelineStats
from ocrpdf.pipeline.merger import OrderRestoringMerger, PendingSet
from ocrpdf.pipeline.pool import WorkerPool

__all__ = [
    "PipelineExecutor",
    "PipelineStats",
    "OrderRestoringMerger",
    "PendingSet",
    "WorkerPool",
]
