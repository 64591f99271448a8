"""Exit codes for the ocrpdf CLI.

- 0: Success
- 1: Pipeline error (extraction, recognition or output failure)
- 2: Invalid usage (bad arguments, config or filter files)
- 3: Interrupted by a signal
"""

from __future__ import annotations

EXIT_SUCCESS = 0
EXIT_PIPELINE_ERROR = 1
EXIT_INVALID_USAGE = 2
EXIT_INTERRUPTED = 3
