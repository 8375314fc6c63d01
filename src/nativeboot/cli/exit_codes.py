"""Exit codes for the nativeboot CLI.

- 0: Success
- 1: Libraries missing from the extraction directory (status)
- 2: Extraction error (directory, read or copy failure)
- 3: Invalid usage (bad arguments, missing config, module not found)
- 4: Environment update or library load failure
"""

from __future__ import annotations

EXIT_SUCCESS = 0
EXIT_LIBRARIES_MISSING = 1
EXIT_EXTRACTION_ERROR = 2
EXIT_INVALID_USAGE = 3
EXIT_ENVIRONMENT_ERROR = 4
