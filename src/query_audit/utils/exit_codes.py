"""Exit-code contract shared by every CLI command.

Code  Meaning
----  -------
  0   Success, nothing to report
  1   Violation: error-severity findings, or more warnings than allowed
  2   Error: usage error, missing file, invalid config
"""

from __future__ import annotations

from enum import IntEnum


class ExitCode(IntEnum):
    SUCCESS = 0
    VIOLATION = 1
    ERROR = 2
