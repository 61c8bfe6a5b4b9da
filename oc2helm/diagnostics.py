"""
Diagnostics sink for non-fatal conversion findings.

Warnings such as undeclared variables or ignored overrides are recorded here
so callers and tests can inspect them, and are forwarded to the logger of the
component that reported them.
"""

import logging
from dataclasses import dataclass
from typing import List, Optional


logger = logging.getLogger(__name__)

UNDECLARED_VARIABLE = "undeclared_variable"
OVERRIDE_IGNORED = "override_ignored"
UNUSED_VARIABLE = "unused_variable"
MISSING_KIND = "missing_kind"
DUPLICATE_PARAMETER = "duplicate_parameter"


@dataclass
class Diagnostic:
    """A single recorded finding."""
    level: int
    code: str
    message: str
    subject: Optional[str] = None


class Diagnostics:
    """
    Accumulates diagnostics for one conversion run.

    Each record is also emitted through ``logging`` so command line users see
    it without having to inspect the sink.
    """

    def __init__(self):
        self.records: List[Diagnostic] = []

    def warn(self, code: str, message: str, subject: Optional[str] = None,
             log: Optional[logging.Logger] = None) -> Diagnostic:
        return self._record(logging.WARNING, code, message, subject, log)

    def info(self, code: str, message: str, subject: Optional[str] = None,
             log: Optional[logging.Logger] = None) -> Diagnostic:
        return self._record(logging.INFO, code, message, subject, log)

    def _record(self, level: int, code: str, message: str,
                subject: Optional[str], log: Optional[logging.Logger]) -> Diagnostic:
        diagnostic = Diagnostic(level=level, code=code, message=message, subject=subject)
        self.records.append(diagnostic)
        (log or logger).log(level, message)
        return diagnostic

    def codes(self) -> List[str]:
        """Return recorded codes in reporting order."""
        return [d.code for d in self.records]

    def by_code(self, code: str) -> List[Diagnostic]:
        return [d for d in self.records if d.code == code]

    @property
    def warnings(self) -> List[Diagnostic]:
        return [d for d in self.records if d.level >= logging.WARNING]

    def __len__(self) -> int:
        return len(self.records)
