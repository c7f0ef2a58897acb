from __future__ import annotations

"""
Status Report Data Models.

Defines the severity scale and the immutable message value returned by
every status and fix operation of the structure engine. Recoverable
filesystem conditions travel as these values, never as exceptions.
"""

from dataclasses import dataclass
from enum import IntEnum
from typing import Dict

# -----------------------------------------------------------------------------
# SEVERITY SCALE
# -----------------------------------------------------------------------------

class Severity(IntEnum):
    """Message levels ordered by seriousness (NOTICE is the mildest)."""
    NOTICE = -2
    INFO = -1
    OK = 0
    WARNING = 1
    ERROR = 2


# -----------------------------------------------------------------------------
# MESSAGE VALUE
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class StatusMessage:
    """
    Single entry of a status or fix report.

    Attributes:
        title: Short headline, usually embedding the root-relative path.
        message: Optional free-text body with details or remediation hints.
        severity: Seriousness of the reported condition.
    """
    title: str
    message: str = ""
    severity: Severity = Severity.OK

    def get_severity(self) -> Severity:
        return self.severity

    def to_dict(self) -> Dict[str, str]:
        """Render the message as a JSON-friendly mapping."""
        return {
            "severity": self.severity.name,
            "title": self.title,
            "message": self.message,
        }

    def __str__(self) -> str:
        body = f": {self.message}" if self.message else ""
        return f"[{self.severity.name}] {self.title}{body}"


def ok(title: str, message: str = "") -> StatusMessage:
    return StatusMessage(title, message, Severity.OK)


def notice(title: str, message: str = "") -> StatusMessage:
    return StatusMessage(title, message, Severity.NOTICE)


def warning(title: str, message: str = "") -> StatusMessage:
    return StatusMessage(title, message, Severity.WARNING)


def error(title: str, message: str = "") -> StatusMessage:
    return StatusMessage(title, message, Severity.ERROR)
