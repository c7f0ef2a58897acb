from __future__ import annotations

"""
Structure Engine Exceptions.

Precondition failures are raised, never reported as status messages: they
indicate a malformed structure description or a caller that skipped a
required check. Each carries a stable numeric code.
"""

from fsreconcile.domain.constants import ERROR_CODE_NAMES


class StructureError(Exception):
    """Base failure of the structure engine, identified by a numeric code."""

    def __init__(self, message: str, code: int) -> None:
        super().__init__(message)
        self.code = code

    @property
    def code_name(self) -> str:
        """Symbolic identifier of the failure code, if registered."""
        return ERROR_CODE_NAMES.get(self.code, "unknown")

    def __str__(self) -> str:
        return f"{super().__str__()} (code {self.code})"


class InvalidArgumentError(StructureError, ValueError):
    """Invalid construction input or operation argument."""


class RootNodeError(StructureError):
    """The externally supplied base path cannot anchor a tree."""
