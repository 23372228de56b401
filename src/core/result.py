from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional


@dataclass(frozen=True, slots=True)
class OperationResult:
    """
    Outcome of a public hosts operation.

    Success carries an optional ``value`` (records, a backup path, ...).
    Failure carries a short ``error`` message for the operator and the
    underlying ``details``, plus the ``kind`` of the error class so a
    caller can branch without string matching.
    """
    success: bool
    value: Any = None
    error: str = ""
    details: str = ""
    kind: Optional[str] = None

    @classmethod
    def ok(cls, value: Any = None) -> OperationResult:
        return cls(success=True, value=value)

    @classmethod
    def fail(cls, error: str, details: str = "", kind: Optional[str] = None) -> OperationResult:
        return cls(success=False, error=error, details=details, kind=kind)

    def __bool__(self) -> bool:
        return self.success

    def to_json(self) -> dict:
        """Shape returned to the UI: ``{"success", "error", "details"}``."""
        if self.success:
            return {"success": True}
        out = {"success": False, "error": self.error}
        if self.details:
            out["details"] = self.details
        return out
