from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(slots=True)
class ValidationResult:
    """
    Outcome of checking a single user-supplied value (an IP or a domain).

    The core never enforces these checks; they are offered to the UI
    layer so it can reject input before calling a mutation.
    """
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return len(self.errors) == 0

    def __bool__(self) -> bool:
        return self.is_valid

    def to_json(self) -> dict:
        return {"valid": self.is_valid, "errors": list(self.errors), "warnings": list(self.warnings)}
