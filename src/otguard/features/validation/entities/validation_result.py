"""Schema validation results."""

from dataclasses import dataclass, field
from typing import Any, Dict, List


@dataclass(frozen=True)
class ValidationIssue:
    """One schema violation."""

    code: str
    path: str
    message: str

    def to_dict(self) -> Dict[str, Any]:
        return {"code": self.code, "path": self.path, "message": self.message}

    def __str__(self) -> str:
        return f"[{self.code}] [{self.path}] {self.message}"


def format_issues(issues: List[ValidationIssue]) -> str:
    """Join issues into ``[code] [path] message; ...``."""
    return "; ".join(str(issue) for issue in issues)


@dataclass
class ValidationResult:
    """Result of validating a document or a schema."""

    is_valid: bool
    issues: List[ValidationIssue] = field(default_factory=list)

    @classmethod
    def success(cls) -> "ValidationResult":
        return cls(is_valid=True)

    @classmethod
    def failure(cls, issues: List[ValidationIssue]) -> "ValidationResult":
        return cls(is_valid=False, issues=list(issues))

    @property
    def summary(self) -> str:
        return format_issues(self.issues)

    def errors(self) -> List[Dict[str, Any]]:
        return [issue.to_dict() for issue in self.issues]
