from __future__ import annotations

from enum import Enum
from pathlib import Path

from pydantic import BaseModel, Field


class Severity(str, Enum):
    ERROR = "error"
    WARNING = "warning"


class Issue(BaseModel):
    """A single problem found in a documentation file."""

    path: Path
    line: int | None = None
    severity: Severity = Severity.ERROR
    code: str
    message: str

    def format(self, root: Path | None = None) -> str:
        path = self.path
        if root is not None:
            try:
                path = path.relative_to(root)
            except ValueError:
                path = self.path
        location = f"{path.as_posix()}:{self.line}" if self.line else path.as_posix()
        return f"{location}: {self.severity.value} [{self.code}] {self.message}"


def error(path: Path, code: str, message: str, line: int | None = None) -> Issue:
    return Issue(path=path, line=line, severity=Severity.ERROR, code=code, message=message)


def warning(path: Path, code: str, message: str, line: int | None = None) -> Issue:
    return Issue(path=path, line=line, severity=Severity.WARNING, code=code, message=message)


class LintReport(BaseModel):
    """Aggregated result of linting a repository."""

    files_checked: list[Path] = Field(default_factory=list)
    issues: list[Issue] = Field(default_factory=list)

    @property
    def errors(self) -> list[Issue]:
        return [i for i in self.issues if i.severity is Severity.ERROR]

    @property
    def warnings(self) -> list[Issue]:
        return [i for i in self.issues if i.severity is Severity.WARNING]

    @property
    def ok(self) -> bool:
        return not self.errors

    def passed(self, strict: bool = False) -> bool:
        """Whether the report passes; strict mode also fails on warnings."""
        return self.ok and not (strict and self.warnings)

    def sorted_issues(self) -> list[Issue]:
        return sorted(self.issues, key=lambda i: (str(i.path), i.line or 0, i.code))
