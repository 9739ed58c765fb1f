'''
* [x] Use the canonical formatter for Go sources. A formatting violation stops the
      run right away since it is fixed mechanically by the formatter itself.
'''

from __future__ import annotations

import logging
import subprocess
from pathlib import Path
from typing import List, Optional, Protocol

from hygiene.checks.base import FileCheck, Issue, IssueType, IssueList, Severity, resolve
from hygiene.config import Settings
from hygiene.io import FileSet

logger = logging.getLogger(__name__)


E_GOFMT_MISSING = IssueType(
    "e1b7a4c6-93d2-4f05-b8a1-6c2d0e9f3a54",
    "The 'gofmt' formatter is not installed.",
    severity=Severity.CRITICAL,
    hint="Install the Go toolchain and make sure 'gofmt' is on the PATH.",
)

E_NOT_FORMATTED = IssueType(
    "7c94f2e8-0b3a-4d6e-a1f7-58e2c9b0d613",
    "Go file is not formatted with gofmt.",
    severity=Severity.CRITICAL,
    hint="Run 'gofmt -w {file}', stage the result and commit again.",
)

E_UNPARSABLE = IssueType(
    "4d2b8e61-a9c3-47f0-b5d8-13e6c7f90a2b",
    "Go file could not be parsed by gofmt.",
    severity=Severity.CRITICAL,
    hint="Fix the syntax error in {file}, then check it with 'gofmt -d {file}'.",
)


class FormatterNotFound(Exception):
    pass


class UnparsableSource(Exception):
    pass


class FormattingError(Exception):
    """
    Raised on the first misformatted file. Aborts the whole run.
    """

    def __init__(self, issue: Issue) -> None:
        super().__init__(issue.issue_type.message)
        self.issue = issue


class Formatter(Protocol):
    def diff(self, path: Path) -> str:
        """
        Returns the formatter's diff for `path`; empty when the file is formatted.
        Raises UnparsableSource when the file cannot be parsed.
        """
        ...


class GoFormatter:
    """Runs ``gofmt -d`` without touching the file."""

    def __init__(self, executable: str = "gofmt") -> None:
        self.executable = executable

    def diff(self, path: Path) -> str:
        try:
            result = subprocess.run(
                [self.executable, "-d", str(path)],
                capture_output=True,
                text=True,
            )
        except FileNotFoundError as e:
            raise FormatterNotFound(self.executable) from e
        if result.returncode != 0 and not result.stdout:
            raise UnparsableSource(result.stderr.strip())
        return result.stdout


class GoFormattingCheck(FileCheck):
    """Check Go source files with ``gofmt``."""

    def __init__(self, formatter: Formatter | None = None) -> None:
        self.formatter = formatter or GoFormatter()

    def files(self, settings: Settings) -> FileSet:
        return FileSet(settings.format_files)

    def check(self, path: Path, settings: Settings, root: Optional[Path] = None) -> List[Issue]:
        full_path = resolve(path, root)
        if not full_path.is_file():
            return []

        issues = IssueList()
        try:
            output = self.formatter.diff(full_path)
            if output:
                logger.debug(f"gofmt diff for {path}:\n{output}")
                issues.append(E_NOT_FORMATTED.at(path))
        except FormatterNotFound:
            issues.append(E_GOFMT_MISSING.at(path))
        except UnparsableSource as e:
            logger.debug(f"gofmt could not parse {path}:\n{e}")
            first_line = str(e).splitlines()[0] if str(e) else None
            issues.append(E_UNPARSABLE.make(error=first_line).at(path))

        return issues.issues

    def enforce(self, paths: List[Path], settings: Settings, root: Optional[Path] = None) -> None:
        """
        Checks `paths` in order and raises FormattingError on the first violation.
        """
        for path in self.files(settings).filter(paths):
            for issue in self.check(path, settings, root=root):
                raise FormattingError(issue)
