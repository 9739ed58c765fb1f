"""
Test hygiene for Go test files:

* suite entry points must install the test logger, otherwise everything the
  suite logs is dropped in CI;
* focused tests must not be committed, they silently skip every other test.
"""

from __future__ import annotations

from pathlib import Path
from typing import List, Optional

from hygiene.checks.base import FileCheck, Issue, IssueType, IssueList, resolve
from hygiene.config import Settings
from hygiene.io import FileSet, read_text_file


E_MISSING_SUITE_HOOK = IssueType(
    "2a8f5d17-6e0c-4b93-9f42-d1c7b3e85a06",
    "Test suite does not set up the test logger.",
    hint=(
        "Call {suite_hook} in the suite setup (e.g. in BeforeSuite).\n"
        "Without it the suite's log output is lost in automated runs."
    ),
)

E_FOCUSED_TEST = IssueType(
    "c6d3e9b4-1f27-4a58-8b0e-94a2f7c51d3e",
    "Focused tests found.",
    hint=(
        "Remove the focus markers ({focus_markers}) before committing.\n"
        "Focused tests make the runner skip every other test."
    ),
)


class SuiteHookCheck(FileCheck):
    """Check that test-suite entry points call the logging hook."""

    def files(self, settings: Settings) -> FileSet:
        return FileSet(settings.suite_files)

    def check(self, path: Path, settings: Settings, root: Optional[Path] = None) -> List[Issue]:
        full_path = resolve(path, root)
        if not full_path.is_file():
            return []

        issues = IssueList()
        if settings.suite_hook not in read_text_file(full_path):
            issues.append(E_MISSING_SUITE_HOOK.at(path))
        return issues.issues


class FocusedTestCheck(FileCheck):
    """Check that test files contain no focus markers."""

    def files(self, settings: Settings) -> FileSet:
        return FileSet(settings.test_files)

    def check(self, path: Path, settings: Settings, root: Optional[Path] = None) -> List[Issue]:
        full_path = resolve(path, root)
        if not full_path.is_file():
            return []

        text = read_text_file(full_path)
        found = [marker for marker in settings.focus_markers if marker in text]

        issues = IssueList()
        if found:
            issues.append(E_FOCUSED_TEST.make(markers=' '.join(found)).at(path))
        return issues.issues
