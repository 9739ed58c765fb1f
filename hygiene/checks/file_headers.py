"""
* [x] Check for Missing Copyright/License Headers: every source file carries the
      Apache 2.0 license notice and a copyright line for the current year naming
      the configured owner.
"""

from __future__ import annotations

import re
from pathlib import Path
from typing import List, Optional

from hygiene.checks.base import FileCheck, Issue, IssueType, IssueList, resolve
from hygiene.config import Settings, LICENSE_MARKER, LICENSE_HEADER
from hygiene.io import FileSet, read_text_file


E_MISSING_COPYRIGHT = IssueType(
    "5f0d8a39-2c57-4b8e-9a36-0c8e4f1d7b21",
    "Missing or outdated copyright notice.",
    hint=(
        "Every file needs a copyright notice for the current year, e.g.:\n"
        "  new file:     Copyright (c) {year} {owner}. All rights reserved.\n"
        "  updated file: Copyright (c) 2019-{year} {owner}. All rights reserved.\n"
        "The owner is configurable with 'copyright_owner' in {settings_file}."
    ),
)

E_MISSING_LICENSE = IssueType(
    "b3e6c0f2-7d41-4a9c-8e15-2f6a9d3c4b87",
    "Missing Apache License 2.0 header.",
    hint="Add the license header (in the file's comment syntax):\n\n" + LICENSE_HEADER,
)


def copyright_pattern(year: int, owner: str) -> re.Pattern:
    return re.compile(
        r'Copyright \(c\).*\b' + str(year) + r'\b.*' + re.escape(owner) + r'\.?\s*All rights reserved\.')


def has_copyright(text: str, year: int, owner: str) -> bool:
    return copyright_pattern(year, owner).search(text) is not None


def has_license(text: str) -> bool:
    return LICENSE_MARKER in text


class CopyrightCheck(FileCheck):
    """Check that the copyright line names the current year and the configured owner."""

    def files(self, settings: Settings) -> FileSet:
        return FileSet(settings.header_files)

    def check(self, path: Path, settings: Settings, root: Optional[Path] = None) -> List[Issue]:
        full_path = resolve(path, root)
        if not full_path.is_file():
            return []

        issues = IssueList()
        if not has_copyright(read_text_file(full_path), settings.current_year, settings.copyright_owner):
            issues.append(E_MISSING_COPYRIGHT.at(path))
        return issues.issues


class LicenseHeaderCheck(FileCheck):
    """Check that the Apache License 2.0 notice is present."""

    def files(self, settings: Settings) -> FileSet:
        return FileSet(settings.header_files)

    def check(self, path: Path, settings: Settings, root: Optional[Path] = None) -> List[Issue]:
        full_path = resolve(path, root)
        if not full_path.is_file():
            return []

        issues = IssueList()
        if not has_license(read_text_file(full_path)):
            issues.append(E_MISSING_LICENSE.at(path))
        return issues.issues
