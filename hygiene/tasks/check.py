from __future__ import annotations
from typing import Any, Dict, List, Optional
from pathlib import Path
import logging

from hygiene.base import Scope
from hygiene.checks.base import CheckReport, FileCheck, Issue
from hygiene.checks.file_headers import CopyrightCheck, LicenseHeaderCheck
from hygiene.checks.formatting import Formatter, FormattingError, GoFormattingCheck
from hygiene.checks.suites import FocusedTestCheck, SuiteHookCheck
from hygiene.config import Settings, SettingsError, SETTINGS_FILE_NAME, load_settings
from hygiene.git_changes import ChangeProvider, ExplicitFiles, NotARepository, StagedChanges
from hygiene.messages import error, info

logger = logging.getLogger(__name__)

FAILURE_NOTICE = "pre-commit hook failed"

FORMATTING = "formatting"


def all_checks() -> Dict[str, FileCheck]:
    """
    The aggregated checks, in reporting order. Formatting runs before these.
    """
    return {
        "copyright": CopyrightCheck(),
        "license": LicenseHeaderCheck(),
        "suite_hook": SuiteHookCheck(),
        "focus": FocusedTestCheck(),
    }


def check_names() -> List[str]:
    return [FORMATTING] + list(all_checks().keys())


def hint_context(settings: Settings, issue: Issue | None = None) -> Dict[str, Any]:
    return {
        "year": settings.current_year,
        "owner": settings.copyright_owner,
        "settings_file": settings.source or SETTINGS_FILE_NAME,
        "suite_hook": settings.suite_hook,
        "focus_markers": ', '.join(settings.focus_markers),
        "file": issue.path if issue is not None else '<file>',
    }


def run_checks(
    provider: ChangeProvider,
    settings: Settings,
    formatter: Formatter | None = None,
    enabled_checks: List[str] | None = None,
) -> CheckReport:
    """
    Runs the checks over the provider's files.

    Raises FormattingError on the first misformatted file, before any other
    check runs. Otherwise returns the merged results of all other checks.
    """
    checks = all_checks()
    for check_name in enabled_checks or []:
        if check_name not in checks and check_name != FORMATTING:
            raise ValueError(f"Unknown check: {check_name}")
    check_set = set(enabled_checks) if enabled_checks else set(check_names())

    paths = provider.changed_files()
    root = provider.root

    if FORMATTING in check_set:
        GoFormattingCheck(formatter).enforce(paths, settings, root=root)

    report = CheckReport()
    for name, check in checks.items():
        if name not in check_set:
            continue
        logger.debug(f"Running {name} check")
        report.merge(check.run(paths, settings, root=root))
    return report


def report_issues(report: CheckReport, settings: Settings) -> None:
    context = hint_context(settings)
    for issue_type, issues in report.items():
        error(issue_type.message, *(f"  {issue.describe()}" for issue in issues))
        if issue_type.hint:
            info(issue_type.hint.format(**context))


def report_formatting(e: FormattingError, settings: Settings) -> None:
    issue = e.issue
    error(f"{issue.issue_type.message}", f"  {issue.describe()}")
    if issue.issue_type.hint:
        info(issue.issue_type.hint.format(**hint_context(settings, issue)))


def check_main(
    files: List[Path] | None = None,
    repo_path: Path = Path('.'),
    settings_path: Optional[Path] = None,
    enabled_checks: List[str] | None = None,
    provider: ChangeProvider | None = None,
    formatter: Formatter | None = None,
) -> int:
    """
    Main function of the hook. Returns the process exit code.

    Checks the staged files of the repository at `repo_path`, or `files` when
    given. The failure notice is printed on every way out of here except a clean
    pass, including exceptions and interrupts.
    """
    with Scope() as scope:
        guard = scope.on_exit(lambda: error(FAILURE_NOTICE))

        if provider is None:
            try:
                provider = ExplicitFiles(files, root=repo_path) if files else StagedChanges(repo_path)
            except NotARepository as e:
                error(str(e))
                return 1
        scope.defer(provider.close)

        try:
            settings = load_settings(provider.root, settings_path)
        except SettingsError as e:
            error(str(e))
            return 1

        try:
            report = run_checks(provider, settings, formatter=formatter, enabled_checks=enabled_checks)
        except FormattingError as e:
            report_formatting(e, settings)
            return 1
        except NotARepository as e:
            error(str(e))
            return 1

        if report.failed:
            report_issues(report, settings)
            return 1

        guard.cancel()
        return 0
