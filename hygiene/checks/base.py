import abc
from typing import Any, Dict, Iterator, List, Mapping, Optional, Tuple
from dataclasses import dataclass, field
from pathlib import Path
import enum
import uuid

from hygiene.config import Settings
from hygiene.io import FileSet


class Severity(enum.Enum):
    """
    Severity levels for checks.
    """
    ERROR = "error"
    CRITICAL = "critical"


@dataclass(frozen=True)
class IssueType:
    """
    Represents a type of issue.

    `hint` is a remediation template printed once per failing run. It is
    formatted with the settings-derived context given to the reporter.
    """
    id: str
    message: str
    severity: Severity = Severity.ERROR
    hint: str | None = field(default=None, compare=False)

    def __post_init__(self):
        # Verify that the ID is a valid UUID
        if not isinstance(self.id, str):
            raise ValueError(f"Invalid ID: {self.id}")
        try:
            uuid.UUID(self.id)
        except ValueError:
            raise ValueError(f"Invalid UUID: {self.id}")

    def make(self, **kwargs) -> 'Issue':
        """
        Creates an Issue of this type.
        """
        return Issue(self, data=kwargs)

    def at(self, path: Path) -> 'Issue':
        """
        Returns an Issue with the specified path.
        """
        return Issue(self).at(path)


@dataclass
class Issue:
    """
    Represents an issue found during a check.
    """
    issue_type: IssueType
    data: Mapping[str, Any] | None = None
    path: Path | None = None

    def at(self, path: Path) -> 'Issue':
        """
        Returns an Issue with the specified path.
        """
        if self.path is not None and self.path != path:
            raise ValueError("Cannot change the path of an existing issue.")
        self.path = path
        return self

    def describe(self) -> str:
        msg = str(self.path) if self.path is not None else ''
        data_str = ', '.join(
            f"{k}={v}" for k, v in self.data.items() if v is not None
        ) if self.data else ''
        if data_str:
            msg += f" ({data_str})"
        return msg


@dataclass
class IssueList:
    """
    Represents a list of issues found during a check.
    """
    issues: List[Issue] = field(default_factory=list)

    def append(self, issue: Issue) -> None:
        """
        Adds an issue to the list.
        """
        if self.issues and self.issues[-1] == issue:
            return
        self.issues.append(issue)

    def __iter__(self):
        """
        Returns an iterator over the issues.
        """
        return iter(self.issues)


@dataclass
class CheckReport:
    """
    Aggregated results of a run: issue type -> issues, in the order found.
    """
    results: Dict[IssueType, List[Issue]] = field(default_factory=dict)

    def add(self, issue: Issue) -> None:
        issues = self.results.setdefault(issue.issue_type, [])
        if any(i.path == issue.path for i in issues):
            return
        issues.append(issue)

    def extend(self, issues: List[Issue] | IssueList) -> None:
        for issue in issues:
            self.add(issue)

    def merge(self, other: 'CheckReport') -> 'CheckReport':
        for issues in other.results.values():
            self.extend(issues)
        return self

    def files(self, issue_type: IssueType) -> List[Path]:
        return [i.path for i in self.results.get(issue_type, []) if i.path is not None]

    def items(self) -> Iterator[Tuple[IssueType, List[Issue]]]:
        for issue_type, issues in self.results.items():
            if issues:
                yield issue_type, issues

    @property
    def failed(self) -> bool:
        return any(True for _ in self.items())


class FileCheck(abc.ABC):
    """
    A check applied to every existing file of the set it selects.
    """

    @abc.abstractmethod
    def files(self, settings: Settings) -> FileSet:
        raise NotImplementedError()

    @abc.abstractmethod
    def check(self, path: Path, settings: Settings, root: Optional[Path] = None) -> List[Issue]:
        raise NotImplementedError()

    def run(self, paths: List[Path], settings: Settings, root: Optional[Path] = None) -> CheckReport:
        report = CheckReport()
        for path in self.files(settings).filter(paths):
            report.extend(self.check(path, settings, root=root))
        return report


def resolve(path: Path, root: Optional[Path]) -> Path:
    return root / path if root is not None else path
