"""
Sources of the file set a run checks:
  - the files staged in the git index (what a pre-commit hook sees),
  - an explicit list of files (what the pre-commit framework passes in).
"""

import logging
from pathlib import Path
from typing import List, Optional, Protocol

from git import Repo
from git.exc import GitCommandError, NoSuchPathError, InvalidGitRepositoryError

logger = logging.getLogger(__name__)


class NotARepository(Exception):
    def __init__(self, path: Path) -> None:
        super().__init__(f"Not inside a git working tree: {path}")
        self.path = path


class ChangeProvider(Protocol):
    root: Path

    def changed_files(self) -> List[Path]:
        """
        Returns the paths to check, relative to `root`, in a stable order.
        Paths may refer to files that no longer exist.
        """
        ...

    def close(self) -> None:
        ...


class StagedChanges:
    """Files added, modified, renamed or deleted in the index, relative to HEAD."""

    def __init__(self, path: Path = Path('.')) -> None:
        try:
            self.repo = Repo(path, search_parent_directories=True)
        except (InvalidGitRepositoryError, NoSuchPathError) as e:
            raise NotARepository(path) from e

        if self.repo.working_tree_dir is None:
            self.repo.close()
            raise NotARepository(path)
        self.root = Path(self.repo.working_tree_dir)

    def changed_files(self) -> List[Path]:
        # -z keeps non-ASCII names unquoted. Works before the first commit too.
        try:
            output = self.repo.git.diff('--cached', '--name-only', '-z')
        except GitCommandError as e:
            raise NotARepository(self.root) from e
        files = [Path(name) for name in output.split('\0') if name.strip()]
        logger.debug(f"{len(files)} staged file(s) in {self.root}")
        return files

    def close(self) -> None:
        self.repo.close()


class ExplicitFiles:
    """A fixed list of files, made relative to `root` where possible."""

    def __init__(self, paths: List[Path], root: Optional[Path] = None) -> None:
        self.root = (root or Path('.')).resolve()
        self.paths = [self._relative(Path(p)) for p in paths]

    def _relative(self, path: Path) -> Path:
        absolute = path if path.is_absolute() else Path.cwd() / path
        try:
            return absolute.resolve().relative_to(self.root)
        except ValueError:
            return absolute.resolve()

    def changed_files(self) -> List[Path]:
        return list(self.paths)

    def close(self) -> None:
        pass
