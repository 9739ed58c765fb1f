import os
import stat
import unittest
import tempfile
from pathlib import Path

import pytest

git = pytest.importorskip("git")

from hygiene.git_changes import ExplicitFiles, NotARepository, StagedChanges
from hygiene.tasks.install import HOOK_MARKER, install


class GitTestBase(unittest.TestCase):

    def setUp(self):
        self.temp_dir = tempfile.TemporaryDirectory()
        self.root = Path(self.temp_dir.name).resolve()
        self.repo = git.Repo.init(self.root)
        with self.repo.config_writer() as config:
            config.set_value("user", "name", "Test User")
            config.set_value("user", "email", "test@example.com")

    def tearDown(self):
        self.repo.close()
        self.temp_dir.cleanup()

    def _write_file(self, filename, content):
        path = self.root / filename
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
        return path

    def _stage_file(self, filename, content):
        self._write_file(filename, content)
        self.repo.index.add([filename])

    def _commit_file(self, filename, content, commit_msg="Commit"):
        self._stage_file(filename, content)
        self.repo.index.commit(commit_msg)

    def _staged(self, path=None):
        changes = StagedChanges(path or self.root)
        try:
            return changes.changed_files()
        finally:
            changes.close()


class TestStagedChanges(GitTestBase):

    def test_no_changes(self):
        self._commit_file("main.go", "package main\n")
        self.assertEqual(self._staged(), [])

    def test_staged_files_only(self):
        self._commit_file("main.go", "package main\n")
        self._stage_file("pkg/b.go", "package pkg\n")
        self._stage_file("a.py", "import os\n")
        self._write_file("unstaged.go", "package main\n")
        self.assertEqual(self._staged(), [Path("a.py"), Path("pkg/b.go")])

    def test_before_first_commit(self):
        self._stage_file("main.go", "package main\n")
        self.assertEqual(self._staged(), [Path("main.go")])

    def test_deleted_file_is_listed(self):
        self._commit_file("old.go", "package main\n")
        self.repo.index.remove(["old.go"], working_tree=True)
        self.assertEqual(self._staged(), [Path("old.go")])
        self.assertFalse((self.root / "old.go").exists())

    def test_root_from_subdirectory(self):
        self._commit_file("sub/main.go", "package main\n")
        self._stage_file("sub/other.go", "package main\n")
        changes = StagedChanges(self.root / "sub")
        try:
            self.assertEqual(changes.root, self.root)
            self.assertEqual(changes.changed_files(), [Path("sub/other.go")])
        finally:
            changes.close()

    def test_file_with_space_in_name(self):
        self._stage_file("my file.go", "package main\n")
        self.assertEqual(self._staged(), [Path("my file.go")])


class TestInstall(GitTestBase):

    def test_install_writes_executable_hook(self):
        entry_point = self.root / "hygiene.py"
        self.assertEqual(install(self.root, entry_point), 0)

        hook = self.root / ".git" / "hooks" / "pre-commit"
        content = hook.read_text(encoding="utf-8")
        self.assertIn(HOOK_MARKER, content)
        self.assertIn(str(entry_point), content)
        if os.name != "nt":
            self.assertTrue(hook.stat().st_mode & stat.S_IEXEC)

    def test_existing_hook_is_backed_up(self):
        hook = self.root / ".git" / "hooks" / "pre-commit"
        hook.parent.mkdir(parents=True, exist_ok=True)
        hook.write_text("#!/bin/sh\necho custom\n", encoding="utf-8")

        self.assertEqual(install(self.root, self.root / "hygiene.py"), 0)
        self.assertEqual((hook.parent / "pre-commit.bak").read_text(encoding="utf-8"), "#!/bin/sh\necho custom\n")

    def test_reinstall_does_not_back_up_own_hook(self):
        install(self.root, self.root / "hygiene.py")
        install(self.root, self.root / "hygiene.py")
        self.assertFalse((self.root / ".git" / "hooks" / "pre-commit.bak").exists())


def test_not_a_repository(tmp_path):
    with pytest.raises(NotARepository):
        StagedChanges(tmp_path / "does-not-exist")


def test_explicit_files_are_made_relative(tmp_path):
    root = tmp_path.resolve()
    outside = tmp_path.parent.resolve() / "elsewhere.go"
    files = ExplicitFiles([root / "a.go", root / "pkg" / "b.go", outside], root=root)
    assert files.root == root
    assert files.changed_files() == [Path("a.go"), Path("pkg/b.go"), outside]
