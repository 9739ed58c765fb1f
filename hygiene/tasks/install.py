import os
import shutil
import stat
import sys
from pathlib import Path

from hygiene.git_changes import NotARepository, StagedChanges
from hygiene.messages import error, info, success

HOOK_MARKER = "# installed by hygiene"


def hook_script(entry_point: Path) -> str:
    return "\n".join([
        "#!/bin/sh",
        HOOK_MARKER,
        f'exec "{sys.executable}" "{entry_point}" check',
        "",
    ])


def install(repo_path: Path, entry_point: Path, force: bool = False) -> int:
    """
    Installs the pre-commit hook into the repository containing `repo_path`.

    An existing hook that was not installed by us is backed up to
    `pre-commit.bak`, or replaced without a backup with `force`.
    """
    try:
        changes = StagedChanges(repo_path)
    except NotARepository as e:
        error(str(e))
        return 1

    try:
        hooks_dir = Path(changes.repo.git_dir) / "hooks"
    finally:
        changes.close()

    hooks_dir.mkdir(parents=True, exist_ok=True)
    dest = hooks_dir / "pre-commit"

    if dest.exists() and not force:
        current = dest.read_text(encoding='utf-8', errors='replace')
        if HOOK_MARKER not in current:
            backup = dest.with_suffix(".bak")
            shutil.copy2(dest, backup)
            info(f"Backed up existing hook to {backup}")

    dest.write_text(hook_script(entry_point.resolve()), encoding='utf-8')

    # Make executable on Unix
    if os.name != "nt":
        dest.chmod(dest.stat().st_mode | stat.S_IEXEC | stat.S_IXGRP | stat.S_IXOTH)

    success(f"Installed pre-commit hook to {dest}")
    return 0
