"""tools/core_git.py

Git metadata helpers.

Used to stamp the run receipt with the analyzed project's branch and commit,
so a promoted baseline can be traced back to the sources it was taken from.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

from tools.core_cmd import run_cmd


def _git(repo_path: Path, *args: str) -> Optional[str]:
    try:
        res = run_cmd(["git", "-C", str(repo_path), *args], print_stderr=False)
    except OSError:
        return None
    if res.exit_code != 0:
        return None
    return res.stdout.strip() or None


def get_git_commit(repo_path: Path) -> Optional[str]:
    """Best-effort HEAD commit of the repo at *repo_path*; None outside git."""
    return _git(repo_path, "rev-parse", "HEAD")


def get_git_branch(repo_path: Path) -> Optional[str]:
    """Best-effort current branch name; None when detached or outside git."""
    out = _git(repo_path, "rev-parse", "--abbrev-ref", "HEAD")
    if out == "HEAD":
        return None
    return out
