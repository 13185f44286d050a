"""Pull from a remote and merge a local branch into the current one."""

import logging
from pathlib import Path

from jiraflow.services.git._run import _run_git


def run_git_pull(
    origin: str,
    branch: str,
    repo_dir: Path | None = None,
    log: logging.Logger | None = None,
) -> None:
    """Run git pull <origin> <branch> in the repository."""
    cwd = Path(repo_dir) if repo_dir is not None else Path.cwd()
    _run_git(["pull", origin, branch], cwd=cwd, log=log)
    if log:
        log.info("Pulled %s/%s", origin, branch)


def merge_branch(
    branch_name: str,
    repo_dir: Path | None = None,
    log: logging.Logger | None = None,
) -> None:
    """Merge branch_name into the currently checked out branch."""
    cwd = Path(repo_dir) if repo_dir is not None else Path.cwd()
    _run_git(["merge", branch_name], cwd=cwd, log=log)
    if log:
        log.info("Merged %s", branch_name)
