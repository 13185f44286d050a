"""Local branch operations: create from a base ref, checkout."""

import logging
from pathlib import Path

from jiraflow.services.git._run import GitRunnerError, _run_git


def create_branch(
    branch_name: str,
    base_ref: str,
    repo_dir: Path | None = None,
    log: logging.Logger | None = None,
) -> None:
    """Create branch_name off base_ref and check it out (git checkout -b)."""
    cwd = Path(repo_dir) if repo_dir is not None else Path.cwd()
    _run_git(["checkout", "-b", branch_name, base_ref], cwd=cwd, log=log)
    if log:
        log.info("Created branch %s from %s", branch_name, base_ref)


def checkout_branch(
    branch_name: str,
    origin: str = "origin",
    repo_dir: Path | None = None,
    log: logging.Logger | None = None,
) -> None:
    """Checkout the given branch (must exist locally or on the remote)."""
    cwd = Path(repo_dir) if repo_dir is not None else Path.cwd()
    try:
        _run_git(["checkout", branch_name], cwd=cwd, log=log)
    except GitRunnerError:
        _run_git(["fetch", origin, branch_name], cwd=cwd, log=log)
        _run_git(["checkout", branch_name], cwd=cwd, log=log)
    if log:
        log.info("Checked out branch %s", branch_name)
