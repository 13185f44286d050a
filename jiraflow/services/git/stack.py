"""Git stack used by the workflow: each operation reports a success flag."""

import logging
from pathlib import Path

from jiraflow.services.git._run import GitRunnerError
from jiraflow.services.git.branches import checkout_branch, create_branch
from jiraflow.services.git.push_pull import merge_branch, run_git_pull

LOG = logging.getLogger("jiraflow.services.git")


class GitStack:
    """Runs git in repo_dir (cwd when None); failures become False plus a
    warning in the log."""

    def __init__(self, repo_dir: Path | None = None) -> None:
        self._repo_dir = repo_dir

    def checkout_new(self, branch: str, base_ref: str) -> bool:
        try:
            create_branch(branch, base_ref, repo_dir=self._repo_dir, log=LOG)
        except GitRunnerError as e:
            LOG.warning("Could not create branch %s from %s: %s", branch, base_ref, e)
            return False
        return True

    def checkout(self, branch: str, origin: str = "origin") -> bool:
        try:
            checkout_branch(branch, origin=origin, repo_dir=self._repo_dir, log=LOG)
        except GitRunnerError as e:
            LOG.warning("Could not checkout %s: %s", branch, e)
            return False
        return True

    def pull(self, origin: str, branch: str) -> bool:
        try:
            run_git_pull(origin, branch, repo_dir=self._repo_dir, log=LOG)
        except GitRunnerError as e:
            LOG.warning("Could not pull %s/%s: %s", origin, branch, e)
            return False
        return True

    def merge(self, branch: str) -> bool:
        try:
            merge_branch(branch, repo_dir=self._repo_dir, log=LOG)
        except GitRunnerError as e:
            LOG.warning("Could not merge %s: %s", branch, e)
            return False
        return True
