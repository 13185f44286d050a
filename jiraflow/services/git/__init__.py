"""Git operations: branch create/checkout, pull, merge."""

from jiraflow.services.git._run import GitRunnerError
from jiraflow.services.git.branches import checkout_branch, create_branch
from jiraflow.services.git.push_pull import merge_branch, run_git_pull
from jiraflow.services.git.stack import GitStack

__all__ = [
    "GitRunnerError",
    "GitStack",
    "checkout_branch",
    "create_branch",
    "merge_branch",
    "run_git_pull",
]
