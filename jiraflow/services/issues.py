"""Resolve the user's open issues in the configured project and select one."""

import logging
from typing import List, Protocol

from jiraflow.adapters.base import IssueTrackerAdapter
from jiraflow.errors import ValidationError
from jiraflow.models import Issue
from jiraflow.services.cache import PROJECT_USER_ISSUES_KEY, IssueCache

LOG = logging.getLogger("jiraflow.services.issues")


class ChoicePrompt(Protocol):
    def choice(self, question: str, options: List[str]) -> str | None: ...


def _quote(value: str) -> str:
    return '"' + value.replace("\\", "\\\\").replace('"', '\\"') + '"'


def build_my_issues_jql(project_key: str) -> str:
    """Unresolved issues of the project assigned to the current user,
    highest priority first."""
    return (
        f"project = {_quote(project_key)}"
        " AND resolution = Unresolved"
        " AND assignee IN (currentUser())"
        " ORDER BY priority DESC"
    )


def load_project_user_issues(
    tracker: IssueTrackerAdapter,
    project_key: str,
    cache: IssueCache,
) -> List[Issue]:
    """Return the user's open issues, served from cache within its window."""

    def _fetch() -> List[Issue]:
        jql = build_my_issues_jql(project_key)
        LOG.debug("Searching issues: %s", jql)
        return list(tracker.search_issues(jql))

    return cache.get_or_refresh(PROJECT_USER_ISSUES_KEY, _fetch) or []


def issue_keys(issues: List[Issue]) -> List[str]:
    return [issue.key for issue in issues]


def choose_project_user_issue(
    issues: List[Issue],
    prompt: ChoicePrompt,
    issue_key: str | None = None,
) -> str:
    """Validate issue_key against the resolved set, or ask the user to pick one.

    Raises:
        ValidationError: If the key is not one of the user's open issues, or
            no key was given and there is nothing to choose from.
    """
    options = issue_keys(issues)
    if issue_key is None:
        if not options:
            raise ValidationError("There are no open issues assigned to you in this project!")
        issue_key = prompt.choice("Select the project issue number", options)
    if issue_key is None or issue_key not in options:
        raise ValidationError(f"{issue_key} is an invalid issue number!")
    return issue_key
