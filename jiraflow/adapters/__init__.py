"""Remote service adapters (Jira issue tracker, Harvest time tracking)."""

from jiraflow.adapters.base import IssueTrackerAdapter, IssueTrackerError
from jiraflow.adapters.harvest import HarvestClient, HarvestError
from jiraflow.adapters.jira import JiraAdapter

__all__ = [
    "HarvestClient",
    "HarvestError",
    "IssueTrackerAdapter",
    "IssueTrackerError",
    "JiraAdapter",
]
