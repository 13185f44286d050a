"""Abstract base for issue tracker adapters."""

from abc import ABC, abstractmethod
from typing import List

from jiraflow.errors import RemoteServiceError
from jiraflow.models import AssignableUser, Issue, Transition


class IssueTrackerError(RemoteServiceError):
    """Raised when an issue tracker API call fails."""

    pass


class IssueTrackerAdapter(ABC):
    """Narrow interface to the remote issue tracker used by the workflow."""

    @abstractmethod
    def myself(self) -> str:
        """Return the display name of the authenticated user."""
        ...

    @abstractmethod
    def search_issues(self, jql: str) -> List[Issue]:
        """Run a query and return issues in server order."""
        ...

    @abstractmethod
    def list_transitions(self, issue_key: str) -> List[Transition]:
        """List transitions valid in the issue's current state."""
        ...

    @abstractmethod
    def apply_transition(self, issue_key: str, transition_name: str) -> None:
        """Move the issue through the named transition."""
        ...

    @abstractmethod
    def list_assignable_users(self, project_key: str) -> List[AssignableUser]:
        """List users assignable to issues in the project."""
        ...

    @abstractmethod
    def change_assignee(self, issue_key: str, account_id: str) -> None:
        """Assign the issue to the given account."""
        ...
