"""Data models for Jira issues, transitions and assignable users."""


class Issue:
    """Jira issue as seen by the workflow (transient, read-mostly copy)."""

    def __init__(
        self,
        key: str,
        issue_type: str,
        status: str,
        summary: str,
        assignee: str | None = None,
    ) -> None:
        self.key = key
        self.issue_type = issue_type or ""
        self.status = status or ""
        self.summary = summary or ""
        self.assignee = assignee

    def __repr__(self) -> str:
        return f"Issue({self.key!r}, status={self.status!r})"


class Transition:
    """Named edge valid in the issue's current state."""

    def __init__(self, id: str, name: str | None) -> None:
        self.id = id
        self.name = name


class AssignableUser:
    """User that can be assigned issues in a project."""

    def __init__(self, display_name: str | None, account_id: str | None) -> None:
        self.display_name = display_name
        self.account_id = account_id


class HarvestUser:
    """Authenticated Harvest user."""

    def __init__(self, id: int, first_name: str, last_name: str, email: str = "") -> None:
        self.id = id
        self.first_name = first_name
        self.last_name = last_name
        self.email = email

    @property
    def display_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()
