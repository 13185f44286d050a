"""Shared fixtures: scripted prompt, stub tracker, workflow factory."""

from pathlib import Path
from typing import Any, Callable, Dict, List
from unittest.mock import MagicMock, Mock

import pytest

from jiraflow.adapters.base import IssueTrackerAdapter
from jiraflow.config import JiraConfig
from jiraflow.models import AssignableUser, Issue, Transition
from jiraflow.services.cache import IssueCache
from jiraflow.services.credentials import CredentialStore, JiraCredentials
from jiraflow.services.git import GitStack
from jiraflow.services.workflow import IssueWorkflow


class ScriptedPrompt:
    """Prompt double answering from fixed scripts and recording output."""

    def __init__(
        self,
        confirms: Dict[str, bool] | None = None,
        choices: Dict[str, Any] | None = None,
        answers: List[str] | None = None,
    ) -> None:
        self.confirms = dict(confirms or {})
        self.choices = dict(choices or {})
        self.answers = list(answers or [])
        self.asked: List[str] = []
        self.offered: Dict[str, List[str]] = {}
        self.successes: List[str] = []
        self.warnings: List[str] = []
        self.errors: List[str] = []
        self.tables: List[tuple] = []
        self.banners = 0

    def confirm(self, question: str, default: bool = False) -> bool:
        self.asked.append(question)
        return self.confirms.get(question, default)

    def choice(self, question: str, options: List[str]) -> str | None:
        self.asked.append(question)
        self.offered[question] = list(options)
        if not options:
            return None
        answer = self.choices.get(question, options[0])
        return answer(options) if callable(answer) else answer

    def ask(self, question: str, default: str | None = None, hidden: bool = False, validator=None) -> str:
        self.asked.append(question)
        value = self.answers.pop(0) if self.answers else (default or "")
        return validator(value) if validator else value

    def banner(self) -> None:
        self.banners += 1

    def table(self, headers, rows) -> None:
        self.tables.append((list(headers), [list(r) for r in rows]))

    def success(self, message: str) -> None:
        self.successes.append(message)

    def warning(self, message: str) -> None:
        self.warnings.append(message)

    def error(self, message: str) -> None:
        self.errors.append(message)


@pytest.fixture
def issues() -> List[Issue]:
    return [
        Issue("A-1", "Task", "Open", "Write the docs"),
        Issue("A-2", "Bug", "In Progress", "Fix the login form"),
    ]


@pytest.fixture
def tracker(issues: List[Issue]) -> MagicMock:
    t = MagicMock(spec=IssueTrackerAdapter)
    t.myself.return_value = "Jane Dev"
    t.search_issues.return_value = issues
    t.list_transitions.return_value = [Transition("11", "Start Progress"), Transition("21", "Done")]
    t.list_assignable_users.return_value = [
        AssignableUser("Jane Dev", "acc-1"),
        AssignableUser("John Roe", "acc-2"),
        AssignableUser(None, "acc-3"),
    ]
    return t


@pytest.fixture
def git() -> Mock:
    g = Mock(spec=GitStack)
    g.checkout_new.return_value = True
    g.checkout.return_value = True
    g.pull.return_value = True
    g.merge.return_value = True
    return g


@pytest.fixture
def credentials(tmp_path: Path) -> CredentialStore:
    store = CredentialStore(tmp_path / "creds")
    store.save_jira(JiraCredentials(username="jane@example.com", password="api-token"))
    return store


@pytest.fixture
def jira_config() -> JiraConfig:
    return JiraConfig(cloud_host="acme.atlassian.net", project_key="A")


@pytest.fixture
def make_workflow(
    tracker: MagicMock,
    git: Mock,
    credentials: CredentialStore,
    jira_config: JiraConfig,
) -> Callable[..., IssueWorkflow]:
    """Build an IssueWorkflow around a ScriptedPrompt and the stubs above."""

    def _make(prompt: ScriptedPrompt, **overrides: Any) -> IssueWorkflow:
        kwargs: Dict[str, Any] = {
            "jira_config": jira_config,
            "credentials": credentials,
            "prompt": prompt,
            "git": git,
            "tracker_factory": lambda server, creds: tracker,
            "cache": IssueCache(),
            "open_browser": Mock(return_value=True),
        }
        kwargs.update(overrides)
        return IssueWorkflow(**kwargs)

    return _make


@pytest.fixture
def scripted() -> type:
    """The ScriptedPrompt class, for tests that script their own answers."""
    return ScriptedPrompt
