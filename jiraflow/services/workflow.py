"""Issue lifecycle workflow: login, list, open, move, start and finish issues.

Every command resolves the issue against the user's open issues, then runs
an ordered sequence of independent steps (assign, transition, git). A step
that is declined is skipped; a step that fails is reported and the next
step still runs. Nothing is rolled back. Errors never escape a command:
they are printed as one line and recorded on the returned CommandResult.
"""

import functools
import logging
import webbrowser
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Callable, List

from jiraflow.adapters.base import IssueTrackerAdapter
from jiraflow.adapters.harvest import HarvestClient
from jiraflow.adapters.jira import JiraAdapter
from jiraflow.config import JiraConfig
from jiraflow.configure import ask_jira_config, jira_config_fields
from jiraflow.errors import JiraflowError, ValidationError
from jiraflow.models import Issue
from jiraflow.prompt import Prompt, required
from jiraflow.services.cache import IssueCache
from jiraflow.services.credentials import CredentialStore, HarvestCredentials, JiraCredentials
from jiraflow.services.git import GitStack
from jiraflow.services.issues import choose_project_user_issue, load_project_user_issues

LOG = logging.getLogger("jiraflow.services.workflow")

ISSUE_TABLE_HEADERS = ["Issue #", "Type", "Status", "Summary"]

TrackerFactory = Callable[[str, JiraCredentials], IssueTrackerAdapter]


class StepOutcome(str, Enum):
    SKIPPED = "skipped"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


@dataclass
class StepResult:
    name: str
    outcome: StepOutcome
    value: str | None = None


@dataclass
class CommandResult:
    """Outcome of one command: its steps in order and reported errors."""

    command: str
    steps: List[StepResult] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors

    def step(self, name: str) -> StepResult | None:
        for step in self.steps:
            if step.name == name:
                return step
        return None


def _default_tracker_factory(server: str, credentials: JiraCredentials) -> IssueTrackerAdapter:
    return JiraAdapter(server, credentials.username, credentials.password)


def command(func: Callable[..., Any]) -> Callable[..., CommandResult]:
    """Run func(self, result, ...) and report any error it raises."""

    @functools.wraps(func)
    def wrapper(self: "IssueWorkflow", *args: Any, **kwargs: Any) -> CommandResult:
        result = CommandResult(command=func.__name__)
        try:
            func(self, result, *args, **kwargs)
        except Exception as e:
            self._report(result, e)
        return result

    return wrapper


class IssueWorkflow:
    """Coordinates Jira, Harvest, git and the prompt for one command."""

    def __init__(
        self,
        jira_config: JiraConfig,
        credentials: CredentialStore,
        prompt: Prompt,
        git: GitStack,
        tracker_factory: TrackerFactory = _default_tracker_factory,
        harvest_factory: Callable[[], HarvestClient] = HarvestClient,
        cache: IssueCache | None = None,
        config_writer: Callable[[JiraConfig], Path] | None = None,
        open_browser: Callable[[str], bool] = webbrowser.open,
    ) -> None:
        self._jira = jira_config
        self._credentials = credentials
        self._prompt = prompt
        self._git = git
        self._tracker_factory = tracker_factory
        self._harvest_factory = harvest_factory
        self._cache = cache if cache is not None else IssueCache()
        self._config_writer = config_writer
        self._open_browser = open_browser
        self._tracker_instance: IssueTrackerAdapter | None = None

    # -- plumbing ---------------------------------------------------------

    def _report(self, result: CommandResult, error: BaseException) -> None:
        message = str(error) or error.__class__.__name__
        result.errors.append(message)
        self._prompt.error(message)
        LOG.debug("%s: %s", result.command, message, exc_info=error)

    def _tracker(self) -> IssueTrackerAdapter:
        """Jira adapter; raises AuthenticationRequiredError without credentials."""
        credentials = self._credentials.jira_credentials()
        if self._tracker_instance is None:
            self._tracker_instance = self._tracker_factory(self._jira.server_url, credentials)
        return self._tracker_instance

    def _issues(self) -> List[Issue]:
        tracker = self._tracker()
        return load_project_user_issues(tracker, self._jira.require_project_key(), self._cache)

    def _select(self, issue_key: str | None) -> str:
        return choose_project_user_issue(self._issues(), self._prompt, issue_key)

    def _step(self, result: CommandResult, name: str, func: Callable[..., StepResult], *args: Any) -> StepResult:
        try:
            step = func(*args)
        except JiraflowError as e:
            self._report(result, e)
            step = StepResult(name, StepOutcome.FAILED)
        result.steps.append(step)
        return step

    # -- shared sub-flows -------------------------------------------------

    def _assign(self, issue_key: str) -> StepResult:
        if not self._prompt.confirm("Assign the issue to someone else?", default=False):
            return StepResult("assign", StepOutcome.SKIPPED)

        tracker = self._tracker()
        account_ids: dict[str, str] = {}
        for user in tracker.list_assignable_users(self._jira.require_project_key()):
            if not user.display_name or not user.account_id:
                continue
            account_ids[user.display_name] = user.account_id

        member = self._prompt.choice("Select the team member to assign the issue to", list(account_ids))
        if member is None or member not in account_ids:
            raise ValidationError("Unable to locate the users account ID")

        tracker.change_assignee(issue_key, account_ids[member])
        self._prompt.success(f'Issue {issue_key} has successfully been assigned to "{member}"!')
        return StepResult("assign", StepOutcome.SUCCEEDED, member)

    def _transition(self, issue_key: str) -> StepResult:
        tracker = self._tracker()
        names = [t.name for t in tracker.list_transitions(issue_key) if t.name]

        chosen = self._prompt.choice("Move the issue transition state", names)
        if chosen is None:
            LOG.info("No transition applied to %s", issue_key)
            return StepResult("transition", StepOutcome.SKIPPED)
        if chosen not in names:
            raise ValidationError(f"{chosen} is not an available transition for {issue_key}!")

        tracker.apply_transition(issue_key, chosen)
        self._prompt.success(f'Issue {issue_key} has successfully been transitioned to "{chosen}"!')
        return StepResult("transition", StepOutcome.SUCCEEDED, chosen)

    def _create_branch(self, issue_key: str, base_branch: str) -> StepResult:
        if not self._prompt.confirm(f"Create a {issue_key} feature branch?", default=True):
            return StepResult("branch", StepOutcome.SKIPPED)
        if not self._git.checkout_new(issue_key, base_branch):
            return StepResult("branch", StepOutcome.FAILED)
        self._prompt.success(
            f"The {issue_key} branch has successfully been created off of {base_branch}!"
        )
        return StepResult("branch", StepOutcome.SUCCEEDED, issue_key)

    def _merge_branch(self, issue_key: str, main_branch: str, main_origin: str) -> StepResult:
        if not self._prompt.confirm(f"Merge the {issue_key} branch into the {main_branch} branch?", default=False):
            return StepResult("merge", StepOutcome.SKIPPED)
        merged = (
            self._git.checkout(main_branch, origin=main_origin)
            and self._git.pull(main_origin, main_branch)
            and self._git.merge(issue_key)
        )
        if not merged:
            return StepResult("merge", StepOutcome.FAILED)
        self._prompt.success(f"The {issue_key} was successfully merged into the {main_branch} branch!")
        return StepResult("merge", StepOutcome.SUCCEEDED, main_branch)

    # -- commands ---------------------------------------------------------

    @command
    def login(self, result: CommandResult, reauthenticate: bool = False) -> None:
        """Store Jira username + API token (when missing or forced) and verify them."""
        self._jira.require_cloud_host()
        if not self._credentials.has_jira() or reauthenticate:
            username = self._prompt.ask(
                "Input Jira username:", validator=required("The Jira username is required!")
            )
            token = self._prompt.ask(
                "Input Jira API token:",
                hidden=True,
                validator=required("The Jira API token is required!"),
            )
            self._credentials.save_jira(JiraCredentials(username=username, password=token))
            self._tracker_instance = None
            result.steps.append(StepResult("credentials", StepOutcome.SUCCEEDED))

        display_name = self._tracker().myself()
        if display_name:
            self._prompt.success(f"{display_name} is currently logged in!")
        result.steps.append(StepResult("verify", StepOutcome.SUCCEEDED, display_name))

    @command
    def harvest_login(self, result: CommandResult, reauthenticate: bool = False) -> None:
        """Store Harvest account id + token (when missing or forced) and verify them."""
        if not self._credentials.has_harvest() or reauthenticate:
            account_id = self._prompt.ask(
                "Input Harvest account ID:", validator=required("The Harvest account ID is required!")
            )
            token = self._prompt.ask(
                "Input Harvest personal access token:",
                hidden=True,
                validator=required("The Harvest token is required!"),
            )
            self._credentials.save_harvest(HarvestCredentials(account_id=account_id, token=token))
            result.steps.append(StepResult("credentials", StepOutcome.SUCCEEDED))

        credentials = self._credentials.harvest_credentials()
        user = self._harvest_factory().authenticate(credentials.account_id, credentials.token)
        self._prompt.success(f"{user.display_name} is currently logged in to Harvest!")
        result.steps.append(StepResult("verify", StepOutcome.SUCCEEDED, user.display_name))

    @command
    def configure(self, result: CommandResult) -> None:
        """Ask the jira settings (in-place defaults) and write them back."""
        fields = jira_config_fields(self._credentials.has_harvest)
        self._jira = ask_jira_config(self._prompt, self._jira, fields)
        self._cache.clear()
        if self._config_writer is not None:
            path = self._config_writer(self._jira)
            self._prompt.success(f"Configuration saved to {path}")
        result.steps.append(StepResult("configure", StepOutcome.SUCCEEDED))

    @command
    def list_issues(self, result: CommandResult, status: str | None = None) -> None:
        """Render the user's open issues, optionally only those in status."""
        self._prompt.banner()
        rows = []
        for issue in self._issues():
            if status is not None and issue.status != status:
                continue
            rows.append([issue.key, issue.issue_type, issue.status, issue.summary])
        self._prompt.table(ISSUE_TABLE_HEADERS, rows)
        result.steps.append(StepResult("list", StepOutcome.SUCCEEDED, str(len(rows))))

    @command
    def open_issue(self, result: CommandResult, issue_key: str | None = None) -> None:
        """Open the issue page in the browser."""
        issue_key = self._select(issue_key)
        url = f"{self._jira.server_url}/browse/{issue_key}"
        if self._open_browser(url):
            result.steps.append(StepResult("open", StepOutcome.SUCCEEDED, url))
        else:
            self._prompt.warning(f"Unable to open a browser, visit {url}")
            result.steps.append(StepResult("open", StepOutcome.FAILED, url))

    @command
    def move_issue(self, result: CommandResult, issue_key: str | None = None) -> None:
        """Optionally reassign the issue, then move it through a transition."""
        self._prompt.banner()
        issue_key = self._select(issue_key)
        self._step(result, "assign", self._assign, issue_key)
        self._step(result, "transition", self._transition, issue_key)

    @command
    def start_issue(
        self,
        result: CommandResult,
        issue_key: str | None = None,
        base_branch: str = "master",
    ) -> None:
        """Transition the issue, then create its feature branch off base_branch."""
        self._prompt.banner()
        issue_key = self._select(issue_key)
        self._step(result, "transition", self._transition, issue_key)
        self._step(result, "branch", self._create_branch, issue_key, base_branch)

    @command
    def finish_issue(
        self,
        result: CommandResult,
        issue_key: str | None = None,
        main_branch: str = "master",
        main_origin: str = "origin",
    ) -> None:
        """Reassign and transition the issue, then merge its branch into main_branch."""
        self._prompt.banner()
        issue_key = self._select(issue_key)
        self._step(result, "assign", self._assign, issue_key)
        self._step(result, "transition", self._transition, issue_key)
        self._step(result, "merge", self._merge_branch, issue_key, main_branch, main_origin)
