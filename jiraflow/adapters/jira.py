"""Jira Cloud adapter (jira library + REST v3 enhanced search)."""

import json
import logging
from typing import Any, Callable, Dict, List, TypeVar

import requests
from jira import JIRA, JIRAError

from jiraflow.adapters.base import IssueTrackerAdapter, IssueTrackerError
from jiraflow.models import AssignableUser, Issue, Transition

LOG = logging.getLogger("jiraflow.adapters.jira")

SEARCH_FIELDS = ["issuetype", "status", "summary", "assignee", "priority"]
SEARCH_PAGE_SIZE = 100

T = TypeVar("T")


def _issue_from_api(data: Dict[str, Any]) -> Issue:
    fields = data.get("fields") or {}
    assignee = fields.get("assignee") or {}
    return Issue(
        key=data["key"],
        issue_type=(fields.get("issuetype") or {}).get("name", ""),
        status=(fields.get("status") or {}).get("name", ""),
        summary=fields.get("summary") or "",
        assignee=assignee.get("displayName"),
    )


def _transition_from_api(data: Dict[str, Any]) -> Transition:
    return Transition(id=str(data.get("id", "")), name=data.get("name"))


def _user_from_api(data: Dict[str, Any]) -> AssignableUser:
    return AssignableUser(display_name=data.get("displayName"), account_id=data.get("accountId"))


class JiraAdapter(IssueTrackerAdapter):
    """Jira Cloud implementation on top of the jira client library."""

    def __init__(
        self,
        server: str,
        username: str,
        token: str,
        client: JIRA | None = None,
    ) -> None:
        self._server = server.rstrip("/")
        self._client = client or JIRA(
            server=self._server,
            basic_auth=(username, token),
            get_server_info=False,
        )

    def _call(self, what: str, func: Callable[..., T], *args: Any, **kwargs: Any) -> T:
        LOG.debug("Jira %s", what)
        try:
            return func(*args, **kwargs)
        except JIRAError as e:
            msg = e.text or str(e)
            if e.status_code:
                msg = f"{e.status_code}: {msg}"
            raise IssueTrackerError(f"Jira {what} failed: {msg}") from e
        except requests.RequestException as e:
            raise IssueTrackerError(f"Jira {what} failed: {e}") from e

    def myself(self) -> str:
        data = self._call("myself", self._client.myself)
        return data.get("displayName") or ""

    def search_issues(self, jql: str) -> List[Issue]:
        return [_issue_from_api(raw) for raw in self._call("search", self._search_raw, jql)]

    def _search_raw(self, jql: str) -> List[Dict[str, Any]]:
        url = f"{self._server}/rest/api/3/search/jql"
        params = {"jql": jql, "maxResults": SEARCH_PAGE_SIZE, "fields": ",".join(SEARCH_FIELDS)}
        out: List[Dict[str, Any]] = []
        token = None
        while True:
            qp = dict(params)
            if token:
                qp["nextPageToken"] = token
            resp = self._client._session.get(url, params=qp)
            if resp.status_code >= 400:
                raise IssueTrackerError(f"Jira search failed {resp.status_code}: {resp.text[:200]}")
            data = resp.json()
            out.extend(data.get("issues", []))
            token = data.get("nextPageToken")
            if not token or data.get("isLast") is True:
                break
        return out

    def list_transitions(self, issue_key: str) -> List[Transition]:
        data = self._call(f"transitions of {issue_key}", self._client.transitions, issue_key)
        return [_transition_from_api(t) for t in data or []]

    def apply_transition(self, issue_key: str, transition_name: str) -> None:
        # Posted by id: transition_issue reads a numeric name as an id.
        transition = next(
            (t for t in self.list_transitions(issue_key) if t.name == transition_name),
            None,
        )
        if transition is None or not transition.id:
            raise IssueTrackerError(f"{transition_name} is not an available transition for {issue_key}!")
        self._call(
            f"transition of {issue_key}",
            self._client.transition_issue,
            issue_key,
            transition.id,
        )

    def list_assignable_users(self, project_key: str) -> List[AssignableUser]:
        data = self._call(
            f"assignable users of {project_key}",
            self._client._get_json,
            "user/assignable/search",
            params={"project": project_key, "maxResults": 1000},
        )
        return [_user_from_api(u) for u in data or []]

    def change_assignee(self, issue_key: str, account_id: str) -> None:
        url = self._client._get_url(f"issue/{issue_key}/assignee")
        self._call(
            f"assignment of {issue_key}",
            self._client._session.put,
            url,
            data=json.dumps({"accountId": account_id}),
        )
