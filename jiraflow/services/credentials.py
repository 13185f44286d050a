"""Credential storage in the credentials directory as JSON files.

One file per service: jira.auth.json ({"username", "password"}) and
jira.harvest.auth.json ({"account-id", "token"}). Records are overwritten
on re-authentication and never expire.
"""

import json
import logging
import os
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic import ValidationError as SchemaError

from jiraflow.errors import AuthenticationRequiredError

JIRA_AUTH_FILE = "jira.auth.json"
HARVEST_AUTH_FILE = "jira.harvest.auth.json"

LOG = logging.getLogger("jiraflow.services.credentials")


class JiraCredentials(BaseModel):
    """Jira record; password holds the API token."""

    username: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class HarvestCredentials(BaseModel):
    """Harvest record keyed as stored on disk (account-id, token)."""

    model_config = ConfigDict(populate_by_name=True)

    account_id: str = Field(..., min_length=1, alias="account-id")
    token: str = Field(..., min_length=1)


class JsonDatastore:
    """Opaque JSON object persisted in a single file."""

    def __init__(self, path: Path) -> None:
        self.path = Path(path)

    def read(self) -> dict[str, Any]:
        """Return the stored object, or {} when missing or unreadable."""
        if not self.path.is_file():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            LOG.warning("Failed to read %s: %s", self.path, e)
            return {}
        return data if isinstance(data, dict) else {}

    def write(self, data: dict[str, Any]) -> Path:
        """Overwrite the file with data (owner read/write only)."""
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd = os.open(self.path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
        # An existing file keeps its old mode through os.open.
        os.fchmod(fd, 0o600)
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(json.dumps(data, indent=2))
        LOG.debug("Saved %s", self.path)
        return self.path

    def has_data(self) -> bool:
        return bool(self.read())


class CredentialStore:
    """Per-service credential records under one directory."""

    def __init__(self, root: Path) -> None:
        self.root = Path(root)
        self.jira = JsonDatastore(self.root / JIRA_AUTH_FILE)
        self.harvest = JsonDatastore(self.root / HARVEST_AUTH_FILE)

    def has_jira(self) -> bool:
        return self.jira.has_data()

    def has_harvest(self) -> bool:
        return self.harvest.has_data()

    def jira_credentials(self) -> JiraCredentials:
        """Return Jira credentials or raise AuthenticationRequiredError."""
        try:
            return JiraCredentials.model_validate(self.jira.read())
        except SchemaError as e:
            raise AuthenticationRequiredError(
                "Please authenticate with the Jira service using the `jiraflow login` command."
            ) from e

    def harvest_credentials(self) -> HarvestCredentials:
        """Return Harvest credentials or raise AuthenticationRequiredError."""
        try:
            return HarvestCredentials.model_validate(self.harvest.read())
        except SchemaError as e:
            raise AuthenticationRequiredError(
                "Please authenticate with the Harvest service using the `jiraflow harvest-login` command."
            ) from e

    def save_jira(self, credentials: JiraCredentials) -> Path:
        return self.jira.write(credentials.model_dump())

    def save_harvest(self, credentials: HarvestCredentials) -> Path:
        return self.harvest.write(credentials.model_dump(by_alias=True))
