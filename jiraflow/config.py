"""Configuration loading from YAML and environment.

Project settings (Jira cloud host, project key, linked Harvest project) live
in a YAML file next to the repository. Credentials are never stored there;
they live in the credentials directory (see jiraflow.services.credentials).
"""

from pathlib import Path
from typing import Any

import yaml
from pydantic import Field
from pydantic import ValidationError as SchemaError
from pydantic_settings import BaseSettings, SettingsConfigDict

from jiraflow.errors import ConfigurationError

DEFAULT_CONFIG_PATH = Path("jiraflow.yaml")
DEFAULT_CREDENTIALS_DIR = Path.home() / ".jiraflow"

# Injected by load_config so placeholders can read env
_current_env: dict[str, str] = {}


class JiraConfig(BaseSettings):
    """Jira cloud host, project key and linked Harvest project code."""

    model_config = SettingsConfigDict(env_prefix="JIRA_", extra="ignore")

    cloud_host: str = Field(default="", description="Jira cloud domain, e.g. acme.atlassian.net")
    project_key: str = Field(default="", description="Jira project key, e.g. PROJ")
    harvest_project: str = Field(default="", description="Linked Harvest project code (optional)")

    @property
    def server_url(self) -> str:
        """Cloud host as a base URL (https:// added when no scheme is given)."""
        host = self.require_cloud_host().rstrip("/")
        if "://" not in host:
            host = f"https://{host}"
        return host

    def require_cloud_host(self) -> str:
        """Return the cloud host or raise ConfigurationError when empty."""
        if not self.cloud_host.strip():
            raise ConfigurationError(
                "The Jira cloud domain is not configured; run `jiraflow configure`."
            )
        return self.cloud_host.strip()

    def require_project_key(self) -> str:
        """Return the project key or raise ConfigurationError when empty."""
        if not self.project_key.strip():
            raise ConfigurationError(
                "The Jira project key is not configured; run `jiraflow configure`."
            )
        return self.project_key.strip()


class LoggingConfig(BaseSettings):
    """Logging settings."""

    model_config = SettingsConfigDict(env_prefix="LOGGING_", extra="ignore")

    level: str = Field(default="WARNING", description="Log level")
    format: str = Field(
        default="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        description="Log format",
    )


class AppConfig(BaseSettings):
    """Root application config from YAML + env."""

    model_config = SettingsConfigDict(env_prefix="JIRAFLOW_", extra="ignore")

    jira: JiraConfig = Field(default_factory=JiraConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    credentials_dir: Path = Field(
        default=DEFAULT_CREDENTIALS_DIR,
        description="Directory holding jira.auth.json and jira.harvest.auth.json",
    )


def _substitute_env(value: Any) -> Any:
    """Replace ${VAR} and $VAR in strings with os.environ."""
    if isinstance(value, str):
        if value.startswith("${") and value.endswith("}"):
            key = value[2:-1].strip()
            return _current_env.get(key, value)
        if value.startswith("$") and not value.startswith("${"):
            key = value[1:].strip()
            return _current_env.get(key, value)
        return value
    if isinstance(value, dict):
        return {k: _substitute_env(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_substitute_env(v) for v in value]
    return value


def _read_raw(path: Path) -> dict[str, Any]:
    if not path.is_file():
        return {}
    try:
        raw = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except (OSError, yaml.YAMLError) as e:
        raise ConfigurationError(f"Unable to read the configuration file {path}: {e}") from e
    if not isinstance(raw, dict):
        raise ConfigurationError(f"The configuration file {path} must contain a mapping.")
    return raw


def _section(raw: dict[str, Any], name: str, path: Path) -> dict[str, Any]:
    section = raw.get(name) or {}
    if not isinstance(section, dict):
        raise ConfigurationError(f"The {name} section of {path} must be a mapping.")
    return section


def load_config(config_path: Path | None = None) -> AppConfig:
    """Load config from YAML file and environment.

    A missing file yields defaults (plus env overrides).
    """
    global _current_env
    import os

    _current_env = dict(os.environ)

    path = config_path or DEFAULT_CONFIG_PATH
    raw = _substitute_env(_read_raw(path))

    try:
        jira = JiraConfig(**_section(raw, "jira", path))
        logging = LoggingConfig(**_section(raw, "logging", path))
        extra: dict[str, Any] = {}
        if raw.get("credentials_dir"):
            extra["credentials_dir"] = Path(str(raw["credentials_dir"])).expanduser()
        return AppConfig(jira=jira, logging=logging, **extra)
    except SchemaError as e:
        raise ConfigurationError(f"Invalid configuration in {path}: {e}") from e


def save_jira_config(jira: JiraConfig, config_path: Path | None = None) -> Path:
    """Write the jira section back to the YAML file, keeping other sections."""
    path = config_path or DEFAULT_CONFIG_PATH
    raw = _read_raw(path)
    raw["jira"] = jira.model_dump(mode="json")
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(
        yaml.dump(raw, default_flow_style=False, allow_unicode=True, sort_keys=False),
        encoding="utf-8",
    )
    return path
