"""Interactive configuration schema for the jira section.

Each field is asked in order with its current value as the in-place
default. A field may be hidden by a visibility predicate (the Harvest
project code is only asked once Harvest credentials exist).
"""

from dataclasses import dataclass
from typing import Callable, List

from jiraflow.config import JiraConfig
from jiraflow.prompt import required


@dataclass
class ConfigField:
    name: str
    question: str
    label: str = ""
    required: bool = False
    default: Callable[[JiraConfig], str] = lambda config: ""
    visible: Callable[[], bool] | None = None

    def is_visible(self) -> bool:
        return self.visible is None or bool(self.visible())

    def validate(self, value: str) -> str:
        value = (value or "").strip()
        if self.required:
            return required(f"{self.label or self.name} is required!")(value)
        return value


def jira_config_fields(has_harvest_credentials: Callable[[], bool]) -> List[ConfigField]:
    """Ordered fields of the jira config section."""
    return [
        ConfigField(
            name="cloud_host",
            question="Input the Jira cloud domain",
            label="The Jira cloud domain",
            required=True,
            default=lambda config: config.cloud_host,
        ),
        ConfigField(
            name="project_key",
            question="Input the Jira project key",
            label="The Jira project key",
            required=True,
            default=lambda config: config.project_key,
        ),
        ConfigField(
            name="harvest_project",
            question="Input the Harvest project code",
            default=lambda config: config.harvest_project,
            visible=has_harvest_credentials,
        ),
    ]


def _format_question(question: str, default: str) -> str:
    return f"{question} [{default}]:" if default else f"{question}:"


def ask_jira_config(prompt, current: JiraConfig, fields: List[ConfigField]) -> JiraConfig:
    """Ask every visible field; hidden fields keep their current value."""
    values = current.model_dump()
    for field in fields:
        if not field.is_visible():
            continue
        default = field.default(current)
        values[field.name] = prompt.ask(
            _format_question(field.question, default),
            default=default,
            validator=field.validate,
        )
    return JiraConfig(**values)
