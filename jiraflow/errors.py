"""Error kinds raised inside commands and reported at the command boundary."""


class JiraflowError(Exception):
    """Base class for every error a command reports to the user."""

    pass


class ConfigurationError(JiraflowError):
    """Raised when a required setting is missing or empty."""

    pass


class AuthenticationRequiredError(JiraflowError):
    """Raised when a credential record is missing or incomplete."""

    pass


class ValidationError(JiraflowError):
    """Raised on invalid user input or an inconsistent lookup."""

    pass


class RemoteServiceError(JiraflowError):
    """Raised when a remote API (Jira, Harvest) call fails."""

    pass


class LocalOperationFailure(JiraflowError):
    """Raised when a local (git) operation does not succeed."""

    pass
