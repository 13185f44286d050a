"""jiraflow: bind a local git workflow to Jira issue state."""

__version__ = "0.1.0"
