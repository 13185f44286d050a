"""jiraflow entry point.

Usage: jiraflow [-c CONFIG] [-v] <command> [args]. Commands: login,
harvest-login, configure, issues, open, move, start, finish.
"""

import argparse
import functools
import logging
import sys
from pathlib import Path

from jiraflow.config import DEFAULT_CONFIG_PATH, AppConfig, load_config, save_jira_config
from jiraflow.errors import JiraflowError
from jiraflow.logging import JiraflowLogging
from jiraflow.prompt import Prompt
from jiraflow.services.credentials import CredentialStore
from jiraflow.services.git import GitStack
from jiraflow.services.workflow import CommandResult, IssueWorkflow


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse global options and one subcommand."""
    parser = argparse.ArgumentParser(
        prog="jiraflow",
        description="Drive Jira issues from your git workflow",
    )
    parser.add_argument(
        "--config",
        "-c",
        type=Path,
        default=DEFAULT_CONFIG_PATH,
        help="Path to YAML config file",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Log debug output",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    login = sub.add_parser("login", help="Login to Jira using a personal API token")
    login.add_argument(
        "--reauthenticate",
        action="store_true",
        help="Ask for credentials again (e.g. to switch account)",
    )

    harvest = sub.add_parser("harvest-login", help="Login to Harvest using a personal access token")
    harvest.add_argument("--reauthenticate", action="store_true", help="Ask for credentials again")

    sub.add_parser("configure", help="Set the Jira cloud domain, project key and Harvest project")

    issues = sub.add_parser("issues", help="List your open issues")
    issues.add_argument("status", nargs="?", default=None, help="Only list issues in this status")

    open_ = sub.add_parser("open", help="Open an assigned issue in the browser")
    open_.add_argument("issue", nargs="?", default=None, help="Issue key, e.g. PROJ-123")

    move = sub.add_parser("move", help="Reassign and transition an assigned issue")
    move.add_argument("issue", nargs="?", default=None, help="Issue key, e.g. PROJ-123")

    start = sub.add_parser("start", help="Start working an assigned issue")
    start.add_argument("issue", nargs="?", default=None, help="Issue key, e.g. PROJ-123")
    start.add_argument("--base-branch", default="master", help="Base branch for the new git branch")

    finish = sub.add_parser("finish", help="Finish working an assigned issue")
    finish.add_argument("issue", nargs="?", default=None, help="Issue key, e.g. PROJ-123")
    finish.add_argument("--main-branch", default="master", help="Branch to merge into")
    finish.add_argument("--main-origin", default="origin", help="Remote to pull the main branch from")

    return parser.parse_args(argv)


def build_workflow(config: AppConfig, config_path: Path) -> IssueWorkflow:
    """Wire configuration, credentials, prompt and git into the workflow."""
    return IssueWorkflow(
        jira_config=config.jira,
        credentials=CredentialStore(config.credentials_dir),
        prompt=Prompt(),
        git=GitStack(),
        config_writer=functools.partial(save_jira_config, config_path=config_path),
    )


def run_command(workflow: IssueWorkflow, args: argparse.Namespace) -> CommandResult:
    """Dispatch the parsed subcommand to the workflow."""
    if args.command == "login":
        return workflow.login(reauthenticate=args.reauthenticate)
    if args.command == "harvest-login":
        return workflow.harvest_login(reauthenticate=args.reauthenticate)
    if args.command == "configure":
        return workflow.configure()
    if args.command == "issues":
        return workflow.list_issues(args.status)
    if args.command == "open":
        return workflow.open_issue(args.issue)
    if args.command == "move":
        return workflow.move_issue(args.issue)
    if args.command == "start":
        return workflow.start_issue(args.issue, base_branch=args.base_branch)
    if args.command == "finish":
        return workflow.finish_issue(
            args.issue,
            main_branch=args.main_branch,
            main_origin=args.main_origin,
        )
    raise ValueError(f"Unknown command: {args.command}")


def main(argv: list[str] | None = None) -> int:
    """Entry point: load config, set up logging, run one command."""
    args = parse_args(argv)
    try:
        config = load_config(args.config)
    except JiraflowError as e:
        Prompt().error(str(e))
        return 1
    JiraflowLogging(config.logging, verbose=args.verbose).setup()
    logging.getLogger("jiraflow").debug("Loaded config from %s", args.config)

    workflow = build_workflow(config, args.config)
    try:
        result = run_command(workflow, args)
    except KeyboardInterrupt:
        return 130
    return 0 if result.ok else 1


if __name__ == "__main__":
    sys.exit(main())
