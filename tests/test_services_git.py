"""Tests for jiraflow.services.git (branches, pull/merge, GitStack)."""

import subprocess
from pathlib import Path
from unittest.mock import patch

import pytest

from jiraflow.errors import LocalOperationFailure
from jiraflow.services.git import (
    GitRunnerError,
    GitStack,
    checkout_branch,
    create_branch,
    merge_branch,
    run_git_pull,
)
from jiraflow.services.git._run import _run_git


class TestRunGit:
    """jiraflow.services.git._run: subprocess wrapper."""

    def test_runs_git_in_cwd(self) -> None:
        with patch("jiraflow.services.git._run.subprocess.run") as mock_run:
            _run_git(["status"], cwd=Path("/tmp/repo"))
        assert mock_run.call_args[0][0] == ["git", "status"]
        assert mock_run.call_args[1]["cwd"] == Path("/tmp/repo")

    def test_non_zero_exit_raises(self) -> None:
        err = subprocess.CalledProcessError(1, ["git", "merge", "A-1"], stderr="CONFLICT (content)")
        with patch("jiraflow.services.git._run.subprocess.run", side_effect=err):
            with pytest.raises(GitRunnerError, match="CONFLICT"):
                _run_git(["merge", "A-1"], cwd=Path("/tmp/repo"))

    def test_missing_git_raises(self) -> None:
        with patch("jiraflow.services.git._run.subprocess.run", side_effect=FileNotFoundError()):
            with pytest.raises(GitRunnerError, match="git not found"):
                _run_git(["status"], cwd=Path("/tmp/repo"))

    def test_git_runner_error_is_local_operation_failure(self) -> None:
        assert issubclass(GitRunnerError, LocalOperationFailure)


class TestBranches:
    """jiraflow.services.git.branches: create and checkout."""

    def test_create_branch_from_base(self) -> None:
        """create_branch runs git checkout -b <branch> <base>."""
        with patch("jiraflow.services.git.branches._run_git") as mock_run:
            create_branch("A-1", "develop", repo_dir=Path("/tmp/repo"), log=None)
        mock_run.assert_called_once_with(["checkout", "-b", "A-1", "develop"], cwd=Path("/tmp/repo"), log=None)

    def test_checkout_branch_success(self) -> None:
        with patch("jiraflow.services.git.branches._run_git") as mock_run:
            checkout_branch("master", repo_dir=Path("/tmp/repo"), log=None)
        mock_run.assert_called_once_with(["checkout", "master"], cwd=Path("/tmp/repo"), log=None)

    def test_checkout_branch_fetches_if_not_exists_locally(self) -> None:
        """checkout_branch fetches from the given remote if checkout fails."""
        with patch("jiraflow.services.git.branches._run_git") as mock_run:
            mock_run.side_effect = [GitRunnerError("pathspec did not match"), None, None]
            checkout_branch("main", origin="upstream", repo_dir=Path("/tmp/repo"), log=None)
        assert mock_run.call_count == 3
        assert mock_run.call_args_list[1][0][0] == ["fetch", "upstream", "main"]
        assert mock_run.call_args_list[2][0][0] == ["checkout", "main"]

    def test_checkout_branch_uses_cwd_when_no_repo_dir(self) -> None:
        with patch("jiraflow.services.git.branches._run_git") as mock_run:
            checkout_branch("main", log=None)
        assert mock_run.call_args[1]["cwd"] == Path.cwd()


class TestPullMerge:
    """jiraflow.services.git.push_pull: run_git_pull, merge_branch."""

    def test_run_git_pull_success(self) -> None:
        with patch("jiraflow.services.git.push_pull._run_git") as mock_run:
            run_git_pull("origin", "master", repo_dir=Path("/tmp/repo"), log=None)
        mock_run.assert_called_once_with(["pull", "origin", "master"], cwd=Path("/tmp/repo"), log=None)

    def test_merge_branch(self) -> None:
        with patch("jiraflow.services.git.push_pull._run_git") as mock_run:
            merge_branch("A-1", repo_dir=Path("/tmp/repo"), log=None)
        mock_run.assert_called_once_with(["merge", "A-1"], cwd=Path("/tmp/repo"), log=None)

    def test_run_git_pull_raises_on_failure(self) -> None:
        with patch("jiraflow.services.git.push_pull._run_git", side_effect=GitRunnerError("pull failed")):
            with pytest.raises(GitRunnerError, match="pull failed"):
                run_git_pull("origin", "master", repo_dir=Path("/tmp/repo"))


class TestGitStack:
    """GitStack turns GitRunnerError into a False success flag."""

    def test_success_flags(self) -> None:
        stack = GitStack(repo_dir=Path("/tmp/repo"))
        with patch("jiraflow.services.git.branches._run_git"), patch("jiraflow.services.git.push_pull._run_git"):
            assert stack.checkout_new("A-1", "master") is True
            assert stack.checkout("master") is True
            assert stack.pull("origin", "master") is True
            assert stack.merge("A-1") is True

    def test_failure_returns_false_and_logs(self, caplog: pytest.LogCaptureFixture) -> None:
        stack = GitStack(repo_dir=Path("/tmp/repo"))
        with patch(
            "jiraflow.services.git.push_pull._run_git",
            side_effect=GitRunnerError("git merge A-1: CONFLICT"),
        ):
            with caplog.at_level("WARNING", logger="jiraflow.services.git"):
                assert stack.merge("A-1") is False
        assert "Could not merge A-1" in caplog.text

    def test_failure_is_logged_once(self, caplog: pytest.LogCaptureFixture) -> None:
        """A failing git command yields a single WARNING record."""
        stack = GitStack(repo_dir=Path("/tmp/repo"))
        err = subprocess.CalledProcessError(1, ["git", "merge", "A-1"], stderr="CONFLICT (content)")
        with patch("jiraflow.services.git._run.subprocess.run", side_effect=err):
            with caplog.at_level("DEBUG", logger="jiraflow.services.git"):
                assert stack.merge("A-1") is False
        warnings = [r for r in caplog.records if r.levelname == "WARNING"]
        assert len(warnings) == 1
        assert "CONFLICT" in warnings[0].getMessage()

    def test_checkout_new_failure(self) -> None:
        stack = GitStack()
        with patch(
            "jiraflow.services.git.branches._run_git",
            side_effect=GitRunnerError("a branch named 'A-1' already exists"),
        ):
            assert stack.checkout_new("A-1", "master") is False
