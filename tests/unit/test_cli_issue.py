"""Tests for ``linear issue`` commands."""

import json

import pytest

from linear_cli.api.models import Issue
from linear_cli.cli.issue import sort_issues
from linear_cli.credentials import EmptyCredentialError
from linear_cli.main import cli
from linear_cli.utils.git import GitWorktreeCreator
from tests.fakes import ScriptedRunner, StubPrompter, StubProvider, cycles_payload, issue_payload


def detail_payload(identifier="ENG-1"):
    payload = issue_payload(identifier, labels=["bug"])
    payload.update(
        {
            "description": "Details here.",
            "branchName": "eng-1",
            "url": f"https://linear.app/acme/issue/{identifier}",
            "team": {"name": "Engineering"},
            "parent": None,
        }
    )
    return payload


@pytest.fixture
def with_issues(graphql):
    graphql.add("ListCycles", {"cycles": {"nodes": cycles_payload()}})
    graphql.add(
        "ListMyIssues",
        {
            "viewer": {
                "assignedIssues": {
                    "nodes": [
                        issue_payload("ENG-2", title="Backlog item", state_type="backlog", state_name="Backlog"),
                        issue_payload("ENG-1", title="Fix login", labels=["bug"]),
                    ]
                }
            }
        },
    )
    return graphql


class TestSortIssues:
    """Test issue ordering."""

    @pytest.fixture
    def issues(self):
        return [
            Issue.model_validate(issue_payload("ENG-3", title="b", state_type="backlog", priority=1)),
            Issue.model_validate(issue_payload("ENG-1", title="C", state_type="started", priority=0)),
            Issue.model_validate(issue_payload("ENG-2", title="a", state_type="started", priority=4)),
        ]

    def test_by_status(self, issues):
        """Test state type first, then priority with none last."""
        assert [i.identifier for i in sort_issues(issues, "status")] == ["ENG-2", "ENG-1", "ENG-3"]

    def test_by_priority(self, issues):
        """Test urgent first and no priority last."""
        assert [i.identifier for i in sort_issues(issues, "priority")] == ["ENG-3", "ENG-2", "ENG-1"]

    def test_by_title(self, issues):
        """Test case-insensitive title order."""
        assert [i.identifier for i in sort_issues(issues, "title")] == ["ENG-2", "ENG-3", "ENG-1"]

    def test_by_identifier(self, issues):
        """Test identifier order."""
        assert [i.identifier for i in sort_issues(issues, "identifier")] == ["ENG-1", "ENG-2", "ENG-3"]


class TestIssueList:
    """Test ``issue list``."""

    def test_lists_current_cycle(self, cli_runner, cli_context, with_issues):
        """Test the header and rows sorted by status."""
        result = cli_runner.invoke(cli, ["issue", "list"], obj=cli_context)

        assert result.exit_code == 0, result.output
        lines = result.output.splitlines()
        assert lines[0] == "Cycle 11 - Sprint 11 (Jan 14 – Jan 28)"
        assert lines[1].split()[0] == "IDENTIFIER"
        assert lines[2].startswith("ENG-1")
        assert lines[3].startswith("ENG-2")

        list_request = with_issues.requests[-1]
        assert list_request["variables"]["filter"]["cycle"] == {"number": {"eq": 11}}
        assert list_request["variables"]["first"] == 50

    def test_ls_alias(self, cli_runner, cli_context, with_issues):
        """Test the ls alias."""
        result = cli_runner.invoke(cli, ["issue", "ls", "--cycle", "all"], obj=cli_context)

        assert result.exit_code == 0, result.output
        assert "cycle" not in with_issues.requests[-1]["variables"]["filter"]
        assert not result.output.startswith("Cycle")

    def test_falls_back_to_active_cycle(self, cli_runner, cli_context, graphql):
        """Test an unresolvable current cycle filters on isActive."""
        graphql.add("ListMyIssues", {"viewer": {"assignedIssues": {"nodes": []}}})

        result = cli_runner.invoke(cli, ["issue", "list"], obj=cli_context)

        assert result.exit_code == 0, result.output
        assert graphql.requests[-1]["variables"]["filter"]["cycle"] == {"isActive": {"eq": True}}

    def test_user_uses_workspace_query(self, cli_runner, cli_context, graphql):
        """Test --user switches to the workspace issues query."""
        graphql.add("ListIssues", {"issues": {"nodes": [issue_payload()]}})

        result = cli_runner.invoke(cli, ["issue", "list", "-u", "bob", "-c", "all", "-S", "all"], obj=cli_context)

        assert result.exit_code == 0, result.output
        assert graphql.operations() == ["ListIssues"]
        assert graphql.requests[0]["variables"]["filter"] == {"assignee": {"displayName": {"eqIgnoreCase": "bob"}}}

    def test_columns(self, cli_runner, cli_context, with_issues):
        """Test --column replaces the table columns."""
        result = cli_runner.invoke(cli, ["issue", "list", "-c", "all", "-C", "id,title"], obj=cli_context)

        assert result.exit_code == 0, result.output
        assert result.output.splitlines()[0] == "IDENTIFIER  TITLE"

    def test_bad_column(self, cli_runner, cli_context, with_issues):
        """Test column errors are reported before any request."""
        result = cli_runner.invoke(cli, ["issue", "list", "-C", "id,+title"], obj=cli_context)

        assert result.exit_code == 1
        assert "Error: cannot mix" in result.output
        assert with_issues.requests == []

    def test_bad_limit(self, cli_runner, cli_context):
        """Test --limit must be positive."""
        result = cli_runner.invoke(cli, ["issue", "list", "-n", "0"], obj=cli_context)

        assert result.exit_code == 1
        assert "--limit must be greater than 0, got 0" in result.output

    def test_interactive(self, cli_runner, cli_context, with_issues):
        """Test -i prints the picked identifier."""
        cli_context.selector = lambda issues: issues[-1].identifier

        result = cli_runner.invoke(cli, ["issue", "list", "-i"], obj=cli_context)

        assert result.exit_code == 0, result.output
        assert result.output == "ENG-2\n"

    def test_api_error(self, cli_runner, cli_context, graphql):
        """Test GraphQL errors exit with status 1."""
        result = cli_runner.invoke(cli, ["issue", "list", "-c", "all"], obj=cli_context)

        assert result.exit_code == 1
        assert "Error: GraphQL error: unexpected operation" in result.output

    def test_prompt_failure(self, cli_runner, cli_context):
        """Test a failed API key prompt fails the command."""
        cli_context.provider = StubProvider()
        cli_context.prompter = StubPrompter(error=EmptyCredentialError("API key cannot be empty"))

        result = cli_runner.invoke(cli, ["issue", "list"], obj=cli_context)

        assert result.exit_code == 1
        assert "Error: resolving API key: prompting for API key: API key cannot be empty" in result.output


class TestIssueGet:
    """Test ``issue get``."""

    def test_plain(self, cli_runner, cli_context, graphql):
        """Test the plain detail view."""
        graphql.add("GetIssue", {"issue": detail_payload()})

        result = cli_runner.invoke(cli, ["issue", "get", "ENG-1"], obj=cli_context)

        assert result.exit_code == 0, result.output
        assert "Identifier" in result.output
        assert graphql.requests[0]["variables"] == {"id": "ENG-1"}

    @pytest.mark.parametrize("alias", ["show", "view"])
    def test_aliases(self, cli_runner, cli_context, graphql, alias):
        """Test get aliases."""
        graphql.add("GetIssue", {"issue": detail_payload()})

        result = cli_runner.invoke(cli, ["issue", alias, "ENG-1"], obj=cli_context)

        assert result.exit_code == 0, result.output

    def test_json(self, cli_runner, cli_context, graphql):
        """Test -o json."""
        graphql.add("GetIssue", {"issue": detail_payload()})

        result = cli_runner.invoke(cli, ["issue", "get", "ENG-1", "-o", "json"], obj=cli_context)

        assert result.exit_code == 0, result.output
        assert json.loads(result.output)["identifier"] == "ENG-1"

    def test_not_found(self, cli_runner, cli_context, graphql):
        """Test a missing issue."""
        graphql.add("GetIssue", {"issue": None})

        result = cli_runner.invoke(cli, ["issue", "get", "ENG-404"], obj=cli_context)

        assert result.exit_code == 1
        assert "Error: issue ENG-404 not found" in result.output

    def test_no_identifier_without_tty(self, cli_runner, cli_context):
        """Test a pipe without an identifier is an error."""
        result = cli_runner.invoke(cli, ["issue", "get"], obj=cli_context)

        assert result.exit_code == 1
        assert "no issue identifier provided" in result.output

    def test_picker(self, cli_runner, cli_context, graphql):
        """Test the picker feeds the detail query."""
        graphql.add("ListMyIssues", {"viewer": {"assignedIssues": {"nodes": [issue_payload("ENG-7")]}}})
        graphql.add("GetIssue", {"issue": detail_payload("ENG-7")})
        cli_context.stdin_is_tty = lambda: True
        cli_context.selector = lambda issues: issues[0].identifier

        result = cli_runner.invoke(cli, ["issue", "get", "-o", "yaml"], obj=cli_context)

        assert result.exit_code == 0, result.output
        assert result.output.startswith("identifier: ENG-7")

    def test_picker_cancelled(self, cli_runner, cli_context, graphql):
        """Test cancelling the picker prints nothing."""
        graphql.add("ListMyIssues", {"viewer": {"assignedIssues": {"nodes": [issue_payload()]}}})
        cli_context.stdin_is_tty = lambda: True

        result = cli_runner.invoke(cli, ["issue", "get"], obj=cli_context)

        assert result.exit_code == 0
        assert result.output == ""
        assert "GetIssue" not in graphql.operations()


class TestIssueEdit:
    """Test ``issue edit``."""

    def test_requires_flag(self, cli_runner, cli_context):
        """Test an edit without flags is rejected."""
        result = cli_runner.invoke(cli, ["issue", "edit", "ENG-1"], obj=cli_context)

        assert result.exit_code == 1
        assert "at least one edit flag is required" in result.output

    def test_move_to_next_cycle(self, cli_runner, cli_context, graphql):
        """Test moving an issue and refreshing its cached preview."""
        graphql.add("GetIssue", {"issue": detail_payload()})
        graphql.add("ListCycles", {"cycles": {"nodes": cycles_payload()}})
        graphql.add("UpdateIssueCycle", {"issueUpdate": {"success": True}})

        result = cli_runner.invoke(cli, ["issue", "e", "ENG-1", "--cycle", "next"], obj=cli_context)

        assert result.exit_code == 0, result.output
        assert result.output == "Updated ENG-1 cycle to Cycle 12\n"
        update = next(r for r in graphql.requests if "UpdateIssueCycle" in r["query"])
        assert update["variables"] == {"id": "id-ENG-1", "cycleId": "cycle-12"}
        assert (cli_context.cache.directory / "issues" / "ENG-1").exists()

    def test_invalid_cycle(self, cli_runner, cli_context, graphql):
        """Test a malformed --cycle value."""
        graphql.add("GetIssue", {"issue": detail_payload()})

        result = cli_runner.invoke(cli, ["issue", "edit", "ENG-1", "-c", "soon"], obj=cli_context)

        assert result.exit_code == 1
        assert 'invalid --cycle value "soon"' in result.output


class TestIssueWorktree:
    """Test ``issue worktree``."""

    @pytest.fixture
    def git_runner(self, cli_context):
        runner = ScriptedRunner()
        runner.add(["git", "rev-parse", "--show-toplevel"], stdout="/src/app\n")
        cli_context.git = GitWorktreeCreator(runner=runner, which=lambda name: None)
        return runner

    def test_creates_new_branch(self, cli_runner, cli_context, graphql, git_runner):
        """Test a new branch is created from origin/main next to the repo."""
        graphql.add("GetIssue", {"issue": detail_payload()})
        git_runner.add(["git", "rev-parse", "--verify"], returncode=1)

        result = cli_runner.invoke(cli, ["issue", "worktree", "ENG-1"], obj=cli_context)

        assert result.exit_code == 0, result.output
        assert result.output == 'Created new branch "eng-1" from origin/main\n/src/eng-1/app\n'
        assert ["git", "worktree", "add", "-b", "eng-1", "/src/eng-1/app", "origin/main"] in git_runner.commands()

    def test_reuses_branch_via_alias(self, cli_runner, cli_context, graphql, git_runner):
        """Test the wt alias and an existing branch."""
        graphql.add("GetIssue", {"issue": detail_payload()})

        result = cli_runner.invoke(cli, ["issue", "wt", "ENG-1"], obj=cli_context)

        assert result.exit_code == 0, result.output
        assert result.output.splitlines()[0] == 'Reusing existing branch "eng-1"'
        assert git_runner.commands()[-1] == ["git", "worktree", "add", "/src/eng-1/app", "eng-1"]

    def test_no_branch_name(self, cli_runner, cli_context, graphql, git_runner):
        """Test an issue without a branch name is rejected before git runs."""
        payload = detail_payload()
        payload["branchName"] = ""
        graphql.add("GetIssue", {"issue": payload})

        result = cli_runner.invoke(cli, ["issue", "worktree", "ENG-1"], obj=cli_context)

        assert result.exit_code == 1
        assert "Error: issue ENG-1 has no branch name" in result.output
        assert git_runner.calls == []

    def test_git_failure(self, cli_runner, cli_context, graphql, git_runner):
        """Test git errors exit with status 1."""
        graphql.add("GetIssue", {"issue": detail_payload()})
        git_runner.add(["git", "worktree"], returncode=128, stderr="fatal: '/src/eng-1/app' already exists\n")

        result = cli_runner.invoke(cli, ["issue", "worktree", "ENG-1"], obj=cli_context)

        assert result.exit_code == 1
        assert "Error: creating worktree: fatal: '/src/eng-1/app' already exists" in result.output

    def test_picker_with_user(self, cli_runner, cli_context, graphql, git_runner):
        """Test --user picks from that user's issues."""
        graphql.add("ListIssues", {"issues": {"nodes": [issue_payload("ENG-7")]}})
        graphql.add("GetIssue", {"issue": detail_payload("ENG-7")})
        cli_context.stdin_is_tty = lambda: True
        cli_context.selector = lambda issues: issues[0].identifier

        result = cli_runner.invoke(cli, ["issue", "worktree", "-u", "bob"], obj=cli_context)

        assert result.exit_code == 0, result.output
        assert result.output.endswith("/src/eng-7/app\n")
        assert graphql.operations() == ["ListIssues", "GetIssue"]
        assert graphql.requests[0]["variables"]["filter"]["assignee"] == {"displayName": {"eqIgnoreCase": "bob"}}

    def test_no_identifier_without_tty(self, cli_runner, cli_context, git_runner):
        """Test a pipe without an identifier is an error."""
        result = cli_runner.invoke(cli, ["issue", "worktree"], obj=cli_context)

        assert result.exit_code == 1
        assert "no issue identifier provided" in result.output
