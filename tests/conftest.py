"""Pytest configuration and shared fixtures."""

import io
from collections.abc import Callable
from datetime import UTC, datetime
from pathlib import Path

import httpx
import pytest
import structlog
from click.testing import CliRunner

from linear_cli.api.client import LinearClient
from linear_cli.api.models import Issue, IssueDetail
from linear_cli.cli.context import CliContext
from linear_cli.config.settings import LinearSettings
from linear_cli.credentials import CredentialStoreError
from linear_cli.utils.caching import FileCache
from linear_cli.utils.git import GitWorktreeCreator
from tests.fakes import GraphQLRouter, ScriptedRunner, StubPrompter, StubProvider, issue_payload

FIXED_NOW = datetime(2025, 1, 20, 12, 0, tzinfo=UTC)


@pytest.fixture(autouse=True)
def reset_structlog():
    """Drop logger configuration bound to per-test streams."""
    yield
    structlog.reset_defaults()


@pytest.fixture
def stub_provider() -> Callable[..., StubProvider]:
    """Factory for StubProvider instances."""
    return StubProvider


@pytest.fixture
def failing_store() -> StubProvider:
    """Provider whose store always fails."""
    return StubProvider(name="broken", store_error=CredentialStoreError("disk full"))


@pytest.fixture
def messages() -> io.StringIO:
    """Captured message stream."""
    return io.StringIO()


@pytest.fixture
def sample_issue() -> Issue:
    return Issue.model_validate(issue_payload(labels=["bug"]))


@pytest.fixture
def sample_issue_detail() -> IssueDetail:
    payload = issue_payload(labels=["bug", "frontend"])
    payload.update(
        {
            "description": "Users cannot log in.",
            "branchName": "ada/eng-1-fix-login",
            "url": "https://linear.app/acme/issue/ENG-1",
            "team": {"name": "Engineering", "key": "ENG"},
            "cycle": {
                "number": 11,
                "name": "Sprint 11",
                "startsAt": "2025-01-14T00:00:00.000Z",
                "endsAt": "2025-01-28T00:00:00.000Z",
            },
            "parent": None,
        }
    )
    return IssueDetail.model_validate(payload)


@pytest.fixture
def graphql() -> GraphQLRouter:
    return GraphQLRouter()


@pytest.fixture
def make_client(graphql: GraphQLRouter) -> Callable[[str], LinearClient]:
    """Client factory wired to the mock GraphQL router."""

    def factory(api_key: str) -> LinearClient:
        return LinearClient(api_key, transport=httpx.MockTransport(graphql))

    return factory


@pytest.fixture
def settings(tmp_path: Path) -> LinearSettings:
    return LinearSettings(cache_dir=tmp_path / "cache")


@pytest.fixture
def cli_context(
    settings: LinearSettings, make_client: Callable[[str], LinearClient], tmp_path: Path
) -> CliContext:
    """CliContext with an API key in the chain and a temp cache."""
    return CliContext(
        settings=settings,
        provider=StubProvider(name="chain", key="lin_api_test"),
        prompter=StubPrompter(),
        native_store=None,
        file_store=None,
        client_factory=make_client,
        cache=FileCache(tmp_path / "cache", ttl_seconds=300, clock=lambda: FIXED_NOW.timestamp()),
        stdin=io.StringIO(),
        stderr=io.StringIO(),
        now=lambda: FIXED_NOW,
        stdin_is_tty=lambda: False,
        selector=lambda issues: None,
        git=GitWorktreeCreator(runner=ScriptedRunner(), which=lambda name: None),
    )


@pytest.fixture
def cli_runner() -> CliRunner:
    """Create a Click CLI test runner."""
    return CliRunner()
