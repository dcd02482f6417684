"""Linear GraphQL client using httpx."""

from collections.abc import Generator
from typing import Any

import httpx
import structlog

from linear_cli.api import queries
from linear_cli.api.models import Cycle, Issue, IssueDetail, User
from linear_cli.config.settings import LINEAR_API_ENDPOINT
from linear_cli.exceptions import ExternalServiceError, GraphQLError, NotFoundError

log = structlog.get_logger(__name__)

DEFAULT_TIMEOUT = 30.0


class ApiKeyAuth(httpx.Auth):
    """Attach the raw API key as the Authorization header.

    Linear personal API keys are sent without a ``Bearer`` prefix.
    """

    def __init__(self, api_key: str) -> None:
        self._api_key = api_key

    def auth_flow(self, request: httpx.Request) -> Generator[httpx.Request, httpx.Response, None]:
        request.headers["Authorization"] = self._api_key
        yield request

    def __repr__(self) -> str:
        return "ApiKeyAuth(api_key='***')"


class LinearClient:
    """Synchronous client for the Linear GraphQL API.

    Example:
        >>> with LinearClient(api_key) as client:
        ...     issues = client.list_my_issues(limit=50)
    """

    def __init__(
        self,
        api_key: str,
        endpoint: str | None = None,
        timeout: float = DEFAULT_TIMEOUT,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        """Initialize client.

        Args:
            api_key: Linear personal API key
            endpoint: GraphQL endpoint (defaults to the public Linear API)
            timeout: Request timeout in seconds
            transport: Custom httpx transport (used by tests)
        """
        self.endpoint = endpoint or LINEAR_API_ENDPOINT
        self._http = httpx.Client(
            auth=ApiKeyAuth(api_key),
            timeout=timeout,
            transport=transport,
            headers={"Content-Type": "application/json"},
        )

    def close(self) -> None:
        self._http.close()

    def __enter__(self) -> "LinearClient":
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()

    def execute(self, query: str, variables: dict[str, Any] | None = None) -> dict[str, Any]:
        """Run a GraphQL operation and return its ``data`` object.

        Raises:
            ExternalServiceError: On transport failures or non-2xx responses
            GraphQLError: If the response carries an ``errors`` array
        """
        payload: dict[str, Any] = {"query": query, "variables": variables or {}}
        log.debug("graphql_request", endpoint=self.endpoint, variables=list(payload["variables"]))

        try:
            response = self._http.post(self.endpoint, json=payload)
        except httpx.HTTPError as e:
            raise ExternalServiceError(f"Request to Linear API failed: {e}") from e

        if response.is_error:
            log.debug("graphql_http_error", status_code=response.status_code)
            raise ExternalServiceError(
                "Linear API returned an error",
                status_code=response.status_code,
                response_text=response.text,
            )

        try:
            body = response.json()
        except ValueError as e:
            raise ExternalServiceError(
                "Linear API returned invalid JSON",
                status_code=response.status_code,
                response_text=response.text,
            ) from e

        if body.get("errors"):
            raise GraphQLError(body["errors"])

        return body.get("data") or {}

    def viewer(self) -> User:
        data = self.execute(queries.VIEWER)
        if not data.get("viewer"):
            raise ExternalServiceError("no viewer data returned from API")
        return User.model_validate({**data["viewer"], "isMe": True})

    def list_my_issues(self, limit: int, issue_filter: dict[str, Any] | None = None) -> list[Issue]:
        """List issues assigned to the authenticated user."""
        data = self.execute(queries.LIST_MY_ISSUES, {"first": limit, "filter": issue_filter})
        viewer = data.get("viewer")
        if not viewer or not viewer.get("assignedIssues"):
            raise ExternalServiceError("no assigned issues data returned from API")
        return [Issue.model_validate(n) for n in viewer["assignedIssues"]["nodes"]]

    def list_issues(self, limit: int, issue_filter: dict[str, Any] | None = None) -> list[Issue]:
        """List issues across the workspace."""
        data = self.execute(queries.LIST_ISSUES, {"first": limit, "filter": issue_filter})
        if not data.get("issues"):
            raise ExternalServiceError("no issues data returned from API")
        return [Issue.model_validate(n) for n in data["issues"]["nodes"]]

    def get_issue(self, identifier: str) -> IssueDetail:
        """Fetch one issue by identifier (e.g. ``ENG-123``) or id.

        Raises:
            NotFoundError: If the issue does not exist
        """
        data = self.execute(queries.GET_ISSUE, {"id": identifier})
        if not data.get("issue"):
            raise NotFoundError(f"issue {identifier} not found")
        return IssueDetail.model_validate(data["issue"])

    def list_users(self, limit: int) -> list[User]:
        data = self.execute(queries.LIST_USERS, {"first": limit})
        if not data.get("users"):
            raise ExternalServiceError("no users data returned from API")
        return [User.model_validate(n) for n in data["users"]["nodes"]]

    def get_user_by_display_name(self, name: str) -> User:
        """Look up a user by display name, case-insensitively.

        Raises:
            NotFoundError: If no user matches
        """
        data = self.execute(queries.GET_USER_BY_DISPLAY_NAME, {"name": name})
        nodes = (data.get("users") or {}).get("nodes") or []
        if not nodes:
            raise NotFoundError(f'user "{name}" not found')
        return User.model_validate(nodes[0])

    def list_cycles(self, limit: int = 50) -> list[Cycle]:
        data = self.execute(queries.LIST_CYCLES, {"first": limit})
        if not data.get("cycles"):
            raise ExternalServiceError("no cycles data returned from API")
        return [Cycle.model_validate(n) for n in data["cycles"]["nodes"]]

    def update_issue_cycle(self, issue_id: str, cycle_id: str) -> None:
        """Move an issue into a cycle.

        Raises:
            ExternalServiceError: If the mutation reports failure
        """
        data = self.execute(queries.UPDATE_ISSUE_CYCLE, {"id": issue_id, "cycleId": cycle_id})
        result = data.get("issueUpdate") or {}
        if not result.get("success"):
            raise ExternalServiceError("issue update was not successful")
        log.info("issue_cycle_updated", issue_id=issue_id, cycle_id=cycle_id)
