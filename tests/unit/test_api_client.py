"""Tests for the Linear GraphQL client."""

import httpx
import pytest

from linear_cli.api.client import ApiKeyAuth, LinearClient
from linear_cli.exceptions import ExternalServiceError, GraphQLError, NotFoundError
from tests.fakes import cycles_payload, issue_payload


class TestExecute:
    """Test the raw GraphQL round trip."""

    def test_sends_raw_api_key(self, graphql, make_client):
        """Test Authorization carries the key without a Bearer prefix."""
        graphql.add("Viewer", {"viewer": {"id": "u1", "name": "Ada", "displayName": "ada"}})

        with make_client("lin_api_abc") as client:
            client.viewer()

        assert graphql.headers[0]["authorization"] == "lin_api_abc"

    def test_posts_query_and_variables(self, graphql, make_client):
        """Test the request body shape."""
        graphql.add("ListUsers", {"users": {"nodes": []}})

        make_client("k").list_users(25)

        assert graphql.requests[0]["variables"] == {"first": 25}
        assert graphql.operations() == ["ListUsers"]

    def test_http_error_status(self):
        """Test non-2xx responses raise ExternalServiceError."""
        transport = httpx.MockTransport(lambda request: httpx.Response(401, text="unauthorized"))
        client = LinearClient("bad", transport=transport)

        with pytest.raises(ExternalServiceError) as exc_info:
            client.execute("query Viewer { viewer { id } }")

        assert exc_info.value.status_code == 401
        assert exc_info.value.response_text == "unauthorized"

    def test_transport_failure(self):
        """Test network errors raise ExternalServiceError."""

        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        client = LinearClient("k", transport=httpx.MockTransport(handler))

        with pytest.raises(ExternalServiceError, match="Request to Linear API failed"):
            client.execute("query Viewer { viewer { id } }")

    def test_invalid_json(self):
        """Test a non-JSON body raises ExternalServiceError."""
        transport = httpx.MockTransport(lambda request: httpx.Response(200, text="<html>"))
        client = LinearClient("k", transport=transport)

        with pytest.raises(ExternalServiceError, match="invalid JSON"):
            client.execute("query Viewer { viewer { id } }")

    def test_graphql_errors(self):
        """Test an errors array raises GraphQLError."""
        transport = httpx.MockTransport(
            lambda request: httpx.Response(200, json={"errors": [{"message": "Entity not found"}]})
        )
        client = LinearClient("k", transport=transport)

        with pytest.raises(GraphQLError, match="Entity not found"):
            client.execute("query Viewer { viewer { id } }")

    def test_auth_repr_hides_key(self):
        """Test the auth object never shows the key."""
        assert "secret" not in repr(ApiKeyAuth("secret"))


class TestOperations:
    """Test typed client methods."""

    def test_list_my_issues(self, graphql, make_client):
        """Test assigned issues are parsed into models."""
        graphql.add(
            "ListMyIssues",
            {"viewer": {"assignedIssues": {"nodes": [issue_payload(labels=["bug"])]}}},
        )

        issues = make_client("k").list_my_issues(10, {"state": {"type": {"nin": ["completed"]}}})

        assert [i.identifier for i in issues] == ["ENG-1"]
        assert issues[0].label_names == ["bug"]
        assert graphql.requests[0]["variables"]["filter"] == {"state": {"type": {"nin": ["completed"]}}}

    def test_list_issues(self, graphql, make_client):
        """Test workspace issues are parsed."""
        graphql.add("ListIssues", {"issues": {"nodes": [issue_payload(), issue_payload("ENG-2")]}})

        issues = make_client("k").list_issues(10)

        assert [i.identifier for i in issues] == ["ENG-1", "ENG-2"]

    def test_get_issue_not_found(self, graphql, make_client):
        """Test a null issue raises NotFoundError."""
        graphql.add("GetIssue", {"issue": None})

        with pytest.raises(NotFoundError, match="issue ENG-9 not found"):
            make_client("k").get_issue("ENG-9")

    def test_get_user_not_found(self, graphql, make_client):
        """Test an empty user list raises NotFoundError."""
        graphql.add("GetUserByDisplayName", {"users": {"nodes": []}})

        with pytest.raises(NotFoundError, match='user "ghost" not found'):
            make_client("k").get_user_by_display_name("ghost")

    def test_viewer_is_me(self, graphql, make_client):
        """Test the viewer is flagged as the current user."""
        graphql.add("Viewer", {"viewer": {"id": "u1", "name": "Ada", "displayName": "ada"}})

        assert make_client("k").viewer().is_me is True

    def test_list_cycles(self, graphql, make_client):
        """Test cycles are parsed with their flags."""
        graphql.add("ListCycles", {"cycles": {"nodes": cycles_payload()}})

        cycles = make_client("k").list_cycles()

        assert [c.number for c in cycles] == [10, 11, 12]
        assert cycles[1].is_active is True

    def test_update_issue_cycle(self, graphql, make_client):
        """Test the mutation variables."""
        graphql.add("UpdateIssueCycle", {"issueUpdate": {"success": True}})

        make_client("k").update_issue_cycle("id-ENG-1", "cycle-12")

        assert graphql.requests[0]["variables"] == {"id": "id-ENG-1", "cycleId": "cycle-12"}

    def test_update_issue_cycle_unsuccessful(self, graphql, make_client):
        """Test an unsuccessful mutation raises."""
        graphql.add("UpdateIssueCycle", {"issueUpdate": {"success": False}})

        with pytest.raises(ExternalServiceError, match="not successful"):
            make_client("k").update_issue_cycle("id-ENG-1", "cycle-12")
