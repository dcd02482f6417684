"""Linear GraphQL API access.

Key Components:
    - LinearClient: synchronous httpx client with API key authentication
    - models: pydantic views of the response objects
    - filters: IssueFilter construction from command-line values
    - cycles: cycle lookup with on-disk caching
"""

from linear_cli.api.client import ApiKeyAuth, LinearClient
from linear_cli.api.models import Cycle, Issue, IssueDetail, IssueRef, Label, Project, Team, User, WorkflowState

__all__ = [
    "ApiKeyAuth",
    "Cycle",
    "Issue",
    "IssueDetail",
    "IssueRef",
    "Label",
    "LinearClient",
    "Project",
    "Team",
    "User",
    "WorkflowState",
]
