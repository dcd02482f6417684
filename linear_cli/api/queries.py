"""GraphQL documents sent to the Linear API."""

_ISSUE_LIST_FIELDS = """
    id
    identifier
    title
    priority
    updatedAt
    createdAt
    estimate
    dueDate
    state { name type }
    labels { nodes { name } }
    cycle { number name }
    assignee { name displayName }
    project { name }
"""

VIEWER = """
query Viewer {
  viewer { id name displayName email admin active }
}
"""

LIST_MY_ISSUES = (
    """
query ListMyIssues($first: Int!, $filter: IssueFilter) {
  viewer {
    assignedIssues(first: $first, filter: $filter) {
      nodes {"""
    + _ISSUE_LIST_FIELDS
    + """      }
    }
  }
}
"""
)

LIST_ISSUES = (
    """
query ListIssues($first: Int!, $filter: IssueFilter) {
  issues(first: $first, filter: $filter) {
    nodes {"""
    + _ISSUE_LIST_FIELDS
    + """    }
  }
}
"""
)

GET_ISSUE = (
    """
query GetIssue($id: String!) {
  issue(id: $id) {"""
    + _ISSUE_LIST_FIELDS
    + """    description
    branchName
    url
    team { name key }
    cycle { number name startsAt endsAt }
    parent { identifier title }
  }
}
"""
)

LIST_USERS = """
query ListUsers($first: Int!) {
  users(first: $first) {
    nodes { id name displayName email admin active isMe }
  }
}
"""

GET_USER_BY_DISPLAY_NAME = """
query GetUserByDisplayName($name: String!) {
  users(filter: { displayName: { eqIgnoreCase: $name } }) {
    nodes { id name displayName email admin active isMe }
  }
}
"""

LIST_CYCLES = """
query ListCycles($first: Int!) {
  cycles(first: $first) {
    nodes { id number name startsAt endsAt isActive isNext isPrevious }
  }
}
"""

UPDATE_ISSUE_CYCLE = """
mutation UpdateIssueCycle($id: String!, $cycleId: String!) {
  issueUpdate(id: $id, input: { cycleId: $cycleId }) {
    success
  }
}
"""
