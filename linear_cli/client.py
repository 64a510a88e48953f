"""
LinearClient — capability object over the Linear GraphQL API.

One instance is built per command invocation and passed to the pieces that
need it. Methods return plain dicts shaped like the API's own objects:
entity lookups return the entity or None, list operations return
``{"nodes": [...], "pageInfo": {...}}`` and mutations return
``{"success": bool, "<entity>": {...} | None}``.
"""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from typing import Any

from linear_cli.api import graphql_request

# ---------------------------------------------------------------------------
# GraphQL documents
# ---------------------------------------------------------------------------

_PAGE_INFO = "pageInfo { hasNextPage hasPreviousPage startCursor endCursor }"

_ISSUE_FIELDS = """
  id
  identifier
  title
  description
  priority
  priorityLabel
  estimate
  url
  createdAt
  updatedAt
"""

_VIEWER_QUERY = """
query Viewer {
  viewer {
    id
    name
    email
    displayName
    active
    admin
    timezone
    createdAt
    organization { id name urlKey }
    teams { nodes { id key name } }
  }
}
"""

_TEAMS_BY_KEY_QUERY = """
query TeamsByKey($key: String!) {
  teams(filter: { key: { eq: $key } }, first: 1) {
    nodes { id key name }
  }
}
"""

_ISSUE_BY_NUMBER_QUERY = """
query IssueByNumber($teamId: ID!, $number: Float!) {
  issues(filter: { team: { id: { eq: $teamId } }, number: { eq: $number } }, first: 1) {
    nodes { id identifier }
  }
}
"""

_GET_ISSUE_QUERY = f"""
query GetIssue($id: String!) {{
  issue(id: $id) {{
    {_ISSUE_FIELDS}
    state {{ id name color type }}
    assignee {{ id name email }}
    team {{ id key name }}
  }}
}}
"""

_ISSUE_LABELS_QUERY = """
query IssueLabels($id: String!) {
  issue(id: $id) {
    labels { nodes { id name color } }
  }
}
"""

_ISSUE_COMMENT_IDS_QUERY = """
query IssueCommentIds($id: String!) {
  issue(id: $id) {
    comments(first: 250) { nodes { id } }
  }
}
"""

_LIST_ISSUES_QUERY = f"""
query ListIssues($filter: IssueFilter, $first: Int, $after: String) {{
  issues(filter: $filter, first: $first, after: $after) {{
    nodes {{ {_ISSUE_FIELDS} }}
    {_PAGE_INFO}
  }}
}}
"""

_SEARCH_ISSUES_QUERY = f"""
query SearchIssues($term: String!, $filter: IssueFilter, $first: Int, $after: String) {{
  searchIssues(term: $term, filter: $filter, first: $first, after: $after) {{
    nodes {{ {_ISSUE_FIELDS} }}
    {_PAGE_INFO}
  }}
}}
"""

_ISSUE_MUTATION_FIELDS = "id identifier title url createdAt updatedAt"

_CREATE_ISSUE_MUTATION = f"""
mutation CreateIssue($input: IssueCreateInput!) {{
  issueCreate(input: $input) {{
    success
    issue {{ {_ISSUE_MUTATION_FIELDS} }}
  }}
}}
"""

_UPDATE_ISSUE_MUTATION = f"""
mutation UpdateIssue($id: String!, $input: IssueUpdateInput!) {{
  issueUpdate(id: $id, input: $input) {{
    success
    issue {{ {_ISSUE_MUTATION_FIELDS} }}
  }}
}}
"""

_ARCHIVE_ISSUE_MUTATION = """
mutation ArchiveIssue($id: String!) {
  issueArchive(id: $id) { success }
}
"""

_DELETE_ISSUE_MUTATION = """
mutation DeleteIssue($id: String!) {
  issueDelete(id: $id) { success }
}
"""

_DOCUMENT_FIELDS = """
  id
  title
  icon
  color
  createdAt
  updatedAt
  project { id name }
  creator { id name }
"""

_GET_DOCUMENT_QUERY = f"""
query GetDocument($id: String!) {{
  document(id: $id) {{
    {_DOCUMENT_FIELDS}
    content
  }}
}}
"""

_LIST_DOCUMENTS_QUERY = f"""
query ListDocuments($filter: DocumentFilter, $first: Int, $after: String) {{
  documents(filter: $filter, first: $first, after: $after) {{
    nodes {{ {_DOCUMENT_FIELDS} }}
    {_PAGE_INFO}
  }}
}}
"""

_CREATE_DOCUMENT_MUTATION = """
mutation CreateDocument($input: DocumentCreateInput!) {
  documentCreate(input: $input) {
    success
    document { id title createdAt project { id name } }
  }
}
"""

_UPDATE_DOCUMENT_MUTATION = """
mutation UpdateDocument($id: String!, $input: DocumentUpdateInput!) {
  documentUpdate(id: $id, input: $input) {
    success
    document { id title updatedAt }
  }
}
"""

_DELETE_DOCUMENT_MUTATION = """
mutation DeleteDocument($id: String!) {
  documentDelete(id: $id) { success }
}
"""

_GET_INITIATIVE_QUERY = """
query GetInitiative($id: String!) {
  initiative(id: $id) {
    id
    name
    description
    status
    icon
    color
    targetDate
    createdAt
    updatedAt
    owner { id name }
    creator { id name }
    projects { nodes { id name progress } }
  }
}
"""

_LIST_INITIATIVES_QUERY = f"""
query ListInitiatives($first: Int, $after: String) {{
  initiatives(first: $first, after: $after) {{
    nodes {{
      id
      name
      status
      targetDate
      createdAt
      owner {{ id name }}
      projects {{ nodes {{ id progress }} }}
    }}
    {_PAGE_INFO}
  }}
}}
"""

_INITIATIVE_MUTATION_FIELDS = "id name status createdAt updatedAt owner { id name }"

_CREATE_INITIATIVE_MUTATION = f"""
mutation CreateInitiative($input: InitiativeCreateInput!) {{
  initiativeCreate(input: $input) {{
    success
    initiative {{ {_INITIATIVE_MUTATION_FIELDS} }}
  }}
}}
"""

_UPDATE_INITIATIVE_MUTATION = f"""
mutation UpdateInitiative($id: String!, $input: InitiativeUpdateInput!) {{
  initiativeUpdate(id: $id, input: $input) {{
    success
    initiative {{ {_INITIATIVE_MUTATION_FIELDS} }}
  }}
}}
"""

_DELETE_INITIATIVE_MUTATION = """
mutation DeleteInitiative($id: String!) {
  initiativeDelete(id: $id) { success }
}
"""

_LIST_COMMENTS_QUERY = f"""
query ListComments($id: String!, $first: Int, $after: String) {{
  issue(id: $id) {{
    comments(first: $first, after: $after) {{
      nodes {{ id body createdAt updatedAt user {{ id name email }} }}
      {_PAGE_INFO}
    }}
  }}
}}
"""

_CREATE_COMMENT_MUTATION = """
mutation CreateComment($input: CommentCreateInput!) {
  commentCreate(input: $input) {
    success
    comment { id body createdAt user { id name email } }
  }
}
"""

_LABEL_NODES = f"""
    nodes {{ id name color description isGroup createdAt parent {{ id }} }}
    {_PAGE_INFO}
"""

_LIST_LABELS_QUERY = f"""
query ListLabels($first: Int, $after: String) {{
  issueLabels(first: $first, after: $after) {{ {_LABEL_NODES} }}
}}
"""

_LIST_TEAM_LABELS_QUERY = f"""
query ListTeamLabels($teamId: String!, $first: Int, $after: String) {{
  team(id: $teamId) {{
    labels(first: $first, after: $after) {{ {_LABEL_NODES} }}
  }}
}}
"""

_STATE_NODES = f"""
    nodes {{ id name color type position team {{ id key }} }}
    {_PAGE_INFO}
"""

_LIST_STATES_QUERY = f"""
query ListStates($first: Int, $after: String) {{
  workflowStates(first: $first, after: $after) {{ {_STATE_NODES} }}
}}
"""

_LIST_TEAM_STATES_QUERY = f"""
query ListTeamStates($teamId: String!, $first: Int, $after: String) {{
  team(id: $teamId) {{
    states(first: $first, after: $after) {{ {_STATE_NODES} }}
  }}
}}
"""

_LIST_PROJECTS_QUERY = f"""
query ListProjects($filter: ProjectFilter, $first: Int, $after: String) {{
  projects(filter: $filter, first: $first, after: $after) {{
    nodes {{ id name description state progress targetDate url createdAt updatedAt }}
    {_PAGE_INFO}
  }}
}}
"""

_LIST_USERS_QUERY = f"""
query ListUsers($filter: UserFilter, $first: Int, $after: String) {{
  users(filter: $filter, first: $first, after: $after) {{
    nodes {{ id name displayName email active admin guest avatarUrl createdAt }}
    {_PAGE_INFO}
  }}
}}
"""

_EMPTY_CONNECTION = {"nodes": [], "pageInfo": {"hasNextPage": False, "hasPreviousPage": False}}


def _connection(obj):
    """Return a ``{nodes, pageInfo}`` connection, tolerating missing parents."""
    if not obj:
        return dict(_EMPTY_CONNECTION)
    return {"nodes": obj.get("nodes") or [], "pageInfo": obj.get("pageInfo") or {}}


class LinearClient:
    """Thin wrapper over the Linear GraphQL API.

    ``transport`` defaults to :func:`linear_cli.api.graphql_request`; tests
    pass a fake with the same signature.
    """

    def __init__(self, api_key: str, *, transport=None):
        self.api_key = api_key
        self._transport = transport or graphql_request

    def _query(self, document: str, variables: dict | None = None, *, timeout=None) -> dict:
        return self._transport(document, variables, api_key=self.api_key, timeout=timeout)

    # -------------------------------------------------------------------
    # Lookups
    # -------------------------------------------------------------------

    def viewer(self) -> dict[str, Any]:
        return self._query(_VIEWER_QUERY).get("viewer") or {}

    def find_teams_by_key(self, key: str) -> list[dict[str, Any]]:
        data = self._query(_TEAMS_BY_KEY_QUERY, {"key": key})
        return _connection(data.get("teams"))["nodes"]

    def find_issue_by_team_and_number(self, team_id: str, number: int) -> dict[str, Any] | None:
        data = self._query(_ISSUE_BY_NUMBER_QUERY, {"teamId": team_id, "number": number})
        nodes = _connection(data.get("issues"))["nodes"]
        return nodes[0] if nodes else None

    def get_issue(self, issue_id: str) -> dict[str, Any] | None:
        return self._query(_GET_ISSUE_QUERY, {"id": issue_id}).get("issue")

    def get_issue_detail(self, issue_id: str) -> dict[str, Any] | None:
        """Issue with state/assignee/team, labels and comment count.

        The three requests are independent and run concurrently.
        """
        variables = {"id": issue_id}
        with ThreadPoolExecutor(max_workers=3) as pool:
            issue_future = pool.submit(self._query, _GET_ISSUE_QUERY, variables)
            labels_future = pool.submit(self._query, _ISSUE_LABELS_QUERY, variables)
            comments_future = pool.submit(self._query, _ISSUE_COMMENT_IDS_QUERY, variables)
            issue = issue_future.result().get("issue")
            labels = labels_future.result().get("issue") or {}
            comments = comments_future.result().get("issue") or {}
        if not issue:
            return None
        detail = dict(issue)
        detail["labels"] = _connection(labels.get("labels"))["nodes"]
        detail["commentsCount"] = len(_connection(comments.get("comments"))["nodes"])
        return detail

    def get_document(self, document_id: str) -> dict[str, Any] | None:
        return self._query(_GET_DOCUMENT_QUERY, {"id": document_id}).get("document")

    def get_initiative(self, initiative_id: str) -> dict[str, Any] | None:
        return self._query(_GET_INITIATIVE_QUERY, {"id": initiative_id}).get("initiative")

    # -------------------------------------------------------------------
    # Lists
    # -------------------------------------------------------------------

    def list_issues(self, *, filter=None, first=50, after=None) -> dict[str, Any]:
        data = self._query(_LIST_ISSUES_QUERY, {"filter": filter, "first": first, "after": after})
        return _connection(data.get("issues"))

    def search_issues(self, term: str, *, filter=None, first=20, after=None) -> dict[str, Any]:
        data = self._query(
            _SEARCH_ISSUES_QUERY,
            {"term": term, "filter": filter, "first": first, "after": after},
        )
        return _connection(data.get("searchIssues"))

    def list_documents(self, *, filter=None, first=50, after=None) -> dict[str, Any]:
        data = self._query(
            _LIST_DOCUMENTS_QUERY, {"filter": filter, "first": first, "after": after}
        )
        return _connection(data.get("documents"))

    def list_initiatives(self, *, first=50, after=None) -> dict[str, Any]:
        data = self._query(_LIST_INITIATIVES_QUERY, {"first": first, "after": after})
        return _connection(data.get("initiatives"))

    def list_comments(self, issue_id: str, *, first=50, after=None) -> dict[str, Any] | None:
        """Comments on an issue; None when the issue does not exist."""
        data = self._query(_LIST_COMMENTS_QUERY, {"id": issue_id, "first": first, "after": after})
        issue = data.get("issue")
        if issue is None:
            return None
        return _connection(issue.get("comments"))

    def list_labels(self, *, team_id=None, first=100, after=None) -> dict[str, Any]:
        if team_id:
            data = self._query(
                _LIST_TEAM_LABELS_QUERY, {"teamId": team_id, "first": first, "after": after}
            )
            return _connection((data.get("team") or {}).get("labels"))
        data = self._query(_LIST_LABELS_QUERY, {"first": first, "after": after})
        return _connection(data.get("issueLabels"))

    def list_workflow_states(self, *, team_id=None, first=100, after=None) -> dict[str, Any]:
        if team_id:
            data = self._query(
                _LIST_TEAM_STATES_QUERY, {"teamId": team_id, "first": first, "after": after}
            )
            return _connection((data.get("team") or {}).get("states"))
        data = self._query(_LIST_STATES_QUERY, {"first": first, "after": after})
        return _connection(data.get("workflowStates"))

    def list_projects(self, *, filter=None, first=50, after=None) -> dict[str, Any]:
        data = self._query(_LIST_PROJECTS_QUERY, {"filter": filter, "first": first, "after": after})
        return _connection(data.get("projects"))

    def list_users(self, *, filter=None, first=100, after=None) -> dict[str, Any]:
        data = self._query(_LIST_USERS_QUERY, {"filter": filter, "first": first, "after": after})
        return _connection(data.get("users"))

    # -------------------------------------------------------------------
    # Mutations
    # -------------------------------------------------------------------

    def _mutate(self, document, variables, field):
        return self._query(document, variables).get(field) or {"success": False}

    def create_issue(self, input: dict) -> dict[str, Any]:
        return self._mutate(_CREATE_ISSUE_MUTATION, {"input": input}, "issueCreate")

    def update_issue(self, issue_id: str, input: dict) -> dict[str, Any]:
        return self._mutate(_UPDATE_ISSUE_MUTATION, {"id": issue_id, "input": input}, "issueUpdate")

    def archive_issue(self, issue_id: str) -> dict[str, Any]:
        return self._mutate(_ARCHIVE_ISSUE_MUTATION, {"id": issue_id}, "issueArchive")

    def delete_issue(self, issue_id: str) -> dict[str, Any]:
        return self._mutate(_DELETE_ISSUE_MUTATION, {"id": issue_id}, "issueDelete")

    def create_document(self, input: dict) -> dict[str, Any]:
        return self._mutate(_CREATE_DOCUMENT_MUTATION, {"input": input}, "documentCreate")

    def update_document(self, document_id: str, input: dict) -> dict[str, Any]:
        return self._mutate(
            _UPDATE_DOCUMENT_MUTATION, {"id": document_id, "input": input}, "documentUpdate"
        )

    def delete_document(self, document_id: str) -> dict[str, Any]:
        return self._mutate(_DELETE_DOCUMENT_MUTATION, {"id": document_id}, "documentDelete")

    def create_initiative(self, input: dict) -> dict[str, Any]:
        return self._mutate(_CREATE_INITIATIVE_MUTATION, {"input": input}, "initiativeCreate")

    def update_initiative(self, initiative_id: str, input: dict) -> dict[str, Any]:
        return self._mutate(
            _UPDATE_INITIATIVE_MUTATION,
            {"id": initiative_id, "input": input},
            "initiativeUpdate",
        )

    def delete_initiative(self, initiative_id: str) -> dict[str, Any]:
        return self._mutate(_DELETE_INITIATIVE_MUTATION, {"id": initiative_id}, "initiativeDelete")

    def create_comment(self, issue_id: str, body: str) -> dict[str, Any]:
        comment_input = {"issueId": issue_id, "body": body}
        return self._mutate(_CREATE_COMMENT_MUTATION, {"input": comment_input}, "commentCreate")

    # -------------------------------------------------------------------
    # Raw passthrough
    # -------------------------------------------------------------------

    def raw_query(self, query: str, variables: dict | None = None, *, timeout=None) -> dict:
        """Run an arbitrary GraphQL document; returns its ``data`` object."""
        return self._query(query, variables, timeout=timeout)
