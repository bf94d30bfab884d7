"""
Linear GraphQL API client: team, project and issue queries plus the issue
and comment mutations used by chat tools.

Requests go through the shared pooled httpx client and are retried on
transient failures (network errors, timeouts, 5xx). Anything else that is
not a clean GraphQL response surfaces as LinearAPIError.
"""

import logging
from typing import Any, Dict, List, Optional

import httpx

from weave.core.config import settings
from weave.core.retry import retry_with_backoff
from weave.shared.errors import LinearAPIError

logger = logging.getLogger("Weave.Linear.Client")

TEAMS_QUERY = """
query {
  teams {
    nodes {
      id
      name
      key
      description
    }
  }
}
"""

# Fields shared by issue queries and mutation results
ISSUE_FIELDS = """
      id
      identifier
      title
      description
      priority
      priorityLabel
      state { id name type }
      assignee { id name email }
      estimate
      dueDate
      completedAt
      url
      labels { nodes { id name color } }
      project { id }
      team { id }
"""

PROJECTS_QUERY = """
query($teamId: String) {
  projects(filter: { team: { id: { eq: $teamId } } }) {
    nodes {
      id
      name
      description
      state
      progress
      url
      startDate
      targetDate
      lead { id name email }
    }
  }
}
"""

ISSUES_QUERY = """
query($projectId: String!) {
  issues(filter: { project: { id: { eq: $projectId } } }) {
    nodes {%s    }
  }
}
""" % ISSUE_FIELDS

TEAM_STATES_QUERY = """
query($teamId: String!) {
  team(id: $teamId) {
    states { nodes { id name type } }
  }
}
"""

TEAM_MEMBERS_QUERY = """
query($teamId: String!) {
  team(id: $teamId) {
    members { nodes { id name email } }
  }
}
"""

ISSUE_CREATE_MUTATION = """
mutation($teamId: String!, $title: String!, $description: String, $priority: Int, $projectId: String) {
  issueCreate(input: {
    teamId: $teamId
    title: $title
    description: $description
    priority: $priority
    projectId: $projectId
  }) {
    success
    issue {%s    }
  }
}
""" % ISSUE_FIELDS

ISSUE_UPDATE_MUTATION = """
mutation($issueId: String!, $title: String, $description: String, $priority: Int, $stateId: String) {
  issueUpdate(id: $issueId, input: {
    title: $title
    description: $description
    priority: $priority
    stateId: $stateId
  }) {
    success
    issue {%s    }
  }
}
""" % ISSUE_FIELDS

COMMENT_CREATE_MUTATION = """
mutation($issueId: String!, $body: String!) {
  commentCreate(input: { issueId: $issueId, body: $body }) {
    success
    comment {
      id
      body
      url
      createdAt
      user { id name email }
      issue { id identifier }
    }
  }
}
"""


class LinearClient:
    """Minimal Linear GraphQL client."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        api_url: Optional[str] = None,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        self.api_key = api_key if api_key is not None else settings.LINEAR_API_KEY
        self.api_url = api_url or settings.LINEAR_API_URL
        self._http_client = http_client

    async def _get_http_client(self) -> httpx.AsyncClient:
        if self._http_client is None:
            from weave.services.http_client import http_client_manager
            return await http_client_manager.get_client()
        return self._http_client

    async def graphql(self, query: str, variables: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """
        Run a GraphQL query and return its data.

        Raises:
            LinearAPIError: Missing API key, non-2xx response or GraphQL errors
        """
        if not self.api_key:
            raise LinearAPIError("LINEAR_API_KEY not configured")

        client = await self._get_http_client()

        async def _post() -> httpx.Response:
            response = await client.post(
                self.api_url,
                json={"query": query, "variables": variables or {}},
                headers={"Content-Type": "application/json", "Authorization": self.api_key},
            )
            # 5xx is raised here so the retry loop sees it as transient
            if response.status_code >= 500:
                response.raise_for_status()
            return response

        try:
            response = await retry_with_backoff(_post, operation="linear graphql")
        except httpx.HTTPError as e:
            logger.error(f"Linear API request failed: {e}")
            raise LinearAPIError(f"Linear API request failed: {e}") from e

        if response.status_code >= 400:
            raise LinearAPIError(
                f"Linear API request failed ({response.status_code}): {response.text[:200]}"
            )

        result = response.json()
        if result.get("errors"):
            raise LinearAPIError(f"Linear GraphQL errors: {result['errors']}")

        return result.get("data") or {}

    @staticmethod
    def _nodes(data: Dict[str, Any], *path: str) -> List[Dict[str, Any]]:
        for key in path:
            data = data.get(key) or {}
        return data.get("nodes") or []

    async def _mutate(self, mutation: str, variables: Dict[str, Any], field: str, entity: str) -> Dict[str, Any]:
        """Run a mutation and return the created/updated entity.

        Unset (None) variables are dropped so updates only touch given fields.
        """
        data = await self.graphql(mutation, {k: v for k, v in variables.items() if v is not None})
        payload = data.get(field) or {}
        if not payload.get("success") or not payload.get(entity):
            raise LinearAPIError(f"Linear {field} was not successful")
        return payload[entity]

    # =========================================================================
    # QUERIES
    # =========================================================================

    async def get_teams(self) -> List[Dict[str, Any]]:
        """All teams visible to the API key."""
        teams = self._nodes(await self.graphql(TEAMS_QUERY), "teams")
        logger.info(f"Fetched {len(teams)} Linear teams")
        return teams

    async def get_projects(self, team_id: str) -> List[Dict[str, Any]]:
        return self._nodes(await self.graphql(PROJECTS_QUERY, {"teamId": team_id}), "projects")

    async def get_issues(self, project_id: str) -> List[Dict[str, Any]]:
        return self._nodes(await self.graphql(ISSUES_QUERY, {"projectId": project_id}), "issues")

    async def get_team_states(self, team_id: str) -> List[Dict[str, Any]]:
        """Workflow states (Todo, In Progress, Done...) used to move issues."""
        return self._nodes(await self.graphql(TEAM_STATES_QUERY, {"teamId": team_id}), "team", "states")

    async def get_team_members(self, team_id: str) -> List[Dict[str, Any]]:
        return self._nodes(await self.graphql(TEAM_MEMBERS_QUERY, {"teamId": team_id}), "team", "members")

    # =========================================================================
    # MUTATIONS
    # =========================================================================

    async def create_issue(
        self,
        team_id: str,
        title: str,
        description: Optional[str] = None,
        priority: int = 0,
        project_id: Optional[str] = None,
    ) -> Dict[str, Any]:
        issue = await self._mutate(ISSUE_CREATE_MUTATION, {
            "teamId": team_id,
            "title": title,
            "description": description,
            "priority": priority,
            "projectId": project_id,
        }, "issueCreate", "issue")
        logger.info(f"Created Linear issue {issue.get('identifier')}")
        return issue

    async def update_issue(
        self,
        issue_id: str,
        title: Optional[str] = None,
        description: Optional[str] = None,
        priority: Optional[int] = None,
        state_id: Optional[str] = None,
    ) -> Dict[str, Any]:
        issue = await self._mutate(ISSUE_UPDATE_MUTATION, {
            "issueId": issue_id,
            "title": title,
            "description": description,
            "priority": priority,
            "stateId": state_id,
        }, "issueUpdate", "issue")
        logger.info(f"Updated Linear issue {issue.get('identifier')}")
        return issue

    async def create_comment(self, issue_id: str, body: str) -> Dict[str, Any]:
        return await self._mutate(
            COMMENT_CREATE_MUTATION, {"issueId": issue_id, "body": body}, "commentCreate", "comment"
        )


_linear_client: Optional[LinearClient] = None


def get_linear_client() -> LinearClient:
    global _linear_client
    if _linear_client is None:
        _linear_client = LinearClient()
    return _linear_client
