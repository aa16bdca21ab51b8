"""Async GitHub REST and GraphQL client."""

import logging
from datetime import UTC, datetime
from typing import Any, Self

import httpx

logger = logging.getLogger(__name__)

REPOS_PER_PAGE = 100
MAX_REPO_PAGES = 3

USER_ANALYTICS_QUERY = """
query UserAnalytics($login: String!) {
  user(login: $login) {
    contributionsCollection {
      contributionCalendar {
        totalContributions
        weeks {
          firstDay
          contributionDays {
            date
            contributionCount
          }
        }
      }
      totalCommitContributions
      totalIssueContributions
      totalPullRequestContributions
      totalPullRequestReviewContributions
      restrictedContributionsCount
    }
    repositories(
      first: 100
      orderBy: { field: STARGAZERS, direction: DESC }
      privacy: PUBLIC
      ownerAffiliations: OWNER
    ) {
      nodes {
        name
        stargazerCount
        forkCount
        primaryLanguage {
          name
          color
        }
        languages(first: 10, orderBy: { field: SIZE, direction: DESC }) {
          edges {
            size
            node {
              name
              color
            }
          }
        }
        updatedAt
        createdAt
        url
        isArchived
      }
    }
    pinnedItems(first: 6, types: [REPOSITORY]) {
      nodes {
        ... on Repository {
          name
          description
          stargazerCount
          url
          primaryLanguage {
            name
          }
          updatedAt
          createdAt
          isArchived
        }
      }
    }
  }
}
"""


class GitHubAPIError(Exception):
    """Non-success response from the GitHub REST or GraphQL API.

    Attributes:
        status: HTTP status code of the response.
        payload: Decoded error body (empty dict if it was not JSON).
    """

    def __init__(self, message: str, status: int, payload: Any = None):
        """Initialize with response details.

        Args:
            message: Error message.
            status: HTTP status code.
            payload: Raw error payload from upstream.
        """
        super().__init__(message)
        self.status = status
        self.payload = payload if payload is not None else {}

    @property
    def is_not_found(self) -> bool:
        return self.status == 404


class NotFoundError(GitHubAPIError):
    """Raised when the user or resource doesn't exist."""


class AuthenticationError(GitHubAPIError):
    """Raised for authentication failures."""


class RateLimitError(GitHubAPIError):
    """Raised when rate limit is exceeded."""

    def __init__(
        self,
        message: str,
        status: int,
        payload: Any = None,
        reset_at: datetime | None = None,
    ):
        """Initialize with reset time.

        Args:
            message: Error message.
            status: HTTP status code.
            payload: Raw error payload from upstream.
            reset_at: When rate limit resets (UTC).
        """
        super().__init__(message, status, payload)
        self.reset_at = reset_at


def _decode_payload(response: httpx.Response) -> Any:
    try:
        return response.json()
    except ValueError:
        return {}


def _raise_for_response(response: httpx.Response, fallback: str) -> None:
    """Raise the matching GitHubAPIError for a non-success response.

    Args:
        response: Response to inspect.
        fallback: Message used when the payload carries none.

    Raises:
        NotFoundError: On 404.
        RateLimitError: On 403 with an exhausted rate limit.
        AuthenticationError: On 401 or any other 403.
        GitHubAPIError: For every other non-success status.
    """
    if response.is_success:
        return

    status = response.status_code
    payload = _decode_payload(response)
    message = (payload.get("message") if isinstance(payload, dict) else None) or fallback

    if status == 404:
        raise NotFoundError(message, status, payload)

    if status == 403 and response.headers.get("X-RateLimit-Remaining") == "0":
        reset_timestamp = int(response.headers.get("X-RateLimit-Reset", "0"))
        reset_at = datetime.fromtimestamp(reset_timestamp, tz=UTC)
        raise RateLimitError(message, status, payload, reset_at=reset_at)

    if status in (401, 403):
        raise AuthenticationError(message, status, payload)

    raise GitHubAPIError(message, status, payload)


class GitHubClient:
    """Async client for the GitHub REST and GraphQL APIs.

    Works without a token for REST calls; the GraphQL API requires one,
    so `graphql` returns None when no token is configured.

    Attributes:
        BASE_URL: GitHub API base URL.
    """

    BASE_URL = "https://api.github.com"

    def __init__(self, token: str = "", timeout: float = 30.0):
        """Initialize client with an optional authentication token.

        Args:
            token: GitHub personal access token, empty for anonymous access.
            timeout: Request timeout in seconds.
        """
        self.token = token
        self.timeout = timeout
        self._client: httpx.AsyncClient | None = None

    async def __aenter__(self) -> Self:
        """Enter async context manager."""
        headers = {
            "Accept": "application/vnd.github+json",
            "User-Agent": "ghcompare",
            "X-GitHub-Api-Version": "2022-11-28",
        }
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        else:
            logger.warning("No GitHub token configured; contribution analytics are unavailable")

        self._client = httpx.AsyncClient(
            base_url=self.BASE_URL,
            headers=headers,
            timeout=self.timeout,
        )
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        """Exit async context manager."""
        if self._client:
            await self._client.aclose()

    @property
    def http(self) -> httpx.AsyncClient:
        if not self._client:
            raise RuntimeError("Client not initialized. Use async context manager.")
        return self._client

    async def rest_get(self, path: str, params: dict | None = None) -> Any:
        """Fetch JSON from a REST endpoint.

        Args:
            path: API endpoint path.
            params: Query parameters.

        Returns:
            Decoded JSON body.

        Raises:
            GitHubAPIError: For non-success responses.
        """
        response = await self.http.get(path, params=params)
        _raise_for_response(response, f"GitHub REST API error ({response.status_code})")
        return response.json()

    async def graphql(self, query: str, variables: dict) -> dict | None:
        """Run a GraphQL query.

        Args:
            query: GraphQL document.
            variables: Query variables.

        Returns:
            The `data` member of the response, or None when no token is
            configured or the response carried no data.

        Raises:
            NotFoundError: If any error has type NOT_FOUND.
            GitHubAPIError: For non-success responses or a non-empty errors array.
        """
        if not self.token:
            logger.debug("Skipping GraphQL query: no token configured")
            return None

        response = await self.http.post("/graphql", json={"query": query, "variables": variables})
        payload = _decode_payload(response)
        if not isinstance(payload, dict):
            payload = {}

        errors = [error for error in payload.get("errors") or [] if isinstance(error, dict)]
        if not response.is_success or errors:
            message = (errors[0].get("message") if errors else None) or (
                f"GitHub GraphQL API error ({response.status_code})"
            )
            # GraphQL reports a missing user as HTTP 200 with a NOT_FOUND error
            if any(error.get("type") == "NOT_FOUND" for error in errors):
                raise NotFoundError(message, 404, payload)
            raise GitHubAPIError(message, response.status_code, payload)

        return payload.get("data")

    async def get_user(self, login: str) -> dict:
        """Fetch the base profile record.

        Args:
            login: GitHub username.

        Returns:
            Raw user JSON.
        """
        return await self.rest_get(f"/users/{login}")

    async def get_user_repositories(self, login: str) -> list[dict]:
        """Fetch owned repositories, most recently updated first.

        Fetches at most MAX_REPO_PAGES pages of REPOS_PER_PAGE. Stops early on
        a short page or when the response has no `next` link.

        Args:
            login: GitHub username.

        Returns:
            Raw repository JSON objects in upstream order.
        """
        repositories: list[dict] = []
        page = 1

        while True:
            response = await self.http.get(
                f"/users/{login}/repos",
                params={
                    "per_page": REPOS_PER_PAGE,
                    "type": "owner",
                    "sort": "updated",
                    "page": page,
                },
            )
            _raise_for_response(
                response,
                f"Failed to fetch repositories for {login} ({response.status_code})",
            )

            batch = response.json()
            repositories.extend(batch)

            has_next = "next" in response.links
            if not has_next or len(batch) < REPOS_PER_PAGE or page >= MAX_REPO_PAGES:
                break

            page += 1

        logger.debug(
            "Fetched %d repositories for %s over %d page(s)", len(repositories), login, page
        )
        return repositories

    async def get_user_analytics(self, login: str) -> dict | None:
        """Fetch contribution calendar, repository languages and pinned items.

        Args:
            login: GitHub username.

        Returns:
            The GraphQL `user` object, or None when analytics are unavailable.
        """
        data = await self.graphql(USER_ANALYTICS_QUERY, {"login": login})
        if not data:
            return None
        return data.get("user")
