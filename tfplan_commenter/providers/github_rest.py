"""GitHub comment store implementation using direct REST API calls."""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import Any

import httpx
import structlog

from tfplan_commenter.config.settings import DEFAULT_BASE_URL
from tfplan_commenter.exceptions import CommentStoreError, ConfigurationError
from tfplan_commenter.models.domain import Comment, CommentPage
from tfplan_commenter.providers.base import CommentStore

log = structlog.get_logger(__name__)

PER_PAGE = 100


def normalize_base_url(base_url: str) -> str:
    """Ensure the API base URL ends with exactly one trailing slash."""
    if not base_url.endswith("/"):
        return f"{base_url}/"
    return base_url


@dataclass(frozen=True)
class StoreSession:
    """Authenticated connection to one repository on a GitHub API endpoint.

    Built once by ``open_session`` and handed to ``GitHubCommentStore``;
    nothing mutates it afterwards.
    """

    client: httpx.AsyncClient
    base_url: str
    owner: str
    repo: str

    @property
    def repo_path(self) -> str:
        """Relative API path of the repository."""
        return f"repos/{self.owner}/{self.repo}"


def build_client(
    base_url: str,
    token: str | None = None,
    username: str | None = None,
    password: str | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> httpx.AsyncClient:
    """Create the HTTP client for a session.

    A token wins over basic auth. Whitespace around every credential is
    stripped, since CI secrets often carry a trailing newline.

    Raises:
        ConfigurationError: If neither a token nor a full username/password
            pair is given
    """
    headers = {
        "Accept": "application/vnd.github+json",
        "User-Agent": "tfplan-commenter",
    }
    auth: httpx.Auth | None = None

    if token and token.strip():
        headers["Authorization"] = f"token {token.strip()}"
    elif username and password:
        auth = httpx.BasicAuth(username.strip(), password.strip())
    else:
        raise ConfigurationError("You must provide an API key or a username and password")

    return httpx.AsyncClient(
        base_url=normalize_base_url(base_url),
        headers=headers,
        auth=auth,
        timeout=None,
        transport=transport,
    )


@asynccontextmanager
async def open_session(
    owner: str,
    repo: str,
    base_url: str = DEFAULT_BASE_URL,
    token: str | None = None,
    username: str | None = None,
    password: str | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> AsyncIterator[StoreSession]:
    """Open a store session and close its client on exit.

    Args:
        owner: Repository owner (user or organization)
        repo: Repository name
        base_url: API base URL (GitHub Enterprise uses ``https://host/api/v3/``)
        token: Personal access or app token
        username: Basic auth username, used when no token is given
        password: Basic auth password, used when no token is given
        transport: Optional httpx transport override

    Yields:
        StoreSession bound to the repository
    """
    normalized = normalize_base_url(base_url)
    client = build_client(normalized, token, username, password, transport)
    log.info("github_session_opened", base_url=normalized, owner=owner, repo=repo)
    try:
        yield StoreSession(client=client, base_url=normalized, owner=owner, repo=repo)
    finally:
        await client.aclose()


class GitHubCommentStore(CommentStore):
    """Issue comments and issue search through the GitHub REST API v3."""

    def __init__(self, session: StoreSession):
        """Initialize store.

        Args:
            session: Authenticated session for the target repository
        """
        self.session = session

    async def list_comments(self, issue_number: int, page: int = 1) -> CommentPage:
        """Fetch one page of issue comments.

        The next page number is read from the ``rel="next"`` entry of the
        ``Link`` response header.
        """
        log.debug("list_comments", issue_number=issue_number, page=page)

        response = await self._request(
            "GET",
            f"{self.session.repo_path}/issues/{issue_number}/comments",
            params={"per_page": PER_PAGE, "page": page},
        )
        comments = [self._parse_comment(item) for item in self._json(response)]
        return CommentPage(comments=comments, next_page=self._next_page(response))

    async def create_comment(self, issue_number: int, body: str) -> Comment:
        """Post a new comment on an issue."""
        log.info("create_comment", issue_number=issue_number)

        response = await self._request(
            "POST",
            f"{self.session.repo_path}/issues/{issue_number}/comments",
            json={"body": body},
        )
        return self._parse_comment(self._json(response))

    async def edit_comment(self, comment_id: int, body: str) -> Comment:
        """Replace the body of an existing comment."""
        log.info("edit_comment", comment_id=comment_id)

        response = await self._request(
            "PATCH",
            f"{self.session.repo_path}/issues/comments/{comment_id}",
            json={"body": body},
        )
        return self._parse_comment(self._json(response))

    async def search_issue_numbers(self, query: str) -> list[int]:
        """Search issues and pull requests of the session's repository."""
        scoped = f"{query} repo:{self.session.owner}/{self.session.repo}"
        log.info("search_issues", query=scoped)

        response = await self._request("GET", "search/issues", params={"q": scoped})
        data = self._json(response)
        try:
            return [int(item["number"]) for item in data.get("items", [])]
        except (AttributeError, KeyError, TypeError, ValueError) as e:
            raise CommentStoreError(f"Malformed search response: {e}") from e

    async def _request(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        """Send one request and translate failures into CommentStoreError."""
        try:
            response = await self.session.client.request(method, path, **kwargs)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            log.error(
                "github_request_failed",
                method=method,
                path=path,
                status_code=e.response.status_code,
            )
            raise CommentStoreError(
                f"GitHub request {method} {path} failed",
                status_code=e.response.status_code,
                response_text=e.response.text,
            ) from e
        except httpx.HTTPError as e:
            log.error("github_request_failed", method=method, path=path, error=str(e))
            raise CommentStoreError(f"GitHub request {method} {path} failed: {e}") from e

        return response

    @staticmethod
    def _json(response: httpx.Response) -> Any:
        try:
            return response.json()
        except ValueError as e:
            raise CommentStoreError("GitHub returned a non-JSON response", status_code=response.status_code) from e

    @staticmethod
    def _next_page(response: httpx.Response) -> int | None:
        next_link = response.links.get("next")
        if not next_link:
            return None

        page = httpx.URL(next_link["url"]).params.get("page")
        if page is None:
            raise CommentStoreError(f"Cannot read next page from Link header: {next_link['url']}")
        return int(page)

    @staticmethod
    def _parse_comment(data: Any) -> Comment:
        """Convert a GitHub comment payload to our Comment model."""
        try:
            return Comment(id=int(data["id"]), body=data.get("body") or "")
        except (AttributeError, KeyError, TypeError, ValueError) as e:
            raise CommentStoreError(f"Malformed comment in GitHub response: {e}") from e
