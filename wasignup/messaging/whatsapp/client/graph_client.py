"""
Graph API HTTP client.

Key Design Decisions:
- Pure dependency injection: the aiohttp session is created by the app lifespan
- Single responsibility for HTTP transport; endpoint semantics live in handlers
- Non-200 responses are returned, not raised; handlers decide what a failure means
- Transport failures (DNS, connect, timeout) raise UpstreamError
"""

import json
from dataclasses import dataclass
from typing import Any
from urllib.parse import quote

import aiohttp

from wasignup.core.errors import UpstreamError, ValidationError
from wasignup.core.logging.logger import get_logger


def path_segment(value: str) -> str:
    """
    Quote a caller-supplied id for use as one Graph path segment.

    Raises:
        ValidationError: If the id is empty or a dot segment
    """
    if value in ("", ".", ".."):
        raise ValidationError(f"invalid Graph object id: {value!r}")
    return quote(value, safe="")


class GraphUrlBuilder:
    """Builds URLs for Graph API endpoints."""

    def __init__(self, base_url: str, api_version: str):
        self.base_url = base_url.rstrip("/")
        self.api_version = api_version

    def get_endpoint_url(self, endpoint: str) -> str:
        """Build URL for an endpoint path such as ``me/businesses``."""
        return f"{self.base_url}/{self.api_version}/{endpoint.lstrip('/')}"

    def get_oauth_url(self) -> str:
        return self.get_endpoint_url("oauth/access_token")


@dataclass
class GraphResponse:
    """Status and raw body of one Graph call."""

    status: int
    body: str

    @property
    def ok(self) -> bool:
        return self.status == 200

    def json(self) -> Any:
        return json.loads(self.body)


class GraphClient:
    """
    Graph API transport with explicit, finite timeouts.

    All calls go through the shared session, so connection pooling and the
    session-level ``aiohttp.ClientTimeout`` apply to every request.
    """

    def __init__(
        self,
        session: aiohttp.ClientSession,
        api_version: str,
        base_url: str,
        logger: Any | None = None,
    ):
        """Initialize Graph client with dependency injection.

        Args:
            session: Persistent aiohttp session (managed by FastAPI lifespan)
            api_version: Graph API version, e.g. ``v23.0``
            base_url: Graph API base URL
            logger: Pre-configured logger instance
        """
        self.session = session
        self.url_builder = GraphUrlBuilder(base_url, api_version)
        self.logger = logger or get_logger(__name__)

    def _get_headers(self, access_token: str | None) -> dict[str, str]:
        headers = {"Accept": "application/json"}
        if access_token:
            headers["Authorization"] = f"Bearer {access_token}"
        return headers

    async def request(
        self,
        method: str,
        endpoint: str | None = None,
        *,
        url: str | None = None,
        access_token: str | None = None,
        params: dict[str, Any] | None = None,
        data: dict[str, str] | None = None,
        json_body: dict[str, Any] | None = None,
    ) -> GraphResponse:
        """Send a request and return its status and body.

        Args:
            method: HTTP method
            endpoint: Endpoint path under the versioned base URL
            url: Absolute URL (pagination cursors); overrides ``endpoint``
            access_token: Bearer token, omitted for the OAuth exchange
            params: Query parameters
            data: Form fields (sent as application/x-www-form-urlencoded)
            json_body: JSON payload

        Raises:
            UpstreamError: On transport failure or timeout
        """
        target = url or self.url_builder.get_endpoint_url(endpoint or "")

        kwargs: dict[str, Any] = {"headers": self._get_headers(access_token)}
        if params is not None:
            kwargs["params"] = params
        if data is not None:
            kwargs["data"] = data
        if json_body is not None:
            kwargs["json"] = json_body

        try:
            async with self.session.request(method, target, **kwargs) as response:
                body = await response.text()
                self.logger.debug(f"{method} {target} -> {response.status}")
                return GraphResponse(status=response.status, body=body)

        except (aiohttp.ClientError, TimeoutError) as err:
            self.logger.error(f"{method} {target} failed: {err!r}")
            raise UpstreamError(
                f"{method} {target} request failed: {err!r}"
            ) from err

    async def get(
        self,
        endpoint: str,
        access_token: str,
        params: dict[str, Any] | None = None,
    ) -> GraphResponse:
        return await self.request(
            "GET", endpoint, access_token=access_token, params=params
        )

    async def get_url(self, url: str, access_token: str) -> GraphResponse:
        """GET an absolute URL, e.g. a ``paging.next`` cursor."""
        return await self.request("GET", url=url, access_token=access_token)

    async def post_json(
        self, endpoint: str, access_token: str, payload: dict[str, Any]
    ) -> GraphResponse:
        return await self.request(
            "POST", endpoint, access_token=access_token, json_body=payload
        )

    async def post_form(self, url: str, form: dict[str, str]) -> GraphResponse:
        return await self.request("POST", url=url, data=form)
