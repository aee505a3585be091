"""
GitHub API client for read-only, token-authenticated requests.

Failures never raise: HTTP errors come back as their status code, transport
errors as status 0, and unparseable bodies as an empty dict.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

import httpx

from gitmonitor.common.config.config import (
    GITHUB_API_URL,
    GITHUB_API_VERSION,
    GITHUB_REQUEST_TIMEOUT_SECONDS,
    GITHUB_USER_AGENT,
)

logger = logging.getLogger(__name__)

TRANSPORT_FAILURE_STATUS = 0


@dataclass
class ApiResponse:
    status_code: int
    data: Dict[str, Any] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return self.status_code == 200


class GitHubAPIClient:
    """Minimal GitHub REST client for commit status lookups."""

    def __init__(
        self,
        token: str,
        base_url: str = GITHUB_API_URL,
        timeout: float = GITHUB_REQUEST_TIMEOUT_SECONDS,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """Initialize GitHub API client.

        Args:
            token: Personal access token (sent as a bearer token)
            base_url: API root, override for GitHub Enterprise
            timeout: Request timeout in seconds
            transport: Custom httpx transport (tests)
        """
        self.token = token
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._transport = transport

    def _get_headers(self) -> Dict[str, str]:
        return {
            "Authorization": f"Bearer {self.token}",
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": GITHUB_API_VERSION,
            "User-Agent": GITHUB_USER_AGENT,
        }

    async def get(
        self, path: str, params: Optional[Dict[str, Any]] = None
    ) -> ApiResponse:
        """Make a GET request.

        Args:
            path: API path (without base URL)
            params: Query parameters

        Returns:
            ApiResponse with the status code and decoded JSON object
        """
        url = f"{self.base_url}/{path.lstrip('/')}"

        try:
            async with httpx.AsyncClient(
                timeout=httpx.Timeout(self.timeout),
                transport=self._transport,
            ) as client:
                response = await client.get(url, headers=self._get_headers(), params=params)
        except httpx.HTTPError as e:
            logger.warning(f"GitHub API request error for {url}: {e}")
            return ApiResponse(status_code=TRANSPORT_FAILURE_STATUS)

        return self._process_response(response, url)

    @staticmethod
    def _process_response(response: httpx.Response, url: str) -> ApiResponse:
        if response.status_code == 200:
            logger.debug(f"GitHub API GET {url} successful")
        else:
            logger.warning(f"GitHub API GET {url} failed (status {response.status_code})")

        try:
            data = response.json() if response.content else {}
        except ValueError:
            logger.warning(f"GitHub API returned a non-JSON body for {url}")
            data = {}
        if not isinstance(data, dict):
            data = {}

        return ApiResponse(status_code=response.status_code, data=data)
