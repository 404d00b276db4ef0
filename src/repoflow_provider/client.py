"""repoflow REST API client.

Only the lookups needed by the data sources are implemented. Requests are
synchronous, are not retried and carry no caching.
"""

from __future__ import annotations

import json
import logging
import urllib.error
import urllib.parse
import urllib.request
from typing import Any, Protocol

from .config import ProviderConfig
from .errors import RepoflowAPIError
from .models import Repository, Workspace

logger = logging.getLogger(__name__)


class RepoflowAPI(Protocol):
    """Lookups the data sources depend on."""

    def get_workspace(self, name_or_id: str) -> Workspace: ...

    def get_repository(self, workspace_id: str, name_or_id: str) -> Repository: ...


class RepoflowClient:
    """repoflow API client.

    Uses urllib for HTTP requests (no external dependencies).
    """

    API_PREFIX = "/api"

    def __init__(self, base_url: str, api_key: str, timeout: int = 30) -> None:
        """Initialize client.

        Args:
            base_url: Base URL of the repoflow server.
            api_key: API key sent as a bearer token.
            timeout: Request timeout in seconds.
        """
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.timeout = timeout

    @classmethod
    def from_config(cls, config: ProviderConfig) -> RepoflowClient:
        return cls(config.base_url, config.api_key, timeout=config.timeout)

    def _url(self, *segments: str) -> str:
        path = "/".join(urllib.parse.quote(s, safe="") for s in segments)
        return f"{self.base_url}{self.API_PREFIX}/{path}"

    def _request(self, url: str) -> Any:
        """Make a GET request and decode the JSON body.

        Raises:
            RepoflowAPIError: On transport errors, error statuses or bad bodies.
        """
        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Accept": "application/json",
        }
        req = urllib.request.Request(url, headers=headers, method="GET")
        logger.debug(f"GET {url}")

        try:
            with urllib.request.urlopen(req, timeout=self.timeout) as response:
                raw = response.read()
        except urllib.error.HTTPError as e:
            error_body = e.read().decode("utf-8", errors="replace") if e.fp else ""
            raise RepoflowAPIError(
                _error_message(error_body) or e.reason or "request failed", status=e.code
            ) from e
        except urllib.error.URLError as e:
            raise RepoflowAPIError(f"connection error: {e.reason}") from e
        except TimeoutError as e:
            raise RepoflowAPIError(f"request timed out after {self.timeout}s") from e

        try:
            data = json.loads(raw.decode("utf-8"))
        except UnicodeDecodeError as e:
            raise RepoflowAPIError(f"response is not valid UTF-8: {e}") from e
        except json.JSONDecodeError as e:
            raise RepoflowAPIError(f"invalid JSON response: {e}") from e

        return data

    def get_workspace(self, name_or_id: str) -> Workspace:
        """Get a workspace by name or id."""
        data = _expect_object(self._request(self._url("workspaces", name_or_id)))
        return Workspace.from_dict(data)

    def get_repository(self, workspace_id: str, name_or_id: str) -> Repository:
        """Get a repository of a workspace by name or id."""
        data = _expect_object(
            self._request(self._url("workspaces", workspace_id, "repositories", name_or_id))
        )
        return Repository.from_dict(data)

    def list_workspaces(self) -> list[Workspace]:
        """List the workspaces visible to the API key."""
        data = self._request(self._url("workspaces"))
        if isinstance(data, dict):
            data = data.get("workspaces", [])
        return [Workspace.from_dict(w) for w in data]


def _expect_object(data: Any) -> dict[str, Any]:
    if not isinstance(data, dict):
        raise RepoflowAPIError(f"unexpected response type: {type(data).__name__}")
    return data


def _error_message(body: str) -> str:
    """Pull the message out of an error body, if it has one."""
    if not body:
        return ""
    try:
        data = json.loads(body)
    except json.JSONDecodeError:
        return body.strip()
    if isinstance(data, dict):
        return str(data.get("message") or data.get("error") or "")
    return ""


def check_connection(config: ProviderConfig) -> bool:
    """Check that the repoflow server accepts the configured credentials.

    Args:
        config: Provider configuration.

    Returns:
        True if the server answered with the given credentials.

    Raises:
        RepoflowAPIError: If the server could not be reached or refused the key.
    """
    client = RepoflowClient.from_config(config)
    workspaces = client.list_workspaces()
    logger.info(f"Connected to {config.base_url}, {len(workspaces)} workspace(s) visible")
    return True
