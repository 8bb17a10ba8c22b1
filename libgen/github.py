"""Async client for the GitHub users API.

Only one call is made: ``GET /users/{handle}``, used to prefill the author
name and email.  Every failure is reported as ``ProfileLookupError`` so the
question flow can fall back to manual entry.

Typical usage::

    client = GitHubClient()
    profile = await client.fetch_profile("octocat")
    print(profile.name, profile.email)
"""

from __future__ import annotations

import httpx
from pydantic import BaseModel, Field

from .errors import ProfileLookupError


class GitHubProfile(BaseModel):
    """The public profile fields the generator cares about."""

    login: str = Field(default="", description="GitHub handle")
    name: str | None = Field(default=None, description="Display name, if public")
    email: str | None = Field(default=None, description="Public email, if any")


class GitHubClient:
    """Thin async wrapper over ``httpx.AsyncClient`` for profile lookups."""

    def __init__(
        self,
        base_url: str = "https://api.github.com",
        timeout: int = 10,
        token: str | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.token = token

    def _client(self) -> httpx.AsyncClient:
        """Return a fresh ``AsyncClient`` configured with our base URL and timeout."""
        headers = {"Accept": "application/vnd.github+json"}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return httpx.AsyncClient(
            base_url=self.base_url,
            timeout=httpx.Timeout(self.timeout, connect=5.0),
            headers=headers,
        )

    async def fetch_profile(self, handle: str) -> GitHubProfile:
        """Fetch the public profile of *handle*.

        Raises:
            ProfileLookupError: On connection problems, timeouts, unknown
                users or any other non-2xx response.
        """
        try:
            async with self._client() as client:
                response = await client.get(f"/users/{handle}")
                response.raise_for_status()
                data = response.json()
        except httpx.ConnectError as exc:
            raise ProfileLookupError(handle, f"cannot connect to {self.base_url}") from exc
        except httpx.TimeoutException as exc:
            raise ProfileLookupError(handle, f"timed out after {self.timeout}s") from exc
        except httpx.HTTPStatusError as exc:
            status = exc.response.status_code
            reason = "user not found" if status == 404 else f"HTTP {status}"
            raise ProfileLookupError(handle, reason) from exc
        except (httpx.HTTPError, ValueError) as exc:
            raise ProfileLookupError(handle, f"unexpected response: {exc}") from exc

        return GitHubProfile(
            login=data.get("login") or handle,
            name=data.get("name") or None,
            email=data.get("email") or None,
        )
