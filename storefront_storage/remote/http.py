"""
Shared aiohttp plumbing for the remote read/write clients.

Every way a request can go wrong is raised as RemoteUnavailableError so
the clients above have exactly one failure to translate.
"""

from __future__ import annotations

import asyncio
import json
import logging
from typing import Any

import aiohttp

from ..exceptions import RemoteUnavailableError

logger = logging.getLogger(__name__)


class HttpClientBase:
    """Owns (or borrows) an aiohttp session and issues JSON requests."""

    def __init__(
        self,
        timeout: float = 15.0,
        session: aiohttp.ClientSession | None = None,
    ) -> None:
        """
        Args:
            timeout: Total seconds allowed per request
            session: Optional externally managed session (not closed by us)
        """
        self.timeout = aiohttp.ClientTimeout(total=timeout)
        self._session = session
        self._owns_session = session is None

    async def _ensure_session(self) -> aiohttp.ClientSession:
        """Lazy initialize the HTTP session."""
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(timeout=self.timeout)
            self._owns_session = True
        return self._session

    async def close(self) -> None:
        """Close the session if this client created it."""
        if self._session is not None and self._owns_session and not self._session.closed:
            await self._session.close()
        self._session = None

    async def _request_json(self, method: str, url: str, **kwargs: Any) -> Any:
        """Issue one request and return the decoded JSON body.

        Raises:
            RemoteUnavailableError: On network failure, timeout, non-2xx
                status or a body that is not JSON
        """
        session = await self._ensure_session()
        try:
            async with session.request(method, url, timeout=self.timeout, **kwargs) as response:
                if not 200 <= response.status < 300:
                    text = await response.text()
                    raise RemoteUnavailableError(
                        url, f"HTTP {response.status}: {text[:200]}", status=response.status
                    )
                # Script endpoints answer JSON with a text/plain content type
                return await response.json(content_type=None)
        except RemoteUnavailableError:
            raise
        except asyncio.TimeoutError as e:
            raise RemoteUnavailableError(url, "request timed out") from e
        except aiohttp.ClientError as e:
            raise RemoteUnavailableError(url, f"{type(e).__name__}: {e}") from e
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise RemoteUnavailableError(url, f"invalid JSON response: {e}") from e
