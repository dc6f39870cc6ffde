"""
Cookie-bearing HTTP session for talking to a UniFi controller.

One ControllerSession lives for exactly one incoming request: it owns its
own aiohttp cookie jar, so the ``unifises`` cookie obtained at login is sent
with every later call of that request and is thrown away with the session.
"""

import asyncio
from typing import Any, Optional, Tuple

import aiohttp
from aiohttp.abc import AbstractCookieJar

from switchportreset.utils.errors import TransportError, UpstreamStatusError
from switchportreset.utils.logger import get_logger

logger = get_logger(__name__)

DEFAULT_TIMEOUT = 30.0


class ControllerSession:
    """Per-request HTTP client bound to a controller base URL."""

    def __init__(self, base_url: str, timeout: float = DEFAULT_TIMEOUT, verify_ssl: bool = True):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.verify_ssl = verify_ssl
        self._session: Optional[aiohttp.ClientSession] = None

    async def __aenter__(self) -> "ControllerSession":
        # unsafe=True: controllers are usually addressed by IP, which the
        # default jar refuses to store cookies for
        self._session = aiohttp.ClientSession(
            cookie_jar=aiohttp.CookieJar(unsafe=True),
            timeout=aiohttp.ClientTimeout(total=self.timeout),
            connector=aiohttp.TCPConnector(ssl=self.verify_ssl),
            headers={"User-Agent": "SwitchPortReset/1.0"},
        )
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    async def close(self):
        """Закрывает HTTP сессию."""
        if self._session and not self._session.closed:
            await self._session.close()

    @property
    def cookie_jar(self) -> AbstractCookieJar:
        return self._require_session().cookie_jar

    def _require_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            raise RuntimeError("ControllerSession is not open; use 'async with'")
        return self._session

    async def _request(self, method: str, path: str, **kwargs: Any) -> Tuple[int, bytes]:
        session = self._require_session()
        url = f"{self.base_url}{path}"
        logger.debug(f"{method} {url}")

        try:
            # the body is read and the connection released before returning
            async with session.request(method, url, **kwargs) as resp:
                status, reason = resp.status, resp.reason
                body = await resp.read()
        except (aiohttp.ClientError, asyncio.TimeoutError, OSError) as e:
            raise TransportError(str(e) or e.__class__.__name__) from e

        if not 200 <= status < 300:
            raise UpstreamStatusError(status, reason, body.decode("utf-8", errors="replace"))

        return status, body

    async def post_json(self, path: str, body: Any) -> Tuple[int, bytes]:
        """POST a JSON body; Origin is required by the CSRF-sensitive login endpoint."""
        headers = {
            "Content-Type": "application/json",
            "Origin": self.base_url,
        }
        return await self._request("POST", path, json=body, headers=headers)

    async def get(self, path: str) -> Tuple[int, bytes]:
        return await self._request("GET", path)
