"""HTTP transport for the CSV feeds."""

from __future__ import annotations

import logging
from typing import Protocol

import aiohttp

from pycarburanti._constants import USER_AGENT
from pycarburanti.exceptions import FetchError

_logger = logging.getLogger(__name__)


class FeedTransport(Protocol):
    """Structural transport interface used by the scheduler.

    Having a protocol here makes it easy to pass test doubles while keeping
    the production implementation (`HttpFeedTransport`) concrete.
    """

    async def fetch_text(self, url: str) -> str:
        ...


class HttpFeedTransport:
    """Fetch a whole feed body over HTTP(S) and decode it.

    No timeout is set beyond the session defaults.
    """

    def __init__(self, http_session: aiohttp.ClientSession, *, encoding: str = "utf-8") -> None:
        self._http = http_session
        self._encoding = encoding

    async def fetch_text(self, url: str) -> str:
        headers = {"user-agent": USER_AGENT}

        _logger.debug("GET %s", url)

        try:
            async with self._http.get(url, headers=headers) as resp:
                body = await resp.read()
                if resp.status != 200:
                    raise FetchError(
                        f"HTTP {resp.status} from {url}",
                        url=url,
                        status_code=resp.status,
                    )
        except FetchError:
            raise
        except (aiohttp.ClientError, OSError) as exc:
            raise FetchError(f"Request to {url} failed: {exc}", url=url) from exc

        # The registry is not always valid UTF-8; keep the rows readable.
        return body.decode(self._encoding, errors="replace")
