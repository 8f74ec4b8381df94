"""HTTP transport for dataset downloads."""

from __future__ import annotations

import json
import logging
from typing import Any, Protocol

import aiohttp

from phoenixplay.exceptions import LoadFailedError

_logger = logging.getLogger(__name__)


class Transport(Protocol):
    """Anything that can turn a dataset URL into decoded JSON.

    ``HttpTransport`` is the network implementation; scripts and tests plug
    in local readers.
    """

    async def get_json(self, url: str) -> Any:
        ...


class HttpTransport:
    """Fetch JSON documents over HTTP with a shared ``aiohttp`` session."""

    def __init__(
        self,
        http_session: aiohttp.ClientSession,
        *,
        timeout: float,
    ) -> None:
        self._http = http_session
        self._timeout = aiohttp.ClientTimeout(total=timeout)

    async def get_json(self, url: str) -> Any:
        """GET *url* and decode the body as JSON.

        Every network, status or decode failure is raised as
        :class:`LoadFailedError` so callers can keep their current dataset.
        """
        _logger.debug("GET %s", url)

        try:
            async with self._http.get(url, timeout=self._timeout) as resp:
                text = await resp.text()
                if resp.status != 200:
                    raise LoadFailedError(
                        f"HTTP {resp.status} from {url}: {text[:200]}",
                        status_code=resp.status,
                        url=url,
                    )
        except LoadFailedError:
            raise
        except (aiohttp.ClientError, TimeoutError) as exc:
            raise LoadFailedError(f"Request to {url} failed: {exc}", url=url) from exc

        try:
            return json.loads(text)
        except json.JSONDecodeError as exc:
            raise LoadFailedError(f"Invalid JSON from {url}: {text[:200]}", url=url) from exc
