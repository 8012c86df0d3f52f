"""HTTP transport for snapshot endpoints."""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from typing import Any, Protocol

import aiohttp

from pyairspace._constants import USER_AGENT
from pyairspace.exceptions import DecodeFailure, FetchFailure

_logger = logging.getLogger(__name__)


class SnapshotFetcher(Protocol):
    """Structural fetch interface used by endpoint modules.

    Having a protocol here makes it easy to pass test doubles while keeping
    the production implementation (`JsonTransport`) concrete.
    """

    async def get_json(self, url: str, params: Mapping[str, str] | None = None) -> Any:
        ...


class JsonTransport:
    """GET a URL and decode its JSON body.

    Network errors, timeouts and non-200 statuses become
    :class:`FetchFailure`; undecodable bodies become :class:`DecodeFailure`.
    """

    def __init__(self, http_session: aiohttp.ClientSession, *, timeout: float) -> None:
        self._http = http_session
        self._timeout = aiohttp.ClientTimeout(total=timeout)

    async def get_json(self, url: str, params: Mapping[str, str] | None = None) -> Any:
        headers = {
            "accept": "application/json",
            "user-agent": USER_AGENT,
        }

        _logger.debug("GET %s %s", url, dict(params) if params else "")

        try:
            async with self._http.get(url, params=params, headers=headers, timeout=self._timeout) as resp:
                body = await resp.read()
                if resp.status != 200:
                    excerpt = body[:200].decode("utf-8", errors="replace")
                    raise FetchFailure(
                        f"HTTP {resp.status} from {url}: {excerpt}",
                        status_code=resp.status,
                        url=url,
                    )
        except FetchFailure:
            raise
        except aiohttp.ClientError as exc:
            raise FetchFailure(f"Request to {url} failed: {exc}", url=url) from exc
        except TimeoutError as exc:
            raise FetchFailure(f"Request to {url} timed out", url=url) from exc

        try:
            text = body.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise DecodeFailure(f"Body from {url} is not valid UTF-8", url=url) from exc

        try:
            return json.loads(text)
        except json.JSONDecodeError as exc:
            raise DecodeFailure(f"Invalid JSON from {url}: {text[:200]}", url=url) from exc
