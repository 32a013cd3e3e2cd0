"""HTTP JSON transport shared by the simulation and provider clients."""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from typing import Any, Protocol

import aiohttp

from tsw6weather._redact import redact_for_log
from tsw6weather.exceptions import Tsw6TransportError

_logger = logging.getLogger(__name__)


class Transport(Protocol):
    """Structural transport interface used by endpoint modules.

    Having a protocol here makes it easy to pass test doubles while keeping
    the production implementation (`JsonTransport`) concrete.
    """

    async def request(
        self,
        method: str,
        path: str,
        *,
        params: Mapping[str, str] | None = None,
        json_body: Any = None,
    ) -> Any:
        ...


class JsonTransport:
    """aiohttp transport that sends JSON and decodes JSON replies.

    Every failure mode (connection error, timeout, non-2xx status, body that
    is not JSON) surfaces as :class:`Tsw6TransportError` so the retry layer
    has a single exception type to handle.  An empty body decodes to ``None``.
    """

    def __init__(
        self,
        base_url: str,
        http_session: aiohttp.ClientSession,
        *,
        headers: Mapping[str, str] | None = None,
        timeout: aiohttp.ClientTimeout | None = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._http = http_session
        self._headers: dict[str, str] = {"Accept": "application/json", **(headers or {})}
        self._timeout = timeout

    async def request(
        self,
        method: str,
        path: str,
        *,
        params: Mapping[str, str] | None = None,
        json_body: Any = None,
    ) -> Any:
        url = f"{self._base_url}{path}"
        _logger.debug(
            "%s %s params=%s headers=%s body=%s",
            method,
            url,
            redact_for_log(params),
            redact_for_log(self._headers),
            redact_for_log(json_body),
        )

        try:
            async with self._http.request(
                method,
                url,
                params=params,
                json=json_body,
                headers=self._headers,
                timeout=self._timeout,
            ) as resp:
                text = await resp.text()
                if not 200 <= resp.status < 300:
                    raise Tsw6TransportError(
                        f"HTTP {resp.status} from {path}: {text[:200]}",
                        status_code=resp.status,
                        endpoint=path,
                    )
        except Tsw6TransportError:
            raise
        except aiohttp.ClientError as exc:
            raise Tsw6TransportError(f"Request to {path} failed: {exc}", endpoint=path) from exc
        except TimeoutError as exc:
            raise Tsw6TransportError(f"Request to {path} timed out", endpoint=path) from exc
        except UnicodeDecodeError as exc:
            raise Tsw6TransportError(
                f"Undecodable body from {path}: {exc.reason}",
                status_code=resp.status,
                endpoint=path,
            ) from exc

        if not text.strip():
            return None
        try:
            return json.loads(text)
        except json.JSONDecodeError as exc:
            raise Tsw6TransportError(
                f"Invalid JSON from {path}: {text[:200]}",
                status_code=resp.status,
                endpoint=path,
            ) from exc
