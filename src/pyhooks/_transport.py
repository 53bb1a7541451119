"""HTTP transport for :class:`~pyhooks.fetch.RequestCoordinator`."""

from __future__ import annotations

import json
import logging
from typing import Any, Protocol

import aiohttp

from pyhooks._redact import redact_body, redact_headers
from pyhooks.config import HooksConfig
from pyhooks.exceptions import HttpStatusError, TransportError
from pyhooks.models.fetch import FetchTarget

_logger = logging.getLogger(__name__)


class Transport(Protocol):
    """Structural transport interface used by the request coordinator.

    Having a protocol here makes it easy to pass test doubles while keeping
    the production implementation (`HttpTransport`) concrete.
    Implementations raise :class:`TransportError` (or its subclass
    :class:`HttpStatusError`) on failure and return the decoded JSON body
    on success.
    """

    async def fetch_json(self, target: FetchTarget) -> Any: ...


def _snippet(raw: bytes) -> str:
    return raw[:200].decode("utf-8", errors="replace")


def _encode_body(body: Any) -> str | bytes | None:
    if body is None or isinstance(body, (str, bytes)):
        return body
    return json.dumps(body, separators=(",", ":"))


class HttpTransport:
    """aiohttp-backed transport that speaks JSON.

    Usage::

        async with HttpTransport(config) as transport:
            coordinator = RequestCoordinator(transport)
    """

    def __init__(
        self,
        config: HooksConfig | None = None,
        *,
        session: aiohttp.ClientSession | None = None,
    ) -> None:
        self._config = config or HooksConfig()
        self._external_session = session is not None
        self._http = session

    async def __aenter__(self) -> HttpTransport:
        if self._http is None:
            self._http = aiohttp.ClientSession()
        return self

    async def __aexit__(self, *exc: Any) -> None:
        await self.close()

    async def close(self) -> None:
        if not self._external_session and self._http is not None:
            await self._http.close()
        self._http = None

    def _build_headers(self, target: FetchTarget) -> dict[str, str]:
        """JSON content-type default; target headers win, case-insensitively."""
        headers: dict[str, str] = {}
        if not any(name.lower() == "content-type" for name in target.headers):
            headers["Content-Type"] = self._config.content_type
        headers.update(target.headers)
        return headers

    async def fetch_json(self, target: FetchTarget) -> Any:
        """Issue *target* and return its decoded JSON body.

        1. Merge default headers with the target's headers
        2. Send the request with the configured (or per-target) timeout
        3. Reject any status outside 200-299
        4. Decode the body as JSON
        """
        if self._http is None:
            self._http = aiohttp.ClientSession()
            self._external_session = False

        headers = self._build_headers(target)
        body = _encode_body(target.body)
        timeout = aiohttp.ClientTimeout(total=target.timeout or self._config.request_timeout)

        if self._config.trace_requests:
            _logger.debug(
                "%s %s headers=%s body=%s",
                target.method,
                target.url,
                redact_headers(headers),
                redact_body(target.body),
            )
        else:
            _logger.debug("%s %s", target.method, target.url)

        try:
            async with self._http.request(
                target.method,
                target.url,
                data=body,
                headers=headers,
                timeout=timeout,
            ) as resp:
                raw = await resp.read()
                if not 200 <= resp.status < 300:
                    raise HttpStatusError(
                        f"HTTP {resp.status} from {target.url}: {_snippet(raw)}",
                        status_code=resp.status,
                        url=target.url,
                    )
                status = resp.status
        except TransportError:
            raise
        except aiohttp.ClientError as exc:
            raise TransportError(
                f"Request to {target.url} failed: {exc}",
                url=target.url,
            ) from exc
        except TimeoutError as exc:
            raise TransportError(
                f"Request to {target.url} timed out",
                url=target.url,
            ) from exc

        try:
            result = json.loads(raw.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError) as exc:
            raise TransportError(
                f"Invalid JSON from {target.url}: {_snippet(raw)}",
                status_code=status,
                url=target.url,
            ) from exc

        if self._config.trace_requests:
            _logger.debug("HTTP %d from %s body=%s", status, target.url, redact_body(result))
        return result
