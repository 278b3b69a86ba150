"""Single-request transport with a deadline and a rate-limit retry."""

import asyncio
from typing import Any, Awaitable, Callable, Dict, Optional

import httpx

from src.models.errors import RequestTimeout, TransportError

RATE_LIMIT_STATUSES = (429, 403)


def parse_retry_after(value: Optional[str]) -> int:
    """Return the Retry-After header as whole seconds, 0 when absent or unusable."""
    if not value:
        return 0
    try:
        return int(value.strip())
    except ValueError:
        return 0


class RetryingTransport:
    """Sends one request at a time through a shared ``httpx.AsyncClient``.

    A 429, or a 403 which may be GitHub's secondary rate limit, is retried
    after ``Retry-After`` seconds (or a fixed fallback delay) while the retry
    budget lasts. Every other response is returned untouched so callers can
    interpret it. The transport keeps no per-request state, so concurrent
    ``send`` calls are safe.
    """

    def __init__(
        self,
        client: Optional[httpx.AsyncClient] = None,
        timeout_ms: int = 15000,
        retries: int = 1,
        fallback_delay_ms: int = 1000,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ):
        self._client = client
        self.timeout_ms = timeout_ms
        self.retries = retries
        self.fallback_delay_ms = fallback_delay_ms
        self._sleep = sleep

    @property
    def client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient()
        return self._client

    async def aclose(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def send(
        self,
        method: str,
        url: str,
        *,
        headers: Optional[Dict[str, str]] = None,
        params: Optional[Dict[str, Any]] = None,
        json: Any = None,
        timeout_ms: Optional[int] = None,
        retries: Optional[int] = None,
    ) -> httpx.Response:
        timeout_ms = self.timeout_ms if timeout_ms is None else timeout_ms
        remaining = self.retries if retries is None else retries

        while True:
            response = await self._send_once(
                method, url, headers=headers, params=params, json=json,
                timeout_ms=timeout_ms,
            )
            if response.status_code not in RATE_LIMIT_STATUSES or remaining <= 0:
                return response

            retry_after = parse_retry_after(response.headers.get("retry-after"))
            delay_ms = retry_after * 1000 if retry_after > 0 else self.fallback_delay_ms
            print(
                f"⏳ Rate limited ({response.status_code}) on {method} {url}, "
                f"waiting {delay_ms / 1000:g}s before retrying"
            )
            await self._sleep(delay_ms / 1000)
            remaining -= 1

    async def _send_once(
        self,
        method: str,
        url: str,
        *,
        headers: Optional[Dict[str, str]],
        params: Optional[Dict[str, Any]],
        json: Any,
        timeout_ms: int,
    ) -> httpx.Response:
        timeout = timeout_ms / 1000
        try:
            return await asyncio.wait_for(
                self.client.request(
                    method,
                    url,
                    headers=headers,
                    params=params,
                    json=json,
                    timeout=timeout,
                ),
                timeout=timeout,
            )
        except (asyncio.TimeoutError, httpx.TimeoutException) as e:
            raise RequestTimeout(url, timeout_ms) from e
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            raise TransportError(f"{method} {url} failed: {e}") from e
