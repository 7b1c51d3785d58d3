"""
Async HTTP transport for hypermedia navigation.

Built on httpx with:
- Optional per-domain rate limiting
- Exponential backoff retry of timeouts and network errors (idempotent methods)
- JSON-aware response decoding into ResponseData

HTTP error statuses (4xx/5xx) raise httpx.HTTPStatusError; nothing
is wrapped, callers see the httpx exception as raised.
"""

import asyncio
import time
from dataclasses import dataclass, field
from typing import Any, Optional
from urllib.parse import urlparse

import httpx
import structlog
from tenacity import (
    AsyncRetrying,
    stop_after_attempt,
    wait_exponential,
    retry_if_exception_type,
)

from .models import ResponseData
from .state import RequestConfig

logger = structlog.get_logger(__name__)

DEFAULT_USER_AGENT = "siren-nav/0.1.0"
SIREN_MEDIA_TYPE = "application/vnd.siren+json"

# A timeout on anything else may come after the server acted on the request
IDEMPOTENT_METHODS = {"GET", "HEAD", "OPTIONS"}


@dataclass
class RateLimiter:
    """Per-domain rate limiter."""
    requests_per_second: float = 2.0
    last_request: float = 0.0
    lock: asyncio.Lock = field(default_factory=asyncio.Lock)

    async def acquire(self) -> None:
        """Wait for rate limit slot."""
        async with self.lock:
            now = time.monotonic()
            min_interval = 1.0 / self.requests_per_second
            elapsed = now - self.last_request

            if elapsed < min_interval:
                await asyncio.sleep(min_interval - elapsed)

            self.last_request = time.monotonic()


def raw_headers(response: httpx.Response) -> dict:
    """Response headers with their names as sent by the server."""
    encoding = response.headers.encoding
    return {
        name.decode(encoding): value.decode(encoding)
        for name, value in response.headers.raw
    }


def decode_body(response: httpx.Response) -> Any:
    """Decode JSON payloads, fall back to text, None for empty bodies."""
    if not response.content:
        return None

    content_type = response.headers.get("content-type", "")
    if "json" in content_type:
        return response.json()

    try:
        return response.json()
    except ValueError:
        return response.text


class HttpClient:
    """
    Async HTTP client used by navigation steps.

    Usage:
        async with HttpClient() as client:
            response = await client.request("GET", url, RequestConfig())
            response.body
    """

    def __init__(
        self,
        requests_per_second: Optional[float] = None,
        timeout: float = 30.0,
        max_retries: int = 3,
        follow_redirects: bool = True,
        user_agent: str = DEFAULT_USER_AGENT,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize HTTP client.

        Args:
            requests_per_second: Rate limit per domain (None = unlimited)
            timeout: Default request timeout in seconds
            max_retries: Attempts for timeouts/network errors
            follow_redirects: Default redirect policy
            user_agent: User-Agent header value
            transport: Custom httpx transport (e.g. httpx.MockTransport)
        """
        self.requests_per_second = requests_per_second
        self.timeout = timeout
        self.max_retries = max_retries
        self.follow_redirects = follow_redirects
        self.user_agent = user_agent
        self.transport = transport

        self._client: Optional[httpx.AsyncClient] = None
        self._rate_limiters: dict[str, RateLimiter] = {}
        self.request_count = 0

    async def __aenter__(self) -> "HttpClient":
        """Enter async context."""
        self._client = httpx.AsyncClient(
            timeout=httpx.Timeout(self.timeout),
            follow_redirects=self.follow_redirects,
            headers={
                "User-Agent": self.user_agent,
                "Accept": f"{SIREN_MEDIA_TYPE}, application/json",
            },
            transport=self.transport,
        )
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        """Exit async context."""
        if self._client:
            await self._client.aclose()
            self._client = None

    def _get_rate_limiter(self, url: str) -> Optional[RateLimiter]:
        """Get or create rate limiter for domain."""
        if not self.requests_per_second:
            return None
        domain = urlparse(url).netloc
        if domain not in self._rate_limiters:
            self._rate_limiters[domain] = RateLimiter(
                requests_per_second=self.requests_per_second
            )
        return self._rate_limiters[domain]

    async def _do_request(self, method: str, url: str, **kwargs) -> httpx.Response:
        """Execute HTTP request, retrying transient failures of idempotent methods."""
        if not self._client:
            raise RuntimeError("Client not initialized. Use 'async with' context.")

        attempts = self.max_retries if method.upper() in IDEMPOTENT_METHODS else 1

        async for attempt in AsyncRetrying(
            stop=stop_after_attempt(attempts),
            wait=wait_exponential(multiplier=1, min=1, max=10),
            retry=retry_if_exception_type((httpx.TimeoutException, httpx.NetworkError)),
            reraise=True,
        ):
            with attempt:
                self.request_count += 1
                response = await self._client.request(method, url, **kwargs)

        if response.is_error:
            response.raise_for_status()
        return response

    async def request(
        self,
        method: str,
        url: str,
        config: Optional[RequestConfig] = None,
        *,
        content: Optional[str] = None,
        json: Any = None,
        params: Optional[dict] = None,
        follow_redirects: Optional[bool] = None,
    ) -> ResponseData:
        """
        Send a request described by a navigation config.

        Args:
            method: HTTP method
            url: Absolute URL
            config: Headers/params/timeout for the request
            content: Raw (already encoded) body
            json: Body to send as JSON
            params: Extra query parameters merged over config.params
            follow_redirects: Override the client's redirect policy

        Returns:
            ResponseData with decoded body

        Raises:
            httpx.HTTPStatusError: On 4xx/5xx responses
            httpx.HTTPError: On transport failures
        """
        kwargs = (config or RequestConfig()).to_httpx()
        if params:
            kwargs["params"] = {**kwargs.get("params", {}), **params}
        if content is not None:
            kwargs["content"] = content
        if json is not None:
            kwargs["json"] = json
        if follow_redirects is not None:
            kwargs["follow_redirects"] = follow_redirects

        limiter = self._get_rate_limiter(url)
        if limiter:
            await limiter.acquire()

        logger.debug("http_request", method=method, url=url)

        response = await self._do_request(method, url, **kwargs)

        return ResponseData(
            status=response.status_code,
            headers=raw_headers(response),
            body=decode_body(response),
            url=str(response.url),
        )

    async def get(self, url: str, config: Optional[RequestConfig] = None, **kwargs) -> ResponseData:
        """GET request."""
        return await self.request("GET", url, config, **kwargs)

