from datetime import datetime
import random
import threading
import time
from email.utils import parsedate_to_datetime
from typing import Any, cast
from urllib.parse import urlparse

import httpx
import requests
from loguru import logger


class TokenBucket:
    """
    Token bucket for rate limiting (thread-safe).

    Attributes:
        name (str|None): Optional identifier (e.g., host) for trace logging.
        rate (float): Tokens per second.
        capacity (float): Maximum number of tokens in the bucket.
    """

    def __init__(self, rate: float, capacity: float | int, name: str | None = None):
        self.name = name
        self.rate: float = float(rate)
        self.capacity: float = float(capacity)
        self.tokens: float = float(capacity)
        self.last_refill: float = time.monotonic()
        self._lock = threading.Lock()

    def _refill(self, now: float) -> None:
        """Refill tokens based on elapsed time. Caller must hold the lock."""

        elapsed = now - self.last_refill

        if elapsed <= 0:
            return

        self.tokens = min(self.capacity, self.tokens + elapsed * self.rate)
        self.last_refill = now

    def wait(self, tokens: int = 1) -> None:
        """Block until enough tokens are available."""

        need = float(tokens)

        while True:
            with self._lock:
                self._refill(time.monotonic())

                if self.tokens >= need:
                    self.tokens -= need
                    return

                deficit = need - self.tokens
                sleep_for = deficit / self.rate if self.rate > 0 else 0.05

                if self.name:
                    logger.trace(
                        "Rate limit sleep: host={} sleep={:.3f}s", self.name, sleep_for
                    )

            time.sleep(sleep_for)


class CircuitBreakerOpen(requests.exceptions.ConnectionError):
    """Raised when a circuit breaker is OPEN and requests should fail fast."""

    def __init__(self, name: str):
        super().__init__(f"Circuit breaker OPEN for {name}")
        self.name = name


class CircuitBreaker:
    """
    Circuit breaker for per-host failure handling.

    States are 'CLOSED', 'OPEN' and 'HALF_OPEN'. After `failure_threshold`
    consecutive failures the breaker opens and requests fail fast until
    `recovery_time` seconds have passed.
    """

    def __init__(
        self,
        failure_threshold: int = 5,
        recovery_time: int = 30,
        name: str = "unknown",
    ):
        self.failure_threshold = failure_threshold
        self.recovery_time = recovery_time
        self.failures = 0
        self.last_failure_time: float | None = None
        self.state = "CLOSED"
        self.name = name

    def before_request(self):
        if self.state == "OPEN" and self.last_failure_time:
            if (time.monotonic() - self.last_failure_time) > self.recovery_time:
                self.state = "HALF_OPEN"
                logger.debug(f"Breaker for {self.name} HALF_OPEN (trial request)")
            else:
                logger.debug(f"Breaker for {self.name} OPEN (fail-fast)")
                raise CircuitBreakerOpen(self.name)

    def after_request(self, success: bool):
        if success:
            if self.state in ("HALF_OPEN", "OPEN") or self.failures:
                self._reset()
        else:
            self.failures += 1
            self.last_failure_time = time.monotonic()

            if self.failures >= self.failure_threshold:
                self.state = "OPEN"
                logger.warning(f"Circuit breaker tripped to OPEN for {self.name}")

    def _reset(self):
        if self.state != "CLOSED":
            logger.info(f"Circuit breaker reset to CLOSED for {self.name}")
        self.failures = 0
        self.state = "CLOSED"
        self.last_failure_time = None


class SmartSession:
    """
    Requests-compatible session over httpx with rate limiting, circuit breaker and retries.

    Attributes:
        base_url (str): Optional base URL; relative request URLs are resolved against it.
        rate_limits (dict): Optional per-host rate limits, e.g., {"sonarr.lan": {"rate": 1, "capacity": 5}}.
        retries (int): Number of retries for failed requests.
        backoff_factor (float): Backoff factor for retries.
        headers (dict): Default headers applied to all requests.
    """

    def __init__(
        self,
        base_url: str | None = None,
        rate_limits: dict[str, dict[str, float | int]] | None = None,
        retries: int = 3,
        backoff_factor: float = 0.3,
    ):
        self._client = httpx.Client(
            timeout=httpx.Timeout(connect=5.0, read=30.0, write=10.0, pool=5.0),
            limits=httpx.Limits(max_connections=20, max_keepalive_connections=10),
        )

        self.base_url = base_url.rstrip("/") if base_url else None
        self.limiters: dict[str, TokenBucket] = {}
        self.breakers: dict[str, CircuitBreaker] = {}
        self.retries = int(retries)
        self.backoff_factor = float(backoff_factor)
        self.headers: dict[str, str] = {}

        if rate_limits:
            for host, cfg in rate_limits.items():
                self.limiters[host] = TokenBucket(
                    rate=cfg.get("rate", 1),
                    capacity=cfg.get("capacity", 5),
                    name=host,
                )
                self.breakers[host] = CircuitBreaker(name=host)

    def request(self, method: str, url: str, **kwargs: Any) -> requests.Response:
        """
        Make a request with rate limiting, circuit breaker and retries.

        Raises:
            requests.exceptions.Timeout: When every attempt timed out.
            requests.exceptions.ConnectionError: When the host is unreachable or the breaker is open.
        """

        if self.base_url and not url.lower().startswith(("http://", "https://")):
            url = f"{self.base_url}/{url.lstrip('/')}"

        host = get_hostname_from_url(url)
        breaker = self.breakers.get(host)

        if breaker:
            breaker.before_request()

        limiter = self.limiters.get(host)

        if limiter:
            limiter.wait()

        headers = {**self.headers, **kwargs.pop("headers", {})}
        timeout = kwargs.pop("timeout", None)
        attempt = 0

        while True:
            attempt += 1

            try:
                hx_resp = self._client.request(
                    method.upper(),
                    url,
                    headers=headers,
                    timeout=timeout if timeout is not None else self._client.timeout,
                    **kwargs,
                )
            except httpx.TimeoutException as e:
                if attempt <= self.retries:
                    time.sleep(self._backoff(attempt))
                    continue

                if breaker:
                    breaker.after_request(False)

                raise requests.exceptions.Timeout(str(e)) from e
            except httpx.RequestError as e:
                if attempt <= self.retries:
                    time.sleep(self._backoff(attempt))
                    continue

                if breaker:
                    breaker.after_request(False)

                raise requests.exceptions.ConnectionError(str(e)) from e

            if hx_resp.status_code == 429 or 500 <= hx_resp.status_code < 600:
                if attempt <= self.retries:
                    time.sleep(self._compute_retry_delay(hx_resp, attempt))
                    continue

            response = self._to_response(hx_resp)

            if breaker:
                breaker.after_request(
                    not (response.status_code == 429 or response.status_code >= 500)
                )

            return response

    def get(self, url: str, **kwargs: Any) -> requests.Response:
        return self.request("GET", url, **kwargs)

    def _to_response(self, httpx_response: httpx.Response) -> requests.Response:
        r = requests.Response()
        r.status_code = httpx_response.status_code
        r._content = httpx_response.content or b""
        r.headers.update(dict(httpx_response.headers))
        r.url = str(httpx_response.request.url)
        r.reason = httpx_response.reason_phrase

        if httpx_response.encoding:
            r.encoding = httpx_response.encoding

        httpx_response.close()
        return r

    def _compute_retry_delay(
        self, httpx_response: httpx.Response, attempt: int
    ) -> float:
        ra = httpx_response.headers.get("Retry-After")

        if ra:
            if ra.isdigit():
                return float(ra)

            try:
                dt = cast(datetime, parsedate_to_datetime(ra))
                return max(0.0, dt.timestamp() - time.time())
            except (TypeError, ValueError):
                pass

        return self._backoff(attempt)

    def _backoff(self, attempt: int) -> float:
        """Exponential backoff with equal jitter."""

        base = self.backoff_factor * (2 ** (max(0, attempt - 1)))
        return base * (0.5 + 0.5 * random.random())


def get_hostname_from_url(url: str) -> str:
    """Extract the lowercase hostname from a URL."""

    parsed = urlparse(url)

    return parsed.hostname.lower() if parsed.hostname else ""
