import httpx
import pytest
import requests

from informarr.utils import request as request_mod
from informarr.utils.request import (
    CircuitBreaker,
    CircuitBreakerOpen,
    SmartSession,
    get_hostname_from_url,
)


@pytest.fixture(autouse=True)
def no_sleep(monkeypatch):
    sleeps: list[float] = []
    monkeypatch.setattr(request_mod.time, "sleep", sleeps.append)
    return sleeps


def session_with(responses, **kwargs) -> tuple[SmartSession, list[httpx.Request]]:
    seen: list[httpx.Request] = []
    queue = list(responses)

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return queue.pop(0)

    session = SmartSession(**kwargs)
    session._client = httpx.Client(transport=httpx.MockTransport(handler))
    return session, seen


def test_relative_urls_use_base_url():
    session, seen = session_with(
        [httpx.Response(200, json={"ok": True})], base_url="http://sonarr:8989/"
    )

    response = session.get("/api/v3/series/1")

    assert str(seen[0].url) == "http://sonarr:8989/api/v3/series/1"
    assert response.ok
    assert response.json() == {"ok": True}


def test_default_headers_are_sent():
    session, seen = session_with([httpx.Response(204)])
    session.headers.update({"X-Api-Key": "secret"})

    session.get("http://seerr/api/v1/auth/me", headers={"Accept": "application/json"})

    assert seen[0].headers["X-Api-Key"] == "secret"
    assert seen[0].headers["Accept"] == "application/json"


def test_server_errors_are_retried(no_sleep):
    session, seen = session_with(
        [httpx.Response(503), httpx.Response(200, json={})], retries=2
    )

    assert session.get("http://sonarr/api").status_code == 200
    assert len(seen) == 2
    assert len(no_sleep) == 1


def test_retry_after_is_honoured(no_sleep):
    session, _ = session_with(
        [httpx.Response(429, headers={"Retry-After": "7"}), httpx.Response(200)],
        retries=1,
    )

    session.get("http://seerr/api/v1/request")

    assert no_sleep == [7.0]


def test_last_error_response_is_returned_when_retries_run_out():
    session, seen = session_with([httpx.Response(500), httpx.Response(500)], retries=1)

    assert session.get("http://sonarr/api").status_code == 500
    assert len(seen) == 2


def test_connection_errors_become_requests_errors():
    def refuse(request):
        raise httpx.ConnectError("refused", request=request)

    session = SmartSession(retries=0)
    session._client = httpx.Client(transport=httpx.MockTransport(refuse))

    with pytest.raises(requests.exceptions.ConnectionError):
        session.get("http://sonarr/api")


def test_circuit_breaker_opens_after_repeated_failures():
    breaker = CircuitBreaker(failure_threshold=2, recovery_time=60, name="sonarr")

    breaker.after_request(False)
    breaker.before_request()
    breaker.after_request(False)

    assert breaker.state == "OPEN"
    with pytest.raises(CircuitBreakerOpen):
        breaker.before_request()


def test_circuit_breaker_resets_on_success():
    breaker = CircuitBreaker(failure_threshold=3, name="sonarr")

    breaker.after_request(False)
    breaker.after_request(True)

    assert breaker.failures == 0
    assert breaker.state == "CLOSED"


def test_get_hostname_from_url():
    assert get_hostname_from_url("http://Sonarr.LAN:8989/api") == "sonarr.lan"
    assert get_hostname_from_url("not a url") == ""
