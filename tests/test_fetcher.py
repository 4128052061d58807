"""Tests for the httpx fetch helpers using a mock transport."""

from __future__ import annotations

import httpx

from philosophy_path.fetch import fetcher

BASE = "https://en.wikipedia.org"


def _mock_client(monkeypatch, handler):
    real_client = httpx.Client

    def factory(**kwargs):
        return real_client(transport=httpx.MockTransport(handler), **kwargs)

    monkeypatch.setattr(fetcher.httpx, "Client", factory)
    monkeypatch.setattr(fetcher.time, "sleep", lambda _seconds: None)


def _fetch(url, retries=2):
    return fetcher.fetch_url(url, timeout=5.0, retries=retries, user_agent="test-agent", trust_env=False)


def _resolve(url, retries=0):
    return fetcher.resolve_redirect(url, timeout=5.0, retries=retries, user_agent="test-agent", trust_env=False)


def test_fetch_url_returns_text_and_sends_user_agent(monkeypatch):
    seen = {}

    def handler(request):
        seen["ua"] = request.headers["user-agent"]
        return httpx.Response(200, text="<p>hello</p>")

    _mock_client(monkeypatch, handler)

    result = _fetch(f"{BASE}/wiki/Hello")

    assert result.ok
    assert result.text == "<p>hello</p>"
    assert result.final_url == f"{BASE}/wiki/Hello"
    assert seen["ua"] == "test-agent"


def test_fetch_url_follows_redirects(monkeypatch):
    def handler(request):
        if request.url.path == "/wiki/Old_name":
            return httpx.Response(301, headers={"Location": "/wiki/New_name"})
        return httpx.Response(200, text="new")

    _mock_client(monkeypatch, handler)

    result = _fetch(f"{BASE}/wiki/Old_name")

    assert result.ok
    assert result.final_url == f"{BASE}/wiki/New_name"


def test_fetch_url_http_error_is_not_retried(monkeypatch):
    calls = 0

    def handler(request):
        nonlocal calls
        calls += 1
        return httpx.Response(404, text="missing")

    _mock_client(monkeypatch, handler)

    result = _fetch(f"{BASE}/wiki/Missing")

    assert not result.ok
    assert result.status_code == 404
    assert result.error == "HTTPStatusError: 404"
    assert calls == 1


def test_fetch_url_retries_transport_errors(monkeypatch):
    calls = 0

    def handler(request):
        nonlocal calls
        calls += 1
        raise httpx.ConnectError("connection refused", request=request)

    _mock_client(monkeypatch, handler)

    result = _fetch(f"{BASE}/wiki/Down", retries=2)

    assert calls == 3
    assert result.status_code is None
    assert result.text is None
    assert result.error.startswith("ConnectError")


def test_resolve_redirect_returns_absolute_location(monkeypatch):
    def handler(request):
        return httpx.Response(302, headers={"Location": "/wiki/Some_article"})

    _mock_client(monkeypatch, handler)

    result = _resolve(f"{BASE}/wiki/Special:Random")

    assert result.error is None
    assert result.final_url == f"{BASE}/wiki/Some_article"


def test_resolve_redirect_without_redirect_is_an_error(monkeypatch):
    _mock_client(monkeypatch, lambda request: httpx.Response(200, text="not a redirect"))

    result = _resolve(f"{BASE}/wiki/Special:Random")

    assert result.final_url is None
    assert "No redirect" in result.error
