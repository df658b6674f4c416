import pytest
import requests

import scraper
from dom_extractor import HTML_CHAR_LIMIT
from errors import FetchError


class FakeResponse:
    def __init__(self, text: str, status_code: int = 200):
        self.text = text
        self.status_code = status_code
        self.encoding = "utf-8"
        self.apparent_encoding = "utf-8"

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} Client Error")


def test_static_snapshot_has_structure_and_no_render_facts(monkeypatch, sample_html):
    seen = {}

    def fake_get(url, timeout, headers):
        seen.update(url=url, timeout=timeout, headers=headers)
        return FakeResponse(sample_html)

    monkeypatch.setattr(scraper.requests, "get", fake_get)

    snapshot = scraper.fetch_static_snapshot("https://example.com")

    assert seen["url"] == "https://example.com"
    assert "Chrome" in seen["headers"]["User-Agent"]
    assert snapshot.render_mode == "static"
    assert snapshot.structured_data["title"] == "Acme Widgets"
    assert snapshot.style_analysis is None
    assert snapshot.reflow_test is None
    assert snapshot.zoom_test is None
    assert snapshot.mobile_data is None
    assert snapshot.external_metrics is None


def test_static_html_is_capped(monkeypatch):
    big = "<html><body>" + "a" * (HTML_CHAR_LIMIT * 2) + "</body></html>"
    monkeypatch.setattr(scraper.requests, "get", lambda url, timeout, headers: FakeResponse(big))

    snapshot = scraper.fetch_static_snapshot("https://example.com")

    assert len(snapshot.html) == HTML_CHAR_LIMIT


def test_http_error_becomes_fetch_error(monkeypatch):
    monkeypatch.setattr(scraper.requests, "get", lambda url, timeout, headers: FakeResponse("", status_code=404))

    with pytest.raises(FetchError) as excinfo:
        scraper.fetch_static_snapshot("https://example.com/missing")

    assert excinfo.value.url == "https://example.com/missing"
    assert isinstance(excinfo.value.cause, requests.HTTPError)


def test_connection_failure_becomes_fetch_error(monkeypatch):
    def refuse(url, timeout, headers):
        raise requests.ConnectionError("connection refused")

    monkeypatch.setattr(scraper.requests, "get", refuse)

    with pytest.raises(FetchError, match="connection refused"):
        scraper.fetch_static_snapshot("https://unreachable.invalid")
