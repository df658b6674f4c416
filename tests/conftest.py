import pytest

from dom_extractor import extract_structured_data
from models import Snapshot

SAMPLE_HTML = """<!DOCTYPE html>
<html>
<head>
  <title>Acme Widgets</title>
  <meta name="description" content="Widgets for every team">
  <meta name="viewport" content="width=device-width, initial-scale=1">
  <style>body { color: #222; }</style>
  <script>window.tracking = true;</script>
</head>
<body>
  <header><nav><a href="/">Home</a><a href="/pricing">Pricing</a></nav></header>
  <h1>Build better widgets</h1>
  <h2>Why Acme</h2>
  <h2>Customers</h2>
  <h3>Fast</h3>
  <p>Acme widgets ship   in days,
     not weeks.</p>
  <a href="/signup" class="cta">Sign up today</a>
  <a href="/contact">Contact sales</a>
  <img src="/logo.png" alt="Acme logo">
  <img src="/hero.jpg">
  <form action="/subscribe">
    <label for="email">Email</label>
    <input id="email" name="email" type="email">
    <input type="submit" value="Subscribe">
  </form>
  <button type="button">Open menu</button>
  <noscript>Enable JavaScript</noscript>
</body>
</html>
"""


class FakeElement:
    def __init__(self, png: bytes = b"element-png", error: Exception | None = None):
        self.png = png
        self.error = error

    def screenshot(self, **kwargs) -> bytes:
        if self.error:
            raise self.error
        return self.png


class FakeCDPSession:
    def __init__(self, error: Exception | None = None):
        self.sent: list[tuple[str, dict]] = []
        self.error = error

    def send(self, method: str, params: dict | None = None):
        if self.error:
            raise self.error
        self.sent.append((method, params or {}))
        return {}


class FakeContext:
    def __init__(self):
        self.cdp = FakeCDPSession()

    def new_cdp_session(self, page):
        return self.cdp


class FakePage:
    """
    In-memory stand-in for a Playwright page.

    ``scripts`` maps a probe script (by identity of the module constant) to a
    value, an exception to raise, or a callable taking the evaluate argument.
    ``goto_errors`` / ``reload_errors`` are raised in order by each call.
    """

    def __init__(self, html: str = SAMPLE_HTML, title: str = "Acme Widgets", scripts: dict | None = None):
        self.html = html
        self._title = title
        self.scripts = dict(scripts or {})
        self.goto_errors: list[Exception] = []
        self.reload_errors: list[Exception] = []
        self.elements: dict[str, FakeElement] = {}
        self.screenshot_error: Exception | None = None
        self.context = FakeContext()
        self.calls: list[tuple] = []
        self.viewport: dict | None = None

    def goto(self, url, wait_until=None, timeout=None):
        self.calls.append(("goto", wait_until))
        if self.goto_errors:
            raise self.goto_errors.pop(0)

    def reload(self, wait_until=None, timeout=None):
        self.calls.append(("reload", wait_until))
        if self.reload_errors:
            raise self.reload_errors.pop(0)

    def wait_for_timeout(self, ms):
        self.calls.append(("wait", ms))

    def evaluate(self, script, arg=None):
        self.calls.append(("evaluate", script, arg))
        result = self.scripts.get(script)
        if isinstance(result, Exception):
            raise result
        if callable(result):
            return result(arg)
        return result

    def content(self) -> str:
        return self.html

    def title(self) -> str:
        return self._title

    def set_viewport_size(self, size: dict):
        self.calls.append(("viewport", size["width"], size["height"]))
        self.viewport = size

    def screenshot(self, **kwargs) -> bytes:
        if self.screenshot_error:
            raise self.screenshot_error
        return b"full-page-png"

    def query_selector(self, selector: str):
        return self.elements.get(selector)

    def evaluated(self, script) -> bool:
        return any(call[0] == "evaluate" and call[1] is script for call in self.calls)


class FakeSession:
    """Context manager standing in for BrowserSession."""

    def __init__(self, page: FakePage):
        self.page = page
        self.exits = 0

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.exits += 1
        return False


@pytest.fixture
def sample_html() -> str:
    return SAMPLE_HTML


@pytest.fixture
def make_snapshot():
    def _make(**overrides) -> Snapshot:
        fields = {
            "url": "https://example.com",
            "html": SAMPLE_HTML,
            "structured_data": extract_structured_data(SAMPLE_HTML),
            "render_mode": "static",
        }
        fields.update(overrides)
        return Snapshot(**fields)

    return _make
