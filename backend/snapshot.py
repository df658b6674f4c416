"""Snapshot orchestrator: one headless Chromium session per audit.

Stages run in order on a single page because each one leaves viewport, zoom
or emulation state behind for the next:

    navigate -> settle/scroll -> DOM + style probe -> screenshots
    -> reflow (320px) -> zoom (200%) -> mobile re-render

Navigation failure abandons the render and falls back to the lightweight
fetcher. Failures in later stages only blank the fact they would have produced.
"""

import base64
import os
from functools import partial

from playwright.sync_api import TimeoutError as PlaywrightTimeoutError
from playwright.sync_api import sync_playwright

from dom_extractor import HTML_CHAR_LIMIT, extract_structured_data, truncate
from logger import get_logger
from models import MobileData, Snapshot
from scraper import fetch_static_snapshot
from style_probe import probe_desktop_styles, probe_mobile, probe_mobile_basic
from viewport import run_reflow_test, run_zoom_test

logger = get_logger(__name__)


def _env_flag(name: str, default: str = "1") -> bool:
    return os.getenv(name, default).strip().lower() not in {"0", "false", "no", "off"}


BROWSER_ENABLED = _env_flag("BROWSER_ENABLED")
CAPTURE_SCREENSHOTS = _env_flag("CAPTURE_SCREENSHOTS")
NAVIGATION_TIMEOUT_MS = int(os.getenv("NAVIGATION_TIMEOUT_MS", "60000"))
DOM_READY_TIMEOUT_MS = int(os.getenv("DOM_READY_TIMEOUT_MS", "30000"))
SETTLE_DELAY_MS = int(os.getenv("SETTLE_DELAY_MS", "3000"))
LAYOUT_SETTLE_MS = 1000
MAX_SCROLL_STEPS = 300

DESKTOP_VIEWPORT = {"width": 1920, "height": 1080}
DESKTOP_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) "
    "AppleWebKit/537.36 (KHTML, like Gecko) "
    "Chrome/120.0.0.0 Safari/537.36"
)
MOBILE_METRICS = {"width": 390, "height": 844, "deviceScaleFactor": 3, "mobile": True}
MOBILE_USER_AGENT = (
    "Mozilla/5.0 (iPhone; CPU iPhone OS 16_0 like Mac OS X) "
    "AppleWebKit/605.1.15 (KHTML, like Gecko) "
    "Version/16.0 Mobile/15E148 Safari/604.1"
)
LAUNCH_ARGS = [
    "--no-sandbox",
    "--disable-setuid-sandbox",
    "--disable-dev-shm-usage",
    "--disable-gpu",
]

SCREENSHOT_SELECTORS = (
    "form",
    "button",
    'input[type="submit"]',
    ".cta",
    '[class*="button"]',
    '[class*="form"]',
    "nav",
    "header",
)

AUTO_SCROLL_JS = """async (maxSteps) => {
  await new Promise((resolve) => {
    const distance = 100;
    let scrolled = 0;
    let steps = 0;
    const timer = setInterval(() => {
      window.scrollBy(0, distance);
      scrolled += distance;
      steps += 1;
      if (scrolled >= document.body.scrollHeight || steps >= maxSteps) {
        clearInterval(timer);
        resolve();
      }
    }, 100);
  });
  window.scrollTo(0, 0);
}"""


class BrowserSession:
    """Chromium process, context and page, released exactly once on exit.

    Usage::

        with BrowserSession() as session:
            session.page.goto(url)
    """

    def __init__(self):
        self._playwright = None
        self._browser = None
        self.page = None

    def __enter__(self) -> "BrowserSession":
        self._playwright = sync_playwright().start()
        try:
            self._browser = self._playwright.chromium.launch(headless=True, args=LAUNCH_ARGS)
            context = self._browser.new_context(
                viewport=DESKTOP_VIEWPORT,
                user_agent=DESKTOP_USER_AGENT,
                ignore_https_errors=True,
            )
            self.page = context.new_page()
        except Exception:
            self.close()
            raise
        return self

    def __exit__(self, exc_type, exc, tb) -> bool:
        self.close()
        return False

    def close(self) -> None:
        browser, self._browser = self._browser, None
        playwright, self._playwright = self._playwright, None
        self.page = None
        if browser is not None:
            try:
                browser.close()
            except Exception as exc:
                logger.warning("Error closing browser: %s", exc)
        if playwright is not None:
            try:
                playwright.stop()
            except Exception as exc:
                logger.warning("Error stopping playwright: %s", exc)


def _load(action, url: str) -> None:
    """
    Run a goto/reload ``action`` waiting for network idle, then for DOM ready.
    A second timeout is tolerated: work continues on whatever has loaded.
    Non-timeout errors (DNS, refused connection) propagate.
    """
    try:
        action(wait_until="networkidle", timeout=NAVIGATION_TIMEOUT_MS)
        return
    except PlaywrightTimeoutError:
        logger.warning("Network idle timeout for %s, retrying with domcontentloaded", url)
    try:
        action(wait_until="domcontentloaded", timeout=DOM_READY_TIMEOUT_MS)
    except PlaywrightTimeoutError:
        logger.warning("DOM ready timeout for %s, continuing with partial page", url)


def _settle_and_scroll(page) -> None:
    page.wait_for_timeout(SETTLE_DELAY_MS)
    page.evaluate(AUTO_SCROLL_JS, MAX_SCROLL_STEPS)
    page.wait_for_timeout(LAYOUT_SETTLE_MS)


def _optional_stage(name: str, stage, page):
    try:
        return stage(page)
    except Exception as exc:
        logger.warning("%s failed, omitting it from the snapshot: %s", name, exc, exc_info=True)
        return None


def _as_data_uri(png: bytes) -> str:
    return "data:image/png;base64," + base64.b64encode(png).decode("ascii")


def capture_screenshots(page) -> tuple[str | None, dict[str, str] | None]:
    """Full-page PNG plus the first match of each selector, as data URIs."""
    screenshot = None
    try:
        screenshot = _as_data_uri(page.screenshot(full_page=True, type="png"))
    except Exception as exc:
        logger.warning("Full page screenshot failed: %s", exc)

    element_screenshots = {}
    for selector in SCREENSHOT_SELECTORS:
        try:
            element = page.query_selector(selector)
            if element is not None:
                element_screenshots[selector] = _as_data_uri(element.screenshot(type="png"))
        except Exception as exc:
            logger.warning("Could not capture screenshot for %s: %s", selector, exc)

    logger.info("Captured %d element screenshots", len(element_screenshots))
    return screenshot, element_screenshots or None


def _zoom_at_desktop_size(page):
    page.set_viewport_size(DESKTOP_VIEWPORT)
    page.wait_for_timeout(LAYOUT_SETTLE_MS)
    return run_zoom_test(page, settle_ms=LAYOUT_SETTLE_MS)


def _emulate_mobile(page) -> None:
    page.set_viewport_size(DESKTOP_VIEWPORT)
    client = page.context.new_cdp_session(page)
    client.send("Emulation.setUserAgentOverride", {"userAgent": MOBILE_USER_AGENT})
    client.send("Emulation.setDeviceMetricsOverride", MOBILE_METRICS)
    client.send("Emulation.setTouchEmulationEnabled", {"enabled": True})


def capture_mobile(page, url: str) -> MobileData | None:
    """
    Re-render ``page`` as a phone and probe it. Falls back to the reduced
    probe (viewport and interactive count) and finally to None.
    """
    try:
        _emulate_mobile(page)
        _load(page.reload, url)
        _settle_and_scroll(page)
        mobile_data = probe_mobile(page)
        logger.info(
            "Mobile data extracted: %d touch targets, %d spacing issues",
            mobile_data["touch_targets"]["total"],
            mobile_data["spacing"]["total"],
        )
        return mobile_data
    except Exception as exc:
        logger.warning("Mobile capture failed, trying reduced capture: %s", exc, exc_info=True)

    try:
        return probe_mobile_basic(page)
    except Exception as exc:
        logger.error("Reduced mobile capture failed: %s", exc, exc_info=True)
        return None


def render_snapshot(page, url: str) -> Snapshot:
    """Run every capture stage against an open page."""
    _load(partial(page.goto, url), url)
    _settle_and_scroll(page)

    html = page.content()
    structured_data = extract_structured_data(html, title=page.title())
    style_analysis = _optional_stage("Style probe", probe_desktop_styles, page)

    screenshot, element_screenshots = None, None
    if CAPTURE_SCREENSHOTS:
        screenshot, element_screenshots = capture_screenshots(page)

    reflow_test = _optional_stage("Reflow test", run_reflow_test, page)
    zoom_test = _optional_stage("Zoom test", _zoom_at_desktop_size, page)
    mobile_data = capture_mobile(page, url)

    return Snapshot(
        url=url,
        html=truncate(html, HTML_CHAR_LIMIT),
        structured_data=structured_data,
        render_mode="browser",
        style_analysis=style_analysis,
        reflow_test=reflow_test,
        zoom_test=zoom_test,
        mobile_data=mobile_data,
        screenshot=screenshot,
        element_screenshots=element_screenshots,
    )


def capture_snapshot(url: str, session_factory=BrowserSession, fallback=fetch_static_snapshot) -> Snapshot:
    """
    Render ``url`` in a browser; on a hard failure use the static fetcher.
    Raises FetchError only when the static fetch fails as well.
    """
    if not BROWSER_ENABLED:
        logger.info("Browser disabled, using simple fetch for %s", url)
        return fallback(url)

    logger.info("Launching browser for %s", url)
    try:
        with session_factory() as session:
            snapshot = render_snapshot(session.page, url)
        logger.info("Browser capture complete for %s", url)
        return snapshot
    except Exception as exc:
        logger.warning("Browser capture failed for %s, falling back to simple fetch: %s", url, exc, exc_info=True)
        return fallback(url)
