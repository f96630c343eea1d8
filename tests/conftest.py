"""
Shared fixtures: an in-memory stand-in for the pyppeteer browser and page.
"""

import io

import pytest
from PIL import Image

from site_catalog.capture.browser_capture import (
    SCROLL_BY_SCRIPT,
    SCROLL_HEIGHT_SCRIPT,
    SCROLL_TOP_SCRIPT,
)
from site_catalog.config import CaptureConfig, SettleConfig
from site_catalog.store import WebsiteStore


SAMPLE_HTML = """
<html>
  <head>
    <title>  Example Studio  </title>
    <meta name="description" content="A creative agency portfolio">
  </head>
  <body><h1>Hello</h1></body>
</html>
"""


def solid_image(color, size=(200, 150), fmt='JPEG') -> bytes:
    buf = io.BytesIO()
    Image.new('RGB', size, color).save(buf, format=fmt)
    return buf.getvalue()


class FakePage:
    """Records what the pipeline asks of the page."""

    def __init__(self, html=SAMPLE_HTML, screenshot=None, heights=(250,), goto_errors=(),
                 content_error=None):
        self.html = html
        self.screenshot_bytes = screenshot if screenshot is not None else solid_image((120, 80, 40))
        self.heights = list(heights)
        self.goto_errors = list(goto_errors)
        self.content_error = content_error

        self.viewport = None
        self.user_agent = None
        self.init_scripts = []
        self.goto_calls = []
        self.events = []
        self.scroll_y = 0
        self.scroll_steps = 0
        self.screenshot_options = None

    async def setViewport(self, viewport):
        self.viewport = viewport

    async def setUserAgent(self, user_agent):
        self.user_agent = user_agent

    async def evaluateOnNewDocument(self, script):
        self.events.append('init_script')
        self.init_scripts.append(script)

    async def goto(self, url, options):
        self.events.append(f"goto:{options['waitUntil']}")
        self.goto_calls.append((url, options))
        if self.goto_errors:
            error = self.goto_errors.pop(0)
            if error is not None:
                raise error

    async def evaluate(self, script, *args):
        if script == SCROLL_HEIGHT_SCRIPT:
            # Heights are consumed one per measurement; the last one sticks
            if len(self.heights) > 1:
                return self.heights.pop(0)
            return self.heights[0]
        if script == SCROLL_BY_SCRIPT:
            self.scroll_y += args[0]
            self.scroll_steps += 1
            return None
        if script == SCROLL_TOP_SCRIPT:
            self.events.append('scroll_top')
            self.scroll_y = 0
            return None
        raise AssertionError(f"Unexpected script: {script}")

    async def content(self):
        self.events.append('content')
        if self.content_error is not None:
            raise self.content_error
        return self.html

    async def screenshot(self, options):
        self.events.append('screenshot')
        self.screenshot_options = options
        return self.screenshot_bytes


class FakeBrowser:
    def __init__(self, page, close_error=None):
        self.page = page
        self.close_error = close_error
        self.closed = False

    async def newPage(self):
        return self.page

    async def close(self):
        self.closed = True
        if self.close_error is not None:
            raise self.close_error


class FakeLauncher:
    """Callable replacing pyppeteer.launch; hands out one browser per call."""

    def __init__(self, page_factory=FakePage, error=None, close_error=None):
        self.page_factory = page_factory
        self.error = error
        self.close_error = close_error
        self.browsers = []
        self.options = []

    async def __call__(self, **options):
        self.options.append(options)
        if self.error is not None:
            raise self.error
        browser = FakeBrowser(self.page_factory(), self.close_error)
        self.browsers.append(browser)
        return browser

    @property
    def pages(self):
        return [b.page for b in self.browsers]


@pytest.fixture
def config(tmp_path):
    """Capture config writing into a temp dir with instant settle stages."""
    return CaptureConfig(
        screenshot_dir=tmp_path / "screenshots",
        database_path=tmp_path / "websites.db",
        settle=SettleConfig(
            post_navigation_delay=0,
            scroll_step=100,
            scroll_interval=0,
            post_scroll_delay=0,
        ),
    )


@pytest.fixture
def launcher():
    return FakeLauncher()


@pytest.fixture
def store(config):
    s = WebsiteStore(config.database_path)
    yield s
    s.close()
