"""
Browser-driven page rendering using Pyppeteer.

This module owns everything that talks to the headless browser:
1. Launching an isolated session that is always closed on exit
2. Freezing CSS animations BEFORE any page JavaScript runs
3. Navigating with a strict wait strategy and a lenient fallback
4. Settling the page (fixed delays plus a progressive scroll)
5. Taking a full-page JPEG screenshot
"""

import asyncio
from contextlib import asynccontextmanager
from typing import AsyncIterator, Awaitable, Callable, Optional

from pyppeteer import launch
from pyppeteer.page import Page

from ..config import CaptureConfig, SettleConfig
from .errors import CaptureTimeoutError


# JavaScript installed on every new document so it affects first paint
ANIMATION_OVERRIDE_SCRIPT = """
() => {
    const css = `
        * {
            animation-duration: 0.01s !important;
            animation-delay: 0s !important;
            transition-duration: 0.01s !important;
            transition-delay: 0s !important;
        }
    `;

    const install = () => {
        const style = document.createElement('style');
        style.innerHTML = css;
        document.head.appendChild(style);
    };

    if (document.head) {
        install();
    } else {
        document.addEventListener('DOMContentLoaded', install);
    }
}
"""

SCROLL_HEIGHT_SCRIPT = """
() => {
    const root = document.body || document.documentElement;
    return root ? root.scrollHeight : 0;
}
"""

SCROLL_BY_SCRIPT = "(distance) => window.scrollBy(0, distance)"
SCROLL_TOP_SCRIPT = "() => window.scrollTo(0, 0)"

# Strict first, lenient second
NAVIGATION_STRATEGIES = ('networkidle2', 'load')

USER_AGENT = (
    'Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 '
    '(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36'
)

BROWSER_ARGS = [
    '--no-sandbox',
    '--disable-setuid-sandbox',
    '--disable-dev-shm-usage',
    '--disable-gpu',
]


@asynccontextmanager
async def browser_session(
    config: CaptureConfig,
    launcher: Optional[Callable[..., Awaitable]] = None,
) -> AsyncIterator[Page]:
    """
    Launch a headless browser and yield a page with the configured viewport.

    The browser is closed on every exit path, including failures while
    opening the page.
    """
    launcher = launcher or launch

    options = dict(
        headless=config.headless,
        args=BROWSER_ARGS,
        handleSIGINT=False,
        handleSIGTERM=False,
        handleSIGHUP=False,
    )
    if config.executable_path:
        options['executablePath'] = config.executable_path

    print(f"[Capture] Launching browser (headless={config.headless})...", flush=True)
    browser = await launcher(**options)

    try:
        page: Page = await browser.newPage()
        await page.setViewport({
            'width': config.viewport_width,
            'height': config.viewport_height,
        })
        await page.setUserAgent(USER_AGENT)
        yield page
    finally:
        try:
            await browser.close()
            print("[Capture] Browser closed", flush=True)
        except Exception as e:
            print(f"[Capture] Error closing browser: {e}", flush=True)


async def install_animation_override(page: Page) -> None:
    await page.evaluateOnNewDocument(ANIMATION_OVERRIDE_SCRIPT)


async def navigate(page: Page, url: str, timeout: float) -> str:
    """
    Navigate to ``url``, falling back to a more lenient wait strategy.

    Returns:
        The wait strategy that succeeded

    Raises:
        CaptureTimeoutError: If every strategy failed
    """
    last_error: Optional[Exception] = None

    for strategy in NAVIGATION_STRATEGIES:
        if last_error is not None:
            print(f"[Capture] Falling back to '{strategy}' wait strategy", flush=True)

        try:
            await page.goto(url, {
                'waitUntil': strategy,
                'timeout': int(timeout * 1000),
            })
            return strategy
        except Exception as e:
            print(f"[Capture] Navigation with '{strategy}' failed: {e}", flush=True)
            last_error = e

    raise CaptureTimeoutError(
        f"The website took too long to load. Please try again. ({last_error})"
    ) from last_error


class SettleProtocol:
    """
    Bring a loaded page to a visually stable state before the screenshot.

    Stages run in order: wait for late scripts, scroll through the whole
    document to trigger lazy content, scroll back up, wait for transitions.
    """

    def __init__(
        self,
        config: SettleConfig | None = None,
        sleep: Callable[[float], Awaitable] = asyncio.sleep,
    ):
        self.config = config or SettleConfig()
        self._sleep = sleep

    async def wait_for_scripts(self) -> None:
        await self._sleep(self.config.post_navigation_delay)

    async def scroll_through(self, page: Page) -> int:
        """
        Scroll down step by step until the document height is covered.

        The height is re-measured on every step since content may grow while
        scrolling. Returns the number of steps taken.
        """
        step = self.config.scroll_step
        covered = 0
        steps = 0

        while steps < self.config.max_scroll_steps:
            await self._sleep(self.config.scroll_interval)

            height = await page.evaluate(SCROLL_HEIGHT_SCRIPT)
            await page.evaluate(SCROLL_BY_SCRIPT, step)
            covered += step
            steps += 1

            if covered >= (height or 0):
                break
        else:
            print(f"[Capture] Scroll limit reached after {steps} steps", flush=True)

        await page.evaluate(SCROLL_TOP_SCRIPT)
        return steps

    async def wait_for_transitions(self) -> None:
        await self._sleep(self.config.post_scroll_delay)

    async def run(self, page: Page) -> None:
        await self.wait_for_scripts()
        steps = await self.scroll_through(page)
        print(f"[Capture] Scrolled through page in {steps} steps", flush=True)
        await self.wait_for_transitions()


async def take_screenshot(page: Page, quality: int) -> bytes:
    return await page.screenshot({
        'fullPage': True,
        'type': 'jpeg',
        'quality': quality,
    })
