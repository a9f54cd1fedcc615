"""
Rendered page fetching.

`PageFetcher` is the seam between crawl orchestration and the browser
engine; tests substitute a fake. `PlaywrightPageFetcher` renders with
Chromium and opens a fresh, isolated context for every fetch so cookies
and cache never leak between attempts, user agents or competitors.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Protocol

from playwright.sync_api import Browser, Error as PlaywrightError, Playwright, sync_playwright
from playwright.sync_api import TimeoutError as PlaywrightTimeoutError

from app.scraping.stealth import LAUNCH_ARGS, apply_stealth, context_options

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RenderedPage:
    url: str
    html: str
    title: str | None
    http_status: int | None
    screenshot: bytes | None = None


class PageFetcher(Protocol):
    """
    Renders one URL with the given user agent.

    Implementations raise on navigation failure; retries live in the caller.
    """

    def fetch(self, url: str, *, user_agent: str) -> RenderedPage:
        ...


class PlaywrightPageFetcher:
    """
    Chromium-backed fetcher. One instance owns one browser process.

    Use as a context manager so the browser is always torn down.
    """

    def __init__(
        self,
        *,
        headless: bool = True,
        navigation_timeout_ms: int = 45_000,
        network_idle_timeout_ms: int = 15_000,
    ) -> None:
        self._headless = headless
        self._navigation_timeout_ms = navigation_timeout_ms
        self._network_idle_timeout_ms = min(navigation_timeout_ms, network_idle_timeout_ms)
        self._playwright: Playwright | None = None
        self._browser: Browser | None = None

    def __enter__(self) -> "PlaywrightPageFetcher":
        self.start()
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def start(self) -> Browser:
        if self._browser is not None:
            return self._browser
        self._playwright = sync_playwright().start()
        try:
            self._browser = self._playwright.chromium.launch(
                headless=self._headless,
                args=list(LAUNCH_ARGS),
            )
        except Exception:
            self.close()
            raise
        return self._browser

    def close(self) -> None:
        try:
            if self._browser is not None:
                self._browser.close()
        finally:
            self._browser = None
            if self._playwright is not None:
                self._playwright.stop()
                self._playwright = None

    def fetch(self, url: str, *, user_agent: str) -> RenderedPage:
        browser = self.start()
        context = browser.new_context(**context_options(user_agent))
        try:
            apply_stealth(context)
            page = context.new_page()
            response = page.goto(
                url,
                wait_until="domcontentloaded",
                timeout=self._navigation_timeout_ms,
            )
            try:
                page.wait_for_load_state("networkidle", timeout=self._network_idle_timeout_ms)
            except PlaywrightTimeoutError:
                # Long-polling pages never go idle; the DOM is already usable.
                logger.debug("networkidle not reached for %s", url)

            html = page.content()
            try:
                title = page.title() or None
            except PlaywrightError:
                title = None

            try:
                screenshot = page.screenshot(full_page=True, type="png")
            except PlaywrightError as exc:
                raise RuntimeError(f"Screenshot failed for {url}: {exc}") from exc

            return RenderedPage(
                url=url,
                html=html,
                title=title,
                http_status=response.status if response is not None else None,
                screenshot=screenshot,
            )
        finally:
            context.close()
