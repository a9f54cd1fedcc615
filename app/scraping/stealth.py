"""
Browser context hardening for rendered crawls.

Hides the most common automation markers. This is best effort: sites with
serious bot mitigation will still block us, and callers must not rely on it.
"""

from __future__ import annotations

from typing import Any

from playwright.sync_api import BrowserContext

LAUNCH_ARGS: tuple[str, ...] = ("--disable-blink-features=AutomationControlled",)

VIEWPORT = {"width": 1440, "height": 1024}
LOCALE = "en-US"
TIMEZONE_ID = "America/New_York"
EXTRA_HEADERS = {"Accept-Language": "en-US,en;q=0.9"}

INIT_SCRIPT = """
Object.defineProperty(navigator, 'webdriver', { get: () => undefined });
Object.defineProperty(navigator, 'languages', { get: () => ['en-US', 'en'] });
Object.defineProperty(navigator, 'plugins', { get: () => [1, 2, 3, 4, 5] });
window.chrome = window.chrome || { runtime: {} };
"""


def context_options(user_agent: str) -> dict[str, Any]:
    """
    Keyword arguments for `Browser.new_context` for one fetch attempt.
    """

    return {
        "user_agent": user_agent,
        "viewport": dict(VIEWPORT),
        "locale": LOCALE,
        "timezone_id": TIMEZONE_ID,
        "extra_http_headers": dict(EXTRA_HEADERS),
    }


def apply_stealth(context: BrowserContext) -> None:
    context.add_init_script(INIT_SCRIPT)
