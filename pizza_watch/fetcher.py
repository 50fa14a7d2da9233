"""
Ordering Page Fetcher

Renders the online ordering page in Chromium and returns its final HTML.
"""

import logging

from playwright.sync_api import Error as PlaywrightError
from playwright.sync_api import sync_playwright

from .exceptions import FetchError

logger = logging.getLogger(__name__)

DEFAULT_URL = "https://order.toasttab.com/online/benchmark-pizzeria-kensington"

USER_AGENT = (
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) "
    "AppleWebKit/537.36 (KHTML, like Gecko) "
    "Chrome/120.0.0.0 Safari/537.36"
)


class PageFetcher:
    """Fetches the rendered ordering page with Playwright."""

    def __init__(
        self,
        url: str = DEFAULT_URL,
        headless: bool = True,
        timeout_seconds: int = 30,
        ready_selector: str = "#footer",
    ):
        self.url = url
        self.headless = headless
        self.timeout_ms = timeout_seconds * 1000
        self.ready_selector = ready_selector

    def fetch(self) -> str:
        """Load the page, wait for the menu to render and return the HTML."""
        logger.info(f"Fetching menu page {self.url}")
        logger.info(f"Running browser in {'headless' if self.headless else 'headed'} mode")

        try:
            with sync_playwright() as pw:
                browser = pw.chromium.launch(headless=self.headless)
                try:
                    page = browser.new_page(viewport={"width": 1366, "height": 768})
                    page.set_extra_http_headers({"User-Agent": USER_AGENT})
                    page.goto(self.url, wait_until="domcontentloaded", timeout=self.timeout_ms)
                    page.wait_for_selector(self.ready_selector, timeout=self.timeout_ms)
                    html = page.content()
                finally:
                    browser.close()
        except PlaywrightError as e:
            logger.error(f"Playwright failed: {e}")
            raise FetchError(f"Failed to fetch {self.url}: {e}") from e

        logger.debug(f"Fetched {len(html)} characters of HTML")
        return html
