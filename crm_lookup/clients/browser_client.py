"""
Singleton Playwright browser client with action pacing using aiolimiter.
"""
import asyncio
import re
from typing import Any, Dict, List, Optional

from aiolimiter import AsyncLimiter
from loguru import logger
from playwright.async_api import Browser, BrowserContext, Page, Playwright, async_playwright

from crm_lookup import config
from crm_lookup.detail_extractor import extract_details
from crm_lookup.models import CandidateRow
from crm_lookup.table_reader import ROWS_SCRIPT, build_candidate_rows, build_header_map


class CrmBrowserClient:
    """
    Singleton browser client holding the one page every query runs on.
    Uses AsyncLimiter to pace page actions instead of fixed sleeps between them.
    """
    _instance = None
    _initialized = False

    def __new__(cls, *args, **kwargs):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __init__(self, selectors: Optional[Dict[str, str]] = None):
        if not CrmBrowserClient._initialized:
            self.company_id = config.SERVICEFUSION_COMPANY_ID
            self.username = config.SERVICEFUSION_USERNAME
            self.password = config.SERVICEFUSION_PASSWORD
            if not (self.company_id and self.username and self.password):
                raise ValueError(
                    "Missing env vars: SERVICEFUSION_COMPANY_ID, SERVICEFUSION_USERNAME, SERVICEFUSION_PASSWORD"
                )
            self.selectors = {**config.DEFAULT_SELECTORS, **(selectors or {})}
            self.headless = config.HEADLESS
            self.slow_mo = config.SLOW_MO_MS
            self.timeout_ms = config.NAVIGATION_TIMEOUT_SECS * 1000
            self.search_settle_ms = config.SEARCH_SETTLE_MS
            self.rate_limiter = AsyncLimiter(max_rate=config.ACTIONS_PER_SECOND, time_period=1.0)
            self._playwright: Optional[Playwright] = None
            self._browser: Optional[Browser] = None
            self._context: Optional[BrowserContext] = None
            self._page: Optional[Page] = None
            CrmBrowserClient._initialized = True

    def apply_overrides(self, overrides: Dict[str, Any]) -> None:
        """Apply run input overrides (headless, slowMo, timeouts, selectors) before the browser starts."""
        if "headless" in overrides:
            self.headless = bool(overrides["headless"])
        if "slowMo" in overrides:
            self.slow_mo = int(overrides["slowMo"])
        if "navigationTimeoutSecs" in overrides:
            self.timeout_ms = int(overrides["navigationTimeoutSecs"]) * 1000
        if "searchSettleMs" in overrides:
            self.search_settle_ms = int(overrides["searchSettleMs"])
        if overrides.get("selectors"):
            self.selectors.update(overrides["selectors"])

    async def _get_page(self) -> Page:
        """Get or launch the browser page."""
        if self._page is None or self._page.is_closed():
            logger.info("Launching browser…")
            if self._playwright is None:
                self._playwright = await async_playwright().start()
            self._browser = await self._playwright.chromium.launch(headless=self.headless, slow_mo=self.slow_mo)
            self._context = await self._browser.new_context(viewport=config.VIEWPORT)
            self._page = await self._context.new_page()
            self._page.set_default_timeout(self.timeout_ms)
        return self._page

    async def login(self) -> None:
        """Log into the CRM with the configured credentials."""
        sel = self.selectors
        async with self.rate_limiter:
            page = await self._get_page()
            try:
                logger.info("Opening login page…")
                await page.goto(config.LOGIN_URL, wait_until="domcontentloaded")
                await page.fill(sel["company"], self.company_id)
                await page.fill(sel["username"], self.username)
                await page.fill(sel["password"], self.password)
                await page.click(sel["login_button"])
                await page.wait_for_timeout(1500)
            except Exception as e:
                logger.debug(f"⚠️ Login failed: {e}")
                raise

    async def open_customers(self) -> None:
        """Navigate to the customer list and wait for the quick search field."""
        async with self.rate_limiter:
            page = await self._get_page()
            try:
                await page.goto(config.CUSTOMERS_URL, wait_until="domcontentloaded", timeout=self.timeout_ms)
                await page.wait_for_selector(self.selectors["search_field"], state="visible", timeout=self.timeout_ms)
            except Exception as e:
                logger.debug(f"⚠️ Opening customer list failed: {e}")
                raise

    async def quick_search(self, address: str) -> None:
        """
        Run a quick search for `address` on a freshly loaded customer list and
        wait for the result grid to fill.
        """
        await self.open_customers()
        search_field = self.selectors["search_field"]
        async with self.rate_limiter:
            page = await self._get_page()
            try:
                await page.fill(search_field, "")
                await page.type(search_field, address, delay=15)
                await page.keyboard.press("Enter")
                await page.wait_for_timeout(self.search_settle_ms)
            except Exception as e:
                logger.debug(f"⚠️ Quick search failed for '{address}': {e}")
                raise

    async def read_header_map(self) -> Dict[str, int]:
        """Header map of the result table, empty when headers can't be read."""
        page = await self._get_page()
        try:
            headers = await page.eval_on_selector_all(
                self.selectors["header_cells"],
                "ths => ths.map(th => (th.textContent || '').trim())",
            )
        except Exception as e:
            logger.debug(f"⚠️ Reading table headers failed: {e}")
            return {}
        return build_header_map(headers)

    async def read_result_rows(self) -> List[CandidateRow]:
        """
        Read the first MAX_ROWS rows of the rendered result table.

        Returns:
            List[CandidateRow]: Rows in rendered order, empty when nothing could be read.
        """
        header_map = await self.read_header_map()
        page = await self._get_page()
        try:
            raw_rows = await page.eval_on_selector_all(self.selectors["results_row"], ROWS_SCRIPT, config.MAX_ROWS)
        except Exception as e:
            logger.debug(f"⚠️ Reading result rows failed: {e}")
            return []
        return build_candidate_rows(raw_rows, header_map)

    async def open_row(self, index: int) -> bool:
        """
        Open the detail view of the result row at `index`.

        Returns:
            bool: False when no row handle exists at that index.
        """
        sel = self.selectors
        async with self.rate_limiter:
            page = await self._get_page()
            row_handles = await page.query_selector_all(sel["results_row"])
            logger.info(f"Total row handles found: {len(row_handles)}")
            if index >= len(row_handles):
                logger.warning(f"Could not find row handle at index {index}. Saving preview only.")
                return False

            row = row_handles[index]
            try:
                await row.scroll_into_view_if_needed()
            except Exception as e:
                logger.debug(f"Scrolling row {index} into view failed: {e}")

            link = await row.query_selector(sel["result_link"]) or await row.query_selector("a")
            if link:
                logger.info(f"Clicking link with href: {await link.get_attribute('href')}")
                await link.click()
            else:
                logger.warning("No link found in row, clicking row directly...")
                await row.click()

        await self._wait_for_detail(page)
        return True

    async def _wait_for_detail(self, page: Page) -> None:
        """Wait out the loading overlay and the navigation to the detail page."""
        loading_text = self.selectors["loading_text"]
        try:
            await page.wait_for_selector(loading_text, state="visible", timeout=5000)
            logger.info("Loading overlay detected, waiting for it to disappear...")
            try:
                await page.wait_for_selector(loading_text, state="hidden", timeout=15000)
            except Exception as e:
                logger.debug(f"Loading overlay still visible: {e}")
        except Exception:
            logger.info("No loading overlay detected")

        done, pending = await asyncio.wait(
            [
                asyncio.ensure_future(page.wait_for_url(re.compile("customer", re.IGNORECASE), timeout=30000)),
                asyncio.ensure_future(page.wait_for_load_state("domcontentloaded", timeout=30000)),
            ],
            return_when=asyncio.FIRST_COMPLETED,
        )
        for task in pending:
            task.cancel()
        await asyncio.gather(*pending, return_exceptions=True)
        for task in done:
            if task.exception():
                logger.debug(f"Waiting for detail page: {task.exception()}")
        await page.wait_for_timeout(1200)

    async def current_url(self) -> str:
        page = await self._get_page()
        return page.url

    async def page_html(self) -> str:
        page = await self._get_page()
        return await page.content()

    async def screenshot(self) -> bytes:
        page = await self._get_page()
        return await page.screenshot(full_page=True)

    async def extract_details(self) -> Dict[str, Any]:
        page = await self._get_page()
        return await extract_details(page)

    async def close(self):
        """Close the browser and stop Playwright."""
        try:
            if self._browser is not None:
                await self._browser.close()
        finally:
            self._browser = None
            self._context = None
            self._page = None
            if self._playwright is not None:
                await self._playwright.stop()
                self._playwright = None
