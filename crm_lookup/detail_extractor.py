"""
Best-effort field extraction from an opened customer detail page.

Every lookup is independent: a lookup that fails is logged at debug level and
yields None, it never stops the other lookups or the query.
"""
import re
from typing import Any, Dict, Optional

from loguru import logger
from playwright.async_api import Page

_CUSTOMER_ID = re.compile(r"(?:id=|/customer/view/?)([a-zA-Z0-9_-]+)", re.IGNORECASE)
_DATE_VALUE = re.compile(r"\d{2}/\d{2}/\d{4}")

# Collects label -> value for every filled text/tel/email input
FORM_FIELDS_SCRIPT = """
() => {
    const data = {};
    document.querySelectorAll('input[type="text"], input[type="tel"], input[type="email"]').forEach(input => {
        const value = input.value.trim();
        if (!value) return;
        const label = (input.previousElementSibling && input.previousElementSibling.textContent) ||
            (input.parentElement && input.parentElement.previousElementSibling &&
             input.parentElement.previousElementSibling.textContent) ||
            input.getAttribute('placeholder') ||
            input.getAttribute('name') || '';
        if (label.trim()) data[label.trim()] = value;
    });
    return data;
}
"""


def customer_id_from_url(url: Optional[str]) -> Optional[str]:
    """Pull the customer id out of a detail page URL, if it carries one."""
    m = _CUSTOMER_ID.search(url or "")
    return m.group(1) if m else None


def clean_customer_name(heading: Optional[str]) -> Optional[str]:
    """Strip the "Edit Customer:" prefix from the detail page heading."""
    if heading is None:
        return None
    return re.sub(r"Edit Customer:\s*", "", heading, flags=re.IGNORECASE).strip()


async def _customer_name(page: Page) -> Optional[str]:
    heading = page.locator("h1, h2").filter(has_text=re.compile(r"Edit Customer|Customer:")).first
    return clean_customer_name(await heading.text_content())


async def _account_number(page: Page) -> Optional[str]:
    return await page.locator("text=Account Number").locator("..").locator("input").first.input_value()


async def _vip_account(page: Page) -> bool:
    yes_buttons = page.locator("text=VIP Account").locator("..").locator("button").filter(has_text="YES")
    return await yes_buttons.count() > 0


async def _agreement_dates(page: Page) -> Dict[str, str]:
    dates = []
    for text_input in await page.locator('input[type="text"]').all():
        value = await text_input.input_value()
        if _DATE_VALUE.search(value):
            dates.append(value)
    if len(dates) < 2:
        return {}
    return {"effectiveDate": dates[0], "expirationDate": dates[1]}


async def _contact_email(page: Page) -> Optional[str]:
    return await page.locator('input[type="email"], input[placeholder*="email" i]').first.input_value()


async def _contact_phone(page: Page) -> Optional[str]:
    return await page.locator('input[type="tel"]').first.input_value()


async def _form_fields(page: Page) -> Dict[str, str]:
    return await page.evaluate(FORM_FIELDS_SCRIPT)


async def _best_effort(name: str, lookup, page: Page, default=None):
    try:
        return await lookup(page)
    except Exception as e:
        logger.debug(f"⚠️ Detail lookup '{name}' failed: {e}")
        return default


async def extract_details(page: Page) -> Dict[str, Any]:
    """
    Extract useful details from the customer detail page.

    Args:
        page (Page): Page showing the opened customer record.

    Returns:
        Dict[str, Any]: Extracted fields. Missing values are None (or empty).
    """
    return {
        "customerName": await _best_effort("customerName", _customer_name, page),
        "accountNumber": await _best_effort("accountNumber", _account_number, page),
        "vipAccount": await _best_effort("vipAccount", _vip_account, page, default=False),
        "serviceAgreement": await _best_effort("serviceAgreement", _agreement_dates, page, default={}),
        "primaryContact": {
            "email": await _best_effort("primaryContact.email", _contact_email, page),
            "phoneNumber": await _best_effort("primaryContact.phoneNumber", _contact_phone, page),
        },
        "allFormFields": await _best_effort("allFormFields", _form_fields, page, default={}),
    }
