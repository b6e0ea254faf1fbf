# crm_lookup/config.py
from dotenv import load_dotenv
import os

load_dotenv()


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


# Credentials (never hardcode)
SERVICEFUSION_COMPANY_ID = os.getenv("SERVICEFUSION_COMPANY_ID")
SERVICEFUSION_USERNAME = os.getenv("SERVICEFUSION_USERNAME")
SERVICEFUSION_PASSWORD = os.getenv("SERVICEFUSION_PASSWORD")

# Runtime parameters
HEADLESS = _env_bool("HEADLESS", True)
SLOW_MO_MS = int(os.getenv("SLOW_MO_MS", "0"))
NAVIGATION_TIMEOUT_SECS = int(os.getenv("NAVIGATION_TIMEOUT_SECS", "45"))
SEARCH_SETTLE_MS = int(os.getenv("SEARCH_SETTLE_MS", "7000"))
MAX_ROWS = 100
MIN_MATCH_SCORE = int(os.getenv("MIN_MATCH_SCORE", "0"))  # 0 keeps "always pick the top row"
ACTIONS_PER_SECOND = 5
VIEWPORT = {"width": 1440, "height": 900}
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

# URLs
LOGIN_URL = "https://auth.servicefusion.com/auth/login"
CUSTOMERS_URL = "https://admin.servicefusion.com/customer/customerList"

# Selectors, any key can be overridden by the run input's "selectors" object
DEFAULT_SELECTORS = {
    "company": "#company",
    "username": "#uid",
    "password": "#pwd",
    "login_button": "button[type='submit']",
    "search_field": "#CustomersListFilterForm_quickSearch",
    "header_cells": "table thead tr th",
    "results_row": "table tbody tr",
    "result_link": "a[href*='customer']",
    "loading_text": "text=Please wait while loading the details",
}

# File names
INPUT_FILE = os.getenv("INPUT_FILE", "input.json")
OUTPUT_DIR = os.getenv("OUTPUT_DIR", "storage")
