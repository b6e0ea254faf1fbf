"""Client singletons for external interactions."""
from crm_lookup.clients.browser_client import CrmBrowserClient

__all__ = ["CrmBrowserClient"]
