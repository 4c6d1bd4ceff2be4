"""
Resource Store Adapter - collection access with bounded reads and typed
write failures.
"""

from fintech_index.kernel.store.base import BaseStore
from fintech_index.kernel.store.country_data import CountryDataStore
from fintech_index.kernel.store.startups import StartupStore

__all__ = ["BaseStore", "CountryDataStore", "StartupStore"]
