"""Relational storage for link records and user subscriptions."""

from prmoji.store.base import PrLinkStore, StoreError, SubscriptionStore
from prmoji.store.sqlite import SQLiteStore

__all__ = ["PrLinkStore", "SQLiteStore", "StoreError", "SubscriptionStore"]
