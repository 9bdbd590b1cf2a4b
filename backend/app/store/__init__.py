"""Record store backends for the PopWork data layer."""

from app.store.base import CurrentUser, Embed, Query, RecordStore, StoreError

__all__ = ["CurrentUser", "Embed", "Query", "RecordStore", "StoreError"]
