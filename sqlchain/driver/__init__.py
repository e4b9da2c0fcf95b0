"""Driver adapter protocols."""

from sqlchain.driver._sync import SyncDriverAdapterBase

__all__ = ("SyncDriverAdapterBase",)
