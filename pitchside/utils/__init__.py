"""Utilities module - cache store and datetime helpers."""
from pitchside.utils.cache import CacheStore, CacheTag
from pitchside.utils.datetime_helpers import ensure_utc, serialize_datetime_utc

__all__ = ["CacheStore", "CacheTag", "ensure_utc", "serialize_datetime_utc"]
