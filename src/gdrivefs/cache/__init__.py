"""Lookup cache for gdrivefs."""

from __future__ import annotations

from .cache import Cache

__all__ = ["Cache"]
