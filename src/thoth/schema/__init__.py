"""Schema base classes for thoth."""

from __future__ import annotations

from .base import TypedBaseModel

__all__ = ["TypedBaseModel"]
