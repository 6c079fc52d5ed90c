"""SQLAlchemy models; importing the package registers them on the metadata."""

from __future__ import annotations

from .user import User

__all__ = ["User"]
