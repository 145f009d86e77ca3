"""Database package exposing SQLAlchemy base metadata and model imports."""

from __future__ import annotations

from signaldesk.adapters.db.postgres import Base, metadata  # re-export for convenience

# Import models so SQLAlchemy registers them when this package is loaded.
from . import models  # noqa: F401

__all__ = ["Base", "metadata"]
