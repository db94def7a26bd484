"""Drive catalog exports for gdupload."""

from __future__ import annotations

from .drive_catalog import DriveCatalog, RetryPolicy

__all__ = ["DriveCatalog", "RetryPolicy"]
