"""Field definitions for Google Drive API responses."""

from __future__ import annotations

FILE_FIELDS: str = (
    "id,"
    "name,"
    "mimeType,"
    "parents,"
    "size,"
    "description,"
    "webContentLink,"
    "modifiedTime"
)

LIST_FIELDS: str = f"files({FILE_FIELDS})"
