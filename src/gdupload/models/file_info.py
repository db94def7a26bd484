"""Data model for Drive items."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional


@dataclass(slots=True)
class RemoteFile:
    """Metadata of a Drive item as returned by the files resource."""

    file_id: str
    name: str
    mime_type: str
    parents: list[str] = field(default_factory=list)

    size: Optional[int] = None
    description: Optional[str] = None
    web_content_link: Optional[str] = None
    modified_time: Optional[datetime] = None
