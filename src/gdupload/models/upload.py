"""Value objects used by a single upload run."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional


@dataclass(slots=True, frozen=True)
class FolderHandle:
    """A named Drive folder and its id. Many uploads may share one parent."""

    name: str
    remote_id: str


@dataclass(slots=True, frozen=True)
class UploadDescriptor:
    """Metadata attached to the uploaded file."""

    title: str
    mime_type: str
    description: str = ""
    parent_id: Optional[str] = None

    def __post_init__(self) -> None:
        if not isinstance(self.title, str) or not self.title.strip():
            raise ValueError("UploadDescriptor.title must be a non-empty string")
        if not isinstance(self.mime_type, str) or not self.mime_type:
            raise ValueError("UploadDescriptor.mime_type must be a non-empty string")

    def to_metadata(self) -> dict[str, Any]:
        """Return the Drive v3 request body for files.create."""
        body: dict[str, Any] = {"name": self.title, "mimeType": self.mime_type}
        if self.description:
            body["description"] = self.description
        if self.parent_id:
            body["parents"] = [self.parent_id]
        return body


@dataclass(slots=True)
class TransferProgress:
    """Bytes sent so far for one transfer. Mutated only by the rate tracker."""

    total_bytes: int
    started_at: float
    bytes_sent: int = 0
