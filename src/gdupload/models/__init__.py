"""Public model exports for gdupload."""

from __future__ import annotations

from .credential import Credential
from .file_info import RemoteFile
from .upload import FolderHandle, TransferProgress, UploadDescriptor

__all__ = [
    "Credential",
    "RemoteFile",
    "FolderHandle",
    "UploadDescriptor",
    "TransferProgress",
]
