from __future__ import annotations

import mimetypes
import os

FOLDER_MIME: str = "application/vnd.google-apps.folder"
DEFAULT_MIME: str = "application/octet-stream"


def guess_mime_type(path: str) -> str:
    """
    Return the MIME type registered for the file extension of `path`.

    Files without an extension, or with an unknown one, fall back to
    application/octet-stream.
    """
    _, ext = os.path.splitext(path)
    if not ext:
        return DEFAULT_MIME
    mime_type, _ = mimetypes.guess_type(f"file{ext}", strict=False)
    return mime_type or DEFAULT_MIME
