"""Get-or-create of the destination folder by name."""

from __future__ import annotations

import logging

from gdupload.catalog import DriveCatalog
from gdupload.errors import FolderResolutionError, GDUploadError
from gdupload.models import FolderHandle
from gdupload.util.mime import FOLDER_MIME

logger = logging.getLogger(__name__)

AUTO_CREATE_DESCRIPTION = "Auto Create by gdupload"


def escape_query_value(value: str) -> str:
    """Escape a string literal for a Drive query (backslash and single quote)."""
    return value.replace("\\", "\\\\").replace("'", "\\'")


def build_folder_query(name: str) -> str:
    return (
        f"name = '{escape_query_value(name)}'"
        f" and mimeType = '{FOLDER_MIME}'"
        " and trashed = false"
    )


class FolderResolver:
    """
    Resolve a folder name to its Drive id, creating the folder if absent.

    Resolved ids are memoized per name for the lifetime of the resolver, so a
    run asks Drive at most once per distinct name.

    Lookup and create are two separate requests. Two clients resolving the
    same missing name at the same time will each create a folder; the
    duplicate is accepted.
    """

    def __init__(
        self,
        catalog: DriveCatalog,
        *,
        fallback_to_root: bool = True,
        description: str = AUTO_CREATE_DESCRIPTION,
    ) -> None:
        self._catalog = catalog
        self._fallback_to_root = fallback_to_root
        self._description = description
        self._resolved: dict[str, FolderHandle] = {}

    def resolve(self, name: str) -> str:
        """
        Return the id of folder `name`. An empty name means the Drive root ("").

        Raises:
            FolderResolutionError: if the lookup is rejected, or the create is
                rejected and fallback_to_root is False.
        """
        if not name:
            return ""

        cached = self._resolved.get(name)
        if cached is not None:
            return cached.remote_id

        try:
            found = self._catalog.find(build_folder_query(name), limit=1)
        except GDUploadError as exc:
            raise FolderResolutionError(
                "Unable to retrieve folder",
                details={"folder_name": name, **exc.details},
                cause=exc,
            ) from exc

        if found:
            handle = FolderHandle(name=name, remote_id=found[0].file_id)
            logger.debug("Found folder %r (%s)", name, handle.remote_id)
        else:
            logger.info("Folder not found. Creating new folder: %s", name)
            try:
                created = self._catalog.create_folder(name, description=self._description)
            except GDUploadError as exc:
                if not self._fallback_to_root:
                    raise FolderResolutionError(
                        "Unable to create folder",
                        details={"folder_name": name, **exc.details},
                        cause=exc,
                    ) from exc
                logger.warning(
                    "Could not create folder %r (%s); uploading to the Drive root",
                    name,
                    exc,
                )
                return ""
            handle = FolderHandle(name=name, remote_id=created.file_id)

        self._resolved[name] = handle
        return handle.remote_id

    def handles(self) -> list[FolderHandle]:
        """Folders resolved so far, in resolution order."""
        return list(self._resolved.values())
