"""Command line interface: authorize, upload one file, list recent files."""

from __future__ import annotations

import argparse
import logging
import os
import sys
from typing import Callable, Optional, Sequence

from rich.console import Console
from rich.logging import RichHandler

from gdupload.auth import (
    DEFAULT_CREDENTIALS_DIR,
    DEFAULT_REDIRECT_URI,
    AuthSession,
    CredentialStore,
    load_client_config,
)
from gdupload.catalog import DriveCatalog
from gdupload.config import (
    DEFAULT_CLIENT_SECRETS,
    DEFAULT_FOLDER_NAME,
    DEFAULT_INPUT_PATH,
    DEFAULT_LIST_LIMIT,
    ENV_CLIENT_SECRETS,
    ENV_CREDENTIALS_DIR,
    UploadConfig,
)
from gdupload.errors import ConfigError, GDUploadError, ListError
from gdupload.folders import FolderResolver
from gdupload.models import RemoteFile, UploadDescriptor
from gdupload.upload import DEFAULT_CHUNK_SIZE, UploadSession
from gdupload.util.humanize import format_size

logger = logging.getLogger(__name__)

_MIB = 1024 * 1024


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="gdupload",
        description="Upload a file to a Google Drive folder, then list recent files.",
    )
    parser.add_argument("-i", "--input", default=DEFAULT_INPUT_PATH, help="input file path")
    parser.add_argument(
        "-o", "--output", default="", help="output filename (default: input base name)"
    )
    parser.add_argument(
        "-f", "--folder", default=DEFAULT_FOLDER_NAME,
        help="destination folder name; empty for the Drive root",
    )
    parser.add_argument("--description", default="", help="description of the uploaded file")
    parser.add_argument(
        "--client-secrets",
        default=os.environ.get(ENV_CLIENT_SECRETS, DEFAULT_CLIENT_SECRETS),
        help=f"OAuth client secret JSON (env {ENV_CLIENT_SECRETS})",
    )
    parser.add_argument(
        "--credentials-dir",
        default=os.environ.get(ENV_CREDENTIALS_DIR, DEFAULT_CREDENTIALS_DIR),
        help=f"directory of the cached token (env {ENV_CREDENTIALS_DIR})",
    )
    parser.add_argument(
        "--redirect-uri", default=DEFAULT_REDIRECT_URI,
        help="OAuth redirect URI registered for the client (default: %(default)s)",
    )
    parser.add_argument(
        "--chunk-size-mb", type=int, default=DEFAULT_CHUNK_SIZE // _MIB,
        help="resumable upload chunk size in MiB",
    )
    parser.add_argument(
        "--list-limit", type=int, default=DEFAULT_LIST_LIMIT,
        help="number of files to list after the upload",
    )
    parser.add_argument(
        "-v", "--verbose", action="count", default=0, help="more logging (-vv for debug)"
    )
    return parser


def config_from_args(args: argparse.Namespace) -> UploadConfig:
    try:
        return UploadConfig(
            input_path=args.input,
            output_name=args.output,
            folder_name=args.folder,
            description=args.description,
            client_secrets_file=args.client_secrets,
            credentials_dir=args.credentials_dir,
            redirect_uri=args.redirect_uri,
            chunk_size=args.chunk_size_mb * _MIB,
            list_limit=args.list_limit,
            verbosity=args.verbose,
        )
    except ValueError as exc:
        raise ConfigError(str(exc), cause=exc) from exc


def configure_logging(verbosity: int) -> None:
    level = logging.WARNING
    if verbosity == 1:
        level = logging.INFO
    elif verbosity >= 2:
        level = logging.DEBUG

    handler = RichHandler(console=Console(stderr=True), show_path=False)
    logging.basicConfig(level=level, format="%(message)s", handlers=[handler], force=True)
    # Discovery cache warnings are noise for a one-shot CLI.
    logging.getLogger("googleapiclient.discovery_cache").setLevel(logging.ERROR)


def _say(console: Console, text: str, **kwargs) -> None:
    console.print(text, markup=False, highlight=False, **kwargs)


def print_file_list(console: Console, files: Sequence[RemoteFile]) -> None:
    _say(console, "Files:")
    if not files:
        _say(console, "No files found.")
        return
    for item in files:
        _say(console, f"{item.name} ({item.file_id})-({item.web_content_link or ''})")


def run(
    config: UploadConfig,
    *,
    console: Optional[Console] = None,
    input_func: Callable[[str], str] = input,
) -> RemoteFile:
    """
    Authorize, check the local file, resolve the folder, upload, then list
    recent files. A token refreshed along the way is written back at the end.

    Raises:
        GDUploadError: from whichever step failed; nothing is retried here.
    """
    console = console or Console()

    client_config = load_client_config(config.client_secrets_file)
    store = CredentialStore(config.credentials_dir, config.token_name)
    session = AuthSession(
        client_config,
        store,
        scopes=config.scopes,
        redirect_uri=config.redirect_uri,
        input_func=input_func,
        console=console,
    )
    catalog = DriveCatalog(session.authorize())

    _say(console, f"Read file: {config.input_path}")
    _say(console, f"Output name: {config.display_name}")
    _say(console, f"Mime : {config.mime_type}")

    uploader = UploadSession(catalog, chunk_size=config.chunk_size)
    # Nothing is created remotely for an input that cannot be read.
    uploader.check_local(config.input_path)

    parent_id = FolderResolver(catalog).resolve(config.folder_name)

    try:
        descriptor = UploadDescriptor(
            title=config.display_name,
            mime_type=config.mime_type,
            description=config.description,
            parent_id=parent_id or None,
        )
    except ValueError as exc:
        raise ConfigError(str(exc), details={"input_path": config.input_path}, cause=exc) from exc

    try:
        remote = uploader.upload(
            descriptor,
            config.input_path,
            progress=lambda line: _say(console, line, end="\r"),
        )
    finally:
        console.line()

    size = remote.size or 0
    _say(console, f"Uploaded '{remote.name}' at {uploader.last_rate}, total {format_size(size)}")
    _say(console, f"Upload Done. ID : {remote.file_id}")

    try:
        files = catalog.list_recent(config.list_limit)
    except GDUploadError as exc:
        raise ListError("Unable to retrieve files", details=exc.details, cause=exc) from exc
    print_file_list(console, files)
    session.persist_refreshed()
    return remote


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(args.verbose)
    err_console = Console(stderr=True)

    try:
        run(config_from_args(args))
    except GDUploadError as exc:
        message = str(exc)
        if exc.cause is not None:
            message = f"{message}: {exc.cause}"
        _say(err_console, f"Error: {message}")
        logger.debug("Failure details: %s", exc.details, exc_info=exc)
        return 1
    except KeyboardInterrupt:
        _say(err_console, "Interrupted")
        return 130
    return 0


if __name__ == "__main__":
    sys.exit(main())
