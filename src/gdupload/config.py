"""Immutable run configuration for gdupload."""

from __future__ import annotations

import os
from dataclasses import dataclass

from gdupload.auth import DEFAULT_CREDENTIALS_DIR, DEFAULT_REDIRECT_URI, DEFAULT_TOKEN_NAME
from gdupload.upload import DEFAULT_CHUNK_SIZE
from gdupload.util.mime import guess_mime_type

DEFAULT_SCOPES: tuple[str, ...] = ("https://www.googleapis.com/auth/drive",)
DEFAULT_INPUT_PATH = "./index.html"
DEFAULT_FOLDER_NAME = "user1"
DEFAULT_CLIENT_SECRETS = "client_secret.json"
DEFAULT_LIST_LIMIT = 10

ENV_CLIENT_SECRETS = "GDUPLOAD_CLIENT_SECRETS"
ENV_CREDENTIALS_DIR = "GDUPLOAD_CREDENTIALS_DIR"


@dataclass(slots=True, frozen=True)
class UploadConfig:
    """
    Everything one invocation needs. Built once from the command line and
    passed to each step.

    An empty `output_name` means "use the input file's base name"; an empty
    `folder_name` uploads to the Drive root.
    """

    input_path: str = DEFAULT_INPUT_PATH
    output_name: str = ""
    folder_name: str = DEFAULT_FOLDER_NAME
    description: str = ""

    client_secrets_file: str = DEFAULT_CLIENT_SECRETS
    credentials_dir: str = DEFAULT_CREDENTIALS_DIR
    token_name: str = DEFAULT_TOKEN_NAME
    scopes: tuple[str, ...] = DEFAULT_SCOPES
    redirect_uri: str = DEFAULT_REDIRECT_URI

    chunk_size: int = DEFAULT_CHUNK_SIZE
    list_limit: int = DEFAULT_LIST_LIMIT
    verbosity: int = 0

    def __post_init__(self) -> None:
        for key in (
            "input_path",
            "client_secrets_file",
            "credentials_dir",
            "token_name",
            "redirect_uri",
        ):
            value = getattr(self, key)
            if not isinstance(value, str) or not value.strip():
                raise ValueError(f"UploadConfig.{key} must be a non-empty string")
        if self.chunk_size <= 0:
            raise ValueError("UploadConfig.chunk_size must be positive")
        if self.list_limit < 1:
            raise ValueError("UploadConfig.list_limit must be at least 1")
        if not self.scopes:
            raise ValueError("UploadConfig.scopes must not be empty")

    @property
    def display_name(self) -> str:
        """Title given to the uploaded file."""
        return self.output_name or os.path.basename(self.input_path)

    @property
    def mime_type(self) -> str:
        return guess_mime_type(self.input_path)
