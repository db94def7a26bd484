import json
import os
import stat
import tempfile
import unittest
from datetime import datetime
from pathlib import Path

from google.oauth2.credentials import Credentials

from gdupload.auth import CredentialStore
from gdupload.errors import CacheIOError
from gdupload.models import Credential


def _credential(token="access", refresh="refresh", expiry=None, token_type="Bearer") -> Credential:
    creds = Credentials(
        token=token,
        refresh_token=refresh,
        token_uri="https://oauth2.googleapis.com/token",
        client_id="id",
        client_secret="secret",
        scopes=["https://www.googleapis.com/auth/drive"],
        expiry=expiry,
    )
    return Credential.from_google(creds, token_type)


class TestCredentialStore(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.tmp_path = Path(self._tmp.name)
        self.cache_dir = self.tmp_path / ".credentials"

    def tearDown(self) -> None:
        self._tmp.cleanup()

    def test_path_escapes_token_name(self) -> None:
        store = CredentialStore(str(self.cache_dir), "drive api/cert.json")
        self.assertEqual(
            store.path, os.path.join(str(self.cache_dir), "drive+api%2Fcert.json")
        )

    def test_load_missing_returns_none_and_creates_dir(self) -> None:
        store = CredentialStore(str(self.cache_dir))
        self.assertIsNone(store.load())
        self.assertTrue(self.cache_dir.is_dir())
        if os.name == "posix":
            mode = stat.S_IMODE(self.cache_dir.stat().st_mode)
            self.assertEqual(mode & 0o077, 0)

    def test_save_then_load_round_trip(self) -> None:
        store = CredentialStore(str(self.cache_dir))
        cred = _credential(expiry=datetime(2025, 1, 1, 12, 30, 0))

        store.save(cred)

        loaded = store.load()
        self.assertEqual(loaded, cred)
        self.assertEqual(loaded.google.client_id, "id")
        self.assertEqual(loaded.google.token_uri, "https://oauth2.googleapis.com/token")

    def test_file_is_google_authorized_user_json(self) -> None:
        store = CredentialStore(str(self.cache_dir))
        store.save(_credential(token_type="bearer"))

        on_disk = json.loads(Path(store.path).read_text(encoding="utf-8"))
        self.assertEqual(on_disk["token"], "access")
        self.assertEqual(on_disk["refresh_token"], "refresh")
        self.assertEqual(on_disk["client_id"], "id")
        self.assertEqual(on_disk["token_type"], "bearer")
        self.assertEqual(store.load().token_type, "bearer")
        if os.name == "posix":
            self.assertEqual(stat.S_IMODE(Path(store.path).stat().st_mode) & 0o077, 0)

    def test_save_overwrites_previous_file(self) -> None:
        store = CredentialStore(str(self.cache_dir))
        store.save(_credential(token="old", refresh="a-much-longer-refresh"))
        store.save(_credential(token="new", refresh="r"))

        self.assertEqual(
            store.load(), Credential(access_token="new", refresh_token="r")
        )

    def test_malformed_cache_is_not_found(self) -> None:
        store = CredentialStore(str(self.cache_dir))
        self.cache_dir.mkdir()
        Path(store.path).write_text("{broken", encoding="utf-8")
        self.assertIsNone(store.load())

        Path(store.path).write_text(json.dumps(["token"]), encoding="utf-8")
        self.assertIsNone(store.load())

        # No refresh token or client: google-auth cannot rebuild it.
        Path(store.path).write_text(json.dumps({"token": "a"}), encoding="utf-8")
        self.assertIsNone(store.load())

    def test_save_requires_google_credentials(self) -> None:
        store = CredentialStore(str(self.cache_dir))
        with self.assertRaises(ValueError):
            store.save(Credential(access_token="a"))

    def test_uncreatable_directory_is_cache_io_error(self) -> None:
        blocker = self.tmp_path / "blocker"
        blocker.write_text("not a directory", encoding="utf-8")
        store = CredentialStore(str(blocker / "sub"))

        with self.assertRaises(CacheIOError):
            store.load()
        with self.assertRaises(CacheIOError):
            store.save(_credential())

    def test_unwritable_file_is_cache_io_error(self) -> None:
        store = CredentialStore(str(self.cache_dir))
        # A directory in place of the cache file cannot be opened for writing.
        os.makedirs(store.path)
        with self.assertRaises(CacheIOError) as ctx:
            store.save(_credential())
        self.assertEqual(ctx.exception.details["token_file"], store.path)


if __name__ == "__main__":
    unittest.main()
