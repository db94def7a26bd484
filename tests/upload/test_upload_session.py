import json
import tempfile
import unittest
from pathlib import Path
from unittest.mock import Mock

from googleapiclient.errors import HttpError

from gdupload.catalog import DriveCatalog
from gdupload.errors import LocalFileError, QuotaExceededError, UploadError
from gdupload.models import UploadDescriptor
from gdupload.upload import UploadSession


class FakeClock:
    def __init__(self) -> None:
        self.now = 0.0

    def __call__(self) -> float:
        return self.now


def _status(progress: int) -> Mock:
    status = Mock()
    status.resumable_progress = progress
    return status


class TestUploadSession(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.tmp_path = Path(self._tmp.name)

        self.service = Mock()
        self.files_resource = Mock()
        self.request = Mock()
        self.service.files.return_value = self.files_resource
        self.files_resource.create.return_value = self.request

        self.clock = FakeClock()
        self.session = UploadSession(
            DriveCatalog(self.service), chunk_size=1024, clock=self.clock
        )
        self.lines: list[str] = []

    def tearDown(self) -> None:
        self._tmp.cleanup()

    def _file(self, name: str, size: int) -> str:
        path = self.tmp_path / name
        path.write_bytes(b"x" * size)
        return str(path)

    def test_chunked_upload_reports_each_chunk(self) -> None:
        path = self._file("report.pdf", 2500)
        statuses = iter([_status(1024), _status(2048)])

        def next_chunk():
            self.clock.now += 1.0
            status = next(statuses, None)
            if status is not None:
                return status, None
            return None, {"id": "F1", "name": "report.pdf", "size": "2500", "parents": ["P1"]}

        self.request.next_chunk.side_effect = next_chunk
        descriptor = UploadDescriptor(
            title="report.pdf", mime_type="application/pdf", parent_id="P1"
        )

        remote = self.session.upload(descriptor, path, progress=self.lines.append)

        self.assertEqual(remote.file_id, "F1")
        self.assertEqual(remote.size, 2500)
        self.assertEqual(
            self.lines,
            [
                "Uploaded at 0.0 B/s, 0/2,500",
                "Uploaded at 1.0 KB/s, 1,024/2,500",
                "Uploaded at 1.0 KB/s, 2,048/2,500",
                "Uploaded at 833.0 B/s, 2,500/2,500",
            ],
        )
        self.assertEqual(self.session.last_progress.bytes_sent, 2500)
        self.assertEqual(self.session.last_rate, "833.0 B/s")

        kwargs = self.files_resource.create.call_args.kwargs
        self.assertEqual(
            kwargs["body"],
            {"name": "report.pdf", "mimeType": "application/pdf", "parents": ["P1"]},
        )
        media = kwargs["media_body"]
        self.assertTrue(media.resumable())
        self.assertEqual(media.size(), 2500)
        self.assertEqual(media.mimetype(), "application/pdf")

    def test_zero_length_file_reports_once(self) -> None:
        path = self._file("empty.txt", 0)
        self.request.next_chunk.return_value = (None, {"id": "F0", "name": "empty.txt", "size": "0"})

        remote = self.session.upload(
            UploadDescriptor(title="empty.txt", mime_type="text/plain"),
            path,
            progress=self.lines.append,
        )

        self.assertEqual(self.lines, ["Uploaded at 0.0 B/s, 0/0"])
        self.assertEqual(remote.size, 0)
        self.assertEqual(self.session.last_progress.total_bytes, 0)

    def test_missing_size_falls_back_to_local_size(self) -> None:
        path = self._file("a.bin", 10)
        self.request.next_chunk.return_value = (None, {"id": "F2", "name": "a.bin"})

        remote = self.session.upload(
            UploadDescriptor(title="a.bin", mime_type="application/octet-stream"), path
        )
        self.assertEqual(remote.size, 10)

    def test_unreadable_file_makes_no_remote_call(self) -> None:
        with self.assertRaises(LocalFileError) as ctx:
            self.session.upload(
                UploadDescriptor(title="nope", mime_type="text/plain"),
                str(self.tmp_path / "missing.txt"),
            )
        self.assertIsInstance(ctx.exception.cause, FileNotFoundError)
        self.files_resource.create.assert_not_called()

    def test_check_local_sizes_file_without_remote_calls(self) -> None:
        self.assertEqual(self.session.check_local(self._file("a.bin", 42)), 42)

        with self.assertRaises(LocalFileError) as ctx:
            self.session.check_local(str(self.tmp_path / "missing.txt"))
        self.assertEqual(
            ctx.exception.details["local_path"], str(self.tmp_path / "missing.txt")
        )
        self.service.files.assert_not_called()

    def test_directory_is_local_file_error(self) -> None:
        with self.assertRaises(LocalFileError):
            self.session.upload(
                UploadDescriptor(title="dir", mime_type="text/plain"), str(self.tmp_path)
            )

    def test_transport_failure_is_upload_error(self) -> None:
        path = self._file("big.bin", 4096)
        resp = Mock()
        resp.status = 403
        resp.reason = "Forbidden"
        body = {"error": {"message": "full", "errors": [{"reason": "storageQuotaExceeded"}]}}
        self.request.next_chunk.side_effect = [
            (_status(1024), None),
            HttpError(resp=resp, content=json.dumps(body).encode("utf-8")),
        ]

        with self.assertRaises(UploadError) as ctx:
            self.session.upload(
                UploadDescriptor(title="big.bin", mime_type="application/octet-stream"),
                path,
                progress=self.lines.append,
            )

        self.assertIsInstance(ctx.exception.cause, QuotaExceededError)
        self.assertEqual(ctx.exception.details["status_code"], 403)
        self.assertEqual(self.request.next_chunk.call_count, 2)
        self.assertEqual(len(self.lines), 2)

    def test_network_failure_is_upload_error(self) -> None:
        path = self._file("big.bin", 4096)
        self.request.next_chunk.side_effect = ConnectionResetError("reset")

        with self.assertRaises(UploadError):
            self.session.upload(
                UploadDescriptor(title="big.bin", mime_type="application/octet-stream"),
                path,
            )

    def test_chunk_size_must_be_positive(self) -> None:
        with self.assertRaises(ValueError):
            UploadSession(DriveCatalog(self.service), chunk_size=0)


if __name__ == "__main__":
    unittest.main()
