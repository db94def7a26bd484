import unittest

from gdupload.models import FolderHandle, UploadDescriptor


class TestUploadDescriptor(unittest.TestCase):
    def test_metadata_with_parent_and_description(self) -> None:
        d = UploadDescriptor(
            title="report.pdf",
            mime_type="application/pdf",
            description="Q3",
            parent_id="P1",
        )
        self.assertEqual(
            d.to_metadata(),
            {
                "name": "report.pdf",
                "mimeType": "application/pdf",
                "description": "Q3",
                "parents": ["P1"],
            },
        )

    def test_metadata_for_root_upload(self) -> None:
        d = UploadDescriptor(title="a.txt", mime_type="text/plain")
        self.assertEqual(d.to_metadata(), {"name": "a.txt", "mimeType": "text/plain"})

    def test_empty_title_is_rejected(self) -> None:
        with self.assertRaises(ValueError):
            UploadDescriptor(title=" ", mime_type="text/plain")

    def test_descriptor_is_immutable(self) -> None:
        d = UploadDescriptor(title="a.txt", mime_type="text/plain")
        with self.assertRaises(AttributeError):
            d.title = "b.txt"  # type: ignore[misc]


class TestFolderHandle(unittest.TestCase):
    def test_folder_handle_equality(self) -> None:
        self.assertEqual(FolderHandle("archive", "F1"), FolderHandle("archive", "F1"))


if __name__ == "__main__":
    unittest.main()
