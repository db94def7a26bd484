import unittest

import gdupload


class TestPublicApi(unittest.TestCase):
    def test_top_level_exports_exist(self) -> None:
        for name in (
            "AuthSession",
            "CredentialStore",
            "DriveCatalog",
            "FolderResolver",
            "UploadSession",
            "TransferRateTracker",
            "UploadConfig",
            "Credential",
            "UploadDescriptor",
            "format_size",
            "group_thousands",
            "GDUploadError",
            "UploadError",
        ):
            self.assertTrue(hasattr(gdupload, name), name)

    def test___all___is_defined(self) -> None:
        self.assertTrue(hasattr(gdupload, "__all__"))
        self.assertIn("UploadSession", gdupload.__all__)
        self.assertIn("GDUploadError", gdupload.__all__)
        for name in gdupload.__all__:
            self.assertTrue(hasattr(gdupload, name), name)


if __name__ == "__main__":
    unittest.main()
