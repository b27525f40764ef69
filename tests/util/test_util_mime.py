import unittest

from gdrivefs.util.mime import (
    FILE_MIME,
    FOLDER_MIME,
    is_download_disallowed,
    is_folder,
    is_google_app,
)


class TestUtilMime(unittest.TestCase):
    def test_is_folder(self) -> None:
        self.assertTrue(is_folder(FOLDER_MIME))
        self.assertFalse(is_folder("text/plain"))
        self.assertFalse(is_folder(FILE_MIME))

    def test_is_google_app(self) -> None:
        self.assertTrue(is_google_app("application/vnd.google-apps.document"))
        self.assertTrue(is_google_app("application/vnd.google-apps.spreadsheet"))

        # Prefix-based detection for unlisted Google apps types.
        self.assertTrue(is_google_app("application/vnd.google-apps.some-new-type"))

        self.assertFalse(is_google_app("application/pdf"))

    def test_is_download_disallowed(self) -> None:
        self.assertTrue(is_download_disallowed(FOLDER_MIME))
        self.assertTrue(is_download_disallowed("application/vnd.google-apps.document"))
        self.assertFalse(is_download_disallowed(FILE_MIME))
        self.assertFalse(is_download_disallowed("application/pdf"))


if __name__ == "__main__":
    unittest.main()
