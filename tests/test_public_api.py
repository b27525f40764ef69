import logging
import unittest

import gdrivefs


class TestPublicApi(unittest.TestCase):
    def test_top_level_exports_exist(self) -> None:
        self.assertTrue(hasattr(gdrivefs, "GoogleDriveFs"))
        self.assertTrue(hasattr(gdrivefs, "DriveFile"))
        self.assertTrue(hasattr(gdrivefs, "DriveFsConfig"))
        self.assertTrue(hasattr(gdrivefs, "AuthInfo"))
        self.assertTrue(hasattr(gdrivefs, "OAuthClient"))
        self.assertTrue(hasattr(gdrivefs, "FileInfo"))
        self.assertTrue(hasattr(gdrivefs, "Cache"))

        self.assertTrue(hasattr(gdrivefs, "GDriveFsError"))
        self.assertTrue(hasattr(gdrivefs, "DriveApiCallError"))

    def test___all___is_defined(self) -> None:
        self.assertTrue(hasattr(gdrivefs, "__all__"))
        self.assertIn("GoogleDriveFs", gdrivefs.__all__)
        self.assertIn("GDriveFsError", gdrivefs.__all__)
        for name in gdrivefs.__all__:
            self.assertTrue(hasattr(gdrivefs, name), name)

    def test_package_logger_has_null_handler(self) -> None:
        handlers = logging.getLogger("gdrivefs").handlers
        self.assertTrue(any(isinstance(h, logging.NullHandler) for h in handlers))


if __name__ == "__main__":
    unittest.main()
