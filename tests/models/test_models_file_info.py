import stat
import unittest
from datetime import datetime, timezone

from gdrivefs.models import FileInfo
from gdrivefs.util.mime import FOLDER_MIME


class TestFileInfo(unittest.TestCase):
    def test_file_info_required_fields(self) -> None:
        info = FileInfo(file_id="F1", name="n", mime_type="text/plain")
        self.assertEqual(info.parents, ())
        self.assertEqual(info.parent_path, "")
        self.assertFalse(info.trashed)
        self.assertIsNone(info.modified_time)
        self.assertIsNone(info.size)
        self.assertEqual(info.properties, {})

    def test_file_info_optional_fields(self) -> None:
        dt = datetime(2025, 1, 1, tzinfo=timezone.utc)
        info = FileInfo(
            file_id="F1",
            name="doc",
            mime_type="application/pdf",
            parents=["P1", "P2"],
            trashed=True,
            modified_time=dt,
            created_time=dt,
            size=123,
            md5_checksum="abc",
        )
        self.assertTrue(info.trashed)
        self.assertEqual(info.modified_time, dt)
        self.assertEqual(info.size, 123)
        self.assertEqual(info.primary_parent, "P1")

    def test_path_uses_sanitized_name(self) -> None:
        info = FileInfo(
            file_id="F1",
            name="a/b's",
            mime_type="text/plain",
            parent_path="Folder1/Sub",
        )
        self.assertEqual(info.display_name, "a-b-s")
        self.assertEqual(info.path, "Folder1/Sub/a-b-s")

    def test_path_without_parent_path(self) -> None:
        info = FileInfo(file_id="F1", name="top", mime_type="text/plain")
        self.assertEqual(info.path, "top")

    def test_is_dir_and_mode(self) -> None:
        folder = FileInfo(file_id="D", name="d", mime_type=FOLDER_MIME)
        file = FileInfo(file_id="F", name="f", mime_type="text/plain")
        self.assertTrue(folder.is_dir)
        self.assertFalse(file.is_dir)
        self.assertTrue(stat.S_ISDIR(folder.mode))
        self.assertTrue(stat.S_ISREG(file.mode))

    def test_with_parent_path_returns_new_instance(self) -> None:
        info = FileInfo(file_id="F1", name="n", mime_type="text/plain", parents=["P"])
        moved = info.with_parent_path("A/B")
        self.assertEqual(moved.path, "A/B/n")
        self.assertEqual(info.parent_path, "")
        self.assertEqual(moved.parents, ("P",))
        self.assertIsNot(moved.properties, info.properties)

    def test_parents_are_stored_as_a_tuple(self) -> None:
        parents = ["P1", "P2"]
        info = FileInfo(file_id="F1", name="n", mime_type="text/plain", parents=parents)
        parents.append("P3")
        self.assertEqual(info.parents, ("P1", "P2"))

    def test_is_hashable(self) -> None:
        a = FileInfo(file_id="F1", name="n", mime_type="text/plain", parents=["P"],
                     properties={"file_mode": "420"})
        b = FileInfo(file_id="F1", name="n", mime_type="text/plain", parents=("P",),
                     properties={"file_mode": "420"})
        self.assertEqual(a, b)
        self.assertEqual(hash(a), hash(b))
        self.assertEqual(len({a, b, a.with_parent_path("X")}), 2)


if __name__ == "__main__":
    unittest.main()
