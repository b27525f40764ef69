import io
import unittest
from unittest.mock import ANY, Mock

from gdrivefs.cache import Cache
from gdrivefs.controller.api_wrapper import DriveApiWrapper
from gdrivefs.models import FileInfo
from gdrivefs.util.mime import FILE_MIME, FOLDER_MIME


def _file(file_id: str, name: str, *, parents=("P1",), mime_type=FILE_MIME) -> FileInfo:
    return FileInfo(file_id=file_id, name=name, mime_type=mime_type, parents=list(parents))


class TestDriveApiWrapperLookups(unittest.TestCase):
    def setUp(self) -> None:
        self.controller = Mock()
        self.controller.find_children_by_name.return_value = [_file("F1", "a")]
        self.api = DriveApiWrapper(self.controller)

    def test_lookup_is_cached(self) -> None:
        first = self.api.get_file_by_folder_and_name("P1", "a")
        second = self.api.get_file_by_folder_and_name("P1", "a")

        self.assertEqual(first, second)
        self.controller.find_children_by_name.assert_called_once_with(
            "P1", "a", fields="files(id)"
        )
        self.assertEqual(self.api.calls()["Files.List"], 1)
        self.assertIn("P1/lookup/a/files(id)", self.api.cache._items)

    def test_fields_are_part_of_the_key(self) -> None:
        self.api.get_file_by_folder_and_name("P1", "a")
        self.api.get_file_by_folder_and_name("P1", "a", fields="files(id,name)")
        self.assertEqual(self.controller.find_children_by_name.call_count, 2)

    def test_lookup_name_is_sanitized(self) -> None:
        self.api.get_file_by_folder_and_name("P1", "it's")
        self.controller.find_children_by_name.assert_called_once_with(
            "P1", "it-s", fields="files(id)"
        )

    def test_empty_results_are_cached_too(self) -> None:
        self.controller.find_children_by_name.return_value = []
        self.assertEqual(self.api.get_file_by_folder_and_name("P1", "x"), [])
        self.assertEqual(self.api.get_file_by_folder_and_name("P1", "x"), [])
        self.assertEqual(self.controller.find_children_by_name.call_count, 1)

    def test_cache_disabled_stores_nothing(self) -> None:
        self.api.use_cache = False
        self.api.get_file_by_folder_and_name("P1", "a")
        self.api.get_file_by_folder_and_name("P1", "a")
        self.assertEqual(self.controller.find_children_by_name.call_count, 2)
        self.assertEqual(len(self.api.cache), 0)

    def test_cache_disabled_still_serves_existing_entries(self) -> None:
        cache = Cache()
        cache.set("P1/lookup/a/files(id)", (_file("C", "a"),))
        api = DriveApiWrapper(self.controller, use_cache=False, cache=cache)

        files = api.get_file_by_folder_and_name("P1", "a")

        self.assertEqual([f.file_id for f in files], ["C"])
        self.controller.find_children_by_name.assert_not_called()


class TestDriveApiWrapperInvalidation(unittest.TestCase):
    def setUp(self) -> None:
        self.controller = Mock()
        self.cache = Cache()
        self.api = DriveApiWrapper(self.controller, cache=self.cache)
        for folder in ("P1", "P2", "P3"):
            self.cache.set(f"{folder}/lookup/x/files(id)", ())

    def _cached_folders(self) -> set[str]:
        return {key.split("/", 1)[0] for key in self.cache._items}

    def test_create_evicts_parent(self) -> None:
        self.controller.create.return_value = _file("N", "new", parents=["P1"])

        self.api.create_file("P1", "new", FILE_MIME)

        self.assertEqual(self._cached_folders(), {"P2", "P3"})
        self.controller.create.assert_called_once_with("P1", "new", FILE_MIME, fields=ANY)
        self.assertEqual(self.api.calls()["Files.Create"], 1)

    def test_create_sanitizes_name(self) -> None:
        self.controller.create.return_value = _file("N", "a-b")
        self.api.create_file("P1", "a/b", FOLDER_MIME)
        self.assertEqual(self.controller.create.call_args.args[1], "a-b")

    def test_delete_file_evicts_its_parents(self) -> None:
        self.api.delete_file(_file("F", "f", parents=["P1", "P2"]), trash=False)

        self.assertEqual(self._cached_folders(), {"P3"})
        self.controller.delete.assert_called_once_with("F")
        self.assertEqual(self.api.calls()["Files.Delete"], 1)

    def test_delete_folder_evicts_everything(self) -> None:
        self.api.delete_file(_file("D", "d", mime_type=FOLDER_MIME), trash=False)
        self.assertEqual(len(self.cache), 0)

    def test_trash_is_an_update(self) -> None:
        self.api.delete_file(_file("F", "f", parents=["P3"]), trash=True)

        self.controller.update.assert_called_once_with("F", trashed=True, fields="id")
        self.controller.delete.assert_not_called()
        self.assertEqual(self._cached_folders(), {"P1", "P2"})
        self.assertEqual(self.api.calls()["Files.Update"], 1)

    def test_rename_detaches_all_old_parents(self) -> None:
        self.controller.update.return_value = _file("F", "new", parents=["P3"])

        self.api.rename_file(_file("F", "old", parents=["P1", "P2"]), "P3", "new")

        kwargs = self.controller.update.call_args.kwargs
        self.assertEqual(kwargs["name"], "new")
        self.assertEqual(kwargs["add_parents"], ["P3"])
        self.assertEqual(kwargs["remove_parents"], ["P1", "P2"])
        self.assertEqual(len(self.cache), 0)

    def test_rename_in_place_keeps_parent(self) -> None:
        self.controller.update.return_value = _file("F", "new", parents=["P1"])

        self.api.rename_file(_file("F", "old", parents=["P1"]), "P1", "new")

        kwargs = self.controller.update.call_args.kwargs
        self.assertEqual(kwargs["add_parents"], [])
        self.assertEqual(kwargs["remove_parents"], [])
        self.assertEqual(self._cached_folders(), {"P2", "P3"})

    def test_update_content_evicts_parents(self) -> None:
        self.controller.update_content.return_value = _file("F", "f", parents=["P2"])
        stream = io.BytesIO(b"data")

        self.api.update_content(_file("F", "f", parents=["P2"]), stream)

        self.assertEqual(self.controller.update_content.call_args.args, ("F", stream))
        self.assertEqual(self._cached_folders(), {"P1", "P3"})

    def test_update_metadata_evicts_parents(self) -> None:
        self.controller.update.return_value = _file("F", "f", parents=["P1"])

        self.api.update_metadata(_file("F", "f", parents=["P1"]), properties={"file_mode": "1"})

        self.assertEqual(self._cached_folders(), {"P2", "P3"})

    def test_call_counters(self) -> None:
        self.controller.list_children_page.return_value = ([], None)
        self.controller.find_children_by_name.return_value = []

        self.api.list_children_page("P1", page_size=10)
        self.api.get_file_by_folder_and_name("P9", "x")
        self.api.delete_file(_file("F", "f"), trash=False)

        self.assertEqual(
            self.api.calls(),
            {"Files.Create": 0, "Files.Update": 0, "Files.Delete": 1, "Files.List": 2},
        )
        self.assertEqual(self.api.total_calls(), 3)


if __name__ == "__main__":
    unittest.main()
