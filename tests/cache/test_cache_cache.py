import threading
import unittest

from gdrivefs.cache import Cache


class TestCache(unittest.TestCase):
    def test_set_get(self) -> None:
        cache = Cache()
        cache.set("a", 1)
        self.assertEqual(cache.get("a"), (1, True))
        self.assertEqual(cache.get_value("a"), 1)

    def test_missing_key(self) -> None:
        cache = Cache()
        self.assertEqual(cache.get("nope"), (None, False))
        self.assertIsNone(cache.get_value("nope"))

    def test_stored_none_is_found(self) -> None:
        cache = Cache()
        cache.set("k", None)
        self.assertEqual(cache.get("k"), (None, True))

    def test_delete(self) -> None:
        cache = Cache()
        cache.set("a", 1)
        cache.delete("a")
        cache.delete("a")
        self.assertEqual(cache.get("a"), (None, False))

    def test_cleanup_by_prefix(self) -> None:
        cache = Cache()
        cache.set("P1/lookup/a/files(id)", 1)
        cache.set("P1/lookup/b/files(id)", 2)
        cache.set("P10/lookup/a/files(id)", 3)
        cache.set("P2/lookup/a/files(id)", 4)

        removed = cache.cleanup_by_prefix("P1/")

        self.assertEqual(removed, 2)
        self.assertEqual(len(cache), 2)
        self.assertEqual(cache.get_value("P10/lookup/a/files(id)"), 3)
        self.assertEqual(cache.get_value("P2/lookup/a/files(id)"), 4)

    def test_cleanup_everything(self) -> None:
        cache = Cache()
        cache.set("a", 1)
        cache.set("b", 2)
        cache.cleanup_everything()
        self.assertEqual(len(cache), 0)

    def test_concurrent_access(self) -> None:
        cache = Cache()
        errors = []

        def worker(n: int) -> None:
            try:
                for i in range(200):
                    key = f"{n}/{i}"
                    cache.set(key, i)
                    value, found = cache.get(key)
                    if not found or value != i:
                        errors.append((key, value, found))
                    if i % 50 == 0:
                        cache.cleanup_by_prefix("nobody/")
            except Exception as exc:  # pragma: no cover
                errors.append(exc)

        threads = [threading.Thread(target=worker, args=(n,)) for n in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        self.assertEqual(errors, [])
        self.assertEqual(len(cache), 8 * 200)


if __name__ == "__main__":
    unittest.main()
