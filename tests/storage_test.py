import io
import tempfile
import unittest
import zipfile
from pathlib import Path

from fakes import MemoryBlobStore

from snapcrawler.errors import StorageFailure
from snapcrawler.models import ArtifactKind
from snapcrawler.storage.archive import build_archive, is_safe_name
from snapcrawler.storage.blob_store import LocalBlobStore


class TestLocalBlobStore(unittest.TestCase):
    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.store = LocalBlobStore(self.tmp.name, "https://files.example.net/bucket/")

    def tearDown(self):
        self.tmp.cleanup()

    def test_put_and_get(self):
        ref = self.store.put("html/example-com-1.html", "<html></html>", "text/html")
        self.assertEqual(ref, "https://files.example.net/bucket/html/example-com-1.html")
        self.assertTrue((Path(self.tmp.name) / "html" / "example-com-1.html").is_file())
        self.assertEqual(self.store.get("html/example-com-1.html"), b"<html></html>")

    def test_missing_object(self):
        self.assertIsNone(self.store.get("screenshots/nothing.jpeg"))

    def test_key_cannot_escape_root(self):
        with self.assertRaises(StorageFailure):
            self.store.put("../outside.html", b"x", "text/html")


class TestArchive(unittest.TestCase):
    def setUp(self):
        self.store = MemoryBlobStore()
        self.store.put("html/a-1.html", b"<p>a</p>", "text/html")
        self.store.put("html/b-1.html", b"<p>b</p>", "text/html")
        self.store.put("screenshots/a-1.jpeg", b"\xff\xd8", "image/jpeg")

    def _names(self, data):
        with zipfile.ZipFile(io.BytesIO(data)) as archive:
            return archive.namelist()

    def test_packages_requested_files(self):
        data = build_archive(self.store, ArtifactKind.HTML, ["a-1.html", "b-1.html"])
        self.assertEqual(self._names(data), ["a-1.html", "b-1.html"])

    def test_missing_files_skipped(self):
        data = build_archive(self.store, ArtifactKind.HTML, ["a-1.html", "gone.html"])
        self.assertEqual(self._names(data), ["a-1.html"])

    def test_unsafe_or_wrong_kind_names_skipped(self):
        data = build_archive(self.store, ArtifactKind.SCREENSHOT, ["../html/a-1.html", "a-1.html", "a-1.jpeg"])
        self.assertEqual(self._names(data), ["a-1.jpeg"])

    def test_empty_archive_is_still_valid(self):
        self.assertEqual(self._names(build_archive(self.store, ArtifactKind.HTML, [])), [])

    def test_is_safe_name(self):
        self.assertTrue(is_safe_name("example-com-20250101000000.html", ArtifactKind.HTML))
        self.assertFalse(is_safe_name("sub/dir.html", ArtifactKind.HTML))
        self.assertFalse(is_safe_name("..html", ArtifactKind.HTML))
        self.assertFalse(is_safe_name(None, ArtifactKind.HTML))


if __name__ == "__main__":
    unittest.main()
