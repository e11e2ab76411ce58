"""
Unit tests for the archive packager.
"""

import io
import tempfile
import unittest
import zipfile
from pathlib import Path

from errors import PackagingError
from packager import build_archive


class TestBuildArchive(unittest.TestCase):
    """Test build_archive."""

    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.source = Path(self._tmp.name) / "src"
        self.source.mkdir()

    def tearDown(self):
        self._tmp.cleanup()

    def test_paths_are_relative_to_source(self):
        """Test files land at the archive root with nested dirs kept."""
        (self.source / "index.py").write_text("def handler(e, c): pass\n")
        (self.source / "lib").mkdir()
        (self.source / "lib" / "util.py").write_text("X = 1\n")

        data = build_archive(self.source)

        with zipfile.ZipFile(io.BytesIO(data)) as zf:
            self.assertEqual(sorted(zf.namelist()), ["index.py", "lib/util.py"])
            self.assertEqual(zf.read("lib/util.py"), b"X = 1\n")

    def test_skips_bytecode(self):
        """Test __pycache__ and .pyc files are left out."""
        (self.source / "index.py").write_text("")
        (self.source / "__pycache__").mkdir()
        (self.source / "__pycache__" / "index.cpython-312.pyc").write_bytes(b"\x00")
        (self.source / "stale.pyc").write_bytes(b"\x00")

        with zipfile.ZipFile(io.BytesIO(build_archive(self.source))) as zf:
            self.assertEqual(zf.namelist(), ["index.py"])

    def test_missing_directory(self):
        with self.assertRaises(FileNotFoundError):
            build_archive(self.source / "missing")

    def test_empty_directory(self):
        with self.assertRaises(PackagingError):
            build_archive(self.source)


if __name__ == "__main__":
    unittest.main()
