"""
Path walker tests - traversal order

Validates that roots keep caller order, directories expand documents first
and subdirectories after, both alphabetically, and non-documents found inside
directories are ignored.
"""

import tempfile
from pathlib import Path

import pytest

from notedeck.lib.walker import PathWalker
from notedeck.lib.errors import PathNotFound
from notedeck.config import AppSettings


def files_touch(root: Path, *names: str) -> None:
    for name in names:
        path = root / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text("", encoding="utf-8")


class TestDirectoryExpansion:
    """Expansion of a directory root"""

    def test_alphabetical_documents(self):
        """b.ipynb, a.ipynb, c.txt -> a.ipynb, b.ipynb"""
        with tempfile.TemporaryDirectory() as tmpdir:
            root = Path(tmpdir)
            files_touch(root, "b.ipynb", "a.ipynb", "c.txt")

            paths = PathWalker([root]).walk()

            assert paths == [root / "a.ipynb", root / "b.ipynb"]

    def test_documents_before_subdirectories(self):
        """Files of a directory come before any of its subdirectories"""
        with tempfile.TemporaryDirectory() as tmpdir:
            root = Path(tmpdir)
            files_touch(root, "z.ipynb", "sub/x.ipynb", "a_sub/y.ipynb", "a_sub/deeper/w.ipynb")

            paths = PathWalker([root]).walk()

            assert paths == [
                root / "z.ipynb",
                root / "a_sub" / "y.ipynb",
                root / "a_sub" / "deeper" / "w.ipynb",
                root / "sub" / "x.ipynb",
            ]

    def test_every_subdirectory_visited(self):
        """No directory is skipped by default, checkpoint folders included"""
        with tempfile.TemporaryDirectory() as tmpdir:
            root = Path(tmpdir)
            files_touch(root, "a.ipynb", ".ipynb_checkpoints/b.ipynb")

            assert PathWalker([root]).walk() == [
                root / "a.ipynb",
                root / ".ipynb_checkpoints" / "b.ipynb",
            ]

    def test_ignore_patterns_opt_in(self):
        """Configured ignore patterns skip matching directories"""
        with tempfile.TemporaryDirectory() as tmpdir:
            root = Path(tmpdir)
            files_touch(root, "a.ipynb", ".ipynb_checkpoints/b.ipynb", "drafts_old/c.ipynb")

            settings = AppSettings(walk_ignore=[".ipynb_checkpoints", "*_old"])
            paths = PathWalker([root], settings).walk()

            assert paths == [root / "a.ipynb"]

    def test_empty_directory(self):
        """A directory without documents contributes nothing"""
        with tempfile.TemporaryDirectory() as tmpdir:
            root = Path(tmpdir)
            files_touch(root, "notes.md")

            assert PathWalker([root]).walk() == []


class TestRoots:
    """Caller-supplied roots"""

    def test_root_order_kept(self):
        """Roots are never reordered"""
        with tempfile.TemporaryDirectory() as tmpdir:
            root = Path(tmpdir)
            files_touch(root, "title.txt", "folder/01.ipynb", "z.ipynb")

            paths = PathWalker([root / "z.ipynb", root / "title.txt", root / "folder"]).walk()

            assert paths == [root / "z.ipynb", root / "title.txt", root / "folder" / "01.ipynb"]

    def test_non_document_root_kept(self):
        """A non-document file given as a root is emitted"""
        with tempfile.TemporaryDirectory() as tmpdir:
            root = Path(tmpdir)
            files_touch(root, "c.txt")

            assert PathWalker([str(root / "c.txt")]).walk() == [root / "c.txt"]

    def test_missing_root(self):
        """A root that does not exist fails the walk"""
        with tempfile.TemporaryDirectory() as tmpdir:
            with pytest.raises(PathNotFound):
                PathWalker([Path(tmpdir) / "missing.ipynb"]).walk()

    def test_walk_is_repeatable(self):
        """Two walks of the same tree give the same result"""
        with tempfile.TemporaryDirectory() as tmpdir:
            root = Path(tmpdir)
            files_touch(root, "b.ipynb", "a.ipynb", "s/c.ipynb")

            walker = PathWalker([root])
            assert walker.walk() == walker.walk()
