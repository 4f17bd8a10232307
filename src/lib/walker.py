"""
Path walker

Expands the caller's root paths into the ordered list of concrete paths the
deck is assembled from.

Rules:
    - Roots keep the order given by the caller
    - A file root is emitted as-is, document or not
    - A directory root emits its documents in ascending name order, then
      expands its subdirectories in ascending name order (parent before
      children, depth-first); other files inside directories are ignored
"""

from fnmatch import fnmatch
from pathlib import Path
from typing import Iterator, List, Optional, Sequence, Union

from ..config import appsettings, AppSettings
from .errors import PathNotFound
from .log import LOG


class PathWalker:
    """
    Deterministic traversal of input roots

    Attributes:
        roots: Root paths in caller order
        settings: Settings providing the document suffix and ignore patterns
    """

    def __init__(
        self, roots: Sequence[Union[str, Path]], settings: Optional[AppSettings] = None
    ) -> None:
        self.roots = [Path(root) for root in roots]
        self.settings = settings or appsettings

    def document_is(self, path: Path) -> bool:
        return path.suffix == self.settings.document_suffix

    def directory_ignored(self, path: Path) -> bool:
        return any(fnmatch(path.name, pattern) for pattern in self.settings.walk_ignore)

    def walk(self) -> List[Path]:
        """
        Produce the ordered list of concrete paths

        Raises:
            PathNotFound: A root does not exist
        """
        for root in self.roots:
            if not root.exists():
                raise PathNotFound(f"Input path does not exist: {root}")

        paths: List[Path] = []
        for root in self.roots:
            if root.is_dir():
                paths.extend(self.directory_expand(root))
            else:
                paths.append(root)

        LOG(f"The following paths are evaluated: {[str(p) for p in paths]}", level=2)
        return paths

    def directory_expand(self, directory: Path) -> Iterator[Path]:
        """Documents of the directory first, then each subdirectory, by name"""
        entries = sorted(directory.iterdir(), key=lambda entry: entry.name)

        for entry in entries:
            if entry.is_file() and self.document_is(entry):
                yield entry

        for entry in entries:
            if not entry.is_dir():
                continue
            if self.directory_ignored(entry):
                LOG(f"Skipping ignored directory {entry}", level=3)
                continue
            yield from self.directory_expand(entry)
