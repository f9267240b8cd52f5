"""Working tree enumeration."""

import logging
import os
import stat
from pathlib import Path
from typing import Iterator, Union

logger = logging.getLogger(__name__)

IGNORED_DIRS = {'.grove', '.git'}


def is_ignored(name: str) -> bool:
    """True for the repository metadata directories."""
    return name in IGNORED_DIRS


class WorkingTree:
    """
    Lists the files of a working tree.

    Paths are reported relative to the root with '/' separators.
    Directories are not followed through symlinks.
    """

    def __init__(self, root: Union[str, Path]):
        self.root = Path(root)

    def relative_path(self, path: Union[str, Path]) -> str:
        """
        Convert a path to its repository-relative form.

        Raises:
            ValueError: If the path lies outside the working tree
        """
        path = Path(path)
        if not path.is_absolute():
            path = Path.cwd() / path
        return path.resolve().relative_to(self.root.resolve()).as_posix()

    def iter_files(self, start: Union[str, Path, None] = None) -> Iterator[str]:
        """
        Yield relative file paths, sorted.

        Args:
            start: Directory to walk (defaults to the root)
        """
        base = Path(start) if start is not None else self.root
        paths = []
        for dirpath, dirnames, filenames in os.walk(base, onerror=self._log_walk_error):
            dirnames[:] = [d for d in dirnames if not is_ignored(d)]
            for filename in filenames:
                if is_ignored(filename):
                    continue
                full_path = Path(dirpath) / filename
                paths.append(full_path.relative_to(self.root).as_posix())
        yield from sorted(paths)

    def read_file(self, rel_path: str) -> bytes:
        return (self.root / rel_path).read_bytes()

    def is_executable(self, rel_path: str) -> bool:
        st = os.stat(self.root / rel_path)
        return bool(st.st_mode & (stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH))

    def snapshot(self) -> dict[str, bytes]:
        """
        Read every file in the tree.

        Files that cannot be read are logged and left out.
        """
        files = {}
        for rel_path in self.iter_files():
            try:
                files[rel_path] = self.read_file(rel_path)
            except OSError as e:
                logger.warning("skipping unreadable file %s: %s", rel_path, e)
        return files

    @staticmethod
    def _log_walk_error(error: OSError) -> None:
        logger.warning("cannot read directory %s: %s", error.filename, error)
