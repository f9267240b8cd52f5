"""Staging files into the index."""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, Union

from ..core.errors import GroveError, NotFound
from ..core.index import IndexEntry
from ..core.objects import Blob, FileMode
from ..utils.worktree import IGNORED_DIRS

logger = logging.getLogger(__name__)

UINT32_MASK = 0xFFFFFFFF


@dataclass
class AddResult:
    """Entries written to the index plus the paths that could not be staged."""
    staged: list[IndexEntry] = field(default_factory=list)
    failed: list[tuple[str, str]] = field(default_factory=list)

    @property
    def staged_paths(self) -> list[str]:
        return [entry.path for entry in self.staged]


def index_entry_for(path: str, obj_hash: str, st: os.stat_result) -> IndexEntry:
    """
    Build an index entry from a file's stat result.

    The mode is executable when any execute bit is set. Values are
    truncated to the 32 bits the index format stores.
    """
    executable = bool(st.st_mode & 0o111)
    return IndexEntry(
        path=path,
        hash=obj_hash,
        mode=FileMode.EXECUTABLE if executable else FileMode.REGULAR,
        size=st.st_size & UINT32_MASK,
        ctime=int(st.st_ctime) & UINT32_MASK,
        ctime_ns=st.st_ctime_ns % 1_000_000_000,
        mtime=int(st.st_mtime) & UINT32_MASK,
        mtime_ns=st.st_mtime_ns % 1_000_000_000,
        dev=st.st_dev & UINT32_MASK,
        ino=st.st_ino & UINT32_MASK,
        uid=st.st_uid & UINT32_MASK,
        gid=st.st_gid & UINT32_MASK,
    )


def _stage_file(repo, rel_path: str) -> IndexEntry:
    full_path = repo.work_tree / rel_path
    blob = Blob.from_file(str(full_path))
    obj_hash = repo.objects.store_object(blob)
    return index_entry_for(rel_path, obj_hash, full_path.stat())


def stage_paths(
    repo,
    paths: Iterable[Union[str, Path]],
    ignore_missing: bool = False,
    dry_run: bool = False
) -> AddResult:
    """
    Stage files and directories.

    Directories are walked recursively. Each file is written as a blob
    and recorded in the index; the index is saved once at the end.

    Args:
        repo: Repository instance
        paths: Files or directories, absolute or relative to the cwd
        ignore_missing: Skip paths that do not exist instead of failing
        dry_run: Report what would be staged without writing anything

    Returns:
        AddResult

    Raises:
        NotFound: If a path does not exist and ignore_missing is unset
        GroveError: If a path lies outside the working tree
    """
    index = repo.load_index()
    result = AddResult()
    worktree = repo.worktree

    for path in paths:
        full_path = Path(path)
        if not full_path.is_absolute():
            full_path = Path.cwd() / full_path

        try:
            rel_path = worktree.relative_path(full_path)
        except ValueError:
            raise GroveError(f"Path {path} is outside repository {repo.work_tree}")

        if not full_path.exists():
            if ignore_missing:
                logger.info("ignoring missing path %s", path)
                continue
            raise NotFound(f"Path {path} does not exist")

        if rel_path == '.':
            rel_paths = list(worktree.iter_files())
        elif rel_path.split('/')[0] in IGNORED_DIRS:
            logger.info("not staging repository metadata %s", rel_path)
            continue
        elif full_path.is_dir():
            rel_paths = list(worktree.iter_files(repo.work_tree / rel_path))
        else:
            rel_paths = [rel_path]

        for file_path in rel_paths:
            if dry_run:
                result.staged.append(IndexEntry(file_path, '0' * 40))
                continue
            try:
                entry = _stage_file(repo, file_path)
            except OSError as e:
                logger.warning("cannot stage %s: %s", file_path, e)
                result.failed.append((file_path, str(e)))
                continue
            index.add_entry(entry)
            result.staged.append(entry)

    if not dry_run and result.staged:
        repo.save_index(index)

    return result
