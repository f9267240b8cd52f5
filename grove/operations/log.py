"""Commit history traversal."""

from dataclasses import dataclass, field
from typing import Optional

from ..core.errors import NotACommit, NotFound
from ..core.objects import Commit


@dataclass
class LogEntry:
    hash: str
    commit: Commit


@dataclass
class LogResult:
    """Commits newest first, and whether the walk was cut short by max_count."""
    entries: list[LogEntry] = field(default_factory=list)
    has_more: bool = False

    @property
    def total_commits(self) -> int:
        return len(self.entries)


def walk_commits(store, start: str, max_count: Optional[int] = None) -> LogResult:
    """
    Follow first parents from a commit.

    Args:
        store: ObjectStore to read commits from
        start: Hash of the newest commit
        max_count: Stop after this many commits

    Returns:
        LogResult

    Raises:
        NotACommit: If an object on the chain is not a commit
    """
    result = LogResult()
    current: Optional[str] = start

    while current is not None:
        if max_count is not None and len(result.entries) >= max_count:
            result.has_more = True
            break

        obj = store.load_object(current)
        if not isinstance(obj, Commit):
            raise NotACommit(current, obj.type)

        result.entries.append(LogEntry(current, obj))
        current = obj.parents[0] if obj.parents else None

    return result


def log(repo, max_count: Optional[int] = None, start: Optional[str] = None) -> LogResult:
    """
    History of HEAD, or of a named reference.

    An unborn branch has an empty history.

    Raises:
        NotFound: If start cannot be resolved
    """
    if start is None:
        head = repo.refs.resolve_head()
    else:
        head = repo.refs.resolve_reference(start)
        if head is None:
            raise NotFound(f"Unknown revision {start!r}")

    if head is None:
        return LogResult()
    return walk_commits(repo.objects, head, max_count)
