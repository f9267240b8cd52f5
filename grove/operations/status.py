"""Working tree status."""

from dataclasses import dataclass, field
from typing import Optional


@dataclass
class StatusResult:
    """Branch information and the changed paths in each category."""
    branch: Optional[str]
    head_commit: Optional[str]
    staged_new: list[str] = field(default_factory=list)
    staged_modified: list[str] = field(default_factory=list)
    staged_deleted: list[str] = field(default_factory=list)
    modified: list[str] = field(default_factory=list)
    deleted: list[str] = field(default_factory=list)
    untracked: list[str] = field(default_factory=list)

    @property
    def has_staged_changes(self) -> bool:
        return bool(self.staged_new or self.staged_modified or self.staged_deleted)

    @property
    def has_unstaged_changes(self) -> bool:
        return bool(self.modified or self.deleted)

    def is_clean(self) -> bool:
        return not (self.has_staged_changes or self.has_unstaged_changes or self.untracked)


def compute_status(repo) -> StatusResult:
    """
    Compare HEAD, the index and the working tree.

    Staged changes are index vs HEAD. Unstaged changes are working tree
    vs index. Files in neither the index nor HEAD are untracked.
    """
    engine = repo.diff
    index = repo.load_index()
    committed = engine.head_snapshot()
    staged = engine.index_snapshot(index)
    working = engine.working_snapshot()

    result = StatusResult(
        branch=repo.refs.get_current_branch(),
        head_commit=repo.refs.resolve_head()
    )

    for path in sorted(set(committed) | set(staged)):
        old = committed.get(path)
        new = staged.get(path)
        if old is None:
            result.staged_new.append(path)
        elif new is None:
            result.staged_deleted.append(path)
        elif old.hash != new.hash:
            result.staged_modified.append(path)

    for path in sorted(set(staged) | set(working)):
        in_index = staged.get(path)
        on_disk = working.get(path)
        if in_index is None:
            if path not in committed:
                result.untracked.append(path)
        elif on_disk is None:
            result.deleted.append(path)
        elif in_index.hash != on_disk.hash:
            result.modified.append(path)

    return result
