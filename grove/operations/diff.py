"""Diff engine for comparing snapshots of the tracked file set."""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from ..core.errors import Malformed, NotACommit
from ..core.hash import hash_blob
from ..core.index import Index
from ..core.objects import Blob, Commit, FileMode, Tree

logger = logging.getLogger(__name__)

BINARY_CHECK_SIZE = 8192
CONTEXT_RUN_LIMIT = 10
CHUNK_LINE_LIMIT = 20
NULL_HASH = '0000000'


class ChangeType(Enum):
    ADDED = 'added'
    MODIFIED = 'modified'
    DELETED = 'deleted'


class LineType(Enum):
    CONTEXT = ' '
    ADDED = '+'
    REMOVED = '-'


@dataclass
class DiffLine:
    line_type: LineType
    content: str

    def __str__(self) -> str:
        return f"{self.line_type.value}{self.content}"


@dataclass
class DiffChunk:
    """A run of diff lines with 1-based start positions on both sides."""
    old_start: int
    new_start: int
    old_count: int = 0
    new_count: int = 0
    lines: list[DiffLine] = field(default_factory=list)

    def add_line(self, line_type: LineType, content: str) -> None:
        self.lines.append(DiffLine(line_type, content))
        if line_type is not LineType.ADDED:
            self.old_count += 1
        if line_type is not LineType.REMOVED:
            self.new_count += 1

    def header(self) -> str:
        return f"@@ -{self.old_start},{self.old_count} +{self.new_start},{self.new_count} @@"


@dataclass
class FileState:
    """One side of a comparison: a file's blob hash, mode and (lazily) content."""
    hash: str
    mode: FileMode = FileMode.REGULAR
    data: Optional[bytes] = None


Snapshot = dict[str, FileState]


@dataclass
class FileDiff:
    """The difference for a single path."""
    path: str
    change_type: ChangeType
    old_hash: Optional[str]
    new_hash: Optional[str]
    mode: FileMode = FileMode.REGULAR
    chunks: list[DiffChunk] = field(default_factory=list)
    is_binary: bool = False
    untracked: bool = False

    def _count(self, line_type: LineType) -> int:
        return sum(1 for chunk in self.chunks for line in chunk.lines if line.line_type is line_type)

    @property
    def lines_added(self) -> int:
        return self._count(LineType.ADDED)

    @property
    def lines_removed(self) -> int:
        return self._count(LineType.REMOVED)


@dataclass
class DiffResult:
    """All file diffs between two snapshots, sorted by path."""
    file_diffs: list[FileDiff] = field(default_factory=list)

    @property
    def files_changed(self) -> int:
        return len(self.file_diffs)

    @property
    def lines_added(self) -> int:
        return sum(d.lines_added for d in self.file_diffs)

    @property
    def lines_removed(self) -> int:
        return sum(d.lines_removed for d in self.file_diffs)

    def is_empty(self) -> bool:
        return not self.file_diffs

    def summary(self) -> str:
        """
        One-line summary such as "2 files changed, 3 insertions, 1 deletion".

        Returns:
            "No changes" for an empty result
        """
        if not self.file_diffs:
            return "No changes"

        def plural(count: int, word: str) -> str:
            return f"{count} {word}{'' if count == 1 else 's'}"

        parts = [f"{plural(self.files_changed, 'file')} changed"]
        if self.lines_added:
            parts.append(plural(self.lines_added, 'insertion'))
        if self.lines_removed:
            parts.append(plural(self.lines_removed, 'deletion'))
        return ', '.join(parts)


def is_binary(data: Optional[bytes]) -> bool:
    """True if a NUL byte occurs in the first 8192 bytes."""
    return data is not None and b'\0' in data[:BINARY_CHECK_SIZE]


def split_lines(data: Optional[bytes]) -> list[str]:
    """
    Split content into lines without terminators.

    A final newline does not produce an empty trailing line, and a
    carriage return before a newline is dropped.
    """
    if not data:
        return []
    text = data.decode('utf-8', errors='replace')
    lines = text.split('\n')
    if lines[-1] == '':
        lines.pop()
    return [line[:-1] if line.endswith('\r') else line for line in lines]


def compute_chunks(old_lines: list[str], new_lines: list[str]) -> list[DiffChunk]:
    """
    Pair lines positionally and group them into chunks.

    Equal lines at the same cursor positions are context. Unequal lines
    become a removal followed by an addition. Once one side runs out the
    rest of the other side is emitted. A chunk ends after 10 context
    lines in a row or once it holds 20 lines.

    Only consecutive context counts toward the first rule: a single
    context line inside a long run of changes does not close the chunk,
    however many lines the chunk already holds.

    This is not a minimal edit script: an insertion near the top shows
    every following line as changed.
    """
    chunks = []
    old_idx = 0
    new_idx = 0

    while old_idx < len(old_lines) or new_idx < len(new_lines):
        chunk = DiffChunk(old_start=old_idx + 1, new_start=new_idx + 1)
        context_run = 0

        while old_idx < len(old_lines) or new_idx < len(new_lines):
            if old_idx >= len(old_lines):
                chunk.add_line(LineType.ADDED, new_lines[new_idx])
                new_idx += 1
                context_run = 0
            elif new_idx >= len(new_lines):
                chunk.add_line(LineType.REMOVED, old_lines[old_idx])
                old_idx += 1
                context_run = 0
            elif old_lines[old_idx] == new_lines[new_idx]:
                chunk.add_line(LineType.CONTEXT, old_lines[old_idx])
                old_idx += 1
                new_idx += 1
                context_run += 1
            else:
                chunk.add_line(LineType.REMOVED, old_lines[old_idx])
                chunk.add_line(LineType.ADDED, new_lines[new_idx])
                old_idx += 1
                new_idx += 1
                context_run = 0

            if context_run >= CONTEXT_RUN_LIMIT or len(chunk.lines) >= CHUNK_LINE_LIMIT:
                break

        chunks.append(chunk)

    return chunks


def format_diff(result: DiffResult, color: bool = True) -> str:
    """
    Format diffs as unified diff output.

    Args:
        result: Structured diff
        color: Whether to use color output

    Returns:
        Formatted diff string
    """
    from colorama import Fore, Style

    def paint(text: str, colour: str) -> str:
        return f"{colour}{text}{Style.RESET_ALL}" if color else text

    output = []
    for diff in result.file_diffs:
        mode = diff.mode.octal
        output.append(paint(f"diff --git a/{diff.path} b/{diff.path}", Style.BRIGHT))

        if diff.change_type is ChangeType.ADDED:
            output.append(f"new file mode {mode}")
            output.append(f"index {NULL_HASH}..{diff.new_hash[:7]} {mode}")
            output.append("--- /dev/null")
            output.append(f"+++ b/{diff.path}")
        elif diff.change_type is ChangeType.DELETED:
            output.append(f"deleted file mode {mode}")
            output.append(f"index {diff.old_hash[:7]}..{NULL_HASH} {mode}")
            output.append(f"--- a/{diff.path}")
            output.append("+++ /dev/null")
        else:
            output.append(f"index {diff.old_hash[:7]}..{diff.new_hash[:7]} {mode}")
            output.append(f"--- a/{diff.path}")
            output.append(f"+++ b/{diff.path}")

        if diff.is_binary:
            output.append("Binary files differ")
            continue

        for chunk in diff.chunks:
            output.append(paint(chunk.header(), Fore.CYAN))
            for line in chunk.lines:
                if line.line_type is LineType.ADDED:
                    output.append(paint(str(line), Fore.GREEN))
                elif line.line_type is LineType.REMOVED:
                    output.append(paint(str(line), Fore.RED))
                else:
                    output.append(str(line))

    return '\n'.join(output)


def format_stat(result: DiffResult, color: bool = True, width: int = 40) -> str:
    """Per-file change counts followed by the summary line."""
    from colorama import Fore, Style

    if not result.file_diffs:
        return result.summary()

    name_width = max(len(d.path) for d in result.file_diffs)
    largest = max(d.lines_added + d.lines_removed for d in result.file_diffs) or 1
    scale = min(1.0, width / largest)

    output = []
    for diff in result.file_diffs:
        if diff.is_binary:
            output.append(f" {diff.path.ljust(name_width)} | Bin")
            continue
        total = diff.lines_added + diff.lines_removed
        plus = '+' * int(round(diff.lines_added * scale))
        minus = '-' * int(round(diff.lines_removed * scale))
        if color:
            plus = f"{Fore.GREEN}{plus}{Style.RESET_ALL}" if plus else plus
            minus = f"{Fore.RED}{minus}{Style.RESET_ALL}" if minus else minus
        output.append(f" {diff.path.ljust(name_width)} | {total} {plus}{minus}")

    output.append(f" {result.summary()}")
    return '\n'.join(output)


class DiffEngine:
    """
    Builds snapshots of the working tree, the index and HEAD and
    compares them.
    """

    def __init__(self, repo):
        self.repo = repo

    # snapshots

    def working_snapshot(self) -> Snapshot:
        worktree = self.repo.worktree
        snapshot = {}
        for path, data in worktree.snapshot().items():
            try:
                mode = FileMode.EXECUTABLE if worktree.is_executable(path) else FileMode.REGULAR
            except OSError:
                mode = FileMode.REGULAR
            snapshot[path] = FileState(hash_blob(data), mode, data)
        return snapshot

    def index_snapshot(self, index: Optional[Index] = None) -> Snapshot:
        if index is None:
            index = self.repo.load_index()
        return {e.path: FileState(e.hash, e.mode) for e in index.sorted_entries()}

    def tree_snapshot(self, tree_hash: str) -> Snapshot:
        """
        Flatten a tree into a path snapshot.

        Directory entries recurse and symlink entries are skipped.
        """
        snapshot = {}
        self._flatten_tree(tree_hash, '', snapshot)
        return snapshot

    def _flatten_tree(self, tree_hash: str, prefix: str, snapshot: Snapshot) -> None:
        tree = self.repo.objects.load_object(tree_hash)
        if not isinstance(tree, Tree):
            raise Malformed(f"Object {tree_hash} is not a tree")

        for entry in tree.entries:
            path = f"{prefix}{entry.name}"
            if entry.mode is FileMode.DIRECTORY:
                self._flatten_tree(entry.hash, f"{path}/", snapshot)
            elif entry.mode is FileMode.SYMLINK:
                continue
            else:
                snapshot[path] = FileState(entry.hash, entry.mode)

    def head_snapshot(self) -> Snapshot:
        """Snapshot of HEAD's tree; empty on an unborn branch."""
        head = self.repo.refs.resolve_head()
        if head is None:
            return {}
        commit = self.repo.objects.load_object(head)
        if not isinstance(commit, Commit):
            raise NotACommit(head, commit.type)
        return self.tree_snapshot(commit.tree)

    # comparison

    def _content(self, state: FileState) -> bytes:
        if state.data is None:
            blob = self.repo.objects.load_object(state.hash)
            if not isinstance(blob, Blob):
                raise Malformed(f"Object {state.hash} is not a blob")
            state.data = blob.data
        return state.data

    def diff_file(self, path: str, old: Optional[FileState], new: Optional[FileState]) -> FileDiff:
        """Build the diff for one path; either side may be absent."""
        if old is None:
            change_type = ChangeType.ADDED
        elif new is None:
            change_type = ChangeType.DELETED
        else:
            change_type = ChangeType.MODIFIED

        old_data = self._content(old) if old is not None else None
        new_data = self._content(new) if new is not None else None

        file_diff = FileDiff(
            path=path,
            change_type=change_type,
            old_hash=old.hash if old is not None else None,
            new_hash=new.hash if new is not None else None,
            mode=(new or old).mode,
            is_binary=is_binary(old_data) or is_binary(new_data)
        )
        if not file_diff.is_binary:
            file_diff.chunks = compute_chunks(split_lines(old_data), split_lines(new_data))
        return file_diff

    def diff_snapshots(self, old: Snapshot, new: Snapshot) -> DiffResult:
        """
        Compare two snapshots.

        Paths only in new are added, paths only in old are deleted and
        paths in both with different hashes are modified.
        """
        diffs = []
        for path in sorted(set(old) | set(new)):
            old_state = old.get(path)
            new_state = new.get(path)
            if old_state is not None and new_state is not None and old_state.hash == new_state.hash:
                continue
            diffs.append(self.diff_file(path, old_state, new_state))
        return DiffResult(diffs)

    def diff_working_to_index(self) -> DiffResult:
        """
        Compare the working tree against the index.

        Working files missing from the index are reported as added with
        no old hash, and flagged untracked when HEAD lacks them too.
        """
        staged = self.index_snapshot()
        working = self.working_snapshot()
        committed = self.head_snapshot()

        diffs = []
        for path in sorted(set(staged) | set(working)):
            staged_state = staged.get(path)
            working_state = working.get(path)

            if staged_state is None:
                file_diff = self.diff_file(path, None, working_state)
                file_diff.untracked = path not in committed
                diffs.append(file_diff)
            elif working_state is None:
                diffs.append(self.diff_file(path, staged_state, None))
            elif staged_state.hash != working_state.hash:
                diffs.append(self.diff_file(path, staged_state, working_state))

        return DiffResult(diffs)

    def diff_index_to_head(self) -> DiffResult:
        """Compare the index against HEAD's tree."""
        return self.diff_snapshots(self.head_snapshot(), self.index_snapshot())

    def diff(self, cached: bool = False) -> DiffResult:
        if cached:
            return self.diff_index_to_head()
        return self.diff_working_to_index()

    def format_diff(self, result: DiffResult, color: bool = True) -> str:
        return format_diff(result, color)
