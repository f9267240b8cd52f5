"""Diff engine tests."""

import pytest

from grove.core.errors import NotACommit
from grove.core.objects import Blob, FileMode, Tree
from grove.operations.add import stage_paths
from grove.operations.diff import (
    ChangeType, DiffResult, FileDiff, LineType, compute_chunks, format_diff,
    format_stat, is_binary, split_lines,
)


def kinds(chunk):
    return ''.join(line.line_type.value for line in chunk.lines)


class TestHelpers:
    """Tests for the line-level helpers."""

    @pytest.mark.parametrize('data,expected', [
        (b'a\nb\n', ['a', 'b']),
        (b'a\nb', ['a', 'b']),
        (b'a\r\nb\r\n', ['a', 'b']),
        (b'a\n\n', ['a', '']),
        (b'', []),
        (None, []),
    ])
    def test_split_lines(self, data, expected):
        assert split_lines(data) == expected

    def test_is_binary(self):
        assert is_binary(bytes([0, 1, 2, 3, 0, 5]))
        assert not is_binary(b'plain text\n')
        assert not is_binary(None)

    def test_is_binary_only_checks_prefix(self):
        assert not is_binary(b'x' * 8192 + b'\0')
        assert is_binary(b'x' * 8191 + b'\0')


class TestComputeChunks:
    """Tests for the positional chunking heuristic."""

    def test_single_change(self):
        chunks = compute_chunks(['a', 'b', 'c'], ['a', 'x', 'c'])
        assert len(chunks) == 1
        assert kinds(chunks[0]) == ' -+ '
        assert chunks[0].header() == '@@ -1,3 +1,3 @@'

    def test_additions_to_empty(self):
        chunks = compute_chunks([], ['x', 'y'])
        assert len(chunks) == 1
        assert kinds(chunks[0]) == '++'
        assert chunks[0].header() == '@@ -1,0 +1,2 @@'

    def test_removals_when_new_runs_out(self):
        chunks = compute_chunks(['a', 'b', 'c'], ['a'])
        assert kinds(chunks[0]) == ' --'
        assert (chunks[0].old_count, chunks[0].new_count) == (3, 1)

    def test_context_run_closes_chunk(self):
        old = [f'l{i}' for i in range(15)]
        new = old[:14] + ['changed']
        chunks = compute_chunks(old, new)

        assert len(chunks) == 2
        assert kinds(chunks[0]) == ' ' * 10
        assert (chunks[1].old_start, chunks[1].new_start) == (11, 11)
        assert kinds(chunks[1]) == '    -+'

    def test_isolated_context_keeps_large_chunk_open(self):
        old = [f'x{i}' for i in range(6)] + ['same', 'y']
        new = [f'z{i}' for i in range(6)] + ['same', 'w']
        chunks = compute_chunks(old, new)

        assert len(chunks) == 1
        assert kinds(chunks[0]) == '-+' * 6 + ' ' + '-+'

    def test_line_limit_closes_chunk(self):
        old = [f'a{i}' for i in range(15)]
        new = [f'b{i}' for i in range(15)]
        chunks = compute_chunks(old, new)

        assert len(chunks) == 2
        assert len(chunks[0].lines) == 20
        assert (chunks[0].old_count, chunks[0].new_count) == (10, 10)
        assert (chunks[1].old_start, chunks[1].new_start) == (11, 11)
        assert len(chunks[1].lines) == 10

    def test_insertion_shifts_following_lines(self):
        chunks = compute_chunks(['a', 'b'], ['new', 'a', 'b'])
        assert kinds(chunks[0]) == '-+-++'

    def test_empty_inputs(self):
        assert compute_chunks([], []) == []


class TestDiffResult:
    """Tests for result aggregation."""

    def test_no_changes(self):
        result = DiffResult()
        assert result.is_empty()
        assert result.summary() == 'No changes'
        assert format_stat(result, color=False) == 'No changes'

    def test_summary_counts(self):
        diff = FileDiff('a.txt', ChangeType.MODIFIED, 'a' * 40, 'b' * 40,
                        chunks=compute_chunks(['one', 'two'], ['one', 'three']))
        result = DiffResult([diff])
        assert diff.lines_added == 1
        assert diff.lines_removed == 1
        assert result.summary() == '1 file changed, 1 insertion, 1 deletion'

    def test_summary_plurals(self):
        diffs = [
            FileDiff('a', ChangeType.ADDED, None, 'a' * 40, chunks=compute_chunks([], ['1', '2'])),
            FileDiff('b', ChangeType.ADDED, None, 'b' * 40, chunks=compute_chunks([], ['1'])),
        ]
        assert DiffResult(diffs).summary() == '2 files changed, 3 insertions'


class TestDiffEngine:
    """Tests comparing working tree, index and HEAD."""

    def test_clean_repository_has_no_diff(self, repo, commit_files):
        commit_files({'a.txt': 'one\ntwo\n'})
        assert repo.diff.diff().is_empty()
        assert repo.diff.diff(cached=True).is_empty()

    def test_committed_lock_file_has_no_diff(self, repo, commit_files):
        commit_files({'poetry.lock': 'pinned\n', 'a.txt': 'x\n'})
        assert repo.diff.diff().is_empty()

    def test_modified_working_file(self, repo, commit_files, write_file):
        commit_files({'a.txt': 'one\ntwo\n'})
        write_file('a.txt', 'one\nthree\n')

        result = repo.diff.diff()
        assert [d.path for d in result.file_diffs] == ['a.txt']
        file_diff = result.file_diffs[0]
        assert file_diff.change_type is ChangeType.MODIFIED
        assert (file_diff.lines_added, file_diff.lines_removed) == (1, 1)

        text = format_diff(result, color=False)
        assert 'diff --git a/a.txt b/a.txt' in text
        assert f"index {file_diff.old_hash[:7]}..{file_diff.new_hash[:7]} 100644" in text
        assert '--- a/a.txt\n+++ b/a.txt' in text
        assert '@@ -1,2 +1,2 @@\n one\n-two\n+three' in text

    def test_untracked_file(self, repo, commit_files, write_file):
        commit_files({'a.txt': 'one\n'})
        write_file('new.txt', 'fresh\n')

        file_diff = repo.diff.diff().file_diffs[0]
        assert file_diff.path == 'new.txt'
        assert file_diff.change_type is ChangeType.ADDED
        assert file_diff.old_hash is None
        assert file_diff.untracked

    def test_deleted_working_file(self, repo, commit_files):
        commit_files({'a.txt': 'one\n', 'b.txt': 'two\n'})
        (repo.work_tree / 'b.txt').unlink()

        result = repo.diff.diff()
        assert [(d.path, d.change_type) for d in result.file_diffs] == [('b.txt', ChangeType.DELETED)]
        assert 'deleted file mode 100644' in format_diff(result, color=False)

    def test_cached_diff(self, repo, commit_files, write_file):
        commit_files({'a.txt': 'one\n'})
        stage_paths(repo, [write_file('a.txt', 'two\n'), write_file('b.txt', 'bee\n')])

        assert repo.diff.diff().is_empty()
        result = repo.diff.diff(cached=True)
        assert [(d.path, d.change_type) for d in result.file_diffs] == [
            ('a.txt', ChangeType.MODIFIED),
            ('b.txt', ChangeType.ADDED),
        ]
        text = format_diff(result, color=False)
        assert 'new file mode 100644' in text
        assert 'index 0000000..' in text
        assert '--- /dev/null' in text

    def test_cached_diff_on_unborn_branch(self, repo, write_file):
        stage_paths(repo, [write_file('a.txt', 'x\n')])
        result = repo.diff.diff(cached=True)
        assert [d.change_type for d in result.file_diffs] == [ChangeType.ADDED]

    def test_binary_file(self, repo, write_file):
        write_file('image.bin', bytes([0, 1, 2, 3, 0, 5]))
        result = repo.diff.diff()
        assert result.file_diffs[0].is_binary
        assert result.file_diffs[0].chunks == []
        assert 'Binary files differ' in format_diff(result, color=False)

    def test_colored_output(self, repo, commit_files, write_file):
        from colorama import Fore

        commit_files({'a.txt': 'one\n'})
        write_file('a.txt', 'two\n')
        text = repo.diff.format_diff(repo.diff.diff(), color=True)
        assert f'{Fore.RED}-one' in text
        assert f'{Fore.GREEN}+two' in text

    def test_stat_output(self, repo, commit_files, write_file):
        commit_files({'a.txt': 'one\ntwo\n'})
        write_file('a.txt', 'one\nthree\n')

        lines = format_stat(repo.diff.diff(), color=False).splitlines()
        assert lines[0] == ' a.txt | 2 +-'
        assert lines[-1] == ' 1 file changed, 1 insertion, 1 deletion'

    def test_tree_snapshot_recurses(self, repo):
        blob_hash = repo.objects.store_object(Blob(b'deep\n'))
        sub = Tree()
        sub.add_entry(FileMode.REGULAR, 'b.txt', blob_hash)
        root = Tree()
        root.add_entry(FileMode.DIRECTORY, 'dir', repo.objects.store_object(sub))
        root.add_entry(FileMode.EXECUTABLE, 'run.sh', blob_hash)
        root.add_entry(FileMode.SYMLINK, 'link', blob_hash)

        snapshot = repo.diff.tree_snapshot(repo.objects.store_object(root))
        assert sorted(snapshot) == ['dir/b.txt', 'run.sh']
        assert snapshot['run.sh'].mode is FileMode.EXECUTABLE

    def test_head_snapshot_requires_commit(self, repo):
        blob_hash = repo.objects.store_object(Blob(b'x'))
        repo.head_file.write_text(blob_hash + '\n')
        with pytest.raises(NotACommit):
            repo.diff.head_snapshot()

    def test_line_types_are_prefixes(self):
        assert [t.value for t in LineType] == [' ', '+', '-']
