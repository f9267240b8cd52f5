"""Integration tests for diffs across several commits and the staging area."""

from grove.operations.add import stage_paths
from grove.operations.diff import ChangeType


def test_three_way_view(repo, commit_files, write_file):
    """Test staged and unstaged diffs split the same file's changes."""
    commit_files({'a.txt': 'v1\n'})
    stage_paths(repo, [write_file('a.txt', 'v2\n')])
    write_file('a.txt', 'v3\n')

    staged = repo.diff.diff(cached=True).file_diffs[0]
    unstaged = repo.diff.diff().file_diffs[0]

    assert staged.new_hash == unstaged.old_hash
    assert [str(l) for l in staged.chunks[0].lines] == ['-v1', '+v2']
    assert [str(l) for l in unstaged.chunks[0].lines] == ['-v2', '+v3']


def test_snapshot_comparison_between_commits(repo, commit_files):
    """Test comparing two commit trees directly."""
    first = commit_files({'keep.txt': 'same\n', 'gone.txt': 'bye\n'})
    (repo.work_tree / 'gone.txt').unlink()
    index = repo.load_index()
    index.remove_entry('gone.txt')
    repo.save_index(index)
    second = commit_files({'new.txt': 'hi\n'})

    result = repo.diff.diff_snapshots(
        repo.diff.tree_snapshot(first.tree_hash),
        repo.diff.tree_snapshot(second.tree_hash),
    )
    assert [(d.path, d.change_type) for d in result.file_diffs] == [
        ('gone.txt', ChangeType.DELETED),
        ('new.txt', ChangeType.ADDED),
    ]
    assert result.summary() == '2 files changed, 1 insertion, 1 deletion'


def test_long_file_splits_into_chunks(repo, commit_files, write_file):
    """Test widely separated edits land in separate chunks."""
    lines = [f'line {i}' for i in range(40)]
    commit_files({'long.txt': '\n'.join(lines) + '\n'})
    lines[0] = 'first changed'
    lines[39] = 'last changed'
    write_file('long.txt', '\n'.join(lines) + '\n')

    file_diff = repo.diff.diff().file_diffs[0]
    changed = [c for c in file_diff.chunks
               if any(l.line_type.value != ' ' for l in c.lines)]
    assert len(changed) == 2
    assert changed[0].old_start == 1
    assert (file_diff.lines_added, file_diff.lines_removed) == (2, 2)
