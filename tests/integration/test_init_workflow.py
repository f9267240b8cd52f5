"""Integration tests for grove init and repository discovery."""

from grove.core.repository import Repository


def test_init_current_directory(invoke, temp_dir):
    """Test init creates the repository layout."""
    result = invoke('init', cwd=temp_dir)

    assert result.exit_code == 0
    assert 'Initialized empty Grove repository' in result.output
    assert 'On branch main' in result.output
    for sub in ['objects', 'refs/heads', 'refs/tags', 'refs/remotes']:
        assert (temp_dir / '.grove' / sub).is_dir()
    assert (temp_dir / '.grove' / 'HEAD').read_text() == 'ref: refs/heads/main\n'


def test_init_named_directory_and_branch(invoke, temp_dir):
    """Test init into a new directory with a custom first branch."""
    result = invoke('init', 'project', '-b', 'trunk', cwd=temp_dir)

    assert result.exit_code == 0
    assert (temp_dir / 'project' / '.grove' / 'HEAD').read_text() == 'ref: refs/heads/trunk\n'


def test_init_twice(invoke, temp_dir):
    """Test re-initializing is refused."""
    invoke('init', cwd=temp_dir)
    result = invoke('init', cwd=temp_dir)

    assert result.exit_code != 0
    assert 'already exists' in result.output


def test_commands_outside_repository(invoke, tmp_path):
    """Test repository commands fail cleanly without a repository."""
    for args in [('status',), ('log',), ('add', 'x'), ('diff',), ('branch',)]:
        result = invoke(*args, cwd=tmp_path)
        assert result.exit_code != 0
        assert 'Not a grove repository' in result.output


def test_find_repository_from_subdirectory(cli_repo, monkeypatch):
    """Test discovery walks up from nested directories."""
    nested = cli_repo.work_tree / 'a' / 'b'
    nested.mkdir(parents=True)
    monkeypatch.chdir(nested)

    assert Repository.find_repository().work_tree == cli_repo.work_tree


def test_version_and_help(invoke, tmp_path):
    """Test the group options."""
    assert '0.1.0' in invoke('--version', cwd=tmp_path).output
    help_text = invoke('--help').output
    for command in ['init', 'add', 'commit', 'status', 'diff', 'log', 'branch', 'tag', 'clone']:
        assert command in help_text
