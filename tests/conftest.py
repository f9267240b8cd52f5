"""Shared pytest fixtures for Grove tests."""

import pytest
import tempfile
import shutil
from pathlib import Path

from grove.core.config import Config
from grove.core.objects import Blob, Tree, Commit, FileMode, Signature
from grove.core.repository import Repository
from grove.operations.add import stage_paths
from grove.operations.commit import create_commit


IDENTITY_VARS = (
    'GROVE_AUTHOR_NAME', 'GROVE_AUTHOR_EMAIL',
    'GIT_AUTHOR_NAME', 'GIT_AUTHOR_EMAIL',
    'GROVE_USER_NAME', 'GROVE_USER_EMAIL',
)


@pytest.fixture(autouse=True)
def isolated_environment(monkeypatch, tmp_path_factory):
    """Keep tests away from the user's identity variables and ~/.groveconfig."""
    for var in IDENTITY_VARS:
        monkeypatch.delenv(var, raising=False)
    home = tmp_path_factory.mktemp('home')
    monkeypatch.setattr(Config, 'GLOBAL_CONFIG_PATH', home / '.groveconfig')


@pytest.fixture
def temp_dir():
    """Create a temporary directory for tests."""
    tmpdir = tempfile.mkdtemp()
    yield Path(tmpdir).resolve()
    shutil.rmtree(tmpdir, ignore_errors=True)


@pytest.fixture
def repo(temp_dir):
    """Create an initialized repository."""
    return Repository(temp_dir).init()


@pytest.fixture
def repo_with_config(repo):
    """Create a repository with a configured user identity."""
    repo.config_file.write_text(
        "[core]\nrepositoryformatversion = 0\n\n"
        "[user]\nname = Test User\nemail = test@example.com\n"
    )
    return repo


@pytest.fixture
def signature():
    """A fixed author signature."""
    return Signature('Test User', 'test@example.com', 1700000000)


@pytest.fixture
def sample_blob():
    """Create a sample blob object."""
    return Blob(b"Hello, World!\n")


@pytest.fixture
def sample_tree(repo, sample_blob):
    """Create a sample tree with one blob."""
    blob_hash = repo.objects.store_object(sample_blob)
    tree = Tree()
    tree.add_entry(FileMode.REGULAR, 'test.txt', blob_hash)
    return tree


@pytest.fixture
def sample_commit(sample_tree, repo, signature):
    """Sample root commit object."""
    tree_hash = repo.objects.store_object(sample_tree)
    return Commit.create(tree_hash, [], signature, "Test commit")


@pytest.fixture
def write_file(repo):
    """Write a file into the working tree and return its path."""
    def _write(rel_path, content):
        path = repo.work_tree / rel_path
        path.parent.mkdir(parents=True, exist_ok=True)
        if isinstance(content, str):
            content = content.encode()
        path.write_bytes(content)
        return path
    return _write


@pytest.fixture
def commit_files(repo, write_file, signature):
    """Write files, stage them and commit; returns the CommitResult."""
    counter = {'ts': signature.timestamp}

    def _commit(files, message="Test commit"):
        paths = [write_file(rel_path, content) for rel_path, content in files.items()]
        stage_paths(repo, paths)
        counter['ts'] += 60
        author = Signature(signature.name, signature.email, counter['ts'])
        return create_commit(repo, message, author=author)
    return _commit


@pytest.fixture
def invoke(monkeypatch):
    """Run a grove CLI command from a given directory and return the click Result."""
    from click.testing import CliRunner
    from grove.cli.main import cli

    runner = CliRunner()

    def _invoke(*args, cwd=None):
        if cwd is not None:
            monkeypatch.chdir(cwd)
        return runner.invoke(cli, [str(arg) for arg in args])
    return _invoke


@pytest.fixture
def cli_repo(repo_with_config, monkeypatch):
    """A configured repository that is also the current directory."""
    monkeypatch.chdir(repo_with_config.work_tree)
    return repo_with_config
