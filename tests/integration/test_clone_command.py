"""Integration tests for grove clone with a stubbed remote client."""

import pytest

from grove.core.errors import RemoteError
from grove.core.repository import Repository
from grove.remote.client import RemoteRepository

TIP = 'c' * 40


class FakeClient:
    """Stands in for RemoteClient; returns a fixed advertisement."""

    refs = {'HEAD': TIP, 'refs/heads/main': TIP, 'refs/heads/dev': TIP}
    error = None

    def __init__(self, timeout=30):
        self.timeout = timeout

    def discover_refs(self, url, name='origin'):
        if self.error is not None:
            raise self.error
        return RemoteRepository(url, name, dict(self.refs))


@pytest.fixture
def fake_client(monkeypatch):
    monkeypatch.setattr('grove.cli.commands.clone.RemoteClient', FakeClient)
    monkeypatch.setattr(FakeClient, 'error', None)
    return FakeClient


def test_clone_records_remote_branches(invoke, tmp_path, fake_client):
    """Test clone initializes a repository with remote-tracking refs."""
    result = invoke('clone', 'https://example.com/demo.git', cwd=tmp_path)

    assert result.exit_code == 0
    assert "Cloning into 'demo'" in result.output
    assert 'refs/remotes/origin/dev' in result.output
    assert 'No objects were received' in result.output

    repo = Repository(tmp_path / 'demo')
    assert repo.refs.get_current_branch() == 'main'
    assert repo.refs.resolve_head() is None
    assert repo.refs.load_ref('refs/remotes/origin/main') == TIP


def test_clone_branch_option(invoke, tmp_path, fake_client):
    """Test -b selects the branch HEAD points at."""
    result = invoke('clone', 'https://example.com/demo.git', 'work', '-b', 'dev', cwd=tmp_path)
    assert result.exit_code == 0
    assert Repository(tmp_path / 'work').refs.get_current_branch() == 'dev'


def test_clone_missing_branch(invoke, tmp_path, fake_client):
    """Test an unknown branch is reported."""
    result = invoke('clone', 'https://example.com/demo.git', '-b', 'nope', cwd=tmp_path)
    assert result.exit_code != 0
    assert "Remote branch 'nope' not found" in result.output


def test_clone_remote_failure(invoke, tmp_path, fake_client, monkeypatch):
    """Test network failures surface as errors."""
    monkeypatch.setattr(FakeClient, 'error', RemoteError('connection refused'))
    result = invoke('clone', 'https://example.com/demo.git', cwd=tmp_path)
    assert result.exit_code != 0
    assert 'connection refused' in result.output
    assert not (tmp_path / 'demo').exists()
