"""Integration tests for grove config."""

from grove.core.config import Config


class TestConfigCommand:

    def test_set_get_unset(self, cli_repo, invoke):
        assert invoke('config', 'set', 'core.editor', 'vim').exit_code == 0
        assert invoke('config', 'get', 'core.editor').output.strip() == 'vim'

        assert 'Unset core.editor' in invoke('config', 'unset', 'core.editor').output
        result = invoke('config', 'get', 'core.editor')
        assert result.exit_code != 0
        assert 'Config key not found' in result.output

    def test_bare_key_uses_core(self, cli_repo, invoke):
        invoke('config', 'set', 'pager', 'less')
        assert invoke('config', 'get', 'core.pager').output.strip() == 'less'

    def test_list(self, cli_repo, invoke):
        output = invoke('config', 'list').output.splitlines()
        assert 'user.name=Test User' in output
        assert 'core.repositoryformatversion=0' in output

    def test_global(self, invoke, tmp_path):
        result = invoke('config', 'set', '--global', 'user.name', 'Global Person', cwd=tmp_path)
        assert result.exit_code == 0
        assert 'Set global config' in result.output
        assert Config.GLOBAL_CONFIG_PATH.read_text().count('Global Person') == 1
        assert invoke('config', 'get', 'user.name').output.strip() == 'Global Person'

    def test_repository_scope_needs_repository(self, invoke, tmp_path):
        result = invoke('config', 'set', 'user.name', 'x', cwd=tmp_path)
        assert result.exit_code != 0
        assert 'Not a grove repository' in result.output

    def test_identity_used_by_commit(self, cli_repo, invoke, write_file):
        invoke('config', 'set', 'user.name', 'Configured Name')
        write_file('a.txt', 'x')
        invoke('add', 'a.txt')
        invoke('commit', '-m', 'msg')
        assert 'Author: Configured Name <test@example.com>' in invoke('log').output
