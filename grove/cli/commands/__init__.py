"""CLI commands for Grove."""

from grove.cli.commands.init import init_cmd
from grove.cli.commands.add import add_cmd
from grove.cli.commands.commit import commit_cmd
from grove.cli.commands.config import config_cmd
from grove.cli.commands.status import status_cmd
from grove.cli.commands.diff import diff_cmd
from grove.cli.commands.log import log_cmd
from grove.cli.commands.branch import branch_cmd
from grove.cli.commands.tag import tag_cmd
from grove.cli.commands.refs import show_ref_cmd
from grove.cli.commands.objects import cat_file_cmd, count_objects_cmd
from grove.cli.commands.clone import clone_cmd

__all__ = ['init_cmd', 'add_cmd', 'commit_cmd', 'config_cmd', 'status_cmd', 'diff_cmd',
           'log_cmd', 'branch_cmd', 'tag_cmd', 'show_ref_cmd', 'cat_file_cmd',
           'count_objects_cmd', 'clone_cmd']
