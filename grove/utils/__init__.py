"""Filesystem helpers used by the core."""

from grove.utils.fileio import atomic_write
from grove.utils.worktree import WorkingTree

__all__ = ['atomic_write', 'WorkingTree']
