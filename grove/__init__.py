"""Grove - a small Git-like version control engine implemented in Python."""

__version__ = '0.1.0'

from grove.core.repository import Repository
from grove.core.objects import GroveObject, Blob, Tree, Commit, Signature

__all__ = [
    'Repository',
    'GroveObject',
    'Blob',
    'Tree',
    'Commit',
    'Signature',
]
