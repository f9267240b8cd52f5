"""Core functionality for Grove.

This module contains the core data structures:
- Grove objects (Blob, Tree, Commit) and the object store
- Repository management
- Index/staging area
- Reference management
- Configuration management
- Hashing utilities and error types

For diff, commit, status and log, see grove.operations
For remote discovery and clone, see grove.remote
"""

from grove.core.errors import (
    GroveError, NotARepository, NotFound, Malformed, Conflict, NotACommit, RemoteError,
)
from grove.core.objects import GroveObject, Blob, Tree, TreeEntry, Commit, Signature, FileMode
from grove.core.object_store import ObjectStore
from grove.core.repository import Repository
from grove.core.hash import hash_object, hash_blob
from grove.core.index import Index, IndexEntry
from grove.core.refs import RefManager, GitRef, RefType, SymbolicRef, DirectRef
from grove.core.config import Config, get_config

__all__ = [
    'GroveError',
    'NotARepository',
    'NotFound',
    'Malformed',
    'Conflict',
    'NotACommit',
    'RemoteError',
    'GroveObject',
    'Blob',
    'Tree',
    'TreeEntry',
    'Commit',
    'Signature',
    'FileMode',
    'ObjectStore',
    'Repository',
    'Index',
    'IndexEntry',
    'RefManager',
    'GitRef',
    'RefType',
    'SymbolicRef',
    'DirectRef',
    'Config',
    'get_config',
    'hash_object',
    'hash_blob',
]
