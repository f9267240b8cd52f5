"""Repository management for Grove."""

import logging
from pathlib import Path
from typing import Optional, Union

from .errors import GroveError, NotARepository
from .index import Index
from .object_store import ObjectStore
from .objects import GroveObject
from ..utils.fileio import atomic_write
from ..utils.worktree import WorkingTree

logger = logging.getLogger(__name__)

GROVE_DIR = '.grove'
DEFAULT_BRANCH = 'main'


class Repository:
    """
    Represents a Grove repository.

    A repository manages the .grove directory structure and hands out
    the object store, reference manager and diff engine that work on it.
    """

    def __init__(self, path: Union[str, Path] = '.'):
        """
        Initialize repository.

        Args:
            path: Path to repository root (defaults to current directory)
        """
        self.work_tree = Path(path).resolve()
        self.grove_dir = self.work_tree / GROVE_DIR
        self.objects_dir = self.grove_dir / 'objects'
        self.refs_dir = self.grove_dir / 'refs'
        self.heads_dir = self.refs_dir / 'heads'
        self.tags_dir = self.refs_dir / 'tags'
        self.remotes_dir = self.refs_dir / 'remotes'
        self.head_file = self.grove_dir / 'HEAD'
        self.index_file = self.grove_dir / 'index'
        self.config_file = self.grove_dir / 'config'

        # Lazy to avoid circular imports
        self._object_store = None
        self._ref_manager = None
        self._diff_engine = None
        self._working_tree = None

    @property
    def objects(self) -> ObjectStore:
        if self._object_store is None:
            self._object_store = ObjectStore(self.objects_dir)
        return self._object_store

    @property
    def refs(self):
        """Get RefManager instance."""
        if self._ref_manager is None:
            from .refs import RefManager
            self._ref_manager = RefManager(self)
        return self._ref_manager

    @property
    def diff(self):
        """Get DiffEngine instance."""
        if self._diff_engine is None:
            from ..operations.diff import DiffEngine
            self._diff_engine = DiffEngine(self)
        return self._diff_engine

    @property
    def worktree(self) -> WorkingTree:
        if self._working_tree is None:
            self._working_tree = WorkingTree(self.work_tree)
        return self._working_tree

    def init(self, initial_branch: str = DEFAULT_BRANCH) -> 'Repository':
        """
        Initialize a new repository.

        Creates the .grove directory structure:
        .grove/
        ├── objects/       # Object database
        │   ├── info/
        │   └── pack/
        ├── refs/
        │   ├── heads/     # Branch references
        │   ├── tags/      # Tag references
        │   └── remotes/   # Remote-tracking references
        ├── HEAD           # Current branch/commit
        └── config         # Repository configuration

        Returns:
            Repository: self for method chaining

        Raises:
            GroveError: If repository already exists
        """
        if self.grove_dir.exists():
            raise GroveError(f"Repository already exists at {self.grove_dir}")

        self.work_tree.mkdir(parents=True, exist_ok=True)
        self.grove_dir.mkdir()
        self.objects.init()
        for directory in (self.heads_dir, self.tags_dir, self.remotes_dir):
            directory.mkdir(parents=True)

        atomic_write(self.head_file, f'ref: refs/heads/{initial_branch}\n')
        atomic_write(self.config_file, '[core]\nrepositoryformatversion = 0\nbare = false\n')

        logger.debug("initialized repository at %s", self.grove_dir)
        return self

    @classmethod
    def find_repository(cls, path: Union[str, Path] = '.') -> Optional['Repository']:
        """
        Find repository by searching up the directory tree.

        Args:
            path: Starting path for search

        Returns:
            Repository if found, None otherwise
        """
        current = Path(path).resolve()

        while True:
            if (current / GROVE_DIR).is_dir():
                return cls(current)
            if current == current.parent:
                return None
            current = current.parent

    @classmethod
    def open(cls, path: Union[str, Path] = '.') -> 'Repository':
        """
        Find the repository containing path.

        Raises:
            NotARepository: If no .grove directory is found
        """
        repo = cls.find_repository(path)
        if repo is None:
            raise NotARepository(Path(path).resolve())
        return repo

    def load_index(self) -> Index:
        """Read the index from disk (empty when absent)."""
        return Index.read(self.index_file)

    def save_index(self, index: Index) -> None:
        index.write(self.index_file)

    def store_object(self, obj: GroveObject) -> str:
        return self.objects.store_object(obj)

    def load_object(self, obj_hash: str) -> GroveObject:
        return self.objects.load_object(obj_hash)

    def __repr__(self) -> str:
        return f"Repository(path={self.work_tree})"
