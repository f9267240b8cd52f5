"""Reference management for Grove."""

import logging
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Optional, Union

from .errors import Conflict, Malformed, NotACommit, NotARepository, NotFound
from .hash import is_valid_hash
from .objects import Commit
from ..utils.fileio import atomic_write

logger = logging.getLogger(__name__)

HEADS_PREFIX = 'refs/heads/'
SYMREF_PREFIX = 'ref: '


class RefType(Enum):
    """Namespaces a reference can live in."""

    BRANCH = 'heads'
    TAG = 'tags'
    REMOTE_BRANCH = 'remotes'


@dataclass
class GitRef:
    """A named pointer to an object."""
    name: str
    hash: str
    ref_type: RefType = RefType.BRANCH

    @property
    def full_name(self) -> str:
        return f"refs/{self.ref_type.value}/{self.name}"


@dataclass
class SymbolicRef:
    """HEAD pointing at a reference path such as refs/heads/main."""
    ref_path: str

    def __str__(self) -> str:
        return f"{SYMREF_PREFIX}{self.ref_path}\n"


@dataclass
class DirectRef:
    """Detached HEAD pointing straight at a commit."""
    hash: str

    def __str__(self) -> str:
        return f"{self.hash}\n"


HeadRef = Union[SymbolicRef, DirectRef]


def strip_heads_prefix(ref_path: str) -> Optional[str]:
    """
    Return the branch name for a refs/heads/ path, else None.

    A doubled ``refs/heads/refs/heads/`` prefix is stripped twice.
    """
    if not ref_path.startswith(HEADS_PREFIX):
        return None
    name = ref_path[len(HEADS_PREFIX):]
    if name.startswith(HEADS_PREFIX):
        name = name[len(HEADS_PREFIX):]
    return name


def check_ref_name(name: str) -> None:
    """
    Reject reference names that cannot be stored as ref files.

    Raises:
        Malformed: If the name is empty or contains an invalid component
    """
    if not name or name.startswith('/') or name.endswith('/'):
        raise Malformed(f"Invalid reference name: {name!r}")
    if any(c.isspace() or c in '~^:?*[\\' for c in name):
        raise Malformed(f"Invalid reference name: {name!r}")
    for part in name.split('/'):
        if not part or part.startswith('.') or part.endswith('.lock') or '..' in part:
            raise Malformed(f"Invalid reference name: {name!r}")


class RefManager:
    """
    Manages references (branches, tags, remote branches) and HEAD.

    Ref files hold a 40-character hash followed by a newline. HEAD holds
    either ``ref: <path>`` or a bare hash when detached.
    """

    def __init__(self, repo):
        """
        Initialize reference manager.

        Args:
            repo: Repository instance
        """
        self.repo = repo
        self.grove_dir = repo.grove_dir
        self.refs_dir = repo.refs_dir
        self.heads_dir = repo.heads_dir
        self.tags_dir = repo.tags_dir
        self.remotes_dir = repo.remotes_dir
        self.head_file = repo.head_file

    def _check_layout(self) -> None:
        if not self.refs_dir.is_dir() or not self.heads_dir.is_dir():
            raise NotARepository(self.repo.work_tree)

    @staticmethod
    def _read_text(path: Path, label: str) -> str:
        try:
            return path.read_bytes().decode('utf-8').strip()
        except UnicodeDecodeError as e:
            raise Malformed(f"Reference {label} is not valid UTF-8") from e

    def _read_hash_file(self, path: Path, label: str) -> str:
        content = self._read_text(path, label)
        if not is_valid_hash(content):
            raise Malformed(f"Reference {label} does not contain a valid hash: {content!r}")
        return content

    # HEAD

    def load_head(self) -> HeadRef:
        """
        Read HEAD.

        Raises:
            NotARepository: If HEAD is missing
            Malformed: If HEAD is neither symbolic nor a valid hash
        """
        if not self.head_file.is_file():
            raise NotARepository(self.repo.work_tree)

        content = self._read_text(self.head_file, 'HEAD')
        if content.startswith(SYMREF_PREFIX):
            return SymbolicRef(content[len(SYMREF_PREFIX):].strip())
        if is_valid_hash(content):
            return DirectRef(content)
        raise Malformed(f"HEAD has unexpected contents: {content!r}")

    def save_head(self, head: HeadRef) -> None:
        atomic_write(self.head_file, str(head))

    def resolve_head(self) -> Optional[str]:
        """
        Resolve HEAD to a commit hash.

        Returns:
            Commit hash, or None when HEAD names a branch with no commits yet
        """
        head = self.load_head()
        if isinstance(head, DirectRef):
            return head.hash

        branch = strip_heads_prefix(head.ref_path)
        if branch is not None:
            return self.load_ref(GitRef(branch, '', RefType.BRANCH).full_name)
        return self.load_ref(head.ref_path)

    def get_current_branch(self) -> Optional[str]:
        """
        Get the current branch name.

        Returns:
            Branch name or None if HEAD is detached
        """
        head = self.load_head()
        if isinstance(head, SymbolicRef):
            return strip_heads_prefix(head.ref_path)
        return None

    def is_detached_head(self) -> bool:
        return isinstance(self.load_head(), DirectRef)

    def set_head_to_branch(self, branch_name: str) -> None:
        """Point HEAD at a branch, which need not exist yet."""
        check_ref_name(branch_name)
        self.save_head(SymbolicRef(HEADS_PREFIX + branch_name))

    def set_head_to_commit(self, commit_hash: str) -> None:
        """Detach HEAD at a commit."""
        self._require_commit(commit_hash)
        self.save_head(DirectRef(commit_hash))

    # refs

    def load_ref(self, ref_path: str) -> Optional[str]:
        """
        Read the hash stored at a full reference path.

        Args:
            ref_path: Path such as 'refs/heads/main'

        Returns:
            Hash, or None if the reference does not exist
        """
        self._check_layout()
        path = self.grove_dir / ref_path
        if not path.is_file():
            return None
        return self._read_hash_file(path, ref_path)

    def store_ref(self, ref: GitRef) -> None:
        """
        Write a reference.

        If HEAD points at this reference it stays symbolic.
        """
        self._check_layout()
        check_ref_name(ref.name)
        if not is_valid_hash(ref.hash):
            raise Malformed(f"Cannot store {ref.full_name}: invalid hash {ref.hash!r}")

        atomic_write(self.grove_dir / ref.full_name, ref.hash + '\n')
        logger.debug("updated %s to %s", ref.full_name, ref.hash)

        if ref.ref_type is RefType.BRANCH:
            head = self.load_head()
            if (isinstance(head, SymbolicRef)
                    and strip_heads_prefix(head.ref_path) == ref.name
                    and head.ref_path != ref.full_name):
                self.save_head(SymbolicRef(ref.full_name))

    def delete_ref(self, ref: GitRef) -> bool:
        """
        Delete a reference.

        Returns:
            True if deleted, False if not found
        """
        self._check_layout()
        path = self.grove_dir / ref.full_name
        if not path.is_file():
            return False
        path.unlink()
        logger.debug("deleted %s", ref.full_name)
        return True

    def _require_commit(self, obj_hash: str) -> Commit:
        obj = self.repo.objects.load_object(obj_hash)
        if not isinstance(obj, Commit):
            raise NotACommit(obj_hash, obj.type)
        return obj

    def create_branch(self, branch_name: str, commit_hash: str, force: bool = False) -> GitRef:
        """
        Create a new branch.

        Args:
            branch_name: Branch name (may contain '/')
            commit_hash: Commit to point to
            force: Overwrite an existing branch

        Raises:
            Conflict: If the branch exists and force is not set
            NotACommit: If commit_hash names a non-commit object
        """
        ref = GitRef(branch_name, commit_hash, RefType.BRANCH)
        if not force and self.load_ref(ref.full_name) is not None:
            raise Conflict(f"Branch {branch_name!r} already exists")
        self._require_commit(commit_hash)
        self.store_ref(ref)
        return ref

    def create_tag(self, tag_name: str, obj_hash: str, force: bool = False) -> GitRef:
        """
        Create a lightweight tag.

        Raises:
            Conflict: If the tag exists and force is not set
            NotFound: If the target object does not exist
        """
        ref = GitRef(tag_name, obj_hash, RefType.TAG)
        if not force and self.load_ref(ref.full_name) is not None:
            raise Conflict(f"Tag {tag_name!r} already exists")
        if not self.repo.objects.object_exists(obj_hash):
            raise NotFound(f"Object {obj_hash} not found")
        self.store_ref(ref)
        return ref

    def _list_refs(self, base_dir: Path, ref_type: RefType) -> list[GitRef]:
        self._check_layout()
        if not base_dir.is_dir():
            return []

        refs = []
        for ref_file in base_dir.rglob('*'):
            if not ref_file.is_file() or ref_file.name.endswith('.lock'):
                continue
            name = ref_file.relative_to(base_dir).as_posix()
            try:
                refs.append(GitRef(name, self._read_hash_file(ref_file, name), ref_type))
            except Malformed as e:
                logger.warning("skipping reference: %s", e)
        return sorted(refs, key=lambda r: r.name)

    def list_branches(self) -> list[GitRef]:
        return self._list_refs(self.heads_dir, RefType.BRANCH)

    def list_tags(self) -> list[GitRef]:
        return self._list_refs(self.tags_dir, RefType.TAG)

    def list_remote_branches(self) -> list[GitRef]:
        return self._list_refs(self.remotes_dir, RefType.REMOTE_BRANCH)

    def resolve_reference(self, ref: str) -> Optional[str]:
        """
        Resolve HEAD, a full hash, a branch, a tag or a full ref path.

        Args:
            ref: Reference string (e.g., 'HEAD', 'main', 'v1.0', commit hash)

        Returns:
            Hash or None if the reference can't be resolved
        """
        if ref == 'HEAD':
            return self.resolve_head()

        if is_valid_hash(ref) and self.repo.objects.object_exists(ref):
            return ref

        for ref_type in (RefType.BRANCH, RefType.TAG, RefType.REMOTE_BRANCH):
            obj_hash = self.load_ref(GitRef(ref, '', ref_type).full_name)
            if obj_hash is not None:
                return obj_hash

        if ref.startswith('refs/'):
            return self.load_ref(ref)
        return None
