"""Recording the index as a new commit."""

import logging
from dataclasses import dataclass
from typing import Optional

from ..core.config import get_config
from ..core.errors import Conflict, NotACommit
from ..core.objects import Commit, Signature
from ..core.refs import GitRef, RefType, SymbolicRef, strip_heads_prefix

logger = logging.getLogger(__name__)


@dataclass
class CommitResult:
    commit_hash: str
    tree_hash: str
    message: str
    files_committed: int
    is_root_commit: bool
    branch: Optional[str] = None


def default_signature(repo) -> Signature:
    """Signature for the current user, stamped with the current time."""
    name, email = get_config(repo).get_user_identity()
    return Signature(name, email)


def create_commit(
    repo,
    message: str,
    author: Optional[Signature] = None,
    allow_empty: bool = False
) -> CommitResult:
    """
    Create a commit from the current index.

    The tree is built from the index and the resolved HEAD becomes the
    only parent. The current branch is advanced (HEAD stays symbolic);
    a detached HEAD is moved directly. The index is left as is.

    Args:
        repo: Repository instance
        message: Commit message, stored verbatim
        author: Author signature (defaults to the configured identity)
        allow_empty: Allow a commit whose tree equals its parent's

    Returns:
        CommitResult

    Raises:
        Conflict: If nothing is staged or the tree is unchanged
        NotACommit: If HEAD points at something other than a commit
    """
    index = repo.load_index()
    if index.is_empty() and not allow_empty:
        raise Conflict("Nothing to commit: the index is empty")

    tree = index.build_tree()
    tree_hash = repo.objects.store_object(tree)

    head = repo.refs.load_head()
    parent_hash = repo.refs.resolve_head()
    parents = []
    if parent_hash is not None:
        parent = repo.objects.load_object(parent_hash)
        if not isinstance(parent, Commit):
            raise NotACommit(parent_hash, parent.type)
        if parent.tree == tree_hash and not allow_empty:
            raise Conflict("Nothing to commit: the tree matches the parent commit")
        parents.append(parent_hash)

    if author is None:
        author = default_signature(repo)

    commit = Commit.create(tree_hash, parents, author, message)
    commit_hash = repo.objects.store_object(commit)

    branch = None
    if isinstance(head, SymbolicRef):
        branch = strip_heads_prefix(head.ref_path)

    if branch is not None:
        repo.refs.store_ref(GitRef(branch, commit_hash, RefType.BRANCH))
    else:
        repo.refs.set_head_to_commit(commit_hash)

    logger.debug("created commit %s on %s", commit_hash, branch or 'detached HEAD')

    return CommitResult(
        commit_hash=commit_hash,
        tree_hash=tree_hash,
        message=message,
        files_committed=len(index),
        is_root_commit=not parents,
        branch=branch
    )
