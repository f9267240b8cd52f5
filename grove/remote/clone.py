"""Creating a local repository from a remote's advertised state."""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Optional, Union

from ..core.errors import GroveError, Malformed, NotFound
from ..core.objects import Commit
from ..core.refs import GitRef, RefType
from ..core.repository import Repository
from .client import RemoteRepository

logger = logging.getLogger(__name__)


@dataclass
class CloneResult:
    repository_path: Path
    remote: RemoteRepository
    checked_out_branch: Optional[str]
    objects_received: int


def directory_for(url: str) -> str:
    """Local directory name for a remote URL ('…/repo.git' -> 'repo')."""
    name = url.rstrip('/').rsplit('/', 1)[-1]
    if name.endswith('.git'):
        name = name[:-4]
    return name or 'repository'


def clone(
    remote: RemoteRepository,
    directory: Union[str, Path, None] = None,
    objects: Iterable[bytes] = (),
    branch: Optional[str] = None
) -> CloneResult:
    """
    Initialize a repository from a remote's refs and objects.

    Canonical objects supplied by the caller are imported. Every
    advertised branch becomes ``refs/remotes/<remote>/<branch>``, HEAD
    points at the target branch, and the local branch is created when
    its tip commit is present.

    Args:
        remote: Discovered remote references
        directory: Destination (defaults to a name derived from the URL)
        objects: Canonical object encodings received from the remote
        branch: Branch to check out (defaults to the remote's default)

    Raises:
        GroveError: If the destination is a non-empty directory
        NotFound: If the remote has no branches or lacks the requested one
    """
    target = Path(directory) if directory is not None else Path(directory_for(remote.url))
    if target.exists() and any(target.iterdir()):
        raise GroveError(f"Destination {target} already exists and is not empty")

    branches = remote.branches
    if branch is None:
        branch = remote.default_branch()
        if branch is None:
            raise NotFound(f"Remote {remote.url} has no branches")
    elif branch not in branches:
        raise NotFound(f"Remote branch {branch!r} not found at {remote.url}")

    repo = Repository(target).init(initial_branch=branch)

    received = 0
    for content in objects:
        try:
            repo.objects.import_object(content)
        except Malformed as e:
            logger.warning("skipping object from %s: %s", remote.url, e)
            continue
        received += 1

    for name, obj_hash in branches.items():
        repo.refs.store_ref(GitRef(f"{remote.name}/{name}", obj_hash, RefType.REMOTE_BRANCH))

    repo.refs.set_head_to_branch(branch)
    tip = branches[branch]
    checked_out = None
    if repo.objects.object_exists(tip) and isinstance(repo.objects.load_object(tip), Commit):
        repo.refs.store_ref(GitRef(branch, tip, RefType.BRANCH))
        checked_out = branch
    else:
        logger.info("tip %s of %s was not received; leaving %s unborn", tip, branch, branch)

    return CloneResult(
        repository_path=repo.work_tree,
        remote=remote,
        checked_out_branch=checked_out,
        objects_received=received
    )
