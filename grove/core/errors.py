"""Error types raised by Grove."""


class GroveError(Exception):
    """Base class for all Grove failures."""


class NotARepository(GroveError):
    """The metadata directory (or part of it) is missing."""

    def __init__(self, path):
        self.path = path
        super().__init__(f"Not a grove repository (or any of the parent directories): {path}")


class NotFound(GroveError):
    """An object, ref or branch does not exist."""


class Malformed(GroveError, ValueError):
    """Stored data could not be parsed."""


class Conflict(GroveError):
    """The requested change would not alter the repository."""


class NotACommit(GroveError):
    """An object expected to be a commit decoded as something else."""

    def __init__(self, obj_hash: str, actual_type: str = ''):
        self.hash = obj_hash
        self.actual_type = actual_type
        detail = f" (found {actual_type})" if actual_type else ""
        super().__init__(f"Object {obj_hash} is not a commit{detail}")


class RemoteError(GroveError):
    """A remote repository could not be queried."""
