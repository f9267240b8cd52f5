"""Grove objects: blobs, trees and commits."""

import time
from abc import ABC, abstractmethod
from enum import Enum
from typing import Optional

from .errors import Malformed
from .hash import hash_object, is_valid_hash


class FileMode(Enum):
    """Modes a tree entry can carry."""

    REGULAR = 0o100644
    EXECUTABLE = 0o100755
    SYMLINK = 0o120000
    DIRECTORY = 0o040000

    @classmethod
    def from_octal(cls, text: str) -> 'FileMode':
        """Parse an octal ASCII mode such as '100644' or '40000'."""
        try:
            return cls(int(text, 8))
        except ValueError:
            raise Malformed(f"Invalid file mode: {text!r}")

    @property
    def octal(self) -> str:
        return format(self.value, 'o')

    @property
    def is_file(self) -> bool:
        return self in (FileMode.REGULAR, FileMode.EXECUTABLE)


class GroveObject(ABC):
    """Base class for all Grove objects."""

    type_name = ''

    def __init__(self):
        self._hash: Optional[str] = None

    @abstractmethod
    def serialize(self) -> bytes:
        """
        Serialize object payload to bytes.

        Returns:
            bytes: Payload without the type/size header
        """
        pass

    @abstractmethod
    def deserialize(self, data: bytes) -> None:
        """
        Deserialize object payload from bytes.

        Args:
            data: Payload without the type/size header
        """
        pass

    @property
    def type(self) -> str:
        """
        Return object type name.

        Returns:
            str: Object type (blob, tree, commit)
        """
        return self.type_name

    def canonical(self) -> bytes:
        """
        Return the canonical encoding of this object.

        Format: <type> <size>\\0<payload>
        """
        data = self.serialize()
        header = f"{self.type} {len(data)}\0".encode()
        return header + data

    def compute_hash(self) -> str:
        """
        Compute and cache object hash.

        Returns:
            str: 40-character SHA-1 hash of the canonical encoding
        """
        if self._hash is None:
            self._hash = hash_object(self.canonical())
        return self._hash

    @property
    def hash(self) -> str:
        return self.compute_hash()

    def __eq__(self, other) -> bool:
        if not isinstance(other, GroveObject):
            return NotImplemented
        return self.type == other.type and self.serialize() == other.serialize()

    def __hash__(self) -> int:
        return hash(self.compute_hash())


class Blob(GroveObject):
    """
    Represents file content.

    A blob stores the raw content of a file without any metadata
    like filename or permissions.
    """

    type_name = 'blob'

    def __init__(self, data: Optional[bytes] = None):
        super().__init__()
        self.data = data or b''

    def serialize(self) -> bytes:
        return self.data

    def deserialize(self, data: bytes) -> None:
        self.data = data
        self._hash = None

    @classmethod
    def from_file(cls, filepath: str) -> 'Blob':
        """Create blob from the contents of a file."""
        with open(filepath, 'rb') as f:
            return cls(f.read())

    @property
    def size(self) -> int:
        return len(self.data)

    def __repr__(self) -> str:
        return f"Blob(hash={self.hash[:7]}, size={self.size})"


class TreeEntry:
    """
    A single (mode, name, hash) entry of a tree.

    Entries order by the UTF-8 bytes of their name.
    """

    def __init__(self, mode: FileMode, name: str, obj_hash: str):
        self.mode = mode
        self.name = name
        self.hash = obj_hash

    @property
    def sort_key(self) -> bytes:
        return self.name.encode()

    def __lt__(self, other: 'TreeEntry') -> bool:
        return self.sort_key < other.sort_key

    def __eq__(self, other) -> bool:
        if not isinstance(other, TreeEntry):
            return NotImplemented
        return (self.mode, self.name, self.hash) == (other.mode, other.name, other.hash)

    def __repr__(self) -> str:
        return f"TreeEntry({self.mode.octal} {self.hash[:7]} {self.name})"


class Tree(GroveObject):
    """
    Represents a directory snapshot.

    A tree contains entries pointing to blobs (files) and other trees
    (subdirectories). Entries are kept sorted by name at all times.
    """

    type_name = 'tree'

    def __init__(self, entries: Optional[list[TreeEntry]] = None):
        super().__init__()
        self.entries: list[TreeEntry] = sorted(entries or [])

    def add_entry(self, mode: FileMode, name: str, obj_hash: str) -> None:
        """Add entry to tree, keeping entries sorted."""
        self.entries.append(TreeEntry(mode, name, obj_hash))
        self.entries.sort()
        self._hash = None

    def serialize(self) -> bytes:
        """
        Serialize tree entries.

        Format per entry: <octal mode> <name>\\0<20-byte hash>

        Raises:
            Malformed: If an entry hash is not a 40-character hex digest
        """
        result = bytearray()
        for entry in sorted(self.entries):
            if not is_valid_hash(entry.hash):
                raise Malformed(f"Invalid hash for tree entry {entry.name!r}: {entry.hash!r}")
            result.extend(f"{entry.mode.octal} {entry.name}".encode())
            result.append(0)
            result.extend(bytes.fromhex(entry.hash))
        return bytes(result)

    def deserialize(self, data: bytes) -> None:
        """
        Deserialize tree entries.

        Raises:
            Malformed: On a missing separator or a truncated hash
        """
        entries = []
        pos = 0

        while pos < len(data):
            space_pos = data.find(b' ', pos)
            if space_pos < 0:
                raise Malformed("Invalid tree format: no space after mode")
            mode = FileMode.from_octal(data[pos:space_pos].decode('ascii', errors='replace'))

            null_pos = data.find(b'\0', space_pos + 1)
            if null_pos < 0:
                raise Malformed("Invalid tree format: no null after name")
            try:
                name = data[space_pos + 1:null_pos].decode()
            except UnicodeDecodeError:
                raise Malformed("Invalid tree format: entry name is not UTF-8")

            hash_bytes = data[null_pos + 1:null_pos + 21]
            if len(hash_bytes) != 20:
                raise Malformed(f"Invalid tree format: truncated hash for {name!r}")

            entries.append(TreeEntry(mode, name, hash_bytes.hex()))
            pos = null_pos + 21

        self.entries = sorted(entries)
        self._hash = None

    def __repr__(self) -> str:
        return f"Tree(entries={len(self.entries)})"


class Signature:
    """Author or committer identity with a Unix timestamp."""

    def __init__(self, name: str, email: str, timestamp: Optional[int] = None):
        self.name = name
        self.email = email
        self.timestamp = int(time.time()) if timestamp is None else timestamp

    @classmethod
    def parse(cls, text: str) -> 'Signature':
        """
        Parse 'Name <email> timestamp'.

        Raises:
            Malformed: If the text does not follow that layout
        """
        name_email, _, timestamp = text.rpartition(' ')
        try:
            ts = int(timestamp)
        except ValueError:
            raise Malformed(f"Invalid signature timestamp: {text!r}")

        email_start = name_email.rfind(' <')
        if email_start < 0 or not name_email.endswith('>'):
            raise Malformed(f"Invalid signature name/email: {text!r}")

        return cls(name_email[:email_start], name_email[email_start + 2:-1], ts)

    def copy(self) -> 'Signature':
        return Signature(self.name, self.email, self.timestamp)

    def __str__(self) -> str:
        return f"{self.name} <{self.email}> {self.timestamp}"

    def __eq__(self, other) -> bool:
        if not isinstance(other, Signature):
            return NotImplemented
        return (self.name, self.email, self.timestamp) == (other.name, other.email, other.timestamp)

    def __repr__(self) -> str:
        return f"Signature({self})"


class Commit(GroveObject):
    """
    Represents a commit with metadata.

    A commit captures:
    - Snapshot of project (tree hash)
    - Parent commit(s) for history, first parent first
    - Author and committer signatures
    - Commit message, stored verbatim
    """

    type_name = 'commit'

    def __init__(self):
        super().__init__()
        self.tree: str = ''
        self.parents: list[str] = []
        self.author: Optional[Signature] = None
        self.committer: Optional[Signature] = None
        self.message: str = ''

    @property
    def is_root(self) -> bool:
        return not self.parents

    def serialize(self) -> bytes:
        """
        Serialize commit.

        Format:
        tree <tree-hash>
        parent <parent-hash>  (zero or more)
        author Name <email> <timestamp>
        committer Name <email> <timestamp>

        <commit message>
        """
        lines = [f'tree {self.tree}']
        for parent in self.parents:
            lines.append(f'parent {parent}')
        lines.append(f'author {self.author}')
        lines.append(f'committer {self.committer}')

        header = '\n'.join(lines) + '\n\n'
        return (header + self.message).encode()

    def deserialize(self, data: bytes) -> None:
        """
        Deserialize commit.

        Unknown header keys are ignored. Raises Malformed when tree,
        author or committer is missing or the payload is not UTF-8.
        """
        try:
            content = data.decode()
        except UnicodeDecodeError:
            raise Malformed("Invalid commit format: payload is not UTF-8")

        header, sep, message = content.partition('\n\n')
        if not sep and header.endswith('\n'):
            header = header[:-1]

        tree = None
        parents = []
        author = None
        committer = None

        for line in header.split('\n'):
            key, _, value = line.partition(' ')
            if key == 'tree':
                tree = value
            elif key == 'parent':
                parents.append(value)
            elif key == 'author':
                author = Signature.parse(value)
            elif key == 'committer':
                committer = Signature.parse(value)

        if tree is None:
            raise Malformed("Missing tree in commit")
        if author is None:
            raise Malformed("Missing author in commit")
        if committer is None:
            raise Malformed("Missing committer in commit")

        self.tree = tree
        self.parents = parents
        self.author = author
        self.committer = committer
        self.message = message
        self._hash = None

    @classmethod
    def create(
        cls,
        tree_hash: str,
        parent_hashes: list[str],
        author: Signature,
        message: str,
        committer: Optional[Signature] = None
    ) -> 'Commit':
        """
        Create a new commit.

        Args:
            tree_hash: Hash of root tree object
            parent_hashes: Parent commit hashes, first parent first
            author: Author signature
            message: Commit message
            committer: Committer signature (defaults to a copy of author)

        Returns:
            Commit: New commit object
        """
        commit = cls()
        commit.tree = tree_hash
        commit.parents = list(parent_hashes)
        commit.author = author
        commit.committer = committer if committer is not None else author.copy()
        commit.message = message
        return commit

    def __repr__(self) -> str:
        parent_info = f", parents={len(self.parents)}" if self.parents else ""
        msg_preview = self.message.split('\n')[0][:50]
        return f"Commit(hash={self.hash[:7]}{parent_info}, msg='{msg_preview}')"


OBJECT_TYPES = {
    'blob': Blob,
    'tree': Tree,
    'commit': Commit,
}
