"""Index (staging area) implementation."""

import hashlib
import logging
import struct
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union

from .errors import Malformed
from .hash import is_valid_hash
from .objects import FileMode, Tree, TreeEntry
from ..utils.fileio import atomic_write

logger = logging.getLogger(__name__)

SIGNATURE = b'DIRC'
ENTRY_FORMAT = '>IIIIIIIIII20sH'
ENTRY_SIZE = struct.calcsize(ENTRY_FORMAT)
CHECKSUM_SIZE = 20
NAME_MASK = 0x0FFF
STAGE_SHIFT = 12


@dataclass
class IndexEntry:
    """
    A staged file.

    Stores the hash of the staged content plus the file metadata seen
    when it was staged. ``stage`` is 0 for normal entries and 1..3 for
    conflict stages.
    """
    path: str
    hash: str
    mode: FileMode = FileMode.REGULAR
    size: int = 0
    ctime: int = 0
    ctime_ns: int = 0
    mtime: int = 0
    mtime_ns: int = 0
    dev: int = 0
    ino: int = 0
    uid: int = 0
    gid: int = 0
    stage: int = 0

    @property
    def flags(self) -> int:
        return (self.stage << STAGE_SHIFT) | min(len(self.path.encode()), NAME_MASK)

    def __repr__(self) -> str:
        return f"IndexEntry({self.mode.octal} {self.hash[:7]} {self.path})"


class Index:
    """
    Grove index (staging area).

    Maps repository-relative paths to IndexEntry records. The most
    recent add for a path replaces any earlier one.
    """

    def __init__(self, version: int = 2):
        self.entries: dict[str, IndexEntry] = {}
        self.version: int = version

    def add_entry(self, entry: IndexEntry) -> None:
        """
        Add or update entry in index.

        Raises:
            Malformed: If the entry hash or stage is invalid
        """
        if not is_valid_hash(entry.hash):
            raise Malformed(f"Invalid hash for index entry {entry.path!r}: {entry.hash!r}")
        if not 0 <= entry.stage <= 3:
            raise Malformed(f"Invalid stage {entry.stage} for index entry {entry.path!r}")
        self.entries[entry.path] = entry

    def remove_entry(self, path: str) -> bool:
        """
        Remove entry from index.

        Returns:
            True if an entry was removed
        """
        return self.entries.pop(path, None) is not None

    def get_entry(self, path: str) -> Optional[IndexEntry]:
        """Get entry by path."""
        return self.entries.get(path)

    def sorted_entries(self) -> list[IndexEntry]:
        return [self.entries[path] for path in sorted(self.entries)]

    def is_empty(self) -> bool:
        return not self.entries

    def clear(self) -> None:
        """Clear all entries from index."""
        self.entries.clear()

    def build_tree(self) -> Tree:
        """
        Project the index into a single tree.

        Every entry becomes one tree entry named by its full path.
        """
        return Tree([TreeEntry(e.mode, e.path, e.hash) for e in self.entries.values()])

    def serialize(self) -> bytes:
        """
        Encode index in binary format.

        Format:
        - Header: 'DIRC' + version (4 bytes) + entry count (4 bytes)
        - Entries: sorted by path, each with metadata + path + NUL,
          padded to a multiple of 8 bytes
        - Checksum: SHA-1 of everything before it
        """
        content = bytearray()
        content.extend(SIGNATURE)
        content.extend(struct.pack('>II', self.version, len(self.entries)))

        for entry in self.sorted_entries():
            try:
                entry_data = struct.pack(
                    ENTRY_FORMAT,
                    entry.ctime,
                    entry.ctime_ns,
                    entry.mtime,
                    entry.mtime_ns,
                    entry.dev,
                    entry.ino,
                    entry.mode.value,
                    entry.uid,
                    entry.gid,
                    entry.size,
                    bytes.fromhex(entry.hash),
                    entry.flags
                )
            except struct.error as e:
                raise Malformed(f"Index entry {entry.path!r} cannot be encoded: {e}")

            path_bytes = entry.path.encode()
            content.extend(entry_data)
            content.extend(path_bytes)
            content.append(0)

            entry_len = ENTRY_SIZE + len(path_bytes) + 1
            content.extend(b'\x00' * ((8 - entry_len % 8) % 8))

        content.extend(hashlib.sha1(content).digest())
        return bytes(content)

    @classmethod
    def deserialize(cls, data: bytes) -> 'Index':
        """
        Decode index bytes.

        Raises:
            Malformed: On a bad signature, checksum or truncated entry
        """
        if len(data) < 12 + CHECKSUM_SIZE:
            raise Malformed("Index file is truncated")

        content = data[:-CHECKSUM_SIZE]
        if hashlib.sha1(content).digest() != data[-CHECKSUM_SIZE:]:
            raise Malformed("Index checksum mismatch")

        if content[:4] != SIGNATURE:
            raise Malformed(f"Invalid index signature: {content[:4]!r}")

        version, entry_count = struct.unpack('>II', content[4:12])
        index = cls(version)
        offset = 12

        for _ in range(entry_count):
            if offset + ENTRY_SIZE > len(content):
                raise Malformed("Index entry is truncated")
            fields = struct.unpack(ENTRY_FORMAT, content[offset:offset + ENTRY_SIZE])
            offset += ENTRY_SIZE

            path_end = content.find(b'\x00', offset)
            if path_end < 0:
                raise Malformed("Index entry path is not terminated")
            try:
                path = content[offset:path_end].decode()
            except UnicodeDecodeError:
                raise Malformed("Index entry path is not UTF-8")

            entry_len = ENTRY_SIZE + (path_end - offset) + 1
            offset = path_end + 1 + (8 - entry_len % 8) % 8

            try:
                mode = FileMode(fields[6])
            except ValueError:
                raise Malformed(f"Invalid mode {fields[6]:o} for index entry {path!r}")

            index.entries[path] = IndexEntry(
                path=path,
                hash=fields[10].hex(),
                mode=mode,
                size=fields[9],
                ctime=fields[0],
                ctime_ns=fields[1],
                mtime=fields[2],
                mtime_ns=fields[3],
                dev=fields[4],
                ino=fields[5],
                uid=fields[7],
                gid=fields[8],
                stage=fields[11] >> STAGE_SHIFT & 0x3
            )

        return index

    def write(self, index_path: Union[str, Path]) -> None:
        """Write index to disk."""
        atomic_write(index_path, self.serialize())
        logger.debug("wrote index with %d entries", len(self.entries))

    @classmethod
    def read(cls, index_path: Union[str, Path]) -> 'Index':
        """
        Read index from disk.

        A missing index file is an empty index.
        """
        path = Path(index_path)
        if not path.exists():
            return cls()
        return cls.deserialize(path.read_bytes())

    def __len__(self) -> int:
        return len(self.entries)

    def __contains__(self, path: str) -> bool:
        return path in self.entries

    def __eq__(self, other) -> bool:
        if not isinstance(other, Index):
            return NotImplemented
        return self.version == other.version and self.entries == other.entries

    def __repr__(self) -> str:
        return f"Index(version={self.version}, entries={len(self.entries)})"
