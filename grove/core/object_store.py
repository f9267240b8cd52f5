"""Content-addressed object database."""

import logging
import re
import zlib
from pathlib import Path
from typing import Iterator, Union

from .errors import Malformed, NotFound
from .hash import hash_object, is_valid_hash
from .objects import OBJECT_TYPES, GroveObject
from ..utils.fileio import atomic_write

logger = logging.getLogger(__name__)

_SHARD_RE = re.compile(r'^[0-9a-f]{2}$')
_REST_RE = re.compile(r'^[0-9a-f]{38}$')


def parse_object(content: bytes, obj_hash: str = '') -> GroveObject:
    """
    Decode canonical object bytes.

    Args:
        content: Uncompressed ``<type> <size>\\0<payload>`` bytes
        obj_hash: Hash used in error messages

    Returns:
        GroveObject: Decoded Blob, Tree or Commit

    Raises:
        Malformed: On a bad header, a size mismatch or an unknown type
    """
    label = obj_hash or 'object'
    null_idx = content.find(b'\0')
    if null_idx < 0:
        raise Malformed(f"{label}: missing object header")

    header = content[:null_idx].decode('ascii', errors='replace')
    data = content[null_idx + 1:]

    obj_type, _, size_str = header.partition(' ')
    try:
        size = int(size_str)
    except ValueError:
        raise Malformed(f"{label}: invalid object header {header!r}")

    if len(data) != size:
        raise Malformed(f"{label}: size mismatch, header says {size}, payload has {len(data)}")

    obj_class = OBJECT_TYPES.get(obj_type)
    if obj_class is None:
        raise Malformed(f"{label}: unknown object type {obj_type!r}")

    obj = obj_class()
    obj.deserialize(data)
    return obj


class ObjectStore:
    """
    Loose object database under ``objects/``.

    Objects are zlib-compressed canonical encodings stored at
    ``objects/<first 2 hex>/<remaining 38 hex>``.
    """

    def __init__(self, objects_dir: Union[str, Path]):
        self.objects_dir = Path(objects_dir)

    def init(self) -> None:
        """Create the objects directory with its info and pack subdirectories."""
        (self.objects_dir / 'info').mkdir(parents=True, exist_ok=True)
        (self.objects_dir / 'pack').mkdir(parents=True, exist_ok=True)

    def object_path(self, obj_hash: str) -> Path:
        return self.objects_dir / obj_hash[:2] / obj_hash[2:]

    def _is_intact(self, obj_hash: str) -> bool:
        try:
            content = zlib.decompress(self.object_path(obj_hash).read_bytes())
        except (OSError, zlib.error):
            return False
        return hash_object(content) == obj_hash

    def _write_canonical(self, obj_hash: str, content: bytes) -> str:
        path = self.object_path(obj_hash)
        if path.exists():
            if self._is_intact(obj_hash):
                return obj_hash
            logger.warning("rewriting damaged object %s", obj_hash)

        atomic_write(path, zlib.compress(content))
        logger.debug("stored object %s (%d bytes)", obj_hash, len(content))
        return obj_hash

    def store_object(self, obj: GroveObject) -> str:
        """
        Write object to the store.

        Storing the same content twice is a no-op. An existing file that
        does not decompress to this content is replaced.

        Args:
            obj: Object to write

        Returns:
            str: SHA-1 hash of the object
        """
        content = obj.canonical()
        return self._write_canonical(hash_object(content), content)

    def load_object(self, obj_hash: str) -> GroveObject:
        """
        Read object from the store.

        Raises:
            NotFound: If no object with this hash exists
            Malformed: If the stored bytes cannot be decoded
        """
        path = self.object_path(obj_hash)
        if not is_valid_hash(obj_hash) or not path.is_file():
            raise NotFound(f"Object {obj_hash} not found")

        try:
            content = zlib.decompress(path.read_bytes())
        except zlib.error as e:
            raise Malformed(f"{obj_hash}: corrupt compression ({e})")

        return parse_object(content, obj_hash)

    def object_exists(self, obj_hash: str) -> bool:
        return is_valid_hash(obj_hash) and self.object_path(obj_hash).is_file()

    def list_objects(self) -> list[str]:
        """
        List every object hash in the store.

        Directories other than two-hex-character shards (``info``,
        ``pack``) are skipped.

        Returns:
            list[str]: Sorted object hashes
        """
        if not self.objects_dir.is_dir():
            return []

        hashes = []
        for shard in sorted(self.objects_dir.iterdir()):
            if not shard.is_dir() or not _SHARD_RE.match(shard.name):
                continue
            for obj_file in sorted(shard.iterdir()):
                if not obj_file.is_file() or not _REST_RE.match(obj_file.name):
                    logger.warning("skipping unexpected entry %s", obj_file)
                    continue
                hashes.append(shard.name + obj_file.name)
        return hashes

    def iter_objects(self) -> Iterator[tuple[str, GroveObject]]:
        """Yield (hash, object) pairs, skipping objects that fail to decode."""
        for obj_hash in self.list_objects():
            try:
                yield obj_hash, self.load_object(obj_hash)
            except (Malformed, NotFound) as e:
                logger.warning("skipping object %s: %s", obj_hash, e)

    def import_object(self, content: bytes) -> str:
        """
        Store canonical bytes received from another repository.

        The bytes are decoded first so that only well-formed objects
        enter the store.

        Returns:
            str: Hash of the imported object
        """
        obj_hash = hash_object(content)
        parse_object(content, obj_hash)
        return self._write_canonical(obj_hash, content)

    def count_objects(self) -> tuple[int, int]:
        """
        Count loose objects.

        Returns:
            tuple: (number of objects, total compressed bytes)
        """
        count = 0
        size = 0
        for obj_hash in self.list_objects():
            count += 1
            size += self.object_path(obj_hash).stat().st_size
        return count, size
