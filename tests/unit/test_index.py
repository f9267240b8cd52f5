"""Index tests."""

import hashlib

import pytest

from grove.core.errors import Malformed
from grove.core.index import ENTRY_SIZE, Index, IndexEntry
from grove.core.objects import FileMode


def make_entry(path, char='a', **kwargs):
    return IndexEntry(path=path, hash=char * 40, **kwargs)


def test_index_creation():
    """Test creating empty index."""
    index = Index()
    assert len(index) == 0
    assert index.version == 2
    assert index.is_empty()


def test_index_add_and_replace_entry():
    """Test the most recent add for a path wins."""
    index = Index()
    index.add_entry(make_entry('test.txt', 'a', size=100))
    index.add_entry(make_entry('test.txt', 'b', size=200))

    assert len(index) == 1
    assert index.get_entry('test.txt').hash == 'b' * 40
    assert index.get_entry('test.txt').size == 200
    assert 'test.txt' in index


def test_index_add_rejects_bad_hash():
    """Test entries must carry a full hex digest."""
    with pytest.raises(Malformed):
        Index().add_entry(IndexEntry(path='x', hash='abc'))


def test_index_add_rejects_bad_stage():
    """Test stages above 3 are refused."""
    with pytest.raises(Malformed):
        Index().add_entry(make_entry('x', stage=4))


def test_index_remove_entry():
    """Test removing entry from index."""
    index = Index()
    index.add_entry(make_entry('test.txt'))

    assert index.remove_entry('test.txt')
    assert not index.remove_entry('test.txt')
    assert index.get_entry('test.txt') is None


def test_index_clear():
    """Test clearing index."""
    index = Index()
    index.add_entry(make_entry('file1.txt', 'a'))
    index.add_entry(make_entry('file2.txt', 'b'))

    index.clear()
    assert len(index) == 0


def test_entry_flags():
    """Test flags carry the stage and the clamped path length."""
    assert make_entry('abc').flags == 3
    assert make_entry('abc', stage=2).flags == (2 << 12) | 3
    assert make_entry('x' * 5000).flags == 0x0FFF


def test_serialize_layout():
    """Test header, entry padding and trailer sizes."""
    index = Index()
    index.add_entry(make_entry('a.txt'))
    data = index.serialize()

    assert data[:4] == b'DIRC'
    assert data[4:8] == b'\x00\x00\x00\x02'
    assert data[8:12] == b'\x00\x00\x00\x01'
    entry_len = len(data) - 12 - 20
    assert entry_len % 8 == 0
    assert entry_len >= ENTRY_SIZE + len('a.txt') + 1


def test_roundtrip_preserves_entries():
    """Test decode(encode(index)) reproduces every field."""
    index = Index(version=3)
    index.add_entry(make_entry('zebra.txt', 'a', size=10, mtime=1700000000, mtime_ns=5, ino=42))
    index.add_entry(make_entry('bin/run.sh', 'b', mode=FileMode.EXECUTABLE, size=7))
    index.add_entry(make_entry('conflict.txt', 'c', stage=1))
    index.add_entry(make_entry('other.txt', 'd', stage=3))
    index.add_entry(make_entry('dir/sub/ünïcode.txt', 'e', uid=1000, gid=1000))

    decoded = Index.deserialize(index.serialize())

    assert decoded == index
    assert decoded.version == 3
    assert decoded.get_entry('conflict.txt').stage == 1
    assert decoded.get_entry('other.txt').stage == 3
    assert decoded.get_entry('bin/run.sh').mode is FileMode.EXECUTABLE


def test_sorted_entries():
    """Test entries come back in path order."""
    index = Index()
    for path in ['zebra.txt', 'apple.txt', 'middle.txt']:
        index.add_entry(make_entry(path))

    decoded = Index.deserialize(index.serialize())
    assert [e.path for e in decoded.sorted_entries()] == ['apple.txt', 'middle.txt', 'zebra.txt']


def test_deserialize_checksum_mismatch():
    """Test a flipped byte fails the trailer check."""
    index = Index()
    index.add_entry(make_entry('a.txt'))
    data = bytearray(index.serialize())
    data[20] ^= 0xFF

    with pytest.raises(Malformed):
        Index.deserialize(bytes(data))


def test_deserialize_bad_signature():
    """Test a non-DIRC header is rejected."""
    body = b'XXXX' + b'\x00\x00\x00\x02' + b'\x00\x00\x00\x00'
    with pytest.raises(Malformed):
        Index.deserialize(body + hashlib.sha1(body).digest())


def test_deserialize_truncated():
    """Test short input is rejected."""
    with pytest.raises(Malformed):
        Index.deserialize(b'DIRC')


def test_write_and_read(tmp_path):
    """Test writing and reading index from disk."""
    index = Index()
    index.add_entry(make_entry('file1.txt', 'a', size=100))
    index.add_entry(make_entry('file2.txt', 'b', mode=FileMode.EXECUTABLE, size=200))

    path = tmp_path / 'index'
    index.write(path)

    assert Index.read(path) == index
    assert not (tmp_path / 'index.lock').exists()


def test_read_nonexistent(tmp_path):
    """Test reading a missing index yields an empty one."""
    assert len(Index.read(tmp_path / 'missing')) == 0


def test_build_tree_is_flat():
    """Test every entry becomes one tree entry named by its path."""
    index = Index()
    index.add_entry(make_entry('src/main.py', 'a'))
    index.add_entry(make_entry('README.md', 'b'))

    tree = index.build_tree()
    assert [e.name for e in tree.entries] == ['README.md', 'src/main.py']
    assert {e.name: e.hash for e in tree.entries}['src/main.py'] == 'a' * 40
    assert all(e.mode is FileMode.REGULAR for e in tree.entries)


def test_index_repr():
    """Test index string representation."""
    index = Index()
    assert 'entries=0' in repr(index)
    index.add_entry(make_entry('test.txt'))
    assert 'entries=1' in repr(index)
