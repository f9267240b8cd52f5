"""Hash utilities for Grove."""

import hashlib
import string

HASH_LENGTH = 40

_HEX_DIGITS = set(string.hexdigits.lower())


def hash_object(data: bytes) -> str:
    """
    Compute SHA-1 hash of data.
    
    Args:
        data: Bytes to hash
        
    Returns:
        40-character hex string
    """
    return hashlib.sha1(data).hexdigest()


def hash_blob(content: bytes) -> str:
    """Hash content the way a stored blob of that content is hashed."""
    header = f"blob {len(content)}\0".encode()
    return hash_object(header + content)


def is_valid_hash(value: str) -> bool:
    """Check that value is a full 40-character lowercase hex digest."""
    return (
        isinstance(value, str)
        and len(value) == HASH_LENGTH
        and all(c in _HEX_DIGITS for c in value)
    )
