"""Small helpers for writing repository files."""

import logging
import os
from pathlib import Path
from typing import Union

logger = logging.getLogger(__name__)

LOCK_SUFFIX = '.lock'


def atomic_write(path: Union[str, Path], data: Union[bytes, str]) -> None:
    """
    Replace a file's contents in one step.

    The data is written to a ``.lock`` sibling which is then renamed over
    the target, so readers see either the old or the new contents.

    Args:
        path: Destination file
        data: Contents (str is encoded as UTF-8)
    """
    path = Path(path)
    if isinstance(data, str):
        data = data.encode()

    lock_path = path.with_name(path.name + LOCK_SUFFIX)
    path.parent.mkdir(parents=True, exist_ok=True)
    try:
        with open(lock_path, 'wb') as f:
            f.write(data)
        os.replace(lock_path, path)
    except OSError:
        if lock_path.exists():
            lock_path.unlink()
        raise

    logger.debug("wrote %s (%d bytes)", path, len(data))
