"""
HTTP reference discovery against a smart-HTTP remote.

Only the ref advertisement is fetched; pack negotiation is not
implemented.
"""

import logging
from dataclasses import dataclass, field
from typing import Optional

import requests

from ..core.errors import RemoteError
from ..core.hash import is_valid_hash

logger = logging.getLogger(__name__)

SERVICE = 'git-upload-pack'
HEADS_PREFIX = 'refs/heads/'


@dataclass
class RemoteRepository:
    """Advertised references of a remote, keyed by full ref name."""
    url: str
    name: str = 'origin'
    refs: dict[str, str] = field(default_factory=dict)

    def add_ref(self, ref_name: str, obj_hash: str) -> None:
        self.refs[ref_name] = obj_hash

    @property
    def branches(self) -> dict[str, str]:
        """Branch name -> hash for every advertised refs/heads/ ref."""
        return {
            name[len(HEADS_PREFIX):]: obj_hash
            for name, obj_hash in sorted(self.refs.items())
            if name.startswith(HEADS_PREFIX)
        }

    def default_branch(self) -> Optional[str]:
        """main, then master, then the first advertised branch."""
        branches = self.branches
        for candidate in ('main', 'master'):
            if candidate in branches:
                return candidate
        return next(iter(branches), None)


def _is_pkt_stream(content: str) -> bool:
    try:
        length = int(content[:4], 16)
    except ValueError:
        return False
    return length == 0 or (4 < length <= len(content) and content[length - 1] == '\n')


def _pkt_lines(content: str):
    """Split a pkt-line stream into payloads; flush packets are dropped."""
    pos = 0
    while pos + 4 <= len(content):
        try:
            length = int(content[pos:pos + 4], 16)
        except ValueError:
            return
        if length == 0:
            pos += 4
            continue
        if length < 4:
            return
        yield content[pos + 4:pos + length]
        pos += length


def parse_refs_response(content: str, url: str, name: str = 'origin') -> RemoteRepository:
    """
    Parse a ref advertisement.

    Accepts either pkt-line framing (``001e# service=...``, capability
    list after a NUL on the first ref) or plain ``<hash> <ref>`` lines.
    Lines that do not carry a valid hash are ignored.
    """
    remote = RemoteRepository(url, name)

    if _is_pkt_stream(content):
        payloads = list(_pkt_lines(content))
    else:
        payloads = content.splitlines()

    for payload in payloads:
        payload = payload.split('\0', 1)[0].strip()
        if not payload or payload.startswith('#'):
            continue

        parts = payload.split()
        if len(parts) < 2 or not is_valid_hash(parts[0]):
            logger.warning("ignoring ref advertisement line %r", payload)
            continue
        remote.add_ref(parts[1], parts[0])

    logger.info("discovered %d references at %s", len(remote.refs), url)
    return remote


class RemoteClient:
    """
    Client for a remote repository's ref advertisement.

    Args:
        session: requests session to use (one is created when omitted)
        timeout: Request timeout in seconds
    """

    def __init__(self, session: Optional[requests.Session] = None, timeout: int = 30):
        from .. import __version__

        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update({
            'User-Agent': f'grove/{__version__}',
            'Git-Protocol': 'version=1',
        })

    def discover_refs(self, url: str, name: str = 'origin') -> RemoteRepository:
        """
        Fetch and parse ``{url}/info/refs?service=git-upload-pack``.

        Raises:
            RemoteError: On a network failure or a non-success status
        """
        info_refs_url = f"{url.rstrip('/')}/info/refs"
        try:
            response = self.session.get(
                info_refs_url,
                params={'service': SERVICE},
                timeout=self.timeout
            )
            response.raise_for_status()
        except requests.RequestException as e:
            raise RemoteError(f"Failed to fetch references from {url}: {e}")

        return parse_refs_response(response.text, url, name)
