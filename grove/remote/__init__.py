"""Remote reference discovery and cloning."""

from grove.remote.client import RemoteClient, RemoteRepository, parse_refs_response
from grove.remote.clone import CloneResult, clone

__all__ = ['RemoteClient', 'RemoteRepository', 'parse_refs_response', 'CloneResult', 'clone']
