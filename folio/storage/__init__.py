"""Collection storage: working file, backup mirror and remote origin."""

from .errors import (
    RecordIndexError,
    RemoteFetchError,
    StoreError,
    StoreParseError,
    StoreReadError,
    StoreWriteError,
)
from .models import Collection, Keypoint, TextField
from .remote import RemoteOriginClient
from .store import CollectionStore, LoadResult

__all__ = [
    "Collection",
    "CollectionStore",
    "Keypoint",
    "LoadResult",
    "RecordIndexError",
    "RemoteFetchError",
    "RemoteOriginClient",
    "StoreError",
    "StoreParseError",
    "StoreReadError",
    "StoreWriteError",
    "TextField",
]
