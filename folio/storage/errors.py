"""Exceptions raised by the collection store."""

from __future__ import annotations


class StoreError(RuntimeError):
    """Base class for every storage failure."""


class StoreReadError(StoreError):
    """A local store file could not be opened or read."""


class StoreWriteError(StoreError):
    """A local store file could not be written."""


class StoreParseError(StoreError):
    """Store content is not valid JSON or does not match the record schema."""


class RemoteFetchError(StoreError):
    """The remote origin was unreachable or answered with an error status."""


class RecordIndexError(StoreError, IndexError):
    """An operation referenced an id outside the current sequence."""

    def __init__(self, record_id: int, size: int) -> None:
        self.record_id = record_id
        self.size = size
        super().__init__(f"No collection with id {record_id} (store holds {size} records)")


__all__ = [
    "RecordIndexError",
    "RemoteFetchError",
    "StoreError",
    "StoreParseError",
    "StoreReadError",
    "StoreWriteError",
]
