"""File-backed collection store with remote fallback and backup mirroring."""

from __future__ import annotations

import os
import tempfile
from dataclasses import dataclass
from pathlib import Path
from threading import Lock
from typing import Literal, Sequence

from loguru import logger
from pydantic import TypeAdapter, ValidationError

from folio.config import StorageConfig

from .errors import (
    RecordIndexError,
    RemoteFetchError,
    StoreError,
    StoreParseError,
    StoreReadError,
    StoreWriteError,
)
from .models import Collection
from .remote import RemoteOriginClient

_RECORDS = TypeAdapter(list[Collection])

LoadSource = Literal["local", "remote"]


@dataclass(frozen=True)
class LoadResult:
    """Outcome of a fallback load: which source won, or why none did."""

    records: list[Collection]
    source: LoadSource | None
    error: StoreError | None = None

    @property
    def ok(self) -> bool:
        return self.source is not None


class CollectionStore:
    """Owns the working file and keeps the dense-id invariant.

    Every operation re-reads the working file and rewrites it in full; the
    file on disk is the only state that survives a restart. Mutations are
    serialized by a per-instance lock and every write lands via
    ``os.replace`` so readers never see a half-written file.
    """

    def __init__(
        self,
        working_path: Path,
        backup_path: Path,
        remote_url: str | None,
        *,
        remote: RemoteOriginClient | None = None,
    ) -> None:
        self.working_path = Path(working_path)
        self.backup_path = Path(backup_path)
        self.remote_url = remote_url
        self.remote = remote or RemoteOriginClient()
        self._lock = Lock()

    @classmethod
    def from_config(cls, config: StorageConfig, *, remote: RemoteOriginClient | None = None) -> "CollectionStore":
        if remote is None:
            remote = RemoteOriginClient(
                timeout=config.remote_timeout,
                max_retries=config.max_retries,
                retry_delay=config.retry_delay,
            )
        try:
            remote_url = config.remote_file_url
        except EnvironmentError as exc:
            logger.warning("Remote origin is not configured: {}", exc)
            remote_url = None
        return cls(
            working_path=config.working_file,
            backup_path=config.backup_file,
            remote_url=remote_url,
            remote=remote,
        )

    # ------------------------------------------------------------------
    # Startup synchronisation
    # ------------------------------------------------------------------
    def load_with_fallback(self) -> LoadResult:
        """Load the working file, falling back to the remote origin."""
        logger.info("Loading local projects data from {}", self.working_path)
        try:
            records = self._read(self.working_path)
        except StoreError as exc:
            logger.warning("Failed to load local projects file: {}", exc)
        else:
            return LoadResult(records=records, source="local")

        if self.remote_url is None:
            error = RemoteFetchError("No remote origin URL is available")
            logger.error("Could not load remote projects file: {}", error)
            return LoadResult(records=[], source=None, error=error)

        logger.info("Loading remote projects data from {}", self.remote_url)
        try:
            records = self.remote.fetch(self.remote_url)
        except (RemoteFetchError, StoreParseError) as exc:
            logger.error("Could not load remote projects file: {}", exc)
            return LoadResult(records=[], source=None, error=exc)
        return LoadResult(records=records, source="remote")

    def initialize(self) -> LoadResult:
        """Sync the working and backup copies from the winning source.

        When neither the working file nor the remote origin is usable a
        single placeholder record is written instead, so the working file
        always exists afterwards.

        Raises:
            StoreWriteError: the working file could not be written.
        """
        with self._lock:
            result = self.load_with_fallback()
            if result.ok:
                records = result.records
                _warn_if_sparse(records, result.source)
                logger.info("Syncing local files from {} source ({} records)", result.source, len(records))
            else:
                records = [Collection.placeholder(0)]
                logger.warning("No data source available; writing a placeholder record")

            self._write(self.working_path, records)
            logger.info("Local working file written to {}", self.working_path)
            try:
                self._write(self.backup_path, records)
            except StoreWriteError as exc:
                logger.error("Failed to create backup file: {}", exc)
            else:
                logger.info("Local backup file written to {}", self.backup_path)
            return result

    # ------------------------------------------------------------------
    # Request-time operations
    # ------------------------------------------------------------------
    def list(self) -> list[Collection]:
        """Return every record in the working file."""
        return self._read(self.working_path)

    def get(self, record_id: int) -> Collection:
        records = self._read(self.working_path)
        if not 0 <= record_id < len(records):
            raise RecordIndexError(record_id, len(records))
        return records[record_id]

    def upsert(self, record: Collection) -> list[Collection]:
        """Replace the record with the same id, or append it.

        Appended records are renumbered to the next free position.
        """
        with self._lock:
            records = self._read(self.working_path)
            position = _position_of(records, record.id)
            if position is None:
                next_id = len(records)
                if record.id != next_id:
                    logger.warning(
                        "Collection '{}' sent with id {}; storing it as id {}",
                        record.title,
                        record.id,
                        next_id,
                    )
                    record = record.model_copy(update={"id": next_id})
                records.append(record)
                logger.info("Added collection {} ('{}')", record.id, record.title)
            else:
                records[position] = record
                logger.info("Updated collection {} ('{}')", record.id, record.title)
            self._write(self.working_path, records)
            return records

    def update(self, record: Collection) -> list[Collection]:
        """Replace the record with the same id; unknown ids are an error."""
        with self._lock:
            records = self._read(self.working_path)
            position = _position_of(records, record.id)
            if position is None:
                raise RecordIndexError(record.id, len(records))
            records[position] = record
            self._write(self.working_path, records)
            logger.info("Updated collection {} ('{}')", record.id, record.title)
            return records

    def delete(self, record_id: int) -> list[Collection]:
        """Remove the record at ``record_id`` and renumber the rest."""
        with self._lock:
            records = self._read(self.working_path)
            if not 0 <= record_id < len(records):
                raise RecordIndexError(record_id, len(records))
            removed = records.pop(record_id)
            records = [item.model_copy(update={"id": index}) for index, item in enumerate(records)]
            self._write(self.working_path, records)
            logger.info("Deleted collection {} ('{}'); {} records remain", record_id, removed.title, len(records))
            return records

    # ------------------------------------------------------------------
    # File helpers
    # ------------------------------------------------------------------
    def _read(self, path: Path) -> list[Collection]:
        try:
            raw = path.read_bytes()
        except OSError as exc:
            raise StoreReadError(f"Could not read {path}: {exc}") from exc
        try:
            return _RECORDS.validate_json(raw)
        except ValidationError as exc:
            raise StoreParseError(f"Projects data in {path} is malformed: {exc}") from exc

    def _write(self, path: Path, records: Sequence[Collection]) -> None:
        payload = _RECORDS.dump_json(list(records), indent=2)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=path.parent)
            try:
                with os.fdopen(fd, "wb") as handle:
                    handle.write(payload)
                    handle.flush()
                    os.fsync(handle.fileno())
                os.replace(tmp_name, path)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except OSError as exc:
            raise StoreWriteError(f"Could not write {path}: {exc}") from exc


def _position_of(records: Sequence[Collection], record_id: int) -> int | None:
    for index, item in enumerate(records):
        if item.id == record_id:
            return index
    return None


def _warn_if_sparse(records: Sequence[Collection], source: str | None) -> None:
    ids = [item.id for item in records]
    if ids != list(range(len(ids))):
        logger.warning("Records loaded from {} source do not have dense ids: {}", source, ids)


__all__ = ["CollectionStore", "LoadResult"]
