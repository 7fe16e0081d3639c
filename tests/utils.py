"""Shared helpers for folio tests."""

from __future__ import annotations

import json
import sys
from contextlib import contextmanager
from pathlib import Path
from typing import Any

from loguru import logger

from folio.storage import Collection, Keypoint, RemoteFetchError, TextField


def make_collection(record_id: int, title: str = "Untitled", **overrides: Any) -> Collection:
    """Build a fully populated collection for tests."""
    fields: dict[str, Any] = {
        "id": record_id,
        "client": f"Client {title}",
        "client_logo": "logo.svg",
        "accent_color": "#123456",
        "title": title,
        "tags": ["web", "design", "web"],
        "featured": "featured.png",
        "keypoints": [Keypoint(id=3, featured=["a", "b"], title="Point", summary="Why it matters")],
        "summary": f"Summary of {title}",
        "text_fields": [TextField(id=0, name="role", value="Lead")],
        "last_modified": "2024-01-01 00:00:00 UTC",
    }
    fields.update(overrides)
    return Collection(**fields)


def write_records(path: Path, records: list[Collection]) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps([record.model_dump(mode="json") for record in records]), encoding="utf-8")


def read_records(path: Path) -> list[dict[str, Any]]:
    return json.loads(path.read_text(encoding="utf-8"))


class FakeRemote:
    """Stands in for ``RemoteOriginClient``; records requested URLs."""

    def __init__(self, records: list[Collection] | None = None, error: Exception | None = None) -> None:
        self.records = records
        self.error = error
        self.calls: list[str] = []

    def fetch(self, url: str) -> list[Collection]:
        self.calls.append(url)
        if self.error is not None:
            raise self.error
        if self.records is None:
            raise RemoteFetchError(f"Failed to fetch {url}: unreachable")
        return list(self.records)


@contextmanager
def logger_to_stderr(level: str = "INFO"):
    """Temporarily route Loguru output to stderr for assertion."""

    handler_id = logger.add(sys.stderr, level=level)
    try:
        yield
    finally:
        logger.remove(handler_id)
