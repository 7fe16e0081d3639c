"""Record types persisted in the collection store."""

from __future__ import annotations

from datetime import datetime, timezone

from pydantic import BaseModel, Field

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S UTC"


class Keypoint(BaseModel):
    """A highlighted point of a collection; ``id`` is scoped to its parent."""

    id: int
    featured: list[str]
    title: str
    summary: str


class TextField(BaseModel):
    """Free-form named text shown alongside a collection."""

    id: int
    name: str
    value: str


class Collection(BaseModel):
    """A single catalogue entry.

    ``id`` equals the record's position in the persisted sequence.
    """

    id: int = Field(ge=0)
    client: str
    client_logo: str
    accent_color: str
    title: str
    tags: list[str]
    featured: str
    keypoints: list[Keypoint]
    summary: str
    text_fields: list[TextField] = Field(default_factory=list)
    last_modified: str = ""

    @classmethod
    def placeholder(cls, record_id: int = 0, *, now: datetime | None = None) -> "Collection":
        """Build the synthetic record written when no data source is available."""
        stamp = (now or datetime.now(timezone.utc)).strftime(TIMESTAMP_FORMAT)
        return cls(
            id=record_id,
            client=f"New Client {record_id}",
            client_logo="n/a",
            accent_color="#cacaca",
            title=f"New Title {record_id}",
            tags=["Default"],
            featured="n/a",
            keypoints=[
                Keypoint(
                    id=0,
                    featured=["n/a"],
                    title=f"New Keypoint 1 - {record_id}",
                    summary=f"New Summary 1 - {record_id}",
                )
            ],
            summary=f"New Summary {record_id}",
            text_fields=[],
            last_modified=stamp,
        )


__all__ = ["Collection", "Keypoint", "TextField", "TIMESTAMP_FORMAT"]
