"""Pytest helpers for path configuration and shared fixtures."""

from __future__ import annotations

import sys
from pathlib import Path

import pytest

_REPO_ROOT = Path(__file__).resolve().parents[1]
if str(_REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(_REPO_ROOT))

from folio.storage import CollectionStore  # noqa: E402
from tests.utils import FakeRemote  # noqa: E402

REMOTE_URL = "http://origin.test/projects.json"


@pytest.fixture()
def working_file(tmp_path: Path) -> Path:
    return tmp_path / "data" / "projects.json"


@pytest.fixture()
def backup_file(tmp_path: Path) -> Path:
    return tmp_path / "backup" / "projects.json"


@pytest.fixture()
def unreachable_remote() -> FakeRemote:
    return FakeRemote()


@pytest.fixture()
def store(working_file: Path, backup_file: Path, unreachable_remote: FakeRemote) -> CollectionStore:
    """A store whose remote origin is always unreachable."""
    return CollectionStore(working_file, backup_file, REMOTE_URL, remote=unreachable_remote)
