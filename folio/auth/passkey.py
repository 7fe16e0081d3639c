"""Access to the shared secret kept on local disk."""

from __future__ import annotations

from pathlib import Path


class PasskeyUnavailableError(RuntimeError):
    """Raised when the passkey file cannot be opened or read."""


class PasskeyStore:
    """Reads the shared secret from a fixed file.

    The content is returned verbatim: a file ending in a newline holds a
    different secret than the same text without one.
    """

    def __init__(self, path: Path = Path("key/pass.key")) -> None:
        self.path = Path(path)

    def read(self) -> str:
        try:
            with self.path.open("r", encoding="utf-8", newline="") as handle:
                return handle.read()
        except (OSError, UnicodeDecodeError) as exc:
            raise PasskeyUnavailableError(f"Could not read key file {self.path}: {exc}") from exc


__all__ = ["PasskeyStore", "PasskeyUnavailableError"]
