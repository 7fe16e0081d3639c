"""Shared-secret check applied to mutating requests."""

from __future__ import annotations

import secrets

from loguru import logger

from .passkey import PasskeyStore, PasskeyUnavailableError


class AuthorizationError(PermissionError):
    """The presented token does not match the stored passkey."""

    def __init__(self) -> None:
        super().__init__("Authorization token is incorrect.")


class AuthGate:
    """Compares presented tokens with the current passkey on disk."""

    def __init__(self, passkeys: PasskeyStore) -> None:
        self.passkeys = passkeys

    def authorize(self, presented_token: str) -> None:
        """Return ``None`` when ``presented_token`` matches, else raise.

        The passkey is re-read on every call. Comparison is an exact byte
        match done with :func:`secrets.compare_digest`.
        """
        try:
            expected = self.passkeys.read()
        except PasskeyUnavailableError as exc:
            logger.error("Rejecting request, passkey unavailable: {}", exc)
            raise AuthorizationError() from exc

        if not secrets.compare_digest(presented_token.encode("utf-8"), expected.encode("utf-8")):
            logger.warning("Failed to authorize: token mismatch")
            raise AuthorizationError()
        logger.debug("Accepted authorization token")


__all__ = ["AuthGate", "AuthorizationError"]
