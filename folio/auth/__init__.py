"""Shared-secret authentication for mutating endpoints."""

from .gate import AuthGate, AuthorizationError
from .passkey import PasskeyStore, PasskeyUnavailableError

__all__ = ["AuthGate", "AuthorizationError", "PasskeyStore", "PasskeyUnavailableError"]
