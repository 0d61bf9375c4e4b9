"""Short random identifiers for specifications, conditions and presets."""

from __future__ import annotations

import secrets


def new_id() -> str:
    """Twelve URL-safe characters from nine random bytes (``default_factory`` friendly)."""
    return secrets.token_urlsafe(9)


__all__ = ["new_id"]
