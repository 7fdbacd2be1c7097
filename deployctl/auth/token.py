"""
Bearer token storage for deployctl.

The login flow (outside this package) writes the token returned by the
deployment service to a file; uploads read it back verbatim and send it as
``Authorization: Bearer <token>``. The token is opaque here: it is never
parsed, validated, refreshed or trimmed.
"""

from __future__ import annotations

import os
from pathlib import Path

# Relative to the user's cache directory (XDG_CACHE_HOME or ~/.cache).
TOKEN_RELPATH = Path("deployctl") / "authtoken"


def default_token_path() -> Path:
    """
    Location the login flow writes the token to.

    Honours XDG_CACHE_HOME, falling back to ~/.cache.
    """
    cache_home = os.getenv("XDG_CACHE_HOME")
    base = Path(cache_home) if cache_home else Path.home() / ".cache"
    return base / TOKEN_RELPATH


def read_token(path: str | os.PathLike) -> bytes:
    """
    Read the raw token bytes from ``path``.

    Trailing whitespace and newlines are preserved. Raises OSError
    (FileNotFoundError, PermissionError, ...) when the file is unreadable;
    callers translate that into an authentication failure.
    """
    return Path(path).expanduser().read_bytes()
