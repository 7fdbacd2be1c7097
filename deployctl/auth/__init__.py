"""Authentication token access for deployctl.

Public API:

- default_token_path: Where the login flow stores the bearer token
- read_token: Read the token file verbatim
"""

from .token import default_token_path, read_token

__all__ = ["default_token_path", "read_token"]
