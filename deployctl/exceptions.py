# Copyright 2025 Roger Cibrian
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""Exception hierarchy for deployctl.

This module defines a custom exception hierarchy that allows library users
to tell apart the different ways an artifact upload can fail. All exceptions
inherit from DeployCtlError, allowing users to catch every deployctl error
with a single except clause if needed.

Errors raised after a request was attempted (transport failures, server
rejections, unreadable responses) share the NetworkError base. The original
cause is always chained with ``raise ... from err``.

Example:
    Catching specific error types:
        ```python
        from deployctl.deployments import UploadClient
        from deployctl.exceptions import AuthenticationError, NetworkError

        client = UploadClient("https://deploy.example.com")
        try:
            client.upload_artifact("nightly", "app.artifact", "authtoken")
        except AuthenticationError:
            print("Run the login command again")
        except NetworkError as e:
            print(f"Upload failed: {e}")
        ```

    Catching all deployctl errors:
        ```python
        from deployctl.exceptions import DeployCtlError

        try:
            client.upload_artifact("nightly", "app.artifact", "authtoken")
        except DeployCtlError as e:
            print(f"Error: {e}")
        ```
"""

from __future__ import annotations

__all__ = [
    "DeployCtlError",
    "ConfigError",
    "ArtifactFileError",
    "AuthenticationError",
    "RequestPreparationError",
    "NetworkError",
    "TransportError",
    "ServerRejectionError",
    "ResponseReadError",
]


class DeployCtlError(Exception):
    """Base exception for all deployctl errors.

    All deployctl-specific exceptions inherit from this class, allowing users
    to catch all deployctl errors with a single except clause if needed.
    """

    pass


class ConfigError(DeployCtlError):
    """Raised for configuration-related errors.

    This exception is raised when there are problems with:

    - A settings file given explicitly that does not exist
    - YAML parse errors or a top-level value that is not a mapping
    - Values of the wrong type (non-boolean skip_verify, non-numeric timeout)
    - No server URL configured by any layer
    """

    pass


class ArtifactFileError(DeployCtlError):
    """Raised when the artifact file cannot be opened or stat'd.

    No network call is attempted when this is raised.
    """

    pass


class AuthenticationError(DeployCtlError):
    """Raised when the caller is not currently authenticated.

    Covers both an unreadable token file and a 401 response from the
    server. Either way the user has to log in again.

    Example:
        ```python
        from deployctl.exceptions import AuthenticationError

        try:
            client.upload_artifact("", "app.artifact", token_path)
        except AuthenticationError as e:
            print(e)  # "Unauthorized. Please Login first"
        ```
    """

    pass


class RequestPreparationError(DeployCtlError):
    """Raised when artifact bytes could not be copied into the request body."""

    pass


class NetworkError(DeployCtlError):
    """Base for errors raised once a request has been attempted.

    Subclasses distinguish a request that never completed
    (TransportError) from one the server answered with a rejection
    (ServerRejectionError) or whose rejection body could not be read
    (ResponseReadError).
    """

    pass


class TransportError(NetworkError):
    """Raised when the request itself fails.

    DNS failures, refused connections, TLS negotiation errors and timeouts
    all end up here.
    """

    pass


class ServerRejectionError(NetworkError):
    """Raised for any response status other than 201 and 401.

    Attributes:
        status_code: HTTP status code returned by the server.
        body: Raw response body text, verbatim.
    """

    def __init__(self, status_code: int, body: str) -> None:
        self.status_code = status_code
        self.body = body
        super().__init__(
            f"artifact upload failed with status {status_code}, reason: {body}"
        )


class ResponseReadError(NetworkError):
    """Raised when the body of a rejected request could not be read."""

    pass
