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

"""Artifact upload client for the deployment-management service.

UploadClient posts one software artifact to
``<server>/api/management/v1/deployments/artifacts`` as a multipart form
with three parts, in this order:

- ``size``: the artifact's byte length as a decimal string
- ``description``: free text, embedded verbatim
- ``artifact``: the file content, filename set to the artifact's base name

The whole body is buffered in memory first (so the request can carry an
exact Content-Length), then sent in a single POST carrying the bearer
token read from the token file. Progress bars cover both phases unless
disabled; they only observe the bytes and never change the payload.

Outcomes:

- 201 Created: success, an UploadResult is returned.
- 401 Unauthorized: AuthenticationError, same as a missing token file.
- Anything else: ServerRejectionError with the status and body text.

There are no retries. See deployctl.exceptions for the full taxonomy.

Example:
    ```python
    from deployctl.deployments import UploadClient

    with UploadClient("https://deploy.example.com", skip_verify=False) as client:
        result = client.upload_artifact(
            description="release 2.4",
            artifact_path="build/app-2.4.artifact",
            token_path="~/.cache/deployctl/authtoken",
            no_progress=True,
        )
    print(result.status_code)  # 201
    ```
"""

from __future__ import annotations

from collections.abc import Callable
import contextlib
from dataclasses import dataclass
import io
import os
from pathlib import Path
import shutil
from typing import BinaryIO

import requests

from deployctl.auth import read_token
from deployctl.exceptions import (
    ArtifactFileError,
    AuthenticationError,
    RequestPreparationError,
    ResponseReadError,
    ServerRejectionError,
    TransportError,
)
from deployctl.io.http import dump_request, dump_response, make_session
from deployctl.io.multipart import MultipartWriter
from deployctl.io.progress import ProgressReader, ProgressWriter, new_progress_bar
from deployctl.logging import Logger, get_global_logger
from deployctl.results import UploadResult

ARTIFACT_UPLOAD_PATH = "/api/management/v1/deployments/artifacts"

# Form field carrying the artifact content.
ARTIFACT_FIELD = "artifact"

# Chunk size used when copying the artifact into the multipart body.
COPY_CHUNK = 64 * 1024

TokenReader = Callable[[Path], bytes]
ArtifactOpener = Callable[[Path], BinaryIO]


def join_url(base: str, url: str) -> str:
    """Join a base URL and a relative path with exactly one slash.

    Strips one leading slash from ``url`` and makes sure ``base`` ends
    with a slash. Never fails; malformed input yields a malformed URL that
    the HTTP layer reports later.

    Example:
        ```python
        join_url("http://x", "/api/v1")   # "http://x/api/v1"
        join_url("http://x/", "api/v1")   # "http://x/api/v1"
        ```
    """
    if url.startswith("/"):
        url = url[1:]
    if not base.endswith("/"):
        base = base + "/"
    return base + url


@dataclass(frozen=True)
class ClientConfig:
    """Immutable connection settings of an UploadClient.

    Attributes:
        url: Base URL of the deployment service.
        artifact_upload_url: Absolute URL artifacts are posted to.
        skip_verify: Whether TLS certificate validation is skipped.
    """

    url: str
    artifact_upload_url: str
    skip_verify: bool = False

    @classmethod
    def from_url(cls, url: str, skip_verify: bool = False) -> ClientConfig:
        return cls(
            url=url,
            artifact_upload_url=join_url(url, ARTIFACT_UPLOAD_PATH),
            skip_verify=skip_verify,
        )


@dataclass(frozen=True)
class UploadRequest:
    """Parameters of a single artifact upload.

    Attributes:
        description: Free-text description, may be empty.
        artifact_path: Local path of the artifact file.
        token_path: Local path of the bearer token file.
        no_progress: Suppress progress bars and their stream wrappers.
    """

    description: str
    artifact_path: Path
    token_path: Path
    no_progress: bool = False


def _open_artifact(path: Path) -> BinaryIO:
    return open(path, "rb")


def _artifact_size(artifact: BinaryIO) -> int:
    try:
        return os.fstat(artifact.fileno()).st_size
    except io.UnsupportedOperation:
        # In-memory streams have no descriptor to stat.
        pos = artifact.tell()
        size = artifact.seek(0, io.SEEK_END)
        artifact.seek(pos)
        return size


class UploadClient:
    """Client for uploading artifacts to the deployment service.

    Construction does no I/O. The HTTP session and the two file-reading
    operations can be injected for tests; by default a retry-free
    requests.Session, deployctl.auth.read_token and ``open(path, "rb")``
    are used.

    Args:
        url: Base URL of the deployment service.
        skip_verify: Skip TLS certificate validation.
        session: Session to send requests with. When omitted, one is
            created with make_session() and closed by close().
        token_reader: Callable returning the raw token bytes for a path.
        artifact_opener: Callable returning an open binary file for a path.
        timeout: Optional timeout in seconds for the POST; None blocks
            until the server answers.
        logger: Logger for status and verbose output; defaults to the
            global logger at call time.
    """

    def __init__(
        self,
        url: str,
        skip_verify: bool = False,
        *,
        session: requests.Session | None = None,
        token_reader: TokenReader | None = None,
        artifact_opener: ArtifactOpener | None = None,
        timeout: float | None = None,
        logger: Logger | None = None,
    ) -> None:
        self.config = ClientConfig.from_url(url, skip_verify)
        self._owns_session = session is None
        self._session = session if session is not None else make_session(skip_verify)
        self._read_token = token_reader or read_token
        self._open_artifact = artifact_opener or _open_artifact
        self._timeout = timeout
        self._logger = logger

    @property
    def url(self) -> str:
        return self.config.url

    @property
    def artifact_upload_url(self) -> str:
        return self.config.artifact_upload_url

    def close(self) -> None:
        """Close the HTTP session if this client created it."""
        if self._owns_session:
            self._session.close()

    def __enter__(self) -> UploadClient:
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def upload_artifact(
        self,
        description: str,
        artifact_path: str | os.PathLike,
        token_path: str | os.PathLike,
        no_progress: bool = False,
    ) -> UploadResult:
        """Upload one artifact. See upload() for details."""
        return self.upload(
            UploadRequest(
                description=description,
                artifact_path=Path(artifact_path),
                token_path=Path(token_path),
                no_progress=no_progress,
            )
        )

    def upload(self, request: UploadRequest) -> UploadResult:
        """Upload one artifact and classify the server's answer.

        Args:
            request: What to upload and with which token.

        Returns:
            UploadResult describing the accepted upload.

        Raises:
            ArtifactFileError: The artifact cannot be opened or stat'd.
                Raised before any network activity.
            AuthenticationError: The token file is unreadable, or the
                server answered 401.
            RequestPreparationError: Copying the artifact into the body
                failed.
            TransportError: The POST did not complete (DNS, connection,
                TLS, timeout, or a header the HTTP layer rejects such as
                a token containing a line break).
            ResponseReadError: The body of a rejected upload could not be
                read.
            ServerRejectionError: Any status other than 201 and 401.
        """
        logger = self._logger or get_global_logger()
        artifact_path = Path(request.artifact_path)
        artifact_name = artifact_path.name

        try:
            artifact = self._open_artifact(artifact_path)
        except OSError as err:
            raise ArtifactFileError(f"Cannot read artifact file: {err}") from err

        with artifact:
            try:
                size = _artifact_size(artifact)
            except OSError as err:
                raise ArtifactFileError(
                    f"Cannot read artifact file stats: {err}"
                ) from err

            try:
                token = self._read_token(Path(request.token_path))
            except OSError as err:
                raise AuthenticationError(f"Please Login first: {err}") from err

            buf, content_type = self._buffer_multipart(
                artifact,
                artifact_name,
                size,
                request.description,
                progress=not request.no_progress,
                logger=logger,
            )

        body_size = buf.seek(0, io.SEEK_END)
        buf.seek(0)
        upload_bar = None
        if request.no_progress:
            body = buf.getvalue()
        else:
            logger.info(f"Uploading artifact to: {self.artifact_upload_url}")
            upload_bar = new_progress_bar(body_size)
            body = ProgressReader(buf, upload_bar, body_size)

        try:
            response = self._post(body, body_size, content_type, token, logger)
        finally:
            if upload_bar is not None:
                upload_bar.close()

        with response:
            return self._classify(response, artifact_path, size, body_size, logger)

    def _buffer_multipart(
        self,
        artifact: BinaryIO,
        artifact_name: str,
        size: int,
        description: str,
        *,
        progress: bool,
        logger: Logger,
    ) -> tuple[io.BytesIO, str]:
        """Serialize the size, description and artifact parts into memory."""
        buf = io.BytesIO()
        writer = MultipartWriter(buf)

        bar = None
        if progress:
            bar = new_progress_bar(size)
            logger.info("Buffering request")

        try:
            writer.write_field("size", str(size))
            writer.write_field("description", description)
            part = writer.create_form_file(ARTIFACT_FIELD, artifact_name)
            if bar is not None:
                part = ProgressWriter(part, bar)

            try:
                shutil.copyfileobj(artifact, part, COPY_CHUNK)
            except (OSError, ValueError) as err:
                # The copy error is reported; a failure to finalize the
                # framing after it is not.
                with contextlib.suppress(OSError, ValueError):
                    writer.close()
                raise RequestPreparationError(
                    f"error preparing multipart request: {err}"
                ) from err
            writer.close()
        finally:
            if bar is not None:
                bar.close()

        return buf, writer.content_type

    def _post(
        self,
        body: bytes | ProgressReader,
        body_size: int,
        content_type: str,
        token: bytes,
        logger: Logger,
    ) -> requests.Response:
        headers = {
            "Content-Type": content_type,
            # latin-1 maps every byte to one character, keeping the token verbatim.
            "Authorization": "Bearer " + token.decode("latin-1"),
            "Content-Length": str(body_size),
        }
        try:
            # Header validation (e.g. a token containing a line break) fails
            # here and is reported like any other failed POST.
            prepared = self._session.prepare_request(
                requests.Request(
                    "POST", self.artifact_upload_url, data=body, headers=headers
                )
            )
            logger.verbose("HTTP", f"sending request:\n{dump_request(prepared)}")

            # An explicit verify keeps REQUESTS_CA_BUNDLE from re-enabling
            # certificate checks on a skip-verify session.
            settings = self._session.merge_environment_settings(
                prepared.url,
                proxies={},
                stream=True,
                verify=self._session.verify,
                cert=None,
            )
            return self._session.send(prepared, timeout=self._timeout, **settings)
        except requests.RequestException as err:
            raise TransportError(f"POST /artifacts request failed: {err}") from err

    def _classify(
        self,
        response: requests.Response,
        artifact_path: Path,
        size: int,
        body_size: int,
        logger: Logger,
    ) -> UploadResult:
        if response.status_code == 201:
            # The body of an accepted upload is only logged, never required.
            try:
                content = response.content
            except requests.RequestException as err:
                content = None
                logger.verbose("HTTP", f"response body unavailable: {err}")
            logger.verbose("HTTP", f"response:\n{dump_response(response, content)}")
            return UploadResult(
                artifact_path=artifact_path,
                artifact_name=artifact_path.name,
                artifact_size=size,
                upload_url=self.artifact_upload_url,
                status_code=response.status_code,
                body_size=body_size,
            )

        try:
            content = response.content
        except requests.RequestException as err:
            raise ResponseReadError(f"can't read request body: {err}") from err
        logger.verbose("HTTP", f"response:\n{dump_response(response, content)}")

        reason = content.decode("utf-8", errors="replace")
        if response.status_code == 401:
            logger.verbose(
                "HTTP",
                f"artifact upload failed with status {response.status_code}, "
                f"reason: {reason}",
            )
            raise AuthenticationError("Unauthorized. Please Login first")
        raise ServerRejectionError(response.status_code, reason)
