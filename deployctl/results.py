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

"""Public API return types for deployctl.

All dataclasses are frozen (immutable) to prevent accidental mutation of
return values.

Example:
    Using result types:
        ```python
        from deployctl.deployments import UploadClient
        from deployctl.results import UploadResult

        client = UploadClient("https://deploy.example.com")
        result: UploadResult = client.upload_artifact(
            "nightly build", "build/app.artifact", "~/.cache/deployctl/authtoken"
        )
        print(result.artifact_size)
        ```
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class UploadResult:
    """Result from a successful artifact upload.

    Attributes:
        artifact_path: Path of the uploaded artifact file.
        artifact_name: Base filename reported in the multipart file part.
        artifact_size: Artifact size in bytes, as sent in the "size" field.
        upload_url: Absolute URL the artifact was posted to.
        status_code: HTTP status returned by the server (always 201).
        body_size: Length of the serialized multipart body in bytes.
    """

    artifact_path: Path
    artifact_name: str
    artifact_size: int
    upload_url: str
    status_code: int
    body_size: int
