"""Deployment service clients for deployctl.

Public API:

- UploadClient: Uploads artifacts to the deployment-management service
- UploadRequest: Parameters of a single upload
- ClientConfig: Immutable connection settings of a client
- join_url: Join a base URL and a relative path with exactly one slash

Example:
    from deployctl.deployments import UploadClient

    client = UploadClient("https://deploy.example.com")
    client.upload_artifact("", "app.artifact", "authtoken", no_progress=True)
"""

from .client import (
    ARTIFACT_UPLOAD_PATH,
    ClientConfig,
    UploadClient,
    UploadRequest,
    join_url,
)

__all__ = [
    "ARTIFACT_UPLOAD_PATH",
    "ClientConfig",
    "UploadClient",
    "UploadRequest",
    "join_url",
]
