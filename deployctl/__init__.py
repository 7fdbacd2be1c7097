"""
deployctl - artifact upload client

A command-line client for uploading software artifacts to a
deployment-management service over HTTPS, authenticating with the bearer
token stored by a prior login.

deployctl provides:
  - Multipart artifact upload with buffering and upload progress bars
  - Distinct errors for missing files, missing login, transport failures
    and server rejections
  - Layered settings (YAML file, DEPLOYCTL_* environment, .env, flags)
  - Optional TLS verification bypass for test servers

Quick Start
-----------
Upload an artifact:

    $ deployctl upload build/app.artifact --server https://deploy.example.com

For full CLI documentation:

    $ deployctl --help

Package Structure
-----------------
cli : module
    Command-line interface with argparse.
deployments : package
    Upload client for the deployment service.
config : package
    Settings loading.
auth : package
    Bearer token location and reading.
io : package
    Multipart writer, progress wrappers, HTTP session helpers.

Public API
----------
    from deployctl.deployments import UploadClient, join_url
    from deployctl.config import load_settings
    from deployctl.exceptions import DeployCtlError
"""

__version__ = "0.1.0"
__description__ = "Upload artifacts to a deployment-management service"

# Re-export commonly used names for convenience
from deployctl.config import Settings, load_settings
from deployctl.deployments import UploadClient, UploadRequest, join_url
from deployctl.exceptions import (
    ArtifactFileError,
    AuthenticationError,
    ConfigError,
    DeployCtlError,
    NetworkError,
    RequestPreparationError,
    ResponseReadError,
    ServerRejectionError,
    TransportError,
)
from deployctl.results import UploadResult

__all__ = [
    "__version__",
    "__description__",
    "UploadClient",
    "UploadRequest",
    "UploadResult",
    "join_url",
    "Settings",
    "load_settings",
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
