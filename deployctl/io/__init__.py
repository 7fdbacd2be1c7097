"""Byte-stream and HTTP helpers for deployctl.

Modules:

multipart : module
    Incremental multipart/form-data writer.
progress : module
    Stream wrappers that report bytes to a tqdm progress bar.
http : module
    Upload session factory and request/response dumps for verbose logs.

Public API:

MultipartWriter : class
    Streams form fields and file parts into a binary writer.
ProgressReader, ProgressWriter : class
    Progress-tracked stream decorators.
new_progress_bar : function
    Create a byte-scaled progress bar.
make_session : function
    Create a requests.Session without retries, optionally skipping TLS checks.
"""

from .http import dump_request, dump_response, make_session
from .multipart import MultipartWriter
from .progress import ProgressReader, ProgressWriter, new_progress_bar

__all__ = [
    "MultipartWriter",
    "ProgressReader",
    "ProgressWriter",
    "new_progress_bar",
    "make_session",
    "dump_request",
    "dump_response",
]
