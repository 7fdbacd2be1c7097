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

"""Incremental multipart/form-data writer.

MultipartWriter serializes form fields and file parts into any binary
stream as they are added, so large file parts can be copied in chunks
instead of being held as a single bytes object. Part headers are rendered
with urllib3's RequestField, and the framing is byte-for-byte what
urllib3.encode_multipart_formdata produces for the same boundary and
fields.

Example:
    ```python
    import io
    import shutil
    from deployctl.io.multipart import MultipartWriter

    buf = io.BytesIO()
    writer = MultipartWriter(buf)
    writer.write_field("description", "nightly")
    part = writer.create_form_file("artifact", "app.artifact")
    with open("app.artifact", "rb") as src:
        shutil.copyfileobj(src, part)
    writer.close()
    headers = {"Content-Type": writer.content_type}
    ```
"""

from __future__ import annotations

from typing import BinaryIO

from urllib3.fields import RequestField
from urllib3.filepost import choose_boundary

OCTET_STREAM = "application/octet-stream"


class PartWriter:
    """Write handle for the body of the currently open part."""

    def __init__(self, writer: MultipartWriter) -> None:
        self._writer = writer

    def write(self, data: bytes) -> int:
        return self._writer._write_part_data(self, data)

    def writable(self) -> bool:
        return True


class MultipartWriter:
    """Streams a multipart/form-data body into a binary writer.

    Each call to write_field or create_form_file starts a new part and
    implicitly ends the previous one. Writing through a PartWriter after a
    newer part was started, or after close(), raises ValueError.
    """

    def __init__(self, stream: BinaryIO, boundary: str | None = None) -> None:
        self._stream = stream
        self.boundary = boundary or choose_boundary()
        self._current: PartWriter | None = None
        self._has_parts = False
        self._closed = False

    @property
    def content_type(self) -> str:
        """Content-Type header value announcing this writer's boundary."""
        return f"multipart/form-data; boundary={self.boundary}"

    def write_field(self, name: str, value: str) -> None:
        """Write a plain form field with a UTF-8 encoded value."""
        field = RequestField(name=name, data=value)
        field.make_multipart()
        part = self._begin_part(field)
        part.write(value.encode("utf-8"))

    def create_form_file(self, fieldname: str, filename: str) -> PartWriter:
        """Start a file part and return a writer for its content.

        Args:
            fieldname: Form field name of the part.
            filename: Filename reported in the Content-Disposition header.

        Returns:
            A PartWriter that appends to this part until the next part is
            started or the writer is closed.
        """
        field = RequestField(name=fieldname, data=b"", filename=filename)
        field.make_multipart(content_type=OCTET_STREAM)
        return self._begin_part(field)

    def close(self) -> None:
        """Finish the last part and write the closing boundary."""
        if self._closed:
            raise ValueError("multipart writer already closed")
        self._closed = True
        self._current = None
        if self._has_parts:
            self._stream.write(b"\r\n")
        self._stream.write(f"--{self.boundary}--\r\n".encode("latin-1"))

    def _begin_part(self, field: RequestField) -> PartWriter:
        if self._closed:
            raise ValueError("multipart writer already closed")
        if self._has_parts:
            self._stream.write(b"\r\n")
        self._stream.write(f"--{self.boundary}\r\n".encode("latin-1"))
        self._stream.write(field.render_headers().encode("utf-8"))
        self._has_parts = True
        self._current = PartWriter(self)
        return self._current

    def _write_part_data(self, part: PartWriter, data: bytes) -> int:
        if part is not self._current:
            raise ValueError("write to a multipart part that is no longer open")
        self._stream.write(data)
        return len(data)
