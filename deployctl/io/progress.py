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

"""Progress-tracked stream wrappers.

ProgressWriter and ProgressReader wrap a binary stream, forward every call
to it unchanged and advance a tqdm progress bar by the number of bytes
that went through. The bar redraws at most every REFRESH_INTERVAL seconds
no matter how often the stream is written or read.

Example:
    ```python
    import io
    from deployctl.io.progress import ProgressReader, new_progress_bar

    payload = io.BytesIO(b"x" * 4096)
    with new_progress_bar(4096) as bar:
        reader = ProgressReader(payload, bar, length=4096)
        while reader.read(1024):
            pass
    ```
"""

from __future__ import annotations

import sys
from typing import BinaryIO

from tqdm import tqdm

# Minimum seconds between two redraws of a progress bar.
REFRESH_INTERVAL = 0.1


def new_progress_bar(total: int, desc: str | None = None) -> tqdm:
    """Create a byte-scaled progress bar on stderr.

    Args:
        total: Number of bytes the bar represents.
        desc: Optional label shown before the bar.

    Returns:
        A tqdm instance; close it (or use it as a context manager) when done.
    """
    return tqdm(
        total=total,
        desc=desc,
        unit="B",
        unit_scale=True,
        unit_divisor=1024,
        mininterval=REFRESH_INTERVAL,
        file=sys.stderr,
    )


class ProgressWriter:
    """Writer that reports every written byte to a progress bar."""

    def __init__(self, stream, bar: tqdm) -> None:
        self._stream = stream
        self._bar = bar

    def write(self, data: bytes) -> int:
        written = self._stream.write(data)
        self._bar.update(len(data))
        return written

    def writable(self) -> bool:
        return True


class ProgressReader:
    """Reader that reports every byte read to a progress bar.

    The reader exposes ``len()`` so HTTP clients can derive a
    Content-Length without consuming it. It deliberately has no
    ``__iter__``, which keeps requests from treating it as a generator
    and switching to chunked transfer encoding.
    """

    def __init__(self, stream: BinaryIO, bar: tqdm, length: int) -> None:
        self._stream = stream
        self._bar = bar
        self._length = length

    def __len__(self) -> int:
        return self._length

    def read(self, size: int = -1) -> bytes:
        data = self._stream.read(size)
        self._bar.update(len(data))
        return data

    def readable(self) -> bool:
        return True
