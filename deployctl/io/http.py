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

"""HTTP session factory and diagnostic dumps.

make_session builds the requests.Session used for uploads. Unlike a
download session, an upload session never retries: a POST of a large
artifact is attempted exactly once and any failure is reported to the
caller.

dump_request and dump_response render wire-like text for the verbose log
channel. They are purely observational: request bodies are never read
(they may be one-shot streams) and the Authorization header is masked.
"""

from __future__ import annotations

import requests
from requests.adapters import HTTPAdapter
import urllib3
from urllib3.util.retry import Retry

from deployctl import __version__

USER_AGENT = f"deployctl/{__version__}"

_MASKED_HEADERS = ("Authorization",)


def make_session(skip_verify: bool = False) -> requests.Session:
    """Create a requests.Session for talking to the deployment service.

    - No retries at any level: connection errors surface immediately.
    - TLS certificate verification is disabled when skip_verify is set,
      and urllib3's InsecureRequestWarning is silenced in that case.
    - Sets a User-Agent identifying deployctl.

    Args:
        skip_verify: Skip TLS certificate validation.

    Returns:
        A configured requests.Session.
    """
    s = requests.Session()
    retries = Retry(total=0, raise_on_status=False)
    s.headers.update({"User-Agent": USER_AGENT})
    s.mount("http://", HTTPAdapter(max_retries=retries))
    s.mount("https://", HTTPAdapter(max_retries=retries))
    if skip_verify:
        s.verify = False
        urllib3.disable_warnings(urllib3.exceptions.InsecureRequestWarning)
    return s


def _render_headers(headers) -> list[str]:
    lines = []
    for name, value in headers.items():
        if name.title() in _MASKED_HEADERS:
            scheme = str(value).split(" ", 1)[0]
            value = f"{scheme} ***"
        lines.append(f"{name}: {value}")
    return lines


def dump_request(request: requests.PreparedRequest) -> str:
    """Render a prepared request's request line and headers (no body)."""
    lines = [f"{request.method} {request.url}"]
    lines.extend(_render_headers(request.headers))
    return "\n".join(lines)


def dump_response(response: requests.Response, body: bytes | None = None) -> str:
    """Render a response's status line, headers and (if given) body."""
    lines = [f"{response.status_code} {response.reason or ''}".rstrip()]
    lines.extend(_render_headers(response.headers))
    text = "\n".join(lines)
    if body:
        text += "\n\n" + body.decode("utf-8", errors="replace")
    return text
