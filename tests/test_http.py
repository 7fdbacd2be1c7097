"""
Tests for deployctl.io.http module.
"""

from __future__ import annotations

import requests
import requests_mock

from deployctl.io.http import USER_AGENT, dump_request, dump_response, make_session


class TestMakeSession:
    """Tests for the upload session factory."""

    def test_no_retries(self):
        """Test that adapters never retry."""
        session = make_session()
        for prefix in ("http://", "https://"):
            assert session.get_adapter(prefix + "example.com").max_retries.total == 0

    def test_user_agent(self):
        """Test that requests identify deployctl."""
        assert make_session().headers["User-Agent"] == USER_AGENT

    def test_skip_verify(self):
        """Test TLS verification toggling."""
        assert make_session().verify is True
        assert make_session(skip_verify=True).verify is False


class TestDumps:
    """Tests for request and response dumps."""

    def test_request_dump_masks_authorization(self):
        """Test that the bearer token never appears in a dump."""
        prepared = requests.Request(
            "POST",
            "https://x/api",
            data=b"body bytes",
            headers={"Authorization": "Bearer secret", "Content-Type": "text/plain"},
        ).prepare()

        dump = dump_request(prepared)

        assert dump.splitlines()[0] == "POST https://x/api"
        assert "Authorization: Bearer ***" in dump
        assert "Content-Type: text/plain" in dump
        assert "secret" not in dump
        assert "body bytes" not in dump

    def test_response_dump(self):
        """Test status line, headers and optional body."""
        with requests_mock.Mocker() as m:
            m.get("https://x/", status_code=403, headers={"X-Trace": "t1"}, text="denied")
            response = requests.get("https://x/")

        without_body = dump_response(response)
        with_body = dump_response(response, b"denied")

        assert without_body.splitlines()[0] == "403 Forbidden"
        assert "X-Trace: t1" in without_body
        assert "denied" not in without_body
        assert with_body.endswith("\n\ndenied")
