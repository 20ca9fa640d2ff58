"""Tests for printing raw write responses."""

from __future__ import annotations

import json

import httpx

from restbase.client.response import extract_response_data, format_api_response
from restbase.output import OutputFormat, OutputManager, set_output


class TestExtractResponseData:
    def test_json_body(self) -> None:
        response = httpx.Response(201, json={"id": 3})
        assert extract_response_data(response) == {"id": 3}

    def test_text_body(self) -> None:
        response = httpx.Response(200, text="created")
        assert extract_response_data(response) == "created"

    def test_empty_body(self) -> None:
        assert extract_response_data(httpx.Response(204)) is None


class TestFormatApiResponse:
    def test_status_to_stderr_body_to_stdout(self, capsys) -> None:
        set_output(OutputManager(format=OutputFormat.JSON, no_color=True))
        format_api_response(httpx.Response(201, json={"id": 3}))
        captured = capsys.readouterr()
        assert json.loads(captured.out) == {"id": 3}
        assert "HTTP 201 Created" in captured.err

    def test_empty_body_prints_status_only(self, capsys) -> None:
        set_output(OutputManager(format=OutputFormat.JSON, no_color=True))
        format_api_response(httpx.Response(204))
        captured = capsys.readouterr()
        assert captured.out == ""
        assert "HTTP 204 No Content" in captured.err

    def test_quiet_hides_status(self, capsys) -> None:
        set_output(OutputManager(format=OutputFormat.PLAIN, no_color=True, quiet=True))
        format_api_response(httpx.Response(200, text="ok"))
        captured = capsys.readouterr()
        assert captured.out.strip() == "ok"
        assert captured.err == ""
