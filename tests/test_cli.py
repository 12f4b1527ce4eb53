"""Tests for the command-line entry point."""

from __future__ import annotations

from pathlib import Path

import pytest

from postmark_transport import cli
from postmark_transport.core.config import AppSettings, PostmarkSettings, load_app_settings
from postmark_transport.core.interfaces import HttpResponse
from postmark_transport.core.models import Address, Header
from postmark_transport.transport import PostmarkTransport


class RecordingHttp:
    """HTTP collaborator capturing payloads and replying with a fixed response."""

    def __init__(self, response: HttpResponse) -> None:
        self.response = response
        self.payloads: list[dict] = []

    def post_json(self, url, payload, headers) -> HttpResponse:
        del url, headers
        self.payloads.append(dict(payload))
        return self.response


@pytest.fixture(autouse=True)
def clear_settings_cache() -> None:
    load_app_settings.cache_clear()


def _parse(*argv: str):
    return cli.build_parser().parse_args(list(argv))


def _install_http(monkeypatch: pytest.MonkeyPatch, http: RecordingHttp) -> None:
    def from_settings(cls, settings, http_client=None):
        del http_client
        return cls(http, settings.token, settings.message_stream)

    monkeypatch.setattr(PostmarkTransport, "from_settings", classmethod(from_settings))


def test_build_message_classifies_headers_and_attachments(tmp_path: Path) -> None:
    report = tmp_path / "report.csv"
    report.write_text("a,b\n", encoding="utf-8")
    logo = tmp_path / "logo.png"
    logo.write_bytes(b"\x89PNG")

    args = _parse(
        "send",
        "--from", "Alice <a@x.com>",
        "--to", "b@x.com",
        "--cc", "c@x.com",
        "--subject", "Hi",
        "--text", "Body",
        "--header", "X-Campaign: spring",
        "--header", "X-Metadata-order: 7",
        "--tag", "welcome",
        "--metadata", "customer=42",
        "--attach", str(report),
        "--inline", str(logo),
    )

    message = cli.build_message(args)

    assert message.from_addresses == (Address("a@x.com", "Alice"),)
    assert message.cc == (Address("c@x.com"),)
    assert message.headers == (
        Header.plain("X-Campaign", "spring"),
        Header.metadata("order", "7"),
        Header.tag("welcome"),
        Header.metadata("customer", "42"),
    )
    assert [item.disposition for item in message.attachments] == ["attachment", "inline"]


def test_build_message_rejects_malformed_header() -> None:
    args = _parse("send", "--from", "a@x.com", "--to", "b@x.com", "--header", "oops")

    with pytest.raises(ValueError):
        cli.build_message(args)


def test_send_command_prints_message_id(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    http = RecordingHttp(HttpResponse(200, {"MessageID": "abc-123"}))
    _install_http(monkeypatch, http)
    settings = AppSettings(postmark=PostmarkSettings(token="t"))
    args = _parse("send", "--from", "a@x.com", "--to", "b@x.com", "--subject", "Hi")

    assert cli.execute(args, settings) == 0
    assert "abc-123" in capsys.readouterr().out
    assert http.payloads[0]["To"] == "b@x.com"


def test_send_command_reports_rejection(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    http = RecordingHttp(HttpResponse(422, {"ErrorCode": 300, "Message": "Invalid email request"}))
    _install_http(monkeypatch, http)
    settings = AppSettings(postmark=PostmarkSettings(token="t"))
    args = _parse("send", "--from", "a@x.com", "--to", "b@x.com")

    assert cli.execute(args, settings) == 1
    assert "Invalid email request" in capsys.readouterr().out


def test_send_command_without_token_fails(capsys: pytest.CaptureFixture[str]) -> None:
    args = _parse("send", "--from", "a@x.com", "--to", "b@x.com")

    assert cli.execute(args, AppSettings()) == 1
    assert "token" in capsys.readouterr().out


def test_info_is_the_default_command(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    env_file = tmp_path / ".env"
    env_file.write_text("POSTMARK_TRANSPORT_POSTMARK__MESSAGE_STREAM=outbound\n", encoding="utf-8")

    with pytest.raises(SystemExit) as excinfo:
        cli.main(["--env-file", str(env_file)])

    assert excinfo.value.code == 0
    output = capsys.readouterr().out
    assert "Message stream: outbound" in output
