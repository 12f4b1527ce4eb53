"""Command-line entry point for the Postmark transport."""

from __future__ import annotations

import argparse
import sys
from collections.abc import Sequence
from pathlib import Path

from postmark_transport.core import (
    Address,
    AppSettings,
    Attachment,
    EmailMessage,
    Header,
    TransportError,
    configure_logging,
    load_app_settings,
)
from postmark_transport.transport import PostmarkTransport


def build_parser() -> argparse.ArgumentParser:
    """Create and configure the CLI argument parser."""
    parser = argparse.ArgumentParser(description="Send email through Postmark")
    parser.add_argument(
        "--env-file",
        type=Path,
        default=None,
        help="Path to a .env file containing configuration overrides.",
    )
    subparsers = parser.add_subparsers(dest="command")
    subparsers.add_parser("info", help="Show the active configuration.")

    send = subparsers.add_parser("send", help="Send a single email.")
    send.add_argument("--from", dest="from_address", required=True)
    send.add_argument("--to", action="append", default=[], required=True)
    send.add_argument("--cc", action="append", default=[])
    send.add_argument("--bcc", action="append", default=[])
    send.add_argument("--reply-to", dest="reply_to", action="append", default=[])
    send.add_argument("--subject", default="")
    send.add_argument("--text", default=None, help="Plain-text body.")
    send.add_argument("--html", default=None, help="HTML body.")
    send.add_argument(
        "--attach",
        type=Path,
        action="append",
        default=[],
        help="File to attach; may be repeated.",
    )
    send.add_argument(
        "--inline",
        type=Path,
        action="append",
        default=[],
        help="File to embed inline (referenced as cid:<filename>).",
    )
    send.add_argument(
        "--header",
        action="append",
        default=[],
        help="Custom header as 'Name: value'; may be repeated.",
    )
    send.add_argument("--tag", default=None, help="Postmark tag for the message.")
    send.add_argument(
        "--metadata",
        action="append",
        default=[],
        help="Metadata entry as key=value; may be repeated.",
    )
    return parser


def build_message(args: argparse.Namespace) -> EmailMessage:
    """Translate parsed ``send`` arguments into an :class:`EmailMessage`."""
    headers = [_parse_header(raw) for raw in args.header]
    if args.tag:
        headers.append(Header.tag(args.tag))
    for raw in args.metadata:
        key, separator, value = raw.partition("=")
        if not separator:
            msg = f"Metadata must be given as key=value, got {raw!r}"
            raise ValueError(msg)
        headers.append(Header.metadata(key.strip(), value))

    attachments = [Attachment.from_path(path) for path in args.attach]
    attachments.extend(Attachment.from_path(path, inline=True) for path in args.inline)

    return EmailMessage(
        subject=args.subject,
        text_body=args.text,
        html_body=args.html,
        from_addresses=(Address.parse(args.from_address),),
        to=_parse_addresses(args.to),
        cc=_parse_addresses(args.cc),
        bcc=_parse_addresses(args.bcc),
        reply_to=_parse_addresses(args.reply_to),
        headers=headers,
        attachments=attachments,
    )


def execute(args: argparse.Namespace, settings: AppSettings) -> int:
    """Execute the requested CLI command and return the exit status."""
    if args.command == "send":
        return _run_send(args, settings)

    token_state = "configured" if settings.postmark.token else "missing"
    print(f"Postmark token: {token_state}")
    print(f"Message stream: {settings.postmark.message_stream or '(default)'}")
    return 0


def main(argv: Sequence[str] | None = None) -> None:
    """CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    settings = load_app_settings(env_file=args.env_file)
    configure_logging(settings.logging)
    sys.exit(execute(args, settings))


def _run_send(args: argparse.Namespace, settings: AppSettings) -> int:
    """Send one message and report the Postmark message id."""
    try:
        message = build_message(args)
        transport = PostmarkTransport.from_settings(settings.postmark)
    except (OSError, ValueError) as exc:
        print(f"Send failed: {exc}")
        return 1

    with transport:
        try:
            sent = transport.send(message)
        except TransportError as exc:
            print(f"Send failed: {exc}")
            return 1

    print(f"Sent. Message ID: {sent.message_id}")
    return 0


def _parse_header(raw: str) -> Header:
    name, separator, value = raw.partition(":")
    if not separator or not name.strip():
        msg = f"Header must be given as 'Name: value', got {raw!r}"
        raise ValueError(msg)
    return Header.parse(name.strip(), value.strip())


def _parse_addresses(values: Sequence[str]) -> tuple[Address, ...]:
    return tuple(Address.parse(value) for value in values)


if __name__ == "__main__":
    main()
