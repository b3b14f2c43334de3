"""CLI entry point for composing and sending mail."""

import argparse
import logging
import sys
from pathlib import Path

import structlog

from mailcraft.config import ConfigError, get_settings_eager
from mailcraft.exceptions import MailcraftError
from mailcraft.message import Message

logger = structlog.get_logger()


def _configure_logging(verbose: int) -> None:
    level = logging.WARNING
    if verbose == 1:
        level = logging.INFO
    elif verbose > 1:
        level = logging.DEBUG

    if verbose:
        logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")
    structlog.configure(
        wrapper_class=structlog.make_filtering_bound_logger(level),
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="mailcraft",
        description="Compose MIME email and send it over SMTP",
    )
    parser.add_argument("-v", "--verbose", action="count", default=0, help="More log output")

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    send_parser = subparsers.add_parser("send", help="Compose and send a message")
    send_parser.add_argument("--from", dest="sender", help="Sender (default: default_from setting)")
    send_parser.add_argument("--to", action="append", default=[], help="Recipient (repeatable)")
    send_parser.add_argument("--cc", action="append", default=[], help="Cc recipient (repeatable)")
    send_parser.add_argument("--bcc", action="append", default=[], help="Bcc recipient (repeatable)")
    send_parser.add_argument("--subject", default="", help="Subject line")
    text_group = send_parser.add_mutually_exclusive_group()
    text_group.add_argument("--text", help="Plain text body")
    text_group.add_argument("--text-file", type=Path, help="Read the plain text body from a file")
    send_parser.add_argument("--html-file", type=Path, help="Read the HTML body from a file")
    send_parser.add_argument(
        "--attach", action="append", default=[], metavar="PATH", help="Attach a file (repeatable)"
    )
    send_parser.add_argument(
        "--no-bcc-header", action="store_true", help="Deliver to Bcc recipients without a Bcc header"
    )
    send_parser.add_argument(
        "--dry-run", action="store_true", help="Print the composed message instead of sending it"
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 1

    _configure_logging(args.verbose)

    if args.command == "send":
        try:
            return _handle_send(args)
        except (MailcraftError, ConfigError) as e:
            logger.debug("Send failed", error_type=type(e).__name__)
            print(f"✗ {e}", file=sys.stderr)
            return 1
        except OSError as e:
            print(f"✗ {e}", file=sys.stderr)
            return 1

    return 1


def _handle_send(args: argparse.Namespace) -> int:
    """Handle send subcommand."""
    settings = get_settings_eager()

    message = Message(settings.smtp, include_bcc_header=not args.no_bcc_header)
    message.set_from(args.sender or settings.default_from or "")
    message.set_to(args.to)
    message.set_cc(args.cc)
    message.set_bcc(args.bcc)
    message.set_subject(args.subject)

    if args.text is not None:
        message.set_body_plain_text(args.text)
    elif args.text_file is not None:
        message.set_body_plain_text(args.text_file.read_bytes())
    if args.html_file is not None:
        message.set_body_html(args.html_file.read_bytes())

    for path in args.attach:
        message.add_attachment(path)

    if args.dry_run:
        sys.stdout.write(message.compose().decode("utf-8", errors="replace"))
        return 0

    outgoing = message.send()
    logger.info("Message sent", host=settings.smtp.host, recipients=len(outgoing.envelope_to))
    print("✓ Message sent")
    return 0


if __name__ == "__main__":
    sys.exit(main())
