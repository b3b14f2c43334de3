"""Shared fixtures for mailcraft tests."""

from datetime import datetime, timedelta, timezone

import pytest

from mailcraft.message import Message
from mailcraft.transport.base import BaseTransport

FIXED_TIME = datetime(2026, 10, 19, 10, 30, 0, tzinfo=timezone(timedelta(hours=2)))


class RecordingTransport(BaseTransport):
    """Transport that keeps every delivery in memory."""

    def __init__(self) -> None:
        self.deliveries: list[tuple[str, list[str], bytes]] = []

    def deliver(self, envelope_from: str, envelope_to: list[str], data: bytes) -> None:
        self.deliveries.append((envelope_from, list(envelope_to), data))


@pytest.fixture
def transport() -> RecordingTransport:
    return RecordingTransport()


@pytest.fixture
def message() -> Message:
    """A message with the required fields filled in."""
    msg = Message(hostname="mail.test", clock=lambda: FIXED_TIME)
    msg.set_from("a@x.com")
    msg.set_to(["b@y.com"])
    msg.set_subject("Hi")
    return msg
