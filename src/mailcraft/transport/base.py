"""Abstract base class for message transports."""

from abc import ABC, abstractmethod
from types import TracebackType


class BaseTransport(ABC):
    """Interface between the composer and whatever delivers the bytes.

    The composer only ever hands over a finished message, so any
    implementation (SMTP, a file sink, a test recorder) can stand in.
    """

    def connect(self) -> None:
        """Open the underlying session, if the transport has one."""

    def disconnect(self) -> None:
        """Close the underlying session, if the transport has one."""

    @abstractmethod
    def deliver(self, envelope_from: str, envelope_to: list[str], data: bytes) -> None:
        """Deliver a fully composed message.

        Args:
            envelope_from: Bare sender address for MAIL FROM.
            envelope_to: Bare recipient addresses for RCPT TO.
            data: The message, headers and body, as bytes.

        Raises:
            MailcraftError: If delivery fails.
        """
        ...

    def __enter__(self) -> "BaseTransport":
        """Context manager entry - connect to server."""
        self.connect()
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        """Context manager exit - disconnect from server."""
        self.disconnect()
