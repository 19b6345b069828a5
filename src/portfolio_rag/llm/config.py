"""Timeout configuration shared by the embedding and completion clients."""

from dataclasses import dataclass

import httpx


@dataclass
class TimeoutConfig:
    """
    Request timeouts, in seconds.

    Attributes:
        connect: Timeout for establishing the connection
        read: Timeout for reading the response

    Example:
        config = TimeoutConfig(connect=10.0, read=60.0)
    """

    connect: float = 10.0
    read: float = 60.0

    def __post_init__(self):
        if self.connect <= 0:
            raise ValueError("connect timeout must be positive")
        if self.read <= 0:
            raise ValueError("read timeout must be positive")

    @classmethod
    def from_settings(cls, settings) -> "TimeoutConfig":
        return cls(connect=settings.CONNECT_TIMEOUT, read=settings.REQUEST_TIMEOUT)

    def to_httpx(self) -> httpx.Timeout:
        """Convert to an ``httpx.Timeout`` (write and pool share the read budget)."""
        return httpx.Timeout(self.read, connect=self.connect)
