"""UDP adapter that forwards encoded packets to X-Plane."""

from __future__ import annotations

import asyncio
import logging
import socket
import time
from dataclasses import dataclass, field
from typing import Optional, Tuple

from .. import constants
from ..config import XPlaneConfig
from ..core import (
    CommandMessage,
    DatarefSubscribeMessage,
    DatarefWriteMessage,
    Message,
    encode_message,
)

LOGGER = logging.getLogger(__name__)

Address = Tuple[str, int]


class TransportError(RuntimeError):
    """Raised when the UDP socket cannot be used."""


class SendFailed(TransportError):
    """Raised when a datagram could not be handed to the network."""


class ReceiveFailed(TransportError):
    """Raised when reading an inbound datagram fails."""


@dataclass(slots=True)
class Datagram:
    payload: bytes
    address: Address
    received_at: float = field(default_factory=time.time)


def _check_port(name: str, port: int) -> int:
    if isinstance(port, bool) or not isinstance(port, int) or not 0 <= port <= 65535:
        raise TransportError(f"{name} must be an integer in 0..65535, got {port!r}")
    return port


class XPlaneUDPClient:
    """Sends X-Plane control packets from a bound local UDP port.

    The socket is non-blocking: sends complete immediately and receives are
    awaited on the running event loop.
    """

    def __init__(
        self,
        host: str,
        xp_port: int = constants.DEFAULT_XPLANE_PORT,
        local_port: int = 0,
        *,
        recv_timeout: float = constants.DEFAULT_RECV_TIMEOUT_SECONDS,
        recv_buffer_size: int = constants.DEFAULT_RECV_BUFFER_SIZE,
    ) -> None:
        self.peer: Address = (host, _check_port("xp_port", xp_port))
        self.local_port = _check_port("local_port", local_port)
        self.recv_timeout = recv_timeout
        self.recv_buffer_size = recv_buffer_size

        self._socket: Optional[socket.socket] = None
        self.sent_count = 0
        self.received_count = 0

    @classmethod
    def from_config(cls, config: XPlaneConfig) -> "XPlaneUDPClient":
        return cls(
            config.host,
            config.xp_port,
            config.local_port,
            recv_timeout=config.recv_timeout_seconds,
            recv_buffer_size=config.recv_buffer_size,
        )

    @property
    def is_open(self) -> bool:
        return self._socket is not None

    @property
    def local_address(self) -> Address:
        sock = self._require_socket()
        host, port = sock.getsockname()[:2]
        return host, port

    def open(self) -> None:
        if self._socket is not None:
            return

        sock = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
        try:
            sock.setblocking(False)
            sock.bind(("0.0.0.0", self.local_port))
        except (OSError, OverflowError) as exc:
            sock.close()
            raise TransportError(
                f"Could not bind UDP port {self.local_port}: {exc}"
            ) from exc

        self._socket = sock
        LOGGER.info(
            "Bound UDP port %s for X-Plane at %s:%s",
            sock.getsockname()[1],
            self.peer[0],
            self.peer[1],
        )

    def close(self) -> None:
        sock = self._socket
        self._socket = None
        if sock is not None:
            sock.close()
            LOGGER.debug("Closed UDP socket")

    def __enter__(self) -> "XPlaneUDPClient":
        self.open()
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def send(self, payload: bytes) -> None:
        sock = self._require_socket()
        # Non-IDNA host names surface as UnicodeError rather than OSError.
        try:
            sock.sendto(payload, self.peer)
        except (OSError, OverflowError, UnicodeError) as exc:
            host, port = self.peer
            raise SendFailed(
                f"Failed to send {len(payload)} bytes to {host}:{port}: {exc}"
            ) from exc
        self.sent_count += 1
        LOGGER.debug(
            "Sent %s packet (%d bytes)",
            payload[:4].decode("ascii", "replace"),
            len(payload),
        )

    def send_message(self, message: Message) -> None:
        self.send(encode_message(message))

    def command_once(self, name: str) -> None:
        self.send_message(CommandMessage(name))

    def set_dataref(self, path: str, value: float) -> None:
        self.send_message(DatarefWriteMessage(path, value))

    def subscribe_dataref(self, path: str, frequency: int, reference_id: int) -> None:
        self.send_message(DatarefSubscribeMessage(path, frequency, reference_id))

    def unsubscribe_dataref(self, path: str, reference_id: int) -> None:
        self.send_message(DatarefSubscribeMessage.unsubscribe(path, reference_id))

    async def receive(self, timeout: Optional[float] = None) -> Optional[Datagram]:
        """Wait for one inbound datagram.

        Returns ``None`` when nothing arrives within ``timeout`` seconds
        (defaults to the configured receive timeout).
        """

        sock = self._require_socket()
        loop = asyncio.get_running_loop()
        wait = self.recv_timeout if timeout is None else timeout

        try:
            payload, address = await asyncio.wait_for(
                loop.sock_recvfrom(sock, self.recv_buffer_size), timeout=wait
            )
        except asyncio.TimeoutError:
            return None
        except OSError as exc:
            raise ReceiveFailed(f"Failed to receive datagram: {exc}") from exc

        self.received_count += 1
        return Datagram(payload=payload, address=(address[0], address[1]))

    def _require_socket(self) -> socket.socket:
        if self._socket is None:
            raise TransportError("UDP client is not open")
        return self._socket
