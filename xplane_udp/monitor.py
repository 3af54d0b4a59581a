"""Dataref subscription monitor.

Subscribes to the configured datarefs, logs every datagram X-Plane sends back
and cancels the subscriptions again on shutdown. Inbound payloads are logged
as hex and never decoded.
"""

from __future__ import annotations

import asyncio
import logging
from enum import Enum
from typing import Dict, Optional

from .adapters import ReceiveFailed, SendFailed, XPlaneUDPClient
from .config import ClientConfig, load_config
from .health import HealthReporter
from .logging import DATAGRAM_LOGGER_NAME, configure_logging

LOGGER = logging.getLogger(__name__)
DATAGRAM_LOGGER = logging.getLogger(DATAGRAM_LOGGER_NAME)


class MonitorState(str, Enum):
    STARTING = "starting"
    SUBSCRIBED = "subscribed"
    STOPPING = "stopping"


class DatarefMonitor:
    """Runs the subscribe / receive / unsubscribe cycle against X-Plane."""

    def __init__(
        self,
        config: Optional[ClientConfig] = None,
        *,
        client: Optional[XPlaneUDPClient] = None,
        health: Optional[HealthReporter] = None,
    ) -> None:
        self._config = config or load_config()
        self._client = client or XPlaneUDPClient.from_config(self._config.xplane)
        self._health = health or HealthReporter()
        self._subscriptions: Dict[int, str] = {}
        self._stop_event: Optional[asyncio.Event] = None
        self._state: Optional[MonitorState] = None
        self.datagram_count = 0

    @property
    def subscriptions(self) -> Dict[int, str]:
        return dict(self._subscriptions)

    @property
    def health(self) -> HealthReporter:
        return self._health

    def stop(self) -> None:
        if self._stop_event is not None:
            self._stop_event.set()

    async def run(self, max_datagrams: Optional[int] = None) -> int:
        """Monitor until stopped or ``max_datagrams`` datagrams arrived.

        Returns the number of datagrams received.
        """

        self._stop_event = asyncio.Event()
        self.datagram_count = 0

        owns_socket = not self._client.is_open
        if owns_socket:
            self._client.open()

        try:
            await self._transition_state(MonitorState.STARTING)
            self._subscribe_all()
            await self._transition_state(
                MonitorState.SUBSCRIBED,
                detail=f"{len(self._subscriptions)} dataref(s)",
            )
            await self._receive_loop(max_datagrams)
        except asyncio.CancelledError:
            LOGGER.info("Monitor received shutdown signal")
            raise
        finally:
            await self._transition_state(MonitorState.STOPPING)
            self._unsubscribe_all()
            if owns_socket:
                self._client.close()
            await self._log_summary()

        return self.datagram_count

    @classmethod
    def start(
        cls,
        config: Optional[ClientConfig] = None,
        *,
        max_datagrams: Optional[int] = None,
    ) -> None:
        instance = cls(config=config)
        configure_logging(instance._config.logging)
        try:
            asyncio.run(instance.run(max_datagrams))
        except KeyboardInterrupt:
            LOGGER.info("Monitor received shutdown signal")

    async def _receive_loop(self, max_datagrams: Optional[int]) -> None:
        assert self._stop_event is not None
        timeout = self._client.recv_timeout

        while not self._stop_event.is_set():
            if max_datagrams is not None and self.datagram_count >= max_datagrams:
                break

            try:
                datagram = await self._client.receive()
            except ReceiveFailed as exc:
                # Windows reports ICMP port-unreachable as a receive error.
                LOGGER.warning("%s", exc)
                await self._health.update(
                    "xplane", False, str(exc), counters=self._counters()
                )
                await asyncio.sleep(0)
                continue

            if datagram is None:
                LOGGER.debug("No datagram within %.1fs", timeout)
                await self._health.update(
                    "xplane",
                    False,
                    f"no datagram within {timeout:g}s",
                    counters=self._counters(),
                )
                continue

            index = self.datagram_count
            self.datagram_count += 1
            DATAGRAM_LOGGER.info("%d: %s", index, datagram.payload.hex())
            await self._health.update(
                "xplane",
                True,
                f"last datagram from {datagram.address[0]}:{datagram.address[1]}",
                counters=self._counters(),
            )

    def _subscribe_all(self) -> None:
        monitor = self._config.monitor
        if monitor.frequency == 0:
            LOGGER.warning("Monitor frequency is 0; X-Plane will not send updates")

        for offset, path in enumerate(monitor.datarefs):
            reference_id = monitor.reference_id_start + offset
            self._client.subscribe_dataref(path, monitor.frequency, reference_id)
            self._subscriptions[reference_id] = path
            LOGGER.info(
                "Subscribed to %s at %d Hz (reference %d)",
                path,
                monitor.frequency,
                reference_id,
            )

    def _unsubscribe_all(self) -> None:
        if not self._client.is_open:
            self._subscriptions.clear()
            return

        for reference_id, path in list(self._subscriptions.items()):
            try:
                self._client.unsubscribe_dataref(path, reference_id)
            except SendFailed as exc:
                LOGGER.warning("Failed to unsubscribe %s: %s", path, exc)
            else:
                LOGGER.info("Unsubscribed from %s (reference %d)", path, reference_id)
        self._subscriptions.clear()

    def _counters(self) -> Dict[str, int]:
        return {
            "sent": self._client.sent_count,
            "received": self._client.received_count,
        }

    async def _transition_state(
        self, state: MonitorState, *, detail: Optional[str] = None
    ) -> None:
        previous = self._state
        self._state = state
        LOGGER.debug(
            "Monitor state %s -> %s",
            previous.value if previous else "none",
            state.value,
        )
        await self._health.set_monitor_state(
            state.value,
            healthy=state == MonitorState.SUBSCRIBED,
            detail=detail,
        )

    async def _log_summary(self) -> None:
        snapshot = await self._health.snapshot()
        LOGGER.info(
            "Monitor stopped after %d datagram(s); status %s",
            self.datagram_count,
            snapshot["status"],
        )
