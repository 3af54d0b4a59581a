"""Adapter modules for external integrations."""

from .udp import Datagram, ReceiveFailed, SendFailed, TransportError, XPlaneUDPClient

__all__ = [
    "Datagram",
    "ReceiveFailed",
    "SendFailed",
    "TransportError",
    "XPlaneUDPClient",
]
