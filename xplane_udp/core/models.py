"""Logical messages understood by the X-Plane UDP interface."""

from __future__ import annotations

from dataclasses import dataclass

from .packets import encode_command, encode_dref, encode_rref


@dataclass(frozen=True, slots=True)
class CommandMessage:
    name: str

    def encode(self) -> bytes:
        return encode_command(self.name)


@dataclass(frozen=True, slots=True)
class DatarefWriteMessage:
    path: str
    value: float

    def encode(self) -> bytes:
        return encode_dref(self.path, self.value)


@dataclass(frozen=True, slots=True)
class DatarefSubscribeMessage:
    """Subscribe to ``path`` at ``frequency`` updates per second.

    A frequency of zero cancels the subscription tagged with ``reference_id``.
    """

    path: str
    frequency: int
    reference_id: int

    @classmethod
    def unsubscribe(cls, path: str, reference_id: int) -> "DatarefSubscribeMessage":
        return cls(path=path, frequency=0, reference_id=reference_id)

    def encode(self) -> bytes:
        return encode_rref(self.path, self.frequency, self.reference_id)
