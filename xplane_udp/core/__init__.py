"""Core primitives for xplane-udp."""

from .models import CommandMessage, DatarefSubscribeMessage, DatarefWriteMessage
from .packets import (
    CMND_SIZE,
    DREF_SIZE,
    RREF_SIZE,
    EncodingError,
    FieldOutOfRange,
    InvalidText,
    Message,
    NameTooLong,
    encode_command,
    encode_dref,
    encode_message,
    encode_rref,
)

__all__ = [
    "CMND_SIZE",
    "DREF_SIZE",
    "RREF_SIZE",
    "CommandMessage",
    "DatarefSubscribeMessage",
    "DatarefWriteMessage",
    "EncodingError",
    "FieldOutOfRange",
    "InvalidText",
    "Message",
    "NameTooLong",
    "encode_command",
    "encode_dref",
    "encode_message",
    "encode_rref",
]
