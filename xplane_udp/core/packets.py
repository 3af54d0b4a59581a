"""Binary encoders for the X-Plane UDP control messages.

Every message is a fixed-size little-endian buffer::

    CMND: tag[4] pad[1] name[500]                              (505 bytes)
    DREF: tag[4] pad[1] value:f32[4] path[500]                  (509 bytes)
    RREF: tag[4] pad[1] freq:i32[4] ref_id:i32[4] path[400]     (413 bytes)

Text fields are UTF-8, null terminated and zero filled up to their capacity.
Text that does not fit together with its terminator is rejected instead of
being truncated.
"""

from __future__ import annotations

import math
import numbers
import operator
import struct
from typing import TYPE_CHECKING, Union

if TYPE_CHECKING:
    from .models import CommandMessage, DatarefSubscribeMessage, DatarefWriteMessage

CMND_TAG = b"CMND"
DREF_TAG = b"DREF"
RREF_TAG = b"RREF"

HEADER_SIZE = 5  # tag + pad byte

CMND_NAME_CAPACITY = 500
DREF_PATH_CAPACITY = 500
RREF_PATH_CAPACITY = 400

CMND_SIZE = HEADER_SIZE + CMND_NAME_CAPACITY
DREF_SIZE = HEADER_SIZE + 4 + DREF_PATH_CAPACITY
RREF_SIZE = HEADER_SIZE + 4 + 4 + RREF_PATH_CAPACITY

INT32_MIN = -(2**31)
INT32_MAX = 2**31 - 1
FLOAT32_MAX = struct.unpack("<f", b"\xff\xff\x7f\x7f")[0]


class EncodingError(ValueError):
    """Raised when a message cannot be represented in its wire layout."""


class NameTooLong(EncodingError):
    """Raised when a text field plus its null terminator exceeds capacity."""

    def __init__(self, field: str, length: int, capacity: int) -> None:
        super().__init__(
            f"{field} is {length} bytes; at most {capacity - 1} bytes fit "
            f"with the null terminator"
        )
        self.field = field
        self.length = length
        self.capacity = capacity


class FieldOutOfRange(EncodingError):
    """Raised when a value is not a number or does not fit its 32-bit field."""

    def __init__(
        self, field: str, value: object, reason: str = "does not fit in 32 bits"
    ) -> None:
        super().__init__(f"{field}={value!r} {reason}")
        self.field = field
        self.value = value


class InvalidText(EncodingError):
    """Raised when a text field cannot be sent as a null-terminated UTF-8 string."""

    def __init__(self, field: str, text: object, reason: str) -> None:
        super().__init__(f"{field} {text!r} {reason}")
        self.field = field
        self.text = text


def _text_bytes(field: str, text: str, capacity: int) -> bytes:
    if not isinstance(text, str):
        raise InvalidText(field, text, "is not a string")
    try:
        raw = text.encode("utf-8")
    except UnicodeEncodeError as exc:
        raise InvalidText(field, text, "is not valid UTF-8") from exc
    # X-Plane stops reading at the first NUL.
    if b"\x00" in raw:
        raise InvalidText(field, text, "contains a NUL byte")
    if len(raw) + 1 > capacity:
        raise NameTooLong(field, len(raw), capacity)
    return raw


def _check_int32(field: str, value: int) -> int:
    if isinstance(value, bool):
        raise FieldOutOfRange(field, value, "is not an integer")
    try:
        value = operator.index(value)
    except TypeError:
        raise FieldOutOfRange(field, value, "is not an integer") from None
    if not INT32_MIN <= value <= INT32_MAX:
        raise FieldOutOfRange(field, value)
    return value


def _check_float32(field: str, value: float) -> float:
    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        raise FieldOutOfRange(field, value, "is not a number")
    value = float(value)
    # struct rounds to the nearest single; only finite overflow is an error.
    if math.isfinite(value) and abs(value) > FLOAT32_MAX:
        raise FieldOutOfRange(field, value)
    return value


def _new_buffer(tag: bytes, size: int) -> bytearray:
    buffer = bytearray(size)
    buffer[0:4] = tag
    return buffer


def encode_command(name: str) -> bytes:
    """Encode a CMND packet that triggers ``name`` once."""

    raw_name = _text_bytes("name", name, CMND_NAME_CAPACITY)

    buffer = _new_buffer(CMND_TAG, CMND_SIZE)
    buffer[HEADER_SIZE : HEADER_SIZE + len(raw_name)] = raw_name
    return bytes(buffer)


def encode_dref(path: str, value: float) -> bytes:
    """Encode a DREF packet setting dataref ``path`` to ``value``."""

    raw_path = _text_bytes("path", path, DREF_PATH_CAPACITY)
    value = _check_float32("value", value)

    buffer = _new_buffer(DREF_TAG, DREF_SIZE)
    struct.pack_into("<f", buffer, 5, value)
    buffer[9 : 9 + len(raw_path)] = raw_path
    return bytes(buffer)


def encode_rref(path: str, frequency: int, reference_id: int) -> bytes:
    """Encode an RREF packet.

    A ``frequency`` of zero cancels the subscription registered under
    ``reference_id``; the encoder does not treat it differently.
    """

    raw_path = _text_bytes("path", path, RREF_PATH_CAPACITY)
    frequency = _check_int32("frequency", frequency)
    reference_id = _check_int32("reference_id", reference_id)

    buffer = _new_buffer(RREF_TAG, RREF_SIZE)
    struct.pack_into("<i", buffer, 5, frequency)
    struct.pack_into("<i", buffer, 9, reference_id)
    buffer[13 : 13 + len(raw_path)] = raw_path
    return bytes(buffer)


Message = Union["CommandMessage", "DatarefWriteMessage", "DatarefSubscribeMessage"]


def encode_message(message: Message) -> bytes:
    """Encode any of the supported message objects."""

    from .models import CommandMessage, DatarefSubscribeMessage, DatarefWriteMessage

    if isinstance(message, CommandMessage):
        return encode_command(message.name)
    if isinstance(message, DatarefWriteMessage):
        return encode_dref(message.path, message.value)
    if isinstance(message, DatarefSubscribeMessage):
        return encode_rref(message.path, message.frequency, message.reference_id)
    raise TypeError(f"Unsupported message type: {type(message).__name__}")
