"""Decode one track event at a time, threading running status through."""

from dataclasses import dataclass
from typing import NamedTuple, Optional, Tuple

from .config import DEFAULT_TEXT_ENCODING
from .diagnostics import DEFAULT_SINK, DiagnosticSink, UnknownMetaType, UnknownStatusByte
from .events import (
    CHANNEL_EVENT_TYPES,
    ControllerChangeEvent,
    MidiEvent,
    SysexEvent,
    meta_event_class,
)
from .exceptions import TruncatedPayloadError
from .vlq import read_variable_length

META_STATUS = 0xFF
SYSEX_STATUSES = (0xF0, 0xF7)


@dataclass(frozen=True)
class RunningStatus:
    """
    Per-track decoder state carried from one event to the next.

    Attributes:
        absolute_time: Ticks accumulated so far
        last_channel: Channel of the last channel event with a status byte
    """
    absolute_time: int = 0
    last_channel: int = 0


class DecodedEvent(NamedTuple):
    """Result of decoding one event: the event (None when skipped), bytes consumed, new state."""
    event: Optional[MidiEvent]
    length: int
    status: RunningStatus


def _read_byte(data: bytes, index: int, what: str) -> int:
    if index >= len(data):
        raise TruncatedPayloadError(f"Missing {what}", offset=index)
    return data[index]


def _read_bytes(data: bytes, index: int, count: int, what: str) -> bytes:
    if index + count > len(data):
        raise TruncatedPayloadError(
            f"{what} needs {count} bytes, {max(len(data) - index, 0)} available",
            offset=index
        )
    return bytes(data[index:index + count])


def decode_event(
    data: bytes,
    offset: int,
    status: RunningStatus,
    sink: Optional[DiagnosticSink] = None,
    track_index: Optional[int] = None,
    encoding: str = DEFAULT_TEXT_ENCODING
) -> DecodedEvent:
    """
    Decode the event starting at offset.

    Reads the delta-time quantity, then dispatches on the status byte:
    - 0x80-0xEF: channel event, updates last_channel
    - 0x00-0x7F: running status, read as a ControllerChange on last_channel
    - 0xFF: meta event (single-byte length); unknown types are skipped
    - 0xF0/0xF7: system exclusive (variable-length length)
    - anything else: status byte skipped

    Args:
        data: Track chunk payload
        offset: Index of the event's delta-time
        status: Running status before this event
        sink: Receives skipped-event anomalies (default: log them)
        track_index: Track index recorded on anomalies
        encoding: Codec for text meta events

    Returns:
        DecodedEvent(event, length, status)

    Raises:
        TruncatedQuantityError: Delta-time or sysex length runs off the payload
        TruncatedPayloadError: Status byte, parameters or payload missing
    """
    if sink is None:
        sink = DEFAULT_SINK

    delta_time, consumed = read_variable_length(data, offset)
    cursor = offset + consumed
    absolute_time = status.absolute_time + delta_time
    last_channel = status.last_channel

    status_byte = _read_byte(data, cursor, "status byte")
    cursor += 1

    event: Optional[MidiEvent] = None

    if status_byte < 0xF0:
        event, cursor, last_channel = _decode_channel_event(
            data, cursor, status_byte, absolute_time, delta_time, last_channel
        )

    elif status_byte == META_STATUS:
        meta_type = _read_byte(data, cursor, "meta event type")
        length = _read_byte(data, cursor + 1, "meta event length")
        payload = _read_bytes(data, cursor + 2, length, "Meta event payload")

        event_class = meta_event_class(meta_type)
        if event_class is None:
            sink.report(UnknownMetaType(track_index, meta_type, length, cursor - 1))
        else:
            if length < event_class.payload_size:
                raise TruncatedPayloadError(
                    f"{event_class.__name__} needs {event_class.payload_size} bytes, got {length}",
                    offset=cursor + 2
                )
            event = event_class.from_payload(absolute_time, delta_time, payload, encoding=encoding)

        cursor += 2 + length

    elif status_byte in SYSEX_STATUSES:
        length, consumed = read_variable_length(data, cursor)
        cursor += consumed
        payload = _read_bytes(data, cursor, length, "Sysex payload")
        event = SysexEvent(absolute_time, delta_time, status_byte, payload)
        cursor += length

    else:
        sink.report(UnknownStatusByte(track_index, status_byte, cursor - 1))

    return DecodedEvent(event, cursor - offset, RunningStatus(absolute_time, last_channel))


def _decode_channel_event(
    data: bytes,
    cursor: int,
    status_byte: int,
    absolute_time: int,
    delta_time: int,
    last_channel: int
) -> Tuple[MidiEvent, int, int]:
    """Decode a channel event whose status byte is at cursor - 1."""
    parameter_1 = _read_byte(data, cursor, "channel event parameter")
    cursor += 1

    event_class = CHANNEL_EVENT_TYPES.get(status_byte & 0xF0)
    if event_class is None:
        # Data byte where a status byte was expected: the status byte was
        # omitted. Always read as a controller change on the previous channel.
        event = ControllerChangeEvent(absolute_time, delta_time, last_channel, status_byte, parameter_1)
        return event, cursor, last_channel

    channel = status_byte & 0x0F
    parameter_2 = 0
    if event_class.parameter_count == 2:
        parameter_2 = _read_byte(data, cursor, "channel event parameter")
        cursor += 1

    return event_class(absolute_time, delta_time, channel, parameter_1, parameter_2), cursor, channel
