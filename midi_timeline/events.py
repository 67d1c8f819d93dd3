"""Decoded MIDI event types."""

from dataclasses import dataclass
from enum import IntEnum
from typing import ClassVar, Dict, Optional, Type

import mido

from .config import DEFAULT_TEXT_ENCODING


class MidiEventType(IntEnum):
    """Status codes of the event kinds a track can hold."""
    NOTE_OFF = 0x80
    NOTE_ON = 0x90
    AFTERTOUCH = 0xA0
    CONTROLLER_CHANGE = 0xB0
    PROGRAM_CHANGE = 0xC0
    CHANNEL_AFTERTOUCH = 0xD0
    PITCH_BEND = 0xE0
    SYSTEM_EXCLUSIVE = 0xF0
    META = 0xFF


class MetaEventType(IntEnum):
    """Meta event type codes (the byte after 0xFF)."""
    SEQUENCE_NUMBER = 0x00
    TEXT = 0x01
    COPYRIGHT = 0x02
    TRACK_NAME = 0x03
    INSTRUMENT_NAME = 0x04
    LYRIC = 0x05
    MARKER = 0x06
    CUE_POINT = 0x07
    CHANNEL_PREFIX = 0x20
    END_OF_TRACK = 0x2F
    SET_TEMPO = 0x51
    SMPTE_OFFSET = 0x54
    TIME_SIGNATURE = 0x58
    KEY_SIGNATURE = 0x59
    SEQUENCER_SPECIFIC = 0x7F


@dataclass(frozen=True)
class MidiEvent:
    """
    Base of all decoded events.

    Attributes:
        absolute_time: Ticks since the start of the track
        delta_time: Ticks since the previous event
    """
    absolute_time: int
    delta_time: int

    event_type: ClassVar[MidiEventType]


# ---------------------------------------------------------------------------
# Channel events
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ChannelEvent(MidiEvent):
    """
    Channel voice message.

    Attributes:
        channel: MIDI channel (0-15)
        parameter_1: First data byte (0-127)
        parameter_2: Second data byte, 0 for one-parameter kinds
    """
    channel: int
    parameter_1: int
    parameter_2: int = 0

    parameter_count: ClassVar[int] = 2


@dataclass(frozen=True)
class NoteOffEvent(ChannelEvent):
    event_type: ClassVar[MidiEventType] = MidiEventType.NOTE_OFF

    @property
    def note_number(self) -> int:
        return self.parameter_1

    @property
    def velocity(self) -> int:
        return self.parameter_2


@dataclass(frozen=True)
class NoteOnEvent(ChannelEvent):
    """
    Note-on message.

    Pairing with the matching NoteOffEvent lives on the owning TrackChunk
    (see TrackChunk.note_off_for and TrackChunk.note_length).
    """
    event_type: ClassVar[MidiEventType] = MidiEventType.NOTE_ON

    @property
    def note_number(self) -> int:
        return self.parameter_1

    @property
    def velocity(self) -> int:
        return self.parameter_2


@dataclass(frozen=True)
class AftertouchEvent(ChannelEvent):
    """Polyphonic key pressure."""
    event_type: ClassVar[MidiEventType] = MidiEventType.AFTERTOUCH

    @property
    def note_number(self) -> int:
        return self.parameter_1

    @property
    def pressure(self) -> int:
        return self.parameter_2


@dataclass(frozen=True)
class ControllerChangeEvent(ChannelEvent):
    event_type: ClassVar[MidiEventType] = MidiEventType.CONTROLLER_CHANGE

    @property
    def controller(self) -> int:
        return self.parameter_1

    @property
    def value(self) -> int:
        return self.parameter_2


@dataclass(frozen=True)
class ProgramChangeEvent(ChannelEvent):
    event_type: ClassVar[MidiEventType] = MidiEventType.PROGRAM_CHANGE
    parameter_count: ClassVar[int] = 1

    @property
    def program(self) -> int:
        return self.parameter_1


@dataclass(frozen=True)
class ChannelAftertouchEvent(ChannelEvent):
    event_type: ClassVar[MidiEventType] = MidiEventType.CHANNEL_AFTERTOUCH
    parameter_count: ClassVar[int] = 1

    @property
    def pressure(self) -> int:
        return self.parameter_1


@dataclass(frozen=True)
class PitchBendEvent(ChannelEvent):
    event_type: ClassVar[MidiEventType] = MidiEventType.PITCH_BEND

    @property
    def value(self) -> int:
        """14-bit bend value, 8192 is centered."""
        return (self.parameter_2 << 7) | self.parameter_1


# ---------------------------------------------------------------------------
# Meta events
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class MetaEvent(MidiEvent):
    """
    Non-audio track metadata (0xFF status).

    Subclasses set meta_type and payload_size (minimum payload length) and
    build themselves from the raw payload in from_payload().
    """
    event_type: ClassVar[MidiEventType] = MidiEventType.META
    meta_type: ClassVar[MetaEventType]
    payload_size: ClassVar[int] = 0

    @classmethod
    def from_payload(
        cls,
        absolute_time: int,
        delta_time: int,
        payload: bytes,
        encoding: str = DEFAULT_TEXT_ENCODING
    ) -> "MetaEvent":
        return cls(absolute_time, delta_time)


@dataclass(frozen=True)
class SequenceNumberEvent(MetaEvent):
    """Sequence number; None when the event carries no payload."""
    number: Optional[int] = None

    meta_type: ClassVar[MetaEventType] = MetaEventType.SEQUENCE_NUMBER

    @classmethod
    def from_payload(cls, absolute_time, delta_time, payload, encoding=DEFAULT_TEXT_ENCODING):
        number = int.from_bytes(payload[:2], 'big') if payload else None
        return cls(absolute_time, delta_time, number)


@dataclass(frozen=True)
class TextMetaEvent(MetaEvent):
    """Base for meta events whose payload is a string."""
    text: str = ""

    @classmethod
    def from_payload(cls, absolute_time, delta_time, payload, encoding=DEFAULT_TEXT_ENCODING):
        return cls(absolute_time, delta_time, payload.decode(encoding, errors="replace"))


@dataclass(frozen=True)
class TextEvent(TextMetaEvent):
    meta_type: ClassVar[MetaEventType] = MetaEventType.TEXT


@dataclass(frozen=True)
class CopyrightEvent(TextMetaEvent):
    meta_type: ClassVar[MetaEventType] = MetaEventType.COPYRIGHT


@dataclass(frozen=True)
class TrackNameEvent(TextMetaEvent):
    meta_type: ClassVar[MetaEventType] = MetaEventType.TRACK_NAME

    @property
    def name(self) -> str:
        return self.text


@dataclass(frozen=True)
class InstrumentNameEvent(TextMetaEvent):
    meta_type: ClassVar[MetaEventType] = MetaEventType.INSTRUMENT_NAME


@dataclass(frozen=True)
class LyricEvent(TextMetaEvent):
    meta_type: ClassVar[MetaEventType] = MetaEventType.LYRIC


@dataclass(frozen=True)
class MarkerEvent(TextMetaEvent):
    meta_type: ClassVar[MetaEventType] = MetaEventType.MARKER


@dataclass(frozen=True)
class CuePointEvent(TextMetaEvent):
    meta_type: ClassVar[MetaEventType] = MetaEventType.CUE_POINT


@dataclass(frozen=True)
class ChannelPrefixEvent(MetaEvent):
    channel: int = 0

    meta_type: ClassVar[MetaEventType] = MetaEventType.CHANNEL_PREFIX
    payload_size: ClassVar[int] = 1

    @classmethod
    def from_payload(cls, absolute_time, delta_time, payload, encoding=DEFAULT_TEXT_ENCODING):
        return cls(absolute_time, delta_time, payload[0])


@dataclass(frozen=True)
class EndOfTrackEvent(MetaEvent):
    meta_type: ClassVar[MetaEventType] = MetaEventType.END_OF_TRACK


@dataclass(frozen=True)
class SetTempoEvent(MetaEvent):
    """Tempo change in microseconds per quarter note."""
    tempo: int = 0

    meta_type: ClassVar[MetaEventType] = MetaEventType.SET_TEMPO
    payload_size: ClassVar[int] = 3

    @classmethod
    def from_payload(cls, absolute_time, delta_time, payload, encoding=DEFAULT_TEXT_ENCODING):
        return cls(absolute_time, delta_time, int.from_bytes(payload[:3], 'big'))

    @property
    def bpm(self) -> float:
        """Quarter notes per minute."""
        return mido.tempo2bpm(self.tempo)


@dataclass(frozen=True)
class SMPTEOffsetEvent(MetaEvent):
    hours: int = 0
    minutes: int = 0
    seconds: int = 0
    frames: int = 0
    fractional_frames: int = 0

    meta_type: ClassVar[MetaEventType] = MetaEventType.SMPTE_OFFSET
    payload_size: ClassVar[int] = 5

    @classmethod
    def from_payload(cls, absolute_time, delta_time, payload, encoding=DEFAULT_TEXT_ENCODING):
        return cls(absolute_time, delta_time, *payload[:5])


@dataclass(frozen=True)
class TimeSignatureEvent(MetaEvent):
    """
    Time signature.

    Attributes:
        numerator: Beats per measure
        denominator: Beat unit as a power of two (2 means quarter notes)
        clocks_per_click: MIDI clocks per metronome click
        thirty_seconds_per_quarter: Notated 32nd notes per MIDI quarter note
    """
    numerator: int = 4
    denominator: int = 2
    clocks_per_click: int = 24
    thirty_seconds_per_quarter: int = 8

    meta_type: ClassVar[MetaEventType] = MetaEventType.TIME_SIGNATURE
    payload_size: ClassVar[int] = 4

    @classmethod
    def from_payload(cls, absolute_time, delta_time, payload, encoding=DEFAULT_TEXT_ENCODING):
        return cls(absolute_time, delta_time, *payload[:4])

    @property
    def beat_unit(self) -> int:
        return 2 ** self.denominator


@dataclass(frozen=True)
class KeySignatureEvent(MetaEvent):
    """
    Key signature.

    Attributes:
        sharps_flats: Number of sharps (positive) or flats (negative), -7..7
        mode: 0 for major, 1 for minor
    """
    sharps_flats: int = 0
    mode: int = 0

    meta_type: ClassVar[MetaEventType] = MetaEventType.KEY_SIGNATURE
    payload_size: ClassVar[int] = 2

    @classmethod
    def from_payload(cls, absolute_time, delta_time, payload, encoding=DEFAULT_TEXT_ENCODING):
        sharps_flats = int.from_bytes(payload[0:1], 'big', signed=True)
        return cls(absolute_time, delta_time, sharps_flats, payload[1])

    @property
    def is_minor(self) -> bool:
        return self.mode == 1


@dataclass(frozen=True)
class SequencerSpecificEvent(MetaEvent):
    data: bytes = b""

    meta_type: ClassVar[MetaEventType] = MetaEventType.SEQUENCER_SPECIFIC

    @classmethod
    def from_payload(cls, absolute_time, delta_time, payload, encoding=DEFAULT_TEXT_ENCODING):
        return cls(absolute_time, delta_time, bytes(payload))


# ---------------------------------------------------------------------------
# System exclusive events
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class SysexEvent(MidiEvent):
    """
    System exclusive message stored verbatim.

    Attributes:
        status: Leading status byte, 0xF0 or 0xF7
        data: Payload bytes following the length quantity
    """
    status: int
    data: bytes

    event_type: ClassVar[MidiEventType] = MidiEventType.SYSTEM_EXCLUSIVE


CHANNEL_EVENT_TYPES: Dict[int, Type[ChannelEvent]] = {
    cls.event_type: cls
    for cls in (
        NoteOffEvent,
        NoteOnEvent,
        AftertouchEvent,
        ControllerChangeEvent,
        ProgramChangeEvent,
        ChannelAftertouchEvent,
        PitchBendEvent,
    )
}

META_EVENT_TYPES: Dict[int, Type[MetaEvent]] = {
    cls.meta_type: cls
    for cls in (
        SequenceNumberEvent,
        TextEvent,
        CopyrightEvent,
        TrackNameEvent,
        InstrumentNameEvent,
        LyricEvent,
        MarkerEvent,
        CuePointEvent,
        ChannelPrefixEvent,
        EndOfTrackEvent,
        SetTempoEvent,
        SMPTEOffsetEvent,
        TimeSignatureEvent,
        KeySignatureEvent,
        SequencerSpecificEvent,
    )
}


def meta_event_class(meta_type: int) -> Optional[Type[MetaEvent]]:
    """Look up the event class for a meta type code (None if unknown)."""
    return META_EVENT_TYPES.get(meta_type)
