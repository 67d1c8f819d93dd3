"""Track chunk assembly: decode a whole track payload and derive its aggregates."""

import logging
from types import MappingProxyType
from typing import Dict, Iterator, List, Mapping, NamedTuple, Optional, Sequence, Tuple

from .config import DEFAULT_CONFIG, DEFAULT_TEMPO, DEFAULT_TIME_SIGNATURE, NO_NOTES_MAX, NO_NOTES_MIN, ParserConfig
from .diagnostics import DiagnosticSink
from .event_decoder import RunningStatus, decode_event
from .events import (
    EndOfTrackEvent,
    MidiEvent,
    NoteOffEvent,
    NoteOnEvent,
    SetTempoEvent,
    TimeSignatureEvent,
    TrackNameEvent,
)
from .exceptions import MidiParseError
from .note_pairer import NotePairer

logger = logging.getLogger(__name__)


class PairedNote(NamedTuple):
    """A note-on together with the note-off that ends it."""
    note_on: NoteOnEvent
    note_off: NoteOffEvent
    length: int


class TrackChunk:
    """
    Decoded MTrk chunk.

    Events are kept in file order. Note pairing is a lookup table from the
    index of a NoteOnEvent in `events` to the index of its NoteOffEvent;
    the events themselves are never modified.
    """

    def __init__(
        self,
        events: Sequence[MidiEvent],
        note_on_events: Sequence[NoteOnEvent],
        time_signatures: Sequence[TimeSignatureEvent],
        name: str,
        min_note_number: int,
        max_note_number: int,
        duration: int,
        pairings: Optional[Mapping[int, int]] = None
    ):
        """
        Initialize a track.

        Args:
            events: All decoded events, in file order
            note_on_events: NoteOnEvents, in file order
            time_signatures: TimeSignatureEvents, in file order
            name: Track name
            min_note_number: Lowest note-on number (127 when no notes)
            max_note_number: Highest note-on number (0 when no notes)
            duration: Track length in ticks
            pairings: Note-on event index -> note-off event index
        """
        self.events: Tuple[MidiEvent, ...] = tuple(events)
        self.note_on_events: Tuple[NoteOnEvent, ...] = tuple(note_on_events)
        self.time_signatures: Tuple[TimeSignatureEvent, ...] = tuple(time_signatures)
        self.name = name
        self.min_note_number = min_note_number
        self.max_note_number = max_note_number
        self.duration = duration
        self.pairings: Mapping[int, int] = MappingProxyType(dict(pairings or {}))
        self._positions: Dict[int, int] = {id(event): i for i, event in enumerate(self.events)}

    def index_of(self, event: MidiEvent) -> int:
        """
        Position of an event object in `events`.

        Raises:
            ValueError: The event does not belong to this track
        """
        try:
            return self._positions[id(event)]
        except KeyError:
            raise ValueError(f"{event} is not an event of this track")

    def note_off_for(self, note_on: NoteOnEvent) -> Optional[NoteOffEvent]:
        """Return the NoteOffEvent paired with note_on, or None if unpaired."""
        off_index = self.pairings.get(self.index_of(note_on))
        if off_index is None:
            return None
        note_off = self.events[off_index]
        assert isinstance(note_off, NoteOffEvent)
        return note_off

    def note_length(self, note_on: NoteOnEvent) -> Optional[int]:
        """Ticks between note_on and its paired note-off, or None if unpaired."""
        note_off = self.note_off_for(note_on)
        if note_off is None:
            return None
        return note_off.absolute_time - note_on.absolute_time

    def notes(self) -> Iterator[PairedNote]:
        """Yield every paired note in note-on order."""
        for note_on in self.note_on_events:
            note_off = self.note_off_for(note_on)
            if note_off is not None:
                yield PairedNote(note_on, note_off, note_off.absolute_time - note_on.absolute_time)

    def main_time_signature(self) -> Tuple[int, int]:
        """
        Governing time signature of the track.

        Returns:
            (beats_per_measure, beat_unit) from the first TimeSignature event,
            (4, 4) when there is none
        """
        if self.time_signatures:
            first = self.time_signatures[0]
            return first.numerator, first.beat_unit
        return DEFAULT_TIME_SIGNATURE

    def tempo(self) -> int:
        """First tempo set in the track (microseconds per quarter note)."""
        for event in self.events:
            if isinstance(event, SetTempoEvent):
                return event.tempo
        return DEFAULT_TEMPO

    def __len__(self) -> int:
        return len(self.events)

    def __iter__(self) -> Iterator[MidiEvent]:
        return iter(self.events)

    def __repr__(self) -> str:
        return (
            f"TrackChunk(name={self.name!r}, events={len(self.events)}, "
            f"notes={self.min_note_number}-{self.max_note_number}, "
            f"time_signature={self.main_time_signature()}, duration={self.duration})"
        )


def decode_track(
    data: bytes,
    track_index: Optional[int] = None,
    config: Optional[ParserConfig] = None,
    sink: Optional[DiagnosticSink] = None
) -> TrackChunk:
    """
    Decode a track chunk payload.

    Decoding runs until the payload is used up, so bytes after an
    EndOfTrack event are still decoded.

    Duration is the absolute time reached at the end of the payload,
    overridden by the time of the last EndOfTrack event when that time is
    nonzero.

    Args:
        data: Track chunk payload (without id and length)
        track_index: Index of the track in the file, recorded on anomalies
            and on parse errors
        config: Parser settings (default: DEFAULT_CONFIG)
        sink: Receives anomalies (default: log them)

    Returns:
        Decoded TrackChunk

    Raises:
        MidiParseError: Payload is truncated; carries track_index and offset
    """
    if config is None:
        config = DEFAULT_CONFIG

    pairer = NotePairer(sink, track_index)
    events: List[MidiEvent] = []
    note_on_events: List[NoteOnEvent] = []
    time_signatures: List[TimeSignatureEvent] = []
    name: Optional[str] = None
    min_note_number = NO_NOTES_MIN
    max_note_number = NO_NOTES_MAX
    end_of_track_time = 0

    status = RunningStatus()
    offset = 0

    try:
        while offset < len(data):
            decoded = decode_event(data, offset, status, sink, track_index, config.text_encoding)
            offset += decoded.length
            status = decoded.status

            event = decoded.event
            if event is None:
                continue

            index = len(events)
            events.append(event)

            if isinstance(event, NoteOnEvent):
                pairer.add_note_on(index, event)
                note_on_events.append(event)
                min_note_number = min(min_note_number, event.note_number)
                max_note_number = max(max_note_number, event.note_number)

            elif isinstance(event, NoteOffEvent):
                pairer.pair_note_off(index, event)

            elif isinstance(event, TimeSignatureEvent):
                time_signatures.append(event)

            elif isinstance(event, TrackNameEvent):
                if name is None:
                    name = event.text

            elif isinstance(event, EndOfTrackEvent):
                end_of_track_time = event.absolute_time

    except MidiParseError as e:
        if track_index is not None:
            e.at_track(track_index)
        raise

    duration = status.absolute_time
    if end_of_track_time != 0:
        duration = end_of_track_time

    logger.debug(
        "Track %s: %d events, %d note-ons, %d paired, duration %d",
        track_index, len(events), len(note_on_events), len(pairer.pairings), duration
    )

    return TrackChunk(
        events,
        note_on_events,
        time_signatures,
        name if name is not None else config.default_track_name,
        min_note_number,
        max_note_number,
        duration,
        pairer.pairings,
    )
