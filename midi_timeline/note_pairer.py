"""Match note-off events to the note-on events they end."""

from typing import Dict, List, Optional, Tuple

from .diagnostics import (
    DEFAULT_SINK,
    DiagnosticSink,
    DuplicateNotePairing,
    OverlappingNoteOn,
    UnpairedNoteOff,
)
from .events import NoteOffEvent, NoteOnEvent


class NotePairer:
    """
    Pair notes for one track during the decode pass.

    Events are referred to by their index in the track's event list. The
    result is a pairing table of note-on index -> note-off index.

    Matching is by note number only (channel is ignored), most recent
    note-on first. A note-off that hits an already-paired note-on replaces
    the earlier pairing.
    """

    def __init__(self, sink: Optional[DiagnosticSink] = None, track_index: Optional[int] = None):
        """
        Initialize an empty pairer.

        Args:
            sink: Receives pairing anomalies (default: log them)
            track_index: Track index recorded on anomalies
        """
        self.sink = DEFAULT_SINK if sink is None else sink
        self.track_index = track_index
        self.note_ons: List[Tuple[int, NoteOnEvent]] = []
        self.pairings: Dict[int, int] = {}
        self._note_offs: Dict[int, NoteOffEvent] = {}

    def add_note_on(self, index: int, note_on: NoteOnEvent) -> None:
        """
        Record a note-on, reporting an overlap if the previous note-on of the
        same pitch is still unpaired.
        """
        previous = self._find_latest(note_on.note_number)
        if previous is not None:
            previous_index, previous_note_on = previous
            if previous_index not in self.pairings:
                self.sink.report(OverlappingNoteOn(self.track_index, note_on, previous_note_on))

        self.note_ons.append((index, note_on))

    def pair_note_off(self, index: int, note_off: NoteOffEvent) -> Optional[int]:
        """
        Pair a note-off with the most recent note-on of the same pitch.

        Args:
            index: Index of the note-off in the track's event list
            note_off: The note-off event

        Returns:
            Event index of the matched note-on, or None if unpaired
        """
        match = self._find_latest(note_off.note_number)
        if match is None:
            self.sink.report(UnpairedNoteOff(self.track_index, note_off))
            return None

        note_on_index, note_on = match
        if note_on_index in self.pairings:
            previous_off = self._note_offs[self.pairings[note_on_index]]
            self.sink.report(DuplicateNotePairing(self.track_index, note_on, previous_off, note_off))

        self.pairings[note_on_index] = index
        self._note_offs[index] = note_off
        return note_on_index

    def _find_latest(self, note_number: int) -> Optional[Tuple[int, NoteOnEvent]]:
        for index, note_on in reversed(self.note_ons):
            if note_on.note_number == note_number:
                return index, note_on
        return None
