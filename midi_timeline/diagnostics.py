"""Recoverable decode anomalies and the sinks that receive them."""

import logging
from dataclasses import dataclass
from typing import List, Optional, Type, TypeVar

from .events import NoteOffEvent, NoteOnEvent

logger = logging.getLogger(__name__)

A = TypeVar("A", bound="Anomaly")


@dataclass(frozen=True)
class Anomaly:
    """Base for anomalies reported while decoding; decoding always continues."""
    track_index: Optional[int]

    def describe(self) -> str:
        return type(self).__name__


@dataclass(frozen=True)
class UnpairedNoteOff(Anomaly):
    note_off: NoteOffEvent

    def describe(self) -> str:
        return f"Failed to find NoteOn event for NoteOff: {self.note_off}"


@dataclass(frozen=True)
class DuplicateNotePairing(Anomaly):
    """A NoteOff matched a NoteOn that was already paired; the new NoteOff replaces the old one."""
    note_on: NoteOnEvent
    previous_note_off: NoteOffEvent
    note_off: NoteOffEvent

    def describe(self) -> str:
        return f"Found already-paired NoteOn event: {self.note_on} for NoteOff: {self.note_off}"


@dataclass(frozen=True)
class OverlappingNoteOn(Anomaly):
    note_on: NoteOnEvent
    previous_note_on: NoteOnEvent

    def describe(self) -> str:
        return (
            f"Found new NoteOn event: {self.note_on} "
            f"while previous NoteOn is unpaired: {self.previous_note_on}"
        )


@dataclass(frozen=True)
class UnknownMetaType(Anomaly):
    meta_type: int
    length: int
    offset: int

    def describe(self) -> str:
        return (
            f"Skipped unknown meta event type {self.meta_type:#04x} "
            f"({self.length} bytes) at offset {self.offset:#x}"
        )


@dataclass(frozen=True)
class UnknownStatusByte(Anomaly):
    status: int
    offset: int

    def describe(self) -> str:
        return f"Skipped unexpected status byte {self.status:#04x} at offset {self.offset:#x}"


@dataclass(frozen=True)
class UnrecognizedChunkId(Anomaly):
    chunk_id: bytes
    expected: bytes
    offset: int

    def describe(self) -> str:
        return (
            f"Chunk id {self.chunk_id!r} at offset {self.offset:#x} "
            f"is not {self.expected!r}, decoding it anyway"
        )


class DiagnosticSink:
    """Receives anomalies. Subclass and override report()."""

    def report(self, anomaly: Anomaly) -> None:
        raise NotImplementedError


class LoggingDiagnosticSink(DiagnosticSink):
    """Log every anomaly as a warning."""

    def __init__(self, log: Optional[logging.Logger] = None):
        self.log = log or logger

    def report(self, anomaly: Anomaly) -> None:
        if anomaly.track_index is None:
            self.log.warning("%s", anomaly.describe())
        else:
            self.log.warning("Track %d: %s", anomaly.track_index, anomaly.describe())


class CollectingDiagnosticSink(DiagnosticSink):
    """Keep every anomaly in memory, in report order."""

    def __init__(self):
        self.anomalies: List[Anomaly] = []

    def report(self, anomaly: Anomaly) -> None:
        self.anomalies.append(anomaly)

    def of_type(self, anomaly_type: Type[A]) -> List[A]:
        """Return the collected anomalies of one type."""
        return [a for a in self.anomalies if isinstance(a, anomaly_type)]

    def __len__(self) -> int:
        return len(self.anomalies)


DEFAULT_SINK = LoggingDiagnosticSink()
