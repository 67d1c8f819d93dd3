# MIDI Timeline - Standard MIDI File decoding

from .config import DEFAULT_CONFIG, ParserConfig, load_config
from .diagnostics import (
    Anomaly,
    CollectingDiagnosticSink,
    DiagnosticSink,
    DuplicateNotePairing,
    LoggingDiagnosticSink,
    OverlappingNoteOn,
    UnknownMetaType,
    UnknownStatusByte,
    UnpairedNoteOff,
    UnrecognizedChunkId,
)
from .event_decoder import DecodedEvent, RunningStatus, decode_event
from .events import (
    AftertouchEvent,
    ChannelAftertouchEvent,
    ChannelEvent,
    ChannelPrefixEvent,
    ControllerChangeEvent,
    CopyrightEvent,
    CuePointEvent,
    EndOfTrackEvent,
    InstrumentNameEvent,
    KeySignatureEvent,
    LyricEvent,
    MarkerEvent,
    MetaEvent,
    MetaEventType,
    MidiEvent,
    MidiEventType,
    NoteOffEvent,
    NoteOnEvent,
    PitchBendEvent,
    ProgramChangeEvent,
    SequenceNumberEvent,
    SequencerSpecificEvent,
    SetTempoEvent,
    SMPTEOffsetEvent,
    SysexEvent,
    TextEvent,
    TimeSignatureEvent,
    TrackNameEvent,
)
from .exceptions import (
    ConfigError,
    MidiParseError,
    MidiTimelineError,
    TruncatedPayloadError,
    TruncatedQuantityError,
    UnexpectedChunkIdError,
)
from .midi_file import (
    Chunk,
    HeaderChunk,
    MidiData,
    decode_header,
    parse_midi,
    parse_midi_bytes,
    parse_midi_file,
    read_chunk,
)
from .note_pairer import NotePairer
from .track import PairedNote, TrackChunk, decode_track
from .vlq import read_variable_length

__all__ = [
    # Parsing
    "parse_midi",
    "parse_midi_bytes",
    "parse_midi_file",
    "read_chunk",
    "decode_header",
    "decode_track",
    "decode_event",
    "read_variable_length",
    "NotePairer",
    # File and track model
    "Chunk",
    "HeaderChunk",
    "MidiData",
    "TrackChunk",
    "PairedNote",
    "RunningStatus",
    "DecodedEvent",
    # Events
    "MidiEventType",
    "MetaEventType",
    "MidiEvent",
    "ChannelEvent",
    "NoteOnEvent",
    "NoteOffEvent",
    "AftertouchEvent",
    "ControllerChangeEvent",
    "ProgramChangeEvent",
    "ChannelAftertouchEvent",
    "PitchBendEvent",
    "MetaEvent",
    "SequenceNumberEvent",
    "TextEvent",
    "CopyrightEvent",
    "TrackNameEvent",
    "InstrumentNameEvent",
    "LyricEvent",
    "MarkerEvent",
    "CuePointEvent",
    "ChannelPrefixEvent",
    "EndOfTrackEvent",
    "SetTempoEvent",
    "SMPTEOffsetEvent",
    "TimeSignatureEvent",
    "KeySignatureEvent",
    "SequencerSpecificEvent",
    "SysexEvent",
    # Diagnostics
    "Anomaly",
    "DiagnosticSink",
    "LoggingDiagnosticSink",
    "CollectingDiagnosticSink",
    "UnpairedNoteOff",
    "DuplicateNotePairing",
    "OverlappingNoteOn",
    "UnknownMetaType",
    "UnknownStatusByte",
    "UnrecognizedChunkId",
    # Exceptions
    "MidiTimelineError",
    "MidiParseError",
    "TruncatedQuantityError",
    "TruncatedPayloadError",
    "UnexpectedChunkIdError",
    "ConfigError",
    # Config
    "ParserConfig",
    "DEFAULT_CONFIG",
    "load_config",
]
