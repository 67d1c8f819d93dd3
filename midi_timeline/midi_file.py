"""Standard MIDI File chunk framing and top-level parsing."""

import io
import logging
import struct
from dataclasses import dataclass
from pathlib import Path
from typing import BinaryIO, Iterator, NamedTuple, Optional, Sequence, Tuple, Union

from .config import DEFAULT_CONFIG, HEADER_CHUNK_ID, HEADER_PAYLOAD_SIZE, TRACK_CHUNK_ID, ParserConfig
from .diagnostics import DEFAULT_SINK, DiagnosticSink, UnrecognizedChunkId
from .exceptions import MidiParseError, TruncatedPayloadError, UnexpectedChunkIdError
from .track import TrackChunk, decode_track

logger = logging.getLogger(__name__)

CHUNK_PREFIX_SIZE = 8


class Chunk(NamedTuple):
    """Raw chunk: 4-byte id, payload, and file offset of the id."""
    chunk_id: bytes
    data: bytes
    offset: int

    @property
    def size(self) -> int:
        """Bytes the chunk occupies in the file, id and length included."""
        return CHUNK_PREFIX_SIZE + len(self.data)


@dataclass(frozen=True)
class HeaderChunk:
    """
    MThd fields, copied from the file as-is.

    Attributes:
        format_type: 0 (single track), 1 (simultaneous tracks) or 2 (independent)
        track_count: Number of track chunks announced
        time_division: Raw division word (PPQ, or SMPTE when bit 15 is set)
    """
    format_type: int
    track_count: int
    time_division: int

    @property
    def uses_smpte(self) -> bool:
        return bool(self.time_division & 0x8000)

    @property
    def ticks_per_beat(self) -> Optional[int]:
        """Pulses per quarter note, None for SMPTE division."""
        if self.uses_smpte:
            return None
        return self.time_division

    @property
    def smpte_format(self) -> Optional[int]:
        """Frames per second (24, 25, 29 or 30), None for PPQ division."""
        if not self.uses_smpte:
            return None
        return -struct.unpack(">b", bytes([self.time_division >> 8]))[0]

    @property
    def ticks_per_frame(self) -> Optional[int]:
        if not self.uses_smpte:
            return None
        return self.time_division & 0xFF


class MidiData:
    """Decoded file: the header plus the tracks in file order."""

    def __init__(self, header: HeaderChunk, tracks: Sequence[TrackChunk]):
        self.header = header
        self.tracks: Tuple[TrackChunk, ...] = tuple(tracks)

    @property
    def duration(self) -> int:
        """Longest track duration in ticks (0 without tracks)."""
        return max((track.duration for track in self.tracks), default=0)

    def __len__(self) -> int:
        return len(self.tracks)

    def __iter__(self) -> Iterator[TrackChunk]:
        return iter(self.tracks)

    def __getitem__(self, index: int) -> TrackChunk:
        return self.tracks[index]

    def __repr__(self) -> str:
        return f"MidiData(header={self.header}, tracks={len(self.tracks)})"


def _read_exact(stream: BinaryIO, count: int, offset: int, what: str) -> bytes:
    data = stream.read(count)
    if len(data) < count:
        raise TruncatedPayloadError(
            f"{what} needs {count} bytes, {len(data)} available", offset=offset
        )
    return data


def read_chunk(stream: BinaryIO, offset: int = 0) -> Chunk:
    """
    Read one chunk: 4-byte id, big-endian 32-bit length, then the payload.

    The id is not checked here.

    Args:
        stream: Binary stream positioned at a chunk id
        offset: File offset of the stream position, used in errors

    Returns:
        Chunk with the full payload

    Raises:
        TruncatedPayloadError: Stream ends inside the chunk
    """
    chunk_id = _read_exact(stream, 4, offset, "Chunk id")
    (length,) = struct.unpack(">I", _read_exact(stream, 4, offset + 4, "Chunk length"))
    data = _read_exact(stream, length, offset + CHUNK_PREFIX_SIZE, f"Chunk {chunk_id!r} payload")
    return Chunk(chunk_id, data, offset)


def check_chunk_id(
    chunk: Chunk,
    expected: bytes,
    config: ParserConfig,
    sink: DiagnosticSink,
    track_index: Optional[int] = None
) -> None:
    """
    Apply the chunk id policy.

    Raises:
        UnexpectedChunkIdError: Id mismatch and config.strict_chunk_ids is set
    """
    if chunk.chunk_id == expected:
        return
    if config.strict_chunk_ids:
        raise UnexpectedChunkIdError(
            f"Expected chunk id {expected!r}, found {chunk.chunk_id!r}",
            offset=chunk.offset,
            track_index=track_index
        )
    sink.report(UnrecognizedChunkId(track_index, chunk.chunk_id, expected, chunk.offset))


def decode_header(chunk: Chunk) -> HeaderChunk:
    """
    Decode the MThd payload.

    Extra payload bytes past the first six are ignored.

    Raises:
        TruncatedPayloadError: Payload shorter than 6 bytes
    """
    if len(chunk.data) < HEADER_PAYLOAD_SIZE:
        raise TruncatedPayloadError(
            f"Header chunk needs {HEADER_PAYLOAD_SIZE} bytes, got {len(chunk.data)}",
            offset=chunk.offset + CHUNK_PREFIX_SIZE
        )
    format_type, track_count, time_division = struct.unpack(">HHH", chunk.data[:HEADER_PAYLOAD_SIZE])
    return HeaderChunk(format_type, track_count, time_division)


def parse_midi(
    stream: BinaryIO,
    config: Optional[ParserConfig] = None,
    sink: Optional[DiagnosticSink] = None
) -> MidiData:
    """
    Parse a Standard MIDI File from a binary stream.

    Reads the header chunk, then exactly as many track chunks as the header
    announces. Anything after the last announced track is not read. The
    stream is left open.

    Args:
        stream: Readable binary stream at the start of the file
        config: Parser settings (default: DEFAULT_CONFIG)
        sink: Receives recoverable anomalies (default: log them)

    Returns:
        MidiData with the header and decoded tracks

    Raises:
        MidiParseError: Truncated data, or unexpected chunk id in strict mode
    """
    if config is None:
        config = DEFAULT_CONFIG
    if sink is None:
        sink = DEFAULT_SINK

    header_chunk = read_chunk(stream, 0)
    check_chunk_id(header_chunk, HEADER_CHUNK_ID, config, sink)
    header = decode_header(header_chunk)
    logger.debug(
        "Header: format %d, %d tracks, division %d",
        header.format_type, header.track_count, header.time_division
    )

    offset = header_chunk.size
    tracks = []
    for track_index in range(header.track_count):
        try:
            chunk = read_chunk(stream, offset)
        except MidiParseError as e:
            e.at_track(track_index)
            raise
        check_chunk_id(chunk, TRACK_CHUNK_ID, config, sink, track_index)
        tracks.append(decode_track(chunk.data, track_index, config, sink))
        offset += chunk.size

    return MidiData(header, tracks)


def parse_midi_bytes(
    data: bytes,
    config: Optional[ParserConfig] = None,
    sink: Optional[DiagnosticSink] = None
) -> MidiData:
    """Parse a Standard MIDI File held in memory."""
    return parse_midi(io.BytesIO(data), config, sink)


def parse_midi_file(
    midi_path: Union[str, Path],
    config: Optional[ParserConfig] = None,
    sink: Optional[DiagnosticSink] = None
) -> MidiData:
    """
    Parse a Standard MIDI File from disk.

    Args:
        midi_path: Path to MIDI file
        config: Parser settings (default: DEFAULT_CONFIG)
        sink: Receives recoverable anomalies (default: log them)

    Returns:
        MidiData with the header and decoded tracks

    Raises:
        FileNotFoundError: File does not exist
        MidiParseError: File is truncated or malformed
    """
    with open(midi_path, 'rb') as f:
        return parse_midi(f, config, sink)
