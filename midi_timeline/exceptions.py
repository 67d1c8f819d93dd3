"""Custom exceptions for MIDI timeline decoding."""

from typing import Optional


class MidiTimelineError(Exception):
    """Base exception for midi_timeline errors."""
    pass


class ConfigError(MidiTimelineError):
    """Parser configuration is invalid."""
    pass


class MidiParseError(MidiTimelineError):
    """
    Fatal decode failure.

    Attributes:
        offset: Byte offset of the failure. Relative to the chunk payload for
            errors raised while decoding a track, relative to the start of the
            file for chunk framing errors.
        track_index: Index of the track being decoded (None outside a track)
    """

    def __init__(self, message: str, offset: int = 0, track_index: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.offset = offset
        self.track_index = track_index

    def at_track(self, track_index: int) -> "MidiParseError":
        """Stamp the failing track index and return self for re-raising."""
        self.track_index = track_index
        return self

    def __str__(self) -> str:
        location = f"offset {self.offset:#x}"
        if self.track_index is not None:
            location = f"track {self.track_index}, {location}"
        return f"{self.message} ({location})"


class TruncatedQuantityError(MidiParseError):
    """Variable-length quantity ran past the end of the payload."""
    pass


class TruncatedPayloadError(MidiParseError):
    """Fixed-size field could not be read in full."""
    pass


class UnexpectedChunkIdError(MidiParseError):
    """Chunk identifier is not the one the file layout requires."""
    pass
