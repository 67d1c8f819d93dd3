"""Helpers that assemble raw Standard MIDI File bytes for tests."""

import struct

from mido.midifiles.meta import encode_variable_int


def vlq(value: int) -> bytes:
    return bytes(encode_variable_int(value))


def channel_event(delta: int, status: int, *params: int) -> bytes:
    return vlq(delta) + bytes([status, *params])


def note_on(delta: int, note: int, velocity: int = 64, channel: int = 0) -> bytes:
    return channel_event(delta, 0x90 | channel, note, velocity)


def note_off(delta: int, note: int, velocity: int = 0, channel: int = 0) -> bytes:
    return channel_event(delta, 0x80 | channel, note, velocity)


def meta(delta: int, meta_type: int, payload: bytes = b"") -> bytes:
    return vlq(delta) + bytes([0xFF, meta_type, len(payload)]) + payload


def track_name(delta: int, name: str) -> bytes:
    return meta(delta, 0x03, name.encode("latin-1"))


def time_signature(delta: int, numerator: int, denominator_power: int,
                   clocks: int = 24, thirty_seconds: int = 8) -> bytes:
    return meta(delta, 0x58, bytes([numerator, denominator_power, clocks, thirty_seconds]))


def end_of_track(delta: int = 0) -> bytes:
    return meta(delta, 0x2F)


def chunk(chunk_id: bytes, payload: bytes) -> bytes:
    return chunk_id + struct.pack(">I", len(payload)) + payload


def header(format_type: int = 1, track_count: int = 1, division: int = 480) -> bytes:
    return chunk(b"MThd", struct.pack(">HHH", format_type, track_count, division))


def smf(*track_payloads: bytes, format_type: int = 1, division: int = 480) -> bytes:
    """Build a complete file from track payloads."""
    data = header(format_type, len(track_payloads), division)
    for payload in track_payloads:
        data += chunk(b"MTrk", payload)
    return data
