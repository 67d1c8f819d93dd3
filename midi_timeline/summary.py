"""Human-readable summaries of decoded MIDI files."""

from typing import Optional

import mido

from .midi_file import HeaderChunk, MidiData
from .track import TrackChunk


def midi_note_to_frequency(midi_note: int) -> float:
    """
    Convert MIDI note number to frequency in Hz.

    MIDI note 69 (A4) = 440 Hz
    Formula: freq = 440 * 2^((note - 69) / 12)

    Args:
        midi_note: MIDI note number (0-127)

    Returns:
        Frequency in Hz
    """
    result: float = 440.0 * (2.0 ** ((midi_note - 69) / 12.0))
    return result


def ticks_to_seconds(ticks: int, header: HeaderChunk, tempo: int) -> float:
    """
    Convert a tick count to seconds.

    Args:
        ticks: Tick count
        header: File header (gives the time division)
        tempo: Microseconds per quarter note, ignored for SMPTE division

    Returns:
        Seconds (0.0 when the division is zero)
    """
    if header.uses_smpte:
        ticks_per_second = header.smpte_format * header.ticks_per_frame
        return ticks / ticks_per_second if ticks_per_second else 0.0
    if not header.ticks_per_beat:
        return 0.0
    return mido.tick2second(ticks, header.ticks_per_beat, tempo)


def print_track_summary(track: TrackChunk, header: HeaderChunk, index: Optional[int] = None) -> None:
    """
    Print a summary of one track.

    Seconds are computed with the track's first tempo.

    Args:
        track: Decoded track
        header: File header
        index: Track number shown in the title
    """
    title = f"Track {index}: {track.name}" if index is not None else f"Track: {track.name}"
    print(title)
    print(f"  Events: {len(track.events)}")

    tempo = track.tempo()
    seconds = ticks_to_seconds(track.duration, header, tempo)
    print(f"  Duration: {track.duration} ticks ({seconds:.1f}s at {mido.tempo2bpm(tempo):.1f} BPM)")

    beats_per_measure, beat_unit = track.main_time_signature()
    print(f"  Time signature: {beats_per_measure}/{beat_unit}")

    if not track.note_on_events:
        print("  No notes found!")
        return

    paired = list(track.notes())
    print(f"  Notes: {len(track.note_on_events)} ({len(paired)} paired)")
    print(f"  Note range: {track.min_note_number} - {track.max_note_number}")
    print(
        f"  Frequency range: {midi_note_to_frequency(track.min_note_number):.1f} - "
        f"{midi_note_to_frequency(track.max_note_number):.1f} Hz"
    )

    velocities = [n.velocity for n in track.note_on_events]
    print(f"  Velocity range: {min(velocities)} - {max(velocities)}")

    if paired:
        average = sum(note.length for note in paired) / len(paired)
        print(f"  Average note length: {average:.1f} ticks")


def print_file_summary(midi: MidiData) -> None:
    """
    Print the header and a summary of every track.

    Args:
        midi: Decoded file
    """
    header = midi.header
    print(f"Format: {header.format_type}")
    print(f"Tracks: {header.track_count}")
    if header.uses_smpte:
        print(f"Time division: {header.ticks_per_frame} ticks per frame @ {header.smpte_format} fps")
    else:
        print(f"Time division: {header.ticks_per_beat} ticks per beat")
    print(f"Duration: {midi.duration} ticks")

    for index, track in enumerate(midi.tracks):
        print()
        print_track_summary(track, header, index)
