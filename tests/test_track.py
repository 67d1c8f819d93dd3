import pytest

from midi_timeline import (
    EndOfTrackEvent,
    NoteOffEvent,
    NoteOnEvent,
    PairedNote,
    ParserConfig,
    TextEvent,
    TruncatedPayloadError,
    TruncatedQuantityError,
    UnknownMetaType,
    decode_track,
)
from tests.midi_bytes import (
    end_of_track,
    meta,
    note_off,
    note_on,
    time_signature,
    track_name,
    vlq,
)


def test_end_of_track_time_overrides_duration(sink):
    data = note_on(0, 60) + note_off(470, 60) + end_of_track(10)
    track = decode_track(data, sink=sink)

    assert track.events[-2].absolute_time == 470
    assert track.duration == 480


def test_end_of_track_override_applies_even_when_earlier(sink):
    # trailing bytes after EndOfTrack are decoded; the override still wins
    data = note_on(0, 60) + end_of_track(100) + note_off(200, 60)
    track = decode_track(data, sink=sink)

    assert isinstance(track.events[-1], NoteOffEvent)
    assert track.events[-1].absolute_time == 300
    assert track.duration == 100


def test_end_of_track_at_zero_keeps_last_event_time(sink):
    track = decode_track(end_of_track(0), sink=sink)
    assert track.duration == 0

    track = decode_track(note_on(0, 60) + note_off(50, 60), sink=sink)
    assert track.duration == 50


def test_duration_counts_skipped_events(sink):
    data = note_on(0, 60) + note_off(10, 60) + meta(30, 0x21, b"\x00")
    track = decode_track(data, sink=sink)

    assert len(track.events) == 2
    assert track.duration == 40
    assert len(sink.of_type(UnknownMetaType)) == 1


def test_track_without_notes_has_empty_range_sentinel(sink):
    track = decode_track(track_name(0, "Conductor") + end_of_track(0), sink=sink)

    assert track.note_on_events == ()
    assert track.min_note_number == 127
    assert track.max_note_number == 0


def test_note_range_over_note_ons(sink):
    data = (
        note_on(0, 64) + note_off(10, 64)
        + note_on(0, 48) + note_off(10, 48)
        + note_on(0, 79) + note_off(10, 79)
        + note_off(0, 20)  # note-offs do not count
    )
    track = decode_track(data, sink=sink)
    assert (track.min_note_number, track.max_note_number) == (48, 79)


def test_track_name_is_first_occurrence(sink):
    data = track_name(0, "Lead") + track_name(10, "Other") + end_of_track(0)
    track = decode_track(data, sink=sink)
    assert track.name == "Lead"


def test_default_track_name(sink):
    assert decode_track(end_of_track(), sink=sink).name == "no name"

    config = ParserConfig(default_track_name="untitled")
    assert decode_track(end_of_track(), config=config, sink=sink).name == "untitled"


def test_time_signature_subsequence_and_main_signature(sink):
    data = (
        time_signature(0, 3, 2)
        + note_on(0, 60) + note_off(480, 60)
        + time_signature(0, 6, 3)
        + end_of_track(0)
    )
    track = decode_track(data, sink=sink)

    assert [ts.numerator for ts in track.time_signatures] == [3, 6]
    assert track.main_time_signature() == (3, 4)


def test_main_time_signature_defaults_to_four_four(sink):
    assert decode_track(end_of_track(), sink=sink).main_time_signature() == (4, 4)


def test_events_keep_file_order_and_times_do_not_decrease(sink):
    data = (
        track_name(0, "Piano")
        + meta(0, 0x01, b"intro")
        + note_on(0, 60) + note_on(0, 64)
        + note_off(240, 60) + note_off(0, 64)
        + end_of_track(240)
    )
    track = decode_track(data, sink=sink)

    times = [event.absolute_time for event in track.events]
    assert times == sorted(times)
    assert isinstance(track.events[1], TextEvent)
    assert isinstance(track.events[-1], EndOfTrackEvent)
    assert track.note_on_events == tuple(e for e in track.events if isinstance(e, NoteOnEvent))
    assert len(track) == 7


def test_notes_yields_paired_notes_in_note_on_order(sink):
    data = note_on(0, 60) + note_on(0, 64) + note_off(100, 64) + note_off(20, 60) + note_on(0, 67)
    track = decode_track(data, sink=sink)

    notes = list(track.notes())
    assert [(n.note_on.note_number, n.length) for n in notes] == [(60, 120), (64, 100)]
    assert all(isinstance(n, PairedNote) for n in notes)


def test_pairing_lookup_rejects_foreign_events(sink):
    track = decode_track(note_on(0, 60) + note_off(10, 60), sink=sink)
    stranger = NoteOnEvent(0, 0, 0, 60, 64)

    assert stranger == track.note_on_events[0]
    with pytest.raises(ValueError):
        track.note_off_for(stranger)


def test_pairings_are_read_only(sink):
    track = decode_track(note_on(0, 60) + note_off(10, 60), sink=sink)
    assert dict(track.pairings) == {0: 1}
    with pytest.raises(TypeError):
        track.pairings[0] = 5


def test_tempo_uses_first_set_tempo(sink):
    data = meta(0, 0x51, b"\x09\x27\xC0") + meta(100, 0x51, b"\x07\xA1\x20")
    assert decode_track(data, sink=sink).tempo() == 600000
    assert decode_track(end_of_track(), sink=sink).tempo() == 500000


def test_empty_payload_gives_empty_track(sink):
    track = decode_track(b"", sink=sink)
    assert track.events == ()
    assert track.duration == 0


def test_truncated_track_reports_track_index_and_offset(sink):
    data = note_on(0, 60) + vlq(0) + b"\x90\x3C"
    with pytest.raises(TruncatedPayloadError) as excinfo:
        decode_track(data, track_index=3, sink=sink)

    assert excinfo.value.track_index == 3
    assert excinfo.value.offset == 7
    assert "track 3" in str(excinfo.value)


def test_truncated_delta_time_aborts_track(sink):
    with pytest.raises(TruncatedQuantityError) as excinfo:
        decode_track(note_on(0, 60) + b"\x81", track_index=0, sink=sink)
    assert excinfo.value.track_index == 0
    assert excinfo.value.offset == 4
