
from midi_timeline import (
    DuplicateNotePairing,
    NoteOffEvent,
    NoteOnEvent,
    NotePairer,
    OverlappingNoteOn,
    UnpairedNoteOff,
    decode_track,
)
from tests.midi_bytes import end_of_track, note_off, note_on


def test_note_off_pairs_with_note_on(sink):
    track = decode_track(note_on(0, 60) + note_off(10, 60), sink=sink)

    [on] = track.note_on_events
    off = track.note_off_for(on)
    assert isinstance(off, NoteOffEvent)
    assert off.absolute_time == 10
    assert track.note_length(on) == 10
    assert len(sink) == 0


def test_note_off_pairs_with_most_recent_note_on(sink):
    data = note_on(0, 60) + note_on(5, 60) + note_off(3, 60)
    track = decode_track(data, track_index=0, sink=sink)

    first, second = track.note_on_events
    assert second.absolute_time == 5
    assert track.note_length(second) == 3
    assert track.note_off_for(first) is None

    [overlap] = sink.of_type(OverlappingNoteOn)
    assert overlap.note_on is second
    assert overlap.previous_note_on is first
    assert overlap.track_index == 0


def test_channel_is_not_part_of_the_match(sink):
    track = decode_track(note_on(0, 60, channel=0) + note_off(4, 60, channel=9), sink=sink)
    [on] = track.note_on_events
    assert track.note_length(on) == 4


def test_equal_times_give_zero_length(sink):
    track = decode_track(note_on(7, 64) + note_off(0, 64), sink=sink)
    [on] = track.note_on_events
    assert track.note_length(on) == 0


def test_unpaired_note_off_is_reported_and_kept(sink):
    track = decode_track(note_on(0, 60) + note_off(10, 62) + end_of_track(), sink=sink)

    [unpaired] = sink.of_type(UnpairedNoteOff)
    assert unpaired.note_off.note_number == 62
    assert len(track.events) == 3
    assert track.note_off_for(track.note_on_events[0]) is None


def test_second_note_off_overwrites_pairing(sink):
    data = note_on(0, 60) + note_off(10, 60) + note_off(5, 60)
    track = decode_track(data, sink=sink)

    [on] = track.note_on_events
    first_off, second_off = track.events[1], track.events[2]
    assert track.note_off_for(on) is second_off
    assert track.note_length(on) == 15

    [duplicate] = sink.of_type(DuplicateNotePairing)
    assert duplicate.previous_note_off is first_off
    assert duplicate.note_off is second_off


def test_note_on_after_paired_note_is_not_an_overlap(sink):
    decode_track(note_on(0, 60) + note_off(10, 60) + note_on(0, 60), sink=sink)
    assert sink.of_type(OverlappingNoteOn) == []


def test_pairing_table_uses_event_indices(sink):
    pairer = NotePairer(sink, track_index=4)
    on = NoteOnEvent(0, 0, 0, 60, 100)
    off = NoteOffEvent(12, 12, 0, 60, 0)

    pairer.add_note_on(3, on)
    assert pairer.pair_note_off(8, off) == 3
    assert pairer.pairings == {3: 8}


def test_pairer_reports_unmatched_note_off_with_track_index(sink):
    pairer = NotePairer(sink, track_index=4)
    assert pairer.pair_note_off(0, NoteOffEvent(0, 0, 0, 60, 0)) is None
    [unpaired] = sink.anomalies
    assert isinstance(unpaired, UnpairedNoteOff)
    assert unpaired.track_index == 4


def test_default_sink_logs_anomalies(caplog):
    with caplog.at_level("WARNING", logger="midi_timeline"):
        decode_track(note_off(0, 60), track_index=1)
    assert "Track 1: Failed to find NoteOn event for NoteOff" in caplog.text
