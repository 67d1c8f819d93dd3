import pytest

from midi_timeline import TruncatedQuantityError, read_variable_length
from tests.midi_bytes import vlq


@pytest.mark.parametrize("data, expected", [
    (b"\x00", 0),
    (b"\x40", 64),
    (b"\x7F", 127),
    (b"\x81\x00", 128),
    (b"\xFF\x7F", 16383),
    (b"\x81\x80\x00", 16384),
    (b"\xFF\xFF\xFF\x7F", 0x0FFFFFFF),
])
def test_known_encodings(data, expected):
    assert read_variable_length(data, 0) == (expected, len(data))


@pytest.mark.parametrize("value", [0, 0x7F, 0x80, 0x3FFF, 0x4000, 0x1FFFFF, 0x200000, 0x0FFFFFFF])
def test_decodes_values_encoded_by_mido(value):
    encoded = vlq(value)
    assert read_variable_length(encoded, 0) == (value, len(encoded))


def test_single_byte_below_0x80():
    for value in (0, 1, 0x40, 0x7F):
        assert len(vlq(value)) == 1


def test_reads_from_offset_and_stops_at_terminating_byte():
    data = b"\x90\x3C" + b"\x83\x60" + b"\x40"
    assert read_variable_length(data, 2) == (480, 2)


def test_truncated_quantity_raises_with_offset():
    with pytest.raises(TruncatedQuantityError) as excinfo:
        read_variable_length(b"\x00\x81\x80", 1)
    assert excinfo.value.offset == 1


def test_empty_data_raises():
    with pytest.raises(TruncatedQuantityError):
        read_variable_length(b"", 0)
