import struct

import pytest

from centrallog.modbus_map import (
    AnalogSample,
    ModbusHeader,
    PollSnapshot,
    parse_analog_block,
    parse_analog_chunk,
    parse_header,
    unpack_discrete,
)


def _float_words(value):
    high, low = struct.unpack(">HH", struct.pack(">f", value))
    return high, low


def _block(sensor_id, flags, value):
    high, low = _float_words(value)
    return [sensor_id, flags, high, low, 0, 0, 0, 0]


def test_parse_header_fields():
    ts = 1_700_000_000
    regs = [1, 0x07, ts >> 16, ts & 0xFFFF, 3, 12, 4, 0, 0, 0]
    header = parse_header(regs)
    assert header.map_version == 1
    assert header.unix_timestamp == ts
    assert (header.na, header.ndi, header.ndo) == (3, 12, 4)
    assert header.is_valid()
    assert header.is_polling() and header.is_rtu_connected() and header.is_any_alarm()


def test_parse_header_too_short_is_invalid():
    header = parse_header([1, 0, 0])
    assert header == ModbusHeader()
    assert not header.is_valid()


def test_parse_header_none_is_invalid():
    assert not parse_header(None).is_valid()


def test_header_wrong_version_invalid():
    assert not parse_header([2] + [0] * 9).is_valid()


@pytest.mark.parametrize(
    "flags, polling, rtu, alarm",
    [(0x01, True, False, False), (0x02, False, True, False), (0x04, False, False, True), (0, False, False, False)],
)
def test_header_status_flags(flags, polling, rtu, alarm):
    header = ModbusHeader(map_version=1, status_flags=flags)
    assert header.is_polling() is polling
    assert header.is_rtu_connected() is rtu
    assert header.is_any_alarm() is alarm


def test_parse_analog_block_round_trip():
    sample = parse_analog_block(_block(42, 0x01, 1.5))
    assert sample.edge_sensor_id == 42
    assert sample.value == 1.5
    assert sample.is_valid()
    assert not sample.is_alarm()
    assert not sample.is_stale()


def test_parse_analog_block_negative_value():
    sample = parse_analog_block(_block(5, 0x06, -250.25))
    assert sample.value == -250.25
    assert sample.is_alarm() and sample.is_stale() and not sample.is_valid()


def test_parse_analog_block_short_gives_default():
    assert parse_analog_block([1, 2, 3]) == AnalogSample()


def test_parse_analog_chunk_multiple_blocks():
    regs = _block(10, 1, 2.0) + _block(11, 0, 4.5) + [9, 9, 9]
    samples = parse_analog_chunk(regs)
    assert [s.edge_sensor_id for s in samples] == [10, 11]
    assert [s.value for s in samples] == [2.0, 4.5]


def test_parse_analog_chunk_empty():
    assert parse_analog_chunk([]) == []
    assert parse_analog_chunk(None) == []


def test_unpack_discrete_expanded():
    regs = [1, 0, 1, 1, 0, 0, 0, 0]
    assert unpack_discrete(regs, 4) == [True, False, True, True]


def test_unpack_discrete_packed_round_trip():
    bits = [True, False, True, True, False, False, True, False,
            False, True, False, False, True, True, False, True,
            True, False, True]
    words = [0, 0]
    for index, bit in enumerate(bits):
        if bit:
            words[index // 16] |= 1 << (index % 16)
    assert unpack_discrete(words, len(bits)) == bits


def test_unpack_discrete_missing_words_are_false():
    result = unpack_discrete([0xFFFF], 20)
    assert len(result) == 20
    assert all(result[:16])
    assert not any(result[16:])


def test_unpack_discrete_zero_bits():
    assert unpack_discrete([1, 1], 0) == []


def test_poll_snapshot_defaults():
    snapshot = PollSnapshot()
    assert snapshot.success is False
    assert snapshot.analogs == [] and snapshot.di_bits == [] and snapshot.do_bits == []
    assert not snapshot.header.is_valid()