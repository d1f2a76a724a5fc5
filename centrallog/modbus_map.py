"""Modbus register map: header, analog blocks and discrete bit decoding."""

from __future__ import annotations

import struct
from dataclasses import dataclass, field
from datetime import datetime
from typing import Sequence

HEADER_REGISTERS = 10
REGISTERS_PER_ANALOG_BLOCK = 8


@dataclass
class ModbusHeader:
    """Holding registers HR0..HR9 of the map."""

    map_version: int = 0
    status_flags: int = 0
    unix_timestamp: int = 0
    na: int = 0
    ndi: int = 0
    ndo: int = 0

    def is_valid(self) -> bool:
        return self.map_version == 1

    def is_polling(self) -> bool:
        return (self.status_flags & 0x01) != 0

    def is_rtu_connected(self) -> bool:
        return (self.status_flags & 0x02) != 0

    def is_any_alarm(self) -> bool:
        return (self.status_flags & 0x04) != 0


@dataclass
class AnalogSample:
    """One eight-register analog block."""

    edge_sensor_id: int = 0
    flags: int = 0
    value: float = 0.0

    def is_valid(self) -> bool:
        return (self.flags & 0x01) != 0

    def is_alarm(self) -> bool:
        return (self.flags & 0x02) != 0

    def is_stale(self) -> bool:
        return (self.flags & 0x04) != 0


@dataclass
class PollSnapshot:
    """Result of one full poll cycle for one logger."""

    logger_id: int = 0
    success: bool = False
    error_message: str = ""
    header: ModbusHeader = field(default_factory=ModbusHeader)
    analogs: list[AnalogSample] = field(default_factory=list)
    di_bits: list[bool] = field(default_factory=list)
    do_bits: list[bool] = field(default_factory=list)
    measured_at: datetime | None = None


def _word(value: int) -> int:
    return value & 0xFFFF


def parse_header(regs: Sequence[int] | None) -> ModbusHeader:
    """Decode the ten header registers.

    Fewer than ten registers give a default header whose is_valid() is False.
    """
    if not regs or len(regs) < HEADER_REGISTERS:
        return ModbusHeader()
    return ModbusHeader(
        map_version=_word(regs[0]),
        status_flags=_word(regs[1]),
        unix_timestamp=(_word(regs[2]) << 16) | _word(regs[3]),
        na=_word(regs[4]),
        ndi=_word(regs[5]),
        ndo=_word(regs[6]),
    )


def parse_analog_block(regs: Sequence[int] | None) -> AnalogSample:
    """Decode one analog block: id, flags and a big-endian float32 (ABCD)."""
    if not regs or len(regs) < REGISTERS_PER_ANALOG_BLOCK:
        return AnalogSample()
    raw = struct.pack(">HH", _word(regs[2]), _word(regs[3]))
    (value,) = struct.unpack(">f", raw)
    return AnalogSample(
        edge_sensor_id=_word(regs[0]),
        flags=_word(regs[1]),
        value=value,
    )


def parse_analog_chunk(regs: Sequence[int] | None) -> list[AnalogSample]:
    """Decode every complete eight-register block in @regs."""
    if not regs:
        return []
    count = len(regs) // REGISTERS_PER_ANALOG_BLOCK
    return [
        parse_analog_block(regs[offset:offset + REGISTERS_PER_ANALOG_BLOCK])
        for offset in range(0, count * REGISTERS_PER_ANALOG_BLOCK, REGISTERS_PER_ANALOG_BLOCK)
    ]


def unpack_discrete(regs: Sequence[int] | None, bit_count: int) -> list[bool]:
    """Decode a discrete-input or coil payload into @bit_count booleans.

    With at least one register per bit each register is one bit (expanded
    form). Otherwise registers are packed 16 bits per word, LSB first, and
    bits beyond the payload read as False.
    """
    if regs is None or bit_count <= 0:
        return []
    if len(regs) >= bit_count:
        return [reg != 0 for reg in regs[:bit_count]]
    bits = []
    for index in range(bit_count):
        word_index, bit = divmod(index, 16)
        if word_index < len(regs):
            bits.append(bool((_word(regs[word_index]) >> bit) & 1))
        else:
            bits.append(False)
    return bits