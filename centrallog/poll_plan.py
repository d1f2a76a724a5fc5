"""Planning of the Modbus reads that make up one poll cycle."""

from __future__ import annotations

import enum
from dataclasses import dataclass

_HEADER_QTY = 10
_ANALOG_START = 10
_REGISTERS_PER_BLOCK = 8
_MAX_ANALOG_CHUNK = 15  # 15 * 8 = 120 registers, under the 125-register FC03 limit


class PollFunction(enum.Enum):
    """Modbus function code of a planned read."""

    FC03 = 3
    FC02 = 2
    FC01 = 1


@dataclass(frozen=True)
class PollPdu:
    """One Modbus read planned for the current poll cycle."""

    fc: PollFunction = PollFunction.FC03
    start: int = 0
    quantity: int = 0


def plan_poll_reads(na: int, ndi: int, ndo: int) -> list[PollPdu]:
    """Plan one full poll cycle.

    The header comes first, then analog chunks of at most 15 blocks, then
    the discrete inputs and the coils when their counts are positive.
    """
    plan = [PollPdu(PollFunction.FC03, 0, _HEADER_QTY)]

    block_index = 0
    remaining = na
    while remaining > 0:
        blocks = min(remaining, _MAX_ANALOG_CHUNK)
        plan.append(
            PollPdu(
                PollFunction.FC03,
                _ANALOG_START + block_index * _REGISTERS_PER_BLOCK,
                blocks * _REGISTERS_PER_BLOCK,
            )
        )
        block_index += blocks
        remaining -= blocks

    if ndi > 0:
        plan.append(PollPdu(PollFunction.FC02, 0, ndi))
    if ndo > 0:
        plan.append(PollPdu(PollFunction.FC01, 0, ndo))
    return plan