from random import Random

import pytest

from rv32i_core.sampler import OperandSampler, pick_usable_registers
from rv32i_core.tracking import MemoryLocationSet, RegisterUsageSet


class ScriptedRandom(Random):
    """Random stream whose `randint` replays fixed values."""

    def __init__(self, values: list[int]):
        super().__init__(0)
        self.values = list(values)

    def randint(self, a: int, b: int) -> int:
        value = self.values.pop(0)
        assert a <= value <= b
        return value


def test_control_offset_resamples_the_fall_through_value():
    # index 1 -> fall-through offset 4 == 2 * 2, the next draw wins
    sampler = OperandSampler(ScriptedRandom([2, 2, 3]), [1])
    assert sampler.control_offset(index=1, total=2) == 6


@pytest.mark.parametrize("total", [1, 2, 5, 50])
def test_control_offset_is_even_and_never_fall_through(total: int):
    sampler = OperandSampler(Random(total), [1, 2])
    for index in range(total):
        for _ in range(200):
            offset = sampler.control_offset(index, total)
            assert offset % 2 == 0
            assert offset != index * 4
            assert 0 <= offset <= 4 * total


def test_operand_ranges():
    sampler = OperandSampler(Random(7), [3, 9])
    for _ in range(500):
        assert sampler.register() in (3, 9)
        assert 0 <= sampler.imm12() <= 4095
        assert 0 <= sampler.shamt() <= 31
        assert 0 <= sampler.imm20() <= 0xFFFFF
        offset = sampler.store_offset()
        assert offset % 2 == 0 and 0 <= offset <= 4092


def test_operand_sampler_validates_registers():
    with pytest.raises(ValueError):
        OperandSampler(Random(0), [])
    with pytest.raises(ValueError):
        OperandSampler(Random(0), [1, 32])


@pytest.mark.parametrize("count", [1, 5, 31, 32])
def test_pick_usable_registers(count: int):
    registers = pick_usable_registers(Random(count), count)
    assert len(registers) == count
    assert all(1 <= r <= 31 for r in registers)


@pytest.mark.parametrize("count", [0, 33, -1])
def test_pick_usable_registers_rejects_bad_counts(count: int):
    with pytest.raises(ValueError):
        pick_usable_registers(Random(0), count)


def test_memory_locations_keep_order_and_allow_reuse():
    memory = MemoryLocationSet()
    assert len(memory) == 0
    for offset in (8, 4092, 8):
        memory.record(offset)
    assert memory.locations == (8, 4092, 8)
    assert 4092 in memory

    sampler = OperandSampler(Random(3), [1])
    picks = {sampler.memory_location(memory.locations) for _ in range(100)}
    assert picks == {8, 4092}
    # reading never consumes a location
    assert len(memory) == 3


def test_register_usage_targets_skip_x0_and_are_sorted():
    usage = RegisterUsageSet()
    usage.mark(9, 0, 3)
    usage.mark(9)
    assert 0 in usage
    assert usage.initialization_targets() == [3, 9]

    usage.finalize()
    assert usage.finalized
    with pytest.raises(RuntimeError):
        usage.mark(4)
