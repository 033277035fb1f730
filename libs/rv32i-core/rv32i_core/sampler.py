from random import Random
from typing import Sequence

# --- Register File Constants ---
NUM_REGISTERS = 32
MIN_USABLE_REGISTERS = 1
MAX_USABLE_REGISTERS = 32

# --- Immediate Ranges ---
IMM12_MAX = 0xFFF
SHAMT_MAX = 0x1F
IMM20_MAX = 0xFFFFF
STORE_SLOT_MAX = 2046  # store offsets are 2 * [0, 2046]


def pick_usable_registers(rng: Random, count: int) -> list[int]:
    """Draw `count` usable registers, with replacement, from x1..x31.

    x0 is never drawn; duplicates are kept so a register count of 32 is still valid.
    """
    if not (MIN_USABLE_REGISTERS <= count <= MAX_USABLE_REGISTERS):
        raise ValueError(
            f"register count must be in [{MIN_USABLE_REGISTERS}, {MAX_USABLE_REGISTERS}], got {count}"
        )
    return [rng.randint(1, NUM_REGISTERS - 1) for _ in range(count)]


class OperandSampler:
    """Draws operands for the format encoders from an explicit random stream."""

    rng: Random
    registers: tuple[int, ...]

    def __init__(self, rng: Random, registers: Sequence[int]):
        if len(registers) == 0:
            raise ValueError("Operand sampler needs at least 1 usable register!")
        for reg in registers:
            if not (0 <= reg < NUM_REGISTERS):
                raise ValueError(f"register index out of range: x{reg}")
        self.rng = rng
        self.registers = tuple(registers)

    def register(self) -> int:
        return self.rng.choice(self.registers)

    def imm12(self) -> int:
        return self.rng.randint(0, IMM12_MAX)

    def shamt(self) -> int:
        return self.rng.randint(0, SHAMT_MAX)

    def store_offset(self) -> int:
        return 2 * self.rng.randint(0, STORE_SLOT_MAX)

    def imm20(self) -> int:
        return self.rng.randint(0, IMM20_MAX)

    def control_offset(self, index: int, total: int) -> int:
        """Even branch/jump offset that never equals the fall-through value `index * 4`."""
        fall_through = index * 4
        offset = fall_through
        while offset == fall_through:
            offset = 2 * self.rng.randint(0, 2 * total)
        return offset

    def memory_location(self, locations: Sequence[int]) -> int:
        return self.rng.choice(locations)
