from dataclasses import dataclass, field
from typing import Iterator

from rv32i_core.sampler import OperandSampler

# ---------------------------------------------------------------------------- #
#                             Per Test Case Trackers                           #
# ---------------------------------------------------------------------------- #


class MemoryLocationSet:
    """Ordered log of the byte offsets written by stores of the current test case.

    Entries are never removed, a location can back any number of later loads.
    """

    __offsets: list[int]

    def __init__(self):
        self.__offsets = []

    def record(self, offset: int):
        self.__offsets.append(offset)

    @property
    def locations(self) -> tuple[int, ...]:
        return tuple(self.__offsets)

    def __len__(self) -> int:
        return len(self.__offsets)

    def __iter__(self) -> Iterator[int]:
        return iter(self.__offsets)

    def __contains__(self, offset: object) -> bool:
        return offset in self.__offsets


class RegisterUsageSet:
    """Registers that need a deterministic value before the program body runs."""

    __registers: set[int]
    __finalized: bool

    def __init__(self):
        self.__registers = set()
        self.__finalized = False

    def mark(self, *registers: int):
        if self.__finalized:
            raise RuntimeError("register usage is already finalized")
        self.__registers.update(registers)

    def finalize(self):
        self.__finalized = True

    @property
    def finalized(self) -> bool:
        return self.__finalized

    def initialization_targets(self) -> list[int]:
        # x0 is hardwired to zero
        return sorted(r for r in self.__registers if r != 0)

    def __len__(self) -> int:
        return len(self.__registers)

    def __iter__(self) -> Iterator[int]:
        return iter(sorted(self.__registers))

    def __contains__(self, register: object) -> bool:
        return register in self.__registers


@dataclass
class GenerationContext:
    """Everything one test case threads through the format encoders."""

    sampler: OperandSampler
    total: int
    index: int = 0
    memory: MemoryLocationSet = field(default_factory=MemoryLocationSet)
    registers: RegisterUsageSet = field(default_factory=RegisterUsageSet)
