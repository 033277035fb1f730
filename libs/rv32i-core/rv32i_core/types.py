from dataclasses import dataclass

from rv32i_core.rv32i import GeneratedInstruction


@dataclass(frozen=True)
class TestCaseProgram:
    """Container for a single generated test case"""

    __test__ = False  # not a pytest test class

    prologue: tuple[GeneratedInstruction, ...]  # register initialization, e.g. `addi x5, x0, 5`
    body: tuple[GeneratedInstruction, ...]  # randomly generated instructions, in generation order
    requested: int  # number of body instructions that was asked for

    @property
    def instructions(self) -> tuple[GeneratedInstruction, ...]:
        return self.prologue + self.body

    @property
    def dropped(self) -> int:
        return self.requested - len(self.body)
