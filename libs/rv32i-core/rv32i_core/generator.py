import logging
from random import Random
from typing import Iterator, Optional, Sequence

from rv32i_core.encoders import generate_instruction, register_initializer
from rv32i_core.rv32i import ALL_MNEMONICS, RV32Mnemonic
from rv32i_core.sampler import OperandSampler, pick_usable_registers
from rv32i_core.tracking import GenerationContext
from rv32i_core.types import TestCaseProgram

logger = logging.getLogger("testgen")


class RV32IGenerator:
    def __init__(self, seed: Optional[int | float | str] = None):
        self.rng = Random(seed)
        self.catalog: tuple[RV32Mnemonic, ...] = ALL_MNEMONICS

    def pick_mnemonic(self, ctx: GenerationContext) -> RV32Mnemonic:
        mnemonic = self.rng.choice(self.catalog)
        # A load needs a logged store location, draw again until one is eligible.
        while mnemonic.is_load and len(ctx.memory) == 0:
            mnemonic = self.rng.choice(self.catalog)
        return mnemonic

    def generate_test_case(self, num_insts: int, registers: Sequence[int]) -> TestCaseProgram:
        if num_insts < 1:
            raise ValueError(f"instruction count must be at least 1, got {num_insts}")

        ctx = GenerationContext(sampler=OperandSampler(self.rng, registers), total=num_insts)

        body = []
        for idx in range(num_insts):
            ctx.index = idx
            inst = generate_instruction(self.pick_mnemonic(ctx), ctx)
            if inst is not None:
                body.append(inst)

        ctx.registers.finalize()
        prologue = [register_initializer(reg) for reg in ctx.registers.initialization_targets()]

        program = TestCaseProgram(prologue=tuple(prologue), body=tuple(body), requested=num_insts)
        if program.dropped > 0:
            logger.warning(
                f"{program.dropped} of {num_insts} instruction slots produced no instruction"
            )
        logger.debug(
            f"generated {len(body)} body and {len(prologue)} prologue instructions "
            f"using registers {sorted(set(registers))}"
        )
        return program

    def generate_test_cases(
        self, count: int, num_insts: int, num_registers: int
    ) -> Iterator[TestCaseProgram]:
        """Generate `count` independent test cases, each with its own usable registers."""
        if count < 1:
            raise ValueError(f"test case count must be at least 1, got {count}")
        for _ in range(count):
            registers = pick_usable_registers(self.rng, num_registers)
            yield self.generate_test_case(num_insts, registers)
