import logging
import struct

from unicorn import (
    UC_ARCH_RISCV,
    UC_ERR_EXCEPTION,
    UC_ERR_INSN_INVALID,
    UC_MODE_RISCV32,
    Uc,
    UcError,
)
from unicorn.riscv_const import UC_RISCV_REG_PC, UC_RISCV_REG_X0

from rv32i_core.rv32i import GeneratedInstruction, decode
from rv32i_core.types import TestCaseProgram

logger = logging.getLogger("testgen")

# --- Memory Layout Constants ---
DEFAULT_CODE_BASE = 0x1000  # Where the word under test is placed
LOW_MEMORY_SIZE = 4 * 1024 * 1024
# x0-relative accesses with a negative 12-bit offset land in the last page
HIGH_PAGE_BASE = 0xFFFFF000
HIGH_PAGE_SIZE = 0x1000

UNDECODABLE_ERRORS = (UC_ERR_INSN_INVALID, UC_ERR_EXCEPTION)


class RV32IOracle:
    """Checks that every emitted word is structurally decodable.

    Each word is decoded against the catalog and single-stepped in the Unicorn
    RV32 emulator. Memory faults are fine, only illegal instructions count.
    """

    def __init__(self):
        self._mu = Uc(UC_ARCH_RISCV, UC_MODE_RISCV32)
        self._mu.mem_map(0, LOW_MEMORY_SIZE)
        self._mu.mem_map(HIGH_PAGE_BASE, HIGH_PAGE_SIZE)

    def is_decodable(self, inst: GeneratedInstruction) -> bool:
        try:
            decoded = decode(inst.word)
        except ValueError as e:
            logger.error(f"catalog decode failed for '{inst.asm}': {e}")
            return False
        if decoded.mnemonic != inst.mnemonic:
            logger.error(f"'{inst.asm}' decodes as '{decoded.mnemonic.literal}'")
            return False
        return self.step(inst.word)

    def step(self, word: int) -> bool:
        """Execute a single word at the code base, registers holding their own index."""
        mu = self._mu
        mu.mem_write(DEFAULT_CODE_BASE, struct.pack("<I", word & 0xFFFFFFFF))
        for reg_idx in range(1, 32):
            mu.reg_write(UC_RISCV_REG_X0 + reg_idx, reg_idx)
        mu.reg_write(UC_RISCV_REG_PC, DEFAULT_CODE_BASE)
        try:
            mu.emu_start(DEFAULT_CODE_BASE, DEFAULT_CODE_BASE + 4, timeout=10000, count=1)
        except UcError as e:
            if e.errno in UNDECODABLE_ERRORS:
                logger.error(f"emulator rejected word 0x{word:08x}: {e}")
                return False
            logger.debug(f"emulator stopped on word 0x{word:08x}: {e}")
        return True

    def verify(self, program: TestCaseProgram) -> list[int]:
        """Indices (program order, prologue first) of words that fail to decode."""
        return [
            idx for idx, inst in enumerate(program.instructions) if not self.is_decodable(inst)
        ]
