import pytest

from rv32i_core.oracle import RV32IOracle
from rv32i_core.rv32i import (
    ADD,
    ADDI,
    BEQ,
    JAL,
    LUI,
    LW,
    SLLI,
    SW,
    TEMPLATE_RTYPE,
    GeneratedInstruction,
    RV32Mnemonic,
    RV32Type,
    build_instruction,
)
from rv32i_core.types import TestCaseProgram


@pytest.fixture(scope="module")
def oracle():
    return RV32IOracle()


SAMPLE_PROGRAM = TestCaseProgram(
    prologue=(build_instruction(ADDI, rd=1, rs1=0, imm=1), build_instruction(ADDI, rd=2, rs1=0, imm=2)),
    body=(
        build_instruction(ADD, rd=1, rs1=1, rs2=2),
        build_instruction(SLLI, rd=2, rs1=1, shamt=4),
        build_instruction(SW, rs1=0, rs2=2, imm=64),
        build_instruction(LW, rd=1, rs1=0, imm=64),
        build_instruction(LUI, rd=2, imm=0x12345),
        build_instruction(BEQ, rs1=1, rs2=2, imm=8),
        build_instruction(JAL, rd=1, imm=8),
    ),
    requested=7,
)


@pytest.mark.parametrize("inst", SAMPLE_PROGRAM.instructions, ids=lambda i: i.asm)
def test_catalog_words_are_decodable(oracle: RV32IOracle, inst: GeneratedInstruction):
    assert oracle.is_decodable(inst)


def test_verify_reports_no_failures_for_valid_program(oracle: RV32IOracle):
    assert oracle.verify(SAMPLE_PROGRAM) == []


def test_word_outside_the_catalog_is_rejected(oracle: RV32IOracle):
    bogus = RV32Mnemonic("bogus", RV32Type.R, 0x00, 0x0, 0x00, TEMPLATE_RTYPE)
    inst = GeneratedInstruction(bogus, rd=1, rs1=2, rs2=3)
    assert not oracle.is_decodable(inst)

    program = TestCaseProgram(prologue=(), body=(SAMPLE_PROGRAM.body[0], inst), requested=2)
    assert oracle.verify(program) == [1]
