import pytest

from rv32i_core.bits import render
from rv32i_core.rv32i import (
    ADD,
    ADDI,
    ALL_MNEMONICS,
    BEQ,
    FORMAT_TO_MNEMONICS,
    JAL,
    LITERAL_TO_MNEMONIC,
    LOAD_INSTRUCTIONS,
    LUI,
    LW,
    SHIFT_IMMEDIATE_INSTRUCTIONS,
    SLLI,
    SRAI,
    SUB,
    SW,
    GeneratedInstruction,
    RV32Type,
    UnknownMnemonicError,
    build_instruction,
    decode,
    lookup,
)


@pytest.mark.parametrize(
    "inst, expected_word, expected_asm",
    [
        # R-type
        (build_instruction(ADD, rd=1, rs1=2, rs2=3), 0x003100B3, "add x1, x2, x3"),
        (build_instruction(SUB, rd=1, rs1=2, rs2=3), 0x403100B3, "sub x1, x2, x3"),
        # I-type (arith), raw 12-bit immediate
        (build_instruction(ADDI, rd=1, rs1=2, imm=4095), 0xFFF10093, "addi x1, x2, 4095"),
        # I-type (shift imm)
        (build_instruction(SRAI, rd=1, rs1=2, shamt=31), 0x41F15093, "srai x1, x2, 31"),
        (build_instruction(SLLI, rd=1, rs1=2, shamt=3), 0x00311093, "slli x1, x2, 3"),
        # I-type (load)
        (build_instruction(LW, rd=1, rs1=2, imm=0xFFC), 0xFFC12083, "lw x1, 4092(x2)"),
        # S-type (store)
        (build_instruction(SW, rs1=2, rs2=3, imm=8), 0x00312423, "sw x3, 8(x2)"),
        # SB-type (branch)
        (build_instruction(BEQ, rs1=1, rs2=2, imm=16), 0x00208863, "beq x1, x2, 16"),
        # U-type
        (build_instruction(LUI, rd=1, imm=0x12345), 0x123450B7, "lui x1, 305418240"),
        # UJ-type
        (build_instruction(JAL, rd=1, imm=16), 0x010000EF, "jal x1, 16"),
    ],
)
def test_known_encodings(inst: GeneratedInstruction, expected_word: int, expected_asm: str):
    assert inst.word == expected_word
    assert inst.hex == f"{expected_word:08x}"
    assert inst.asm == expected_asm


@pytest.mark.parametrize(
    "imm, expected_word",
    [
        (0x1000, 0x80000063),  # imm[12] -> bit 31
        (0x0800, 0x000000E3),  # imm[11] -> bit 7
        (0x07E0, 0x7E000063),  # imm[10:5] -> bits 30..25
        (0x001E, 0x00000F63),  # imm[4:1] -> bits 11..8
    ],
)
def test_branch_immediate_permutation(imm: int, expected_word: int):
    assert build_instruction(BEQ, rs1=0, rs2=0, imm=imm).word == expected_word


@pytest.mark.parametrize(
    "imm, expected_word",
    [
        (0x100000, 0x8000006F),  # imm[20] -> bit 31
        (0x0007FE, 0x7FE0006F),  # imm[10:1] -> bits 30..21
        (0x000800, 0x0010006F),  # imm[11] -> bit 20
        (0x0FF000, 0x000FF06F),  # imm[19:12] -> bits 19..12
    ],
)
def test_jump_immediate_permutation(imm: int, expected_word: int):
    assert build_instruction(JAL, rd=0, imm=imm).word == expected_word


def test_lui_with_zero_immediate():
    inst = build_instruction(LUI, rd=5, imm=0)
    assert inst.bits == "00000000000000000000" + "00101" + "0110111"
    assert inst.asm == "lui x5, 0"


def test_immediates_are_masked_to_field_width():
    wide = build_instruction(ADDI, rd=1, rs1=1, imm=0x1005)
    narrow = build_instruction(ADDI, rd=1, rs1=1, imm=0x005)
    assert wide.bits == narrow.bits


def test_catalog_shape():
    assert len(ALL_MNEMONICS) == 37
    assert len(LITERAL_TO_MNEMONIC) == 37
    assert {m.literal for m in LOAD_INSTRUCTIONS} == {"lb", "lh", "lw", "lbu", "lhu"}
    assert {m.literal for m in SHIFT_IMMEDIATE_INSTRUCTIONS} == {"slli", "srli", "srai"}
    for fmt, members in FORMAT_TO_MNEMONICS.items():
        for m in members:
            assert m.format == fmt
            if fmt in (RV32Type.U, RV32Type.UJ):
                assert m.f3 is None and m.f7 is None
            elif fmt == RV32Type.R or m.is_shift_immediate:
                assert m.f7 is not None
            else:
                assert m.f7 is None


def test_lookup_is_case_insensitive_and_rejects_unknown():
    assert lookup("ADDI") is ADDI
    assert lookup("sw") is SW
    with pytest.raises(UnknownMnemonicError):
        lookup("mul")
    with pytest.raises(UnknownMnemonicError):
        build_instruction("fence")


def _sample(mnemonic) -> GeneratedInstruction:
    match mnemonic.format:
        case RV32Type.R:
            return build_instruction(mnemonic, rd=7, rs1=13, rs2=31)
        case RV32Type.I if mnemonic.is_shift_immediate:
            return build_instruction(mnemonic, rd=7, rs1=13, shamt=17)
        case RV32Type.I:
            return build_instruction(mnemonic, rd=7, rs1=13, imm=0xABC)
        case RV32Type.S:
            return build_instruction(mnemonic, rs1=0, rs2=31, imm=0x7FE)
        case RV32Type.SB:
            return build_instruction(mnemonic, rs1=13, rs2=31, imm=0x1A2C)
        case RV32Type.U:
            return build_instruction(mnemonic, rd=7, imm=0xFEDCB)
        case RV32Type.UJ:
            return build_instruction(mnemonic, rd=7, imm=0x1ABCDE)


@pytest.mark.parametrize("mnemonic", ALL_MNEMONICS, ids=lambda m: m.literal)
def test_decode_recovers_catalog_fields(mnemonic):
    inst = _sample(mnemonic)
    bits = inst.bits

    assert bits[25:] == render(mnemonic.opcode, 7)
    if mnemonic.f3 is not None:
        assert bits[17:20] == render(mnemonic.f3, 3)
    if mnemonic.f7 is not None:
        assert bits[:7] == render(mnemonic.f7, 7)

    decoded = decode(inst.word)
    assert decoded.mnemonic is mnemonic
    assert decoded == inst
    assert decoded.bits == bits
    assert decoded.asm == inst.asm


def test_decode_rejects_words_outside_the_catalog():
    with pytest.raises(ValueError):
        decode(0x00000000)
    with pytest.raises(ValueError):
        # mul x1, x2, x3 (M extension)
        decode(0x023100B3)
