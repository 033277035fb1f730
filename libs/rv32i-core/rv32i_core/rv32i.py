from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from rv32i_core.bits import concat, render, to_hex32, to_le_bytes


class RV32Type(str, Enum):
    R = "r"
    I = "i"
    S = "s"
    SB = "sb"
    U = "u"
    UJ = "uj"


class UnknownMnemonicError(KeyError):
    pass


# --- Assembly Templates ---
TEMPLATE_RTYPE = "{mnemonic} x{rd}, x{rs1}, x{rs2}"
TEMPLATE_ITYPE = "{mnemonic} x{rd}, x{rs1}, {imm}"
TEMPLATE_SHIFT_ITYPE = "{mnemonic} x{rd}, x{rs1}, {shamt}"
TEMPLATE_LOAD = "{mnemonic} x{rd}, {imm}(x{rs1})"
TEMPLATE_STYPE = "{mnemonic} x{rs2}, {imm}(x{rs1})"
TEMPLATE_SBTYPE = "{mnemonic} x{rs1}, x{rs2}, {imm}"
TEMPLATE_UTYPE = "{mnemonic} x{rd}, {imm}"
TEMPLATE_UJTYPE = "{mnemonic} x{rd}, {imm}"

OPCODE_LOAD = 0x03


@dataclass(frozen=True)
class RV32Mnemonic:
    literal: str
    format: RV32Type
    opcode: int
    f3: Optional[int] = None
    f7: Optional[int] = None
    assembly_template: str = ""

    @property
    def is_load(self) -> bool:
        return self.format == RV32Type.I and self.opcode == OPCODE_LOAD

    @property
    def is_shift_immediate(self) -> bool:
        # the only I-format entries carrying a funct7 slot
        return self.format == RV32Type.I and self.f7 is not None


# --- RV32I Instruction Catalog ---

# Opcode 0x37 & 0x17: U-type
LUI = RV32Mnemonic("lui", RV32Type.U, 0x37, assembly_template=TEMPLATE_UTYPE)
AUIPC = RV32Mnemonic("auipc", RV32Type.U, 0x17, assembly_template=TEMPLATE_UTYPE)

# Opcode 0x6F: UJ-type
JAL = RV32Mnemonic("jal", RV32Type.UJ, 0x6F, assembly_template=TEMPLATE_UJTYPE)

# Opcode 0x63: SB-type (Branch)
BEQ = RV32Mnemonic("beq", RV32Type.SB, 0x63, 0x0, assembly_template=TEMPLATE_SBTYPE)
BNE = RV32Mnemonic("bne", RV32Type.SB, 0x63, 0x1, assembly_template=TEMPLATE_SBTYPE)
BLT = RV32Mnemonic("blt", RV32Type.SB, 0x63, 0x4, assembly_template=TEMPLATE_SBTYPE)
BGE = RV32Mnemonic("bge", RV32Type.SB, 0x63, 0x5, assembly_template=TEMPLATE_SBTYPE)
BLTU = RV32Mnemonic("bltu", RV32Type.SB, 0x63, 0x6, assembly_template=TEMPLATE_SBTYPE)
BGEU = RV32Mnemonic("bgeu", RV32Type.SB, 0x63, 0x7, assembly_template=TEMPLATE_SBTYPE)

# Opcode 0x67: I-type (Jump and link register)
JALR = RV32Mnemonic("jalr", RV32Type.I, 0x67, 0x0, assembly_template=TEMPLATE_ITYPE)

# Opcode 0x03: I-type (Load)
LB = RV32Mnemonic("lb", RV32Type.I, OPCODE_LOAD, 0x0, assembly_template=TEMPLATE_LOAD)
LH = RV32Mnemonic("lh", RV32Type.I, OPCODE_LOAD, 0x1, assembly_template=TEMPLATE_LOAD)
LW = RV32Mnemonic("lw", RV32Type.I, OPCODE_LOAD, 0x2, assembly_template=TEMPLATE_LOAD)
LBU = RV32Mnemonic("lbu", RV32Type.I, OPCODE_LOAD, 0x4, assembly_template=TEMPLATE_LOAD)
LHU = RV32Mnemonic("lhu", RV32Type.I, OPCODE_LOAD, 0x5, assembly_template=TEMPLATE_LOAD)

# Opcode 0x13: I-type (ALU Immediate & Shifts)
ADDI = RV32Mnemonic("addi", RV32Type.I, 0x13, 0x0, assembly_template=TEMPLATE_ITYPE)
SLTI = RV32Mnemonic("slti", RV32Type.I, 0x13, 0x2, assembly_template=TEMPLATE_ITYPE)
SLTIU = RV32Mnemonic("sltiu", RV32Type.I, 0x13, 0x3, assembly_template=TEMPLATE_ITYPE)
XORI = RV32Mnemonic("xori", RV32Type.I, 0x13, 0x4, assembly_template=TEMPLATE_ITYPE)
ORI = RV32Mnemonic("ori", RV32Type.I, 0x13, 0x6, assembly_template=TEMPLATE_ITYPE)
ANDI = RV32Mnemonic("andi", RV32Type.I, 0x13, 0x7, assembly_template=TEMPLATE_ITYPE)
SLLI = RV32Mnemonic("slli", RV32Type.I, 0x13, 0x1, 0x00, TEMPLATE_SHIFT_ITYPE)
SRLI = RV32Mnemonic("srli", RV32Type.I, 0x13, 0x5, 0x00, TEMPLATE_SHIFT_ITYPE)
SRAI = RV32Mnemonic("srai", RV32Type.I, 0x13, 0x5, 0x20, TEMPLATE_SHIFT_ITYPE)

# Opcode 0x23: S-type (Store)
SB = RV32Mnemonic("sb", RV32Type.S, 0x23, 0x0, assembly_template=TEMPLATE_STYPE)
SH = RV32Mnemonic("sh", RV32Type.S, 0x23, 0x1, assembly_template=TEMPLATE_STYPE)
SW = RV32Mnemonic("sw", RV32Type.S, 0x23, 0x2, assembly_template=TEMPLATE_STYPE)

# Opcode 0x33: R-type (ALU)
ADD = RV32Mnemonic("add", RV32Type.R, 0x33, 0x0, 0x00, TEMPLATE_RTYPE)
SUB = RV32Mnemonic("sub", RV32Type.R, 0x33, 0x0, 0x20, TEMPLATE_RTYPE)
SLL = RV32Mnemonic("sll", RV32Type.R, 0x33, 0x1, 0x00, TEMPLATE_RTYPE)
SLT = RV32Mnemonic("slt", RV32Type.R, 0x33, 0x2, 0x00, TEMPLATE_RTYPE)
SLTU = RV32Mnemonic("sltu", RV32Type.R, 0x33, 0x3, 0x00, TEMPLATE_RTYPE)
XOR = RV32Mnemonic("xor", RV32Type.R, 0x33, 0x4, 0x00, TEMPLATE_RTYPE)
SRL = RV32Mnemonic("srl", RV32Type.R, 0x33, 0x5, 0x00, TEMPLATE_RTYPE)
SRA = RV32Mnemonic("sra", RV32Type.R, 0x33, 0x5, 0x20, TEMPLATE_RTYPE)
OR = RV32Mnemonic("or", RV32Type.R, 0x33, 0x6, 0x00, TEMPLATE_RTYPE)
AND = RV32Mnemonic("and", RV32Type.R, 0x33, 0x7, 0x00, TEMPLATE_RTYPE)

FORMAT_TO_MNEMONICS: dict[RV32Type, tuple[RV32Mnemonic, ...]] = {
    RV32Type.U: (LUI, AUIPC),
    RV32Type.UJ: (JAL,),
    RV32Type.SB: (BEQ, BNE, BLT, BGE, BLTU, BGEU),
    RV32Type.I: (
        JALR,
        LB,
        LH,
        LW,
        LBU,
        LHU,
        ADDI,
        SLTI,
        SLTIU,
        XORI,
        ORI,
        ANDI,
        SLLI,
        SRLI,
        SRAI,
    ),
    RV32Type.S: (SB, SH, SW),
    RV32Type.R: (ADD, SUB, SLL, SLT, SLTU, XOR, SRL, SRA, OR, AND),
}

ALL_MNEMONICS: tuple[RV32Mnemonic, ...] = tuple(
    m for members in FORMAT_TO_MNEMONICS.values() for m in members
)
LITERAL_TO_MNEMONIC: dict[str, RV32Mnemonic] = {m.literal: m for m in ALL_MNEMONICS}

LOAD_INSTRUCTIONS = [m for m in ALL_MNEMONICS if m.is_load]
SHIFT_IMMEDIATE_INSTRUCTIONS = [m for m in ALL_MNEMONICS if m.is_shift_immediate]


def lookup(literal: str) -> RV32Mnemonic:
    """Catalog entry for a mnemonic, case-insensitive (`"ADDI"` and `"addi"` are the same)."""
    try:
        return LITERAL_TO_MNEMONIC[literal.lower()]
    except KeyError:
        raise UnknownMnemonicError(f"CRITICAL: Unknown mnemonic '{literal}'") from None


@dataclass(frozen=True)
class GeneratedInstruction:
    mnemonic: RV32Mnemonic
    rd: Optional[int] = None
    rs1: Optional[int] = None
    rs2: Optional[int] = None
    imm: Optional[int] = None
    shamt: Optional[int] = None

    _bits: str = field(init=False, repr=False, compare=False)
    _asm: str = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        object.__setattr__(self, "_bits", self.__get_bits())
        object.__setattr__(self, "_asm", self.__get_asm())

    def __get_asm(self) -> str:
        imm = self.imm if self.imm is not None else 0
        # LUI/AUIPC report the architectural value, not the raw 20-bit field.
        if self.mnemonic.format == RV32Type.U:
            imm = (imm & 0xFFFFF) << 12
        return self.mnemonic.assembly_template.format(
            mnemonic=self.mnemonic.literal,
            rd=self.rd,
            rs1=self.rs1,
            rs2=self.rs2,
            imm=imm,
            shamt=self.shamt,
        )

    def __get_bits(self) -> str:
        m = self.mnemonic
        op = render(m.opcode, 7)
        rd = render(self.rd or 0, 5)
        rs1 = render(self.rs1 or 0, 5)
        rs2 = render(self.rs2 or 0, 5)
        imm = self.imm or 0

        match m.format:
            case RV32Type.R:
                return concat(render(m.f7, 7), rs2, rs1, render(m.f3, 3), rd, op)
            case RV32Type.I if m.is_shift_immediate:
                shamt = render(self.shamt or 0, 5)
                return concat(render(m.f7, 7), shamt, rs1, render(m.f3, 3), rd, op)
            case RV32Type.I:
                return concat(render(imm, 12), rs1, render(m.f3, 3), rd, op)
            case RV32Type.S:
                return concat(render(imm >> 5, 7), rs2, rs1, render(m.f3, 3), render(imm, 5), op)
            case RV32Type.SB:
                # imm[12|10:5] rs2 rs1 funct3 imm[4:1|11]
                offset = (imm >> 1) & 0xFFF
                return concat(
                    render(offset >> 11, 1),
                    render(offset >> 4, 6),
                    rs2,
                    rs1,
                    render(m.f3, 3),
                    render(offset, 4),
                    render(offset >> 10, 1),
                    op,
                )
            case RV32Type.U:
                return concat(render(imm, 20), rd, op)
            case RV32Type.UJ:
                # imm[20|10:1|11|19:12] rd
                offset = (imm >> 1) & 0xFFFFF
                return concat(
                    render(offset >> 19, 1),
                    render(offset, 10),
                    render(offset >> 10, 1),
                    render(offset >> 11, 8),
                    rd,
                    op,
                )

    @property
    def format(self) -> RV32Type:
        return self.mnemonic.format

    @property
    def opcode(self) -> int:
        return self.mnemonic.opcode

    @property
    def bits(self) -> str:
        return self._bits

    @property
    def asm(self) -> str:
        return self._asm

    @property
    def word(self) -> int:
        return int(self._bits, 2)

    @property
    def hex(self) -> str:
        return to_hex32(self._bits)

    @property
    def le_bytes(self) -> list[str]:
        return to_le_bytes(self.hex)


def build_instruction(
    mnemonic: RV32Mnemonic | str,
    *,
    rd: Optional[int] = None,
    rs1: Optional[int] = None,
    rs2: Optional[int] = None,
    imm: Optional[int] = None,
    shamt: Optional[int] = None,
) -> GeneratedInstruction:
    if isinstance(mnemonic, str):
        mnemonic = lookup(mnemonic)
    return GeneratedInstruction(mnemonic, rd=rd, rs1=rs1, rs2=rs2, imm=imm, shamt=shamt)


def decode(word: int) -> GeneratedInstruction:
    """Decode a word produced by this catalog back into its mnemonic and operand fields.

    Immediates come back unsigned, reassembled from their permuted bit positions, so
    re-encoding the result reproduces `word`.
    """
    word &= 0xFFFFFFFF
    opcode = word & 0x7F
    f3 = (word >> 12) & 0x7
    f7 = (word >> 25) & 0x7F

    target_mnemonic = None
    for m in ALL_MNEMONICS:
        if m.opcode != opcode:
            continue
        # U/UJ formats do not have funct3; bits [14:12] are part of the immediate.
        if m.format not in (RV32Type.U, RV32Type.UJ) and m.f3 != f3:
            continue
        if (m.format == RV32Type.R or m.is_shift_immediate) and m.f7 != f7:
            continue
        target_mnemonic = m
        break
    if not target_mnemonic:
        raise ValueError(f"Unknown instruction word: 0x{word:08x}")

    rd = (word >> 7) & 0x1F
    rs1 = (word >> 15) & 0x1F
    rs2 = (word >> 20) & 0x1F

    match target_mnemonic.format:
        case RV32Type.R:
            return GeneratedInstruction(target_mnemonic, rd=rd, rs1=rs1, rs2=rs2)
        case RV32Type.I if target_mnemonic.is_shift_immediate:
            return GeneratedInstruction(target_mnemonic, rd=rd, rs1=rs1, shamt=rs2)
        case RV32Type.I:
            return GeneratedInstruction(target_mnemonic, rd=rd, rs1=rs1, imm=word >> 20)
        case RV32Type.S:
            imm = ((word >> 25) << 5) | ((word >> 7) & 0x1F)
            return GeneratedInstruction(target_mnemonic, rs1=rs1, rs2=rs2, imm=imm)
        case RV32Type.SB:
            imm = (
                (((word >> 31) & 1) << 12)
                | (((word >> 7) & 1) << 11)
                | (((word >> 25) & 0x3F) << 5)
                | (((word >> 8) & 0xF) << 1)
            )
            return GeneratedInstruction(target_mnemonic, rs1=rs1, rs2=rs2, imm=imm)
        case RV32Type.U:
            return GeneratedInstruction(target_mnemonic, rd=rd, imm=word >> 12)
        case RV32Type.UJ:
            imm = (
                (((word >> 31) & 1) << 20)
                | (((word >> 12) & 0xFF) << 12)
                | (((word >> 20) & 1) << 11)
                | (((word >> 21) & 0x3FF) << 1)
            )
            return GeneratedInstruction(target_mnemonic, rd=rd, imm=imm)
