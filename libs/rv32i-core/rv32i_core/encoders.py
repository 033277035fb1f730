import logging
from typing import Optional

from rv32i_core.rv32i import (
    ADDI,
    GeneratedInstruction,
    RV32Mnemonic,
    RV32Type,
    build_instruction,
)
from rv32i_core.tracking import GenerationContext

logger = logging.getLogger("testgen")

# ---------------------------------------------------------------------------- #
#                                Format Encoders                               #
# ---------------------------------------------------------------------------- #
#
# Every encoder draws its registers from the usable set of the context, except the
# base register of loads and stores which is always x0. Registers that need a known
# value before the body runs are marked in the context's register usage set.
#


def generate_r(mnemonic: RV32Mnemonic, ctx: GenerationContext) -> GeneratedInstruction:
    rs1 = ctx.sampler.register()
    rs2 = ctx.sampler.register()
    rd = ctx.sampler.register()
    ctx.registers.mark(rd)
    return build_instruction(mnemonic, rd=rd, rs1=rs1, rs2=rs2)


def generate_i(mnemonic: RV32Mnemonic, ctx: GenerationContext) -> Optional[GeneratedInstruction]:
    rs1 = ctx.sampler.register()
    rd = ctx.sampler.register()

    if mnemonic.is_shift_immediate:
        inst = build_instruction(mnemonic, rd=rd, rs1=rs1, shamt=ctx.sampler.shamt())
    elif mnemonic.is_load:
        if len(ctx.memory) == 0:
            logger.debug(f"no store location logged yet, dropping '{mnemonic.literal}' at {ctx.index}")
            return None
        imm = ctx.sampler.memory_location(ctx.memory.locations)
        inst = build_instruction(mnemonic, rd=rd, rs1=0, imm=imm)
    else:
        inst = build_instruction(mnemonic, rd=rd, rs1=rs1, imm=ctx.sampler.imm12())

    ctx.registers.mark(rd)
    return inst


def generate_s(mnemonic: RV32Mnemonic, ctx: GenerationContext) -> GeneratedInstruction:
    rs2 = ctx.sampler.register()
    imm = ctx.sampler.store_offset()
    inst = build_instruction(mnemonic, rs1=0, rs2=rs2, imm=imm)
    ctx.memory.record(imm)
    return inst


def generate_sb(mnemonic: RV32Mnemonic, ctx: GenerationContext) -> GeneratedInstruction:
    rs1 = ctx.sampler.register()
    rs2 = ctx.sampler.register()
    ctx.registers.mark(rs1, rs2)
    imm = ctx.sampler.control_offset(ctx.index, ctx.total)
    return build_instruction(mnemonic, rs1=rs1, rs2=rs2, imm=imm)


def generate_u(mnemonic: RV32Mnemonic, ctx: GenerationContext) -> GeneratedInstruction:
    rd = ctx.sampler.register()
    ctx.registers.mark(rd)
    return build_instruction(mnemonic, rd=rd, imm=ctx.sampler.imm20())


def generate_uj(mnemonic: RV32Mnemonic, ctx: GenerationContext) -> GeneratedInstruction:
    rd = ctx.sampler.register()
    ctx.registers.mark(rd)
    imm = ctx.sampler.control_offset(ctx.index, ctx.total)
    return build_instruction(mnemonic, rd=rd, imm=imm)


def generate_instruction(
    mnemonic: RV32Mnemonic, ctx: GenerationContext
) -> Optional[GeneratedInstruction]:
    match mnemonic.format:
        case RV32Type.R:
            return generate_r(mnemonic, ctx)
        case RV32Type.I:
            return generate_i(mnemonic, ctx)
        case RV32Type.S:
            return generate_s(mnemonic, ctx)
        case RV32Type.SB:
            return generate_sb(mnemonic, ctx)
        case RV32Type.U:
            return generate_u(mnemonic, ctx)
        case RV32Type.UJ:
            return generate_uj(mnemonic, ctx)


def register_initializer(register: int) -> GeneratedInstruction:
    """`addi xR, x0, R`: gives register R its own index as a known start value."""
    return build_instruction(ADDI, rd=register, rs1=0, imm=register)
