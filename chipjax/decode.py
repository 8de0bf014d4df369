"""CHIP-8 instruction decoding.

Decoding is table driven: every instruction kind is a ``(mask, pattern)``
pair, and an opcode belongs to the first kind whose masked bits match.
The result is a ``DecodedInstruction`` carrying both the operand fields and
the ``Op`` it classifies as, so execution can dispatch on a single index.
"""

from enum import IntEnum

import jax.numpy as jnp
from chex import dataclass


class Op(IntEnum):
    """Base CHIP-8 instruction kinds, in dispatch order."""
    CLS = 0           # 00E0
    RET = 1           # 00EE
    JP = 2            # 1NNN
    CALL = 3          # 2NNN
    SE_IMM = 4        # 3XNN
    SNE_IMM = 5       # 4XNN
    SE_REG = 6        # 5XY0
    LD_IMM = 7        # 6XNN
    ADD_IMM = 8       # 7XNN
    LD_REG = 9        # 8XY0
    OR = 10           # 8XY1
    AND = 11          # 8XY2
    XOR = 12          # 8XY3
    ADD_REG = 13      # 8XY4
    SUB = 14          # 8XY5
    SHR = 15          # 8XY6
    SUBN = 16         # 8XY7
    SHL = 17          # 8XYE
    SNE_REG = 18      # 9XY0
    LD_I = 19         # ANNN
    JP_V0 = 20        # BNNN
    RND = 21          # CXNN
    DRW = 22          # DXYN
    SKP = 23          # EX9E
    SKNP = 24         # EXA1
    LD_VX_DT = 25     # FX07
    LD_VX_K = 26      # FX0A
    LD_DT_VX = 27     # FX15
    LD_ST_VX = 28     # FX18
    ADD_I_VX = 29     # FX1E
    LD_F_VX = 30      # FX29
    LD_B_VX = 31      # FX33
    LD_MEM_VX = 32    # FX55
    LD_VX_MEM = 33    # FX65
    UNKNOWN = 34


# (mask, pattern) per Op, indexed by Op value
OPCODE_TABLE = [
    (0xFFFF, 0x00E0),
    (0xFFFF, 0x00EE),
    (0xF000, 0x1000),
    (0xF000, 0x2000),
    (0xF000, 0x3000),
    (0xF000, 0x4000),
    (0xF00F, 0x5000),
    (0xF000, 0x6000),
    (0xF000, 0x7000),
    (0xF00F, 0x8000),
    (0xF00F, 0x8001),
    (0xF00F, 0x8002),
    (0xF00F, 0x8003),
    (0xF00F, 0x8004),
    (0xF00F, 0x8005),
    (0xF00F, 0x8006),
    (0xF00F, 0x8007),
    (0xF00F, 0x800E),
    (0xF00F, 0x9000),
    (0xF000, 0xA000),
    (0xF000, 0xB000),
    (0xF000, 0xC000),
    (0xF000, 0xD000),
    (0xF0FF, 0xE09E),
    (0xF0FF, 0xE0A1),
    (0xF0FF, 0xF007),
    (0xF0FF, 0xF00A),
    (0xF0FF, 0xF015),
    (0xF0FF, 0xF018),
    (0xF0FF, 0xF01E),
    (0xF0FF, 0xF029),
    (0xF0FF, 0xF033),
    (0xF0FF, 0xF055),
    (0xF0FF, 0xF065),
]

_MASKS = jnp.array([mask for mask, _ in OPCODE_TABLE], dtype=jnp.int32)
_PATTERNS = jnp.array([pattern for _, pattern in OPCODE_TABLE], dtype=jnp.int32)

MNEMONICS = {
    Op.CLS: "CLS",
    Op.RET: "RET",
    Op.JP: "JP {nnn:03X}",
    Op.CALL: "CALL {nnn:03X}",
    Op.SE_IMM: "SE V{x:X}, {nn:02X}",
    Op.SNE_IMM: "SNE V{x:X}, {nn:02X}",
    Op.SE_REG: "SE V{x:X}, V{y:X}",
    Op.LD_IMM: "LD V{x:X}, {nn:02X}",
    Op.ADD_IMM: "ADD V{x:X}, {nn:02X}",
    Op.LD_REG: "LD V{x:X}, V{y:X}",
    Op.OR: "OR V{x:X}, V{y:X}",
    Op.AND: "AND V{x:X}, V{y:X}",
    Op.XOR: "XOR V{x:X}, V{y:X}",
    Op.ADD_REG: "ADD V{x:X}, V{y:X}",
    Op.SUB: "SUB V{x:X}, V{y:X}",
    Op.SHR: "SHR V{x:X}",
    Op.SUBN: "SUBN V{x:X}, V{y:X}",
    Op.SHL: "SHL V{x:X}",
    Op.SNE_REG: "SNE V{x:X}, V{y:X}",
    Op.LD_I: "LD I, {nnn:03X}",
    Op.JP_V0: "JP V0, {nnn:03X}",
    Op.RND: "RND V{x:X}, {nn:02X}",
    Op.DRW: "DRW V{x:X}, V{y:X}, {n:X}",
    Op.SKP: "SKP V{x:X}",
    Op.SKNP: "SKNP V{x:X}",
    Op.LD_VX_DT: "LD V{x:X}, DT",
    Op.LD_VX_K: "LD V{x:X}, K",
    Op.LD_DT_VX: "LD DT, V{x:X}",
    Op.LD_ST_VX: "LD ST, V{x:X}",
    Op.ADD_I_VX: "ADD I, V{x:X}",
    Op.LD_F_VX: "LD F, V{x:X}",
    Op.LD_B_VX: "LD B, V{x:X}",
    Op.LD_MEM_VX: "LD [I], V{x:X}",
    Op.LD_VX_MEM: "LD V{x:X}, [I]",
    Op.UNKNOWN: "DW {raw:04X}",
}


@dataclass(frozen=True)
class DecodedInstruction:
    """Decoded CHIP-8 instruction with extracted operands."""
    raw: int
    opcode: int  # First nibble
    x: int       # Second nibble (VX register)
    y: int       # Third nibble (VY register)
    n: int       # Fourth nibble (4-bit immediate)
    nn: int      # Last byte (8-bit immediate)
    nnn: int     # Last 12 bits (12-bit address)
    kind: int    # Op value


def classify(instruction: int) -> jnp.ndarray:
    """Return the Op index of a 16-bit instruction, Op.UNKNOWN if none matches."""
    matches = (jnp.astype(instruction, jnp.int32) & _MASKS) == _PATTERNS
    return jnp.where(jnp.any(matches), jnp.argmax(matches), int(Op.UNKNOWN))


def decode(instruction: int) -> DecodedInstruction:
    """Decode 16-bit instruction into components."""
    return DecodedInstruction(
        raw=instruction,
        opcode=(instruction & 0xF000) >> 12,
        x=(instruction & 0x0F00) >> 8,
        y=(instruction & 0x00F0) >> 4,
        n=instruction & 0x000F,
        nn=instruction & 0x00FF,
        nnn=instruction & 0x0FFF,
        kind=classify(instruction),
    )


def disassemble(instruction: int) -> str:
    """Render a concrete instruction as an assembly mnemonic."""
    instruction = int(instruction)
    kind = Op(int(classify(instruction)))
    return MNEMONICS[kind].format(
        raw=instruction,
        x=(instruction & 0x0F00) >> 8,
        y=(instruction & 0x00F0) >> 4,
        n=instruction & 0x000F,
        nn=instruction & 0x00FF,
        nnn=instruction & 0x0FFF,
    )
