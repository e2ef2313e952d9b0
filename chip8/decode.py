# CPU - Cowgod's CHIP-8 Technical reference http://devernay.free.fr/hacks/chip8/C8TECH10.HTM
# Decoding turns the 2 raw opcode bytes into an Instruction tagged with an Op.
# Nothing here touches machine state, so it can be used for disassembly too.

from collections import namedtuple
from enum import Enum

from .errors import UnknownOpcode


class Op(Enum):
    SYS = "SYS"
    CLS = "CLS"
    RET = "RET"
    JP = "JP"
    CALL = "CALL"
    SE_VX_KK = "SE_VX_KK"
    SNE_VX_KK = "SNE_VX_KK"
    SE_VX_VY = "SE_VX_VY"
    LD_VX_KK = "LD_VX_KK"
    ADD_VX_KK = "ADD_VX_KK"
    LD_VX_VY = "LD_VX_VY"
    OR = "OR"
    AND = "AND"
    XOR = "XOR"
    ADD_VX_VY = "ADD_VX_VY"
    SUB = "SUB"
    SHR = "SHR"
    SUBN = "SUBN"
    SHL = "SHL"
    SNE_VX_VY = "SNE_VX_VY"
    LD_I = "LD_I"
    JP_V0 = "JP_V0"
    RND = "RND"
    DRW = "DRW"
    SKP = "SKP"
    SKNP = "SKNP"
    LD_VX_DT = "LD_VX_DT"
    LD_VX_K = "LD_VX_K"
    LD_DT_VX = "LD_DT_VX"
    LD_ST_VX = "LD_ST_VX"
    ADD_I_VX = "ADD_I_VX"
    LD_F_VX = "LD_F_VX"
    LD_B_VX = "LD_B_VX"
    LD_I_VX = "LD_I_VX"
    LD_VX_I = "LD_VX_I"


# (mask, pattern, op) - first match wins, so CLS/RET sit in front of SYS
OPCODES = [
    (0xFFFF, 0x00E0, Op.CLS),
    (0xFFFF, 0x00EE, Op.RET),
    (0xF000, 0x0000, Op.SYS),

    (0xF000, 0x1000, Op.JP),
    (0xF000, 0x2000, Op.CALL),
    (0xF000, 0x3000, Op.SE_VX_KK),
    (0xF000, 0x4000, Op.SNE_VX_KK),
    (0xF00F, 0x5000, Op.SE_VX_VY),
    (0xF000, 0x6000, Op.LD_VX_KK),
    (0xF000, 0x7000, Op.ADD_VX_KK),

    (0xF00F, 0x8000, Op.LD_VX_VY),
    (0xF00F, 0x8001, Op.OR),
    (0xF00F, 0x8002, Op.AND),
    (0xF00F, 0x8003, Op.XOR),
    (0xF00F, 0x8004, Op.ADD_VX_VY),
    (0xF00F, 0x8005, Op.SUB),
    (0xF00F, 0x8006, Op.SHR),
    (0xF00F, 0x8007, Op.SUBN),
    (0xF00F, 0x800E, Op.SHL),

    (0xF00F, 0x9000, Op.SNE_VX_VY),
    (0xF000, 0xA000, Op.LD_I),
    (0xF000, 0xB000, Op.JP_V0),
    (0xF000, 0xC000, Op.RND),
    (0xF000, 0xD000, Op.DRW),

    (0xF0FF, 0xE09E, Op.SKP),
    (0xF0FF, 0xE0A1, Op.SKNP),

    (0xF0FF, 0xF007, Op.LD_VX_DT),
    (0xF0FF, 0xF00A, Op.LD_VX_K),
    (0xF0FF, 0xF015, Op.LD_DT_VX),
    (0xF0FF, 0xF018, Op.LD_ST_VX),
    (0xF0FF, 0xF01E, Op.ADD_I_VX),
    (0xF0FF, 0xF029, Op.LD_F_VX),
    (0xF0FF, 0xF033, Op.LD_B_VX),
    (0xF0FF, 0xF055, Op.LD_I_VX),
    (0xF0FF, 0xF065, Op.LD_VX_I),
]


class Instruction(namedtuple("Instruction", "op raw address x y n kk nnn")):
    """One decoded opcode plus every operand field the encoding can carry."""

    __slots__ = ()

    def __str__(self):
        return mnemonic(self)


def decode(raw, address=0):
    """Decode a 16-bit opcode word. Raises UnknownOpcode if nothing matches."""
    for mask, pattern, op in OPCODES:
        if raw & mask == pattern:
            return Instruction(
                op=op,
                raw=raw,
                address=address,
                x=(raw >> 8) & 0xF,
                y=(raw >> 4) & 0xF,
                n=raw & 0xF,
                kk=raw & 0xFF,
                nnn=raw & 0x0FFF,
            )
    raise UnknownOpcode(address, raw)


_FORMATS = {
    Op.SYS: "SYS {nnn:03X}",
    Op.CLS: "CLS",
    Op.RET: "RET",
    Op.JP: "JP {nnn:03X}",
    Op.CALL: "CALL {nnn:03X}",
    Op.SE_VX_KK: "SE V{x:X}, {kk:02X}",
    Op.SNE_VX_KK: "SNE V{x:X}, {kk:02X}",
    Op.SE_VX_VY: "SE V{x:X}, V{y:X}",
    Op.LD_VX_KK: "LD V{x:X}, {kk:02X}",
    Op.ADD_VX_KK: "ADD V{x:X}, {kk:02X}",
    Op.LD_VX_VY: "LD V{x:X}, V{y:X}",
    Op.OR: "OR V{x:X}, V{y:X}",
    Op.AND: "AND V{x:X}, V{y:X}",
    Op.XOR: "XOR V{x:X}, V{y:X}",
    Op.ADD_VX_VY: "ADD V{x:X}, V{y:X}",
    Op.SUB: "SUB V{x:X}, V{y:X}",
    Op.SHR: "SHR V{x:X}",
    Op.SUBN: "SUBN V{x:X}, V{y:X}",
    Op.SHL: "SHL V{x:X}",
    Op.SNE_VX_VY: "SNE V{x:X}, V{y:X}",
    Op.LD_I: "LD I, {nnn:03X}",
    Op.JP_V0: "JP V0, {nnn:03X}",
    Op.RND: "RND V{x:X}, {kk:02X}",
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
    Op.LD_I_VX: "LD [I], V{x:X}",
    Op.LD_VX_I: "LD V{x:X}, [I]",
}


def mnemonic(instruction):
    """Assembly text for an instruction, e.g. ``DRW V0, V1, 5``."""
    return _FORMATS[instruction.op].format(**instruction._asdict())


def disassemble(program, start=0x200):
    """Yield ``(address, text)`` for every 2-byte word in ``program``.

    Words that are not valid opcodes come out as ``DW xxxx`` (sprite data).
    """
    program = bytes(program)
    for offset in range(0, len(program) - 1, 2):
        address = start + offset
        raw = program[offset] << 8 | program[offset + 1]
        try:
            yield address, mnemonic(decode(raw, address))
        except UnknownOpcode:
            yield address, "DW %04X" % raw
