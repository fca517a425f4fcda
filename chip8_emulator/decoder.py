# Instruction fields (CowGods CHIP8 technical reference naming):
#   nnn - lowest 12 bits, an address
#   nn  - lowest 8 bits, a byte (kk in the reference)
#   n   - lowest 4 bits, a nibble
#   x   - bits 8-11, register selector
#   y   - bits 4-7, register selector
from typing import NamedTuple


class Instruction(NamedTuple):
    opcode: int
    nnn: int
    nn: int
    n: int
    x: int
    y: int

    @property
    def group(self):
        return self.opcode >> 12


def decode(opcode):
    """Split a 16-bit opcode into its fixed fields. Never fails."""
    return Instruction(
        opcode,
        opcode & 0x0FFF,
        opcode & 0x00FF,
        opcode & 0x000F,
        (opcode >> 8) & 0xF,
        (opcode >> 4) & 0xF,
    )


ALU_MNEMONICS = {
    0x0: "LD", 0x1: "OR", 0x2: "AND", 0x3: "XOR", 0x4: "ADD",
    0x5: "SUB", 0x6: "SHR", 0x7: "SUBN", 0xE: "SHL",
}

TIMER_KEY_MNEMONICS = {
    0x07: "LD V{x}, DT",
    0x0A: "LD V{x}, K",
    0x15: "LD DT, V{x}",
    0x18: "LD ST, V{x}",
    0x1E: "ADD I, V{x}",
    0x29: "LD F, V{x}",
    0x33: "LD B, V{x}",
    0x55: "LD [I], V0-V{x}",
    0x65: "LD V0-V{x}, [I]",
}


def describe(inst):
    """Return the assembly mnemonic of a decoded instruction, for debug logs."""
    x, y = "%X" % inst.x, "%X" % inst.y
    group = inst.group

    if group == 0x0:
        if inst.opcode == 0x00E0:
            return "CLS"
        if inst.opcode == 0x00EE:
            return "RET"
        return "SYS 0x%03X" % inst.nnn
    if group == 0x1:
        return "JP 0x%03X" % inst.nnn
    if group == 0x2:
        return "CALL 0x%03X" % inst.nnn
    if group == 0x3:
        return "SE V%s, 0x%02X" % (x, inst.nn)
    if group == 0x4:
        return "SNE V%s, 0x%02X" % (x, inst.nn)
    if group == 0x5 and inst.n == 0:
        return "SE V%s, V%s" % (x, y)
    if group == 0x6:
        return "LD V%s, 0x%02X" % (x, inst.nn)
    if group == 0x7:
        return "ADD V%s, 0x%02X" % (x, inst.nn)
    if group == 0x8 and inst.n in ALU_MNEMONICS:
        return "%s V%s, V%s" % (ALU_MNEMONICS[inst.n], x, y)
    if group == 0x9 and inst.n == 0:
        return "SNE V%s, V%s" % (x, y)
    if group == 0xA:
        return "LD I, 0x%03X" % inst.nnn
    if group == 0xB:
        return "JP V0, 0x%03X" % inst.nnn
    if group == 0xC:
        return "RND V%s, 0x%02X" % (x, inst.nn)
    if group == 0xD:
        return "DRW V%s, V%s, %d" % (x, y, inst.n)
    if group == 0xE and inst.nn == 0x9E:
        return "SKP V%s" % x
    if group == 0xE and inst.nn == 0xA1:
        return "SKNP V%s" % x
    if group == 0xF and inst.nn in TIMER_KEY_MNEMONICS:
        return TIMER_KEY_MNEMONICS[inst.nn].format(x=x)
    return "UNKNOWN 0x%04X" % inst.opcode
