from chip8_emulator.decoder import decode, describe


def test_decode_fields():
    inst = decode(0xD12F)
    assert inst.opcode == 0xD12F
    assert inst.group == 0xD
    assert inst.nnn == 0x12F
    assert inst.nn == 0x2F
    assert inst.n == 0xF
    assert inst.x == 0x1
    assert inst.y == 0x2


def test_decode_recovers_bit_ranges_for_every_opcode():
    for opcode in range(0x10000):
        hi, lo = opcode >> 8, opcode & 0xFF
        inst = decode(opcode)
        assert inst.nnn == ((hi & 0xF) << 8) | lo
        assert inst.nn == lo
        assert inst.n == lo & 0xF
        assert inst.x == hi & 0xF
        assert inst.y == lo >> 4
        assert (inst.group << 12) | (inst.x << 8) | inst.nn == opcode


def test_describe():
    assert describe(decode(0x00E0)) == "CLS"
    assert describe(decode(0x00EE)) == "RET"
    assert describe(decode(0x0123)) == "SYS 0x123"
    assert describe(decode(0x12A0)) == "JP 0x2A0"
    assert describe(decode(0x631F)) == "LD V3, 0x1F"
    assert describe(decode(0x8AB4)) == "ADD VA, VB"
    assert describe(decode(0x8AB7)) == "SUBN VA, VB"
    assert describe(decode(0xD015)) == "DRW V0, V1, 5"
    assert describe(decode(0xE59E)) == "SKP V5"
    assert describe(decode(0xF70A)) == "LD V7, K"
    assert describe(decode(0xF355)) == "LD [I], V0-V3"


def test_describe_undefined():
    assert describe(decode(0x5121)) == "UNKNOWN 0x5121"
    assert describe(decode(0x8128)) == "UNKNOWN 0x8128"
    assert describe(decode(0xFFFF)) == "UNKNOWN 0xFFFF"
