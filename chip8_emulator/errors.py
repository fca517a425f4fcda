class Chip8Error(Exception):
    pass


class RomLoadError(Chip8Error):
    pass


class StackOverflowError(Chip8Error):
    pass


class StackUnderflowError(Chip8Error):
    pass


class UnknownOpcodeError(Chip8Error):
    def __init__(self, opcode, address):
        super().__init__("Unknown opcode %04X at 0x%03X" % (opcode, address))
        self.opcode = opcode
        self.address = address
