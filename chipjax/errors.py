"""Exceptions raised by the CHIP-8 interpreter."""


class Chip8Error(Exception):
    """Base class for interpreter errors."""


class ProgramTooLarge(Chip8Error):
    """Program does not fit in memory above 0x200."""

    def __init__(self, size: int, limit: int):
        self.size = size
        self.limit = limit
        super().__init__(f"Program is {size} bytes, at most {limit} bytes fit above 0x200")


class UnknownOpcode(Chip8Error):
    """Opcode that does not decode to any CHIP-8 instruction."""

    def __init__(self, opcode: int, address: int):
        self.opcode = opcode
        self.address = address
        super().__init__(f"Unknown opcode 0x{opcode:04X} at 0x{address:03X}")
