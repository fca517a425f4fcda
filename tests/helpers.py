def program(*opcodes):
    """Assemble 16-bit opcodes into a big-endian ROM image."""
    rom = bytearray()
    for opcode in opcodes:
        rom += bytes([opcode >> 8, opcode & 0xFF])
    return bytes(rom)


class FakeClock:
    """Stands in for time.perf_counter_ns."""

    def __init__(self, now=1_000_000_000_000):
        self.now = now

    def __call__(self):
        return self.now

    def forward(self, seconds):
        self.now += round(seconds * 1_000_000_000)
