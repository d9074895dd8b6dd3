import logging

from chip8.errors import CapacityExceeded, OutOfBoundsAccess

logger = logging.getLogger(__name__)


# ******************** STATIC SECTION
C8_FONTS = [0xF0, 0x90, 0x90, 0x90, 0xF0,  # 0
            0x20, 0x60, 0x20, 0x20, 0x70,  # 1
            0xF0, 0x10, 0xF0, 0x80, 0xF0,  # 2
            0xF0, 0x10, 0xF0, 0x10, 0xF0,  # 3
            0x90, 0x90, 0xF0, 0x10, 0x10,  # 4
            0xF0, 0x80, 0xF0, 0x10, 0xF0,  # 5
            0xF0, 0x80, 0xF0, 0x90, 0xF0,  # 6
            0xF0, 0x10, 0x20, 0x40, 0x40,  # 7
            0xF0, 0x90, 0xF0, 0x90, 0xF0,  # 8
            0xF0, 0x90, 0xF0, 0x10, 0xF0,  # 9
            0xF0, 0x90, 0xF0, 0x90, 0x90,  # A
            0xE0, 0x90, 0xE0, 0x90, 0xE0,  # B
            0xF0, 0x80, 0x80, 0x80, 0xF0,  # C
            0xE0, 0x90, 0x90, 0x90, 0xE0,  # D
            0xF0, 0x80, 0xF0, 0x80, 0xF0,  # E
            0xF0, 0x80, 0xF0, 0x80, 0x80]  # F

MEMORY_SIZE = 4096
FONTS_ADDRESS = 0x000
SPRITE_HEIGHT = 5           # each character font is made of 5 bytes
ROM_START_ADDRESS = 0x200   # everything below is reserved to the interpreter


# ******************** MEMORY SECTION
# ********** WRAPS A BYTEARRAY TO REPRESENT THE MAIN MEMORY WITH A LIMITED SIZE OF 4KB
class Memory:
    def __init__(self):
        self.inner = bytearray(MEMORY_SIZE)
        self.inner[FONTS_ADDRESS:FONTS_ADDRESS+len(C8_FONTS)] = bytes(C8_FONTS)

    def __len__(self):
        return len(self.inner)

    def __getitem__(self, addr):
        return self.read8(addr)

    def __setitem__(self, addr, value):
        self.write8(addr, value)

    @staticmethod
    def _check(addr):
        if not 0 <= addr < MEMORY_SIZE:
            raise OutOfBoundsAccess(f"Memory address 0x{addr:04x} is outside of the 4KB address space")

    def check_range(self, addr, length, write=False):
        """validate a whole [addr, addr+length) transfer before any of its bytes is touched"""
        if length <= 0:
            return
        self._check(addr)
        self._check(addr + length - 1)
        if write and addr < ROM_START_ADDRESS:
            raise OutOfBoundsAccess(f"Memory address 0x{addr:04x} belongs to the interpreter area and is read only")

    def read8(self, addr):
        self._check(addr)
        return self.inner[addr]

    def write8(self, addr, value):
        self._check(addr)
        if addr < ROM_START_ADDRESS:
            raise OutOfBoundsAccess(f"Memory address 0x{addr:04x} belongs to the interpreter area and is read only")
        self.inner[addr] = value & 0xFF

    def read16(self, addr):
        """read two consecutive bytes as a big-endian word (used to fetch opcodes)"""
        return self.read8(addr) << 8 | self.read8(addr + 1)

    def load(self, data):
        """copy a program image into memory starting at ROM_START_ADDRESS"""
        if ROM_START_ADDRESS + len(data) > MEMORY_SIZE:
            raise CapacityExceeded(
                f"A program of {len(data)} bytes does not fit, at most {MEMORY_SIZE - ROM_START_ADDRESS} bytes are available"
            )
        self.inner[ROM_START_ADDRESS:ROM_START_ADDRESS+len(data)] = bytes(data)

    def load_rom(self, path):
        """load ROM file from user specified path, raise an exception if it can't be read or doesn't fit"""
        with open(path, mode='rb') as f:
            rom = f.read()
        self.load(rom)
        logger.info("The ROM at path %s (%d bytes) has been loaded successfully", path, len(rom))
        return rom
