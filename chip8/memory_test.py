import os
import tempfile
import unittest

from chip8.errors import CapacityExceeded, OutOfBoundsAccess
from chip8.memory import Memory, C8_FONTS, MEMORY_SIZE, ROM_START_ADDRESS


class TestMemory(unittest.TestCase):
    def setUp(self):
        self.mem = Memory()

    def test_fonts_preloaded(self):
        self.assertEqual(list(self.mem.inner[:80]), C8_FONTS)
        # glyph for digit 0xA starts at 0xA * 5
        self.assertEqual(self.mem[0xA * 5], 0xF0)

    def test_load(self):
        rom = bytes(range(16)) * 4
        self.mem.load(rom)
        self.assertEqual(bytes(self.mem.inner[ROM_START_ADDRESS:ROM_START_ADDRESS+len(rom)]),
                         rom)

    def test_load_largest_rom(self):
        rom = b"\xAB" * (MEMORY_SIZE - ROM_START_ADDRESS)
        self.mem.load(rom)
        self.assertEqual(self.mem[MEMORY_SIZE - 1], 0xAB)

    def test_load_too_large(self):
        with self.assertRaises(CapacityExceeded):
            self.mem.load(b"\x00" * (MEMORY_SIZE - ROM_START_ADDRESS + 1))
        self.assertEqual(self.mem[ROM_START_ADDRESS], 0)

    def test_read16_big_endian(self):
        self.mem.load(b"\x12\x34")
        self.assertEqual(self.mem.read16(ROM_START_ADDRESS), 0x1234)

    def test_write8_truncates(self):
        self.mem.write8(0x300, 0x1FF)
        self.assertEqual(self.mem.read8(0x300), 0xFF)

    def test_out_of_bounds(self):
        with self.assertRaises(OutOfBoundsAccess):
            self.mem.read8(MEMORY_SIZE)
        with self.assertRaises(OutOfBoundsAccess):
            self.mem.write8(-1, 0)
        with self.assertRaises(OutOfBoundsAccess):
            self.mem.read16(MEMORY_SIZE - 1)

    def test_interpreter_area_is_read_only(self):
        with self.assertRaises(OutOfBoundsAccess):
            self.mem[0x000] = 0x00
        self.assertEqual(self.mem[0x000], 0xF0)

    def test_check_range(self):
        self.mem.check_range(0xFFD, 3)
        self.mem.check_range(0x000, 5)
        with self.assertRaises(OutOfBoundsAccess):
            self.mem.check_range(0xFFE, 3)
        with self.assertRaises(OutOfBoundsAccess):
            self.mem.check_range(0x1FF, 2, write=True)
        self.mem.check_range(0x200, 2, write=True)

    def test_load_rom(self):
        with tempfile.NamedTemporaryFile(suffix=".ch8", delete=False) as f:
            f.write(b"\x00\xE0\x12\x00")
        try:
            self.mem.load_rom(f.name)
        finally:
            os.remove(f.name)
        self.assertEqual(self.mem.read16(ROM_START_ADDRESS + 2), 0x1200)


if __name__ == "__main__":
    unittest.main()
