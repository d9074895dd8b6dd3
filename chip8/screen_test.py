import unittest

from chip8.errors import OutOfBoundsAccess
from chip8.screen import Framebuffer


class TestFramebuffer(unittest.TestCase):
    def setUp(self):
        self.fb = Framebuffer()

    def test_draw_twice_collides(self):
        sprite = [0xF0, 0x90, 0xF0]
        self.assertFalse(self.fb.draw_sprite(10, 5, sprite, 3))
        self.assertTrue(self.fb.is_set(10, 5))
        self.assertTrue(self.fb.is_set(13, 6))
        self.assertFalse(self.fb.is_set(11, 6))
        self.assertTrue(self.fb.draw_sprite(10, 5, sprite, 3))
        self.assertFalse(any(self.fb.buffer))

    def test_overlap_without_clearing(self):
        self.fb.draw_sprite(0, 0, [0x80], 1)
        # the second sprite only lights the pixel next to the first one
        self.assertFalse(self.fb.draw_sprite(0, 0, [0x40], 1))

    def test_wraparound(self):
        self.fb.draw_sprite(62, 31, [0xF0, 0xF0], 2)
        self.assertTrue(self.fb.is_set(63, 31))
        self.assertTrue(self.fb.is_set(0, 31))
        self.assertTrue(self.fb.is_set(1, 0))
        self.assertFalse(self.fb.is_set(2, 0))
        # queries wrap too
        self.assertTrue(self.fb.is_set(64, 31))

    def test_clear(self):
        self.fb.draw_sprite(0, 0, [0xFF], 1)
        self.fb.clear()
        self.assertFalse(self.fb.is_set(0, 0))

    def test_short_sprite(self):
        with self.assertRaises(OutOfBoundsAccess):
            self.fb.draw_sprite(0, 0, [0xFF], 2)


if __name__ == "__main__":
    unittest.main()
