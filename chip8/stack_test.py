import unittest

from chip8.errors import StackOverflow, StackUnderflow
from chip8.registers import Registers
from chip8.stack import Stack, STACK_SIZE


class TestStack(unittest.TestCase):
    def setUp(self):
        self.regs = Registers()
        self.stack = Stack(self.regs)

    def test_round_trip(self):
        self.stack.push(0x0234)
        self.stack.push(0x0555)
        self.assertEqual(self.regs.sp, 2)
        self.assertEqual(self.stack.pop(), 0x0555)
        self.assertEqual(self.stack.pop(), 0x0234)
        with self.assertRaises(StackUnderflow):
            self.stack.pop()
        self.assertEqual(self.regs.sp, 0)

    def test_overflow(self):
        for addr in range(STACK_SIZE):
            self.stack.push(0x200 + addr * 2)
        self.assertEqual(len(self.stack), STACK_SIZE)
        with self.assertRaises(StackOverflow):
            self.stack.push(0x400)
        self.assertEqual(self.stack.pop(), 0x200 + (STACK_SIZE - 1) * 2)


if __name__ == "__main__":
    unittest.main()
