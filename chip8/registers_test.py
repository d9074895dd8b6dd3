import unittest

from chip8.registers import Registers


class TestRegisters(unittest.TestCase):
    def test_defaults(self):
        regs = Registers()
        self.assertEqual(regs.v_regs, [0] * 16)
        self.assertEqual((regs.idx, regs.pc, regs.sp, regs.dt, regs.st),
                         (0, 0x200, 0, 0, 0))

    def test_reset(self):
        regs = Registers()
        regs.v_regs[3], regs.pc, regs.dt = 7, 0x300, 9
        regs.reset()
        self.assertEqual((regs.v_regs[3], regs.pc, regs.dt), (0, 0x200, 0))

    def test_str(self):
        regs = Registers()
        regs.v_regs[0xA] = 0x1F
        self.assertIn("PC_REGISTER:0x0200", str(regs))
        self.assertIn("VA:1f", str(regs))


if __name__ == "__main__":
    unittest.main()
