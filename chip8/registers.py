from chip8.memory import ROM_START_ADDRESS


# ******************** REGISTER FILE SECTION
class Registers:
    """
    plain holder of the CPU registers, all of them are written by the CPU only
    - v_regs: V0 to VF, 8 bits each (VF doubles as the carry/borrow/collision flag)
    - idx:    I, 16 bits, specify where the sprites reside in memory
    - pc:     program counter, 16 bits
    - sp:     stack pointer, 8 bits
    - dt/st:  delay and sound timers, 8 bits each, active when non-zero
    """
    def __init__(self):
        self.reset()

    def reset(self):
        self.v_regs = [0] * 16
        self.idx = 0
        self.pc = ROM_START_ADDRESS
        self.sp = 0
        self.dt = 0
        self.st = 0

    def __str__(self):
        v_regs = " ".join(f"V{i:X}:{v:02x}" for i, v in enumerate(self.v_regs))
        return (f"PC_REGISTER:0x{self.pc:04x} | IDX_REGISTER:0x{self.idx:04x} | SP:{self.sp} | "
                f"DT:{self.dt} | ST:{self.st} | VARIABLE_REGISTERS:{v_regs}")
