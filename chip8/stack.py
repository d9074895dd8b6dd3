from chip8.errors import StackOverflow, StackUnderflow

STACK_SIZE = 16


# ********** A FIXED ARRAY OF 16 RETURN ADDRESSES, ITS DEPTH IS TRACKED BY THE SP REGISTER
class Stack:
    def __init__(self, regs):
        self.regs = regs
        self.addr_list = [0] * STACK_SIZE

    def __len__(self):
        return self.regs.sp

    def __str__(self):
        return "[" + ", ".join(f"0x{a:04x}" for a in self.addr_list[:self.regs.sp]) + "]"

    def push(self, address):
        if self.regs.sp >= STACK_SIZE:
            raise StackOverflow(f"The CHIP-8 stack can contain at most {STACK_SIZE} addresses. Limit exceeded")
        self.addr_list[self.regs.sp] = address & 0xFFFF
        self.regs.sp += 1

    def pop(self):
        if self.regs.sp == 0:
            raise StackUnderflow("Tried to return from a subroutine while the CHIP-8 stack is empty")
        self.regs.sp -= 1
        return self.addr_list[self.regs.sp]
