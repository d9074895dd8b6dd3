# CHIP-8 INFO
# https://chip-8.github.io/extensions/#chip-8
# https://chip-8.github.io/links/
#
# MASTERING CHIP-8
# https://github.com/mattmikolay/chip-8/wiki/Mastering-CHIP%E2%80%908
#
# TEST SUITE
# https://github.com/Timendus/chip8-test-suite


import logging
import random
from functools import wraps

from chip8.errors import KeyWaitCancelled
from chip8.keypad import Keypad
from chip8.memory import Memory, ROM_START_ADDRESS, SPRITE_HEIGHT, FONTS_ADDRESS
from chip8.registers import Registers
from chip8.screen import Framebuffer
from chip8.stack import Stack

logger = logging.getLogger(__name__)


# ******************** UTILITIES SECTION
def asm(msg):
    """decorator to log the ASM of the instruction being executed"""
    def decorator(fn):
        @wraps(fn)
        def wrapper_fn(*args, **kwargs):
            mem_addr = args[0].regs.pc - 0x2    # args[0] equals self, pc already points to the next instruction
            vals = fn(*args, **kwargs)          # use the locals() values of each decorated function in the log line
            if logger.isEnabledFor(logging.DEBUG):
                vals['mem_addr'] = mem_addr
                logger.debug(msg.format(**vals))
        return wrapper_fn
    return decorator


def nibbles(opcode):
    """split an opcode in its x, y, n, kk, nnn fields"""
    return ((opcode & 0x0F00) >> 8, (opcode & 0x00F0) >> 4,
            opcode & 0x000F, opcode & 0x00FF, opcode & 0x0FFF)


# ******************** CPU SECTION
class Chip8:
    def __init__(self, screen=None, keypad=None, seed=None, rng=None):
        self.mem = Memory()
        self.regs = Registers()
        self.stack = Stack(self.regs)
        self.screen = screen if screen is not None else Framebuffer()
        self.keypad = keypad if keypad is not None else Keypad()
        # a single stream, seeded once, feeds every RND instruction
        self.rng = rng if rng is not None else random.Random(seed)
        self.draw = False
        # first level: top nibble of the opcode
        self.instructions = {
            0x0: self._system,
            0x1: self._jump,
            0x2: self._call_addr,
            0x3: self._skip_if_eq,
            0x4: self._skip_if_not_eq,
            0x5: self._skip_if_eq_regs,
            0x6: self._set_vk,
            0x7: self._add_to_vk,
            0x8: self._arithmetic,
            0x9: self._skip_if_not_eq_regs,
            0xA: self._set_idx,
            0xB: self._jump_plus,
            0xC: self._random_byte_and,
            0xD: self._to_screen,
            0xE: self._keys,
            0xF: self._misc,
        }
        # second level: whole opcode for 0___, low nibble for 8xy_, low byte for Ex__ and Fx__
        self.system_instructions = {
            0x00E0: self._clear_screen,
            0x00EE: self._return,
        }
        self.arithmetic_instructions = {
            0x0: self._set_vx_to_vy,
            0x1: self._set_vx_or_vy,
            0x2: self._set_vx_and_vy,
            0x3: self._set_vx_xor_vy,
            0x4: self._add_vx_vy,
            0x5: self._sub_vx_vy,
            0x6: self._shr,
            0x7: self._subn_vx_vy,
            0xE: self._shl,
        }
        self.key_instructions = {
            0x9E: self._skip_if_pressed,
            0xA1: self._skip_if_not_pressed,
        }
        self.misc_instructions = {
            0x07: self._set_vx_dt,
            0x0A: self._wait_keypress,
            0x15: self._set_dt_vx,
            0x18: self._set_st,
            0x1E: self._add_to_idx,
            0x29: self._select_char,
            0x33: self._bcd_repr,
            0x55: self._store_vregs,
            0x65: self._load_vregs,
        }

    def __str__(self):
        registers = str(self.regs)
        stack = f"STACK:{self.stack}"
        devices = f"KEYPAD:{self.keypad}"
        flags = f"DRAW: {self.draw}"
        return f"{registers}\n{stack}\n{devices}\n{flags}"

    # ********** PROGRAM LOADING
    def load(self, data):
        self.mem.load(data)
        self.regs.pc = ROM_START_ADDRESS

    def load_rom(self, path):
        self.mem.load_rom(path)
        self.regs.pc = ROM_START_ADDRESS

    # ********** SECOND LEVEL DISPATCH
    def _system(self, opcode):
        self.system_instructions.get(opcode, self._unassigned)(opcode)

    def _arithmetic(self, opcode):
        self.arithmetic_instructions.get(opcode & 0x000F, self._unassigned)(opcode)

    def _keys(self, opcode):
        self.key_instructions.get(opcode & 0x00FF, self._unassigned)(opcode)

    def _misc(self, opcode):
        self.misc_instructions.get(opcode & 0x00FF, self._unassigned)(opcode)

    def _unassigned(self, opcode):
        """opcodes with no meaning on the original interpreter are skipped"""
        logger.warning("mem_addr: 0x%04x    unassigned opcode 0x%04x, ignored", self.regs.pc - 0x2, opcode)

    # ********** 0___ / 1___ / 2___: FLOW CONTROL
    @asm("mem_addr: 0x{mem_addr:04x}    instruction: CLS")
    def _clear_screen(self, opcode):
        self.screen.clear()
        self.draw = True
        return locals()

    @asm("mem_addr: 0x{mem_addr:04x}    instruction: RET")
    def _return(self, opcode):
        """return from a subroutine, the popped address already points past the CALL"""
        self.regs.pc = self.stack.pop()
        return locals()

    @asm("mem_addr: 0x{mem_addr:04x}    instruction: JP 0x{address:04x}")
    def _jump(self, opcode):
        address = opcode & 0x0FFF
        self.regs.pc = address
        return locals()

    @asm("mem_addr: 0x{mem_addr:04x}    instruction: CALL 0x{address:04x}")
    def _call_addr(self, opcode):
        address = opcode & 0x0FFF
        self.stack.push(self.regs.pc)
        self.regs.pc = address
        return locals()

    @asm("mem_addr: 0x{mem_addr:04x}    instruction: JP V0, 0x{address:04x}")
    def _jump_plus(self, opcode):
        address = opcode & 0x0FFF
        v0 = self.regs.v_regs[0x0]
        self.regs.pc = (address + v0) & 0xFFFF
        return locals()

    # ********** 3___ / 4___ / 5___ / 9___: CONDITIONAL SKIPS
    @asm("mem_addr: 0x{mem_addr:04x}    instruction: SE V{x:X}, {kk}")
    def _skip_if_eq(self, opcode):
        x, _, _, kk, _ = nibbles(opcode)
        if self.regs.v_regs[x] == kk:
            self._goto_next_instruction()
        return locals()

    @asm("mem_addr: 0x{mem_addr:04x}    instruction: SNE V{x:X}, {kk}")
    def _skip_if_not_eq(self, opcode):
        x, _, _, kk, _ = nibbles(opcode)
        if self.regs.v_regs[x] != kk:
            self._goto_next_instruction()
        return locals()

    def _skip_if_eq_regs(self, opcode):
        if opcode & 0x000F:
            return self._unassigned(opcode)
        self._se_regs(opcode)

    @asm("mem_addr: 0x{mem_addr:04x}    instruction: SE V{x:X}, V{y:X}")
    def _se_regs(self, opcode):
        x, y, _, _, _ = nibbles(opcode)
        if self.regs.v_regs[x] == self.regs.v_regs[y]:
            self._goto_next_instruction()
        return locals()

    def _skip_if_not_eq_regs(self, opcode):
        if opcode & 0x000F:
            return self._unassigned(opcode)
        self._sne_regs(opcode)

    @asm("mem_addr: 0x{mem_addr:04x}    instruction: SNE V{x:X}, V{y:X}")
    def _sne_regs(self, opcode):
        x, y, _, _, _ = nibbles(opcode)
        if self.regs.v_regs[x] != self.regs.v_regs[y]:
            self._goto_next_instruction()
        return locals()

    # ********** 6___ / 7___ / 8___: REGISTERS
    @asm("mem_addr: 0x{mem_addr:04x}    instruction: LD V{x:X}, {value}")
    def _set_vk(self, opcode):
        """set the value of one of the 16 variable registers, Vx"""
        x, value = (opcode & 0x0F00) >> 8, opcode & 0x00FF
        self.regs.v_regs[x] = value
        return locals()

    @asm("mem_addr: 0x{mem_addr:04x}    instruction: ADD V{x:X}, {value}")
    def _add_to_vk(self, opcode):
        """add to the value already present in one of the variable registers, VF is left untouched"""
        x, value = (opcode & 0x0F00) >> 8, opcode & 0x00FF
        self.regs.v_regs[x] = (self.regs.v_regs[x] + value) & 0xFF
        return locals()

    @asm("mem_addr: 0x{mem_addr:04x}    instruction: LD V{x:X}, V{y:X}")
    def _set_vx_to_vy(self, opcode):
        """set the value of Vx equal to that of Vy"""
        x, y = (opcode & 0x0F00) >> 8, (opcode & 0x00F0) >> 4
        self.regs.v_regs[x] = self.regs.v_regs[y]
        return locals()

    @asm("mem_addr: 0x{mem_addr:04x}    instruction: OR V{x:X}, V{y:X}")
    def _set_vx_or_vy(self, opcode):
        """set the value of Vx to Vx OR Vy"""
        x, y = (opcode & 0x0F00) >> 8, (opcode & 0x00F0) >> 4
        self.regs.v_regs[x] |= self.regs.v_regs[y]
        return locals()

    @asm("mem_addr: 0x{mem_addr:04x}    instruction: AND V{x:X}, V{y:X}")
    def _set_vx_and_vy(self, opcode):
        """set the value of Vx to Vx AND Vy"""
        x, y = (opcode & 0x0F00) >> 8, (opcode & 0x00F0) >> 4
        self.regs.v_regs[x] &= self.regs.v_regs[y]
        return locals()

    @asm("mem_addr: 0x{mem_addr:04x}    instruction: XOR V{x:X}, V{y:X}")
    def _set_vx_xor_vy(self, opcode):
        """set the value of Vx to Vx XOR Vy"""
        x, y = (opcode & 0x0F00) >> 8, (opcode & 0x00F0) >> 4
        self.regs.v_regs[x] ^= self.regs.v_regs[y]
        return locals()

    # the flag setting instructions below write VF first and Vx last,
    # so when x is F the result of the operation is what's left in VF

    @asm("mem_addr: 0x{mem_addr:04x}    instruction: ADD V{x:X}, V{y:X}")
    def _add_vx_vy(self, opcode):
        """set Vx = Vx + Vy, VF = 1 on carry"""
        x, y = (opcode & 0x0F00) >> 8, (opcode & 0x00F0) >> 4
        total = self.regs.v_regs[x] + self.regs.v_regs[y]
        self.regs.v_regs[0xF] = 1 if total > 0xFF else 0
        self.regs.v_regs[x] = total & 0xFF     # keep only the lowest 8 bits from the result
        return locals()

    @asm("mem_addr: 0x{mem_addr:04x}    instruction: SUB V{x:X}, V{y:X}")
    def _sub_vx_vy(self, opcode):
        """set Vx = Vx - Vy, VF = NOT borrow (1 when Vx > Vy)"""
        x, y = (opcode & 0x0F00) >> 8, (opcode & 0x00F0) >> 4
        vx, vy = self.regs.v_regs[x], self.regs.v_regs[y]
        self.regs.v_regs[0xF] = 1 if vx > vy else 0
        self.regs.v_regs[x] = (vx - vy) & 0xFF
        return locals()

    @asm("mem_addr: 0x{mem_addr:04x}    instruction: SHR V{x:X}")
    def _shr(self, opcode):
        """set Vx = Vx SHR 1, VF = the bit shifted out"""
        x = (opcode & 0x0F00) >> 8
        vx = self.regs.v_regs[x]
        self.regs.v_regs[0xF] = vx & 0x1
        self.regs.v_regs[x] = vx >> 1
        return locals()

    @asm("mem_addr: 0x{mem_addr:04x}    instruction: SUBN V{x:X}, V{y:X}")
    def _subn_vx_vy(self, opcode):
        """set Vx = Vy - Vx, VF = NOT borrow (1 when Vy > Vx)"""
        x, y = (opcode & 0x0F00) >> 8, (opcode & 0x00F0) >> 4
        vx, vy = self.regs.v_regs[x], self.regs.v_regs[y]
        self.regs.v_regs[0xF] = 1 if vy > vx else 0
        self.regs.v_regs[x] = (vy - vx) & 0xFF
        return locals()

    @asm("mem_addr: 0x{mem_addr:04x}    instruction: SHL V{x:X}")
    def _shl(self, opcode):
        """set Vx = Vx SHL 1, VF = the bit shifted out"""
        x = (opcode & 0x0F00) >> 8
        vx = self.regs.v_regs[x]
        self.regs.v_regs[0xF] = (vx & 0x80) >> 7
        self.regs.v_regs[x] = (vx << 1) & 0xFF
        return locals()

    # ********** A___ / C___ / D___
    @asm("mem_addr: 0x{mem_addr:04x}    instruction: LD I, 0x{value:04x}")
    def _set_idx(self, opcode):
        """set the value of the I register"""
        value = opcode & 0x0FFF
        self.regs.idx = value
        return locals()

    @asm("mem_addr: 0x{mem_addr:04x}    instruction: RND V{x:X}, 0x{kk:02x}")
    def _random_byte_and(self, opcode):
        x, kk = (opcode & 0x0F00) >> 8, opcode & 0x00FF
        rnd = self.rng.randint(0, 255)
        self.regs.v_regs[x] = rnd & kk
        return locals()

    @asm("mem_addr: 0x{mem_addr:04x}    instruction: DRW V{x:X}, V{y:X}, {n_bytes}")
    def _to_screen(self, opcode):
        """display n-byte sprite starting at memory location I at (Vx, Vy), set VF = collision"""
        x, y, n_bytes, _, _ = nibbles(opcode)
        self.mem.check_range(self.regs.idx, n_bytes)
        sprite = list(self.mem.inner[self.regs.idx:self.regs.idx+n_bytes])
        collision = self.screen.draw_sprite(self.regs.v_regs[x], self.regs.v_regs[y], sprite, n_bytes)
        self.regs.v_regs[0xF] = 1 if collision else 0
        self.draw = True
        return locals()

    # ********** E___: KEYPAD
    @asm("mem_addr: 0x{mem_addr:04x}    instruction: SKP V{x:X}")
    def _skip_if_pressed(self, opcode):
        """skip the following instruction if the key corresponding to the hex value stored in Vx is pressed"""
        x = (opcode & 0x0F00) >> 8
        key = self.regs.v_regs[x]
        if self.keypad.is_down(key):
            self._goto_next_instruction()
        return locals()

    @asm("mem_addr: 0x{mem_addr:04x}    instruction: SKNP V{x:X}")
    def _skip_if_not_pressed(self, opcode):
        """skip the following instruction if the key corresponding to the hex value stored in Vx is NOT pressed"""
        x = (opcode & 0x0F00) >> 8
        key = self.regs.v_regs[x]
        if not self.keypad.is_down(key):
            self._goto_next_instruction()
        return locals()

    # ********** F___: TIMERS, KEY WAIT, INDEX AND MEMORY TRANSFERS
    @asm("mem_addr: 0x{mem_addr:04x}    instruction: LD V{x:X}, DT")
    def _set_vx_dt(self, opcode):
        """set Vx = DT (delay timer) value"""
        x = (opcode & 0x0F00) >> 8
        self.regs.v_regs[x] = self.regs.dt
        return locals()

    @asm("mem_addr: 0x{mem_addr:04x}    instruction: LD V{x:X}, K")
    def _wait_keypress(self, opcode):
        """wait for a key press and store its value in Vx, this is the only instruction that blocks"""
        x = (opcode & 0x0F00) >> 8
        try:
            self.regs.v_regs[x] = self.keypad.wait_for_keypress()
        except KeyWaitCancelled:
            self.regs.pc -= 0x2     # stay on the same instruction, a resumed machine waits again
            raise
        return locals()

    @asm("mem_addr: 0x{mem_addr:04x}    instruction: LD DT, V{x:X}")
    def _set_dt_vx(self, opcode):
        """set DT (delay timer) = Vx"""
        x = (opcode & 0x0F00) >> 8
        self.regs.dt = self.regs.v_regs[x]
        return locals()

    @asm("mem_addr: 0x{mem_addr:04x}    instruction: LD ST, V{register:X}")
    def _set_st(self, opcode):
        """set ST = Vx"""
        register = (opcode & 0x0F00) >> 8
        self.regs.st = self.regs.v_regs[register]
        return locals()

    @asm("mem_addr: 0x{mem_addr:04x}    instruction: ADD I, V{register:X}")
    def _add_to_idx(self, opcode):
        """set I = I + Vx"""
        register = (opcode & 0x0F00) >> 8
        self.regs.idx = (self.regs.idx + self.regs.v_regs[register]) & 0xFFFF
        return locals()

    @asm("mem_addr: 0x{mem_addr:04x}    instruction: LD F, V{register:X}")
    def _select_char(self, opcode):
        """set I to location of sprite for digit Vx"""
        register = (opcode & 0x0F00) >> 8
        self.regs.idx = FONTS_ADDRESS + self.regs.v_regs[register] * SPRITE_HEIGHT
        return locals()

    @asm("mem_addr: 0x{mem_addr:04x}    instruction: LD B, V{x:X}")
    def _bcd_repr(self, opcode):
        """store the hundreds digit of Vx in memory at I, the tens digit at I+1, the ones digit at I+2"""
        x = (opcode & 0x0F00) >> 8
        value = self.regs.v_regs[x]
        hundreds, tens, ones = value // 100, value // 10 % 10, value % 10
        self.mem.check_range(self.regs.idx, 3, write=True)
        self.mem[self.regs.idx] = hundreds
        self.mem[self.regs.idx + 1] = tens
        self.mem[self.regs.idx + 2] = ones
        return locals()

    @asm("mem_addr: 0x{mem_addr:04x}    instruction: LD [I], V{x:X}")
    def _store_vregs(self, opcode):
        """store registers V0 through Vx (included) in memory starting at location I, I is left untouched"""
        x = (opcode & 0x0F00) >> 8
        self.mem.check_range(self.regs.idx, x + 1, write=True)
        for i in range(x + 1):
            self.mem[self.regs.idx + i] = self.regs.v_regs[i]
        return locals()

    @asm("mem_addr: 0x{mem_addr:04x}    instruction: LD V{x:X}, [I]")
    def _load_vregs(self, opcode):
        """read registers V0 through Vx (included) from memory starting at location I, I is left untouched"""
        x = (opcode & 0x0F00) >> 8
        self.mem.check_range(self.regs.idx, x + 1)
        for i in range(x + 1):
            self.regs.v_regs[i] = self.mem[self.regs.idx + i]
        return locals()

    # ********** EXECUTION
    def _goto_next_instruction(self):
        self.regs.pc = (self.regs.pc + 0x2) & 0xFFFF

    def decode(self, opcode):
        """return the first level handler for the opcode, keyed on its top nibble"""
        return self.instructions[(opcode & 0xF000) >> 12]

    def execute(self, opcode):
        """execute an already fetched opcode, PC must already point to the following instruction"""
        self.decode(opcode)(opcode)

    def fetch(self):
        """fetch the opcode at PC (each instruction is two bytes long) and move PC past it"""
        opcode = self.mem.read16(self.regs.pc)
        self._goto_next_instruction()
        return opcode

    def cycle(self):
        """emulate one machine cycle: fetch, decode and execute a single opcode"""
        opcode = self.fetch()
        self.execute(opcode)
        return opcode

    def tick_timers(self):
        """called by the host at 60Hz, delay/sound timers count down to zero"""
        if self.regs.dt > 0:
            self.regs.dt -= 1
        if self.regs.st > 0:
            self.regs.st -= 1
