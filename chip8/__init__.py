from chip8.cpu import Chip8
from chip8.errors import (Chip8Error, OutOfBoundsAccess, StackOverflow, StackUnderflow,
                          CapacityExceeded, KeyWaitCancelled)
from chip8.keypad import Keypad, UNMAPPED_KEY
from chip8.memory import Memory, ROM_START_ADDRESS, MEMORY_SIZE
from chip8.registers import Registers
from chip8.screen import Framebuffer
from chip8.stack import Stack
