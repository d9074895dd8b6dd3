import logging
import threading
from collections.abc import Mapping

from chip8.errors import KeyWaitCancelled, OutOfBoundsAccess

logger = logging.getLogger(__name__)

TOTAL_KEYS = 16
UNMAPPED_KEY = None     # returned by Keypad.map() for host keys with no CHIP-8 counterpart


class Keypad:
    """
    state of the 16 keys hex keypad

    the host feeds raw key codes through press()/release(), while the CPU
    only ever sees logical indexes 0x0-0xF, the only blocking call is
    wait_for_keypress() which backs the Fx0A instruction
    """
    def __init__(self, mapping=None):
        self.mapping = {}
        self.down = [False] * TOTAL_KEYS
        self._cond = threading.Condition()
        self._waiting = False
        self._cancelled = False
        self._last_pressed = UNMAPPED_KEY
        if mapping is not None:
            self.set_mapping(mapping)

    def __str__(self):
        return f"Keypad(pressed={[f'0x{k:x}' for k in self.pressed()]})"

    @staticmethod
    def _check(index):
        if not 0 <= index < TOTAL_KEYS:
            raise OutOfBoundsAccess(f"Key 0x{index:x} does not exist on the CHIP-8 keypad")

    def set_mapping(self, table):
        """
        install the raw code -> logical index table, it can be either a dict
        or a sequence of 16 raw codes where the position is the logical index
        """
        if not isinstance(table, Mapping):
            table = {raw: index for index, raw in enumerate(table)}
        for raw, index in table.items():
            if not 0 <= index < TOTAL_KEYS:
                raise ValueError(f"Raw key {raw!r} is mapped to 0x{index:x}, outside of the keypad range")
        self.mapping = dict(table)

    def map(self, raw_code):
        return self.mapping.get(raw_code, UNMAPPED_KEY)

    def key_down(self, index):
        self._check(index)
        with self._cond:
            self.down[index] = True
            if self._waiting:
                self._last_pressed = index
                self._cond.notify_all()

    def key_up(self, index):
        self._check(index)
        self.down[index] = False

    def is_down(self, index):
        self._check(index)
        return self.down[index]

    def pressed(self):
        return [k for k in range(TOTAL_KEYS) if self.down[k]]

    def press(self, raw_code):
        """register a host key-down event, events which don't map to a key are ignored"""
        index = self.map(raw_code)
        if index is not UNMAPPED_KEY:
            self.key_down(index)
        return index

    def release(self, raw_code):
        """register a host key-up event, events which don't map to a key are ignored"""
        index = self.map(raw_code)
        if index is not UNMAPPED_KEY:
            self.key_up(index)
        return index

    def wait_for_keypress(self, timeout=None):
        """
        block until a key goes down and return its logical index

        only key-down events happening after the call are taken into account,
        raise KeyWaitCancelled when the host calls cancel_wait() or when the
        optional timeout (in seconds) expires
        """
        with self._cond:
            self._waiting = True
            self._last_pressed = UNMAPPED_KEY
            try:
                received = self._cond.wait_for(
                    lambda: self._cancelled or self._last_pressed is not UNMAPPED_KEY,
                    timeout,
                )
                if self._cancelled:
                    raise KeyWaitCancelled("The wait for a key press has been cancelled")
                if not received:
                    raise KeyWaitCancelled(f"No key has been pressed within {timeout} seconds")
                logger.debug("Key 0x%x pressed, resuming execution", self._last_pressed)
                return self._last_pressed
            finally:
                self._waiting = False

    @property
    def waiting(self):
        return self._waiting

    def cancel_wait(self):
        """wake up the CPU if it's blocked on Fx0A, every later wait fails straight away"""
        with self._cond:
            self._cancelled = True
            self._cond.notify_all()

    def reset(self):
        with self._cond:
            self.down = [False] * TOTAL_KEYS
            self._cancelled = False
            self._last_pressed = UNMAPPED_KEY
