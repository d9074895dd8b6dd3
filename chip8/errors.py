class Chip8Error(Exception):
    """base class of every error the interpreter reports to its driver"""


class OutOfBoundsAccess(Chip8Error):
    pass


class StackOverflow(Chip8Error):
    pass


class StackUnderflow(Chip8Error):
    pass


class CapacityExceeded(Chip8Error):
    pass


class KeyWaitCancelled(Chip8Error):
    """raised out of the blocking key wait (Fx0A) when the host shuts down"""
