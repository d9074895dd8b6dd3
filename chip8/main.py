import argparse
import logging
import os
import sys
import threading
import time

os.environ["PYGAME_HIDE_SUPPORT_PROMPT"] = "no welcome message"   # this env var disable pygame's welcome message when imported
import pygame
from pygame.locals import (
    K_0, K_1, K_2, K_3,
    K_4, K_5, K_6, K_7,
    K_8, K_9, K_a, K_b,
    K_c, K_d, K_e, K_f,
)

from chip8.cpu import Chip8
from chip8.display import Screen, SCALE
from chip8.errors import Chip8Error, KeyWaitCancelled
from chip8.keypad import Keypad

logger = logging.getLogger("chip8")

# position in the list is the CHIP-8 key, value is the pygame key
KEY_MAPPINGS = [
    K_0, K_1, K_2, K_3,
    K_4, K_5, K_6, K_7,
    K_8, K_9, K_a, K_b,
    K_c, K_d, K_e, K_f,
]

DEBUG = True if int(os.getenv('DEBUG', 0)) >= 1 else False
CPU_SPEED = 500         # instructions per second
TIMER_FREQUENCY = 60    # delay/sound timers and screen refresh rate


# ******************** UTILITIES SECTION
def get_args(argv=None):
    parser = argparse.ArgumentParser(description="CHIP-8 interpreter")
    parser.add_argument("-f", "--file", required=True, help="input rom file")
    parser.add_argument("--speed", type=int, default=CPU_SPEED, help="instructions executed per second")
    parser.add_argument("--scale", type=int, default=SCALE, help="size in screen pixels of a CHIP-8 pixel")
    parser.add_argument("--seed", type=int, default=None, help="seed of the RND instruction random stream")
    return parser.parse_args(argv)


# ******************** CPU THREAD SECTION
class Runner(threading.Thread):
    """execute the CPU cycles at a fixed pace, away from the pygame event loop"""
    def __init__(self, chip, speed):
        super().__init__(name="chip8-cpu", daemon=True)
        self.chip = chip
        self.interval = 1.0 / speed
        self.stopped = threading.Event()
        self.error = None

    def run(self):
        try:
            while not self.stopped.is_set():
                self.chip.cycle()
                time.sleep(self.interval)
        except KeyWaitCancelled:
            logger.debug("CPU stopped while waiting for a key press")
        except Chip8Error as err:
            self.error = err
            logger.error("The emulator crashed: %s", err)

    def stop(self):
        self.stopped.set()
        self.chip.keypad.cancel_wait()     # unblock a pending Fx0A
        self.join()


# ******************** ENTRY POINT SECTION
def main(argv=None):
    logging.basicConfig(level=logging.DEBUG if DEBUG else logging.INFO, format="%(message)s")
    args = get_args(argv)
    # pygame initialization
    pygame.init()
    clock = pygame.time.Clock()
    pygame.display.set_caption(os.path.basename(args.file))
    # CPU
    chip = Chip8(keypad=Keypad(KEY_MAPPINGS), seed=args.seed)
    try:
        chip.load_rom(args.file)
    except (OSError, Chip8Error) as err:
        pygame.quit()
        sys.exit(f"Unable to load {args.file}: {err}")
    # IO
    screen = Screen(chip.screen, s=args.scale)
    runner = Runner(chip, args.speed)
    runner.start()
    # emulation loop
    run = True
    sound_on = False
    while run and runner.is_alive():
        clock.tick(TIMER_FREQUENCY)
        # process user input
        # loop throught the event queue
        for event in pygame.event.get():
            if event.type == pygame.KEYDOWN:
                if event.key == pygame.K_ESCAPE:
                    run = False
                else:
                    chip.keypad.press(event.key)
            elif event.type == pygame.KEYUP:
                chip.keypad.release(event.key)
            elif event.type == pygame.QUIT:
                run = False
        chip.tick_timers()
        # the tone itself is left out, only its start/stop is reported
        if (chip.regs.st > 0) != sound_on:
            sound_on = not sound_on
            logger.debug("Sound %s", "started" if sound_on else "stopped")
        # refresh screen if needed
        if chip.draw:
            chip.draw = False
            screen.render()
            screen.refresh()
    runner.stop()
    pygame.quit()
    if runner.error is not None:
        sys.exit(f"********** THE EMULATOR CRASHED WITH THE FOLLOWING STATE\n{chip}")


if __name__ == "__main__":
    main()
