import os
os.environ["PYGAME_HIDE_SUPPORT_PROMPT"] = "no welcome message"   # this env var disable pygame's welcome message when imported
import pygame

from chip8.screen import SCREEN_WIDTH, SCREEN_HEIGHT

SCALE = 15
BLUE = pygame.Color(80,69,155,255)
LIGHT_BLUE = pygame.Color(136,126,203,255)


# ******************** I/O SECTION
class Screen:
    """pygame window showing a framebuffer, it's only a reader of the emulated machine"""
    def __init__(self, framebuffer, s=SCALE, bg_color=BLUE, fg_color=LIGHT_BLUE):
        self.framebuffer = framebuffer
        self.scale = s
        self.background = bg_color
        self.foreground = fg_color
        self.surface = pygame.display.set_mode(
            (SCREEN_WIDTH * self.scale, SCREEN_HEIGHT * self.scale),
        )
        self.surface.fill(self.background)

    def render(self):
        """paint every ON pixel of the framebuffer, the change is visible after refresh()"""
        self.surface.fill(self.background)
        for y in range(self.framebuffer.height):
            for x in range(self.framebuffer.width):
                if self.framebuffer.is_set(x, y):
                    pygame.draw.rect(
                        self.surface,
                        self.foreground,
                        (x * self.scale, y * self.scale, self.scale, self.scale)
                    )

    @staticmethod
    def refresh():
        pygame.display.flip()
