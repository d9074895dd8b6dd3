from chip8.errors import OutOfBoundsAccess

SCREEN_HEIGHT = 32
SCREEN_WIDTH = 64
SPRITE_WIDTH = 8


# ******************** FRAMEBUFFER SECTION
class Framebuffer:
    """monochrome 64x32 pixels grid, pixels are only ever toggled by drawing sprites"""
    def __init__(self, w=SCREEN_WIDTH, h=SCREEN_HEIGHT):
        self.w, self.h = w, h
        self.buffer = [0] * h * w

    @property
    def width(self):
        return self.w

    @property
    def height(self):
        return self.h

    def __str__(self):
        rows = []
        for y in range(self.h):
            rows.append("".join("#" if self.buffer[y * self.w + x] else "." for x in range(self.w)))
        return "\n".join(rows)

    def clear(self):
        self.buffer = [0] * self.h * self.w

    def is_set(self, x, y):
        """return True if pixel is ON, coordinates wrap around the screen edges"""
        return self.buffer[(y % self.h) * self.w + (x % self.w)] == 1

    def draw_sprite(self, x, y, sprite, rows):
        """
        XOR a sprite of `rows` bytes on the screen at (x, y) and return the collision flag

        sprites are XORed onto the existing screen and if this causes any pixel
        to be erased the collision flag is True, the only case when a pixel gets
        erased is when it was ON and is turned ON again
        """
        if rows > len(sprite):
            raise OutOfBoundsAccess(f"Tried to draw {rows} rows out of a {len(sprite)} bytes sprite")
        collision = False
        for i in range(rows):
            # increment y by one for each new sprite's byte read
            # this allows for wrap around of displayed sprites
            y_coordinate = (y + i) % self.h
            sprite_byte = sprite[i]
            for j in range(SPRITE_WIDTH):       # step through each byte's bits, MSB first
                bit = (sprite_byte >> (SPRITE_WIDTH - 1 - j)) & 0x1
                if not bit:
                    continue
                offset = y_coordinate * self.w + (x + j) % self.w
                if self.buffer[offset]:
                    collision = True
                self.buffer[offset] ^= 1
        return collision
