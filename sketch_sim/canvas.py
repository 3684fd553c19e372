"""
Drawing context handed to sketches
Renders drawing commands to a PIL Image instead of a display window
"""

from collections import namedtuple

from PIL import Image, ImageDraw
import numpy as np

DrawCommand = namedtuple('DrawCommand', ['name', 'args', 'color'])


def normalize_color(color):
    """Return an (r, g, b) tuple.

    A single number is a grey level, so background(0) means black.
    """
    if isinstance(color, bool):
        raise ValueError(f"Invalid color: {color!r}")
    if isinstance(color, (int, float)):
        color = (color, color, color)
    if not isinstance(color, (list, tuple)) or len(color) < 3:
        raise ValueError(f"Invalid color: {color!r}")

    rgb = []
    for channel in color[:3]:
        if isinstance(channel, bool) or not isinstance(channel, (int, float)):
            raise ValueError(f"Invalid color channel: {channel!r}")
        if not 0 <= channel <= 255:
            raise ValueError(f"Color channel out of range 0-255: {channel!r}")
        rgb.append(int(channel))
    return tuple(rgb)


class Canvas:
    def __init__(self, size):
        self.width, self.height = size
        self.bg_color = (0, 0, 0)
        self.fg_color = (255, 255, 255)
        self.image = Image.new('RGB', size, self.bg_color)
        self.draw = ImageDraw.Draw(self.image)
        self.commands = []

    def background(self, color):
        """Set the background color and clear to it"""
        self.bg_color = normalize_color(color)
        self.clear()
        self.commands.append(DrawCommand('background', (), self.bg_color))

    def clear(self):
        """Fill the whole canvas with the background color"""
        self.image = Image.new('RGB', (self.width, self.height), self.bg_color)
        self.draw = ImageDraw.Draw(self.image)

    def set_color(self, color):
        """Set the color used by subsequent shapes"""
        self.fg_color = normalize_color(color)

    def draw_circle(self, x, y, radius):
        """Draw a filled circle centered on (x, y)"""
        left = x - radius
        top = y - radius
        right = x + radius
        bottom = y + radius

        # Off-canvas shapes are clipped by PIL
        self.draw.ellipse([left, top, right, bottom], fill=self.fg_color)
        self.commands.append(DrawCommand('circle', (x, y, radius), self.fg_color))

    def begin_frame(self):
        """Forget commands issued during the previous frame"""
        self.commands = []

    def get_size(self):
        return (self.width, self.height)

    def get_image(self):
        """Get PIL Image for export"""
        return self.image

    def get_pixel(self, x, y):
        return self.image.getpixel((int(x), int(y)))

    def to_array(self):
        """Raster as a (height, width, 3) uint8 array"""
        return np.asarray(self.image, dtype=np.uint8)
