"""Canvas abstraction for the widget - allows swapping image output with test backends."""
from abc import ABC, abstractmethod
from typing import List, Tuple

from PIL import Image, ImageDraw, ImageFont

RGB = Tuple[int, int, int]


class WidgetCanvas(ABC):
    """Abstract canvas interface for drawing the widget."""

    @property
    @abstractmethod
    def width(self) -> int:
        """Get canvas width in pixels."""
        pass

    @property
    @abstractmethod
    def height(self) -> int:
        """Get canvas height in pixels."""
        pass

    @abstractmethod
    def fill(self, color: RGB) -> None:
        """
        Fill the entire canvas with a colour, discarding anything drawn.

        Args:
            color: (r, g, b) components (0-255)
        """
        pass

    @abstractmethod
    def draw_text(self, x: int, y: int, text: str, color: RGB) -> None:
        """
        Draw one line of text with its top-left corner at (x, y).

        Args:
            x: X position
            y: Y position
            text: Text to draw
            color: (r, g, b) components (0-255)
        """
        pass


class FakeWidgetCanvas(WidgetCanvas):
    """
    Fake canvas implementation for testing - records what was drawn.
    """

    def __init__(self, width: int = 480, height: int = 320):
        self._width = width
        self._height = height
        self.background: RGB = (255, 255, 255)
        self.texts: List[Tuple[int, int, str, RGB]] = []

    @property
    def width(self) -> int:
        return self._width

    @property
    def height(self) -> int:
        return self._height

    def fill(self, color: RGB) -> None:
        self.background = color
        self.texts = []

    def draw_text(self, x: int, y: int, text: str, color: RGB) -> None:
        self.texts.append((x, y, text, color))

    def lines(self) -> List[str]:
        """Text drawn so far, top to bottom (for testing)."""
        return [text for _, _, text, _ in sorted(self.texts, key=lambda t: (t[1], t[0]))]


class PILWidgetCanvas(WidgetCanvas):
    """
    PIL-based canvas for rendering the widget to PNG images.
    """

    def __init__(self, width: int = 480, height: int = 320, scale: int = 1):
        """
        Initialize PIL canvas.

        Args:
            width: Canvas width in pixels
            height: Canvas height in pixels
            scale: Scale factor for the saved image
        """
        self._width = width
        self._height = height
        self._scale = scale
        self._font = ImageFont.load_default()
        self._image = Image.new("RGB", (width, height), (255, 255, 255))
        self._draw = ImageDraw.Draw(self._image)

    @property
    def width(self) -> int:
        return self._width

    @property
    def height(self) -> int:
        return self._height

    def fill(self, color: RGB) -> None:
        self._image = Image.new("RGB", (self._width, self._height), color)
        self._draw = ImageDraw.Draw(self._image)

    def draw_text(self, x: int, y: int, text: str, color: RGB) -> None:
        self._draw.text((x, y), text, fill=color, font=self._font)

    def save(self, filename: str) -> None:
        """
        Save canvas to a PNG file.

        Args:
            filename: Output filename (e.g., "widget.png")
        """
        if self._scale > 1:
            scaled = self._image.resize(
                (self._width * self._scale, self._height * self._scale),
                Image.Resampling.NEAREST
            )
            scaled.save(filename)
        else:
            self._image.save(filename)
