"""Background themes keyed off the current weather condition."""
from dataclasses import dataclass
from typing import Dict, Tuple

RGB = Tuple[int, int, int]


@dataclass(frozen=True)
class Theme:
    """Background/foreground colour pairing for the widget."""
    name: str
    background: RGB
    foreground: RGB

    @property
    def background_hex(self) -> str:
        return "#{:02X}{:02X}{:02X}".format(*self.background)

    @property
    def foreground_hex(self) -> str:
        return "#{:02X}{:02X}{:02X}".format(*self.foreground)


DEFAULT_THEME = Theme("default", (255, 255, 255), (43, 43, 43))

THEMES: Dict[str, Theme] = {
    "rain": Theme("rain", (115, 208, 231), (53, 53, 53)),
    "clouds": Theme("clouds", (114, 114, 114), (243, 243, 243)),
    "clear": Theme("clear", (255, 255, 255), (53, 53, 53)),
}

# Checked in order; the first keyword found in the description wins
THEME_KEYWORDS = ("rain", "clouds", "clear")


def select_theme(description: str, current: Theme = DEFAULT_THEME) -> Theme:
    """
    Pick a theme from a condition description.

    Args:
        description: Weather condition text (e.g., "light rain")
        current: Theme to keep when no keyword matches

    Returns:
        Theme: Matching theme, or ``current`` unchanged
    """
    text = description.lower()
    for keyword in THEME_KEYWORDS:
        if keyword in text:
            return THEMES[keyword]
    return current
