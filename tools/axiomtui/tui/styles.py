"""
Colours and text styles for the TUI.

This module defines every colour the screen uses and the mapping from
those colours onto curses colour pairs.

Purpose:
    Series colours must be stable across refreshes (the same group keeps
    the same colour), and the splash pulse walks a fixed gradient. Both
    are plain data here; curses only gets involved when a frame is
    painted.

Design Decisions:
    - Colours are described by an xterm-256 index plus a basic (0-7)
      fallback for terminals that report fewer colours
    - Hex colours are mapped to the nearest xterm-256 entry instead of
      redefining terminal colours, which most terminals refuse
    - Colour pairs are allocated lazily, on first use
"""

from dataclasses import dataclass
from typing import Dict, Optional, Tuple

# Basic curses colour numbers, duplicated here so this module can be
# imported (and tested) without initializing curses
BLACK, RED, GREEN, YELLOW, BLUE, MAGENTA, CYAN, WHITE = range(8)

# Levels of the 6x6x6 colour cube in the xterm-256 palette
_CUBE_LEVELS = (0, 95, 135, 175, 215, 255)


@dataclass(frozen=True)
class Color:
    """
    A terminal colour.

    Attributes:
        name: Human-readable name (used in tests and logs).
        index: xterm-256 colour index.
        basic: Closest of the 8 basic colours.
    """
    name: str
    index: int
    basic: int

    @classmethod
    def from_hex(cls, name: str, hex_value: str, basic: int) -> "Color":
        return cls(name, nearest_xterm256(hex_value), basic)


def _hex_to_rgb(hex_value: str) -> Tuple[int, int, int]:
    value = hex_value.lstrip("#")
    if len(value) != 6:
        raise ValueError(f"expected #rrggbb, got {hex_value!r}")
    return int(value[0:2], 16), int(value[2:4], 16), int(value[4:6], 16)


def nearest_xterm256(hex_value: str) -> int:
    """
    Map a #rrggbb colour to the closest xterm-256 palette index.

    Compares the nearest colour-cube entry with the nearest grayscale
    ramp entry and returns whichever is closer.

    Example:
        >>> nearest_xterm256("#5f0087")
        54
    """
    r, g, b = _hex_to_rgb(hex_value)

    def nearest_level(c: int) -> int:
        return min(range(6), key=lambda i: abs(_CUBE_LEVELS[i] - c))

    ri, gi, bi = nearest_level(r), nearest_level(g), nearest_level(b)
    cube = (_CUBE_LEVELS[ri], _CUBE_LEVELS[gi], _CUBE_LEVELS[bi])
    cube_index = 16 + 36 * ri + 6 * gi + bi

    # Grayscale ramp: 232..255 -> 8, 18, ..., 238
    avg = (r + g + b) // 3
    gray_i = min(23, max(0, round((avg - 8) / 10)))
    gray_level = 8 + 10 * gray_i
    gray_index = 232 + gray_i

    def dist(c: Tuple[int, int, int]) -> int:
        return (c[0] - r) ** 2 + (c[1] - g) ** 2 + (c[2] - b) ** 2

    if dist((gray_level,) * 3) < dist(cube):
        return gray_index
    return cube_index


# Series palette. A group's colour is PALETTE[fnv1a32(group) % len(PALETTE)],
# so the order here is part of the colour assignment and must not change.
PALETTE = (
    Color("blue", BLUE, BLUE),
    Color("magenta", MAGENTA, MAGENTA),
    Color("cyan", CYAN, CYAN),
    Color("green", GREEN, GREEN),
    Color("yellow", YELLOW, YELLOW),
    Color("red", RED, RED),
    Color.from_hex("aliceblue", "#f0f8ff", WHITE),
    Color.from_hex("cornsilk", "#fff8dc", WHITE),
    Color.from_hex("crimson", "#dc143c", RED),
    Color.from_hex("darkviolet", "#9400d3", MAGENTA),
    Color.from_hex("deeppink", "#ff1493", MAGENTA),
    Color.from_hex("gold", "#ffd700", YELLOW),
    Color.from_hex("indigo", "#4b0082", BLUE),
    Color.from_hex("lavender", "#e6e6fa", WHITE),
    Color.from_hex("lightcoral", "#f08080", RED),
    Color.from_hex("lightsalmon", "#ffa07a", YELLOW),
)

# Series that aren't the highlighted group are drawn in this colour
DIMMED = Color.from_hex("slategray", "#708090", WHITE)

# Splash gradient, walked from index 9 down to 0 and around again
PULSE_STEP_COLORS = (
    "#432155",
    "#4e2667",
    "#5f2d84",
    "#7938b2",
    "#8e4ec6",
    "#9d5bd2",
    "#8e4ec6",
    "#7938b2",
    "#5f2d84",
    "#4e2667",
)
PULSE_COLORS = tuple(
    Color.from_hex(f"pulse{i}", hex_value, MAGENTA)
    for i, hex_value in enumerate(PULSE_STEP_COLORS)
)

BORDER = Color("border", 69, BLUE)
SELECTED_FG = Color("selected-fg", 229, YELLOW)
SELECTED_BG = Color("selected-bg", 57, BLUE)
MUTED = Color("muted", 244, WHITE)
ERROR = Color("error", 203, RED)


@dataclass(frozen=True)
class Style:
    """Foreground/background colours plus text attributes for a segment."""
    fg: Optional[Color] = None
    bg: Optional[Color] = None
    bold: bool = False
    reverse: bool = False


PLAIN = Style()
HEADER = Style(bold=True)
SELECTED = Style(fg=SELECTED_FG, bg=SELECTED_BG)
CURSOR = Style(reverse=True)
PLACEHOLDER = Style(fg=MUTED)
ERROR_TEXT = Style(fg=ERROR, bold=True)


class ColorPairs:
    """
    Lazily allocate curses colour pairs for Styles.

    curses identifies a (foreground, background) combination by a numbered
    pair that has to be registered before use. This class hands out pair
    numbers on demand and caches them.

    Attributes:
        enabled: False when the terminal has no colour support.
        full: True when the terminal has at least 256 colours.
        default_colors: True when the terminal accepted use_default_colors(),
                        so -1 can stand for its own foreground or background.
    """

    def __init__(self, curses_module) -> None:
        self._curses = curses_module
        self._pairs: Dict[Tuple[int, int], int] = {}
        self.enabled = False
        self.full = False
        self.default_colors = False

    def start(self) -> None:
        """Initialize colour support. Call once, after curses.initscr()."""
        curses = self._curses
        if not curses.has_colors():
            return
        curses.start_color()
        try:
            curses.use_default_colors()
            self.default_colors = True
        except curses.error:
            # Pair colour -1 is only valid after use_default_colors()
            self.default_colors = False
        self.enabled = True
        self.full = curses.COLORS >= 256

    def _color_number(self, color: Optional[Color], fallback: int) -> int:
        if color is None:
            return -1 if self.default_colors else fallback
        return color.index if self.full else color.basic

    def attr(self, style: Style) -> int:
        """Return the curses attribute value for a style."""
        curses = self._curses
        value = curses.A_NORMAL
        if style.bold:
            value |= curses.A_BOLD
        if style.reverse:
            value |= curses.A_REVERSE

        if not self.enabled or (style.fg is None and style.bg is None):
            return value

        key = (self._color_number(style.fg, WHITE), self._color_number(style.bg, BLACK))
        pair = self._pairs.get(key)
        if pair is None:
            pair = len(self._pairs) + 1
            if pair >= curses.COLOR_PAIRS:
                # Out of pairs - render uncoloured rather than fail
                return value
            curses.init_pair(pair, key[0], key[1])
            self._pairs[key] = pair
        return value | curses.color_pair(pair)
