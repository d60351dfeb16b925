"""
Screen composition primitives.

A frame is a list of lines and a line is a list of (text, Style)
segments. Views build frames; the runner paints them with curses.

Purpose:
    Keeping the screen as plain data means every view can be unit tested
    by comparing text, and the curses-specific code shrinks to a single
    paint function.

Design Decisions:
    - Every character is assumed to occupy one terminal cell; all glyphs
      the views emit (box drawing, braille spinner) are single-width
    - Helpers return new lists and never modify their inputs
"""

from typing import Iterable, List, Sequence, Tuple

from .styles import PLAIN, Style

Segment = Tuple[str, Style]
Line = List[Segment]


class Frame:
    """
    A rectangular-ish block of styled text.

    Attributes:
        lines: Styled lines, top to bottom.

    Example:
        >>> Frame.from_text("a\\nb").text()
        'a\\nb'
    """

    def __init__(self, lines: Iterable[Line] = ()) -> None:
        self.lines: List[Line] = [list(line) for line in lines]

    @classmethod
    def from_text(cls, text: str, style: Style = PLAIN) -> "Frame":
        return cls([[(row, style)] if row else [] for row in text.split("\n")])

    @property
    def height(self) -> int:
        return len(self.lines)

    @property
    def width(self) -> int:
        return max((line_width(line) for line in self.lines), default=0)

    def is_empty(self) -> bool:
        return not any(line_width(line) for line in self.lines)

    def text(self) -> str:
        """Return the frame as plain text, trailing spaces stripped."""
        return "\n".join(line_text(line).rstrip() for line in self.lines)

    def __repr__(self) -> str:
        return f"Frame({self.text()!r})"


def line_text(line: Sequence[Segment]) -> str:
    return "".join(text for text, _style in line)


def line_width(line: Sequence[Segment]) -> int:
    return sum(len(text) for text, _style in line)


def pad_line(line: Sequence[Segment], width: int) -> Line:
    """Right-pad a line with spaces to the given width."""
    missing = width - line_width(line)
    out = list(line)
    if missing > 0:
        out.append((" " * missing, PLAIN))
    return out


def clip_line(line: Sequence[Segment], width: int) -> Line:
    """Cut a line to at most width cells."""
    out: Line = []
    remaining = width
    for text, style in line:
        if remaining <= 0:
            break
        out.append((text[:remaining], style))
        remaining -= len(text)
    return out


def truncate(text: str, width: int) -> str:
    """Fit text into width cells, marking truncation with an ellipsis."""
    if width <= 0:
        return ""
    if len(text) <= width:
        return text
    if width == 1:
        return text[:1]
    return text[: width - 1] + "…"


def pad(frame: Frame, amount: int = 1) -> Frame:
    """
    Surround a frame with blank space on all four sides.

    Empty frames stay empty so that skipped sections don't leave gaps.
    """
    if frame.is_empty():
        return Frame()
    blank: Line = []
    margin = (" " * amount, PLAIN)
    body = [[margin] + list(line) for line in frame.lines]
    return Frame([blank] * amount + body + [blank] * amount)


def box(frame: Frame, width: int, height: int, style: Style = PLAIN) -> Frame:
    """
    Draw a single-line border around a frame.

    The content area is exactly width x height; content is padded or
    clipped to fit.
    """
    top: Line = [("┌" + "─" * width + "┐", style)]
    bottom: Line = [("└" + "─" * width + "┘", style)]
    body: List[Line] = []
    for i in range(height):
        content = frame.lines[i] if i < frame.height else []
        inner = pad_line(clip_line(content, width), width)
        body.append([("│", style)] + inner + [("│", style)])
    return Frame([top] + body + [bottom])


def join_horizontal(frames: Sequence[Frame]) -> Frame:
    """Place frames side by side, top-aligned."""
    frames = [f for f in frames if not f.is_empty()]
    if not frames:
        return Frame()
    height = max(f.height for f in frames)
    lines: List[Line] = []
    for row in range(height):
        line: Line = []
        for i, f in enumerate(frames):
            content = f.lines[row] if row < f.height else []
            # The last column doesn't need trailing padding
            if i < len(frames) - 1:
                content = pad_line(content, f.width)
            line.extend(content)
        lines.append(line)
    return Frame(lines)


def join_vertical(frames: Sequence[Frame]) -> Frame:
    """Stack frames top to bottom, skipping empty ones."""
    lines: List[Line] = []
    for f in frames:
        if f.is_empty():
            continue
        lines.extend(f.lines)
    return Frame(lines)
