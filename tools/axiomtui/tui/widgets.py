"""
Interactive widgets: text input, table and spinner.

Each widget holds its own small piece of state (cursor position, focus,
animation frame) and knows how to draw itself into a Frame. None of them
touch curses directly.

Purpose:
    The controller routes keys to whichever widget is focused. Keeping
    widget state separate from the controller's Model fields makes those
    key paths easy to test one widget at a time.
"""

from typing import List, Optional, Sequence

from .layout import Frame, Line, pad_line, truncate
from .styles import CURSOR, HEADER, PLACEHOLDER, PLAIN, SELECTED, Style

PLACEHOLDER_TEXT = "Enter an APL query..."


class TextBuffer:
    """
    Single-line text input with a cursor.

    Attributes:
        value: Current text.
        cursor: Insertion point, 0..len(value).
        focused: Whether keys go to this buffer.
        width: Display width in cells.

    Example:
        >>> buf = TextBuffer()
        >>> for key in "count()":
        ...     buf.handle_key(key)
        >>> buf.value
        'count()'
    """

    def __init__(self, value: str = "", width: int = 100, placeholder: str = PLACEHOLDER_TEXT):
        self.value = value
        self.cursor = len(value)
        self.focused = True
        self.width = width
        self.placeholder = placeholder

    def focus(self) -> None:
        self.focused = True

    def blur(self) -> None:
        self.focused = False

    def set_value(self, value: str) -> None:
        self.value = value
        self.cursor = len(value)

    def handle_key(self, key: str) -> bool:
        """
        Apply an editing key.

        Args:
            key: A key name ("backspace", "left", ...) or a single
                 printable character.

        Returns:
            bool: True if the key changed the buffer or cursor.
        """
        if not self.focused:
            return False

        if key == "backspace":
            if self.cursor == 0:
                return False
            self.value = self.value[: self.cursor - 1] + self.value[self.cursor:]
            self.cursor -= 1
            return True

        if key == "delete":
            if self.cursor >= len(self.value):
                return False
            self.value = self.value[: self.cursor] + self.value[self.cursor + 1:]
            return True

        if key == "left":
            if self.cursor == 0:
                return False
            self.cursor -= 1
            return True

        if key == "right":
            if self.cursor >= len(self.value):
                return False
            self.cursor += 1
            return True

        if key in ("home", "ctrl+a"):
            self.cursor = 0
            return True

        if key in ("end", "ctrl+e"):
            self.cursor = len(self.value)
            return True

        if key == "ctrl+u":
            # Delete everything before the cursor
            self.value = self.value[self.cursor:]
            self.cursor = 0
            return True

        if key == "ctrl+k":
            self.value = self.value[: self.cursor]
            return True

        if len(key) == 1 and key.isprintable():
            self.value = self.value[: self.cursor] + key + self.value[self.cursor:]
            self.cursor += 1
            return True

        return False

    def view(self) -> Frame:
        prompt: Line = [("> ", PLAIN)]
        room = max(1, self.width - 2)

        if not self.value:
            line = prompt
            if self.focused:
                line = line + [(" ", CURSOR)]
            line = line + [(truncate(self.placeholder, room - 1), PLACEHOLDER)]
            return Frame([line])

        # Scroll horizontally so the cursor stays visible
        start = max(0, self.cursor - room + 1)
        visible = self.value[start:start + room]
        if not self.focused:
            return Frame([prompt + [(visible, PLAIN)]])

        at = self.cursor - start
        before, under, after = visible[:at], visible[at:at + 1], visible[at + 1:]
        line = prompt + [(before, PLAIN), (under or " ", CURSOR), (after, PLAIN)]
        return Frame([line])


class Table:
    """
    Scrollable table with a row cursor.

    Attributes:
        data: TableData with columns and stringified rows.
        cursor: Index of the selected row.
        focused: Whether navigation keys move the cursor.
        height: Number of body rows shown at once.
        offset: Index of the first visible row.
    """

    def __init__(self, data, height: int = 20, focused: bool = False):
        self.data = data
        self.cursor = 0
        self.focused = focused
        self.height = max(1, height)
        self.offset = 0

    @property
    def rows(self) -> Sequence[Sequence[str]]:
        return self.data.rows

    def focus(self) -> None:
        self.focused = True

    def blur(self) -> None:
        self.focused = False

    def selected_row(self) -> Optional[Sequence[str]]:
        if not self.rows:
            return None
        return self.rows[self.cursor]

    def move_to(self, index: int) -> None:
        """Move the cursor, clamped to the rows, and keep it in view."""
        if not self.rows:
            self.cursor = 0
            self.offset = 0
            return
        self.cursor = max(0, min(index, len(self.rows) - 1))
        if self.cursor < self.offset:
            self.offset = self.cursor
        elif self.cursor >= self.offset + self.height:
            self.offset = self.cursor - self.height + 1

    def move_up(self, n: int = 1) -> None:
        self.move_to(self.cursor - n)

    def move_down(self, n: int = 1) -> None:
        self.move_to(self.cursor + n)

    def handle_key(self, key: str) -> bool:
        """Move the cursor for navigation keys. Returns True if handled."""
        if not self.focused:
            return False
        if key in ("up", "k"):
            self.move_up()
        elif key in ("down", "j"):
            self.move_down()
        elif key == "pgup":
            self.move_up(self.height)
        elif key == "pgdown":
            self.move_down(self.height)
        elif key in ("home", "g"):
            self.move_to(0)
        elif key in ("end", "G"):
            self.move_to(len(self.rows) - 1)
        else:
            return False
        return True

    def _render_row(self, cells: Sequence[str], style: Style) -> Line:
        parts: List[str] = []
        for i, column in enumerate(self.data.columns):
            cell = cells[i] if i < len(cells) else ""
            parts.append(" " + truncate(cell, column.width).ljust(column.width) + " ")
        return [("".join(parts), style)]

    def view(self, show_selection: bool = False) -> Frame:
        """
        Draw the header, a separator and the visible rows.

        Args:
            show_selection: Paint the cursor row in the selected style.
        """
        header = self._render_row([c.title for c in self.data.columns], HEADER)
        total_width = sum(c.width + 2 for c in self.data.columns)
        lines: List[Line] = [header, [("─" * total_width, PLAIN)]]

        visible = self.rows[self.offset:self.offset + self.height]
        for i, row in enumerate(visible, start=self.offset):
            style = SELECTED if show_selection and i == self.cursor else PLAIN
            lines.append(pad_line(self._render_row(row, style), total_width))

        return Frame(lines)


class Spinner:
    """
    Braille "dot" spinner.

    Attributes:
        frame: Index of the current glyph.
    """

    FRAMES = ("⣾ ", "⣽ ", "⣻ ", "⢿ ", "⡿ ", "⣟ ", "⣯ ", "⣷ ")
    # 10 frames per second
    INTERVAL = 0.1

    def __init__(self) -> None:
        self.frame = 0

    def tick(self) -> None:
        self.frame = (self.frame + 1) % len(self.FRAMES)

    def view(self) -> str:
        return self.FRAMES[self.frame]
