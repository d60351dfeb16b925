"""
ASCII line charts for multiple series.

This module paints several series into one character grid using box
drawing glyphs, each series in its own colour, with a labelled Y axis
and a caption underneath.

Purpose:
    Each op of a query gets one chart with a line per group. The number
    of intervals rarely matches the chart width, so series are resampled
    to the plot width before drawing.

Design Decisions:
    - NaN marks a gap: the line stops before it and restarts after it
    - All series share one Y scale so lines are comparable
    - Later series are drawn over earlier ones where they cross
    - Y labels use zero decimal places
"""

import math
from typing import List, Optional, Sequence

from .layout import Frame, Line
from .styles import PLAIN, Color, Style

AXIS = "┤"
ORIGIN = "┼"


def resample(values: Sequence[float], width: int) -> List[float]:
    """
    Stretch or shrink a series to exactly width points.

    Points between two samples are linearly interpolated; a point next to
    a NaN sample is NaN.

    Example:
        >>> resample([0.0, 10.0], 3)
        [0.0, 5.0, 10.0]
    """
    n = len(values)
    if n == 0 or width <= 0:
        return []
    if n == 1:
        return [float(values[0])] * width
    if width == 1:
        return [float(values[0])]

    out = []
    for x in range(width):
        pos = x * (n - 1) / (width - 1)
        left = int(math.floor(pos))
        right = min(left + 1, n - 1)
        frac = pos - left
        a, b = values[left], values[right]
        if frac == 0:
            out.append(float(a))
        elif math.isnan(a) or math.isnan(b):
            out.append(math.nan)
        else:
            out.append(a + (b - a) * frac)
    return out


def _bounds(series: Sequence[Sequence[float]]):
    finite = [v for s in series for v in s if not math.isnan(v) and not math.isinf(v)]
    if not finite:
        return None
    return min(finite), max(finite)


def _format_label(value: float) -> str:
    text = f"{value:.0f}"
    # Avoid "-0"
    return "0" if text == "-0" else text


def plot_many(
    series: Sequence[Sequence[float]],
    colors: Sequence[Optional[Color]] = (),
    width: int = 50,
    height: int = 10,
    caption: str = "",
) -> Frame:
    """
    Draw series as a line chart.

    Args:
        series: One sequence of floats per line. NaN values and
                infinities are gaps.
        colors: Colour per series; missing entries draw uncoloured.
        width: Plot width in cells, excluding the Y axis.
        height: Plot height in rows.
        caption: Text centred below the plot.

    Returns:
        Frame: height rows of plot (plus a caption row when given).
    """
    height = max(2, height)
    width = max(2, width)
    # Infinite samples are drawn as gaps, like NaN
    sampled = [
        [v if math.isfinite(v) else math.nan for v in resample(s, width)]
        for s in series
    ]
    bounds = _bounds(sampled)

    lines: List[Line] = []
    if bounds is None:
        # Nothing to plot: keep the chart's footprint so layouts don't jump
        for row in range(height):
            text = "no data" if row == height // 2 else ""
            lines.append([(text.center(width + 2), PLAIN)])
    else:
        lo, hi = bounds
        span = hi - lo

        def to_row(value: float) -> int:
            # Row 0 is the bottom of the plot
            if span == 0:
                return height // 2
            return int(round((value - lo) / span * (height - 1)))

        grid: List[List[str]] = [[" "] * width for _ in range(height)]
        styles: List[List[Style]] = [[PLAIN] * width for _ in range(height)]

        def put(row: int, x: int, glyph: str, style: Style) -> None:
            r = height - 1 - row
            grid[r][x] = glyph
            styles[r][x] = style

        for idx, values in enumerate(sampled):
            color = colors[idx] if idx < len(colors) else None
            style = Style(fg=color)
            for x in range(len(values) - 1):
                v0, v1 = values[x], values[x + 1]
                if math.isnan(v0) and math.isnan(v1):
                    continue
                if math.isnan(v0):
                    put(to_row(v1), x, "╶", style)
                    continue
                if math.isnan(v1):
                    put(to_row(v0), x, "╴", style)
                    continue
                y0, y1 = to_row(v0), to_row(v1)
                if y0 == y1:
                    put(y0, x, "─", style)
                    continue
                if y0 > y1:
                    put(y1, x, "╰", style)
                    put(y0, x, "╮", style)
                else:
                    put(y1, x, "╭", style)
                    put(y0, x, "╯", style)
                for y in range(min(y0, y1) + 1, max(y0, y1)):
                    put(y, x, "│", style)

        labels = []
        for r in range(height):
            row = height - 1 - r
            value = lo + (span * row / (height - 1) if span else 0)
            labels.append(_format_label(value))
        label_width = max(len(label) for label in labels)

        for r in range(height):
            axis = ORIGIN if r == height - 1 else AXIS
            line: Line = [(labels[r].rjust(label_width) + " " + axis, PLAIN)]
            # Merge runs of equal style into single segments
            run_text, run_style = "", None
            for glyph, style in zip(grid[r], styles[r]):
                if style != run_style and run_text:
                    line.append((run_text, run_style))
                    run_text = ""
                run_text += glyph
                run_style = style
            if run_text:
                line.append((run_text, run_style))
            lines.append(line)

    if caption:
        plot_width = max(len("".join(t for t, _ in line)) for line in lines)
        lines.append([(caption.center(plot_width).rstrip(), PLAIN)])

    return Frame(lines)
