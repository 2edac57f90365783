# Copyright (c) 2025 Keshav
# Licensed under the GNU Affero General Public License v3.0
# See LICENSE file for details.
"""Terminal-friendly visualizations using Unicode characters.

These functions return plain or Rich-markup strings that render as
sparklines and ratio bars in the terminal via the Rich library.
"""

from __future__ import annotations

_BLOCKS = " ▁▂▃▄▅▆▇█"


def sparkline(values: list[float], width: int | None = None) -> str:
    """Render a sparkline using Unicode block characters.

    Each value maps to one of 9 block heights: \" ▁▂▃▄▅▆▇█\"
    If width is given and len(values) > width, values are downsampled.
    """
    if not values:
        return ""

    if width and len(values) > width:
        step = len(values) / width
        sampled = []
        for i in range(width):
            start = int(i * step)
            end = int((i + 1) * step)
            sampled.append(sum(values[start:end]) / (end - start))
        values = sampled

    min_v = min(values)
    max_v = max(values)
    range_v = max_v - min_v or 1

    return "".join(
        _BLOCKS[int((v - min_v) / range_v * 8)] for v in values
    )


def ratio_bar(ratio: float, threshold: float | None = None, width: int = 20) -> str:
    """Render a utilization ratio as a bar, red when it exceeds *threshold*.

    Ratios above 1.0 fill the bar completely.
    """
    clamped = min(max(ratio, 0.0), 1.0)
    filled = int(round(clamped * width))
    bar = "█" * filled + "░" * (width - filled)
    if threshold is None:
        color = "cyan"
    elif ratio > threshold:
        color = "red"
    elif ratio > threshold * 0.9:
        color = "yellow"
    else:
        color = "green"
    return f"[{color}]{bar}[/] {ratio:>5.2f}"
