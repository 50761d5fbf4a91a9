"""
Text Fitting - Greedy word wrapping and descending font-size search.

wrap_text breaks a title into at most max_lines lines that fit max_width,
marking a line-limited wrap with an ellipsis. fit_title walks font sizes
from large to small and keeps the first one whose wrap fits, falling back
to the minimum size when nothing does. Both only call surface.measure()
and surface.set_font(); neither draws.
"""

from dataclasses import dataclass
from typing import List, Optional, Tuple

from .surface import FontSpec, RenderSurface

ELLIPSIS = "…"


@dataclass(frozen=True)
class FitResult:
    font_size: int
    lines: Tuple[str, ...]


def truncate_words(text: str, max_words: Optional[int]) -> str:
    """Keep the first max_words words, adding an ellipsis if any were dropped."""
    words = text.split()
    if not max_words or len(words) <= max_words:
        return text
    return " ".join(words[:max_words]) + ELLIPSIS


def wrap_text(
    surface: RenderSurface,
    text: str,
    max_width: float,
    max_lines: int,
) -> List[str]:
    """
    Wrap text into at most max_lines lines using the surface's current font.

    When the wrap hits max_lines, the last line is shortened word by word
    until it fits with an ellipsis, and always ends with one. A final line
    that is a single word too wide for max_width keeps its overflow: there
    is no character-level truncation.
    """
    if max_lines <= 0:
        return []

    lines: List[str] = []
    line = ""

    for word in text.split():
        candidate = f"{line} {word}" if line else word
        if surface.measure(candidate) <= max_width:
            line = candidate
            continue

        if line:
            lines.append(line)
        line = word
        if len(lines) == max_lines - 1:
            # Out of lines: commit and drop the remaining words
            lines.append(line)
            line = ""
            break

    if line and len(lines) < max_lines:
        lines.append(line)
    del lines[max_lines:]

    if len(lines) == max_lines:
        last = lines[-1]
        while surface.measure(last + ELLIPSIS) > max_width and " " in last:
            last = last.rsplit(" ", 1)[0]
        if not last.endswith(ELLIPSIS):
            last += ELLIPSIS
        lines[-1] = last

    return lines


def candidate_sizes(max_size: int, min_size: int, step: int = 2) -> List[int]:
    """Sizes tried by fit_title, largest first; always ends at min_size."""
    step = max(int(step), 1)
    if max_size <= min_size:
        return [min_size]
    sizes = list(range(max_size, min_size, -step))
    sizes.append(min_size)
    return sizes


def fit_title(
    surface: RenderSurface,
    text: str,
    max_width: float,
    max_lines: int,
    max_size: int,
    min_size: int,
    step: int = 2,
    font_family: str = "Arial, sans-serif",
    weight: int = 900,
    max_words: Optional[int] = None,
) -> FitResult:
    """
    Find the largest font size whose wrap of text fits the box.

    The text is first cut to max_words words. A size is accepted when every
    wrapped line measures <= max_width and there are at most max_lines
    lines. If no size fits, the wrap at min_size is returned anyway.
    Leaves the surface font set to the returned size.
    """
    text = truncate_words(text, max_words)

    size = min_size
    lines: List[str] = []
    for size in candidate_sizes(max_size, min_size, step):
        surface.set_font(FontSpec(font_family, size, weight))
        lines = wrap_text(surface, text, max_width, max_lines)
        if len(lines) <= max_lines and all(surface.measure(l) <= max_width for l in lines):
            break

    return FitResult(font_size=size, lines=tuple(lines))
