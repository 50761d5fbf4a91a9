"""
Render Surface - Canvas-like 2D drawing target used by the compositor.

RenderSurface is the small drawing contract the layout code talks to:
gradient fills, rounded rectangles, text measurement, text fill/stroke at
a baseline anchor, drop shadows and image blits. PillowSurface implements
it on top of a Pillow RGBA image, compositing every primitive on its own
layer so semi-transparent colors blend the way a browser canvas does.
"""

import math
import re
from dataclasses import dataclass
from io import BytesIO
from typing import Optional, Sequence, Tuple, Union

import numpy as np
from PIL import Image, ImageColor, ImageDraw, ImageFilter

from .fonts import get_font

# Thumbnail dimensions (YouTube standard)
THUMB_WIDTH = 1280
THUMB_HEIGHT = 720

Color = Union[str, Sequence[int]]

_RGBA_FUNC = re.compile(
    r"rgba?\(\s*([\d.]+)\s*,\s*([\d.]+)\s*,\s*([\d.]+)\s*(?:,\s*([\d.]+)\s*)?\)"
)


@dataclass(frozen=True)
class FontSpec:
    family: str
    size: int
    weight: int = 400


@dataclass(frozen=True)
class Shadow:
    color: str
    blur: float
    offset_x: float
    offset_y: float


def to_rgba(color: Color) -> Tuple[int, int, int, int]:
    """
    Convert a CSS-style color to an RGBA tuple.

    Accepts #rgb, #rrggbb, #rrggbbaa, named colors, rgb(r,g,b) and
    rgba(r,g,b,a) with a 0..1 alpha, or an (r, g, b[, a]) sequence.
    """
    if not isinstance(color, str):
        values = [int(c) for c in color]
        if len(values) == 3:
            values.append(255)
        return tuple(values[:4])

    value = color.strip().lower()
    match = _RGBA_FUNC.fullmatch(value)
    if match:
        r, g, b = (min(255, int(round(float(match.group(i))))) for i in (1, 2, 3))
        alpha = match.group(4)
        a = 255 if alpha is None else int(round(min(max(float(alpha), 0.0), 1.0) * 255))
        return (r, g, b, a)
    return ImageColor.getcolor(value, "RGBA")


class RenderSurface:
    """
    Abstract drawing target. One surface belongs to exactly one render.

    Coordinates are canvas pixels with the origin at the top-left corner.
    Text anchors use Pillow's two-letter codes ("ls" = left/baseline,
    "lm" = left/middle, "ld" = left/descender).
    """

    def __init__(self, width: int = THUMB_WIDTH, height: int = THUMB_HEIGHT):
        self.width = width
        self.height = height
        self.font_spec: Optional[FontSpec] = None

    def set_font(self, spec: FontSpec) -> None:
        raise NotImplementedError

    def measure(self, text: str) -> float:
        """Advance width of text in the current font."""
        raise NotImplementedError

    def fill_linear_gradient(self, start, end, stops) -> None:
        """Fill the whole canvas with a gradient along start -> end.

        stops is a sequence of (offset, color) pairs with offsets in 0..1.
        """
        raise NotImplementedError

    def fill_radial_gradient(self, center, radius: float, inner: Color, outer: Color) -> None:
        raise NotImplementedError

    def fill_rounded_rect(self, x: float, y: float, width: float, height: float,
                          radius: float, color: Color) -> None:
        raise NotImplementedError

    def fill_text(self, text: str, x: float, y: float, color: Color, anchor: str = "ls") -> None:
        raise NotImplementedError

    def stroke_text(self, text: str, x: float, y: float, color: Color,
                    line_width: float, anchor: str = "ls") -> None:
        raise NotImplementedError

    def set_shadow(self, shadow: Optional[Shadow]) -> None:
        raise NotImplementedError

    def blit(self, image: Image.Image, x: int = 0, y: int = 0) -> None:
        raise NotImplementedError

    def encode_png(self) -> bytes:
        raise NotImplementedError


class PillowSurface(RenderSurface):
    """RenderSurface backed by a Pillow RGBA image."""

    def __init__(self, width: int = THUMB_WIDTH, height: int = THUMB_HEIGHT):
        super().__init__(width, height)
        self.image = Image.new("RGBA", (width, height), (0, 0, 0, 255))
        self._font = None
        self._shadow: Optional[Shadow] = None

    # ── Fonts & metrics ───────────────────────────────────────────────

    def set_font(self, spec: FontSpec) -> None:
        self.font_spec = spec
        self._font = get_font(spec)

    def measure(self, text: str) -> float:
        if not text:
            return 0.0
        return float(self._font.getlength(text))

    # ── Fills ─────────────────────────────────────────────────────────

    def fill_linear_gradient(self, start, end, stops) -> None:
        (x0, y0), (x1, y1) = start, end
        dx, dy = x1 - x0, y1 - y0
        length_sq = float(dx * dx + dy * dy) or 1.0

        ys, xs = np.ogrid[0:self.height, 0:self.width]
        t = np.clip(((xs + 0.5 - x0) * dx + (ys + 0.5 - y0) * dy) / length_sq, 0.0, 1.0)

        offsets = np.array([float(offset) for offset, _ in stops], dtype=np.float32)
        colors = np.array([to_rgba(color) for _, color in stops], dtype=np.float32)
        layer = np.empty((self.height, self.width, 4), dtype=np.float32)
        for channel in range(4):
            layer[:, :, channel] = np.interp(t, offsets, colors[:, channel])

        self.image.alpha_composite(Image.fromarray(np.round(layer).astype(np.uint8), "RGBA"))

    def fill_radial_gradient(self, center, radius: float, inner: Color, outer: Color) -> None:
        cx, cy = center
        if radius <= 0:
            return
        left = max(int(math.floor(cx - radius)), 0)
        top = max(int(math.floor(cy - radius)), 0)
        right = min(int(math.ceil(cx + radius)), self.width)
        bottom = min(int(math.ceil(cy + radius)), self.height)
        if left >= right or top >= bottom:
            return

        ys, xs = np.ogrid[top:bottom, left:right]
        dist = np.sqrt((xs + 0.5 - cx) ** 2 + (ys + 0.5 - cy) ** 2) / radius
        t = np.clip(dist, 0.0, 1.0)[:, :, None]

        inner_c = np.array(to_rgba(inner), dtype=np.float32)
        outer_c = np.array(to_rgba(outer), dtype=np.float32)
        patch = inner_c * (1.0 - t) + outer_c * t
        # Clip to the circle, like a filled arc
        patch[:, :, 3] = np.where(dist <= 1.0, patch[:, :, 3], 0.0)

        self.image.alpha_composite(
            Image.fromarray(np.round(patch).astype(np.uint8), "RGBA"), dest=(left, top)
        )

    def fill_rounded_rect(self, x: float, y: float, width: float, height: float,
                          radius: float, color: Color) -> None:
        r = max(0.0, min(radius, width / 2, height / 2))
        layer = Image.new("RGBA", self.image.size, (0, 0, 0, 0))
        box = (int(round(x)), int(round(y)), int(round(x + width)), int(round(y + height)))
        ImageDraw.Draw(layer).rounded_rectangle(box, radius=int(r), fill=to_rgba(color))
        self.image.alpha_composite(layer)

    # ── Text ──────────────────────────────────────────────────────────

    def fill_text(self, text: str, x: float, y: float, color: Color, anchor: str = "ls") -> None:
        self._draw_text(text, x, y, anchor, fill=to_rgba(color))

    def stroke_text(self, text: str, x: float, y: float, color: Color,
                    line_width: float, anchor: str = "ls") -> None:
        # Canvas strokes straddle the glyph outline; Pillow strokes outward only
        stroke = int(round(line_width / 2))
        if stroke <= 0:
            return
        rgba = to_rgba(color)
        self._draw_text(text, x, y, anchor, fill=rgba, stroke_width=stroke, stroke_fill=rgba)

    def set_shadow(self, shadow: Optional[Shadow]) -> None:
        self._shadow = shadow

    def _draw_text(self, text: str, x: float, y: float, anchor: str, **style) -> None:
        if not text:
            return
        if self._shadow is not None:
            self._draw_text_shadow(text, x, y, anchor, style)

        layer = Image.new("RGBA", self.image.size, (0, 0, 0, 0))
        ImageDraw.Draw(layer).text((x, y), text, font=self._font, anchor=anchor, **style)
        self.image.alpha_composite(layer)

    def _draw_text_shadow(self, text: str, x: float, y: float, anchor: str, style: dict) -> None:
        shadow = self._shadow
        rgba = to_rgba(shadow.color)
        shadow_style = dict(style, fill=rgba)
        if "stroke_fill" in shadow_style:
            shadow_style["stroke_fill"] = rgba

        layer = Image.new("RGBA", self.image.size, (0, 0, 0, 0))
        ImageDraw.Draw(layer).text(
            (x + shadow.offset_x, y + shadow.offset_y), text,
            font=self._font, anchor=anchor, **shadow_style,
        )
        if shadow.blur > 0:
            layer = layer.filter(ImageFilter.GaussianBlur(radius=shadow.blur / 2))
        self.image.alpha_composite(layer)

    # ── Images & output ───────────────────────────────────────────────

    def blit(self, image: Image.Image, x: int = 0, y: int = 0) -> None:
        self.image.alpha_composite(image.convert("RGBA"), dest=(int(x), int(y)))

    def to_image(self) -> Image.Image:
        """Flattened RGB copy of the canvas."""
        return self.image.convert("RGB")

    def encode_png(self) -> bytes:
        buf = BytesIO()
        self.to_image().save(buf, format="PNG")
        return buf.getvalue()
