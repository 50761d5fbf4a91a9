"""
Compositor - Lays out one thumbnail on a render surface.

Layers, bottom to top:
  1. Background (generated gradient + texture, or a video frame)
  2. Title block, auto-fitted and vertically centered, left-aligned at padding
  3. Badge pill in one of four corners (only when the item has a badge)
  4. Footer line near the bottom edge (item footer or template default)
"""

from dataclasses import dataclass
from typing import Optional, Union

import numpy as np
from PIL import Image

from .background import draw_background
from .errors import InputError
from .surface import FontSpec, RenderSurface, Shadow
from .template import BadgeConfig, Item, Template, resolve_template
from .text_fit import FitResult, fit_title

TITLE_WEIGHT = 900
BADGE_WEIGHT = 900
FOOTER_WEIGHT = 700

# Approximates the cap-height offset so the centered block sits on its baselines
BASELINE_FACTOR = 0.84


@dataclass(frozen=True)
class BadgeBox:
    text: str
    x: float
    y: float
    width: float
    height: float
    radius: float


@dataclass(frozen=True)
class ComposedLayout:
    fit: FitResult
    first_baseline: float
    line_height: int
    badge: Optional[BadgeBox]
    footer_text: str


def resolve_badge_box(
    text: str,
    text_width: float,
    config: BadgeConfig,
    canvas_width: int,
    canvas_height: int,
) -> BadgeBox:
    """Size and place the badge pill; unknown positions resolve to top-left."""
    width = text_width + config.padding_x * 2
    height = config.font_size + config.padding_y * 2
    margin = config.margin

    x, y = margin, margin
    if config.position == "top-right":
        x = canvas_width - margin - width
    elif config.position == "bottom-left":
        y = canvas_height - margin - height
    elif config.position == "bottom-right":
        x = canvas_width - margin - width
        y = canvas_height - margin - height

    radius = min(config.radius, width / 2, height / 2)
    return BadgeBox(text=text, x=x, y=y, width=width, height=height, radius=radius)


def compose_thumbnail(
    surface: RenderSurface,
    item: Item,
    template: Union[Template, dict],
    rng: Optional[np.random.Generator] = None,
    frame: Optional[Image.Image] = None,
) -> ComposedLayout:
    """
    Draw a complete thumbnail for item onto surface.

    template may be a resolved Template or a raw descriptor dict.
    Raises InputError if the item has no title; callers are expected to
    filter such rows out first.
    """
    if not item.title or not item.title.strip():
        raise InputError(f"Item {item.id} has an empty title")

    template = resolve_template(template)
    if rng is None:
        rng = np.random.default_rng()

    draw_background(surface, template, rng, frame)
    fit, first_baseline, line_height = _draw_title(surface, item.title, template)
    badge = _draw_badge(surface, item.badge, template) if item.badge else None
    footer_text = _draw_footer(surface, item.footer or template.defaults.footer, template)

    return ComposedLayout(
        fit=fit,
        first_baseline=first_baseline,
        line_height=line_height,
        badge=badge,
        footer_text=footer_text,
    )


# ── Layers ───────────────────────────────────────────────────────────

def _draw_title(surface: RenderSurface, title: str, template: Template):
    typography = template.typography
    effects = template.effects
    padding = template.layout.padding

    fit = fit_title(
        surface,
        title,
        max_width=surface.width - padding * 2,
        max_lines=typography.max_lines,
        max_size=typography.title_max_size,
        min_size=typography.title_min_size,
        font_family=typography.font_family,
        weight=TITLE_WEIGHT,
        max_words=typography.visible_words_max,
    )
    surface.set_font(FontSpec(typography.font_family, fit.font_size, TITLE_WEIGHT))

    line_height = int(round(fit.font_size * typography.line_height_ratio))
    block_height = len(fit.lines) * line_height
    first_baseline = (surface.height - block_height) / 2 + fit.font_size * BASELINE_FACTOR

    if effects.shadow:
        surface.set_shadow(Shadow(
            color=effects.shadow_color,
            blur=effects.shadow_blur,
            offset_x=effects.shadow_offset_x,
            offset_y=effects.shadow_offset_y,
        ))

    for i, line in enumerate(fit.lines):
        y = first_baseline + i * line_height
        surface.stroke_text(line, padding, y, template.colors.title_outline, effects.outline_width)
        surface.fill_text(line, padding, y, template.colors.title)

    surface.set_shadow(None)
    return fit, first_baseline, line_height


def _draw_badge(surface: RenderSurface, badge: str, template: Template) -> BadgeBox:
    config = template.badge
    text = badge.upper()

    surface.set_font(FontSpec(config.font_family, config.font_size, BADGE_WEIGHT))
    box = resolve_badge_box(text, surface.measure(text), config, surface.width, surface.height)

    surface.fill_rounded_rect(box.x, box.y, box.width, box.height, box.radius, config.fill)
    surface.fill_text(text, box.x + config.padding_x, box.y + box.height / 2,
                      config.text_color, anchor="lm")
    return box


def _draw_footer(surface: RenderSurface, text: str, template: Template) -> str:
    if not text:
        return ""
    config = template.footer
    surface.set_font(FontSpec(config.font_family, config.font_size, FOOTER_WEIGHT))
    surface.fill_text(
        text,
        template.layout.padding,
        surface.height - config.margin_bottom,
        config.text_color,
        anchor="ld",
    )
    return text
