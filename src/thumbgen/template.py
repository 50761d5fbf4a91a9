"""
Template Model - Typed thumbnail templates resolved from JSON descriptors.

A template descriptor is a nested JSON object (colors, typography, layout,
effects, badge, footer, defaults). Every field is optional; resolve_template
turns a partial descriptor into a fully populated, immutable Template once,
at the start of a render, so layout code never has to chase defaults.
"""

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, List, Tuple

BADGE_POSITIONS = ("top-left", "top-right", "bottom-left", "bottom-right")


@dataclass(frozen=True)
class Item:
    """One normalized input row."""
    id: int
    title: str
    subtitle: str = ""
    badge: str = ""
    footer: str = ""


@dataclass(frozen=True)
class ColorsConfig:
    background_gradient: Tuple[str, str] = ("#111827", "#1d4ed8")
    title: str = "#ffffff"
    title_outline: str = "rgba(0,0,0,0.9)"


@dataclass(frozen=True)
class TypographyConfig:
    font_family: str = "Arial, sans-serif"
    title_max_size: int = 132
    title_min_size: int = 64
    line_height_ratio: float = 1.06
    max_lines: int = 3
    visible_words_max: int = 6


@dataclass(frozen=True)
class LayoutConfig:
    padding: float = 72


@dataclass(frozen=True)
class EffectsConfig:
    shadow: bool = False
    shadow_color: str = "rgba(0,0,0,0.45)"
    shadow_blur: float = 22
    shadow_offset_x: float = 0
    shadow_offset_y: float = 8
    texture_opacity: float = 0.09
    texture_steps: int = 280
    outline_width: float = 10


@dataclass(frozen=True)
class BadgeConfig:
    font_size: int = 42
    font_family: str = "Arial, sans-serif"
    padding_x: float = 22
    padding_y: float = 12
    margin: float = 72
    radius: float = 999
    fill: str = "#ef4444"
    text_color: str = "#ffffff"
    position: str = "top-left"


@dataclass(frozen=True)
class FooterConfig:
    font_size: int = 30
    font_family: str = "Arial, sans-serif"
    text_color: str = "rgba(255,255,255,0.95)"
    margin_bottom: float = 30


@dataclass(frozen=True)
class DefaultsConfig:
    footer: str = ""


@dataclass(frozen=True)
class Template:
    colors: ColorsConfig = field(default_factory=ColorsConfig)
    typography: TypographyConfig = field(default_factory=TypographyConfig)
    layout: LayoutConfig = field(default_factory=LayoutConfig)
    effects: EffectsConfig = field(default_factory=EffectsConfig)
    badge: BadgeConfig = field(default_factory=BadgeConfig)
    footer: FooterConfig = field(default_factory=FooterConfig)
    defaults: DefaultsConfig = field(default_factory=DefaultsConfig)


# ── Field resolution ─────────────────────────────────────────────────

def _section(raw: Any, key: str) -> dict:
    """Absent or malformed sections read as empty objects."""
    value = raw.get(key) if isinstance(raw, dict) else None
    return value if isinstance(value, dict) else {}


def _or(section: dict, key: str, default, cast: Callable = str):
    """Falsy values (missing, null, 0, "") fall back to the default."""
    value = section.get(key)
    if not value:
        return default
    try:
        return cast(value)
    except (TypeError, ValueError):
        return default


def _unless_missing(section: dict, key: str, default, cast: Callable = float):
    """Only missing/null values fall back; 0 is kept."""
    value = section.get(key)
    if value is None:
        return default
    try:
        return cast(value)
    except (TypeError, ValueError):
        return default


def _size(value) -> int:
    return int(round(float(value)))


def _gradient_stops(colors: dict) -> Tuple[str, str]:
    stops = colors.get("backgroundGradient")
    if isinstance(stops, str):
        stops = [stops]
    if not stops or not isinstance(stops, (list, tuple)) or not stops[0]:
        return ColorsConfig.background_gradient
    first = str(stops[0])
    second = str(stops[1]) if len(stops) > 1 and stops[1] else first
    return (first, second)


def resolve_template(raw: Any) -> Template:
    """
    Resolve a (possibly partial) template descriptor against the defaults.

    The descriptor is only read, never mutated. Accepts an already
    resolved Template and returns it unchanged.
    """
    if isinstance(raw, Template):
        return raw

    colors = _section(raw, "colors")
    typography = _section(raw, "typography")
    layout = _section(raw, "layout")
    effects = _section(raw, "effects")
    badge = _section(raw, "badge")
    footer = _section(raw, "footer")
    defaults = _section(raw, "defaults")

    family = _or(typography, "fontFamily", TypographyConfig.font_family)
    padding = _unless_missing(layout, "padding", LayoutConfig.padding)

    return Template(
        colors=ColorsConfig(
            background_gradient=_gradient_stops(colors),
            title=_or(colors, "title", ColorsConfig.title),
            title_outline=_or(colors, "titleOutline", ColorsConfig.title_outline),
        ),
        typography=TypographyConfig(
            font_family=family,
            title_max_size=_or(typography, "titleMaxSize", TypographyConfig.title_max_size, _size),
            title_min_size=_or(typography, "titleMinSize", TypographyConfig.title_min_size, _size),
            line_height_ratio=_or(typography, "lineHeightRatio", TypographyConfig.line_height_ratio, float),
            max_lines=_or(typography, "maxLines", TypographyConfig.max_lines, int),
            visible_words_max=_or(typography, "visibleWordsMax", TypographyConfig.visible_words_max, int),
        ),
        layout=LayoutConfig(padding=padding),
        effects=EffectsConfig(
            shadow=bool(effects.get("shadow")),
            shadow_color=_or(effects, "shadowColor", EffectsConfig.shadow_color),
            shadow_blur=_unless_missing(effects, "shadowBlur", EffectsConfig.shadow_blur),
            shadow_offset_x=_unless_missing(effects, "shadowOffsetX", EffectsConfig.shadow_offset_x),
            shadow_offset_y=_unless_missing(effects, "shadowOffsetY", EffectsConfig.shadow_offset_y),
            texture_opacity=_unless_missing(effects, "textureOpacity", EffectsConfig.texture_opacity),
            texture_steps=_unless_missing(effects, "textureSteps", EffectsConfig.texture_steps, int),
            outline_width=_unless_missing(effects, "outlineWidth", EffectsConfig.outline_width),
        ),
        badge=BadgeConfig(
            font_size=_or(badge, "fontSize", BadgeConfig.font_size, _size),
            font_family=_or(badge, "fontFamily", family),
            padding_x=_or(badge, "paddingX", BadgeConfig.padding_x, float),
            padding_y=_or(badge, "paddingY", BadgeConfig.padding_y, float),
            margin=_or(badge, "margin", padding, float),
            radius=_or(badge, "radius", BadgeConfig.radius, float),
            fill=_or(badge, "fill", BadgeConfig.fill),
            text_color=_or(badge, "textColor", BadgeConfig.text_color),
            position=_or(badge, "position", BadgeConfig.position),
        ),
        footer=FooterConfig(
            font_size=_or(footer, "fontSize", FooterConfig.font_size, _size),
            font_family=_or(footer, "fontFamily", family),
            text_color=_or(footer, "textColor", FooterConfig.text_color),
            margin_bottom=_or(footer, "marginBottom", FooterConfig.margin_bottom, float),
        ),
        defaults=DefaultsConfig(footer=str(defaults.get("footer") or "")),
    )


# ── Template files ───────────────────────────────────────────────────

def load_template(name: str, templates_dir: Path) -> dict:
    """Load templates/<name>.json as a raw descriptor."""
    template_path = Path(templates_dir) / f"{name}.json"
    if not template_path.exists():
        raise FileNotFoundError(f"Template not found: {template_path}")
    with open(template_path, "r", encoding="utf-8") as f:
        return json.load(f)


def list_templates(templates_dir: Path) -> List[str]:
    templates_dir = Path(templates_dir)
    if not templates_dir.is_dir():
        return []
    return sorted(p.stem for p in templates_dir.glob("*.json"))
