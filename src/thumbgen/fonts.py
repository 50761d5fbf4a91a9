"""
Fonts - Font registration and lookup with a fallback chain.

Fonts dropped into assets/fonts/ are registered under their file stem, so
"Montserrat-Black.ttf" answers to the family "Montserrat" at weight 900
and to the literal family "Montserrat-Black".
"""

from functools import lru_cache
from pathlib import Path
from typing import Dict, List, Optional

from PIL import ImageFont

from .errors import ResourceError

FONT_EXTENSIONS = {".ttf", ".otf", ".ttc", ".woff", ".woff2"}

# CSS generic families have no file behind them
GENERIC_FAMILIES = {"serif", "sans-serif", "monospace", "cursive", "fantasy", "system-ui"}

WEIGHT_NAMES = {
    100: "Thin",
    200: "ExtraLight",
    300: "Light",
    400: "Regular",
    500: "Medium",
    600: "SemiBold",
    700: "Bold",
    800: "ExtraBold",
    900: "Black",
}

_registered: Dict[str, Path] = {}
_warned: set = set()


def register_fonts(directory: Path) -> Dict[str, Path]:
    """Register every font file in directory under its file stem."""
    directory = Path(directory)
    if not directory.is_dir():
        return {}

    loaded = {}
    for path in sorted(directory.iterdir()):
        if path.suffix.lower() not in FONT_EXTENSIONS:
            continue
        try:
            ImageFont.truetype(str(path), 12)
        except OSError as e:
            print(f"  WARNING: Skipping font {path.name}: {e}")
            continue
        _registered[path.stem.lower()] = path
        loaded[path.stem] = path
        print(f"  Loaded font: {path.name} (family: {path.stem})")
    return loaded


def registered_fonts() -> Dict[str, Path]:
    return dict(_registered)


def clear_registered_fonts() -> None:
    _registered.clear()
    _warned.clear()


def font_candidates(family: str, weight: int = 400) -> List[str]:
    """
    Names to try for a CSS-style family list, most specific first.

    "Montserrat, Arial, sans-serif" at 900 gives
    ["Montserrat-Black", "Montserrat", "Arial-Black", "Arial"].
    """
    weight_name = WEIGHT_NAMES.get(int(round(weight / 100.0)) * 100)
    names = []
    for raw in family.split(","):
        name = raw.strip().strip("'\"")
        if not name or name.lower() in GENERIC_FAMILIES:
            continue
        if weight_name:
            names.append(f"{name}-{weight_name}")
        names.append(name)
    return names


def get_font(spec) -> ImageFont.FreeTypeFont:
    """
    Load a font for a FontSpec-like object (family, size, weight).

    Priority: registered fonts -> system font path -> Pillow built-in.
    """
    size = max(int(spec.size), 1)
    candidates = font_candidates(spec.family, spec.weight)

    for name in candidates:
        path = _registered.get(name.lower())
        if path is not None:
            try:
                return _truetype(str(path), size)
            except OSError:
                continue

    for name in candidates:
        for ext in (".ttf", ".otf"):
            path = _system_font_path(name + ext)
            if path is not None:
                return _truetype(path, size)

    if spec.family not in _warned:
        _warned.add(spec.family)
        print(f"  WARNING: Font '{spec.family}' not found, using default")
    return _builtin(size)


@lru_cache(maxsize=256)
def _truetype(path: str, size: int) -> ImageFont.FreeTypeFont:
    return ImageFont.truetype(path, size)


@lru_cache(maxsize=128)
def _system_font_path(filename: str) -> Optional[str]:
    """Resolve a bare font filename through Pillow's system font search."""
    try:
        return ImageFont.truetype(filename, 12).path
    except OSError:
        return None


@lru_cache(maxsize=64)
def _builtin(size: int) -> ImageFont.FreeTypeFont:
    try:
        return ImageFont.load_default(size=size)
    except (OSError, ImportError) as e:
        raise ResourceError(f"No usable font available: {e}") from e
