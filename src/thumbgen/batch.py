"""
Batch Generator - Render a thumbnail PNG for every row of a CSV/JSON file.

Pipeline:
1. Register fonts from the fonts directory
2. Load and normalize rows, drop rows without a title, apply --limit
3. Load and resolve the template
4. For each item, sequentially: new surface -> compose -> encode -> write

Items never share a surface. The first error aborts the whole batch.
"""

import os
from pathlib import Path
from typing import List, Optional

import numpy as np
from PIL import Image

from .compositor import compose_thumbnail
from .errors import InputError
from .fonts import register_fonts
from .inputs import load_items, safe_filename
from .settings import Settings, load_settings
from .surface import THUMB_HEIGHT, THUMB_WIDTH, PillowSurface
from .template import Item, load_template, resolve_template


def render_thumbnail(
    item: Item,
    template,
    rng: Optional[np.random.Generator] = None,
    frame: Optional[Image.Image] = None,
) -> bytes:
    """Render one item to PNG bytes on a fresh surface."""
    surface = PillowSurface(THUMB_WIDTH, THUMB_HEIGHT)
    compose_thumbnail(surface, item, template, rng, frame)
    return surface.encode_png()


def output_name(item: Item, index: int) -> str:
    """NN-<title-slug>.png, index is 1-based."""
    return f"{index:02d}-{safe_filename(item.title, f'thumbnail-{index}')}.png"


def _display_path(path: Path) -> str:
    try:
        return os.path.relpath(path)
    except ValueError:
        return str(path)


def generate_thumbnails(
    input_path: Path,
    template_name: str = "default",
    out_dir: Optional[Path] = None,
    limit: Optional[int] = None,
    seed: Optional[int] = None,
    settings: Optional[Settings] = None,
) -> List[Path]:
    """
    Generate one thumbnail per titled row of input_path.

    Returns the written PNG paths in input order.
    """
    settings = settings or load_settings()
    out_dir = Path(out_dir) if out_dir else settings.output_dir
    seed = seed if seed is not None else settings.seed

    print("=" * 50)
    print("THUMBNAIL GENERATOR")
    print("=" * 50)

    input_path = Path(input_path)
    if not input_path.exists():
        raise FileNotFoundError(f"Input file not found: {input_path}")

    register_fonts(settings.fonts_dir)

    items = [item for item in load_items(input_path) if item.title]
    if limit is not None:
        items = items[:max(limit, 0)]
    if not items:
        raise InputError("No valid rows found. Ensure each row has at least a title.")

    template = resolve_template(load_template(template_name, settings.templates_dir))
    out_dir.mkdir(parents=True, exist_ok=True)

    print(f"Input: {input_path.name} ({len(items)} item(s))")
    print(f"Template: {template_name}")

    rng = np.random.default_rng(seed)
    outputs = []
    for index, item in enumerate(items, start=1):
        png = render_thumbnail(item, template, rng)
        output = out_dir / output_name(item, index)
        output.write_bytes(png)
        outputs.append(output)
        print(f"Generated: {_display_path(output)}")

    print(f"Done. {len(outputs)} thumbnail(s) generated at {_display_path(out_dir)}")
    return outputs
