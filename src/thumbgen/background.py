"""
Background Renderer - Generated gradient backgrounds and video-frame backgrounds.

Generated mode paints a diagonal two-stop gradient and scatters soft white
radial "texture" blobs over it. The blobs come from an explicitly passed
numpy Generator, so a fixed seed reproduces a background exactly.

Frame mode covers the canvas with a sampled video frame and darkens it
with a fixed gradient so the title stays legible.
"""

from dataclasses import dataclass
from typing import List, Optional

import numpy as np
from PIL import Image

from .surface import RenderSurface
from .template import Template

TEXTURE_RADIUS_MIN = 20
TEXTURE_RADIUS_MAX = 140
TEXTURE_ALPHA_MIN_FACTOR = 0.2

FRAME_OVERLAY_STOPS = ((0.0, "rgba(0,0,0,0.48)"), (1.0, "rgba(0,0,0,0.65)"))


@dataclass(frozen=True)
class TextureBlob:
    x: float
    y: float
    radius: float
    alpha: float


def texture_blobs(
    rng: np.random.Generator,
    width: int,
    height: int,
    opacity: float,
    steps: int,
) -> List[TextureBlob]:
    """Random blob placements; alpha is opacity scaled by a factor in [0.2, 1.0]."""
    count = max(int(steps), 0)
    xs = rng.random(count) * width
    ys = rng.random(count) * height
    radii = TEXTURE_RADIUS_MIN + rng.random(count) * (TEXTURE_RADIUS_MAX - TEXTURE_RADIUS_MIN)
    factors = TEXTURE_ALPHA_MIN_FACTOR + rng.random(count) * (1.0 - TEXTURE_ALPHA_MIN_FACTOR)
    return [
        TextureBlob(float(x), float(y), float(r), float(opacity * f))
        for x, y, r, f in zip(xs, ys, radii, factors)
    ]


def draw_texture(
    surface: RenderSurface,
    rng: np.random.Generator,
    opacity: float,
    steps: int,
) -> List[TextureBlob]:
    blobs = texture_blobs(rng, surface.width, surface.height, opacity, steps)
    for blob in blobs:
        surface.fill_radial_gradient(
            (blob.x, blob.y),
            blob.radius,
            f"rgba(255,255,255,{blob.alpha:.3f})",
            "rgba(255,255,255,0)",
        )
    return blobs


def draw_generated_background(
    surface: RenderSurface,
    template: Template,
    rng: np.random.Generator,
) -> None:
    """Diagonal gradient between the two template stops, plus texture."""
    first, second = template.colors.background_gradient
    surface.fill_linear_gradient(
        (0, 0), (surface.width, surface.height), [(0.0, first), (1.0, second)]
    )
    draw_texture(surface, rng, template.effects.texture_opacity, template.effects.texture_steps)


def resize_cover(image: Image.Image, target_width: int, target_height: int) -> Image.Image:
    """
    Resize image to cover target dimensions, cropping if necessary.
    This ensures no black bars appear.
    """
    img_w, img_h = image.size
    target_ratio = target_width / target_height
    img_ratio = img_w / img_h

    if img_ratio > target_ratio:
        # Wider than the canvas: fit height, crop width
        new_height = target_height
        new_width = max(target_width, int(round(img_w * (target_height / img_h))))
    else:
        new_width = target_width
        new_height = max(target_height, int(round(img_h * (target_width / img_w))))

    resized = image.resize((new_width, new_height), Image.Resampling.LANCZOS)

    left = (new_width - target_width) // 2
    top = (new_height - target_height) // 2
    return resized.crop((left, top, left + target_width, top + target_height))


def draw_frame_background(surface: RenderSurface, frame: Image.Image) -> None:
    """Cover the canvas with a video frame, then darken it."""
    surface.blit(resize_cover(frame.convert("RGBA"), surface.width, surface.height), 0, 0)
    surface.fill_linear_gradient(
        (0, 0), (surface.width, surface.height), list(FRAME_OVERLAY_STOPS)
    )


def draw_background(
    surface: RenderSurface,
    template: Template,
    rng: np.random.Generator,
    frame: Optional[Image.Image] = None,
) -> None:
    if frame is not None:
        draw_frame_background(surface, frame)
    else:
        draw_generated_background(surface, template, rng)
