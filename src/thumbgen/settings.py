"""
Settings - Directory and seed configuration from the environment / .env file.

  THUMBGEN_TEMPLATES_DIR   template JSON directory   (default: ./templates)
  THUMBGEN_FONTS_DIR       font files to register    (default: ./assets/fonts)
  THUMBGEN_OUTPUT_DIR      PNG output directory      (default: ./out)
  THUMBGEN_SEED            texture seed, optional    (default: random)
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv


@dataclass(frozen=True)
class Settings:
    base_dir: Path
    templates_dir: Path
    fonts_dir: Path
    output_dir: Path
    seed: Optional[int] = None


def _dir(name: str, base_dir: Path, default: str) -> Path:
    value = os.getenv(name)
    path = Path(value) if value else Path(default)
    return path if path.is_absolute() else base_dir / path


def _seed(value: Optional[str]) -> Optional[int]:
    if value is None or not value.strip():
        return None
    try:
        return int(value)
    except ValueError:
        print(f"  WARNING: THUMBGEN_SEED={value!r} is not an integer, ignoring")
        return None


def load_settings(base_dir: Optional[Path] = None) -> Settings:
    """Load .env from base_dir (default: cwd) and resolve settings."""
    base_dir = Path(base_dir) if base_dir else Path.cwd()
    load_dotenv(base_dir / ".env")

    return Settings(
        base_dir=base_dir,
        templates_dir=_dir("THUMBGEN_TEMPLATES_DIR", base_dir, "templates"),
        fonts_dir=_dir("THUMBGEN_FONTS_DIR", base_dir, "assets/fonts"),
        output_dir=_dir("THUMBGEN_OUTPUT_DIR", base_dir, "out"),
        seed=_seed(os.getenv("THUMBGEN_SEED")),
    )
