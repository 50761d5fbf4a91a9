#!/usr/bin/env python3
"""
Generate 1280x720 thumbnails for every row of a CSV or JSON file.

Usage:
    python generate_thumbnails.py
    python generate_thumbnails.py --in inputs/sample.csv --template default
    python generate_thumbnails.py --in rows.json --out out/ --limit 5 --seed 42

Templates: templates/<name>.json
Fonts (optional): drop .ttf/.otf files into assets/fonts/
"""

import argparse
import sys

from thumbgen.batch import generate_thumbnails
from thumbgen.settings import load_settings


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Batch-generate thumbnails from CSV/JSON rows and a template"
    )
    parser.add_argument(
        "--in",
        dest="input",
        type=str,
        default="inputs/sample.csv",
        help="Input rows, .csv or .json (default: inputs/sample.csv)"
    )
    parser.add_argument(
        "--template", "-t",
        type=str,
        default="default",
        help="Template name under templates/ (default: default)"
    )
    parser.add_argument(
        "--out", "-o",
        type=str,
        default=None,
        help="Output directory (default: THUMBGEN_OUTPUT_DIR or out/)"
    )
    parser.add_argument(
        "--limit",
        type=int,
        default=None,
        help="Render at most this many rows"
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Seed for background texture (default: THUMBGEN_SEED or random)"
    )
    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    settings = load_settings()

    try:
        generate_thumbnails(
            input_path=settings.base_dir / args.input,
            template_name=args.template,
            out_dir=settings.base_dir / args.out if args.out else None,
            limit=args.limit,
            seed=args.seed,
            settings=settings,
        )
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
