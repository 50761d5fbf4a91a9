"""
Inputs - Load thumbnail rows from CSV or JSON and normalize them into Items.
"""

import csv
import json
import re
from pathlib import Path
from typing import Any, List

from .errors import InputError
from .template import Item


def normalize_entry(raw: Any, index: int = 0) -> Item:
    """Build an Item from a raw row; footer falls back to a 'channel' column."""
    if not isinstance(raw, dict):
        raw = {}
    try:
        item_id = int(raw.get("id") or index + 1)
    except (TypeError, ValueError):
        item_id = index + 1
    return Item(
        id=item_id,
        title=str(raw.get("title") or "").strip(),
        subtitle=str(raw.get("subtitle") or "").strip(),
        badge=str(raw.get("badge") or "").strip(),
        footer=str(raw.get("footer") or raw.get("channel") or "").strip(),
    )


def parse_csv(content: str) -> List[Item]:
    """
    Parse CSV text with a header row.

    Header names are lower-cased, blank lines are skipped, cells are
    trimmed and missing trailing cells read as "".
    """
    lines = [line.strip() for line in content.splitlines()]
    lines = [line for line in lines if line]
    if not lines:
        return []

    rows = list(csv.reader(lines, skipinitialspace=True))
    headers = [h.strip().lower() for h in rows[0]]
    items = []
    for index, cells in enumerate(rows[1:]):
        entry = {"id": index + 1}
        for i, header in enumerate(headers):
            entry[header] = cells[i].strip() if i < len(cells) else ""
        items.append(normalize_entry(entry, index))
    return items


def parse_json(content: str) -> List[Item]:
    """A JSON list of rows, or an object with an 'items' list."""
    parsed = json.loads(content)
    rows = parsed if isinstance(parsed, list) else parsed.get("items", []) if isinstance(parsed, dict) else []
    return [normalize_entry(row, index) for index, row in enumerate(rows)]


def load_items(input_path: Path) -> List[Item]:
    input_path = Path(input_path)
    if not input_path.exists():
        raise FileNotFoundError(f"Input file not found: {input_path}")

    content = input_path.read_text(encoding="utf-8-sig")
    ext = input_path.suffix.lower()
    if ext == ".json":
        return parse_json(content)
    if ext == ".csv":
        return parse_csv(content)
    raise InputError(f"Unsupported input format: {ext}. Use .csv or .json")


def safe_filename(text: str, fallback: str = "thumbnail") -> str:
    """Lower-case ASCII slug of text, at most 80 characters."""
    slug = str(text or "").lower()
    slug = re.sub(r"['’]", "", slug)
    slug = re.sub(r"[^a-z0-9]+", "-", slug)
    slug = slug.strip("-")[:80]
    return slug or fallback
