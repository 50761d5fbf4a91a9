#!/usr/bin/env python3
"""
Thumbnail Generator - MCP Server
================================
Model Context Protocol server exposing the thumbnail tools, including a
live preview session that mirrors the batch layout.

Tools:
  - list_templates: List template names under templates/
  - generate_thumbnails: Batch-render a CSV/JSON file with a template
  - update_preview: Set title / badge / badge position / footer and re-render
  - load_script: Suggest a title from a script file (only if title is empty)
  - load_video: Use a video file as the preview background
  - seek_frame: Sample the video at a time and re-render
  - export_thumbnail: Write the current preview as a PNG
  - preview_status: Show current fields, fit result and video state

The preview is written to <output>/preview.png after every change.

Run: python mcp_server.py
"""

import contextlib
import sys
from pathlib import Path
from typing import Any

# MCP SDK imports
from mcp.server import Server
from mcp.server.stdio import stdio_server
from mcp.types import Tool, TextContent

from thumbgen.batch import generate_thumbnails
from thumbgen.fonts import register_fonts
from thumbgen.interactive import InteractiveSession
from thumbgen.settings import load_settings
from thumbgen.template import BADGE_POSITIONS, list_templates

# Paths
BASE_DIR = Path(__file__).parent
SETTINGS = load_settings(BASE_DIR)
PREVIEW_PATH = SETTINGS.output_dir / "preview.png"

_session = None


def get_session() -> InteractiveSession:
    global _session
    if _session is None:
        register_fonts(SETTINGS.fonts_dir)
        _session = InteractiveSession(seed=SETTINGS.seed)
    return _session


def resolve_path(value: str) -> Path:
    path = Path(value)
    return path if path.is_absolute() else BASE_DIR / path


def describe_preview(session: InteractiveSession) -> str:
    layout = session.last_layout
    lines = [
        f"  Title: \"{session.current_item().title}\"",
        f"  Badge: \"{session.badge}\" ({session.badge_position})" if session.badge else "  Badge: (none)",
        f"  Footer: \"{session.footer}\"" if session.footer else "  Footer: (none)",
    ]
    if layout is not None:
        lines.append(f"  Font size: {layout.fit.font_size}px, {len(layout.fit.lines)} line(s)")
        for line in layout.fit.lines:
            lines.append(f"    | {line}")
    if session.has_video:
        lines.append(f"  Video: {session.duration:.1f}s")
    return "\n".join(lines)


def save_preview(session: InteractiveSession) -> Path:
    PREVIEW_PATH.parent.mkdir(parents=True, exist_ok=True)
    session.last_image.save(str(PREVIEW_PATH), "PNG")
    return PREVIEW_PATH


# ─── MCP Server ───────────────────────────────────────────────────────

app = Server("thumbnail-generator")


@app.list_tools()
async def list_tools() -> list[Tool]:
    return [
        Tool(
            name="list_templates",
            description="List the template names available under templates/.",
            inputSchema={"type": "object", "properties": {}, "required": []},
        ),
        Tool(
            name="generate_thumbnails",
            description=(
                "Render one 1280x720 PNG per titled row of a CSV or JSON file using a template. "
                "Rows without a title are skipped. The batch stops at the first error."
            ),
            inputSchema={
                "type": "object",
                "properties": {
                    "input": {"type": "string", "description": "Path to .csv or .json rows (default: inputs/sample.csv)"},
                    "template": {"type": "string", "description": "Template name (default: default)"},
                    "out": {"type": "string", "description": "Output directory (default: out/)"},
                    "limit": {"type": "integer", "description": "Render at most this many rows"},
                    "seed": {"type": "integer", "description": "Seed for the background texture"},
                },
                "required": [],
            },
        ),
        Tool(
            name="update_preview",
            description=(
                "Update the live preview fields and re-render. Omitted fields keep their value; "
                "pass an empty string to clear one."
            ),
            inputSchema={
                "type": "object",
                "properties": {
                    "title": {"type": "string", "description": "Title text"},
                    "badge": {"type": "string", "description": "Badge text (upper-cased when drawn)"},
                    "badge_position": {
                        "type": "string",
                        "enum": list(BADGE_POSITIONS),
                        "description": "Badge corner",
                    },
                    "footer": {"type": "string", "description": "Footer text"},
                },
                "required": [],
            },
        ),
        Tool(
            name="load_script",
            description=(
                "Read a script text file and use its first words as the title, "
                "only if the title is currently empty."
            ),
            inputSchema={
                "type": "object",
                "properties": {"path": {"type": "string", "description": "Script text file"}},
                "required": ["path"],
            },
        ),
        Tool(
            name="load_video",
            description="Use a video as the preview background and show the frame at 1s.",
            inputSchema={
                "type": "object",
                "properties": {"path": {"type": "string", "description": "Video file"}},
                "required": ["path"],
            },
        ),
        Tool(
            name="seek_frame",
            description="Sample the loaded video at a time (seconds) and re-render the preview.",
            inputSchema={
                "type": "object",
                "properties": {"seconds": {"type": "number", "description": "Time in seconds"}},
                "required": ["seconds"],
            },
        ),
        Tool(
            name="export_thumbnail",
            description="Write the current preview as a PNG (default: out/thumbnail.png).",
            inputSchema={
                "type": "object",
                "properties": {"output": {"type": "string", "description": "Output PNG path"}},
                "required": [],
            },
        ),
        Tool(
            name="preview_status",
            description="Show the current preview fields, chosen font size and wrapped lines.",
            inputSchema={"type": "object", "properties": {}, "required": []},
        ),
    ]


@app.call_tool()
async def call_tool(name: str, arguments: dict[str, Any]) -> list[TextContent]:
    try:
        result = await _handle_tool(name, arguments or {})
        return [TextContent(type="text", text=result)]
    except Exception as e:
        return [TextContent(type="text", text=f"ERROR: {str(e)}")]


async def _handle_tool(name: str, args: dict[str, Any]) -> str:

    # ── list_templates ────────────────────────────────────────────
    if name == "list_templates":
        names = list_templates(SETTINGS.templates_dir)
        if not names:
            return f"No templates found in {SETTINGS.templates_dir}"
        return "Templates:\n" + "\n".join(f"  - {n}" for n in names)

    # ── generate_thumbnails ───────────────────────────────────────
    elif name == "generate_thumbnails":
        outputs = generate_thumbnails(
            input_path=resolve_path(args.get("input", "inputs/sample.csv")),
            template_name=args.get("template", "default"),
            out_dir=resolve_path(args["out"]) if args.get("out") else None,
            limit=args.get("limit"),
            seed=args.get("seed"),
            settings=SETTINGS,
        )
        listing = "\n".join(f"  {p}" for p in outputs)
        return f"Generated {len(outputs)} thumbnail(s):\n{listing}"

    # ── update_preview ────────────────────────────────────────────
    elif name == "update_preview":
        session = get_session()
        session.update(
            title=args.get("title"),
            badge=args.get("badge"),
            badge_position=args.get("badge_position"),
            footer=args.get("footer"),
        )
        path = save_preview(session)
        return f"Preview updated!\n{describe_preview(session)}\n  Saved: {path}"

    # ── load_script ───────────────────────────────────────────────
    elif name == "load_script":
        script_path = resolve_path(args.get("path", ""))
        if not script_path.is_file():
            return f"ERROR: Script not found: {script_path}"
        session = get_session()
        title = session.load_script(script_path.read_text(encoding="utf-8-sig"))
        path = save_preview(session)
        return f"Title: \"{title}\"\n{describe_preview(session)}\n  Saved: {path}"

    # ── load_video ────────────────────────────────────────────────
    elif name == "load_video":
        session = get_session()
        duration = session.load_video(resolve_path(args.get("path", "")))
        seconds = min(1.0, duration)
        image = await session.seek(seconds)
        if image is None:
            return f"Video loaded ({duration:.1f}s), frame at {seconds:.1f}s superseded by a newer seek"
        path = save_preview(session)
        return f"Video loaded ({duration:.1f}s), frame at {seconds:.1f}s\n{describe_preview(session)}\n  Saved: {path}"

    # ── seek_frame ────────────────────────────────────────────────
    elif name == "seek_frame":
        session = get_session()
        seconds = float(args.get("seconds", 0))
        image = await session.seek(seconds)
        if image is None:
            return f"Seek to {seconds:.1f}s superseded by a newer seek"
        path = save_preview(session)
        return f"Frame at {seconds:.1f}s\n{describe_preview(session)}\n  Saved: {path}"

    # ── export_thumbnail ──────────────────────────────────────────
    elif name == "export_thumbnail":
        output = resolve_path(args["output"]) if args.get("output") else SETTINGS.output_dir / "thumbnail.png"
        session = get_session()
        png = session.export_png(output)
        return f"Thumbnail exported!\n  File: {output}\n  Size: {len(png) / 1024:.1f} KB"

    # ── preview_status ────────────────────────────────────────────
    elif name == "preview_status":
        session = get_session()
        if session.last_layout is None:
            session.render()
        return f"Preview:\n{describe_preview(session)}"

    else:
        return f"ERROR: Unknown tool '{name}'"


# ─── Main ─────────────────────────────────────────────────────────────

async def main():
    async with stdio_server() as (read_stream, write_stream):
        # The protocol writer already holds the real stdout; progress prints go to stderr
        with contextlib.redirect_stdout(sys.stderr):
            await app.run(read_stream, write_stream, app.create_initialization_options())


if __name__ == "__main__":
    import asyncio
    asyncio.run(main())
