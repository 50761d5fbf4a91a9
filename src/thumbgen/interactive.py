"""
Interactive Session - Live thumbnail preview driven by form fields.

Holds the editable fields (title, badge, badge position, footer) and an
optional video whose frames replace the generated background. Every
render runs synchronously to completion on a fresh surface.

Frame sampling is an explicit request/response pair: request_frame()
hands out a FrameRequest ticket and frame_ready() only renders when the
ticket is still the latest one. A newer seek supersedes any pending one
(last-seek-wins, no queuing).
"""

import asyncio
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Callable, Optional

import numpy as np
from PIL import Image

from .compositor import ComposedLayout, compose_thumbnail
from .errors import InputError
from .surface import THUMB_HEIGHT, THUMB_WIDTH, PillowSurface
from .template import BADGE_POSITIONS, Item, resolve_template
from .video import VideoSource

PLACEHOLDER_TITLE = "Your Video Title Here"

# Layout tuned for the live preview: smaller type, more words, badge top-right
INTERACTIVE_TEMPLATE = {
    "colors": {"backgroundGradient": ["#0f172a", "#1d4ed8"], "titleOutline": "rgba(0,0,0,0.92)"},
    "typography": {
        "fontFamily": "Arial, sans-serif",
        "titleMaxSize": 118,
        "titleMinSize": 54,
        "lineHeightRatio": 1.05,
        "maxLines": 3,
        "visibleWordsMax": 8,
    },
    "layout": {"padding": 72},
    "effects": {"textureOpacity": 0.07, "textureSteps": 160, "outlineWidth": 10},
    "badge": {"fontSize": 40, "paddingX": 20, "paddingY": 14, "margin": 50, "position": "top-right"},
    "footer": {"fontSize": 30, "marginBottom": 28},
}


def suggest_title(script_text: str, max_lines: int = 10, max_words: int = 8) -> str:
    """Title suggestion from a script: its first non-empty lines, first few words."""
    lines = [line.strip() for line in script_text.splitlines()]
    cleaned = " ".join([line for line in lines if line][:max_lines])
    return " ".join(cleaned.split()[:max_words])


@dataclass(frozen=True)
class FrameRequest:
    ticket: int
    seconds: float


class InteractiveSession:
    """One live preview: form state, optional video, last rendered image."""

    def __init__(
        self,
        template=None,
        seed: Optional[int] = None,
        open_video: Callable[[Path], VideoSource] = VideoSource,
    ):
        self.template = resolve_template(template if template is not None else INTERACTIVE_TEMPLATE)
        self.title = ""
        self.badge = ""
        self.badge_position = self.template.badge.position
        self.footer = ""

        self._rng = np.random.default_rng(seed)
        self._open_video = open_video
        self._video = None
        self._frame: Optional[Image.Image] = None
        self._ticket = 0

        self.last_image: Optional[Image.Image] = None
        self.last_layout: Optional[ComposedLayout] = None

    # ── Form fields ───────────────────────────────────────────────────

    def update(
        self,
        title: Optional[str] = None,
        badge: Optional[str] = None,
        badge_position: Optional[str] = None,
        footer: Optional[str] = None,
    ) -> Image.Image:
        """Change any subset of the fields and re-render."""
        if title is not None:
            self.title = title
        if badge is not None:
            self.badge = badge
        if badge_position is not None:
            if badge_position not in BADGE_POSITIONS:
                raise InputError(
                    f"Unknown badge position '{badge_position}'. Use one of: {', '.join(BADGE_POSITIONS)}"
                )
            self.badge_position = badge_position
        if footer is not None:
            self.footer = footer
        return self.render()

    def load_script(self, script_text: str) -> str:
        """Fill an empty title from a script; an existing title is kept."""
        if not self.title.strip():
            self.title = suggest_title(script_text)
        self.render()
        return self.title

    # ── Video frames ──────────────────────────────────────────────────

    @property
    def has_video(self) -> bool:
        return self._video is not None

    @property
    def duration(self) -> float:
        return self._video.duration if self._video is not None else 0.0

    def load_video(self, path: Path) -> float:
        """Open a video as the background source. Returns its duration."""
        video = self._open_video(Path(path))
        self.close()
        self._video = video
        self._frame = None
        self._ticket += 1
        return video.duration

    def request_frame(self, seconds: float) -> FrameRequest:
        """Start a seek; any earlier pending request becomes stale."""
        if self._video is None:
            raise InputError("No video loaded")
        seconds = max(float(seconds), 0.0)
        if self.duration:
            seconds = min(seconds, self.duration)
        self._ticket += 1
        return FrameRequest(ticket=self._ticket, seconds=seconds)

    def is_current(self, request: FrameRequest) -> bool:
        return request.ticket == self._ticket

    def frame_ready(self, request: FrameRequest, frame: Image.Image) -> Optional[Image.Image]:
        """Deliver a decoded frame. Renders once if the request is still current."""
        if not self.is_current(request):
            return None
        self._frame = frame
        return self.render()

    async def seek(self, seconds: float) -> Optional[Image.Image]:
        """Request, decode off the event loop, then render unless superseded."""
        request = self.request_frame(seconds)
        frame = await asyncio.to_thread(self._video.frame_at, request.seconds)
        return self.frame_ready(request, frame)

    # ── Rendering ─────────────────────────────────────────────────────

    def current_item(self) -> Item:
        title = self.title.strip() or PLACEHOLDER_TITLE
        return Item(id=1, title=title, badge=self.badge.strip(), footer=self.footer.strip())

    def _compose(self) -> PillowSurface:
        template = replace(self.template, badge=replace(self.template.badge, position=self.badge_position))
        surface = PillowSurface(THUMB_WIDTH, THUMB_HEIGHT)
        self.last_layout = compose_thumbnail(surface, self.current_item(), template, self._rng, self._frame)
        self.last_image = surface.to_image()
        return surface

    def render(self) -> Image.Image:
        self._compose()
        return self.last_image

    def export_png(self, path: Optional[Path] = None) -> bytes:
        """Re-render and return PNG bytes, also writing them to path if given."""
        png = self._compose().encode_png()
        if path is not None:
            path = Path(path)
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_bytes(png)
        return png

    def close(self) -> None:
        if self._video is not None:
            self._video.close()
            self._video = None
