"""
Thumbnail generator - 1280x720 promotional thumbnails from rows and templates.

Modules:
  template     - Typed template model, defaults, template files, Item rows
  text_fit     - Word wrapping with ellipsis and auto-fit font sizing
  compositor   - Title / badge / footer layout over a background
  background   - Gradient + texture backgrounds and video-frame backgrounds
  surface      - RenderSurface drawing contract and its Pillow implementation
  fonts        - Font registration and fallback lookup
  inputs       - CSV/JSON row loading and output filenames
  batch        - Sequential batch rendering to PNG files
  video        - Frame sampling from video files (PyAV)
  interactive  - Live preview session with last-seek-wins frame requests
  settings     - .env / environment configuration
"""

__version__ = "1.0.0"
