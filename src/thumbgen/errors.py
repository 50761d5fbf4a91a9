"""
Errors - Exception types raised by the thumbnail pipeline.

DegenerateFit and missing template fields are not errors: the sizer falls
back to the minimum size and every template field has a default.
"""


class ThumbnailError(Exception):
    """Base class for thumbnail pipeline errors."""


class InputError(ThumbnailError, ValueError):
    """Unusable input: empty title, unsupported input format, no valid rows."""


class ResourceError(ThumbnailError, OSError):
    """A font or video resource could not be opened or decoded."""
