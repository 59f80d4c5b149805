class HotspotError(Exception):
    """Base class for annotation errors."""


class DegenerateGeometry(HotspotError):
    """Raised when a canvas, display or image has a non-positive dimension."""


class NoActiveImage(HotspotError):
    """Raised when image geometry is needed before an image has been loaded."""

