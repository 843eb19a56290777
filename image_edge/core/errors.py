"""
Errors raised while resolving an image.
"""


class ImageEdgeError(Exception):
    """Base class for image resolution failures."""


class TransformError(ImageEdgeError):
    """The transform primitive could not decode, lay out or encode the image."""


class FetchError(TransformError):
    """The origin image could not be retrieved."""
