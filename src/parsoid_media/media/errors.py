# ABOUTME: Exception types raised by the media extraction core
# ABOUTME: Only documents that cannot be parsed at all are fatal; everything else degrades


class MediaExtractionError(Exception):
    """Base exception for media extraction failures."""

    pass


class DocumentParseError(MediaExtractionError):
    """Raised when the input cannot be parsed as an HTML document."""

    pass
