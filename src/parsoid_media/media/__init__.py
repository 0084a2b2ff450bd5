"""Media extraction from Parsoid HTML."""

from .errors import DocumentParseError, MediaExtractionError
from .extractor import extract, get_media_list, merge
from .models import Caption, MediaRecord, Original, VideoSource
from .selectors import MediaType, classify, is_disallowed, is_too_small

__all__ = [
    "Caption",
    "DocumentParseError",
    "MediaExtractionError",
    "MediaRecord",
    "MediaType",
    "Original",
    "VideoSource",
    "classify",
    "extract",
    "get_media_list",
    "is_disallowed",
    "is_too_small",
    "merge",
]
