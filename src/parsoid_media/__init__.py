"""Gallery media lists from MediaWiki Parsoid HTML."""

from parsoid_media.media import extract, get_media_list, merge

__version__ = "0.1.0"

__all__ = ["extract", "get_media_list", "merge"]
