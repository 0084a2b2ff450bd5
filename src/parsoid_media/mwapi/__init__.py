"""MediaWiki API collaborator: page HTML, site info and file metadata."""

from .client import API_QUERY_MAX_TITLES, MediaWikiClient, api_params, build_file_metadata, find_shared_repo_domain
from .siteinfo import SiteInfoCache
from .thumbnails import build_image_url_set, build_lead_image_urls, build_srcset, scaled_thumb_url

__all__ = [
    "API_QUERY_MAX_TITLES",
    "MediaWikiClient",
    "SiteInfoCache",
    "api_params",
    "build_file_metadata",
    "build_image_url_set",
    "build_lead_image_urls",
    "build_srcset",
    "find_shared_repo_domain",
    "scaled_thumb_url",
]
