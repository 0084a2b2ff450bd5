# ABOUTME: High-level service that turns a wiki page into its gallery media list
# ABOUTME: Fetches HTML and site info concurrently, extracts, enriches with file metadata and merges

from __future__ import annotations

import asyncio
from typing import Any

from parsoid_media.media import extract, merge
from parsoid_media.mwapi import MediaWikiClient
from parsoid_media.utils.logging import get_logger


class MediaListService:
    """Service producing the published media list for a page."""

    def __init__(self, client: MediaWikiClient | None = None, thumb_width: int | None = None):
        self.client = client or MediaWikiClient()
        self.thumb_width = thumb_width
        self.logger = get_logger(__name__)

    async def get_media_list(self, domain: str, title: str) -> list[dict[str, Any]]:
        """Build the media list for one page.

        Raises:
            PageNotFoundError: If the page doesn't exist
            MediaWikiAPIError: If a MediaWiki request fails after retries
            DocumentParseError: If the page HTML cannot be parsed
        """
        html, site_info = await asyncio.gather(
            self.client.get_page_html(domain, title),
            self.client.get_site_info(domain),
        )

        records = extract(html)
        titles = [record.title for record in records if record.title]
        self.logger.info("Extracted page media", domain=domain, title=title, items=len(records), files=len(titles))

        metadata: dict[str, dict[str, Any]] = {}
        if titles:
            metadata = await self.client.get_media_metadata(
                domain,
                titles,
                lang=site_info["general"].get("lang"),
                thumb_width=self.thumb_width,
            )
            missing = len(set(titles) - metadata.keys())
            if missing:
                self.logger.warning("Some files have no metadata", domain=domain, title=title, missing=missing)

        return merge(metadata, records)

    async def close(self) -> None:
        await self.client.close()
