# ABOUTME: Integration tests for the page-to-media-list service with mocked MediaWiki APIs
# ABOUTME: Validates the fetch, extract, enrich, merge flow and its failure paths

import re

import httpx
import pytest
import pytest_asyncio

from parsoid_media.core import MediaListService
from parsoid_media.mwapi import MediaWikiClient, SiteInfoCache
from parsoid_media.utils.retry import PageNotFoundError

HTML_URL = "https://en.wikipedia.org/api/rest_v1/page/html/Cat"
API_URL = re.compile(r"https://en\.wikipedia\.org/w/api\.php.*")

PAGE_HTML = """
<html><body>
<section data-mw-section-id="0">
  <figure typeof="mw:Image/Thumb">
    <a href="./File:Cat_poster_1.jpg"><img resource="./File:Cat_poster_1.jpg" width="220" height="300"></a>
    <figcaption>Various cats</figcaption>
  </figure>
</section>
<section data-mw-section-id="2">
  <figure typeof="mw:Video/Thumb">
    <video resource="./File:Cat_video.webm">
      <source src="//upload.wikimedia.org/Cat_video.webm" type='video/webm; codecs="vp9, opus"' data-width="640" data-height="360">
    </video>
  </figure>
  <img class="mwe-math-fallback-image-inline" src="https://wikimedia.org/api/rest_v1/media/math/render/svg/1">
</section>
</body></html>
"""

SITEINFO = {"query": {"general": {"mainpage": "Main Page", "lang": "en"}, "repos": []}}

METADATA = {
    "query": {
        "pages": [
            {
                "title": "File:Cat poster 1.jpg",
                "imageinfo": [
                    {
                        "url": "https://upload.wikimedia.org/wikipedia/commons/c/c1/Cat_poster_1.jpg",
                        "width": 2000,
                        "height": 2700,
                        "mime": "image/jpeg",
                        "descriptionurl": "https://commons.wikimedia.org/wiki/File:Cat_poster_1.jpg",
                    }
                ],
            },
            {
                "title": "File:Cat video.webm",
                "imageinfo": [
                    {
                        "url": "https://upload.wikimedia.org/wikipedia/commons/c/c2/Cat_video.webm",
                        "mime": "video/webm",
                    }
                ],
            },
        ],
        "normalized": [
            {"from": "File:Cat_poster_1.jpg", "to": "File:Cat poster 1.jpg"},
            {"from": "File:Cat_video.webm", "to": "File:Cat video.webm"},
        ],
    }
}


@pytest_asyncio.fixture
async def service():
    client = MediaWikiClient(client=httpx.AsyncClient(), siteinfo_cache=SiteInfoCache(ttl_seconds=60), max_retries=1)
    media_service = MediaListService(client=client, thumb_width=320)
    yield media_service
    await media_service.close()


class TestMediaListService:
    """Test the full page-to-media-list flow."""

    @pytest.mark.asyncio
    async def test_enriched_media_list(self, service, httpx_mock):
        httpx_mock.add_response(url=HTML_URL, text=PAGE_HTML)
        httpx_mock.add_response(url=API_URL, json=SITEINFO)
        httpx_mock.add_response(url=API_URL, json=METADATA)

        items = await service.get_media_list("en.wikipedia.org", "Cat")

        assert [item["type"] for item in items] == ["image", "video", "image"]
        assert all("title" not in item for item in items)

        image, video, math = items
        assert image["section_id"] == 0
        assert image["caption"]["text"] == "Various cats"
        assert image["original"]["source"].endswith("/Cat_poster_1.jpg")
        assert image["file_page"] == "https://commons.wikimedia.org/wiki/File:Cat_poster_1.jpg"

        assert video["section_id"] == 2
        assert "original" not in video
        assert video["sources"][0]["codecs"] == ["vp9", "opus"]

        assert math["original"]["mime"] == "image/svg"

    @pytest.mark.asyncio
    async def test_page_without_files_skips_metadata_lookup(self, service, httpx_mock):
        httpx_mock.add_response(url=HTML_URL, text="<p>No media here</p>")
        httpx_mock.add_response(url=API_URL, json=SITEINFO)

        assert await service.get_media_list("en.wikipedia.org", "Cat") == []
        assert len(httpx_mock.get_requests()) == 2

    @pytest.mark.asyncio
    async def test_missing_metadata_keeps_extracted_fields(self, service, httpx_mock):
        httpx_mock.add_response(url=HTML_URL, text=PAGE_HTML)
        httpx_mock.add_response(url=API_URL, json=SITEINFO)
        httpx_mock.add_response(url=API_URL, json={"query": {"pages": []}})

        items = await service.get_media_list("en.wikipedia.org", "Cat")

        assert items[0] == {
            "section_id": 0,
            "type": "image",
            "caption": {"html": "Various cats", "text": "Various cats"},
            "showInGallery": True,
        }

    @pytest.mark.asyncio
    async def test_missing_page(self, service, httpx_mock):
        service.client.siteinfo_cache.set("en.wikipedia.org", {"general": {"lang": "en"}})
        httpx_mock.add_response(url=HTML_URL, status_code=404)

        with pytest.raises(PageNotFoundError):
            await service.get_media_list("en.wikipedia.org", "Cat")
