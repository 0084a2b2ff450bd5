# ABOUTME: Async MediaWiki client for Parsoid HTML, site info and file metadata
# ABOUTME: Builds action API queries, batches titles and shapes imageinfo into gallery metadata

import asyncio
import re
from collections.abc import Iterator, Sequence
from typing import Any
from urllib.parse import quote

import httpx
from bs4 import BeautifulSoup

from parsoid_media.config import get_config
from parsoid_media.mwapi.siteinfo import SiteInfoCache
from parsoid_media.mwapi.thumbnails import build_srcset
from parsoid_media.utils.logging import get_logger, log_api_call
from parsoid_media.utils.retry import MediaWikiAPIError, mw_retry

API_QUERY_MAX_TITLES = 50

EXTMETADATA_FIELDS = ["Artist", "Credit", "ImageDescription", "License", "LicenseShortName", "LicenseUrl"]

_SHARED_REPO_DOMAIN_RE = re.compile(r"^((?:https?:)?//[^/]+)")


def api_params(query: dict[str, Any]) -> dict[str, Any]:
    """Extend action API query parameters with the common ones."""
    return {**query, "format": "json", "formatversion": 2}


def find_shared_repo_domain(siteinfo_query: dict[str, Any]) -> str | None:
    """Root URI of the shared file repository (usually Commons), if the wiki has one."""
    for repo in siteinfo_query.get("repos") or []:
        if repo.get("name") == "shared":
            match = _SHARED_REPO_DOMAIN_RE.match(repo.get("descBaseUrl") or "")
            return match.group(1) if match else None
    return None


def chunked(items: Sequence[str], size: int = API_QUERY_MAX_TITLES) -> Iterator[list[str]]:
    for start in range(0, len(items), size):
        yield list(items[start : start + size])


def _html_and_text(value: Any) -> dict[str, str] | None:
    if value is None or value == "":
        return None
    html = str(value)
    return {"html": html, "text": BeautifulSoup(html, "html.parser").get_text().strip()}


def _ext_value(extmetadata: dict[str, Any], key: str) -> Any:
    entry = extmetadata.get(key)
    return entry.get("value") if isinstance(entry, dict) else None


def _drop_none(data: dict[str, Any]) -> dict[str, Any]:
    return {key: value for key, value in data.items() if value is not None}


def build_file_metadata(page: dict[str, Any], thumb_width: int, lang: str | None = None) -> dict[str, Any] | None:
    """Shape one imageinfo page into the metadata merged into a gallery item.

    Returns None when the API has no file info for the page. Files hosted on a
    shared repository come back with a "missing" local page but still carry
    imageinfo, so only the imageinfo itself decides.
    """
    if page.get("invalid") or not page.get("imageinfo"):
        return None

    info = page["imageinfo"][0]
    extmetadata = info.get("extmetadata") or {}
    title = page.get("title", "")
    mime = info.get("mime")

    thumbnail = None
    srcset = None
    if info.get("thumburl"):
        thumbnail = _drop_none(
            {
                "source": info["thumburl"],
                "width": info.get("thumbwidth"),
                "height": info.get("thumbheight"),
                "mime": info.get("thumbmime") or mime,
            }
        )
        if mime and mime.startswith("image/"):
            srcset = build_srcset(info["thumburl"], thumb_width, info.get("width"))

    license_info = _drop_none(
        {
            "type": _ext_value(extmetadata, "LicenseShortName"),
            "code": _ext_value(extmetadata, "License"),
            "url": _ext_value(extmetadata, "LicenseUrl"),
        }
    )
    description = _html_and_text(_ext_value(extmetadata, "ImageDescription"))
    if description is not None and lang:
        description["lang"] = lang

    return _drop_none(
        {
            "titles": {"canonical": title.replace(" ", "_"), "normalized": title, "display": title},
            "thumbnail": thumbnail,
            "original": _drop_none(
                {"source": info.get("url"), "width": info.get("width"), "height": info.get("height"), "mime": mime}
            ),
            "srcset": srcset,
            "file_page": info.get("descriptionurl"),
            "artist": _html_and_text(_ext_value(extmetadata, "Artist")),
            "credit": _html_and_text(_ext_value(extmetadata, "Credit")),
            "license": license_info or None,
            "description": description,
        }
    )


class MediaWikiClient:
    """Client for the MediaWiki REST and action APIs of any wiki domain.

    The httpx client and the site info cache can be injected so callers (and
    tests) control connection pooling and cache lifetime.
    """

    def __init__(
        self,
        client: httpx.AsyncClient | None = None,
        siteinfo_cache: SiteInfoCache | None = None,
        max_retries: int | None = None,
    ):
        config = get_config()
        self.http_client = client or httpx.AsyncClient(  # Allow for dependency injection
            headers={"User-Agent": config.user_agent},
            timeout=config.request_timeout,
            follow_redirects=True,
        )
        if siteinfo_cache is None:
            siteinfo_cache = SiteInfoCache(ttl_seconds=config.siteinfo_ttl_seconds)
        self.siteinfo_cache = siteinfo_cache
        self._siteinfo_requests: dict[str, asyncio.Task[dict[str, Any]]] = {}
        self.max_retries = max_retries or config.max_retries
        self.logger = get_logger(__name__)

    @staticmethod
    def page_html_url(domain: str, title: str) -> str:
        return f"https://{domain}/api/rest_v1/page/html/{quote(title.replace(' ', '_'), safe='')}"

    @staticmethod
    def action_api_url(domain: str) -> str:
        return f"https://{domain}/w/api.php"

    async def _get(self, url: str, params: dict[str, Any] | None = None) -> httpx.Response:
        @mw_retry(max_attempts=self.max_retries)
        async def request() -> httpx.Response:
            response = await self.http_client.get(url, params=params)
            response.raise_for_status()
            return response

        return await request()

    async def _query(self, domain: str, query: dict[str, Any]) -> dict[str, Any]:
        response = await self._get(self.action_api_url(domain), params=api_params(query))
        try:
            body = response.json()
        except ValueError as e:
            raise MediaWikiAPIError(f"invalid JSON from {domain}: {e}", status_code=response.status_code) from e
        if "error" in body:
            error = body["error"]
            raise MediaWikiAPIError(f"{error.get('code')}: {error.get('info')}")
        if "query" not in body:
            raise MediaWikiAPIError("no query in response")
        return body["query"]

    @log_api_call("parsoid_html")
    async def get_page_html(self, domain: str, title: str) -> str:
        """Fetch the Parsoid HTML of a page.

        Raises:
            PageNotFoundError: If the page doesn't exist
        """
        response = await self._get(self.page_html_url(domain, title))
        return response.text

    async def get_site_info(self, domain: str) -> dict[str, Any]:
        """Fetch (or reuse cached) general site info for a wiki.

        Concurrent callers for the same domain share one in-flight request.
        """
        cached = self.siteinfo_cache.get(domain)
        if cached is not None:
            return cached

        task = self._siteinfo_requests.get(domain)
        if task is None:
            task = asyncio.ensure_future(self._fetch_site_info(domain))
            self._siteinfo_requests[domain] = task
            task.add_done_callback(lambda _: self._siteinfo_requests.pop(domain, None))
        return await asyncio.shield(task)

    @log_api_call("siteinfo")
    async def _fetch_site_info(self, domain: str) -> dict[str, Any]:
        query = await self._query(
            domain,
            {"action": "query", "meta": "siteinfo|filerepoinfo", "siprop": "general|languagevariants"},
        )
        general = query.get("general") or {}
        lang = general.get("lang")
        variants = (query.get("languagevariants") or {}).get(lang)

        site_info = {
            "general": {
                "mainpage": general.get("mainpage"),
                "lang": lang,
                "legaltitlechars": general.get("legaltitlechars"),
                "case": general.get("case"),
                "mobileserver": general.get("mobileserver"),
            },
            "variants": list(variants) if variants else None,
            "shared_repo_root_uri": find_shared_repo_domain(query),
        }
        self.siteinfo_cache.set(domain, site_info)
        return site_info

    @log_api_call("imageinfo")
    async def get_media_metadata(
        self,
        domain: str,
        titles: Sequence[str],
        lang: str | None = None,
        thumb_width: int | None = None,
    ) -> dict[str, dict[str, Any]]:
        """Fetch gallery metadata for file titles, keyed by the titles as requested.

        Titles are queried in batches of API_QUERY_MAX_TITLES. Files the API
        reports as missing are absent from the result.
        """
        thumb_width = thumb_width or get_config().thumbnail_width
        unique_titles = list(dict.fromkeys(titles))
        metadata: dict[str, dict[str, Any]] = {}

        for batch in chunked(unique_titles):
            query = {
                "action": "query",
                "prop": "imageinfo",
                "titles": "|".join(batch),
                "iiprop": "url|dimensions|mime|extmetadata",
                "iiextmetadatafilter": "|".join(EXTMETADATA_FIELDS),
                "iiurlwidth": thumb_width,
            }
            if lang:
                query["iiextmetadatalanguage"] = lang
            result = await self._query(domain, query)

            normalized = {entry["from"]: entry["to"] for entry in result.get("normalized") or []}
            pages = {page.get("title"): page for page in result.get("pages") or []}
            for requested in batch:
                page = pages.get(normalized.get(requested, requested))
                entry = build_file_metadata(page, thumb_width, lang) if page else None
                if entry is None:
                    self.logger.debug("No file metadata", domain=domain, title=requested)
                    continue
                metadata[requested] = entry

        return metadata

    async def close(self) -> None:
        await self.http_client.aclose()
