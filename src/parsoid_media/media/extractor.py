# ABOUTME: Extracts the ordered, deduplicated media list from Parsoid HTML
# ABOUTME: Merges per-title metadata from the MediaWiki API into the final gallery payload

import json
import re
from collections.abc import Iterable, Mapping
from typing import Any
from urllib.parse import unquote

from bs4 import BeautifulSoup, Tag

from parsoid_media.media.errors import DocumentParseError
from parsoid_media.media.models import Caption, MediaRecord, Original, VideoSource
from parsoid_media.media.selectors import (
    GALLERY_CLASS,
    MEDIA_SELECTORS,
    SECTION_ID_ATTR,
    SPOKEN_WIKIPEDIA_ID,
    MediaType,
    classify,
    closest,
    get_attr,
    has_class,
    is_disallowed,
    is_mathoid_image,
    is_too_small,
    resolve_resource,
)
from parsoid_media.utils.logging import get_logger, with_operation_context

logger = get_logger(__name__)

MATH_IMAGE_MIME = "image/svg"

_RELATIVE_PREFIX_RE = re.compile(r"^./")
_LEADING_INT_RE = re.compile(r"^\s*([+-]?\d+)")
_CODECS_RE = re.compile(r'codecs\s*=\s*"([^"]*)"')


def parse_document(html: str | bytes) -> BeautifulSoup:
    """Parse raw Parsoid HTML, raising DocumentParseError if that is impossible."""
    if not isinstance(html, str | bytes):
        raise DocumentParseError(f"Expected HTML as str or bytes, got {type(html).__name__}")
    try:
        return BeautifulSoup(html, "html.parser")
    except Exception as e:
        raise DocumentParseError(f"Could not parse HTML document: {e}") from e


def _keep_candidate(elem: Tag) -> bool:
    if is_mathoid_image(elem):
        return True
    media_type = classify(elem)
    if media_type is None:
        return False
    resource = resolve_resource(elem, media_type)
    if resource is None:
        logger.debug("Dropping media element without resource", media_type=media_type.key, tag=elem.name)
        return False
    if media_type is MediaType.IMAGE and is_too_small(resource):
        return False
    return not is_disallowed(elem)


def _decode_title(raw: str) -> str:
    return unquote(_RELATIVE_PREFIX_RE.sub("", raw, count=1))


def _parse_int(value: str | None) -> int | None:
    if value is None:
        return None
    match = _LEADING_INT_RE.match(value)
    return int(match.group(1)) if match else None


def _section_id(elem: Tag) -> int | None:
    section = closest(elem, lambda node: node.name == "section")
    return _parse_int(get_attr(section, SECTION_ID_ATTR)) if section is not None else None


def _gallery_id(elem: Tag) -> str | None:
    gallery = closest(elem, lambda node: has_class(node, GALLERY_CLASS))
    return get_attr(gallery, "id") if gallery is not None else None


def _caption(elem: Tag, own_resource: bool = False) -> Caption | None:
    figcaption = elem.find("figcaption")
    if figcaption is None and own_resource:
        # <img typeof="mw:Image"> sits inside the <figure> that holds its caption
        figure = closest(elem, lambda node: node.name == "figure")
        figcaption = figure.find("figcaption") if figure is not None else None
    if figcaption is None:
        return None
    return Caption(html=figcaption.decode_contents(), text=figcaption.get_text())


def _time_fields(elem: Tag) -> dict[str, Any]:
    raw = get_attr(elem, "data-mw")
    if not raw:
        return {}
    try:
        data_mw = json.loads(raw)
    except ValueError as e:
        logger.warning("Ignoring malformed data-mw on video", error=str(e), resource=get_attr(elem, "resource"))
        return {}
    if not isinstance(data_mw, dict):
        return {}
    return {
        "start_time": data_mw.get("starttime"),
        "end_time": data_mw.get("endtime"),
        "thumb_time": data_mw.get("thumbtime"),
    }


def parse_source_type(type_attr: str | None) -> tuple[str | None, list[str]]:
    """Split a <source> type such as 'video/webm; codecs="vp8, vorbis"' into mime and codecs."""
    if not type_attr:
        return None, []
    mime = type_attr.split(";", 1)[0].strip() or None
    match = _CODECS_RE.search(type_attr)
    codecs = [codec.strip() for codec in match.group(1).split(",") if codec.strip()] if match else []
    return mime, codecs


def _video_source(source: Tag) -> VideoSource:
    mime, codecs = parse_source_type(get_attr(source, "type"))
    return VideoSource(
        url=get_attr(source, "src"),
        mime=mime,
        codecs=codecs,
        name=get_attr(source, "data-title"),
        short_name=get_attr(source, "data-shorttitle"),
        width=_parse_int(get_attr(source, "data-file-width") or get_attr(source, "data-width")),
        height=_parse_int(get_attr(source, "data-file-height") or get_attr(source, "data-height")),
    )


def _is_spoken(elem: Tag) -> bool:
    return closest(elem, lambda node: get_attr(node, "id") == SPOKEN_WIKIPEDIA_ID) is not None


def build_record(elem: Tag) -> MediaRecord:
    """Build the MediaRecord for one surviving media element."""
    media_type = classify(elem) or MediaType.MATH_IMAGE
    resource = resolve_resource(elem, media_type)

    title = None
    if media_type.resource_selector is not None and resource is not None:
        raw_resource = get_attr(resource, "resource")
        title = _decode_title(raw_resource) if raw_resource else None

    fields: dict[str, Any] = {}
    match media_type:
        case MediaType.VIDEO:
            fields.update(_time_fields(elem))
            fields["sources"] = [_video_source(source) for source in elem.find_all("source")]
        case MediaType.PRONUNCIATION:
            raw_title = get_attr(elem, "title")
            title = unquote(f"File:{raw_title}") if raw_title else None
            fields["audio_type"] = "pronunciation"
        case MediaType.AUDIO:
            fields["audio_type"] = "spoken" if _is_spoken(elem) else "generic"
        case MediaType.MATH_IMAGE:
            fields["original"] = Original(source=get_attr(elem, "src"), mime=MATH_IMAGE_MIME)

    return MediaRecord(
        title=title,
        section_id=_section_id(elem),
        type=media_type.output_name,
        caption=_caption(elem, own_resource=media_type.resource_selector is not None and resource is elem),
        gallery_id=_gallery_id(elem),
        show_in_gallery=media_type.show_in_gallery,
        **fields,
    )


def dedupe(records: Iterable[MediaRecord]) -> list[MediaRecord]:
    """Keep the first record for each identity key, in order."""
    seen: set[str] = set()
    unique: list[MediaRecord] = []
    for record in records:
        key = record.dedupe_key
        if key is None:
            logger.debug("Dropping media item without title or source", type=record.type)
            continue
        if key in seen:
            continue
        seen.add(key)
        unique.append(record)
    return unique


@with_operation_context("extract_media")
def extract(html: str | bytes) -> list[MediaRecord]:
    """Get the media items on a page from raw Parsoid HTML.

    Args:
        html: Raw Parsoid HTML

    Returns:
        Media records in order of first appearance, duplicates removed

    Raises:
        DocumentParseError: If the input cannot be parsed as a document
    """
    doc = parse_document(html)
    candidates = [elem for elem in doc.select(", ".join(MEDIA_SELECTORS)) if _keep_candidate(elem)]
    return dedupe(build_record(elem) for elem in candidates)


def merge(
    metadata_by_title: Mapping[str, Mapping[str, Any]] | None, records: Iterable[MediaRecord]
) -> list[dict[str, Any]]:
    """Combine extracted records with per-title metadata into the published payload.

    Metadata is shallow-merged over the extracted fields. ``title`` is only a
    join key and is removed; videos expose ``sources`` and never ``original``.
    """
    metadata_by_title = metadata_by_title or {}
    items: list[dict[str, Any]] = []
    for record in records:
        item = record.to_payload()
        if record.title:
            item.update(metadata_by_title.get(record.title) or {})
        item.pop("title", None)

        if "sources" in item:
            item.pop("original", None)
        items.append(item)
    return items


def get_media_list(
    html: str | bytes, metadata_by_title: Mapping[str, Mapping[str, Any]] | None = None
) -> list[dict[str, Any]]:
    """Extract and merge in one step."""
    return merge(metadata_by_title, extract(html))
