# ABOUTME: Parsoid DOM markers and the classifier that maps elements to media types
# ABOUTME: Also holds the blacklist and minimum-size filters applied before extraction

from collections.abc import Callable
from enum import Enum

from bs4 import BeautifulSoup, Tag

MATHOID_IMG_CLASS = "mwe-math-fallback-image-inline"
GALLERY_CLASS = "gallery"
SPOKEN_WIKIPEDIA_ID = "section_SpokenWikipedia"
SECTION_ID_ATTR = "data-mw-section-id"
MEDIA_LINK_REL = "mw:MediaLink"
MIN_IMAGE_SIZE = 48

MEDIA_SELECTORS = [
    '[typeof^="mw:Image"]',
    '[typeof^="mw:Video"]',
    '[typeof^="mw:Audio"]',
    f'[rel="{MEDIA_LINK_REL}"]',
    f"img.{MATHOID_IMG_CLASS}",
]

# Elements (or descendants of elements) carrying these classes never reach the gallery
MEDIA_BLACKLIST = frozenset(
    [
        "noviewer",
        "metadata",
        "ambox",
        "navbox",
        "mbox-image",
        "mbox-small",
    ]
)


class MediaType(Enum):
    """A MediaWiki media type as represented in Parsoid HTML.

    Each member carries the selector for the child element holding the core
    resource (``None`` when the element itself is the resource) and the name
    used for the type in the endpoint response. Members sharing a name stay
    distinct because the value tuple includes the member key.
    """

    IMAGE = ("image", "img", "image")
    VIDEO = ("video", "video", "video")
    # TODO: narrow to "audio" once Parsoid stops emitting <video> for audio files
    AUDIO = ("audio", "audio, video", "audio")
    PRONUNCIATION = ("pronunciation", None, "audio")
    MATH_IMAGE = ("math_image", None, "image")
    UNKNOWN = ("unknown", None, "unknown")

    def __init__(self, key: str, resource_selector: str | None, output_name: str):
        self.key = key
        self.resource_selector = resource_selector
        self.output_name = output_name

    @property
    def show_in_gallery(self) -> bool:
        return self in (MediaType.IMAGE, MediaType.VIDEO)


_TYPEOF_PREFIXES = {
    "mw:Image": MediaType.IMAGE,
    "mw:Video": MediaType.VIDEO,
    "mw:Audio": MediaType.AUDIO,
}


def get_attr(elem: Tag, name: str) -> str | None:
    """Return an attribute as a plain string.

    BeautifulSoup splits multi-valued attributes such as ``class`` and ``rel``
    into lists; those are joined back with single spaces.
    """
    value = elem.get(name)
    if isinstance(value, list):
        return " ".join(value)
    return value


def has_class(elem: Tag, class_name: str) -> bool:
    return class_name in elem.get_attribute_list("class")


def is_mathoid_image(elem: Tag) -> bool:
    return has_class(elem, MATHOID_IMG_CLASS)


def classify(elem: Tag) -> MediaType | None:
    """Classify an element by its Parsoid markers.

    ``typeof`` wins over ``rel``, which wins over the Mathoid class. Elements
    matching none of them are not media.
    """
    typeof = get_attr(elem, "typeof")
    if typeof:
        return _TYPEOF_PREFIXES.get(typeof[:8], MediaType.UNKNOWN)
    if get_attr(elem, "rel") == MEDIA_LINK_REL:
        return MediaType.PRONUNCIATION
    if is_mathoid_image(elem):
        return MediaType.MATH_IMAGE
    return None


def closest(elem: Tag, predicate: Callable[[Tag], bool]) -> Tag | None:
    """Walk from ``elem`` up to the document root, returning the first match.

    The element itself is tested first. The BeautifulSoup document object is
    not an element and is never returned.
    """
    node: Tag | None = elem
    while node is not None and not isinstance(node, BeautifulSoup):
        if predicate(node):
            return node
        node = node.parent
    return None


def is_disallowed(elem: Tag) -> bool:
    """Return whether the element or an ancestor is part of a blacklisted class."""
    return closest(elem, lambda node: not MEDIA_BLACKLIST.isdisjoint(node.get_attribute_list("class"))) is not None


def _parse_dimension(value: str | None) -> float | None:
    if value is None:
        return None
    try:
        return float(value.strip())
    except ValueError:
        return None


def is_too_small(img: Tag) -> bool:
    """Return whether the on-page size of an <img> is small enough to filter out.

    Missing or non-numeric dimensions are unknown, and unknown never filters.
    """
    for name in ("width", "height"):
        size = _parse_dimension(get_attr(img, name))
        if size is not None and size < MIN_IMAGE_SIZE:
            return True
    return False


def resolve_resource(elem: Tag, media_type: MediaType) -> Tag | None:
    """Find the element carrying the primary resource for a classified element.

    Types without a resource selector are their own resource.
    """
    selector = media_type.resource_selector
    if selector is None or elem.css.match(selector):
        return elem
    return elem.select_one(selector)
