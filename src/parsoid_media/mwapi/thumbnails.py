# ABOUTME: Thumbnail URL rescaling for Wikimedia upload URLs
# ABOUTME: Builds per-width URL sets and 1x/1.5x/2x srcset entries for gallery items

import re

THUMB_URL_PATH_RE = re.compile(r"/thumb/")
THUMB_WIDTH_RE = re.compile(r"(\d+)px-[^/]+$")

LEAD_IMAGE_S = 320
LEAD_IMAGE_M = 640
LEAD_IMAGE_L = 800
LEAD_IMAGE_XL = 1024

SRCSET_SCALES = (1, 1.5, 2)


def scaled_thumb_url(initial_url: str, desired_width: int, original_width: int | None = None) -> str | None:
    """Scale a single thumbnail URL to another width, if possible.

    Returns None for non-thumb URLs and when the desired width would upscale
    past the original (or past the current thumb when the original is unknown).

    >>> scaled_thumb_url("https://upload.wikimedia.org/wikipedia/commons/thumb/0/0b/Foo.jpg/640px-Foo.jpg", 320)
    'https://upload.wikimedia.org/wikipedia/commons/thumb/0/0b/Foo.jpg/320px-Foo.jpg'
    """
    if not THUMB_URL_PATH_RE.search(initial_url):
        return None
    match = THUMB_WIDTH_RE.search(initial_url)
    if not match:
        return None
    max_width = original_width or int(match.group(1))
    if max_width <= desired_width:
        return None
    new_tail = match.group(0).replace(match.group(1), str(desired_width), 1)
    return initial_url[: match.start()] + new_tail


def build_image_url_set(initial_url: str, desired_widths: list[int]) -> dict[int, str]:
    """Map each desired width to a thumb URL, falling back to the initial URL."""
    return {width: scaled_thumb_url(initial_url, width) or initial_url for width in desired_widths}


def build_lead_image_urls(initial_url: str) -> dict[int, str]:
    return build_image_url_set(initial_url, [LEAD_IMAGE_S, LEAD_IMAGE_M, LEAD_IMAGE_L, LEAD_IMAGE_XL])


def build_srcset(initial_url: str, base_width: int, original_width: int | None = None) -> list[dict[str, str]]:
    """Build srcset entries for a thumbnail at 1x, 1.5x and 2x pixel density.

    Densities that cannot be produced without upscaling are left out; 1x is
    always present.
    """
    srcset = []
    for scale in SRCSET_SCALES:
        width = int(base_width * scale)
        url = scaled_thumb_url(initial_url, width, original_width)
        if url is None:
            if scale != 1:
                continue
            url = initial_url
        srcset.append({"src": url, "scale": f"{scale:g}x"})
    return srcset
