# ABOUTME: Tests for thumbnail URL rescaling helpers
# ABOUTME: Validates width substitution, upscale refusal and srcset construction

import pytest

from parsoid_media.mwapi.thumbnails import (
    build_image_url_set,
    build_lead_image_urls,
    build_srcset,
    scaled_thumb_url,
)

THUMB = "https://upload.wikimedia.org/wikipedia/commons/thumb/0/0b/Foo.jpg/640px-Foo.jpg"
ORIGINAL = "https://upload.wikimedia.org/wikipedia/commons/0/0b/Foo.jpg"


class TestScaledThumbUrl:
    """Test scaling a single thumbnail URL."""

    @pytest.mark.parametrize(
        "width,original_width,expected",
        [
            (320, None, "https://upload.wikimedia.org/wikipedia/commons/thumb/0/0b/Foo.jpg/320px-Foo.jpg"),
            (640, None, None),
            (800, None, None),
            (800, 2000, "https://upload.wikimedia.org/wikipedia/commons/thumb/0/0b/Foo.jpg/800px-Foo.jpg"),
            (800, 700, None),
        ],
    )
    def test_scaling(self, width, original_width, expected):
        assert scaled_thumb_url(THUMB, width, original_width) == expected

    def test_non_thumb_url(self):
        assert scaled_thumb_url(ORIGINAL, 320) is None

    def test_thumb_url_without_width(self):
        assert scaled_thumb_url("https://upload.wikimedia.org/wikipedia/commons/thumb/0/0b/Foo.jpg", 320) is None

    def test_only_the_file_segment_changes(self):
        url = "https://upload.wikimedia.org/wikipedia/commons/thumb/6/6f/640px-Foo.jpg/640px-640px-Foo.jpg"
        assert scaled_thumb_url(url, 320).endswith("/6f/640px-Foo.jpg/320px-640px-Foo.jpg")


class TestUrlSets:
    """Test building URL sets for several widths."""

    def test_build_image_url_set_falls_back_to_initial(self):
        urls = build_image_url_set(THUMB, [320, 1024])

        assert urls[320].endswith("/320px-Foo.jpg")
        assert urls[1024] == THUMB

    def test_lead_image_buckets(self):
        assert list(build_lead_image_urls(THUMB)) == [320, 640, 800, 1024]

    def test_srcset_with_known_original(self):
        srcset = build_srcset(THUMB, 320, original_width=4000)

        assert [entry["scale"] for entry in srcset] == ["1x", "1.5x", "2x"]
        assert srcset[1]["src"].endswith("/480px-Foo.jpg")
        assert srcset[2]["src"].endswith("/640px-Foo.jpg")

    def test_srcset_never_upscales(self):
        srcset = build_srcset(THUMB, 320, original_width=400)

        assert srcset == [{"src": THUMB.replace("640px", "320px"), "scale": "1x"}]

    def test_srcset_for_non_thumb_url(self):
        assert build_srcset(ORIGINAL, 320) == [{"src": ORIGINAL, "scale": "1x"}]
