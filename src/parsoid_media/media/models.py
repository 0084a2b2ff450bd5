# ABOUTME: Pydantic models for media items extracted from Parsoid HTML
# ABOUTME: Serializes to the gallery payload shape (aliases applied, unset fields dropped)

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

AudioType = Literal["pronunciation", "spoken", "generic"]


class Caption(BaseModel):
    """Caption taken from a <figcaption> element."""

    html: str = Field(..., description="Inner markup of the figcaption")
    text: str = Field(..., description="Plain text of the figcaption")


class VideoSource(BaseModel):
    """One transcode of a video, from a <source> element."""

    url: str | None = Field(None, description="Source URL")
    mime: str | None = Field(None, description="MIME type without parameters")
    codecs: list[str] = Field(default_factory=list, description="Codecs listed in the type parameter")
    name: str | None = Field(None, description="Display name of the transcode")
    short_name: str | None = Field(None, description="Short display name of the transcode")
    width: int | None = Field(None, description="Width in pixels")
    height: int | None = Field(None, description="Height in pixels")


class Original(BaseModel):
    """Original file reference, set at extraction time for math images only."""

    source: str | None = None
    mime: str


class MediaRecord(BaseModel):
    """A single media item on a page, in the order it first appears."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    title: str | None = Field(None, description="File page title; join key for metadata, never published")
    section_id: int | None = Field(None, description="data-mw-section-id of the enclosing <section>")
    type: str = Field(..., description="Output discriminator: image, video, audio or unknown")
    caption: Caption | None = None
    start_time: Any = None
    end_time: Any = None
    thumb_time: Any = None
    audio_type: AudioType | None = None
    gallery_id: str | None = None
    sources: list[VideoSource] | None = None
    show_in_gallery: bool = Field(False, serialization_alias="showInGallery")
    original: Original | None = None

    @property
    def dedupe_key(self) -> str | None:
        """Identity used to drop repeated items: the title, else the original source."""
        if self.title:
            return self.title
        if self.original is not None:
            return self.original.source
        return None

    def to_payload(self) -> dict[str, Any]:
        """JSON-ready dict with unset values omitted."""
        return self.model_dump(by_alias=True, exclude_none=True)
