from enum import Enum
from typing import Optional

from pydantic import AliasChoices, BaseModel, Field


class CallToActionType(str, Enum):
    APPLY_NOW = "APPLY_NOW"
    BOOK_NOW = "BOOK_NOW"
    BUY_NOW = "BUY_NOW"
    BUY_TICKETS = "BUY_TICKETS"
    CONTACT_US = "CONTACT_US"
    DOWNLOAD = "DOWNLOAD"
    GET_OFFER = "GET_OFFER"
    GET_QUOTE = "GET_QUOTE"
    GET_SHOWTIMES = "GET_SHOWTIMES"
    LEARN_MORE = "LEARN_MORE"
    LISTEN_NOW = "LISTEN_NOW"
    NO_BUTTON = "NO_BUTTON"
    ORDER_NOW = "ORDER_NOW"
    PLAY_GAME = "PLAY_GAME"
    REQUEST_TIME = "REQUEST_TIME"
    SEE_MENU = "SEE_MENU"
    SHOP_NOW = "SHOP_NOW"
    SIGN_UP = "SIGN_UP"
    SUBSCRIBE = "SUBSCRIBE"
    WATCH_MORE = "WATCH_MORE"


class AdFormat(str, Enum):
    SINGLE_IMAGE = "SINGLE_IMAGE"
    SINGLE_VIDEO = "SINGLE_VIDEO"
    CAROUSEL = "CAROUSEL"


class ImageAsset(BaseModel):
    hash: str = Field(..., validation_alias=AliasChoices("hash", "image_hash"))
    labels: list[str] = Field(default_factory=list)
    image_crops: Optional[dict] = None


class VideoAsset(BaseModel):
    video_id: str
    thumbnail_url: Optional[str] = None
    labels: list[str] = Field(default_factory=list)


class TextAsset(BaseModel):
    text: str = ""
    labels: list[str] = Field(default_factory=list)


class LinkUrlAsset(BaseModel):
    website_url: str
    display_url: Optional[str] = None
    deeplink_url: Optional[str] = None
    labels: list[str] = Field(default_factory=list)


class PlacementRule(BaseModel):
    """One placement selector plus the asset label it should show there."""

    publisher_platforms: list[str] = Field(default_factory=list)
    facebook_positions: list[str] = Field(default_factory=list)
    instagram_positions: list[str] = Field(default_factory=list)
    messenger_positions: list[str] = Field(default_factory=list)
    audience_network_positions: list[str] = Field(default_factory=list)
    threads_positions: list[str] = Field(default_factory=list)

    image_label: Optional[str] = None
    video_label: Optional[str] = None
    carousel_label: Optional[str] = None
    title_label: Optional[str] = None
    body_label: Optional[str] = None
    description_label: Optional[str] = None
    link_url_label: Optional[str] = None


class AssetFeedInput(BaseModel):
    ad_formats: list[AdFormat] = Field(default_factory=lambda: [AdFormat.SINGLE_IMAGE])
    images: list[ImageAsset] = Field(default_factory=list)
    videos: list[VideoAsset] = Field(default_factory=list)
    titles: list[TextAsset] = Field(default_factory=list)
    bodies: list[TextAsset] = Field(default_factory=list)
    descriptions: list[TextAsset] = Field(default_factory=list)
    link_urls: list[LinkUrlAsset] = Field(default_factory=list)
    call_to_action_types: list[CallToActionType] = Field(default_factory=list)
    placements: list[PlacementRule] = Field(default_factory=list)
