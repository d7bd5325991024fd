from typing import Annotated, Any, Optional, Union

from pydantic import BaseModel, Discriminator, Field, Tag, field_validator, model_validator

from adapters.meta.asset_feed_builder import build_asset_feed_spec
from adapters.meta.models.asset_feed_model import AssetFeedInput, CallToActionType
from adapters.meta.validators import validate_asset_feed_spec, validate_creative_type
from exceptions.custom_exceptions import BaseAppException


class CallToActionValue(BaseModel):
    link: Optional[str] = None


class CallToAction(BaseModel):
    type: CallToActionType
    value: Optional[CallToActionValue] = None


class LinkData(BaseModel):
    """Website destination for a single-image link ad."""

    link: str
    message: Optional[str] = Field(default=None, description="Primary text (body)")
    name: Optional[str] = Field(default=None, description="Headline")
    description: Optional[str] = None
    picture: Optional[str] = None
    image_hash: Optional[str] = None
    call_to_action: Optional[CallToAction] = None

    @field_validator("link")
    @classmethod
    def validate_website_link(cls, value: str):
        if not value.startswith(("http://", "https://")):
            raise ValueError("link must be a website URL starting with http:// or https://")
        return value


class ObjectStorySpec(BaseModel):
    page_id: str = Field(..., min_length=1)
    instagram_user_id: Optional[str] = None
    link_data: LinkData


class StandardCreativeSpec(BaseModel):
    name: str = Field(..., min_length=1)
    object_story_spec: ObjectStorySpec
    url_tags: Optional[str] = None


class PlacementCreativeSpec(BaseModel):
    """Minimal story (``page_id`` only) plus an asset feed.

    Either pass a ready ``asset_feed_spec`` or the builder input
    ``asset_feed``; the latter is converted during validation.
    """

    name: str = Field(..., min_length=1)
    object_story_spec: dict[str, Any]
    asset_feed_spec: Optional[dict[str, Any]] = None
    asset_feed: Optional[AssetFeedInput] = Field(default=None, exclude=True)
    url_tags: Optional[str] = None

    @model_validator(mode="after")
    def build_and_validate_feed(self):
        if self.asset_feed_spec is not None and self.asset_feed is not None:
            raise ValueError("Provide either asset_feed_spec or asset_feed, not both")
        if self.asset_feed is not None:
            try:
                self.asset_feed_spec = build_asset_feed_spec(self.asset_feed)
            except BaseAppException as exc:
                raise ValueError(exc.message)

        for result in (
            validate_creative_type(self.object_story_spec, self.asset_feed_spec),
            validate_asset_feed_spec(self.asset_feed_spec),
        ):
            if not result.valid:
                raise ValueError(result.error)
        return self


def _creative_kind(value: Any) -> str:
    if isinstance(value, dict):
        has_feed = value.get("asset_feed_spec") is not None or value.get("asset_feed") is not None
        return "placement" if has_feed else "standard"
    return "placement" if isinstance(value, PlacementCreativeSpec) else "standard"


CreativeSpec = Annotated[
    Union[
        Annotated[StandardCreativeSpec, Tag("standard")],
        Annotated[PlacementCreativeSpec, Tag("placement")],
    ],
    Discriminator(_creative_kind),
]


class CreateCreativeRequest(BaseModel):
    ad_account_id: str = Field(..., min_length=1)
    creative: StandardCreativeSpec


class CreatePlacementCreativeRequest(BaseModel):
    ad_account_id: str = Field(..., min_length=1)
    creative: PlacementCreativeSpec
