from datetime import datetime
from enum import Enum
from typing import Any, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, model_validator

from adapters.meta.models.budget_model import Budget, fold_budget_fields
from adapters.meta.models.campaign_model import BidStrategy, CampaignObjective, ResourceStatus
from adapters.meta.validators import validate_schedule


class Gender(str, Enum):
    ALL = "ALL"
    MALE = "MALE"
    FEMALE = "FEMALE"


class OptimizationGoal(str, Enum):
    AD_RECALL_LIFT = "AD_RECALL_LIFT"
    APP_INSTALLS = "APP_INSTALLS"
    APP_INSTALLS_AND_OFFSITE_CONVERSIONS = "APP_INSTALLS_AND_OFFSITE_CONVERSIONS"
    CONVERSATIONS = "CONVERSATIONS"
    EVENT_RESPONSES = "EVENT_RESPONSES"
    IMPRESSIONS = "IMPRESSIONS"
    LANDING_PAGE_VIEWS = "LANDING_PAGE_VIEWS"
    LEAD_GENERATION = "LEAD_GENERATION"
    LINK_CLICKS = "LINK_CLICKS"
    OFFSITE_CONVERSIONS = "OFFSITE_CONVERSIONS"
    PAGE_LIKES = "PAGE_LIKES"
    POST_ENGAGEMENT = "POST_ENGAGEMENT"
    QUALITY_LEAD = "QUALITY_LEAD"
    REACH = "REACH"
    THRUPLAY = "THRUPLAY"
    TWO_SECOND_CONTINUOUS_VIDEO_VIEWS = "TWO_SECOND_CONTINUOUS_VIDEO_VIEWS"
    VALUE = "VALUE"


class BillingEvent(str, Enum):
    IMPRESSIONS = "IMPRESSIONS"
    LINK_CLICKS = "LINK_CLICKS"
    THRUPLAY = "THRUPLAY"
    APP_INSTALLS = "APP_INSTALLS"
    PAGE_LIKES = "PAGE_LIKES"
    POST_ENGAGEMENT = "POST_ENGAGEMENT"


CountryEntry = Union[str, dict[str, Any]]


class GeoLocations(BaseModel):
    """Countries may be bare codes or objects such as ``{"code": "US", "name": ...}``."""

    model_config = ConfigDict(extra="allow")

    countries: list[CountryEntry] = Field(default_factory=list)
    excluded_countries: list[CountryEntry] = Field(default_factory=list)


class Targeting(BaseModel):
    # Placement lists and other Graph targeting keys pass through untouched.
    model_config = ConfigDict(extra="allow")

    geo_locations: GeoLocations = Field(default_factory=GeoLocations)
    excluded_geo_locations: Optional[GeoLocations] = None
    age_min: int = Field(18, ge=18, le=65)
    age_max: int = Field(65, ge=18, le=65)
    gender: Optional[Gender] = None
    genders: Optional[list[int]] = None
    locales: list[int] = Field(default_factory=list)

    @model_validator(mode="after")
    def validate_age_range(self):
        if self.age_min > self.age_max:
            raise ValueError("age_min cannot be greater than age_max")
        return self


class PromotedObject(BaseModel):
    model_config = ConfigDict(extra="allow")

    pixel_id: Optional[str] = None
    custom_event_type: Optional[str] = None
    page_id: Optional[str] = None
    application_id: Optional[str] = None
    object_store_url: Optional[str] = None


class AdSetSpec(BaseModel):
    name: str = Field(..., min_length=1)
    status: ResourceStatus = ResourceStatus.PAUSED
    budget: Budget
    targeting: Targeting
    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None
    optimization_goal: OptimizationGoal
    billing_event: BillingEvent = BillingEvent.IMPRESSIONS
    bid_strategy: Optional[BidStrategy] = None
    bid_amount: Optional[int] = Field(default=None, gt=0)
    promoted_object: Optional[PromotedObject] = None
    timezone_name: Optional[str] = Field(
        default=None,
        description="IANA timezone of the ad account, e.g. America/Los_Angeles",
    )

    @model_validator(mode="before")
    @classmethod
    def fold_budget(cls, data):
        return fold_budget_fields(data, required=True)

    @model_validator(mode="after")
    def check_schedule(self):
        result = validate_schedule(self.budget.type, self.start_time, self.end_time)
        if not result.valid:
            raise ValueError(result.error)
        return self


class CreateAdSetRequest(BaseModel):
    ad_account_id: str = Field(..., min_length=1)
    campaign_id: str = Field(..., min_length=1)
    campaign_objective: Optional[CampaignObjective] = Field(
        default=None,
        description="Parent objective; read from Meta when omitted",
    )
    adset: AdSetSpec
