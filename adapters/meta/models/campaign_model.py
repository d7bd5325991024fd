from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, model_validator

from adapters.meta.models.budget_model import Budget, fold_budget_fields


class CampaignObjective(str, Enum):
    # ODAX objectives
    OUTCOME_AWARENESS = "OUTCOME_AWARENESS"
    OUTCOME_TRAFFIC = "OUTCOME_TRAFFIC"
    OUTCOME_ENGAGEMENT = "OUTCOME_ENGAGEMENT"
    OUTCOME_LEADS = "OUTCOME_LEADS"
    OUTCOME_APP_PROMOTION = "OUTCOME_APP_PROMOTION"
    OUTCOME_SALES = "OUTCOME_SALES"
    # Legacy objectives
    LINK_CLICKS = "LINK_CLICKS"
    CONVERSIONS = "CONVERSIONS"
    LEAD_GENERATION = "LEAD_GENERATION"
    APP_INSTALLS = "APP_INSTALLS"
    BRAND_AWARENESS = "BRAND_AWARENESS"
    REACH = "REACH"
    VIDEO_VIEWS = "VIDEO_VIEWS"
    POST_ENGAGEMENT = "POST_ENGAGEMENT"
    PAGE_LIKES = "PAGE_LIKES"
    EVENT_RESPONSES = "EVENT_RESPONSES"
    MESSAGES = "MESSAGES"
    PRODUCT_CATALOG_SALES = "PRODUCT_CATALOG_SALES"


class ResourceStatus(str, Enum):
    ACTIVE = "ACTIVE"
    PAUSED = "PAUSED"


class SpecialAdCategory(str, Enum):
    NONE = "NONE"
    EMPLOYMENT = "EMPLOYMENT"
    HOUSING = "HOUSING"
    FINANCIAL_PRODUCTS_SERVICES = "FINANCIAL_PRODUCTS_SERVICES"
    ISSUES_ELECTIONS_POLITICS = "ISSUES_ELECTIONS_POLITICS"
    ONLINE_GAMBLING_AND_GAMING = "ONLINE_GAMBLING_AND_GAMING"


class BidStrategy(str, Enum):
    LOWEST_COST_WITHOUT_CAP = "LOWEST_COST_WITHOUT_CAP"
    LOWEST_COST_WITH_BID_CAP = "LOWEST_COST_WITH_BID_CAP"
    COST_CAP = "COST_CAP"
    LOWEST_COST_WITH_MIN_ROAS = "LOWEST_COST_WITH_MIN_ROAS"


class CampaignSpec(BaseModel):
    name: str = Field(..., min_length=1)
    objective: CampaignObjective
    status: ResourceStatus = ResourceStatus.PAUSED
    special_ad_categories: list[SpecialAdCategory] = Field(default_factory=list)
    bid_strategy: Optional[BidStrategy] = None
    budget: Optional[Budget] = Field(
        default=None,
        description="Campaign budget optimization; leave unset to budget per ad set",
    )

    @model_validator(mode="before")
    @classmethod
    def fold_budget(cls, data):
        return fold_budget_fields(data, required=False)


class CreateCampaignRequest(BaseModel):
    ad_account_id: str = Field(..., min_length=1)
    campaign: CampaignSpec
