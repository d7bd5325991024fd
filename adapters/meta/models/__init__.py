from .ad_model import AdSpec, CreateAdRequest
from .adset_model import (
    AdSetSpec,
    BillingEvent,
    CreateAdSetRequest,
    Gender,
    OptimizationGoal,
    PromotedObject,
    Targeting,
)
from .asset_feed_model import AdFormat, AssetFeedInput, CallToActionType, PlacementRule
from .budget_model import Budget, DailyBudget, LifetimeBudget
from .campaign_model import (
    BidStrategy,
    CampaignObjective,
    CampaignSpec,
    CreateCampaignRequest,
    ResourceStatus,
    SpecialAdCategory,
)
from .creative_model import (
    CreateCreativeRequest,
    CreatePlacementCreativeRequest,
    CreativeSpec,
    PlacementCreativeSpec,
    StandardCreativeSpec,
)
from .pipeline_model import (
    CreatedIds,
    CreatedResourceRef,
    ErrorKind,
    FullCampaignRequest,
    PipelineError,
    PipelineResult,
    PipelineStage,
    PipelineStatus,
)
from .resource_model import AdAccount, CreatedResource, ResourceType, UploadedImage

__all__ = [
    "AdSpec",
    "CreateAdRequest",
    "AdSetSpec",
    "BillingEvent",
    "CreateAdSetRequest",
    "Gender",
    "OptimizationGoal",
    "PromotedObject",
    "Targeting",
    "AdFormat",
    "AssetFeedInput",
    "CallToActionType",
    "PlacementRule",
    "Budget",
    "DailyBudget",
    "LifetimeBudget",
    "BidStrategy",
    "CampaignObjective",
    "CampaignSpec",
    "CreateCampaignRequest",
    "ResourceStatus",
    "SpecialAdCategory",
    "CreateCreativeRequest",
    "CreatePlacementCreativeRequest",
    "CreativeSpec",
    "PlacementCreativeSpec",
    "StandardCreativeSpec",
    "CreatedIds",
    "CreatedResourceRef",
    "ErrorKind",
    "FullCampaignRequest",
    "PipelineError",
    "PipelineResult",
    "PipelineStage",
    "PipelineStatus",
    "AdAccount",
    "CreatedResource",
    "ResourceType",
    "UploadedImage",
]
