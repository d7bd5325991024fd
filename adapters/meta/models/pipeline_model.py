from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, Field

from adapters.meta.models.ad_model import AdSpec
from adapters.meta.models.adset_model import AdSetSpec
from adapters.meta.models.campaign_model import CampaignSpec
from adapters.meta.models.creative_model import CreativeSpec
from adapters.meta.models.resource_model import ResourceType


class PipelineStage(str, Enum):
    CAMPAIGN = "campaign"
    ADSET = "adset"
    CREATIVE = "creative"
    AD = "ad"


class PipelineStatus(str, Enum):
    SUCCEEDED = "succeeded"
    FAILED_PARTIAL = "failed_partial"


class ErrorKind(str, Enum):
    VALIDATION = "validation"
    API = "api"
    TRANSPORT = "transport"
    INTERNAL = "internal"


class FullCampaignRequest(BaseModel):
    ad_account_id: str = Field(..., min_length=1)
    campaign: CampaignSpec
    adset: AdSetSpec
    creative: CreativeSpec
    ad: AdSpec


class CreatedIds(BaseModel):
    """Filled in stage order; a failed run keeps the prefix that succeeded."""

    campaign_id: Optional[str] = None
    adset_id: Optional[str] = None
    creative_id: Optional[str] = None
    ad_id: Optional[str] = None


class CreatedResourceRef(BaseModel):
    resource_type: ResourceType
    id: str


class PipelineError(BaseModel):
    kind: ErrorKind
    message: str
    code: Optional[int] = None
    error_subcode: Optional[int] = None
    error_user_msg: Optional[str] = None
    fbtrace_id: Optional[str] = None
    details: dict[str, Any] = Field(default_factory=dict)


class PipelineResult(BaseModel):
    status: PipelineStatus
    created_ids: CreatedIds = Field(default_factory=CreatedIds)
    created_resources: list[CreatedResourceRef] = Field(default_factory=list)
    failed_stage: Optional[PipelineStage] = None
    error: Optional[PipelineError] = None

    @property
    def succeeded(self) -> bool:
        return self.status is PipelineStatus.SUCCEEDED
