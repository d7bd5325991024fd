from pydantic import BaseModel, Field

from adapters.meta.models.campaign_model import ResourceStatus


class AdSpec(BaseModel):
    name: str = Field(..., min_length=1)
    status: ResourceStatus = ResourceStatus.PAUSED


class CreateAdRequest(BaseModel):
    ad_account_id: str = Field(..., min_length=1)
    adset_id: str = Field(..., min_length=1)
    creative_id: str = Field(..., min_length=1)
    ad: AdSpec
