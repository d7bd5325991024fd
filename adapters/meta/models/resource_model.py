from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, Field


class ResourceType(str, Enum):
    CAMPAIGN = "campaign"
    ADSET = "adset"
    CREATIVE = "creative"
    AD = "ad"
    IMAGE = "image"


class CreatedResource(BaseModel):
    id: str
    raw_response: dict[str, Any] = Field(default_factory=dict)


class UploadedImage(BaseModel):
    hash: str
    url: Optional[str] = None
    raw_response: dict[str, Any] = Field(default_factory=dict)


class AdAccount(BaseModel):
    id: str
    name: Optional[str] = None
    currency: Optional[str] = None
    timezone_name: Optional[str] = None
    business_id: Optional[str] = None
