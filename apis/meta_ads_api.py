from fastapi import APIRouter, Depends, File, Form, Query, UploadFile
import structlog

from adapters.meta.ads import meta_ad_adapter
from adapters.meta.adsets import meta_adset_adapter
from adapters.meta.campaigns import meta_campaign_adapter
from adapters.meta.creatives import meta_creative_adapter
from adapters.meta.images import meta_ad_image_adapter
from adapters.meta.models import (
    CampaignObjective,
    CreateAdRequest,
    CreateAdSetRequest,
    CreateCampaignRequest,
    CreateCreativeRequest,
    CreatePlacementCreativeRequest,
    ErrorKind,
    FullCampaignRequest,
)
from adapters.meta.validators import get_allowed_optimization_goals
from core.credentials import Credential, require_credential
from exceptions.custom_exceptions import BusinessValidationException
from services.meta.adset_context_service import adset_context_service
from services.meta.campaign_pipeline import campaign_pipeline
from utils.response_helpers import error_response, success_response

logger = structlog.get_logger(__name__)

router = APIRouter(prefix="/api", tags=["meta-ads"])

PARTIAL_FAILURE_STATUS = {
    ErrorKind.VALIDATION: 422,
    ErrorKind.API: 502,
    ErrorKind.TRANSPORT: 504,
    ErrorKind.INTERNAL: 500,
}

# Create Campaign

@router.post("/campaigns/create")
async def create_campaign(
    request: CreateCampaignRequest,
    credential: Credential = Depends(require_credential),
):
    created = await meta_campaign_adapter.create(request.ad_account_id, request.campaign, credential)
    return success_response(created.raw_response, campaign_id=created.id)

# Create Ad Set

@router.post("/adsets/create")
async def create_adset(
    request: CreateAdSetRequest,
    credential: Credential = Depends(require_credential),
):
    objective = request.campaign_objective.value if request.campaign_objective else None
    if objective is None:
        objective = await meta_campaign_adapter.get_objective(request.campaign_id, credential)
        logger.info("campaign_objective_fetched", campaign_id=request.campaign_id, objective=objective)

    meta_adset_adapter.validate(request.adset, objective)
    context = await adset_context_service.resolve(request.ad_account_id, request.adset, credential)
    created = await meta_adset_adapter.create(
        request.ad_account_id,
        request.campaign_id,
        request.adset,
        credential,
        campaign_objective=objective,
        timezone_name=context.timezone_name,
    )
    return success_response(created.raw_response, adset_id=created.id)

# Upload Image

@router.post("/images/upload")
async def upload_image(
    ad_account_id: str = Form(...),
    image: UploadFile = File(...),
    credential: Credential = Depends(require_credential),
):
    content = await image.read()
    if not content:
        raise BusinessValidationException("Image file is required")

    uploaded = await meta_ad_image_adapter.upload_image(
        ad_account_id,
        content,
        credential,
        filename=image.filename or "image.jpg",
    )
    return success_response(uploaded.raw_response, image_hash=uploaded.hash, url=uploaded.url)

# Create Creative (standard)

@router.post("/creatives/create")
async def create_creative(
    request: CreateCreativeRequest,
    credential: Credential = Depends(require_credential),
):
    created = await meta_creative_adapter.create_standard(request.ad_account_id, request.creative, credential)
    return success_response(created.raw_response, creative_id=created.id)

# Create Creative (placement asset customization)

@router.post("/creatives/create-with-placements")
async def create_creative_with_placements(
    request: CreatePlacementCreativeRequest,
    credential: Credential = Depends(require_credential),
):
    created = await meta_creative_adapter.create_with_placements(
        request.ad_account_id, request.creative, credential
    )
    return success_response(created.raw_response, creative_id=created.id)

# Create Ad

@router.post("/ads/create")
async def create_ad(
    request: CreateAdRequest,
    credential: Credential = Depends(require_credential),
):
    created = await meta_ad_adapter.create(
        request.ad_account_id,
        request.adset_id,
        request.creative_id,
        request.ad,
        credential,
    )
    return success_response(created.raw_response, ad_id=created.id)

# Campaign -> Ad Set -> Creative -> Ad

@router.post("/campaigns/create-full")
async def create_full_campaign(
    request: FullCampaignRequest,
    credential: Credential = Depends(require_credential),
):
    result = await campaign_pipeline.run(request, credential)

    if result.succeeded:
        return success_response(
            {"created_resources": result.created_resources},
            ids=result.created_ids,
            message="Campaign created successfully",
        )

    return error_response(
        result.error.message,
        status_code=PARTIAL_FAILURE_STATUS[result.error.kind],
        error_details=result.error,
        failed_stage=result.failed_stage,
        created_ids=result.created_ids.model_dump(exclude_none=True),
        created_resources=result.created_resources,
        message="Campaign creation failed. Some resources may have been created. Use created_ids for cleanup.",
    )

# Lookups

@router.get("/optimization-goals")
async def optimization_goals(objective: CampaignObjective = Query(...)):
    return success_response({
        "objective": objective.value,
        "allowed_goals": get_allowed_optimization_goals(objective),
    })
