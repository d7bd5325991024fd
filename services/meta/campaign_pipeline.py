"""Campaign -> ad set -> creative -> ad, one Graph call per stage.

Stages run strictly in order because each needs the id created by the one
before. A failing stage stops the run; nothing already created is deleted.
The caller gets back every id created so far, tagged with its resource type,
so the leftovers can be cleaned up by hand or by a reconciliation job.
"""

from typing import Optional

import structlog

from adapters.meta.ads import MetaAdAdapter, meta_ad_adapter
from adapters.meta.adsets import MetaAdSetAdapter, meta_adset_adapter
from adapters.meta.campaigns import MetaCampaignAdapter, meta_campaign_adapter
from adapters.meta.creatives import MetaCreativeAdapter, meta_creative_adapter
from adapters.meta.exceptions import MetaAPIError, MetaTransportError
from adapters.meta.models.creative_model import PlacementCreativeSpec
from adapters.meta.models.pipeline_model import (
    CreatedIds,
    CreatedResourceRef,
    ErrorKind,
    FullCampaignRequest,
    PipelineError,
    PipelineResult,
    PipelineStage,
    PipelineStatus,
)
from adapters.meta.models.resource_model import ResourceType
from core.credentials import Credential
from exceptions.custom_exceptions import BusinessValidationException
from services.meta.adset_context_service import AdSetContextService, adset_context_service
from utils.redaction import redact

logger = structlog.get_logger(__name__)

STAGE_RESOURCE = {
    PipelineStage.CAMPAIGN: (ResourceType.CAMPAIGN, "campaign_id"),
    PipelineStage.ADSET: (ResourceType.ADSET, "adset_id"),
    PipelineStage.CREATIVE: (ResourceType.CREATIVE, "creative_id"),
    PipelineStage.AD: (ResourceType.AD, "ad_id"),
}


def to_pipeline_error(exc: Exception) -> PipelineError:
    if isinstance(exc, MetaAPIError):
        return PipelineError(
            kind=ErrorKind.API,
            message=exc.message,
            code=exc.code,
            error_subcode=exc.error_subcode,
            error_user_msg=exc.error_user_msg,
            fbtrace_id=exc.fbtrace_id,
            details=exc.details(),
        )
    if isinstance(exc, MetaTransportError):
        return PipelineError(kind=ErrorKind.TRANSPORT, message=exc.message)
    if isinstance(exc, BusinessValidationException):
        return PipelineError(kind=ErrorKind.VALIDATION, message=exc.message)
    return PipelineError(
        kind=ErrorKind.INTERNAL,
        message=redact(str(exc)) or type(exc).__name__,
    )


class _Progress:
    def __init__(self):
        self.ids = CreatedIds()
        self.resources: list[CreatedResourceRef] = []
        self.stage: PipelineStage = PipelineStage.CAMPAIGN

    def record(self, resource_id: str) -> None:
        resource_type, field = STAGE_RESOURCE[self.stage]
        setattr(self.ids, field, resource_id)
        self.resources.append(CreatedResourceRef(resource_type=resource_type, id=resource_id))
        logger.info("pipeline_stage_succeeded", stage=self.stage.value, resource_id=resource_id)

    def advance(self, stage: PipelineStage) -> None:
        self.stage = stage


class CampaignPipeline:
    def __init__(
        self,
        campaigns: Optional[MetaCampaignAdapter] = None,
        adsets: Optional[MetaAdSetAdapter] = None,
        creatives: Optional[MetaCreativeAdapter] = None,
        ads: Optional[MetaAdAdapter] = None,
        context: Optional[AdSetContextService] = None,
    ):
        self.campaigns = campaigns or meta_campaign_adapter
        self.adsets = adsets or meta_adset_adapter
        self.creatives = creatives or meta_creative_adapter
        self.ads = ads or meta_ad_adapter
        self.context = context or adset_context_service

    def preflight(self, request: FullCampaignRequest) -> None:
        """Run every stage's local checks; raises before any network call."""
        self.campaigns.validate(request.campaign)
        self.adsets.validate(request.adset, request.campaign.objective.value)
        self.creatives.validate(request.creative)
        if not request.ad.name:
            raise BusinessValidationException("Ad name is required")

    async def run(self, request: FullCampaignRequest, credential: Credential) -> PipelineResult:
        self.preflight(request)
        adset_context = await self.context.resolve(request.ad_account_id, request.adset, credential)

        log = logger.bind(ad_account_id=request.ad_account_id)
        progress = _Progress()
        try:
            campaign = await self.campaigns.create(request.ad_account_id, request.campaign, credential)
            progress.record(campaign.id)

            progress.advance(PipelineStage.ADSET)
            adset = await self.adsets.create(
                request.ad_account_id,
                campaign.id,
                request.adset,
                credential,
                campaign_objective=request.campaign.objective.value,
                timezone_name=adset_context.timezone_name,
            )
            progress.record(adset.id)

            progress.advance(PipelineStage.CREATIVE)
            if isinstance(request.creative, PlacementCreativeSpec):
                creative = await self.creatives.create_with_placements(
                    request.ad_account_id, request.creative, credential
                )
            else:
                creative = await self.creatives.create_standard(
                    request.ad_account_id, request.creative, credential
                )
            progress.record(creative.id)

            progress.advance(PipelineStage.AD)
            ad = await self.ads.create(
                request.ad_account_id, adset.id, creative.id, request.ad, credential
            )
            progress.record(ad.id)
        except Exception as exc:
            error = to_pipeline_error(exc)
            log.error(
                "pipeline_failed_partial",
                failed_stage=progress.stage.value,
                error_kind=error.kind.value,
                error=error.message,
                created_ids=progress.ids.model_dump(exclude_none=True),
                exc_info=error.kind is ErrorKind.INTERNAL,
            )
            return PipelineResult(
                status=PipelineStatus.FAILED_PARTIAL,
                created_ids=progress.ids,
                created_resources=progress.resources,
                failed_stage=progress.stage,
                error=error,
            )

        log.info("pipeline_succeeded", created_ids=progress.ids.model_dump())
        return PipelineResult(
            status=PipelineStatus.SUCCEEDED,
            created_ids=progress.ids,
            created_resources=progress.resources,
        )


campaign_pipeline = CampaignPipeline()
