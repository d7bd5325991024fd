from typing import Any

import structlog

from adapters.meta.client import MetaClient, normalize_ad_account_id, to_created_resource
from adapters.meta.models.campaign_model import CampaignSpec
from adapters.meta.models.resource_model import CreatedResource
from adapters.meta.transformers import transform_campaign
from adapters.meta.validators import OBJECTIVE_OPTIMIZATION_MAP, ValidationResult
from core.credentials import Credential

logger = structlog.get_logger(__name__)


class MetaCampaignAdapter:
    """Adapter for Meta Campaign operations."""

    def _get_client(self, credential: Credential) -> MetaClient:
        return MetaClient(credential)

    def validate(self, spec: CampaignSpec) -> None:
        if spec.objective.value not in OBJECTIVE_OPTIMIZATION_MAP:
            ValidationResult.fail(f"Unknown objective: {spec.objective.value}").raise_for_error()

    async def create(
        self,
        ad_account_id: str,
        spec: CampaignSpec,
        credential: Credential,
    ) -> CreatedResource:
        """Create a campaign in Meta Ads."""
        self.validate(spec)
        account_id = normalize_ad_account_id(ad_account_id)
        response = await self._get_client(credential).post_form(
            f"/act_{account_id}/campaigns",
            data=transform_campaign(spec),
        )
        created = to_created_resource(response, "campaign")
        logger.info("meta_campaign_created", ad_account_id=account_id, campaign_id=created.id)
        return created

    async def get(
        self,
        campaign_id: str,
        credential: Credential,
        fields: list[str] | None = None,
    ) -> dict[str, Any]:
        """Get campaign details."""
        params = {"fields": ",".join(fields)} if fields else None
        return await self._get_client(credential).get(f"/{campaign_id}", params=params)

    async def get_objective(self, campaign_id: str, credential: Credential) -> str:
        campaign = await self.get(campaign_id, credential, fields=["objective"])
        return campaign.get("objective", "")


meta_campaign_adapter = MetaCampaignAdapter()
