from typing import Optional

import structlog

from adapters.meta.client import MetaClient, normalize_ad_account_id, to_created_resource
from adapters.meta.models.adset_model import AdSetSpec
from adapters.meta.models.resource_model import CreatedResource
from adapters.meta.transformers import transform_adset, transform_targeting
from adapters.meta.validators import (
    validate_country_overlap,
    validate_objective_optimization_goal,
)
from core.credentials import Credential

logger = structlog.get_logger(__name__)


class MetaAdSetAdapter:
    def _get_client(self, credential: Credential) -> MetaClient:
        return MetaClient(credential)

    def validate(self, spec: AdSetSpec, campaign_objective: Optional[str]) -> None:
        """The parent objective is required: ad set and campaign are created separately."""
        validate_objective_optimization_goal(
            campaign_objective, spec.optimization_goal
        ).raise_for_error()
        targeting = transform_targeting(spec.targeting.model_dump(mode="json", exclude_none=True))
        validate_country_overlap(targeting).raise_for_error()

    async def create(
        self,
        ad_account_id: str,
        campaign_id: str,
        spec: AdSetSpec,
        credential: Credential,
        *,
        campaign_objective: Optional[str],
        timezone_name: Optional[str] = None,
    ) -> CreatedResource:
        self.validate(spec, campaign_objective)
        account_id = normalize_ad_account_id(ad_account_id)
        payload = transform_adset(spec, campaign_id, timezone_name or spec.timezone_name)

        response = await self._get_client(credential).post_form(
            f"/act_{account_id}/adsets",
            data=payload,
        )
        created = to_created_resource(response, "ad set")
        logger.info(
            "meta_adset_created",
            ad_account_id=account_id,
            campaign_id=campaign_id,
            adset_id=created.id,
        )
        return created


meta_adset_adapter = MetaAdSetAdapter()
