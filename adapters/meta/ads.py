import structlog

from adapters.meta.client import MetaClient, normalize_ad_account_id, to_created_resource
from adapters.meta.models.ad_model import AdSpec
from adapters.meta.models.resource_model import CreatedResource
from adapters.meta.transformers import transform_ad
from core.credentials import Credential
from exceptions.custom_exceptions import BusinessValidationException

logger = structlog.get_logger(__name__)


class MetaAdAdapter:
    def _get_client(self, credential: Credential) -> MetaClient:
        return MetaClient(credential)

    def validate(self, spec: AdSpec, adset_id: str, creative_id: str) -> None:
        if not spec.name or not adset_id or not creative_id:
            raise BusinessValidationException("Ad name, adset_id, and creative_id are required")

    async def create(
        self,
        ad_account_id: str,
        adset_id: str,
        creative_id: str,
        spec: AdSpec,
        credential: Credential,
    ) -> CreatedResource:
        self.validate(spec, adset_id, creative_id)
        account_id = normalize_ad_account_id(ad_account_id)
        response = await self._get_client(credential).post_form(
            f"/act_{account_id}/ads",
            data=transform_ad(spec, adset_id, creative_id),
        )
        created = to_created_resource(response, "ad")
        logger.info("meta_ad_created", ad_account_id=account_id, adset_id=adset_id, ad_id=created.id)
        return created


meta_ad_adapter = MetaAdAdapter()
