import structlog

from adapters.meta.client import MetaClient, normalize_ad_account_id
from adapters.meta.models.resource_model import AdAccount
from core.credentials import Credential

logger = structlog.get_logger(__name__)

AD_ACCOUNT_FIELDS = ("name", "currency", "timezone_name", "business")


class MetaAccountAdapter:
    def _get_client(self, credential: Credential) -> MetaClient:
        return MetaClient(credential)

    async def get_ad_account(self, ad_account_id: str, credential: Credential) -> AdAccount:
        account_id = normalize_ad_account_id(ad_account_id)
        response = await self._get_client(credential).get(
            f"/act_{account_id}",
            params={"fields": ",".join(AD_ACCOUNT_FIELDS)},
        )
        business = response.get("business") or {}
        return AdAccount(
            id=account_id,
            name=response.get("name"),
            currency=response.get("currency"),
            timezone_name=response.get("timezone_name"),
            business_id=business.get("id"),
        )


meta_account_adapter = MetaAccountAdapter()
