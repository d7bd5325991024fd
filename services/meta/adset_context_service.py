from dataclasses import dataclass
from typing import Optional

import structlog

from adapters.meta.accounts import MetaAccountAdapter, meta_account_adapter
from adapters.meta.models.adset_model import AdSetSpec
from adapters.meta.transformers import resolve_timezone
from adapters.meta.validators import validate_pixel_permissions
from core.credentials import Credential
from services.meta.asset_store import AssetStore, get_asset_store

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class AdSetContext:
    timezone_name: str


class AdSetContextService:
    """Account-level facts an ad set needs before it can be created."""

    def __init__(
        self,
        store: Optional[AssetStore] = None,
        accounts: Optional[MetaAccountAdapter] = None,
    ):
        self.store = store
        self.accounts = accounts

    def _store(self) -> AssetStore:
        return self.store if self.store is not None else get_asset_store()

    def _accounts(self) -> MetaAccountAdapter:
        return self.accounts if self.accounts is not None else meta_account_adapter

    async def resolve(
        self,
        ad_account_id: str,
        spec: AdSetSpec,
        credential: Credential,
    ) -> AdSetContext:
        synced_account = self._store().get_ad_account(ad_account_id)
        self.check_pixel(ad_account_id, spec, synced_account.business_id if synced_account else None)

        timezone_name = spec.timezone_name or (synced_account.timezone_name if synced_account else None)
        if not timezone_name:
            account = await self._accounts().get_ad_account(ad_account_id, credential)
            timezone_name = account.timezone_name
            logger.info("ad_account_timezone_fetched", ad_account_id=account.id, timezone_name=timezone_name)

        resolve_timezone(timezone_name)
        return AdSetContext(timezone_name=timezone_name)

    def check_pixel(
        self,
        ad_account_id: str,
        spec: AdSetSpec,
        account_business_id: Optional[str],
    ) -> None:
        pixel_id = spec.promoted_object.pixel_id if spec.promoted_object else None
        if not pixel_id:
            return
        pixel = self._store().get_pixel(pixel_id)
        validate_pixel_permissions(
            pixel_id,
            ad_account_id,
            pixel.owner_business_id if pixel else None,
            account_business_id,
        ).raise_for_error()


adset_context_service = AdSetContextService()
