from typing import Optional

from fastapi import APIRouter, Depends

from core.credentials import credential_provider
from services.meta.asset_store import AssetStore, get_asset_store
from utils.response_helpers import success_response

router = APIRouter(prefix="/api", tags=["Assets"])


@router.get("/token/status")
async def token_status():
    return success_response(credential_provider.expiration_status())


@router.get("/ad-accounts")
async def list_ad_accounts(
    business_id: Optional[str] = None,
    store: AssetStore = Depends(get_asset_store),
):
    return success_response(store.get_ad_accounts(business_id))


@router.get("/pages")
async def list_pages(
    business_id: Optional[str] = None,
    store: AssetStore = Depends(get_asset_store),
):
    return success_response(store.get_pages(business_id))


@router.get("/business-managers")
async def list_business_managers(store: AssetStore = Depends(get_asset_store)):
    return success_response(store.get_business_managers())


@router.get("/pixels/{ad_account_id}")
async def list_pixels(ad_account_id: str, store: AssetStore = Depends(get_asset_store)):
    return success_response(store.get_pixels(ad_account_id))
