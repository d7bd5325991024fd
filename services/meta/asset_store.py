"""Read access to previously synced Meta assets.

The sync job that fills the store lives elsewhere; this service only reads it.
``InMemoryAssetStore`` loads a JSON export shaped like::

    {"ad_accounts": [...], "pixels": [...], "pages": [...], "business_managers": [...]}
"""

import json
import os
from pathlib import Path
from typing import Iterable, Optional, Protocol

import structlog
from pydantic import BaseModel

logger = structlog.get_logger(__name__)


class SyncedAdAccount(BaseModel):
    account_id: str
    name: Optional[str] = None
    currency: Optional[str] = None
    timezone_id: Optional[int] = None
    timezone_name: Optional[str] = None
    business_id: Optional[str] = None


class SyncedPixel(BaseModel):
    pixel_id: str
    name: Optional[str] = None
    ad_account_id: Optional[str] = None
    owner_business_id: Optional[str] = None


class SyncedPage(BaseModel):
    page_id: str
    name: Optional[str] = None
    business_id: Optional[str] = None


class SyncedBusiness(BaseModel):
    business_id: str
    name: Optional[str] = None


class AssetStore(Protocol):
    def get_ad_account(self, ad_account_id: str) -> Optional[SyncedAdAccount]: ...

    def get_ad_accounts(self, business_id: Optional[str] = None) -> list[SyncedAdAccount]: ...

    def get_pixels(self, ad_account_id: Optional[str] = None) -> list[SyncedPixel]: ...

    def get_pixel(self, pixel_id: str) -> Optional[SyncedPixel]: ...

    def get_pages(self, business_id: Optional[str] = None) -> list[SyncedPage]: ...

    def get_business_managers(self) -> list[SyncedBusiness]: ...


def _account_key(ad_account_id: str) -> str:
    return str(ad_account_id).removeprefix("act_")


class InMemoryAssetStore:
    def __init__(
        self,
        ad_accounts: Iterable[SyncedAdAccount] = (),
        pixels: Iterable[SyncedPixel] = (),
        pages: Iterable[SyncedPage] = (),
        business_managers: Iterable[SyncedBusiness] = (),
    ):
        self._ad_accounts = {_account_key(a.account_id): a for a in ad_accounts}
        self._pixels = {p.pixel_id: p for p in pixels}
        self._pages = list(pages)
        self._business_managers = list(business_managers)

    @classmethod
    def from_file(cls, path: str | Path) -> "InMemoryAssetStore":
        data = json.loads(Path(path).read_text(encoding="utf-8"))
        store = cls(
            ad_accounts=[SyncedAdAccount(**row) for row in data.get("ad_accounts", [])],
            pixels=[SyncedPixel(**row) for row in data.get("pixels", [])],
            pages=[SyncedPage(**row) for row in data.get("pages", [])],
            business_managers=[SyncedBusiness(**row) for row in data.get("business_managers", [])],
        )
        logger.info(
            "synced_assets_loaded",
            path=str(path),
            ad_accounts=len(store._ad_accounts),
            pixels=len(store._pixels),
        )
        return store

    @classmethod
    def from_env(cls) -> "InMemoryAssetStore":
        path = os.getenv("SYNCED_ASSETS_FILE")
        if path and Path(path).exists():
            return cls.from_file(path)
        if path:
            logger.warning("synced_assets_file_missing", path=path)
        return cls()

    def get_ad_account(self, ad_account_id: str) -> Optional[SyncedAdAccount]:
        return self._ad_accounts.get(_account_key(ad_account_id))

    def get_ad_accounts(self, business_id: Optional[str] = None) -> list[SyncedAdAccount]:
        accounts = list(self._ad_accounts.values())
        if business_id is None:
            return accounts
        return [account for account in accounts if account.business_id == business_id]

    def get_pixels(self, ad_account_id: Optional[str] = None) -> list[SyncedPixel]:
        if ad_account_id is None:
            return list(self._pixels.values())
        key = _account_key(ad_account_id)
        return [p for p in self._pixels.values() if p.ad_account_id and _account_key(p.ad_account_id) == key]

    def get_pixel(self, pixel_id: str) -> Optional[SyncedPixel]:
        return self._pixels.get(pixel_id)

    def get_pages(self, business_id: Optional[str] = None) -> list[SyncedPage]:
        if business_id is None:
            return list(self._pages)
        return [page for page in self._pages if page.business_id == business_id]

    def get_business_managers(self) -> list[SyncedBusiness]:
        return list(self._business_managers)


asset_store: AssetStore = InMemoryAssetStore.from_env()


def get_asset_store() -> AssetStore:
    return asset_store
