from adapters.meta.client import MetaClient
from adapters.meta.accounts import MetaAccountAdapter, meta_account_adapter
from adapters.meta.ads import MetaAdAdapter, meta_ad_adapter
from adapters.meta.adsets import MetaAdSetAdapter, meta_adset_adapter
from adapters.meta.campaigns import MetaCampaignAdapter, meta_campaign_adapter
from adapters.meta.creatives import MetaCreativeAdapter, meta_creative_adapter
from adapters.meta.images import MetaAdImageAdapter, meta_ad_image_adapter

__all__ = [
    "MetaClient",
    "MetaAccountAdapter",
    "meta_account_adapter",
    "MetaAdAdapter",
    "meta_ad_adapter",
    "MetaAdSetAdapter",
    "meta_adset_adapter",
    "MetaCampaignAdapter",
    "meta_campaign_adapter",
    "MetaCreativeAdapter",
    "meta_creative_adapter",
    "MetaAdImageAdapter",
    "meta_ad_image_adapter",
]
