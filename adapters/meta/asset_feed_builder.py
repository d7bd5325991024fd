"""Build ``asset_feed_spec`` payloads for placement asset customization.

Every asset carries ``adlabels``; every customization rule points at labels by
name. A rule naming a label that no asset declares is rejected here rather
than by the Graph API, where the error is far less specific.
"""

from typing import Any, Optional

import structlog

from adapters.meta.models.asset_feed_model import AssetFeedInput, PlacementRule
from adapters.meta.validators import (
    MIN_CUSTOMIZATION_RULES,
    PLACEMENT_OPTIMIZATION_TYPE,
    RULE_LABEL_FIELDS,
    collect_asset_labels,
    rule_labels,
    validate_placement_combinations,
)
from exceptions.custom_exceptions import AssetFeedSpecException

logger = structlog.get_logger(__name__)

POSITION_FIELDS = (
    "publisher_platforms",
    "facebook_positions",
    "instagram_positions",
    "messenger_positions",
    "audience_network_positions",
    "threads_positions",
)


def _adlabels(labels: list[str]) -> list[dict[str, str]]:
    return [{"name": label} for label in labels]


def _build_rule(placement: PlacementRule) -> dict[str, Any]:
    customization_spec = {
        field: list(getattr(placement, field))
        for field in POSITION_FIELDS
        if getattr(placement, field)
    }
    rule: dict[str, Any] = {"customization_spec": customization_spec}
    for field in RULE_LABEL_FIELDS:
        label: Optional[str] = getattr(placement, field)
        if label:
            rule[field] = {"name": label}
    return rule


def check_label_consistency(asset_feed_spec: dict[str, Any]) -> None:
    """Raise on the first rule label with no matching asset label."""
    declared = collect_asset_labels(asset_feed_spec)
    for index, rule in enumerate(asset_feed_spec["asset_customization_rules"], start=1):
        for label in rule_labels(rule):
            if label not in declared:
                raise AssetFeedSpecException(
                    f'Rule {index} references label "{label}" which does not exist in assets'
                )


def build_asset_feed_spec(feed: AssetFeedInput) -> dict[str, Any]:
    if len(feed.placements) < MIN_CUSTOMIZATION_RULES:
        raise AssetFeedSpecException(
            f"Placement Asset Customization requires at least {MIN_CUSTOMIZATION_RULES} placement rules"
        )

    spec: dict[str, Any] = {
        "ad_formats": [ad_format.value for ad_format in feed.ad_formats],
        "optimization_type": PLACEMENT_OPTIMIZATION_TYPE,
    }

    if feed.images:
        spec["images"] = []
        for image in feed.images:
            asset: dict[str, Any] = {"hash": image.hash, "adlabels": _adlabels(image.labels)}
            if image.image_crops:
                asset["image_crops"] = image.image_crops
            spec["images"].append(asset)

    if feed.videos:
        spec["videos"] = []
        for video in feed.videos:
            asset = {"video_id": video.video_id, "adlabels": _adlabels(video.labels)}
            if video.thumbnail_url:
                asset["thumbnail_url"] = video.thumbnail_url
            spec["videos"].append(asset)

    for collection in ("titles", "bodies", "descriptions"):
        items = getattr(feed, collection)
        if items:
            spec[collection] = [
                {"text": item.text, "adlabels": _adlabels(item.labels)} for item in items
            ]

    if feed.link_urls:
        spec["link_urls"] = []
        for link in feed.link_urls:
            asset = {
                "website_url": link.website_url,
                "display_url": link.display_url or link.website_url,
                "adlabels": _adlabels(link.labels),
            }
            if link.deeplink_url:
                asset["deeplink_url"] = link.deeplink_url
            spec["link_urls"].append(asset)

    if feed.call_to_action_types:
        spec["call_to_action_types"] = [cta.value for cta in feed.call_to_action_types]

    rules = []
    for index, placement in enumerate(feed.placements, start=1):
        result = validate_placement_combinations(
            placement.model_dump(), ad_formats=spec["ad_formats"]
        )
        if not result.valid:
            raise AssetFeedSpecException(f"Rule {index}: {result.error}")
        rules.append(_build_rule(placement))
    spec["asset_customization_rules"] = rules

    check_label_consistency(spec)

    logger.debug(
        "asset_feed_spec_built",
        rules=len(rules),
        labels=sorted(collect_asset_labels(spec)),
    )
    return spec
