"""Compatibility rules checked before anything is sent to the Graph API.

Every validator is pure and returns a ``ValidationResult``; expected-invalid
input never raises. Call ``result.raise_for_error()`` at the seam where a
failure should become a ``BusinessValidationException``.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Callable, Mapping, Optional, Sequence

from exceptions.custom_exceptions import BusinessValidationException


@dataclass(frozen=True)
class ValidationResult:
    valid: bool
    error: Optional[str] = None
    details: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def ok(cls, **details: Any) -> "ValidationResult":
        return cls(True, None, details)

    @classmethod
    def fail(cls, error: str, **details: Any) -> "ValidationResult":
        return cls(False, error, details)

    def raise_for_error(
        self, exc_cls: type[BusinessValidationException] = BusinessValidationException
    ) -> "ValidationResult":
        if not self.valid:
            raise exc_cls(self.error or "Validation failed")
        return self


def _value(item: Any) -> Any:
    return item.value if isinstance(item, Enum) else item


# ===== OBJECTIVE -> OPTIMIZATION GOAL =====
# Legacy objectives are still accepted by older accounts; OUTCOME_* are the
# current (ODAX) objectives.
OBJECTIVE_OPTIMIZATION_MAP: dict[str, tuple[str, ...]] = {
    "LINK_CLICKS": ("LINK_CLICKS", "LANDING_PAGE_VIEWS", "IMPRESSIONS", "REACH"),
    "CONVERSIONS": ("OFFSITE_CONVERSIONS", "VALUE", "LANDING_PAGE_VIEWS", "LINK_CLICKS", "IMPRESSIONS", "REACH"),
    "LEAD_GENERATION": ("LEAD_GENERATION", "QUALITY_LEAD", "OFFSITE_CONVERSIONS", "LANDING_PAGE_VIEWS",
                        "LINK_CLICKS", "IMPRESSIONS", "REACH"),
    "APP_INSTALLS": ("APP_INSTALLS", "APP_INSTALLS_AND_OFFSITE_CONVERSIONS", "LINK_CLICKS", "REACH"),
    "BRAND_AWARENESS": ("AD_RECALL_LIFT", "REACH", "IMPRESSIONS"),
    "REACH": ("REACH", "IMPRESSIONS"),
    "VIDEO_VIEWS": ("THRUPLAY", "TWO_SECOND_CONTINUOUS_VIDEO_VIEWS", "IMPRESSIONS"),
    "POST_ENGAGEMENT": ("POST_ENGAGEMENT", "IMPRESSIONS", "REACH"),
    "PAGE_LIKES": ("PAGE_LIKES", "IMPRESSIONS", "REACH"),
    "EVENT_RESPONSES": ("EVENT_RESPONSES", "POST_ENGAGEMENT", "IMPRESSIONS", "REACH"),
    "MESSAGES": ("CONVERSATIONS", "LINK_CLICKS"),
    "PRODUCT_CATALOG_SALES": ("OFFSITE_CONVERSIONS", "VALUE"),
    "OUTCOME_TRAFFIC": ("LINK_CLICKS", "LANDING_PAGE_VIEWS", "REACH", "IMPRESSIONS"),
    "OUTCOME_SALES": ("OFFSITE_CONVERSIONS", "VALUE", "LANDING_PAGE_VIEWS", "LINK_CLICKS", "IMPRESSIONS", "REACH"),
    "OUTCOME_LEADS": ("OFFSITE_CONVERSIONS", "LEAD_GENERATION", "QUALITY_LEAD", "LANDING_PAGE_VIEWS",
                      "LINK_CLICKS", "IMPRESSIONS", "REACH"),
    "OUTCOME_ENGAGEMENT": ("POST_ENGAGEMENT", "PAGE_LIKES", "EVENT_RESPONSES", "THRUPLAY", "CONVERSATIONS",
                           "LINK_CLICKS", "IMPRESSIONS", "REACH"),
    "OUTCOME_APP_PROMOTION": ("APP_INSTALLS", "APP_INSTALLS_AND_OFFSITE_CONVERSIONS", "LINK_CLICKS", "VALUE"),
    "OUTCOME_AWARENESS": ("AD_RECALL_LIFT", "REACH", "IMPRESSIONS", "THRUPLAY", "TWO_SECOND_CONTINUOUS_VIDEO_VIEWS"),
}


def get_allowed_optimization_goals(objective: Any) -> list[str]:
    return list(OBJECTIVE_OPTIMIZATION_MAP.get(_value(objective), ()))


def validate_objective_optimization_goal(objective: Any, optimization_goal: Any) -> ValidationResult:
    objective, optimization_goal = _value(objective), _value(optimization_goal)
    if not objective or not optimization_goal:
        return ValidationResult.fail("Objective and optimization goal are required")

    allowed_goals = OBJECTIVE_OPTIMIZATION_MAP.get(objective)
    if allowed_goals is None:
        return ValidationResult.fail(f"Unknown objective: {objective}")

    if optimization_goal not in allowed_goals:
        return ValidationResult.fail(
            f'Optimization goal "{optimization_goal}" is not allowed for objective '
            f'"{objective}". Allowed goals: {", ".join(allowed_goals)}',
            allowed_goals=list(allowed_goals),
        )
    return ValidationResult.ok(allowed_goals=list(allowed_goals))


# ===== BUDGET =====

def _is_positive_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool) and value > 0


def validate_budget_type(daily_budget: Any, lifetime_budget: Any) -> ValidationResult:
    has_daily = _is_positive_number(daily_budget)
    has_lifetime = _is_positive_number(lifetime_budget)

    if has_daily and has_lifetime:
        return ValidationResult.fail(
            "Cannot specify both daily_budget and lifetime_budget. Please choose one."
        )
    if not has_daily and not has_lifetime:
        return ValidationResult.fail("Either daily_budget or lifetime_budget must be specified")

    return ValidationResult.ok(budget_type="daily" if has_daily else "lifetime")


def validate_schedule(
    budget_type: str,
    start_time: Optional[datetime],
    end_time: Optional[datetime],
) -> ValidationResult:
    if budget_type == "lifetime" and end_time is None:
        return ValidationResult.fail("end_time is required when using lifetime_budget")
    if start_time is not None and end_time is not None:
        if (start_time.tzinfo is None) != (end_time.tzinfo is None):
            return ValidationResult.fail("start_time and end_time must both include or both omit a UTC offset")
        if end_time <= start_time:
            return ValidationResult.fail("end_time must be after start_time")
    return ValidationResult.ok()


# ===== CREATIVE =====

def validate_creative_type(
    object_story_spec: Optional[Mapping[str, Any]],
    asset_feed_spec: Optional[Mapping[str, Any]],
) -> ValidationResult:
    has_story = bool(object_story_spec)
    has_feed = bool(asset_feed_spec)

    if has_story and not has_feed:
        return ValidationResult.ok(type="standard")

    if has_feed:
        if not has_story or not object_story_spec.get("page_id"):
            return ValidationResult.fail(
                "Placement customization (asset_feed_spec) requires object_story_spec with at least page_id"
            )
        if set(object_story_spec) != {"page_id"}:
            return ValidationResult.fail(
                "When using asset_feed_spec, object_story_spec should only contain page_id"
            )
        return ValidationResult.ok(type="placement_customization")

    return ValidationResult.fail(
        "Either object_story_spec (standard) or asset_feed_spec (placement customization) must be provided"
    )


# ===== ASSET FEED SPEC =====

ASSET_COLLECTIONS = ("images", "videos", "titles", "bodies", "descriptions", "link_urls")
RULE_LABEL_FIELDS = (
    "image_label",
    "video_label",
    "carousel_label",
    "title_label",
    "body_label",
    "description_label",
    "link_url_label",
)
PLACEMENT_OPTIMIZATION_TYPE = "PLACEMENT"
MIN_CUSTOMIZATION_RULES = 2


def _label_name(label: Mapping[str, Any]) -> Optional[str]:
    name = label.get("name")
    return name if isinstance(name, str) and name else None


def collect_asset_labels(asset_feed_spec: Mapping[str, Any]) -> set[str]:
    labels: set[str] = set()
    for collection in ASSET_COLLECTIONS:
        assets = asset_feed_spec.get(collection) or []
        if not isinstance(assets, list):
            continue
        for asset in assets:
            if not isinstance(asset, Mapping):
                continue
            for label in asset.get("adlabels") or []:
                if isinstance(label, Mapping) and _label_name(label):
                    labels.add(label["name"])
    return labels


def rule_labels(rule: Mapping[str, Any]) -> list[str]:
    labels = []
    for label_field in RULE_LABEL_FIELDS:
        label = rule.get(label_field) or {}
        if isinstance(label, Mapping) and _label_name(label):
            labels.append(label["name"])
    return labels


def _asset_feed_shape_error(asset_feed_spec: Mapping[str, Any], rules: list) -> Optional[str]:
    for collection in ASSET_COLLECTIONS:
        assets = asset_feed_spec.get(collection)
        if assets is None:
            continue
        if not isinstance(assets, list):
            return f"asset_feed_spec {collection} must be an array"
        for index, asset in enumerate(assets):
            if not isinstance(asset, Mapping):
                return f"asset_feed_spec {collection}[{index}] must be an object"
            adlabels = asset.get("adlabels")
            if adlabels is None:
                continue
            if not isinstance(adlabels, list) or not all(isinstance(label, Mapping) for label in adlabels):
                return f"asset_feed_spec {collection}[{index}] adlabels entries must be {{name: ...}}"

    for index, rule in enumerate(rules):
        if not isinstance(rule, Mapping):
            return f"asset_feed_spec rule {index} must be an object"
        for label_field in RULE_LABEL_FIELDS:
            label = rule.get(label_field)
            if label is not None and not isinstance(label, Mapping):
                return f"asset_feed_spec rule {index} {label_field} must be {{name: ...}}"
    return None


def validate_asset_feed_spec(asset_feed_spec: Any) -> ValidationResult:
    if not isinstance(asset_feed_spec, Mapping):
        return ValidationResult.fail("asset_feed_spec must be an object")

    rules = asset_feed_spec.get("asset_customization_rules")
    if not isinstance(rules, list):
        return ValidationResult.fail("asset_feed_spec must have asset_customization_rules array")

    if len(rules) < MIN_CUSTOMIZATION_RULES:
        return ValidationResult.fail(
            f"asset_feed_spec must have at least {MIN_CUSTOMIZATION_RULES} asset_customization_rules"
        )

    if _value(asset_feed_spec.get("optimization_type")) != PLACEMENT_OPTIMIZATION_TYPE:
        return ValidationResult.fail('asset_feed_spec must have optimization_type: "PLACEMENT"')

    shape_error = _asset_feed_shape_error(asset_feed_spec, rules)
    if shape_error:
        return ValidationResult.fail(shape_error)

    asset_labels = collect_asset_labels(asset_feed_spec)

    referenced: list[str] = []
    for rule in rules:
        for label in rule_labels(rule):
            if label not in referenced:
                referenced.append(label)

    missing = [label for label in referenced if label not in asset_labels]
    if missing:
        return ValidationResult.fail(
            f"Asset labels referenced in rules but not found in assets: {', '.join(missing)}",
            missing_labels=missing,
        )

    return ValidationResult.ok(asset_labels=sorted(asset_labels), rule_labels=referenced)


# ===== PLACEMENTS =====
# Each case inspects one placement selector and returns an error or None.
# Add new platform quirks as new cases.

def _threads_requires_instagram_stream(placement: Mapping[str, Any], ad_formats) -> Optional[str]:
    platforms = placement.get("publisher_platforms") or []
    uses_threads = "threads" in platforms or bool(placement.get("threads_positions"))
    if not uses_threads:
        return None
    if "instagram" not in platforms or "stream" not in (placement.get("instagram_positions") or []):
        return "Threads placement requires instagram platform with stream position"
    return None


def _explore_home_single_image_only(placement: Mapping[str, Any], ad_formats) -> Optional[str]:
    if ad_formats is None or "explore_home" not in (placement.get("instagram_positions") or []):
        return None
    if any(_value(ad_format) != "SINGLE_IMAGE" for ad_format in ad_formats):
        return "Instagram explore_home placement only supports SINGLE_IMAGE format"
    return None


PLACEMENT_CASES: tuple[Callable[[Mapping[str, Any], Optional[Sequence[Any]]], Optional[str]], ...] = (
    _threads_requires_instagram_stream,
    _explore_home_single_image_only,
)


def validate_placement_combinations(
    placement: Optional[Mapping[str, Any]],
    ad_formats: Optional[Sequence[Any]] = None,
) -> ValidationResult:
    placement = placement or {}
    for case in PLACEMENT_CASES:
        error = case(placement, ad_formats)
        if error:
            return ValidationResult.fail(error)
    return ValidationResult.ok()


# ===== TARGETING / ACCOUNT =====

def validate_country_overlap(targeting: Mapping[str, Any]) -> ValidationResult:
    included = (targeting.get("geo_locations") or {}).get("countries") or []
    excluded = (targeting.get("excluded_geo_locations") or {}).get("countries") or []
    overlap = [code for code in included if code in set(excluded)]
    if overlap:
        return ValidationResult.fail(
            f"Countries cannot be both included and excluded: {', '.join(overlap)}",
            overlapping_countries=overlap,
        )
    return ValidationResult.ok()


def validate_pixel_permissions(
    pixel_id: Optional[str],
    ad_account_id: Optional[str],
    pixel_owner_business_id: Optional[str] = None,
    ad_account_business_id: Optional[str] = None,
) -> ValidationResult:
    if not pixel_id or not ad_account_id:
        return ValidationResult.fail("Pixel ID and Ad Account ID are required")

    if pixel_owner_business_id and ad_account_business_id:
        if str(pixel_owner_business_id) != str(ad_account_business_id):
            return ValidationResult.fail(
                f"Pixel owner business ({pixel_owner_business_id}) does not match "
                f"ad account business ({ad_account_business_id})"
            )
    return ValidationResult.ok()
