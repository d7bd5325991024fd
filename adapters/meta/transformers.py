"""Convert request-shaped data into the Graph API's form encoding.

All functions here are pure. They raise ``PayloadTransformException`` only for
structurally invalid input (a non-numeric budget, an unknown timezone).
"""

import copy
import json
from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from enum import Enum
from typing import TYPE_CHECKING, Any, Iterable, Mapping, Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import BaseModel

from exceptions.custom_exceptions import PayloadTransformException

if TYPE_CHECKING:
    from adapters.meta.models.ad_model import AdSpec
    from adapters.meta.models.adset_model import AdSetSpec
    from adapters.meta.models.campaign_model import CampaignSpec
    from adapters.meta.models.creative_model import PlacementCreativeSpec, StandardCreativeSpec


# ===== BUDGET =====

class BudgetUnit(str, Enum):
    MAJOR = "MAJOR"  # e.g. dollars
    MINOR = "MINOR"  # e.g. cents, what the Graph API expects


class Cents(int):
    """An amount already expressed in minor currency units."""


def _to_decimal(value: Any) -> Decimal:
    if isinstance(value, bool) or value is None:
        raise PayloadTransformException(f"Invalid budget value: {value!r}")
    try:
        amount = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        raise PayloadTransformException(f"Invalid budget value: {value!r}")
    if not amount.is_finite():
        raise PayloadTransformException(f"Invalid budget value: {value!r}")
    return amount


def convert_budget_to_cents(value: Any, *, unit: BudgetUnit) -> Cents:
    """Return ``value`` as integer minor units.

    ``unit`` states what ``value`` is measured in. A ``Cents`` input is
    returned unchanged whatever the unit, so converting twice never scales
    twice.
    """
    if isinstance(value, Cents):
        return value

    amount = _to_decimal(value)
    if BudgetUnit(unit) is BudgetUnit.MAJOR:
        return Cents(int((amount * 100).quantize(Decimal(1), rounding=ROUND_HALF_UP)))

    if amount != amount.to_integral_value():
        raise PayloadTransformException(
            f"Minor-unit amounts must be whole numbers, got {value!r}"
        )
    return Cents(int(amount))


# ===== TARGETING =====

GENDER_CODES: dict[str, list[int]] = {
    "ALL": [1, 2],
    "MALE": [1],
    "FEMALE": [2],
}


def gender_to_codes(gender: Any) -> list[int]:
    key = gender.value if isinstance(gender, Enum) else str(gender or "ALL").upper()
    if key not in GENDER_CODES:
        raise PayloadTransformException(f"Unknown gender selector: {gender!r}")
    return list(GENDER_CODES[key])


def codes_to_gender(codes: Iterable[int]) -> str:
    code_set = set(codes or ())
    if not code_set or code_set == {1, 2}:
        return "ALL"
    if code_set == {1}:
        return "MALE"
    if code_set == {2}:
        return "FEMALE"
    raise PayloadTransformException(f"Unknown gender codes: {sorted(code_set)}")


def normalize_country(entry: Any) -> str:
    if isinstance(entry, str):
        return entry.strip().upper()
    if isinstance(entry, Mapping):
        for key in ("code", "country_code", "key"):
            if entry.get(key):
                return str(entry[key]).strip().upper()
    raise PayloadTransformException(f"Cannot read a country code from {entry!r}")


def transform_targeting(targeting: Mapping[str, Any]) -> dict[str, Any]:
    """Map UI targeting to the wire shape.

    ``gender`` becomes ``genders``; country objects become bare codes;
    ``excluded_countries`` under either geo block moves to
    ``excluded_geo_locations.countries``. Both country lists are kept as-is,
    overlap included.
    """
    result = copy.deepcopy(dict(targeting))

    gender = result.pop("gender", None)
    if gender is not None and not result.get("genders"):
        result["genders"] = gender_to_codes(gender)

    geo = dict(result.get("geo_locations") or {})
    excluded_geo = dict(result.get("excluded_geo_locations") or {})

    legacy_excluded = [
        *(geo.pop("excluded_countries", None) or []),
        *(excluded_geo.pop("excluded_countries", None) or []),
    ]
    if geo.get("countries"):
        geo["countries"] = [normalize_country(c) for c in geo["countries"]]
    excluded = [*(excluded_geo.get("countries") or []), *legacy_excluded]
    if excluded:
        excluded_geo["countries"] = [normalize_country(c) for c in excluded]

    result["geo_locations"] = _compact(geo)
    result["excluded_geo_locations"] = _compact(excluded_geo)
    return _compact(result)


def _compact(values: Mapping[str, Any]) -> dict[str, Any]:
    return {key: value for key, value in values.items() if value not in (None, [], {})}


# ===== TIME =====

ACCOUNT_TIME_FORMAT = "%Y-%m-%dT%H:%M:%S%z"


def resolve_timezone(timezone_name: Optional[str]) -> ZoneInfo:
    if not timezone_name:
        raise PayloadTransformException("Ad account timezone is required to schedule an ad set")
    try:
        return ZoneInfo(timezone_name)
    except (ZoneInfoNotFoundError, ValueError):
        raise PayloadTransformException(f"Unknown timezone: {timezone_name}")


def to_account_time(value: datetime | str, timezone_name: Optional[str]) -> str:
    """Render ``value`` in the ad account's timezone, e.g. 2025-03-01T09:00:00-0800.

    Naive datetimes are read as wall-clock time in that timezone.
    """
    tz = resolve_timezone(timezone_name)
    if isinstance(value, str):
        try:
            value = datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError:
            raise PayloadTransformException(f"Invalid date format: {value}")
    if value.tzinfo is None:
        value = value.replace(tzinfo=tz)
    return value.astimezone(tz).strftime(ACCOUNT_TIME_FORMAT)


def now_in_account_time(timezone_name: Optional[str]) -> str:
    return datetime.now(resolve_timezone(timezone_name)).strftime(ACCOUNT_TIME_FORMAT)


# ===== FORM ENCODING =====

def _jsonable(value: Any) -> Any:
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json", exclude_none=True)
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, Mapping):
        return {key: _jsonable(item) for key, item in value.items() if item is not None}
    if isinstance(value, (list, tuple)):
        return [_jsonable(item) for item in value]
    return value


def encode_form_value(value: Any) -> str:
    value = _jsonable(value)
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (dict, list)):
        return json.dumps(value, separators=(",", ":"))
    return str(value)


def build_form_fields(fields: Mapping[str, Any]) -> dict[str, str]:
    """Form-encode a flat field map; ``None`` means "leave unset" and is dropped."""
    return {key: encode_form_value(value) for key, value in fields.items() if value is not None}


# ===== RESOURCE PAYLOADS =====

def special_ad_categories(categories: Iterable[Any]) -> list[str]:
    values: list[str] = []
    for category in categories or ():
        category = category.value if isinstance(category, Enum) else category
        if category not in values:
            values.append(category)
    return values or ["NONE"]


def transform_campaign(spec: "CampaignSpec") -> dict[str, str]:
    fields: dict[str, Any] = {
        "name": spec.name,
        "objective": spec.objective,
        "status": spec.status,
        "special_ad_categories": special_ad_categories(spec.special_ad_categories),
        "bid_strategy": spec.bid_strategy,
    }
    if spec.budget is not None:
        fields.update(spec.budget.form_fields())
    return build_form_fields(fields)


def transform_adset(
    spec: "AdSetSpec",
    campaign_id: str,
    timezone_name: Optional[str],
) -> dict[str, str]:
    fields: dict[str, Any] = {
        "name": spec.name,
        "campaign_id": campaign_id,
        "status": spec.status,
        "targeting": transform_targeting(spec.targeting.model_dump(mode="json", exclude_none=True)),
        "start_time": (
            to_account_time(spec.start_time, timezone_name)
            if spec.start_time
            else now_in_account_time(timezone_name)
        ),
        "end_time": to_account_time(spec.end_time, timezone_name) if spec.end_time else None,
        "optimization_goal": spec.optimization_goal,
        "billing_event": spec.billing_event,
        "bid_strategy": spec.bid_strategy,
        "bid_amount": spec.bid_amount,
        "promoted_object": spec.promoted_object,
    }
    fields.update(spec.budget.form_fields())
    return build_form_fields(fields)


def transform_standard_creative(spec: "StandardCreativeSpec") -> dict[str, str]:
    return build_form_fields({
        "name": spec.name,
        "object_story_spec": spec.object_story_spec,
        "url_tags": spec.url_tags,
    })


def transform_placement_creative(spec: "PlacementCreativeSpec") -> dict[str, str]:
    return build_form_fields({
        "name": spec.name,
        "object_story_spec": spec.object_story_spec,
        "asset_feed_spec": spec.asset_feed_spec,
        "url_tags": spec.url_tags,
    })


def transform_ad(spec: "AdSpec", adset_id: str, creative_id: str) -> dict[str, str]:
    return build_form_fields({
        "name": spec.name,
        "adset_id": adset_id,
        "creative": {"creative_id": creative_id},
        "status": spec.status,
    })
