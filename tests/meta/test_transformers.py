import json
import re
from datetime import datetime, timezone

import pytest  # type: ignore

from adapters.meta.models.ad_model import AdSpec
from adapters.meta.models.adset_model import AdSetSpec, Gender
from adapters.meta.models.campaign_model import CampaignObjective, CampaignSpec, SpecialAdCategory
from adapters.meta.models.creative_model import PlacementCreativeSpec, StandardCreativeSpec
from adapters.meta.transformers import (
    BudgetUnit,
    Cents,
    build_form_fields,
    codes_to_gender,
    convert_budget_to_cents,
    encode_form_value,
    gender_to_codes,
    normalize_country,
    resolve_timezone,
    special_ad_categories,
    to_account_time,
    transform_ad,
    transform_adset,
    transform_campaign,
    transform_placement_creative,
    transform_standard_creative,
    transform_targeting,
)
from exceptions.custom_exceptions import PayloadTransformException

ACCOUNT_TIME = re.compile(r"^\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}[+-]\d{4}$")


# ---------------------------------------------------------------------------
# Budget conversion
# ---------------------------------------------------------------------------


@pytest.mark.parametrize(
    "value, expected",
    [(50, 5000), (19.99, 1999), ("12.5", 1250), ("19.995", 2000), (0.005, 1)],
)
def test_major_units_convert_to_cents(value, expected):
    assert convert_budget_to_cents(value, unit=BudgetUnit.MAJOR) == expected


def test_minor_units_pass_through():
    assert convert_budget_to_cents(2000, unit=BudgetUnit.MINOR) == 2000
    assert convert_budget_to_cents("2000", unit="MINOR") == 2000
    assert convert_budget_to_cents(2000.0, unit=BudgetUnit.MINOR) == 2000


def test_fractional_minor_units_are_rejected():
    with pytest.raises(PayloadTransformException, match="whole numbers"):
        convert_budget_to_cents(20.5, unit=BudgetUnit.MINOR)


def test_conversion_is_idempotent():
    once = convert_budget_to_cents(50, unit=BudgetUnit.MAJOR)
    twice = convert_budget_to_cents(once, unit=BudgetUnit.MAJOR)

    assert isinstance(once, Cents)
    assert twice == once == 5000
    assert str(twice) == "5000"


@pytest.mark.parametrize("value", [None, True, "abc", "NaN", "Infinity", [10]])
def test_non_numeric_budget_is_rejected(value):
    with pytest.raises(PayloadTransformException, match="Invalid budget value"):
        convert_budget_to_cents(value, unit=BudgetUnit.MAJOR)


# ---------------------------------------------------------------------------
# Targeting
# ---------------------------------------------------------------------------


@pytest.mark.parametrize(
    "gender, codes",
    [("ALL", [1, 2]), ("male", [1]), (Gender.FEMALE, [2]), (None, [1, 2])],
)
def test_gender_to_codes(gender, codes):
    assert gender_to_codes(gender) == codes


def test_unknown_gender_is_rejected():
    with pytest.raises(PayloadTransformException):
        gender_to_codes("OTHER")


def test_codes_to_gender_inverts_gender_to_codes():
    for gender in ("ALL", "MALE", "FEMALE"):
        assert codes_to_gender(gender_to_codes(gender)) == gender
    assert codes_to_gender([]) == "ALL"
    with pytest.raises(PayloadTransformException):
        codes_to_gender([3])


@pytest.mark.parametrize(
    "entry, code",
    [("us", "US"), ({"code": "ca", "name": "Canada"}, "CA"), ({"country_code": "gb"}, "GB"), ({"key": "DE"}, "DE")],
)
def test_normalize_country(entry, code):
    assert normalize_country(entry) == code


def test_normalize_country_rejects_unreadable_entry():
    with pytest.raises(PayloadTransformException):
        normalize_country({"name": "Nowhere"})


def test_transform_targeting_maps_gender_and_countries():
    targeting = {
        "geo_locations": {"countries": ["us", {"code": "CA"}], "excluded_countries": [{"code": "MX"}]},
        "age_min": 25,
        "gender": "MALE",
        "publisher_platforms": ["facebook"],
    }

    result = transform_targeting(targeting)

    assert result == {
        "geo_locations": {"countries": ["US", "CA"]},
        "excluded_geo_locations": {"countries": ["MX"]},
        "age_min": 25,
        "genders": [1],
        "publisher_platforms": ["facebook"],
    }
    assert "excluded_countries" in targeting["geo_locations"]


def test_transform_targeting_keeps_overlapping_countries():
    result = transform_targeting(
        {"geo_locations": {"countries": ["US", "CA"], "excluded_countries": ["CA"]}}
    )
    assert result["geo_locations"]["countries"] == ["US", "CA"]
    assert result["excluded_geo_locations"]["countries"] == ["CA"]


def test_excluded_block_countries_are_folded_and_normalized():
    result = transform_targeting(
        {
            "geo_locations": {"countries": ["US"]},
            "excluded_geo_locations": {"countries": ["mx"], "excluded_countries": [{"code": "us"}]},
        }
    )

    assert result["excluded_geo_locations"] == {"countries": ["MX", "US"]}


def test_explicit_genders_win_over_gender():
    assert transform_targeting({"gender": "MALE", "genders": [2]})["genders"] == [2]


def test_empty_targeting_fields_are_dropped():
    result = transform_targeting(
        {"geo_locations": {"countries": [], "excluded_countries": []}, "locales": [], "interests": None}
    )
    assert result == {}


# ---------------------------------------------------------------------------
# Time
# ---------------------------------------------------------------------------


def test_naive_time_is_wall_clock_in_account_timezone():
    assert to_account_time(datetime(2030, 3, 1, 9), "America/Los_Angeles") == "2030-03-01T09:00:00-0800"
    assert to_account_time(datetime(2030, 7, 1, 9), "America/Los_Angeles") == "2030-07-01T09:00:00-0700"


def test_aware_time_is_converted_to_account_timezone():
    value = datetime(2030, 3, 1, 17, tzinfo=timezone.utc)
    assert to_account_time(value, "America/Los_Angeles") == "2030-03-01T09:00:00-0800"
    assert to_account_time("2030-03-01T17:00:00Z", "America/Los_Angeles") == "2030-03-01T09:00:00-0800"


def test_invalid_time_string_is_rejected():
    with pytest.raises(PayloadTransformException, match="Invalid date format"):
        to_account_time("next tuesday", "UTC")


@pytest.mark.parametrize("name", [None, "", "Mars/Olympus_Mons"])
def test_unusable_timezone_is_rejected(name):
    with pytest.raises(PayloadTransformException):
        resolve_timezone(name)


# ---------------------------------------------------------------------------
# Form encoding
# ---------------------------------------------------------------------------


def test_encode_form_value():
    assert encode_form_value(True) == "true"
    assert encode_form_value(False) == "false"
    assert encode_form_value(1500) == "1500"
    assert encode_form_value(CampaignObjective.OUTCOME_SALES) == "OUTCOME_SALES"
    assert encode_form_value({"a": [1, 2], "b": None}) == '{"a":[1,2]}'


def test_build_form_fields_drops_unset_values():
    assert build_form_fields({"name": "x", "bid_strategy": None, "is_dynamic": False}) == {
        "name": "x",
        "is_dynamic": "false",
    }


def test_special_ad_categories_default_and_dedupe():
    assert special_ad_categories([]) == ["NONE"]
    assert special_ad_categories(
        [SpecialAdCategory.HOUSING, "HOUSING", SpecialAdCategory.EMPLOYMENT]
    ) == ["HOUSING", "EMPLOYMENT"]


# ---------------------------------------------------------------------------
# Resource payloads
# ---------------------------------------------------------------------------


def test_transform_campaign_without_budget():
    spec = CampaignSpec(name="Promo", objective="OUTCOME_SALES")

    assert transform_campaign(spec) == {
        "name": "Promo",
        "objective": "OUTCOME_SALES",
        "status": "PAUSED",
        "special_ad_categories": '["NONE"]',
    }


def test_transform_campaign_with_major_unit_budget():
    spec = CampaignSpec(
        name="Promo",
        objective="OUTCOME_TRAFFIC",
        daily_budget=25,
        budget_unit="MAJOR",
        bid_strategy="LOWEST_COST_WITHOUT_CAP",
    )

    fields = transform_campaign(spec)

    assert fields["daily_budget"] == "2500"
    assert fields["bid_strategy"] == "LOWEST_COST_WITHOUT_CAP"
    assert "lifetime_budget" not in fields


def test_transform_adset(adset_payload):
    spec = AdSetSpec(**adset_payload)

    fields = transform_adset(spec, "cmp_1", "America/New_York")

    assert fields["campaign_id"] == "cmp_1"
    assert fields["daily_budget"] == "2000"
    assert fields["start_time"] == "2030-03-01T09:00:00-0500"
    assert "end_time" not in fields
    assert fields["optimization_goal"] == "LINK_CLICKS"
    assert fields["billing_event"] == "IMPRESSIONS"
    assert json.loads(fields["targeting"]) == {
        "geo_locations": {"countries": ["US", "CA"]},
        "age_min": 21,
        "age_max": 55,
        "genders": [2],
        "locales": [6],
    }


def test_transform_adset_defaults_start_time_to_now(adset_payload):
    adset_payload.pop("start_time")
    fields = transform_adset(AdSetSpec(**adset_payload), "cmp_1", "Europe/Berlin")

    assert ACCOUNT_TIME.match(fields["start_time"])


def test_transform_adset_lifetime_budget_with_end_time(adset_payload):
    adset_payload.pop("daily_budget")
    adset_payload.update(lifetime_budget=90000, end_time="2030-03-31T23:59:00")

    fields = transform_adset(AdSetSpec(**adset_payload), "cmp_1", "UTC")

    assert fields["lifetime_budget"] == "90000"
    assert fields["end_time"] == "2030-03-31T23:59:00+0000"
    assert "daily_budget" not in fields


def test_transform_adset_needs_a_timezone(adset_payload):
    with pytest.raises(PayloadTransformException, match="timezone"):
        transform_adset(AdSetSpec(**adset_payload), "cmp_1", None)


def test_transform_standard_creative(standard_creative_payload):
    fields = transform_standard_creative(StandardCreativeSpec(**standard_creative_payload))

    story = json.loads(fields["object_story_spec"])
    assert fields["name"] == "Promo creative"
    assert story["page_id"] == "page_1"
    assert story["link_data"]["call_to_action"] == {"type": "SHOP_NOW"}
    assert "description" not in story["link_data"]


def test_transform_placement_creative(placement_creative_payload):
    fields = transform_placement_creative(PlacementCreativeSpec(**placement_creative_payload))

    assert json.loads(fields["object_story_spec"]) == {"page_id": "page_1"}
    feed = json.loads(fields["asset_feed_spec"])
    assert feed["optimization_type"] == "PLACEMENT"
    assert len(feed["asset_customization_rules"]) == 2
    assert "asset_feed" not in fields


def test_transform_ad_references_creative_by_id():
    fields = transform_ad(AdSpec(name="Promo ad"), "as_1", "cr_1")

    assert fields == {
        "name": "Promo ad",
        "adset_id": "as_1",
        "creative": '{"creative_id":"cr_1"}',
        "status": "PAUSED",
    }
