import pytest  # type: ignore

from adapters.meta.asset_feed_builder import build_asset_feed_spec, check_label_consistency
from adapters.meta.models.asset_feed_model import AssetFeedInput
from adapters.meta.validators import validate_asset_feed_spec
from exceptions.custom_exceptions import AssetFeedSpecException


def test_builds_labeled_assets_and_rules(asset_feed_input):
    spec = build_asset_feed_spec(AssetFeedInput(**asset_feed_input))

    assert spec["ad_formats"] == ["SINGLE_IMAGE"]
    assert spec["optimization_type"] == "PLACEMENT"
    assert spec["images"] == [
        {"hash": "hash_square", "adlabels": [{"name": "feed_image"}]},
        {"hash": "hash_vertical", "adlabels": [{"name": "story_image"}]},
    ]
    assert spec["titles"] == [{"text": "Spring sale", "adlabels": [{"name": "main_title"}]}]
    assert spec["bodies"] == [{"text": "Everything 20% off", "adlabels": []}]
    assert spec["link_urls"] == [
        {
            "website_url": "https://example.com/sale",
            "display_url": "https://example.com/sale",
            "adlabels": [],
        }
    ]
    assert spec["call_to_action_types"] == ["SHOP_NOW"]
    assert "videos" not in spec
    assert "descriptions" not in spec


def test_rules_only_carry_non_empty_positions(asset_feed_input):
    rules = build_asset_feed_spec(AssetFeedInput(**asset_feed_input))["asset_customization_rules"]

    assert rules[0] == {
        "customization_spec": {
            "publisher_platforms": ["facebook", "instagram"],
            "facebook_positions": ["feed"],
            "instagram_positions": ["stream"],
        },
        "image_label": {"name": "feed_image"},
        "title_label": {"name": "main_title"},
    }
    assert rules[1] == {
        "customization_spec": {
            "publisher_platforms": ["instagram"],
            "instagram_positions": ["story"],
        },
        "image_label": {"name": "story_image"},
    }


def test_built_spec_passes_feed_validation(asset_feed_input):
    spec = build_asset_feed_spec(AssetFeedInput(**asset_feed_input))
    assert validate_asset_feed_spec(spec).valid


def test_single_placement_is_rejected(asset_feed_input):
    asset_feed_input["placements"] = asset_feed_input["placements"][:1]

    with pytest.raises(AssetFeedSpecException) as exc_info:
        build_asset_feed_spec(AssetFeedInput(**asset_feed_input))

    assert exc_info.value.message == "Placement Asset Customization requires at least 2 placement rules"


def test_unknown_rule_label_names_the_rule(asset_feed_input):
    asset_feed_input["placements"][1]["image_label"] = "wide_image"

    with pytest.raises(AssetFeedSpecException) as exc_info:
        build_asset_feed_spec(AssetFeedInput(**asset_feed_input))

    assert exc_info.value.message == 'Rule 2 references label "wide_image" which does not exist in assets'


def test_invalid_placement_combination_names_the_rule(asset_feed_input):
    asset_feed_input["placements"][1] = {
        "publisher_platforms": ["threads"],
        "threads_positions": ["threads_stream"],
        "image_label": "story_image",
    }

    with pytest.raises(AssetFeedSpecException) as exc_info:
        build_asset_feed_spec(AssetFeedInput(**asset_feed_input))

    assert exc_info.value.message == "Rule 2: Threads placement requires instagram platform with stream position"


def test_explore_home_with_video_format_is_rejected(asset_feed_input):
    asset_feed_input["ad_formats"] = ["SINGLE_VIDEO"]
    asset_feed_input["videos"] = [{"video_id": "vid_1", "labels": ["feed_image"]}]
    asset_feed_input["placements"][0]["instagram_positions"] = ["explore_home"]

    with pytest.raises(AssetFeedSpecException, match="^Rule 1: Instagram explore_home"):
        build_asset_feed_spec(AssetFeedInput(**asset_feed_input))


def test_video_and_link_assets_keep_optional_fields():
    feed = AssetFeedInput(
        ad_formats=["SINGLE_VIDEO"],
        videos=[
            {"video_id": "v1", "thumbnail_url": "https://cdn.example.com/v1.jpg", "labels": ["feed_video"]},
            {"video_id": "v2", "labels": ["story_video"]},
        ],
        link_urls=[{"website_url": "https://example.com", "display_url": "example.com", "deeplink_url": "app://x"}],
        placements=[
            {"publisher_platforms": ["facebook"], "facebook_positions": ["feed"], "video_label": "feed_video"},
            {"publisher_platforms": ["instagram"], "instagram_positions": ["reels"], "video_label": "story_video"},
        ],
    )

    spec = build_asset_feed_spec(feed)

    assert spec["videos"][0] == {
        "video_id": "v1",
        "adlabels": [{"name": "feed_video"}],
        "thumbnail_url": "https://cdn.example.com/v1.jpg",
    }
    assert "thumbnail_url" not in spec["videos"][1]
    assert spec["link_urls"][0]["display_url"] == "example.com"
    assert spec["link_urls"][0]["deeplink_url"] == "app://x"


def test_check_label_consistency_reports_first_missing_label():
    spec = {
        "images": [{"hash": "a", "adlabels": [{"name": "sq"}]}],
        "asset_customization_rules": [
            {"image_label": {"name": "sq"}},
            {"image_label": {"name": "sq"}, "body_label": {"name": "missing_body"}},
            {"image_label": {"name": "also_missing"}},
        ],
    }

    with pytest.raises(AssetFeedSpecException, match='Rule 2 references label "missing_body"'):
        check_label_consistency(spec)
