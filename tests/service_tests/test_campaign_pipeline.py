"""
End-to-end runs of the campaign -> ad set -> creative -> ad pipeline against a
stubbed Graph API. Failures must keep every id created before the failing
stage.
"""

from unittest.mock import AsyncMock, patch

import httpx
import pytest  # type: ignore

from adapters.meta.creatives import meta_creative_adapter
from adapters.meta.models import (
    CampaignObjective,
    ErrorKind,
    FullCampaignRequest,
    PipelineStage,
    PipelineStatus,
    ResourceType,
)
from exceptions.custom_exceptions import BusinessValidationException
from services.meta.adset_context_service import AdSetContextService
from services.meta.asset_store import InMemoryAssetStore, SyncedAdAccount
from services.meta.campaign_pipeline import CampaignPipeline, to_pipeline_error

ACCOUNT = "act_123"


@pytest.fixture
def pipeline() -> CampaignPipeline:
    store = InMemoryAssetStore(
        ad_accounts=[SyncedAdAccount(account_id="123", timezone_name="America/Los_Angeles", business_id="biz_1")]
    )
    return CampaignPipeline(context=AdSetContextService(store=store))


@pytest.fixture
def full_request(campaign_payload, adset_payload, standard_creative_payload) -> FullCampaignRequest:
    return FullCampaignRequest(
        ad_account_id=ACCOUNT,
        campaign=campaign_payload,
        adset=adset_payload,
        creative=standard_creative_payload,
        ad={"name": "Promo ad"},
    )


def _stub_all_stages(graph):
    graph.add("POST", "/campaigns", (200, {"id": "cmp_1"}))
    graph.add("POST", "/adsets", (200, {"id": "as_1"}))
    graph.add("POST", "/adcreatives", (200, {"id": "cr_1"}))
    graph.add("POST", "/ads", (200, {"id": "ad_1"}))


# ---------------------------------------------------------------------------
# Happy path
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
async def test_all_stages_succeed(graph, credential, pipeline, full_request):
    _stub_all_stages(graph)

    result = await pipeline.run(full_request, credential)

    assert result.status is PipelineStatus.SUCCEEDED
    assert result.succeeded
    assert result.error is None
    assert result.failed_stage is None
    assert result.created_ids.model_dump() == {
        "campaign_id": "cmp_1",
        "adset_id": "as_1",
        "creative_id": "cr_1",
        "ad_id": "ad_1",
    }
    assert [(ref.resource_type, ref.id) for ref in result.created_resources] == [
        (ResourceType.CAMPAIGN, "cmp_1"),
        (ResourceType.ADSET, "as_1"),
        (ResourceType.CREATIVE, "cr_1"),
        (ResourceType.AD, "ad_1"),
    ]


@pytest.mark.asyncio
async def test_each_stage_uses_the_id_created_before_it(graph, credential, pipeline, full_request):
    _stub_all_stages(graph)

    await pipeline.run(full_request, credential)

    campaign, adset, creative, ad = graph.requests
    assert graph.form(adset)["campaign_id"] == "cmp_1"
    assert graph.form(adset)["start_time"] == "2030-03-01T09:00:00-0800"
    assert graph.form(ad)["adset_id"] == "as_1"
    assert graph.form_json(ad, "creative") == {"creative_id": "cr_1"}
    assert "asset_feed_spec" not in graph.form(creative)


@pytest.mark.asyncio
async def test_placement_creative_goes_through_asset_feed(
    graph, credential, pipeline, campaign_payload, adset_payload, placement_creative_payload
):
    _stub_all_stages(graph)
    request = FullCampaignRequest(
        ad_account_id=ACCOUNT,
        campaign=campaign_payload,
        adset=adset_payload,
        creative=placement_creative_payload,
        ad={"name": "Promo ad"},
    )

    result = await pipeline.run(request, credential)

    assert result.succeeded
    creative_form = graph.form(graph.requests[2])
    assert "asset_feed_spec" in creative_form
    assert graph.form_json(graph.requests[2], "object_story_spec") == {"page_id": "page_1"}


# ---------------------------------------------------------------------------
# Partial failures
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
async def test_adset_failure_keeps_campaign_id(graph, credential, pipeline, full_request, graph_error):
    graph.add("POST", "/campaigns", (200, {"id": "cmp_1"}))
    graph.add("POST", "/adsets", (400, graph_error(100, "Invalid targeting spec", subcode=1885364)))

    result = await pipeline.run(full_request, credential)

    assert result.status is PipelineStatus.FAILED_PARTIAL
    assert result.failed_stage is PipelineStage.ADSET
    assert result.created_ids.model_dump(exclude_none=True) == {"campaign_id": "cmp_1"}
    assert [ref.resource_type for ref in result.created_resources] == [ResourceType.CAMPAIGN]
    assert result.error.kind is ErrorKind.API
    assert result.error.message == "Invalid targeting spec"
    assert result.error.code == 100
    assert result.error.error_subcode == 1885364
    assert result.error.fbtrace_id == "AbCdEf123"
    assert len(graph.requests) == 2


@pytest.mark.asyncio
async def test_ad_failure_keeps_three_ids(graph, credential, pipeline, full_request, graph_error):
    _stub_all_stages(graph)
    graph.routes[("POST", "/ads")] = [(400, graph_error(1815433, "Creative is not compatible"))]

    result = await pipeline.run(full_request, credential)

    assert result.failed_stage is PipelineStage.AD
    assert result.created_ids.model_dump(exclude_none=True) == {
        "campaign_id": "cmp_1",
        "adset_id": "as_1",
        "creative_id": "cr_1",
    }
    assert len(result.created_resources) == 3


@pytest.mark.asyncio
async def test_transport_failure_at_creative_stage(graph, credential, pipeline, full_request):
    _stub_all_stages(graph)
    graph.routes[("POST", "/adcreatives")] = [httpx.ReadTimeout("timed out")]

    result = await pipeline.run(full_request, credential)

    assert result.failed_stage is PipelineStage.CREATIVE
    assert result.error.kind is ErrorKind.TRANSPORT
    assert result.created_ids.model_dump(exclude_none=True) == {"campaign_id": "cmp_1", "adset_id": "as_1"}
    assert not any(path.endswith("/ads") for path in graph.paths())


@pytest.mark.asyncio
async def test_unexpected_error_is_reported_as_internal(graph, credential, pipeline, full_request):
    _stub_all_stages(graph)

    with patch.object(meta_creative_adapter, "create_standard", AsyncMock(side_effect=RuntimeError("boom"))):
        result = await pipeline.run(full_request, credential)

    assert result.failed_stage is PipelineStage.CREATIVE
    assert result.error.kind is ErrorKind.INTERNAL
    assert result.error.message == "boom"
    assert result.created_ids.adset_id == "as_1"


# ---------------------------------------------------------------------------
# Preflight
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
async def test_goal_mismatch_fails_before_any_request(graph, credential, pipeline, full_request):
    _stub_all_stages(graph)
    full_request.campaign.objective = CampaignObjective.OUTCOME_AWARENESS

    with pytest.raises(BusinessValidationException, match="not allowed for objective"):
        await pipeline.run(full_request, credential)

    assert graph.requests == []


@pytest.mark.asyncio
async def test_country_overlap_fails_before_any_request(graph, credential, pipeline, full_request):
    _stub_all_stages(graph)
    full_request.adset.targeting.geo_locations.excluded_countries = ["US"]

    with pytest.raises(BusinessValidationException, match="both included and excluded"):
        await pipeline.run(full_request, credential)

    assert graph.requests == []


@pytest.mark.asyncio
async def test_unknown_timezone_fails_before_any_request(graph, credential, pipeline, full_request):
    _stub_all_stages(graph)
    full_request.adset.timezone_name = "Mars/Olympus_Mons"

    with pytest.raises(BusinessValidationException, match="Unknown timezone"):
        await pipeline.run(full_request, credential)

    assert graph.requests == []


def test_to_pipeline_error_maps_validation():
    error = to_pipeline_error(BusinessValidationException("Ad name is required"))
    assert error.kind is ErrorKind.VALIDATION
    assert error.message == "Ad name is required"
