"""
Shared fixtures: a stubbed Graph API behind the shared httpx client, a
credential snapshot, and sample request payloads.
"""

import json
from urllib.parse import parse_qs

import httpx
import pytest
import pytest_asyncio  # type: ignore

from core.credentials import Credential
from core.infrastructure import http_client

TEST_TOKEN = "EAAB-test-token-123"


class GraphStub:
    """Answers Graph requests from canned responses and records every call.

    ``add("POST", "/campaigns", ...)`` matches any request whose path ends with
    the given suffix. Queued responses are served in order; the last one
    repeats. A response may be an exception instance to simulate transport
    failures.
    """

    def __init__(self):
        self.routes: dict[tuple[str, str], list] = {}
        self.requests: list[httpx.Request] = []

    def add(self, method: str, path: str, *responses):
        self.routes.setdefault((method.upper(), path), []).extend(responses)
        return self

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        for (method, path), queue in self.routes.items():
            if request.method == method and request.url.path.endswith(path):
                response = queue.pop(0) if len(queue) > 1 else queue[0]
                if isinstance(response, Exception):
                    raise response
                status, body = response
                if isinstance(body, (dict, list)):
                    return httpx.Response(status, json=body)
                return httpx.Response(status, text=body)
        return httpx.Response(404, json={"error": {"message": f"No stub for {request.url.path}"}})

    def paths(self) -> list[str]:
        return [request.url.path for request in self.requests]

    @staticmethod
    def form(request: httpx.Request) -> dict[str, str]:
        parsed = parse_qs(request.content.decode(), keep_blank_values=True)
        return {key: values[0] for key, values in parsed.items()}

    @staticmethod
    def form_json(request: httpx.Request, field: str):
        return json.loads(GraphStub.form(request)[field])


@pytest_asyncio.fixture
async def graph():
    stub = GraphStub()
    http_client.init_http_client(transport=httpx.MockTransport(stub.handler))
    yield stub
    await http_client.close_http_client()


@pytest.fixture
def credential() -> Credential:
    return Credential(access_token=TEST_TOKEN)


def _graph_error(code: int, message: str = "Invalid parameter", subcode: int | None = None, user_msg: str | None = None):
    error = {"message": message, "type": "OAuthException", "code": code, "fbtrace_id": "AbCdEf123"}
    if subcode is not None:
        error["error_subcode"] = subcode
    if user_msg is not None:
        error["error_user_msg"] = user_msg
    return {"error": error}


@pytest.fixture
def graph_error():
    """Builds a Graph-style error body."""
    return _graph_error


# ---------------------------------------------------------------------------
# Sample payloads
# ---------------------------------------------------------------------------


@pytest.fixture
def campaign_payload() -> dict:
    return {"name": "Promo", "objective": "OUTCOME_SALES", "status": "PAUSED"}


@pytest.fixture
def adset_payload() -> dict:
    return {
        "name": "Promo - US",
        "daily_budget": 2000,
        "optimization_goal": "LINK_CLICKS",
        "billing_event": "IMPRESSIONS",
        "start_time": "2030-03-01T09:00:00",
        "targeting": {
            "geo_locations": {"countries": ["US", {"code": "CA", "name": "Canada"}]},
            "age_min": 21,
            "age_max": 55,
            "gender": "FEMALE",
            "locales": [6],
        },
    }


@pytest.fixture
def standard_creative_payload() -> dict:
    return {
        "name": "Promo creative",
        "object_story_spec": {
            "page_id": "page_1",
            "link_data": {
                "link": "https://example.com/sale",
                "message": "Everything 20% off this week",
                "name": "Spring sale",
                "image_hash": "abc123",
                "call_to_action": {"type": "SHOP_NOW"},
            },
        },
    }


@pytest.fixture
def asset_feed_input() -> dict:
    return {
        "ad_formats": ["SINGLE_IMAGE"],
        "images": [
            {"hash": "hash_square", "labels": ["feed_image"]},
            {"image_hash": "hash_vertical", "labels": ["story_image"]},
        ],
        "titles": [{"text": "Spring sale", "labels": ["main_title"]}],
        "bodies": [{"text": "Everything 20% off"}],
        "link_urls": [{"website_url": "https://example.com/sale"}],
        "call_to_action_types": ["SHOP_NOW"],
        "placements": [
            {
                "publisher_platforms": ["facebook", "instagram"],
                "facebook_positions": ["feed"],
                "instagram_positions": ["stream"],
                "image_label": "feed_image",
                "title_label": "main_title",
            },
            {
                "publisher_platforms": ["instagram"],
                "instagram_positions": ["story"],
                "image_label": "story_image",
            },
        ],
    }


@pytest.fixture
def placement_creative_payload(asset_feed_input) -> dict:
    return {
        "name": "Promo placements",
        "object_story_spec": {"page_id": "page_1"},
        "asset_feed": asset_feed_input,
    }
