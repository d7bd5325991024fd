from typing import Any, Optional

import httpx
import structlog

from adapters.meta.exceptions import MetaAPIError, MetaTransportError
from adapters.meta.models.resource_model import CreatedResource
from config.meta import META_BASE_URL, MetaConfig
from core.credentials import Credential
from core.infrastructure.http_client import RETRYABLE_STATUS_CODES, get_http_client, http_request
from utils.redaction import redact_value

logger = structlog.get_logger(__name__)


def is_rate_limited(response: httpx.Response) -> bool:
    """Graph reports throttling as 400/403 with specific error codes."""
    if response.status_code in RETRYABLE_STATUS_CODES:
        return True
    try:
        body = response.json()
    except ValueError:
        return False
    error = body.get("error") if isinstance(body, dict) else None
    if not isinstance(error, dict):
        return False
    return (
        error.get("code") in MetaConfig.RATE_LIMIT_ERROR_CODES
        or error.get("error_subcode") in MetaConfig.RATE_LIMIT_ERROR_SUBCODES
    )


class MetaClient:
    def __init__(self, credential: Credential):
        self.credential = credential

    def _headers(self) -> dict[str, str]:
        return {"Authorization": f"Bearer {self.credential.access_token}"}

    def _redact(self, value: Any) -> Any:
        return redact_value(value, (self.credential.access_token,))

    async def post_form(
        self,
        endpoint: str,
        data: dict[str, str],
        files: Optional[dict[str, Any]] = None,
    ) -> dict[str, Any]:
        """Single attempt; creation calls are never retried."""
        client = get_http_client()
        try:
            response = await client.post(
                f"{META_BASE_URL}{endpoint}",
                data=data,
                files=files,
                headers=self._headers(),
            )
        except httpx.TransportError as e:
            raise self._transport_error(endpoint, e)
        if not response.is_success:
            self._raise_api_error(endpoint, response)
        return self._json(response)

    async def get(
        self,
        endpoint: str,
        params: Optional[dict[str, Any]] = None,
    ) -> dict[str, Any]:
        """Reads retry on Graph rate-limit codes with exponential backoff."""
        try:
            response = await http_request(
                "GET",
                f"{META_BASE_URL}{endpoint}",
                max_attempts=MetaConfig.MAX_GET_ATTEMPTS,
                base_delay=MetaConfig.RETRY_BASE_DELAY,
                is_retryable=is_rate_limited,
                error_handler=lambda r: self._raise_api_error(endpoint, r),
                params=params,
                headers=self._headers(),
            )
        except httpx.TransportError as e:
            raise self._transport_error(endpoint, e)
        return self._json(response)

    def _json(self, response: httpx.Response) -> dict[str, Any]:
        try:
            return response.json()
        except ValueError:
            raise MetaAPIError(
                f"Meta API returned a non-JSON response: {self._redact(response.text[:200])}",
                response.status_code,
            )

    def _transport_error(self, endpoint: str, error: httpx.TransportError) -> MetaTransportError:
        message = self._redact(str(error)) or type(error).__name__
        logger.error("meta_transport_error", endpoint=endpoint, error=message)
        return MetaTransportError(f"Meta API request failed: {message}")

    def _raise_api_error(self, endpoint: str, response: httpx.Response) -> None:
        try:
            error_data = response.json()
        except ValueError:
            error_data = {"error": {"message": response.text[:200]}}
        if not isinstance(error_data, dict):
            error_data = {"error": {"message": str(error_data)[:200]}}
        error_data = self._redact(error_data)

        error = error_data.get("error") if isinstance(error_data.get("error"), dict) else {}
        logger.error(
            "meta_api_error",
            endpoint=endpoint,
            status=response.status_code,
            code=error.get("code"),
            error_subcode=error.get("error_subcode"),
            error_user_msg=error.get("error_user_msg"),
            fbtrace_id=error.get("fbtrace_id"),
            error=error_data,
        )
        message = error.get("message") or error.get("error_user_msg") or "Unknown error"
        raise MetaAPIError(message, response.status_code, error_data)


def normalize_ad_account_id(ad_account_id: str) -> str:
    """Strip act_ prefix if present to avoid duplication."""
    return ad_account_id.removeprefix("act_")


def to_created_resource(response: dict[str, Any], resource: str) -> CreatedResource:
    resource_id = response.get("id") if isinstance(response, dict) else None
    if not resource_id:
        raise MetaAPIError(
            f"Meta API did not return an id for the new {resource}",
            200,
            {"response": response},
        )
    return CreatedResource(id=str(resource_id), raw_response=response)
