from typing import Any, Optional

from fastapi import status

from exceptions.custom_exceptions import BaseAppException


class MetaAPIError(BaseAppException):
    """Exception raised when Meta Graph API returns an error."""

    def __init__(
        self,
        message: str,
        status_code: int = 500,
        error_data: Optional[dict[str, Any]] = None
    ):
        super().__init__(message, status.HTTP_502_BAD_GATEWAY)
        self.upstream_status = status_code
        self.error_data = error_data or {}

    @property
    def error(self) -> dict[str, Any]:
        error = self.error_data.get("error")
        return error if isinstance(error, dict) else {}

    @property
    def code(self) -> Optional[int]:
        return self.error.get("code")

    @property
    def error_subcode(self) -> Optional[int]:
        return self.error.get("error_subcode")

    @property
    def error_user_msg(self) -> Optional[str]:
        return self.error.get("error_user_msg")

    @property
    def fbtrace_id(self) -> Optional[str]:
        return self.error.get("fbtrace_id")

    def details(self) -> dict[str, Any]:
        return {
            "code": self.code,
            "error_subcode": self.error_subcode,
            "message": self.message,
            "error_user_title": self.error.get("error_user_title"),
            "error_user_msg": self.error_user_msg,
            "fbtrace_id": self.fbtrace_id,
            "status": self.upstream_status,
        }

    def response_fields(self) -> dict[str, Any]:
        return {"error_details": self.details()}


class MetaTransportError(BaseAppException):
    """Network failure or timeout talking to Meta; no structured body."""

    def __init__(self, message: str):
        super().__init__(message, status.HTTP_504_GATEWAY_TIMEOUT)
