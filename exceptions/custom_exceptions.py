from typing import Any

from fastapi import status


class BaseAppException(Exception):
    """Base class for all app-specific exceptions."""
    def __init__(self, message: str, status_code: int = status.HTTP_400_BAD_REQUEST):
        self.message = message
        self.status_code = status_code
        super().__init__(message)

    def response_fields(self) -> dict[str, Any]:
        """Extra top-level fields merged into the error envelope."""
        return {}


class BusinessValidationException(BaseAppException):
    """Invalid input or business rule violation."""
    def __init__(self, message: str):
        super().__init__(message, status.HTTP_422_UNPROCESSABLE_ENTITY)


class PayloadTransformException(BusinessValidationException):
    """Input could not be converted to the Meta wire format."""


class AssetFeedSpecException(BusinessValidationException):
    """Placement customization assets or rules are inconsistent."""


class CredentialException(BaseAppException):
    """Meta access token missing or expired."""
    def __init__(self, message: str = "Meta access token is not configured"):
        super().__init__(message, status.HTTP_401_UNAUTHORIZED)

