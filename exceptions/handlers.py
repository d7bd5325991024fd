import logging
from fastapi import Request, HTTPException
from fastapi.exceptions import RequestValidationError
from exceptions.custom_exceptions import BaseAppException
from utils.response_helpers import error_response

logger = logging.getLogger(__name__)

VALUE_ERROR_PREFIX = "Value error, "


def _validation_details(exc: RequestValidationError) -> list[dict]:
    details = []
    for error in exc.errors():
        message = str(error.get("msg", "")).removeprefix(VALUE_ERROR_PREFIX)
        details.append({
            "loc": [str(part) for part in error.get("loc", ())],
            "msg": message,
            "type": error.get("type"),
        })
    return details


def setup_exception_handlers(app):

    @app.exception_handler(HTTPException)
    async def http_exception_handler(request: Request, exc: HTTPException):
        logger.warning(f"HTTPException at {request.url.path}: {exc.detail}")
        return error_response(exc.detail, status_code=exc.status_code)

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        details = _validation_details(exc)
        logger.warning(f"Validation error at {request.url.path}: {details}")
        message = details[0]["msg"] if details else "Invalid or missing request fields"
        return error_response(message, status_code=422, details=details)

    @app.exception_handler(BaseAppException)
    async def app_exception_handler(request: Request, exc: BaseAppException):
        logger.warning(f"{type(exc).__name__} at {request.url.path}: {exc.message}")
        return error_response(exc.message, status_code=exc.status_code, **exc.response_fields())

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        logger.error(f"Unhandled Exception at {request.url.path}: {exc}", exc_info=exc)
        return error_response("Something went wrong on the server", status_code=500)
