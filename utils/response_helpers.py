from typing import Any

from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse


def success_response(data: Any, status_code: int = 200, **fields: Any):
    return JSONResponse(
        content=jsonable_encoder(
            {"success": True, **fields, "data": data, "error": None}
        ),
        status_code=status_code
    )


def error_response(error: str, status_code: int = 500, **fields: Any):
    return JSONResponse(
        content=jsonable_encoder(
            {"success": False, "data": None, "error": error, **fields}
        ),
        status_code=status_code
    )
