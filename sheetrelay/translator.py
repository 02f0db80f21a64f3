import json
import logging

from pydantic import BaseModel
from starlette.responses import Response

from sheetrelay.exceptions import (
    InvalidInput,
    MethodNotAllowed,
    MissingParameter,
    NotFound,
    SheetRelayError,
    UpstreamError,
)
from sheetrelay.models.common import ErrorResponse
from sheetrelay.models.relay import OperationResult

logger = logging.getLogger(__name__)

JSON_MEDIA_TYPE = "application/json"
TEXT_MEDIA_TYPE = "text/plain; charset=utf-8"

DEFAULT_ALLOW_METHODS = "GET, POST, OPTIONS"
GENERIC_ERROR_MESSAGE = "Internal error"

ERROR_STATUS = {
    MissingParameter: 400,
    InvalidInput: 400,
    NotFound: 404,
    MethodNotAllowed: 405,
    UpstreamError: 500,
}


class HttpResponse(BaseModel):
    status_code: int
    headers: dict[str, str]
    body: str = ""
    media_type: str | None = None


def cors_headers(allow_methods: str = DEFAULT_ALLOW_METHODS) -> dict[str, str]:
    return {
        "Access-Control-Allow-Origin": "*",
        "Access-Control-Allow-Methods": allow_methods,
        "Access-Control-Allow-Headers": "Content-Type",
    }


def _dump(payload) -> str:
    if isinstance(payload, BaseModel):
        payload = payload.model_dump(mode="json", by_alias=True)
    return json.dumps(payload)


def translate(result: OperationResult, allow_methods: str = DEFAULT_ALLOW_METHODS) -> HttpResponse:
    if result.no_content:
        return HttpResponse(status_code=204, headers=cors_headers(allow_methods))
    return HttpResponse(
        status_code=200,
        headers=cors_headers(allow_methods),
        body=_dump(result.payload),
        media_type=JSON_MEDIA_TYPE,
    )


def error_response(
    status_code: int,
    message: str,
    plain_text: bool = False,
    allow_methods: str = DEFAULT_ALLOW_METHODS,
) -> HttpResponse:
    if plain_text:
        return HttpResponse(
            status_code=status_code,
            headers=cors_headers(allow_methods),
            body=message,
            media_type=TEXT_MEDIA_TYPE,
        )
    return HttpResponse(
        status_code=status_code,
        headers=cors_headers(allow_methods),
        body=ErrorResponse(error=message).model_dump_json(),
        media_type=JSON_MEDIA_TYPE,
    )


def translate_error(exc: Exception, allow_methods: str = DEFAULT_ALLOW_METHODS) -> HttpResponse:
    """Map an exception to a response. Unclassified errors never leak their text."""
    if isinstance(exc, SheetRelayError):
        status = ERROR_STATUS.get(type(exc), 500)
        return error_response(status, exc.message, exc.plain_text, allow_methods)
    logger.error("Unclassified error reached the translator: %r", exc)
    return error_response(500, GENERIC_ERROR_MESSAGE, allow_methods=allow_methods)


def to_starlette(response: HttpResponse) -> Response:
    return Response(
        content=response.body or None,
        status_code=response.status_code,
        headers=response.headers,
        media_type=response.media_type,
    )


def to_event(response: HttpResponse) -> dict:
    """Render a serverless ``{statusCode, headers, body}`` result."""
    headers = dict(response.headers)
    if response.media_type:
        headers["Content-Type"] = response.media_type
    return {"statusCode": response.status_code, "headers": headers, "body": response.body}
