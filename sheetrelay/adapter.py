"""Normalize inbound requests from either hosting mode into OperationRequest.

Handlers always see the body as JSON text (or ``None``). Parsed payloads are
re-serialized here; text that is not valid JSON is handed over untouched so
the handler can reject it with its own error.
"""

import base64
import binascii
import json
import logging
from typing import Any, Mapping
from urllib.parse import parse_qsl

from starlette.requests import Request

from sheetrelay.models.relay import OperationRequest

logger = logging.getLogger(__name__)

FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"


def normalize_body(body: Any) -> Any:
    """Re-serialize a parsed body to compact JSON, falling back to the raw value."""
    if body is None:
        return None
    if isinstance(body, bytes):
        body = body.decode("utf-8", errors="replace")
    if isinstance(body, str):
        return body or None
    if isinstance(body, (dict, list)) and not body:
        return None
    try:
        return json.dumps(body, separators=(",", ":"), ensure_ascii=False)
    except (TypeError, ValueError):
        logger.debug("Body of type %s is not JSON serializable, passing it through", type(body).__name__)
        return body


def form_fields(text: str) -> dict[str, Any]:
    """Parse a form-urlencoded body. Repeated keys collect into a list."""
    fields: dict[str, Any] = {}
    for key, value in parse_qsl(text, keep_blank_values=True):
        if key not in fields:
            fields[key] = value
        elif isinstance(fields[key], list):
            fields[key].append(value)
        else:
            fields[key] = [fields[key], value]
    return fields


async def from_starlette(request: Request) -> OperationRequest:
    raw = await request.body()
    content_type = request.headers.get("content-type", "")

    body: Any = None
    if raw:
        text = raw.decode("utf-8", errors="replace")
        if content_type.startswith(FORM_CONTENT_TYPE):
            body = form_fields(text)
        else:
            try:
                parsed = json.loads(text)
            except ValueError:
                parsed = None
            body = parsed if isinstance(parsed, (dict, list)) else text

    return OperationRequest(
        method=request.method.upper(),
        headers=dict(request.headers),
        query=dict(request.query_params) or None,
        body=normalize_body(body),
    )


def from_event(event: Mapping[str, Any]) -> OperationRequest:
    """Build a request from a Netlify/Lambda style event mapping."""
    body = event.get("body")
    if event.get("isBase64Encoded") and isinstance(body, str):
        try:
            body = base64.b64decode(body).decode("utf-8")
        except (binascii.Error, UnicodeDecodeError):
            logger.warning("Event body flagged as base64 could not be decoded, passing it through")

    return OperationRequest(
        method=str(event.get("httpMethod") or "GET").upper(),
        headers=_as_strings(event.get("headers")),
        query=_as_strings(event.get("queryStringParameters")) or None,
        body=normalize_body(body),
    )


def _as_strings(mapping: Mapping[str, Any] | None) -> dict[str, str]:
    # Event producers are not consistent about header and query value types
    return {str(key): "" if value is None else str(value) for key, value in (mapping or {}).items()}
