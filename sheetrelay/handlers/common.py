import json
import logging
from contextlib import contextmanager
from typing import Any

from sheetrelay.exceptions import InvalidInput, SheetRelayError, UpstreamError
from sheetrelay.models.relay import OperationRequest, OperationResult
from sheetrelay.services.sheets import SheetsService

logger = logging.getLogger(__name__)


def no_content() -> OperationResult:
    return OperationResult(no_content=True)


def ok(payload: Any) -> OperationResult:
    return OperationResult(payload=payload)


def is_missing(value: Any) -> bool:
    """True for null, false, zero and the empty string.

    Empty lists and objects count as present.
    """
    if value is None or value is False or value == "":
        return True
    return isinstance(value, (int, float)) and not isinstance(value, bool) and value == 0


def parse_json_body(request: OperationRequest, plain_text: bool = False) -> dict:
    """Decode the request body into a JSON object. An absent body is ``{}``."""
    body = request.body
    if body is None:
        return {}
    if isinstance(body, dict):
        return body
    try:
        parsed = json.loads(body)
    except (TypeError, ValueError) as e:
        raise InvalidInput("Invalid JSON", plain_text=plain_text) from e
    if not isinstance(parsed, dict):
        raise InvalidInput("Invalid JSON", plain_text=plain_text)
    return parsed


@contextmanager
def upstream_call(message: str, plain_text: bool = False):
    """Turn any remote failure inside the block into an UpstreamError.

    The original error is logged with its traceback; the caller only sees
    ``message``. Relay errors raised inside the block pass through unchanged.
    """
    try:
        yield
    except SheetRelayError:
        raise
    except Exception as e:
        logger.exception("%s (%s)", message, type(e).__name__)
        raise UpstreamError(message, plain_text=plain_text) from e


def ensure_sheet(sheets: SheetsService, spreadsheet_id: str, title: str) -> bool:
    """Create the sheet unless one with exactly this title exists. Returns True if created."""
    existing = sheets.list_sheets(spreadsheet_id)
    if any(sheet.title == title for sheet in existing):
        return False
    sheets.add_sheet(spreadsheet_id, title)
    return True
