import logging
from typing import Any

from sheetrelay.clients import Clients
from sheetrelay.exceptions import InvalidInput, MissingParameter, NotFound
from sheetrelay.handlers.common import is_missing, no_content, ok, parse_json_body, upstream_call
from sheetrelay.models.relay import OperationRequest, OperationResult, RemoteResultResponse
from sheetrelay.models.sheets import RowDescriptor, SheetReference
from sheetrelay.services.sheets import a1_range

logger = logging.getLogger(__name__)


def _row_number(value: Any) -> int:
    if isinstance(value, bool) or (isinstance(value, float) and not value.is_integer()):
        raise InvalidInput("rowIndex must be an integer.")
    try:
        return int(value)
    except (TypeError, ValueError) as e:
        raise InvalidInput("rowIndex must be an integer.") from e


def update_row(request: OperationRequest, clients: Clients) -> OperationResult:
    """Overwrite columns A:Z of one 1-indexed row.

    Every field is checked for truthiness, so ``rowIndex: 0`` counts as missing.
    """
    if request.is_preflight:
        return no_content()

    body = parse_json_body(request)
    spreadsheet_id = body.get("spreadsheetId")
    sheet_name = body.get("sheetName")
    row_index = body.get("rowIndex")
    values = body.get("values")
    if any(is_missing(field) for field in (spreadsheet_id, sheet_name, row_index, values)):
        raise MissingParameter("Missing required parameters.")
    if not isinstance(values, list):
        raise InvalidInput("values must be an array.")

    row = RowDescriptor(
        sheet=SheetReference(spreadsheet_id=str(spreadsheet_id), sheet_name=str(sheet_name)),
        row_index=_row_number(row_index),
        values=values,
    )
    cells = f"A{row.row_index}:Z{row.row_index}"

    with upstream_call("Failed to update sheet row."):
        result = clients.sheets.update_range(
            row.sheet.spreadsheet_id,
            a1_range(row.sheet.sheet_name, cells),
            [row.values],
            value_input_option="USER_ENTERED",
        )

    logger.info("Updated row %d of %r in %s", row.row_index, row.sheet.sheet_name, row.sheet.spreadsheet_id)
    return ok(RemoteResultResponse(result=result or {}))


def delete_row(request: OperationRequest, clients: Clients) -> OperationResult:
    """Delete one row given as a 1-indexed position counting the header row.

    Only presence of ``rowIndex`` is checked, so ``0`` is forwarded to the API.
    """
    if request.is_preflight:
        return no_content()

    body = parse_json_body(request)
    spreadsheet_id = body.get("spreadsheetId")
    sheet_name = body.get("sheetName")
    row_index = body.get("rowIndex")
    if is_missing(spreadsheet_id) or is_missing(sheet_name) or row_index is None:
        raise MissingParameter("Missing required parameters.")

    row = RowDescriptor(
        sheet=SheetReference(spreadsheet_id=str(spreadsheet_id), sheet_name=str(sheet_name)),
        row_index=_row_number(row_index),
    )

    with upstream_call("Failed to delete sheet row."):
        sheets = clients.sheets.list_sheets(row.sheet.spreadsheet_id)
        match = next((s for s in sheets if s.title == row.sheet.sheet_name), None)
        if match is None:
            raise NotFound("Sheet not found.")
        result = clients.sheets.delete_rows(
            row.sheet.spreadsheet_id, match.sheet_id, row.row_index - 1, row.row_index
        )

    logger.info("Deleted row %d of %r in %s", row.row_index, row.sheet.sheet_name, row.sheet.spreadsheet_id)
    return ok(RemoteResultResponse(result=result or {}))
