import logging

from sheetrelay.clients import Clients
from sheetrelay.exceptions import MissingParameter
from sheetrelay.handlers.common import no_content, ok, upstream_call
from sheetrelay.models.relay import (
    OperationRequest,
    OperationResult,
    SheetDataResponse,
    SheetsListResponse,
)
from sheetrelay.services.sheets import a1_range

logger = logging.getLogger(__name__)


def list_sheets(request: OperationRequest, clients: Clients) -> OperationResult:
    """List sheet titles, optionally narrowed to an exact ``sheetName`` match."""
    if request.is_preflight:
        return no_content()

    spreadsheet_id = request.query_param("spreadsheetId")
    if not spreadsheet_id:
        raise MissingParameter("Missing required spreadsheetId parameter.")
    title_filter = request.query_param("sheetName")

    with upstream_call("Failed to fetch sheet names."):
        titles = [sheet.title for sheet in clients.sheets.list_sheets(spreadsheet_id)]

    if title_filter:
        titles = [title for title in titles if title == title_filter]
    logger.info("Fetched %d sheet names from %s", len(titles), spreadsheet_id)
    return ok(SheetsListResponse(sheets=titles))


def get_sheet_data(request: OperationRequest, clients: Clients) -> OperationResult:
    """Return every populated cell of one sheet as a 2-D list."""
    if request.is_preflight:
        return no_content()

    spreadsheet_id = request.query_param("spreadsheetId")
    if not spreadsheet_id:
        raise MissingParameter("Missing required spreadsheetId parameter.")
    sheet_name = request.query_param("sheetName")
    if not sheet_name:
        raise MissingParameter("Missing required sheetName parameter.")

    with upstream_call("Failed to fetch sheet data."):
        result = clients.sheets.read_range(spreadsheet_id, a1_range(sheet_name))

    logger.info("Fetched %d rows from %r in %s", len(result.values), sheet_name, spreadsheet_id)
    return ok(SheetDataResponse(data=result.values))
