import logging

from sheetrelay.clients import Clients
from sheetrelay.exceptions import MissingParameter
from sheetrelay.handlers.common import ensure_sheet, is_missing, no_content, ok, parse_json_body, upstream_call
from sheetrelay.models.relay import OperationRequest, OperationResult, RemoteResultResponse
from sheetrelay.models.sheets import LOG_HEADER, LogEntry
from sheetrelay.services.sheets import SheetsService, a1_range

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = (
    "spreadsheetId",
    "formSheetName",
    "submissionId",
    "updateTimestamp",
    "updatedById",
    "updatedByEmail",
    "changeDescription",
)


def log_sheet_name(form_sheet_name: str) -> str:
    return f"{form_sheet_name} - Log"


def ensure_log_sheet(sheets: SheetsService, spreadsheet_id: str, form_sheet_name: str) -> str:
    """Create the log sheet and its header row if either is missing."""
    name = log_sheet_name(form_sheet_name)
    created = ensure_sheet(sheets, spreadsheet_id, name)
    # A sheet left without a header by an earlier failed call gets one now
    if created or not sheets.read_range(spreadsheet_id, a1_range(name, "A1:E1")).values:
        sheets.append_rows(spreadsheet_id, a1_range(name, "A1"), [LOG_HEADER], value_input_option="USER_ENTERED")
    return name


def log_form_change(request: OperationRequest, clients: Clients) -> OperationResult:
    """Append one audit row to ``"<formSheetName> - Log"``."""
    if request.is_preflight:
        return no_content()

    body = parse_json_body(request)
    if any(is_missing(body.get(field)) for field in REQUIRED_FIELDS):
        raise MissingParameter("Missing required parameters.")

    spreadsheet_id = str(body["spreadsheetId"])
    form_sheet_name = str(body["formSheetName"])
    entry = LogEntry(
        submission_id=body["submissionId"],
        update_timestamp=body["updateTimestamp"],
        updated_by_id=body["updatedById"],
        updated_by_email=body["updatedByEmail"],
        change_description=body["changeDescription"],
    )

    with upstream_call("Failed to log form change."):
        name = ensure_log_sheet(clients.sheets, spreadsheet_id, form_sheet_name)
        result = clients.sheets.append_rows(
            spreadsheet_id, a1_range(name, "A1"), [entry.as_row()], value_input_option="USER_ENTERED"
        )

    logger.info("Logged change to submission %s in %r", entry.submission_id, name)
    return ok(RemoteResultResponse(result=result or {}))
