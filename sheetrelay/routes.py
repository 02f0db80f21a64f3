from dataclasses import dataclass
from typing import Callable

from sheetrelay.clients import Clients
from sheetrelay.handlers.changelog import log_form_change
from sheetrelay.handlers.rows import delete_row, update_row
from sheetrelay.handlers.sheets import get_sheet_data, list_sheets
from sheetrelay.handlers.submit import submit
from sheetrelay.models.relay import OperationRequest, OperationResult

Handler = Callable[[OperationRequest, Clients], OperationResult]


@dataclass(frozen=True)
class RelayRoute:
    name: str
    method: str
    path: str
    handler: Handler
    cors_methods: str


ROUTES = [
    RelayRoute("get_sheets", "GET", "/getSheets", list_sheets, "GET, POST, OPTIONS"),
    RelayRoute("get_sheet_data", "GET", "/getSheetData", get_sheet_data, "GET, POST, OPTIONS"),
    RelayRoute("submit", "POST", "/submit", submit, "POST, OPTIONS"),
    RelayRoute("update_sheet_row", "POST", "/updateSheetRow", update_row, "POST, OPTIONS"),
    RelayRoute("delete_sheet_row", "POST", "/deleteSheetRow", delete_row, "POST, OPTIONS"),
    RelayRoute("log_form_change", "POST", "/logFormChange", log_form_change, "POST, OPTIONS"),
]

ROUTES_BY_NAME = {route.name: route for route in ROUTES}
ROUTES_BY_PATH = {route.path: route for route in ROUTES}
