import logging
from typing import Any

from googleapiclient.discovery import build
from googleapiclient.errors import HttpError

from sheetrelay.exceptions import AuthenticationError, IntegrationError
from sheetrelay.models.sheets import ReadRangeResponse, SheetProperties

logger = logging.getLogger(__name__)


def a1_range(sheet_name: str, cells: str | None = None) -> str:
    """Quote a sheet title for A1 notation, e.g. ``'Form - Log'!A1``."""
    quoted = "'" + sheet_name.replace("'", "''") + "'"
    return f"{quoted}!{cells}" if cells else quoted


def _handle_api_error(e: HttpError):
    if e.resp.status in (401, 403):
        raise AuthenticationError("Sheets API rejected the service account credentials.") from e
    raise IntegrationError(f"Sheets API error: {e}") from e


class SheetsService:
    """Sheets v4 calls made on behalf of the relay handlers.

    Holds only the credentials. A discovery client is built per call since the
    underlying httplib2 transport must not be shared between threads.
    """

    def __init__(self, credentials):
        self._credentials = credentials

    def _service(self):
        return build("sheets", "v4", credentials=self._credentials, cache_discovery=False)

    def list_sheets(self, spreadsheet_id: str) -> list[SheetProperties]:
        """Return title and numeric id for every sheet in the spreadsheet."""
        try:
            result = self._service().spreadsheets().get(spreadsheetId=spreadsheet_id).execute()
        except HttpError as e:
            _handle_api_error(e)
        return [
            SheetProperties(title=s["properties"]["title"], sheet_id=s["properties"].get("sheetId", 0))
            for s in result.get("sheets", [])
        ]

    def read_range(self, spreadsheet_id: str, range: str) -> ReadRangeResponse:
        try:
            result = self._service().spreadsheets().values().get(
                spreadsheetId=spreadsheet_id, range=range
            ).execute()
        except HttpError as e:
            _handle_api_error(e)
        return ReadRangeResponse(
            spreadsheet_id=spreadsheet_id,
            range=result.get("range", range),
            values=result.get("values", []),
        )

    def append_rows(
        self,
        spreadsheet_id: str,
        range: str,
        values: list[list[Any]],
        value_input_option: str = "USER_ENTERED",
    ) -> dict:
        """Append rows after the last row with data in the range."""
        try:
            return self._service().spreadsheets().values().append(
                spreadsheetId=spreadsheet_id,
                range=range,
                valueInputOption=value_input_option,
                body={"values": values},
            ).execute()
        except HttpError as e:
            _handle_api_error(e)

    def update_range(
        self,
        spreadsheet_id: str,
        range: str,
        values: list[list[Any]],
        value_input_option: str = "USER_ENTERED",
    ) -> dict:
        try:
            return self._service().spreadsheets().values().update(
                spreadsheetId=spreadsheet_id,
                range=range,
                valueInputOption=value_input_option,
                body={"values": values},
            ).execute()
        except HttpError as e:
            _handle_api_error(e)

    def batch_update(self, spreadsheet_id: str, requests: list[dict]) -> dict:
        try:
            return self._service().spreadsheets().batchUpdate(
                spreadsheetId=spreadsheet_id, body={"requests": requests}
            ).execute()
        except HttpError as e:
            _handle_api_error(e)

    def add_sheet(self, spreadsheet_id: str, title: str) -> dict:
        logger.info("Creating sheet %r in spreadsheet %s", title, spreadsheet_id)
        return self.batch_update(spreadsheet_id, [{"addSheet": {"properties": {"title": title}}}])

    def delete_rows(self, spreadsheet_id: str, sheet_id: int, start_index: int, end_index: int) -> dict:
        """Delete the 0-indexed, end-exclusive row span [start_index, end_index)."""
        return self.batch_update(spreadsheet_id, [{
            "deleteDimension": {
                "range": {
                    "sheetId": sheet_id,
                    "dimension": "ROWS",
                    "startIndex": start_index,
                    "endIndex": end_index,
                },
            },
        }])
