import re
from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient

from sheetrelay.clients import Clients
from sheetrelay.exceptions import IntegrationError
from sheetrelay.models.sheets import ReadRangeResponse, SheetProperties

SPREADSHEET_ID = "sheet123"
UPLOAD_FOLDER_ID = "folder789"

_A1 = re.compile(r"^'((?:[^']|'')*)'(?:!(.+))?$")


class FakeSheets:
    """In-memory stand-in for SheetsService. Records every call in ``calls``."""

    def __init__(self):
        self.spreadsheets: dict[str, dict[str, dict]] = {}
        self.calls: list[tuple] = []
        self._next_sheet_id = 100

    def seed(self, spreadsheet_id: str, title: str, rows: list[list] | None = None) -> int:
        sheet_id = self._next_sheet_id
        self._next_sheet_id += 1
        self.spreadsheets.setdefault(spreadsheet_id, {})[title] = {"sheet_id": sheet_id, "rows": list(rows or [])}
        return sheet_id

    def rows(self, spreadsheet_id: str, title: str) -> list[list]:
        return self.spreadsheets[spreadsheet_id][title]["rows"]

    def called(self, name: str) -> list[tuple]:
        return [call for call in self.calls if call[0] == name]

    def _sheet(self, spreadsheet_id: str, range: str) -> tuple[dict, str | None]:
        match = _A1.match(range)
        if not match:
            raise IntegrationError(f"Unable to parse range: {range}")
        title = match.group(1).replace("''", "'")
        try:
            return self.spreadsheets[spreadsheet_id][title], match.group(2)
        except KeyError:
            raise IntegrationError(f"Unable to parse range: {range}") from None

    def list_sheets(self, spreadsheet_id):
        self.calls.append(("list_sheets", spreadsheet_id))
        sheets = self.spreadsheets.get(spreadsheet_id, {})
        return [SheetProperties(title=title, sheet_id=s["sheet_id"]) for title, s in sheets.items()]

    def read_range(self, spreadsheet_id, range):
        self.calls.append(("read_range", spreadsheet_id, range))
        sheet, cells = self._sheet(spreadsheet_id, range)
        values = sheet["rows"][:1] if cells and cells.startswith("A1:") else sheet["rows"]
        return ReadRangeResponse(spreadsheet_id=spreadsheet_id, range=range, values=[list(r) for r in values])

    def append_rows(self, spreadsheet_id, range, values, value_input_option="USER_ENTERED"):
        self.calls.append(("append_rows", spreadsheet_id, range, values, value_input_option))
        sheet, _ = self._sheet(spreadsheet_id, range)
        sheet["rows"].extend(list(row) for row in values)
        return {"spreadsheetId": spreadsheet_id, "updates": {"updatedRange": range, "updatedRows": len(values)}}

    def update_range(self, spreadsheet_id, range, values, value_input_option="USER_ENTERED"):
        self.calls.append(("update_range", spreadsheet_id, range, values, value_input_option))
        return {"spreadsheetId": spreadsheet_id, "updatedRange": range, "updatedRows": len(values)}

    def add_sheet(self, spreadsheet_id, title):
        self.calls.append(("add_sheet", spreadsheet_id, title))
        sheet_id = self.seed(spreadsheet_id, title)
        return {"replies": [{"addSheet": {"properties": {"title": title, "sheetId": sheet_id}}}]}

    def delete_rows(self, spreadsheet_id, sheet_id, start_index, end_index):
        self.calls.append(("delete_rows", spreadsheet_id, sheet_id, start_index, end_index))
        return {"spreadsheetId": spreadsheet_id, "replies": [{}]}


class FakeDrive:
    def __init__(self):
        self.uploads: list[dict] = []
        self.shared: list[str] = []

    def upload_file(self, content, mime_type, name, parent_folder_id=None):
        file_id = f"file{len(self.uploads) + 1}"
        self.uploads.append({
            "id": file_id, "content": content, "mime_type": mime_type,
            "name": name, "parent_folder_id": parent_folder_id,
        })
        return file_id

    def share_publicly(self, file_id):
        self.shared.append(file_id)


@pytest.fixture
def fake_sheets():
    return FakeSheets()


@pytest.fixture
def fake_drive():
    return FakeDrive()


@pytest.fixture
def clients(fake_sheets, fake_drive):
    return Clients(sheets=fake_sheets, drive=fake_drive, upload_folder_id=UPLOAD_FOLDER_ID)


@pytest.fixture
def failing_clients():
    """Clients whose every remote call raises with sensitive-looking detail."""
    sheets = MagicMock()
    drive = MagicMock()
    for method in ("list_sheets", "read_range", "append_rows", "update_range", "add_sheet", "delete_rows"):
        getattr(sheets, method).side_effect = RuntimeError("backend exploded: private_key=SECRET")
    for method in ("upload_file", "share_publicly"):
        getattr(drive, method).side_effect = RuntimeError("backend exploded: private_key=SECRET")
    return Clients(sheets=sheets, drive=drive, upload_folder_id=UPLOAD_FOLDER_ID)


@pytest.fixture
def api_client(clients):
    """FastAPI TestClient wired to the in-memory fakes."""
    from sheetrelay.main import create_app
    return TestClient(create_app(clients=clients))


@pytest.fixture
def failing_api_client(failing_clients):
    from sheetrelay.main import create_app
    return TestClient(create_app(clients=failing_clients))
