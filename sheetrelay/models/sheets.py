from typing import Any

from pydantic import BaseModel, Field


class SheetProperties(BaseModel):
    title: str
    sheet_id: int


class ReadRangeResponse(BaseModel):
    spreadsheet_id: str
    range: str
    values: list[list[Any]] = Field(default_factory=list)


class SheetReference(BaseModel):
    spreadsheet_id: str
    sheet_name: str


class RowDescriptor(BaseModel):
    sheet: SheetReference
    row_index: int
    values: list[Any] | None = None


LOG_HEADER = ["Submission ID", "Update Timestamp", "User ID", "User Email", "Change Description"]


class LogEntry(BaseModel):
    submission_id: Any
    update_timestamp: Any
    updated_by_id: Any
    updated_by_email: Any
    change_description: Any

    def as_row(self) -> list[Any]:
        return [
            self.submission_id,
            self.update_timestamp,
            self.updated_by_id,
            self.updated_by_email,
            self.change_description,
        ]
