from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field


class OperationRequest(BaseModel):
    """Transport-neutral view of one inbound HTTP request."""

    model_config = ConfigDict(frozen=True)

    method: str
    headers: dict[str, str] = Field(default_factory=dict)
    query: dict[str, str] | None = None
    # JSON text, None, or the raw value when it could not be serialized
    body: Any = None

    @property
    def is_preflight(self) -> bool:
        return self.method == "OPTIONS"

    def query_param(self, name: str) -> str | None:
        if not self.query:
            return None
        return self.query.get(name)


class OperationResult(BaseModel):
    success: bool = True
    payload: Any = None
    no_content: bool = False


class FileAttachment(BaseModel):
    content: bytes
    file_name: str
    mime_type: str


class FileOnlySubmission(BaseModel):
    kind: Literal["file"] = "file"
    attachment: FileAttachment


class FormSubmission(BaseModel):
    kind: Literal["form"] = "form"
    spreadsheet_id: str
    form_title: str
    fields: dict[str, Any]
    attachment: FileAttachment | None = None


Submission = FileOnlySubmission | FormSubmission


# --- Response payloads (wire names are camelCase) ---

class _WireModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class SheetsListResponse(_WireModel):
    sheets: list[str]


class SheetDataResponse(_WireModel):
    data: list[list[Any]]


class FileUploadResponse(_WireModel):
    file_url: str = Field(alias="fileUrl")


class SubmitResponse(_WireModel):
    message: str
    file_url: str | None = Field(default=None, alias="fileUrl")
    appended_rows: int = Field(alias="appendedRows")


class RemoteResultResponse(_WireModel):
    result: dict[str, Any]
