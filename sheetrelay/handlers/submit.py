"""Form submissions and standalone file uploads.

A body carrying only ``file``/``fileName``/``mimeType`` is a file-only upload
to Drive. Anything else must name a ``spreadsheetId`` and ``form_title`` and
is written as one row of the sheet titled after the form, with the remaining
fields flattened into columns.
"""

import base64
import binascii
import logging
import time
from datetime import datetime, timezone

from sheetrelay.clients import Clients
from sheetrelay.exceptions import InvalidInput, MethodNotAllowed
from sheetrelay.flatten import flatten
from sheetrelay.handlers.common import (
    ensure_sheet,
    is_missing,
    no_content,
    ok,
    parse_json_body,
    upstream_call,
)
from sheetrelay.models.relay import (
    FileAttachment,
    FileOnlySubmission,
    FileUploadResponse,
    FormSubmission,
    OperationRequest,
    OperationResult,
    Submission,
    SubmitResponse,
)
from sheetrelay.services.drive import public_url
from sheetrelay.services.sheets import SheetsService, a1_range

logger = logging.getLogger(__name__)

RESERVED_FIELDS = ("spreadsheetId", "form_title", "file", "fileName", "mimeType", "timestamp")
INVALID_FORM_MESSAGE = "Invalid data provided. Ensure 'spreadsheetId' and 'form_title' are valid strings."
INVALID_FILE_MESSAGE = "Invalid file data. Ensure 'file' is base64 encoded."
LEGACY_TIMESTAMP_COLUMNS = ["timestamp", "timestamp"]


def decode_file(value) -> bytes:
    """Decode a base64 ``file`` field, ignoring line breaks and spaces."""
    if not isinstance(value, str):
        raise InvalidInput(INVALID_FILE_MESSAGE, plain_text=True)
    try:
        return base64.b64decode("".join(value.split()), validate=True)
    except (binascii.Error, ValueError) as e:
        raise InvalidInput(INVALID_FILE_MESSAGE, plain_text=True) from e


def parse_submission(body: dict) -> Submission:
    attachment = None
    if not any(is_missing(body.get(key)) for key in ("file", "fileName", "mimeType")):
        attachment = FileAttachment(
            content=decode_file(body["file"]),
            file_name=str(body["fileName"]),
            mime_type=str(body["mimeType"]),
        )
        if is_missing(body.get("spreadsheetId")) and is_missing(body.get("form_title")):
            return FileOnlySubmission(attachment=attachment)

    spreadsheet_id = body.get("spreadsheetId")
    form_title = body.get("form_title")
    if not isinstance(spreadsheet_id, str) or not spreadsheet_id \
            or not isinstance(form_title, str) or not form_title:
        raise InvalidInput(INVALID_FORM_MESSAGE, plain_text=True)

    fields = {key: value for key, value in body.items() if key not in RESERVED_FIELDS}
    return FormSubmission(
        spreadsheet_id=spreadsheet_id,
        form_title=form_title,
        fields=fields,
        attachment=attachment,
    )


def upload_attachment(clients: Clients, attachment: FileAttachment) -> str:
    """Upload under a millisecond-timestamp prefix and return the public URL."""
    content = attachment.content
    name = f"{int(time.time() * 1000)}_{attachment.file_name}"
    file_id = clients.drive.upload_file(
        content, attachment.mime_type, name, parent_folder_id=clients.upload_folder_id
    )
    clients.drive.share_publicly(file_id)
    logger.info("Uploaded %s (%d bytes) as %s", name, len(content), file_id)
    return public_url(file_id)


def save_form(sheets: SheetsService, submission: FormSubmission, submitted_at: str) -> int:
    """Write the header if the sheet has none, then append one data row."""
    spreadsheet_id = submission.spreadsheet_id
    title = submission.form_title
    ensure_sheet(sheets, spreadsheet_id, title)

    record = flatten(submission.fields)
    header = [*record.keys(), "timestamp"]
    row = [*record.values(), submitted_at]

    existing = sheets.read_range(spreadsheet_id, a1_range(title, "A1:Z1")).values
    existing_header = existing[0] if existing else []
    if existing_header[-2:] == LEGACY_TIMESTAMP_COLUMNS:
        # Sheets created by the earlier deployment carry the timestamp column twice
        header.append("timestamp")
        row.append(submitted_at)

    if not existing_header:
        sheets.append_rows(spreadsheet_id, a1_range(title, "A1"), [header], value_input_option="RAW")
    elif existing_header != header:
        # TODO: map values onto the existing header once callers agree on how new fields are added
        logger.warning(
            "Fields submitted to %r do not match its header row; values are appended in submission order",
            title,
        )

    sheets.append_rows(spreadsheet_id, a1_range(title, "A2"), [row], value_input_option="RAW")
    return 1


def submit(request: OperationRequest, clients: Clients) -> OperationResult:
    if request.is_preflight:
        return no_content()
    if request.method != "POST":
        raise MethodNotAllowed("Method Not Allowed", plain_text=True)

    submission = parse_submission(parse_json_body(request, plain_text=True))

    if isinstance(submission, FileOnlySubmission):
        with upstream_call("Failed to upload file.", plain_text=True):
            file_url = upload_attachment(clients, submission.attachment)
        return ok(FileUploadResponse(file_url=file_url))

    with upstream_call("Failed to save data.", plain_text=True):
        file_url = upload_attachment(clients, submission.attachment) if submission.attachment else None
        submitted_at = datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")
        appended = save_form(clients.sheets, submission, submitted_at)

    return ok(SubmitResponse(
        message=f'Data saved to sheet "{submission.form_title}" in spreadsheet "{submission.spreadsheet_id}".',
        file_url=file_url,
        appended_rows=appended,
    ))
