import io

from googleapiclient.discovery import build
from googleapiclient.errors import HttpError
from googleapiclient.http import MediaIoBaseUpload

from sheetrelay.exceptions import AuthenticationError, IntegrationError


def public_url(file_id: str) -> str:
    return f"https://drive.google.com/uc?id={file_id}"


def _handle_api_error(e: HttpError):
    if e.resp.status in (401, 403):
        raise AuthenticationError("Drive API rejected the service account credentials.") from e
    raise IntegrationError(f"Drive API error: {e}") from e


class DriveService:
    """Drive v3 uploads for submitted attachments."""

    def __init__(self, credentials):
        self._credentials = credentials

    def _service(self):
        return build("drive", "v3", credentials=self._credentials, cache_discovery=False)

    def upload_file(self, content: bytes, mime_type: str, name: str, parent_folder_id: str | None = None) -> str:
        """Upload raw bytes and return the new file id."""
        metadata: dict = {"name": name, "mimeType": mime_type}
        if parent_folder_id:
            metadata["parents"] = [parent_folder_id]

        media = MediaIoBaseUpload(io.BytesIO(content), mimetype=mime_type)
        try:
            f = self._service().files().create(body=metadata, media_body=media, fields="id").execute()
        except HttpError as e:
            _handle_api_error(e)
        return f["id"]

    def share_publicly(self, file_id: str) -> None:
        """Grant anyone-with-the-link read access."""
        try:
            self._service().permissions().create(
                fileId=file_id, body={"role": "reader", "type": "anyone"}
            ).execute()
        except HttpError as e:
            _handle_api_error(e)
