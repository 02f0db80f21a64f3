import pytest
from unittest.mock import MagicMock

from googleapiclient.errors import HttpError

from sheetrelay.exceptions import IntegrationError
from sheetrelay.services.drive import DriveService, public_url


@pytest.fixture
def mock_drive_service(mocker):
    mock_svc = MagicMock()
    mocker.patch("sheetrelay.services.drive.build", return_value=mock_svc)
    return mock_svc


@pytest.fixture
def service():
    return DriveService(credentials=MagicMock())


class TestUploadFile:
    def test_returns_file_id(self, service, mock_drive_service):
        mock_drive_service.files().create().execute.return_value = {"id": "file123"}
        assert service.upload_file(b"data", "image/png", "1_a.png", parent_folder_id="folder789") == "file123"

    def test_sends_metadata_with_parent(self, service, mock_drive_service):
        files = mock_drive_service.files()
        files.create().execute.return_value = {"id": "file123"}
        service.upload_file(b"data", "image/png", "1_a.png", parent_folder_id="folder789")
        kwargs = files.create.call_args.kwargs
        assert kwargs["body"] == {"name": "1_a.png", "mimeType": "image/png", "parents": ["folder789"]}
        assert kwargs["media_body"].mimetype() == "image/png"

    def test_http_error(self, service, mock_drive_service):
        resp = MagicMock()
        resp.status = 500
        mock_drive_service.files().create().execute.side_effect = HttpError(resp=resp, content=b"error")
        with pytest.raises(IntegrationError):
            service.upload_file(b"data", "image/png", "1_a.png")


class TestSharePublicly:
    def test_grants_anyone_reader(self, service, mock_drive_service):
        permissions = mock_drive_service.permissions()
        service.share_publicly("file123")
        permissions.create.assert_called_with(fileId="file123", body={"role": "reader", "type": "anyone"})


class TestPublicUrl:
    def test_format(self):
        assert public_url("file123") == "https://drive.google.com/uc?id=file123"
