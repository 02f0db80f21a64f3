from dataclasses import dataclass

from sheetrelay.auth import get_service_account_credentials
from sheetrelay.config import Settings
from sheetrelay.services.drive import DriveService
from sheetrelay.services.sheets import SheetsService


@dataclass(frozen=True)
class Clients:
    """Remote collaborators shared by every handler. Read-only once built."""

    sheets: SheetsService
    drive: DriveService
    upload_folder_id: str


def build_clients(settings: Settings) -> Clients:
    creds = get_service_account_credentials(settings)
    return Clients(
        sheets=SheetsService(creds),
        drive=DriveService(creds),
        upload_folder_id=settings.drive_upload_folder_id,
    )
