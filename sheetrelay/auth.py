from google.oauth2.service_account import Credentials

from sheetrelay.config import Settings
from sheetrelay.exceptions import AuthenticationError

SCOPES = [
    "https://www.googleapis.com/auth/spreadsheets",
    "https://www.googleapis.com/auth/drive.file",
]


def get_service_account_credentials(settings: Settings) -> Credentials:
    """Build service account credentials from the configured key fields."""
    try:
        return Credentials.from_service_account_info(settings.service_account_info(), scopes=SCOPES)
    except (ValueError, KeyError) as e:
        raise AuthenticationError(f"Invalid service account credentials: {e}") from e
