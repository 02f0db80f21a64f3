import logging
from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    host: str = "0.0.0.0"
    port: int = 8888
    log_level: str = "INFO"

    # Service account fields, named after the keys of a downloaded key file.
    google_type: str = Field(min_length=1)
    google_project_id: str = Field(min_length=1)
    google_private_key_id: str = Field(min_length=1)
    google_private_key: str = Field(min_length=1)
    google_client_email: str = Field(min_length=1)
    google_client_id: str = Field(min_length=1)
    google_auth_uri: str = Field(min_length=1)
    google_token_uri: str = Field(min_length=1)
    google_auth_provider_x509_cert_url: str = Field(min_length=1)
    google_client_x509_cert_url: str = Field(min_length=1)

    drive_upload_folder_id: str = Field(min_length=1)

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "extra": "ignore"}

    @field_validator("google_private_key")
    @classmethod
    def _unescape_newlines(cls, value: str) -> str:
        # Keys pasted into a single env var arrive with literal "\n" sequences
        return value.replace("\\n", "\n")

    def service_account_info(self) -> dict:
        return {
            "type": self.google_type,
            "project_id": self.google_project_id,
            "private_key_id": self.google_private_key_id,
            "private_key": self.google_private_key,
            "client_email": self.google_client_email,
            "client_id": self.google_client_id,
            "auth_uri": self.google_auth_uri,
            "token_uri": self.google_token_uri,
            "auth_provider_x509_cert_url": self.google_auth_provider_x509_cert_url,
            "client_x509_cert_url": self.google_client_x509_cert_url,
        }


@lru_cache
def get_settings() -> Settings:
    return Settings()


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
