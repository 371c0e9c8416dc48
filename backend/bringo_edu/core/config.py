import os
from typing import Optional

from dotenv import load_dotenv
from pydantic import BaseModel

# Load environment variables from .env file
load_dotenv()

DEFAULT_GPT_MODEL = "gpt-4o-mini"
DEFAULT_DRIVE_FOLDER = "root"


def _env(name: str, default: Optional[str] = None) -> Optional[str]:
    value = os.getenv(name)
    if value is None or value.strip() == "":
        return default
    return value.strip()


class Settings(BaseModel):
    """Server configuration, read once from the environment at startup."""

    openai_api_key: Optional[str] = None
    openai_model: str = DEFAULT_GPT_MODEL
    openai_max_tokens: int = 4000
    openai_temperature: float = 0.7

    google_client_id: Optional[str] = None
    google_client_secret: Optional[str] = None
    google_refresh_token: Optional[str] = None
    google_redirect_uri: str = "http://localhost:3000"
    google_service_account_email: Optional[str] = None
    google_private_key: Optional[str] = None
    google_drive_folder_id: str = DEFAULT_DRIVE_FOLDER

    environment: str = "development"
    port: int = 3001

    @classmethod
    def from_env(cls) -> "Settings":
        private_key = _env("GOOGLE_PRIVATE_KEY")
        if private_key:
            # Hosting dashboards store the PEM on one line with literal \n
            private_key = private_key.replace("\\n", "\n")

        return cls(
            openai_api_key=_env("OPENAI_API_KEY"),
            openai_model=_env("OPENAI_MODEL", DEFAULT_GPT_MODEL),
            openai_max_tokens=int(_env("OPENAI_MAX_TOKENS", "4000")),
            openai_temperature=float(_env("OPENAI_TEMPERATURE", "0.7")),
            google_client_id=_env("GOOGLE_CLIENT_ID"),
            google_client_secret=_env("GOOGLE_CLIENT_SECRET"),
            google_refresh_token=_env("GOOGLE_REFRESH_TOKEN"),
            google_redirect_uri=_env("GOOGLE_REDIRECT_URI", "http://localhost:3000"),
            google_service_account_email=_env("GOOGLE_SERVICE_ACCOUNT_EMAIL"),
            google_private_key=private_key,
            google_drive_folder_id=_env("GOOGLE_DRIVE_FOLDER_ID", DEFAULT_DRIVE_FOLDER),
            environment=_env("ENVIRONMENT") or _env("NODE_ENV", "development"),
            port=int(_env("PORT", "3001")),
        )

    @property
    def openai_configured(self) -> bool:
        return bool(self.openai_api_key)

    @property
    def drive_oauth_configured(self) -> bool:
        return bool(self.google_client_id and self.google_client_secret and self.google_refresh_token)

    @property
    def drive_service_account_configured(self) -> bool:
        return bool(self.google_service_account_email and self.google_private_key)

    @property
    def drive_credentials_mode(self) -> Optional[str]:
        """OAuth refresh token wins over the service account when both are set."""
        if self.drive_oauth_configured:
            return "oauth"
        if self.drive_service_account_configured:
            return "service_account"
        return None
