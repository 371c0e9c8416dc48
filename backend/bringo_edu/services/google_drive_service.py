"""
Google Drive Service for plan exports

Authenticates with either an OAuth refresh token (personal account) or a
service account key and uploads single files into the configured folder.
"""

import io
import json
from typing import Any, Optional

from google.oauth2 import service_account
from google.oauth2.credentials import Credentials as OAuthCredentials
from googleapiclient.discovery import build
from googleapiclient.errors import HttpError
from googleapiclient.http import MediaIoBaseUpload

from ..core.config import Settings
from ..core.errors import NotConfigured, UploadError
from ..models.drive import UploadResult

DRIVE_SCOPES = ["https://www.googleapis.com/auth/drive.file"]
TOKEN_URI = "https://oauth2.googleapis.com/token"
UPLOAD_FIELDS = "id, name, webViewLink, webContentLink"
DEFAULT_JSON_FILE_NAME = "datos_exportados"


class GoogleDriveService:
    """Service for uploading files to Google Drive"""

    def __init__(self, settings: Settings):
        self.settings = settings

    @property
    def credentials_mode(self) -> Optional[str]:
        return self.settings.drive_credentials_mode

    @property
    def is_configured(self) -> bool:
        return self.credentials_mode is not None

    @property
    def folder_id(self) -> str:
        return self.settings.google_drive_folder_id

    def get_credentials(self):
        """Build credentials for the configured mode"""
        if self.credentials_mode == "oauth":
            return OAuthCredentials(
                token=None,
                refresh_token=self.settings.google_refresh_token,
                token_uri=TOKEN_URI,
                client_id=self.settings.google_client_id,
                client_secret=self.settings.google_client_secret,
                scopes=DRIVE_SCOPES,
            )

        if self.credentials_mode == "service_account":
            info = {
                "type": "service_account",
                "client_email": self.settings.google_service_account_email,
                "private_key": self.settings.google_private_key,
                "token_uri": TOKEN_URI,
            }
            return service_account.Credentials.from_service_account_info(info, scopes=DRIVE_SCOPES)

        print("[GoogleDrive] ⚠️ Drive not configured - set GOOGLE_CLIENT_ID, GOOGLE_CLIENT_SECRET, "
              "GOOGLE_REFRESH_TOKEN or GOOGLE_SERVICE_ACCOUNT_EMAIL, GOOGLE_PRIVATE_KEY")
        raise NotConfigured()

    def get_drive_service(self):
        """Get authenticated Drive v3 client"""
        credentials = self.get_credentials()
        try:
            return build("drive", "v3", credentials=credentials, cache_discovery=False)
        except Exception as e:
            print(f"[GoogleDrive] ❌ Error creating Drive service: {e}")
            raise UploadError(str(e))

    def upload_file(
        self,
        content: bytes,
        file_name: str,
        mime_type: str,
        description: Optional[str] = None,
    ) -> UploadResult:
        """Upload a single file in one request and return its links"""
        drive_service = self.get_drive_service()

        metadata = {
            "name": file_name,
            "mimeType": mime_type,
            "parents": [self.folder_id],
        }
        if description:
            metadata["description"] = description

        media = MediaIoBaseUpload(io.BytesIO(content), mimetype=mime_type, resumable=False)

        print(f"[GoogleDrive] 🚀 Uploading {file_name} ({mime_type}, {len(content)} bytes)")
        try:
            created = drive_service.files().create(
                body=metadata,
                media_body=media,
                fields=UPLOAD_FIELDS,
            ).execute()
        except HttpError as e:
            reason = e.reason if getattr(e, "reason", None) else str(e)
            print(f"[GoogleDrive] ❌ Drive API error uploading {file_name}: {reason}")
            raise UploadError(reason)
        except Exception as e:
            print(f"[GoogleDrive] ❌ Error uploading {file_name}: {e}")
            raise UploadError(str(e))

        print(f"[GoogleDrive] ✅ Uploaded {created.get('name')} ({created.get('id')})")
        return UploadResult(
            fileId=created.get("id"),
            fileName=created.get("name", file_name),
            fileUrl=created.get("webViewLink"),
            downloadUrl=created.get("webContentLink"),
        )

    def upload_json(self, data: Any, base_name: Optional[str] = None) -> UploadResult:
        """Serialize data as pretty JSON and upload it as <base_name>.json"""
        content = json.dumps(data, indent=2, ensure_ascii=False).encode("utf-8")
        file_name = f"{base_name or DEFAULT_JSON_FILE_NAME}.json"
        return self.upload_file(content, file_name, "application/json")
