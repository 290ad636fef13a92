"""
Google Drive attachment storage.

Talks to the Drive v3 REST API with httpx, authenticating as a service
account: a self-signed RS256 assertion is exchanged for an access token,
which is cached until shortly before it expires.
"""

import json
import logging
import re
import time
import uuid
from typing import Optional

import httpx
from jose import jwt

from leave_tracker.config import Settings
from leave_tracker.core.exceptions import CollaboratorError
from leave_tracker.schemas.attachment import DriveFile, UploadedFile
from leave_tracker.utils.best_effort import run_best_effort

logger = logging.getLogger(__name__)

TOKEN_URL = "https://oauth2.googleapis.com/token"
FILES_URL = "https://www.googleapis.com/drive/v3/files"
UPLOAD_URL = "https://www.googleapis.com/upload/drive/v3/files"
SCOPES = [
    "https://www.googleapis.com/auth/drive.metadata.readonly",
    "https://www.googleapis.com/auth/drive.file",
]
LINK_FIELDS = "id, webViewLink, webContentLink"

_FILE_ID_PATTERNS = [
    re.compile(r"[?&]id=([\w-]+)"),
    re.compile(r"/d/([\w-]+)"),
]


def extract_file_id(url: str) -> Optional[str]:
    """Recover the Drive file id from a view or download link."""
    for pattern in _FILE_ID_PATTERNS:
        match = pattern.search(url or "")
        if match:
            return match.group(1)
    return None


class GoogleDriveClient:
    def __init__(
        self,
        client_email: str,
        private_key: str,
        folder_id: str,
        timeout: float = 30.0,
        http: Optional[httpx.Client] = None,
    ):
        self.client_email = client_email
        # keys copied from env files often carry literal "\n"
        self.private_key = private_key.replace("\\n", "\n")
        self.folder_id = folder_id
        self.http = http or httpx.Client(timeout=timeout)
        self._token: Optional[str] = None
        self._token_expires_at = 0.0

    @classmethod
    def from_settings(cls, settings: Settings) -> Optional["GoogleDriveClient"]:
        """Build a client from settings, or None when Drive is not configured."""
        credentials = {}
        if settings.GOOGLE_SERVICE_ACCOUNT:
            try:
                credentials = json.loads(settings.GOOGLE_SERVICE_ACCOUNT)
            except json.JSONDecodeError:
                logger.warning("GOOGLE_SERVICE_ACCOUNT is not valid JSON, falling back to individual variables")

        client_email = credentials.get("client_email") or settings.GOOGLE_SERVICE_ACCOUNT_EMAIL
        private_key = credentials.get("private_key") or settings.GOOGLE_SERVICE_ACCOUNT_PRIVATE_KEY

        if not client_email or not private_key or not settings.GOOGLE_DRIVE_FOLDER_ID:
            logger.warning("Google Drive credentials or folder id not set, attachment storage disabled")
            return None

        return cls(
            client_email=client_email,
            private_key=private_key,
            folder_id=settings.GOOGLE_DRIVE_FOLDER_ID,
            timeout=settings.GOOGLE_DRIVE_TIMEOUT_SECONDS,
        )

    # ------------------------------------------------------------------ auth

    def _access_token(self) -> str:
        if self._token and time.time() < self._token_expires_at - 60:
            return self._token

        now = int(time.time())
        assertion = jwt.encode(
            {
                "iss": self.client_email,
                "scope": " ".join(SCOPES),
                "aud": TOKEN_URL,
                "iat": now,
                "exp": now + 3600,
            },
            self.private_key,
            algorithm="RS256",
        )
        response = self._send(
            "POST",
            TOKEN_URL,
            authenticated=False,
            data={
                "grant_type": "urn:ietf:params:oauth:grant-type:jwt-bearer",
                "assertion": assertion,
            },
        )
        payload = response.json()
        self._token = payload["access_token"]
        self._token_expires_at = now + int(payload.get("expires_in", 3600))
        return self._token

    def _send(self, method: str, url: str, authenticated: bool = True, **kwargs) -> httpx.Response:
        headers = kwargs.pop("headers", {})
        if authenticated:
            headers["Authorization"] = f"Bearer {self._access_token()}"
        try:
            response = self.http.request(method, url, headers=headers, **kwargs)
        except httpx.HTTPError as exc:
            raise CollaboratorError(f"Google Drive request failed: {exc}") from exc
        if response.status_code >= 400:
            raise DriveHTTPError(response.status_code, _error_message(response))
        return response

    # ------------------------------------------------------------ operations

    def upload(self, content: bytes, file_name: str, mime_type: str) -> UploadedFile:
        """Upload into the configured folder and make the file publicly readable."""
        boundary = uuid.uuid4().hex
        metadata = json.dumps({"name": file_name, "parents": [self.folder_id]})
        body = (
            f"--{boundary}\r\n"
            "Content-Type: application/json; charset=UTF-8\r\n\r\n"
            f"{metadata}\r\n"
            f"--{boundary}\r\n"
            f"Content-Type: {mime_type}\r\n\r\n"
        ).encode("utf-8") + content + f"\r\n--{boundary}--".encode("utf-8")

        created = self._send(
            "POST",
            UPLOAD_URL,
            params={"uploadType": "multipart", "fields": LINK_FIELDS},
            headers={"Content-Type": f"multipart/related; boundary={boundary}"},
            content=body,
        ).json()

        file_id = created.get("id")
        if not file_id:
            raise CollaboratorError("Failed to get file ID from Google Drive response")

        try:
            self._send(
                "POST",
                f"{FILES_URL}/{file_id}/permissions",
                json={"role": "reader", "type": "anyone"},
            )
            info = self._send("GET", f"{FILES_URL}/{file_id}", params={"fields": LINK_FIELDS}).json()
        except CollaboratorError:
            # nothing references the file yet, so remove it rather than orphan it
            run_best_effort(f"cleanup of Google Drive file {file_id}", self.delete, file_id)
            raise

        logger.info("Uploaded %s to Google Drive as %s", file_name, file_id)
        return UploadedFile(
            file_id=info.get("id") or file_id,
            web_view_link=info.get("webViewLink") or f"https://drive.google.com/file/d/{file_id}/view",
            web_content_link=info.get("webContentLink") or f"https://drive.google.com/uc?export=view&id={file_id}",
        )

    def delete(self, file_id: str) -> None:
        """Delete a file. A file that is already gone counts as deleted."""
        try:
            self._send("DELETE", f"{FILES_URL}/{file_id}")
        except DriveHTTPError as exc:
            if exc.status == 404:
                logger.info("Google Drive file %s already absent", file_id)
                return
            raise
        logger.info("Deleted Google Drive file %s", file_id)

    def list_files(self, folder_id: Optional[str] = None) -> list[DriveFile]:
        folder = folder_id or self.folder_id
        files: list[DriveFile] = []
        page_token = None
        while True:
            params = {
                "q": f"'{folder}' in parents and trashed = false",
                "fields": "nextPageToken, files(id, name, size)",
                "pageSize": 1000,
            }
            if page_token:
                params["pageToken"] = page_token
            payload = self._send("GET", FILES_URL, params=params).json()
            for item in payload.get("files", []):
                files.append(
                    DriveFile(
                        id=item.get("id", ""),
                        name=item.get("name", ""),
                        size_bytes=int(item.get("size") or 0),
                    )
                )
            page_token = payload.get("nextPageToken")
            if not page_token:
                return files


class DriveHTTPError(CollaboratorError):
    def __init__(self, status: int, message: str):
        self.status = status
        super().__init__(f"Google Drive returned {status}: {message}", {"status": status})


def _error_message(response: httpx.Response) -> str:
    try:
        return response.json().get("error", {}).get("message") or response.text
    except (ValueError, AttributeError):
        return response.text
