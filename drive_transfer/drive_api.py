"""
Minimal client for the Google Drive v3 files and permissions endpoints.

Only the calls needed for an ownership transfer are wrapped. Failed calls
raise a DriveAPIError subclass carrying the HTTP status and the structured
error list Google returns.
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple
from urllib.parse import quote

import requests

from .errors import DriveAPIError, PermissionAPIFailure, ResourceNotFoundOrForbidden

DRIVE_API_URL = "https://www.googleapis.com/drive/v3"


@dataclass
class ResourceReference:
    file_id: str
    name: str
    owner_email: Optional[str] = None


@dataclass
class PermissionGrant:
    id: str
    email_address: Optional[str] = None
    role: Optional[str] = None
    pending_owner: bool = False

    @classmethod
    def from_api(cls, perm: Dict[str, Any]) -> "PermissionGrant":
        return cls(
            id=perm.get("id", ""),
            email_address=perm.get("emailAddress"),
            role=perm.get("role"),
            pending_owner=bool(perm.get("pendingOwner", False)),
        )


def _parse_error(resp: requests.Response) -> Tuple[str, Optional[Any]]:
    """Pull the message and error list out of a Google API error body."""
    try:
        body = resp.json()
    except ValueError:
        return resp.text, None

    error = body.get("error") if isinstance(body, dict) else None
    if isinstance(error, dict):
        return error.get("message", resp.text), error.get("errors")
    return resp.text, None


class DriveClient:
    """Drive v3 REST calls authenticated with a bearer token."""

    def __init__(self, access_token: str, session: Optional[requests.Session] = None,
                 base_url: str = DRIVE_API_URL):
        self.access_token = access_token
        self.session = session or requests.Session()
        self.base_url = base_url.rstrip("/")

    def _headers(self) -> Dict[str, str]:
        return {
            "Authorization": f"Bearer {self.access_token}",
            "Content-Type": "application/json",
        }

    def _file_url(self, file_id: str, *parts: str) -> str:
        path = "/".join(quote(p, safe="") for p in (file_id,) + parts)
        return f"{self.base_url}/files/{path}"

    def _request(self, method: str, url: str, operation: str, error_cls=DriveAPIError,
                 **kwargs) -> Dict[str, Any]:
        try:
            resp = self.session.request(method, url, headers=self._headers(), timeout=30, **kwargs)
        except requests.exceptions.RequestException as e:
            raise error_cls(f"Network error while trying to {operation}: {e}") from e

        if resp.status_code not in (200, 201):
            message, details = _parse_error(resp)
            raise error_cls(
                f"Failed to {operation}: {resp.status_code} {message}",
                status_code=resp.status_code,
                details=details,
            )

        try:
            return resp.json()
        except ValueError as e:
            raise error_cls(f"Invalid JSON from {operation}: {e}", status_code=resp.status_code) from e

    def get_file(self, file_id: str) -> ResourceReference:
        """
        Fetch the file's name and current owner.

        Raises:
            ResourceNotFoundOrForbidden: 403/404 from the API
            DriveAPIError: Any other failure
        """
        try:
            data = self._request("GET", self._file_url(file_id), "get file metadata",
                                 params={"fields": "name,owners"})
        except DriveAPIError as e:
            if e.status_code in (403, 404):
                raise ResourceNotFoundOrForbidden(str(e), status_code=e.status_code, details=e.details) from e
            raise

        owners = data.get("owners") or []
        owner_email = owners[0].get("emailAddress") if owners else None
        return ResourceReference(file_id=file_id, name=data.get("name", ""), owner_email=owner_email)

    def list_permissions(self, file_id: str) -> List[PermissionGrant]:
        """List every permission on the file, following nextPageToken."""
        permissions = []
        params = {"fields": "nextPageToken,permissions(id,emailAddress,role)"}

        while True:
            data = self._request("GET", self._file_url(file_id, "permissions"), "list permissions",
                                 error_cls=PermissionAPIFailure, params=dict(params))
            permissions.extend(PermissionGrant.from_api(p) for p in data.get("permissions", []))

            page_token = data.get("nextPageToken")
            if not page_token:
                break
            params["pageToken"] = page_token

        return permissions

    def create_permission(self, file_id: str, email: str, role: str = "writer",
                          pending_owner: bool = False, send_notification: bool = True,
                          message: Optional[str] = None) -> PermissionGrant:
        """Grant a user access to the file."""
        params = {"sendNotificationEmail": "true" if send_notification else "false"}
        if send_notification and message:
            params["emailMessage"] = message

        body = {
            "role": role,
            "type": "user",
            "emailAddress": email,
            "pendingOwner": pending_owner,
        }
        data = self._request("POST", self._file_url(file_id, "permissions"), "create permission",
                             error_cls=PermissionAPIFailure, params=params, json=body)
        return PermissionGrant.from_api(data)

    def update_permission(self, file_id: str, permission_id: str, role: str = "writer",
                          pending_owner: bool = False) -> PermissionGrant:
        """Change the role of an existing permission in place."""
        body = {
            "role": role,
            "pendingOwner": pending_owner,
        }
        data = self._request("PATCH", self._file_url(file_id, "permissions", permission_id),
                             "update permission", error_cls=PermissionAPIFailure, json=body)
        return PermissionGrant.from_api(data)
