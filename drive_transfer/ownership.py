"""
Ownership transfer: make a user the pending owner of a Drive file.

Google Drive transfers ownership in two steps. The current owner marks the
prospective owner's permission with pendingOwner=true, then the prospective
owner accepts. This module does the first step only.
"""

import json
from dataclasses import dataclass
from typing import List, Optional

from .drive_api import DriveClient, PermissionGrant, ResourceReference
from .errors import DriveAPIError

PENDING_OWNER_ROLE = "writer"

INVITATION_TEMPLATE = (
    "I'm inviting you to become the owner of the file \"{name}\". "
    "To accept ownership, open the file in Google Drive and accept the pending ownership request."
)


@dataclass
class TransferOutcome:
    resource: ResourceReference
    action: str
    permission_id: Optional[str] = None
    previous_role: Optional[str] = None


def find_user_permission(permissions: List[PermissionGrant], email: str) -> Optional[PermissionGrant]:
    """Return the first permission granted to email, or None."""
    for perm in permissions:
        if perm.email_address == email:
            return perm
    return None


def invitation_message(file_name: str) -> str:
    return INVITATION_TEMPLATE.format(name=file_name)


def report_api_error(error: DriveAPIError, operation: str) -> None:
    """
    Print a Drive API error with helpful user guidance.

    Args:
        error: The failed call
        operation: Description of what operation failed (for user context)
    """
    print(f"❌ Error {operation}: {error}")

    if error.status_code == 401:
        print("\n🔑 Token expired or invalid")
        print("Re-authorize with: python -m drive_transfer.setup_token")
    elif error.status_code == 403:
        print("❌ Access denied - you may not have permission for this operation")
        print("This could be due to:")
        print("  - You are not the owner of the file")
        print("  - The token was granted without the full Drive scope")
        print("  - The prospective owner is outside your organisation")
    elif error.status_code == 404:
        print("❌ File not found - check that the file ID is correct")

    if error.details:
        print(f"API Error details: {json.dumps(error.details, indent=2)}")


def initiate_ownership_transfer(client: DriveClient, file_id: str, new_owner_email: str,
                                dry_run: bool = False) -> TransferOutcome:
    """
    Set new_owner_email as pending owner of the file.

    An existing permission for the user is updated in place without a
    notification; otherwise a new permission is created and Google emails the
    user an invitation. Exactly one of the two calls is made, none when
    dry_run is set.

    Args:
        client: Authenticated Drive client
        file_id: ID of the file to transfer
        new_owner_email: Email of the prospective owner
        dry_run: Only report what would be changed

    Returns:
        TransferOutcome describing the change

    Raises:
        DriveAPIError: Any failed API call, after it has been reported
    """
    print(f"Initiating ownership transfer of file {file_id} to {new_owner_email}")

    try:
        resource = client.get_file(file_id)
        print(f"File found: {resource.name}")
        print(f"Current owner: {resource.owner_email or 'N/A'}")

        permissions = client.list_permissions(file_id)
        print(f"File has {len(permissions)} existing permission(s)")

        existing = find_user_permission(permissions, new_owner_email)
        if existing:
            print(f"Prospective owner already has permission with role: {existing.role}")

        if dry_run:
            action = "would-update" if existing else "would-create"
            print(f"\n🔍 DRY RUN: {'update' if existing else 'create'} permission for "
                  f"{new_owner_email} with role={PENDING_OWNER_ROLE}, pendingOwner=true")
            return TransferOutcome(
                resource=resource,
                action=action,
                permission_id=existing.id if existing else None,
                previous_role=existing.role if existing else None,
            )

        if existing:
            print("Updating existing permission for prospective owner...")
            permission = client.update_permission(
                file_id, existing.id, role=PENDING_OWNER_ROLE, pending_owner=True
            )
            print(f"Updated permission ID: {permission.id} with pendingOwner=true")
            outcome = TransferOutcome(resource=resource, action="updated",
                                      permission_id=permission.id, previous_role=existing.role)
        else:
            print("Creating new permission for prospective owner...")
            permission = client.create_permission(
                file_id,
                new_owner_email,
                role=PENDING_OWNER_ROLE,
                pending_owner=True,
                send_notification=True,
                message=invitation_message(resource.name),
            )
            print(f"Created permission ID: {permission.id} with pendingOwner=true")
            outcome = TransferOutcome(resource=resource, action="created", permission_id=permission.id)

    except DriveAPIError as e:
        report_api_error(e, "initiating ownership transfer")
        raise

    print("\n✅ Successfully initiated ownership transfer!")
    print(f"The prospective owner ({new_owner_email}) has been set as a pending owner.")
    print("The prospective owner will need to accept the transfer in Google Drive.")
    return outcome
