#!/usr/bin/env python3
"""
Drive Ownership Transfer - Make another user the pending owner of a file.

Uses the token stored by setup_token to call the Drive v3 API directly:
1. Look up the file and its current owner
2. List the file's permissions
3. Update the prospective owner's permission, or create one, with
   role=writer and pendingOwner=true

The prospective owner then has to accept the transfer in Google Drive.

Usage:
    python -m drive_transfer.initiate_transfer [file_id] [new_owner_email] [options]

Options:
    --credentials PATH    OAuth client secret file
    --token PATH          Stored token file
    --dry-run             Show what would change without making changes

Environment:
    FILE_ID, NEW_OWNER_EMAIL    Used when the positional arguments are omitted
    CREDENTIALS_PATH, TOKEN_PATH

Examples:
    python -m drive_transfer.initiate_transfer 1xXLYKcwY4r0mViHg-Gx-AAoEpei3TKqQ new.owner@example.com
    FILE_ID=1xXLYKcwY4r0mViHg-Gx-AAoEpei3TKqQ NEW_OWNER_EMAIL=new.owner@example.com python -m drive_transfer.initiate_transfer
"""

import argparse
import os
import sys
from typing import List, Optional

import requests

from .config_utils import FILE_ID_ENV, NEW_OWNER_EMAIL_ENV, load_client_secrets, resolve_paths
from .drive_api import DriveClient
from .errors import TransferError
from .oauth import Authorizer
from .ownership import initiate_ownership_transfer


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Initiate ownership transfer of a Google Drive file")
    parser.add_argument("file_id", nargs="?", default=None, help="ID of the file to transfer (default: $FILE_ID)")
    parser.add_argument("new_owner_email", nargs="?", default=None, help="Email of the prospective owner (default: $NEW_OWNER_EMAIL)")
    parser.add_argument("--credentials", default=None, help="Path to the OAuth client secret file (default: $CREDENTIALS_PATH or ./credentials.json)")
    parser.add_argument("--token", default=None, help="Path to the stored token (default: $TOKEN_PATH or ./token.json)")
    parser.add_argument("--dry-run", action="store_true", help="Show what would change without making changes")
    return parser


def main(argv: Optional[List[str]] = None, session: Optional[requests.Session] = None) -> None:
    """Main function"""
    try:
        args = build_parser().parse_args(argv)
    except SystemExit as e:
        # argparse exits 2 on usage errors
        if e.code:
            sys.exit(1)
        raise

    file_id = args.file_id or os.environ.get(FILE_ID_ENV)
    new_owner_email = args.new_owner_email or os.environ.get(NEW_OWNER_EMAIL_ENV)
    if not file_id or not new_owner_email:
        print("❌ Error: File ID and new owner email are required.")
        print("Usage: python -m drive_transfer.initiate_transfer [file_id] [new_owner_email]")
        print(f"Or set {FILE_ID_ENV} and {NEW_OWNER_EMAIL_ENV} environment variables")
        sys.exit(1)

    paths = resolve_paths(args.credentials, args.token)

    print("Starting ownership transfer initiation")
    print("=" * 50)
    print(f"File ID: {file_id}")
    print(f"Prospective Owner: {new_owner_email}")
    if args.dry_run:
        print("Mode: DRY RUN (no changes will be made)")
    print()

    try:
        secrets = load_client_secrets(paths.credentials_path)
        authorizer = Authorizer(secrets, paths.token_path)
        authorizer.load_stored()

        client = DriveClient(authorizer.access_token, session=session)
        initiate_ownership_transfer(client, file_id, new_owner_email, dry_run=args.dry_run)
    except TransferError as e:
        print(f"❌ Error running the application: {e}")
        sys.exit(1)

    print("\n=== Ownership transfer initiation completed ===")


if __name__ == "__main__":
    main()
