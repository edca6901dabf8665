#!/usr/bin/env python3
"""
Drive Transfer Setup - Authorize this tool once and store the token.

This script:
1. Reads the OAuth client secret file (credentials.json)
2. Prints the Google consent URL
3. Reads the authorization code you paste back
4. Exchanges it for tokens and saves them to token.json

Prerequisites:
- OAuth client credentials downloaded from Google Cloud Console
- requests library (pip install requests)

Usage:
    python -m drive_transfer.setup_token [--credentials PATH] [--token PATH] [--open-browser]

Environment:
    CREDENTIALS_PATH    Client secret file (default: ./credentials.json)
    TOKEN_PATH          Where to write the token (default: ./token.json)
"""

import argparse
import sys
from typing import List, Optional

from .config_utils import load_client_secrets, resolve_paths
from .errors import TransferError
from .oauth import Authorizer, CodeProvider, prompt_for_code


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Authorize Google Drive access and store the token")
    parser.add_argument("--credentials", default=None, help="Path to the OAuth client secret file (default: $CREDENTIALS_PATH or ./credentials.json)")
    parser.add_argument("--token", default=None, help="Where to store the token (default: $TOKEN_PATH or ./token.json)")
    parser.add_argument("--open-browser", action="store_true", help="Also open the consent URL in a web browser")
    return parser


def main(argv: Optional[List[str]] = None, code_provider: CodeProvider = prompt_for_code) -> None:
    """Main function"""
    try:
        args = build_parser().parse_args(argv)
    except SystemExit as e:
        # argparse exits 2 on usage errors
        if e.code:
            sys.exit(1)
        raise
    paths = resolve_paths(args.credentials, args.token)

    print("Starting OAuth setup process")
    print("=" * 50)

    try:
        secrets = load_client_secrets(paths.credentials_path)
        authorizer = Authorizer(secrets, paths.token_path)
        authorizer.run_interactive(code_provider, open_browser=args.open_browser)
    except TransferError as e:
        print(f"❌ Error during setup: {e}")
        sys.exit(1)

    print("\n✅ Setup complete! You can now use the non-interactive script:")
    print("   python -m drive_transfer.initiate_transfer <file_id> <new_owner_email>")


if __name__ == "__main__":
    try:
        main()
    except KeyboardInterrupt:
        print("\n\n⚠️  Interrupted by user")
        sys.exit(1)
