"""
Google Drive Ownership Transfer Package

This package provides tools for handing over ownership of a Google Drive file
using the Drive v3 REST API with an OAuth token stored on local disk.

Modules:
- setup_token: Interactive OAuth authorization, writes token.json
- initiate_transfer: Mark a prospective owner as pending owner of a file
- oauth: Authorization URL, code exchange and stored-token loading
- token_store: Read/write the local credential record
- drive_api: Thin client for the Drive files/permissions endpoints
- ownership: Permission reconciliation for the ownership transfer
- config_utils: Shared configuration utilities
"""

__version__ = "1.0.0"
__author__ = "Drive Ownership Transfer Project"
