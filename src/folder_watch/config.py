"""Application configuration loaded from environment variables."""

import os
from dataclasses import dataclass

# Drive v3 rejects page sizes above this ceiling.
MAX_PAGE_SIZE = 1000


@dataclass(frozen=True)
class AppConfig:
    """Centralized application configuration.

    Required fields have no defaults and will cause a KeyError at startup
    if the corresponding environment variable is missing. Domain constants
    have sensible defaults but can be overridden via environment variables.
    """

    # Required — no defaults, fail at startup if missing
    google_token_file: str
    storage_connection_string: str

    # Domain constants — defaults provided, overridable via env
    state_container: str = "folder-watch-state"
    config_blob: str = "config/folders.csv"
    mapping_blob: str = "ledger-map/current.json"
    ledger_prefix: str = "ledgers/"
    max_depth: int = 64
    page_size: int = MAX_PAGE_SIZE


def load_config() -> AppConfig:
    """Construct an AppConfig from environment variables.

    Required environment variables:
        FW_GOOGLE_TOKEN_FILE: Path to the authorized-user OAuth token file for Google Drive.
        AzureWebJobsStorage: Azure Storage account connection string.

    Optional environment variables (with defaults):
        FW_STATE_CONTAINER: Blob container holding all persisted state.
        FW_CONFIG_BLOB: Blob path of the folder configuration table.
        FW_MAPPING_BLOB: Blob path of the folder-to-ledger mapping.
        FW_LEDGER_PREFIX: Blob prefix under which ledgers are stored.
        FW_MAX_DEPTH: Maximum folder depth descended during enumeration (default: 64).
        FW_PAGE_SIZE: Listing page size, capped at 1000 (default: 1000).

    Returns:
        Configured AppConfig instance.
    """
    page_size = int(os.environ.get("FW_PAGE_SIZE", str(MAX_PAGE_SIZE)))
    return AppConfig(
        google_token_file=os.environ["FW_GOOGLE_TOKEN_FILE"],
        storage_connection_string=os.environ["AzureWebJobsStorage"],  # noqa: SIM112
        state_container=os.environ.get("FW_STATE_CONTAINER", "folder-watch-state"),
        config_blob=os.environ.get("FW_CONFIG_BLOB", "config/folders.csv"),
        mapping_blob=os.environ.get("FW_MAPPING_BLOB", "ledger-map/current.json"),
        ledger_prefix=os.environ.get("FW_LEDGER_PREFIX", "ledgers/"),
        max_depth=int(os.environ.get("FW_MAX_DEPTH", "64")),
        page_size=max(1, min(page_size, MAX_PAGE_SIZE)),
    )
