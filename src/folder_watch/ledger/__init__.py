"""Per-folder snapshot ledgers and the folder-to-ledger identity mapping."""
