"""Drive folder watch — reports entries newly added to monitored Google Drive folders."""

__version__ = "0.1.0"
