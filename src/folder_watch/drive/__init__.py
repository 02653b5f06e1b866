"""Google Drive access: reference parsing, metadata resolution and enumeration."""
