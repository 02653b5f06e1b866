"""Run orchestration over the configured folder table."""
