"""Notification collaborator contract for newly detected entries."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Protocol

from folder_watch.drive.models import Entry

logger = logging.getLogger(__name__)


class Notifier(Protocol):
    """Delivers a message about new entries to a recipient.

    Called only when there is at least one new entry and a recipient is
    configured. Implementations log their own delivery failures.
    """

    def notify(self, recipient: str, folder_name: str, new_entries: Sequence[Entry]) -> None: ...


class LoggingNotifier:
    """Reports new entries to the application log instead of delivering mail."""

    def notify(self, recipient: str, folder_name: str, new_entries: Sequence[Entry]) -> None:
        logger.info(
            "[notify] new entries detected; folder:%s;recipient:%s;new_count:%d",
            folder_name,
            recipient,
            len(new_entries),
        )
        for entry in new_entries:
            logger.info(
                "[notify] new entry; kind:%s;path:%s;name:%s;url:%s",
                entry.kind.value,
                entry.ancestry_path,
                entry.name,
                entry.url,
            )
