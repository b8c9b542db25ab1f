"""
User-facing notifications.

Every create/update/delete outcome and every live-sync failure is reported
through a Notifier with one of the fixed messages below. Notifications are
fire-and-forget: a notifier never raises back into the caller.
"""

from __future__ import annotations

import logging
from typing import Protocol

logger = logging.getLogger(__name__)

LEAD_CREATED = "הליד נוצר בהצלחה!"
LEAD_UPDATED = "הליד עודכן בהצלחה!"
LEAD_SAVE_FAILED = "שגיאה בשמירת הליד. נסי שוב."
LEAD_DELETED = "הליד נמחק בהצלחה!"
LEAD_DELETE_FAILED = "שגיאה במחיקת הליד."
LEADS_LOAD_FAILED = "שגיאה בטעינת הלידים. בדקי את הרשאות מסד הנתונים."

DELETE_CONFIRMATION_PROMPT = "את בטוחה שרוצה למחוק את הליד הזה?"


class Notifier(Protocol):
    def success(self, message: str) -> None: ...

    def error(self, message: str) -> None: ...


class LoggingNotifier:
    """Notifier that writes toasts to the log; used when no UI surface is attached."""

    def success(self, message: str) -> None:
        logger.info("notify success: %s", message)

    def error(self, message: str) -> None:
        logger.error("notify error: %s", message)


__all__ = [
    "Notifier",
    "LoggingNotifier",
    "LEAD_CREATED",
    "LEAD_UPDATED",
    "LEAD_SAVE_FAILED",
    "LEAD_DELETED",
    "LEAD_DELETE_FAILED",
    "LEADS_LOAD_FAILED",
    "DELETE_CONFIRMATION_PROMPT",
]
