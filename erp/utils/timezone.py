# erp/utils/timezone.py
"""
Project clock. DateTime columns hold naive local time in settings.TIMEZONE;
default document dates and the PO financial year use the same calendar day.
"""
from __future__ import annotations

from datetime import date, datetime
from zoneinfo import ZoneInfo

from erp.core.config import settings

LOCAL_TZ = ZoneInfo(settings.TIMEZONE)


def local_now() -> datetime:
    return datetime.now(LOCAL_TZ).replace(tzinfo=None)


def local_today() -> date:
    return local_now().date()
