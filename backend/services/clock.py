"""Calendar date shared by sync, linking and dashboards."""

from datetime import date, datetime
from zoneinfo import ZoneInfo

from config import settings


def sync_today() -> date:
    """Today's date in ``SCHEDULER_TIMEZONE``.

    Snapshots are keyed by this date, so a 02:00 UTC run on a host west of
    UTC still records the UTC day its trigger fired on.
    """
    return datetime.now(ZoneInfo(settings.SCHEDULER_TIMEZONE)).date()
