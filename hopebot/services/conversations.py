# hopebot/services/conversations.py
from collections import OrderedDict
from datetime import date, datetime, timedelta
from typing import Any, Dict, List, Optional, Sequence

from hopebot.core.timezone import to_local, utcnow

TODAY = "Today"
YESTERDAY = "Yesterday"


def _label(day: date, today: date) -> str:
    if day == today:
        return TODAY
    if day == today - timedelta(days=1):
        return YESTERDAY
    return day.isoformat()


def group_messages_by_date(messages: Sequence[Any], now: Optional[datetime] = None) -> List[Dict[str, Any]]:
    """Group messages by local calendar date, most recent date first.

    Messages keep their incoming (ascending) order inside each group.
    """
    today = to_local(now or utcnow()).date()

    groups: "OrderedDict[date, list]" = OrderedDict()
    for message in messages:
        day = to_local(message.created_at).date()
        groups.setdefault(day, []).append(message)

    return [
        {"date": _label(day, today), "messages": groups[day]}
        for day in sorted(groups, reverse=True)
    ]
