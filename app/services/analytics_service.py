"""
Analytics Service for the dashboard
Reduces the stored visit/click events of a date window into daily counts,
totals, top locations and attribution sources.
"""

from typing import Dict, Iterable, List, Optional, Tuple
from datetime import datetime, timedelta, timezone
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from app.models.analytics import AnalyticsEvent, EventType
import logging

logger = logging.getLogger(__name__)

DEFAULT_WINDOW_DAYS = 30
TOP_LOCATIONS_LIMIT = 5
DIRECT_SOURCE = "direct"

# Event type -> counter name used in totals and daily click breakdown
CLICK_COUNTERS: Dict[EventType, str] = {
    EventType.CLICK_PLAYSTORE: "playStore",
    EventType.CLICK_APPSTORE: "appStore",
    EventType.CLICK_WHATSAPP: "whatsapp",
}


def as_utc(value: datetime) -> datetime:
    """SQLite hands back naive datetimes; stored values are always UTC"""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def location_key(event: AnalyticsEvent) -> Optional[str]:
    if not event.city:
        return None
    if event.region:
        return f"{event.city}, {event.region}"
    return event.city


def rank(tally: Dict[str, int], limit: Optional[int] = None) -> List[Dict]:
    """Sort a tally by count descending; ties keep first-seen order"""
    ranked = sorted(tally.items(), key=lambda item: item[1], reverse=True)
    if limit is not None:
        ranked = ranked[:limit]
    return [{"name": name, "count": count} for name, count in ranked]


def aggregate_events(
    events: Iterable[AnalyticsEvent],
    start: datetime,
    end: datetime,
    days: int
) -> Dict:
    """
    Reduce events (already filtered to the window) into the dashboard payload
    """
    daily: Dict[str, Dict] = {}
    totals = {"visits": 0, "playStore": 0, "appStore": 0, "whatsapp": 0}
    locations: Dict[str, int] = {}
    sources: Dict[str, int] = {}

    for event in events:
        event_type = EventType(event.type)
        date_key = as_utc(event.date).strftime("%Y-%m-%d")

        if date_key not in daily:
            daily[date_key] = {
                "date": date_key,
                "visits": 0,
                "clicks": {"playStore": 0, "appStore": 0, "whatsapp": 0},
            }
        bucket = daily[date_key]

        if event_type is EventType.VISIT:
            bucket["visits"] += 1
            totals["visits"] += 1

            location = location_key(event)
            if location:
                locations[location] = locations.get(location, 0) + 1

            source = event.utm_source or DIRECT_SOURCE
            sources[source] = sources.get(source, 0) + 1
        else:
            counter = CLICK_COUNTERS[event_type]
            bucket["clicks"][counter] += 1
            totals[counter] += 1

    return {
        "daily": [daily[key] for key in sorted(daily)],
        "totals": totals,
        "topCities": rank(locations, TOP_LOCATIONS_LIMIT),
        "topSources": rank(sources),
        "period": {
            "start": start.strftime("%Y-%m-%d"),
            "end": end.strftime("%Y-%m-%d"),
            "days": days,
        },
    }


class AnalyticsService:
    """Service for generating dashboard statistics"""

    @staticmethod
    def window(days: int, now: Optional[datetime] = None) -> Tuple[datetime, datetime]:
        end = now or datetime.now(timezone.utc)
        return end - timedelta(days=days), end

    @staticmethod
    async def fetch_events(db: AsyncSession, since: datetime) -> List[AnalyticsEvent]:
        stmt = (
            select(AnalyticsEvent)
            .where(AnalyticsEvent.date >= since)
            .order_by(AnalyticsEvent.date.asc())
        )
        result = await db.execute(stmt)
        return list(result.scalars().all())

    @staticmethod
    async def get_stats(
        db: AsyncSession,
        days: int = DEFAULT_WINDOW_DAYS,
        now: Optional[datetime] = None
    ) -> Dict:
        """Dashboard statistics for the last ``days`` days"""
        start, end = AnalyticsService.window(days, now)
        try:
            events = await AnalyticsService.fetch_events(db, start)
        except Exception as e:
            logger.error(f"Error fetching analytics events: {str(e)}")
            raise

        logger.debug(f"Aggregating {len(events)} events since {start.isoformat()}")
        return aggregate_events(events, start, end, days)
