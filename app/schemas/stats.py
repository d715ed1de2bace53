"""
Dashboard statistics schemas
"""

from typing import List

from app.schemas.base import CamelSchema


class ClickCounts(CamelSchema):
    play_store: int = 0
    app_store: int = 0
    whatsapp: int = 0


class DailyStats(CamelSchema):
    date: str
    visits: int = 0
    clicks: ClickCounts


class StatsTotals(CamelSchema):
    visits: int = 0
    play_store: int = 0
    app_store: int = 0
    whatsapp: int = 0


class RankedCount(CamelSchema):
    name: str
    count: int


class StatsPeriod(CamelSchema):
    start: str
    end: str
    days: int


class StatsResponse(CamelSchema):
    daily: List[DailyStats]
    totals: StatsTotals
    top_cities: List[RankedCount]
    top_sources: List[RankedCount]
    period: StatsPeriod
