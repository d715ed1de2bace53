"""
Unit tests for database models
"""

import pytest
from datetime import datetime, timezone

from app.models.analytics import AnalyticsEvent, EventType
from app.models.content import SiteContent
from app.models.integration import IntegrationConfig


@pytest.mark.unit
@pytest.mark.asyncio
class TestAnalyticsEventModel:

    async def test_create_event_assigns_id_and_date(self, db_session):
        before = datetime.now(timezone.utc)
        event = AnalyticsEvent(type=EventType.CLICK_WHATSAPP)
        db_session.add(event)
        await db_session.commit()
        await db_session.refresh(event)

        assert event.id is not None
        assert event.type == EventType.CLICK_WHATSAPP
        stored = event.date if event.date.tzinfo else event.date.replace(tzinfo=timezone.utc)
        assert stored >= before.replace(microsecond=0)
        assert event.city is None

    async def test_event_type_conversion_flag(self, db_session):
        assert EventType.VISIT.is_conversion is False
        assert all(t.is_conversion for t in EventType if t is not EventType.VISIT)


@pytest.mark.unit
@pytest.mark.asyncio
class TestSiteContentModel:

    async def test_defaults(self, db_session):
        item = SiteContent(section="hero")
        db_session.add(item)
        await db_session.commit()
        await db_session.refresh(item)

        assert item.is_active is True
        assert item.order == 0
        assert item.type == "text"
        assert item.created_at is not None


@pytest.mark.unit
@pytest.mark.asyncio
class TestIntegrationConfigModel:

    async def test_json_blob_round_trip(self, db_session):
        config = IntegrationConfig(key="tiktok", data={"pixelId": "p", "accessToken": "a"})
        db_session.add(config)
        await db_session.commit()

        db_session.expunge_all()
        loaded = await db_session.get(IntegrationConfig, "tiktok")

        assert loaded.data == {"pixelId": "p", "accessToken": "a"}
        assert loaded.updated_at is not None
