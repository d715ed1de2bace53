"""
Tests for ad platform payloads and fire-and-forget dispatch
"""

import asyncio
import pytest
import httpx

from app.config import settings
from app.core.background import BackgroundRunner
from app.core.exceptions import ExternalServiceError
from app.models.analytics import EventType
from app.schemas.integration import FacebookCredentials, GoogleCredentials, TikTokCredentials
from app.services.dispatch_service import AdDispatcher, parse_credentials
from app.models.integration import IntegrationKey
from app.services.facebook_service import FacebookConversionsClient
from app.services.google_service import GoogleAnalyticsClient
from app.services.platform_base import ConversionContext
from app.services.tiktok_service import TikTokEventsClient


@pytest.fixture
def context():
    return ConversionContext(
        ip="177.70.10.20",
        user_agent="Mozilla/5.0",
        referer="https://landing.example.com/",
        fbc="fb.1.1.click",
        ttclid="tt-1",
        city="Campinas",
        region="SP",
        utm_source="instagram",
    )


@pytest.mark.unit
class TestEventNames:

    def test_platform_vocabularies(self):
        facebook = FacebookConversionsClient(client=None)
        google = GoogleAnalyticsClient(client=None)
        tiktok = TikTokEventsClient(client=None)

        assert facebook.event_name(EventType.CLICK_WHATSAPP) == "Lead"
        assert google.event_name(EventType.CLICK_WHATSAPP) == "generate_lead"
        assert tiktok.event_name(EventType.CLICK_WHATSAPP) == "Contact"
        assert tiktok.event_name(EventType.CLICK_PLAYSTORE) == "ClickButton"

    def test_unmapped_type_uses_generic_label(self):
        assert FacebookConversionsClient(client=None).event_name(EventType.VISIT) == "CustomEvent"
        assert GoogleAnalyticsClient(client=None).event_name(EventType.VISIT) == "cta_click"
        assert TikTokEventsClient(client=None).event_name(EventType.VISIT) == "ClickButton"


@pytest.mark.unit
class TestPayloads:

    def test_facebook_request(self, context):
        credentials = FacebookCredentials(pixelId="123", accessToken="secret")

        request = FacebookConversionsClient(client=None).build_request(
            EventType.CLICK_APPSTORE, context, credentials
        )

        assert request["url"] == f"https://graph.facebook.com/{settings.FACEBOOK_GRAPH_VERSION}/123/events"
        assert request["params"] == {"access_token": "secret"}
        event = request["json"]["data"][0]
        assert event["action_source"] == "website"
        assert event["user_data"] == {
            "client_ip_address": "177.70.10.20",
            "client_user_agent": "Mozilla/5.0",
            "fbc": "fb.1.1.click",
        }
        assert event["custom_data"]["content_name"] == "appstore"
        assert isinstance(event["event_time"], int)

    def test_google_request_defaults_client_id(self, context):
        credentials = GoogleCredentials(measurementId="G-1", apiSecret="s")

        request = GoogleAnalyticsClient(client=None).build_request(
            EventType.CLICK_PLAYSTORE, context, credentials
        )

        assert request["params"] == {"measurement_id": "G-1", "api_secret": "s"}
        assert request["json"]["client_id"] == "backend-client"
        params = request["json"]["events"][0]["params"]
        assert params["engagement_time_msec"] == "100"
        assert params["source"] == "instagram"
        assert "campaign" not in params

    def test_tiktok_request(self, context):
        credentials = TikTokCredentials(pixelId="px", accessToken="tok")

        request = TikTokEventsClient(client=None).build_request(
            EventType.CLICK_WHATSAPP, context, credentials
        )

        assert request["headers"] == {"Access-Token": "tok"}
        body = request["json"]
        assert body["pixel_code"] == "px"
        assert body["context"]["ad"] == {"callback": "tt-1"}
        assert body["context"]["page"] == {"referrer": "https://landing.example.com/"}

    def test_tiktok_request_without_click_id(self):
        credentials = TikTokCredentials(pixelId="px", accessToken="tok")

        request = TikTokEventsClient(client=None).build_request(
            EventType.CLICK_WHATSAPP, ConversionContext(ip="8.8.8.8"), credentials
        )

        assert "ad" not in request["json"]["context"]

    @pytest.mark.asyncio
    async def test_send_raises_on_rejection(self, context):
        transport = httpx.MockTransport(lambda request: httpx.Response(400, text="bad pixel"))
        async with httpx.AsyncClient(transport=transport) as http:
            with pytest.raises(ExternalServiceError) as exc_info:
                await FacebookConversionsClient(http).send(
                    EventType.CLICK_WHATSAPP,
                    context,
                    FacebookCredentials(pixelId="1", accessToken="t")
                )
        assert exc_info.value.details == {"service": "facebook"}


@pytest.mark.unit
class TestParseCredentials:

    def test_complete(self):
        credentials = parse_credentials(IntegrationKey.GOOGLE, {"measurementId": "G", "apiSecret": "s"})
        assert credentials.measurement_id == "G"

    @pytest.mark.parametrize("data", [None, {}, {"measurementId": "G"}, {"measurementId": "", "apiSecret": "s"}])
    def test_incomplete(self, data):
        assert parse_credentials(IntegrationKey.GOOGLE, data) is None


@pytest.mark.unit
class TestAdDispatcher:

    @pytest.mark.asyncio
    async def test_only_configured_platforms(self, dispatcher, ad_handler, context):
        scheduled = dispatcher.dispatch(
            EventType.CLICK_WHATSAPP,
            context,
            {
                "facebook": {"pixelId": "1"},
                "tiktok": {"pixelId": "2", "accessToken": "t"},
            }
        )
        await dispatcher.runner.drain(timeout=2)

        assert scheduled == ["tiktok"]
        assert ad_handler.hosts() == ["business-api.tiktok.com"]

    @pytest.mark.asyncio
    async def test_visit_not_dispatched(self, dispatcher, context):
        scheduled = dispatcher.dispatch(
            EventType.VISIT,
            context,
            {"tiktok": {"pixelId": "2", "accessToken": "t"}}
        )
        assert scheduled == []

    @pytest.mark.asyncio
    async def test_errors_go_to_error_channel(self, context):
        errors = []
        transport = httpx.MockTransport(lambda request: httpx.Response(500))
        dispatcher = AdDispatcher(
            client=httpx.AsyncClient(transport=transport),
            runner=BackgroundRunner(on_error=lambda name, error: errors.append((name, error)))
        )

        dispatcher.dispatch(
            EventType.CLICK_APPSTORE,
            context,
            {"google": {"measurementId": "G", "apiSecret": "s"}}
        )
        await dispatcher.close(timeout=2)

        assert len(errors) == 1
        assert errors[0][0] == "google:click_appstore"
        assert isinstance(errors[0][1], ExternalServiceError)


@pytest.mark.unit
class TestBackgroundRunner:

    @pytest.mark.asyncio
    async def test_submit_does_not_wait(self):
        started = asyncio.Event()
        release = asyncio.Event()

        async def work():
            started.set()
            await release.wait()

        runner = BackgroundRunner()
        task = runner.submit(work(), name="slow")

        assert runner.pending == 1
        await started.wait()
        release.set()
        await runner.drain(timeout=1)
        assert task.done()
        assert runner.pending == 0

    @pytest.mark.asyncio
    async def test_drops_work_when_full(self):
        release = asyncio.Event()
        runner = BackgroundRunner(max_pending=2)

        async def work():
            await release.wait()

        assert runner.submit(work(), name="a") is not None
        assert runner.submit(work(), name="b") is not None
        assert runner.submit(work(), name="c") is None
        assert runner.dropped == 1

        release.set()
        await runner.drain(timeout=1)

    @pytest.mark.asyncio
    async def test_drain_cancels_stragglers(self):
        runner = BackgroundRunner()

        async def forever():
            await asyncio.sleep(60)

        task = runner.submit(forever(), name="forever")
        await runner.drain(timeout=0.05)

        assert task.cancelled()
        assert runner.pending == 0

    @pytest.mark.asyncio
    async def test_failure_reported_not_raised(self):
        errors = []
        runner = BackgroundRunner(on_error=lambda name, error: errors.append((name, str(error))))

        async def broken():
            raise RuntimeError("nope")

        runner.submit(broken(), name="broken")
        await runner.drain(timeout=1)

        assert errors == [("broken", "nope")]
