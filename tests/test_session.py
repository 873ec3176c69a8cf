"""Tests for fill cycle orchestration."""

import asyncio

import pytest

from ai_form_assist.config import settings
from ai_form_assist.core.models import FillOutcome, GenerationResponse
from ai_form_assist.service.generation import (
    GenerationService,
    MessageBridgeGenerationService,
    StaticGenerationService,
)
from ai_form_assist.session import AI_ASSIST_TRIGGER_MESSAGE, AssistSession

EMAIL_CONFIG = {"targets": [{"name": "email", "selector": "#email", "type": "text"}]}


def trigger(header_config=None):
    message = {"type": AI_ASSIST_TRIGGER_MESSAGE}
    if header_config is not None:
        message["headerConfig"] = header_config
    return message


class FailingGenerationService(GenerationService):
    """Reports an unsuccessful generation."""

    async def generate(self, request):
        return GenerationResponse(success=False, error="quota exceeded")


class RaisingGenerationService(GenerationService):
    """Raises from generate."""

    async def generate(self, request):
        raise RuntimeError("boom")


class BlockingGenerationService(GenerationService):
    """Holds the cycle open until released."""

    def __init__(self):
        self.started = asyncio.Event()
        self.release = asyncio.Event()
        self.calls = 0

    async def generate(self, request):
        self.calls += 1
        self.started.set()
        await self.release.wait()
        return GenerationResponse(success=True, data={"email": "late@example.com"})


async def run(session, message):
    try:
        return await session.handle_message(message)
    finally:
        await session.filler.indicator.dismiss_all()


class TestAssistSession:
    """Test cases for AssistSession."""

    @pytest.mark.asyncio
    async def test_trigger_fills_and_reports_success(self, signup_page):
        """Test a full cycle from trigger to completion signal."""
        service = StaticGenerationService({"email": "a@b.com"})
        session = AssistSession(signup_page, service)

        signal = await run(session, trigger(EMAIL_CONFIG))

        assert signal == {"success": True}
        assert signup_page.soup.select_one("#email")["value"] == "a@b.com"
        assert not session.is_busy

    @pytest.mark.asyncio
    async def test_request_carries_context_and_default_prompt(self, signup_page):
        """Test the request sent to the generation service."""
        service = StaticGenerationService({})
        session = AssistSession(signup_page, service)

        await run(session, trigger(EMAIL_CONFIG))

        request = service.requests[0]
        assert request.prompt == settings.default_prompt
        assert request.context.title == "Sign up"
        assert request.context.description == ""
        assert [t.name for t in request.targets] == ["email"]

    @pytest.mark.asyncio
    async def test_page_configuration_overrides_trigger(self, make_page):
        """Test that the page's embedded prompt wins over the caller's."""
        page = make_page(
            '<script type="application/json" id="ai-config">{"prompt": "Page prompt"}</script>'
            '<input id="email">'
        )
        service = StaticGenerationService({})
        session = AssistSession(page, service)

        await run(session, trigger({"prompt": "Caller prompt", **EMAIL_CONFIG}))

        assert service.requests[0].prompt == "Page prompt"

    @pytest.mark.asyncio
    async def test_targets_inferred_without_configuration(self, signup_page):
        """Test that an unconfigured trigger fills inferred targets."""
        service = StaticGenerationService({"email": "a@b.com", "terms": True})
        session = AssistSession(signup_page, service)

        result = await session.run_cycle()
        await session.filler.indicator.dismiss_all()

        assert result.signal.success
        assert result.report.outcome_for("email") is FillOutcome.FILLED
        assert result.report.outcome_for("terms") is FillOutcome.FILLED
        assert result.report.outcome_for("bio") is FillOutcome.SKIPPED_NO_DATA

    @pytest.mark.asyncio
    async def test_other_messages_ignored(self, signup_page):
        """Test that non-trigger messages produce no reply."""
        service = StaticGenerationService({"email": "a@b.com"})
        session = AssistSession(signup_page, service)

        assert await session.handle_message({"type": "AI_REQUEST"}) is None
        assert service.requests == []

    @pytest.mark.asyncio
    async def test_generation_failure_reported(self, signup_page):
        """Test that an unsuccessful generation fails the cycle without filling."""
        session = AssistSession(signup_page, FailingGenerationService())

        signal = await run(session, trigger(EMAIL_CONFIG))

        assert signal == {"success": False, "error": "quota exceeded"}
        assert not signup_page.soup.select_one("#email").has_attr("value")
        assert not session.is_busy

    @pytest.mark.asyncio
    async def test_generation_exception_releases_busy_flag(self, signup_page):
        """Test that an exception is reported and the session accepts the next trigger."""
        session = AssistSession(signup_page, RaisingGenerationService())

        signal = await run(session, trigger(EMAIL_CONFIG))

        assert signal == {"success": False, "error": "boom"}
        assert not session.is_busy
        assert await run(session, trigger(EMAIL_CONFIG)) == {"success": False, "error": "boom"}

    @pytest.mark.asyncio
    async def test_malformed_page_configuration_falls_back(self, make_page):
        """Test that invalid embedded configuration is ignored in favour of the trigger's."""
        page = make_page(
            '<script type="application/json" id="ai-config">{oops</script><input id="email">'
        )
        service = StaticGenerationService({"email": "a@b.com"})
        session = AssistSession(page, service)

        signal = await run(session, trigger({"prompt": "Caller prompt", **EMAIL_CONFIG}))

        assert signal == {"success": True}
        assert service.requests[0].prompt == "Caller prompt"
        assert page.soup.select_one("#email")["value"] == "a@b.com"

    @pytest.mark.asyncio
    async def test_invalid_trigger_configuration(self, signup_page):
        """Test that an unparseable headerConfig is reported."""
        service = StaticGenerationService({})
        session = AssistSession(signup_page, service)

        signal = await run(session, trigger({"targets": [{"name": "email"}]}))

        assert signal["success"] is False
        assert "selector" in signal["error"]
        assert service.requests == []

    @pytest.mark.asyncio
    async def test_trigger_ignored_while_cycle_in_flight(self, signup_page):
        """Test single-flight: a second trigger during a cycle is dropped."""
        service = BlockingGenerationService()
        session = AssistSession(signup_page, service)

        first = asyncio.create_task(session.handle_message(trigger(EMAIL_CONFIG)))
        await asyncio.wait_for(service.started.wait(), timeout=5)

        assert session.is_busy
        assert await session.handle_message(trigger(EMAIL_CONFIG)) is None

        service.release.set()
        assert await asyncio.wait_for(first, timeout=5) == {"success": True}
        await session.filler.indicator.dismiss_all()

        assert service.calls == 1
        assert not session.is_busy

    @pytest.mark.asyncio
    async def test_message_bridge_round_trip(self, signup_page):
        """Test generation through the host transport."""
        sent = []

        async def send(message):
            sent.append(message)
            return {"success": True, "data": {"email": "bridge@example.com"}}

        session = AssistSession(signup_page, MessageBridgeGenerationService(send))
        signal = await run(session, trigger(EMAIL_CONFIG))

        assert signal == {"success": True}
        assert sent[0]["type"] == "AI_REQUEST"
        assert "contextBlocks" in sent[0]["data"]["context"]
        assert signup_page.soup.select_one("#email")["value"] == "bridge@example.com"

    @pytest.mark.asyncio
    async def test_page_description_reaches_request(self, make_page):
        page = make_page('<input id="email">', head='<meta name="description" content="Apply here">')
        service = StaticGenerationService({"email": "a@b.com"})
        session = AssistSession(page, service)

        signal = await run(session, trigger(EMAIL_CONFIG))

        assert signal == {"success": True}
        assert service.requests[0].context.description == "Apply here"
