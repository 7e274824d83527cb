"""
Tests for the weekly coach commentary client.
"""
import json

import httpx
import pytest

from server.tracker_api.services.commentary import SYSTEM_PROMPT, CommentaryClient

URL = "http://coach.test/generate"
CONTEXT = {"week_score": 72, "week_score_label": "Strong week"}


def client_for(handler, **kwargs) -> CommentaryClient:
    return CommentaryClient(url=URL, transport=httpx.MockTransport(handler), **kwargs)


class TestCommentaryClient:
    """The client returns text or None, never raises."""

    @pytest.mark.asyncio
    async def test_disabled_without_url(self):
        client = CommentaryClient(url="")
        assert client.enabled is False
        assert await client.generate(CONTEXT) is None

    @pytest.mark.asyncio
    async def test_posts_prompt_and_context(self):
        captured = {}

        def handler(request: httpx.Request) -> httpx.Response:
            captured["url"] = str(request.url)
            captured["body"] = json.loads(request.read())
            return httpx.Response(200, json={"text": "You kept a steady pace this week."})

        text = await client_for(handler).generate(CONTEXT)

        assert text == "You kept a steady pace this week."
        assert captured["url"] == URL
        assert captured["body"] == {"system": SYSTEM_PROMPT, "context": CONTEXT}

    @pytest.mark.asyncio
    async def test_server_error(self):
        client = client_for(lambda request: httpx.Response(503, text="busy"))
        assert await client.generate(CONTEXT) is None

    @pytest.mark.asyncio
    async def test_timeout(self):
        def handler(request):
            raise httpx.ReadTimeout("timed out", request=request)

        assert await client_for(handler).generate(CONTEXT) is None

    @pytest.mark.asyncio
    async def test_not_json(self):
        client = client_for(lambda request: httpx.Response(200, text="<html>oops</html>"))
        assert await client.generate(CONTEXT) is None

    @pytest.mark.asyncio
    @pytest.mark.parametrize("payload", [{"text": "   "}, {"answer": "hi"}, ["text"]])
    async def test_missing_text(self, payload):
        client = client_for(lambda request: httpx.Response(200, json=payload))
        assert await client.generate(CONTEXT) is None
