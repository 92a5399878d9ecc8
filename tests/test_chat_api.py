"""HTTP-level tests for the chat and health endpoints."""

from unittest.mock import patch

import pytest
from httpx import ASGITransport, AsyncClient

from conftest import FakeCompleter, FakeEmbedder
from instructor_rag.core.app_factory import create_app
from instructor_rag.core.errors import ProviderError
from instructor_rag.services.chat.context_assembler import CONTEXT_LABEL


def _client(app):
    return AsyncClient(transport=ASGITransport(app=app), base_url="http://testserver")


@pytest.fixture
def app(settings, fake_container):
    return create_app(settings, container=fake_container)


class TestChatEndpoint:

    @pytest.mark.asyncio
    async def test_professor_scenario_streams_completion(self, app, fake_completer, fake_embedder):
        async with _client(app) as client:
            response = await client.post(
                "/api/chat", json=[{"role": "user", "content": "How is Professor X?"}]
            )

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/plain")
        assert response.text == "Hello, world"
        assert "x-process-time" in response.headers

        assert fake_embedder.calls == ["How is Professor X?"]
        augmented = fake_completer.calls[0][-1].content
        assert augmented.startswith("How is Professor X?" + CONTEXT_LABEL)
        assert "Professor: Professor X" in augmented
        assert "Review: Clear lectures" in augmented
        assert "Classes: CS101" in augmented
        assert "Stars: 4" in augmented

    @pytest.mark.asyncio
    async def test_streamed_body_is_verbatim_concatenation(self, settings, fake_container):
        chunks = ["Professor X ", "has ", "4 stars", " - ", "students like ", "the lectures."]
        fake_container.set_completer(FakeCompleter(chunks=chunks))
        app = create_app(settings, container=fake_container)

        async with _client(app) as client:
            async with client.stream(
                "POST", "/api/chat", json=[{"role": "user", "content": "How is Professor X?"}]
            ) as response:
                received = [chunk async for chunk in response.aiter_text()]

        assert "".join(received) == "".join(chunks)

    @pytest.mark.asyncio
    async def test_empty_history_is_bad_request(self, app, fake_embedder, fake_completer):
        async with _client(app) as client:
            response = await client.post("/api/chat", json=[])

        assert response.status_code == 400
        assert response.text.startswith("Bad Request:")
        assert fake_embedder.calls == []
        assert fake_completer.calls == []

    @pytest.mark.asyncio
    async def test_last_message_without_content_is_bad_request(self, app, fake_embedder):
        async with _client(app) as client:
            response = await client.post("/api/chat", json=[{"role": "user"}])

        assert response.status_code == 400
        assert fake_embedder.calls == []

    @pytest.mark.asyncio
    async def test_invalid_json_is_bad_request(self, app):
        async with _client(app) as client:
            response = await client.post(
                "/api/chat", content=b"{not json", headers={"content-type": "application/json"}
            )

        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_embedding_failure_returns_single_500(
        self, settings, fake_container, fake_retriever, fake_completer, embedding_failure
    ):
        fake_container.set_embedder(FakeEmbedder(error=embedding_failure))
        app = create_app(settings, container=fake_container)

        async with _client(app) as client:
            response = await client.post("/api/chat", json=[{"role": "user", "content": "hi"}])

        assert response.status_code == 500
        assert response.text == "Internal Server Error: embedding request failed: Connection refused"
        assert fake_retriever.calls == []
        assert fake_completer.calls == []

    @pytest.mark.asyncio
    async def test_completion_start_failure_returns_500(self, settings, fake_container):
        failure = ProviderError("completion request failed: model overloaded", stage="completion")
        fake_container.set_completer(FakeCompleter(start_error=failure))
        app = create_app(settings, container=fake_container)

        async with _client(app) as client:
            response = await client.post("/api/chat", json=[{"role": "user", "content": "hi"}])

        assert response.status_code == 500
        assert "model overloaded" in response.text

    @pytest.mark.asyncio
    async def test_mid_stream_failure_truncates_body(self, settings, fake_container):
        fake_container.set_completer(FakeCompleter(chunks=["partial ", "answer"], fail_after=1))
        app = create_app(settings, container=fake_container)
        transport = ASGITransport(app=app, raise_app_exceptions=False)

        with patch("instructor_rag.core.app_factory.logger") as app_logger:
            async with AsyncClient(transport=transport, base_url="http://testserver") as client:
                response = await client.post("/api/chat", json=[{"role": "user", "content": "hi"}])

        assert response.status_code == 200
        assert response.text == "partial "
        assert "Internal Server Error" not in response.text
        app_logger.warning.assert_called_once()
        assert app_logger.warning.call_args.args[:2] == ("Response stream aborted after %d chunks", 1)
        app_logger.error.assert_not_called()


class TestHealthEndpoints:

    @pytest.mark.asyncio
    async def test_health_reports_configuration(self, app, fake_embedder):
        async with _client(app) as client:
            response = await client.get("/api/health")

        assert response.status_code == 200
        payload = response.json()
        assert payload["status"] == "ok"
        assert payload["index"] == "rag2"
        assert payload["namespace"] == "ns2"
        assert payload["chat_model"] == "gpt-4o-mini"
        assert fake_embedder.calls == []

    @pytest.mark.asyncio
    async def test_root(self, app):
        async with _client(app) as client:
            response = await client.get("/")

        assert response.json()["status"] == "operational"
