"""
Tests for genforge.orchestration.session
==========================================

These tests verify the single-agent streaming chat path:
    - History bookkeeping across turns
    - Live re-extraction of the FileSet after every fragment
    - Cancellation before and during a turn
    - Provider failures
"""

import pytest

from genforge.core.cancellation import CancellationToken
from genforge.core.config import PipelineConfig
from genforge.core.enums import ChatRole
from genforge.core.exceptions import ProviderError
from genforge.integrations.llm.mock import MockLLMProvider
from genforge.orchestration.session import GenerationSession


HTML_REPLY = "Here you go!\n```html\n<!DOCTYPE html>\n<html><body>Coffee</body></html>\n```"


class CancelAfterFirstFragment(MockLLMProvider):
    """Mock provider that cancels a token once the first fragment was consumed."""

    def __init__(self, token: CancellationToken, **kwargs) -> None:
        super().__init__(**kwargs)
        self._token = token

    async def stream(self, messages, **kwargs):
        async for fragment in super().stream(messages, **kwargs):
            yield fragment
            self._token.cancel("stop")


class TestGenerationSession:
    """Tests for GenerationSession.send()."""

    async def test_first_turn_extracts_files(self, session, mock_provider) -> None:
        mock_provider.queue_response(HTML_REPLY)

        turn = await session.send("A landing page for a coffee shop")

        assert turn.reply == HTML_REPLY
        assert turn.files_updated is True
        assert turn.cancelled is False
        assert turn.files["public/index.html"].content == (
            "<!DOCTYPE html>\n<html><body>Coffee</body></html>"
        )
        assert session.files == turn.files

    async def test_history_grows_per_turn(self, session, mock_provider) -> None:
        mock_provider.queue_response(HTML_REPLY)
        mock_provider.queue_response("Sure, made it darker.")

        await session.send("Coffee shop page")
        await session.send("Make it darker")

        assert [m.role for m in session.history] == [
            ChatRole.USER, ChatRole.MODEL, ChatRole.USER, ChatRole.MODEL,
        ]
        second_call = mock_provider.call_history[1]["messages"]
        assert [m.content for m in second_call] == ["Coffee shop page", HTML_REPLY, "Make it darker"]

    async def test_system_instruction_sent(self, mock_provider) -> None:
        session = GenerationSession(mock_provider, system_instruction="Only HTML")
        await session.send("hi")
        assert mock_provider.call_history[0]["system_instruction"] == "Only HTML"

    async def test_reply_without_artifact_keeps_previous_files(self, session, mock_provider) -> None:
        mock_provider.queue_response(HTML_REPLY)
        mock_provider.queue_response("Which colour would you like?")

        first = await session.send("Coffee shop page")
        second = await session.send("Change the colours")

        assert second.files_updated is False
        assert second.files == first.files

    async def test_on_update_sees_growing_content(self, session, mock_provider) -> None:
        mock_provider.queue_response(HTML_REPLY)
        contents: list[str] = []

        await session.send(
            "Coffee shop page",
            on_update=lambda buffer, files: contents.append(files["public/index.html"].content),
        )

        assert len(contents) > 1
        for earlier, later in zip(contents, contents[1:]):
            assert later.startswith(earlier)
        assert contents[-1].endswith("</html>")

    async def test_async_on_update(self, session, mock_provider) -> None:
        mock_provider.queue_response(HTML_REPLY)
        buffers: list[str] = []

        async def on_update(buffer, files) -> None:
            buffers.append(buffer)

        await session.send("Coffee shop page", on_update=on_update)

        assert buffers[-1] == HTML_REPLY

    async def test_multi_file_reply(self, session, mock_provider) -> None:
        mock_provider.queue_response("FILE-BOUNDARY: a.css\nbody{}\nFILE-BOUNDARY: b.js\nrun()")

        turn = await session.send("Split it up")

        assert list(turn.files) == ["a.css", "b.js"]

    async def test_custom_entry_point(self, mock_provider) -> None:
        session = GenerationSession(mock_provider, config=PipelineConfig(entry_point_path="index.html"))
        mock_provider.queue_response(HTML_REPLY)

        turn = await session.send("Coffee shop page")

        assert list(turn.files) == ["index.html"]

    async def test_empty_message_rejected(self, session, mock_provider) -> None:
        with pytest.raises(ValueError):
            await session.send("  ")
        assert session.history == []
        assert mock_provider.call_count == 0

    async def test_cancelled_before_send(self, session, mock_provider) -> None:
        token = CancellationToken()
        token.cancel()

        turn = await session.send("Coffee shop page", cancel_token=token)

        assert turn.cancelled is True
        assert turn.reply == ""
        assert mock_provider.call_count == 0
        assert session.history == []

    async def test_next_turn_after_cancel_alternates_roles(self, session, mock_provider) -> None:
        token = CancellationToken()
        token.cancel()
        await session.send("Coffee shop page", cancel_token=token)
        mock_provider.queue_response(HTML_REPLY)

        await session.send("Coffee shop page, take two")

        sent = mock_provider.call_history[0]["messages"]
        assert [m.role for m in sent] == [ChatRole.USER]
        assert sent[0].content == "Coffee shop page, take two"
        assert [m.role for m in session.history] == [ChatRole.USER, ChatRole.MODEL]

    async def test_cancelled_mid_stream_keeps_partial_reply(self) -> None:
        token = CancellationToken()
        provider = CancelAfterFirstFragment(token, fragment_size=10)
        provider.queue_response(HTML_REPLY)
        session = GenerationSession(provider)

        turn = await session.send("Coffee shop page", cancel_token=token)

        assert turn.cancelled is True
        assert turn.reply == HTML_REPLY[:10]
        assert turn.fragment_count == 1
        assert session.history[-1].content == HTML_REPLY[:10]

    async def test_provider_failure_propagates(self, session, mock_provider) -> None:
        mock_provider.queue_failure("stream dropped", after_fragments=1, partial_content="```html\n<p>")

        with pytest.raises(ProviderError):
            await session.send("Coffee shop page")

        assert [m.role for m in session.history] == [ChatRole.USER]

    async def test_reset(self, session, mock_provider) -> None:
        mock_provider.queue_response(HTML_REPLY)
        await session.send("Coffee shop page")

        session.reset()

        assert session.history == []
        assert session.files is None

    async def test_sessions_are_isolated(self, mock_provider) -> None:
        first = GenerationSession(mock_provider)
        second = GenerationSession(mock_provider)
        mock_provider.queue_response(HTML_REPLY)

        await first.send("Coffee shop page")

        assert second.history == []
        assert second.files is None
