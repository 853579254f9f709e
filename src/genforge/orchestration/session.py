"""
genforge.orchestration.session - Single-Agent Streaming Session
=================================================================

A GenerationSession is the conversational, single-stage path: the user
sends a message, the provider streams a reply, and the artifact extractor is
re-run over the growing reply after every fragment so a live preview can be
updated while the model is still typing.

    send("make it dark")
        │
        ▼
    history += user message
        │
        ▼  provider.stream(history, system_instruction)
    ┌───────────────────────────────────────────┐
    │ for each fragment:                         │
    │     cancelled? → stop, keep partial reply  │
    │     buffer += fragment                     │
    │     extract_files(buffer) → FileSet?       │
    │         yes → session.files = it           │
    │               on_update(buffer, files)     │
    └───────────────────────────────────────────┘
        │
        ▼
    history += model reply (full or partial;
               cancelled with no reply → user message dropped)

The session is caller-owned: there is no module-level state, and two
sessions never share history or files.
"""

from __future__ import annotations

import inspect
from typing import Awaitable, Callable, Optional, Union

import structlog
from pydantic import BaseModel, Field

from genforge.agents.prompts import DEFAULT_SYSTEM_INSTRUCTION
from genforge.core.cancellation import CancellationToken
from genforge.core.config import PipelineConfig
from genforge.core.models import FileSet
from genforge.integrations.llm.base import BaseLLMProvider, ChatMessage
from genforge.parsing.artifact_extractor import extract_files


logger = structlog.get_logger()

# (buffer so far, latest FileSet) → None, or an awaitable for async observers.
UpdateCallback = Callable[[str, FileSet], Union[None, Awaitable[None]]]


class SessionTurn(BaseModel):
    """Outcome of one ``send()`` call.

    Attributes:
        reply: The model's reply text (partial if cancelled).
        files: The session's FileSet after this turn (may come from an
            earlier turn if this reply contained no artifact).
        files_updated: Whether this turn produced a new FileSet.
        cancelled: Whether the turn was stopped by a cancellation token.
        fragment_count: Number of fragments consumed.
    """

    reply: str
    files: Optional[FileSet] = None
    files_updated: bool = False
    cancelled: bool = False
    fragment_count: int = Field(default=0, ge=0)


class GenerationSession:
    """Caller-owned conversation with one provider.

    Example:
        >>> session = GenerationSession(provider)
        >>> turn = await session.send("A landing page for a coffee shop")
        >>> turn.files["public/index.html"].content[:15]
        '<!DOCTYPE html>'
    """

    def __init__(
        self,
        provider: BaseLLMProvider,
        *,
        system_instruction: str = DEFAULT_SYSTEM_INSTRUCTION,
        config: Optional[PipelineConfig] = None,
    ) -> None:
        self._provider = provider
        self._system_instruction = system_instruction
        self._entry_point_path = (config or PipelineConfig()).entry_point_path
        self._history: list[ChatMessage] = []
        self._files: Optional[FileSet] = None
        self._logger = logger.bind(component="generation_session")

    @property
    def history(self) -> list[ChatMessage]:
        """The conversation so far, oldest first (a copy)."""
        return list(self._history)

    @property
    def files(self) -> Optional[FileSet]:
        """The latest valid FileSet, or None if none was produced yet."""
        return self._files

    @property
    def system_instruction(self) -> str:
        return self._system_instruction

    async def send(
        self,
        text: str,
        *,
        cancel_token: Optional[CancellationToken] = None,
        on_update: Optional[UpdateCallback] = None,
    ) -> SessionTurn:
        """Send a user message and stream the reply.

        Args:
            text: The user's message.
            cancel_token: Checked before the request and between fragments.
                Cancelling keeps the partial reply and marks the turn. A turn
                cancelled before any fragment arrived leaves no trace in the
                history.
            on_update: Called whenever a fragment yields a FileSet.

        Returns:
            The SessionTurn for this message.

        Raises:
            ValueError: If ``text`` is empty or whitespace.
            ProviderError: If the provider fails. The user message stays in
                the history; no model reply is recorded.
        """
        if not text or not text.strip():
            raise ValueError("Message text must not be empty")

        self._history.append(ChatMessage.user(text))
        self._logger.info("session_turn_starting", history_length=len(self._history))

        buffer = ""
        fragment_count = 0
        files_updated = False
        cancelled = cancel_token is not None and cancel_token.cancelled

        if not cancelled:
            stream = self._provider.stream(self.history, system_instruction=self._system_instruction)
            try:
                async for fragment in stream:
                    if cancel_token is not None and cancel_token.cancelled:
                        cancelled = True
                        break
                    buffer += fragment
                    fragment_count += 1

                    extracted = extract_files(buffer, entry_point_path=self._entry_point_path)
                    if extracted is not None:
                        self._files = extracted
                        files_updated = True
                        if on_update is not None:
                            outcome = on_update(buffer, extracted)
                            if inspect.isawaitable(outcome):
                                await outcome
            except Exception as e:
                self._logger.error(
                    "session_turn_failed",
                    error=str(e),
                    error_type=type(e).__name__,
                    fragments_received=fragment_count,
                )
                raise
            finally:
                aclose = getattr(stream, "aclose", None)
                if aclose is not None:
                    await aclose()

        if buffer or not cancelled:
            self._history.append(ChatMessage.model(buffer))
        else:
            # Nothing was answered; keep user and model turns alternating.
            self._history.pop()

        self._logger.info(
            "session_turn_completed",
            fragment_count=fragment_count,
            files_updated=files_updated,
            cancelled=cancelled,
        )
        return SessionTurn(
            reply=buffer,
            files=self._files,
            files_updated=files_updated,
            cancelled=cancelled,
            fragment_count=fragment_count,
        )

    def reset(self) -> None:
        """Forget the conversation and the current FileSet."""
        self._history.clear()
        self._files = None
