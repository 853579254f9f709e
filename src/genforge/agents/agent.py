"""
genforge.agents.agent - Role-Bound Single-Turn Agent
======================================================

An Agent wraps one text-generation call for one AgentRole. The role's
instruction prefix is fixed at construction and prepended to every task.

Prompt Layout:

    {role prompt}

    ---

    Task: {task}

    Context:            ← only when a context is given
    {context}

Agent Lifecycle:
    ┌──────┐   run()   ┌──────────┐  stream drained  ┌──────┐
    │ IDLE │ ────────→ │ THINKING │ ───────────────→ │ DONE │
    └──────┘           └────┬─────┘                  └──────┘
        ↑                   │ provider failure
        │ reset()      ┌────▼──┐
        └───────────── │ ERROR │   → AgentError(PROVIDER_FAILURE)
                       └───────┘

Every completed call appends one AgentRunRecord to the agent's run log.
Failures are never retried here; the caller decides what a failure means.
Cancellation (a cancelled token or a cancelled asyncio task) returns the
agent to IDLE without a run record.

Usage:
    >>> agent = Agent(AgentRole.ARCHITECT, provider)
    >>> design = await agent.run("Design a todo app", context="Use React")
    >>> agent.status
    <AgentStatus.DONE: 'done'>
"""

from __future__ import annotations

import asyncio
from typing import Optional

import structlog

from genforge.agents.prompts import ROLE_DISPLAY_NAMES, get_role_prompt
from genforge.core.cancellation import CancellationToken
from genforge.core.enums import AgentRole, AgentStatus
from genforge.core.exceptions import AgentError, PipelineCancelledError
from genforge.core.models import AgentRunRecord
from genforge.integrations.llm.base import BaseLLMProvider, ChatMessage


# =============================================================================
# Logger
# =============================================================================
logger = structlog.get_logger()


class Agent:
    """One role-bound wrapper around the text-generation provider.

    Attributes:
        role: The AgentRole this agent plays (fixed).
        name: Human-readable display name of the role.
        instruction: The fixed instruction prefix for the role.
    """

    def __init__(
        self,
        role: AgentRole,
        provider: BaseLLMProvider,
        *,
        instruction: Optional[str] = None,
    ) -> None:
        """Initialize the agent.

        Args:
            role: The role to bind this agent to.
            provider: Provider used for every run() call.
            instruction: Optional override of the role's instruction prefix.
        """
        self._role = role
        self._provider = provider
        self._instruction = instruction if instruction is not None else get_role_prompt(role)
        self._status = AgentStatus.IDLE
        self._run_log: list[AgentRunRecord] = []
        self._logger = logger.bind(component="agent", role=role.value)

    # =========================================================================
    # Properties
    # =========================================================================

    @property
    def role(self) -> AgentRole:
        return self._role

    @property
    def name(self) -> str:
        return ROLE_DISPLAY_NAMES[self._role]

    @property
    def instruction(self) -> str:
        return self._instruction

    @property
    def status(self) -> AgentStatus:
        return self._status

    @property
    def run_log(self) -> list[AgentRunRecord]:
        """Completed calls of this agent, oldest first (a copy)."""
        return list(self._run_log)

    # =========================================================================
    # Execution
    # =========================================================================

    def build_prompt(self, task: str, context: Optional[str] = None) -> str:
        """Combine the instruction prefix, the task and the optional context."""
        body = f"{task}\n\nContext:\n{context}" if context else task
        return f"{self._instruction}\n\n---\n\nTask: {body}"

    async def run(
        self,
        task: str,
        context: Optional[str] = None,
        *,
        cancel_token: Optional[CancellationToken] = None,
    ) -> str:
        """Submit the task as a single-turn request and return the full reply.

        Args:
            task: What the agent should do.
            context: Optional extra context appended after the task.
            cancel_token: Checked before the request and between fragments.

        Returns:
            The concatenation of every streamed fragment.

        Raises:
            AgentError: If the provider fails (error_code PROVIDER_FAILURE);
                the original exception is chained as ``__cause__``.
            PipelineCancelledError: If the token is cancelled.
        """
        if cancel_token is not None:
            cancel_token.raise_if_cancelled()

        prompt = self.build_prompt(task, context)
        self._status = AgentStatus.THINKING
        self._logger.info("agent_run_starting", prompt_length=len(prompt))

        fragments: list[str] = []
        try:
            async for fragment in self._provider.stream([ChatMessage.user(prompt)]):
                if cancel_token is not None:
                    cancel_token.raise_if_cancelled()
                fragments.append(fragment)
        except PipelineCancelledError:
            self._status = AgentStatus.IDLE
            self._logger.info("agent_run_cancelled", fragments_received=len(fragments))
            raise
        except asyncio.CancelledError:
            # Task cancellation, e.g. a stage timeout in asyncio.wait_for.
            self._status = AgentStatus.IDLE
            self._logger.info("agent_run_interrupted", fragments_received=len(fragments))
            raise
        except Exception as e:
            self._status = AgentStatus.ERROR
            self._logger.error(
                "agent_run_failed",
                error=str(e),
                error_type=type(e).__name__,
                fragments_received=len(fragments),
            )
            raise AgentError(
                message=f"{self.name} failed: {e}",
                role=self._role.value,
                error_code="PROVIDER_FAILURE",
                details={"fragments_received": len(fragments)},
            ) from e

        content = "".join(fragments)
        self._run_log.append(AgentRunRecord(role=self._role, content=content))
        self._status = AgentStatus.DONE
        self._logger.info("agent_run_completed", response_length=len(content))
        return content

    def reset(self) -> None:
        """Return to IDLE and clear the run log."""
        self._status = AgentStatus.IDLE
        self._run_log.clear()

    def __repr__(self) -> str:
        return f"Agent(role={self._role.value!r}, status={self._status.value!r})"
