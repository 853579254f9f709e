"""
genforge.core.cancellation - Cooperative Cancellation
======================================================

A CancellationToken is created by the caller and threaded through both the
single-agent streaming path (GenerationSession) and the five-stage
PipelineOrchestrator. Components check it between suspension points:

    session:  before the request, between every received fragment
    agent:    before the request, between every received fragment
    pipeline: before every stage

Cancellation is cooperative: an in-flight provider request is not aborted,
the next checkpoint simply stops the work.

Usage:
    >>> token = CancellationToken()
    >>> task = asyncio.create_task(forge.run_pipeline("todo app", cancel_token=token))
    >>> token.cancel("user pressed stop")
"""

from __future__ import annotations

from typing import Optional

from genforge.core.exceptions import PipelineCancelledError


class CancellationToken:
    """A one-way cancellation flag with an optional reason."""

    def __init__(self) -> None:
        self._cancelled = False
        self._reason: Optional[str] = None

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    @property
    def reason(self) -> Optional[str]:
        return self._reason

    def cancel(self, reason: Optional[str] = None) -> None:
        """Request cancellation. Later calls keep the first reason."""
        if not self._cancelled:
            self._cancelled = True
            self._reason = reason

    def raise_if_cancelled(self) -> None:
        """Raise PipelineCancelledError if cancellation was requested."""
        if self._cancelled:
            message = "Generation was cancelled"
            if self._reason:
                message = f"{message}: {self._reason}"
            raise PipelineCancelledError(
                message=message,
                details={"reason": self._reason},
            )

    def __repr__(self) -> str:
        return f"CancellationToken(cancelled={self._cancelled!r}, reason={self._reason!r})"
