"""
genforge.core.enums - Type-Safe Enumerations
==============================================

This module defines all enumeration types used throughout GenForge.

All enums inherit from both `str` and `Enum`, which means:
    - They serialize to strings in JSON/YAML (Pydantic-friendly)
    - They can be compared with plain strings: AgentRole.FRONTEND == "frontend"
    - They have human-readable representations

Architecture Mapping:

    ┌─────────────────────────────────────────────────────────────────┐
    │  PARSING                                                        │
    │    ContentType: What kind of file an extracted artifact is      │
    ├─────────────────────────────────────────────────────────────────┤
    │  AGENT LAYER                                                    │
    │    AgentRole: The 5 pipeline roles                              │
    │    AgentStatus: One agent's lifecycle (IDLE → THINKING → ...)   │
    ├─────────────────────────────────────────────────────────────────┤
    │  PROGRESS TELEMETRY                                             │
    │    StageStatus: Projected per-role status (IDLE/WORKING/DONE)   │
    ├─────────────────────────────────────────────────────────────────┤
    │  PROVIDER INTERFACE                                             │
    │    ChatRole: Who authored a message in a chat history           │
    └─────────────────────────────────────────────────────────────────┘
"""

from collections.abc import Mapping
from enum import Enum
from typing import Any


# =============================================================================
# Agent Role Enumeration
# =============================================================================
# The closed set of roles in the generation pipeline. Every role-keyed table
# in GenForge (prompts, display names, progress bands) is keyed by this enum,
# so an "unknown role" cannot be expressed.
#
#   COORDINATOR → plans the project, later synthesizes the final FileSet
#   ARCHITECT   → designs component hierarchy and file layout
#   FRONTEND    → writes the UI components
#   BACKEND     → writes helpers/business logic (or declines)
#   REVIEWER    → reviews frontend + backend output
# =============================================================================
class AgentRole(str, Enum):
    """The five roles of the generation pipeline, in execution order.

    Usage:
        >>> role = AgentRole.ARCHITECT
        >>> role.value  # "architect"
        >>> role == "architect"  # True
    """

    COORDINATOR = "coordinator"
    ARCHITECT = "architect"
    FRONTEND = "frontend"
    BACKEND = "backend"
    REVIEWER = "reviewer"


# =============================================================================
# Agent Status Enumeration
# =============================================================================
# Lifecycle of a single Agent instance:
#
#   IDLE → THINKING → (DONE | ERROR)
#     ↑                     │
#     └────── reset() ──────┘
# =============================================================================
class AgentStatus(str, Enum):
    """Lifecycle states for one Agent.

    State Transitions:
        IDLE → THINKING:  run() submitted a request to the provider
        THINKING → DONE:  the full response was received
        THINKING → ERROR: the provider failed
        THINKING → IDLE:  the run was cancelled
        Any → IDLE:       reset()
    """

    IDLE = "idle"
    THINKING = "thinking"
    DONE = "done"
    ERROR = "error"


# =============================================================================
# Stage Status Enumeration
# =============================================================================
# The status a role is *projected* to have for a given overall progress value.
# This is derived data (see orchestration/progress.py), never stored.
# =============================================================================
class StageStatus(str, Enum):
    """Projected status of a role for an overall-progress value."""

    IDLE = "idle"
    WORKING = "working"
    DONE = "done"


# =============================================================================
# Content Type Enumeration
# =============================================================================
# Tag attached to every extracted file. The values are the editor language
# identifiers consumed by renderers (Monaco-style language ids).
# =============================================================================
class ContentType(str, Enum):
    """Content-type tag of an extracted file.

    Usage:
        >>> ContentType.STYLE.value  # "css"
    """

    STYLE = "css"
    SCRIPT = "javascript"
    MARKUP = "html"
    DOC = "markdown"
    PLAIN = "plaintext"


# =============================================================================
# Chat Role Enumeration
# =============================================================================
class ChatRole(str, Enum):
    """Author of a message in a provider chat history."""

    USER = "user"
    MODEL = "model"


def ensure_role_table(table: Mapping[AgentRole, Any], name: str) -> None:
    """Raise RuntimeError if ``table`` lacks an entry for any AgentRole.

    Called at import time by every module that defines a role-keyed table.
    """
    missing = set(AgentRole) - set(table)
    if missing:
        raise RuntimeError(
            f"{name} is missing entries for: {sorted(role.value for role in missing)}"
        )
