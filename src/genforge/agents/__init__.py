"""
genforge.agents - Role-Bound Agents
===================================

    - Agent:         one role-bound single-turn provider call with a run log
    - prompts:       fixed instruction prefix per AgentRole, plus the
                     single-agent chat instruction
"""

from genforge.agents.agent import Agent
from genforge.agents.prompts import (
    DEFAULT_SYSTEM_INSTRUCTION,
    ROLE_DISPLAY_NAMES,
    ROLE_PROMPTS,
    get_role_prompt,
)

__all__ = [
    "Agent",
    "DEFAULT_SYSTEM_INSTRUCTION",
    "ROLE_DISPLAY_NAMES",
    "ROLE_PROMPTS",
    "get_role_prompt",
]
