"""
genforge.integrations - External Service Integration Layer
===========================================================

Adapters for the external services GenForge depends on, each abstracted
behind an interface so implementations can be swapped (real → mock).

Sub-packages:
    llm/   - Text-generation providers (OpenAI-compatible, Mock)
"""

__all__: list[str] = []
