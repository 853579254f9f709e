"""
GenForge - Multi-Agent Application Generator
=============================================

Turns a plain-language request into a multi-file web project:

    request → PipelineOrchestrator (coordinator, architect, frontend,
              backend, reviewer) → extracted FileSet → PipelineResult

or, conversationally, through a single-agent GenerationSession whose
FileSet is re-extracted after every streamed fragment.

Quick Start:
    >>> from genforge import GenForge
    >>> async with GenForge() as forge:
    ...     result = await forge.run_pipeline("A tip calculator")
    ...     print(result.summary)
"""

__version__ = "0.1.0"

from genforge.facade import GenForge

__all__ = ["GenForge", "__version__"]
