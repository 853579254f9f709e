"""
genforge.orchestration - Generation Paths
=========================================

    - pipeline:  PipelineOrchestrator, the five-stage multi-agent path
    - session:   GenerationSession, the single-agent streaming chat path
    - progress:  project_progress(), overall % → per-role status
"""

from genforge.orchestration.pipeline import PipelineOrchestrator, ProgressCallback
from genforge.orchestration.progress import ROLE_BANDS, project_progress
from genforge.orchestration.session import GenerationSession, SessionTurn, UpdateCallback

__all__ = [
    "GenerationSession",
    "PipelineOrchestrator",
    "ProgressCallback",
    "ROLE_BANDS",
    "SessionTurn",
    "UpdateCallback",
    "project_progress",
]
