"""
genforge.orchestration.progress - Progress Projector
======================================================

Derives every role's status from the pipeline's single ``overall`` value.
The projection is pure: the same ``overall`` always yields the same snapshot,
so a UI can re-derive it at any time without remembering anything.

Bands (overall %):

    0        25      40          60          80      90      100
    ├────────┼───────┼───────────┼───────────┼───────┼───────┤
    │ coord. │ arch. │ frontend  │ backend   │review │ coord.│
    │ (plan) │       │           │           │       │(synth)│

For a role with band [lo, hi):
    overall <  lo          → IDLE,    0%
    lo <= overall < hi     → WORKING, (overall - lo) / (hi - lo) * 100
    overall >= hi          → DONE,    100%

The coordinator owns two bands. It is WORKING inside either band, DONE
between them, and DONE for good once overall reaches 100.
"""

from __future__ import annotations

from genforge.core.enums import AgentRole, StageStatus, ensure_role_table
from genforge.core.models import ProgressSnapshot, RoleProgress


# =============================================================================
# Band Table
# =============================================================================
ROLE_BANDS: dict[AgentRole, tuple[tuple[float, float], ...]] = {
    AgentRole.COORDINATOR: ((0.0, 25.0), (90.0, 100.0)),
    AgentRole.ARCHITECT: ((25.0, 40.0),),
    AgentRole.FRONTEND: ((40.0, 60.0),),
    AgentRole.BACKEND: ((60.0, 80.0),),
    AgentRole.REVIEWER: ((80.0, 90.0),),
}

# One working text per band, in band order.
WORKING_ACTIVITIES: dict[AgentRole, tuple[str, ...]] = {
    AgentRole.COORDINATOR: (
        "Analyzing request and creating plan...",
        "Synthesizing final output...",
    ),
    AgentRole.ARCHITECT: ("Designing component architecture...",),
    AgentRole.FRONTEND: ("Building React components...",),
    AgentRole.BACKEND: ("Implementing business logic...",),
    AgentRole.REVIEWER: ("Reviewing code quality...",),
}

IDLE_ACTIVITY = "Waiting..."
DONE_ACTIVITY = "Task complete"

ensure_role_table(ROLE_BANDS, "ROLE_BANDS")
ensure_role_table(WORKING_ACTIVITIES, "WORKING_ACTIVITIES")


def project_progress(overall: float) -> ProgressSnapshot:
    """Project the status of every role for one overall progress value.

    Args:
        overall: Overall pipeline progress. Values outside 0..100 are clamped.

    Returns:
        A ProgressSnapshot with one RoleProgress per AgentRole.

    Example:
        >>> snapshot = project_progress(25)
        >>> snapshot.per_role[AgentRole.ARCHITECT].status
        <StageStatus.WORKING: 'working'>
    """
    value = min(100.0, max(0.0, float(overall)))
    per_role = {role: _project_role(role, value) for role in AgentRole}
    return ProgressSnapshot(overall=value, per_role=per_role)


def _project_role(role: AgentRole, overall: float) -> RoleProgress:
    bands = ROLE_BANDS[role]
    last_hi = bands[-1][1]

    if overall >= last_hi:
        return RoleProgress(
            role=role,
            status=StageStatus.DONE,
            progress=100.0,
            activity=DONE_ACTIVITY,
        )

    for index, (lo, hi) in enumerate(bands):
        if lo <= overall < hi:
            return RoleProgress(
                role=role,
                status=StageStatus.WORKING,
                progress=(overall - lo) / (hi - lo) * 100.0,
                activity=WORKING_ACTIVITIES[role][index],
            )

    if overall < bands[0][0]:
        return RoleProgress(
            role=role,
            status=StageStatus.IDLE,
            progress=0.0,
            activity=IDLE_ACTIVITY,
        )

    # Between two bands of a multi-band role: the earlier band is finished.
    return RoleProgress(
        role=role,
        status=StageStatus.DONE,
        progress=100.0,
        activity=DONE_ACTIVITY,
    )
