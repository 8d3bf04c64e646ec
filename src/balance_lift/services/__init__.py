"""Business logic services."""

from .plan_import import ImportedPlan, PlanImportError, PlanImportService
from .workout_session import (
    RedirectReason,
    SessionContext,
    SessionStateError,
    SessionStatus,
    SubmitResult,
    SubmitStatus,
    WorkoutSession,
    open_local_session,
)

__all__ = [
    "ImportedPlan",
    "PlanImportError",
    "PlanImportService",
    "RedirectReason",
    "SessionContext",
    "SessionStateError",
    "SessionStatus",
    "SubmitResult",
    "SubmitStatus",
    "WorkoutSession",
    "open_local_session",
]
