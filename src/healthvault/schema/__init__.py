"""
Schema package for JSON payload models.
"""

from .action_plan import (
    ActionPlan,
    ActionPlanAdherence,
    ActionPlanFrequencyTaskCompletionMetrics,
    ActionPlansResponse,
    ActionPlanTask,
    ActionPlanTaskAdherence,
)

__all__ = [
    "ActionPlan",
    "ActionPlanAdherence",
    "ActionPlanFrequencyTaskCompletionMetrics",
    "ActionPlansResponse",
    "ActionPlanTask",
    "ActionPlanTaskAdherence",
]
