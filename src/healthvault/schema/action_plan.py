"""Action plan schemas carried as JSON by the action plan methods"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from ..enums import ActionPlanWindowType


class ActionPlanModel(BaseModel):
    """Base for action plan models: camelCase on the wire, snake_case in Python."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_json(self) -> str:
        return self.model_dump_json(by_alias=True, exclude_none=True)


class ActionPlanFrequencyTaskCompletionMetrics(ActionPlanModel):
    """How often a frequency task must be completed"""

    window_type: Optional[ActionPlanWindowType] = Field(
        None,
        description="Window the occurrences are counted in",
        examples=["Daily"]
    )
    occurrence_count: Optional[int] = Field(
        None,
        ge=0,
        description="Occurrences required per window",
        examples=[2]
    )

    @field_validator('window_type', mode='before')
    @classmethod
    def validate_window_type(cls, v):
        """Unrecognized window types read as Unknown"""
        if v is None or isinstance(v, ActionPlanWindowType):
            return v
        try:
            return ActionPlanWindowType(v)
        except ValueError:
            return ActionPlanWindowType.UNKNOWN


class ActionPlanTask(ActionPlanModel):
    """One task of an action plan"""

    id: Optional[str] = Field(None, description="Task identifier, assigned by the service")
    name: str = Field(..., min_length=1, description="Task name")
    short_description: Optional[str] = Field(None, description="One line description")
    long_description: Optional[str] = Field(None, description="Full description")
    status: Optional[str] = Field(None, description="Task status (e.g. Archived, InProgress)")
    frequency_task_completion_metrics: Optional[ActionPlanFrequencyTaskCompletionMetrics] = Field(
        None,
        description="Completion requirements for frequency based tasks"
    )


class ActionPlan(ActionPlanModel):
    """A set of tasks working towards one health objective"""

    id: Optional[str] = Field(None, description="Plan identifier, assigned by the service")
    name: str = Field(..., min_length=1, description="Plan name")
    description: Optional[str] = Field(None, description="Plan description")
    category: Optional[str] = Field(None, description="Plan category (e.g. Health, Sleep)")
    status: Optional[str] = Field(None, description="Plan status")
    associated_tasks: List[ActionPlanTask] = Field(default_factory=list)


class ActionPlansResponse(ActionPlanModel):
    """A page of action plans"""

    plans: List[ActionPlan] = Field(default_factory=list)
    next_link: Optional[str] = Field(None, description="Link to the next page, if any")


class ActionPlanTaskAdherence(ActionPlanModel):
    """Completion of one task within an adherence window"""

    task_id: str
    task_name: Optional[str] = None
    completed_occurrences: int = Field(0, ge=0)
    target_occurrences: Optional[int] = Field(None, ge=0)


class ActionPlanAdherence(ActionPlanModel):
    """Adherence of a record to its plans over a date range"""

    start_time: datetime
    end_time: datetime
    plan_id: Optional[str] = None
    task_results: List[ActionPlanTaskAdherence] = Field(default_factory=list)
