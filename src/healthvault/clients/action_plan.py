"""
Action Plan Client

Action plan methods exchange JSON documents. Requests carry the JSON as
the (escaped) text of <info>; responses return it the same way.
"""

import json
import logging
from typing import List, Optional, Type, TypeVar
from xml.sax.saxutils import escape

from pydantic import BaseModel, ValidationError

from ..exceptions import ArgumentError, ResponseFormatError
from ..models import DateRange, HealthServiceResponseData
from ..schema.action_plan import ActionPlan, ActionPlanAdherence, ActionPlansResponse
from ..utils import format_msg_time
from .base import RecordClient

logger = logging.getLogger(__name__)

TModel = TypeVar("TModel", bound=BaseModel)


def _json_parameters(payload: dict) -> str:
    return escape(json.dumps(payload, separators=(",", ":")))


def _parse_json(response: HealthServiceResponseData, model: Type[TModel], method_name: str) -> TModel:
    try:
        return model.model_validate_json(response.info_text)
    except ValidationError as e:
        raise ResponseFormatError(
            f"{method_name} returned an invalid document",
            details={"errors": e.errors(include_url=False)},
        )


class ActionPlanClient(RecordClient):
    """Access to the action plans of one record."""

    async def get_action_plans(self, max_page_size: Optional[int] = None) -> List[ActionPlan]:
        """Get the action plans of the record."""
        parameters = None
        if max_page_size is not None:
            if max_page_size < 1:
                raise ArgumentError("max_page_size must be at least 1")
            parameters = _json_parameters({"maxPageSize": max_page_size})

        response = await self._execute_for_record("GetActionPlans", 1, parameters)
        if not response.info_text:
            return []
        return _parse_json(response, ActionPlansResponse, "GetActionPlans").plans

    async def create_action_plan(self, plan: ActionPlan) -> ActionPlan:
        """
        Create an action plan in the record.

        Returns:
            The stored plan, with identifiers assigned by the service
        """
        response = await self._execute_for_record(
            "CreateActionPlan", 1, escape(plan.to_json())
        )
        created = _parse_json(response, ActionPlan, "CreateActionPlan")
        logger.info(f"Created action plan {created.id} in record {self.record.record_id}")
        return created

    async def delete_action_plan(self, plan_id: str) -> None:
        """Delete an action plan from the record."""
        if not plan_id:
            raise ArgumentError("plan_id must not be empty")
        await self._execute_for_record("DeleteActionPlan", 1, _json_parameters({"actionPlanId": plan_id}))
        logger.info(f"Deleted action plan {plan_id} from record {self.record.record_id}")

    async def get_adherence(self, date_range: DateRange, plan_id: Optional[str] = None) -> ActionPlanAdherence:
        """
        Get how well the record followed its plans over a date range.

        Args:
            date_range: Window to report on
            plan_id: Restrict the report to one plan
        """
        payload = {
            "startTime": format_msg_time(date_range.start),
            "endTime": format_msg_time(date_range.end),
        }
        if plan_id:
            payload["actionPlanId"] = plan_id

        response = await self._execute_for_record(
            "GetActionPlanAdherence", 1, _json_parameters(payload)
        )
        return _parse_json(response, ActionPlanAdherence, "GetActionPlanAdherence")
