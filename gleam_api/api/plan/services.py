# gleam_api/api/plan/services.py
import copy
import logging
from typing import Any, Dict

from marshmallow import ValidationError

from gleam_api.api.plan import prompts
from gleam_api.core.errors import UpstreamMalformedJSONError
from gleam_api.schemas.scan_schema import PlanResponseSchema
from gleam_api.services.openai_service import OpenAIService
from gleam_api.utils.sanitizers import normalize_history

logger = logging.getLogger(__name__)


class PlanService:
    """Builds a four-category care plan from the caller's recent scans. Nothing is persisted."""

    def __init__(self, openai_service: OpenAIService, temperature: float = 0.4, max_tokens: int = 600):
        self.openai_service = openai_service
        self.temperature = temperature
        self.max_tokens = max_tokens

    def generate_plan(self, payload: Any) -> Dict[str, Any]:
        """
        :param payload: request body; ``history`` is read when present, newest entry first
        :return: ``{"plan": {"immediate": [...], "daily": [...], "weekly": [...], "caution": [...]}}``
        """
        raw_history = payload.get('history') if isinstance(payload, dict) else None
        history = normalize_history(raw_history)

        if not history:
            logger.info("No usable scan history; returning the default plan.")
            return {'plan': copy.deepcopy(prompts.DEFAULT_PLAN)}

        messages = prompts.build_messages(history)
        raw_plan = self.openai_service.request_json(messages, self.temperature, self.max_tokens)

        schema = PlanResponseSchema()
        try:
            plan = schema.load(raw_plan)
        except ValidationError as err:
            logger.error(f"Model reply does not match the plan shape: {err.messages}")
            raise UpstreamMalformedJSONError(f"Plan failed validation: {err.messages}") from err

        logger.info(f"Personalized plan generated from {len(history)} scans.")
        return schema.dump(plan)
