# gleam_api/api/analysis/services.py
import logging
from typing import Any, Dict

from marshmallow import ValidationError

from gleam_api.api.analysis import prompts
from gleam_api.core.errors import InvalidInputError, UpstreamMalformedJSONError
from gleam_api.schemas.scan_schema import AnalyzeResponseSchema, ScanResultSchema
from gleam_api.services.firestore_service import ScanRepository
from gleam_api.services.openai_service import OpenAIService
from gleam_api.utils.sanitizers import sanitize_tag_history, sanitize_tags, sanitize_takeaways

logger = logging.getLogger(__name__)

MISSING_IMAGE_ERROR = "Missing or invalid 'image' field"


class AnalysisService:
    """Runs one smile photo through the vision model and stores the result."""

    def __init__(self, openai_service: OpenAIService, scan_repository: ScanRepository,
                 temperature: float = 0.2, max_tokens: int = 500):
        self.openai_service = openai_service
        self.scan_repository = scan_repository
        self.temperature = temperature
        self.max_tokens = max_tokens

    def analyze(self, payload: Any) -> Dict[str, Any]:
        """
        Validate the request, call the model once, persist the record and
        return ``{"result": ..., "contextTags": [...]}``.

        The response is only produced after the Firestore write settles, so a
        failed write surfaces as an error even though the analysis succeeded.
        """
        if not isinstance(payload, dict):
            raise InvalidInputError("Request body must be a JSON object.", error=MISSING_IMAGE_ERROR)

        image = payload.get('image')
        if not isinstance(image, str) or not image:
            raise InvalidInputError("'image' must be a non-empty base64 string.", error=MISSING_IMAGE_ERROR)

        tags = sanitize_tags(payload.get('tags'))
        previous_takeaways = sanitize_takeaways(payload.get('previousTakeaways'))
        tag_history = sanitize_tag_history(payload.get('tagHistory'))

        logger.info(
            f"Processing dental scan analysis (tags: {tags}, "
            f"previous takeaways: {len(previous_takeaways)}, tag history samples: {len(tag_history)})"
        )

        messages = prompts.build_messages(image, tags, previous_takeaways, tag_history)
        raw_result = self.openai_service.request_json(messages, self.temperature, self.max_tokens)

        try:
            result = ScanResultSchema().load(raw_result)
        except ValidationError as err:
            logger.error(f"Model reply does not match the scan result shape: {err.messages}")
            raise UpstreamMalformedJSONError(f"Scan result failed validation: {err.messages}") from err

        logger.info(
            f"Analysis completed successfully (whitenessScore: {result.whitenessScore}, "
            f"confidence: {result.confidence})"
        )

        response = AnalyzeResponseSchema().dump({'result': result, 'contextTags': tags})
        self.scan_repository.add_scan(response['result'], tags)
        return response
