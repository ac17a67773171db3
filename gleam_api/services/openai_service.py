# gleam_api/services/openai_service.py
import json
import logging
from typing import Any, Dict, List, Optional

import openai
from flask import Flask
from openai import OpenAI

from gleam_api.core.errors import (
    UpstreamAPIError, UpstreamEmptyResponseError, UpstreamMalformedJSONError
)

logger = logging.getLogger(__name__)


class OpenAIService:
    """
    Outbound chat-completion client shared by the analysis and plan services.
    Every call requests strict JSON-object output and is made exactly once (no retries).
    """

    def __init__(self, client: Optional[Any] = None, model: str = "gpt-4o-mini"):
        """
        :param client: an ``openai.OpenAI`` instance, or any object exposing
                       ``chat.completions.create``. Built in init_app when omitted.
        :param model: chat-completion model name
        """
        self.client = client
        self.model = model

    def init_app(self, app: Flask):
        """
        Called from the app factory. Reads the model name and, unless a client was
        injected, builds the OpenAI client from OPENAI_API_KEY.
        """
        self.model = app.config.get('OPENAI_MODEL', self.model)
        if self.client is not None:
            logger.info("OpenAIService: using injected client.")
            return

        api_key = app.config.get('OPENAI_API_KEY')
        if not api_key:
            raise ValueError("OPENAI_API_KEY must be configured.")

        self.client = OpenAI(api_key=api_key)
        logger.info(f"OpenAIService: initialized with model '{self.model}'.")

    def request_json(self, messages: List[Dict[str, Any]], temperature: float,
                     max_tokens: int) -> Dict[str, Any]:
        """
        Send one chat-completion request in JSON mode and parse the reply.

        :raises UpstreamAPIError: OpenAI reported an error (status passed through)
        :raises UpstreamEmptyResponseError: the reply carried no content
        :raises UpstreamMalformedJSONError: the content is not a JSON object
        """
        if not self.client:
            raise RuntimeError("OpenAIService is not initialized. Call init_app first.")

        try:
            response = self.client.chat.completions.create(
                model=self.model,
                messages=messages,
                response_format={"type": "json_object"},
                temperature=temperature,
                max_tokens=max_tokens,
            )
        except openai.APIError as e:
            status_code = getattr(e, 'status_code', None) or 500
            logger.error(f"OpenAI API error (status {status_code}): {e}")
            raise UpstreamAPIError(getattr(e, 'message', None) or str(e), status_code=status_code) from e

        content = response.choices[0].message.content if response.choices else None
        if not content:
            logger.error("OpenAI returned an empty response.")
            raise UpstreamEmptyResponseError()

        try:
            parsed = json.loads(content)
        except json.JSONDecodeError as e:
            logger.error(f"OpenAI returned content that is not valid JSON: {e}")
            raise UpstreamMalformedJSONError(str(e)) from e

        if not isinstance(parsed, dict):
            logger.error(f"OpenAI returned JSON that is not an object: {type(parsed).__name__}")
            raise UpstreamMalformedJSONError("Expected a JSON object from the model.")

        return parsed
