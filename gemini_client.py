import logging
from typing import Optional, Type, TypeVar

from google import genai
from pydantic import BaseModel, ValidationError

from config import Config

logger = logging.getLogger(__name__)

ModelT = TypeVar('ModelT', bound=BaseModel)


class GeminiClient:
    """
    Thin wrapper around the google-genai client.

    Both calls convert provider failures into an empty value ('' or None)
    that callers must check. Nothing is retried here.
    """

    def __init__(self, api_key=None, model=None, temperature=None, timeout_ms=None):
        self.model_name = model or Config.GEMINI_MODEL
        self.temperature = Config.GEMINI_TEMPERATURE if temperature is None else temperature
        self.timeout_ms = Config.GEMINI_TIMEOUT_MS if timeout_ms is None else timeout_ms
        self.client = None
        api_key = api_key or Config.GOOGLE_API_KEY
        if api_key:
            try:
                self.client = genai.Client(api_key=api_key, http_options={'timeout': self.timeout_ms})
            except Exception as e:
                logger.error(f"GeminiClient init error: {e}")
        else:
            logger.warning("GeminiClient initialized without GOOGLE_API_KEY")

    def generate_text(self, prompt: str) -> str:
        """Free-text completion. Returns '' on any failure."""
        if not self.client:
            logger.error("Gemini call skipped: GOOGLE_API_KEY not configured")
            return ''
        try:
            response = self.client.models.generate_content(
                model=self.model_name,
                contents=prompt,
                config={'temperature': self.temperature}
            )
            return (response.text or '').strip()
        except Exception as e:
            logger.error(f"Gemini text generation error: {e}")
            return ''

    def generate_structured(self, prompt: str, schema: Type[ModelT]) -> Optional[ModelT]:
        """
        Schema-constrained generation.

        The pydantic model's JSON schema is sent with the request and the
        reply is validated against the same model. Returns None when the
        call fails or the reply does not conform.
        """
        if not self.client:
            logger.error("Gemini call skipped: GOOGLE_API_KEY not configured")
            return None
        try:
            response = self.client.models.generate_content(
                model=self.model_name,
                contents=prompt,
                config={
                    'temperature': self.temperature,
                    'response_mime_type': 'application/json',
                    'response_json_schema': schema.model_json_schema()
                }
            )
            text = response.text
        except Exception as e:
            logger.error(f"Gemini structured generation error: {e}")
            return None

        if not text:
            logger.warning("Gemini structured generation returned no output")
            return None
        try:
            return schema.model_validate_json(text)
        except ValidationError as e:
            logger.error(f"Gemini output did not match {schema.__name__}: {e}")
            return None
