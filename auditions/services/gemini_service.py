import google.generativeai as genai
import json
import logging
from typing import Dict, Any, Optional, Type
from pydantic import BaseModel
from auditions.config import get_settings
from auditions.utils.validator import validate_and_repair_json, clean_json_string

settings = get_settings()

class GeminiServices:
    """Gemini API service.

    Every call is a single request/response: no retry, bounded by the
    configured request timeout.
    """

    def __init__(self):
        genai.configure(api_key=settings.gemini_api_key)
        self.model = genai.GenerativeModel(settings.gemini_model)

        self.generation_config = {
            "temperature": settings.gemini_temperature,
            "top_p": 0.95,
            "top_k": 40,
            "max_output_tokens": settings.gemini_max_tokens,
        }

        self.safety_settings = [
            {
                "category": "HARM_CATEGORY_HARASSMENT",
                "threshold": "BLOCK_ONLY_HIGH"
            },
            {
                "category": "HARM_CATEGORY_HATE_SPEECH",
                "threshold": "BLOCK_ONLY_HIGH"
            },
            {
                "category": "HARM_CATEGORY_SEXUALLY_EXPLICIT",
                "threshold": "BLOCK_ONLY_HIGH"
            },
            {
                "category": "HARM_CATEGORY_DANGEROUS_CONTENT",
                "threshold": "BLOCK_ONLY_HIGH"
            }
        ]

    async def generate(
        self,
        prompt: str,
        system_instruction: Optional[str] = None,
        temperature: Optional[float] = None,
        json_mode: bool = True
    ) -> str:
        """Generate text with one request"""

        try:
            config = self.generation_config.copy()
            if temperature is not None:
                config["temperature"] = temperature

            if json_mode:
                config["response_mime_type"] = "application/json"
                prompt = self._add_json_instruction(prompt)

            if system_instruction:
                model = genai.GenerativeModel(
                    settings.gemini_model,
                    system_instruction=system_instruction
                )
            else:
                model = self.model

            logging.debug("Prompt: " + prompt)

            response = await model.generate_content_async(
                prompt,
                generation_config=config,
                safety_settings=self.safety_settings,
                request_options={"timeout": settings.gemini_timeout_seconds}
            )

            if not response.parts:
                raise ValueError("Empty response from Gemini")

            text = response.text
            logging.info(f"Gemini generated {len(text)} characters")

            if json_mode and isinstance(text, str):
                cleaned = clean_json_string(text)
                if cleaned != text:
                    logging.warning("Sanitized LLM output by removing code fences/formatting artifacts for JSON parsing")
                text = cleaned

            return text

        except Exception as e:
            logging.error(f"Gemini API error: {str(e)}")
            raise

    async def generate_structured_output(
        self,
        prompt: str,
        expected_model: Type[BaseModel],
        system_instruction: Optional[str] = None,
        temperature: Optional[float] = None
    ) -> Dict[str, Any]:
        """
        Generate and validate structured JSON output
        """
        text_response = await self.generate(
            prompt=prompt,
            system_instruction=system_instruction,
            temperature=temperature,
            json_mode=True
        )

        validated_data = validate_and_repair_json(
            text_response,
            expected_model
        )

        logging.debug("Validated structured output: " + json.dumps(validated_data, indent=2))

        return validated_data

    def _add_json_instruction(self, prompt: str) -> str:
        """Add JSON instruction to prompt"""

        json_instruction = """
        CRITICAL: You MUST respond with ONLY valid JSON. No markdown, no explanation, no code blocks.
        Your entire response should be parseable by json.loads().
        """

        return prompt + json_instruction

# Singleton instance
_gemini_service = None

def get_gemini_service() -> GeminiServices:
    """
    Get or create GeminiServices singleton
    """

    global _gemini_service
    if _gemini_service is None:
        _gemini_service = GeminiServices()
    return _gemini_service
