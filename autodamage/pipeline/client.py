"""Client for the hosted vision model that assesses vehicle damage."""

import re
import httpx
from typing import Any, Dict, Optional
from loguru import logger
from pydantic import ValidationError

from ..analysis.schemas import AnalysisResult, DEFAULT_CONDITION
from ..utils.config_loader import Config, get_config
from ..utils.json_parser import extract_json_object


DAMAGE_PROMPT = """You are an expert automotive damage assessment specialist. Analyze the car image and provide detailed damage assessments in JSON format.

For each visible damage, provide:
- carPart: The specific car part (e.g., front bumper, rear bumper, bonnet, fender, door, windshield, headlight, taillight, side mirror, alloy wheel)
- damageType: Type of damage (scratch, dent, crack, broken, bent, paint peel)
- severity: minor, moderate, or severe
- location: front, rear, left, right, or top
- estimatedCost: Estimated repair/replacement cost in AUD (be realistic based on damage type and severity)

Provide an overall condition rating: Excellent, Good, Fair, Poor, or Severely Damaged.

If damage is unclear or image quality is poor, set message to "Damage not clearly visible in this image." and return empty damages array.

Return ONLY valid JSON in this format:
{
  "damages": [
    {
      "carPart": "string",
      "damageType": "string",
      "severity": "minor|moderate|severe",
      "location": "string",
      "estimatedCost": number
    }
  ],
  "overallCondition": "Excellent|Good|Fair|Poor|Severely Damaged",
  "message": "optional message"
}

Analyze this car image for all visible damages. Provide a detailed assessment in the specified JSON format."""

UNPARSEABLE_MESSAGE = "Unable to parse analysis. Please try again with a clearer image."

_DATA_URI_PREFIX_RE = re.compile(r"^data:image/\w+;base64,")
_DATA_URI_MIME_RE = re.compile(r"data:image/(\w+);base64")


class ModelAPIError(RuntimeError):
    """Raised when the vision model endpoint cannot be called successfully."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


def to_image_data_uri(image_base64: str) -> str:
    """Normalize a base64 image, with or without data URI prefix, to a data URI."""
    base64_data = _DATA_URI_PREFIX_RE.sub('', image_base64)
    match = _DATA_URI_MIME_RE.search(image_base64)
    mime_type = match.group(1) if match else 'jpeg'
    return f"data:image/{mime_type};base64,{base64_data}"


def fallback_result() -> AnalysisResult:
    """Result substituted when the model reply cannot be understood."""
    return AnalysisResult(
        damages=[],
        overall_condition=DEFAULT_CONDITION,
        message=UNPARSEABLE_MESSAGE,
    )


def parse_reply(content: str) -> AnalysisResult:
    """
    Turn the model's reply text into an AnalysisResult.

    Surrounding prose and code fences are tolerated. Only an object with a
    ``damages`` key counts as the assessment; replies holding none, such
    as truncated ones, yield the fallback result instead of an error.
    """
    data = extract_json_object(content, accept=lambda obj: 'damages' in obj)
    if data is None:
        logger.warning("Model reply holds no damage assessment, using fallback result")
        return fallback_result()

    try:
        return AnalysisResult.model_validate(data)
    except ValidationError as e:
        logger.warning(f"Model reply does not match the damage schema: {e.error_count()} error(s)")
        return fallback_result()


class DamageAnalysisClient:
    """Sends vehicle images to a chat-completions vision endpoint."""

    def __init__(
        self,
        endpoint: str,
        api_key: Optional[str] = None,
        model_name: str = 'DEEPSEEK-REASONER',
        temperature: float = 0.0,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        """
        Initialize the analysis client.

        Args:
            endpoint: URL of the chat completions endpoint
            api_key: Bearer credential for the endpoint
            model_name: Model identifier sent in the payload
            temperature: Sampling temperature
            timeout: Request timeout in seconds, None to wait indefinitely
            transport: Optional httpx transport (used by tests)
        """
        self.endpoint = endpoint
        self.api_key = api_key
        self.model_name = model_name
        self.temperature = temperature
        self.timeout = timeout
        self.transport = transport

        if not api_key:
            logger.warning("No API key configured for the vision model")

        logger.info(f"Initialized damage analysis client for model {model_name}")

    @classmethod
    def from_config(cls, config: Optional[Config] = None) -> "DamageAnalysisClient":
        """Create a client from the service configuration."""
        config = config or get_config()
        return cls(
            endpoint=config.model_endpoint,
            api_key=config.api_key,
            model_name=config.model_name,
            temperature=config.model_temperature,
            timeout=config.model_timeout,
        )

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key)

    def build_payload(self, image_base64: str) -> Dict[str, Any]:
        """Build the chat completions request body for one image."""
        messages = [
            {
                "role": "user",
                "content": [
                    {"type": "text", "text": DAMAGE_PROMPT},
                    {"type": "image_url", "image_url": {"url": to_image_data_uri(image_base64)}},
                ],
            }
        ]

        return {
            "model": self.model_name,
            "messages": messages,
            "temperature": self.temperature,
        }

    async def analyze(self, image_base64: str, image_name: Optional[str] = None) -> AnalysisResult:
        """
        Assess the damage visible in one image.

        Args:
            image_base64: Base64 image, optionally as a data URI
            image_name: Original file name, for logging

        Returns:
            Parsed analysis, or the fallback result if the reply is unparseable

        Raises:
            ModelAPIError: If the credential is missing or the endpoint fails
        """
        if not self.api_key:
            raise ModelAPIError("Vision model API key is not configured")

        headers = {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {self.api_key}",
        }

        logger.info(f"Requesting damage analysis for {image_name or 'image'}")

        async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
            response = await client.post(
                self.endpoint,
                headers=headers,
                json=self.build_payload(image_base64),
            )

        if not response.is_success:
            raise ModelAPIError(
                f"DeepSeek API error: {response.status_code} {response.reason_phrase} - {response.text}",
                status_code=response.status_code,
            )

        content = self._reply_content(response)
        result = parse_reply(content)

        logger.info(
            f"Analysis of {image_name or 'image'} complete: "
            f"{len(result.damages)} damage(s), condition {result.overall_condition}"
        )

        return result

    def _reply_content(self, response: httpx.Response) -> str:
        """Extract the assistant message text, '{}' when missing."""
        try:
            data = response.json()
        except ValueError:
            logger.warning("Vision model returned a non-JSON body")
            return '{}'

        try:
            content = data['choices'][0]['message']['content']
        except (KeyError, IndexError, TypeError):
            content = None

        return content or '{}'
