from google import genai
from google.genai import types, errors
from pydantic import ValidationError
import httpx
import json
import logging

from agroguard.exceptions import ProviderError, ProviderFailure
from agroguard.schemas.analysis import AnalysisResult

logger = logging.getLogger(__name__)


ANALYSIS_PROMPT = """You are an expert agricultural pathologist and crop disease specialist. Analyze this image of a crop/plant and identify any diseases or health issues.

IMPORTANT: Respond ONLY with a valid JSON object, no markdown, no code blocks, just pure JSON.

If you detect a disease or health issue, respond with this exact JSON structure:
{
  "detected": true,
  "diseaseName": "English name of the disease",
  "diseaseNameAmharic": "Disease name in Amharic script",
  "diseaseNameOromifa": "Disease name in Oromifa/Afaan Oromo",
  "confidence": 85,
  "description": "Brief description of the disease",
  "symptoms": ["symptom 1", "symptom 2", "symptom 3"],
  "treatment": ["treatment step 1", "treatment step 2", "treatment step 3"],
  "prevention": ["prevention tip 1", "prevention tip 2"],
  "affectedCrops": ["crop1", "crop2"],
  "severity": "medium",
  "isHealthy": false
}

If the plant appears healthy, respond with:
{
  "detected": false,
  "diseaseName": "Healthy Plant",
  "diseaseNameAmharic": "ጤናማ ተክል",
  "diseaseNameOromifa": "Biqiltuu Fayyaa",
  "confidence": 90,
  "description": "The plant appears to be healthy with no visible signs of disease.",
  "symptoms": [],
  "treatment": ["Continue regular care and monitoring"],
  "prevention": ["Maintain good agricultural practices", "Regular inspection"],
  "affectedCrops": [],
  "severity": "low",
  "isHealthy": true
}

If this is not a plant/crop image, respond with:
{
  "detected": false,
  "diseaseName": "Not a Plant Image",
  "confidence": 0,
  "description": "This does not appear to be an image of a plant or crop. Please upload a clear image of the affected plant.",
  "symptoms": [],
  "treatment": [],
  "prevention": [],
  "affectedCrops": [],
  "severity": "low",
  "isHealthy": false
}

Confidence should be a number between 0-100.
Severity should be "low", "medium", or "high"."""


def strip_code_fence(text: str) -> str:
    """Remove a surrounding ```json / ``` fence the model sometimes adds despite instructions"""
    cleaned = text.strip()
    if cleaned.startswith("```json"):
        cleaned = cleaned[7:]
    if cleaned.startswith("```"):
        cleaned = cleaned[3:]
    if cleaned.endswith("```"):
        cleaned = cleaned[:-3]
    return cleaned.strip()


def parse_verdict(text: str) -> AnalysisResult:
    try:
        payload = json.loads(strip_code_fence(text))
    except json.JSONDecodeError as e:
        raise ProviderError(ProviderFailure.MALFORMED_OUTPUT, f"not JSON: {e}") from e

    if not isinstance(payload, dict):
        raise ProviderError(ProviderFailure.MALFORMED_OUTPUT, "expected a JSON object")

    try:
        return AnalysisResult.model_validate(payload)
    except ValidationError as e:
        raise ProviderError(ProviderFailure.MALFORMED_OUTPUT, str(e)) from e


def classify_api_error(error: errors.APIError) -> ProviderFailure:
    message = str(getattr(error, "message", None) or error).lower()
    if error.code == 429 or error.status == "RESOURCE_EXHAUSTED" or "quota" in message:
        return ProviderFailure.QUOTA_EXHAUSTED
    return ProviderFailure.HTTP_ERROR


class GeminiProvider:
    """Remote vision model. One request per call; retries are the orchestrator's business (there are none)."""

    name = "gemini"

    def __init__(self, api_key: str = None, model: str = "gemini-2.0-flash", client=None):
        self.client = client or genai.Client(api_key=api_key)
        self.model = model
        self.config = types.GenerateContentConfig(
            temperature=0.4,
            top_k=32,
            top_p=1,
            max_output_tokens=2048,
        )

    async def analyze(self, image_bytes: bytes, mime_type: str = "image/jpeg") -> AnalysisResult:
        content_part = types.Part.from_bytes(data=image_bytes, mime_type=mime_type)

        logger.info(f"🧠 Requesting analysis from Gemini ({self.model})...")
        try:
            response = await self.client.aio.models.generate_content(
                model=self.model,
                contents=[ANALYSIS_PROMPT, content_part],
                config=self.config
            )
        except errors.APIError as e:
            raise ProviderError(classify_api_error(e), str(e)) from e
        except (TimeoutError, httpx.TimeoutException) as e:
            raise ProviderError(ProviderFailure.TIMEOUT, str(e)) from e
        except httpx.HTTPError as e:
            raise ProviderError(ProviderFailure.HTTP_ERROR, str(e)) from e
        except Exception as e:
            kind = ProviderFailure.QUOTA_EXHAUSTED if "quota" in str(e).lower() else ProviderFailure.UNKNOWN
            raise ProviderError(kind, str(e)) from e

        text = getattr(response, "text", None)
        if not text or not text.strip():
            raise ProviderError(ProviderFailure.EMPTY_RESPONSE, "no text in response")

        return parse_verdict(text)
