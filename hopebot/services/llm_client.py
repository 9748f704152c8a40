# hopebot/services/llm_client.py
import enum
import json
import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from hopebot.core.config import settings
from hopebot.services.knowledge import MENTAL_HEALTH_INFO, SECTION_TITLES

logger = logging.getLogger(__name__)


class LLMErrorKind(str, enum.Enum):
    QUOTA_EXCEEDED = "QUOTA_EXCEEDED"
    API_ERROR = "API_ERROR"


class LLMError(Exception):
    def __init__(self, kind: LLMErrorKind, detail: str = ""):
        super().__init__(kind.value if not detail else f"{kind.value}: {detail}")
        self.kind = kind
        self.detail = detail


DISTRESS_LEVELS = ("low", "moderate", "high")
RESOURCE_CATEGORIES = ("mental-health-vs-illness", "crisis-hotlines", "coping-strategies", "self-care")
DEFAULT_RECOMMENDATIONS = ["coping-strategies", "self-care"]
MAX_RECOMMENDATIONS = 3

LOCAL_GREETINGS = {"hello", "hi", "hey"}
LOCAL_GREETING_REPLY = (
    "Hello! I'm HopeBot, your mental health companion. I'm here to help you understand mental health "
    "concepts and provide support based on evidence-based information. How are you feeling today?"
)
EMPTY_COMPLETION_REPLY = (
    "Based on the mental health research, I can provide information on various topics. "
    "What would you like to know about?"
)

RESPONSE_GUIDELINES = """GUIDELINES FOR YOUR RESPONSES:
- Provide empathetic and supportive responses
- Base your answers on the evidence-based information provided above
- Avoid making specific medical diagnoses or treatment recommendations
- If someone is in crisis, suggest they contact emergency services or crisis support
- Keep your responses concise (3-4 paragraphs maximum) and easy to understand
- When appropriate, mention that professional help is available and important
- Be compassionate and non-judgmental in your tone
- Handle basic greetings like "hello" and "hi" in a friendly, conversational way"""

DISTRESS_PROMPT = (
    "You are a mental health sentiment analyzer. Assess the text for signs of distress, crisis, or mental "
    "health concerns. Provide a distress level (low, moderate, or high) and a confidence score between 0 "
    "and 1. Respond with JSON in this format: { 'distressLevel': 'low'|'moderate'|'high', 'confidence': number }"
)

RECOMMEND_PROMPT = (
    "You are a mental health resource recommender. Based on the user's message, suggest up to 3 types of "
    "resources that would be most helpful from this list: 'mental-health-vs-illness', 'crisis-hotlines', "
    "'coping-strategies', 'self-care'. Respond with JSON in this format: { 'resources': ['resource1', 'resource2'] }"
)


@dataclass(frozen=True)
class DistressAssessment:
    level: str = "low"
    confidence: float = 0.5


# ================= Prompt building =================

def builtin_context() -> str:
    parts = []
    for key, title in SECTION_TITLES.items():
        parts.append(f"{title}:\n{MENTAL_HEALTH_INFO[key]}")
    return "\n\n".join(parts)


def build_system_prompt(background: Optional[str] = None) -> str:
    context = background or builtin_context()
    return (
        "You are HopeBot, a mental health support chatbot designed to provide evidence-based information "
        "and support.\n\n"
        "Here is important mental health information to guide your responses:\n\n"
        f"{context}\n\n"
        f"{RESPONSE_GUIDELINES}"
    )


# ================= OpenAI Integration =================

def get_client():
    """OpenAI client for the configured key; a missing key is an API error."""
    api_key = settings.OPENAI_API_KEY
    if not api_key:
        raise LLMError(LLMErrorKind.API_ERROR, "OPENAI_API_KEY not set")

    from openai import OpenAI
    return OpenAI(api_key=api_key)


def _is_quota_error(error: Exception) -> bool:
    if getattr(error, "code", None) == "insufficient_quota":
        return True
    if getattr(error, "type", None) == "insufficient_quota":
        return True
    body = getattr(error, "body", None)
    if isinstance(body, dict):
        inner = body.get("error", body)
        if isinstance(inner, dict) and inner.get("type") == "insufficient_quota":
            return True
    return "quota" in str(error).lower()


def _classify(error: Exception) -> LLMError:
    kind = LLMErrorKind.QUOTA_EXCEEDED if _is_quota_error(error) else LLMErrorKind.API_ERROR
    return LLMError(kind, str(error))


def call_openai(messages: List[Dict[str, str]], **options: Any) -> str:
    """Run one chat completion and return the raw message content.

    Every failure is raised as ``LLMError``.
    """
    client = get_client()
    try:
        response = client.chat.completions.create(
            model=settings.OPENAI_MODEL,
            messages=messages,
            **options,
        )
    except Exception as e:
        error = _classify(e)
        logger.error("OpenAI API failed (%s): %s", error.kind.value, e)
        raise error from e

    if not response.choices:
        raise LLMError(LLMErrorKind.API_ERROR, "empty choice list")
    return response.choices[0].message.content or ""


def generate_reply(user_text: str, background: Optional[str] = None) -> str:
    """Generate a HopeBot reply, raising ``LLMError`` on any API failure."""
    if (user_text or "").lower().strip() in LOCAL_GREETINGS:
        return LOCAL_GREETING_REPLY

    content = call_openai(
        [
            {"role": "system", "content": build_system_prompt(background)},
            {"role": "user", "content": user_text},
        ],
        temperature=settings.OPENAI_TEMPERATURE,
        max_tokens=settings.OPENAI_MAX_TOKENS,
    )
    return content.strip() or EMPTY_COMPLETION_REPLY


def _json_completion(system_prompt: str, text: str) -> Dict[str, Any]:
    content = call_openai(
        [
            {"role": "system", "content": system_prompt},
            {"role": "user", "content": text},
        ],
        response_format={"type": "json_object"},
    )
    result = json.loads(content or "{}")
    if not isinstance(result, dict):
        raise ValueError("expected a JSON object")
    return result


def classify_distress(text: str) -> DistressAssessment:
    """Coarse distress triage; defaults to (low, 0.5) on any failure."""
    try:
        result = _json_completion(DISTRESS_PROMPT, text)
        level = result.get("distressLevel", "low")
        if level not in DISTRESS_LEVELS:
            raise ValueError(f"unknown distress level {level!r}")
        confidence = max(0.0, min(1.0, float(result.get("confidence", 0.5))))
        return DistressAssessment(level=level, confidence=confidence)
    except (LLMError, ValueError, TypeError) as e:
        logger.warning("Failed to analyze sentiment: %s", e)
        return DistressAssessment()


def recommend_resources(text: str) -> List[str]:
    """Up to three resource category tags; defaults on any failure."""
    try:
        result = _json_completion(RECOMMEND_PROMPT, text)
    except (LLMError, ValueError) as e:
        logger.warning("Failed to recommend resources: %s", e)
        return list(DEFAULT_RECOMMENDATIONS)

    resources = result.get("resources")
    if not isinstance(resources, list):
        return []
    return [r for r in resources if r in RESOURCE_CATEGORIES][:MAX_RECOMMENDATIONS]
