# hopebot/services/knowledge.py
"""Built-in mental health knowledge base and the background document cache.

The background document is loaded once per process, either from the file named
by ``MENTAL_HEALTH_DOC_PATH`` or from the built-in sections below, and is
read-only afterwards. Concurrent first loads produce identical content, so
whichever write lands last is fine.
"""
import logging
from pathlib import Path
from typing import List, Optional

from hopebot.core.config import settings

logger = logging.getLogger(__name__)

# Minimum sizes for the document and for a paragraph to be quoted back
MIN_DOCUMENT_LENGTH = 100
MIN_PARAGRAPH_LENGTH = 30

MENTAL_HEALTH_INFO = {
    "definition": (
        "Mental health and mental illness are related but distinct concepts. Mental health refers to one's "
        "overall psychological well-being and capacity to interact effectively with others and the environment. "
        "According to the WHO, mental health is not merely the absence of illness, but a state of well-being "
        "where an individual can realize their own abilities, cope with normal stresses, work productively, "
        "and contribute to their community.\n\n"
        "Mental illness, on the other hand, refers to diagnosable conditions that affect mood, thinking, and behavior, "
        "often associated with distress or impaired functioning. The WHO uses the term 'mental disorders' "
        "broadly to include mental illness, intellectual disability, personality disorder, substance dependence, "
        "and adjustment to adverse life events."
    ),
    "mental_health_problems": (
        "Mental health problems can range from common conditions like depression and anxiety to more severe "
        "disorders such as schizophrenia or bipolar disorder. They can affect anyone regardless of age, "
        "background, or circumstances. Mental health problems may be temporary responses to life stressors "
        "or long-term conditions requiring ongoing management.\n\n"
        "It's important to note that mental health exists on a spectrum, and everyone has mental health, "
        "just as everyone has physical health. Many factors influence mental health, including biological "
        "factors, life experiences, family history, and social circumstances."
    ),
    "factors": (
        "Mental, physical, and social functioning are interdependent. The quality of a person's mental health "
        "is influenced by individual factors and experiences, family relationships and circumstances, and "
        "the wider community. Cultural context is also important, though it's just one of many factors.\n\n"
        "Different factors may lead to different outcomes for different individuals due to complex interactions. "
        "For children specifically, mental health involves the ability to develop psychologically, emotionally, "
        "creatively, intellectually, and spiritually; initiate and sustain relationships; learn; develop moral "
        "understanding; and experience and manage a range of emotions."
    ),
    "stigma": (
        "Stigma surrounding mental illness is a worldwide phenomenon that often begins during childhood. "
        "It can lead to discrimination, social isolation, and reluctance to seek help. Educational interventions "
        "and increased contact with people who have mental health issues can help reduce stigma.\n\n"
        "It's essential to promote understanding that mental health problems are common, treatable, and not a "
        "sign of weakness or personal failure. Creating open conversations about mental health can help "
        "normalize these experiences and encourage people to seek support when needed."
    ),
    "stress": (
        "Stress and anxiety are common experiences that exist on a spectrum. While temporary stress is a normal "
        "response to challenging situations, persistent stress or anxiety that interferes with daily functioning "
        "may indicate a mental health concern.\n\n"
        "According to mental health literature, the context and intensity of these feelings matter greatly. "
        "Cultural factors, individual differences, and social environments all influence how stress manifests "
        "and is experienced. Evidence-based coping strategies for managing stress include physical activity, "
        "mindfulness practices, adequate sleep, social connection, and professional support when needed."
    ),
    "self_care": (
        "Self-care is crucial for maintaining good mental health. This includes basic physical care (adequate "
        "sleep, balanced nutrition, regular exercise), emotional care (acknowledging feelings, practicing "
        "self-compassion), social connection, and setting healthy boundaries.\n\n"
        "For those experiencing mental health challenges, self-care should complement, not replace, professional "
        "help when needed. Small, consistent self-care practices can have a significant positive impact on "
        "overall well-being and resilience."
    ),
}

SECTION_TITLES = {
    "definition": "MENTAL HEALTH VS MENTAL ILLNESS",
    "mental_health_problems": "MENTAL HEALTH PROBLEMS",
    "factors": "FACTORS AFFECTING MENTAL HEALTH",
    "stigma": "STIGMA",
    "stress": "STRESS AND ANXIETY",
    "self_care": "SELF-CARE",
}

_document: Optional[str] = None
_paragraphs: Optional[List[str]] = None


def builtin_document() -> str:
    return "\n\n".join(MENTAL_HEALTH_INFO.values())


def split_paragraphs(text: str) -> List[str]:
    blocks = [block.strip() for block in text.split("\n\n")]
    return [block for block in blocks if len(block) > MIN_PARAGRAPH_LENGTH]


def _read_document(path: str) -> Optional[str]:
    try:
        return Path(path).read_text(encoding="utf-8")
    except OSError as e:
        logger.error("Error loading mental health document %s: %s", path, e)
        return None


def load_background_document(path: Optional[str] = None) -> str:
    """Load the background document if it is not loaded yet and return it."""
    global _document, _paragraphs

    if _document is not None:
        return _document

    path = path if path is not None else settings.MENTAL_HEALTH_DOC_PATH
    text = _read_document(path) if path else None
    if text and len(text.strip()) > MIN_DOCUMENT_LENGTH:
        logger.info("Loaded mental health document from %s", path)
    else:
        text = builtin_document()
        logger.info("Using built-in mental health information")

    _paragraphs = split_paragraphs(text)
    _document = text
    return _document


def get_background_document() -> Optional[str]:
    return _document


def get_background_paragraphs() -> List[str]:
    """Paragraphs of the loaded document; empty until it is loaded."""
    if _document is None or len(_document) <= MIN_DOCUMENT_LENGTH:
        return []
    return list(_paragraphs or [])


def reset_background_document() -> None:
    global _document, _paragraphs
    _document = None
    _paragraphs = None
