# hopebot/services/fallback.py
"""Rule-based replies used when the language model is unavailable.

Rules are checked in order and the first match wins. Several rules can match
the same message, so the order below is part of the behaviour.
"""
import logging
from typing import Callable, Iterable, List, Optional, Sequence, Tuple

from hopebot.services.knowledge import MENTAL_HEALTH_INFO

logger = logging.getLogger(__name__)

# ============================================================================
# Canned passages
# ============================================================================

GREETING_REPLY = (
    "Hello! I'm HopeBot, your mental health companion. I'm here to help you understand mental health "
    "concepts and provide support based on evidence-based information from academic resources. "
    "How are you feeling today?"
)

HOW_ARE_YOU_REPLY = (
    "I'm functioning well, thanks for asking! I'm here and ready to provide mental health information and "
    "support based on the research of Leighton, Dogra, and the World Health Organization. "
    "How can I assist you today?"
)

THANKS_REPLY = (
    "You're welcome! I'm glad I could help. If you have any other questions about mental health concepts, "
    "feel free to ask anytime."
)

DEFINITION_PASSAGE = (
    "According to Ryff and Singer (1998), as cited in the academic literature, health is not merely a medical "
    "concept associated with absence of illness, but rather a philosophical one that requires an explanation "
    "of a good life – being one where an individual has a sense of purpose, is engaged in quality relationships "
    "with others, and possesses self-respect and mastery. This is synonymous with the World Health "
    "Organization (WHO) (2000, 2005b) definition of positive mental health.\n\n"
    "Rowling et al. (2002) define mental health as \"the capacity of individuals and groups to interact with "
    "one another and the environment in ways that promote subjective wellbeing, the optimal development and "
    "use of cognitive, affective and relational abilities, the achievement of individual and collective goals "
    "consistent with justice.\"\n\n"
    "It's important to understand that mental health is just one of many factors that influence overall "
    "wellbeing, and neither physical nor mental health exist separately – mental, physical and social "
    "functioning are interdependent (WHO, 2004)."
)

CHILDREN_PASSAGE = (
    "Definitions of mental health as they relate specifically to children have been provided by the Health "
    "Advisory Service (HAS) (1995) and the Mental Health Foundation (1999). These definitions recognize the "
    "developmental context of childhood, including the ability to:\n\n"
    "- Develop psychologically, emotionally, creatively, intellectually and spiritually\n"
    "- Initiate, develop and sustain mutually satisfying personal relationships\n"
    "- Use and enjoy solitude\n"
    "- Become aware of others and empathize with them\n"
    "- Play and learn\n"
    "- Develop a sense of right and wrong\n"
    "- Resolve problems and setbacks and learn from them\n\n"
    "Such definitions are useful as they relate to 'societal' expectations of children. All health issues "
    "need to be considered within a cultural and developmental context, as do the social constructs of "
    "childhood and adolescence (Walker, 2005)."
)

COMPARISON_PASSAGE = (
    "According to the academic literature by Leighton and Dogra, there is often terminological confusion in "
    "relation to issues associated with mental health. Mental health and mental illness can be perceived as "
    "two separate, yet related, issues.\n\n"
    "The WHO (1992) uses the term 'mental disorders' broadly, to include mental illness, intellectual "
    "disability, personality disorder, substance dependence and adjustment to adverse life events. The WHO "
    "acknowledges that the word 'disorder' is used to avoid perceived greater difficulties associated with "
    "'illness' – for example, stigma and the emphasis on a medical model.\n\n"
    "One way of distinguishing between distress associated with adverse life events and more severe "
    "disorders which involve physiological symptoms and underlying biological changes is to distinguish "
    "between mental health problems and mental illness, using a multi-dimensional model. This has an "
    "additional advantage in enabling normal 'distress' (e.g. grief following bereavement) to be recognized "
    "as part of the 'human condition', rather than being medicalized.\n\n"
    "Kendall (1988) presents the relative merits of using categories and dimensions with respect to mental "
    "disorders. Where psychotic illness is concerned a categorical approach may be preferable, whereas in "
    "other conditions the situation is more likely to be changeable, and would perhaps benefit from a "
    "dimensional perspective."
)

STIGMA_PASSAGE = (
    "According to the academic literature on mental health, stigma around mental health issues is a worldwide "
    "phenomenon. Ironically, referring to mental illness in terms of mental health originated in the 1960s in "
    "an attempt to reduce stigma (Rowling et al., 2002).\n\n"
    "The WHO acknowledges that the word 'disorder' is used to avoid perceived greater difficulties associated "
    "with 'illness' – for example, stigma and the emphasis on a medical model. Stigmatization of mental illness "
    "is a significant barrier that often originates during childhood.\n\n"
    "Stigma leads to discrimination, fear, and avoidance behaviors, creating obstacles for people seeking help "
    "and support. Research shows that educational interventions and increased contact with individuals "
    "experiencing mental health issues can help reduce stigma in communities."
)

DOCUMENT_PREAMBLE = (
    "Based on the academic literature by Leighton and Dogra on mental health, here's what I can tell you:"
)

DOCUMENT_CLOSING = (
    "This information comes from peer-reviewed research. "
    "Is there anything specific about this topic you'd like to know more about?"
)

DEFAULT_REPLY = (
    "Thank you for sharing. Your experiences are valid and important. Based on mental health research, many "
    "factors contribute to our overall wellbeing, including social connections, physical health, and how we "
    "process our emotions.\n\n"
    "Is there a specific aspect of mental health you'd like to explore further? You can ask me about the "
    "difference between mental health and mental illness, common mental health problems, factors that affect "
    "mental health, stress management, self-care techniques, or mental health stigma."
)

GREETINGS = {"hello", "hi", "hey"}
HOW_ARE_YOU = {"how are you", "how are you doing"}

# At most this many document paragraphs are quoted back
MAX_DOCUMENT_PARAGRAPHS = 2
MIN_KEYWORD_LENGTH = 4


# ============================================================================
# Matching helpers
# ============================================================================

def _any(text: str, terms: Iterable[str]) -> bool:
    return any(term in text for term in terms)


def _asks_definition(text: str) -> bool:
    return _any(text, ("what", "define", "meaning")) and "mental health" in text


def _about_children(text: str) -> bool:
    if _any(text, ("children", "child", "kid")):
        return True
    return "mental health" in text and _any(text, ("young", "youth"))


def _asks_comparison(text: str) -> bool:
    return (
        _any(text, ("difference", "versus", "vs"))
        and "mental health" in text
        and "mental illness" in text
    )


TOPIC_RULES: List[Tuple[str, Callable[[str], bool], str]] = [
    ("definition", _asks_definition, DEFINITION_PASSAGE),
    ("children", _about_children, CHILDREN_PASSAGE),
    ("comparison", _asks_comparison, COMPARISON_PASSAGE),
    ("stigma", lambda t: _any(t, ("stigma", "prejudice", "discrimination")), STIGMA_PASSAGE),
]

# Checked after the document search
KNOWLEDGE_RULES: List[Tuple[str, Callable[[str], bool], str]] = [
    ("problems",
     lambda t: _any(t, ("mental health problem", "mental disorder", "mental illness", "depression", "anxiety")),
     MENTAL_HEALTH_INFO["mental_health_problems"]),
    ("stress",
     lambda t: _any(t, ("stress", "anxiety", "worried", "anxious", "overwhelmed")),
     MENTAL_HEALTH_INFO["stress"]),
    ("self_care",
     lambda t: _any(t, ("self-care", "self care", "take care", "cope", "manage")),
     MENTAL_HEALTH_INFO["self_care"]),
    ("stigma_basic",
     lambda t: _any(t, ("stigma", "judged", "judgment", "discrimination")),
     MENTAL_HEALTH_INFO["stigma"]),
    ("factors",
     lambda t: _any(t, ("factor", "cause", "influence", "affect")),
     MENTAL_HEALTH_INFO["factors"]),
]


def search_paragraphs(text: str, paragraphs: Sequence[str]) -> List[str]:
    """First paragraphs sharing a content word (4+ chars) with the message."""
    words = [w for w in text.split() if len(w) >= MIN_KEYWORD_LENGTH]
    if not words:
        return []

    hits = []
    for paragraph in paragraphs:
        lowered = paragraph.lower()
        if any(word in lowered for word in words):
            hits.append(paragraph)
            if len(hits) == MAX_DOCUMENT_PARAGRAPHS:
                break
    return hits


def _document_reply(hits: Sequence[str]) -> str:
    body = "\n\n".join(hits)
    return f"{DOCUMENT_PREAMBLE}\n\n{body}\n\n{DOCUMENT_CLOSING}"


# ============================================================================
# Selector
# ============================================================================

def _select(text: str, paragraphs: Optional[Sequence[str]]) -> str:
    message = (text or "").lower().strip()

    if message in GREETINGS:
        return GREETING_REPLY
    if message in HOW_ARE_YOU:
        return HOW_ARE_YOU_REPLY
    if "thank you" in message or "thanks" in message:
        return THANKS_REPLY

    for _name, matches, passage in TOPIC_RULES:
        if matches(message):
            return passage

    if paragraphs:
        hits = search_paragraphs(message, paragraphs)
        if hits:
            return _document_reply(hits)

    for _name, matches, passage in KNOWLEDGE_RULES:
        if matches(message):
            return passage

    return DEFAULT_REPLY


def select_fallback_response(text: str, paragraphs: Optional[Sequence[str]] = None) -> str:
    """Pick a canned reply for ``text``. Never raises."""
    try:
        return _select(text, paragraphs)
    except Exception:
        logger.exception("Fallback selector failed, using default reply")
        return DEFAULT_REPLY
