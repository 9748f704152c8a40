# hopebot/services/responder.py
import logging

from hopebot.services import knowledge, llm_client
from hopebot.services.fallback import select_fallback_response

logger = logging.getLogger(__name__)


def generate_response(user_text: str) -> str:
    """Bot reply for one chat turn.

    Language model failures are logged and answered by the fallback selector;
    the caller never sees them.
    """
    background = knowledge.load_background_document()

    try:
        return llm_client.generate_reply(user_text, background)
    except llm_client.LLMError as e:
        logger.warning("Language model unavailable (%s), falling back to basic response", e.kind.value)
        return select_fallback_response(user_text, knowledge.get_background_paragraphs())
