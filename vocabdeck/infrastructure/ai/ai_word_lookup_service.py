"""Word metadata lookup backed by a language model."""

from collections.abc import Callable

import httpx
import structlog
from pydantic_ai import Agent
from pydantic_ai.exceptions import AgentRunError
from pydantic_ai.models import Model

from vocabdeck.application.learning.protocols.word_lookup import WordData
from vocabdeck.exceptions import ServiceError, WordLookupError
from vocabdeck.infrastructure.ai.ai_agents import (
    WordDefinitionAgentModel,
    get_word_definition_agent,
)

logger = structlog.get_logger(__name__)

_SOURCE = "AI"
_MAX_EXAMPLES = 3
_MAX_RELATED_WORDS = 5


def _first_unique(items: list[str], limit: int) -> list[str] | None:
    result: list[str] = []
    for item in items:
        item = item.strip()
        if item and item not in result:
            result.append(item)
    return result[:limit] or None


class AIWordLookupService:
    """
    Secondary word lookup used when the dictionary has no entry.

    The model is resolved lazily on first use; ``model_factory`` is None
    when AI is not configured.
    """

    def __init__(self, model_factory: Callable[[], Model] | None) -> None:
        self.model_factory = model_factory
        self._agent: Agent[None, WordDefinitionAgentModel] | None = None

    def is_configured(self) -> bool:
        return self.model_factory is not None

    def _get_agent(self) -> Agent[None, WordDefinitionAgentModel]:
        if self.model_factory is None:
            raise ServiceError("AI word lookup is not configured")
        if self._agent is None:
            self._agent = get_word_definition_agent(self.model_factory())
        return self._agent

    async def fetch_word_data(self, word: str) -> WordData:
        """
        Ask the model for the word's meaning and related metadata.

        Raises:
            WordLookupError: If AI is not configured, the run fails, or the
                answer has no meaning
        """
        try:
            agent = self._get_agent()
            result = await agent.run(f"Word: {word}")
        except (ServiceError, AgentRunError, httpx.HTTPError) as err:
            logger.warning("ai_word_lookup_failed", word=word, error=str(err))
            raise WordLookupError(word, _SOURCE, str(err)) from err

        output = result.output
        meaning = output.meaning.strip()
        if not meaning:
            raise WordLookupError(word, _SOURCE, "No meaning returned")

        logger.info("ai_word_lookup_succeeded", word=word)
        return WordData(
            word=word,
            meaning=meaning,
            pronunciation=(output.pronunciation or "").strip() or None,
            part_of_speech=(output.part_of_speech or "").strip() or None,
            examples=_first_unique(output.examples, _MAX_EXAMPLES),
            synonyms=_first_unique(output.synonyms, _MAX_RELATED_WORDS),
            antonyms=_first_unique(output.antonyms, _MAX_RELATED_WORDS),
        )
