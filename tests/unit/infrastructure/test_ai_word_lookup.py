"""Tests for the AI word lookup service and model selection."""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from pydantic_ai.exceptions import UnexpectedModelBehavior
from pydantic_ai.models.openai import OpenAIChatModel

from vocabdeck.config import Settings
from vocabdeck.exceptions import ServiceError, WordLookupError
from vocabdeck.infrastructure.ai.ai_agents import WordDefinitionAgentModel
from vocabdeck.infrastructure.ai.ai_model import build_model
from vocabdeck.infrastructure.ai.ai_word_lookup_service import AIWordLookupService

AGENT_FACTORY = "vocabdeck.infrastructure.ai.ai_word_lookup_service.get_word_definition_agent"


def _agent_returning(output: WordDefinitionAgentModel) -> MagicMock:
    agent = MagicMock()
    agent.run = AsyncMock(return_value=MagicMock(output=output))
    return agent


class TestAIWordLookupService:
    """Test suite for the AI fallback lookup."""

    def test_not_configured_without_model(self) -> None:
        assert not AIWordLookupService(None).is_configured()
        assert AIWordLookupService(MagicMock()).is_configured()

    @pytest.mark.asyncio
    async def test_structured_output_becomes_word_data(self) -> None:
        output = WordDefinitionAgentModel(
            word="petrichor",
            meaning=" The smell of rain on dry earth. ",
            pronunciation="/ˈpɛtrɪkɔː/",
            part_of_speech="noun",
            examples=["The petrichor rose.", "", "Petrichor filled the air.", "a", "b"],
            synonyms=["rain smell", "rain smell"],
            antonyms=[],
        )
        agent = _agent_returning(output)

        with patch(AGENT_FACTORY, return_value=agent):
            data = await AIWordLookupService(MagicMock()).fetch_word_data("petrichor")

        agent.run.assert_awaited_once_with("Word: petrichor")
        assert data.word == "petrichor"
        assert data.meaning == "The smell of rain on dry earth."
        assert data.examples == ["The petrichor rose.", "Petrichor filled the air.", "a"]
        assert data.synonyms == ["rain smell"]
        assert data.antonyms is None
        assert data.audio_url is None

    @pytest.mark.asyncio
    async def test_agent_is_built_once(self) -> None:
        agent = _agent_returning(WordDefinitionAgentModel(word="a", meaning="b"))
        model_factory = MagicMock()
        service = AIWordLookupService(model_factory)

        with patch(AGENT_FACTORY, return_value=agent) as factory:
            await service.fetch_word_data("a")
            await service.fetch_word_data("a")

        factory.assert_called_once_with(model_factory.return_value)

    @pytest.mark.asyncio
    async def test_empty_meaning_raises(self) -> None:
        agent = _agent_returning(WordDefinitionAgentModel(word="qwzx", meaning="  "))
        with patch(AGENT_FACTORY, return_value=agent), pytest.raises(WordLookupError):
            await AIWordLookupService(MagicMock()).fetch_word_data("qwzx")

    @pytest.mark.asyncio
    async def test_agent_failure_raises_lookup_error(self) -> None:
        agent = MagicMock()
        agent.run = AsyncMock(side_effect=UnexpectedModelBehavior("bad output"))
        with patch(AGENT_FACTORY, return_value=agent), pytest.raises(WordLookupError) as exc_info:
            await AIWordLookupService(MagicMock()).fetch_word_data("word")
        assert exc_info.value.source == "AI"

    @pytest.mark.asyncio
    async def test_unconfigured_lookup_raises_lookup_error(self) -> None:
        with pytest.raises(WordLookupError):
            await AIWordLookupService(None).fetch_word_data("word")


class TestBuildModel:
    def test_openai_provider(self) -> None:
        settings = Settings(
            AI_PROVIDER="openai", AI_MODEL_NAME="gpt-4o-mini", OPENAI_API_KEY="sk-test"
        )
        assert isinstance(build_model(settings), OpenAIChatModel)

    def test_ollama_provider(self) -> None:
        settings = Settings(
            AI_PROVIDER="ollama",
            AI_MODEL_NAME="llama3.2",
            OPENAI_BASE_URL="http://localhost:11434/v1",
        )
        assert isinstance(build_model(settings), OpenAIChatModel)

    def test_no_provider_raises(self) -> None:
        with pytest.raises(ServiceError):
            build_model(Settings(AI_PROVIDER=None))

    def test_provider_requires_model_name(self) -> None:
        with pytest.raises(ValueError, match="AI_MODEL_NAME is required"):
            Settings(AI_PROVIDER="openai", OPENAI_API_KEY="sk-test")
