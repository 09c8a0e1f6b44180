from pydantic import BaseModel, Field
from pydantic_ai import Agent
from pydantic_ai.models import Model


class WordDefinitionAgentModel(BaseModel):
    word: str
    meaning: str
    pronunciation: str | None = None
    part_of_speech: str | None = None
    examples: list[str] = Field(default_factory=list)
    synonyms: list[str] = Field(default_factory=list)
    antonyms: list[str] = Field(default_factory=list)


def get_word_definition_agent(model: Model) -> Agent[None, WordDefinitionAgentModel]:
    return Agent(
        model,
        output_type=WordDefinitionAgentModel,
        instructions="""
        You are a dictionary for English vocabulary learners. For the given word
        return its most common meaning as a clear, concise definition, the IPA
        pronunciation, the part of speech, up to 3 short example sentences using
        the word, and up to 5 synonyms and 5 antonyms.
        Leave a field empty rather than guessing when it does not apply.
        """,
    )
