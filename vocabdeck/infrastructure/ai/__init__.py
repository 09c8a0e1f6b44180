from .ai_word_lookup_service import AIWordLookupService

__all__ = ["AIWordLookupService"]
