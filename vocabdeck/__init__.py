"""Vocabulary flashcards: study sessions over device or cloud storage."""

__version__ = "0.1.0"
