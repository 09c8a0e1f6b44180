"""
Learning bounded context - Domain layer.

This context handles the vocabulary cards themselves:
- Flashcard creation, editing and validation
- Content-based deduplication of cards

Aggregates:
- Flashcard: The vocabulary card
"""
