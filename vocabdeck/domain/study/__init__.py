"""
Study bounded context - Domain layer.

Pure, synchronous state for a study session:
- SessionState and its reducer (which card, flip state, loading/error flags)
- ReviewHistory and the review sequencer (no-repeat random order with history)
"""
