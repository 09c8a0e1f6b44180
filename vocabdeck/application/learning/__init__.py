"""
Learning bounded context - Application layer.

Ports for card storage, word lookup and device persistence, and the use
cases that move cards between stores and fetch word metadata.
"""
