"""
Base class for Entities.

Entities are objects that have a distinct identity that runs through time
and different states. Two entities are the same entity if they share an
identity, regardless of their attributes.

Example:
    @dataclass
    class Flashcard(Entity[FlashcardId]):
        id: FlashcardId
        word: str
        meaning: str
"""

from abc import ABC
from dataclasses import dataclass
from typing import Generic, TypeVar

from .value_object import ValueObject


@dataclass(frozen=True)
class EntityId(ValueObject):
    """
    Base class for strongly-typed entity identifiers.

    Identifiers in this application are opaque strings: locally generated
    composite keys on the device, server-generated UUIDs in the cloud, or
    identity-provider user ids. Wrapping them prevents mixing up the id of
    a card with the id of its owner.
    """

    value: str

    def __post_init__(self) -> None:
        if not isinstance(self.value, str) or not self.value.strip():
            raise ValueError(f"{self.__class__.__name__} cannot be empty")

    def __str__(self) -> str:
        return self.value

    def to_primitive(self) -> str:
        """Convert to primitive for serialization."""
        return self.value


IdType = TypeVar("IdType", bound=EntityId)


class Entity(ABC, Generic[IdType]):
    """
    Base class for Entities in the domain model.

    Entities are:
    - Defined by identity (not attributes)
    - Have lifecycle (created, modified, deleted)

    Subclasses must have an 'id' attribute of type IdType.
    """

    id: IdType

    def same_identity_as(self, other: object) -> bool:
        """Whether ``other`` is the same entity, whatever its current attributes."""
        if not isinstance(other, self.__class__):
            return False
        return self.id == other.id

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(id={self.id})"
