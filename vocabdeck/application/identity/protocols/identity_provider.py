"""Protocol for the identity provider consumed by study sessions."""

from typing import Protocol

from vocabdeck.domain.common.value_objects import UserId


class IdentityProviderProtocol(Protocol):
    """
    Who is using the app right now.

    The provider's token protocol is opaque: callers only ask for a bearer
    credential to forward to the cloud store.
    """

    @property
    def user_id(self) -> UserId | None:
        """Identifier of the signed-in user, None when anonymous."""
        ...

    @property
    def is_signed_in(self) -> bool:
        ...

    @property
    def is_loaded(self) -> bool:
        """Whether the provider has finished resolving the session."""
        ...

    async def get_credential(self) -> str | None:
        """
        Obtain a bearer credential for the cloud store.

        Returns:
            Token string, or None when no credential is available
        """
        ...
