"""Cloud flashcard store speaking the PostgREST protocol over httpx."""

from typing import Any

import httpx
import structlog

from vocabdeck.constants import REMOTE_FLASHCARDS_TABLE
from vocabdeck.domain.common.exceptions import DomainError
from vocabdeck.domain.common.value_objects import FlashcardId, UserId
from vocabdeck.domain.learning.entities.flashcard import Flashcard, FlashcardDraft, FlashcardPatch
from vocabdeck.exceptions import (
    CredentialExpiredError,
    FlashcardNotFoundError,
    RemoteStoreError,
    RemoteUnavailableError,
    SchemaMissingError,
)
from vocabdeck.infrastructure.remote.flashcard_row_mapper import FlashcardRowMapper
from vocabdeck.utils import Clock, utc_now

logger = structlog.get_logger(__name__)

# PostgreSQL "undefined_table" and PostgREST "table not in schema cache"
_MISSING_TABLE_CODES = {"42P01", "PGRST205"}


class FlashcardRemoteStore:
    """
    HTTP client for the cloud ``flashcards`` table.

    Every request carries the caller's bearer credential (or the project
    key when there is none) and filters by ``user_id``, even though the
    credential should already limit access to the user's own rows.
    """

    def __init__(
        self,
        base_url: str,
        api_key: str,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
        clock: Clock = utc_now,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.clock = clock
        self.mapper = FlashcardRowMapper()
        self._path = f"/{REMOTE_FLASHCARDS_TABLE}"
        self._client = httpx.AsyncClient(
            base_url=f"{self.base_url}/rest/v1", timeout=timeout, transport=transport
        )

    async def close(self) -> None:
        """Close the HTTP client."""
        await self._client.aclose()

    async def __aenter__(self) -> "FlashcardRemoteStore":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()

    async def _request(
        self,
        method: str,
        credential: str | None,
        params: dict[str, str],
        json: Any = None,
        return_rows: bool = False,
    ) -> httpx.Response:
        """Make an authenticated request and translate failures into store errors."""
        headers = {
            "apikey": self.api_key,
            "Authorization": f"Bearer {credential or self.api_key}",
        }
        if return_rows:
            headers["Prefer"] = "return=representation"

        try:
            response = await self._client.request(
                method, self._path, params=params, headers=headers, json=json
            )
        except httpx.TransportError as err:
            logger.error("remote_store_unreachable", method=method, error=str(err))
            raise RemoteUnavailableError(f"Cloud store unreachable: {err}") from err

        if response.is_success:
            return response
        raise self._error_for(response)

    def _error_for(self, response: httpx.Response) -> RemoteStoreError:
        """Map an error response to the matching store error."""
        try:
            body = response.json()
        except ValueError:
            body = {}
        if not isinstance(body, dict):
            body = {}
        code = str(body.get("code") or "")
        message = str(body.get("message") or response.reason_phrase or "request failed")

        logger.warning(
            "remote_store_error",
            status_code=response.status_code,
            code=code,
            message=message,
        )

        if code in _MISSING_TABLE_CODES or "does not exist" in message:
            return SchemaMissingError(
                f"Table '{REMOTE_FLASHCARDS_TABLE}' is missing: {message}",
                status_code=response.status_code,
            )
        if response.status_code == httpx.codes.UNAUTHORIZED:
            return CredentialExpiredError(message)
        return RemoteStoreError(message, status_code=response.status_code)

    @staticmethod
    def _rows(response: httpx.Response) -> list[dict[str, Any]]:
        try:
            rows = response.json()
        except ValueError as err:
            raise RemoteStoreError("Unexpected response from cloud store") from err
        if not isinstance(rows, list):
            raise RemoteStoreError("Unexpected response from cloud store")
        return rows

    def _to_domain(self, row: dict[str, Any]) -> Flashcard:
        try:
            return self.mapper.to_domain(row)
        except (DomainError, KeyError, TypeError, ValueError) as err:
            raise RemoteStoreError(f"Malformed flashcard row: {err}") from err

    async def list_cards(self, user_id: UserId, credential: str | None = None) -> list[Flashcard]:
        """
        Get all cards owned by the user, oldest first.

        A missing table reads as an empty collection.

        Raises:
            RemoteUnavailableError: On transport failure
            CredentialExpiredError: If the credential is rejected
        """
        params = {
            "select": "*",
            "user_id": f"eq.{user_id.value}",
            "order": "created_at.asc",
        }
        try:
            response = await self._request("GET", credential, params)
        except SchemaMissingError:
            logger.warning("remote_flashcards_table_missing", user_id=user_id.value)
            return []

        cards = [self._to_domain(row) for row in self._rows(response)]
        logger.debug("remote_flashcards_listed", user_id=user_id.value, count=len(cards))
        return cards

    async def insert(
        self, user_id: UserId, draft: FlashcardDraft, credential: str | None = None
    ) -> Flashcard:
        """
        Create a card; the server assigns its id and timestamps.

        Raises:
            ValidationError: If the draft is invalid
            RemoteUnavailableError: On transport failure
            SchemaMissingError: If the table does not exist
        """
        draft.ensure_valid()
        response = await self._request(
            "POST",
            credential,
            params={"select": "*"},
            json=self.mapper.to_insert_row(user_id, draft),
            return_rows=True,
        )
        rows = self._rows(response)
        if not rows:
            raise RemoteStoreError("Cloud store returned no row for the new card")

        card = self._to_domain(rows[0])
        logger.info("remote_flashcard_inserted", user_id=user_id.value, flashcard_id=card.id.value)
        return card

    async def update(
        self,
        user_id: UserId,
        flashcard_id: FlashcardId,
        patch: FlashcardPatch,
        credential: str | None = None,
    ) -> Flashcard:
        """
        Change the supplied fields of a card and refresh its updated_at.

        Raises:
            ValidationError: If the patch is empty or invalid
            FlashcardNotFoundError: If no such card belongs to the user
            RemoteUnavailableError: On transport failure
            SchemaMissingError: If the table does not exist
        """
        patch.ensure_valid()
        row = self.mapper.to_update_row(patch)
        row["updated_at"] = self.clock().isoformat()

        response = await self._request(
            "PATCH",
            credential,
            params={
                "select": "*",
                "id": f"eq.{flashcard_id.value}",
                "user_id": f"eq.{user_id.value}",
            },
            json=row,
            return_rows=True,
        )
        rows = self._rows(response)
        if not rows:
            raise FlashcardNotFoundError(flashcard_id.value)

        logger.info("remote_flashcard_updated", user_id=user_id.value, flashcard_id=flashcard_id.value)
        return self._to_domain(rows[0])

    async def delete(
        self, user_id: UserId, flashcard_id: FlashcardId, credential: str | None = None
    ) -> None:
        """
        Delete a card. Deleting an absent card is not an error.

        Raises:
            RemoteUnavailableError: On transport failure
            SchemaMissingError: If the table does not exist
        """
        await self._request(
            "DELETE",
            credential,
            params={
                "id": f"eq.{flashcard_id.value}",
                "user_id": f"eq.{user_id.value}",
            },
        )
        logger.info("remote_flashcard_deleted", user_id=user_id.value, flashcard_id=flashcard_id.value)
