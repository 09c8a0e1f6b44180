"""Tests for FlashcardRemoteStore against a mocked PostgREST endpoint."""

import json
from collections.abc import Callable
from datetime import UTC, datetime

import httpx
import pytest

from vocabdeck.domain.common.exceptions import ValidationError
from vocabdeck.domain.common.value_objects import FlashcardId, UserId
from vocabdeck.domain.learning.entities.flashcard import FlashcardDraft, FlashcardPatch
from vocabdeck.exceptions import (
    CredentialExpiredError,
    FlashcardNotFoundError,
    RemoteStoreError,
    RemoteUnavailableError,
    SchemaMissingError,
)
from vocabdeck.infrastructure.remote import FlashcardRemoteStore

USER = UserId("user_2abc")
CARD_ID = "6f1c2b8e-4a57-4f0e-9b7e-3d2f1a0c9e11"
FIXED_NOW = datetime(2024, 3, 1, 9, 30, tzinfo=UTC)


def _row(**overrides: object) -> dict[str, object]:
    row: dict[str, object] = {
        "id": CARD_ID,
        "user_id": USER.value,
        "word": "ephemeral",
        "meaning": "Lasting a very short time",
        "pronunciation": "/əˈfem(ə)rəl/",
        "part_of_speech": "adjective",
        "examples": ["Fashions are ephemeral."],
        "synonyms": None,
        "antonyms": None,
        "personal_notes": None,
        "audio_url": None,
        "created_at": "2024-02-01T10:00:00.123456+00:00",
        "updated_at": "2024-02-01T10:00:00.123456+00:00",
    }
    row.update(overrides)
    return row


def _store(
    handler: Callable[[httpx.Request], httpx.Response], requests: list[httpx.Request]
) -> FlashcardRemoteStore:
    def recording_handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        return handler(request)

    return FlashcardRemoteStore(
        base_url="https://project.supabase.co/",
        api_key="anon-key",
        transport=httpx.MockTransport(recording_handler),
        clock=lambda: FIXED_NOW,
    )


class TestListCards:
    """Test suite for listing a user's cards."""

    @pytest.mark.asyncio
    async def test_list_filters_by_user_and_orders_oldest_first(self) -> None:
        requests: list[httpx.Request] = []
        store = _store(lambda request: httpx.Response(200, json=[_row()]), requests)

        cards = await store.list_cards(USER, credential="jwt-token")

        assert len(cards) == 1
        assert cards[0].id == FlashcardId(CARD_ID)
        assert cards[0].part_of_speech == "adjective"
        assert cards[0].examples == ["Fashions are ephemeral."]

        request = requests[0]
        assert request.method == "GET"
        assert request.url.path == "/rest/v1/flashcards"
        assert request.url.params["user_id"] == f"eq.{USER.value}"
        assert request.url.params["order"] == "created_at.asc"
        assert request.headers["Authorization"] == "Bearer jwt-token"
        assert request.headers["apikey"] == "anon-key"

    @pytest.mark.asyncio
    async def test_list_without_credential_uses_project_key(self) -> None:
        requests: list[httpx.Request] = []
        store = _store(lambda request: httpx.Response(200, json=[]), requests)

        assert await store.list_cards(USER) == []
        assert requests[0].headers["Authorization"] == "Bearer anon-key"

    @pytest.mark.asyncio
    async def test_missing_table_lists_as_empty(self) -> None:
        store = _store(
            lambda request: httpx.Response(
                404,
                json={
                    "code": "42P01",
                    "message": 'relation "public.flashcards" does not exist',
                },
            ),
            [],
        )
        assert await store.list_cards(USER) == []

    @pytest.mark.asyncio
    async def test_transport_failure_is_unavailable(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        store = _store(handler, [])
        with pytest.raises(RemoteUnavailableError):
            await store.list_cards(USER)

    @pytest.mark.asyncio
    async def test_rejected_credential(self) -> None:
        store = _store(
            lambda request: httpx.Response(401, json={"code": "PGRST301", "message": "JWT expired"}),
            [],
        )
        with pytest.raises(CredentialExpiredError) as exc_info:
            await store.list_cards(USER, credential="stale")
        assert exc_info.value.status_code == 401

    @pytest.mark.asyncio
    async def test_malformed_row_is_a_store_error(self) -> None:
        store = _store(lambda request: httpx.Response(200, json=[{"id": CARD_ID}]), [])
        with pytest.raises(RemoteStoreError, match="Malformed flashcard row"):
            await store.list_cards(USER)


class TestInsert:
    @pytest.mark.asyncio
    async def test_insert_sends_snake_case_row_and_returns_server_card(self) -> None:
        requests: list[httpx.Request] = []
        store = _store(lambda request: httpx.Response(201, json=[_row()]), requests)
        draft = FlashcardDraft(
            word=" ephemeral ",
            meaning="Lasting a very short time",
            part_of_speech="adjective",
            personal_notes="  ",
        )

        card = await store.insert(USER, draft, credential="jwt-token")

        assert card.id.value == CARD_ID
        request = requests[0]
        assert request.method == "POST"
        assert request.headers["Prefer"] == "return=representation"
        body = json.loads(request.content)
        assert body["user_id"] == USER.value
        assert body["word"] == "ephemeral"
        assert body["part_of_speech"] == "adjective"
        assert body["personal_notes"] is None
        assert "id" not in body
        assert "created_at" not in body

    @pytest.mark.asyncio
    async def test_invalid_draft_is_rejected_before_any_request(self) -> None:
        requests: list[httpx.Request] = []
        store = _store(lambda request: httpx.Response(201, json=[_row()]), requests)

        with pytest.raises(ValidationError):
            await store.insert(USER, FlashcardDraft(word="", meaning="m"))
        assert requests == []

    @pytest.mark.asyncio
    async def test_insert_into_missing_table_raises(self) -> None:
        store = _store(
            lambda request: httpx.Response(
                404,
                json={
                    "code": "PGRST205",
                    "message": "Could not find the table 'public.flashcards' in the schema cache",
                },
            ),
            [],
        )
        with pytest.raises(SchemaMissingError):
            await store.insert(USER, FlashcardDraft(word="w", meaning="m"))

    @pytest.mark.asyncio
    async def test_server_error(self) -> None:
        store = _store(lambda request: httpx.Response(500, text="oops"), [])
        with pytest.raises(RemoteStoreError) as exc_info:
            await store.insert(USER, FlashcardDraft(word="w", meaning="m"))
        assert exc_info.value.status_code == 500


class TestUpdate:
    @pytest.mark.asyncio
    async def test_update_sends_only_supplied_fields_and_timestamp(self) -> None:
        requests: list[httpx.Request] = []
        updated = _row(meaning="Fleeting", updated_at="2024-03-01T09:30:00+00:00")
        store = _store(lambda request: httpx.Response(200, json=[updated]), requests)

        card = await store.update(
            USER, FlashcardId(CARD_ID), FlashcardPatch(meaning="Fleeting", synonyms=[])
        )

        assert card.meaning == "Fleeting"
        request = requests[0]
        assert request.method == "PATCH"
        assert request.url.params["id"] == f"eq.{CARD_ID}"
        assert request.url.params["user_id"] == f"eq.{USER.value}"
        assert json.loads(request.content) == {
            "meaning": "Fleeting",
            "synonyms": None,
            "updated_at": FIXED_NOW.isoformat(),
        }

    @pytest.mark.asyncio
    async def test_update_with_lagging_client_clock_still_returns_card(self) -> None:
        lagging = _row(meaning="Fleeting", updated_at="2024-01-15T08:00:00+00:00")
        store = _store(lambda request: httpx.Response(200, json=[lagging]), [])

        card = await store.update(USER, FlashcardId(CARD_ID), FlashcardPatch(meaning="Fleeting"))

        assert card.meaning == "Fleeting"
        assert card.updated_at == card.created_at

    @pytest.mark.asyncio
    async def test_update_of_card_not_owned_raises_not_found(self) -> None:
        store = _store(lambda request: httpx.Response(200, json=[]), [])
        with pytest.raises(FlashcardNotFoundError):
            await store.update(USER, FlashcardId(CARD_ID), FlashcardPatch(word="other"))

    @pytest.mark.asyncio
    async def test_empty_patch_is_rejected_before_any_request(self) -> None:
        requests: list[httpx.Request] = []
        store = _store(lambda request: httpx.Response(200, json=[]), requests)
        with pytest.raises(ValidationError):
            await store.update(USER, FlashcardId(CARD_ID), FlashcardPatch())
        assert requests == []


class TestDelete:
    @pytest.mark.asyncio
    async def test_delete_is_scoped_and_idempotent(self) -> None:
        requests: list[httpx.Request] = []
        store = _store(lambda request: httpx.Response(204), requests)

        await store.delete(USER, FlashcardId(CARD_ID))
        await store.delete(USER, FlashcardId(CARD_ID))

        assert len(requests) == 2
        assert requests[0].method == "DELETE"
        assert requests[0].url.params["id"] == f"eq.{CARD_ID}"
        assert requests[0].url.params["user_id"] == f"eq.{USER.value}"
