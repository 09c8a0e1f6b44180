from collections.abc import Callable
from functools import partial

import structlog
from dependency_injector import containers, providers
from pydantic_ai.models import Model

from vocabdeck.application.identity.protocols.identity_provider import IdentityProviderProtocol
from vocabdeck.application.learning.use_cases.migration_use_case import MigrationUseCase
from vocabdeck.application.learning.use_cases.word_lookup_use_case import WordLookupUseCase
from vocabdeck.application.study.use_cases.study_session_use_case import StudySession
from vocabdeck.config import Settings, configure_logging, get_settings
from vocabdeck.constants import DEVICE_STORAGE_QUOTA_BYTES
from vocabdeck.database import get_session_factory, initialize_database
from vocabdeck.infrastructure.ai.ai_model import build_model
from vocabdeck.infrastructure.ai.ai_word_lookup_service import AIWordLookupService
from vocabdeck.infrastructure.backends import LocalFlashcardBackend, RemoteFlashcardBackend
from vocabdeck.infrastructure.remote import FlashcardRemoteStore
from vocabdeck.infrastructure.storage import (
    LocalFlashcardStore,
    MigrationFlag,
    SqlKeyValueStorage,
)
from vocabdeck.infrastructure.word_lookup import DictionaryApiClient

logger = structlog.get_logger(__name__)


def _remote_setting(value: str | None) -> str:
    # An unconfigured cloud store fails per request as unreachable
    return value or ""


def _ai_model_factory(settings: Settings) -> Callable[[], Model] | None:
    return partial(build_model, settings) if settings.ai_enabled else None


class Container(containers.DeclarativeContainer):
    """Dependency injection container."""

    # Declare the identity provider as a dependency that will be provided at runtime
    identity_provider = providers.Dependency()

    settings = providers.Singleton(get_settings)

    # Device storage
    session_factory = providers.Singleton(get_session_factory, settings=settings)
    key_value_storage = providers.Singleton(
        SqlKeyValueStorage,
        session_factory=session_factory,
        quota_bytes=DEVICE_STORAGE_QUOTA_BYTES,
    )
    local_store = providers.Singleton(LocalFlashcardStore, storage=key_value_storage)
    migration_flag = providers.Singleton(MigrationFlag, storage=key_value_storage)

    # Cloud storage
    remote_store = providers.Singleton(
        FlashcardRemoteStore,
        base_url=providers.Callable(_remote_setting, settings.provided.SUPABASE_URL),
        api_key=providers.Callable(_remote_setting, settings.provided.SUPABASE_ANON_KEY),
        timeout=settings.provided.REMOTE_TIMEOUT_SECONDS,
    )

    # Backends
    local_backend = providers.Singleton(LocalFlashcardBackend, store=local_store)
    remote_backend = providers.Singleton(
        RemoteFlashcardBackend,
        store=remote_store,
        identity_provider=identity_provider,
    )

    # Word lookup
    dictionary_client = providers.Singleton(
        DictionaryApiClient,
        base_url=settings.provided.DICTIONARY_API_BASE,
        timeout=settings.provided.REMOTE_TIMEOUT_SECONDS,
    )
    ai_word_lookup = providers.Singleton(
        AIWordLookupService,
        model_factory=providers.Callable(_ai_model_factory, settings),
    )
    word_lookup_use_case = providers.Singleton(
        WordLookupUseCase,
        dictionary=dictionary_client,
        ai_lookup=ai_word_lookup,
    )

    # Use cases
    migration_use_case = providers.Factory(
        MigrationUseCase,
        local_store=local_store,
        remote_store=remote_store,
        migration_flag=migration_flag,
    )
    study_session = providers.Factory(
        StudySession,
        local_backend=local_backend,
        remote_backend=remote_backend,
        identity_provider=identity_provider,
        migration_use_case=migration_use_case,
        word_lookup=word_lookup_use_case,
    )


def create_container(
    identity_provider: IdentityProviderProtocol, settings: Settings | None = None
) -> Container:
    """
    Set up logging and device storage, then build a container bound to the
    given identity provider.
    """
    settings = settings or get_settings()
    configure_logging(settings.ENVIRONMENT)
    initialize_database(settings)

    container = Container()
    container.settings.override(providers.Object(settings))
    container.identity_provider.override(providers.Object(identity_provider))
    logger.info(
        "container_created",
        environment=settings.ENVIRONMENT,
        remote_enabled=settings.remote_enabled,
    )
    return container
