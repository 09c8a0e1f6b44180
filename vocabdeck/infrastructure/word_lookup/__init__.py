from .dictionary_client import DictionaryApiClient

__all__ = ["DictionaryApiClient"]
