"""
Application constants.

Keys of the device persistence slot. They match the keys the browser
version of the app wrote to local storage, so exported device data can be
loaded unchanged.
"""

FLASHCARDS_STORAGE_KEY = "flashcards"
MIGRATION_FLAG_STORAGE_KEY = "flashcards_migrated"

REMOTE_FLASHCARDS_TABLE = "flashcards"

# Typical browser local storage quota
DEVICE_STORAGE_QUOTA_BYTES = 5 * 1024 * 1024
