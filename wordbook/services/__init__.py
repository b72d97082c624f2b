"""Service layer package."""

from wordbook.services.book_store import (
    BookRepository,
    JsonDatabaseRepository,
    JsonFileRepository,
    LegacyStateFile,
)
from wordbook.services.sync_client import WordBookClient
