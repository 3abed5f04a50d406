# @TASK S1-T1.0 - Search engine package

"""Fuzzy, weighted, trigram-based search over notes and links."""

from linkstash.search.engine import (
    LinkSearchEngine,
    LinkSearchResult,
    NoteSearchEngine,
    NoteSearchResult,
    SearchResultPage,
    SearchValidationError,
    UnifiedSearchEngine,
    UnifiedSearchPage,
)
from linkstash.search.params import SearchParams, get_search_params
from linkstash.search.repository import DataAccessError, NoteRepository, SqlAlchemyNoteRepository

__all__ = [
    "DataAccessError",
    "LinkSearchEngine",
    "LinkSearchResult",
    "NoteRepository",
    "NoteSearchEngine",
    "NoteSearchResult",
    "SearchParams",
    "SearchResultPage",
    "SearchValidationError",
    "SqlAlchemyNoteRepository",
    "UnifiedSearchEngine",
    "UnifiedSearchPage",
    "get_search_params",
]
