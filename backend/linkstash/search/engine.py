# @TASK S2-T2.1 - Note search engine (note text + attached links)
# @TASK S2-T2.2 - Link search engine (link metadata only)
# @TASK S2-T2.3 - Unified search (concurrent fan-out, merge-then-paginate)
# @TEST tests/test_note_search.py
# @TEST tests/test_link_search.py
# @TEST tests/test_unified_search.py

"""Relevance-ranked fuzzy search over notes and links.

Note search: a note scores the best of its own text and its links' metadata.
Link search: each link is scored on title, URL and description only.
Unified search: both run concurrently, results are merged by relevance and
paginated once over the merged list.

Every engine filters by the admission threshold before paginating, so
``total_count`` and ``total_pages`` always describe the admitted set.
"""

from __future__ import annotations

import asyncio
import logging
from datetime import datetime
from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field

from linkstash.constants import NoteStatus
from linkstash.search.pagination import paginate
from linkstash.search.params import DEFAULT_SEARCH_PARAMS, SearchParams
from linkstash.search.ranker import WeightedFieldRanker
from linkstash.search.repository import NoteRepository, ScorableLink

logger = logging.getLogger(__name__)


class SearchValidationError(ValueError):
    """Raised when a search request is rejected before any data access."""


class LinkInfo(BaseModel):
    """A link attached to a note result, for display."""

    id: str
    url: str
    title: str | None = None
    description: str | None = None
    og_image: str | None = None
    created_at: datetime
    updated_at: datetime | None = None


class NoteSearchResult(BaseModel):
    """A note that matched a query, with all of its links."""

    type: Literal["note"] = "note"
    note_id: str
    note_content: str
    telegram_message_id: int | None = None
    created_at: datetime
    links: list[LinkInfo] = []
    relevance_score: float = Field(ge=0.0, le=1.0)


class LinkSearchResult(BaseModel):
    """A single saved link that matched a query."""

    type: Literal["link"] = "link"
    link_id: str
    note_id: str
    url: str
    title: str | None = None
    description: str | None = None
    og_image: str | None = None
    created_at: datetime
    updated_at: datetime | None = None
    relevance_score: float = Field(ge=0.0, le=1.0)


SearchItem = Annotated[NoteSearchResult | LinkSearchResult, Field(discriminator="type")]


class SearchResultPage(BaseModel):
    """One page of relevance-sorted results.

    Attributes:
        items: Results on this page, highest relevance first.
        total_count: Number of admitted results across all pages.
        current_page: 1-based page actually returned (after clamping).
        total_pages: ``max(1, ceil(total_count / page_size))``.
        query: The trimmed query that was scored.
    """

    model_config = ConfigDict(populate_by_name=True)

    items: list[SearchItem]
    total_count: int = Field(alias="totalCount")
    current_page: int = Field(alias="currentPage")
    total_pages: int = Field(alias="totalPages")
    query: str


class UnifiedSearchPage(SearchResultPage):
    """Merged note + link page with per-source match counts."""

    note_count: int = Field(alias="noteCount")
    link_count: int = Field(alias="linkCount")


def validate_search_request(query: str | None, page: int, page_size: int, params: SearchParams) -> str:
    """Check a search request and return the trimmed query.

    Raises:
        SearchValidationError: On a blank or over-long query, a page below 1,
            or a page size outside ``[1, params.max_page_size]``.
    """
    stripped = (query or "").strip()
    if not stripped:
        raise SearchValidationError("Search query cannot be empty")
    if len(stripped) > params.max_query_length:
        raise SearchValidationError(f"Search query too long (max {params.max_query_length} characters)")
    if page < 1:
        raise SearchValidationError("Page number must be at least 1")
    if page_size < 1 or page_size > params.max_page_size:
        raise SearchValidationError(f"Page size must be between 1 and {params.max_page_size}")
    return stripped


def _link_info(link: ScorableLink) -> LinkInfo:
    return LinkInfo(
        id=link.id,
        url=link.url,
        title=link.title,
        description=link.description,
        og_image=link.og_image,
        created_at=link.created_at,
        updated_at=link.updated_at,
    )


class NoteSearchEngine:
    """Fuzzy note search scoring note text and attached link metadata.

    A note whose own text is unrelated to the query is still found when one
    of its links matches: its score is the maximum of the content score and
    every link score.

    Args:
        repository: Source of scorable notes.
        params: Scoring and pagination configuration.
    """

    def __init__(self, repository: NoteRepository, params: SearchParams = DEFAULT_SEARCH_PARAMS) -> None:
        self._repository = repository
        self._params = params
        self._ranker = WeightedFieldRanker(params)

    async def search(self, owner_id: int, query: str, page: int = 1, page_size: int = 5) -> SearchResultPage:
        """Search the owner's active notes."""
        return await self._search(owner_id, query, page, page_size, NoteStatus.ACTIVE)

    async def search_archived(
        self, owner_id: int, query: str, page: int = 1, page_size: int = 5
    ) -> SearchResultPage:
        """Search the owner's archived notes."""
        return await self._search(owner_id, query, page, page_size, NoteStatus.ARCHIVED)

    async def _search(
        self, owner_id: int, query: str, page: int, page_size: int, status: NoteStatus
    ) -> SearchResultPage:
        stripped = validate_search_request(query, page, page_size, self._params)
        notes = await self._repository.fetch_scorable_notes(owner_id, status=status)

        admitted: list[NoteSearchResult] = []
        for note in notes:
            score = self._ranker.score_note(stripped, note)
            if not self._ranker.is_admitted(score):
                continue
            admitted.append(
                NoteSearchResult(
                    note_id=note.id,
                    note_content=note.content,
                    telegram_message_id=note.telegram_message_id,
                    created_at=note.created_at,
                    links=[_link_info(link) for link in note.links],
                    relevance_score=score,
                )
            )
        logger.debug(
            "Note search owner=%s status=%s query=%r: %d candidates, %d admitted",
            owner_id,
            status.value,
            stripped,
            len(notes),
            len(admitted),
        )

        result_page = paginate(self._ranker.rank(admitted), page, page_size)
        return SearchResultPage(
            items=result_page.items,
            total_count=result_page.total_count,
            current_page=result_page.current_page,
            total_pages=result_page.total_pages,
            query=stripped,
        )


class LinkSearchEngine:
    """Fuzzy link search over title, URL and description.

    Note text is not scored: this answers "find this saved
    link", not "find a note that mentions this".

    Args:
        repository: Source of scorable links.
        params: Scoring and pagination configuration.
    """

    def __init__(self, repository: NoteRepository, params: SearchParams = DEFAULT_SEARCH_PARAMS) -> None:
        self._repository = repository
        self._params = params
        self._ranker = WeightedFieldRanker(params)

    async def search(self, owner_id: int, query: str, page: int = 1, page_size: int = 10) -> SearchResultPage:
        """Search links attached to the owner's active notes."""
        stripped = validate_search_request(query, page, page_size, self._params)
        links = await self._repository.fetch_scorable_links(owner_id, status=NoteStatus.ACTIVE)

        admitted: list[LinkSearchResult] = []
        for link in links:
            score = self._ranker.score_link(stripped, link)
            if not self._ranker.is_admitted(score):
                continue
            admitted.append(
                LinkSearchResult(
                    link_id=link.id,
                    note_id=link.note_id,
                    url=link.url,
                    title=link.title,
                    description=link.description,
                    og_image=link.og_image,
                    created_at=link.created_at,
                    updated_at=link.updated_at,
                    relevance_score=score,
                )
            )
        logger.debug(
            "Link search owner=%s query=%r: %d candidates, %d admitted",
            owner_id,
            stripped,
            len(links),
            len(admitted),
        )

        result_page = paginate(self._ranker.rank(admitted), page, page_size)
        return SearchResultPage(
            items=result_page.items,
            total_count=result_page.total_count,
            current_page=result_page.current_page,
            total_pages=result_page.total_pages,
            query=stripped,
        )


class UnifiedSearchEngine:
    """Notes and links in one relevance-ranked list.

    Both sources are queried concurrently for a broad first page of
    ``params.merge_pool_size`` results each, merged by relevance, and only
    then paginated with the caller's page and page size. Paginating each
    source first would drop top-ranked results from whichever source has
    more matches.

    Known limitation: a source with more than ``merge_pool_size`` matches
    contributes only its top ``merge_pool_size`` results to the merge.

    Args:
        note_engine: A NoteSearchEngine instance.
        link_engine: A LinkSearchEngine instance.
        params: Scoring and pagination configuration.
    """

    def __init__(
        self,
        note_engine: NoteSearchEngine,
        link_engine: LinkSearchEngine,
        params: SearchParams = DEFAULT_SEARCH_PARAMS,
    ) -> None:
        self._note_engine = note_engine
        self._link_engine = link_engine
        self._params = params

    async def search(self, owner_id: int, query: str, page: int = 1, page_size: int = 10) -> UnifiedSearchPage:
        """Execute unified search: notes + links in parallel, merged by relevance.

        A failure in either source propagates; a partial merge would be
        indistinguishable from a genuine result set.
        """
        stripped = validate_search_request(query, page, page_size, self._params)
        pool_size = self._params.merge_pool_size

        note_page, link_page = await asyncio.gather(
            self._note_engine.search(owner_id, stripped, page=1, page_size=pool_size),
            self._link_engine.search(owner_id, stripped, page=1, page_size=pool_size),
        )

        merged = self.merge(note_page.items, link_page.items)
        result_page = paginate(merged, page, page_size)
        return UnifiedSearchPage(
            items=result_page.items,
            total_count=result_page.total_count,
            current_page=result_page.current_page,
            total_pages=result_page.total_pages,
            query=stripped,
            note_count=note_page.total_count,
            link_count=link_page.total_count,
        )

    @staticmethod
    def merge(
        note_results: list[NoteSearchResult | LinkSearchResult],
        link_results: list[NoteSearchResult | LinkSearchResult],
    ) -> list[NoteSearchResult | LinkSearchResult]:
        """Concatenate notes then links and stable-sort by relevance descending.

        Ties keep their per-source order, which is already score-then-recency.
        """
        combined = [*note_results, *link_results]
        return sorted(combined, key=lambda item: item.relevance_score, reverse=True)
