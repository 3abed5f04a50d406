"""Centralized search parameter management.

Field weights, the admission threshold and the pagination caps are held in
one immutable ``SearchParams`` value that is handed to the ranker and the
engines at construction time. Deployments tune them through environment
variables (see ``linkstash.config.Settings``); tests build their own.

Usage in search engines::

    from linkstash.search.params import get_search_params
    params = get_search_params()
    ranker = WeightedFieldRanker(params)
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, model_validator

from linkstash.config import Settings, get_settings


class SearchParams(BaseModel):
    """Immutable scoring and pagination configuration."""

    model_config = ConfigDict(frozen=True)

    # Field weights
    content_weight: float = Field(default=10.0, gt=0)
    title_weight: float = Field(default=4.0, gt=0)
    url_weight: float = Field(default=3.0, gt=0)
    description_weight: float = Field(default=2.0, gt=0)
    # Admission: final score must be strictly greater than this
    similarity_threshold: float = Field(default=0.4, ge=0.0, lt=1.0)
    # Similarity: strings at or below this length use containment matching
    short_string_length: int = Field(default=10, ge=0)
    # Unified search: candidates fetched from each source before merging
    merge_pool_size: int = Field(default=100, ge=1)
    # Request validation
    max_page_size: int = Field(default=100, ge=1)
    max_query_length: int = Field(default=100, ge=1)

    @model_validator(mode="after")
    def _pool_fits_page_cap(self) -> SearchParams:
        if self.merge_pool_size > self.max_page_size:
            raise ValueError(
                f"merge_pool_size ({self.merge_pool_size}) must not exceed max_page_size ({self.max_page_size})"
            )
        return self


DEFAULT_SEARCH_PARAMS = SearchParams()


def search_params_from_settings(settings: Settings) -> SearchParams:
    """Build ``SearchParams`` from application settings."""
    return SearchParams(
        similarity_threshold=settings.SEARCH_SIMILARITY_THRESHOLD,
        short_string_length=settings.SEARCH_SHORT_STRING_LENGTH,
        merge_pool_size=settings.SEARCH_MERGE_POOL_SIZE,
        max_page_size=settings.SEARCH_MAX_PAGE_SIZE,
        max_query_length=settings.SEARCH_MAX_QUERY_LENGTH,
    )


def get_search_params() -> SearchParams:
    """Return search parameters for the running application."""
    return search_params_from_settings(get_settings())
