# @TASK S1-T1.2 - Weighted field ranker
# @TEST tests/test_ranker.py

"""Combine per-field similarity scores into one relevance score.

Weights reflect how informative each field is for retrieval:

| Field       | Weight |
|-------------|-------:|
| content     |     10 |
| title       |      4 |
| url         |      3 |
| description |      2 |

The combined score is the weighted mean over the fields that are present
(non-empty), so it stays in ``[0, 1]``. A link's score uses only its own
metadata fields; a note's score is the best of its own content score and
the scores of its attached links.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import TypeVar

from linkstash.search.params import DEFAULT_SEARCH_PARAMS, SearchParams
from linkstash.search.repository import ScorableLink, ScorableNote
from linkstash.search.similarity import similarity

T = TypeVar("T")


class WeightedFieldRanker:
    """Weighted relevance scoring with threshold admission.

    Args:
        params: Immutable weights, threshold and short-string cutover.
    """

    def __init__(self, params: SearchParams = DEFAULT_SEARCH_PARAMS) -> None:
        self._params = params
        self._weights: dict[str, float] = {
            "content": params.content_weight,
            "title": params.title_weight,
            "url": params.url_weight,
            "description": params.description_weight,
        }

    def score_fields(self, query: str, fields: Mapping[str, str | None]) -> float:
        """Weighted mean similarity over the present fields of a record.

        Keys of *fields* must be among ``content``, ``title``, ``url`` and
        ``description``. Blank or missing values do not count towards the
        denominator. A record with no present field scores 0.0.
        """
        weighted = 0.0
        total_weight = 0.0
        for name, value in fields.items():
            weight = self._weights[name]
            if not value or not value.strip():
                continue
            weighted += weight * similarity(query, value, self._params.short_string_length)
            total_weight += weight
        if total_weight == 0.0:
            return 0.0
        return min(1.0, max(0.0, weighted / total_weight))

    def score_content(self, query: str, content: str | None) -> float:
        return self.score_fields(query, {"content": content})

    def score_link(self, query: str, link: ScorableLink) -> float:
        return self.score_fields(
            query,
            {"title": link.title, "url": link.url, "description": link.description},
        )

    def score_note(self, query: str, note: ScorableNote) -> float:
        """A note matches as well as its best-matching part."""
        best = self.score_content(query, note.content)
        for link in note.links:
            best = max(best, self.score_link(query, link))
        return best

    def is_admitted(self, score: float) -> bool:
        return score > self._params.similarity_threshold

    @staticmethod
    def rank(results: Iterable[T]) -> list[T]:
        """Order by relevance, most recent first among equal scores.

        Items need ``relevance_score`` and ``created_at`` attributes. The sort
        is stable, so fully tied items keep their input order.
        """
        return sorted(
            results,
            key=lambda item: (item.relevance_score, item.created_at),  # type: ignore[attr-defined]
            reverse=True,
        )
