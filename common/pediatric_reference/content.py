"""Relevance ranking of reference passages against free-text queries.

Scoring is token overlap: for every distinct query term found in a passage,
add 1 + ln(term frequency). Passages with no query term score zero and are
dropped. Equal scores keep store order.
"""

import logging
import math
import re
from collections import Counter
from numbers import Integral

from .config import config
from .errors import InvalidRequest
from .filters import ContainsAnyTerm
from .models import Citation, ReferenceContent
from .store import KnowledgeStore

logger = logging.getLogger(__name__)

_TOKEN = re.compile(r"[a-z0-9]+")

STOP_WORDS = frozenset({
    "a", "about", "after", "all", "an", "and", "any", "are", "as", "at",
    "be", "been", "before", "but", "by", "can", "do", "does", "for", "from",
    "had", "has", "have", "how", "i", "if", "in", "into", "is", "it", "its",
    "may", "my", "no", "not", "of", "on", "or", "should", "so", "than",
    "that", "the", "their", "then", "there", "these", "they", "this", "to",
    "was", "we", "were", "what", "when", "which", "who", "why", "will",
    "with", "you", "your",
})


def _fold_plural(token: str) -> str:
    if len(token) > 4 and token.endswith("ies"):
        return token[:-3] + "y"
    if len(token) > 3 and token.endswith("s") and not token.endswith(("ss", "us", "is")):
        return token[:-1]
    return token


def _prefilter_terms(query_terms: set[str]) -> list[str]:
    # "allergy" must still find "allergies" in raw text
    return sorted({
        term[:-1] if len(term) > 2 and term.endswith("y") else term
        for term in query_terms
    })


def tokenize(text: str) -> list[str]:
    """Lower-case word tokens with stop words removed and plurals folded."""
    return [
        _fold_plural(token)
        for token in _TOKEN.findall(text.lower())
        if token not in STOP_WORDS
    ]


def score_passage(query_terms: set[str], passage_text: str) -> float:
    """Relevance of a passage to a set of query terms (0 means unrelated)."""
    counts = Counter(tokenize(passage_text))
    score = 0.0
    for term in query_terms:
        tf = counts.get(term, 0)
        if tf:
            score += 1.0 + math.log(tf)
    return score


class ContentRanker:
    """Ranks reference passages by textual relevance to a query."""

    def __init__(self, store: KnowledgeStore):
        self.store = store

    def rank(self, query: str, limit: int | None = None) -> list[ReferenceContent]:
        """Return up to ``limit`` passages, most relevant first."""
        return [passage for passage, _ in self._ranked(query, limit)]

    def cite(self, query: str, limit: int | None = None) -> list[Citation]:
        """Rank passages and build citation records for them.

        Relevance scores are relative to the best hit, which scores 1.0.
        """
        ranked = self._ranked(query, limit)
        if not ranked:
            return []

        top_score = ranked[0][1]
        return [
            passage.to_citation(
                relevance_score=round(score / top_score, 4),
                source=config.TEXTBOOK_TITLE,
                max_chars=config.EXCERPT_LENGTH,
            )
            for passage, score in ranked
        ]

    def _ranked(
        self, query: str, limit: int | None
    ) -> list[tuple[ReferenceContent, float]]:
        if limit is None:
            limit = config.SEARCH_LIMIT
        if not query or not query.strip():
            raise InvalidRequest("query is required")
        if isinstance(limit, bool) or not isinstance(limit, Integral) or limit < 1:
            raise InvalidRequest(f"limit must be a positive integer, got {limit!r}")

        query_terms = set(tokenize(query))
        if not query_terms:
            logger.debug(f"Query '{query}' has no searchable terms")
            return []

        candidates = self.store.find_content(
            ContainsAnyTerm("content", _prefilter_terms(query_terms))
        )

        scored = []
        for passage in candidates:
            score = score_passage(query_terms, passage.content)
            if score > 0:
                scored.append((passage, score))

        # sort() is stable, so ties stay in store order
        scored.sort(key=lambda item: item[1], reverse=True)

        logger.debug(
            f"Query '{query}': {len(candidates)} candidates, {len(scored)} scored, "
            f"returning {min(limit, len(scored))}"
        )
        return scored[:limit]
