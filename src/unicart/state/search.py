"""Product search state and the client-side matcher."""

from __future__ import annotations

from collections.abc import Iterable

from pydantic import Field

from unicart._constants import CATEGORIES, RECENT_SEARCH_LIMIT, SEARCH_SLOT
from unicart.models._base import UnicartBaseModel
from unicart.models.product import Product
from unicart.state.base import DomainStore
from unicart.state.persistence import PersistencePort


def _category_ids_for(term: str) -> frozenset[str]:
    """Category ids whose name or slug words occur in *term*."""
    matched: set[str] = set()
    for category_id, name, slug in CATEGORIES:
        words = set(name.lower().replace("&", " ").split()) | set(slug.split("-"))
        if any(word in term for word in words):
            matched.add(category_id)
    return frozenset(matched)


def search_products(query: str, products: Iterable[Product]) -> list[Product]:
    """Case-insensitive match on name, brand, description and category name.

    A blank query matches nothing.
    """
    term = query.strip().lower()
    if not term:
        return []
    category_ids = _category_ids_for(term)
    return [
        product
        for product in products
        if term in product.name.lower()
        or (product.brand is not None and term in product.brand.lower())
        or term in product.description.lower()
        or product.category_id in category_ids
    ]


class SearchState(UnicartBaseModel):
    query: str = ""
    results: tuple[Product, ...] = Field(default_factory=tuple)
    is_searching: bool = False
    recent_searches: tuple[str, ...] = Field(default_factory=tuple)


class SearchStore(DomainStore[SearchState]):
    """Search box state; only the recent queries are persisted."""

    persisted_fields = frozenset({"recent_searches"})

    def __init__(
        self,
        *,
        persistence: PersistencePort | None = None,
        recent_limit: int = RECENT_SEARCH_LIMIT,
        name: str = SEARCH_SLOT,
    ) -> None:
        self._recent_limit = recent_limit
        super().__init__(name, SearchState(), persistence=persistence)

    def set_query(self, query: str) -> None:
        self._store.set({"query": query})

    def set_results(self, results: Iterable[Product]) -> None:
        self._store.set({"results": tuple(results)})

    def set_searching(self, is_searching: bool) -> None:
        self._store.set({"is_searching": is_searching})

    def add_recent_search(self, query: str) -> None:
        """Record *query* as the newest recent search (blank queries are ignored)."""
        term = query.strip()
        if not term:
            return
        others = tuple(entry for entry in self.state.recent_searches if entry != term)
        self._store.set({"recent_searches": (term, *others)[: self._recent_limit]})

    def clear_recent_searches(self) -> None:
        self._store.set({"recent_searches": ()})

    def run(self, query: str, products: Iterable[Product]) -> list[Product]:
        """Search *products*, updating query, results and recent searches."""
        self.set_query(query)
        results = search_products(query, products)
        self.set_results(results)
        self.add_recent_search(query)
        return results
