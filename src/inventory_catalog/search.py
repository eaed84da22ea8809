"""
Substring search over inventory items.
"""
import json
import logging
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Dict, List, Optional, Sequence

from .models import InventoryItem

logger = logging.getLogger(__name__)


class SearchStatus(str, Enum):
    NO_QUERY = "no_query"
    NO_MATCHES = "no_matches"
    MATCHES = "matches"


@dataclass
class SearchResult:
    status: SearchStatus
    items: List[InventoryItem] = field(default_factory=list)


def load_aliases(aliases_path: Path) -> Dict[str, List[str]]:
    """Load search aliases ({"term": ["synonym", ...]}) if the file exists."""
    if not aliases_path.exists():
        return {}

    try:
        with open(aliases_path, 'r', encoding='utf-8') as f:
            raw = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        logger.warning("Ignoring unreadable aliases file %s: %s", aliases_path, e)
        return {}

    if not isinstance(raw, dict):
        logger.warning("Ignoring aliases file %s: expected a JSON object", aliases_path)
        return {}

    return {
        str(key).lower(): [str(a) for a in values]
        for key, values in raw.items()
        if isinstance(values, list)
    }


class QueryMatcher:
    """Case-insensitive substring matching on item name and description."""

    def __init__(self, aliases: Optional[Dict[str, List[str]]] = None):
        self.aliases = {k.lower(): v for k, v in (aliases or {}).items()}

    def expand_query(self, query: str) -> List[str]:
        """Return the lowercased query plus any aliases registered for it."""
        query_lower = query.lower()
        search_terms = [query_lower]

        for alias in self.aliases.get(query_lower, []):
            alias_lower = alias.lower()
            if alias_lower not in search_terms:
                search_terms.append(alias_lower)

        return search_terms

    def matches(self, item: InventoryItem, search_terms: Sequence[str]) -> bool:
        name = item.name.lower()
        description = item.description.lower()
        return any(term in name or term in description for term in search_terms)

    def search(self, items: Sequence[InventoryItem], query: Optional[str]) -> SearchResult:
        """Filter items by query, keeping collection order.

        An empty or missing query yields NO_QUERY; a query nothing matches yields
        NO_MATCHES, so callers can tell "nothing searched" from "nothing found".
        """
        if not query:
            return SearchResult(SearchStatus.NO_QUERY)

        search_terms = self.expand_query(query)
        results = [item for item in items if self.matches(item, search_terms)]

        if not results:
            return SearchResult(SearchStatus.NO_MATCHES)
        return SearchResult(SearchStatus.MATCHES, results)
