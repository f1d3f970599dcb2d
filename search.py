import logging
import os
from typing import Dict, List

import requests

import config

logger = logging.getLogger(__name__)

STOPWORDS = {'should', 'would', 'could', 'about', 'their', 'there', 'these', 'those', 'which', 'where'}


class SearchError(Exception):
    pass


def search_google(query: str, num_results: int = 5) -> List[Dict]:
    """Run a Google Custom Search query and return title/link/snippet items."""
    if not query or not query.strip():
        raise ValueError("Search query is required")
    api_key = os.getenv('GOOGLE_API_KEY')
    cse_id = os.getenv('GOOGLE_CSE_ID')
    if not api_key or not cse_id:
        raise SearchError("Google API credentials not found")

    limit = min(max(1, num_results), 10)
    try:
        response = requests.get(
            config.GOOGLE_SEARCH_URL,
            params={'key': api_key, 'cx': cse_id, 'q': query, 'num': limit},
            timeout=config.HTTP_TIMEOUT,
        )
        response.raise_for_status()
        items = response.json().get('items') or []
    except (requests.RequestException, ValueError) as e:
        logger.error(f"Google search error: {e}")
        raise SearchError(f"Failed to perform Google search: {e}") from e

    return [
        {'title': item.get('title', ''), 'link': item.get('link', ''), 'snippet': item.get('snippet', '')}
        for item in items
    ]


def generate_search_queries(passage: str) -> List[str]:
    """Build up to three keyword queries from the longer words of ``passage``."""
    seen = []
    for word in (passage or '').split():
        word = word.strip('.,;:!?"\'()[]')
        if len(word) > 5 and word.lower() not in STOPWORDS and word not in seen:
            seen.append(word)
        if len(seen) == 9:
            break
    queries = [' '.join(seen[i:i + 3]) for i in range(0, 9, 3)]
    return [query for query in queries if query]
