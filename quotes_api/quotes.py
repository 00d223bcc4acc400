"""In-memory quote store: loading, lookup, search and pagination."""

import json
import logging
import math
import random
import string
from pathlib import Path
from typing import Any

from quotes_api.errors import EmptyStoreError, FormatError
from quotes_api.models import PageResult, Quote

logger = logging.getLogger(__name__)

DEFAULT_AUTHOR = "Unknown"
ID_ALPHABET = string.ascii_lowercase + string.digits
ID_LENGTH = 9


def fresh_id() -> str:
    """Short random token. No collision check against loaded ids."""
    return "".join(random.choices(ID_ALPHABET, k=ID_LENGTH))


def normalize_quote(entry: Any) -> Quote:
    """Turn a raw string or partial object into a Quote."""
    if isinstance(entry, str):
        text, quote_id, author = entry, None, None
    elif isinstance(entry, dict):
        quote_id = entry.get("id")
        text = entry.get("text") or entry.get("quote") or ""
        author = entry.get("author")
    else:
        raise FormatError("invalid quote format")

    if not isinstance(text, str) or not text:
        raise FormatError("invalid quote format")

    return Quote(
        id=str(quote_id) if quote_id else fresh_id(),
        text=text,
        author=str(author) if author else DEFAULT_AUTHOR,
    )


def parse_quotes(data: Any) -> list[Quote]:
    """Accept either ``[...]`` or ``{"quotes": [...]}``."""
    if isinstance(data, list):
        entries = data
    elif isinstance(data, dict) and isinstance(data.get("quotes"), list):
        entries = data["quotes"]
    else:
        raise FormatError("invalid quotes file format")
    return [normalize_quote(entry) for entry in entries]


class QuoteStore:
    def __init__(self, data: Any):
        self._quotes: tuple[Quote, ...] = tuple(parse_quotes(data))
        self._by_id = {}
        for quote in self._quotes:
            # First occurrence wins, matching a linear scan.
            self._by_id.setdefault(quote.id, quote)

    @classmethod
    def from_file(cls, path: str | Path) -> "QuoteStore":
        """Read and parse a JSON quote file."""
        path = Path(path)
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as exc:
            raise FormatError(f"invalid quotes file format: {exc}") from exc
        store = cls(data)
        logger.info("Loaded %d quotes from %s", store.count(), path)
        return store

    def count(self) -> int:
        return len(self._quotes)

    def all(self) -> tuple[Quote, ...]:
        return self._quotes

    def random_one(self) -> Quote:
        if not self._quotes:
            raise EmptyStoreError("No quotes available")
        return random.choice(self._quotes)

    def by_id(self, quote_id: str) -> Quote | None:
        return self._by_id.get(quote_id)

    def sample(self, n: int = 3) -> list[Quote]:
        """Random subset for prompt context, no duplicates."""
        return random.sample(self._quotes, min(max(n, 0), len(self._quotes)))

    def search(self, term: str | None, page: int | str = 1, limit: int | str = 10) -> PageResult:
        """Case-insensitive substring match on text or author, then paginate."""
        if not term:
            return self.paginate(page, limit)

        needle = term.lower()
        matches = [
            q for q in self._quotes
            if needle in q.text.lower() or needle in q.author.lower()
        ]
        return _page_of(matches, page, limit)

    def paginate(self, page: int | str = 1, limit: int | str = 10) -> PageResult:
        return _page_of(self._quotes, page, limit)


def _page_of(quotes, page: int | str, limit: int | str) -> PageResult:
    page, limit = int(page), int(limit)
    if limit <= 0:
        raise ValueError("limit must be a positive integer")

    start = (page - 1) * limit
    end = start + limit
    # Slices with a negative start would wrap around to the tail.
    selected = list(quotes[start:end]) if start >= 0 else []

    return PageResult(
        quotes=selected,
        total=len(quotes),
        page=page,
        limit=limit,
        total_pages=math.ceil(len(quotes) / limit),
    )
