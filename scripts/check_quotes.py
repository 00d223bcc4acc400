"""Load a quote file the same way the server does and report on it."""

import sys
import time
from collections import Counter

from quotes_api.errors import FormatError
from quotes_api.quotes import QuoteStore


def main(argv: list[str] | None = None) -> int:
    argv = sys.argv[1:] if argv is None else argv
    path = argv[0] if argv else "quotes.json"
    start = time.time()

    print("=" * 60)
    print(f"Checking {path}")
    print("=" * 60)
    try:
        store = QuoteStore.from_file(path)
    except FileNotFoundError:
        print(f"File not found: {path}")
        return 1
    except FormatError as e:
        print(f"Invalid quote file: {e}")
        return 1

    quotes = store.all()
    authors = Counter(q.author for q in quotes)
    print(f"Quotes: {store.count()}")
    print(f"Authors: {len(authors)} ({authors.get('Unknown', 0)} quotes without an author)")

    dupes = [qid for qid, n in Counter(q.id for q in quotes).items() if n > 1]
    if dupes:
        print(f"Duplicate ids ({len(dupes)}): {', '.join(dupes[:10])}")
    else:
        print("Duplicate ids: none")

    if quotes:
        q = store.random_one()
        print(f'\nRandom pick:\n  "{q.text}" - {q.author}')

    print(f"\nDONE in {time.time() - start:.2f}s")
    print("\nRun the server with:")
    print("  python -m quotes_api.app")
    return 0


if __name__ == "__main__":
    sys.exit(main())
