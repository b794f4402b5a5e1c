#!/usr/bin/env python
"""Basic usage of DateStore.

Records a few keys in a throwaway store and compares them against
natural-language expressions.
"""

import tempfile
from pathlib import Path

from datestore import DateStore
from datestore.logging import setup_logging


def demo_record_and_read(store: DateStore) -> None:
    """Demo 1: Record keys and read them back."""
    print("\n" + "=" * 70)
    print("Demo 1: Record and Read")
    print("=" * 70 + "\n")

    store.set("abc").set("xyz")

    print(f"raw:      {store.get_raw('abc')}")
    print(f"datetime: {store.get('abc')!r}")
    print(f"epoch:    {store.get_time('abc')}")
    print(f"has xxx:  {store.has('xxx')}")


def demo_comparisons(store: DateStore) -> None:
    """Demo 2: Compare stored dates with relative expressions."""
    print("\n" + "=" * 70)
    print("Demo 2: Comparisons")
    print("=" * 70 + "\n")

    print(f"1 day from now:            {store.date('1 day from now')}")
    print(f"diff to 10 minutes ago:    {store.diff('abc', '10 minutes ago'):.0f}s")
    print(f"more than 310 minutes ago: {store.last_saved('abc').more_than('310 minutes ago')}")
    print(f"less than 2 hours ago:     {store.last_saved('abc').less_than('2 hours ago')}")
    print(f"compare missing key:       {store.compare('xxx', '1 hour ago').value}")


def demo_filter_since(store: DateStore) -> None:
    """Demo 3: Keys recorded recently."""
    print("\n" + "=" * 70)
    print("Demo 3: Filter Since")
    print("=" * 70 + "\n")

    print(f"since 1 minute ago: {store.filter_since('1 minute ago')}")
    print(f"\nstore file {store.path}:\n{store.json()}")


def main() -> None:
    setup_logging(log_level="DEBUG", json_logs=False)

    with tempfile.TemporaryDirectory() as tmp:
        with DateStore("date-store-examples", directory=Path(tmp)) as store:
            demo_record_and_read(store)
            demo_comparisons(store)
            demo_filter_since(store)


if __name__ == "__main__":
    main()
