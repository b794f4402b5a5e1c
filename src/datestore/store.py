"""File-backed store of "last time something happened" per key.

DateStore keeps a mapping of key -> display-formatted timestamp in memory and
mirrors it to a JSON file. Mutations schedule a save; with a non-zero
``write_delay_ms`` the saves within one window coalesce into a single write.

Usage:
    store = DateStore("my-app")
    store.set("last_sync")
    if store.last_saved("last_sync").more_than("1 day ago"):
        ...  # more than a day has passed since the last sync
"""

import json
import math
import threading
from datetime import datetime
from pathlib import Path
from typing import Any, Callable, Iterable, Iterator, Optional, Union

from datestore.comparison import Comparison, ComparisonResult
from datestore.config import StoreConfig
from datestore.errors import InvalidDateError, StoreAccessError
from datestore.fs import read_json, write_json
from datestore.logging import get_logger
from datestore.timeutil import format_display, local_now, parse_stored, resolve_expression, to_epoch

logger = get_logger(__name__)

_USE_CONFIG: Any = object()


class DateStore:
    """Persisted mapping of keys to the instant they were last recorded.

    Attributes:
        config: Resolved store configuration
        name: Store name
        path: Location of the backing JSON file
    """

    def __init__(
        self,
        name: Optional[str] = None,
        config: Optional[StoreConfig] = None,
        *,
        clock: Optional[Callable[[], datetime]] = None,
        **options: Any,
    ) -> None:
        """Create a store and load its backing file.

        Args:
            name: Store name; ``{name}.json`` is the file name unless ``path``
                is configured
            config: Base configuration; keyword options override its fields
            clock: Callable returning the current aware datetime
            **options: StoreConfig fields (path, directory, home,
                write_delay_ms, json_indent, file_mode)

        Raises:
            ConfigurationError: If the options are invalid
            StoreAccessError: If the backing file exists but cannot be read
        """
        values = config.model_dump(exclude_unset=True) if config is not None else {}
        values.update(options)
        if name is not None:
            values["name"] = name

        self.config = StoreConfig.build(**values)
        self.name = self.config.store_name
        self.path: Path = self.config.resolve_path()
        self.indent = self.config.json_indent
        self.write_delay_ms = self.config.write_delay_ms

        self._clock = clock or local_now
        self._lock = threading.RLock()
        self._timer: Optional[threading.Timer] = None
        self._write_error: Optional[StoreAccessError] = None
        self._cursor: Optional[Comparison] = None
        self._dates: dict[str, Any] = {}
        self.load()

    def __repr__(self) -> str:
        return f"DateStore(name={self.name!r}, path={str(self.path)!r})"

    def __enter__(self) -> "DateStore":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and self.has(key)

    def __len__(self) -> int:
        return len(self._dates)

    # ------------------------------------------------------------------
    # Stored values
    # ------------------------------------------------------------------

    @property
    def dates(self) -> dict[str, Any]:
        """A copy of the raw stored mapping."""
        with self._lock:
            return dict(self._dates)

    @dates.setter
    def dates(self, value: dict[str, Any]) -> None:
        """Replace the whole mapping and schedule a save.

        Raises:
            TypeError: If value is not a dict with string keys
        """
        if not isinstance(value, dict) or not all(isinstance(k, str) for k in value):
            raise TypeError("dates must be a dict with string keys")
        with self._lock:
            self._dates = dict(value)
        self.save()

    def keys(self) -> Iterator[str]:
        return iter(list(self._dates))

    def set(self, key: str) -> "DateStore":
        """Record the current instant for *key*.

        Args:
            key: Name of the event being recorded

        Returns:
            The store, for chaining

        Raises:
            ValueError: If key is not a non-empty string
        """
        if not isinstance(key, str) or not key:
            raise ValueError("key must be a non-empty string")
        with self._lock:
            self._dates[key] = format_display(self._clock())
        self.save()
        return self

    def get(self, key: str) -> Optional[datetime]:
        """Get the stored instant for *key* and make it the current cursor.

        Args:
            key: Name of the stored date

        Returns:
            Aware datetime, or None if nothing valid is stored for *key*
        """
        comparison = self._comparison_for(key)
        self._cursor = comparison
        return comparison.instant

    def get_raw(self, key: str) -> Optional[str]:
        """Get the stored display string for *key* without parsing it."""
        value = self._dates.get(key)
        return value if isinstance(value, str) else None

    def get_time(self, key: str) -> float:
        """Get the stored instant for *key* as epoch seconds.

        Raises:
            InvalidDateError: If no valid date is stored for *key*
        """
        instant = self.get(key)
        if instant is None:
            raise InvalidDateError(key)
        return instant.timestamp()

    def has(self, key: str) -> bool:
        """True if a value that parses as a date is stored for *key*."""
        return parse_stored(self._dates.get(key)) is not None

    def delete(self, key: Union[str, Iterable[str]]) -> "DateStore":
        """Remove one key, or every key in an iterable, from the store.

        Missing keys are ignored.

        Returns:
            The store, for chaining
        """
        keys = [key] if isinstance(key, str) else list(key)
        with self._lock:
            for name in keys:
                self._dates.pop(name, None)
        self.save()
        return self

    def clear(self) -> None:
        """Remove every stored date."""
        with self._lock:
            self._dates = {}
        self.save()

    # ------------------------------------------------------------------
    # Expressions and comparisons
    # ------------------------------------------------------------------

    def date(self, text: str, reference: Optional[datetime] = None) -> Optional[datetime]:
        """Resolve a natural-language expression relative to the store clock.

        Args:
            text: Expression such as "1 day from now"
            reference: Instant to resolve against (default: the clock's now)

        Returns:
            Aware datetime, or None if *text* does not parse
        """
        return resolve_expression(text, reference or self._clock())

    def time(self, text: str, reference: Optional[datetime] = None) -> float:
        """Epoch seconds for an expression, or NaN if it does not parse."""
        return to_epoch(self.date(text, reference))

    def diff(self, key: str, text: str) -> float:
        """Seconds between the stored date for *key* and *text*.

        Positive when the stored date is later than the expression.

        Returns:
            The difference in seconds, or NaN if either side is invalid
        """
        stored = self.get(key)
        if stored is None:
            return math.nan
        return stored.timestamp() - self.time(text)

    def last_saved(self, key: str) -> Comparison:
        """Look up *key* for a chained comparison.

        Example:
            >>> store.set("bar")
            >>> store.last_saved("bar").more_than("31 minutes ago")
            False
            >>> store.last_saved("bar").less_than("31 minutes ago")
            True

        Args:
            key: Name of the stored date

        Returns:
            Immutable Comparison handle; also kept as the current cursor
        """
        comparison = self._comparison_for(key)
        self._cursor = comparison
        return comparison

    def compare(self, key: str, text: str) -> ComparisonResult:
        """Compare the stored date for *key* with *text* without touching the cursor."""
        return self._comparison_for(key).compare(text)

    @property
    def current(self) -> Optional[float]:
        """Epoch seconds of the instant selected by the last lookup, if any."""
        if self._cursor is None or self._cursor.instant is None:
            return None
        return self._cursor.time

    def more_than(self, text: str) -> bool:
        return self._cursor_comparison().more_than(text)

    def is_older_than(self, text: str) -> bool:
        return self._cursor_comparison().is_older_than(text)

    def is_newer_than(self, text: str) -> bool:
        return self._cursor_comparison().is_newer_than(text)

    def less_than(self, text: str) -> bool:
        return self._cursor_comparison().less_than(text)

    def filter_since(self, text: str) -> list[str]:
        """Keys whose stored date is strictly later than *text*.

        Keys come back in insertion order; invalid stored values are skipped.

        Args:
            text: Expression such as "1 week ago"

        Returns:
            List of matching keys (empty if *text* does not parse)
        """
        target = self.date(text)
        if target is None:
            return []
        threshold = target.timestamp()

        result = []
        for key, raw in self.dates.items():
            instant = parse_stored(raw)
            if instant is not None and instant.timestamp() > threshold:
                result.append(key)
        return result

    def _comparison_for(self, key: str) -> Comparison:
        return Comparison(key=key, instant=parse_stored(self._dates.get(key)), resolver=self.date)

    def _cursor_comparison(self) -> Comparison:
        return self._cursor or Comparison(key=None, instant=None, resolver=self.date)

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    def json(self, indent: Optional[int] = _USE_CONFIG) -> str:
        """Serialise the stored mapping.

        Args:
            indent: JSON indentation; defaults to the configured json_indent

        Returns:
            JSON text
        """
        if indent is _USE_CONFIG:
            indent = self.indent
        return json.dumps(self.dates, indent=indent)

    def load(self) -> dict[str, Any]:
        """(Re)load the mapping from the backing file.

        A missing file or one that does not hold a JSON object loads as an
        empty store.

        Returns:
            The loaded mapping

        Raises:
            StoreAccessError: If the file exists but cannot be read
        """
        data = read_json(self.path)
        with self._lock:
            self._dates = dict(data)
        logger.debug("store_loaded", path=str(self.path), entries=len(data))
        return self.dates

    def save(self) -> None:
        """Persist the store now, or after write_delay_ms if configured.

        At most one deferred write is pending at a time; it writes the
        mapping as it is when the timer fires.
        """
        if not self.write_delay_ms:
            self.write_file()
            return

        with self._lock:
            if self._timer is not None:
                return
            self._timer = threading.Timer(self.write_delay_ms / 1000, self._write_scheduled)
            self._timer.start()
        logger.debug("save_scheduled", path=str(self.path), delay_ms=self.write_delay_ms)

    def write_file(self) -> None:
        """Immediately write the whole mapping to the backing file.

        Raises:
            StoreAccessError: If the file or its directory cannot be written
        """
        with self._lock:
            snapshot = dict(self._dates)
            write_json(self.path, snapshot, indent=self.indent, mode=self.config.file_mode)
        logger.debug("store_written", path=str(self.path), entries=len(snapshot))

    @property
    def pending(self) -> bool:
        """True while a deferred write is scheduled or in progress."""
        with self._lock:
            return self._timer is not None

    def flush(self) -> None:
        """Write immediately if a deferred write is pending.

        Raises:
            StoreAccessError: If this write, or an earlier deferred one, failed
        """
        with self._lock:
            error, self._write_error = self._write_error, None
            timer, self._timer = self._timer, None
            if timer is not None:
                timer.cancel()
                self.write_file()
        if error is not None:
            raise error

    def close(self) -> None:
        """Flush any pending write."""
        self.flush()

    def _write_scheduled(self) -> None:
        with self._lock:
            # flush() may have taken over this write while we waited on the lock
            if self._timer is not threading.current_thread():
                return
            self._timer = None
            try:
                self.write_file()
            except StoreAccessError as e:
                logger.error("store_write_failed", path=str(self.path), error=e.message)
                self._write_error = e
