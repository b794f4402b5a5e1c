"""Immutable comparison handles for stored instants.

A Comparison pairs a stored instant with the resolver used to turn relative
expressions into instants. Direction convention, with ``stored`` the handle's
instant and ``target`` the resolved expression:

- more_than(text):     stored <  target  (more than *text* has elapsed)
- is_older_than(text): stored <= target
- is_newer_than(text): stored >= target
- less_than(text):     stored >  target  (less than *text* has elapsed)

All four are False when there is no stored instant or the expression does
not resolve; compare() tells those cases apart.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Callable, Optional

from datestore.timeutil import resolve_expression, to_epoch


class ComparisonResult(str, Enum):
    """Outcome of comparing a stored instant with an expression.

    - OLDER: The stored instant is earlier than the target
    - EQUAL: Both resolve to the same instant
    - NEWER: The stored instant is later than the target
    - MISSING: No valid instant is stored for the key
    - UNPARSEABLE: The expression could not be resolved
    """

    OLDER = "older"
    EQUAL = "equal"
    NEWER = "newer"
    MISSING = "missing"
    UNPARSEABLE = "unparseable"


@dataclass(frozen=True)
class Comparison:
    """A looked-up stored instant, ready to be compared.

    Attributes:
        key: Key the instant was read from (None for an empty cursor)
        instant: The stored instant, or None if absent or invalid
        resolver: Callable resolving an expression to an instant
    """

    key: Optional[str]
    instant: Optional[datetime]
    resolver: Callable[[str], Optional[datetime]] = field(
        default=resolve_expression, repr=False, compare=False
    )

    @property
    def exists(self) -> bool:
        return self.instant is not None

    @property
    def time(self) -> float:
        """Epoch seconds of the stored instant (NaN when absent)."""
        return to_epoch(self.instant)

    def __bool__(self) -> bool:
        return self.exists

    def compare(self, text: str) -> ComparisonResult:
        """Compare the stored instant with the instant *text* resolves to.

        Args:
            text: Natural-language expression, e.g. "10 minutes ago"

        Returns:
            ComparisonResult describing the stored instant relative to *text*
        """
        if self.instant is None:
            return ComparisonResult.MISSING
        target = self.resolver(text)
        if target is None:
            return ComparisonResult.UNPARSEABLE

        stored, wanted = self.instant.timestamp(), target.timestamp()
        if stored < wanted:
            return ComparisonResult.OLDER
        if stored > wanted:
            return ComparisonResult.NEWER
        return ComparisonResult.EQUAL

    def more_than(self, text: str) -> bool:
        return self.compare(text) is ComparisonResult.OLDER

    def is_older_than(self, text: str) -> bool:
        return self.compare(text) in (ComparisonResult.OLDER, ComparisonResult.EQUAL)

    def is_newer_than(self, text: str) -> bool:
        return self.compare(text) in (ComparisonResult.NEWER, ComparisonResult.EQUAL)

    def less_than(self, text: str) -> bool:
        return self.compare(text) is ComparisonResult.NEWER
