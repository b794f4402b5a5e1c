"""Tests for Comparison handles."""

from datetime import datetime, timedelta
from typing import Optional

import pytest

from datestore import Comparison, ComparisonResult

STORED = datetime(2024, 3, 1, 12, 0, 0).astimezone()


def resolver(text: str) -> Optional[datetime]:
    """Resolve "+N" / "-N" as minutes relative to the stored instant."""
    try:
        return STORED + timedelta(minutes=int(text))
    except ValueError:
        return None


@pytest.fixture
def handle() -> Comparison:
    return Comparison(key="a", instant=STORED, resolver=resolver)


class TestComparison:
    @pytest.mark.parametrize(
        "text,expected",
        [
            ("+10", ComparisonResult.OLDER),
            ("0", ComparisonResult.EQUAL),
            ("-10", ComparisonResult.NEWER),
            ("soon", ComparisonResult.UNPARSEABLE),
        ],
    )
    def test_compare(self, handle: Comparison, text: str, expected: ComparisonResult) -> None:
        assert handle.compare(text) is expected

    def test_stored_earlier_than_target(self, handle: Comparison) -> None:
        assert handle.more_than("+10")
        assert handle.is_older_than("+10")
        assert not handle.is_newer_than("+10")
        assert not handle.less_than("+10")

    def test_stored_later_than_target(self, handle: Comparison) -> None:
        assert handle.less_than("-10")
        assert handle.is_newer_than("-10")
        assert not handle.is_older_than("-10")
        assert not handle.more_than("-10")

    def test_unparseable_target_is_false_everywhere(self, handle: Comparison) -> None:
        assert not handle.more_than("soon")
        assert not handle.less_than("soon")
        assert not handle.is_older_than("soon")
        assert not handle.is_newer_than("soon")

    def test_missing_instant(self) -> None:
        empty = Comparison(key="a", instant=None, resolver=resolver)

        assert not empty
        assert not empty.exists
        assert empty.compare("+10") is ComparisonResult.MISSING
        assert not empty.more_than("+10")
        assert not empty.is_newer_than("-10")

    def test_time_is_epoch_seconds(self, handle: Comparison) -> None:
        assert handle.time == STORED.timestamp()

    def test_is_immutable(self, handle: Comparison) -> None:
        with pytest.raises(AttributeError):
            handle.instant = None  # type: ignore[misc]
