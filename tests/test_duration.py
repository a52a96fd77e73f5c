"""Tests for Duration."""

from datetime import datetime, timedelta, timezone

import pytest

from calmoment import Duration, Moment, TimeUnit

NOW = datetime(2024, 3, 10, 12, 0, 0, tzinfo=timezone.utc)


def test_views_divide_the_interval():
    """Views are fixed-divisor conversions of the base seconds."""
    d = Duration(2 * 86400)
    assert d.seconds == 172800
    assert d.minutes == 2880
    assert d.hours == 48
    assert d.days == 2
    assert Duration(604800).weeks == 1
    assert Duration(2592000).months == 1
    assert Duration(31536000).years == 1


def test_negative_durations_keep_their_sign():
    d = Duration(-90)
    assert d.minutes == -1.5
    assert abs(d) == Duration(90)
    assert -d == Duration(90)


def test_of_scales_by_unit():
    assert Duration.of(2, TimeUnit.HOURS).seconds == 7200
    assert Duration.of(3, "days") == Duration(259200)
    assert Duration.of(1, "weeks").seconds == 605800


def test_of_rejects_unknown_units():
    with pytest.raises(ValueError, match="Unknown time unit"):
        Duration.of(1, "fortnights")


def test_arithmetic_and_ordering():
    assert Duration(60) + Duration(30) == Duration(90)
    assert Duration(60) - Duration(90) == Duration(-30)
    assert Duration(1) < Duration(2)
    assert max(Duration(5), Duration(-10), Duration(3)) == Duration(5)


def test_durations_are_immutable():
    d = Duration(10)
    with pytest.raises(AttributeError):
        d.interval = 20  # type: ignore[misc]


def test_str_renders_days_and_clock():
    assert str(Duration(59)) == "00:00:59"
    assert str(Duration(90061)) == "1d 01:01:01"
    assert str(Duration(-61.7)) == "-00:01:01"


def test_ago_and_from_now_use_the_clock():
    """ago()/from_now() are relative to the configured clock."""
    hour = Duration(3600)
    assert hour.ago() == Moment(NOW - timedelta(hours=1))
    assert hour.from_now() == Moment(NOW + timedelta(hours=1))
