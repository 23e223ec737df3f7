from datetime import date, datetime, timedelta, timezone
from types import SimpleNamespace

import pytest

from orders.urgency import (
    NORMAL,
    SOON,
    URGENT,
    classify_urgency,
    days_remaining,
    group_by_urgency,
)


TODAY = date(2024, 5, 10)


@pytest.mark.parametrize(
    "offset, expected",
    [
        (-5, URGENT),
        (-1, URGENT),
        (0, URGENT),
        (3, URGENT),
        (4, SOON),
        (10, SOON),
        (11, NORMAL),
        (90, NORMAL),
    ],
)
def test_tier_boundaries(offset, expected):
    assert classify_urgency(TODAY + timedelta(days=offset), today=TODAY).tier == expected


def test_time_of_day_is_ignored():
    deadline = datetime(2024, 5, 13, 23, 59)
    assert days_remaining(deadline, today=datetime(2024, 5, 10, 0, 1)) == 3
    assert classify_urgency(deadline, today=TODAY).tier == URGENT


def test_aware_datetime_uses_local_calendar_day(settings):
    settings.TIME_ZONE = 'America/Mexico_City'
    # 03:00 UTC on the 21st is still the 20th in Mexico City
    deadline = datetime(2024, 5, 21, 3, 0, tzinfo=timezone.utc)
    assert days_remaining(deadline, today=TODAY) == 10


def test_overdue_is_urgent_not_a_separate_tier():
    urgency = classify_urgency(TODAY - timedelta(days=30), today=TODAY)
    assert urgency.tier == URGENT
    assert urgency.variant == 'destructive'


def test_urgency_payload_has_label_and_advisory():
    payload = classify_urgency(TODAY + timedelta(days=20), today=TODAY).as_dict()
    assert payload['tier'] == NORMAL
    assert payload['label'] == 'Normal'
    assert payload['advisory']
    assert payload['variant'] == 'secondary'


def test_thresholds_follow_settings(settings):
    settings.ORDER_URGENT_THRESHOLD_DAYS = 1
    settings.ORDER_SOON_THRESHOLD_DAYS = 5
    assert classify_urgency(TODAY + timedelta(days=2), today=TODAY).tier == SOON
    assert classify_urgency(TODAY + timedelta(days=6), today=TODAY).tier == NORMAL


def test_rejects_non_dates():
    with pytest.raises(TypeError):
        classify_urgency('2024-05-10', today=TODAY)


def test_group_by_urgency_keeps_every_tier():
    orders = [
        SimpleNamespace(id=1, delivery_window_end=TODAY + timedelta(days=1)),
        SimpleNamespace(id=2, delivery_window_end=TODAY + timedelta(days=7)),
        SimpleNamespace(id=3, delivery_window_end=TODAY - timedelta(days=2)),
    ]
    groups = group_by_urgency(orders, today=TODAY)
    assert [o.id for o in groups[URGENT]] == [1, 3]
    assert [o.id for o in groups[SOON]] == [2]
    assert groups[NORMAL] == []
